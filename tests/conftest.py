"""Shared fixtures for the Comissio test suite."""

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from comissio.agents import InsightAgent
from comissio.audit import AuditLogger
from comissio.models.commission import CommissionInput
from comissio.orchestrator import CommissionTracker
from comissio.services.storage import InMemorySlotStorage, StateRepository
from comissio.validation import CommissionIntakeValidator

ALLOWED_COUNTS = [1, 2, 3, 4, 5, 6, 12, 18, 24]


@pytest.fixture
def slots():
    return InMemorySlotStorage()


@pytest.fixture
def repository(slots):
    return StateRepository(slots)


@pytest.fixture
def validator():
    return CommissionIntakeValidator(
        allowed_installment_counts=ALLOWED_COUNTS,
        max_value=1_000_000,
    )


@pytest.fixture
def fake_model():
    """Stand-in for a Gemini GenerativeModel."""
    model = MagicMock()
    model.generate_content_async = AsyncMock(
        return_value=MagicMock(text="Seu fluxo de caixa está saudável.")
    )
    return model


@pytest.fixture
def insight_agent(fake_model):
    return InsightAgent(model=fake_model)


@pytest.fixture
def tracker(repository, validator, insight_agent):
    return CommissionTracker(
        repository=repository,
        insight_agent=insight_agent,
        audit_logger=AuditLogger(),
        validator=validator,
    )


@pytest.fixture
def sale():
    """1200 split in 4, sold on 2024-01-15."""
    return CommissionInput(
        description="Consultoria de Marketing",
        client_name="João Silva",
        total_value=Decimal("1200"),
        sale_date=date(2024, 1, 15),
        installment_count=4,
    )
