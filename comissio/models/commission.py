"""
Core Data Models for Comissio

These models define the strict schemas for all data flowing through the system.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Be serializable for local storage and logging
4. Keep entities immutable once created

DESIGN DECISION: Commissions and installments are frozen Pydantic v2 models.
A status change produces a new Installment instead of mutating the old one,
so every aggregation sees a consistent list.

Serialized field names follow the camelCase shape of the stored JSON
(clientName, totalValue, dueDate, ...). Python code uses snake_case;
both are accepted on input.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)
from pydantic.alias_generators import to_camel

from comissio.utils.formatters import to_date


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class InstallmentStatus(str, Enum):
    """
    Payment status of a single installment.

    Only PENDING and PAID are ever assigned. OVERDUE is reserved:
    no rule currently decides that an installment is late.
    """
    PENDING = "PENDING"
    PAID = "PAID"
    OVERDUE = "OVERDUE"


_ENTITY_CONFIG = ConfigDict(
    frozen=True,
    populate_by_name=True,
    alias_generator=to_camel,
    str_strip_whitespace=True,
)


# =============================================================================
# CORE ENTITIES
# =============================================================================

class CommissionInput(BaseModel):
    """
    A new sale as handed over by the intake form.

    CRITICAL: This is TRUSTED input. The intake validator checks it
    before the derivation engine ever sees it.
    """
    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
        str_strip_whitespace=True,
    )

    description: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="What was sold"
    )
    client_name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Who bought it"
    )
    total_value: Decimal = Field(
        ...,
        gt=0,
        description="Full commission owed, in BRL"
    )
    sale_date: date = Field(
        default_factory=date.today,
        alias="date",
        description="Sale date"
    )
    installment_count: int = Field(
        default=1,
        ge=1,
        description="Number of monthly payments"
    )


class Commission(BaseModel):
    """
    A recorded sale.

    Fixed at creation: total_value and installment_count never change.
    """
    model_config = _ENTITY_CONFIG

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique commission ID"
    )
    description: str = Field(..., min_length=1)
    client_name: str = Field(..., min_length=1)
    total_value: Decimal = Field(..., gt=0)
    sale_date: date = Field(..., alias="date")
    installment_count: int = Field(..., ge=1)

    @field_validator("sale_date", mode="before")
    @classmethod
    def parse_iso_timestamp(cls, v):
        """Older data stored full ISO timestamps; keep only the date."""
        if isinstance(v, str):
            return to_date(v)
        return v


class Installment(BaseModel):
    """
    One scheduled payment derived from a Commission.

    commission_id is a lookup-only reference; the installment
    does not own its commission.
    """
    model_config = _ENTITY_CONFIG

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique installment ID"
    )
    commission_id: UUID = Field(
        ...,
        description="Commission this installment belongs to"
    )
    number: int = Field(
        ...,
        ge=1,
        description="1-based position within the commission"
    )
    total_installments: int = Field(
        ...,
        ge=1,
        description="Copy of the parent's installment_count"
    )
    value: Decimal = Field(
        ...,
        ge=0,
        description="Amount owed in this installment"
    )
    due_date: date
    status: InstallmentStatus = Field(
        default=InstallmentStatus.PENDING
    )

    @field_validator("due_date", mode="before")
    @classmethod
    def parse_iso_timestamp(cls, v):
        """Older data stored full ISO timestamps; keep only the date."""
        if isinstance(v, str):
            return to_date(v)
        return v

    @property
    def is_paid(self) -> bool:
        return self.status == InstallmentStatus.PAID

    @property
    def label(self) -> str:
        """Display label such as '2/4'."""
        return f"{self.number}/{self.total_installments}"


class AppState(BaseModel):
    """
    Application state owned by the controller.

    Every mutation replaces a list wholesale; nothing mutates
    the lists in place.
    """

    commissions: list[Commission] = Field(default_factory=list)
    installments: list[Installment] = Field(default_factory=list)

    def snapshot(self) -> tuple[tuple[Commission, ...], tuple[Installment, ...]]:
        """Read-only view of both lists, for collaborators."""
        return tuple(self.commissions), tuple(self.installments)


# =============================================================================
# AGGREGATION RESULTS
# =============================================================================

class FinancialSummary(BaseModel):
    """The four dashboard numbers."""

    total_expected: Decimal = Decimal("0")
    total_received: Decimal = Decimal("0")
    month_revenue: Decimal = Decimal("0")
    month_pending: Decimal = Decimal("0")

    @property
    def total_outstanding(self) -> Decimal:
        return self.total_expected - self.total_received


class CashFlowPoint(BaseModel):
    """One month bucket of the cash-flow chart."""

    year: int
    month: int = Field(ge=1, le=12)
    label: str = Field(
        ...,
        description="Localized 'Month Year' label"
    )
    value: Decimal = Decimal("0")


class MonthlyGroup(BaseModel):
    """Installments due in one calendar month, sorted by due date."""

    label: str
    installments: list[Installment] = Field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.installments)

    @property
    def total(self) -> Decimal:
        return sum((inst.value for inst in self.installments), Decimal("0"))


class MonthlyStats(BaseModel):
    """Per-month totals split by payment status."""

    month: str = Field(
        ...,
        description="Localized 'Month Year' label"
    )
    year: int
    total_expected: Decimal = Decimal("0")
    total_received: Decimal = Decimal("0")
    total_pending: Decimal = Decimal("0")


# =============================================================================
# INTAKE VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem found in the intake form."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'not_allowed')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class IntakeResult(BaseModel):
    """
    Result of validating a raw intake form.

    commission is only set when the form is valid.
    """

    issues: list[ValidationIssue] = Field(default_factory=list)
    commission: Optional[CommissionInput] = None

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def is_valid(self) -> bool:
        return self.commission is not None and not self.has_errors

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")
