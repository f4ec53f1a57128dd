"""
Main Orchestrator for Comissio

This module ties together all the components and defines the
end-to-end flows for:
1. New commission (form → validate → derive → store → save)
2. Status toggle (flip → store → save)
3. Dashboard reads (summary, cash flow, statement)
4. AI insight (snapshot → agent → text)

DESIGN DECISION: The tracker owns the application state explicitly.
State is loaded once at construction and saved after every mutation;
there is no module-level state. Reads are recomputed from the current
lists every time.
"""

from datetime import date
from typing import Optional
from uuid import UUID

import structlog

from comissio.agents import INSIGHT_FALLBACK_MESSAGE, InsightAgent
from comissio.audit import AuditLogger
from comissio.config import get_settings
from comissio.engine import (
    cash_flow_series,
    compute_summary,
    derive_installments,
    find_commission,
    group_by_month,
    monthly_stats,
    toggle_status,
)
from comissio.models.commission import (
    AppState,
    CashFlowPoint,
    Commission,
    CommissionInput,
    FinancialSummary,
    Installment,
    IntakeResult,
    MonthlyGroup,
    MonthlyStats,
)
from comissio.services.storage import (
    InMemorySlotStorage,
    JsonlAuditStorage,
    LocalFileSlotStorage,
    StateRepository,
    StorageError,
)
from comissio.validation import CommissionIntakeValidator


logger = structlog.get_logger(__name__)


class CommissionTracker:
    """
    Controller for the commission dashboard.

    Flow for a new commission:
    1. Validate → raw form values become a CommissionInput
    2. Derive → one Commission plus its Installments
    3. Store → commission prepended, installments appended
    4. Save → both lists written in full

    The engine is never invoked with unvalidated form input.
    """

    def __init__(
        self,
        repository: StateRepository,
        insight_agent: Optional[InsightAgent] = None,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[CommissionIntakeValidator] = None,
    ):
        self._repository = repository
        self._insight_agent = insight_agent
        self._audit_logger = audit_logger or AuditLogger()
        self._validator = validator or CommissionIntakeValidator()

        self._state = repository.load_state()

        for key, reason in repository.recovered.items():
            self._audit_logger.log_storage_recovered(key=key, reason=reason)
        self._audit_logger.log_state_loaded(
            commission_count=len(self._state.commissions),
            installment_count=len(self._state.installments),
        )

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def commissions(self) -> list[Commission]:
        return list(self._state.commissions)

    @property
    def installments(self) -> list[Installment]:
        return list(self._state.installments)

    @property
    def validator(self) -> CommissionIntakeValidator:
        return self._validator

    @property
    def has_insight_agent(self) -> bool:
        return self._insight_agent is not None

    def _save(self, key: str, items: list, save) -> None:
        try:
            save(items)
        except StorageError as e:
            self._audit_logger.log_save_failed(key=key, error_message=str(e))
            raise
        self._audit_logger.log_state_saved(key=key, item_count=len(items))

    def _save_commissions(self) -> None:
        self._save(
            self._repository.commissions_key,
            self._state.commissions,
            self._repository.save_commissions,
        )

    def _save_installments(self) -> None:
        self._save(
            self._repository.installments_key,
            self._state.installments,
            self._repository.save_installments,
        )

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_commission(
        self,
        commission_input: CommissionInput,
    ) -> tuple[Commission, list[Installment]]:
        """
        Record a validated commission and its installments.

        Returns:
            (commission, installments)

        Raises:
            StorageError: If either list can't be saved. The tracker
                    state is left as it was before the call.
        """
        commission, new_installments = derive_installments(commission_input)

        previous = self._state
        self._state = AppState(
            commissions=[commission, *previous.commissions],
            installments=[*previous.installments, *new_installments],
        )

        try:
            self._save_commissions()
            self._save_installments()
        except StorageError:
            # Memory must not show what the disk doesn't hold
            self._state = previous
            raise

        self._audit_logger.log_commission_added(
            commission_id=commission.id,
            client_name=commission.client_name,
            total_value=str(commission.total_value),
            installment_count=commission.installment_count,
        )

        return commission, new_installments

    def submit_commission(
        self,
        description: Optional[str],
        client_name: Optional[str],
        total_value,
        sale_date=None,
        installment_count=1,
    ) -> IntakeResult:
        """
        Validate raw form values and record the commission if valid.

        Invalid input is reported back and nothing is stored.
        """
        result = self._validator.validate(
            description=description,
            client_name=client_name,
            total_value=total_value,
            sale_date=sale_date,
            installment_count=installment_count,
        )

        if not result.is_valid:
            self._audit_logger.log_intake_rejected(
                issues=[
                    {"field": i.field, "type": i.issue_type, "message": i.message}
                    for i in result.issues
                ]
            )
            return result

        self.add_commission(result.commission)
        return result

    def toggle_installment(self, installment_id: UUID) -> Optional[Installment]:
        """
        Flip an installment between PAID and PENDING.

        Returns the updated installment, or None if the id is unknown
        (nothing is saved in that case).
        A failed save raises StorageError and leaves the status unchanged.
        """
        updated = toggle_status(self._state.installments, installment_id)
        changed = next((i for i in updated if i.id == installment_id), None)
        if changed is None:
            logger.info("toggle_unknown_installment", installment_id=str(installment_id))
            return None

        previous = self._state
        self._state = AppState(
            commissions=previous.commissions,
            installments=updated,
        )

        try:
            self._save_installments()
        except StorageError:
            self._state = previous
            raise

        self._audit_logger.log_installment_toggled(
            installment_id=installment_id,
            new_status=changed.status.value,
        )

        return changed

    # -------------------------------------------------------------------------
    # Reads (recomputed on every call)
    # -------------------------------------------------------------------------

    def summary(self, today: Optional[date] = None) -> FinancialSummary:
        return compute_summary(self._state.installments, today=today)

    def cash_flow(self, today: Optional[date] = None) -> list[CashFlowPoint]:
        return cash_flow_series(self._state.installments, today=today)

    def statement(self) -> list[MonthlyGroup]:
        return group_by_month(self._state.installments)

    def monthly_stats(self) -> list[MonthlyStats]:
        return monthly_stats(self._state.installments)

    def commission_for(self, installment: Installment) -> Optional[Commission]:
        return find_commission(self._state.commissions, installment.commission_id)

    # -------------------------------------------------------------------------
    # AI insight
    # -------------------------------------------------------------------------

    async def request_insights(self) -> str:
        """
        Ask the AI agent to summarize the current data.

        The agent receives a snapshot taken now; later mutations
        don't affect a request in flight. Never raises.
        """
        commissions, installments = self._state.snapshot()

        if self._insight_agent is None:
            return INSIGHT_FALLBACK_MESSAGE

        self._audit_logger.log_insight_requested(
            commission_count=len(commissions),
            installment_count=len(installments),
        )

        insight = await self._insight_agent.analyze(commissions, installments)

        if insight.used_fallback:
            self._audit_logger.log_external_service_error(
                service="gemini",
                error_message=insight.error or "unknown error",
            )
        self._audit_logger.log_insight_generated(
            length=len(insight.text),
            used_fallback=insight.used_fallback,
        )

        return insight.text


def create_app_components(
    use_storage: bool = True,
    use_ai: bool = True,
) -> CommissionTracker:
    """
    Factory function to create the tracker and its collaborators.

    Args:
        use_storage: Whether to persist to the local data directory.
                    Set to False to keep everything in memory.
        use_ai: Whether to set up the Gemini insight agent.

    Returns:
        A ready CommissionTracker
    """
    settings = get_settings()
    storage_settings = settings.storage

    audit_logger = AuditLogger()  # Local-only logging until storage is up

    if use_storage:
        slots = LocalFileSlotStorage(storage_settings.data_path)
        audit_logger = AuditLogger(JsonlAuditStorage(storage_settings.audit_log_path))
    else:
        slots = InMemorySlotStorage()

    repository = StateRepository.from_settings(slots, storage_settings)

    insight_agent = None
    if use_ai:
        try:
            insight_agent = InsightAgent(settings=settings.gemini)
        except Exception as e:
            # AI not configured - continue without it
            logger.warning("insight_agent_unavailable", error=str(e))

    return CommissionTracker(
        repository=repository,
        insight_agent=insight_agent,
        audit_logger=audit_logger,
    )
