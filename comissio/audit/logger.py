"""
Audit Logger

DESIGN DECISION: Every state change in the tracker is logged.
This provides:
1. Traceability of commissions and status changes
2. A record of persisted data that had to be discarded on load
3. Visibility into AI insight failures

The audit logger:
- Gracefully handles failures (doesn't crash the app if logging fails)
- Always logs locally, and to an append-only store when one is configured
"""

from typing import Optional
from uuid import UUID

import structlog

from comissio.models.audit import AuditEvent, AuditEventBuilder
from comissio.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. The audit store (JSON lines on disk), if configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("comissio.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_state_loaded(
        self,
        commission_count: int,
        installment_count: int,
    ) -> None:
        """Log the initial state load."""
        self.log(AuditEventBuilder.state_loaded(
            commission_count=commission_count,
            installment_count=installment_count,
        ))

    def log_storage_recovered(self, key: str, reason: str) -> None:
        """Log a slot that was discarded and replaced by an empty list."""
        self.log(AuditEventBuilder.storage_recovered(key=key, reason=reason))

    def log_state_saved(self, key: str, item_count: int) -> None:
        self.log(AuditEventBuilder.state_saved(key=key, item_count=item_count))

    def log_save_failed(self, key: str, error_message: str) -> None:
        self.log(AuditEventBuilder.save_failed(key=key, error_message=error_message))

    def log_intake_rejected(self, issues: list[dict]) -> None:
        """Log a commission form that failed validation."""
        self.log(AuditEventBuilder.intake_rejected(issues=issues))

    def log_commission_added(
        self,
        commission_id: UUID,
        client_name: str,
        total_value: str,
        installment_count: int,
    ) -> None:
        """Log a new commission and its schedule."""
        self.log(AuditEventBuilder.commission_added(
            commission_id=commission_id,
            client_name=client_name,
            total_value=total_value,
            installment_count=installment_count,
        ))

    def log_installment_toggled(
        self,
        installment_id: UUID,
        new_status: str,
    ) -> None:
        """Log a payment status change."""
        self.log(AuditEventBuilder.installment_toggled(
            installment_id=installment_id,
            new_status=new_status,
        ))

    def log_insight_requested(
        self,
        commission_count: int,
        installment_count: int,
    ) -> None:
        self.log(AuditEventBuilder.insight_requested(
            commission_count=commission_count,
            installment_count=installment_count,
        ))

    def log_insight_generated(self, length: int, used_fallback: bool) -> None:
        self.log(AuditEventBuilder.insight_generated(
            length=length,
            used_fallback=used_fallback,
        ))

    def log_external_service_error(
        self,
        service: str,
        error_message: str,
    ) -> None:
        """Log external service error."""
        self.log(AuditEventBuilder.external_service_error(
            service=service,
            error_message=error_message,
        ))
