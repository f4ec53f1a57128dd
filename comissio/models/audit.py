"""
Audit Models for Comissio

Every state change in the tracker is logged for audit purposes.
This provides:
1. Traceability of every commission added and every status flip
2. Debugging information when persisted data had to be discarded
3. A record of AI insight requests and their failures

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # State lifecycle
    STATE_LOADED = "state_loaded"
    STATE_SAVED = "state_saved"
    STORAGE_RECOVERED = "storage_recovered"
    SAVE_FAILED = "save_failed"

    # Intake
    INTAKE_REJECTED = "intake_rejected"
    COMMISSION_ADDED = "commission_added"

    # Payment status
    INSTALLMENT_STATUS_TOGGLED = "installment_status_toggled"

    # AI insights
    INSIGHT_REQUESTED = "insight_requested"
    INSIGHT_GENERATED = "insight_generated"

    # System events
    EXTERNAL_SERVICE_ERROR = "external_service_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'commission', 'installment', 'slot')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )

    # Additional data (event-specific)
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging
        and for the JSON-lines audit file.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.commission_added(commission_id, client, value, 4)
        event = AuditEventBuilder.installment_toggled(installment_id, "PAID")
    """

    @staticmethod
    def state_loaded(
        commission_count: int,
        installment_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_LOADED,
            entity_type="state",
            description=(
                f"Loaded {commission_count} commissions and "
                f"{installment_count} installments"
            ),
            details={
                "commission_count": commission_count,
                "installment_count": installment_count,
            },
        )

    @staticmethod
    def state_saved(key: str, item_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_SAVED,
            severity=AuditSeverity.DEBUG,
            entity_type="slot",
            description=f"Saved {item_count} items to {key}",
            details={
                "key": key,
                "item_count": item_count,
            },
        )

    @staticmethod
    def storage_recovered(key: str, reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_RECOVERED,
            severity=AuditSeverity.WARNING,
            entity_type="slot",
            description=f"Discarded unreadable data in {key}",
            details={
                "key": key,
            },
            error_message=reason,
        )

    @staticmethod
    def save_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="slot",
            description=f"Could not save {key}",
            details={
                "key": key,
            },
            error_message=error_message,
        )

    @staticmethod
    def intake_rejected(issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INTAKE_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="commission",
            description=f"Commission form rejected with {len(issues)} issues",
            details={
                "issues": issues,
            },
            is_user_action=True,
        )

    @staticmethod
    def commission_added(
        commission_id: UUID,
        client_name: str,
        total_value: str,
        installment_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COMMISSION_ADDED,
            entity_type="commission",
            entity_id=commission_id,
            description=(
                f"Commission added: {client_name} - R$ {total_value} "
                f"in {installment_count}x"
            ),
            details={
                "client_name": client_name,
                "total_value": total_value,
                "installment_count": installment_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def installment_toggled(
        installment_id: UUID,
        new_status: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INSTALLMENT_STATUS_TOGGLED,
            entity_type="installment",
            entity_id=installment_id,
            description=f"Installment marked as {new_status}",
            details={
                "status": new_status,
            },
            is_user_action=True,
        )

    @staticmethod
    def insight_requested(
        commission_count: int,
        installment_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INSIGHT_REQUESTED,
            entity_type="insight",
            description="AI insight requested",
            details={
                "commission_count": commission_count,
                "installment_count": installment_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def insight_generated(length: int, used_fallback: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INSIGHT_GENERATED,
            severity=AuditSeverity.WARNING if used_fallback else AuditSeverity.INFO,
            entity_type="insight",
            description=(
                "AI insight fell back to the default message"
                if used_fallback
                else "AI insight generated"
            ),
            details={
                "length": length,
                "used_fallback": used_fallback,
            },
        )

    @staticmethod
    def external_service_error(
        service: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTERNAL_SERVICE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"External service error: {service}",
            error_message=error_message,
            details={
                "service": service,
            },
        )
