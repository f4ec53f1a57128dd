"""
Data Models Package

This package contains all Pydantic models used in Comissio.
All data flowing through the system must conform to these schemas.
"""

from comissio.models.commission import (
    AppState,
    CashFlowPoint,
    Commission,
    CommissionInput,
    FinancialSummary,
    Installment,
    InstallmentStatus,
    IntakeResult,
    MonthlyGroup,
    MonthlyStats,
    ValidationIssue,
)
from comissio.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Commission models
    "AppState",
    "CashFlowPoint",
    "Commission",
    "CommissionInput",
    "FinancialSummary",
    "Installment",
    "InstallmentStatus",
    "IntakeResult",
    "MonthlyGroup",
    "MonthlyStats",
    "ValidationIssue",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
