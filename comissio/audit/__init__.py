"""Audit logging package."""

from comissio.audit.logger import AuditLogger

__all__ = ["AuditLogger"]
