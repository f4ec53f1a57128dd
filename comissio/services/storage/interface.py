"""
Abstract Storage Interface

DESIGN DECISION: Storage is a set of string-keyed slots, each holding one
serialized blob (the full commission list, the full installment list).
This allows us to:
1. Keep files on disk for the app and plain dicts for tests
2. Move to another key-value backend without touching the engine
3. Validate every blob in one place (the StateRepository)

The interface is intentionally tiny - read a slot, write a slot.
"""

from abc import ABC, abstractmethod
from typing import Optional

from comissio.models.audit import AuditEvent


class SlotStorageInterface(ABC):
    """
    Abstract interface for keyed blob storage.

    Implementations must not interpret the blobs they hold.
    """

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """
        Read the blob stored under a key.

        Args:
            key: Slot key

        Returns:
            The stored text, or None if the slot is empty

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def write(self, key: str, blob: str) -> None:
        """
        Replace the blob stored under a key.

        Args:
            key: Slot key
            blob: Full serialized content

        Raises:
            StorageWriteError: If the write fails
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageWriteError(StorageError):
    """A slot could not be written."""
    pass


class CorruptDataError(StorageError):
    """A stored blob could not be parsed into the expected schema."""
    pass
