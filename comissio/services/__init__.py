"""Services package."""

from comissio.services.storage import (
    AuditStorageInterface,
    CorruptDataError,
    InMemorySlotStorage,
    JsonlAuditStorage,
    LocalFileSlotStorage,
    SlotStorageInterface,
    StateRepository,
    StorageError,
    StorageWriteError,
)

__all__ = [
    "AuditStorageInterface",
    "CorruptDataError",
    "InMemorySlotStorage",
    "JsonlAuditStorage",
    "LocalFileSlotStorage",
    "SlotStorageInterface",
    "StateRepository",
    "StorageError",
    "StorageWriteError",
]
