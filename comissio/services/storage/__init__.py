"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Currently implements local JSON files as the backend, but designed to be swappable.
"""

from comissio.services.storage.interface import (
    AuditStorageInterface,
    CorruptDataError,
    SlotStorageInterface,
    StorageError,
    StorageWriteError,
)
from comissio.services.storage.local_file import (
    InMemorySlotStorage,
    JsonlAuditStorage,
    LocalFileSlotStorage,
)
from comissio.services.storage.repository import StateRepository

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "SlotStorageInterface",
    # Exceptions
    "CorruptDataError",
    "StorageError",
    "StorageWriteError",
    # Implementations
    "InMemorySlotStorage",
    "JsonlAuditStorage",
    "LocalFileSlotStorage",
    "StateRepository",
]
