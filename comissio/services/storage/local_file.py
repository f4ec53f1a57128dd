"""
Local Storage Implementation

DESIGN DECISION: Data lives on the user's machine as plain JSON files,
one file per slot, inside a single data directory:
1. No server and no account needed
2. Users can back up or inspect the files directly
3. Writes replace the whole file, so a slot is never half-written

TRADEOFFS:
- One writer at a time (fine for a single-user tracker)
- The whole list is rewritten on every save (fine for personal volumes)

The implementation follows the abstract interface, so the engine never
knows where the blobs live.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

import structlog

from comissio.models.audit import AuditEvent
from comissio.services.storage.interface import (
    AuditStorageInterface,
    CorruptDataError,
    SlotStorageInterface,
    StorageError,
    StorageWriteError,
)


logger = structlog.get_logger(__name__)


class LocalFileSlotStorage(SlotStorageInterface):
    """
    File-per-slot storage.

    The slot "comissio_commissions" lives in "<data_dir>/comissio_commissions.json".
    """

    def __init__(self, data_dir: Union[str, Path]):
        self._data_dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path_for(self, key: str) -> Path:
        return self._data_dir / f"{key}.json"

    def read(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            raise CorruptDataError(f"{path} is not valid UTF-8: {e}") from e
        except OSError as e:
            raise StorageError(f"Could not read {path}: {e}") from e

    def write(self, key: str, blob: str) -> None:
        path = self._path_for(key)
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            # Write to a temp file first so a crash never leaves a truncated slot
            fd, tmp_name = tempfile.mkstemp(
                dir=self._data_dir, prefix=f".{key}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(blob)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageWriteError(f"Could not write {path}: {e}") from e
        logger.debug("slot_written", key=key, path=str(path), size=len(blob))


class InMemorySlotStorage(SlotStorageInterface):
    """Dict-backed storage for tests and for running without a data directory."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._slots: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self._slots.get(key)

    def write(self, key: str, blob: str) -> None:
        self._slots[key] = blob

    def keys(self) -> list[str]:
        return list(self._slots)


class JsonlAuditStorage(AuditStorageInterface):
    """
    Append-only audit log, one JSON object per line.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    def append_event(self, event: AuditEvent) -> bool:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as handle:
                handle.write(json.dumps(event.to_log_dict(), default=str))
                handle.write("\n")
        except OSError as e:
            raise StorageWriteError(f"Could not append to {self._path}: {e}") from e
        return True

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        try:
            lines = self._path.read_text(encoding="utf-8").splitlines()
        except FileNotFoundError:
            return []

        events = []
        for line in reversed(lines):
            if len(events) >= limit:
                break
            if not line.strip():
                continue
            try:
                events.append(AuditEvent.model_validate_json(line))
            except ValueError:
                # Skip lines we can't parse
                logger.warning("audit_line_skipped", path=str(self._path))
        return events
