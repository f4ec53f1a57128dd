"""
State Repository

The only place where stored blobs become typed entities.

DESIGN DECISION: Every blob is parsed against the Commission/Installment
schema. Nothing is trusted because of where it came from:
- An empty slot loads as an empty list
- Unreadable JSON loads as an empty list
- JSON that doesn't match the schema loads as an empty list

Loading never fails the caller. Each recovery is logged and remembered
in `recovered` (key -> reason) so the controller can audit it.
Saving always writes the full list, never a diff.
"""

from typing import Optional

import structlog
from pydantic import TypeAdapter, ValidationError

from comissio.config import StorageSettings
from comissio.models.commission import AppState, Commission, Installment
from comissio.services.storage.interface import (
    CorruptDataError,
    SlotStorageInterface,
    StorageError,
)


logger = structlog.get_logger(__name__)

_COMMISSIONS = TypeAdapter(list[Commission])
_INSTALLMENTS = TypeAdapter(list[Installment])


class StateRepository:
    """
    Loads and saves the two entity lists through a slot storage.
    """

    def __init__(
        self,
        storage: SlotStorageInterface,
        commissions_key: str = "comissio_commissions",
        installments_key: str = "comissio_installments",
    ):
        self._storage = storage
        self.commissions_key = commissions_key
        self.installments_key = installments_key
        self.recovered: dict[str, str] = {}

    @classmethod
    def from_settings(
        cls,
        storage: SlotStorageInterface,
        settings: StorageSettings,
    ) -> "StateRepository":
        return cls(
            storage,
            commissions_key=settings.commissions_key,
            installments_key=settings.installments_key,
        )

    def _parse(self, adapter: TypeAdapter, blob: str) -> list:
        try:
            return adapter.validate_json(blob)
        except ValidationError as e:
            raise CorruptDataError(
                f"{e.error_count()} schema errors, first: {e.errors()[0]['msg']}"
            ) from e

    def _load(self, key: str, adapter: TypeAdapter) -> list:
        try:
            blob: Optional[str] = self._storage.read(key)
            if blob is None or not blob.strip():
                return []
            return self._parse(adapter, blob)
        except StorageError as e:
            logger.warning("slot_discarded", key=key, reason=str(e))
            self.recovered[key] = str(e)
            return []

    def load_commissions(self) -> list[Commission]:
        return self._load(self.commissions_key, _COMMISSIONS)

    def load_installments(self) -> list[Installment]:
        return self._load(self.installments_key, _INSTALLMENTS)

    def load_state(self) -> AppState:
        """Load both lists. Missing or corrupt slots come back empty."""
        return AppState(
            commissions=self.load_commissions(),
            installments=self.load_installments(),
        )

    def save_commissions(self, commissions: list[Commission]) -> None:
        blob = _COMMISSIONS.dump_json(commissions, by_alias=True).decode("utf-8")
        self._storage.write(self.commissions_key, blob)

    def save_installments(self, installments: list[Installment]) -> None:
        blob = _INSTALLMENTS.dump_json(installments, by_alias=True).decode("utf-8")
        self._storage.write(self.installments_key, blob)

    def save_state(self, state: AppState) -> None:
        self.save_commissions(state.commissions)
        self.save_installments(state.installments)
