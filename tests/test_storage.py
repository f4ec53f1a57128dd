"""Tests for slot storage, the state repository and the audit file."""

import json
from datetime import date
from decimal import Decimal

import pytest

from comissio.engine import derive_installments, toggle_status
from comissio.models.audit import AuditEventBuilder, AuditEventType
from comissio.models.commission import AppState, InstallmentStatus
from comissio.services.storage import (
    CorruptDataError,
    InMemorySlotStorage,
    JsonlAuditStorage,
    LocalFileSlotStorage,
    StateRepository,
)

# Shape written by earlier versions of the app: camelCase keys and
# full ISO timestamps.
LEGACY_COMMISSIONS = json.dumps([
    {
        "id": "3f1c1c4e-8f7b-4a59-9a55-5a1f5f3f6b01",
        "description": "Consultoria",
        "clientName": "Ana",
        "totalValue": 900,
        "date": "2024-02-10T00:00:00.000Z",
        "installmentCount": 3,
    }
])
LEGACY_INSTALLMENTS = json.dumps([
    {
        "id": "9a0d2c6e-1b2f-4c1e-8d7a-0c4f9b6e2a11",
        "commissionId": "3f1c1c4e-8f7b-4a59-9a55-5a1f5f3f6b01",
        "number": 1,
        "totalInstallments": 3,
        "value": 300,
        "dueDate": "2024-02-10T00:00:00.000Z",
        "status": "PAID",
    }
])


@pytest.fixture
def state(sale):
    commission, installments = derive_installments(sale)
    installments = toggle_status(installments, installments[0].id)
    return AppState(commissions=[commission], installments=installments)


class TestInMemorySlotStorage:
    """Tests for the dict-backed storage."""

    def test_missing_key_reads_none(self):
        assert InMemorySlotStorage().read("nothing") is None

    def test_write_then_read(self):
        slots = InMemorySlotStorage()
        slots.write("a", "[]")
        assert slots.read("a") == "[]"
        assert slots.keys() == ["a"]

    def test_initial_contents(self):
        slots = InMemorySlotStorage({"a": "x"})
        assert slots.read("a") == "x"


class TestLocalFileSlotStorage:
    """Tests for the file-per-slot storage."""

    def test_missing_file_reads_none(self, tmp_path):
        assert LocalFileSlotStorage(tmp_path).read("comissio_commissions") is None

    def test_write_creates_directory_and_file(self, tmp_path):
        storage = LocalFileSlotStorage(tmp_path / "data")
        storage.write("comissio_commissions", "[]")

        path = tmp_path / "data" / "comissio_commissions.json"
        assert path.read_text(encoding="utf-8") == "[]"
        assert storage.read("comissio_commissions") == "[]"

    def test_write_replaces_whole_blob(self, tmp_path):
        storage = LocalFileSlotStorage(tmp_path)
        storage.write("k", "first version, longer")
        storage.write("k", "second")
        assert storage.read("k") == "second"

    def test_no_temp_files_left_behind(self, tmp_path):
        storage = LocalFileSlotStorage(tmp_path)
        storage.write("k", "[]")
        assert [p.name for p in tmp_path.iterdir()] == ["k.json"]


class TestStateRepository:
    """Tests for loading and saving the two entity lists."""

    def test_empty_storage_loads_empty_state(self, repository):
        state = repository.load_state()
        assert state.commissions == []
        assert state.installments == []
        assert repository.recovered == {}

    def test_round_trip(self, repository, state):
        repository.save_state(state)
        loaded = repository.load_state()

        assert loaded.commissions == state.commissions
        assert loaded.installments == state.installments
        assert loaded.installments[0].status == InstallmentStatus.PAID

    def test_round_trip_on_disk(self, tmp_path, state):
        repository = StateRepository(LocalFileSlotStorage(tmp_path))
        repository.save_state(state)

        reopened = StateRepository(LocalFileSlotStorage(tmp_path))
        assert reopened.load_state() == state

    def test_saved_blob_uses_camel_case(self, slots, repository, state):
        repository.save_state(state)
        data = json.loads(slots.read(repository.installments_key))
        assert set(data[0]) == {
            "id",
            "commissionId",
            "number",
            "totalInstallments",
            "value",
            "dueDate",
            "status",
        }
        assert data[0]["status"] == "PAID"
        assert data[0]["dueDate"] == "2024-01-15"

    def test_legacy_blob_parses(self):
        slots = InMemorySlotStorage({
            "comissio_commissions": LEGACY_COMMISSIONS,
            "comissio_installments": LEGACY_INSTALLMENTS,
        })
        state = StateRepository(slots).load_state()

        assert state.commissions[0].client_name == "Ana"
        assert state.commissions[0].sale_date == date(2024, 2, 10)
        assert state.installments[0].due_date == date(2024, 2, 10)
        assert state.installments[0].value == Decimal("300")
        assert state.installments[0].status == InstallmentStatus.PAID

    @pytest.mark.parametrize("blob", [
        "{not json",
        "{}",
        '[{"id": "abc"}]',
        '"just a string"',
    ])
    def test_corrupt_slot_loads_empty(self, blob):
        slots = InMemorySlotStorage({"comissio_installments": blob})
        repository = StateRepository(slots)

        assert repository.load_installments() == []
        assert "comissio_installments" in repository.recovered

    def test_undecodable_file_loads_empty(self, tmp_path):
        """Test that a slot file with invalid UTF-8 is discarded, not raised."""
        (tmp_path / "comissio_installments.json").write_bytes(b"\xff\xfe\x00[garbage")
        repository = StateRepository(LocalFileSlotStorage(tmp_path))

        assert repository.load_installments() == []
        assert "comissio_installments" in repository.recovered

    def test_undecodable_file_raises_corrupt_data_on_read(self, tmp_path):
        (tmp_path / "k.json").write_bytes(b"\xff\xfe")
        with pytest.raises(CorruptDataError):
            LocalFileSlotStorage(tmp_path).read("k")

    def test_one_corrupt_slot_keeps_the_other(self):
        slots = InMemorySlotStorage({
            "comissio_commissions": LEGACY_COMMISSIONS,
            "comissio_installments": "garbage",
        })
        repository = StateRepository(slots)
        state = repository.load_state()

        assert len(state.commissions) == 1
        assert state.installments == []
        assert list(repository.recovered) == ["comissio_installments"]

    def test_blank_slot_is_not_a_recovery(self):
        slots = InMemorySlotStorage({"comissio_commissions": "   "})
        repository = StateRepository(slots)
        assert repository.load_commissions() == []
        assert repository.recovered == {}

    def test_custom_keys(self, state):
        slots = InMemorySlotStorage()
        repository = StateRepository(slots, commissions_key="c", installments_key="i")
        repository.save_state(state)
        assert sorted(slots.keys()) == ["c", "i"]


class TestJsonlAuditStorage:
    """Tests for the append-only audit file."""

    def test_missing_file_has_no_events(self, tmp_path):
        assert JsonlAuditStorage(tmp_path / "audit.jsonl").get_recent_events() == []

    def test_append_and_read_newest_first(self, tmp_path):
        storage = JsonlAuditStorage(tmp_path / "logs" / "audit.jsonl")
        storage.append_event(AuditEventBuilder.state_loaded(0, 0))
        storage.append_event(AuditEventBuilder.storage_recovered("k", "bad"))

        events = storage.get_recent_events()
        assert [e.event_type for e in events] == [
            AuditEventType.STORAGE_RECOVERED,
            AuditEventType.STATE_LOADED,
        ]

    def test_limit(self, tmp_path):
        storage = JsonlAuditStorage(tmp_path / "audit.jsonl")
        for _ in range(5):
            storage.append_event(AuditEventBuilder.state_loaded(0, 0))
        assert len(storage.get_recent_events(limit=2)) == 2

    def test_unparseable_lines_are_skipped(self, tmp_path):
        path = tmp_path / "audit.jsonl"
        storage = JsonlAuditStorage(path)
        storage.append_event(AuditEventBuilder.state_loaded(1, 4))
        with path.open("a", encoding="utf-8") as handle:
            handle.write("not json\n")

        events = storage.get_recent_events()
        assert len(events) == 1
        assert events[0].details["installment_count"] == 4
