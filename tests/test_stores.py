"""Unit tests for the profile store adapters and sample data seeding."""
import json
from unittest.mock import MagicMock, patch

import pytest
from google.api_core.exceptions import NotFound

from src.application.ports import DOCTORS, RecordNotFoundError, StoreUnavailableError
from src.infrastructure.store.factory import build_store
from src.infrastructure.store.firestore_store import FirestoreProfileStore
from src.infrastructure.store.json_store import JsonProfileStore
from src.infrastructure.store.sample_data import SAMPLE_DOCTORS, seed_doctors


@pytest.fixture
def store(tmp_path):
    return JsonProfileStore(storage_path=str(tmp_path / "store.json"))


class TestJsonProfileStore:
    def test_initialization_creates_empty_file(self, tmp_path):
        path = tmp_path / "nested" / "store.json"
        JsonProfileStore(storage_path=str(path))
        assert json.loads(path.read_text()) == {}

    def test_add_and_get(self, store):
        record_id = store.add(DOCTORS, {"name": "Dr. Ayush Sharma"})
        assert record_id
        assert store.get(DOCTORS, record_id) == {"name": "Dr. Ayush Sharma"}
        assert store.get(DOCTORS, "missing") is None
        assert store.get("unknown", record_id) is None

    def test_returned_records_are_copies(self, store):
        record_id = store.add(DOCTORS, {"name": "A", "tags": ["Detox"]})
        store.get(DOCTORS, record_id)["tags"].append("Changed")
        assert store.get(DOCTORS, record_id)["tags"] == ["Detox"]

    def test_list_with_where(self, store):
        a = store.add("appointments", {"userId": "u1", "status": "scheduled"})
        store.add("appointments", {"userId": "u2", "status": "scheduled"})
        assert [record_id for record_id, _ in store.list("appointments", {"userId": "u1"})] == [a]
        assert len(store.list("appointments")) == 2
        assert store.list("empty") == []

    def test_update_merges_fields(self, store):
        store.set("userProfiles", "u1", {"fullName": "Asha", "email": "a@example.com"})
        store.update("userProfiles", "u1", {"fullName": "Asha Rao"})
        assert store.get("userProfiles", "u1") == {"fullName": "Asha Rao", "email": "a@example.com"}

    def test_update_missing_record_raises(self, store):
        with pytest.raises(RecordNotFoundError) as excinfo:
            store.update("userProfiles", "nobody", {"fullName": "X"})
        assert excinfo.value.collection == "userProfiles"
        assert excinfo.value.record_id == "nobody"

    def test_delete(self, store):
        record_id = store.add(DOCTORS, {"name": "A"})
        store.delete(DOCTORS, record_id)
        store.delete(DOCTORS, record_id)  # already gone
        assert store.get(DOCTORS, record_id) is None

    def test_writes_are_visible_to_other_instances(self, tmp_path):
        path = str(tmp_path / "store.json")
        first = JsonProfileStore(storage_path=path)
        record_id = first.add(DOCTORS, {"name": "A"})
        assert JsonProfileStore(storage_path=path).get(DOCTORS, record_id) == {"name": "A"}

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("{not json")
        assert JsonProfileStore(storage_path=str(path)).list(DOCTORS) == []


class TestSeeding:
    def test_seed_empty_store(self, store):
        assert seed_doctors(store) == len(SAMPLE_DOCTORS)
        names = {record["name"] for _, record in store.list(DOCTORS)}
        assert names == {d.name for d in SAMPLE_DOCTORS}

    def test_seed_is_skipped_when_doctors_exist(self, store):
        store.add(DOCTORS, {"name": "Dr. Existing"})
        assert seed_doctors(store) == 0
        assert len(store.list(DOCTORS)) == 1

    def test_sample_doctors_have_coordinates_and_tags(self):
        for doctor in SAMPLE_DOCTORS:
            assert doctor.coordinate is not None
            assert doctor.tags
            assert doctor.availability["Sunday"].is_available is False

    def test_build_store_json_backend(self, tmp_path, monkeypatch):
        monkeypatch.setenv("STORE_BACKEND", "json")
        monkeypatch.setenv("JSON_STORE_PATH", str(tmp_path / "store.json"))
        monkeypatch.setenv("SEED_SAMPLE_DOCTORS", "false")

        store = build_store()

        assert isinstance(store, JsonProfileStore)
        assert store.list(DOCTORS) == []

    def test_build_store_seeds_by_default(self, tmp_path, monkeypatch):
        monkeypatch.delenv("STORE_BACKEND", raising=False)
        monkeypatch.delenv("SEED_SAMPLE_DOCTORS", raising=False)
        monkeypatch.setenv("JSON_STORE_PATH", str(tmp_path / "store.json"))

        assert len(build_store().list(DOCTORS)) == len(SAMPLE_DOCTORS)


class TestFirestoreProfileStore:
    def test_add_returns_document_id(self):
        client = MagicMock()
        client.collection.return_value.add.return_value = (None, MagicMock(id="abc"))

        store = FirestoreProfileStore(client=client)

        assert store.add(DOCTORS, {"name": "A"}) == "abc"
        client.collection.assert_called_with(DOCTORS)

    def test_get_missing_document(self):
        client = MagicMock()
        client.collection.return_value.document.return_value.get.return_value = MagicMock(exists=False)
        assert FirestoreProfileStore(client=client).get(DOCTORS, "x") is None

    def test_list_applies_equality_filters(self):
        client = MagicMock()
        snapshot = MagicMock(id="a1")
        snapshot.to_dict.return_value = {"userId": "u1"}
        query = client.collection.return_value.where.return_value
        query.stream.return_value = [snapshot]

        result = FirestoreProfileStore(client=client).list("appointments", {"userId": "u1"})

        assert result == [("a1", {"userId": "u1"})]
        client.collection.return_value.where.assert_called_once()

    def test_update_missing_document_raises(self):
        client = MagicMock()
        client.collection.return_value.document.return_value.update.side_effect = NotFound("gone")
        with pytest.raises(RecordNotFoundError):
            FirestoreProfileStore(client=client).update("userProfiles", "u1", {"fullName": "X"})

    def test_unconfigured_firebase_is_reported(self):
        settings = MagicMock(firebase_credentials_path="/nonexistent/credentials.json", firebase_project_id=None)
        with patch("firebase_admin._apps", {}):
            with pytest.raises(StoreUnavailableError):
                FirestoreProfileStore(settings=settings)

    def test_failures_are_logged_and_propagated(self, caplog):
        client = MagicMock()
        client.collection.return_value.add.side_effect = RuntimeError("deadline exceeded")
        client.collection.return_value.stream.side_effect = RuntimeError("deadline exceeded")
        client.collection.return_value.document.return_value.delete.side_effect = RuntimeError("permission denied")
        store = FirestoreProfileStore(client=client)

        with caplog.at_level("ERROR"):
            with pytest.raises(RuntimeError):
                store.add(DOCTORS, {"name": "A"})
            with pytest.raises(RuntimeError):
                store.list(DOCTORS)
            with pytest.raises(RuntimeError):
                store.delete(DOCTORS, "d1")

        assert "Firestore add to doctors failed" in caplog.text
        assert "Firestore query on doctors failed" in caplog.text
        assert "Firestore delete of doctors/d1 failed" in caplog.text

    def test_update_failure_other_than_missing_propagates(self):
        client = MagicMock()
        client.collection.return_value.document.return_value.update.side_effect = RuntimeError("unavailable")
        with pytest.raises(RuntimeError):
            FirestoreProfileStore(client=client).update("userProfiles", "u1", {"fullName": "X"})
