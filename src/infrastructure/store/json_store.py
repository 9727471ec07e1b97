"""File-backed profile store for local development and tests."""
import json
import logging
import os
import uuid
from copy import deepcopy
from typing import Any, Dict, List, Optional, Tuple

from src.application.ports import ProfileStorePort, RecordNotFoundError


logger = logging.getLogger(__name__)


class JsonProfileStore(ProfileStorePort):
    """Keeps every collection in a single JSON document.

    Layout: {collection: {record_id: record}}. The file is re-read on every
    call so several Streamlit sessions see each other's writes.
    """

    def __init__(self, storage_path: str):
        self.storage_path = storage_path
        self._ensure_storage_exists()

    def _ensure_storage_exists(self) -> None:
        storage_dir = os.path.dirname(self.storage_path)
        if storage_dir and not os.path.exists(storage_dir):
            os.makedirs(storage_dir, exist_ok=True)

        if not os.path.exists(self.storage_path) or os.path.getsize(self.storage_path) == 0:
            self._save({})

    def _load(self) -> Dict[str, Dict[str, Any]]:
        try:
            with open(self.storage_path, "r") as f:
                return json.load(f)
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError:
            logger.error("Store file %s is corrupt; treating it as empty", self.storage_path)
            return {}

    def _save(self, data: Dict[str, Dict[str, Any]]) -> None:
        with open(self.storage_path, "w") as f:
            json.dump(data, f, indent=2)

    def add(self, collection: str, data: Dict[str, Any]) -> str:
        record_id = uuid.uuid4().hex
        self.set(collection, record_id, data)
        return record_id

    def set(self, collection: str, record_id: str, data: Dict[str, Any]) -> None:
        store = self._load()
        store.setdefault(collection, {})[record_id] = deepcopy(data)
        self._save(store)

    def get(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        record = self._load().get(collection, {}).get(record_id)
        return deepcopy(record) if record is not None else None

    def list(self, collection: str, where: Optional[Dict[str, Any]] = None) -> List[Tuple[str, Dict[str, Any]]]:
        where = where or {}
        records = self._load().get(collection, {})
        return [
            (record_id, deepcopy(record))
            for record_id, record in records.items()
            if all(record.get(field) == value for field, value in where.items())
        ]

    def update(self, collection: str, record_id: str, changes: Dict[str, Any]) -> None:
        store = self._load()
        records = store.get(collection, {})
        if record_id not in records:
            raise RecordNotFoundError(collection, record_id)
        records[record_id].update(deepcopy(changes))
        self._save(store)

    def delete(self, collection: str, record_id: str) -> None:
        store = self._load()
        if store.get(collection, {}).pop(record_id, None) is not None:
            self._save(store)
