from typing import Any, Dict, List, Optional, Protocol, Tuple

from src.domain.models import Coordinate


DOCTORS = "doctors"
APPOINTMENTS = "appointments"
USER_PROFILES = "userProfiles"


class RecordNotFoundError(KeyError):
    def __init__(self, collection: str, record_id: str):
        super().__init__(f"{collection}/{record_id}")
        self.collection = collection
        self.record_id = record_id


class StoreUnavailableError(RuntimeError):
    pass


class ProfileStorePort(Protocol):
    """Document store holding doctors, appointments and user profiles.

    Records are plain dicts keyed by the store's field names; ids are opaque
    strings assigned by the store and are not part of the record body.
    """

    def add(self, collection: str, data: Dict[str, Any]) -> str:
        ...

    def set(self, collection: str, record_id: str, data: Dict[str, Any]) -> None:
        ...

    def get(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        ...

    def list(self, collection: str, where: Optional[Dict[str, Any]] = None) -> List[Tuple[str, Dict[str, Any]]]:
        """Return (id, record) pairs, optionally filtered by field equality."""
        ...

    def update(self, collection: str, record_id: str, changes: Dict[str, Any]) -> None:
        """Partial update. Raises RecordNotFoundError when the record is missing."""
        ...

    def delete(self, collection: str, record_id: str) -> None:
        ...


class IdentityPort(Protocol):
    def register_user(self, full_name: str, email: str, phone: str, password: str) -> Tuple[bool, str]:
        ...

    def authenticate_user(self, email: str, password: str) -> Tuple[bool, Optional[Dict[str, Any]]]:
        """
        Returns (success, claims). Claims carry uid, full_name, email and phone.
        """
        ...


class NotifierPort(Protocol):
    def notify(self, title: str, message: str) -> None:
        ...


class GeocoderPort(Protocol):
    def locate(self, query: str) -> Optional[Coordinate]:
        ...
