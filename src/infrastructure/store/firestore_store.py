import logging
from typing import Any, Dict, List, Optional, Tuple

from src.application.ports import ProfileStorePort, RecordNotFoundError, StoreUnavailableError
from src.infrastructure.config import Settings


logger = logging.getLogger(__name__)


class FirestoreProfileStore(ProfileStorePort):
    """Profile store backed by Cloud Firestore through firebase-admin."""

    def __init__(self, settings: Settings | None = None, client=None):
        self.settings = settings or Settings()
        self._db = client
        if self._db is None:
            self._init_client()

    def _init_client(self):
        try:
            import firebase_admin
            from firebase_admin import credentials, firestore
        except Exception as e:
            logger.exception("firebase-admin is not installed: %s", e)
            raise StoreUnavailableError("firebase-admin is not installed") from e

        try:
            if firebase_admin._apps:  # type: ignore[attr-defined]
                app = firebase_admin.get_app()
            else:
                path = self.settings.firebase_credentials_path
                cred = credentials.Certificate(path) if path else credentials.ApplicationDefault()
                options = {"projectId": self.settings.firebase_project_id} if self.settings.firebase_project_id else None
                app = firebase_admin.initialize_app(cred, options)
                logger.info("Firebase app initialized")
            self._db = firestore.client(app=app)
        except Exception as e:
            logger.exception("Failed to initialize Firestore client: %s", e)
            raise StoreUnavailableError("Firestore is not configured") from e

    def add(self, collection: str, data: Dict[str, Any]) -> str:
        try:
            _, ref = self._db.collection(collection).add(data)
        except Exception as e:
            logger.exception("Firestore add to %s failed: %s", collection, e)
            raise
        return ref.id

    def set(self, collection: str, record_id: str, data: Dict[str, Any]) -> None:
        try:
            self._db.collection(collection).document(record_id).set(data)
        except Exception as e:
            logger.exception("Firestore set of %s/%s failed: %s", collection, record_id, e)
            raise

    def get(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        try:
            snapshot = self._db.collection(collection).document(record_id).get()
        except Exception as e:
            logger.exception("Firestore get of %s/%s failed: %s", collection, record_id, e)
            raise
        if not snapshot.exists:
            return None
        return snapshot.to_dict() or {}

    def list(self, collection: str, where: Optional[Dict[str, Any]] = None) -> List[Tuple[str, Dict[str, Any]]]:
        query = self._db.collection(collection)
        if where:
            from google.cloud.firestore_v1.base_query import FieldFilter

            for field, value in where.items():
                query = query.where(filter=FieldFilter(field, "==", value))
        try:
            return [(snapshot.id, snapshot.to_dict() or {}) for snapshot in query.stream()]
        except Exception as e:
            logger.exception("Firestore query on %s failed: %s", collection, e)
            raise

    def update(self, collection: str, record_id: str, changes: Dict[str, Any]) -> None:
        from google.api_core.exceptions import NotFound

        try:
            self._db.collection(collection).document(record_id).update(changes)
        except NotFound as e:
            raise RecordNotFoundError(collection, record_id) from e
        except Exception as e:
            logger.exception("Firestore update of %s/%s failed: %s", collection, record_id, e)
            raise

    def delete(self, collection: str, record_id: str) -> None:
        try:
            self._db.collection(collection).document(record_id).delete()
        except Exception as e:
            logger.exception("Firestore delete of %s/%s failed: %s", collection, record_id, e)
            raise
