import logging

from src.application.ports import ProfileStorePort
from src.infrastructure.config import Settings
from src.infrastructure.store.firestore_store import FirestoreProfileStore
from src.infrastructure.store.json_store import JsonProfileStore
from src.infrastructure.store.sample_data import seed_doctors


logger = logging.getLogger(__name__)


def build_store(settings: Settings | None = None) -> ProfileStorePort:
    settings = settings or Settings()
    if settings.store_backend == "firestore":
        store = FirestoreProfileStore(settings=settings)
    else:
        if settings.store_backend != "json":
            logger.warning("Unknown STORE_BACKEND %r; using the JSON file store", settings.store_backend)
        store = JsonProfileStore(storage_path=settings.json_store_path)

    if settings.seed_sample_doctors:
        seed_doctors(store)
    return store
