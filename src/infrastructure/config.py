import os
import logging
from pathlib import Path
from typing import List, Tuple

try:
    import streamlit as st  # type: ignore
    _HAS_STREAMLIT = True
except Exception:
    _HAS_STREAMLIT = False

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent.parent


def get_secret(name: str, default: str | None = None) -> str | None:
    # Prefer Streamlit secrets if available
    if _HAS_STREAMLIT:
        try:
            if name in st.secrets:
                return str(st.secrets.get(name))
        except Exception:
            # no secrets.toml outside `streamlit run`
            logger.debug("Streamlit secrets unavailable for %s", name)
    return os.environ.get(name, default)


def _get_float(name: str, default: float) -> float:
    raw = get_secret(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r, using %s", name, raw, default)
        return default


class Settings:
    @property
    def store_backend(self) -> str:
        """`json` (local file) or `firestore`."""
        return (get_secret("STORE_BACKEND", "json") or "json").lower()

    @property
    def json_store_path(self) -> str:
        return get_secret("JSON_STORE_PATH") or str(PROJECT_ROOT / ".streamlit" / "ayurfind_store.json")

    @property
    def users_path(self) -> str:
        return get_secret("USERS_PATH") or str(PROJECT_ROOT / ".streamlit" / "users.json")

    @property
    def seed_sample_doctors(self) -> bool:
        return (get_secret("SEED_SAMPLE_DOCTORS", "true") or "").lower() in {"1", "true", "yes"}

    @property
    def firebase_project_id(self) -> str | None:
        return get_secret("FIREBASE_PROJECT_ID")

    @property
    def firebase_credentials_path(self) -> str | None:
        return get_secret("FIREBASE_CREDENTIALS_PATH")

    @property
    def geocoder(self) -> str:
        """`nominatim` or `mock`."""
        return (get_secret("GEOCODER", "nominatim") or "nominatim").lower()

    @property
    def nominatim_url(self) -> str:
        return get_secret("NOMINATIM_URL", "https://nominatim.openstreetmap.org/search") or \
            "https://nominatim.openstreetmap.org/search"

    @property
    def nominatim_user_agent(self) -> str:
        return get_secret("NOMINATIM_USER_AGENT", "ayur-find/0.1") or "ayur-find/0.1"

    @property
    def nearby_toast_radius_m(self) -> float:
        return _get_float("NEARBY_TOAST_RADIUS_M", 1000.0)

    @property
    def nearby_panel_radius_m(self) -> float:
        return _get_float("NEARBY_PANEL_RADIUS_M", 5000.0)

    @property
    def default_center(self) -> Tuple[float, float]:
        return (
            _get_float("DEFAULT_CENTER_LAT", 13.3409),
            _get_float("DEFAULT_CENTER_LNG", 74.7421),
        )

    @property
    def admin_emails(self) -> List[str]:
        raw = get_secret("ADMIN_EMAILS", "") or ""
        return [e.strip().lower() for e in raw.split(",") if e.strip()]
