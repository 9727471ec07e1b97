"""Explicit application context and navigation state for the Streamlit screens."""
import logging
from typing import Any, Dict, Optional

import streamlit as st

from src.application.discovery_service import DiscoveryService, ProximityNotifier
from src.application.ports import GeocoderPort, IdentityPort, NotifierPort, ProfileStorePort
from src.application.use_cases import AdminService, AppointmentService, ProfileService
from src.domain.models import Coordinate
from src.infrastructure.auth.user_manager import UserManager
from src.infrastructure.config import Settings
from src.infrastructure.geocoding.mock_geocoder import MockGeocoder
from src.infrastructure.geocoding.nominatim import NominatimGeocoder
from src.infrastructure.store.factory import build_store
from src.presentation.notifications import StreamlitToastNotifier


logger = logging.getLogger(__name__)

HOME = "home"
LISTING = "doctorListing"
DOCTOR_PROFILE = "doctorProfile"
BOOKING = "appointmentBooking"
USER_PROFILE = "userProfile"
ADMIN = "admin"

# Session keys dropped on logout
SESSION_KEYS = [
    "current_page",
    "selected_doctor_id",
    "search_query",
    "listing_query",
    "selected_tags",
    "sort_key",
    "user_location",
    "proximity_notifier",
]


class AppContext:
    """Services and adapters the screens work with, built once per script run."""

    def __init__(
        self,
        settings: Settings,
        store: ProfileStorePort,
        identity: IdentityPort,
        geocoder: GeocoderPort,
        notifier: NotifierPort,
    ):
        self.settings = settings
        self.store = store
        self.identity = identity
        self.geocoder = geocoder
        self.notifier = notifier
        self.discovery = DiscoveryService(nearby_radius_m=settings.nearby_panel_radius_m)
        self.appointments = AppointmentService(store, notifier)
        self.profiles = ProfileService(store, notifier)
        self.admin = AdminService(store)


def build_context(settings: Settings | None = None) -> AppContext:
    settings = settings or Settings()
    geocoder = MockGeocoder() if settings.geocoder == "mock" else NominatimGeocoder(settings=settings)
    return AppContext(
        settings=settings,
        store=build_store(settings),
        identity=UserManager(storage_path=settings.users_path),
        geocoder=geocoder,
        notifier=StreamlitToastNotifier(),
    )


def go_to(page: str, doctor_id: Optional[str] = None) -> None:
    st.session_state.current_page = page
    if doctor_id is not None:
        st.session_state.selected_doctor_id = doctor_id
    st.rerun()


def current_page() -> str:
    return st.session_state.get("current_page", HOME)


def current_user() -> Optional[Dict[str, Any]]:
    return st.session_state.get("user_data")


def user_location() -> Optional[Coordinate]:
    """Latest known user coordinate; None until the user provides one."""
    return st.session_state.get("user_location")


def set_user_location(location: Optional[Coordinate]) -> None:
    st.session_state.user_location = location


def proximity_notifier(ctx: AppContext) -> ProximityNotifier:
    if "proximity_notifier" not in st.session_state:
        st.session_state.proximity_notifier = ProximityNotifier(ctx.notifier)
    return st.session_state.proximity_notifier


def is_admin(ctx: AppContext) -> bool:
    user = current_user() or {}
    return (user.get("email") or "").lower() in ctx.settings.admin_emails
