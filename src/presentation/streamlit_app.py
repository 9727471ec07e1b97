import logging
import os

import streamlit as st
from pydantic import ValidationError

from src.application.ports import StoreUnavailableError
from src.domain.models import Coordinate
from src.infrastructure.config import Settings
from src.presentation.admin_screens import show_admin_panel
from src.presentation.auth_screens import logout, show_auth_screen
from src.presentation.context import (
    ADMIN,
    BOOKING,
    DOCTOR_PROFILE,
    HOME,
    LISTING,
    USER_PROFILE,
    AppContext,
    build_context,
    current_page,
    current_user,
    go_to,
    is_admin,
    set_user_location,
    user_location,
)
from src.presentation.doctor_screens import show_booking, show_doctor_profile, show_home, show_listing
from src.presentation.profile_screens import show_user_profile


logger = logging.getLogger(__name__)


def _render_location_sidebar(ctx: AppContext):
    st.sidebar.markdown("### 📍 Your Location")
    location = user_location()
    if location is not None:
        st.sidebar.caption(f"Using {location.lat:.4f}, {location.lng:.4f}")

    area = st.sidebar.text_input("Your city/area", placeholder="e.g., Manipal")
    if st.sidebar.button("Find my area", use_container_width=True) and area:
        found = ctx.geocoder.locate(area)
        if found is None:
            st.sidebar.warning(f"Could not find '{area}'.")
        else:
            set_user_location(found)
            st.rerun()

    with st.sidebar.expander("Enter coordinates"):
        lat = st.number_input("Latitude", min_value=-90.0, max_value=90.0, value=None, format="%.6f")
        lng = st.number_input("Longitude", min_value=-180.0, max_value=180.0, value=None, format="%.6f")
        if st.button("Use these coordinates", use_container_width=True):
            try:
                set_user_location(Coordinate(lat=lat, lng=lng))
            except ValidationError:
                st.warning("Enter both latitude and longitude.")
            else:
                st.rerun()

    if location is not None and st.sidebar.button("Clear location", use_container_width=True):
        set_user_location(None)
        st.rerun()


def _render_sidebar(ctx: AppContext):
    user = current_user() or {}
    st.sidebar.title("🌿 Ayur-Find")
    st.sidebar.caption(f"Signed in as {user.get('full_name') or user.get('email', '')}")

    pages = [(HOME, "🗺️ Home"), (LISTING, "🩺 Doctors"), (USER_PROFILE, "👤 My Profile")]
    if is_admin(ctx):
        pages.append((ADMIN, "🛠️ Admin Panel"))
    for page, label in pages:
        if st.sidebar.button(label, use_container_width=True, key=f"nav_{page}"):
            go_to(page)

    st.sidebar.divider()
    _render_location_sidebar(ctx)
    st.sidebar.divider()

    if st.sidebar.button("🚪 Logout", use_container_width=True):
        logout()


def main():
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))

    st.set_page_config(
        page_title="Ayur-Find",
        page_icon="🌿",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    settings = Settings()
    try:
        ctx = build_context(settings)
    except StoreUnavailableError as e:
        st.error(
            f"❌ **Database unavailable:** {e}\n\n"
            "Set `FIREBASE_CREDENTIALS_PATH` in `.streamlit/secrets.toml`, "
            "or use `STORE_BACKEND = \"json\"` for a local store."
        )
        st.stop()

    if not show_auth_screen(ctx.identity):
        return

    user = current_user()
    try:
        data = ctx.profiles.load_user_data(user["uid"], claims=user)
    except Exception as e:
        logger.exception("Failed to fetch user data: %s", e)
        st.error("❌ Failed to fetch user data. Please try again.")
        return

    _render_sidebar(ctx)

    page = current_page()
    if page == LISTING:
        show_listing(ctx, data)
    elif page == DOCTOR_PROFILE:
        show_doctor_profile(ctx, data)
    elif page == BOOKING:
        show_booking(ctx, data)
    elif page == USER_PROFILE:
        show_user_profile(ctx, data)
    elif page == ADMIN and is_admin(ctx):
        show_admin_panel(ctx)
    else:
        show_home(ctx, data)


if __name__ == "__main__":
    main()
