import logging
from typing import List, Optional, Sequence, Tuple

import streamlit as st
from pydantic import ValidationError

from src.application.schemas import TIME_SLOTS, AppointmentRequest
from src.application.use_cases import UserData
from src.domain.discovery import all_tags, nearby
from src.domain.models import Doctor, FilterState, NearbyDoctor, SortKey
from src.infrastructure.auth.validators import validate_visit_date
from src.presentation.context import (
    BOOKING,
    DOCTOR_PROFILE,
    HOME,
    LISTING,
    USER_PROFILE,
    AppContext,
    current_user,
    go_to,
    proximity_notifier,
    user_location,
)
from src.presentation.map_view import render_map


logger = logging.getLogger(__name__)

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

SORT_LABELS = {
    SortKey.RATING: "Highest Rated",
    SortKey.EXPERIENCE: "Most Experienced",
    SortKey.NAME: "Name (A-Z)",
}


def format_distance(distance_m: float) -> str:
    if distance_m < 1000:
        return f"{distance_m:.0f} m"
    return f"{distance_m / 1000:.1f} km"


def format_doctor_card(doctor: Doctor, distance_m: Optional[float] = None) -> str:
    lines = [f"### {doctor.name}"]
    if doctor.specialization:
        lines.append(f"*{doctor.specialization}*")
    details = []
    if doctor.location:
        details.append(f"📍 {doctor.location}")
    details.append(f"⭐ {doctor.rating:g}")
    details.append(f"🕒 {doctor.experience} years experience")
    if distance_m is not None:
        details.append(f"🧭 {format_distance(distance_m)} away")
    lines.append(" · ".join(details))
    if doctor.tags:
        lines.append(" ".join(f"`{tag}`" for tag in doctor.tags))
    return "\n\n".join(lines)


def availability_rows(doctor: Doctor) -> List[Tuple[str, str]]:
    """(day, hours) pairs, Monday first; unknown day names follow in stored order."""
    known = [d for d in WEEKDAYS if d in doctor.availability]
    extra = [d for d in doctor.availability if d not in WEEKDAYS]
    rows = []
    for day in known + extra:
        slot = doctor.availability[day]
        rows.append((day, slot.times if slot.is_available else "Not available"))
    return rows


def validation_messages(error: ValidationError) -> List[str]:
    messages = []
    for err in error.errors():
        field = ".".join(str(p) for p in err.get("loc", ())) or "form"
        messages.append(f"{field.replace('_', ' ').capitalize()}: {err.get('msg', 'invalid value')}")
    return messages


def find_doctor(doctors: Sequence[Doctor], doctor_id: Optional[str]) -> Optional[Doctor]:
    return next((d for d in doctors if d.id == doctor_id), None)


def _render_nearby_panel(entries: Sequence[NearbyDoctor], radius_m: float):
    st.markdown(f"### 📍 Doctors within {format_distance(radius_m)}")
    if user_location() is None:
        st.caption("Set your location in the sidebar to see doctors near you.")
        return
    if not entries:
        st.caption("No doctors found near your location.")
        return
    for entry in entries:
        col1, col2 = st.columns([4, 1])
        with col1:
            st.markdown(format_doctor_card(entry.doctor, entry.distance_m))
        with col2:
            if st.button("View", key=f"nearby_{entry.doctor.id}"):
                go_to(DOCTOR_PROFILE, entry.doctor.id)


def show_home(ctx: AppContext, data: UserData):
    with st.form("home_search"):
        query = st.text_input(
            "Search doctors, locations, or specializations",
            value=st.session_state.get("search_query", ""),
            placeholder="e.g. Panchakarma, Udupi",
        )
        if st.form_submit_button("🔍 Search", use_container_width=True):
            st.session_state.search_query = query
            st.session_state.listing_query = query
            go_to(LISTING)

    origin = user_location()
    panel = nearby(origin, data.doctors, ctx.discovery.nearby_radius_m)
    proximity_notifier(ctx).update(nearby(origin, data.doctors, ctx.settings.nearby_toast_radius_m))

    render_map(data.doctors, center=ctx.settings.default_center, zoom=10, user_location=origin)

    if st.button("View All Doctors", use_container_width=True):
        st.session_state.listing_query = ""
        go_to(LISTING)

    _render_nearby_panel(panel, ctx.discovery.nearby_radius_m)


def show_listing(ctx: AppContext, data: UserData):
    if st.button("⬅️ Back to Map"):
        go_to(HOME)
    st.markdown("## Ayurvedic Doctors")

    if "listing_query" not in st.session_state:
        st.session_state.listing_query = st.session_state.get("search_query", "")

    col1, col2 = st.columns([3, 1])
    with col1:
        query = st.text_input(
            "Search doctors, specializations, or locations",
            key="listing_query",
        )
    with col2:
        sort_key = st.selectbox(
            "Sort by",
            options=list(SORT_LABELS),
            format_func=lambda k: SORT_LABELS[k],
            key="sort_key",
        )

    selected_tags = st.multiselect("Filter by tags", options=all_tags(data.doctors), key="selected_tags")
    view = ctx.discovery.recompute(
        data.doctors, FilterState(query=query, selected_tags=selected_tags, sort_key=sort_key)
    )

    if not view.visible:
        st.info("No doctors match your search.")
        return

    st.caption(f"{len(view.visible)} doctor(s) found")
    for doctor in view.visible:
        with st.container(border=True):
            st.markdown(format_doctor_card(doctor))
            if st.button("View Profile", key=f"profile_{doctor.id}"):
                go_to(DOCTOR_PROFILE, doctor.id)


def show_doctor_profile(ctx: AppContext, data: UserData):
    doctor = find_doctor(data.doctors, st.session_state.get("selected_doctor_id"))
    if doctor is None:
        st.warning("This doctor is no longer listed.")
        if st.button("Back to Listings"):
            go_to(LISTING)
        return

    if st.button("⬅️ Back to Listings"):
        go_to(LISTING)

    left, right = st.columns([2, 1])
    with left:
        st.markdown(f"## {doctor.name}")
        st.caption(doctor.specialization)
        st.markdown(f"📍 {doctor.location}  \n⭐ {doctor.rating:g}  \n🕒 {doctor.experience}+ years of experience")

        st.markdown("#### Availability")
        rows = availability_rows(doctor)
        if rows:
            st.table({"Day": [r[0] for r in rows], "Hours": [r[1] for r in rows]})
        else:
            st.caption("No availability published.")

        if doctor.phone:
            st.markdown(f"📞 {doctor.phone}")
        if doctor.email:
            st.markdown(f"✉️ {doctor.email}")

        st.markdown(f"#### About {doctor.name}")
        st.write(doctor.about or "No biography yet.")
        if doctor.education:
            st.markdown("#### Education")
            st.write(doctor.education)
        if doctor.tags:
            st.markdown("#### Specializations")
            st.markdown(" ".join(f"`{tag}`" for tag in doctor.tags))
        if doctor.services:
            st.markdown("#### Services Offered")
            st.markdown("\n".join(f"- {s}" for s in doctor.services))

    with right:
        st.markdown("#### Book an Appointment")
        if st.button("Book Now", use_container_width=True, type="primary"):
            go_to(BOOKING, doctor.id)

        is_favorite = doctor.id in data.profile.favorite_doctors
        label = "💔 Remove from Favorites" if is_favorite else "❤️ Add to Favorites"
        if st.button(label, use_container_width=True):
            ctx.profiles.toggle_favorite(data.profile.id, doctor.id)
            st.rerun()

        st.markdown("#### Location")
        if doctor.coordinate is not None:
            render_map([doctor], center=(doctor.lat, doctor.lng), zoom=14, height=220)
        else:
            st.caption("Location not available.")


def show_booking(ctx: AppContext, data: UserData):
    doctor = find_doctor(data.doctors, st.session_state.get("selected_doctor_id"))
    if doctor is None:
        st.warning("Select a doctor first.")
        if st.button("Back to Listings"):
            go_to(LISTING)
        return

    if st.button("⬅️ Back to Doctor Profile"):
        go_to(DOCTOR_PROFILE)

    st.markdown(f"## Book an Appointment with {doctor.name}")
    profile = data.profile
    with st.form("booking_form"):
        visit_date = st.date_input("Date", value=None)
        time_slot = st.selectbox(
            "Time",
            options=list(TIME_SLOTS),
            format_func=lambda slot: TIME_SLOTS[slot],
            index=None,
            placeholder="Select a time slot",
        )
        patient_name = st.text_input("Full Name", value=profile.full_name)
        email = st.text_input("Email", value=profile.email)
        phone = st.text_input("Phone Number", value=profile.phone)
        reason = st.text_area("Reason for Visit", placeholder="Briefly describe your reason for the appointment")
        submitted = st.form_submit_button("Confirm Booking", use_container_width=True)

    if not submitted:
        return

    date_ok, date_error = validate_visit_date(visit_date, doctor.availability)
    if not date_ok:
        st.error(f"❌ {date_error}")
        return

    try:
        request = AppointmentRequest(
            date=visit_date,
            time=time_slot or "",
            patient_name=patient_name,
            email=email,
            phone=phone,
            reason=reason,
        )
    except ValidationError as e:
        for message in validation_messages(e):
            st.error(f"❌ {message}")
        return

    user = current_user() or {}
    try:
        ctx.appointments.book(doctor, request, user.get("uid", profile.id))
    except Exception as e:
        logger.exception("Booking failed: %s", e)
        st.error("❌ Failed to book appointment. Please try again.")
        return
    go_to(USER_PROFILE)
