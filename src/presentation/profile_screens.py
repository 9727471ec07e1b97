import logging

import streamlit as st

from src.application.schemas import ProfileUpdate
from src.application.use_cases import InvalidTransitionError, ProfileService, UserData
from src.domain.models import Appointment, AppointmentStatus
from src.infrastructure.auth.validators import validate_email, validate_name, validate_phone
from src.presentation.context import DOCTOR_PROFILE, HOME, AppContext, go_to


logger = logging.getLogger(__name__)

STATUS_BADGES = {
    AppointmentStatus.SCHEDULED: "🟢 Scheduled",
    AppointmentStatus.RESCHEDULING: "🟡 Reschedule Requested",
    AppointmentStatus.CANCELLED: "🔴 Cancelled",
}


def _personal_info_tab(ctx: AppContext, data: UserData):
    profile = data.profile
    with st.form("profile_form"):
        full_name = st.text_input("Full Name", value=profile.full_name)
        email = st.text_input("Email", value=profile.email)
        phone = st.text_input("Phone Number", value=profile.phone)
        submitted = st.form_submit_button("Update Profile")

    if not submitted:
        return

    errors = [
        error
        for valid, error in (validate_name(full_name), validate_email(email), validate_phone(phone))
        if not valid
    ]
    if errors:
        for error in errors:
            st.error(f"❌ {error}")
        return

    try:
        ctx.profiles.update_profile(profile.id, ProfileUpdate(full_name=full_name, email=email, phone=phone))
    except Exception as e:
        logger.exception("Profile update failed: %s", e)
        st.error("❌ Failed to update profile. Please try again.")
        return
    st.rerun()


def _appointment_card(ctx: AppContext, appointment: Appointment):
    with st.container(border=True):
        st.markdown(f"**{appointment.doctor_name}**  \n{appointment.date}, {appointment.time}")
        st.markdown(f"Reason: {appointment.reason}")
        st.markdown(f"Status: {STATUS_BADGES[appointment.status]}")

        if appointment.status != AppointmentStatus.SCHEDULED:
            return

        pending_key = f"confirm_reschedule_{appointment.id}"
        col1, col2 = st.columns(2)
        with col1:
            if st.button("Request Reschedule", key=f"reschedule_{appointment.id}"):
                st.session_state[pending_key] = True
        with col2:
            if st.button("Cancel", key=f"cancel_{appointment.id}", type="primary"):
                try:
                    ctx.appointments.cancel(appointment.id)
                except Exception as e:
                    logger.exception("Cancel failed: %s", e)
                    st.error("❌ Failed to cancel appointment. Please try again.")
                    return
                st.rerun()

        if st.session_state.get(pending_key):
            st.warning(
                f"Request a reschedule for your appointment with {appointment.doctor_name} "
                f"on {appointment.date} at {appointment.time}?"
            )
            keep, confirm = st.columns(2)
            with keep:
                if st.button("Keep Appointment", key=f"keep_{appointment.id}"):
                    st.session_state[pending_key] = False
                    st.rerun()
            with confirm:
                if st.button("Confirm", key=f"confirm_{appointment.id}"):
                    st.session_state[pending_key] = False
                    try:
                        ctx.appointments.request_reschedule(appointment)
                    except InvalidTransitionError as e:
                        st.error(f"❌ {e}")
                        return
                    except Exception as e:
                        logger.exception("Reschedule request failed: %s", e)
                        st.error("❌ Failed to request reschedule. Please try again.")
                        return
                    st.rerun()


def show_user_profile(ctx: AppContext, data: UserData):
    if st.button("⬅️ Back to Home"):
        go_to(HOME)
    st.markdown("## User Profile")

    info_tab, appointments_tab, favorites_tab = st.tabs(["User Info", "Appointments", "Favorite Doctors"])

    with info_tab:
        _personal_info_tab(ctx, data)

    with appointments_tab:
        if not data.appointments:
            st.caption("You have no appointments yet.")
        for appointment in data.appointments:
            _appointment_card(ctx, appointment)

    with favorites_tab:
        favorites = ProfileService.favorite_doctors(data.profile, data.doctors)
        if not favorites:
            st.caption("You have not added any favorite doctors.")
        for doctor in favorites:
            with st.container(border=True):
                st.markdown(f"**{doctor.name}**  \n{doctor.specialization}  \n📍 {doctor.location}")
                if st.button("View Profile", key=f"favorite_{doctor.id}"):
                    go_to(DOCTOR_PROFILE, doctor.id)
