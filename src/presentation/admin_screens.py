import logging

import streamlit as st
from pydantic import ValidationError

from src.application.schemas import NewDoctorForm
from src.presentation.context import AppContext
from src.presentation.doctor_screens import validation_messages


logger = logging.getLogger(__name__)


def _delete_button(label_key: str, action, record_id: str):
    if st.button("Delete", key=f"delete_{label_key}_{record_id}", type="primary"):
        try:
            action(record_id)
        except Exception as e:
            logger.exception("Admin delete of %s %s failed: %s", label_key, record_id, e)
            st.error("❌ Delete failed. Please try again.")
            return
        st.rerun()


def _add_doctor(ctx: AppContext, form: NewDoctorForm) -> bool:
    try:
        doctor = ctx.admin.add_doctor(form)
    except Exception as e:
        logger.exception("Admin add of doctor %s failed: %s", form.name, e)
        st.error("❌ Failed to add doctor. Please try again.")
        return False
    st.success(f"✅ Added {doctor.name}")
    return True


def _doctors_tab(ctx: AppContext):
    st.markdown("### Add New Doctor")
    with st.form("add_doctor_form", clear_on_submit=True):
        name = st.text_input("Name")
        specialization = st.text_input("Specialization")
        location = st.text_input("Location")
        rating = st.number_input("Rating", min_value=0.0, max_value=5.0, step=0.1)
        lat = st.number_input("Latitude", min_value=-90.0, max_value=90.0, format="%.6f")
        lng = st.number_input("Longitude", min_value=-180.0, max_value=180.0, format="%.6f")
        submitted = st.form_submit_button("Add Doctor")

    if submitted:
        try:
            form = NewDoctorForm(
                name=name.strip(),
                specialization=specialization.strip(),
                location=location.strip(),
                rating=rating,
                lat=lat,
                lng=lng,
            )
        except ValidationError as e:
            for message in validation_messages(e):
                st.error(f"❌ {message}")
        else:
            _add_doctor(ctx, form)

    st.markdown("### Doctors List")
    for doctor in ctx.admin.doctors():
        cols = st.columns([3, 3, 2, 1, 1])
        cols[0].write(doctor.name)
        cols[1].write(doctor.specialization)
        cols[2].write(doctor.location)
        cols[3].write(f"{doctor.rating:g}")
        with cols[4]:
            _delete_button("doctor", ctx.admin.delete_doctor, doctor.id)


def _appointments_tab(ctx: AppContext):
    st.markdown("### Appointments List")
    appointments = ctx.admin.appointments()
    if not appointments:
        st.caption("No appointments.")
    for appointment in appointments:
        cols = st.columns([3, 3, 2, 1, 1, 1])
        cols[0].write(appointment.doctor_name)
        cols[1].write(appointment.patient_name)
        cols[2].write(appointment.date)
        cols[3].write(appointment.time)
        cols[4].write(appointment.status.value)
        with cols[5]:
            _delete_button("appointment", ctx.admin.delete_appointment, appointment.id)


def _users_tab(ctx: AppContext):
    st.markdown("### User Profiles")
    profiles = ctx.admin.user_profiles()
    if not profiles:
        st.caption("No user profiles.")
    for profile in profiles:
        cols = st.columns([3, 3, 2, 1])
        cols[0].write(profile.full_name or "-")
        cols[1].write(profile.email)
        cols[2].write(profile.phone)
        with cols[3]:
            _delete_button("user", ctx.admin.delete_user_profile, profile.id)


def show_admin_panel(ctx: AppContext):
    st.markdown("# Admin Panel")
    doctors_tab, appointments_tab, users_tab = st.tabs(["Doctors", "Appointments", "User Profiles"])
    with doctors_tab:
        _doctors_tab(ctx)
    with appointments_tab:
        _appointments_tab(ctx)
    with users_tab:
        _users_tab(ctx)
