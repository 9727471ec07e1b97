import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from src.application.ports import (
    APPOINTMENTS,
    DOCTORS,
    USER_PROFILES,
    NotifierPort,
    ProfileStorePort,
)
from src.application.schemas import AppointmentRequest, NewDoctorForm, ProfileUpdate
from src.domain.models import Appointment, AppointmentStatus, Doctor, UserProfile, to_record


logger = logging.getLogger(__name__)

Record = TypeVar("Record", bound=BaseModel)


class InvalidTransitionError(ValueError):
    pass


class UserData:
    def __init__(self, profile: UserProfile, appointments: List[Appointment], doctors: List[Doctor]):
        self.profile = profile
        self.appointments = appointments
        self.doctors = doctors


def _with_id(record_id: str, record: Dict[str, Any]) -> Dict[str, Any]:
    # some stored records carry a stale copy of their own id in the body
    return {**record, "id": record_id}


def _parse_records(model: Type[Record], collection: str, rows: Iterable[Tuple[str, Dict[str, Any]]]) -> List[Record]:
    """Build models from stored rows, skipping any record that fails validation."""
    parsed = []
    for record_id, record in rows:
        try:
            parsed.append(model(**_with_id(record_id, record)))
        except ValidationError as e:
            logger.warning("Skipping malformed %s record %s: %s", collection, record_id, e)
    return parsed


def load_doctors(store: ProfileStorePort) -> List[Doctor]:
    return _parse_records(Doctor, DOCTORS, store.list(DOCTORS))


def _load_appointments(store: ProfileStorePort, where: Optional[Dict[str, Any]] = None) -> List[Appointment]:
    return _parse_records(Appointment, APPOINTMENTS, store.list(APPOINTMENTS, where))


class AppointmentService:
    def __init__(self, store: ProfileStorePort, notifier: NotifierPort):
        self.store = store
        self.notifier = notifier

    def for_user(self, user_id: str) -> List[Appointment]:
        return _load_appointments(self.store, {"userId": user_id})

    def book(self, doctor: Doctor, request: AppointmentRequest, user_id: str) -> Appointment:
        appointment = Appointment(
            user_id=user_id,
            doctor_id=doctor.id,
            doctor_name=doctor.name,
            date=request.date.isoformat(),
            time=request.time,
            patient_name=request.patient_name,
            email=request.email,
            phone=request.phone,
            reason=request.reason,
            status=AppointmentStatus.SCHEDULED,
        )
        try:
            appointment.id = self.store.add(APPOINTMENTS, to_record(appointment))
        except Exception:
            logger.exception("Error adding appointment for doctor %s", doctor.id)
            self.notifier.notify("Error", "Failed to book appointment. Please try again.")
            raise
        logger.info("Appointment %s booked with doctor %s", appointment.id, doctor.id)
        self.notifier.notify("Appointment Booked", "Your appointment has been successfully booked.")
        return appointment

    def cancel(self, appointment_id: str) -> None:
        self._set_status(
            appointment_id,
            AppointmentStatus.CANCELLED,
            "Appointment Cancelled",
            "Your appointment has been cancelled successfully.",
            "Failed to cancel appointment. Please try again.",
        )

    def request_reschedule(self, appointment: Appointment) -> None:
        if appointment.status != AppointmentStatus.SCHEDULED:
            raise InvalidTransitionError(
                f"Cannot request a reschedule for a {appointment.status.value} appointment"
            )
        self._set_status(
            appointment.id,
            AppointmentStatus.RESCHEDULING,
            "Reschedule Requested",
            "Your reschedule request has been sent to the doctor.",
            "Failed to request reschedule. Please try again.",
        )
        appointment.status = AppointmentStatus.RESCHEDULING

    def _set_status(self, appointment_id: str, status: AppointmentStatus, title: str, ok: str, failed: str) -> None:
        try:
            self.store.update(APPOINTMENTS, appointment_id, {"status": status.value})
        except Exception:
            logger.exception("Error setting appointment %s to %s", appointment_id, status.value)
            self.notifier.notify("Error", failed)
            raise
        logger.info("Appointment %s is now %s", appointment_id, status.value)
        self.notifier.notify(title, ok)


class ProfileService:
    def __init__(self, store: ProfileStorePort, notifier: NotifierPort):
        self.store = store
        self.notifier = notifier

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        record = self.store.get(USER_PROFILES, user_id)
        if record is None:
            return None
        return UserProfile(**_with_id(user_id, record))

    def load_user_data(self, user_id: str, claims: Optional[Dict[str, Any]] = None) -> UserData:
        """Profile, appointments and the doctor directory for a signed-in user.

        A user without a profile gets an empty one, seeded from the identity
        claims when those are given.
        """
        profile = self.get_profile(user_id)
        if profile is None:
            claims = claims or {}
            profile = UserProfile(
                id=user_id,
                full_name=claims.get("full_name") or "",
                email=claims.get("email") or "",
                phone=claims.get("phone") or "",
            )
            self.store.set(USER_PROFILES, user_id, to_record(profile))
            logger.info("Created profile for user %s", user_id)

        appointments = _load_appointments(self.store, {"userId": user_id})
        doctors = load_doctors(self.store)
        return UserData(profile=profile, appointments=appointments, doctors=doctors)

    def update_profile(self, user_id: str, update: ProfileUpdate) -> UserProfile:
        changes = {}
        if update.full_name is not None:
            changes["fullName"] = update.full_name.strip()
        if update.email is not None:
            changes["email"] = update.email.strip().lower()
        if update.phone is not None:
            changes["phone"] = update.phone.strip()

        try:
            if changes:
                self.store.update(USER_PROFILES, user_id, changes)
        except Exception:
            logger.exception("Error updating user profile %s", user_id)
            self.notifier.notify("Error", "Failed to update profile. Please try again.")
            raise
        self.notifier.notify("Profile Updated", "Your profile has been successfully updated.")
        return self.get_profile(user_id)

    def toggle_favorite(self, user_id: str, doctor_id: str) -> bool:
        """Add or remove a favorite doctor. Returns True when the doctor is now a favorite."""
        profile = self.get_profile(user_id)
        if profile is None:
            profile = UserProfile(id=user_id)
            self.store.set(USER_PROFILES, user_id, to_record(profile))

        favorites = list(profile.favorite_doctors)
        if doctor_id in favorites:
            favorites.remove(doctor_id)
            is_favorite = False
        else:
            favorites.append(doctor_id)
            is_favorite = True
        self.store.update(USER_PROFILES, user_id, {"favoriteDoctors": favorites})
        return is_favorite

    @staticmethod
    def favorite_doctors(profile: Optional[UserProfile], doctors: Sequence[Doctor]) -> List[Doctor]:
        if profile is None:
            return []
        favorites = set(profile.favorite_doctors)
        return [d for d in doctors if d.id in favorites]


class AdminService:
    """Back-office listing and record management."""

    def __init__(self, store: ProfileStorePort):
        self.store = store

    def doctors(self) -> List[Doctor]:
        return load_doctors(self.store)

    def appointments(self) -> List[Appointment]:
        return _load_appointments(self.store)

    def user_profiles(self) -> List[UserProfile]:
        return _parse_records(UserProfile, USER_PROFILES, self.store.list(USER_PROFILES))

    def add_doctor(self, form: NewDoctorForm) -> Doctor:
        doctor = Doctor(**form.model_dump())
        doctor.id = self.store.add(DOCTORS, to_record(doctor))
        logger.info("Added doctor %s (%s)", doctor.id, doctor.name)
        return doctor

    def delete_doctor(self, doctor_id: str) -> None:
        self.store.delete(DOCTORS, doctor_id)
        logger.info("Deleted doctor %s", doctor_id)

    def delete_appointment(self, appointment_id: str) -> None:
        self.store.delete(APPOINTMENTS, appointment_id)
        logger.info("Deleted appointment %s", appointment_id)

    def delete_user_profile(self, user_id: str) -> None:
        self.store.delete(USER_PROFILES, user_id)
        logger.info("Deleted user profile %s", user_id)
