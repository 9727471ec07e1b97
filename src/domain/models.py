import math
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, validator


class Coordinate(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0)
    lng: float = Field(..., ge=-180.0, le=180.0)


class DayAvailability(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_available: bool = Field(False, alias="isAvailable")
    times: str = ""


def _coordinate_or_none(v, limit: float) -> Optional[float]:
    # a typo like 133.4 for 13.34 must not break distance or map code
    try:
        value = float(v)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or abs(value) > limit:
        return None
    return value


class Doctor(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    name: str
    specialization: str = ""
    location: str = ""
    rating: float = 0.0
    lat: Optional[float] = None
    lng: Optional[float] = None
    experience: int = Field(0, ge=0)
    tags: List[str] = []
    about: str = ""
    services: List[str] = []
    education: str = ""
    availability: Dict[str, DayAvailability] = {}
    phone: str = ""
    email: str = ""

    @validator("tags", "services", pre=True)
    def missing_list_is_empty(cls, v):
        return v or []

    @validator("availability", pre=True)
    def missing_availability_is_empty(cls, v):
        return v or {}

    @validator("specialization", "location", "about", "education", "phone", "email", pre=True)
    def missing_text_is_empty(cls, v):
        return "" if v is None else v

    @validator("lat", pre=True)
    def invalid_latitude_is_missing(cls, v):
        return _coordinate_or_none(v, 90.0)

    @validator("lng", pre=True)
    def invalid_longitude_is_missing(cls, v):
        return _coordinate_or_none(v, 180.0)

    @property
    def coordinate(self) -> Optional[Coordinate]:
        if self.lat is None or self.lng is None:
            return None
        return Coordinate(lat=self.lat, lng=self.lng)


class AppointmentStatus(str, Enum):
    SCHEDULED = "scheduled"
    RESCHEDULING = "rescheduling"
    CANCELLED = "cancelled"


class Appointment(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    user_id: str = Field("", alias="userId")
    doctor_id: str = Field("", alias="doctorId")
    doctor_name: str = Field("", alias="doctorName")
    date: str = ""
    time: str = ""
    patient_name: str = Field("", alias="patientName")
    email: str = ""
    phone: str = ""
    reason: str = ""
    status: AppointmentStatus = AppointmentStatus.SCHEDULED


class UserProfile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    full_name: str = Field("", alias="fullName")
    email: str = ""
    phone: str = ""
    favorite_doctors: List[str] = Field([], alias="favoriteDoctors")

    @validator("favorite_doctors", pre=True)
    def missing_favorites_is_empty(cls, v):
        return v or []


class SortKey(str, Enum):
    RATING = "rating"
    EXPERIENCE = "experience"
    NAME = "name"


class TagMatchPolicy(str, Enum):
    ANY = "any"  # some selected tag is on the doctor
    ALL = "all"  # every selected tag is on the doctor


class FilterState(BaseModel):
    query: str = ""
    selected_tags: List[str] = []
    sort_key: SortKey = SortKey.RATING
    tag_policy: TagMatchPolicy = TagMatchPolicy.ANY


class NearbyDoctor(BaseModel):
    doctor: Doctor
    distance_m: float


def to_record(model: BaseModel) -> dict:
    """Serialize a record for the profile store, using the store's field names and without its id."""
    return model.model_dump(by_alias=True, exclude={"id"}, mode="json")
