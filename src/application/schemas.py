import datetime
from typing import Optional

from pydantic import BaseModel, Field, validator


TIME_SLOTS = {
    "09:00": "09:00 AM",
    "10:00": "10:00 AM",
    "11:00": "11:00 AM",
    "12:00": "12:00 PM",
}


class AppointmentRequest(BaseModel):
    date: datetime.date
    time: str
    patient_name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    reason: str = Field(..., min_length=1)

    @validator("time")
    def validate_slot(cls, v: str):
        if v not in TIME_SLOTS:
            raise ValueError(f"Time must be one of {', '.join(TIME_SLOTS)}")
        return v

    @validator("patient_name", "email", "phone", "reason", pre=True)
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class NewDoctorForm(BaseModel):
    name: str = Field(..., min_length=1)
    specialization: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    rating: float = Field(0.0, ge=0.0, le=5.0)
    lat: float = Field(..., ge=-90.0, le=90.0)
    lng: float = Field(..., ge=-180.0, le=180.0)
