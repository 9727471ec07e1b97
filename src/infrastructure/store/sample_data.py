import logging
from typing import List

from src.application.ports import DOCTORS, ProfileStorePort
from src.domain.models import DayAvailability, Doctor, to_record


logger = logging.getLogger(__name__)


def _week(times: str, closed: tuple = ("Sunday",)) -> dict:
    days = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
    return {
        day: DayAvailability(is_available=day not in closed, times=times if day not in closed else "")
        for day in days
    }


SAMPLE_DOCTORS: List[Doctor] = [
    Doctor(
        name="Dr. Ayush Sharma",
        specialization="Panchakarma",
        location="Udupi",
        rating=4.8,
        lat=13.3409,
        lng=74.7421,
        experience=15,
        tags=["Panchakarma", "Detox", "Joint Pain"],
        about="Runs a Panchakarma centre near the Krishna Matha with a focus on seasonal detox programmes.",
        services=["Vamana", "Virechana", "Abhyanga", "Shirodhara"],
        education="BAMS, MD (Panchakarma), SDM College of Ayurveda, Udupi",
        availability=_week("9:00 AM - 1:00 PM"),
        phone="+91 820 252 0000",
        email="ayush.sharma@example.com",
    ),
    Doctor(
        name="Dr. Deepa Nair",
        specialization="Nadi Pariksha",
        location="Kundapura",
        rating=4.6,
        lat=13.6269,
        lng=74.6900,
        experience=11,
        tags=["Diagnosis", "Womens Health"],
        about="Pulse diagnosis and lifestyle counselling for chronic conditions.",
        services=["Nadi Pariksha", "Diet Planning", "Herbal Prescriptions"],
        education="BAMS, Alva's Ayurveda Medical College",
        availability=_week("10:00 AM - 2:00 PM", closed=("Sunday", "Wednesday")),
        phone="+91 825 423 0000",
        email="deepa.nair@example.com",
    ),
    Doctor(
        name="Dr. Ravi Kamath",
        specialization="Kayachikitsa",
        location="Manipal",
        rating=4.6,
        lat=13.3525,
        lng=74.7928,
        experience=22,
        tags=["Joint Pain", "Diabetes", "Detox"],
        about="General Ayurvedic medicine with long-term management of metabolic disorders.",
        services=["Consultation", "Kati Basti", "Udvartana"],
        education="BAMS, MD (Kayachikitsa), Gujarat Ayurved University",
        availability=_week("9:00 AM - 12:00 PM"),
        phone="+91 820 257 0000",
        email="ravi.kamath@example.com",
    ),
    Doctor(
        name="Dr. Lakshmi Bhat",
        specialization="Shalakya Tantra",
        location="Mangaluru",
        rating=4.3,
        lat=12.9141,
        lng=74.8560,
        experience=8,
        tags=["Eye Care", "ENT"],
        about="Eye and ENT care using Netra Tarpana and Nasya therapies.",
        services=["Netra Tarpana", "Nasya", "Karna Purana"],
        education="BAMS, MS (Shalakya), KVG Ayurveda Medical College",
        availability=_week("11:00 AM - 4:00 PM"),
        phone="+91 824 244 0000",
        email="lakshmi.bhat@example.com",
    ),
]


def seed_doctors(store: ProfileStorePort, doctors: List[Doctor] = SAMPLE_DOCTORS) -> int:
    """Add the given doctors when the doctor collection is empty. Returns how many were added."""
    if store.list(DOCTORS):
        return 0
    for doctor in doctors:
        store.add(DOCTORS, to_record(doctor))
    logger.info("Seeded %d sample doctors", len(doctors))
    return len(doctors)
