"""Form validators for sign-up, profile and booking input.

Each validator returns ``(is_valid, error_message)``; the message is empty
when the value is valid.
"""
import datetime
import re
from typing import Dict, Optional, Tuple

from src.domain.models import DayAvailability


EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')
NAME_PATTERN = re.compile(r"^[a-zA-Z\s.\-']+$")
PHONE_PATTERN = re.compile(r'^\+?[\d\s\-()]+$')
SPECIAL_CHARS = re.compile(r'[!@#$%^&*(),.?":{}|<>_\-+=\[\]\\\/;\'`~]')


def validate_email(email: str) -> Tuple[bool, str]:
    if not email or not email.strip():
        return False, "Email is required"

    email = email.strip().lower()
    if not EMAIL_PATTERN.match(email):
        return False, "Invalid email format"
    if len(email) > 254:  # RFC 5321
        return False, "Email is too long"

    local_part, _ = email.rsplit('@', 1)
    if len(local_part) > 64:
        return False, "Email local part is too long"
    if '..' in email:
        return False, "Email cannot contain consecutive dots"
    if local_part.startswith('.') or local_part.endswith('.'):
        return False, "Email local part cannot start or end with a dot"

    return True, ""


def validate_password(password: str) -> Tuple[bool, str]:
    """
    At least 8 characters with an uppercase letter, a lowercase letter,
    a number and a special character.
    """
    if not password:
        return False, "Password is required"
    if len(password) < 8:
        return False, "Password must be at least 8 characters long"
    if len(password) > 128:
        return False, "Password is too long (max 128 characters)"

    checks = [
        (r'[A-Z]', "uppercase letter"),
        (r'[a-z]', "lowercase letter"),
        (r'\d', "number"),
    ]
    for pattern, what in checks:
        if not re.search(pattern, password):
            return False, f"Password must contain at least one {what}"
    if not SPECIAL_CHARS.search(password):
        return False, "Password must contain at least one special character"

    return True, ""


def validate_name(name: str, field_name: str = "Full name") -> Tuple[bool, str]:
    if not name or not name.strip():
        return False, f"{field_name} is required"

    name = name.strip()
    if len(name) < 2:
        return False, f"{field_name} must be at least 2 characters long"
    if len(name) > 100:
        return False, f"{field_name} is too long (max 100 characters)"
    if not NAME_PATTERN.match(name):
        return False, f"{field_name} can only contain letters, spaces, dots, hyphens, and apostrophes"

    return True, ""


def validate_phone(phone: str) -> Tuple[bool, str]:
    if not phone or not phone.strip():
        return False, "Phone number is required"
    if not PHONE_PATTERN.match(phone.strip()):
        return False, "Phone number can only contain digits, spaces, hyphens, parentheses and a leading +"

    digits = re.sub(r'\D', '', phone)
    if not 7 <= len(digits) <= 15:  # E.164 allows at most 15 digits
        return False, "Phone number must have between 7 and 15 digits"

    return True, ""


def passwords_match(password: str, confirm_password: str) -> Tuple[bool, str]:
    if password != confirm_password:
        return False, "Passwords do not match"
    return True, ""


def validate_visit_date(
    visit_date: Optional[datetime.date],
    availability: Dict[str, DayAvailability],
    today: Optional[datetime.date] = None,
) -> Tuple[bool, str]:
    """
    A visit must not be in the past and must not fall on a weekday the
    doctor has marked unavailable. Weekdays missing from the availability
    table are allowed.
    """
    if visit_date is None:
        return False, "Date is required"

    today = today or datetime.date.today()
    if visit_date < today:
        return False, "Date cannot be in the past"

    weekday = visit_date.strftime("%A")
    day = availability.get(weekday)
    if day is not None and not day.is_available:
        return False, f"The doctor is not available on {weekday}s"

    return True, ""
