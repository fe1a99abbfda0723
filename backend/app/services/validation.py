"""
Field rules shared by registration, admin add-user and admin add-store.
Each check returns the normalized value or raises ValueError with a client-facing message;
pydantic validators in app.schemas call these, and services call them for direct use.
"""
import re

from email_validator import EmailNotValidError, validate_email

from app.errors import ValidationError
from app.models.user import ROLES

NAME_MIN_LENGTH = 20
NAME_MAX_LENGTH = 60
ADDRESS_MAX_LENGTH = 400
RATING_MIN = 1
RATING_MAX = 5
# Largest id an Integer primary key can hold on every supported backend
MAX_ID = 2**31 - 1

# 8-16 chars from [A-Za-z0-9_!@#$%^&*], at least one uppercase and one of !@#$%^&*
PASSWORD_RE = re.compile(r"^(?=.*[A-Z])(?=.*[!@#$%^&*])[A-Za-z0-9_!@#$%^&*]{8,16}$")

PASSWORD_POLICY_MSG = (
    "Password must be 8-16 characters with at least one uppercase letter "
    "and one special character (!@#$%^&*)"
)


def check_name(value: str) -> str:
    value = (value or "").strip()
    if not NAME_MIN_LENGTH <= len(value) <= NAME_MAX_LENGTH:
        raise ValueError(f"Name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters")
    return value


def check_address(value: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError("Address is required")
    if len(value) > ADDRESS_MAX_LENGTH:
        raise ValueError(f"Address must be at most {ADDRESS_MAX_LENGTH} characters")
    return value


def check_email(value: str) -> str:
    """Same rules as pydantic's EmailStr (email-validator, no DNS lookup), then lower-cased."""
    try:
        info = validate_email((value or "").strip(), check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(f"value is not a valid email address: {e}") from e
    return normalize_email(info.normalized)


def normalize_email(value: str) -> str:
    return value.strip().lower()


def is_id(value) -> bool:
    """Positive integer that fits the id column. bool is rejected like in check_rating."""
    return not isinstance(value, bool) and isinstance(value, int) and 1 <= value <= MAX_ID


def check_id(value, label: str) -> int:
    if not is_id(value):
        raise ValueError(f"{label} must be a positive integer")
    return value


def check_password(value: str) -> str:
    if not PASSWORD_RE.match(value or ""):
        raise ValueError(PASSWORD_POLICY_MSG)
    return value


def check_role(value: str) -> str:
    value = (value or "").strip()
    if value not in ROLES:
        raise ValueError(f"Invalid role. Must be one of: {', '.join(ROLES)}")
    return value


def check_rating(value) -> int:
    """Integer in [1, 5]. bool is an int subclass and is rejected explicitly."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Rating must be an integer between {RATING_MIN} and {RATING_MAX}")
    if not RATING_MIN <= value <= RATING_MAX:
        raise ValueError(f"Rating must be an integer between {RATING_MIN} and {RATING_MAX}")
    return value


def collect(checks: dict) -> dict:
    """
    Run {field: (check, value)} and return {field: normalized}.
    Raises ValidationError listing every violation, in field order.
    """
    out, problems = {}, []
    for field, (check, value) in checks.items():
        try:
            out[field] = check(value)
        except ValueError as e:
            problems.append(str(e))
    if problems:
        raise ValidationError("; ".join(problems))
    return out
