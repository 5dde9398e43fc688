import re
from typing import Optional

STATUS_AVAILABLE = "available"
STATUS_ASSIGNED = "assigned"
STATUS_UNDER_MAINTENANCE = "under maintenance"

VALID_STATUSES = (STATUS_AVAILABLE, STATUS_ASSIGNED, STATUS_UNDER_MAINTENANCE)

_WHITESPACE = re.compile(r"\s+")
# ASCII only, checked before lower-casing: some non-ASCII letters fold to ASCII
_SERIAL_FORMAT = re.compile(r"^[A-Za-z0-9]+$")


def _ensure_text(value: object, field_name: str) -> str:
    # before-validators see raw JSON; anything but a string is a malformed field
    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a string")
    return value


def blank_to_none(value: Optional[str], field_name: str = "value") -> Optional[str]:
    if value is None:
        return None
    value = _ensure_text(value, field_name).strip()
    if value == "":
        return None
    return value


def require_text(value: Optional[str], field_name: str) -> str:
    value = blank_to_none(value, field_name)
    if value is None:
        raise ValueError(f"{field_name} is required")
    return value


def normalize_serial_number(serial_number: Optional[str]) -> str:
    """Strip every whitespace character and lower-case.

    Raises ValueError when nothing is left or when the stripped value is not
    purely ASCII alphanumeric.
    """
    if serial_number is None:
        serial_number = ""
    serial = _WHITESPACE.sub("", _ensure_text(serial_number, "serialNumber"))
    if not serial:
        raise ValueError("Serial number cannot be empty")
    if not _SERIAL_FORMAT.match(serial):
        raise ValueError("Serial number must contain only letters and numbers")
    return serial.lower()


def normalize_status(status: Optional[str], *, default: Optional[str] = None) -> str:
    """Case-insensitive status check; returns the stored (lower-case) form."""
    value = blank_to_none(status, "status")
    if value is None:
        if default is not None:
            return default
        raise ValueError("status is required")
    value = value.lower()
    if value not in VALID_STATUSES:
        raise ValueError(
            "Status must be one of: " + ", ".join(VALID_STATUSES)
        )
    return value


def status_filter(status: Optional[str]) -> Optional[str]:
    # list filter: exact match on the case-folded value, unknown values are passed through
    value = blank_to_none(status, "status")
    return value.lower() if value else None


def normalize_email(email: Optional[str]) -> str:
    value = require_text(email, "email").lower()
    if "@" not in value:
        raise ValueError("email is not valid")
    return value
