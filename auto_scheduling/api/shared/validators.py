"""
Scheduling Validators

Checks applied to the inputs of the slot search entry points: local
calendar dates, record ids and the viewer's timezone.
"""

import re
from datetime import date, datetime

import pytz


# Same limit as the task/calendar id columns
MAX_RECORD_ID_LENGTH = 140

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f]")


class ValidationError(ValueError):
    """Invalid input from the caller."""
    pass


def validate_date(value, field_name: str = "date") -> date:
    """
    Parse a local calendar date (YYYY-MM-DD).

    Args:
        value: "2026-01-20" or a date
        field_name: Name of field for error messages

    Returns:
        date: Parsed date

    Raises:
        ValidationError: If the value is missing, malformed or not a real day
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    if not value:
        raise ValidationError(f"{field_name} is required")

    text = str(value).strip()
    if not _DATE_RE.match(text):
        raise ValidationError(f"Invalid {field_name} format. Use YYYY-MM-DD")

    try:
        return date.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"Invalid {field_name}: {text}")


def validate_record_id(record_id, field_name: str = "id") -> str:
    """
    Validate an opaque record id (task id, calendar id).

    Ids are passed through to the collaborators untouched, so only
    presence, length and control characters are checked.

    Raises:
        ValidationError: If the id is empty, too long or has control characters
    """
    if record_id is None:
        raise ValidationError(f"{field_name} is required")

    record_id = str(record_id).strip()
    if not record_id:
        raise ValidationError(f"{field_name} is required")

    if len(record_id) > MAX_RECORD_ID_LENGTH:
        raise ValidationError(f"{field_name} is too long (max {MAX_RECORD_ID_LENGTH} characters)")

    if _CONTROL_CHARS_RE.search(record_id):
        raise ValidationError(f"{field_name} contains control characters")

    return record_id


def validate_time_zone(tz_name, field_name: str = "time_zone") -> str:
    """
    Validate an IANA timezone name (e.g. "America/Bogota").

    Raises:
        ValidationError: If the zone is missing or unknown
    """
    if not tz_name:
        raise ValidationError(f"{field_name} is required")

    tz_name = str(tz_name).strip()

    try:
        pytz.timezone(tz_name)
    except pytz.UnknownTimeZoneError:
        raise ValidationError(f"Unknown {field_name}: {tz_name}")

    return tz_name
