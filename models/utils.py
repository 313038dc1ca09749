import re
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from models.fields import SESSION_DATE_FORMAT

SESSION_DATE_RE = re.compile(r'^\d{4}-\d{2}-\d{2}$')


class InvalidDateError(ValueError):
    """Raised when a session date is not YYYY-MM-DD or names an unknown zone"""


def parse_session_date(date_str, timezone_name):
    """
    Parse a YYYY-MM-DD string as midnight in the document's time zone.

    Only the calendar day reaches the sheet: it is written back as a
    user-entered YYYY-MM-DD string, and Google parses that in the
    document's own locale, which is what pins the stored date. The zone
    lookup here rejects documents whose time zone cannot be resolved.
    """
    if not isinstance(date_str, str) or not SESSION_DATE_RE.match(date_str.strip()):
        raise InvalidDateError(f"Expected a date like 2025-09-17, got {date_str!r}")
    try:
        zone = ZoneInfo(timezone_name or 'UTC')
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise InvalidDateError(f"Unknown time zone {timezone_name!r}") from e
    try:
        parsed = datetime.strptime(date_str.strip(), SESSION_DATE_FORMAT)
    except ValueError as e:
        raise InvalidDateError(f"Invalid calendar date {date_str!r}") from e
    return parsed.replace(tzinfo=zone)


def session_header_value(session_date):
    """Value written to the header cell; Google parses it as a date"""
    return session_date.strftime(SESSION_DATE_FORMAT)


def require_index(value, label):
    """Coerce a 1-based row/column index, rejecting zero, negatives and junk"""
    if isinstance(value, bool):
        raise ValueError(f"{label} must be a positive integer, got {value!r}")
    try:
        index = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{label} must be a positive integer, got {value!r}")
    if index != value and str(index) != str(value).strip():
        raise ValueError(f"{label} must be a positive integer, got {value!r}")
    if index < 1:
        raise ValueError(f"{label} must be a positive integer, got {value!r}")
    return index
