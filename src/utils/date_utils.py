"""Date utility functions for birthday fields."""
from datetime import date, datetime
from typing import Optional, Union


def parse_date(date_str: str) -> datetime:
    """
    Parse date string in YYYY-MM-DD format.

    Args:
        date_str: Date string (e.g., "2008-11-15")

    Returns:
        datetime object

    Raises:
        ValueError: If date format is invalid
    """
    return datetime.strptime(date_str, "%Y-%m-%d")


def to_date_string(value: Union[date, datetime, str, None]) -> str:
    """
    Format a date-like value for the wire.

    Args:
        value: date/datetime from a date picker, an existing string, or None

    Returns:
        "YYYY-MM-DD", the string unchanged, or "" for None
    """
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def parse_birthday(value: Optional[str]) -> Optional[date]:
    """
    Parse a stored birthday for pre-filling a date picker.

    Accepts plain dates and ISO timestamps ("2008-05-01T00:00:00.000Z") as
    returned by the backend. Returns None if the value can't be parsed.
    """
    if not value or not isinstance(value, str):
        return None
    candidate = value.strip()[:10]
    try:
        return parse_date(candidate).date()
    except ValueError:
        return None
