"""
ISO calendar-date helpers.

Holiday dates are pure (year, month, day) triples. They are never converted
to datetimes, so no timezone can shift them by a day.
"""
import re
from datetime import date

_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def parse_holiday_date(value: str) -> date:
    """
    Parse a YYYY-MM-DD string into a date.
    Raises ValueError for any other shape or for impossible dates (2025-02-30).
    """
    match = _ISO_DATE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ValueError(f"Invalid holiday date: {value!r}")
    year, month, day = (int(part) for part in match.groups())
    return date(year, month, day)


def format_holiday_date(value: date) -> str:
    """Format a date as YYYY-MM-DD."""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
