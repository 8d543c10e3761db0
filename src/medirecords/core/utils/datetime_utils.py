"""
Date and time utility functions for MediRecords application.
"""

from datetime import date, datetime, timezone
from typing import Optional, Union

DAYS_PER_YEAR = 365.25

DateLike = Union[str, date, datetime]


def get_current_timestamp() -> datetime:
    """Get current UTC timestamp."""
    return datetime.now(timezone.utc)


def parse_date(value: DateLike) -> date:
    """Coerce an ISO ``YYYY-MM-DD`` string, date or datetime to a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            # Stored values may carry a time part ("1990-05-01T00:00:00")
            return datetime.strptime(value.strip()[:10], "%Y-%m-%d").date()
        except ValueError:
            raise ValueError("Invalid date format. Use YYYY-MM-DD")
    raise ValueError(f"Unsupported date value: {type(value).__name__}")


def compute_age(dob: Optional[DateLike], now: DateLike) -> Optional[int]:
    """
    Derive an age in whole years from a date of birth.

    Uses elapsed days divided by 365.25, truncated toward zero. ``now`` is
    always supplied by the caller so results are reproducible.

    A missing ``dob`` yields ``None``. A ``dob`` after ``now`` yields zero or a
    negative number; callers decide what that means.
    """
    if dob is None:
        return None

    elapsed_days = (parse_date(now) - parse_date(dob)).days
    return int(elapsed_days / DAYS_PER_YEAR)
