"""
Age derivation tests.
"""

from datetime import date, datetime, timezone

import pytest

from medirecords.core.utils.datetime_utils import compute_age, parse_date


def test_missing_dob_returns_none():
    assert compute_age(None, date(2024, 1, 1)) is None
    assert compute_age(None, datetime.now(timezone.utc)) is None


def test_known_birthday():
    assert compute_age(date(2000, 1, 1), date(2024, 1, 1)) == 24


def test_day_before_birthday_has_not_aged():
    assert compute_age(date(2000, 6, 15), date(2024, 6, 13)) == 23


def test_accepts_iso_strings_and_datetimes():
    now = datetime(2024, 1, 1, 23, 59, tzinfo=timezone.utc)
    assert compute_age("2000-01-01", now) == 24
    assert compute_age("2000-01-01T00:00:00", "2024-01-01") == 24


def test_future_dob_is_non_positive_without_error():
    today = date(2024, 1, 1)
    assert compute_age(date(2024, 6, 1), today) == 0
    assert compute_age(date(2030, 1, 1), today) < 0


def test_newborn_is_zero():
    assert compute_age(date(2024, 1, 1), date(2024, 1, 1)) == 0


def test_invalid_date_string_raises():
    with pytest.raises(ValueError):
        parse_date("01/02/2000")
