"""Tests for calendar-day utilities and relative date parsing."""

import pytest
from datetime import date, datetime

from caixa.utils.dates import (
    add_days,
    format_day,
    get_date_range,
    is_calendar_day,
    is_weekend,
    next_business_day,
    parse_date,
    parse_day,
)

# Wednesday
FIXED = date(2025, 11, 5)


def clock():
    return FIXED


def test_parse_day_strict():
    """Test parsing strict YYYY-MM-DD days."""
    assert parse_day("2025-11-03") == date(2025, 11, 3)
    assert parse_day(" 2024-02-29 ") == date(2024, 2, 29)


@pytest.mark.parametrize("value", ["2025-13-01", "2025-02-30", "03/11/2025", "", "tomorrow"])
def test_parse_day_rejects_malformed(value):
    """Test that malformed days are rejected."""
    with pytest.raises(ValueError):
        parse_day(value)


def test_format_day_round_trip():
    """Test formatting a day back to its string form."""
    assert format_day(date(2025, 1, 9)) == "2025-01-09"
    assert parse_day(format_day(date(2025, 1, 9))) == date(2025, 1, 9)


def test_add_days_crosses_month_and_year():
    """Test calendar arithmetic across boundaries."""
    assert add_days(date(2025, 10, 31), 1) == date(2025, 11, 1)
    assert add_days(date(2025, 12, 31), 1) == date(2026, 1, 1)
    assert add_days(date(2025, 3, 1), -1) == date(2025, 2, 28)


def test_is_calendar_day():
    """Test only plain dates count as calendar days."""
    assert is_calendar_day(date(2025, 11, 5))
    assert not is_calendar_day(datetime(2025, 11, 5, 23, 59))
    assert not is_calendar_day("2025-11-05")
    assert not is_calendar_day(None)


def test_is_weekend():
    """Test weekend detection."""
    assert not is_weekend(date(2025, 11, 7))  # Friday
    assert is_weekend(date(2025, 11, 8))  # Saturday
    assert is_weekend(date(2025, 11, 9))  # Sunday
    assert not is_weekend(date(2025, 11, 10))  # Monday


def test_next_business_day():
    """Test next business day skips weekends only."""
    assert next_business_day(date(2025, 11, 5)) == date(2025, 11, 6)
    assert next_business_day(date(2025, 11, 7)) == date(2025, 11, 10)
    assert next_business_day(date(2025, 11, 8)) == date(2025, 11, 10)


def test_parse_relative_dates():
    """Test parsing today, yesterday and tomorrow."""
    assert parse_date("today", clock=clock) == FIXED
    assert parse_date("Yesterday", clock=clock) == date(2025, 11, 4)
    assert parse_date("tomorrow", clock=clock) == date(2025, 11, 6)


def test_parse_last_weekday():
    """Test parsing 'last <weekday>'."""
    assert parse_date("last monday", clock=clock) == date(2025, 11, 3)
    # Same weekday goes back a full week
    assert parse_date("last wednesday", clock=clock) == date(2025, 10, 29)


def test_parse_this_and_last_periods():
    """Test parsing month and week anchors."""
    assert parse_date("this month", clock=clock) == date(2025, 11, 1)
    assert parse_date("this week", clock=clock) == date(2025, 11, 3)
    assert parse_date("last month", clock=clock) == date(2025, 10, 1)
    assert parse_date("last week", clock=clock) == date(2025, 10, 27)


def test_parse_absolute_dates():
    """Test ISO and day-first absolute dates."""
    assert parse_date("2025-11-03") == date(2025, 11, 3)
    assert parse_date("03/11/2025") == date(2025, 11, 3)


def test_parse_invalid_date():
    """Test that garbage raises ValueError."""
    with pytest.raises(ValueError):
        parse_date("not a date at all")


def test_get_date_range_this_month():
    """Test this-month range ends today."""
    assert get_date_range("this-month", clock=clock) == (date(2025, 11, 1), FIXED)


def test_get_date_range_last_month():
    """Test last-month covers the whole previous month."""
    assert get_date_range("last-month", clock=clock) == (date(2025, 10, 1), date(2025, 10, 31))


def test_get_date_range_weeks():
    """Test week ranges start on Monday."""
    assert get_date_range("this-week", clock=clock) == (date(2025, 11, 3), FIXED)
    assert get_date_range("last-week", clock=clock) == (date(2025, 10, 27), date(2025, 11, 2))


def test_get_date_range_unknown():
    """Test unknown periods are rejected."""
    with pytest.raises(ValueError, match="Unknown period"):
        get_date_range("next-year", clock=clock)
