"""Calendar-day utilities.

Every date in caixa is a calendar day in the restaurant's local time. Nothing
here goes through timestamps or UTC, so a sale entered at 23:59 stays on the
day it was entered.
"""

from datetime import date, datetime, timedelta
from typing import Callable, Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

Clock = Callable[[], date]

DAY_FORMAT = "%Y-%m-%d"

_WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def today() -> date:
    """Return the local calendar date."""
    return date.today()


def is_calendar_day(value) -> bool:
    """True for a plain date; datetimes carry a time of day and are not calendar days."""
    return isinstance(value, date) and not isinstance(value, datetime)


def format_day(day: date) -> str:
    """Return ``YYYY-MM-DD`` for a calendar day."""
    return day.strftime(DAY_FORMAT)


def parse_day(value: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` string.

    Raises:
        ValueError: If the string is not a valid calendar day
    """
    try:
        return datetime.strptime(value.strip(), DAY_FORMAT).date()
    except (ValueError, AttributeError) as e:
        raise ValueError(f"Invalid date '{value}', expected YYYY-MM-DD") from e


def add_days(day: date, n: int) -> date:
    """Return the calendar day ``n`` days away (``n`` may be negative)."""
    return day + timedelta(days=n)


def is_weekend(day: date) -> bool:
    """True for Saturday and Sunday."""
    return day.weekday() >= 5


def next_business_day(day: date) -> date:
    """Return the first later day that is not a weekend.

    Holidays are not considered here; see caixa.domain.settlement.
    """
    candidate = add_days(day, 1)
    while is_weekend(candidate):
        candidate = add_days(candidate, 1)
    return candidate


def parse_date(date_str: str, clock: Optional[Clock] = None) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "31/10/2025" (day first), "January 15, 2024"
    - Relative dates: "today", "yesterday", "tomorrow", "last friday", "this month"

    Args:
        date_str: Date string in various formats
        clock: Optional callable returning today's date

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    current = (clock or today)()

    relative_dates = {
        "today": current,
        "yesterday": current - timedelta(days=1),
        "tomorrow": current + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    if date_str.startswith("last "):
        period = date_str[5:]
        if period == "month":
            return (current - relativedelta(months=1)).replace(day=1)
        elif period == "week":
            return current - timedelta(days=current.weekday() + 7)
        elif period in _WEEKDAYS:
            days_ago = (current.weekday() - _WEEKDAYS.index(period)) % 7
            if days_ago == 0:
                days_ago = 7
            return current - timedelta(days=days_ago)

    elif date_str.startswith("this "):
        period = date_str[5:]
        if period == "month":
            return current.replace(day=1)
        elif period == "week":
            return current - timedelta(days=current.weekday())

    # ISO dates are year first; everything else follows the Brazilian day-first order
    try:
        return parse_day(date_str)
    except ValueError:
        pass

    try:
        return date_parser.parse(date_str, dayfirst=True).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}") from e


def get_date_range(period: str, clock: Optional[Clock] = None) -> tuple[date, date]:
    """Get start and end dates for a named period.

    Args:
        period: this-month, this-week, last-month or last-week

    Returns:
        Tuple of (start_date, end_date)

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    current = (clock or today)()

    if period == "this-month":
        return (current.replace(day=1), current)

    elif period == "this-week":
        return (current - timedelta(days=current.weekday()), current)

    elif period == "last-month":
        start_date = (current - relativedelta(months=1)).replace(day=1)
        end_date = current.replace(day=1) - timedelta(days=1)
        return (start_date, end_date)

    elif period == "last-week":
        start_date = current - timedelta(days=current.weekday() + 7)
        return (start_date, start_date + timedelta(days=6))

    raise ValueError(
        f"Unknown period: '{period}'. Supported periods: this-month, this-week, last-month, last-week"
    )
