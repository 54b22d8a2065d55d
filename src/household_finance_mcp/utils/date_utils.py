"""
Date utilities for parsing periods, date ranges and stored timestamps.
"""

import calendar
from datetime import date, datetime, timedelta
from typing import Tuple

# Range kinds used by the analytics views
DAY = "DAY"
WEEK = "WEEK"
MONTH = "MONTH"
YEAR = "YEAR"
ALL = "ALL"
CUSTOM = "CUSTOM"

RANGE_KINDS = (DAY, WEEK, MONTH, YEAR, ALL, CUSTOM)
NAVIGABLE_KINDS = (DAY, WEEK, MONTH, YEAR)


def parse_period(period: str) -> Tuple[str, str]:
    """
    Parse a period string into (start_date, end_date).

    Supported periods:
    - "today", "this_week" (weeks start on Monday)
    - "this_month", "last_month"
    - "this_year", "last_year"
    - "last_7_days", "last_30_days", "last_90_days"
    - "ytd" (year to date)

    Returns:
        Tuple of (start_date, end_date) as "YYYY-MM-DD" strings

    Raises:
        ValueError: If period is not recognized
    """
    today = datetime.now()

    if period == "today":
        day = today.strftime("%Y-%m-%d")
        return day, day

    elif period == "this_week":
        start, end = get_week_range(today.date())
        return start.isoformat(), end.isoformat()

    elif period == "this_month":
        return get_month_range(today.year, today.month)

    elif period == "last_month":
        first_day_this_month = today.replace(day=1)
        last_day_last_month = first_day_this_month - timedelta(days=1)
        return get_month_range(last_day_last_month.year, last_day_last_month.month)

    elif period == "this_year":
        return f"{today.year}-01-01", f"{today.year}-12-31"

    elif period == "last_year":
        year = today.year - 1
        return f"{year}-01-01", f"{year}-12-31"

    elif period in ("last_7_days", "last_30_days", "last_90_days"):
        days = int(period.split("_")[1])
        start = today - timedelta(days=days)
        return start.strftime("%Y-%m-%d"), today.strftime("%Y-%m-%d")

    elif period == "ytd":
        return f"{today.year}-01-01", today.strftime("%Y-%m-%d")

    else:
        raise ValueError(f"Unknown period: {period}")


def get_month_range(year: int, month: int) -> Tuple[str, str]:
    """
    Get the date range for a specific month.

    Args:
        year: Year (e.g., 2026)
        month: Month (1-12)

    Returns:
        Tuple of (start_date, end_date) as "YYYY-MM-DD" strings

    Raises:
        ValueError: If month is not in valid range (1-12)
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")

    _, last_day = calendar.monthrange(year, month)

    start = f"{year:04d}-{month:02d}-01"
    end = f"{year:04d}-{month:02d}-{last_day:02d}"

    return start, end


def get_week_range(day: date) -> Tuple[date, date]:
    """Monday-to-Sunday week containing ``day``."""
    start = day - timedelta(days=day.weekday())
    return start, start + timedelta(days=6)


def period_range(kind: str, cursor: date) -> Tuple[date, date]:
    """
    Get the calendar bucket of the given kind that contains ``cursor``.

    Args:
        kind: One of DAY, WEEK, MONTH, YEAR
        cursor: Any date inside the wanted bucket

    Returns:
        Tuple of (start, end) dates, both inclusive

    Raises:
        ValueError: If kind is not a calendar bucket
    """
    if kind == DAY:
        return cursor, cursor
    if kind == WEEK:
        return get_week_range(cursor)
    if kind == MONTH:
        _, last_day = calendar.monthrange(cursor.year, cursor.month)
        return cursor.replace(day=1), cursor.replace(day=last_day)
    if kind == YEAR:
        return date(cursor.year, 1, 1), date(cursor.year, 12, 31)
    raise ValueError(f"Range kind {kind} has no calendar bucket")


def shift_cursor(kind: str, cursor: date, steps: int) -> date:
    """
    Move a navigation cursor by ``steps`` buckets (negative goes back).

    Month and year moves clamp the day to the end of the target month, so
    31 March minus one month is 28 or 29 February.
    """
    if kind == DAY:
        return cursor + timedelta(days=steps)
    if kind == WEEK:
        return cursor + timedelta(weeks=steps)
    if kind == MONTH:
        return _add_months(cursor, steps)
    if kind == YEAR:
        return _add_months(cursor, steps * 12)
    raise ValueError(f"Range kind {kind} cannot be navigated")


def _add_months(day: date, months: int) -> date:
    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    _, last_day = calendar.monthrange(year, month)
    return date(year, month, min(day.day, last_day))


def parse_iso_datetime(value: str) -> datetime:
    """
    Parse a stored ISO date or date-time string.

    Accepts "YYYY-MM-DD", full ISO date-times and the trailing "Z" that
    JavaScript's toISOString() writes. Timezone-aware values are converted
    to naive local time so that day bucketing follows the household's clock.

    Raises:
        ValueError: If the value is not a parseable ISO string
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid ISO date: {value!r}")

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValueError(f"Invalid ISO date: {value!r}") from None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def parse_date(value: str) -> date:
    """
    Parse a strict "YYYY-MM-DD" date, as accepted by tool arguments.

    Raises:
        ValueError: If the value is not in YYYY-MM-DD form
    """
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValueError(f"Date must be YYYY-MM-DD, got {value!r}") from None
