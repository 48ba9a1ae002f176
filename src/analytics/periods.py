"""Calendar ranges used by the analytics service.

All ranges are inclusive on both ends. The end of a calendar period is the
next period's start minus one microsecond, so consecutive periods never
share an instant.
"""

import calendar
import math
from datetime import datetime, timedelta

from analytics.models import DateRange

ONE_MICROSECOND = timedelta(microseconds=1)
SECONDS_PER_DAY = 24 * 60 * 60


def start_of_day(instant: datetime) -> datetime:
    return instant.replace(hour=0, minute=0, second=0, microsecond=0)


def shift_months(instant: datetime, months: int) -> datetime:
    """Move an instant by whole months, clamping the day to the target month's length."""
    month_index = instant.month - 1 + months
    year = instant.year + month_index // 12
    month = month_index % 12 + 1
    day = min(instant.day, calendar.monthrange(year, month)[1])
    return instant.replace(year=year, month=month, day=day)


def day_range(reference: datetime) -> DateRange:
    start = start_of_day(reference)
    return DateRange(start=start, end=start + timedelta(days=1) - ONE_MICROSECOND)


def week_range(reference: datetime, first_weekday: int = calendar.MONDAY) -> DateRange:
    """
    Week containing the reference instant.

    Args:
        reference: Instant inside the week
        first_weekday: First day of the week, 0 = Monday (ISO) ... 6 = Sunday
    """
    offset = (reference.weekday() - first_weekday) % 7
    start = start_of_day(reference) - timedelta(days=offset)
    return DateRange(start=start, end=start + timedelta(days=7) - ONE_MICROSECOND)


def month_range(reference: datetime) -> DateRange:
    start = start_of_day(reference).replace(day=1)
    return DateRange(start=start, end=shift_months(start, 1) - ONE_MICROSECOND)


def previous_month_range(reference: datetime) -> DateRange:
    return month_range(shift_months(month_range(reference).start, -1))


def year_range(reference: datetime) -> DateRange:
    start = start_of_day(reference).replace(month=1, day=1)
    return DateRange(start=start, end=start.replace(year=start.year + 1) - ONE_MICROSECOND)


def calendar_days_between(start: datetime, end: datetime) -> int:
    """
    Whole days spanned by [start, end], rounded up and never less than 1.

    Part days count as a full day: 2024-01-01 00:00 to 2024-01-02 12:00
    spans 2 days, not 1. A full calendar month spans its own length.
    """
    elapsed = (end - start).total_seconds() / SECONDS_PER_DAY
    return max(math.ceil(elapsed), 1)
