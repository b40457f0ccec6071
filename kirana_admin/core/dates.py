"""
Date range helpers used by the analytics and report pages.
"""

import math
from datetime import date, datetime, time, timedelta
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DateRange:
    """Inclusive instant range; pages build it from whole days."""
    start: datetime
    end: datetime

    def previous(self) -> 'DateRange':
        """The window of equal whole-day length immediately before this one."""
        shift = timedelta(days=days_between(self.start, self.end))
        return DateRange(self.start - shift, self.end - shift)

    def days(self):
        """Every calendar day from start to end, inclusive."""
        current = start_of_day(self.start)
        while current <= self.end:
            yield current
            current += timedelta(days=1)

    def cache_key(self) -> tuple:
        return (self.start.isoformat(), self.end.isoformat())


def start_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time.min)


def end_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time(23, 59, 59, 999000))


def last_7_days(now: Optional[datetime] = None) -> DateRange:
    """Today and the six days before it."""
    to = end_of_day(now or datetime.now())
    return DateRange(start_of_day(to - timedelta(days=6)), to)


def last_30_days(now: Optional[datetime] = None) -> DateRange:
    to = end_of_day(now or datetime.now())
    return DateRange(start_of_day(to - timedelta(days=29)), to)


def this_week(now: Optional[datetime] = None) -> DateRange:
    """Monday 00:00 through Sunday 23:59:59."""
    now = now or datetime.now()
    monday = start_of_day(now - timedelta(days=now.weekday()))
    return DateRange(monday, end_of_day(monday + timedelta(days=6)))


def this_month(now: Optional[datetime] = None) -> DateRange:
    now = now or datetime.now()
    first = datetime(now.year, now.month, 1)
    if now.month == 12:
        next_first = datetime(now.year + 1, 1, 1)
    else:
        next_first = datetime(now.year, now.month + 1, 1)
    return DateRange(first, end_of_day(next_first - timedelta(days=1)))


def date_range_from_dates(start: date, end: date) -> DateRange:
    """Build a full-day range from two calendar dates picked in the UI."""
    return DateRange(
        datetime.combine(start, time.min),
        end_of_day(datetime.combine(end, time.min)),
    )


def format_date_range(date_range: DateRange) -> str:
    """``Jan 5, 2024 - Jan 11, 2024``"""
    return f"{_short_date(date_range.start)} - {_short_date(date_range.end)}"


def format_iso_date(value: datetime) -> str:
    return value.strftime("%Y-%m-%d")


def format_day_label(value: datetime) -> str:
    """``Jan 5``"""
    return f"{value.strftime('%b')} {value.day}"


def days_between(start: datetime, end: datetime) -> int:
    """Whole days between two instants, rounded up."""
    seconds = abs((end - start).total_seconds())
    return math.ceil(seconds / 86400)


def _short_date(value: datetime) -> str:
    return f"{value.strftime('%b')} {value.day}, {value.year}"


def time_ago(value: datetime, now: Optional[datetime] = None) -> str:
    """Relative time for timelines, e.g. ``5 minutes ago``."""
    seconds = max(0, int(((now or datetime.now()) - value).total_seconds()))

    if seconds < 60:
        return "less than a minute ago"

    for unit, size in (("day", 86400), ("hour", 3600)):
        if seconds >= size:
            count = seconds // size
            return f"{count} {unit}{'s' if count != 1 else ''} ago"

    minutes = seconds // 60
    return f"{minutes} minute{'s' if minutes != 1 else ''} ago"


def format_timestamp(value: Optional[datetime]) -> str:
    """``Jan 5, 2024 14:30``"""
    if value is None:
        return ""
    return f"{_short_date(value)} {value.strftime('%H:%M')}"
