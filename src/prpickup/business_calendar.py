"""Business calendar arithmetic for pull request durations.

A business day is Monday through Friday that is not one of the eleven US
federal holidays. Durations are accumulated one calendar day segment at a
time, so weekends and holidays contribute nothing to a pickup or merge time.

Day segments end at 23:59:59 rather than at midnight, so every crossed day
boundary drops one second from a total.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Any, Dict, FrozenSet, Optional, Tuple

from dateutil import parser as date_parser

DateKey = Tuple[int, int, int]

ONE_DAY = timedelta(days=1)

MONDAY = 0
THURSDAY = 3


def parse_time(value: Any) -> Optional[datetime]:
    """Parse a timestamp leniently, returning ``None`` when it cannot be parsed.

    Naive results are interpreted as local time so they compare cleanly with
    timezone-aware values.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            parsed = date_parser.parse(text)
        except (ValueError, OverflowError):
            return None

    if parsed.tzinfo is None:
        return parsed.astimezone()
    return parsed


def nth_weekday(year: int, month: int, weekday: int, occurrence: int) -> DateKey:
    """Return the ``occurrence``-th ``weekday`` (Monday=0) of a month."""
    first_weekday = date(year, month, 1).weekday()
    days_until = (weekday - first_weekday) % 7
    return (year, month, 1 + days_until + 7 * (occurrence - 1))


def last_weekday(year: int, month: int, weekday: int) -> DateKey:
    """Return the last ``weekday`` (Monday=0) of a month."""
    last_day = calendar.monthrange(year, month)[1]
    days_back = (date(year, month, last_day).weekday() - weekday) % 7
    return (year, month, last_day - days_back)


def build_us_holidays(year: int) -> FrozenSet[DateKey]:
    """Build the US federal holiday table for ``year``."""
    return frozenset(
        [
            (year, 1, 1),  # New Year's Day
            nth_weekday(year, 1, MONDAY, 3),  # Martin Luther King Jr. Day
            nth_weekday(year, 2, MONDAY, 3),  # Presidents Day
            last_weekday(year, 5, MONDAY),  # Memorial Day
            (year, 6, 19),  # Juneteenth
            (year, 7, 4),  # Independence Day
            nth_weekday(year, 9, MONDAY, 1),  # Labor Day
            nth_weekday(year, 10, MONDAY, 2),  # Columbus Day
            (year, 11, 11),  # Veterans Day
            nth_weekday(year, 11, THURSDAY, 4),  # Thanksgiving
            (year, 12, 25),  # Christmas Day
        ]
    )


def start_of_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(value: datetime) -> datetime:
    return value.replace(hour=23, minute=59, second=59, microsecond=0)


class BusinessCalendar:
    """US business-day calendar with a per-year holiday table cache."""

    def __init__(self) -> None:
        self._holidays: Dict[int, FrozenSet[DateKey]] = {}

    def us_holidays(self, year: int) -> FrozenSet[DateKey]:
        """Return the holiday table for ``year``, computing it on first use."""
        holidays = self._holidays.get(year)
        if holidays is None:
            holidays = build_us_holidays(year)
            self._holidays[year] = holidays
        return holidays

    def is_us_holiday(self, value: datetime) -> bool:
        return (value.year, value.month, value.day) in self.us_holidays(value.year)

    def is_business_day(self, value: datetime) -> bool:
        """Return True for a weekday that is not a US federal holiday."""
        if value.weekday() > 4:
            return False
        return not self.is_us_holiday(value)

    def business_seconds_between(
        self,
        start: Optional[datetime],
        end: Optional[datetime],
    ) -> Optional[int]:
        """Return elapsed seconds between ``start`` and ``end`` on business days only.

        Returns ``None`` if either instant is unknown and ``0`` when ``end`` is
        not after ``start``.
        """
        if start is None or end is None:
            return None
        if end <= start:
            return 0

        total = 0.0
        cursor = start

        while cursor < end:
            segment_end = min(end_of_day(cursor), end)
            if self.is_business_day(cursor):
                total += (segment_end - cursor).total_seconds()
            cursor = start_of_day(cursor + ONE_DAY)

        return int(total)

    def business_days_cutoff(
        self,
        business_days: Optional[int],
        now: Optional[datetime] = None,
    ) -> Optional[datetime]:
        """Return the start of the day ``business_days`` business days before ``now``.

        ``now`` defaults to the current local time. A value of ``0`` yields the
        start of today.
        """
        if business_days is None:
            return None

        current = now if now is not None else datetime.now().astimezone()
        remaining = business_days

        while remaining > 0:
            current -= ONE_DAY
            if self.is_business_day(current):
                remaining -= 1

        return start_of_day(current)
