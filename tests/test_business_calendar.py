"""Tests for business-day calendar arithmetic."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from prpickup.business_calendar import (
    BusinessCalendar,
    build_us_holidays,
    last_weekday,
    nth_weekday,
    parse_time,
)

EASTERN = timezone(timedelta(hours=-5))


def _utc(year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc)


def test_parse_time_handles_iso_timestamps_and_bad_values():
    """Verify timestamps parse leniently and invalid values degrade to None."""
    assert parse_time("2024-03-04T09:00:00Z") == _utc(2024, 3, 4, 9)
    assert parse_time("2024-03-04T09:00:00-05:00") == datetime(2024, 3, 4, 9, tzinfo=EASTERN)
    assert parse_time(None) is None
    assert parse_time("") is None
    assert parse_time("   ") is None
    assert parse_time("garbage") is None


def test_parse_time_returns_timezone_aware_values_for_naive_input():
    """Verify naive timestamps are interpreted in local time and become aware."""
    parsed = parse_time("2024-03-04 09:00:00")

    assert parsed is not None
    assert parsed.tzinfo is not None
    assert (parsed.hour, parsed.minute) == (9, 0)


def test_nth_and_last_weekday_match_known_2024_dates():
    """Verify nth/last weekday helpers against the 2024 calendar."""
    assert nth_weekday(2024, 1, 0, 3) == (2024, 1, 15)
    assert nth_weekday(2024, 9, 0, 1) == (2024, 9, 2)
    assert nth_weekday(2024, 11, 3, 4) == (2024, 11, 28)
    assert last_weekday(2024, 5, 0) == (2024, 5, 27)
    assert last_weekday(2025, 5, 0) == (2025, 5, 26)


def test_build_us_holidays_2024_contains_all_eleven_holidays():
    """Verify the 2024 holiday table lists the eleven federal holidays."""
    holidays = build_us_holidays(2024)

    assert holidays == {
        (2024, 1, 1),
        (2024, 1, 15),
        (2024, 2, 19),
        (2024, 5, 27),
        (2024, 6, 19),
        (2024, 7, 4),
        (2024, 9, 2),
        (2024, 10, 14),
        (2024, 11, 11),
        (2024, 11, 28),
        (2024, 12, 25),
    }


def test_us_holidays_are_cached_per_year():
    """Verify the holiday table is built once per year and reused."""
    calendar = BusinessCalendar()

    first = calendar.us_holidays(2025)
    second = calendar.us_holidays(2025)

    assert first is second
    assert (2025, 11, 27) in first
    assert (2025, 1, 20) in first


def test_is_business_day_weekdays_weekends_and_holidays():
    """Verify weekends and holidays are not business days while regular weekdays are."""
    calendar = BusinessCalendar()

    assert calendar.is_business_day(_utc(2024, 12, 23, 12))  # Monday
    assert calendar.is_business_day(_utc(2024, 12, 27, 12))  # Friday
    assert not calendar.is_business_day(_utc(2024, 12, 21, 12))  # Saturday
    assert not calendar.is_business_day(_utc(2024, 12, 22, 12))  # Sunday
    assert not calendar.is_business_day(_utc(2024, 12, 25, 12))  # Christmas
    assert not calendar.is_business_day(_utc(2024, 11, 28, 12))  # Thanksgiving
    assert not calendar.is_business_day(_utc(2024, 7, 4, 12))  # Independence Day


def test_is_business_day_uses_the_instants_own_offset():
    """Verify weekday status is evaluated in the offset carried by the instant."""
    calendar = BusinessCalendar()
    saturday_utc = _utc(2024, 3, 9, 2)

    assert not calendar.is_business_day(saturday_utc)
    assert calendar.is_business_day(saturday_utc.astimezone(EASTERN))  # Friday 21:00


def test_business_seconds_between_same_business_day():
    """Verify a span within one business day counts wall-clock seconds."""
    calendar = BusinessCalendar()

    assert calendar.business_seconds_between(_utc(2024, 3, 4, 9), _utc(2024, 3, 4, 17)) == 28800


def test_business_seconds_between_skips_weekend():
    """Verify Friday evening to Monday morning counts only Friday and Monday segments."""
    calendar = BusinessCalendar()

    result = calendar.business_seconds_between(_utc(2024, 3, 8, 17), _utc(2024, 3, 11, 9))

    # Friday 17:00-23:59:59 plus Monday 00:00-09:00.
    assert result == 25199 + 32400


def test_business_seconds_between_across_midnight_drops_one_second_per_boundary():
    """Verify day segments end at 23:59:59 when a span crosses midnight."""
    calendar = BusinessCalendar()

    result = calendar.business_seconds_between(_utc(2024, 3, 4, 9), _utc(2024, 3, 5, 9))

    assert result == 53999 + 32400


def test_business_seconds_between_skips_holidays():
    """Verify a holiday contributes nothing to a multi-day span."""
    calendar = BusinessCalendar()

    # Friday Jan 12 2024 12:00 to Tuesday Jan 16 12:00; Monday Jan 15 is MLK Day.
    result = calendar.business_seconds_between(_utc(2024, 1, 12, 12), _utc(2024, 1, 16, 12))

    assert result == (12 * 3600 - 1) + 12 * 3600


def test_business_seconds_between_entirely_on_weekend_is_zero():
    """Verify a span that never touches a business day is zero."""
    calendar = BusinessCalendar()

    assert calendar.business_seconds_between(_utc(2024, 3, 9, 8), _utc(2024, 3, 10, 20)) == 0


def test_business_seconds_between_non_positive_span_is_zero():
    """Verify end at or before start yields zero, never a negative value."""
    calendar = BusinessCalendar()
    start = _utc(2024, 3, 4, 9)

    assert calendar.business_seconds_between(start, start) == 0
    assert calendar.business_seconds_between(start, start - timedelta(hours=5)) == 0


def test_business_seconds_between_missing_input_is_none():
    """Verify unknown instants propagate as None."""
    calendar = BusinessCalendar()

    assert calendar.business_seconds_between(None, _utc(2024, 3, 4, 9)) is None
    assert calendar.business_seconds_between(_utc(2024, 3, 4, 9), None) is None


def test_business_seconds_between_truncates_fractional_seconds():
    """Verify the total is truncated to whole seconds."""
    calendar = BusinessCalendar()
    start = _utc(2024, 3, 4, 9)

    assert calendar.business_seconds_between(start, start + timedelta(seconds=10, microseconds=900000)) == 10


def test_business_seconds_between_is_monotonic_in_end():
    """Verify extending the end instant never decreases the total."""
    calendar = BusinessCalendar()
    start = _utc(2024, 3, 7, 15)
    previous = 0

    for hours in range(0, 24 * 9, 5):
        current = calendar.business_seconds_between(start, start + timedelta(hours=hours))
        assert current >= previous
        previous = current


@pytest.mark.parametrize(
    "business_days, expected",
    [
        (0, datetime(2024, 3, 6, tzinfo=timezone.utc)),
        (1, datetime(2024, 3, 5, tzinfo=timezone.utc)),
        (3, datetime(2024, 3, 1, tzinfo=timezone.utc)),
        (5, datetime(2024, 2, 28, tzinfo=timezone.utc)),
    ],
)
def test_business_days_cutoff_walks_back_over_weekends(business_days, expected):
    """Verify the cutoff counts back business days and returns the start of that day."""
    calendar = BusinessCalendar()
    now = _utc(2024, 3, 6, 15, 30)  # Wednesday

    assert calendar.business_days_cutoff(business_days, now=now) == expected


def test_business_days_cutoff_skips_holidays():
    """Verify holidays are not counted as business days when walking back."""
    calendar = BusinessCalendar()
    now = _utc(2024, 1, 16, 10)  # Tuesday after MLK Day

    cutoff = calendar.business_days_cutoff(1, now=now)

    assert cutoff == datetime(2024, 1, 12, tzinfo=timezone.utc)
    assert calendar.is_business_day(cutoff)


def test_business_days_cutoff_preserves_offset_and_handles_none():
    """Verify the cutoff keeps the offset of now and None yields None."""
    calendar = BusinessCalendar()
    now = datetime(2024, 3, 6, 8, 0, tzinfo=EASTERN)

    cutoff = calendar.business_days_cutoff(2, now=now)

    assert cutoff == datetime(2024, 3, 4, tzinfo=EASTERN)
    assert cutoff.utcoffset() == timedelta(hours=-5)
    assert calendar.business_days_cutoff(None, now=now) is None


def test_business_days_cutoff_defaults_to_current_time():
    """Verify the cutoff uses the current time when now is omitted."""
    calendar = BusinessCalendar()

    cutoff = calendar.business_days_cutoff(2)

    assert cutoff < datetime.now().astimezone()
    assert (cutoff.hour, cutoff.minute, cutoff.second) == (0, 0, 0)
    assert calendar.is_business_day(cutoff)
