"""
Calendar and ISO-8601 week indexing.

Every bucketing decision in the engine goes through this module: a session's
epoch-millisecond timestamp is read as a UTC instant, mapped to its calendar
day, and from there to its ISO week. The year of an ISO week is the year of
its Thursday, so Dec 31 2020 falls in 2020-W53 while Jan 1 2021 is still
2020-W53 and Jan 4 2021 starts 2021-W01.
"""

import re
from datetime import date, datetime, timedelta, timezone
from typing import Iterator, Union

from Velocity.errors import InvalidWeekError
from Velocity.time_log.models import IsoWeek

WEEK_KEY_PATTERN = re.compile(r"^(\d{4})-W(\d{2})$")
MS_PER_DAY = 24 * 60 * 60 * 1000
MS_PER_WEEK = 7 * MS_PER_DAY


def utc_datetime(timestamp_ms: Union[int, float]) -> datetime:
    """Epoch milliseconds to an aware UTC datetime."""
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)


def utc_date(timestamp_ms: Union[int, float]) -> date:
    """Epoch milliseconds to the UTC calendar date."""
    return utc_datetime(timestamp_ms).date()


def date_to_ms(day: date) -> int:
    """UTC midnight of `day` as epoch milliseconds."""
    midnight = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
    return int(midnight.timestamp() * 1000)


def iso_week_of_date(day: date) -> IsoWeek:
    """ISO (year, week) of a calendar date."""
    iso_year, iso_week, _ = day.isocalendar()
    return IsoWeek(iso_year, iso_week)


def iso_week_of(timestamp_ms: Union[int, float]) -> IsoWeek:
    """
    ISO-8601 (year, week) of a UTC timestamp.

    Args:
        timestamp_ms: Epoch milliseconds

    Returns:
        IsoWeek whose year is the year of the week's Thursday

    Example:
        iso_week_of(1609416000000)  # 2020-12-31T12:00Z -> IsoWeek(2020, 53)
    """
    return iso_week_of_date(utc_date(timestamp_ms))


def weeks_in_year(year: int) -> int:
    """52 or 53. Dec 28 always lies in the last ISO week of its year."""
    return date(year, 12, 28).isocalendar()[1]


def week_start(year: int, week: int) -> date:
    """
    UTC Monday that starts ISO week `week` of `year`.

    Week 1 is the week containing Jan 4; later weeks are offset from its
    Monday in steps of seven days.

    Raises:
        InvalidWeekError: If `week` is outside 1..weeks_in_year(year)
    """
    if not 1 <= year <= 9999:
        raise InvalidWeekError(f"Year out of range: {year}")
    if not 1 <= week <= weeks_in_year(year):
        raise InvalidWeekError(
            f"ISO year {year} has no week {week}",
            context={"year": year, "week": week, "weeks_in_year": weeks_in_year(year)},
        )

    jan4 = date(year, 1, 4)
    week1_monday = jan4 - timedelta(days=jan4.weekday())
    return week1_monday + timedelta(weeks=week - 1)


def week_start_of_date(day: date) -> date:
    """Monday of the ISO week containing `day`."""
    return day - timedelta(days=day.weekday())


def week_key(year: int, week: int) -> str:
    """Format as 'YYYY-Www'."""
    return f"{year}-W{week:02d}"


def parse_week_key(key: str) -> IsoWeek:
    """
    Parse a 'YYYY-Www' key.

    Raises:
        InvalidWeekError: If the key is malformed or names no ISO week
    """
    match = WEEK_KEY_PATTERN.match(key or "")
    if not match:
        raise InvalidWeekError(f"Malformed ISO week key: {key!r}")
    year, week = int(match.group(1)), int(match.group(2))
    week_start(year, week)
    return IsoWeek(year, week)


def day_key(timestamp_ms: Union[int, float]) -> str:
    return utc_date(timestamp_ms).isoformat()


def month_key(timestamp_ms: Union[int, float]) -> str:
    day = utc_date(timestamp_ms)
    return f"{day.year}-{day.month:02d}"


def year_key(timestamp_ms: Union[int, float]) -> str:
    return str(utc_date(timestamp_ms).year)


def iso_week_key(timestamp_ms: Union[int, float]) -> str:
    return iso_week_of(timestamp_ms).key


def iter_week_starts(first_monday: date, last_monday: date) -> Iterator[date]:
    """Yield every Monday from `first_monday` through `last_monday` inclusive."""
    current = first_monday
    while current <= last_monday:
        yield current
        current += timedelta(weeks=1)
