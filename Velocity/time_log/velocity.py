"""
Weekly velocity series.

Builds contiguous, zero-filled per-ISO-week (hours, sessions) samples for a
set of activities. Two modes:

- fixed window: exactly N weeks ending at the current week
- full history: first logged week through the later of the last logged week
  and the current week, so an idle goal still shows up-to-date zero weeks
"""

import logging
import math
from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Tuple, Union

from Velocity.clock import SystemClock, resolve_clock
from Velocity.errors import InvalidWindowError
from Velocity.time_log.aggregator import filter_records
from Velocity.time_log.calendar_weeks import (
    iso_week_of,
    iso_week_of_date,
    iter_week_starts,
    utc_date,
    week_start_of_date,
)
from Velocity.time_log.models import SessionRecord, WeeklySample
from Velocity.time_log.normalizer import activity_filter

logger = logging.getLogger(__name__)

FULL_HISTORY = "full"
DEFAULT_WINDOW_WEEKS = 8

Window = Union[int, str]


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves going up (18.5 -> 19), unlike round()'s banker's rounding."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def _validate_window(window: Window) -> Optional[int]:
    """Return the week count, or None for full history."""
    if window == FULL_HISTORY:
        return None
    if isinstance(window, bool) or not isinstance(window, int) or window < 1:
        raise InvalidWindowError(f"Window must be a positive number of weeks or 'full', got {window!r}")
    return window


def _weekly_totals(records: Iterable[SessionRecord]) -> Dict[date, Tuple[float, int]]:
    """Map week-start Monday -> (minutes, sessions)."""
    minutes: Dict[date, float] = defaultdict(float)
    sessions: Dict[date, int] = defaultdict(int)
    for record in records:
        monday = week_start_of_date(utc_date(record.timestamp_ms))
        minutes[monday] += record.duration_minutes
        sessions[monday] += 1
    return {monday: (minutes[monday], sessions[monday]) for monday in minutes}


def _sample(monday: date, totals: Dict[date, Tuple[float, int]]) -> WeeklySample:
    minutes, sessions = totals.get(monday, (0.0, 0))
    return WeeklySample(
        week_key=iso_week_of_date(monday).key,
        hours=round_half_up(minutes / 60, 1),
        session_count=sessions,
        week_start=monday,
        minutes=minutes,
    )


def weekly_series(
    records: Iterable[SessionRecord],
    activity_ids: Optional[Iterable[str]],
    window: Window = DEFAULT_WINDOW_WEEKS,
    clock: Optional[SystemClock] = None,
) -> List[WeeklySample]:
    """
    Per-week samples for the given activities.

    Args:
        records: Session records (or raw dicts)
        activity_ids: Activities to include; None means every activity, an
            empty filter yields []
        window: Number of weeks ending at the current week, or "full"
        clock: Source of "now" (system UTC clock when None)

    Returns:
        Chronological WeeklySample list with no gaps, or [] when no record
        matches (insufficient data, not a flat zero trend)

    Raises:
        InvalidWindowError: If window is not a positive int or "full"
    """
    weeks = _validate_window(window)
    id_set = activity_filter(activity_ids)
    matching = filter_records(records, id_set)
    if not matching:
        return []

    current_monday = week_start_of_date(resolve_clock(clock).now().date())
    totals = _weekly_totals(matching)

    if weeks is None:
        first_monday = min(totals)
        last_monday = max(max(totals), current_monday)
    else:
        first_monday = current_monday - timedelta(weeks=weeks - 1)
        last_monday = current_monday

    series = [_sample(monday, totals) for monday in iter_week_starts(first_monday, last_monday)]
    logger.debug(
        "Weekly series for %s: %d weeks (%s..%s) from %d records",
        "all activities" if id_set is None else sorted(id_set),
        len(series), series[0].week_key, series[-1].week_key, len(matching),
    )
    return series


def recent_weekly_hours(
    records: Iterable[SessionRecord],
    activity_ids: Iterable[str],
    weeks: int = 4,
    clock: Optional[SystemClock] = None,
) -> float:
    """Mean weekly hours over the trailing `weeks` (0 without matching records)."""
    series = weekly_series(records, activity_ids, window=weeks, clock=clock)
    if not series:
        return 0.0
    return sum(sample.minutes for sample in series) / 60 / len(series)


def current_week_key(clock: Optional[SystemClock] = None) -> str:
    return iso_week_of(resolve_clock(clock).now_ms()).key
