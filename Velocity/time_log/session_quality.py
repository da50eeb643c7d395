"""
Session quality insights.

Average session length, focus-day vs. regular-day averages, best week, and
recent outlier sessions for a goal's activities. Records are restricted to
the span of the weekly series they are reported next to.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence

from Velocity.time_log.aggregator import filter_records
from Velocity.time_log.calendar_weeks import MS_PER_WEEK, date_to_ms, day_key
from Velocity.time_log.models import (
    SessionKind,
    SessionQuality,
    SessionRecord,
    UnusualSession,
    WeeklySample,
)
from Velocity.time_log.velocity import round_half_up

FOCUS_DAY_MIN_SESSIONS = 2
FOCUS_DAY_MIN_MINUTES = 60
LONG_SESSION_RATIO = 2.0
SHORT_SESSION_RATIO = 0.5
MAX_UNUSUAL_SESSIONS = 5


def _average(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _in_window(records: List[SessionRecord], series: Sequence[WeeklySample]) -> List[SessionRecord]:
    if not series:
        return records
    window_start = date_to_ms(series[0].week_start)
    window_end = date_to_ms(series[-1].week_start) + MS_PER_WEEK
    return [r for r in records if window_start <= r.timestamp_ms < window_end]


def best_week(series: Sequence[WeeklySample]) -> Optional[WeeklySample]:
    """Sample with the most hours; the earliest wins ties."""
    best: Optional[WeeklySample] = None
    for sample in series:
        if best is None or sample.hours > best.hours:
            best = sample
    return best


def session_quality(
    records: Iterable[SessionRecord],
    activity_ids: Iterable[str],
    series: Sequence[WeeklySample],
) -> SessionQuality:
    """
    Session length statistics for the goal's activities.

    Focus days have 2+ sessions or 60+ minutes. Unusual sessions are at
    least twice or at most half the average length; the 5 most recent are
    kept.

    Returns:
        SessionQuality; zero averages and no outliers when nothing matches
    """
    matching = _in_window(filter_records(records, activity_ids or ()), series)
    if not matching:
        return SessionQuality(best_week=series[0] if series else None)

    average = sum(r.duration_minutes for r in matching) / len(matching)

    days: Dict[str, List[SessionRecord]] = defaultdict(list)
    for record in matching:
        days[day_key(record.timestamp_ms)].append(record)

    focus_totals: List[float] = []
    other_totals: List[float] = []
    for logs in days.values():
        total = sum(r.duration_minutes for r in logs)
        if len(logs) >= FOCUS_DAY_MIN_SESSIONS or total >= FOCUS_DAY_MIN_MINUTES:
            focus_totals.append(total)
        else:
            other_totals.append(total)

    unusual: List[UnusualSession] = []
    for record in sorted(matching, key=lambda r: r.timestamp_ms, reverse=True):
        ratio = record.duration_minutes / average
        if ratio >= LONG_SESSION_RATIO or ratio <= SHORT_SESSION_RATIO:
            unusual.append(UnusualSession(
                kind=SessionKind.LONG if ratio >= LONG_SESSION_RATIO else SessionKind.SHORT,
                duration_minutes=record.duration_minutes,
                date=day_key(record.timestamp_ms),
                record_id=record.id,
            ))
        if len(unusual) == MAX_UNUSUAL_SESSIONS:
            break

    return SessionQuality(
        average_session_minutes=round_half_up(average),
        focus_day_average_minutes=round_half_up(_average(focus_totals)),
        non_focus_day_average_minutes=round_half_up(_average(other_totals)),
        best_week=best_week(series),
        unusual_sessions=unusual,
    )
