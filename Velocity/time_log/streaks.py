"""Consistency streaks over weekly samples.

A week qualifies when it has at least `minimum_sessions_per_week` sessions.
The longest streak is the longest qualifying run anywhere in the series; the
current streak counts back from the latest week and stops at the first miss.
"""

from typing import Iterable, Optional, Sequence

from Velocity.clock import SystemClock
from Velocity.time_log.models import SessionRecord, Streak, WeeklySample
from Velocity.time_log.velocity import FULL_HISTORY, weekly_series

DEFAULT_MINIMUM_SESSIONS = 2


def streak(series: Sequence[WeeklySample], minimum_sessions_per_week: int = DEFAULT_MINIMUM_SESSIONS) -> Streak:
    """
    Current and longest qualifying-week runs.

    Args:
        series: Chronological, gap-free weekly samples
        minimum_sessions_per_week: Sessions a week needs to count

    Returns:
        Streak; `last_miss_week` is the most recent non-qualifying week
    """
    def qualifies(sample: WeeklySample) -> bool:
        return sample.session_count >= minimum_sessions_per_week

    longest = 0
    run = 0
    for sample in series:
        run = run + 1 if qualifies(sample) else 0
        longest = max(longest, run)

    current = 0
    last_miss_week: Optional[str] = None
    for sample in reversed(series):
        if not qualifies(sample):
            last_miss_week = sample.week_key
            break
        current += 1

    return Streak(
        current=current,
        longest=longest,
        minimum_sessions_per_week=minimum_sessions_per_week,
        last_miss_week=last_miss_week,
    )


def full_history_streak(
    records: Iterable[SessionRecord],
    activity_ids: Iterable[str],
    minimum_sessions_per_week: int = DEFAULT_MINIMUM_SESSIONS,
    clock: Optional[SystemClock] = None,
) -> Streak:
    """Streak over every week from the first log through the current week."""
    series = weekly_series(records, activity_ids, window=FULL_HISTORY, clock=clock)
    return streak(series, minimum_sessions_per_week)


def streak_label(weeks: int) -> str:
    """'No streak', '1 week', or 'N weeks'."""
    if weeks == 0:
        return "No streak"
    if weeks == 1:
        return "1 week"
    return f"{weeks} weeks"
