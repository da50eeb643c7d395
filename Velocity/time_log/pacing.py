"""
Milestone pacing and completion projections.

Compares the weekly hours a goal needs to hit its target date with the
trailing 4-week average actually logged, and projects a completion date for
a hypothetical weekly commitment.
"""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterable, Mapping, Optional, Union

from Velocity.clock import SystemClock, resolve_clock
from Velocity.time_log.aggregator import filter_records
from Velocity.time_log.calendar_weeks import MS_PER_WEEK, date_to_ms, utc_date
from Velocity.time_log.models import CompletionProjection, Goal, MilestonePacing, SessionRecord
from Velocity.time_log.normalizer import ensure_goal
from Velocity.time_log.velocity import recent_weekly_hours

logger = logging.getLogger(__name__)

TRAILING_WEEKS = 4
ON_TRACK_TOLERANCE = 0.9

TargetDate = Union[date, datetime, int, float]


def _to_ms(target: TargetDate) -> int:
    if isinstance(target, datetime):
        if target.tzinfo is None:
            target = target.replace(tzinfo=timezone.utc)
        return int(target.timestamp() * 1000)
    if isinstance(target, date):
        return date_to_ms(target)
    return int(target)


def progress_hours(goal: Goal, records: Iterable[SessionRecord]) -> float:
    """Hours logged against the goal's activities, all time."""
    if not goal.activity_refs:
        return 0.0
    return sum(r.duration_minutes for r in filter_records(records, goal.activity_refs)) / 60


def milestone_pacing(
    goal: Union[Goal, Mapping[str, Any]],
    records: Iterable[SessionRecord],
    target_date: Optional[TargetDate] = None,
    clock: Optional[SystemClock] = None,
) -> MilestonePacing:
    """
    Required vs. current weekly hours toward a target date.

    Args:
        goal: Goal (or stored goal dict)
        records: Session records
        target_date: Overrides the goal's own target date when given
        clock: Source of "now"

    Returns:
        MilestonePacing. Without any target date the goal is trivially on
        track at its current pace. Otherwise it is on track when the
        current pace is within 10% of the required pace.
    """
    goal = ensure_goal(goal)
    clock = resolve_clock(clock)
    records = list(records)

    progress = progress_hours(goal, records)
    current = recent_weekly_hours(records, goal.activity_refs, weeks=TRAILING_WEEKS, clock=clock)

    target = target_date if target_date is not None else goal.target_date_ms
    if target is None:
        return MilestonePacing(
            required_weekly_hours=current,
            current_weekly_hours=current,
            gap_hours=0.0,
            is_on_track=True,
            current_progress_hours=progress,
        )

    target_ms = _to_ms(target)
    weeks_remaining = max(1.0, (target_ms - clock.now_ms()) / MS_PER_WEEK)
    required = max(0.0, (goal.target_hours - progress) / weeks_remaining)

    pacing = MilestonePacing(
        required_weekly_hours=required,
        current_weekly_hours=current,
        gap_hours=required - current,
        is_on_track=current >= required * ON_TRACK_TOLERANCE,
        current_progress_hours=progress,
        target_date=utc_date(target_ms),
        weeks_remaining=weeks_remaining,
    )
    logger.debug("Pacing for goal %s: %s", goal.id, pacing)
    return pacing


def pacing_status(gap_hours: float) -> str:
    """Label for a pacing gap in hours/week."""
    if gap_hours <= 0:
        return "On track"
    if gap_hours <= 1:
        return "Slightly behind"
    return "Behind schedule"


def commitment_label(weekly_hours: float) -> str:
    """How demanding a weekly commitment is."""
    if weekly_hours < 1:
        return "Very light"
    if weekly_hours < 3:
        return "Light"
    if weekly_hours < 6:
        return "Moderate"
    if weekly_hours < 10:
        return "Heavy"
    return "Intensive"


def project_completion(
    goal: Union[Goal, Mapping[str, Any]],
    records: Iterable[SessionRecord],
    weekly_hours: float,
    clock: Optional[SystemClock] = None,
    current_weekly_hours: Optional[float] = None,
) -> CompletionProjection:
    """
    Completion date if the goal were worked at `weekly_hours` from now.

    Uses all-time progress. No date is projected when the goal is already
    met, has no linked activities, or `weekly_hours` is not positive.
    """
    goal = ensure_goal(goal)
    clock = resolve_clock(clock)
    records = list(records)

    if current_weekly_hours is None:
        current_weekly_hours = recent_weekly_hours(
            records, goal.activity_refs, weeks=TRAILING_WEEKS, clock=clock
        )
    change = weekly_hours - current_weekly_hours
    change_percent = change / current_weekly_hours * 100 if current_weekly_hours > 0 else 0.0

    hours_remaining = max(0.0, goal.target_hours - progress_hours(goal, records))
    weeks_remaining = None
    completion_date = None
    if goal.activity_refs and hours_remaining > 0 and weekly_hours > 0:
        weeks_remaining = hours_remaining / weekly_hours
        completion_date = (clock.now() + timedelta(weeks=weeks_remaining)).date()

    return CompletionProjection(
        weekly_hours=weekly_hours,
        hours_remaining=hours_remaining,
        weeks_remaining=weeks_remaining,
        completion_date=completion_date,
        commitment_label=commitment_label(weekly_hours),
        change_hours=change,
        change_percent=change_percent,
    )
