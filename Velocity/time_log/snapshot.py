"""
Analytics snapshot for one goal.

Combines every analysis into a single read-only result:

- recent weekly series (display window) and its slope
- full-history slope and streak (long-run decisions)
- momentum and session quality over the recent window
- milestone pacing, award progress, and a what-if projection at the
  current pace
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from Velocity.clock import FixedClock, SystemClock, resolve_clock
from Velocity.time_log.awards import goal_award_data
from Velocity.time_log.models import (
    CompletionProjection,
    Goal,
    GoalAward,
    GoalAwardData,
    MilestonePacing,
    MomentumScore,
    MomentumWeights,
    SessionQuality,
    SessionRecord,
    Streak,
    WeeklySample,
)
from Velocity.time_log.normalizer import NormalizationResult, ensure_goal, ensure_records, normalize_records
from Velocity.time_log.pacing import milestone_pacing, project_completion
from Velocity.time_log.session_quality import session_quality
from Velocity.time_log.streaks import DEFAULT_MINIMUM_SESSIONS, full_history_streak
from Velocity.time_log.trends import full_history_slope, momentum, slope
from Velocity.time_log.velocity import DEFAULT_WINDOW_WEEKS, weekly_series

logger = logging.getLogger(__name__)


@dataclass
class VelocitySnapshot:
    """Everything the goal view shows, computed from one set of records."""
    goal_id: str
    weekly_series: List[WeeklySample]
    average_slope: float
    full_history_slope: float
    streak: Streak
    momentum: MomentumScore
    session_quality: SessionQuality
    pacing: MilestonePacing
    awards: GoalAwardData
    projection: CompletionProjection
    normalization: Optional[NormalizationResult] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def has_data(self) -> bool:
        return bool(self.weekly_series)

    @property
    def weeks_of_data(self) -> int:
        return len(self.weekly_series)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation."""
        return {
            "goal_id": self.goal_id,
            "has_data": self.has_data,
            "weeks_of_data": self.weeks_of_data,
            "weekly_series": [sample.to_dict() for sample in self.weekly_series],
            "average_slope": self.average_slope,
            "full_history_slope": self.full_history_slope,
            "streak": self.streak.to_dict(),
            "momentum": self.momentum.to_dict(),
            "session_quality": self.session_quality.to_dict(),
            "pacing": self.pacing.to_dict(),
            "awards": self.awards.to_dict(),
            "projection": self.projection.to_dict(),
            "normalization": self.normalization.to_dict() if self.normalization else None,
            "metadata": dict(self.metadata),
        }


def velocity_snapshot(
    goal: Union[Goal, Mapping[str, Any]],
    records: Iterable[SessionRecord],
    window: int = DEFAULT_WINDOW_WEEKS,
    minimum_sessions: int = DEFAULT_MINIMUM_SESSIONS,
    clock: Optional[SystemClock] = None,
    weights: Optional[MomentumWeights] = None,
    existing_awards: Sequence[GoalAward] = (),
    target_date=None,
) -> VelocitySnapshot:
    """
    Build the analytics snapshot for a goal.

    Args:
        goal: Goal (or stored goal dict)
        records: Session records; raw dicts are normalized
        window: Display window in weeks
        minimum_sessions: Sessions per week that keep a streak alive
        clock: Source of "now"; one instant is used for every analysis
        weights: Momentum constants
        existing_awards: Awards already granted
        target_date: Overrides the goal's target date for pacing

    Returns:
        VelocitySnapshot
    """
    goal = ensure_goal(goal)
    records = ensure_records(records)
    # Freeze "now" so every part of the snapshot agrees on the current week.
    clock = FixedClock(resolve_clock(clock).now())

    ids = list(goal.activity_refs)
    recent = weekly_series(records, ids, window=window, clock=clock)
    pacing = milestone_pacing(goal, records, target_date=target_date, clock=clock)

    snapshot = VelocitySnapshot(
        goal_id=goal.id,
        weekly_series=recent,
        average_slope=slope(recent),
        full_history_slope=full_history_slope(records, ids, clock=clock),
        streak=full_history_streak(records, ids, minimum_sessions, clock=clock),
        momentum=momentum(recent, weights),
        session_quality=session_quality(records, ids, recent),
        pacing=pacing,
        awards=goal_award_data(goal, records, existing_awards),
        projection=project_completion(
            goal, records, pacing.current_weekly_hours,
            clock=clock, current_weekly_hours=pacing.current_weekly_hours,
        ),
        metadata={
            "window_weeks": window,
            "minimum_sessions": minimum_sessions,
            "generated_at": clock.now().isoformat(),
        },
    )
    logger.debug(
        "Snapshot for goal %s: %d weeks, momentum %d (%s), streak %d/%d",
        goal.id, snapshot.weeks_of_data, snapshot.momentum.score, snapshot.momentum.trend.value,
        snapshot.streak.current, snapshot.streak.longest,
    )
    return snapshot


def analyze_goal(
    goal: Union[Goal, Mapping[str, Any]],
    raw_logs: Iterable[Any],
    activities: Optional[Iterable[Any]] = None,
    **kwargs,
) -> VelocitySnapshot:
    """
    Normalize raw logs (excluding malformed and orphaned ones) and snapshot.

    The exclusion counts are attached as `snapshot.normalization`.
    """
    normalized = normalize_records(raw_logs, activities)
    snapshot = velocity_snapshot(goal, normalized.records, **kwargs)
    snapshot.normalization = normalized
    return snapshot
