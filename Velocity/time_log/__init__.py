"""Time-Log Analytics & Velocity Engine

Turn raw session logs into calendar aggregates, weekly velocity, momentum,
streaks, session quality, and milestone pacing.
"""

from .models import (
    Activity,
    Bucket,
    CompletionProjection,
    DEFAULT_MOMENTUM_WEIGHTS,
    Goal,
    GoalAward,
    GoalAwardData,
    Granularity,
    IsoWeek,
    MilestonePacing,
    MomentumFactors,
    MomentumRegime,
    MomentumScore,
    MomentumWeights,
    SessionKind,
    SessionQuality,
    SessionRecord,
    Streak,
    TrendLabel,
    UnusualSession,
    WeeklySample,
)

from .calendar_weeks import (
    iso_week_of,
    iso_week_of_date,
    parse_week_key,
    week_key,
    week_start,
    weeks_in_year,
)

from .normalizer import (
    NormalizationResult,
    activity_from_dict,
    goal_from_dict,
    normalize_records,
    resolve_primary_activity,
)

from .aggregator import (
    TimeLogSummary,
    aggregate,
    bucket_by_day,
    bucket_by_month,
    bucket_by_week,
    bucket_by_year,
    filter_records,
    summarize_time_logs,
)

from .velocity import (
    FULL_HISTORY,
    weekly_series,
)

from .trends import (
    full_history_slope,
    momentum,
    select_momentum_strategy,
    slope,
)

from .streaks import (
    full_history_streak,
    streak,
)

from .session_quality import session_quality

from .pacing import (
    commitment_label,
    milestone_pacing,
    pacing_status,
    project_completion,
)

from .awards import (
    MILESTONE_PERCENTAGES,
    award_statistics,
    check_new_milestones,
    goal_award_data,
    goal_progress_from_activities,
    goal_progress_from_logs,
)

from .snapshot import (
    VelocitySnapshot,
    analyze_goal,
    velocity_snapshot,
)

__all__ = [
    # Models
    "Activity",
    "Bucket",
    "CompletionProjection",
    "DEFAULT_MOMENTUM_WEIGHTS",
    "Goal",
    "GoalAward",
    "GoalAwardData",
    "Granularity",
    "IsoWeek",
    "MilestonePacing",
    "MomentumFactors",
    "MomentumRegime",
    "MomentumScore",
    "MomentumWeights",
    "SessionKind",
    "SessionQuality",
    "SessionRecord",
    "Streak",
    "TrendLabel",
    "UnusualSession",
    "WeeklySample",
    # Calendar
    "iso_week_of",
    "iso_week_of_date",
    "parse_week_key",
    "week_key",
    "week_start",
    "weeks_in_year",
    # Normalization
    "NormalizationResult",
    "activity_from_dict",
    "goal_from_dict",
    "normalize_records",
    "resolve_primary_activity",
    # Aggregation
    "TimeLogSummary",
    "aggregate",
    "bucket_by_day",
    "bucket_by_month",
    "bucket_by_week",
    "bucket_by_year",
    "filter_records",
    "summarize_time_logs",
    # Velocity and trends
    "FULL_HISTORY",
    "weekly_series",
    "full_history_slope",
    "momentum",
    "select_momentum_strategy",
    "slope",
    # Streaks
    "full_history_streak",
    "streak",
    # Session quality and pacing
    "session_quality",
    "commitment_label",
    "milestone_pacing",
    "pacing_status",
    "project_completion",
    # Awards
    "MILESTONE_PERCENTAGES",
    "award_statistics",
    "check_new_milestones",
    "goal_award_data",
    "goal_progress_from_activities",
    "goal_progress_from_logs",
    # Snapshot
    "VelocitySnapshot",
    "analyze_goal",
    "velocity_snapshot",
]
