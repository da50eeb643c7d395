"""Data models for the time-log analytics engine.

This module defines the records consumed by the engine (sessions, goals,
activities) and the derived, read-only results it produces (weekly samples,
streaks, momentum scores, pacing, session quality, awards).

Derived results are recomputed on every call; none are persisted.
"""

from dataclasses import asdict, dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class Granularity(Enum):
    """Calendar bucket sizes for aggregation."""
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class TrendLabel(Enum):
    """Direction of recent momentum."""
    RISING = "rising"
    FLAT = "flat"
    DECLINING = "declining"


class MomentumRegime(Enum):
    """Which scoring rule produced a momentum score."""
    EMPTY = "empty"
    SPARSE = "sparse"  # 1-3 weekly samples
    STEADY = "steady"  # 4+ weekly samples


class SessionKind(Enum):
    """Outlier tag for an unusually long or short session."""
    LONG = "long"
    SHORT = "short"


@dataclass(frozen=True)
class SessionRecord:
    """One logged interval of focused activity.

    `activity_refs` is the canonical, non-empty, ordered reference set; the
    first entry is the primary activity.
    """
    id: str
    activity_refs: Tuple[str, ...]
    duration_minutes: float
    timestamp_ms: int

    @property
    def primary_activity(self) -> str:
        return self.activity_refs[0]

    @property
    def hours(self) -> float:
        return self.duration_minutes / 60

    def matches(self, activity_ids) -> bool:
        """True if any reference is in `activity_ids`."""
        return any(ref in activity_ids for ref in self.activity_refs)


@dataclass(frozen=True)
class Activity:
    """Named activity that sessions are logged against."""
    id: str
    name: str
    total_time_minutes: float = 0.0
    color: Optional[str] = None


@dataclass(frozen=True)
class Goal:
    """Long-term hour goal over one or more activities."""
    id: str
    name: str
    target_hours: float
    activity_refs: Tuple[str, ...]
    created_at_ms: int
    target_date_ms: Optional[int] = None
    completed_at_ms: Optional[int] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class IsoWeek:
    """ISO-8601 (year, week) pair."""
    year: int
    week: int

    @property
    def key(self) -> str:
        return f"{self.year}-W{self.week:02d}"

    def __str__(self) -> str:
        return self.key


@dataclass(frozen=True)
class WeeklySample:
    """Aggregated hours and session count for one ISO week.

    `hours` is rounded to one decimal for display; `minutes` keeps the
    exact total.
    """
    week_key: str
    hours: float
    session_count: int
    week_start: date
    minutes: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["week_start"] = self.week_start.isoformat()
        return data


@dataclass(frozen=True)
class Bucket:
    """Minutes summed over one calendar key."""
    key: str
    minutes: float


@dataclass(frozen=True)
class Streak:
    """Consecutive weeks meeting a minimum-session threshold."""
    current: int
    longest: int
    minimum_sessions_per_week: int
    last_miss_week: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MomentumWeights:
    """Heuristic constants of the momentum score.

    The defaults reproduce the long-standing scoring; they have no
    statistical derivation and are kept configurable rather than tuned.
    """
    volume_target_hours: float = 20.0
    window_weeks: int = 4

    # 4+ weeks of data
    volume_weight: float = 0.4
    consistency_weight: float = 0.3
    growth_weight: float = 0.3
    consistency_penalty: float = 5.0
    growth_multiplier: float = 2.0
    trend_threshold_percent: float = 5.0

    # 1-3 weeks of data
    sparse_volume_weight: float = 0.7
    sparse_growth_weight: float = 0.3
    sparse_growth_multiplier: float = 0.5
    sparse_trend_threshold_percent: float = 10.0


DEFAULT_MOMENTUM_WEIGHTS = MomentumWeights()


@dataclass(frozen=True)
class MomentumFactors:
    """Inputs that went into a momentum score, rounded for display."""
    rolling_average_hours: float = 0.0
    standard_deviation: float = 0.0
    recent_growth_percent: float = 0.0


@dataclass(frozen=True)
class MomentumScore:
    """0-100 composite of recent volume, consistency, and growth."""
    score: int
    trend: TrendLabel
    change_percent: float
    factors: MomentumFactors
    regime: MomentumRegime = MomentumRegime.EMPTY

    def __post_init__(self):
        """Validate score range."""
        if not 0 <= self.score <= 100:
            raise ValueError("Momentum score must be between 0 and 100")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "trend": self.trend.value,
            "change_percent": self.change_percent,
            "factors": asdict(self.factors),
            "regime": self.regime.value,
        }


@dataclass(frozen=True)
class MilestonePacing:
    """Required vs. actual weekly hours toward a calendar target."""
    required_weekly_hours: float
    current_weekly_hours: float
    gap_hours: float
    is_on_track: bool
    current_progress_hours: float = 0.0
    target_date: Optional[date] = None
    weeks_remaining: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["target_date"] = self.target_date.isoformat() if self.target_date else None
        return data


@dataclass(frozen=True)
class UnusualSession:
    """Session whose length is far from the average."""
    kind: SessionKind
    duration_minutes: float
    date: str  # YYYY-MM-DD (UTC)
    record_id: str


@dataclass(frozen=True)
class SessionQuality:
    """Session length and focus-day statistics for a goal."""
    average_session_minutes: float = 0.0
    focus_day_average_minutes: float = 0.0
    non_focus_day_average_minutes: float = 0.0
    best_week: Optional[WeeklySample] = None
    unusual_sessions: List[UnusualSession] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "average_session_minutes": self.average_session_minutes,
            "focus_day_average_minutes": self.focus_day_average_minutes,
            "non_focus_day_average_minutes": self.non_focus_day_average_minutes,
            "best_week": self.best_week.to_dict() if self.best_week else None,
            "unusual_sessions": [
                {
                    "kind": s.kind.value,
                    "duration_minutes": s.duration_minutes,
                    "date": s.date,
                    "record_id": s.record_id,
                }
                for s in self.unusual_sessions
            ],
        }


@dataclass(frozen=True)
class GoalAward:
    """Milestone award earned by a goal."""
    id: str
    goal_id: str
    percentage: int
    awarded_at_ms: int
    message: str


@dataclass(frozen=True)
class GoalAwardData:
    """Awards earned so far and distance to the next milestone."""
    awards: List[GoalAward]
    next_milestone: Optional[int]
    progress_to_next: float
    progress_percent: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CompletionProjection:
    """What-if completion estimate at a given weekly pace."""
    weekly_hours: float
    hours_remaining: float
    weeks_remaining: Optional[float]
    completion_date: Optional[date]
    commitment_label: str
    change_hours: float = 0.0
    change_percent: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["completion_date"] = self.completion_date.isoformat() if self.completion_date else None
        return data
