"""
Trend and momentum scoring over weekly samples.

Slope is an ordinary least-squares fit of weekly hours against week index.
Momentum is a 0-100 blend of recent volume, consistency, and growth, scored
by one of three strategies chosen from the number of samples:

- EmptyMomentum: no samples, or samples that are all zero hours
- SparseMomentum: 1-3 samples; volume and week-over-week growth only, since
  a standard deviation over so few points reads as perfect consistency
- SteadyMomentum: 4+ samples; rolling 4-week volume, consistency, and growth
  against the previous 4 weeks
"""

import statistics
from typing import Iterable, List, Optional, Sequence

from Velocity.clock import SystemClock
from Velocity.time_log.models import (
    DEFAULT_MOMENTUM_WEIGHTS,
    MomentumFactors,
    MomentumRegime,
    MomentumScore,
    MomentumWeights,
    SessionRecord,
    TrendLabel,
    WeeklySample,
)
from Velocity.time_log.velocity import FULL_HISTORY, round_half_up, weekly_series


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def percent_change(current: float, previous: float) -> float:
    """
    Percent change from `previous` to `current`.

    A rise from zero counts as +100%; zero to zero is 0%.
    """
    if previous > 0:
        return (current - previous) / previous * 100
    if current > 0:
        return 100.0
    return 0.0


def least_squares_slope(values: Sequence[float]) -> float:
    """Unrounded OLS slope of `values` against 0..n-1; 0 below two points."""
    n = len(values)
    if n < 2:
        return 0.0
    sum_x = n * (n - 1) / 2
    sum_xx = n * (n - 1) * (2 * n - 1) / 6
    sum_y = sum(values)
    sum_xy = sum(i * y for i, y in enumerate(values))
    return (n * sum_xy - sum_x * sum_y) / (n * sum_xx - sum_x * sum_x)


def slope(series: Sequence[WeeklySample]) -> float:
    """
    Trend in hours per week, rounded to one decimal.

    Used for the "+X h/week" indicator over both the recent window and the
    full history; both go through this one formula.
    """
    return round_half_up(least_squares_slope([sample.hours for sample in series]), 1)


def full_history_slope(
    records: Iterable[SessionRecord],
    activity_ids: Iterable[str],
    clock: Optional[SystemClock] = None,
) -> float:
    """Slope over the gap-free full-history weekly series."""
    return slope(weekly_series(records, activity_ids, window=FULL_HISTORY, clock=clock))


class EmptyMomentum:
    """No data, or no logged hours in the window: score 0, flat."""

    regime = MomentumRegime.EMPTY

    def __init__(self, weights: MomentumWeights = DEFAULT_MOMENTUM_WEIGHTS):
        self.weights = weights

    def score(self, hours: List[float]) -> MomentumScore:
        return MomentumScore(
            score=0,
            trend=TrendLabel.FLAT,
            change_percent=0.0,
            factors=MomentumFactors(),
            regime=self.regime,
        )


class SparseMomentum(EmptyMomentum):
    """1-3 weeks: volume weighted heavily, growth from the last two weeks."""

    regime = MomentumRegime.SPARSE

    def score(self, hours: List[float]) -> MomentumScore:
        w = self.weights
        rolling_average = sum(hours) / len(hours)
        volume_score = min(100.0, rolling_average / w.volume_target_hours * 100)

        growth = percent_change(hours[-1], hours[-2]) if len(hours) >= 2 else 0.0
        growth_score = clamp(50 + growth * w.sparse_growth_multiplier)

        raw = volume_score * w.sparse_volume_weight + growth_score * w.sparse_growth_weight
        return MomentumScore(
            score=int(clamp(round_half_up(raw))),
            trend=_trend_label(growth, w.sparse_trend_threshold_percent),
            change_percent=round_half_up(growth, 1),
            factors=MomentumFactors(
                rolling_average_hours=round_half_up(rolling_average, 1),
                standard_deviation=0.0,
                recent_growth_percent=round_half_up(growth, 1),
            ),
            regime=self.regime,
        )


class SteadyMomentum(EmptyMomentum):
    """4+ weeks: rolling volume, consistency, and 4-week-over-4-week growth."""

    regime = MomentumRegime.STEADY

    def score(self, hours: List[float]) -> MomentumScore:
        w = self.weights
        window = w.window_weeks
        recent = hours[-window:]
        previous = hours[-2 * window:-window]

        rolling_average = statistics.fmean(recent)
        volume_score = min(100.0, rolling_average / w.volume_target_hours * 100)

        standard_deviation = statistics.pstdev(recent)
        consistency_score = clamp(100 - standard_deviation * w.consistency_penalty)

        growth = percent_change(sum(recent), sum(previous)) if previous else 0.0
        growth_score = clamp(50 + growth * w.growth_multiplier)

        raw = (
            volume_score * w.volume_weight
            + consistency_score * w.consistency_weight
            + growth_score * w.growth_weight
        )
        return MomentumScore(
            score=int(clamp(round_half_up(raw))),
            trend=_trend_label(growth, w.trend_threshold_percent),
            change_percent=round_half_up(growth, 1),
            factors=MomentumFactors(
                rolling_average_hours=round_half_up(rolling_average, 1),
                standard_deviation=round_half_up(standard_deviation, 1),
                recent_growth_percent=round_half_up(growth, 1),
            ),
            regime=self.regime,
        )


def _trend_label(growth: float, threshold: float) -> TrendLabel:
    if growth > threshold:
        return TrendLabel.RISING
    if growth < -threshold:
        return TrendLabel.DECLINING
    return TrendLabel.FLAT


def select_momentum_strategy(sample_count: int, weights: MomentumWeights = DEFAULT_MOMENTUM_WEIGHTS) -> EmptyMomentum:
    """Pick the scoring rule for a series of `sample_count` weeks."""
    if sample_count == 0:
        return EmptyMomentum(weights)
    if sample_count < weights.window_weeks:
        return SparseMomentum(weights)
    return SteadyMomentum(weights)


def momentum(series: Sequence[WeeklySample], weights: Optional[MomentumWeights] = None) -> MomentumScore:
    """
    Momentum score for a weekly series.

    Args:
        series: Chronological weekly samples (hours must be non-negative)
        weights: Scoring constants (defaults when None)

    Returns:
        MomentumScore with score in [0, 100]
    """
    weights = weights or DEFAULT_MOMENTUM_WEIGHTS
    hours = [max(0.0, sample.hours) for sample in series]
    if not any(hours):
        return EmptyMomentum(weights).score(hours)
    return select_momentum_strategy(len(hours), weights).score(hours)
