"""
Log aggregation by calendar bucket.

Groups session records by UTC day, ISO week, month, or year and sums their
minutes. Only buckets with at least one contributing record are returned;
zero-filling of weekly series is the velocity calculator's job.

Activity filtering happens once, per record, before grouping: a record that
matches the filter through several of its references is still counted once.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional

from Velocity.time_log.calendar_weeks import day_key, iso_week_key, month_key, year_key
from Velocity.time_log.models import Bucket, Granularity, SessionRecord
from Velocity.time_log.normalizer import activity_filter, ensure_records

KEY_FUNCTIONS: Dict[Granularity, Callable[[int], str]] = {
    Granularity.DAY: day_key,
    Granularity.WEEK: iso_week_key,
    Granularity.MONTH: month_key,
    Granularity.YEAR: year_key,
}


def filter_records(records: Iterable[SessionRecord], activity_ids=None) -> List[SessionRecord]:
    """
    Records referencing any of `activity_ids`; all records when None.

    An empty filter matches nothing.
    """
    records = ensure_records(records)
    id_set = activity_filter(activity_ids)
    if id_set is None:
        return records
    return [record for record in records if record.matches(id_set)]


def _bucket(records: Iterable[SessionRecord], key_fn: Callable[[int], str]) -> Dict[str, float]:
    totals: Dict[str, float] = defaultdict(float)
    for record in records:
        totals[key_fn(record.timestamp_ms)] += record.duration_minutes
    return dict(sorted(totals.items()))


def bucket_by_day(records: Iterable[SessionRecord]) -> Dict[str, float]:
    """Minutes per 'YYYY-MM-DD' (UTC), ascending."""
    return _bucket(ensure_records(records), day_key)


def bucket_by_week(records: Iterable[SessionRecord]) -> Dict[str, float]:
    """Minutes per ISO week key 'YYYY-Www', ascending."""
    return _bucket(ensure_records(records), iso_week_key)


def bucket_by_month(records: Iterable[SessionRecord]) -> Dict[str, float]:
    """Minutes per 'YYYY-MM', ascending."""
    return _bucket(ensure_records(records), month_key)


def bucket_by_year(records: Iterable[SessionRecord]) -> Dict[str, float]:
    """Minutes per 'YYYY', ascending."""
    return _bucket(ensure_records(records), year_key)


def aggregate(
    records: Iterable[SessionRecord],
    granularity: Granularity = Granularity.WEEK,
    activity_ids=None,
) -> List[Bucket]:
    """
    Sum minutes per calendar bucket.

    Args:
        records: Session records (or raw dicts)
        granularity: Granularity enum or its value ("day", "week", ...)
        activity_ids: Optional activity filter

    Returns:
        Buckets ordered by key ascending. The bucket minutes sum to the
        total duration of the filtered records.
    """
    granularity = Granularity(granularity)
    matching = filter_records(records, activity_ids)
    totals = _bucket(matching, KEY_FUNCTIONS[granularity])
    return [Bucket(key=key, minutes=minutes) for key, minutes in totals.items()]


@dataclass
class DailyLog:
    """All sessions logged on one UTC day."""
    date: str
    logs: List[SessionRecord] = field(default_factory=list)

    @property
    def minutes(self) -> float:
        return sum(log.duration_minutes for log in self.logs)


@dataclass
class TimeLogSummary:
    """Totals and per-bucket breakdowns, newest bucket first."""
    total_sessions: int = 0
    total_minutes: float = 0.0
    daily_logs: List[DailyLog] = field(default_factory=list)
    weekly: List[Bucket] = field(default_factory=list)
    monthly: List[Bucket] = field(default_factory=list)
    yearly: List[Bucket] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "total_sessions": self.total_sessions,
            "total_minutes": self.total_minutes,
            "daily_logs": [
                {"date": day.date, "minutes": day.minutes, "log_ids": [log.id for log in day.logs]}
                for day in self.daily_logs
            ],
            "weekly": [{"week": b.key, "minutes": b.minutes} for b in self.weekly],
            "monthly": [{"month": b.key, "minutes": b.minutes} for b in self.monthly],
            "yearly": [{"year": b.key, "minutes": b.minutes} for b in self.yearly],
        }


def summarize_time_logs(records: Iterable[SessionRecord], activity_ids: Optional[Iterable[str]] = None) -> TimeLogSummary:
    """
    Overall time-log summary for history views.

    Returns:
        TimeLogSummary with day/week/month/year breakdowns, newest first
    """
    matching = filter_records(records, activity_ids)

    days: Dict[str, List[SessionRecord]] = defaultdict(list)
    for record in matching:
        days[day_key(record.timestamp_ms)].append(record)

    return TimeLogSummary(
        total_sessions=len(matching),
        total_minutes=sum(record.duration_minutes for record in matching),
        daily_logs=[DailyLog(date=key, logs=logs) for key, logs in sorted(days.items(), reverse=True)],
        weekly=list(reversed(aggregate(matching, Granularity.WEEK))),
        monthly=list(reversed(aggregate(matching, Granularity.MONTH))),
        yearly=list(reversed(aggregate(matching, Granularity.YEAR))),
    )
