#!/usr/bin/env python3
"""
Tests for calendar-bucket aggregation and the time-log summary.
"""

from datetime import datetime

import pytest

from Velocity.time_log.aggregator import (
    aggregate,
    bucket_by_day,
    bucket_by_week,
    filter_records,
    summarize_time_logs,
)
from Velocity.time_log.models import Bucket, Granularity


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def mixed_records(make_record):
    """Sessions across a year boundary and two activities."""
    return [
        make_record(datetime(2020, 12, 31, 10), minutes=30, activities="piano"),
        make_record(datetime(2021, 1, 1, 10), minutes=45, activities=("piano", "theory")),
        make_record(datetime(2021, 1, 5, 10), minutes=60, activities="theory"),
        make_record(datetime(2021, 2, 2, 10), minutes=15, activities="guitar"),
    ]


# ============================================================================
# Aggregation Tests
# ============================================================================


class TestAggregate:
    """Tests for aggregate."""

    def test_weekly_buckets_follow_iso_weeks(self, mixed_records):
        buckets = aggregate(mixed_records, Granularity.WEEK)

        assert buckets == [
            Bucket("2020-W53", 75.0),
            Bucket("2021-W01", 60.0),
            Bucket("2021-W05", 15.0),
        ]

    def test_buckets_are_ascending(self, mixed_records):
        for granularity in Granularity:
            keys = [b.key for b in aggregate(mixed_records, granularity)]
            assert keys == sorted(keys)

    def test_accepts_granularity_strings(self, mixed_records):
        assert aggregate(mixed_records, "month") == aggregate(mixed_records, Granularity.MONTH)

    def test_monthly_and_yearly(self, mixed_records):
        assert aggregate(mixed_records, Granularity.MONTH) == [
            Bucket("2020-12", 30.0),
            Bucket("2021-01", 105.0),
            Bucket("2021-02", 15.0),
        ]
        assert aggregate(mixed_records, Granularity.YEAR) == [
            Bucket("2020", 30.0),
            Bucket("2021", 120.0),
        ]

    def test_minutes_are_conserved(self, mixed_records):
        total = sum(r.duration_minutes for r in mixed_records)

        for granularity in Granularity:
            assert sum(b.minutes for b in aggregate(mixed_records, granularity)) == total

    def test_multi_activity_record_counted_once(self, mixed_records):
        buckets = aggregate(mixed_records, Granularity.WEEK, activity_ids=["piano", "theory"])

        assert sum(b.minutes for b in buckets) == 135.0

    def test_filter_is_pure(self, mixed_records):
        buckets = aggregate(mixed_records, Granularity.DAY, activity_ids=["theory"])

        assert buckets == [Bucket("2021-01-01", 45.0), Bucket("2021-01-05", 60.0)]

    def test_no_empty_buckets(self, mixed_records):
        assert all(b.minutes > 0 for b in aggregate(mixed_records, Granularity.WEEK))

    def test_empty_input(self):
        assert aggregate([], Granularity.WEEK) == []

    def test_invalid_granularity(self, mixed_records):
        with pytest.raises(ValueError):
            aggregate(mixed_records, "fortnight")

    def test_bucket_helpers(self, mixed_records):
        assert bucket_by_week(mixed_records)["2020-W53"] == 75.0
        assert bucket_by_day(mixed_records)["2021-02-02"] == 15.0


class TestFilterRecords:
    """Tests for filter_records."""

    def test_none_keeps_everything(self, mixed_records):
        assert filter_records(mixed_records) == mixed_records

    def test_empty_filter_matches_nothing(self, mixed_records):
        assert filter_records(mixed_records, []) == []

    def test_string_filter(self, mixed_records):
        assert len(filter_records(mixed_records, "guitar")) == 1

    def test_accepts_raw_dicts(self):
        raw = [{"id": "t1", "activityId": "piano", "duration": 30, "timestamp": 1710331200000}]

        assert filter_records(raw, ["piano"])[0].id == "t1"


# ============================================================================
# Summary Tests
# ============================================================================


class TestSummarizeTimeLogs:
    """Tests for summarize_time_logs."""

    def test_totals(self, mixed_records):
        summary = summarize_time_logs(mixed_records)

        assert summary.total_sessions == 4
        assert summary.total_minutes == 150.0

    def test_buckets_newest_first(self, mixed_records):
        summary = summarize_time_logs(mixed_records)

        assert [d.date for d in summary.daily_logs] == ["2021-02-02", "2021-01-05", "2021-01-01", "2020-12-31"]
        assert [b.key for b in summary.weekly] == ["2021-W05", "2021-W01", "2020-W53"]
        assert [b.key for b in summary.yearly] == ["2021", "2020"]

    def test_filtered_summary(self, mixed_records):
        summary = summarize_time_logs(mixed_records, ["guitar"])

        assert summary.total_sessions == 1
        assert summary.monthly == [Bucket("2021-02", 15.0)]

    def test_to_dict(self, mixed_records):
        data = summarize_time_logs(mixed_records).to_dict()

        assert data["weekly"][0] == {"week": "2021-W05", "minutes": 15.0}
        assert data["daily_logs"][0]["minutes"] == 15.0
