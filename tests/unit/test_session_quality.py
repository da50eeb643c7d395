#!/usr/bin/env python3
"""
Tests for session quality insights.
"""

from datetime import datetime

import pytest

from Velocity.clock import FixedClock
from Velocity.time_log.models import SessionKind
from Velocity.time_log.session_quality import best_week, session_quality
from Velocity.time_log.velocity import weekly_series


@pytest.fixture
def clock():
    return FixedClock(datetime(2024, 3, 13, 12))


class TestSessionQuality:
    """Tests for session_quality."""

    def test_average_session_length(self, make_record, clock):
        records = [
            make_record(datetime(2024, 3, 11, 9), minutes=30),
            make_record(datetime(2024, 3, 12, 9), minutes=60),
        ]
        series = weekly_series(records, ["piano"], window=2, clock=clock)

        result = session_quality(records, ["piano"], series)

        assert result.average_session_minutes == 45

    def test_focus_days(self, make_record, clock):
        records = [
            # two sessions on one day: focus day (50 minutes)
            make_record(datetime(2024, 3, 11, 9), minutes=25),
            make_record(datetime(2024, 3, 11, 18), minutes=25),
            # one 90-minute session: focus day by length
            make_record(datetime(2024, 3, 12, 9), minutes=90),
            # one short session: regular day
            make_record(datetime(2024, 3, 13, 9), minutes=20),
        ]
        series = weekly_series(records, ["piano"], window=1, clock=clock)

        result = session_quality(records, ["piano"], series)

        assert result.focus_day_average_minutes == 70
        assert result.non_focus_day_average_minutes == 20

    def test_unusual_sessions_newest_first(self, make_record, clock):
        records = [make_record(datetime(2024, 3, 4 + d, 9), minutes=40) for d in range(6)]
        records.append(make_record(datetime(2024, 3, 12, 9), minutes=200, record_id="long"))
        records.append(make_record(datetime(2024, 3, 13, 9), minutes=5, record_id="short"))
        series = weekly_series(records, ["piano"], window=2, clock=clock)

        result = session_quality(records, ["piano"], series)

        assert [(s.record_id, s.kind) for s in result.unusual_sessions] == [
            ("short", SessionKind.SHORT),
            ("long", SessionKind.LONG),
        ]
        assert result.unusual_sessions[0].date == "2024-03-13"

    def test_at_most_five_unusual_sessions(self, make_record, clock):
        records = [make_record(datetime(2024, 3, 11, h), minutes=60) for h in range(10)]
        records += [make_record(datetime(2024, 3, 12, h), minutes=1) for h in range(8)]
        series = weekly_series(records, ["piano"], window=1, clock=clock)

        result = session_quality(records, ["piano"], series)

        assert len(result.unusual_sessions) == 5

    def test_records_outside_series_are_ignored(self, make_record, clock):
        records = [
            make_record(datetime(2023, 1, 2, 9), minutes=600),
            make_record(datetime(2024, 3, 12, 9), minutes=30),
        ]
        series = weekly_series(records, ["piano"], window=1, clock=clock)

        result = session_quality(records, ["piano"], series)

        assert result.average_session_minutes == 30
        assert result.unusual_sessions == []

    def test_best_week(self, make_record, clock):
        records = [
            make_record(datetime(2024, 3, 4, 9), minutes=120),
            make_record(datetime(2024, 3, 12, 9), minutes=60),
        ]
        series = weekly_series(records, ["piano"], window=3, clock=clock)

        result = session_quality(records, ["piano"], series)

        assert result.best_week.week_key == "2024-W10"

    def test_no_matching_records(self, make_record, clock):
        records = [make_record(datetime(2024, 3, 12, 9), activities="guitar")]

        result = session_quality(records, ["piano"], [])

        assert result.average_session_minutes == 0
        assert result.best_week is None
        assert result.unusual_sessions == []

    def test_to_dict(self, make_record, clock):
        records = [make_record(datetime(2024, 3, 12, 9), minutes=30)]
        series = weekly_series(records, ["piano"], window=1, clock=clock)

        data = session_quality(records, ["piano"], series).to_dict()

        assert data["best_week"]["week_key"] == "2024-W11"
        assert data["unusual_sessions"] == []


class TestBestWeek:
    """Tests for best_week."""

    def test_earliest_wins_ties(self, make_record, clock):
        records = [
            make_record(datetime(2024, 3, 4, 9), minutes=60),
            make_record(datetime(2024, 3, 12, 9), minutes=60),
        ]
        series = weekly_series(records, ["piano"], window=2, clock=clock)

        assert best_week(series).week_key == "2024-W10"

    def test_empty(self):
        assert best_week([]) is None
