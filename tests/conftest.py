"""
Pytest configuration and shared fixtures for Velocity tests.
"""

from datetime import datetime, timedelta, timezone
from pathlib import Path
import json
import sys

import pytest


# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from Velocity.clock import FixedClock
from Velocity.time_log.models import Goal, SessionRecord


# Wednesday of ISO week 2024-W11
NOW = datetime(2024, 3, 13, 12, 0, tzinfo=timezone.utc)


def to_ms(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp() * 1000)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def fixed_clock():
    """Clock pinned to Wednesday 2024-03-13 12:00 UTC (2024-W11)."""
    return FixedClock(NOW)


@pytest.fixture
def make_record():
    """Factory for SessionRecords at a datetime (naive = UTC)."""
    counter = {"n": 0}

    def _make(moment: datetime, minutes: float = 60, activities=("piano",), record_id=None) -> SessionRecord:
        counter["n"] += 1
        if isinstance(activities, str):
            activities = (activities,)
        return SessionRecord(
            id=record_id or f"log-{counter['n']}",
            activity_refs=tuple(activities),
            duration_minutes=float(minutes),
            timestamp_ms=to_ms(moment),
        )

    return _make


@pytest.fixture
def weekly_records(make_record):
    """Ten weeks of one 300-minute piano session, ending at NOW."""
    return [make_record(NOW - timedelta(weeks=k), minutes=300) for k in range(10)]


@pytest.fixture
def piano_goal():
    """100-hour piano goal due 70 days after NOW."""
    return Goal(
        id="goal-piano",
        name="Piano",
        target_hours=100,
        activity_refs=("piano",),
        created_at_ms=to_ms(NOW - timedelta(weeks=12)),
        target_date_ms=to_ms(NOW + timedelta(days=70)),
    )


@pytest.fixture
def data_dir(tmp_path):
    """Data directory in the app's storage format."""
    activities = [
        {"id": "piano", "name": "Piano", "totalTime": 900, "color": "#ff0000"},
        {"id": "theory", "name": "Theory", "totalTime": 120},
    ]
    time_logs = [
        {"id": "t1", "activityId": "piano", "duration": 300, "timestamp": to_ms(NOW - timedelta(weeks=2))},
        {"id": "t2", "activityIds": ["piano", "theory"], "duration": 300, "timestamp": to_ms(NOW - timedelta(weeks=1))},
        {"id": "t3", "activityId": "piano", "duration": 300, "timestamp": to_ms(NOW - timedelta(hours=2))},
        {"id": "t4", "activityId": "deleted-activity", "duration": 45, "timestamp": to_ms(NOW - timedelta(days=1))},
        {"id": "t5", "activityId": "piano", "duration": "a while", "timestamp": to_ms(NOW)},
    ]
    goals = [
        {
            "id": "goal-piano",
            "name": "Piano",
            "targetHours": 100,
            "activityIds": ["piano", "theory"],
            "createdAt": to_ms(NOW - timedelta(weeks=12)),
            "targetDate": to_ms(NOW + timedelta(days=70)),
        },
        {
            "id": "goal-guitar",
            "name": "Guitar",
            "targetHours": 50,
            "activityId": "guitar",
            "createdAt": to_ms(NOW - timedelta(weeks=4)),
        },
    ]
    awards = [
        {"id": "a1", "goalId": "goal-piano", "percentage": 25, "awardedAt": to_ms(NOW - timedelta(weeks=1)), "message": "Quarter"},
        {"goalId": "goal-piano"},
    ]
    (tmp_path / "activities.json").write_text(json.dumps(activities))
    (tmp_path / "timeLogs.json").write_text(json.dumps(time_logs))
    (tmp_path / "goals.json").write_text(json.dumps(goals))
    (tmp_path / "awards.json").write_text(json.dumps(awards))
    return tmp_path
