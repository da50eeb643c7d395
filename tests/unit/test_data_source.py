#!/usr/bin/env python3
"""
Tests for the JSON data directory source.
"""

import json

import pytest

from Velocity.data_source import DataDirectorySource
from Velocity.errors import DataSourceError


class TestDataDirectorySource:
    """Tests for DataDirectorySource."""

    def test_loads_goals_in_both_shapes(self, data_dir):
        goals = DataDirectorySource(data_dir).goals()

        assert [g.id for g in goals] == ["goal-piano", "goal-guitar"]
        assert goals[0].activity_refs == ("piano", "theory")
        assert goals[1].activity_refs == ("guitar",)
        assert goals[1].target_date_ms is None

    def test_goal_lookup(self, data_dir):
        source = DataDirectorySource(data_dir)

        assert source.goal("goal-guitar").name == "Guitar"
        assert source.goal("missing") is None

    def test_activities(self, data_dir):
        activities = DataDirectorySource(data_dir).activities()

        assert activities[0].total_time_minutes == 900.0
        assert activities[1].color is None

    def test_time_logs_exclude_malformed_and_orphaned(self, data_dir):
        result = DataDirectorySource(data_dir).time_logs()

        assert [r.id for r in result.records] == ["t1", "t2", "t3"]
        assert result.malformed_count == 1
        assert result.orphaned_count == 1

    def test_time_logs_without_validation(self, data_dir):
        result = DataDirectorySource(data_dir).time_logs(validate_activities=False)

        assert len(result.records) == 4
        assert result.orphaned_count == 0

    def test_invalid_awards_skipped(self, data_dir):
        awards = DataDirectorySource(data_dir).awards()

        assert len(awards) == 1
        assert awards[0].goal_id == "goal-piano"

    def test_award_without_goal_id_skipped(self, tmp_path):
        (tmp_path / "awards.json").write_text(json.dumps([
            {"percentage": 50, "awardedAt": 1000},
            {"goalId": "goal-piano", "percentage": 25, "awardedAt": 2000},
        ]))

        awards = DataDirectorySource(tmp_path).awards()

        assert [a.goal_id for a in awards] == ["goal-piano"]

    def test_missing_files_are_empty(self, tmp_path):
        source = DataDirectorySource(tmp_path)

        assert source.goals() == []
        assert source.awards() == []
        assert source.time_logs().records == []

    def test_missing_activities_file_skips_orphan_check(self, data_dir):
        (data_dir / "activities.json").unlink()

        result = DataDirectorySource(data_dir).time_logs()

        assert result.orphaned_count == 0
        assert len(result.records) == 4

    def test_invalid_json_raises(self, tmp_path):
        (tmp_path / "goals.json").write_text("{not json")

        with pytest.raises(DataSourceError) as exc_info:
            DataDirectorySource(tmp_path).goals()

        assert exc_info.value.path.endswith("goals.json")

    def test_non_array_raises(self, tmp_path):
        (tmp_path / "timeLogs.json").write_text('{"logs": []}')

        with pytest.raises(DataSourceError):
            DataDirectorySource(tmp_path).raw_time_logs()

    def test_null_file_is_empty(self, tmp_path):
        (tmp_path / "goals.json").write_text("null")

        assert DataDirectorySource(tmp_path).goals() == []
