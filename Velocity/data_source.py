"""
Read-only access to the app's JSON data directory.

The app keeps one JSON array per collection:

    activities.json  [{id, name, totalTime, color}]
    timeLogs.json    [{id, activityId | activityIds, duration, timestamp}]
    goals.json       [{id, name, targetHours, activityId | activityIds, createdAt, targetDate?}]
    awards.json      [{id, goalId, percentage, awardedAt, message}]   (optional)

Writing is owned by the app; this module only loads.
"""

import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Union

from Velocity.errors import DataSourceError
from Velocity.time_log.awards import award_from_dict
from Velocity.time_log.models import Activity, Goal, GoalAward
from Velocity.time_log.normalizer import (
    NormalizationResult,
    activity_from_dict,
    goal_from_dict,
    normalize_records,
)

logger = logging.getLogger(__name__)

ACTIVITIES_FILE = "activities.json"
TIME_LOGS_FILE = "timeLogs.json"
GOALS_FILE = "goals.json"
AWARDS_FILE = "awards.json"


class DataDirectorySource:
    """
    Loads activities, time logs, goals, and awards from a data directory.

    Missing files read as empty collections; a file that exists but is not
    a JSON array raises DataSourceError.
    """

    def __init__(self, data_dir: Union[str, Path]):
        self.data_dir = Path(data_dir)

    def _read_array(self, filename: str) -> List[Any]:
        path = self.data_dir / filename
        if not path.exists():
            logger.info("No %s in %s, treating as empty", filename, self.data_dir)
            return []
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            raise DataSourceError(f"Cannot read {filename}: {e}", path=str(path)) from e
        except json.JSONDecodeError as e:
            raise DataSourceError(f"Invalid JSON in {filename}: {e}", path=str(path)) from e
        if data is None:
            return []
        if not isinstance(data, list):
            raise DataSourceError(f"{filename} must contain a JSON array", path=str(path))
        return data

    def raw_time_logs(self) -> List[Any]:
        return self._read_array(TIME_LOGS_FILE)

    def activities(self) -> List[Activity]:
        return [activity_from_dict(raw) for raw in self._read_array(ACTIVITIES_FILE) if isinstance(raw, dict) and raw.get("id")]

    def goals(self) -> List[Goal]:
        return [goal_from_dict(raw) for raw in self._read_array(GOALS_FILE) if isinstance(raw, dict) and raw.get("id")]

    def awards(self) -> List[GoalAward]:
        awards = []
        for raw in self._read_array(AWARDS_FILE):
            try:
                awards.append(award_from_dict(raw))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping invalid award entry %r: %s", raw, e)
        return awards

    def goal(self, goal_id: str) -> Optional[Goal]:
        return next((g for g in self.goals() if g.id == goal_id), None)

    def time_logs(self, validate_activities: bool = True) -> NormalizationResult:
        """
        Normalized time logs.

        Args:
            validate_activities: Exclude logs whose activities no longer exist.
                Skipped when there is no activities file to validate against.
        """
        activities = None
        if validate_activities and (self.data_dir / ACTIVITIES_FILE).exists():
            activities = self.activities()
        return normalize_records(self.raw_time_logs(), activities)
