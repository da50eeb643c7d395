"""
Boundary adapter for raw time-log, goal, and activity data.

Stored records come in two shapes: the legacy single `activityId` field and
the newer `activityIds` list. Everything past this module sees only the
canonical `SessionRecord.activity_refs` tuple, so aggregation code never
branches on shape.

Records that cannot be normalized (malformed) or that point only at
activities that no longer exist (orphaned) are excluded and counted. The
counts travel with the result and are logged.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from Velocity.errors import InvalidRecordError
from Velocity.time_log.models import Activity, Goal, SessionRecord

logger = logging.getLogger(__name__)

RawRecord = Union[Mapping[str, Any], SessionRecord]


@dataclass
class NormalizationResult:
    """Canonical records plus an account of what was excluded."""
    records: List[SessionRecord] = field(default_factory=list)
    malformed_count: int = 0
    orphaned_count: int = 0
    pruned_reference_count: int = 0
    excluded_ids: List[str] = field(default_factory=list)

    @property
    def excluded_count(self) -> int:
        return self.malformed_count + self.orphaned_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "record_count": len(self.records),
            "malformed_count": self.malformed_count,
            "orphaned_count": self.orphaned_count,
            "pruned_reference_count": self.pruned_reference_count,
            "excluded_ids": list(self.excluded_ids),
        }


def _get(raw: Mapping[str, Any], *keys: str) -> Any:
    """First present, non-None value among `keys`."""
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def activity_refs_of(raw: Mapping[str, Any]) -> Tuple[str, ...]:
    """
    Ordered, de-duplicated activity references of a raw record or goal.

    The `activityIds` list wins when it is non-empty; otherwise the legacy
    `activityId` scalar is used.
    """
    ids = _get(raw, "activityIds", "activity_ids", "activity_refs")
    refs: List[str] = []
    if isinstance(ids, (list, tuple)):
        for ref in ids:
            if isinstance(ref, str) and ref and ref not in refs:
                refs.append(ref)
    if not refs:
        legacy = _get(raw, "activityId", "activity_id")
        if isinstance(legacy, str) and legacy:
            refs.append(legacy)
    return tuple(refs)


def resolve_primary_activity(raw: RawRecord) -> Optional[str]:
    """
    Primary activity of a record: first of `activityIds`, else `activityId`.

    Returns:
        The activity id, or None for a record with no usable reference
    """
    if isinstance(raw, SessionRecord):
        return raw.primary_activity
    refs = activity_refs_of(raw)
    return refs[0] if refs else None


def to_session_record(raw: RawRecord) -> SessionRecord:
    """
    Convert one raw record to a SessionRecord.

    Raises:
        InvalidRecordError: If the record has no activity reference, a
            missing or non-positive duration, or a missing timestamp
    """
    if isinstance(raw, SessionRecord):
        return raw
    if not isinstance(raw, Mapping):
        raise InvalidRecordError(f"Record is not a mapping: {type(raw).__name__}")

    record_id = raw.get("id")
    record_id = str(record_id) if record_id is not None else None

    refs = activity_refs_of(raw)
    if not refs:
        raise InvalidRecordError("Record has no activity reference", record_id=record_id)

    duration = _get(raw, "duration", "durationMinutes", "duration_minutes")
    if not _is_number(duration) or duration <= 0:
        raise InvalidRecordError(f"Invalid duration: {duration!r}", record_id=record_id)

    timestamp = _get(raw, "timestamp", "timestampMs", "timestamp_ms")
    if not _is_number(timestamp):
        raise InvalidRecordError(f"Invalid timestamp: {timestamp!r}", record_id=record_id)

    return SessionRecord(
        id=record_id or f"{refs[0]}-{int(timestamp)}",
        activity_refs=refs,
        duration_minutes=float(duration),
        timestamp_ms=int(timestamp),
    )


def normalize_records(
    raw_logs: Iterable[RawRecord],
    activities: Optional[Iterable[Union[Activity, Mapping[str, Any], str]]] = None,
) -> NormalizationResult:
    """
    Normalize raw logs and exclude malformed and orphaned records.

    Args:
        raw_logs: Raw record dicts (either shape) or SessionRecords
        activities: Known activities (Activity, dict, or bare id). When
            given, references to unknown ids are pruned and records left with
            no known reference are counted as orphaned.

    Returns:
        NormalizationResult with canonical records and exclusion counts
    """
    known_ids = _known_activity_ids(activities) if activities is not None else None
    result = NormalizationResult()

    for raw in raw_logs:
        try:
            record = to_session_record(raw)
        except InvalidRecordError as e:
            result.malformed_count += 1
            if e.record_id:
                result.excluded_ids.append(e.record_id)
            logger.debug("Excluding malformed record: %s", e)
            continue

        if known_ids is not None:
            live_refs = tuple(ref for ref in record.activity_refs if ref in known_ids)
            if not live_refs:
                result.orphaned_count += 1
                result.excluded_ids.append(record.id)
                logger.debug("Excluding orphaned record %s -> %s", record.id, record.activity_refs)
                continue
            if len(live_refs) != len(record.activity_refs):
                result.pruned_reference_count += len(record.activity_refs) - len(live_refs)
                record = SessionRecord(
                    id=record.id,
                    activity_refs=live_refs,
                    duration_minutes=record.duration_minutes,
                    timestamp_ms=record.timestamp_ms,
                )

        result.records.append(record)

    if result.excluded_count:
        logger.warning(
            "Excluded %d of %d time logs (%d malformed, %d orphaned)",
            result.excluded_count,
            result.excluded_count + len(result.records),
            result.malformed_count,
            result.orphaned_count,
        )

    return result


def _known_activity_ids(activities) -> set:
    ids = set()
    for activity in activities:
        if isinstance(activity, str):
            ids.add(activity)
        elif isinstance(activity, Activity):
            ids.add(activity.id)
        elif isinstance(activity, Mapping) and activity.get("id") is not None:
            ids.add(str(activity["id"]))
    return ids


def ensure_records(records: Iterable[RawRecord]) -> List[SessionRecord]:
    """
    Accept SessionRecords or raw dicts; raw dicts are normalized.

    Analytics entry points call this so callers may pass either. Excluded
    raw records are logged by `normalize_records`.
    """
    records = list(records)
    if all(isinstance(r, SessionRecord) for r in records):
        return records
    return normalize_records(records).records


def activity_from_dict(raw: Mapping[str, Any]) -> Activity:
    """Activity from a stored dict (`totalTime` in minutes)."""
    total = _get(raw, "totalTime", "total_time_minutes", "totalTimeMinutes")
    return Activity(
        id=str(raw["id"]),
        name=str(raw.get("name") or raw["id"]),
        total_time_minutes=float(total) if _is_number(total) else 0.0,
        color=raw.get("color"),
    )


def goal_from_dict(raw: Mapping[str, Any]) -> Goal:
    """
    Goal from a stored dict, in either activity-reference shape.

    Missing or non-numeric `targetHours` becomes 0, which the analytics
    treat as a goal with no measurable progress.
    """
    target_hours = _get(raw, "targetHours", "target_hours")
    created_at = _get(raw, "createdAt", "created_at_ms")
    target_date = _get(raw, "targetDate", "target_date_ms")
    completed_at = _get(raw, "completedAt", "completed_at_ms")
    return Goal(
        id=str(raw["id"]),
        name=str(raw.get("name") or raw["id"]),
        target_hours=float(target_hours) if _is_number(target_hours) else 0.0,
        activity_refs=activity_refs_of(raw),
        created_at_ms=int(created_at) if _is_number(created_at) else 0,
        target_date_ms=int(target_date) if _is_number(target_date) else None,
        completed_at_ms=int(completed_at) if _is_number(completed_at) else None,
        description=raw.get("description"),
    )


def ensure_goal(goal: Union[Goal, Mapping[str, Any]]) -> Goal:
    return goal if isinstance(goal, Goal) else goal_from_dict(goal)


def activity_filter(activity_ids: Optional[Union[str, Sequence[str], Iterable[str]]]) -> Optional[frozenset]:
    """Normalize an activity-id filter. None means 'no filter'."""
    if activity_ids is None:
        return None
    if isinstance(activity_ids, str):
        return frozenset([activity_ids])
    return frozenset(activity_ids)
