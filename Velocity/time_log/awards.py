"""Goal milestone awards.

Goals earn an award at 25%, 50%, 75%, and 100% of their target hours.
Awards themselves are stored elsewhere; this module decides which are due
and how far the goal is from the next one.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from Velocity.clock import SystemClock, resolve_clock
from Velocity.time_log.models import Activity, Goal, GoalAward, GoalAwardData, SessionRecord
from Velocity.time_log.normalizer import ensure_goal
from Velocity.time_log.pacing import progress_hours

MILESTONE_PERCENTAGES = (25, 50, 75, 100)
RECENT_AWARD_LIMIT = 5

AWARD_MESSAGES = {
    25: '🎯 Quarter Master! You\'ve completed 25% of "{name}"!',
    50: '🔥 Halfway Hero! You\'ve reached 50% of "{name}"!',
    75: '⚡ Almost There! You\'re 75% through "{name}"!',
    100: '🏆 Goal Crusher! You\'ve completed "{name}"!',
}


def goal_progress_from_logs(goal: Union[Goal, Mapping[str, Any]], records: Iterable[SessionRecord]) -> float:
    """Percent of target hours logged; 0 for a zero target."""
    goal = ensure_goal(goal)
    if goal.target_hours <= 0:
        return 0.0
    return progress_hours(goal, records) / goal.target_hours * 100


def goal_progress_from_activities(goal: Union[Goal, Mapping[str, Any]], activities: Iterable[Activity]) -> float:
    """Percent of target hours from the linked activities' running totals."""
    goal = ensure_goal(goal)
    linked = [a for a in activities if a.id in goal.activity_refs]
    if not linked or goal.target_hours <= 0:
        return 0.0
    total_minutes = sum(a.total_time_minutes for a in linked)
    return total_minutes / 60 / goal.target_hours * 100


def award_message(percentage: int, goal_name: str) -> str:
    template = AWARD_MESSAGES.get(percentage)
    if template is None:
        return f'🎉 You\'ve reached {percentage}% of "{goal_name}"!'
    return template.format(name=goal_name)


def check_new_milestones(
    progress_percent: float,
    existing_awards: Iterable[GoalAward],
    goal_id: str,
    goal_name: str = "your goal",
    clock: Optional[SystemClock] = None,
) -> List[GoalAward]:
    """Awards for milestones reached but not yet awarded."""
    awarded = {award.percentage for award in existing_awards}
    now_ms = resolve_clock(clock).now_ms()
    return [
        GoalAward(
            id=f"{goal_id}-{percentage}-{now_ms}",
            goal_id=goal_id,
            percentage=percentage,
            awarded_at_ms=now_ms,
            message=award_message(percentage, goal_name),
        )
        for percentage in MILESTONE_PERCENTAGES
        if progress_percent >= percentage and percentage not in awarded
    ]


def _dedupe_awards(awards: Iterable[GoalAward]) -> List[GoalAward]:
    latest: Dict[int, GoalAward] = {}
    for award in awards:
        existing = latest.get(award.percentage)
        if existing is None or award.awarded_at_ms > existing.awarded_at_ms:
            latest[award.percentage] = award
    return [latest[p] for p in sorted(latest)]


def goal_award_data(
    goal: Union[Goal, Mapping[str, Any]],
    records: Iterable[SessionRecord],
    existing_awards: Sequence[GoalAward] = (),
) -> GoalAwardData:
    """
    Earned awards (one per milestone, latest kept) and the next milestone.

    `progress_to_next` is the percent covered between the highest milestone
    below the next one (or 0) and the next one.
    """
    goal = ensure_goal(goal)
    progress = goal_progress_from_logs(goal, records)
    awards = _dedupe_awards(a for a in existing_awards if a.goal_id == goal.id)

    next_milestone = next((p for p in MILESTONE_PERCENTAGES if progress < p), None)
    progress_to_next = 0.0
    if next_milestone is not None:
        previous = max((p for p in MILESTONE_PERCENTAGES if p < next_milestone), default=0)
        span = next_milestone - previous
        progress_to_next = max(0.0, min(100.0, (progress - previous) / span * 100))

    return GoalAwardData(
        awards=awards,
        next_milestone=next_milestone,
        progress_to_next=progress_to_next,
        progress_percent=progress,
    )


def goal_awards_for(goal_id: str, all_awards: Iterable[GoalAward]) -> List[GoalAward]:
    return sorted((a for a in all_awards if a.goal_id == goal_id), key=lambda a: a.percentage)


def latest_goal_award(goal_id: str, all_awards: Iterable[GoalAward]) -> Optional[GoalAward]:
    awards = goal_awards_for(goal_id, all_awards)
    return awards[-1] if awards else None


def has_goal_awards(goal_id: str, all_awards: Iterable[GoalAward]) -> bool:
    return any(a.goal_id == goal_id for a in all_awards)


def award_statistics(all_awards: Iterable[GoalAward]) -> Dict[str, Any]:
    """Total awards, count per milestone, and the most recent few."""
    all_awards = list(all_awards)
    return {
        "total_awards": len(all_awards),
        "awards_by_percentage": {
            p: sum(1 for a in all_awards if a.percentage == p) for p in MILESTONE_PERCENTAGES
        },
        "recent_awards": sorted(all_awards, key=lambda a: a.awarded_at_ms, reverse=True)[:RECENT_AWARD_LIMIT],
    }


def award_from_dict(raw: Mapping[str, Any]) -> GoalAward:
    """GoalAward from a stored dict."""
    percentage = int(raw["percentage"])
    goal_id = raw.get("goalId") or raw.get("goal_id")
    if not goal_id:
        raise KeyError("goalId")
    goal_id = str(goal_id)
    return GoalAward(
        id=str(raw.get("id") or f"{goal_id}-{percentage}"),
        goal_id=goal_id,
        percentage=percentage,
        awarded_at_ms=int(raw.get("awardedAt") or raw.get("awarded_at_ms") or 0),
        message=str(raw.get("message") or ""),
    )
