#!/usr/bin/env python3
"""
Rich formatting for Velocity CLI output.

Renders velocity snapshots and time-log summaries as terminal tables using
the rich library.

Usage:
    from Velocity.rich_output import snapshot_report, summary_table

    snapshot_report(snapshot, goal_name="Piano")
    text = summary_table(summary, granularity="week", return_string=True)
"""

from io import StringIO
from typing import List, Optional

from rich.box import ROUNDED, SIMPLE
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from Velocity.time_log.aggregator import TimeLogSummary
from Velocity.time_log.models import Granularity, TrendLabel
from Velocity.time_log.pacing import pacing_status
from Velocity.time_log.snapshot import VelocitySnapshot
from Velocity.time_log.streaks import streak_label


# Global console instance
console = Console()

TREND_STYLES = {
    TrendLabel.RISING: ("green", "▲ rising"),
    TrendLabel.FLAT: ("yellow", "▶ flat"),
    TrendLabel.DECLINING: ("red", "▼ declining"),
}


def get_score_style(score: float, thresholds: tuple = (40, 70)) -> str:
    """
    Color for a 0-100 score.

    Args:
        score: Score to evaluate
        thresholds: (low, high); >= high is green, >= low yellow, else red
    """
    low, high = thresholds
    if score >= high:
        return "green"
    elif score >= low:
        return "yellow"
    else:
        return "red"


def get_gap_style(gap_hours: float) -> str:
    if gap_hours <= 0:
        return "green"
    elif gap_hours <= 1:
        return "yellow"
    else:
        return "red"


def sparkline(values: List[float]) -> str:
    """Unicode block sparkline for a list of non-negative values."""
    blocks = "▁▂▃▄▅▆▇█"
    if not values:
        return ""
    peak = max(values)
    if peak <= 0:
        return blocks[0] * len(values)
    return "".join(blocks[min(len(blocks) - 1, int(v / peak * (len(blocks) - 1)))] for v in values)


def _emit(renderables: list, return_string: bool, width: int = 80) -> Optional[str]:
    if return_string:
        buffer = StringIO()
        temp_console = Console(file=buffer, force_terminal=False, width=width)
        for item in renderables:
            temp_console.print(item)
        return buffer.getvalue()
    for item in renderables:
        console.print(item)
    return None


def snapshot_report(
    snapshot: VelocitySnapshot,
    goal_name: Optional[str] = None,
    return_string: bool = False,
) -> Optional[str]:
    """
    Velocity insights for one goal.

    Args:
        snapshot: Result of velocity_snapshot/analyze_goal
        goal_name: Title override (defaults to the goal id)
        return_string: If True, return as string instead of printing

    Returns:
        String output if return_string=True, else None (prints directly)
    """
    title = goal_name or snapshot.goal_id

    if not snapshot.has_data:
        panel = Panel(
            "[dim]Start logging time to see velocity insights and trends.[/dim]",
            title=f"[bold]{title}[/bold]",
            box=ROUNDED,
        )
        return _emit([panel] + _exclusion_notes(snapshot), return_string)

    hours = [sample.hours for sample in snapshot.weekly_series]

    table = Table(
        title=f"[bold]{title}[/bold] · {snapshot.weeks_of_data} weeks of data",
        box=ROUNDED,
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Value", justify="right", style="bold")
    table.add_column("Detail")

    table.add_row(
        "Weekly hours",
        f"{hours[-1]:.1f}h",
        f"{sparkline(hours)}  {snapshot.average_slope:+.1f}h/week",
    )

    m = snapshot.momentum
    style = get_score_style(m.score)
    trend_style, trend_text = TREND_STYLES[m.trend]
    table.add_row(
        "Momentum",
        f"[{style}]{m.score}[/{style}]",
        f"[{trend_style}]{trend_text}[/{trend_style}] ({m.change_percent:+.1f}%) · "
        f"avg {m.factors.rolling_average_hours:.1f}h · sd {m.factors.standard_deviation:.1f}",
    )

    s = snapshot.streak
    table.add_row(
        "Streak",
        streak_label(s.current),
        f"best {streak_label(s.longest)} · {s.minimum_sessions_per_week}+ sessions/week"
        + (f" · last miss {s.last_miss_week}" if s.last_miss_week else ""),
    )

    q = snapshot.session_quality
    table.add_row(
        "Sessions",
        f"{q.average_session_minutes:.0f}m avg",
        f"focus days {q.focus_day_average_minutes:.0f}m · other days {q.non_focus_day_average_minutes:.0f}m"
        + (f" · best {q.best_week.week_key} ({q.best_week.hours:.1f}h)" if q.best_week else ""),
    )

    p = snapshot.pacing
    if p.target_date:
        gap_style = get_gap_style(p.gap_hours)
        table.add_row(
            "Pacing",
            f"[{gap_style}]{pacing_status(p.gap_hours)}[/{gap_style}]",
            f"need {p.required_weekly_hours:.1f}h/week by {p.target_date.isoformat()} · "
            f"doing {p.current_weekly_hours:.1f}h/week",
        )
    else:
        table.add_row("Pacing", "[dim]no target[/dim]", f"doing {p.current_weekly_hours:.1f}h/week")

    a = snapshot.awards
    table.add_row(
        "Progress",
        f"{a.progress_percent:.0f}%",
        f"next milestone {a.next_milestone}% ({a.progress_to_next:.0f}% there)"
        if a.next_milestone else "all milestones reached",
    )

    proj = snapshot.projection
    if proj.completion_date:
        table.add_row(
            "Projection",
            proj.completion_date.isoformat(),
            f"{proj.hours_remaining:.1f}h left at {proj.weekly_hours:.1f}h/week ({proj.commitment_label})",
        )

    renderables: list = [table]
    if q.unusual_sessions:
        unusual = Table(title="Unusual sessions", box=SIMPLE, header_style="bold")
        unusual.add_column("Date")
        unusual.add_column("Kind")
        unusual.add_column("Minutes", justify="right")
        for session in q.unusual_sessions:
            unusual.add_row(session.date, session.kind.value, f"{session.duration_minutes:.0f}")
        renderables.append(unusual)

    return _emit(renderables + _exclusion_notes(snapshot), return_string)


def _exclusion_notes(snapshot: VelocitySnapshot) -> list:
    n = snapshot.normalization
    if not n or not n.excluded_count:
        return []
    return [
        f"[dim italic]Excluded {n.excluded_count} time logs "
        f"({n.malformed_count} malformed, {n.orphaned_count} orphaned)[/dim italic]"
    ]


def summary_table(
    summary: TimeLogSummary,
    granularity: Granularity = Granularity.WEEK,
    limit: int = 12,
    return_string: bool = False,
) -> Optional[str]:
    """
    Time-log totals per bucket, newest first.

    Args:
        summary: Result of summarize_time_logs
        granularity: Which breakdown to show
        limit: Maximum rows
        return_string: If True, return as string instead of printing
    """
    granularity = Granularity(granularity)
    table = Table(
        title=f"[bold]Time Log[/bold] · {summary.total_sessions} sessions · {summary.total_minutes / 60:.1f}h",
        box=ROUNDED,
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column(granularity.value.capitalize(), style="cyan", no_wrap=True)
    table.add_column("Hours", justify="right")
    table.add_column("Minutes", justify="right")

    if granularity == Granularity.DAY:
        rows = [(day.date, day.minutes) for day in summary.daily_logs]
    else:
        buckets = {
            Granularity.WEEK: summary.weekly,
            Granularity.MONTH: summary.monthly,
            Granularity.YEAR: summary.yearly,
        }[granularity]
        rows = [(bucket.key, bucket.minutes) for bucket in buckets]

    for key, minutes in rows[:limit]:
        table.add_row(key, f"{minutes / 60:.1f}", f"{minutes:.0f}")

    return _emit([table], return_string)
