"""
Velocity: Insights Command

Weekly velocity, momentum, streak, session quality, and milestone pacing for
each goal in the data directory.

Usage:
    python -m commands.velocity.insights [--goal ID] [--window N|full] [--json]

Arguments:
    --data-dir      Directory with activities.json / timeLogs.json / goals.json
                    (default: VELOCITY_DATA_DIR or ./data)
    --goal          Goal id or name (default: all goals)
    --window        Display window in weeks, or "full" (default: 8)
    --min-sessions  Sessions per week that keep a streak alive (default: 2)
    --target-date   Pace against this date (YYYY-MM-DD) instead of the goal's
    --json          Emit JSON instead of tables
    --verbose       Debug logging

Examples:
    python -m commands.velocity.insights
    python -m commands.velocity.insights --goal piano --window full
    python -m commands.velocity.insights --target-date 2025-06-01 --json
"""

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional, Sequence

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from Velocity.config import load_config
from Velocity.data_source import DataDirectorySource
from Velocity.errors import VelocityError
from Velocity.rich_output import console, snapshot_report
from Velocity.time_log import FULL_HISTORY, Goal, velocity_snapshot
from commands.velocity import configure_logging

logger = logging.getLogger(__name__)


def parse_window(value: str):
    """argparse type for --window: positive int or 'full'."""
    if value.lower() == FULL_HISTORY:
        return FULL_HISTORY
    try:
        weeks = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"window must be a number of weeks or '{FULL_HISTORY}', got {value!r}")
    if weeks < 1:
        raise argparse.ArgumentTypeError("window must be at least 1 week")
    return weeks


def parse_min_sessions(value: str) -> int:
    """argparse type for --min-sessions: integer of at least 1."""
    try:
        sessions = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"min-sessions must be an integer, got {value!r}")
    if sessions < 1:
        raise argparse.ArgumentTypeError("min-sessions must be at least 1")
    return sessions


def parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}")


def select_goals(goals: List[Goal], selector: Optional[str]) -> List[Goal]:
    """Goals matching an id or (case-insensitive) name; all goals if no selector."""
    if not selector:
        return goals
    wanted = selector.lower()
    return [g for g in goals if g.id == selector or g.name.lower() == wanted]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Velocity insights for time-tracked goals",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m commands.velocity.insights
  python -m commands.velocity.insights --goal piano --window full
  python -m commands.velocity.insights --target-date 2025-06-01 --json

Window:
  A number of weeks shows exactly that many weeks ending this week.
  "full" shows every week from the first log through this week.
        """
    )

    parser.add_argument(
        "--data-dir",
        type=Path,
        help="Data directory (default: VELOCITY_DATA_DIR or ./data)"
    )

    parser.add_argument(
        "--goal",
        help="Goal id or name (default: all goals)"
    )

    parser.add_argument(
        "--window",
        type=parse_window,
        help="Weeks to show, or 'full' (default: VELOCITY_WINDOW_WEEKS or 8)"
    )

    parser.add_argument(
        "--min-sessions",
        type=parse_min_sessions,
        help="Sessions per week that keep a streak alive (default: 2)"
    )

    parser.add_argument(
        "--target-date",
        type=parse_date,
        help="Pace against this date instead of the goal's target (YYYY-MM-DD)"
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Output JSON"
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Debug logging"
    )

    return parser


def run_insights(args: argparse.Namespace, clock=None) -> int:
    """Load data, build snapshots, and print them. Returns an exit code."""
    config = load_config()
    configure_logging(config.log_level, args.verbose)

    source = DataDirectorySource(args.data_dir or config.data_dir)
    window = args.window or config.window_weeks
    minimum_sessions = config.minimum_sessions if args.min_sessions is None else args.min_sessions

    goals = select_goals(source.goals(), args.goal)
    if not goals:
        target = f"matching {args.goal!r} " if args.goal else ""
        print(f"No goals {target}found in {source.data_dir}", file=sys.stderr)
        return 1

    normalized = source.time_logs()
    awards = source.awards()

    snapshots = []
    for goal in goals:
        snapshot = velocity_snapshot(
            goal,
            normalized.records,
            window=window,
            minimum_sessions=minimum_sessions,
            clock=clock,
            weights=config.momentum_weights,
            existing_awards=awards,
            target_date=args.target_date,
        )
        snapshot.normalization = normalized
        snapshots.append((goal, snapshot))

    if args.json:
        print(json.dumps([s.to_dict() for _, s in snapshots], indent=2))
    else:
        for goal, snapshot in snapshots:
            snapshot_report(snapshot, goal_name=goal.name)
            console.print()
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point for velocity insights."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        return run_insights(args)
    except VelocityError as e:
        logger.error("Insights failed: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
