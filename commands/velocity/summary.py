"""
Velocity: Time-Log Summary Command

Time logged per day, week, month, or year, newest first, optionally limited
to one goal's activities.

Usage:
    python -m commands.velocity.summary [--by week] [--goal ID] [--limit N] [--json]

Examples:
    python -m commands.velocity.summary
    python -m commands.velocity.summary --by month --goal piano
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from Velocity.config import load_config
from Velocity.data_source import DataDirectorySource
from Velocity.errors import VelocityError
from Velocity.rich_output import summary_table
from Velocity.time_log import Granularity, summarize_time_logs
from commands.velocity import configure_logging
from commands.velocity.insights import select_goals

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Summarize logged time by calendar period",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--data-dir", type=Path, help="Data directory (default: VELOCITY_DATA_DIR or ./data)")
    parser.add_argument(
        "--by",
        choices=[g.value for g in Granularity],
        default=Granularity.WEEK.value,
        help="Bucket size (default: week)"
    )
    parser.add_argument("--goal", help="Only count this goal's activities (id or name)")
    parser.add_argument("--limit", type=int, default=12, help="Rows to show (default: 12)")
    parser.add_argument("--json", action="store_true", help="Output JSON")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser


def run_summary(args: argparse.Namespace) -> int:
    config = load_config()
    configure_logging(config.log_level, args.verbose)

    source = DataDirectorySource(args.data_dir or config.data_dir)
    activity_ids = None
    if args.goal:
        goals = select_goals(source.goals(), args.goal)
        if not goals:
            print(f"No goal matching {args.goal!r} in {source.data_dir}", file=sys.stderr)
            return 1
        activity_ids = list(goals[0].activity_refs)

    summary = summarize_time_logs(source.time_logs().records, activity_ids)

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        summary_table(summary, granularity=Granularity(args.by), limit=args.limit)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point for the time-log summary."""
    args = build_parser().parse_args(argv)
    try:
        return run_summary(args)
    except VelocityError as e:
        logger.error("Summary failed: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
