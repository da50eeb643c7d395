"""
Velocity Commands

Commands for time-log analytics:
- insights : Velocity, momentum, streak, and pacing report per goal
- summary  : Time logged per day, week, month, or year
"""

import logging

__all__ = ["insights", "summary", "configure_logging"]

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "WARNING", verbose: bool = False) -> None:
    """Root logging for CLI runs; --verbose forces DEBUG."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level, logging.WARNING),
        format=LOG_FORMAT,
    )
