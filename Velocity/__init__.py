"""Velocity Engine

Time-log analytics for practice goals: weekly velocity, momentum, streaks,
session quality, and milestone pacing.
"""

__version__ = "0.3.0"
