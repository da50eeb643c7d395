"""
Configuration for the Velocity engine.

Values come from the environment, optionally seeded from a `.env` file at the
project root (or an explicit path). Environment variables win over `.env`.

Variables:
    VELOCITY_DATA_DIR             Directory with activities/timeLogs/goals JSON
    VELOCITY_WINDOW_WEEKS         Display window in weeks (default 8)
    VELOCITY_MIN_SESSIONS         Sessions per week that keep a streak (default 2)
    VELOCITY_LOG_LEVEL            Logging level name (default WARNING)
    VELOCITY_VOLUME_TARGET_HOURS  Weekly hours that max out the volume score (default 20)
"""

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

from Velocity.errors import ConfigError
from Velocity.time_log.models import DEFAULT_MOMENTUM_WEIGHTS, MomentumWeights

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent
DEFAULT_DATA_DIR = PROJECT_ROOT / "data"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class AnalyticsConfig:
    """Resolved engine settings."""
    data_dir: Path = DEFAULT_DATA_DIR
    window_weeks: int = 8
    minimum_sessions: int = 2
    log_level: str = "WARNING"
    momentum_weights: MomentumWeights = field(default_factory=lambda: DEFAULT_MOMENTUM_WEIGHTS)


def _positive_int(name: str, raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")
    if value < 1:
        raise ConfigError(f"{name} must be at least 1, got {value}")
    return value


def _positive_float(name: str, raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def load_config(env_file: Optional[Union[str, Path]] = None) -> AnalyticsConfig:
    """
    Build an AnalyticsConfig from `.env` and the environment.

    Args:
        env_file: Explicit .env path (defaults to <project root>/.env)

    Returns:
        AnalyticsConfig

    Raises:
        ConfigError: If a variable is present but invalid
    """
    env_path = Path(env_file) if env_file else PROJECT_ROOT / ".env"
    if env_path.exists():
        load_dotenv(env_path, override=False)
        logger.debug("Loaded environment from %s", env_path)

    config = AnalyticsConfig()

    data_dir = os.getenv("VELOCITY_DATA_DIR")
    if data_dir:
        config = replace(config, data_dir=Path(data_dir).expanduser())

    window = os.getenv("VELOCITY_WINDOW_WEEKS")
    if window:
        config = replace(config, window_weeks=_positive_int("VELOCITY_WINDOW_WEEKS", window))

    minimum = os.getenv("VELOCITY_MIN_SESSIONS")
    if minimum:
        config = replace(config, minimum_sessions=_positive_int("VELOCITY_MIN_SESSIONS", minimum))

    level = os.getenv("VELOCITY_LOG_LEVEL")
    if level:
        level = level.strip().upper()
        if level not in LOG_LEVELS:
            raise ConfigError(f"VELOCITY_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {level!r}")
        config = replace(config, log_level=level)

    target = os.getenv("VELOCITY_VOLUME_TARGET_HOURS")
    if target:
        weights = replace(
            config.momentum_weights,
            volume_target_hours=_positive_float("VELOCITY_VOLUME_TARGET_HOURS", target),
        )
        config = replace(config, momentum_weights=weights)

    return config
