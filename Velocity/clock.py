"""
Clock abstraction for now-dependent analytics.

Current-week anchoring and trailing pacing windows read "now" from a clock
so tests (and replays) can pin it.
"""

from datetime import datetime, timezone
from typing import Optional


class SystemClock:
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def now_ms(self) -> int:
        return int(self.now().timestamp() * 1000)


class FixedClock(SystemClock):
    """
    Clock frozen at a given instant.

    Naive datetimes are treated as UTC.

    Example:
        clock = FixedClock(datetime(2024, 3, 13, 12, 0))
        weekly_series(records, ["piano"], window=8, clock=clock)
    """

    def __init__(self, instant: datetime):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self._instant = instant.astimezone(timezone.utc)

    def now(self) -> datetime:
        return self._instant

    @classmethod
    def from_ms(cls, timestamp_ms: int) -> "FixedClock":
        return cls(datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc))


_default_clock = SystemClock()


def resolve_clock(clock: Optional[SystemClock]) -> SystemClock:
    """Return `clock`, or the shared system clock when None."""
    return clock if clock is not None else _default_clock
