# sim/clock.py
from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


@dataclass(frozen=True)
class SimClock:
    """Maps simulation time (motion ticks) onto wall datetimes for logs and reports."""

    epoch: datetime  # wall time of t=0
    tick_s: float = 1.0  # wall seconds represented by one tick

    @classmethod
    def utc_epoch(cls, y: int, m: int, d: int, hh=0, mm=0, ss=0, *, tick_s=1.0) -> SimClock:
        return cls(datetime(y, m, d, hh, mm, ss, tzinfo=UTC), tick_s=tick_s)

    def to_wall(self, t: float) -> datetime:
        return self.epoch + timedelta(seconds=t * self.tick_s)


@dataclass
class ResolutionThrottle:
    """
    Gate that opens at most once per `interval_ms` of real time.

    The dispatch core has no timing state of its own; the driver asks this
    gate whether a resolution pass is due.
    """

    interval_ms: float = 500.0
    wall_ms: Callable[[], float] = monotonic_ms
    _last_ms: float | None = field(default=None, init=False)

    def due(self) -> bool:
        now = self.wall_ms()
        if self._last_ms is not None and now - self._last_ms < self.interval_ms:
            return False
        self._last_ms = now
        return True
