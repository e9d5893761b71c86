from __future__ import annotations

import time

from ports.time import ClockPort, SleeperPort


class MonotonicClockPort(ClockPort):
    """perf_counter based; only differences between readings mean anything."""

    def now(self) -> float:
        return time.perf_counter()


class SystemSleeperPort(SleeperPort):
    def sleep(self, seconds: float) -> None:
        time.sleep(max(0.0, seconds))
