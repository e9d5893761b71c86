from __future__ import annotations

from abc import ABC, abstractmethod


class ClockPort(ABC):
    """Monotonic seconds; used for debounce windows, never for wall time."""

    @abstractmethod
    def now(self) -> float: ...


class SleeperPort(ABC):
    # polling loops sleep through this so tests can skip the wait
    @abstractmethod
    def sleep(self, seconds: float) -> None: ...
