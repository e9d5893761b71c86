from __future__ import annotations

from ports.time import ClockPort, SleeperPort


class FakeClockPort(ClockPort):
    """Manually driven clock for debounce tests."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = float(start)

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        self._now += float(seconds)


class FakeSleeperPort(SleeperPort):
    """Records requested sleeps; advances a linked fake clock if given."""

    def __init__(self, clock: FakeClockPort | None = None) -> None:
        self.calls: list[float] = []
        self._clock = clock

    def sleep(self, seconds: float) -> None:
        self.calls.append(float(seconds))
        if self._clock is not None:
            self._clock.advance(seconds)
