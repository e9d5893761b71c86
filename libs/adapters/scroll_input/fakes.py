from __future__ import annotations

from collections.abc import Callable

from ports.input import ScrollEvent, ScrollEventPort, Sign


class FakeScrollEventPort(ScrollEventPort):
    """Simple pub/sub for scroll events; ``emit`` plays the listener thread."""

    def __init__(self) -> None:
        self._subs: list[Callable[[ScrollEvent], None]] = []
        self.running = False

    def subscribe(self, callback: Callable[[ScrollEvent], None]) -> None:
        self._subs.append(callback)

    def start(self) -> None:
        self.running = True

    def stop(self) -> None:
        self.running = False

    # Test helper: deliver an event to all subscribers
    def emit(
        self, direction: Sign, magnitude: float, continuous: bool = False, notches: bool = False
    ) -> None:
        event = ScrollEvent(
            direction=direction, magnitude=magnitude, continuous=continuous, notches=notches
        )
        for cb in list(self._subs):
            cb(event)
