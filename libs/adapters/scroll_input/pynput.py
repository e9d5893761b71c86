from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any, Final

from ports.input import ScrollEvent, ScrollEventPort
from ports.vision import Region

LOG: Final = logging.getLogger("scroll_input")


class PynputScrollEventPort(ScrollEventPort):
    """Global wheel listener backed by pynput (its own daemon thread).

    pynput reports ``dy > 0`` for wheel-up, which reveals content above, so
    the sign is flipped into ScrollEvent.direction. ``dy`` counts wheel clicks,
    so events are flagged as notches. With ``bounds`` set, only
    wheel events over that screen rectangle are forwarded.
    """

    def __init__(self, bounds: Region | None = None) -> None:
        self._bounds = bounds
        self._subs: list[Callable[[ScrollEvent], None]] = []
        self._listener: Any = None
        self._mu = threading.Lock()

    def subscribe(self, callback: Callable[[ScrollEvent], None]) -> None:
        self._subs.append(callback)

    def _inside(self, x: float, y: float) -> bool:
        b = self._bounds
        if b is None:
            return True
        return b.x <= x < b.x + b.width and b.y <= y < b.y + b.height

    def _on_scroll(self, x: float, y: float, dx: float, dy: float) -> None:
        if not dy or not self._inside(x, y):
            return
        event = ScrollEvent(
            direction=-1 if dy > 0 else 1, magnitude=abs(float(dy)), notches=True
        )
        for cb in list(self._subs):
            try:
                cb(event)
            except Exception:
                LOG.exception("Scroll subscriber failed")

    def start(self) -> None:
        with self._mu:
            if self._listener is not None:
                return
            # imported late: pynput connects to the display server on import
            from pynput import mouse

            self._listener = mouse.Listener(on_scroll=self._on_scroll)
            self._listener.daemon = True
            self._listener.start()
            LOG.info("Scroll listener started")

    def stop(self) -> None:
        with self._mu:
            listener, self._listener = self._listener, None
        if listener is not None:
            listener.stop()
            LOG.info("Scroll listener stopped")
