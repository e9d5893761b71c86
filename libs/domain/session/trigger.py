from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Final, Protocol

from ports.input import ScrollEvent, Sign
from ports.time import ClockPort

from domain.errors import ScrollCaptureError

from .model import CycleResult

LOG: Final = logging.getLogger("session.trigger")


class CycleRunner(Protocol):
    def capture_cycle(
        self,
        expected_direction: Sign | None = None,
        max_magnitude: int | None = None,
        blocking: bool = True,
    ) -> CycleResult: ...


class ScrollTrigger:
    """Turns raw scroll events into capture cycles.

    Same-direction deltas accumulate until they cross a threshold; fires are
    at least ``debounce_s`` apart, and a fire that finds a cycle in flight is
    dropped. Call it from the listener thread (it is the subscribe callback).
    """

    def __init__(
        self,
        runner: CycleRunner,
        clock: ClockPort,
        debounce_s: float = 0.08,
        discrete_threshold: float = 1.0,
        continuous_threshold: float = 2.5,
        hint_scale: float = 20.0,
        hint_min: int = 24,
        hint_max: int = 200,
        notch_pixels: float = 0.0,
        notch_hint_max: int = 400,
        on_result: Callable[[CycleResult], None] | None = None,
        on_error: Callable[[ScrollCaptureError], None] | None = None,
    ) -> None:
        self.runner: Final = runner
        self.clock: Final = clock
        self.debounce_s = float(debounce_s)
        self.discrete_threshold = float(discrete_threshold)
        self.continuous_threshold = float(continuous_threshold)
        self.hint_scale = float(hint_scale)
        self.hint_min = int(hint_min)
        self.hint_max = int(hint_max)
        # 0 means the pixel distance of a wheel click is unknown
        self.notch_pixels = float(notch_pixels)
        self.notch_hint_max = int(notch_hint_max)
        self.on_result = on_result
        self.on_error = on_error
        self._mu = threading.Lock()
        self._accum = 0.0
        self._direction = 0
        self._last_fire: float | None = None

    def __call__(self, event: ScrollEvent) -> None:
        self.handle(event)

    def max_magnitude_hint(self, accumulated: float, notches: bool = False) -> int | None:
        """Search ceiling in pixels for the detector, or None for its full range.

        Pixel deltas scale by ``hint_scale``. Notch counts only give a ceiling
        when ``notch_pixels`` says how far one click moves the content.
        """
        if notches:
            if self.notch_pixels <= 0.0:
                return None
            px = abs(accumulated) * self.notch_pixels
            return int(min(max(px, self.hint_min), self.notch_hint_max))
        return int(min(max(abs(accumulated) * self.hint_scale, self.hint_min), self.hint_max))

    def handle(self, event: ScrollEvent) -> CycleResult | None:
        if abs(event.magnitude) <= 0.1:
            return None

        with self._mu:
            if self._direction and self._direction != event.direction:
                self._accum = 0.0
            self._direction = event.direction
            self._accum += abs(event.magnitude)

            threshold = self.continuous_threshold if event.continuous else self.discrete_threshold
            if self._accum < threshold:
                return None
            accumulated = self._accum
            self._accum = 0.0

            now = self.clock.now()
            if self._last_fire is not None and now - self._last_fire < self.debounce_s:
                return None
            self._last_fire = now

        hint = self.max_magnitude_hint(accumulated, event.notches)
        try:
            result = self.runner.capture_cycle(
                expected_direction=event.direction, max_magnitude=hint, blocking=False
            )
        except ScrollCaptureError as ex:
            LOG.debug("Triggered cycle failed: %s", ex)
            if self.on_error is not None:
                self.on_error(ex)
            return None

        if result.status == "busy":
            LOG.debug("Cycle in flight; dropped trigger (accum %.2f).", accumulated)
        elif self.on_result is not None:
            self.on_result(result)
        return result
