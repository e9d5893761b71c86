from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

Sign = Literal[-1, 1]


@dataclass(frozen=True)
class ScrollEvent:
    """One wheel/trackpad sub-event.

    direction: +1 when the surface reveals content below, -1 for content above.
    magnitude: raw, unsigned wheel delta as reported by the OS.
    notches: magnitude counts wheel clicks (lines) rather than pixels; the
    on-screen distance of one click depends on the target application.
    """

    direction: Sign
    magnitude: float
    continuous: bool = False  # trackpad-style smooth scrolling
    notches: bool = False


class ScrollEventPort(ABC):
    """Global scroll listener; runs on its own thread and calls back per event."""

    @abstractmethod
    def subscribe(self, callback: Callable[[ScrollEvent], None]) -> None: ...

    @abstractmethod
    def start(self) -> None: ...

    @abstractmethod
    def stop(self) -> None: ...
