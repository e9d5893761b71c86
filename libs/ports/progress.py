from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from .vision import Raster

if TYPE_CHECKING:
    from domain.types import Progress


class ProgressSinkPort(ABC):
    """Presentation-facing sink; receives a snapshot after every accepted cycle."""

    @abstractmethod
    def publish(self, progress: Progress) -> None: ...


class ExportSinkPort(ABC):
    """Final destination for a finished capture (file, clipboard, ...)."""

    # returns a human-readable destination (e.g. the written path)
    @abstractmethod
    def deliver(self, image: Raster) -> str: ...
