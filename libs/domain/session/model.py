from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from ports.vision import Raster, Region

from domain.types import Progress

# IDLE covers "never started", finished, cancelled and stopped-with-data.
SessionState = Literal["IDLE", "CAPTURING", "FAULTED"]
CycleStatus = Literal["updated", "no_update", "busy"]


@dataclass
class ScrollSession:
    """Mutable capture history. Owned by the service, never handed out."""

    region: Region | None = None
    frames: list[Raster] = field(default_factory=list)
    offsets: list[int] = field(default_factory=list)
    composed: Raster | None = None
    state: SessionState = "IDLE"

    def clear(self) -> None:
        self.frames.clear()
        self.offsets.clear()
        self.composed = None
        self.state = "IDLE"

    @property
    def active(self) -> bool:
        return self.state == "CAPTURING"


@dataclass(frozen=True)
class SessionSnapshot:
    state: SessionState
    frame_count: int
    offsets: tuple[int, ...]
    total_height: int | None
    width: int | None


@dataclass(frozen=True)
class CycleResult:
    status: CycleStatus
    progress: Progress | None = None
    delta: int = 0
    # set when the cycle was stitched but the progress sink raised
    sink_error: Exception | None = None

    @property
    def updated(self) -> bool:
        return self.status == "updated"
