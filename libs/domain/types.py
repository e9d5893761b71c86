from __future__ import annotations

from dataclasses import dataclass

from ports.input import Sign
from ports.vision import Raster

__all__ = ["CropSpec", "Progress", "Sign"]


@dataclass(frozen=True)
class CropSpec:
    """Percentages (0-100) of each edge to drop before export."""

    top: float = 0.0
    bottom: float = 0.0
    left: float = 0.0
    right: float = 0.0

    def __post_init__(self) -> None:
        for name in ("top", "bottom", "left", "right"):
            value = float(getattr(self, name))
            if value < 0.0:
                raise ValueError(f"crop {name} must be non-negative, got {value}")
            object.__setattr__(self, name, value)

    @property
    def is_empty(self) -> bool:
        return not (self.top or self.bottom or self.left or self.right)


@dataclass(frozen=True)
class Progress:
    frame_count: int
    total_height: int
    preview: Raster
