# libs/ports/vision.py
from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import Protocol

import numpy as np

_LUMA = np.array([0.299, 0.587, 0.114], dtype=np.float32)


class CaptureError(RuntimeError):
    """Raised by a frame source when a grab fails."""


class NoScreensError(CaptureError):
    """Raised by a frame source when there is no surface to capture from."""


@dataclass(frozen=True)
class Region:
    """Capture rectangle in logical screen coordinates."""

    x: int
    y: int
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Region must have a positive size, got {self.width}x{self.height}")

    @classmethod
    def from_roi(cls, roi: tuple[int, int, int, int]) -> Region:
        """Build from an ``(x, y, w, h)`` tuple as stored in settings."""
        x, y, w, h = roi
        return cls(int(x), int(y), int(w), int(h))


@dataclass(frozen=True, eq=False)
class Raster:
    # RGBA uint8, shape (height, width, 4), row-major. Read-only once built.
    pixels: np.ndarray

    def __post_init__(self) -> None:
        arr = np.ascontiguousarray(self.pixels, dtype=np.uint8)
        if arr.ndim != 3 or arr.shape[2] != 4:
            raise ValueError(f"Raster expects an (h, w, 4) array, got shape {arr.shape}")
        if arr.flags.writeable:
            arr = arr.view()
            arr.setflags(write=False)
        object.__setattr__(self, "pixels", arr)

    @classmethod
    def from_rgba(cls, width: int, height: int, rgba: bytes) -> Raster:
        arr = np.frombuffer(rgba, dtype=np.uint8).reshape(height, width, 4)
        return cls(arr)

    @classmethod
    def from_bgra(cls, width: int, height: int, bgra: bytes) -> Raster:
        arr = np.frombuffer(bgra, dtype=np.uint8).reshape(height, width, 4)
        rgba = arr[..., [2, 1, 0, 3]].copy()
        rgba[..., 3] = 255
        return cls(rgba)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @cached_property
    def luminance(self) -> np.ndarray:
        """Single-channel float32 luma (0.299R + 0.587G + 0.114B), computed once."""
        luma = self.pixels[..., :3].astype(np.float32) @ _LUMA
        luma.setflags(write=False)
        return luma


class FrameSourcePort(Protocol):
    def capture(self, region: Region) -> Raster: ...  # physical pixels
    def close(self) -> None: ...
