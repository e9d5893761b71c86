from __future__ import annotations

import math

from ports.vision import Raster

from domain.errors import CropExceedsBounds
from domain.types import CropSpec


def _px(percent: float, extent: int) -> int:
    # round half away from zero; percentages are never negative here
    return int(math.floor(percent / 100.0 * extent + 0.5))


def apply(image: Raster, crop: CropSpec | None) -> Raster:
    """Trim percentage-based edges off the finished image before export."""
    if crop is None or crop.is_empty:
        return image

    w, h = image.size()
    top, bottom = _px(crop.top, h), _px(crop.bottom, h)
    left, right = _px(crop.left, w), _px(crop.right, w)
    if left + right >= w or top + bottom >= h:
        raise CropExceedsBounds(
            f"Crop exceeds image bounds: {left}+{right}px of {w}px wide, "
            f"{top}+{bottom}px of {h}px tall"
        )
    return Raster(image.pixels[top : h - bottom, left : w - right].copy())
