from __future__ import annotations

import numpy as np
from ports.vision import Raster

from domain.errors import FrameWidthMismatch


def stitch(base: Raster, new_frame: Raster, offset: int) -> Raster:
    """Grow ``base`` by the part of ``new_frame`` it has not seen yet.

    offset > 0: scrolled down, the bottom ``offset`` rows of the frame go below base.
    offset < 0: scrolled up, the top ``|offset|`` rows go above base.
    When ``|offset|`` reaches the frame height there is no overlap and the
    whole frame is concatenated.
    """
    if base.width != new_frame.width:
        raise FrameWidthMismatch(expected=base.width, got=new_frame.width)

    rows = min(abs(int(offset)), new_frame.height)
    if rows == 0:
        return base

    if offset > 0:
        fresh = new_frame.pixels[new_frame.height - rows :]
        return Raster(np.concatenate((base.pixels, fresh), axis=0))

    fresh = new_frame.pixels[:rows]
    return Raster(np.concatenate((fresh, base.pixels), axis=0))
