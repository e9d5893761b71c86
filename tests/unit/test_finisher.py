from __future__ import annotations

import numpy as np
import pytest
from domain.errors import CropExceedsBounds
from domain.stitch import finisher
from domain.types import CropSpec
from ports.vision import Raster


def _rows(width: int, height: int) -> Raster:
    px = np.zeros((height, width, 4), dtype=np.uint8)
    px[..., 0] = (np.arange(height) % 256)[:, None]
    px[..., 1] = (np.arange(width) % 256)[None, :]
    px[..., 3] = 255
    return Raster(px)


def test_no_crop_returns_same_image():
    img = _rows(40, 30)
    assert finisher.apply(img, None) is img
    assert finisher.apply(img, CropSpec()) is img


def test_vertical_crop_keeps_centre():
    img = _rows(400, 1000)
    out = finisher.apply(img, CropSpec(top=10, bottom=10))
    assert out.size() == (400, 800)
    assert np.array_equal(out.pixels, img.pixels[100:900])


def test_horizontal_crop():
    img = _rows(200, 50)
    out = finisher.apply(img, CropSpec(left=25, right=10))
    assert out.size() == (130, 50)
    assert np.array_equal(out.pixels, img.pixels[:, 50:180])


def test_half_pixels_round_away_from_zero():
    img = _rows(10, 10)
    out = finisher.apply(img, CropSpec(top=25))  # 2.5 rows -> 3
    assert out.height == 7
    assert out.pixels[0, 0, 0] == 3


@pytest.mark.parametrize(
    "crop",
    [
        CropSpec(left=50, right=50),
        CropSpec(top=100),
        CropSpec(top=50, bottom=45),  # 5 + 4.5->5 rows eats the whole 10-row image
    ],
)
def test_crop_that_removes_everything_raises(crop):
    img = _rows(10, 10)
    with pytest.raises(CropExceedsBounds) as ei:
        finisher.apply(img, crop)
    assert ei.value.recoverable is True


def test_negative_crop_is_rejected():
    with pytest.raises(ValueError):
        CropSpec(top=-1)
