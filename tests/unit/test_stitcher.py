from __future__ import annotations

import numpy as np
import pytest
from domain.errors import FrameWidthMismatch
from domain.stitch import stitch


def test_scroll_down_appends_new_rows(doc, window):
    out = stitch(window(200), window(320), 120)
    assert out.size() == (400, 920)
    assert np.array_equal(out.pixels[..., 0], doc[200:1120])


def test_scroll_up_prepends_new_rows(doc, window):
    out = stitch(window(200), window(125), -75)
    assert out.size() == (400, 875)
    assert np.array_equal(out.pixels[..., 0], doc[125:1000])


def test_zero_offset_returns_base_unchanged(window):
    base = window(200)
    assert stitch(base, window(200), 0) is base


def test_offset_past_frame_height_concatenates_whole_frame(window):
    base, frame = window(0, height=300), window(500, height=300)
    out = stitch(base, frame, 450)
    assert out.height == 600
    assert np.array_equal(out.pixels[300:], frame.pixels)
    up = stitch(base, frame, -450)
    assert np.array_equal(up.pixels[:300], frame.pixels)


def test_stitching_onto_a_composed_image(doc, window):
    composed = stitch(window(200), window(320), 120)
    composed = stitch(composed, window(400), 80)
    assert composed.height == 1000
    assert np.array_equal(composed.pixels[..., 0], doc[200:1200])


def test_width_mismatch_raises(solid_raster):
    with pytest.raises(FrameWidthMismatch) as ei:
        stitch(solid_raster(400, 100), solid_raster(401, 100), 20)
    assert ei.value.expected == 400
    assert ei.value.got == 401
    assert ei.value.recoverable is False


def test_result_is_read_only(window):
    out = stitch(window(200), window(320), 120)
    with pytest.raises(ValueError):
        out.pixels[0, 0, 0] = 1
