from __future__ import annotations

from pathlib import Path

import numpy as np
from adapters.export import FileExportSink
from PIL import Image
from ports.vision import Raster


def _gradient(width: int = 40, height: int = 30) -> Raster:
    px = np.zeros((height, width, 4), dtype=np.uint8)
    px[..., 0] = np.arange(height, dtype=np.uint8)[:, None] * 8
    px[..., 3] = 255
    return Raster(px)


def test_png_roundtrip_is_lossless(tmp_path: Path):
    img = _gradient()
    dest = FileExportSink(tmp_path / "out" / "cap.png").deliver(img)
    assert dest == str(tmp_path / "out" / "cap.png")
    with Image.open(dest) as back:
        assert back.size == (40, 30)
        assert np.array_equal(np.asarray(back.convert("RGBA")), img.pixels)


def test_jpeg_is_written_as_rgb(tmp_path: Path):
    dest = FileExportSink(tmp_path / "cap.jpg", quality=80).deliver(_gradient())
    with Image.open(dest) as back:
        assert back.format == "JPEG"
        assert back.mode == "RGB"


def test_missing_suffix_defaults_to_png(tmp_path: Path):
    dest = FileExportSink(tmp_path / "capture").deliver(_gradient())
    assert dest.endswith("capture.png")
    with Image.open(dest) as back:
        assert back.format == "PNG"
