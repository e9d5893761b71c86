from __future__ import annotations

import numpy as np
import pytest
from ports.vision import Raster


def smooth_document(height: int = 1200, width: int = 400, seed: int = 7, window: int = 16) -> np.ndarray:
    """Tall grayscale 'page': column noise blurred vertically so nearby rows correlate."""
    rng = np.random.default_rng(seed)
    noise = rng.uniform(0.0, 255.0, size=(height + window, width))
    c = np.cumsum(noise, axis=0)
    blurred = (c[window:] - c[:-window]) / window
    gray = np.clip((blurred - 127.5) * 3.0 + 127.5, 0, 255).astype(np.uint8)
    return gray[:height]


def as_raster(gray: np.ndarray) -> Raster:
    h, w = gray.shape
    rgba = np.empty((h, w, 4), dtype=np.uint8)
    rgba[..., 0] = gray
    rgba[..., 1] = gray
    rgba[..., 2] = gray
    rgba[..., 3] = 255
    return Raster(rgba)


def solid(width: int, height: int, value: int = 128) -> Raster:
    return Raster(np.full((height, width, 4), value, dtype=np.uint8))


@pytest.fixture(scope="session")
def doc() -> np.ndarray:
    return smooth_document()


@pytest.fixture
def window(doc: np.ndarray):
    """Raster of document rows [top, top + 800)."""

    def _cut(top: int, height: int = 800) -> Raster:
        return as_raster(doc[top : top + height])

    return _cut


@pytest.fixture
def gray_raster():
    return as_raster


@pytest.fixture
def solid_raster():
    return solid


@pytest.fixture
def make_document():
    return smooth_document
