from __future__ import annotations

import base64
import io

import numpy as np
from PIL import Image
from ports.vision import Raster

PREVIEW_MAX_HEIGHT = 600


def to_image(raster: Raster) -> Image.Image:
    return Image.fromarray(np.asarray(raster.pixels))


def make_preview(raster: Raster, max_height: int = PREVIEW_MAX_HEIGHT) -> Raster:
    """Downscale for display only; the export path never goes through here."""
    w, h = raster.size()
    if h <= max_height:
        return raster
    scale = max_height / h
    new_w = max(1, int(w * scale))
    small = to_image(raster).resize((new_w, max_height), Image.Resampling.BILINEAR)
    return Raster(np.asarray(small.convert("RGBA")))


def encode_data_url(raster: Raster, quality: int = 90) -> str:
    """JPEG base64 ``data:`` URL, the form the presentation layer renders."""
    buf = io.BytesIO()
    to_image(raster).convert("RGB").save(buf, format="JPEG", quality=quality)
    return "data:image/jpeg;base64," + base64.b64encode(buf.getvalue()).decode("ascii")
