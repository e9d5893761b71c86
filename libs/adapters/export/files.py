from __future__ import annotations

from pathlib import Path

from domain.stitch.preview import to_image
from ports.progress import ExportSinkPort
from ports.vision import Raster

_RGB_ONLY = {".jpg", ".jpeg", ".bmp"}


class FileExportSink(ExportSinkPort):
    """Writes the finished capture with Pillow; format follows the suffix."""

    def __init__(self, path: str | Path, quality: int = 95) -> None:
        self.path = Path(path)
        self.quality = int(quality)

    def deliver(self, image: Raster) -> str:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        img = to_image(image)
        suffix = self.path.suffix.lower()
        if suffix in _RGB_ONLY:
            img.convert("RGB").save(self.path, quality=self.quality)
        elif suffix:
            img.save(self.path)
        else:
            self.path = self.path.with_suffix(".png")
            img.save(self.path, format="PNG")
        return str(self.path)
