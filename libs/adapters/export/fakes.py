from __future__ import annotations

from ports.progress import ExportSinkPort
from ports.vision import Raster


class FakeExportSink(ExportSinkPort):
    """Keeps delivered images in memory; optionally fails once."""

    def __init__(self, fail_with: Exception | None = None) -> None:
        self.delivered: list[Raster] = []
        self._fail_with = fail_with

    def deliver(self, image: Raster) -> str:
        if self._fail_with is not None:
            ex, self._fail_with = self._fail_with, None
            raise ex
        self.delivered.append(image)
        return f"memory://{len(self.delivered)}"
