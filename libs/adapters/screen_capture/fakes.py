from __future__ import annotations

from collections import deque
from collections.abc import Iterable

from ports.vision import CaptureError, FrameSourcePort, Raster, Region


class FakeFrameSource(FrameSourcePort):
    """Replays scripted frames; an exception in the script is raised instead.

    Once the script runs dry the last frame repeats, which looks like a
    surface that stopped scrolling.
    """

    def __init__(self, frames: Iterable[Raster | Exception] = ()) -> None:
        self._script: deque[Raster | Exception] = deque(frames)
        self._last: Raster | None = None
        self.regions: list[Region] = []
        self.closed = False

    def push(self, *items: Raster | Exception) -> None:
        self._script.extend(items)

    def capture(self, region: Region) -> Raster:
        self.regions.append(region)
        if self._script:
            item = self._script.popleft()
            if isinstance(item, Exception):
                raise item
            self._last = item
            return item
        if self._last is None:
            raise CaptureError("FakeFrameSource has no frames")
        return self._last

    @property
    def captures(self) -> int:
        return len(self.regions)

    def close(self) -> None:
        self.closed = True
