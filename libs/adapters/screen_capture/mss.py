from __future__ import annotations

from typing import Any

try:
    import mss  # type: ignore
except Exception:  # pragma: no cover
    mss = None

from ports.vision import CaptureError, FrameSourcePort, NoScreensError, Raster, Region


def shot_to_raster(shot: Any) -> Raster:
    """mss ScreenShot (BGRA) -> RGBA Raster."""
    if hasattr(shot, "bgra"):
        bgra_bytes = bytes(shot.bgra)
    else:
        bgra_bytes = bytes(shot.raw)
    return Raster.from_bgra(int(shot.width), int(shot.height), bgra_bytes)


class MSSFrameSource(FrameSourcePort):
    """Grabs a screen region through mss.

    ``region`` is in logical coordinates relative to the chosen monitor;
    ``scale`` converts it to the physical pixels mss works in.
    """

    def __init__(self, monitor: int = 1, scale: float = 1.0) -> None:
        self._monitor_idx = int(monitor)
        self._scale = float(scale)
        self._sct: Any = None
        self._mon: dict[str, int] | None = None

    def open(self) -> None:
        if mss is None:
            raise CaptureError("mss is not installed")
        try:
            sct = mss.mss()
        except Exception as ex:
            raise NoScreensError(f"Cannot open display: {ex}") from ex
        monitors = sct.monitors  # monitors[0] is the union of all screens
        if len(monitors) < 2:
            sct.close()
            raise NoScreensError("No screens found")
        idx = self._monitor_idx
        if idx < 1 or idx >= len(monitors):
            idx = 1
        self._sct = sct
        self._mon = {k: int(v) for k, v in dict(monitors[idx]).items()}

    def capture(self, region: Region) -> Raster:
        if self._sct is None or self._mon is None:
            self.open()
        mon = self._mon
        assert mon is not None
        s = self._scale
        rect: dict[str, int] = {
            "left": int(mon["left"]) + int(region.x * s),
            "top": int(mon["top"]) + int(region.y * s),
            "width": max(1, int(region.width * s)),
            "height": max(1, int(region.height * s)),
        }
        try:
            shot = self._sct.grab(rect)
        except Exception as ex:
            raise CaptureError(f"Capture of {rect} failed: {ex}") from ex
        return shot_to_raster(shot)

    def close(self) -> None:
        if self._sct:
            try:
                self._sct.close()
            except Exception:
                pass
        self._sct = None
        self._mon = None
