from __future__ import annotations

from typing import ClassVar


class ScrollCaptureError(Exception):
    """Base for everything the capture core reports to its caller."""

    code: ClassVar[str] = "internal"
    recoverable: ClassVar[bool] = False


class NoRegionSelected(ScrollCaptureError):
    code = "no-region"
    recoverable = True


class NoScreensFound(ScrollCaptureError):
    code = "no-screens"
    recoverable = True


class CaptureFailed(ScrollCaptureError):
    code = "capture-failed"
    recoverable = True


class FrameWidthMismatch(ScrollCaptureError):
    """The capture surface changed width mid-session; the session must be reset."""

    code = "width-mismatch"

    def __init__(self, expected: int, got: int) -> None:
        super().__init__(f"Frame width mismatch: expected {expected}px, got {got}px")
        self.expected = expected
        self.got = got


class NoPreviousFrame(ScrollCaptureError):
    code = "no-previous-frame"


class NoStitchedImage(ScrollCaptureError):
    code = "no-stitched-image"


class SessionNotActive(ScrollCaptureError):
    code = "not-capturing"


class CropExceedsBounds(ScrollCaptureError):
    code = "crop-exceeds-bounds"
    recoverable = True


__all__ = [
    "ScrollCaptureError",
    "NoRegionSelected",
    "NoScreensFound",
    "CaptureFailed",
    "FrameWidthMismatch",
    "NoPreviousFrame",
    "NoStitchedImage",
    "SessionNotActive",
    "CropExceedsBounds",
]
