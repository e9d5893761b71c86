from .input import ScrollEvent, ScrollEventPort, Sign
from .ipc import EventPubPort, EventSubPort
from .progress import ExportSinkPort, ProgressSinkPort
from .time import ClockPort, SleeperPort
from .vision import CaptureError, FrameSourcePort, NoScreensError, Raster, Region

__all__ = [
    "FrameSourcePort",
    "Raster",
    "Region",
    "CaptureError",
    "NoScreensError",
    "ProgressSinkPort",
    "ExportSinkPort",
    "ScrollEvent",
    "ScrollEventPort",
    "Sign",
    "EventPubPort",
    "EventSubPort",
    "ClockPort",
    "SleeperPort",
]
