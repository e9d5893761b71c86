from .model import CycleResult, ScrollSession, SessionSnapshot, SessionState
from .service import ScrollCaptureService
from .trigger import ScrollTrigger

__all__ = [
    "ScrollCaptureService",
    "ScrollTrigger",
    "CycleResult",
    "ScrollSession",
    "SessionSnapshot",
    "SessionState",
]
