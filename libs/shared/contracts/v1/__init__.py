from .ipc_wire import SCHEMA_V1, ErrorInfo, EventEnvelope
from .progress import CropEdges, ProgressEvent, SessionStateEvent

__all__ = [
    "SCHEMA_V1",
    "ErrorInfo",
    "EventEnvelope",
    "ProgressEvent",
    "SessionStateEvent",
    "CropEdges",
]
