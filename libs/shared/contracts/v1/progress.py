from __future__ import annotations

from typing import Literal

from domain.errors import ScrollCaptureError
from domain.stitch.preview import encode_data_url
from domain.types import CropSpec, Progress
from pydantic import BaseModel, Field

from .ipc_wire import ErrorInfo

WireState = Literal["CAPTURING", "IDLE", "FAULTED", "FINISHED", "CANCELLED"]


class ProgressEvent(BaseModel):
    api: Literal["v1"] = "v1"
    frame_count: int = Field(ge=1)
    total_height: int = Field(ge=1)
    preview_width: int
    preview_height: int
    preview_base64: str  # data:image/jpeg;base64,...

    @classmethod
    def from_progress(cls, progress: Progress, quality: int = 90) -> ProgressEvent:
        return cls(
            frame_count=progress.frame_count,
            total_height=progress.total_height,
            preview_width=progress.preview.width,
            preview_height=progress.preview.height,
            preview_base64=encode_data_url(progress.preview, quality=quality),
        )


class SessionStateEvent(BaseModel):
    api: Literal["v1"] = "v1"
    state: WireState
    detail: str | None = None
    error: ErrorInfo | None = None

    @classmethod
    def from_error(cls, state: WireState, ex: ScrollCaptureError) -> SessionStateEvent:
        return cls(
            state=state,
            detail=str(ex),
            error=ErrorInfo(code=ex.code, detail=str(ex), recoverable=ex.recoverable),
        )


class CropEdges(BaseModel):
    """Percent of each edge to drop (0-100)."""

    top: float = Field(default=0.0, ge=0.0, le=100.0)
    bottom: float = Field(default=0.0, ge=0.0, le=100.0)
    left: float = Field(default=0.0, ge=0.0, le=100.0)
    right: float = Field(default=0.0, ge=0.0, le=100.0)

    def to_spec(self) -> CropSpec:
        return CropSpec(top=self.top, bottom=self.bottom, left=self.left, right=self.right)
