from __future__ import annotations

import pytest
from domain.errors import CaptureFailed, FrameWidthMismatch
from domain.types import CropSpec, Progress
from pydantic import ValidationError
from shared.contracts.v1 import (
    SCHEMA_V1,
    CropEdges,
    ErrorInfo,
    EventEnvelope,
    ProgressEvent,
    SessionStateEvent,
)


def test_progress_event_from_progress(solid_raster):
    preview = solid_raster(200, 300)
    ev = ProgressEvent.from_progress(Progress(frame_count=3, total_height=1500, preview=preview))
    dumped = ev.model_dump(mode="json")
    assert dumped["api"] == "v1"
    assert dumped["frame_count"] == 3
    assert dumped["total_height"] == 1500
    assert (dumped["preview_width"], dumped["preview_height"]) == (200, 300)
    assert dumped["preview_base64"].startswith("data:image/jpeg;base64,")


def test_progress_event_rejects_empty_session():
    with pytest.raises(ValidationError):
        ProgressEvent(
            frame_count=0, total_height=10, preview_width=1, preview_height=1, preview_base64=""
        )


def test_state_event_carries_error_info():
    ev = SessionStateEvent.from_error("FAULTED", FrameWidthMismatch(expected=400, got=380))
    assert ev.error is not None
    assert ev.error.code == "width-mismatch"
    assert ev.error.recoverable is False
    assert "380" in (ev.detail or "")

    retry = SessionStateEvent.from_error("CAPTURING", CaptureFailed("grab failed"))
    assert retry.error == ErrorInfo(code="capture-failed", detail="grab failed", recoverable=True)


def test_state_event_rejects_unknown_state():
    with pytest.raises(ValidationError):
        SessionStateEvent(state="PAUSED")


def test_envelope_defaults():
    env = EventEnvelope(msg_id="m1", topic="state", data={"state": "IDLE"})
    dumped = env.model_dump(mode="json")
    assert dumped["schema_version"] == SCHEMA_V1
    assert isinstance(dumped["ts"], str)


def test_crop_edges_validate_and_convert():
    assert CropEdges(top=10, bottom=5).to_spec() == CropSpec(top=10, bottom=5)
    with pytest.raises(ValidationError):
        CropEdges(left=120)
    with pytest.raises(ValidationError):
        CropEdges(right=-1)
