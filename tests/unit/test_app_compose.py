from __future__ import annotations

import pytest
from adapters.ipc_zmq import FakeEventPubPort
from adapters.progress import LoggingProgressSink, PublishingProgressSink
from adapters.screen_capture import FakeFrameSource
from apps.capture.compose import (
    CaptureApp,
    build_detector,
    build_frame_source,
    build_progress_sink,
)
from apps.capture.settings import CaptureSettings, DetectorSettings
from domain.errors import FrameWidthMismatch


def _settings(**kw) -> CaptureSettings:
    base = {"region": (0, 0, 400, 800), "frame_source": "fake", "progress_impl": "log"}
    return CaptureSettings(**{**base, **kw})


def test_builders_follow_settings():
    s = _settings(detector=DetectorSettings(kernel="ncc", strip_height=32))
    assert isinstance(build_frame_source(s), FakeFrameSource)
    det = build_detector(s)
    assert det.params.kernel == "ncc"
    assert det.params.strip_height == 32
    assert isinstance(build_progress_sink(s, None), LoggingProgressSink)
    assert isinstance(build_progress_sink(s, FakeEventPubPort()), PublishingProgressSink)


def test_app_publishes_state_and_progress(window):
    pub = FakeEventPubPort()
    app = CaptureApp(_settings(), source=FakeFrameSource([window(200), window(320)]), pub=pub)
    app.start()
    assert app.cycle_once().delta == 120
    app.stop()
    app.cancel()
    assert pub.topics() == ["state", "progress", "state", "state"]
    assert [p["state"] for t, p in pub.sent if t == "state"] == ["CAPTURING", "IDLE", "CANCELLED"]
    progress = [p for t, p in pub.sent if t == "progress"][0]
    assert progress["total_height"] == 920


def test_app_reports_fault_with_error_info(window, solid_raster):
    pub = FakeEventPubPort()
    app = CaptureApp(
        _settings(), source=FakeFrameSource([window(200), solid_raster(300, 800)]), pub=pub
    )
    app.start()
    with pytest.raises(FrameWidthMismatch) as ei:
        app.cycle_once()
    app.publish_state("FAULTED", ei.value)
    topic, payload = pub.sent[-1]
    assert topic == "state"
    assert payload["error"]["code"] == "width-mismatch"


def test_trigger_uses_trigger_settings(window):
    s = _settings(trigger={"debounce_ms": 200, "hint_max": 150})
    app = CaptureApp(s, source=FakeFrameSource([window(200)]))
    trig = app.build_trigger()
    assert trig.debounce_s == pytest.approx(0.2)
    assert trig.hint_max == 150
    assert trig.runner is app.service


def test_close_closes_source_and_pub():
    source, pub = FakeFrameSource(), FakeEventPubPort()
    CaptureApp(_settings(), source=source, pub=pub).close()
    assert source.closed and pub.closed
