from __future__ import annotations

import pytest
from adapters.export import FakeExportSink
from adapters.ipc_zmq import FakeEventPubPort, FakeEventSubPort
from adapters.progress import FakeProgressSink
from adapters.screen_capture import FakeFrameSource
from adapters.scroll_input import FakeScrollEventPort
from adapters.time import FakeClockPort, FakeSleeperPort
from domain.types import Progress
from ports.vision import CaptureError, Region


def test_frame_source_fake_replays_then_repeats(solid_raster):
    a, b = solid_raster(10, 10, 1), solid_raster(10, 10, 2)
    src = FakeFrameSource([a, CaptureError("flaky"), b])
    r = Region(0, 0, 10, 10)
    assert src.capture(r) is a
    with pytest.raises(CaptureError):
        src.capture(r)
    assert src.capture(r) is b
    assert src.capture(r) is b
    assert src.captures == 4
    src.close()
    assert src.closed


def test_frame_source_fake_without_frames_fails():
    with pytest.raises(CaptureError):
        FakeFrameSource().capture(Region(0, 0, 1, 1))


def test_scroll_fake_delivers_events():
    port = FakeScrollEventPort()
    seen = []
    port.subscribe(seen.append)
    port.start()
    port.emit(-1, 2.5, continuous=True)
    assert port.running
    assert seen[0].direction == -1
    assert seen[0].magnitude == 2.5
    assert seen[0].continuous is True
    port.stop()
    assert not port.running


def test_time_fakes():
    clock = FakeClockPort(start=5.0)
    sleeper = FakeSleeperPort(clock)
    sleeper.sleep(0.25)
    assert sleeper.calls == [0.25]
    assert clock.now() == 5.25


def test_sink_fakes(solid_raster):
    img = solid_raster(4, 4)
    sink = FakeProgressSink()
    sink.publish(Progress(frame_count=1, total_height=4, preview=img))
    assert sink.records[0].total_height == 4

    export = FakeExportSink(fail_with=OSError("once"))
    with pytest.raises(OSError):
        export.deliver(img)
    assert export.deliver(img) == "memory://1"


def test_event_fakes():
    pub = FakeEventPubPort()
    pub.publish("state", {"state": "IDLE"})
    assert pub.topics() == ["state"]
    pub.close()
    assert pub.closed

    sub = FakeEventSubPort()
    sub.subscribe("inproc://x")
    assert sub.recv(timeout_ms=1) is None
    sub.inject("progress", {"frame_count": 1})
    assert sub.recv(timeout_ms=10) == {"topic": "progress", "data": {"frame_count": 1}}
