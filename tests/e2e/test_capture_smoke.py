from __future__ import annotations

from pathlib import Path

import numpy as np
from adapters.ipc_zmq import FakeEventPubPort
from adapters.screen_capture import FakeFrameSource
from adapters.scroll_input import FakeScrollEventPort
from adapters.time import FakeClockPort
from apps.capture.__main__ import main
from apps.capture.compose import CaptureApp
from apps.capture.settings import CaptureSettings
from domain.types import CropSpec
from PIL import Image


def test_scroll_session_end_to_end(tmp_path: Path, doc, window):
    tops = [100, 220, 340, 400, 400]
    source = FakeFrameSource([window(t) for t in tops])
    pub = FakeEventPubPort()
    clock = FakeClockPort()
    settings = CaptureSettings(
        region=(0, 0, 400, 800), frame_source="fake", output_dir=tmp_path
    )
    app = CaptureApp(settings, source=source, pub=pub, clock=clock)
    results = []

    listener = FakeScrollEventPort()
    listener.subscribe(app.build_trigger(on_result=results.append))
    app.start()
    listener.start()
    for _ in tops[1:]:
        clock.advance(0.5)
        listener.emit(1, 8.0)  # 8 notches -> search up to 160px
    listener.stop()

    assert [r.delta for r in results if r.updated] == [120, 120, 60]
    assert results[-1].status == "no_update"
    assert app.service.snapshot().offsets == (0, 120, 240, 300)

    app.stop()
    written = app.finish(crop=CropSpec(top=5))
    app.close()

    with Image.open(written) as img:
        assert img.size == (400, 1045)
        arr = np.asarray(img.convert("RGBA"))
    assert np.array_equal(arr[..., 0], doc[155:1200])
    assert pub.topics()[-1] == "state"
    assert pub.sent[-1][1]["state"] == "FINISHED"
    assert source.closed


def test_cli_reports_start_failure(monkeypatch, tmp_path: Path, capsys):
    monkeypatch.setenv("SSC_CONFIG_DIR", str(tmp_path))
    monkeypatch.setenv("SSC_FRAME_SOURCE", "fake")
    rc = main(["--region", "0,0,400,800"])
    assert rc == 2
    assert "[capture] cannot start" in capsys.readouterr().out


def test_cli_without_region_fails(monkeypatch, tmp_path: Path, capsys):
    monkeypatch.setenv("SSC_CONFIG_DIR", str(tmp_path))
    monkeypatch.setenv("SSC_FRAME_SOURCE", "fake")
    monkeypatch.delenv("SSC_REGION", raising=False)
    assert main([]) == 2
    assert "No region selected" in capsys.readouterr().out


def test_wheel_clicks_from_pynput_listener_grow_the_image(doc, window):
    from adapters.scroll_input import PynputScrollEventPort

    tops = [200, 260, 320, 380]
    clock = FakeClockPort()
    settings = CaptureSettings(region=(0, 0, 400, 800), frame_source="fake")
    app = CaptureApp(settings, source=FakeFrameSource([window(t) for t in tops]), clock=clock)
    app.start()

    # the listener is not started; its callback is fed the way pynput calls it
    listener = PynputScrollEventPort(bounds=app.region)
    listener.subscribe(app.build_trigger())
    for _ in tops[1:]:
        clock.advance(0.2)
        listener._on_scroll(100, 100, 0, -1)

    snap = app.service.snapshot()
    assert snap.offsets == (0, 60, 120, 180)
    assert snap.total_height == 980
    progress = app.service.query()
    assert progress.frame_count == 4
    app.close()
