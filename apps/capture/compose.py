from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Final

from adapters.export import FileExportSink
from adapters.progress import LoggingProgressSink, PublishingProgressSink
from adapters.screen_capture import FakeFrameSource
from adapters.time import MonotonicClockPort
from domain.errors import ScrollCaptureError
from domain.session import CycleResult, ScrollCaptureService, ScrollTrigger
from domain.stitch import DeltaDetector, DetectorParams
from domain.types import CropSpec, Progress
from ports.ipc import EventPubPort
from ports.progress import ProgressSinkPort
from ports.time import ClockPort
from ports.vision import FrameSourcePort, Region
from shared.contracts.v1.progress import SessionStateEvent, WireState

from apps.capture.settings import CaptureSettings

LOG: Final = logging.getLogger("capture")


def build_frame_source(settings: CaptureSettings) -> FrameSourcePort:
    if settings.frame_source == "mss":
        from adapters.screen_capture.mss import MSSFrameSource

        return MSSFrameSource(monitor=settings.monitor, scale=settings.scale)
    if settings.frame_source == "fake":
        return FakeFrameSource()
    raise ValueError(f"Unknown frame source: {settings.frame_source}")


def build_detector(settings: CaptureSettings) -> DeltaDetector:
    return DeltaDetector(DetectorParams(**settings.detector.model_dump()))


def build_pub(settings: CaptureSettings) -> EventPubPort | None:
    if settings.progress_impl == "zmq":
        from adapters.ipc_zmq import ZmqEventPubPort

        return ZmqEventPubPort.bind_pub(settings.progress_bind)
    return None


def build_progress_sink(settings: CaptureSettings, pub: EventPubPort | None) -> ProgressSinkPort:
    if pub is not None:
        return PublishingProgressSink(pub, quality=settings.preview_quality)
    return LoggingProgressSink()


class CaptureApp:
    """Wires a scroll-capture session to its frame source and event channel."""

    def __init__(
        self,
        settings: CaptureSettings,
        source: FrameSourcePort | None = None,
        pub: EventPubPort | None = None,
        clock: ClockPort | None = None,
    ) -> None:
        self.settings = settings
        self.source = source if source is not None else build_frame_source(settings)
        self.pub = pub if pub is not None else build_pub(settings)
        self.clock = clock or MonotonicClockPort()
        self.region = Region.from_roi(settings.region) if settings.region else None
        self.service = ScrollCaptureService(
            self.source,
            detector=build_detector(settings),
            progress=build_progress_sink(settings, self.pub),
            region=self.region,
            min_stable_delta=settings.min_stable_delta,
            preview_max_height=settings.preview_max_height,
        )

    def publish_state(self, state: WireState, error: ScrollCaptureError | None = None) -> None:
        if self.pub is None:
            return
        event = (
            SessionStateEvent.from_error(state, error)
            if error is not None
            else SessionStateEvent(state=state)
        )
        try:
            self.pub.publish("state", event.model_dump(mode="json"))
        except Exception as ex:
            LOG.warning("state publish failed: %r", ex)

    def start(self) -> Progress:
        progress = self.service.start()
        self.publish_state("CAPTURING")
        return progress

    def cycle_once(self) -> CycleResult:
        return self.service.capture_cycle()

    def build_trigger(
        self,
        on_result: Callable[[CycleResult], None] | None = None,
        on_error: Callable[[ScrollCaptureError], None] | None = None,
    ) -> ScrollTrigger:
        t = self.settings.trigger
        return ScrollTrigger(
            self.service,
            self.clock,
            debounce_s=t.debounce_ms / 1000.0,
            discrete_threshold=t.discrete_threshold,
            continuous_threshold=t.continuous_threshold,
            hint_scale=t.hint_scale,
            hint_min=t.hint_min,
            hint_max=t.hint_max,
            notch_pixels=t.notch_pixels,
            notch_hint_max=t.notch_hint_max,
            on_result=on_result,
            on_error=on_error,
        )

    def default_output(self) -> Path:
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        return self.settings.output_dir / f"scroll-{stamp}.png"

    def finish(self, path: str | Path | None = None, crop: CropSpec | None = None) -> str:
        sink = FileExportSink(path if path is not None else self.default_output())
        written = self.service.finish(sink, crop)
        self.publish_state("FINISHED")
        return written

    def stop(self) -> None:
        self.service.stop()
        self.publish_state("IDLE")

    def cancel(self) -> None:
        self.service.cancel()
        self.publish_state("CANCELLED")

    def close(self) -> None:
        try:
            self.source.close()
        finally:
            if self.pub is not None:
                self.pub.close()
