# libs/domain/session/service.py
from __future__ import annotations

import logging
import threading
from typing import Final

from ports.input import Sign
from ports.progress import ExportSinkPort, ProgressSinkPort
from ports.vision import CaptureError, FrameSourcePort, NoScreensError, Raster, Region

from domain.errors import (
    CaptureFailed,
    FrameWidthMismatch,
    NoPreviousFrame,
    NoRegionSelected,
    NoScreensFound,
    NoStitchedImage,
    SessionNotActive,
)
from domain.stitch import finisher
from domain.stitch.detector import DeltaDetector
from domain.stitch.preview import PREVIEW_MAX_HEIGHT, make_preview
from domain.stitch.stitcher import stitch
from domain.types import CropSpec, Progress

from .model import CycleResult, ScrollSession, SessionSnapshot, SessionState

LOG: Final = logging.getLogger("session")


class ScrollCaptureService:
    """Pure domain service (no OS calls). Owns one scroll session behind one lock.

    Transitions: ``start``, ``capture_cycle``, ``query``, ``finish``, ``stop``
    and ``cancel``. Every one of them takes the same lock, so a stop or cancel
    issued during a cycle lands when that cycle completes.
    """

    def __init__(
        self,
        source: FrameSourcePort,
        detector: DeltaDetector | None = None,
        progress: ProgressSinkPort | None = None,
        region: Region | None = None,
        min_stable_delta: int = 10,
        preview_max_height: int = PREVIEW_MAX_HEIGHT,
    ) -> None:
        self.source: Final = source
        self.detector: Final = detector or DeltaDetector()
        self.progress: Final = progress
        self.min_stable_delta = int(min_stable_delta)
        self.preview_max_height = int(preview_max_height)
        self._lock = threading.Lock()
        self._selected: Region | None = region
        self._session = ScrollSession()

    # --- read-only views ----------------------------------------------------

    def select_region(self, region: Region | None) -> None:
        """Region used by the next ``start``; a running session keeps its own."""
        with self._lock:
            self._selected = region

    @property
    def state(self) -> SessionState:
        with self._lock:
            return self._session.state

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            s = self._session
            return SessionSnapshot(
                state=s.state,
                frame_count=len(s.frames),
                offsets=tuple(s.offsets),
                total_height=s.composed.height if s.composed is not None else None,
                width=s.composed.width if s.composed is not None else None,
            )

    # --- transitions --------------------------------------------------------

    def start(self) -> Progress:
        with self._lock:
            s = self._session
            if self._selected is None:
                raise NoRegionSelected("No region selected")
            if s.frames:
                LOG.info("Restarting scroll capture; dropping %d frame(s).", len(s.frames))
            s.clear()

            frame = self._grab(self._selected)
            s.region = self._selected
            s.frames.append(frame)
            s.offsets.append(0)
            s.composed = frame
            s.state = "CAPTURING"
            LOG.info("Scroll capture started: %dx%d at %s", frame.width, frame.height, s.region)
            return self._progress_locked()

    def capture_cycle(
        self,
        expected_direction: Sign | None = None,
        max_magnitude: int | None = None,
        blocking: bool = True,
    ) -> CycleResult:
        """Grab one frame and stitch it if it shows new content.

        With ``blocking=False`` a cycle that finds another one in flight is
        dropped and reported as ``busy`` instead of queueing behind it.
        """
        if not self._lock.acquire(blocking=blocking):
            return CycleResult(status="busy")
        try:
            return self._cycle_locked(expected_direction, max_magnitude)
        finally:
            self._lock.release()

    def query(self) -> Progress:
        with self._lock:
            if self._session.composed is None:
                raise NoStitchedImage("No scroll capture in progress")
            return self._progress_locked()

    def finish(self, export: ExportSinkPort, crop: CropSpec | None = None) -> str:
        """Crop, hand off and reset. A bad crop leaves the session untouched."""
        with self._lock:
            s = self._session
            if s.composed is None:
                raise NoStitchedImage("No stitched image")
            final = finisher.apply(s.composed, crop)
            destination = export.deliver(final)
            LOG.info(
                "Scroll capture finished: %d frame(s), %dx%d -> %s",
                len(s.frames),
                final.width,
                final.height,
                destination,
            )
            s.clear()
            return destination

    def stop(self) -> None:
        """Stop capturing but keep the image for a later query/finish."""
        with self._lock:
            if self._session.state != "IDLE":
                LOG.info("Scroll capture stopped with %d frame(s).", len(self._session.frames))
            self._session.state = "IDLE"

    def cancel(self) -> None:
        with self._lock:
            if self._session.frames:
                LOG.info("Scroll capture cancelled; discarding %d frame(s).", len(self._session.frames))
            self._session.clear()

    # --- internals ----------------------------------------------------------

    def _cycle_locked(self, expected_direction: Sign | None, max_magnitude: int | None) -> CycleResult:
        s = self._session
        if not s.frames or s.composed is None or s.region is None:
            raise NoPreviousFrame("No previous frame; start the session first")
        if not s.active:
            raise SessionNotActive(f"Not in scroll capture mode (state={s.state})")

        try:
            frame = self._grab(s.region)
        except (CaptureFailed, NoScreensFound) as ex:
            LOG.warning("Capture failed during cycle, keeping session: %s", ex)
            raise

        if frame.width != s.composed.width:
            s.state = "FAULTED"
            LOG.error("Frame width changed %d -> %d; session faulted.", s.composed.width, frame.width)
            raise FrameWidthMismatch(expected=s.composed.width, got=frame.width)

        delta = self.detector.detect(s.frames[-1], frame, expected_direction, max_magnitude)
        if abs(delta) < self.min_stable_delta:
            LOG.debug("No scroll detected (delta=%d).", delta)
            return CycleResult(status="no_update", delta=delta)

        composed = stitch(s.composed, frame, delta)
        s.frames.append(frame)
        s.offsets.append(s.offsets[-1] + delta)
        s.composed = composed
        LOG.debug("Accepted delta %d; frames=%d height=%d", delta, len(s.frames), composed.height)

        progress = self._progress_locked()
        sink_error: Exception | None = None
        if self.progress is not None:
            try:
                self.progress.publish(progress)
            except Exception as ex:
                # the frame is already stitched; report the sink failure alongside it
                LOG.warning("Progress sink failed: %r", ex)
                sink_error = ex
        return CycleResult(
            status="updated", progress=progress, delta=delta, sink_error=sink_error
        )

    def _grab(self, region: Region) -> Raster:
        try:
            return self.source.capture(region)
        except NoScreensError as ex:
            raise NoScreensFound(str(ex) or "No screens found") from ex
        except CaptureError as ex:
            raise CaptureFailed(str(ex) or "Capture failed") from ex

    def _progress_locked(self) -> Progress:
        composed = self._session.composed
        if composed is None:
            raise NoStitchedImage("No stitched image")
        return Progress(
            frame_count=len(self._session.frames),
            total_height=composed.height,
            preview=make_preview(composed, self.preview_max_height),
        )
