from __future__ import annotations

import logging
from typing import Final

from domain.types import Progress
from ports.ipc import EventPubPort
from ports.progress import ProgressSinkPort
from shared.contracts.v1.progress import ProgressEvent

LOG: Final = logging.getLogger("progress")


class PublishingProgressSink(ProgressSinkPort):
    """Encodes progress as a v1 ProgressEvent and publishes it on topic ``progress``."""

    def __init__(self, pub: EventPubPort, quality: int = 90) -> None:
        self._pub = pub
        self._quality = int(quality)

    def publish(self, progress: Progress) -> None:
        event = ProgressEvent.from_progress(progress, quality=self._quality)
        self._pub.publish("progress", event.model_dump(mode="json"))


class LoggingProgressSink(ProgressSinkPort):
    def publish(self, progress: Progress) -> None:
        LOG.info(
            "frames=%d height=%d preview=%dx%d",
            progress.frame_count,
            progress.total_height,
            progress.preview.width,
            progress.preview.height,
        )
