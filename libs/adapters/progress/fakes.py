from __future__ import annotations

from domain.types import Progress
from ports.progress import ProgressSinkPort


class FakeProgressSink(ProgressSinkPort):
    def __init__(self) -> None:
        self.records: list[Progress] = []

    def publish(self, progress: Progress) -> None:
        self.records.append(progress)
