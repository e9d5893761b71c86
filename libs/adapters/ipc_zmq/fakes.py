from __future__ import annotations

from collections.abc import Mapping
from queue import Empty, SimpleQueue
from typing import Any

from ports.ipc import EventPubPort, EventSubPort


class FakeEventPubPort(EventPubPort):
    """Records (topic, payload) pairs instead of sending them."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, dict[str, Any]]] = []
        self.closed = False

    def publish(self, topic: str, payload: Mapping[str, Any]) -> None:
        self.sent.append((topic, dict(payload)))

    def topics(self) -> list[str]:
        return [t for t, _ in self.sent]

    def close(self) -> None:
        self.closed = True


class FakeEventSubPort(EventSubPort):
    """Local queue-based event channel suitable for tests."""

    def __init__(self) -> None:
        self._subs: set[str] = set()
        self._q: SimpleQueue[dict] = SimpleQueue()
        self.closed = False

    def subscribe(self, addr: str) -> None:
        self._subs.add(addr)

    def recv(self, timeout_ms: int = 100) -> dict | None:
        try:
            return self._q.get(timeout=timeout_ms / 1000.0)
        except Empty:
            return None

    def close(self) -> None:
        self.closed = True

    # Test/helper API: inject a message shaped like ZmqEventSubPort.recv()
    def inject(self, topic: str, data: dict) -> None:
        self._q.put({"topic": topic, "data": data})
