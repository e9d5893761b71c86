from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any


class EventPubPort(ABC):
    """Capture side publishes progress/state events (PUB)."""

    @abstractmethod
    def publish(self, topic: str, payload: Mapping[str, Any]) -> None: ...

    @abstractmethod
    def close(self) -> None: ...


class EventSubPort(ABC):
    """Viewer subscribes to capture events (SUB)."""

    @abstractmethod
    def subscribe(self, addr: str) -> None: ...
    @abstractmethod
    def recv(self, timeout_ms: int = 100) -> dict | None: ...

    def close(self) -> None:
        return None


__all__ = [
    "EventPubPort",
    "EventSubPort",
]
