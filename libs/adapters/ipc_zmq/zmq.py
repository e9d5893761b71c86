import json
import uuid
from collections.abc import Mapping
from typing import Any

import zmq
from ports.ipc import EventPubPort, EventSubPort
from shared.contracts.v1.ipc_wire import SCHEMA_V1, EventEnvelope

# --------- Common helpers ---------


def _new_ctx() -> zmq.Context:
    # Using the global instance avoids thread-happy leaks and is cheap.
    return zmq.Context.instance()


def _set_common(sock: zmq.Socket, rcv_ms: int = 500, snd_ms: int = 500) -> None:
    sock.setsockopt(zmq.LINGER, 0)
    sock.setsockopt(zmq.RCVTIMEO, rcv_ms)
    sock.setsockopt(zmq.SNDTIMEO, snd_ms)


# --------- Capture events (PUB/SUB) ---------


class ZmqEventPubPort(EventPubPort):
    def __init__(self, addr: str) -> None:
        self._ctx = _new_ctx()
        self._pub = self._ctx.socket(zmq.PUB)
        _set_common(self._pub)
        # previews are large; drop rather than buffer for slow viewers
        self._pub.setsockopt(zmq.SNDHWM, 50)
        self._pub.bind(addr)

    @classmethod
    def bind_pub(cls, addr: str) -> "ZmqEventPubPort":
        return cls(addr)

    def publish(self, topic: str, payload: Mapping[str, Any]) -> None:
        env = EventEnvelope(msg_id=str(uuid.uuid4()), topic=topic, data=dict(payload))
        self._pub.send_multipart(
            [
                topic.encode("utf-8"),
                json.dumps(env.model_dump(mode="json")).encode("utf-8"),
            ]
        )

    def close(self) -> None:
        self._pub.close(0)


class ZmqEventSubPort(EventSubPort):
    def __init__(self) -> None:
        self._ctx = _new_ctx()
        self._sub = self._ctx.socket(zmq.SUB)
        _set_common(self._sub)
        # Allow all topics by default
        self._sub.setsockopt(zmq.SUBSCRIBE, b"")
        # Prevent unbounded growth
        self._sub.setsockopt(zmq.RCVHWM, 100)

    def subscribe(self, addr: str) -> None:
        self._sub.connect(addr)

    def recv(self, timeout_ms: int = 100) -> dict[str, Any] | None:
        if not self._sub.poll(timeout=timeout_ms):
            return None
        topic, data = self._sub.recv_multipart()
        name = topic.decode("utf-8")
        try:
            decoded = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            return {"topic": name, "error": {"code": "bad-json"}}
        if int(decoded.get("schema_version", 0)) != SCHEMA_V1:
            return {"topic": name, "error": {"code": "api-mismatch"}}
        # payload is an EventEnvelope dict
        return {"topic": name, "data": decoded.get("data", {}), "envelope": decoded}

    def close(self) -> None:
        self._sub.close(0)
