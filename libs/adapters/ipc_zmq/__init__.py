from .fakes import FakeEventPubPort, FakeEventSubPort
from .zmq import ZmqEventPubPort, ZmqEventSubPort

__all__ = ["ZmqEventPubPort", "ZmqEventSubPort", "FakeEventPubPort", "FakeEventSubPort"]
