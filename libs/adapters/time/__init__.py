from .fakes import FakeClockPort, FakeSleeperPort
from .system import MonotonicClockPort, SystemSleeperPort

__all__ = ["FakeClockPort", "FakeSleeperPort", "MonotonicClockPort", "SystemSleeperPort"]
