from .fakes import FakeFrameSource

__all__ = ["FakeFrameSource"]
