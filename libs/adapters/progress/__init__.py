from .fakes import FakeProgressSink
from .sinks import LoggingProgressSink, PublishingProgressSink

__all__ = ["PublishingProgressSink", "LoggingProgressSink", "FakeProgressSink"]
