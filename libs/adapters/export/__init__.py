from .fakes import FakeExportSink
from .files import FileExportSink

__all__ = ["FileExportSink", "FakeExportSink"]
