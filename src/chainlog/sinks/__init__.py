"""Record sinks."""

from .file_sink import FileSink
from .multi_sink import MultiSink
from .nil_sink import NilSink
from .sink import Sink
from .stream_sink import StderrSink, StdoutSink, StreamSink

__all__ = [
    "FileSink",
    "MultiSink",
    "NilSink",
    "Sink",
    "StderrSink",
    "StdoutSink",
    "StreamSink",
]
