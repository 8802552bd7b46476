"""
Console sinks (stdout, stderr).

The target stream is looked up on every write, so replacing sys.stdout
(test capture, daemonization) is picked up without rebuilding the sink.
"""

import sys
import threading
from typing import Callable, List, Optional, TextIO, Union

from ..core.level import Level
from ..core.level_set import LevelSet
from ..core.protocols import Converter
from .sink import Sink


class StreamSink(Sink):
    """
    Writes NDJSON lines to a text stream.

    Unbuffered by default. With buffered=True lines are kept in memory and
    written on flush(), when a record at ERROR or above arrives, and every
    flush_interval seconds if one is given.

    Args:
        stream: Stream or zero-argument callable returning it
        name: Name used in str()
        converter: Record converter
        filter_levels: Filter levels
        buffered: Keep lines in memory until flushed
        flush_interval: Seconds between background flushes (buffered only)

    Example:
        >>> sink = StreamSink(lambda: sys.stdout, name="stdout")
        >>> sink.write(Record(msg="hello", level=Level.INFO))
    """

    def __init__(
        self,
        stream: Union[TextIO, Callable[[], TextIO]],
        name: str = "stream",
        converter: Optional[Converter] = None,
        filter_levels: Optional[LevelSet] = None,
        buffered: bool = False,
        flush_interval: Optional[float] = None,
    ):
        super().__init__(converter, filter_levels)
        self._stream = stream
        self.name = name
        self.buffered = buffered
        self._buffer: List[str] = []
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._flusher: Optional[threading.Thread] = None
        if buffered and flush_interval and flush_interval > 0:
            self._start_flusher(flush_interval)

    @property
    def stream(self) -> TextIO:
        if callable(self._stream) and not hasattr(self._stream, "write"):
            return self._stream()
        return self._stream

    def _write_line(self, line: str, level: Level) -> None:
        with self._lock:
            if self.buffered:
                self._buffer.append(line)
                if level >= Level.ERROR:
                    self._drain()
                return
            stream = self.stream
            stream.write(line + "\n")
            stream.flush()

    def _drain(self) -> None:
        # caller holds self._lock
        if not self._buffer:
            return
        lines, self._buffer = self._buffer, []
        stream = self.stream
        stream.write("".join(line + "\n" for line in lines))
        stream.flush()

    def flush(self) -> None:
        with self._lock:
            self._drain()

    def _start_flusher(self, interval: float) -> None:
        def run():
            while not self._stop.wait(interval):
                try:
                    self.flush()
                except (OSError, ValueError):
                    # Stream went away; keep the thread alive for the next interval
                    continue

        self._flusher = threading.Thread(target=run, name=f"chainlog-flush-{self.name}", daemon=True)
        self._flusher.start()

    def close(self) -> None:
        self._stop.set()
        super().close()

    def __str__(self) -> str:
        return f"Stream to {self.name}"


class StdoutSink(StreamSink):
    """Writes to sys.stdout."""

    def __init__(self, converter: Optional[Converter] = None, filter_levels: Optional[LevelSet] = None, **kwargs):
        super().__init__(lambda: sys.stdout, "stdout", converter, filter_levels, **kwargs)


class StderrSink(StreamSink):
    """Writes to sys.stderr."""

    def __init__(self, converter: Optional[Converter] = None, filter_levels: Optional[LevelSet] = None, **kwargs):
        super().__init__(lambda: sys.stderr, "stderr", converter, filter_levels, **kwargs)
