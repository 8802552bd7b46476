"""
File sink.

Appends NDJSON lines to a file, creating parent directories on first write.
"""

import logging
import threading
from pathlib import Path
from typing import IO, Optional, Union

from ..core.level import Level
from ..core.level_set import LevelSet
from ..core.protocols import Converter
from .sink import Sink

logger = logging.getLogger(__name__)


class FileSink(Sink):
    """
    Append records to a file.

    Writes go through the file object's buffer; the buffer is flushed on
    flush(), on close(), for every record at ERROR or above, and every
    flush_interval seconds when one is given.

    Args:
        path: Log file path
        converter: Record converter
        filter_levels: Filter levels
        buffered: Use the file buffer (True) or flush after every line
        flush_interval: Seconds between background flushes

    Example:
        >>> sink = FileSink("/var/log/app/app.log")
        >>> log = Logger.create("app", sink)
        >>> log.info("Logged to file")
        >>> sink.close()
    """

    def __init__(
        self,
        path: Union[str, Path],
        converter: Optional[Converter] = None,
        filter_levels: Optional[LevelSet] = None,
        buffered: bool = True,
        flush_interval: Optional[float] = None,
    ):
        super().__init__(converter, filter_levels)
        self.path = Path(path)
        self.buffered = buffered
        self._file: Optional[IO[str]] = None
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._flusher: Optional[threading.Thread] = None
        if buffered and flush_interval and flush_interval > 0:
            self._flusher = threading.Thread(
                target=self._flush_periodically,
                args=(flush_interval,),
                name=f"chainlog-flush-{self.path.name}",
                daemon=True,
            )
            self._flusher.start()

    def _open(self) -> IO[str]:
        # caller holds self._lock
        if self._file is None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(self.path, "a", encoding="utf-8", errors="backslashreplace")
            logger.debug("Opened log file %s", self.path)
        return self._file

    def _write_line(self, line: str, level: Level) -> None:
        with self._lock:
            if self._closed:
                raise ValueError(f"{self} is closed")
            handle = self._open()
            handle.write(line + "\n")
            if not self.buffered or level >= Level.ERROR:
                handle.flush()

    def _flush_periodically(self, interval: float) -> None:
        while not self._stop.wait(interval):
            try:
                self.flush()
            except (OSError, ValueError) as e:
                logger.warning("Periodic flush of %s failed: %s", self.path, e)

    def flush(self) -> None:
        with self._lock:
            if self._file is not None:
                self._file.flush()

    def close(self) -> None:
        """Flush and close the file. Idempotent."""
        self._stop.set()
        with self._lock:
            if self._closed:
                return
            if self._file is not None:
                try:
                    self._file.flush()
                finally:
                    self._file.close()
                    self._file = None
            self._closed = True

    def __str__(self) -> str:
        return f"File {self.path}"
