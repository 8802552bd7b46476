"""Sink that discards everything."""

from typing import Any, Optional

from ..core.level import Level
from ..core.record import Record
from .sink import Sink


class NilSink(Sink):
    """Writes nothing; should_write() is always False so nothing is built."""

    def write(self, record: Record) -> None:
        return None

    def _write_line(self, line: str, level: Level) -> None:
        return None

    def should_write(self, level: Level, topic: Optional[Any] = None, scope: Optional[Any] = None) -> bool:
        return False

    def __str__(self) -> str:
        return "Nil Stream"
