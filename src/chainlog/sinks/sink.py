"""
Base class for record sinks.

A sink owns a converter and its own LevelSet; writing a record converts it,
serializes it to one JSON line and hands the line to the concrete output.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from ..core.converters import BunyanConverter
from ..core.exceptions import SinkWriteError
from ..core.level import Level, get_level_from_record
from ..core.level_set import LevelSet
from ..core.protocols import Converter
from ..core.record import Record

logger = logging.getLogger(__name__)


class Sink(ABC):
    """
    Output boundary for finished records.

    Subclasses implement _write_line(line, level).

    Args:
        converter: Record converter (BunyanConverter if None)
        filter_levels: Filter levels (INFO default rule if None)
    """

    def __init__(self, converter: Optional[Converter] = None, filter_levels: Optional[LevelSet] = None):
        self.converter = converter or BunyanConverter()
        self.filter_levels = filter_levels if filter_levels is not None else LevelSet.parse("")
        self._closed = False

    def format(self, record: Record) -> str:
        """Convert and serialize a record to a single line (no newline)."""
        return self.converter.convert(record).to_json()

    def write(self, record: Record) -> None:
        """
        Write one record.

        Raises:
            SinkWriteError: If the underlying output fails
        """
        line = self.format(record)
        try:
            self._write_line(line, get_level_from_record(record))
        except SinkWriteError:
            raise
        except (OSError, ValueError) as e:
            raise SinkWriteError(str(self), e) from e

    @abstractmethod
    def _write_line(self, line: str, level: Level) -> None:
        ...

    def should_write(self, level: Level, topic: Optional[Any] = None, scope: Optional[Any] = None) -> bool:
        return self.filter_levels.should_write(level, topic, scope)

    # Filter level management

    def set_filter_level(self, level: Level, topic: Optional[Any] = None, scope: Optional[Any] = None) -> "Sink":
        self.filter_levels.set(level, topic, scope)
        return self

    def set_filter_level_if_unset(self, level: Level) -> "Sink":
        self.filter_levels.set_default_if_unset(level)
        return self

    def filter_more(self) -> "Sink":
        self.filter_levels.filter_more()
        logger.debug("%s now filtering at %s", self, self.filter_levels)
        return self

    def filter_less(self) -> "Sink":
        self.filter_levels.filter_less()
        logger.debug("%s now filtering at %s", self, self.filter_levels)
        return self

    # Lifecycle

    def flush(self) -> None:
        """Flush buffered output; no-op by default."""

    def close(self) -> None:
        """
        Flush and release resources. Idempotent.
        """
        if self._closed:
            return
        self.flush()
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self):
        """Context manager support."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Close sink on context exit."""
        self.close()
        return False
