"""
Severity levels.

Numeric values follow bunyan so records stay compatible with bunyan tooling.
"""

from enum import IntEnum
from typing import Any, Optional


class Level(IntEnum):
    """
    Log severity.

    UNSET means "no rule" and, used as a filter, lets everything through.
    NEVER is a sentinel: records at NEVER are never written and a NEVER filter
    blocks everything.

    Example:
        >>> Level.parse("warn")
        <Level.WARN: 40>
        >>> Level.INFO.should_write(Level.WARN)
        False
    """

    UNSET = 0
    NEVER = 1
    TRACE = 10
    DEBUG = 20
    INFO = 30
    WARN = 40
    ERROR = 50
    FATAL = 60
    ALWAYS = 255

    @classmethod
    def parse(cls, name: Optional[str]) -> "Level":
        """
        Parse a level name, case-insensitive.

        Unknown names return NEVER; this function does not raise.

        Args:
            name: Level name such as "info" or "WARN"

        Returns:
            Matching Level, or Level.NEVER
        """
        if name is None:
            return cls.NEVER
        key = str(name).strip().upper()
        if key == "WARNING":
            key = "WARN"
        member = cls.__members__.get(key)
        return member if member is not None else cls.NEVER

    def __str__(self) -> str:
        if self > Level.FATAL:
            return "ALWAYS"
        return self.name

    def should_write(self, filter_level: "Level") -> bool:
        """
        Tell if a record at this level passes the given filter level.

        Args:
            filter_level: Level configured on a sink or a LevelSet

        Returns:
            True if the record should be written
        """
        if self in (Level.NEVER, Level.UNSET):
            return False
        if filter_level in (Level.ALWAYS, Level.UNSET):
            return True
        return filter_level != Level.NEVER and self >= filter_level

    def next(self) -> "Level":
        """Next (more severe) level on the ladder, ALWAYS stays ALWAYS."""
        if self == Level.NEVER:
            return self
        index = _LADDER.index(self)
        return _LADDER[min(index + 1, len(_LADDER) - 1)]

    def previous(self) -> "Level":
        """Previous (less severe) level on the ladder, UNSET stays UNSET."""
        if self == Level.NEVER:
            return self
        index = _LADDER.index(self)
        return _LADDER[max(index - 1, 0)]


_LADDER = (
    Level.UNSET,
    Level.TRACE,
    Level.DEBUG,
    Level.INFO,
    Level.WARN,
    Level.ERROR,
    Level.FATAL,
    Level.ALWAYS,
)


def get_level_from_record(record: Any) -> Level:
    """
    Read the level stored in a record.

    Args:
        record: Record (or mapping) with a "level" field

    Returns:
        The stored Level, NEVER if missing or not understood
    """
    if record is None:
        return Level.NEVER
    value = record.get("level")
    if isinstance(value, Level):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return Level(value)
        except ValueError:
            return Level.NEVER
    if isinstance(value, str):
        return Level.parse(value)
    return Level.NEVER
