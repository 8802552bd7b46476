"""
Capabilities the logger chain relies on.

Anything with the right methods qualifies; nothing has to inherit from these.
"""

from typing import TYPE_CHECKING, Any, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .level import Level
    from .record import Record


@runtime_checkable
class Redactable(Protocol):
    """A value that knows how to hide its own secrets."""

    def redact(self) -> Any:
        ...


@runtime_checkable
class Converter(Protocol):
    """Reshapes a record for a log backend. Must not mutate its input."""

    def convert(self, record: "Record") -> "Record":
        ...


@runtime_checkable
class Target(Protocol):
    """
    Where a logger sends finished records: a sink, or another logger.

    write() raises on failure; the emitting logger reports and swallows it.
    """

    def write(self, record: "Record") -> None:
        ...

    def should_write(self, level: "Level", topic: Optional[Any] = None, scope: Optional[Any] = None) -> bool:
        ...

    def flush(self) -> None:
        ...

    def close(self) -> None:
        ...
