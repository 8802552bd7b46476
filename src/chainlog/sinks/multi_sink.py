"""
Fan-out sink.

Each child keeps its own filter levels; a record goes to every child that
accepts it.
"""

from typing import Any, List, Optional

from ..core.exceptions import MultiSinkError
from ..core.level import Level, get_level_from_record
from ..core.protocols import Target
from ..core.record import Record
from ..core.topicscope import DEFAULT_SCOPE, DEFAULT_TOPIC


class MultiSink:
    """
    Dispatch records to several targets.

    Children are tried in order; failures are collected and raised together
    as a MultiSinkError once every child had its turn.

    Example:
        >>> sink = MultiSink(StdoutSink(), FileSink("app.log"))
        >>> sink.set_filter_level(Level.DEBUG)
    """

    def __init__(self, *targets: Target):
        self.targets: List[Target] = list(targets)

    def add(self, target: Target) -> "MultiSink":
        self.targets.append(target)
        return self

    def write(self, record: Record) -> None:
        level = get_level_from_record(record)
        topic = record.find("topic") or DEFAULT_TOPIC
        scope = record.find("scope") or DEFAULT_SCOPE
        errors = []
        for target in self.targets:
            if not target.should_write(level, topic, scope):
                continue
            try:
                target.write(record)
            except Exception as e:
                errors.append(e)
        if errors:
            raise MultiSinkError(errors)

    def should_write(self, level: Level, topic: Optional[Any] = None, scope: Optional[Any] = None) -> bool:
        return any(target.should_write(level, topic, scope) for target in self.targets)

    def _each(self, method: str, *args: Any) -> None:
        errors = []
        for target in self.targets:
            action = getattr(target, method, None)
            if action is None:
                continue
            try:
                action(*args)
            except Exception as e:
                errors.append(e)
        if errors:
            raise MultiSinkError(errors)

    def set_filter_level(self, level: Level, topic: Optional[Any] = None, scope: Optional[Any] = None) -> "MultiSink":
        self._each("set_filter_level", level, topic, scope)
        return self

    def set_filter_level_if_unset(self, level: Level) -> "MultiSink":
        self._each("set_filter_level_if_unset", level)
        return self

    def filter_more(self) -> "MultiSink":
        self._each("filter_more")
        return self

    def filter_less(self) -> "MultiSink":
        self._each("filter_less")
        return self

    def flush(self) -> None:
        self._each("flush")

    def close(self) -> None:
        self._each("close")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __str__(self) -> str:
        return "MultiSink(" + ", ".join(str(t) for t in self.targets) + ")"
