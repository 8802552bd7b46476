"""
Per topic/scope filter levels.

A LevelSet maps TopicScope keys to Levels and resolves the effective filter
for a (topic, scope) pair, most specific rule first.
"""

import re
import threading
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

from .level import Level
from .topicscope import ANY, TopicScope

# LEVEL, LEVEL:{TOPIC}, LEVEL:{TOPIC:SCOPE1,SCOPE2}, LEVEL:{:SCOPE}; clauses end with ";" or the end of the text
_CLAUSE = re.compile(
    r"\s*(?P<level>[a-zA-Z]+)"
    r"(?::\{\s*(?P<topic>\w+)?\s*(?::\s*(?P<scopes>\w+(?:\s*,\s*\w+)*))?\s*\})?"
    r"\s*(?:;\s*|$)"
)


class LevelSet:
    """
    Filter levels keyed by topic and scope.

    Lookup order for get(topic, scope):
        1. exact (topic, scope)
        2. (topic, any)
        3. (any, scope)
        4. (any, any) - the default rule
    An empty set resolves to Level.UNSET, which lets every record through.

    Reads never lock: the mapping is replaced, never mutated, so a reader always
    sees a complete snapshot. Writers are serialized by a lock.

    Example:
        >>> levels = LevelSet.parse("INFO;DEBUG:{db}")
        >>> levels.get("db", "query")
        <Level.DEBUG: 20>
        >>> levels.should_write(Level.DEBUG, "http", "main")
        False
    """

    def __init__(
        self,
        levels: Optional[Mapping[TopicScope, Level]] = None,
        default: Optional[Level] = None,
    ):
        data: Dict[TopicScope, Level] = dict(levels or {})
        if default is not None:
            data[TopicScope()] = Level(default)
        self._levels: Dict[TopicScope, Level] = data
        self._lock = threading.Lock()

    # Parsing

    @classmethod
    def parse(cls, text: Optional[str]) -> "LevelSet":
        """
        Build a LevelSet from its textual form.

        Grammar: ";"-separated clauses, each one of
        LEVEL, LEVEL:{TOPIC}, LEVEL:{TOPIC:SCOPE1,SCOPE2}, LEVEL:{:SCOPE}.
        Blank text gives a single default rule at INFO. Unknown level names
        become NEVER. A later clause for the same key wins.

        Args:
            text: Level specification, e.g. "INFO;DEBUG:{db:query,commit}"

        Returns:
            New LevelSet
        """
        levels = cls()
        if text is None or not text.strip():
            levels.set_default(Level.INFO)
            return levels
        for match in _CLAUSE.finditer(text):
            level = Level.parse(match.group("level"))
            topic = match.group("topic")
            scopes = match.group("scopes")
            if scopes:
                for scope in scopes.split(","):
                    levels.set(level, topic, scope.strip())
            else:
                levels.set(level, topic)
        return levels

    # Writes

    def set(self, level: Level, topic: Optional[Any] = None, scope: Optional[Any] = None) -> "LevelSet":
        """
        Set the filter level for a topic/scope; None, "" and "*" mean any.

        Returns:
            self, for chaining
        """
        key = TopicScope.of(topic, scope)
        with self._lock:
            updated = dict(self._levels)
            updated[key] = Level(level)
            self._levels = updated
        return self

    def set_default(self, level: Level) -> "LevelSet":
        """Set the (any, any) rule."""
        return self.set(level)

    def set_default_if_unset(self, level: Level) -> "LevelSet":
        """Set the default rule only if there is none yet."""
        key = TopicScope()
        with self._lock:
            if key not in self._levels:
                updated = dict(self._levels)
                updated[key] = Level(level)
                self._levels = updated
        return self

    def remove(self, topic: Optional[Any] = None, scope: Optional[Any] = None) -> "LevelSet":
        key = TopicScope.of(topic, scope)
        with self._lock:
            if key in self._levels:
                updated = dict(self._levels)
                del updated[key]
                self._levels = updated
        return self

    def filter_more(self) -> "LevelSet":
        """Raise the default rule one step, so fewer records pass."""
        with self._lock:
            updated = dict(self._levels)
            updated[TopicScope()] = updated.get(TopicScope(), Level.UNSET).next()
            self._levels = updated
        return self

    def filter_less(self) -> "LevelSet":
        """Lower the default rule one step, so more records pass."""
        with self._lock:
            updated = dict(self._levels)
            updated[TopicScope()] = updated.get(TopicScope(), Level.UNSET).previous()
            self._levels = updated
        return self

    # Reads

    def get(self, topic: Optional[Any] = None, scope: Optional[Any] = None) -> Level:
        """
        Resolve the effective filter level.

        Args:
            topic: Record topic (None means any)
            scope: Record scope (None means any)

        Returns:
            Most specific matching Level, or Level.UNSET if nothing matches
        """
        levels = self._levels
        if not levels:
            return Level.UNSET
        key = TopicScope.of(topic, scope)
        for candidate in (
            key,
            TopicScope(key.topic, ANY),
            TopicScope(ANY, key.scope),
            TopicScope(),
        ):
            level = levels.get(candidate)
            if level is not None:
                return level
        return Level.UNSET

    def get_default(self) -> Level:
        return self._levels.get(TopicScope(), Level.UNSET)

    def should_write(self, level: Level, topic: Optional[Any] = None, scope: Optional[Any] = None) -> bool:
        """Tell if a record at level, topic and scope passes this set."""
        return Level(level).should_write(self.get(topic, scope))

    def items(self) -> Tuple[Tuple[TopicScope, Level], ...]:
        return tuple(self._levels.items())

    def copy(self) -> "LevelSet":
        return LevelSet(self._levels)

    def __len__(self) -> int:
        return len(self._levels)

    def __iter__(self) -> Iterator[TopicScope]:
        return iter(tuple(self._levels))

    def __contains__(self, key: object) -> bool:
        return key in self._levels

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LevelSet):
            return NotImplemented
        return self._levels == other._levels

    def __str__(self) -> str:
        clauses = []
        levels = self._levels
        default = levels.get(TopicScope())
        if default is not None:
            clauses.append(str(default))
        for key in sorted((k for k in levels if not k.is_default), key=lambda k: (k.topic, k.scope)):
            clauses.append(_format_clause(levels[key], key))
        return ";".join(clauses)

    def __repr__(self) -> str:
        return f"LevelSet({str(self)!r})"


def _format_clause(level: Level, key: TopicScope) -> str:
    if key.topic == ANY:
        return f"{str(level)}:{{:{key.scope}}}"
    if key.scope == ANY:
        return f"{str(level)}:{{{key.topic}}}"
    return f"{str(level)}:{{{key.topic}:{key.scope}}}"
