"""Topic/scope pairs used as LevelSet keys."""

from dataclasses import dataclass
from typing import Any, Optional

ANY = "any"
DEFAULT_TOPIC = "main"
DEFAULT_SCOPE = "main"


def normalize(value: Any) -> str:
    """Map None, "" and "*" to ANY, everything else to its string form."""
    if value is None:
        return ANY
    text = str(value).strip()
    if text in ("", "*"):
        return ANY
    return text


@dataclass(frozen=True)
class TopicScope:
    """
    A (topic, scope) key; either side may be the wildcard ANY.

    Example:
        >>> TopicScope.of("db", None)
        TopicScope(topic='db', scope='any')
        >>> TopicScope.of("db", None).match("db", "query")
        True
    """

    topic: str = ANY
    scope: str = ANY

    @classmethod
    def of(cls, topic: Optional[Any] = None, scope: Optional[Any] = None) -> "TopicScope":
        return cls(normalize(topic), normalize(scope))

    @property
    def is_default(self) -> bool:
        return self.topic == ANY and self.scope == ANY

    @property
    def specificity(self) -> int:
        """3 for topic+scope, 2 for topic only, 1 for scope only, 0 for the default."""
        if self.topic != ANY and self.scope != ANY:
            return 3
        if self.topic != ANY:
            return 2
        if self.scope != ANY:
            return 1
        return 0

    def match(self, topic: Any, scope: Any) -> bool:
        """Tell if this key covers the given topic and scope."""
        return (self.topic == ANY or self.topic == str(topic)) and (
            self.scope == ANY or self.scope == str(scope)
        )

    def __str__(self) -> str:
        return f"{self.topic}:{self.scope}"
