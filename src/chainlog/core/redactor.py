"""
Redaction of sensitive values.

Three mechanisms, applied in this order once a record is flattened:
    1. self-redaction - values implementing Redactable redact themselves
    2. key redaction - values stored under configured keys are masked
    3. pattern redaction - Redactor regexes rewrite every string value
"""

import hashlib
import logging
import re
from collections.abc import Mapping
from typing import Any, Iterable, Pattern, Sequence, Tuple, Union

from .exceptions import InvalidPatternError
from .protocols import Redactable
from .record import Record

logger = logging.getLogger(__name__)

REDACTED = "REDACTED"


class Redactor:
    """
    Regex based string redactor.

    Example:
        >>> redactor = Redactor(r"\\b(?:\\d[ -]?){15}\\d\\b")
        >>> redactor.redact("card 4111 1111 1111 1111 used")
        ('card REDACTED used', True)
        >>> redactor.redact("nothing here")
        ('nothing here', False)
    """

    def __init__(self, pattern: Union[str, Pattern], replacement: str = REDACTED, flags: int = 0):
        """
        Args:
            pattern: Regular expression (string or compiled)
            replacement: Substitution text, group references allowed
            flags: re flags, used when pattern is a string

        Raises:
            InvalidPatternError: If the pattern does not compile
        """
        if isinstance(pattern, re.Pattern):
            self._regex = pattern
        else:
            try:
                self._regex = re.compile(pattern, flags)
            except (re.error, TypeError) as e:
                raise InvalidPatternError(str(pattern), str(e)) from e
        self.replacement = replacement

    @property
    def pattern(self) -> str:
        return self._regex.pattern

    def redact(self, text: str) -> Tuple[str, bool]:
        """
        Replace every match in text.

        Returns:
            (redacted text, whether anything matched)
        """
        result, count = self._regex.subn(self.replacement, text)
        return result, count > 0

    def __str__(self) -> str:
        return self.pattern

    def __repr__(self) -> str:
        return f"Redactor({self.pattern!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Redactor):
            return NotImplemented
        return self._regex == other._regex and self.replacement == other.replacement

    def __hash__(self) -> int:
        return hash((self.pattern, self.replacement))


def redact(value: Any) -> str:
    """
    Fixed marker for a value; empty values stay empty.

    Example:
        >>> redact("John Doe")
        'REDACTED'
        >>> redact("")
        ''
    """
    if value is None or value == "":
        return ""
    return REDACTED


def redact_with_hash(value: Any) -> str:
    """
    Marker plus a short sha256 of the value, so equal values stay correlatable.

    Example:
        >>> redact_with_hash("John Doe")
        'REDACTED-6cea57c2fb'
    """
    return redact_with_prefixed_hash(REDACTED, value)


def redact_with_prefixed_hash(prefix: str, value: Any) -> str:
    """Like redact_with_hash() with a custom prefix; empty values stay empty."""
    if value is None or value == "":
        return ""
    digest = hashlib.sha256(str(value).encode("utf-8")).hexdigest()
    return f"{prefix}-{digest[:10]}"


def self_redact(record: Record) -> Record:
    """
    Copy of record with every Redactable value replaced by its redact() result.

    A value whose redact() raises is replaced by the REDACTED marker.
    """
    result = Record()
    for key, value in record.items():
        result.replace(key, _self_redact_value(value))
    return result


def _self_redact_value(value: Any) -> Any:
    if isinstance(value, Redactable) and not isinstance(value, (Redactor, type)):
        try:
            return value.redact()
        except Exception as e:
            logger.warning("redact() of %s failed: %s", type(value).__name__, e)
            return REDACTED
    if isinstance(value, Record):
        return self_redact(value)
    if isinstance(value, Mapping):
        return {k: _self_redact_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_self_redact_value(v) for v in value]
    return value


def redact_keys(record: Record, *keys: str) -> Record:
    """
    Copy of record with values under the given keys masked, at any depth.

    Key matching is case-insensitive; keys that are not present are ignored.

    Example:
        >>> redact_keys(Record(user="alice", password="hunter2"), "password").to_dict()
        {'user': 'alice', 'password': 'REDACTED'}
    """
    wanted = frozenset(k.lower() for k in keys)
    if not wanted:
        return record
    result = Record()
    for key, value in record.items():
        result.replace(key, REDACTED if key.lower() in wanted else _redact_keys_value(value, wanted))
    return result


def _redact_keys_value(value: Any, wanted: frozenset) -> Any:
    if isinstance(value, Record):
        return redact_keys(value, *wanted)
    if isinstance(value, Mapping):
        return {
            k: REDACTED if str(k).lower() in wanted else _redact_keys_value(v, wanted)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_redact_keys_value(v, wanted) for v in value]
    return value


def apply_redactors(record: Record, redactors: Sequence[Redactor]) -> Record:
    """
    Copy of record with every string value (nested ones too) passed through
    the redactors in order.
    """
    if not redactors:
        return record
    result = Record()
    for key, value in record.items():
        result.replace(key, _apply_value(value, redactors))
    return result


def _apply_value(value: Any, redactors: Sequence[Redactor]) -> Any:
    if isinstance(value, str):
        for redactor in redactors:
            value, _ = redactor.redact(value)
        return value
    if isinstance(value, Record):
        return apply_redactors(value, redactors)
    if isinstance(value, Mapping):
        return {k: _apply_value(v, redactors) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_apply_value(v, redactors) for v in value]
    return value


def to_redactors(items: Iterable[Union[str, Pattern, Redactor]]) -> Tuple[Redactor, ...]:
    """Compile strings and patterns into Redactors, keeping existing ones."""
    return tuple(item if isinstance(item, Redactor) else Redactor(item) for item in items)
