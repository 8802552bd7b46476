"""
Record: the key/value payload of a log line.

Keys are strings, set once: the first writer wins. Values are scalars,
nested records or mappings, sequences, or zero-argument callables that are
evaluated when the record is emitted.
"""

import dataclasses
import json
from collections.abc import Mapping
from typing import Any, Dict, Iterator, Optional, Union

from ..utils.serialization import (
    MAX_DEPTH,
    exception_to_json,
    fallback_string,
    is_deferred,
    resolve_deferred,
    to_json_value,
)
from .protocols import Redactable


class Record(Mapping):
    """
    Ordered, first-writer-wins mapping of fields.

    Example:
        >>> record = Record().set("user", "alice").set("user", "bob")
        >>> record["user"]
        'alice'
        >>> Record().to_json()
        'null'
        >>> Record({"count": 2}).to_json()
        '{"count": 2}'
    """

    def __init__(self, data: Optional[Union["Record", Mapping]] = None, **fields: Any):
        self._data: Dict[str, Any] = {}
        if data is not None:
            self.merge(data)
        if fields:
            self.merge(fields)

    # Mapping interface

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Record):
            return self._data == other._data
        if isinstance(other, Mapping):
            return self._data == dict(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Record({self._data!r})"

    # First-writer-wins writes

    def set(self, key: str, value: Any) -> "Record":
        """
        Store value under key unless value is None or key is already present.

        Args:
            key: Field name
            value: Field value; a zero-argument callable is evaluated at emit time

        Returns:
            self, for chaining
        """
        key = str(key)
        if value is None or key in self._data:
            return self
        self._data[key] = value
        return self

    def merge(self, source: Optional[Union["Record", Mapping]]) -> "Record":
        """
        Copy every field of source that this record does not have yet.

        The receiver wins on conflicts. None is a no-op.
        """
        if source is None:
            return self
        for key, value in source.items():
            self.set(key, value)
        return self

    def find(self, key: str) -> Any:
        """Value for key with deferred values evaluated, or None."""
        value = self._data.get(key)
        if is_deferred(value):
            return resolve_deferred(value)
        return value

    # Converter helpers; converters only call these on their own copy

    def replace(self, key: str, value: Any) -> "Record":
        """Overwrite (or remove, with None) a field regardless of who wrote it."""
        if value is None:
            self._data.pop(key, None)
        else:
            self._data[str(key)] = value
        return self

    def delete(self, key: str) -> "Record":
        self._data.pop(key, None)
        return self

    def copy(self) -> "Record":
        """Shallow copy."""
        clone = Record()
        clone._data = dict(self._data)
        return clone

    def resolve(self) -> "Record":
        """
        Copy with deferred values evaluated, at any depth.

        Deferred values that return None drop their key; failing ones become
        an "<error: ...>" string. Exceptions, dataclasses and pydantic models
        become plain dicts so redaction sees their fields.
        """
        resolved = Record()
        for key, value in self._data.items():
            value = _resolve_value(value)
            if value is not None:
                resolved._data[key] = value
        return resolved

    # Serialization

    def to_dict(self) -> Dict[str, Any]:
        """JSON-compatible dict of this record."""
        return {key: to_json_value(value) for key, value in self._data.items()}

    def to_json(self) -> str:
        """
        Serialize as a single-line JSON object, or "null" when empty.

        Never raises: values that JSON cannot express use their string form.
        """
        if not self._data:
            return "null"
        return json.dumps(self.to_dict(), ensure_ascii=False, allow_nan=False, default=str)

    def serialize(self) -> bytes:
        """UTF-8 encoded to_json()."""
        return self.to_json().encode("utf-8", errors="backslashreplace")

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> "Record":
        """
        Parse serialized JSON back into a record; "null" gives an empty record.

        Raises:
            ValueError: If text is not a JSON object or null
        """
        data = json.loads(text)
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
        return cls(data)


def _resolve_value(value: Any, depth: int = 0) -> Any:
    if depth > MAX_DEPTH:
        return value
    if is_deferred(value):
        value = resolve_deferred(value)
    value = _as_plain(value)
    if isinstance(value, Record):
        return value.resolve()
    if isinstance(value, Mapping):
        resolved = ((k, _resolve_value(v, depth + 1)) for k, v in value.items())
        return {k: v for k, v in resolved if v is not None}
    if isinstance(value, list):
        return [_resolve_value(v, depth + 1) for v in value]
    return value


def _as_plain(value: Any) -> Any:
    # Redactable values keep their type until self-redaction
    if isinstance(value, type) or isinstance(value, Redactable):
        return value
    if isinstance(value, BaseException):
        return exception_to_json(value)
    try:
        if dataclasses.is_dataclass(value):
            return dataclasses.asdict(value)
        if hasattr(value, "model_dump"):
            return value.model_dump(mode="json")
    except Exception as e:
        return f"<error: {fallback_string(e)}>"
    return value
