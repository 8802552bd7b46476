"""
JSON value conversion for records.

to_json_value() turns any record value into something json.dumps accepts.
The set of handled kinds is closed and listed below; everything else falls
back to its string form. It never raises.

Handled kinds:
    None, bool, int (IntEnum included), finite float, str, bytes,
    datetime / date / time, timedelta, UUID, Decimal, Enum, Path,
    Mapping (Record included), list / tuple / set / frozenset,
    BaseException, dataclass instances, pydantic models,
    Redactable values, zero-argument callables (deferred values)
"""

import dataclasses
import math
import re
import traceback
from collections.abc import Mapping
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from enum import Enum
from pathlib import PurePath
from typing import Any
from uuid import UUID

from ..core.protocols import Redactable

# Nesting deeper than this (cycles included) is rendered as a string
MAX_DEPTH = 32

_SURROGATES = re.compile("[\ud800-\udfff]")


def format_time(value: datetime) -> str:
    """
    Format a datetime as RFC3339 in UTC with millisecond precision.

    Example:
        >>> format_time(datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc))
        '2024-01-02T03:04:05.678Z'
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def clean_text(text: str) -> str:
    """
    Replace lone surrogates (from os.fsdecode or surrogateescape input) so
    the text always encodes as UTF-8.

    Example:
        >>> clean_text("bad\\udcffname") == "bad\\ufffdname"
        True
    """
    return _SURROGATES.sub("\ufffd", text)


def fallback_string(value: Any) -> str:
    """str(value), then repr(value), then a type placeholder."""
    try:
        return clean_text(str(value))
    except Exception:
        pass
    try:
        return clean_text(repr(value))
    except Exception:
        return f"<unserializable {type(value).__name__}>"


def resolve_deferred(value: Any) -> Any:
    """
    Invoke a deferred (zero-argument callable) value.

    A failing callable resolves to an "<error: ...>" string.
    """
    try:
        return value()
    except Exception as e:
        return f"<error: {fallback_string(e)}>"


def is_deferred(value: Any) -> bool:
    """Callables other than classes are deferred values."""
    return callable(value) and not isinstance(value, type)


def exception_to_json(error: BaseException) -> Any:
    """
    Render an exception as {"type", "message"} plus "stack" when it has a traceback.
    """
    data = {"type": type(error).__name__, "message": fallback_string(error)}
    if error.__traceback__ is not None:
        try:
            data["stack"] = "".join(
                traceback.format_exception(type(error), error, error.__traceback__)
            ).rstrip()
        except Exception:
            pass
    return data


def to_json_value(value: Any, _depth: int = 0) -> Any:
    """
    Convert a record value to a JSON-compatible value.

    Args:
        value: Anything stored in a record

    Returns:
        None, bool, int, float, str, list or dict

    Example:
        >>> to_json_value({"when": date(2024, 1, 2), "ids": {1}})
        {'when': '2024-01-02', 'ids': [1]}
    """
    if _depth > MAX_DEPTH:
        return fallback_string(value)

    try:
        if value is None or isinstance(value, bool):
            return value
        if isinstance(value, str):
            return clean_text(value)
        if isinstance(value, Enum):
            if isinstance(value, int):
                return int(value)
            return to_json_value(value.value, _depth + 1)
        if isinstance(value, int):
            return int(value)
        if isinstance(value, float):
            return value if math.isfinite(value) else str(value)
        if isinstance(value, (bytes, bytearray)):
            return bytes(value).decode("utf-8", errors="replace")
        if isinstance(value, datetime):
            return format_time(value)
        if isinstance(value, (date, time)):
            return value.isoformat()
        if isinstance(value, timedelta):
            return value.total_seconds()
        if isinstance(value, (UUID, Decimal, PurePath)):
            return clean_text(str(value))
        if isinstance(value, BaseException):
            return to_json_value(exception_to_json(value), _depth + 1)
        if isinstance(value, Redactable) and not isinstance(value, type):
            return to_json_value(value.redact(), _depth + 1)
        if isinstance(value, Mapping):
            return {clean_text(str(k)): to_json_value(v, _depth + 1) for k, v in value.items()}
        if isinstance(value, (list, tuple, set, frozenset)):
            return [to_json_value(v, _depth + 1) for v in value]
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            return to_json_value(dataclasses.asdict(value), _depth + 1)
        if hasattr(value, "model_dump") and not isinstance(value, type):
            return to_json_value(value.model_dump(mode="json"), _depth + 1)
        if is_deferred(value):
            return to_json_value(resolve_deferred(value), _depth + 1)
    except Exception as e:
        return f"<error: {fallback_string(e)}>"

    return fallback_string(value)
