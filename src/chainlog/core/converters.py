"""
Record converters for different log backends.

A converter receives the finished record right before serialization and
returns a reshaped copy; the input is never modified.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Type

from .exceptions import ConfigurationError
from .level import Level, get_level_from_record
from .record import Record
from ..utils.serialization import format_time


def _time_of(record: Record) -> Any:
    value = record.find("time")
    return value if isinstance(value, datetime) else None


class BunyanConverter:
    """
    Default converter, bunyan compatible.

    Example output:
        {"name": "app", "hostname": "web-1", "pid": 4242, "tid": 4243,
         "time": "2024-01-15T10:30:45.123Z", "level": 30, "msg": "started",
         "v": 0, "topic": "main", "scope": "main"}
    """

    def convert(self, record: Record) -> Record:
        converted = record.copy()
        when = _time_of(record)
        if when is not None:
            converted.replace("time", format_time(when))
        return converted


class PinoConverter:
    """pino layout: numeric level, epoch milliseconds, v=1 and no name."""

    def convert(self, record: Record) -> Record:
        converted = record.copy()
        converted.replace("level", int(get_level_from_record(record)))
        when = _time_of(record)
        if when is not None:
            if when.tzinfo is None:
                when = when.replace(tzinfo=timezone.utc)
            converted.replace("time", int(when.timestamp() * 1000))
        converted.replace("v", 1)
        converted.delete("name")
        return converted


class CloudWatchConverter:
    """AWS CloudWatch: adds a textual severity next to the numeric level."""

    def convert(self, record: Record) -> Record:
        converted = record.copy()
        converted.replace("severity", str(get_level_from_record(record)))
        when = _time_of(record)
        if when is not None:
            converted.replace("time", format_time(when))
        return converted


STACKDRIVER_SEVERITIES: Dict[Level, str] = {
    Level.TRACE: "DEBUG",
    Level.DEBUG: "DEBUG",
    Level.INFO: "INFO",
    Level.WARN: "WARNING",
    Level.ERROR: "ERROR",
    Level.FATAL: "CRITICAL",
    Level.ALWAYS: "EMERGENCY",
}


class StackDriverConverter:
    """
    Google Cloud Logging (StackDriver) layout.

    level becomes severity, msg becomes message; name and v are dropped.
    """

    def convert(self, record: Record) -> Record:
        converted = record.copy()
        level = get_level_from_record(record)
        converted.replace("severity", STACKDRIVER_SEVERITIES.get(level, "INFO"))
        converted.replace("message", record.get("msg"))
        when = _time_of(record)
        if when is not None:
            converted.replace("time", format_time(when))
        for key in ("level", "name", "msg", "v"):
            converted.delete(key)
        return converted


CONVERTERS: Dict[str, Type] = {
    "bunyan": BunyanConverter,
    "default": BunyanConverter,
    "pino": PinoConverter,
    "cloudwatch": CloudWatchConverter,
    "aws": CloudWatchConverter,
    "stackdriver": StackDriverConverter,
    "google": StackDriverConverter,
    "googlecloud": StackDriverConverter,
    "gcp": StackDriverConverter,
}


def get_converter(name: str):
    """
    Get converter by name.

    Args:
        name: bunyan/default, pino, cloudwatch/aws, stackdriver/google/gcp

    Returns:
        Converter instance

    Raises:
        ConfigurationError: If name is unknown

    Example:
        >>> get_converter("gcp")
        <chainlog.core.converters.StackDriverConverter object at ...>
    """
    converter_class = CONVERTERS.get((name or "bunyan").strip().lower())
    if not converter_class:
        raise ConfigurationError(
            f"Unknown converter: {name}. "
            f"Available: {', '.join(sorted(CONVERTERS))}"
        )
    return converter_class()
