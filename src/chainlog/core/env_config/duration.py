"""
Duration parsing for configuration values.

Accepted forms:
    "300"            plain seconds
    "5m", "1h30m"    unit suffixes: ms, s, m, h, d
    "PT5M", "P1DT2H" ISO8601 durations (years and months are not supported)
"""

import math
import re

_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0, "d": 86400.0}

_SIMPLE = re.compile(r"^(?:\d+(?:\.\d+)?(?:ms|s|m|h|d))+$")
_SIMPLE_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|s|m|h|d)")

_ISO8601 = re.compile(
    r"^P(?:(?P<weeks>\d+(?:\.\d+)?)W)?(?:(?P<days>\d+(?:\.\d+)?)D)?"
    r"(?:T(?:(?P<hours>\d+(?:\.\d+)?)H)?(?:(?P<minutes>\d+(?:\.\d+)?)M)?(?:(?P<seconds>\d+(?:\.\d+)?)S)?)?$"
)


def parse_duration(value) -> float:
    """
    Parse a duration into seconds.

    Args:
        value: Number of seconds, or a duration string

    Returns:
        Seconds as float

    Raises:
        ValueError: If value is not a valid duration

    Example:
        >>> parse_duration("1h30m")
        5400.0
        >>> parse_duration("PT5M")
        300.0
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        if value < 0:
            raise ValueError(f"Duration must be >= 0, got {value}")
        return float(value)

    text = str(value).strip()
    if not text:
        raise ValueError("Empty duration")

    try:
        seconds = float(text)
    except ValueError:
        pass
    else:
        if seconds < 0 or not math.isfinite(seconds):
            raise ValueError(f"Invalid duration: {value!r}")
        return seconds

    lowered = text.lower()
    if _SIMPLE.match(lowered):
        return sum(float(amount) * _UNITS[unit] for amount, unit in _SIMPLE_PART.findall(lowered))

    match = _ISO8601.match(text.upper())
    if match and text.upper() not in ("P", "PT") and not text.upper().endswith("T"):
        parts = {k: float(v) for k, v in match.groupdict().items() if v is not None}
        return (
            parts.get("weeks", 0.0) * 7 * 86400
            + parts.get("days", 0.0) * 86400
            + parts.get("hours", 0.0) * 3600
            + parts.get("minutes", 0.0) * 60
            + parts.get("seconds", 0.0)
        )

    raise ValueError(f"Invalid duration: {value!r}")
