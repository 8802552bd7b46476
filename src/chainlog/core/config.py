"""
Logger configuration.

LoggerConfig describes how to build a root logger; env_config builds it
from environment variables or configuration files.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence, Tuple

from .converters import CONVERTERS
from .exceptions import ConfigurationError
from .level_set import LevelSet

DEFAULT_FLUSH_INTERVAL = 5 * 60.0  # seconds


@dataclass(frozen=True)
class LoggerConfig:
    """
    Configuration for a root logger.

    Attributes:
        name: Application name written in every record
        destination: Comma-separated destinations (stdout, stderr, nil,
            file:///path, gcp); empty means stdout
        level: Level specification, e.g. "INFO;DEBUG:{db}"
        converter: bunyan, pino, cloudwatch or stackdriver (aliases accepted)
        buffered: Buffer output until flushed
        flush_interval: Seconds between background flushes of buffered output
        redact_patterns: Regexes for pattern redaction
        redact_keys: Field names for key redaction
        fields: Extra fields written in every record

    Example:
        >>> config = LoggerConfig.create(
        ...     name="billing",
        ...     destination="stdout,file:///var/log/billing.log",
        ...     level="INFO;DEBUG:{db}",
        ... )
    """

    name: str = "app"
    destination: str = ""
    level: str = "INFO"
    converter: str = "bunyan"
    buffered: bool = False
    flush_interval: float = DEFAULT_FLUSH_INTERVAL
    redact_patterns: Tuple[str, ...] = ()
    redact_keys: Tuple[str, ...] = ()
    fields: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate configuration."""
        if not self.name:
            raise ConfigurationError("name must not be empty")
        if (self.converter or "bunyan").strip().lower() not in CONVERTERS:
            raise ConfigurationError(
                f"Unknown converter: {self.converter}. Available: {', '.join(sorted(CONVERTERS))}"
            )
        if self.flush_interval < 0:
            raise ConfigurationError(f"flush_interval must be >= 0, got {self.flush_interval}")

    @classmethod
    def create(
        cls,
        name: str = "app",
        destination: str = "",
        level: str = "INFO",
        converter: str = "bunyan",
        buffered: bool = False,
        flush_interval: float = DEFAULT_FLUSH_INTERVAL,
        redact_patterns: Optional[Sequence[str]] = None,
        redact_keys: Optional[Sequence[str]] = None,
        fields: Optional[Dict[str, Any]] = None,
    ) -> "LoggerConfig":
        """Create LoggerConfig from plain values (lists accepted for the tuples)."""
        return cls(
            name=name,
            destination=destination or "",
            level=level or "INFO",
            converter=converter or "bunyan",
            buffered=buffered,
            flush_interval=float(flush_interval),
            redact_patterns=tuple(redact_patterns or ()),
            redact_keys=tuple(redact_keys or ()),
            fields=dict(fields or {}),
        )

    @property
    def levels(self) -> LevelSet:
        """Parsed level specification (a new LevelSet on each access)."""
        return LevelSet.parse(self.level)
