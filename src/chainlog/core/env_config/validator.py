"""
Pydantic validators for environment configuration.

LoggerSettings reads the LOG_* environment variables (and an optional .env
file); LoggerFileSettings validates the `logger:` section of config files.
"""

from typing import Any, Dict, List, Literal

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..config import DEFAULT_FLUSH_INTERVAL
from ..exceptions import InvalidPatternError
from ..redactor import Redactor
from .duration import parse_duration

ConverterName = Literal[
    "bunyan", "default", "pino", "cloudwatch", "aws",
    "stackdriver", "google", "googlecloud", "gcp",
]


def _lower(value: Any) -> Any:
    return value.strip().lower() if isinstance(value, str) else value


class LoggerSettings(BaseSettings):
    """
    Logger configuration from environment variables.

    Reads from:
    1. Environment variables (LOG_*, and DEBUG)
    2. .env file
    3. Defaults

    Example .env file:
        LOG_DESTINATION=stdout,file:///var/log/app.log
        LOG_LEVEL=INFO;DEBUG:{db}
        LOG_CONVERTER=bunyan
        LOG_FLUSHFREQUENCY=5m
        DEBUG=false

    Usage:
        >>> settings = LoggerSettings()
        >>> settings.level
        'INFO'
    """

    model_config = SettingsConfigDict(
        env_prefix='LOG_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
        populate_by_name=True,
    )

    destination: str = Field(default="", description="Comma-separated destinations")
    level: str = Field(default="INFO", description="Level specification")
    converter: ConverterName = Field(default="bunyan")
    flush_frequency: float = Field(
        default=DEFAULT_FLUSH_INTERVAL,
        ge=0,
        validation_alias=AliasChoices("LOG_FLUSHFREQUENCY", "LOG_FLUSH_FREQUENCY"),
        description="Seconds between flushes of buffered output",
    )
    buffered: bool = Field(default=False)
    debug: bool = Field(
        default=False,
        validation_alias=AliasChoices("DEBUG", "LOG_DEBUG"),
        description="Lower the default level to DEBUG",
    )

    @field_validator('converter', mode='before')
    @classmethod
    def normalize_converter(cls, v: Any) -> Any:
        """Accept any case."""
        return _lower(v) or "bunyan"

    @field_validator('flush_frequency', mode='before')
    @classmethod
    def validate_flush_frequency(cls, v: Any) -> float:
        """Accept "5m", "PT5M" or plain seconds."""
        return parse_duration(v)

    @field_validator('level', mode='before')
    @classmethod
    def default_level(cls, v: Any) -> Any:
        """Blank means INFO."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return "INFO"
        return v


class LoggerFileSettings(BaseModel):
    """`logger:` section of a YAML/JSON configuration file."""

    name: str = Field(default="app", min_length=1)
    destination: str = ""
    level: str = "INFO"
    converter: ConverterName = "bunyan"
    buffered: bool = False
    flush_interval: float = Field(default=DEFAULT_FLUSH_INTERVAL, ge=0)
    redact_patterns: List[str] = Field(default_factory=list)
    redact_keys: List[str] = Field(default_factory=list)
    fields: Dict[str, Any] = Field(default_factory=dict)

    @field_validator('converter', mode='before')
    @classmethod
    def normalize_converter(cls, v: Any) -> Any:
        return _lower(v) or "bunyan"

    @field_validator('flush_interval', mode='before')
    @classmethod
    def validate_flush_interval(cls, v: Any) -> float:
        return parse_duration(v)

    @field_validator('redact_patterns')
    @classmethod
    def validate_patterns(cls, v: List[str]) -> List[str]:
        """Patterns must compile."""
        for pattern in v:
            try:
                Redactor(pattern)
            except InvalidPatternError as e:
                raise ValueError(e.message) from e
        return v
