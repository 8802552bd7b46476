"""
Configuration loader from environment variables and .env files.

Main entry point for building loggers and sinks from configuration.
"""

import logging
from pathlib import Path
from typing import List, Optional

from ..config import DEFAULT_FLUSH_INTERVAL, LoggerConfig
from ..converters import StackDriverConverter, get_converter
from ..exceptions import ConfigurationError
from ..level import Level
from ..level_set import LevelSet
from ..logger import Logger
from ..protocols import Converter, Target
from .validator import LoggerSettings

logger = logging.getLogger(__name__)

FILE_SCHEME = "file://"
GOOGLE_DESTINATIONS = ("gcp", "google", "googlecloud", "stackdriver")
NIL_DESTINATIONS = ("nil", "null", "none", "discard")


def load_settings(env_file: Optional[str] = None) -> LoggerSettings:
    """Read LoggerSettings from the environment (and env_file, if given)."""
    if env_file is None:
        return LoggerSettings()
    return LoggerSettings(_env_file=env_file)


def levels_from_settings(settings: LoggerSettings) -> LevelSet:
    """
    LevelSet for LOG_LEVEL, lowered to DEBUG when DEBUG is set.

    Example:
        >>> # LOG_LEVEL=WARN DEBUG=1
        >>> str(levels_from_settings(LoggerSettings()))
        'DEBUG'
    """
    levels = LevelSet.parse(settings.level)
    if settings.debug and levels.get_default() > Level.DEBUG:
        levels.set_default(Level.DEBUG)
    return levels


def levels_from_environment(env_file: Optional[str] = None) -> LevelSet:
    return levels_from_settings(load_settings(env_file))


def load_from_env(env_file: Optional[str] = None, **overrides) -> LoggerConfig:
    """
    Load LoggerConfig from environment variables.

    Priority (highest to lowest):
    1. **overrides - explicit parameters
    2. Environment variables (LOG_*)
    3. .env file
    4. Defaults

    Args:
        env_file: Custom .env file path
        **overrides: Explicit LoggerConfig fields

    Returns:
        LoggerConfig instance

    Example:
        >>> config = load_from_env(name="billing")
        >>> log = create_logger(config)
    """
    settings = load_settings(env_file)
    return LoggerConfig.create(
        name=overrides.get('name', 'app'),
        destination=overrides.get('destination', settings.destination),
        level=overrides.get('level', str(levels_from_settings(settings))),
        converter=overrides.get('converter', settings.converter),
        buffered=overrides.get('buffered', settings.buffered),
        flush_interval=overrides.get('flush_interval', settings.flush_frequency),
        redact_patterns=overrides.get('redact_patterns'),
        redact_keys=overrides.get('redact_keys'),
        fields=overrides.get('fields'),
    )


def sink_from_destination(
    destination: str,
    converter: Optional[Converter] = None,
    levels: Optional[LevelSet] = None,
    buffered: bool = False,
    flush_interval: Optional[float] = DEFAULT_FLUSH_INTERVAL,
) -> Target:
    """
    Build a sink from a destination string.

    Destinations: "stdout" (also ""), "stderr", "nil", "file:///path/app.log"
    or a plain path, "gcp"/"google"/"stackdriver" (stdout with the StackDriver
    converter). A comma-separated list builds a MultiSink.

    Args:
        destination: Destination string
        converter: Converter for the sink(s)
        levels: Filter levels; every sink gets its own copy
        buffered: Buffer output
        flush_interval: Seconds between background flushes of buffered output

    Raises:
        ConfigurationError: If a destination is empty inside a list
    """
    from ...sinks import FileSink, MultiSink, NilSink, StderrSink, StdoutSink

    parts = [part.strip() for part in (destination or "").split(",")]
    if len(parts) > 1:
        if not all(parts):
            raise ConfigurationError(f"Empty destination in {destination!r}")
        return MultiSink(*(
            sink_from_destination(part, converter, levels, buffered, flush_interval) for part in parts
        ))

    name = parts[0]
    key = name.lower()
    sink_levels = levels.copy() if levels is not None else None
    interval = flush_interval if buffered else None

    if key in ("", "stdout"):
        return StdoutSink(converter, sink_levels, buffered=buffered, flush_interval=interval)
    if key == "stderr":
        return StderrSink(converter, sink_levels, buffered=buffered, flush_interval=interval)
    if key in NIL_DESTINATIONS:
        return NilSink(converter, sink_levels)
    if key in GOOGLE_DESTINATIONS:
        return StdoutSink(converter or StackDriverConverter(), sink_levels,
                          buffered=buffered, flush_interval=interval)
    if key.startswith(FILE_SCHEME):
        path = name[len(FILE_SCHEME):]
        if not path:
            raise ConfigurationError(f"Missing path in {name!r}")
        return FileSink(Path(path), converter, sink_levels, flush_interval=flush_interval)
    logger.debug("Treating destination %r as a file path", name)
    return FileSink(Path(name), converter, sink_levels, flush_interval=flush_interval)


def sink_from_config(config: LoggerConfig) -> Target:
    return sink_from_destination(
        config.destination,
        converter=get_converter(config.converter),
        levels=config.levels,
        buffered=config.buffered,
        flush_interval=config.flush_interval,
    )


def sink_from_environment(env_file: Optional[str] = None) -> Target:
    """
    Sink described by LOG_DESTINATION, LOG_CONVERTER, LOG_LEVEL and LOG_FLUSHFREQUENCY.
    """
    settings = load_settings(env_file)
    return sink_from_destination(
        settings.destination,
        converter=get_converter(settings.converter),
        levels=levels_from_settings(settings),
        buffered=settings.buffered,
        flush_interval=settings.flush_frequency,
    )


def create_logger(config: LoggerConfig) -> Logger:
    """
    Build a root logger from a LoggerConfig.

    Example:
        >>> config = LoggerConfig.create(name="billing", destination="stderr", redact_keys=["password"])
        >>> log = create_logger(config)
    """
    parameters: List[object] = [sink_from_config(config), config.fields]
    log = Logger.create(config.name, *parameters)
    if config.redact_patterns:
        log = log.with_redactor(*config.redact_patterns)
    if config.redact_keys:
        log = log.with_keys_to_redact(*config.redact_keys)
    return log
