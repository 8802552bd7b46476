"""Logger configuration from environment variables and files."""

from .duration import parse_duration
from .file_loader import ConfigFileLoader
from .loader import (
    create_logger,
    levels_from_environment,
    levels_from_settings,
    load_from_env,
    load_settings,
    sink_from_config,
    sink_from_destination,
    sink_from_environment,
)
from .validator import LoggerFileSettings, LoggerSettings

__all__ = [
    "ConfigFileLoader",
    "LoggerFileSettings",
    "LoggerSettings",
    "create_logger",
    "levels_from_environment",
    "levels_from_settings",
    "load_from_env",
    "load_settings",
    "parse_duration",
    "sink_from_config",
    "sink_from_destination",
    "sink_from_environment",
]
