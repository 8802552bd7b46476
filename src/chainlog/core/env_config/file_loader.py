"""
Configuration file loader for YAML and JSON files.

Files hold a `logger:` section (or the settings at top level):

    logger:
      name: billing
      destination: stdout,file:///var/log/billing.log
      level: "INFO;DEBUG:{db}"
      converter: bunyan
      flush_interval: 5m
      redact_keys: [password, card_number]
      redact_patterns: ['\\b\\d{16}\\b']
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from ..config import LoggerConfig
from ..exceptions import ConfigValidationError
from .validator import LoggerFileSettings

CONFIG_FILE_ENV = "LOG_CONFIG_FILE"


class ConfigFileLoader:
    """
    Load LoggerConfig from files.

    Supports YAML and JSON formats with automatic format detection.

    Examples:
        >>> config = ConfigFileLoader.from_yaml("logging.yaml")
        >>> config = ConfigFileLoader.from_json("logging.json")
        >>> config = ConfigFileLoader.from_file("logging.yaml")  # Auto-detect
        >>> config = ConfigFileLoader.from_env_path()  # From LOG_CONFIG_FILE env var
    """

    @staticmethod
    def from_yaml(path: Union[str, Path]) -> LoggerConfig:
        """
        Load config from a YAML file.

        Raises:
            FileNotFoundError: If the file does not exist
            ConfigValidationError: If the config is invalid
            ImportError: If PyYAML is not installed
        """
        try:
            import yaml
        except ImportError:
            raise ImportError(
                "PyYAML is required to load YAML configs. "
                "Install it with: pip install chainlog[yaml] or pip install pyyaml"
            )

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"Invalid YAML syntax in {path}: {e}")

        if not data:
            raise ConfigValidationError(f"Empty config file: {path}")

        return ConfigFileLoader._build_config(data, str(path))

    @staticmethod
    def from_json(path: Union[str, Path]) -> LoggerConfig:
        """
        Load config from a JSON file.

        Raises:
            FileNotFoundError: If the file does not exist
            ConfigValidationError: If the config is invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid JSON syntax in {path}: {e}")

        if not data:
            raise ConfigValidationError(f"Empty config file: {path}")

        return ConfigFileLoader._build_config(data, str(path))

    @staticmethod
    def from_file(path: Union[str, Path]) -> LoggerConfig:
        """
        Detect the format from the extension (.yaml, .yml, .json).

        Raises:
            ValueError: If the format is not supported
        """
        path = Path(path)
        suffix = path.suffix.lower()

        if suffix in [".yaml", ".yml"]:
            return ConfigFileLoader.from_yaml(path)
        elif suffix == ".json":
            return ConfigFileLoader.from_json(path)
        else:
            raise ValueError(
                f"Unsupported config file format: {suffix}. "
                f"Supported formats: .yaml, .yml, .json"
            )

    @staticmethod
    def from_env_path() -> Optional[LoggerConfig]:
        """Load the file named by LOG_CONFIG_FILE, None if the variable is not set."""
        config_path = os.environ.get(CONFIG_FILE_ENV)
        if not config_path:
            return None

        return ConfigFileLoader.from_file(config_path)

    @staticmethod
    def _build_config(data: Dict[str, Any], source: str) -> LoggerConfig:
        if not isinstance(data, dict):
            raise ConfigValidationError(
                f"Config must be a dictionary, got {type(data).__name__} in {source}"
            )
        config_data = data.get("logger", data)
        if not isinstance(config_data, dict):
            raise ConfigValidationError(f"logger must be a dictionary in {source}")

        try:
            settings = LoggerFileSettings(**config_data)
        except ValidationError as e:
            raise ConfigValidationError(f"Invalid config in {source}: {e}") from e

        return LoggerConfig.create(
            name=settings.name,
            destination=settings.destination,
            level=settings.level,
            converter=settings.converter,
            buffered=settings.buffered,
            flush_interval=settings.flush_interval,
            redact_patterns=settings.redact_patterns,
            redact_keys=settings.redact_keys,
            fields=settings.fields,
        )
