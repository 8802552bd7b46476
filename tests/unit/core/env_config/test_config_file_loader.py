"""
Tests for ConfigFileLoader.
"""

import json

import pytest

from chainlog.core.config import LoggerConfig
from chainlog.core.env_config.file_loader import ConfigFileLoader
from chainlog.core.exceptions import ConfigValidationError


YAML_CONFIG = """
logger:
  name: billing
  destination: stderr
  level: "INFO;DEBUG:{db}"
  converter: Pino
  flush_interval: 5m
  redact_keys: [password, card_number]
  redact_patterns: ['\\d{16}']
  fields:
    region: eu
"""


class TestFromJson:
    """Tests for JSON files."""

    def test_load(self, tmp_path):
        """A logger section is read."""
        path = tmp_path / "logging.json"
        path.write_text(json.dumps({"logger": {"name": "api", "level": "WARN"}}))
        config = ConfigFileLoader.from_json(path)
        assert isinstance(config, LoggerConfig)
        assert config.name == "api"
        assert config.level == "WARN"

    def test_top_level_settings(self, tmp_path):
        """Settings can also live at the top level."""
        path = tmp_path / "logging.json"
        path.write_text(json.dumps({"name": "api", "destination": "nil"}))
        assert ConfigFileLoader.from_json(path).destination == "nil"

    def test_missing_file(self, tmp_path):
        """Missing files raise FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            ConfigFileLoader.from_json(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        """Broken JSON raises ConfigValidationError."""
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(ConfigValidationError, match="Invalid JSON syntax"):
            ConfigFileLoader.from_json(path)

    def test_empty(self, tmp_path):
        """Empty objects are rejected."""
        path = tmp_path / "empty.json"
        path.write_text("{}")
        with pytest.raises(ConfigValidationError, match="Empty config file"):
            ConfigFileLoader.from_json(path)

    def test_invalid_values(self, tmp_path):
        """Invalid values raise ConfigValidationError."""
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"logger": {"converter": "xml"}}))
        with pytest.raises(ConfigValidationError, match="Invalid config"):
            ConfigFileLoader.from_json(path)

    def test_non_dict_section(self, tmp_path):
        """The logger section must be a mapping."""
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"logger": ["a"]}))
        with pytest.raises(ConfigValidationError):
            ConfigFileLoader.from_json(path)


class TestFromYaml:
    """Tests for YAML files."""

    @pytest.fixture(autouse=True)
    def _require_yaml(self):
        pytest.importorskip("yaml")

    def test_load(self, tmp_path):
        """Every field of the logger section is read."""
        path = tmp_path / "logging.yaml"
        path.write_text(YAML_CONFIG)
        config = ConfigFileLoader.from_yaml(path)

        assert config.name == "billing"
        assert config.destination == "stderr"
        assert config.level == "INFO;DEBUG:{db}"
        assert config.converter == "pino"
        assert config.flush_interval == 300.0
        assert config.redact_keys == ("password", "card_number")
        assert config.redact_patterns == (r"\d{16}",)
        assert config.fields == {"region": "eu"}

    def test_invalid_yaml(self, tmp_path):
        """Broken YAML raises ConfigValidationError."""
        path = tmp_path / "bad.yaml"
        path.write_text("logger: [unclosed")
        with pytest.raises(ConfigValidationError, match="Invalid YAML syntax"):
            ConfigFileLoader.from_yaml(path)


class TestFromFile:
    """Tests for format detection."""

    def test_unsupported_extension(self, tmp_path):
        """Unknown extensions raise ValueError."""
        with pytest.raises(ValueError, match="Unsupported config file format"):
            ConfigFileLoader.from_file(tmp_path / "logging.toml")

    def test_json_by_extension(self, tmp_path):
        path = tmp_path / "logging.json"
        path.write_text(json.dumps({"name": "api"}))
        assert ConfigFileLoader.from_file(path).name == "api"

    def test_from_env_path(self, tmp_path, monkeypatch):
        """LOG_CONFIG_FILE names the file."""
        assert ConfigFileLoader.from_env_path() is None
        path = tmp_path / "logging.json"
        path.write_text(json.dumps({"name": "from-env"}))
        monkeypatch.setenv("LOG_CONFIG_FILE", str(path))
        assert ConfigFileLoader.from_env_path().name == "from-env"
