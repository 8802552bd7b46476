"""
Tests for record converters.
"""

from datetime import datetime, timezone

import pytest

from chainlog.core.converters import (
    BunyanConverter,
    CloudWatchConverter,
    PinoConverter,
    StackDriverConverter,
    get_converter,
)
from chainlog.core.exceptions import ConfigurationError
from chainlog.core.level import Level
from chainlog.core.record import Record

WHEN = datetime(2024, 1, 15, 10, 30, 45, 123000, tzinfo=timezone.utc)


@pytest.fixture
def record():
    return Record(
        name="app", hostname="web-1", pid=1, tid=2, v=0,
        time=WHEN, level=Level.WARN, msg="disk low", topic="main", scope="main",
    )


class TestBunyanConverter:
    """Tests for the default converter."""

    def test_formats_time(self, record):
        """time becomes an RFC3339 string, everything else stays."""
        converted = BunyanConverter().convert(record)
        assert converted["time"] == "2024-01-15T10:30:45.123Z"
        assert converted["name"] == "app"
        assert converted["level"] is Level.WARN

    def test_input_untouched(self, record):
        """The record passed in is not modified."""
        BunyanConverter().convert(record)
        assert record["time"] is WHEN


class TestPinoConverter:
    def test_layout(self, record):
        """pino uses epoch milliseconds, v=1 and no name."""
        converted = PinoConverter().convert(record)
        assert converted["time"] == int(WHEN.timestamp() * 1000)
        assert converted["level"] == 40
        assert converted["v"] == 1
        assert "name" not in converted


class TestCloudWatchConverter:
    def test_adds_severity(self, record):
        """A textual severity is added next to the numeric level."""
        converted = CloudWatchConverter().convert(record)
        assert converted["severity"] == "WARN"
        assert converted["level"] is Level.WARN


class TestStackDriverConverter:
    """Tests for the Google Cloud converter."""

    def test_layout(self, record):
        """level and msg become severity and message; name and v are dropped."""
        converted = StackDriverConverter().convert(record)
        assert converted["severity"] == "WARNING"
        assert converted["message"] == "disk low"
        for key in ("level", "name", "msg", "v"):
            assert key not in converted
        assert converted["hostname"] == "web-1"

    @pytest.mark.parametrize("level,severity", [
        (Level.TRACE, "DEBUG"),
        (Level.DEBUG, "DEBUG"),
        (Level.INFO, "INFO"),
        (Level.ERROR, "ERROR"),
        (Level.FATAL, "CRITICAL"),
        (Level.ALWAYS, "EMERGENCY"),
    ])
    def test_severities(self, level, severity):
        """Every level maps to a Cloud Logging severity."""
        converted = StackDriverConverter().convert(Record(level=level, msg="x"))
        assert converted["severity"] == severity

    def test_missing_level_defaults_to_info(self):
        """Records without a level get INFO."""
        assert StackDriverConverter().convert(Record(msg="x"))["severity"] == "INFO"


class TestGetConverter:
    """Tests for converter lookup by name."""

    @pytest.mark.parametrize("name,cls", [
        ("bunyan", BunyanConverter),
        ("", BunyanConverter),
        (None, BunyanConverter),
        ("PINO", PinoConverter),
        ("aws", CloudWatchConverter),
        ("gcp", StackDriverConverter),
        (" stackdriver ", StackDriverConverter),
    ])
    def test_known_names(self, name, cls):
        """Names and aliases resolve case-insensitively."""
        assert isinstance(get_converter(name), cls)

    def test_unknown_name(self):
        """Unknown names raise ConfigurationError listing the choices."""
        with pytest.raises(ConfigurationError, match="Unknown converter: xml"):
            get_converter("xml")
