"""
Pytest configuration and fixtures for chainlog tests.
"""

import io
import json

import pytest

from chainlog.core.level_set import LevelSet
from chainlog.core.logger import Logger
from chainlog.sinks.stream_sink import StreamSink

ENV_VARS = (
    "LOG_DESTINATION",
    "LOG_LEVEL",
    "LOG_CONVERTER",
    "LOG_FLUSHFREQUENCY",
    "LOG_FLUSH_FREQUENCY",
    "LOG_BUFFERED",
    "LOG_DEBUG",
    "LOG_CONFIG_FILE",
    "DEBUG",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Run every test without LOG_* variables from the outer environment."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def stream():
    """In-memory text stream."""
    return io.StringIO()


@pytest.fixture
def memory_sink(stream):
    """Unbuffered sink writing to the in-memory stream, INFO by default."""
    return StreamSink(stream, name="memory", filter_levels=LevelSet.parse("INFO"))


@pytest.fixture
def read_records(stream):
    """
    Parse every NDJSON line written to the in-memory stream.

    Example:
        def test_something(logger, read_records):
            logger.info("hello")
            assert read_records()[0]["msg"] == "hello"
    """
    def read():
        return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]

    return read


@pytest.fixture
def logger(memory_sink):
    """Root logger named "test" writing to memory_sink."""
    return Logger.create("test", memory_sink)
