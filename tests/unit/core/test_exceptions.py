"""
Tests for custom exceptions.
"""

import pytest

from chainlog.core.exceptions import (
    ChainlogException,
    ConfigurationError,
    ConfigValidationError,
    InvalidPatternError,
    MissingContextError,
    MultiSinkError,
    ObfuscationError,
    SinkWriteError,
)


class TestChainlogException:
    """Test base ChainlogException."""

    def test_exception_message(self):
        """Test exception with message."""
        exc = ChainlogException("Test error")
        assert str(exc) == "Test error"
        assert exc.message == "Test error"

    @pytest.mark.parametrize("cls", [
        ConfigurationError, ConfigValidationError, ObfuscationError,
    ])
    def test_inheritance(self, cls):
        """All chainlog errors derive from ChainlogException."""
        assert issubclass(cls, ChainlogException)

    def test_config_validation_is_configuration_error(self):
        """File validation errors are configuration errors."""
        with pytest.raises(ConfigurationError):
            raise ConfigValidationError("bad file")


class TestInvalidPatternError:
    def test_message(self):
        """The pattern and the reason are part of the message."""
        exc = InvalidPatternError("(x", "missing )")
        assert exc.pattern == "(x"
        assert exc.reason == "missing )"
        assert str(exc) == "Invalid redaction pattern '(x': missing )"
        assert isinstance(exc, ConfigurationError)


class TestSinkWriteError:
    def test_cause(self):
        """The sink and cause are kept."""
        cause = OSError("disk full")
        exc = SinkWriteError("File app.log", cause)
        assert exc.sink == "File app.log"
        assert exc.cause is cause
        assert str(exc) == "Failed to write to File app.log: disk full"

    def test_multi_sink_error(self):
        """MultiSinkError aggregates child failures."""
        first, second = OSError("a"), ValueError("b")
        exc = MultiSinkError([first, second])
        assert exc.errors == [first, second]
        assert exc.cause is first
        assert isinstance(exc, SinkWriteError)
        assert str(exc) == "2 sink(s) failed: a; b"


class TestMissingContextError:
    def test_message(self):
        """The missing value is named."""
        assert str(MissingContextError()) == "Logger is missing from the context"
        assert str(MissingContextError("Request id")) == "Request id is missing from the context"
