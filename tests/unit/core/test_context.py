"""
Tests for LogContext and from_context.
"""

import pytest

from chainlog.core.context import LogContext, from_context
from chainlog.core.exceptions import MissingContextError


class TestLogContext:
    def test_request_ids_are_unique(self):
        """Every new context gets its own request id."""
        assert LogContext().request_id != LogContext().request_id

    def test_with_logger_copies_metadata(self, logger):
        """with_logger() copies metadata so the original is not shared."""
        ctx = LogContext(metadata={"tenant": "acme"})
        derived = ctx.with_logger(logger)
        derived.metadata["tenant"] = "other"
        assert ctx.metadata["tenant"] == "acme"
        assert derived.logger is logger


class TestFromContext:
    def test_missing_logger(self):
        """A context without a logger raises MissingContextError."""
        with pytest.raises(MissingContextError, match="Logger is missing from the context"):
            from_context(LogContext())

    def test_none_context(self):
        """None is treated as an empty context."""
        with pytest.raises(MissingContextError):
            from_context(None)

    def test_error_keeps_context(self):
        """The error carries the context it was raised for."""
        ctx = LogContext()
        with pytest.raises(MissingContextError) as exc_info:
            ctx.get_logger()
        assert exc_info.value.context is ctx
