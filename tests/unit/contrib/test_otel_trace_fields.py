"""
Tests for OpenTelemetry trace correlation.
"""

import pytest

# Try to import OpenTelemetry - skip tests if not available
pytest.importorskip("opentelemetry", reason="OpenTelemetry not installed")
pytest.importorskip("opentelemetry.sdk", reason="OpenTelemetry SDK not installed")

from opentelemetry import trace  # noqa: E402
from opentelemetry.sdk.trace import TracerProvider  # noqa: E402

from chainlog.contrib.opentelemetry import (  # noqa: E402
    current_span_id,
    current_trace_id,
    with_trace_context,
)


@pytest.fixture
def tracer():
    """Tracer from a private provider, the global one is left alone."""
    return TracerProvider().get_tracer("chainlog-tests")


class TestTraceFields:
    """Tests for trace_id and span_id fields."""

    def test_outside_span(self):
        """Without a span there are no ids."""
        assert current_trace_id() is None
        assert current_span_id() is None

    def test_inside_span(self, tracer):
        """Inside a span the ids are the span's, in hex."""
        with tracer.start_as_current_span("work") as span:
            context = span.get_span_context()
            assert current_trace_id() == trace.format_trace_id(context.trace_id)
            assert current_span_id() == trace.format_span_id(context.span_id)

    def test_logger_fields_follow_current_span(self, logger, tracer, read_records):
        """Ids are read at emit time, and left out outside spans."""
        log = with_trace_context(logger)
        with tracer.start_as_current_span("outer") as outer:
            log.info("in outer")
            with tracer.start_as_current_span("inner") as inner:
                log.info("in inner")
        log.info("no span")

        first, second, third = read_records()
        assert first["span_id"] == trace.format_span_id(outer.get_span_context().span_id)
        assert second["span_id"] == trace.format_span_id(inner.get_span_context().span_id)
        assert first["trace_id"] == second["trace_id"]
        assert "trace_id" not in third
        assert "span_id" not in third
