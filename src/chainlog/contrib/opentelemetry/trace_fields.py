"""
Trace correlation fields.

The ids are deferred record values: they are read from the span that is
current when a record is emitted, not when the logger is derived.
"""

from typing import Optional

from opentelemetry import trace

from ...core.logger import Logger

TRACE_ID_KEY = "trace_id"
SPAN_ID_KEY = "span_id"


def current_trace_id() -> Optional[str]:
    """Hex trace id of the current span, None outside a recording span."""
    context = trace.get_current_span().get_span_context()
    if not context.is_valid:
        return None
    return trace.format_trace_id(context.trace_id)


def current_span_id() -> Optional[str]:
    """Hex span id of the current span, None outside a recording span."""
    context = trace.get_current_span().get_span_context()
    if not context.is_valid:
        return None
    return trace.format_span_id(context.span_id)


def with_trace_context(logger: Logger) -> Logger:
    """
    Derive a logger whose records carry trace_id and span_id.

    Outside a span both fields are left out of the record.
    """
    return logger.with_fields(**{TRACE_ID_KEY: current_trace_id, SPAN_ID_KEY: current_span_id})
