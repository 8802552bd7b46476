"""
OpenTelemetry integration for chainlog.

Adds the current trace and span ids to records. Requires opentelemetry-api.

Installation:
    pip install chainlog[otel]

Example:
    >>> from chainlog import Logger
    >>> from chainlog.contrib.opentelemetry import with_trace_context
    >>>
    >>> log = with_trace_context(Logger.create("checkout"))
    >>> with tracer.start_as_current_span("charge"):
    ...     log.info("charging")  # carries trace_id and span_id
"""

# Check if OpenTelemetry is installed
try:
    import opentelemetry  # noqa: F401
except ImportError as e:
    raise ImportError(
        "OpenTelemetry support requires opentelemetry-api. "
        "Install with: pip install chainlog[otel]"
    ) from e

from .trace_fields import current_span_id, current_trace_id, with_trace_context

__all__ = [
    "current_span_id",
    "current_trace_id",
    "with_trace_context",
]
