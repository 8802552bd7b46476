"""
chainlog exception hierarchy.

Classification:
- ConfigurationError - raised while building loggers, sinks and redactors
- SinkWriteError - raised by sinks, caught and reported by the emitting logger
- MissingContextError - no logger stored in the context
"""

from typing import Any, List, Optional

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ChainlogException(Exception):
    """Base exception for chainlog."""

    def __init__(self, message: str, **kwargs):
        self.message = message
        super().__init__(message)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# CONSTRUCTION TIME
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ConfigurationError(ChainlogException):
    """Invalid logger, sink or converter configuration."""


class ConfigValidationError(ConfigurationError):
    """Configuration file is invalid."""


class InvalidPatternError(ConfigurationError):
    """
    A redaction pattern failed to compile.

    Args:
        pattern: The offending regular expression
        reason: Compiler message
    """

    def __init__(self, pattern: str, reason: Optional[str] = None):
        self.pattern = pattern
        self.reason = reason
        message = f"Invalid redaction pattern {pattern!r}"
        if reason:
            message += f": {reason}"
        super().__init__(message)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# EMIT TIME
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class SinkWriteError(ChainlogException):
    """
    A sink failed to write a record.

    Args:
        sink: Description of the sink (its str())
        cause: Underlying exception, if any
    """

    def __init__(self, sink: str, cause: Optional[BaseException] = None):
        self.sink = sink
        self.cause = cause
        message = f"Failed to write to {sink}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class MultiSinkError(SinkWriteError):
    """One or more children of a MultiSink failed."""

    def __init__(self, errors: List[BaseException]):
        self.errors = list(errors)
        ChainlogException.__init__(
            self,
            f"{len(self.errors)} sink(s) failed: " + "; ".join(str(e) for e in self.errors),
        )
        self.sink = "MultiSink"
        self.cause = self.errors[0] if self.errors else None


class ObfuscationError(ChainlogException):
    """Obfuscated payload could not be decoded or decrypted."""

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# CONTEXT
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class MissingContextError(ChainlogException):
    """
    Requested value is not present in the context.

    Example:
        >>> from_context(LogContext())
        Traceback (most recent call last):
        MissingContextError: Logger is missing from the context
    """

    def __init__(self, what: str = "Logger", context: Any = None):
        self.what = what
        self.context = context
        super().__init__(f"{what} is missing from the context")
