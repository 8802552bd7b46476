"""Explicit context for passing a logger through call chains."""

import copy
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Optional

from .exceptions import MissingContextError

if TYPE_CHECKING:
    from .logger import Logger


@dataclass
class LogContext:
    """Context carrying the logger for a unit of work.

    Attributes:
        logger: Logger for this unit of work, if any
        request_id: Unique identifier of the unit of work
        metadata: Free-form values shared along the call chain

    Example:
        >>> ctx = log.to_context()
        >>> from_context(ctx).info("handled")
    """

    logger: Optional["Logger"] = None
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    metadata: Dict[str, Any] = field(default_factory=dict)

    def with_logger(self, logger: "Logger") -> "LogContext":
        """Copy of this context carrying logger."""
        return LogContext(
            logger=logger,
            request_id=self.request_id,
            metadata=copy.copy(self.metadata),
        )

    def get_logger(self) -> "Logger":
        if self.logger is None:
            raise MissingContextError("Logger", self)
        return self.logger


def from_context(ctx: Optional[LogContext]) -> "Logger":
    """
    Logger stored in ctx.

    Raises:
        MissingContextError: If ctx is None or holds no logger
    """
    if ctx is None:
        raise MissingContextError("Logger")
    return ctx.get_logger()
