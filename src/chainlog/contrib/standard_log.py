"""
Bridges from the standard logging module and from file-like writers.

LoggerHandler is a logging.Handler forwarding stdlib records to a chainlog
Logger, so third-party libraries end up in the same NDJSON stream.
LoggerWriter is a file-like object turning each written line into a record.
"""

import logging

from ..core.level import Level
from ..core.logger import Logger

STDLIB_LEVELS = (
    (logging.CRITICAL, Level.FATAL),
    (logging.ERROR, Level.ERROR),
    (logging.WARNING, Level.WARN),
    (logging.INFO, Level.INFO),
    (logging.DEBUG, Level.DEBUG),
)


def level_from_stdlib(levelno: int) -> Level:
    """
    Map a stdlib level number to a Level.

    Example:
        >>> level_from_stdlib(logging.WARNING)
        <Level.WARN: 40>
        >>> level_from_stdlib(5)
        <Level.TRACE: 10>
    """
    for threshold, level in STDLIB_LEVELS:
        if levelno >= threshold:
            return level
    return Level.TRACE


class LoggerHandler(logging.Handler):
    """
    Forward stdlib log records to a chainlog Logger.

    The stdlib logger name goes to the "logger" field; exception info is
    attached like an exception passed to Logger.error().

    Example:
        >>> handler = LoggerHandler(Logger.create("app"))
        >>> logging.getLogger("urllib3").addHandler(handler)
    """

    def __init__(self, logger: Logger, level: int = logging.NOTSET):
        super().__init__(level)
        self.logger = logger

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = record.getMessage()
            target = self.logger.with_field("logger", record.name)
            level = level_from_stdlib(record.levelno)
            error = record.exc_info[1] if record.exc_info else None
            if error is not None and level >= Level.ERROR:
                target.log(level, "%s", message, error)
            else:
                target.with_field("err", error).log(level, "%s", message)
        except Exception:
            self.handleError(record)


def as_standard_logger(
    logger: Logger,
    name: str = "chainlog.bridge",
    level: int = logging.DEBUG,
) -> logging.Logger:
    """
    Standard logging.Logger writing through logger.

    The returned logger does not propagate to the root logger.

    Example:
        >>> std = as_standard_logger(Logger.create("app"), "legacy")
        >>> std.warning("disk at %d%%", 91)
    """
    std_logger = logging.getLogger(name)
    std_logger.setLevel(level)
    std_logger.propagate = False
    for handler in std_logger.handlers[:]:
        if isinstance(handler, LoggerHandler):
            std_logger.removeHandler(handler)
    std_logger.addHandler(LoggerHandler(logger))
    return std_logger


class LoggerWriter:
    """
    File-like object logging each complete line at a fixed level.

    Partial lines are kept until a newline or flush() arrives.

    Example:
        >>> writer = LoggerWriter(log, Level.WARN)
        >>> print("legacy output", file=writer)
    """

    def __init__(self, logger: Logger, level: Level = Level.INFO):
        self.logger = logger
        self.level = level
        self._pending = ""

    def write(self, text: str) -> int:
        self._pending += text
        *lines, self._pending = self._pending.split("\n")
        for line in lines:
            if line.strip():
                self.logger.log(self.level, "%s", line.rstrip("\r"))
        return len(text)

    def flush(self) -> None:
        if self._pending.strip():
            self.logger.log(self.level, "%s", self._pending)
        self._pending = ""

    def writable(self) -> bool:
        return True

    def close(self) -> None:
        self.flush()

    @property
    def closed(self) -> bool:
        return False
