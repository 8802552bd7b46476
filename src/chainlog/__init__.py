"""chainlog - structured, leveled NDJSON logging with derived loggers and redaction."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .core.level import Level
from .core.topicscope import TopicScope
from .core.level_set import LevelSet
from .core.record import Record
from .core.redactor import (
    REDACTED,
    Redactor,
    redact,
    redact_keys,
    redact_with_hash,
    redact_with_prefixed_hash,
)
from .core.protocols import Converter, Redactable, Target
from .core.converters import (
    BunyanConverter,
    CloudWatchConverter,
    PinoConverter,
    StackDriverConverter,
    get_converter,
)
from .core.obfuscator import Obfuscator
from .core.logger import Logger
from .core.context import LogContext, from_context
from .core.config import LoggerConfig
from .core.exceptions import (
    ChainlogException,
    ConfigurationError,
    ConfigValidationError,
    InvalidPatternError,
    SinkWriteError,
    MultiSinkError,
    ObfuscationError,
    MissingContextError,
)
from .core.env_config import ConfigFileLoader, create_logger, load_from_env
from .sinks import FileSink, MultiSink, NilSink, Sink, StderrSink, StdoutSink, StreamSink

# Set up logging - add NullHandler to prevent "No handler found" warnings
# Users can configure chainlog's own diagnostics using logging.getLogger('chainlog')
logging.getLogger('chainlog').addHandler(logging.NullHandler())

# Version info - read from package metadata (single source of truth in pyproject.toml)
try:
    __version__ = version("chainlog")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__all__ = [
    # Core
    "Logger",
    "Level",
    "LevelSet",
    "TopicScope",
    "Record",

    # Redaction
    "REDACTED",
    "Redactor",
    "Redactable",
    "redact",
    "redact_keys",
    "redact_with_hash",
    "redact_with_prefixed_hash",
    "Obfuscator",

    # Sinks and converters
    "Target",
    "Sink",
    "StreamSink",
    "StdoutSink",
    "StderrSink",
    "FileSink",
    "NilSink",
    "MultiSink",
    "Converter",
    "BunyanConverter",
    "PinoConverter",
    "CloudWatchConverter",
    "StackDriverConverter",
    "get_converter",

    # Context
    "LogContext",
    "from_context",

    # Config
    "LoggerConfig",
    "ConfigFileLoader",
    "create_logger",
    "load_from_env",

    # Exceptions
    "ChainlogException",
    "ConfigurationError",
    "ConfigValidationError",
    "InvalidPatternError",
    "SinkWriteError",
    "MultiSinkError",
    "ObfuscationError",
    "MissingContextError",

    # Version
    "__version__",
]
