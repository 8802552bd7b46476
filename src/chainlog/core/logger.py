"""
Main logger for chainlog.

A Logger is an immutable node holding a few fields and a parent: either
another Logger or a sink. Deriving a logger (with_field, with_topic,
with_child, ...) adds a node and never touches the existing chain, so
loggers can be shared freely between threads.

Emitting a record:
    1. resolve topic/scope from the nearest node defining them
    2. ask the sink whether the level passes; stop early if not
    3. build the leaf record (time, level, msg, err)
    4. flatten the chain leaf-first, the leaf wins on conflicts
       (identity fields come from the root and are never overridden)
    5. evaluate deferred values
    6. self-redaction, key redaction, pattern redaction
    7. hand the record to the sink (converter, JSON, output)
Failures never leave an emit call; they are reported on stderr.
"""

import logging
import os
import socket
import sys
import threading
import time
from collections.abc import Mapping
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Callable, Iterator, List, Optional, Sequence, Tuple, TypeVar, Union

from .context import LogContext
from .exceptions import ConfigurationError
from .level import Level
from .level_set import LevelSet
from .obfuscator import Obfuscator
from .protocols import Target
from .record import Record
from .redactor import Redactor, apply_redactors, redact_keys, self_redact, to_redactors
from .topicscope import DEFAULT_SCOPE, DEFAULT_TOPIC
from ..utils.serialization import fallback_string, is_deferred, resolve_deferred

diagnostics = logging.getLogger(__name__)

T = TypeVar("T")

# Set by Logger.create on the root node; derived nodes cannot override them
IDENTITY_KEYS = ("name", "hostname", "pid", "tid", "v")
ERROR_KEY = "err"


def report_failure(error: BaseException) -> None:
    """Report a failed emit on the diagnostic logger and on stderr."""
    diagnostics.debug("Dropped log record", exc_info=error)
    try:
        sys.stderr.write(f"Logger error: {fallback_string(error)}\n")
    except Exception:
        pass


def format_message(template: Any, args: Sequence[Any]) -> str:
    """
    printf-style formatting that never raises.

    Example:
        >>> format_message("disk at %d%%", (91,))
        'disk at 91%'
        >>> format_message("no placeholder", ("extra",))
        'no placeholder extra'
    """
    text = template if isinstance(template, str) else fallback_string(template)
    if not args:
        return text
    values: Any = tuple(args)
    if len(values) == 1 and isinstance(values[0], Mapping) and values[0]:
        values = values[0]
    try:
        return text % values
    except (TypeError, ValueError, KeyError):
        return " ".join([text, *(fallback_string(a) for a in args)])


def format_error_message(template: Any, args: Sequence[Any]) -> str:
    """Format with a trailing exception argument and append ", Error: <err>"."""
    error = args[-1]
    text = template if isinstance(template, str) else fallback_string(template)
    try:
        text = text % tuple(args)
    except (TypeError, ValueError, KeyError):
        text = format_message(text, args[:-1])
    return f"{text}, Error: {fallback_string(error)}"


def _split_pairs(pairs: Sequence[Any], fields: Optional[Mapping] = None) -> Tuple[Record, List[Redactor]]:
    """
    Build a record from alternating key/value arguments plus keyword fields.

    Mappings are merged as they are, Redactor instances are set aside.
    """
    record = Record()
    redactors: List[Redactor] = []
    pending_key: Optional[str] = None
    for item in pairs:
        if pending_key is not None:
            record.set(pending_key, item)
            pending_key = None
        elif isinstance(item, Redactor):
            redactors.append(item)
        elif isinstance(item, Mapping):
            record.merge(item)
        else:
            pending_key = str(item)
    if fields:
        record.merge(fields)
    return record, redactors


def _text(value: Any, default: str) -> str:
    if is_deferred(value):
        value = resolve_deferred(value)
    if value is None or value == "":
        return default
    return str(value)


class Logger:
    """
    Structured NDJSON logger.

    Example:
        >>> log = Logger.create("billing", StdoutSink())
        >>> db = log.with_child("db", "query", "table", "invoices")
        >>> db.info("fetched %d rows", 12)
        {"name":"billing",...,"level":30,"msg":"fetched 12 rows","table":"invoices","topic":"db","scope":"query"}
        >>> try:
        ...     charge()
        ... except PaymentError as e:
        ...     log.error("charge failed", e)
    """

    def __init__(
        self,
        parent: Target,
        record: Optional[Union[Record, Mapping]] = None,
        redactors: Sequence[Union[str, Redactor]] = (),
        keys_to_redact: Sequence[str] = (),
        obfuscator: Optional[Obfuscator] = None,
        root: bool = False,
    ):
        """
        Build a node. Use Logger.create() for a root logger and the with_*
        methods to derive children.

        Args:
            parent: Parent logger or sink
            record: Fields carried by this node
            redactors: Pattern redactors added by this node
            keys_to_redact: Field names masked by this node
            obfuscator: Obfuscator for obfuscate()/unobfuscate()
            root: Marks a node created by Logger.create()
        """
        if parent is None:
            raise ConfigurationError("A logger needs a parent logger or sink")
        self._parent = parent
        self._record = Record(record)
        added = to_redactors(redactors)
        if isinstance(parent, Logger):
            self._chain: Tuple["Logger", ...] = (self,) + parent._chain
            self._sink: Target = parent._sink
            self._redactors = parent._redactors + added
            self._keys = parent._keys + tuple(keys_to_redact)
            self._obfuscator = obfuscator or parent._obfuscator
            inherited_topic, inherited_scope = parent._topic, parent._scope
        else:
            self._chain = (self,)
            self._sink = parent
            self._redactors = added
            self._keys = tuple(keys_to_redact)
            self._obfuscator = obfuscator
            inherited_topic = inherited_scope = None
        self._root = root or not isinstance(parent, Logger)
        self._topic = self._record["topic"] if "topic" in self._record else inherited_topic
        self._scope = self._record["scope"] if "scope" in self._record else inherited_scope

    @classmethod
    def create(cls, name: str, *parameters: Any) -> "Logger":
        """
        Create a root logger.

        Args:
            name: Application name (the "name" field)
            *parameters: Any of: sinks or other loggers, destination strings
                ("stdout", "stderr", "nil", "file:///path", ...), a Level or
                LevelSet applied to the sinks, a Record or mapping of initial
                fields, Redactors, an Obfuscator. None is ignored.

        Returns:
            New Logger. Without any sink the destination comes from LOG_DESTINATION.

        Raises:
            ConfigurationError: On a parameter that is none of the above

        Example:
            >>> log = Logger.create("app")                        # from environment
            >>> log = Logger.create("app", "stderr", Level.DEBUG)
            >>> log = Logger.create("app", FileSink("app.log"), {"region": "eu"})
        """
        # imported here: the loader module builds loggers itself
        from .env_config.loader import sink_from_destination, sink_from_environment

        targets: List[Target] = []
        redactors: List[Redactor] = []
        fields = Record()
        level: Optional[Level] = None
        levels: Optional[LevelSet] = None
        obfuscator: Optional[Obfuscator] = None

        for parameter in parameters:
            if parameter is None:
                continue
            if isinstance(parameter, Level):
                level = parameter
            elif isinstance(parameter, LevelSet):
                levels = parameter
            elif isinstance(parameter, Redactor):
                redactors.append(parameter)
            elif isinstance(parameter, Obfuscator):
                obfuscator = parameter
            elif isinstance(parameter, Mapping):
                fields.merge(parameter)
            elif isinstance(parameter, str):
                targets.append(sink_from_destination(parameter))
            elif callable(getattr(parameter, "write", None)) and callable(getattr(parameter, "should_write", None)):
                targets.append(parameter)
            else:
                raise ConfigurationError(f"Unsupported logger parameter: {parameter!r}")

        if not targets:
            targets.append(sink_from_environment())
        sink = targets[0] if len(targets) == 1 else _multi_sink(targets)

        if levels is not None:
            for key, value in levels.items():
                sink.set_filter_level(value, key.topic, key.scope)
        if level is not None:
            sink.set_filter_level(level)

        record = Record()
        record.set("name", name)
        record.set("hostname", socket.gethostname())
        record.set("pid", os.getpid())
        record.set("tid", threading.get_native_id)
        record.set("v", 0)
        record.merge(fields)
        record.set("topic", DEFAULT_TOPIC)
        record.set("scope", DEFAULT_SCOPE)
        return cls(sink, record, redactors, obfuscator=obfuscator, root=True)

    @classmethod
    def create_if_none(cls, logger: Optional["Logger"], name: str) -> "Logger":
        """Return logger, or a logger that writes nothing if it is None."""
        if logger is not None:
            return logger
        from ..sinks.nil_sink import NilSink
        return cls.create(name, NilSink())

    # Derivation

    def with_field(self, key: str, value: Any) -> "Logger":
        return Logger(self, Record().set(key, value))

    def with_fields(self, *pairs: Any, **fields: Any) -> "Logger":
        """
        Derive a logger with several fields.

        Args:
            *pairs: Alternating keys and values, or mappings
            **fields: Fields as keyword arguments

        Example:
            >>> log.with_fields("user", "alice", "attempt", 3)
            >>> log.with_fields(user="alice", attempt=3)
        """
        record, redactors = _split_pairs(pairs, fields)
        return Logger(self, record, redactors)

    def with_record(self, record: Union[Record, Mapping]) -> "Logger":
        return Logger(self, record)

    def with_topic(self, topic: Any) -> "Logger":
        return Logger(self, Record().set("topic", topic))

    def with_scope(self, scope: Any) -> "Logger":
        return Logger(self, Record().set("scope", scope))

    def with_child(self, topic: Any = None, scope: Any = None, *pairs: Any, **fields: Any) -> "Logger":
        """
        Derive a logger with topic, scope, fields and redactors in one node.

        Args:
            topic: Topic, None keeps the inherited one
            scope: Scope, None keeps the inherited one
            *pairs: Alternating keys and values; Redactor instances are added as redactors
            **fields: Fields as keyword arguments
        """
        record = Record().set("topic", topic).set("scope", scope)
        extra, redactors = _split_pairs(pairs, fields)
        record.merge(extra)
        return Logger(self, record, redactors)

    def with_redactor(self, *redactors: Union[str, Redactor]) -> "Logger":
        """
        Derive a logger with extra pattern redactors.

        Raises:
            InvalidPatternError: If a string pattern does not compile
        """
        return Logger(self, None, redactors)

    def with_keys_to_redact(self, *keys: str) -> "Logger":
        """Derive a logger that masks the values of the given field names."""
        return Logger(self, None, keys_to_redact=keys)

    def with_obfuscator(self, obfuscator: Obfuscator) -> "Logger":
        return Logger(self, None, obfuscator=obfuscator)

    # Chain queries

    @property
    def parent(self) -> Target:
        return self._parent

    @property
    def sink(self) -> Target:
        return self._sink

    @property
    def topic(self) -> str:
        return _text(self._topic, DEFAULT_TOPIC)

    @property
    def scope(self) -> str:
        return _text(self._scope, DEFAULT_SCOPE)

    @property
    def redactors(self) -> Tuple[Redactor, ...]:
        """Pattern redactors in application order, root first."""
        return self._redactors

    def get_record(self, key: str) -> Any:
        """Value of key from the nearest node defining it, or None."""
        for node in self._chain:
            if key in node._record:
                return node._record.find(key)
        return None

    # Emission

    def should_write(self, level: Level, topic: Optional[Any] = None, scope: Optional[Any] = None) -> bool:
        """Tell if a record at level would be written; topic/scope default to this logger's."""
        if topic is None:
            topic = self.topic
        if scope is None:
            scope = self.scope
        return self._sink.should_write(level, topic, scope)

    def log(self, level: Level, message: Any, *args: Any) -> None:
        """Emit a record at level; message is %-formatted with args."""
        self._log(level, message, args)

    def trace(self, message: Any, *args: Any) -> None:
        self._log(Level.TRACE, message, args)

    def debug(self, message: Any, *args: Any) -> None:
        self._log(Level.DEBUG, message, args)

    def info(self, message: Any, *args: Any) -> None:
        """
        Log info message.

        Example:
            >>> log.info("Request completed in %.1fms", 150.2)
        """
        self._log(Level.INFO, message, args)

    def warn(self, message: Any, *args: Any) -> None:
        self._log(Level.WARN, message, args)

    warning = warn

    def error(self, message: Any, *args: Any) -> None:
        """
        Log error message.

        A trailing exception argument is stored under "err" and appended to
        the message as ", Error: <err>".

        Example:
            >>> log.error("Failed to load %s", path, err)
        """
        self._log(Level.ERROR, message, args)

    def fatal(self, message: Any, *args: Any) -> None:
        """Log at FATAL; same exception handling as error(). Does not exit."""
        self._log(Level.FATAL, message, args)

    def exception(self, message: Any, *args: Any) -> None:
        """
        Log the exception being handled at ERROR.

        Should be called from an exception handler.
        """
        error = sys.exc_info()[1]
        if error is not None:
            args = args + (error,)
        self._log(Level.ERROR, message, args)

    def _log(self, level: Level, message: Any, args: Sequence[Any]) -> None:
        try:
            level = Level(level)
            if not self._sink.should_write(level, self.topic, self.scope):
                return
            error = None
            if level >= Level.ERROR and args and isinstance(args[-1], BaseException):
                error = args[-1]
                text = format_error_message(message, args)
            else:
                text = format_message(message, args)
            record = Record()
            record.set("time", datetime.now(timezone.utc))
            record.set("level", level)
            record.set("msg", text)
            record.set(ERROR_KEY, error)
            self.write(record)
        except Exception as e:
            report_failure(e)

    def write(self, record: Record) -> None:
        """
        Complete record with this chain's fields, redact it and send it to the sink.

        This is what makes a Logger usable as another logger's target.

        Raises:
            SinkWriteError: If the sink fails
        """
        self._sink.write(self._redact(self._flatten(record).resolve()))

    def _flatten(self, record: Record) -> Record:
        flat = Record()
        for key in IDENTITY_KEYS:
            flat.set(key, record.get(key))
            for node in self._chain:
                if node._root:
                    flat.set(key, node._record.get(key))
        flat.merge(record)
        for node in self._chain:
            flat.merge(node._record)
        return flat

    def _redact(self, record: Record) -> Record:
        record = self_redact(record)
        if self._keys:
            record = redact_keys(record, *self._keys)
        return apply_redactors(record, self._redactors)

    # Timing

    def time_func(self, message: str, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """
        Call func and log how long it took at INFO, with a "duration" field in seconds.

        Example:
            >>> rows = log.time_func("load invoices", repo.load, "2024-01")
        """
        with self.timer(message):
            return func(*args, **kwargs)

    @contextmanager
    def timer(self, message: str) -> Iterator["Logger"]:
        """
        Context manager logging the duration of its block.

        Example:
            >>> with log.timer("rebuild index"):
            ...     rebuild()
        """
        start = time.perf_counter()
        try:
            yield self
        finally:
            duration = time.perf_counter() - start
            self.with_field("duration", duration).info("%s. executed in %.6fs", message, duration)

    # Obfuscation

    def obfuscate(self, value: str) -> str:
        """
        Encrypt value for logging; without a usable obfuscator value is returned as is.
        """
        if self._obfuscator is None:
            self.with_child("logger", "obfuscate").warn("No obfuscator configured, value left as is")
            return value
        try:
            return self._obfuscator.obfuscate(value)
        except Exception as e:
            self.with_child("logger", "obfuscate").error("Failed to obfuscate", e)
            return value

    def unobfuscate(self, value: str) -> str:
        """
        Decrypt a value produced by obfuscate().

        Raises:
            ConfigurationError: If this logger has no obfuscator
            ObfuscationError: If the value cannot be decrypted
        """
        if self._obfuscator is None:
            raise ConfigurationError("No obfuscator configured")
        return self._obfuscator.unobfuscate(value)

    # Sink pass-through

    def set_filter_level(self, level: Level, topic: Optional[Any] = None, scope: Optional[Any] = None) -> "Logger":
        self._sink.set_filter_level(level, topic, scope)
        return self

    def set_filter_level_if_unset(self, level: Level) -> "Logger":
        self._sink.set_filter_level_if_unset(level)
        return self

    def filter_more(self) -> "Logger":
        self._sink.filter_more()
        return self

    def filter_less(self) -> "Logger":
        self._sink.filter_less()
        return self

    def flush(self) -> None:
        self._sink.flush()

    def close(self) -> None:
        self._sink.close()

    # Context

    def to_context(self, parent: Optional[LogContext] = None) -> LogContext:
        """Context carrying this logger (a copy of parent if given)."""
        if parent is None:
            return LogContext(logger=self)
        return parent.with_logger(self)

    def __enter__(self):
        """Context manager support."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Close the sink on context exit."""
        self.close()
        return False

    def __str__(self) -> str:
        return f"Logger({self._parent})"

    __repr__ = __str__


def _multi_sink(targets: List[Target]) -> Target:
    from ..sinks.multi_sink import MultiSink
    return MultiSink(*targets)
