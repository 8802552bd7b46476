"""
Request logging for WSGI applications.

Every request gets its own child logger (topic "route", scope = path),
stored in the WSGI environ so handlers can pick it up with from_environ().
"""

import html
import time
import uuid
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from ..core.context import LogContext, from_context
from ..core.exceptions import MissingContextError
from ..core.logger import Logger

ENVIRON_KEY = "chainlog.context"
REQUEST_ID_HEADERS = ("HTTP_X_LINE_REQUEST_ID", "HTTP_X_REQUEST_ID")

StartResponse = Callable[..., Callable[[bytes], Any]]


def request_id_from_environ(environ: Dict[str, Any]) -> str:
    """X-Line-Request-Id, then X-Request-Id, then a new uuid4."""
    for header in REQUEST_ID_HEADERS:
        value = environ.get(header)
        if value:
            return value
    return str(uuid.uuid4())


def from_environ(environ: Dict[str, Any]) -> Logger:
    """
    Logger of the current request.

    Raises:
        MissingContextError: If the request did not go through RequestLoggingMiddleware
    """
    ctx = environ.get(ENVIRON_KEY)
    if not isinstance(ctx, LogContext):
        raise MissingContextError("Logger", environ)
    return from_context(ctx)


class RequestLoggingMiddleware:
    """
    WSGI middleware logging request start and finish.

    The finish record carries duration (seconds), http_status and written
    (bytes) and is logged at ERROR for statuses >= 400. The request id is
    echoed in the X-Request-Id response header.

    Example:
        >>> app = RequestLoggingMiddleware(app, Logger.create("api"))
        >>>
        >>> def view(environ, start_response):
        ...     from_environ(environ).info("loading invoices")
    """

    def __init__(self, app: Callable[[Dict[str, Any], StartResponse], Iterable[bytes]], logger: Logger):
        self.app = app
        self.logger = logger

    def __call__(self, environ: Dict[str, Any], start_response: StartResponse) -> Iterable[bytes]:
        start = time.perf_counter()
        request_id = request_id_from_environ(environ)
        path = environ.get("PATH_INFO") or "/"
        method = environ.get("REQUEST_METHOD", "GET")

        request_logger = self.logger.with_child(
            "route", path,
            "reqid", request_id,
            "path", path,
            "remote", environ.get("REMOTE_ADDR"),
        )
        request_logger.with_fields(agent=environ.get("HTTP_USER_AGENT"), verb=method).info(
            "request start: %s %s", method, html.escape(path)
        )
        environ[ENVIRON_KEY] = request_logger.to_context(LogContext(request_id=request_id))

        state = {"status": 200}

        def capture(status: str, headers: List[Tuple[str, str]], exc_info: Optional[Any] = None):
            state["status"] = int(status.split(" ", 1)[0])
            headers = [(k, v) for k, v in headers if k.lower() != "x-request-id"]
            headers.append(("X-Request-Id", request_id))
            if exc_info is not None:
                return start_response(status, headers, exc_info)
            return start_response(status, headers)

        try:
            result = self.app(environ, capture)
        except Exception as e:
            state["status"] = 500
            self._finish(request_logger, method, path, start, state["status"], 0, e)
            raise
        return self._stream(result, request_logger, method, path, start, state)

    def _stream(self, result: Iterable[bytes], request_logger: Logger, method: str, path: str,
                start: float, state: Dict[str, int]) -> Iterator[bytes]:
        written = 0
        error: Optional[BaseException] = None
        try:
            for chunk in result:
                written += len(chunk)
                yield chunk
        except Exception as e:
            error = e
            raise
        finally:
            close = getattr(result, "close", None)
            if close is not None:
                close()
            self._finish(request_logger, method, path, start, state["status"], written, error)

    @staticmethod
    def _finish(request_logger: Logger, method: str, path: str, start: float, status: int,
                written: int, error: Optional[BaseException] = None) -> None:
        duration = time.perf_counter() - start
        finished = request_logger.with_fields(duration=duration, http_status=status, written=written)
        args: Tuple[Any, ...] = (method, html.escape(path), duration)
        if error is not None:
            args += (error,)
        if status >= 400 or error is not None:
            finished.error("request finish: %s %s in %.6fs", *args)
        else:
            finished.info("request finish: %s %s in %.6fs", *args)
