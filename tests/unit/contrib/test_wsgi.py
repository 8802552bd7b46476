"""
Tests for the WSGI request logging middleware.
"""

import pytest

from chainlog.contrib.wsgi import (
    ENVIRON_KEY,
    RequestLoggingMiddleware,
    from_environ,
    request_id_from_environ,
)
from chainlog.core.exceptions import MissingContextError


class StartResponse:
    """Records what the middleware passes on."""

    def __init__(self):
        self.status = None
        self.headers = None

    def __call__(self, status, headers, exc_info=None):
        self.status = status
        self.headers = headers
        return lambda data: None


def make_environ(**extra):
    environ = {
        "REQUEST_METHOD": "GET",
        "PATH_INFO": "/invoices",
        "REMOTE_ADDR": "10.0.0.1",
        "HTTP_USER_AGENT": "pytest",
    }
    environ.update(extra)
    return environ


def ok_app(environ, start_response):
    from_environ(environ).info("loading invoices")
    start_response("200 OK", [("Content-Type", "text/plain")])
    return [b"hello ", b"world"]


def not_found_app(environ, start_response):
    start_response("404 Not Found", [])
    return [b"missing"]


def broken_app(environ, start_response):
    raise RuntimeError("crash")


def run(app, logger, environ=None):
    start_response = StartResponse()
    body = b"".join(RequestLoggingMiddleware(app, logger)(environ or make_environ(), start_response))
    return body, start_response


class TestRequestId:
    def test_header_order(self):
        """X-Line-Request-Id wins over X-Request-Id."""
        environ = {"HTTP_X_REQUEST_ID": "b", "HTTP_X_LINE_REQUEST_ID": "a"}
        assert request_id_from_environ(environ) == "a"
        assert request_id_from_environ({"HTTP_X_REQUEST_ID": "b"}) == "b"

    def test_generated(self):
        """Without headers a new id is generated."""
        assert len(request_id_from_environ({})) == 36


class TestMiddleware:
    """Tests for RequestLoggingMiddleware."""

    def test_start_and_finish(self, logger, read_records):
        """Start, handler and finish records share the request fields."""
        body, start_response = run(ok_app, logger, make_environ(HTTP_X_REQUEST_ID="req-1"))
        assert body == b"hello world"
        assert ("X-Request-Id", "req-1") in start_response.headers

        start, handler, finish = read_records()
        assert start["msg"] == "request start: GET /invoices"
        assert start["agent"] == "pytest"
        assert start["verb"] == "GET"
        assert handler["msg"] == "loading invoices"
        for record in (start, handler, finish):
            assert record["topic"] == "route"
            assert record["scope"] == "/invoices"
            assert record["reqid"] == "req-1"
            assert record["remote"] == "10.0.0.1"

        assert finish["http_status"] == 200
        assert finish["written"] == 11
        assert finish["level"] == 30
        assert finish["duration"] >= 0

    def test_client_error_is_logged_as_error(self, logger, read_records):
        """Statuses from 400 are logged at ERROR."""
        run(not_found_app, logger)
        finish = read_records()[-1]
        assert finish["level"] == 50
        assert finish["http_status"] == 404

    def test_application_failure(self, logger, read_records):
        """Exceptions are logged and re-raised."""
        with pytest.raises(RuntimeError):
            run(broken_app, logger)
        finish = read_records()[-1]
        assert finish["http_status"] == 500
        assert finish["err"]["message"] == "crash"

    def test_path_is_escaped_in_message(self, logger, read_records):
        """The path in the message is HTML escaped."""
        run(not_found_app, logger, make_environ(PATH_INFO="/<script>"))
        assert read_records()[0]["msg"] == "request start: GET /&lt;script&gt;"


class TestFromEnviron:
    def test_missing(self):
        """Requests that did not pass the middleware have no logger."""
        with pytest.raises(MissingContextError):
            from_environ({})

    def test_context_carries_request_id(self, logger):
        """The stored context uses the request id."""
        seen = {}

        def app(environ, start_response):
            seen["ctx"] = environ[ENVIRON_KEY]
            start_response("204 No Content", [])
            return []

        run(app, logger, make_environ(HTTP_X_REQUEST_ID="abc"))
        assert seen["ctx"].request_id == "abc"
