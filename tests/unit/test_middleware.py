"""
Unit tests for the middleware pipeline and access logging.
"""

import json
import logging

import pytest

from movieserver.http import HTTPRequest, HTTPResponse, ResponseBuilder, HTTPStatus
from movieserver.middleware import LoggingMiddleware, Middleware, MiddlewarePipeline


def make_request(path: str = "/movies") -> HTTPRequest:
    return HTTPRequest(
        method="GET",
        path=path,
        headers={"user-agent": "pytest"},
        client_address=("127.0.0.1", 5000),
    )


def handler(request: HTTPRequest) -> HTTPResponse:
    return ResponseBuilder().json([]).build()


class Recorder(Middleware):
    """Appends its tag on the way in and on the way out."""

    def __init__(self, tag: str, calls: list):
        self.tag = tag
        self.calls = calls

    def __call__(self, request, next):
        self.calls.append(f"{self.tag}:in")
        response = next(request)
        self.calls.append(f"{self.tag}:out")
        return response


class TestMiddlewarePipeline:

    def test_empty_pipeline_returns_handler(self):
        pipeline = MiddlewarePipeline()
        assert pipeline.wrap(handler)(make_request()).status == HTTPStatus.OK

    def test_order(self):
        calls = []
        pipeline = MiddlewarePipeline()
        pipeline.add(Recorder("outer", calls)).add(Recorder("inner", calls))

        pipeline.wrap(handler)(make_request())

        assert calls == ["outer:in", "inner:in", "inner:out", "outer:out"]

    def test_len_and_iter(self):
        first, second = Recorder("a", []), Recorder("b", [])
        pipeline = MiddlewarePipeline().add(first).add(second)

        assert len(pipeline) == 2
        assert list(pipeline) == [first, second]
        assert first.name == "Recorder"


class TestLoggingMiddleware:

    def test_text_log_line(self, caplog):
        middleware = LoggingMiddleware()

        with caplog.at_level(logging.INFO, logger="movieserver.access"):
            middleware(make_request(), handler)

        [record] = caplog.records
        assert record.name == "movieserver.access"
        assert '127.0.0.1 - - [' in record.getMessage()
        assert '"GET /movies" 200 2 ' in record.getMessage()

    def test_json_log_line(self, caplog):
        middleware = LoggingMiddleware(log_format="json")

        with caplog.at_level(logging.INFO, logger="movieserver.access"):
            response = middleware(make_request(), handler)

        entry = json.loads(caplog.records[0].getMessage())
        assert entry["method"] == "GET"
        assert entry["path"] == "/movies"
        assert entry["status_code"] == 200
        assert entry["user_agent"] == "pytest"
        assert entry["request_id"] == response.headers["X-Request-ID"]

    def test_request_id_header(self):
        response = LoggingMiddleware()(make_request(), handler)
        assert len(response.headers["X-Request-ID"]) == 8

        response = LoggingMiddleware(include_request_id=False)(make_request(), handler)
        assert "X-Request-ID" not in response.headers

    def test_skip_paths(self, caplog):
        middleware = LoggingMiddleware(skip_paths=["/movies"])

        with caplog.at_level(logging.INFO, logger="movieserver.access"):
            middleware(make_request(), handler)

        assert caplog.records == []

    def test_errors_are_logged_and_reraised(self, caplog):
        def broken(request):
            raise RuntimeError("store exploded")

        with caplog.at_level(logging.INFO, logger="movieserver.access"):
            with pytest.raises(RuntimeError):
                LoggingMiddleware()(make_request(), broken)

        [record] = caplog.records
        assert record.levelno == logging.ERROR
        assert "RuntimeError: store exploded" in record.getMessage()
