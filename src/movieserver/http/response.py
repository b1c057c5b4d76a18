"""
=============================================================================
HTTP RESPONSE BUILDER
=============================================================================

Constructs HTTP/1.1 responses and serializes them to bytes.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP RESPONSE STRUCTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    HTTP/1.1 201 Created\r\n                     ← status line       │
    │    Content-Type: application/json; charset=utf-8\r\n                │
    │    Location: /movies/1\r\n                                          │
    │    Content-Length: 62\r\n                       ← auto-added        │
    │    Date: Mon, 19 Oct 2026 12:00:00 GMT\r\n      ← auto-added        │
    │    Server: MovieServer/1.0\r\n                  ← auto-added        │
    │    \r\n                                                             │
    │    {"id": 1, "title": "Inception", ...}         ← body              │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Two body flavours are used by the movie API:

- JSON for records and lists (`ok`, `created`)
- plain text for every error (`error`): the message followed by a
  newline, served with `X-Content-Type-Options: nosniff`

=============================================================================
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union
import json

from .status_codes import HTTPStatus


@dataclass
class HTTPResponse:
    """
    An HTTP response ready to be serialized.

    Use ResponseBuilder or the convenience functions below rather than
    building one by hand.
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """e.g. "HTTP/1.1 404 Not Found"."""
        return f"{self.version} {int(self.status)} {self.status.phrase}"

    @property
    def text(self) -> str:
        return self.body.decode("utf-8")

    def json(self) -> Any:
        """Decode a JSON body. Mostly useful in tests."""
        return json.loads(self.body.decode("utf-8"))

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        self.headers[name] = value
        return self

    def to_bytes(self, server_name: str = "MovieServer/1.0") -> bytes:
        """
        Serialize the response for socket.sendall().

        Content-Length, Date and Server are added when missing. A 204
        response never carries a body or a Content-Length.
        """
        response_headers = dict(self.headers)
        body = self.body if self.status.allows_body else b""

        if self.status.allows_body:
            response_headers.setdefault("Content-Length", str(len(body)))
        else:
            response_headers.pop("Content-Length", None)
        response_headers.setdefault("Date", format_http_date(datetime.now(timezone.utc)))
        response_headers.setdefault("Server", server_name)

        lines = [self.status_line]
        for name, value in response_headers.items():
            lines.append(f"{name}: {value}")
        lines.append("")

        header_bytes = "\r\n".join(lines).encode("latin-1") + b"\r\n"
        return header_bytes + body


class ResponseBuilder:
    """
    Fluent builder for HTTP responses.

        response = (ResponseBuilder()
            .status(HTTPStatus.CREATED)
            .json(movie.to_dict())
            .header("Location", "/movies/1")
            .build())

    Every method except build() returns self.
    """

    def __init__(self):
        self._status = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._body: bytes = b""

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        self._status = HTTPStatus(status)
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        self._headers[name] = value
        return self

    def headers(self, headers: Dict[str, str]) -> "ResponseBuilder":
        self._headers.update(headers)
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        return self.header("Content-Type", content_type)

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        """Set a raw body. Strings are encoded as UTF-8."""
        self._body = body.encode("utf-8") if isinstance(body, str) else body
        return self

    def text(self, text: str, content_type: str = "text/plain; charset=utf-8") -> "ResponseBuilder":
        self._body = text.encode("utf-8")
        self._headers["Content-Type"] = content_type
        return self

    def json(self, data: Any) -> "ResponseBuilder":
        """
        Serialize `data` as the JSON body.

        ensure_ascii=False keeps non-ASCII titles readable on the wire.
        """
        self._body = json.dumps(data, ensure_ascii=False).encode("utf-8")
        self._headers["Content-Type"] = "application/json; charset=utf-8"
        return self

    def close_connection(self) -> "ResponseBuilder":
        self._headers["Connection"] = "close"
        return self

    def build(self) -> HTTPResponse:
        return HTTPResponse(
            status=self._status,
            headers=dict(self._headers),
            body=self._body,
        )


def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an RFC 7231 HTTP-date.

    Example: "Mon, 19 Oct 2026 12:00:00 GMT". HTTP dates are always GMT.
    """
    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================
#
#     return ok(movie.to_dict())
#     return created(movie.to_dict(), location="/movies/1")
#     return error(HTTPStatus.NOT_FOUND, "Movie not found")
#
# =============================================================================

def ok(data: Any) -> HTTPResponse:
    """200 OK with a JSON body."""
    return ResponseBuilder().status(HTTPStatus.OK).json(data).build()


def created(data: Any, location: Optional[str] = None) -> HTTPResponse:
    """201 Created with a JSON body and an optional Location header."""
    builder = ResponseBuilder().status(HTTPStatus.CREATED).json(data)
    if location:
        builder.header("Location", location)
    return builder.build()


def no_content() -> HTTPResponse:
    """204 No Content. Used after a successful DELETE."""
    return ResponseBuilder().status(HTTPStatus.NO_CONTENT).build()


def error(status: HTTPStatus, message: str) -> HTTPResponse:
    """
    Plain-text error response.

    The body is the message plus a trailing newline, and the content type
    is pinned with nosniff so browsers never reinterpret it.
    """
    return (ResponseBuilder()
        .status(status)
        .text(message + "\n")
        .header("X-Content-Type-Options", "nosniff")
        .build())


def bad_request(message: str = "Bad Request") -> HTTPResponse:
    return error(HTTPStatus.BAD_REQUEST, message)


def not_found(message: str = "404 page not found") -> HTTPResponse:
    return error(HTTPStatus.NOT_FOUND, message)


def method_not_allowed(allowed_methods: list[str]) -> HTTPResponse:
    """
    405 Method Not Allowed.

    RFC 7231 requires an Allow header listing the methods that would
    have worked.
    """
    response = error(HTTPStatus.METHOD_NOT_ALLOWED, "Method not allowed")
    response.headers["Allow"] = ", ".join(allowed_methods)
    return response


def internal_error(message: str = "Internal Server Error") -> HTTPResponse:
    return error(HTTPStatus.INTERNAL_SERVER_ERROR, message)
