"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================
Parses raw HTTP/1.1 request bytes into structured HTTPRequest objects.
Implements the subset of RFC 7230 the movie API needs: request line,
headers, and a Content-Length delimited body.
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP REQUEST STRUCTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    PUT /movies/1 HTTP/1.1\r\n          ← request line               │
    │    Host: localhost:8080\r\n            ← headers                    │
    │    Content-Type: application/json\r\n                               │
    │    Content-Length: 13\r\n                                           │
    │    \r\n                                ← blank line                 │
    │    {"year":2011}                       ← body (13 bytes)            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Optional
from urllib.parse import parse_qs, unquote, urlparse
import re

from .status_codes import HTTPStatus


class HTTPParseError(Exception):
    """
    Raised when a request cannot be parsed.

    Carries the status code the server should answer with, so the
    connection loop can reply before closing.
    """

    def __init__(self, message: str, status_code: int = HTTPStatus.BAD_REQUEST):
        super().__init__(message)
        self.status_code = HTTPStatus(status_code)


@dataclass
class HTTPRequest:
    """
    A parsed HTTP request.

    Header names are stored lowercase since HTTP headers are
    case-insensitive. `path_params` is filled in by the router after a
    successful match, already converted by the route's converters.
    """

    method: str
    path: str
    version: str = "HTTP/1.1"

    headers: Dict[str, str] = field(default_factory=dict)
    query_params: Dict[str, list[str]] = field(default_factory=dict)
    body: bytes = b""

    # Router-injected parameters (values may be converted, e.g. int ids)
    path_params: Dict[str, object] = field(default_factory=dict)

    client_address: tuple[str, int] = ("", 0)

    @property
    def content_type(self) -> Optional[str]:
        """Content-Type without parameters, e.g. "application/json"."""
        ct = self.headers.get("content-type", "")
        return ct.split(";")[0].strip().lower() or None

    @property
    def content_length(self) -> int:
        try:
            return int(self.headers.get("content-length", 0))
        except ValueError:
            return 0

    @property
    def user_agent(self) -> str:
        return self.headers.get("user-agent", "")

    @property
    def is_keep_alive(self) -> bool:
        """
        Whether the client wants the connection kept open.

        HTTP/1.1 keeps alive unless "Connection: close" is sent;
        HTTP/1.0 closes unless "Connection: keep-alive" is sent.
        """
        connection = self.headers.get("connection", "").lower()
        if self.version == "HTTP/1.1":
            return connection != "close"
        return connection == "keep-alive"


class RequestParser:
    """
    Parses raw HTTP request bytes into HTTPRequest objects.

    ==========================================================================
    PARSING STEPS
    ==========================================================================

        1. Size check                 → 413 if over max_request_size
        2. Split at \\r\\n\\r\\n          → 400 if there is no header terminator
        3. Request line               → 400 malformed, 505 bad version
        4. Headers                    → lowercase names, repeats comma-joined
        5. Body by Content-Length     → 400 invalid or short body,
                                        501 for chunked bodies

    ==========================================================================
    """

    REQUEST_LINE_PATTERN = re.compile(r"^([A-Z]+) ([^ ]+) (HTTP/\d\.\d)$")
    HEADER_PATTERN = re.compile(r"^([^:]+):\s*(.*)$")

    SUPPORTED_VERSIONS = ("HTTP/1.0", "HTTP/1.1")

    def __init__(self, max_request_size: int = 1024 * 1024):
        self.max_request_size = max_request_size

    def parse(
        self,
        data: bytes,
        client_address: tuple[str, int] = ("", 0)
    ) -> HTTPRequest:
        """
        Parse raw HTTP request data into an HTTPRequest.

        Args:
            data: Raw request bytes as read by Connection.read_request().
            client_address: Client's (ip, port) tuple for logging.

        Returns:
            Parsed HTTPRequest.

        Raises:
            HTTPParseError: If the request is malformed.
        """
        if len(data) > self.max_request_size:
            raise HTTPParseError(
                f"Request too large: {len(data)} bytes",
                status_code=HTTPStatus.PAYLOAD_TOO_LARGE,
            )

        header_end = data.find(b"\r\n\r\n")
        if header_end == -1:
            raise HTTPParseError("Incomplete request: no header terminator")

        header_section = data[:header_end].decode("latin-1")
        body = data[header_end + 4:]

        lines = header_section.split("\r\n")
        method, path, query_params, version = self._parse_request_line(lines[0])
        headers = self._parse_headers(lines[1:])

        if "chunked" in headers.get("transfer-encoding", "").lower():
            raise HTTPParseError(
                "Chunked request bodies are not supported",
                status_code=HTTPStatus.NOT_IMPLEMENTED,
            )

        content_length = self._content_length(headers)
        if len(body) < content_length:
            raise HTTPParseError(
                f"Incomplete body: expected {content_length} bytes, got {len(body)}"
            )

        # Anything past Content-Length belongs to the next pipelined request
        body = body[:content_length]

        return HTTPRequest(
            method=method,
            path=path,
            version=version,
            headers=headers,
            query_params=query_params,
            body=body,
            client_address=client_address,
        )

    def _parse_request_line(
        self,
        line: str
    ) -> tuple[str, str, Dict[str, list[str]], str]:
        """
        Split "METHOD SP REQUEST-URI SP HTTP-VERSION" into its parts.

        Unknown methods are not rejected here: the router answers 405 for
        any method it has no route for, which is what clients of the movie
        API expect.
        """
        match = self.REQUEST_LINE_PATTERN.match(line)
        if not match:
            raise HTTPParseError(f"Invalid request line: {line!r}")

        method, uri, version = match.groups()

        if version not in self.SUPPORTED_VERSIONS:
            raise HTTPParseError(
                f"Unsupported HTTP version: {version}",
                status_code=HTTPStatus.HTTP_VERSION_NOT_SUPPORTED,
            )

        parsed = urlparse(uri)
        path = unquote(parsed.path) or "/"
        query_params = parse_qs(parsed.query, keep_blank_values=True)

        return method, path, query_params, version

    def _parse_headers(self, lines: list[str]) -> Dict[str, str]:
        """
        Parse "Name: Value" lines into a dict with lowercase names.

        Repeated headers are joined with ", " (RFC 7230 section 3.2.2).
        Lines that don't look like headers are skipped.
        """
        headers: Dict[str, str] = {}

        for line in lines:
            if not line:
                continue

            match = self.HEADER_PATTERN.match(line)
            if not match:
                continue

            name, value = match.groups()
            name = name.strip().lower()
            value = value.strip()

            if name in headers:
                headers[name] += ", " + value
            else:
                headers[name] = value

        return headers

    @staticmethod
    def _content_length(headers: Dict[str, str]) -> int:
        raw = headers.get("content-length")
        if raw is None:
            return 0
        try:
            length = int(raw)
        except ValueError:
            raise HTTPParseError(f"Invalid Content-Length: {raw!r}")
        if length < 0:
            raise HTTPParseError(f"Invalid Content-Length: {raw!r}")
        return length
