"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The status codes this server actually sends, with their reason phrases.

    ┌────────┬───────────────────────────────────────────────────────────┐
    │ 200    │ GET /movies, GET/PUT /movies/{id}                        │
    │ 201    │ POST /movies                                             │
    │ 204    │ DELETE /movies/{id}                                      │
    │ 400    │ bad movie id, bad JSON body, malformed request line      │
    │ 404    │ unknown movie id, unknown path                           │
    │ 405    │ method not registered for the path                       │
    │ 408    │ client stalled before sending a full request             │
    │ 413    │ request larger than max_request_size                     │
    │ 500    │ handler raised an unexpected exception                   │
    │ 501    │ chunked request bodies                                   │
    │ 503    │ worker queue full                                        │
    │ 505    │ anything other than HTTP/1.0 or HTTP/1.1                 │
    └────────┴───────────────────────────────────────────────────────────┘

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    IntEnum, so members compare equal to plain integers:

        >>> HTTPStatus.CREATED == 201
        True
        >>> HTTPStatus.CREATED.phrase
        'Created'
    """

    # 2xx SUCCESS
    OK = 200
    CREATED = 201
    NO_CONTENT = 204

    # 4xx CLIENT ERRORS
    BAD_REQUEST = 400
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    REQUEST_TIMEOUT = 408
    PAYLOAD_TOO_LARGE = 413

    # 5xx SERVER ERRORS
    INTERNAL_SERVER_ERROR = 500
    NOT_IMPLEMENTED = 501
    SERVICE_UNAVAILABLE = 503
    HTTP_VERSION_NOT_SUPPORTED = 505

    @property
    def phrase(self) -> str:
        """Reason phrase for the status line, e.g. "Not Found"."""
        return _STATUS_PHRASES.get(self, "Unknown")

    @property
    def is_success(self) -> bool:
        return 200 <= self < 300

    @property
    def is_client_error(self) -> bool:
        return 400 <= self < 500

    @property
    def is_server_error(self) -> bool:
        return 500 <= self < 600

    @property
    def allows_body(self) -> bool:
        """204 responses must not carry a body (RFC 7230 section 3.3)."""
        return self != HTTPStatus.NO_CONTENT


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.NO_CONTENT: "No Content",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.REQUEST_TIMEOUT: "Request Timeout",
    HTTPStatus.PAYLOAD_TOO_LARGE: "Payload Too Large",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
    HTTPStatus.NOT_IMPLEMENTED: "Not Implemented",
    HTTPStatus.SERVICE_UNAVAILABLE: "Service Unavailable",
    HTTPStatus.HTTP_VERSION_NOT_SUPPORTED: "HTTP Version Not Supported",
}
