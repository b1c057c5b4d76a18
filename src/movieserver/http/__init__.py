"""
=============================================================================
HTTP PROTOCOL COMPONENTS
=============================================================================

    request.py       HTTPRequest, RequestParser, HTTPParseError
    response.py      HTTPResponse, ResponseBuilder, ok/created/error helpers
    router.py        Router, Route, PathParamError
    status_codes.py  HTTPStatus

=============================================================================
"""

from .request import HTTPRequest, RequestParser, HTTPParseError
from .response import (
    HTTPResponse,
    ResponseBuilder,
    ok,                  # 200 OK (JSON)
    created,             # 201 Created (JSON)
    no_content,          # 204 No Content
    error,               # plain-text error with any status
    bad_request,         # 400 Bad Request
    not_found,           # 404 Not Found
    method_not_allowed,  # 405 Method Not Allowed
    internal_error,      # 500 Internal Server Error
)
from .router import Router, Route, RouteMatch, PathParamError
from .status_codes import HTTPStatus

__all__ = [
    "HTTPRequest",
    "RequestParser",
    "HTTPParseError",
    "HTTPResponse",
    "ResponseBuilder",
    "ok",
    "created",
    "no_content",
    "error",
    "bad_request",
    "not_found",
    "method_not_allowed",
    "internal_error",
    "Router",
    "Route",
    "RouteMatch",
    "PathParamError",
    "HTTPStatus",
]
