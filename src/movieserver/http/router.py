r"""
=============================================================================
URL ROUTER
=============================================================================

Maps (method, path) pairs to handler functions. Supports:
- Static paths: /movies
- Dynamic parameters: /movies/:id (one path segment)
- Wildcard parameters: /movies/*id (everything after "/movies/")
- Converters that turn raw parameter strings into typed values

=============================================================================
ROUTING FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │   PUT /movies/42                                                     │
    │        │                                                             │
    │        ▼                                                             │
    │   1. Which patterns match the PATH?       none → 404                 │
    │        │  /movies/*id  {"id": "42"}                                  │
    │        ▼                                                             │
    │   2. Run converters on the parameters     fail → 400                 │
    │        │  {"id": 42}                                                 │
    │        ▼                                                             │
    │   3. Which of those routes take the METHOD? none → 405 + Allow      │
    │        │  PUT /movies/*id → update_movie                             │
    │        ▼                                                             │
    │   update_movie(request)   # request.path_params == {"id": 42}        │
    └─────────────────────────────────────────────────────────────────────┘

Parameters are converted before the method is checked, so a malformed id
is reported as such whatever the method.

=============================================================================
PATTERN COMPILATION
=============================================================================

    Pattern:  /movies/:id          Regex: ^/movies/(?P<id>[^/]+)\Z
    Pattern:  /movies/*id          Regex: ^/movies/(?P<id>.*)\Z

Paths are matched exactly: no trailing-slash normalisation, so
"/movies/" does not match "/movies".
Patterns are anchored with \Z and compiled with DOTALL: a decoded path
ending in "\n" is matched as written, never as if the newline were absent.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
import logging
import re

from .request import HTTPRequest
from .response import HTTPResponse, bad_request, method_not_allowed, not_found


logger = logging.getLogger(__name__)


# Handler: a function that takes a request and returns a response
Handler = Callable[[HTTPRequest], HTTPResponse]

# Converter: turns a raw path parameter into a value, or raises PathParamError
Converter = Callable[[str], Any]


class PathParamError(ValueError):
    """Raised by a converter when a path parameter is malformed."""


@dataclass
class Route:
    """A URL pattern bound to a handler."""

    path: str                        # URL pattern (e.g., /movies/:id)
    method: Optional[str]            # HTTP method (None = any method)
    handler: Handler
    name: Optional[str] = None       # Route name for url_for()

    _pattern: Optional[re.Pattern] = field(default=None, repr=False)
    _param_names: List[str] = field(default_factory=list, repr=False)


@dataclass
class RouteMatch:
    """A matched route plus its raw (unconverted) path parameters."""

    route: Route
    params: Dict[str, str]


class Router:
    """
    HTTP request router with path parameters and converters.

    ==========================================================================
    USAGE
    ==========================================================================

        router = Router()
        router.converter("id", parse_movie_id)

        @router.get("/movies")
        def list_movies(request):
            return ok([...])

        @router.get("/movies/*id")
        def get_movie(request):
            movie_id = request.path_params["id"]   # already an int
            ...

    ==========================================================================
    """

    def __init__(self):
        self._routes: List[Route] = []
        self._named_routes: Dict[str, Route] = {}
        self._converters: Dict[str, Converter] = {}

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    def add_route(
        self,
        path: str,
        handler: Handler,
        method: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Route:
        """
        Register a route.

        Args:
            path: URL pattern (e.g., /movies/:id)
            handler: Function taking a request and returning a response
            method: HTTP method (None for any method)
            name: Optional route name for url_for()

        Returns:
            The registered Route
        """
        pattern, param_names = self._compile_pattern(path)

        route = Route(
            path=path,
            method=method.upper() if method else None,
            handler=handler,
            name=name,
            _pattern=pattern,
            _param_names=param_names,
        )
        self._routes.append(route)

        if name:
            self._named_routes[name] = route

        return route

    def converter(self, param_name: str, func: Converter) -> None:
        """
        Register a converter for every parameter called `param_name`.

        The converter receives the raw string and returns the value the
        handler will see in request.path_params. Raising PathParamError
        turns the request into a 400 carrying the error message.
        """
        self._converters[param_name] = func

    def _compile_pattern(self, path: str) -> tuple[re.Pattern, List[str]]:
        r"""
        Compile a path pattern into an anchored regex.

            :param  → (?P<param>[^/]+)   one segment
            *param  → (?P<param>.*)      rest of the path, may be empty

        \Z rather than $ so a trailing newline is never dropped; DOTALL so
        a wildcard also takes newlines.
        """
        param_names: List[str] = []
        regex_parts = ["^"]

        for segment in path.split("/"):
            if not segment:
                continue

            regex_parts.append("/")

            if segment.startswith(":"):
                param_name = segment[1:]
                param_names.append(param_name)
                regex_parts.append(f"(?P<{param_name}>[^/]+)")

            elif segment.startswith("*"):
                param_name = segment[1:] or "wildcard"
                param_names.append(param_name)
                regex_parts.append(f"(?P<{param_name}>.*)")
                break  # Wildcard consumes everything

            else:
                regex_parts.append(re.escape(segment))

        if len(regex_parts) == 1:
            regex_parts.append("/")  # Root pattern "/"

        regex_parts.append(r"\Z")
        return re.compile("".join(regex_parts), re.DOTALL), param_names

    # =========================================================================
    # MATCHING
    # =========================================================================

    def _candidates(self, path: str) -> List[RouteMatch]:
        """Every route whose pattern matches `path`, whatever its method."""
        matches = []
        for route in self._routes:
            if route._pattern is None:
                continue
            found = route._pattern.match(path)
            if found:
                matches.append(RouteMatch(route=route, params=found.groupdict()))
        return matches

    def match(self, method: str, path: str) -> Optional[RouteMatch]:
        """
        Find the first route for this method and path.

        First registered, first matched. Parameters are returned raw;
        converters only run inside handle().
        """
        method = method.upper()
        for candidate in self._candidates(path):
            route_method = candidate.route.method
            if route_method is None or route_method == method:
                return candidate
        return None

    def get_allowed_methods(self, path: str) -> List[str]:
        """Methods registered for `path`, used for the Allow header."""
        methods = set()
        for candidate in self._candidates(path):
            if candidate.route.method is None:
                return ["DELETE", "GET", "HEAD", "OPTIONS", "PATCH", "POST", "PUT"]
            methods.add(candidate.route.method)
        return sorted(methods)

    def convert_params(self, params: Dict[str, str]) -> Dict[str, Any]:
        """
        Apply registered converters to raw path parameters.

        Raises:
            PathParamError: If a converter rejects a value.
        """
        converted: Dict[str, Any] = {}
        for name, raw in params.items():
            func = self._converters.get(name)
            converted[name] = func(raw) if func else raw
        return converted

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Route a request to its handler.

            no pattern matches the path   → 404 "404 page not found"
            a converter rejects a param   → 400 with the converter message
            no route takes the method     → 405 "Method not allowed"
        """
        candidates = self._candidates(request.path)
        if not candidates:
            return not_found()

        try:
            params = self.convert_params(candidates[0].params)
        except PathParamError as e:
            logger.debug(f"Rejected path parameter in {request.path}: {e}")
            return bad_request(str(e))

        method = request.method.upper()
        for candidate in candidates:
            route_method = candidate.route.method
            if route_method is None or route_method == method:
                if candidate is not candidates[0]:
                    params = self.convert_params(candidate.params)
                request.path_params = params
                return candidate.route.handler(request)

        return method_not_allowed(self.get_allowed_methods(request.path))

    # =========================================================================
    # DECORATOR-STYLE REGISTRATION
    # =========================================================================

    def route(
        self,
        path: str,
        method: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Callable[[Handler], Handler]:
        """Decorator form of add_route(). Returns the handler unchanged."""
        def decorator(handler: Handler) -> Handler:
            self.add_route(path, handler, method, name)
            return handler
        return decorator

    def get(self, path: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        return self.route(path, "GET", name)

    def post(self, path: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        return self.route(path, "POST", name)

    def put(self, path: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        return self.route(path, "PUT", name)

    def delete(self, path: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        return self.route(path, "DELETE", name)

    # =========================================================================
    # UTILITIES
    # =========================================================================

    def url_for(self, name: str, **params: Any) -> Optional[str]:
        """
        Build the URL of a named route (reverse routing).

            router.url_for("get_movie", id=7)   # "/movies/7"
        """
        route = self._named_routes.get(name)
        if not route:
            return None

        url = route.path
        for param_name, value in params.items():
            url = url.replace(f":{param_name}", str(value))
            url = url.replace(f"*{param_name}", str(value))
        return url

    def routes(self) -> List[Route]:
        return list(self._routes)
