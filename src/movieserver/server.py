"""
=============================================================================
MOVIE SERVER
=============================================================================

Ties the pieces together:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                           MovieServer                               │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                     │
    │   SocketServer ──accept──► ThreadPool ──worker──► _process_connection│
    │                                                         │           │
    │                                          RequestParser ◄┘           │
    │                                                │                    │
    │                                  MiddlewarePipeline (logging)       │
    │                                                │                    │
    │                                  Router ──► MovieHandler ──► Store  │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
REQUEST LIFECYCLE
=============================================================================

    1. SocketServer accepts a client and wraps it in a Connection
    2. The connection is queued on the ThreadPool (503 if the queue is full)
    3. A worker reads and parses requests until the client stops keeping
       the connection alive
    4. Each request runs through the middleware and the router
    5. Any exception a handler lets through becomes a 500

=============================================================================
"""

from typing import Callable, Optional, Tuple
import logging

from .config import ServerConfig
from .core.connection import Connection, ConnectionState
from .core.socket_server import SocketServer
from .core.thread_pool import ThreadPool
from .handlers.movies import MovieHandler
from .http.request import HTTPParseError, HTTPRequest, RequestParser
from .http.response import HTTPResponse, error, internal_error
from .http.router import Router
from .http.status_codes import HTTPStatus
from .middleware.base import Middleware, MiddlewarePipeline
from .middleware.logging import LoggingMiddleware
from .store import MovieStore


logger = logging.getLogger(__name__)


class MovieServer:
    """
    HTTP/1.1 server for the movie API.

    Usage:
        server = MovieServer(ServerConfig(port=8080))
        MovieHandler(server.store).register(server.router)
        server.use(LoggingMiddleware())
        server.run()

    Most callers want create_app(), which does the wiring above.

    Args:
        config: Server configuration. Defaults are used if omitted.
        store: Movie store. A fresh, empty one is created if omitted.
    """

    def __init__(self, config: Optional[ServerConfig] = None, store: Optional[MovieStore] = None):
        self.config = config or ServerConfig()
        self.config.validate()

        self.store = store if store is not None else MovieStore()

        self._socket_server = SocketServer(self.config)
        self._thread_pool = ThreadPool(
            min_workers=self.config.min_workers,
            max_workers=self.config.max_workers,
            queue_size=self.config.queue_size,
        )
        self._parser = RequestParser(max_request_size=self.config.max_request_size)
        self._router = Router()
        self._middleware = MiddlewarePipeline()
        self._handler: Optional[Callable[[HTTPRequest], HTTPResponse]] = None
        self._running = False

    def use(self, middleware: Middleware) -> "MovieServer":
        """Add middleware. First added runs outermost."""
        self._middleware.add(middleware)
        return self

    @property
    def router(self) -> Router:
        return self._router

    @property
    def address(self) -> Tuple[str, int]:
        """Bound (host, port); only meaningful once the server is listening."""
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._running

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_until_ready(timeout)

    def run(self, host: Optional[str] = None, port: Optional[int] = None):
        """
        Start serving. Blocks until shutdown() or SIGINT/SIGTERM.

        Args:
            host: Override config host.
            port: Override config port (0 lets the OS pick one).

        Raises:
            OSError: If the address can't be bound.
        """
        if host:
            self.config.host = host
        if port is not None:
            self.config.port = port

        self._setup_logging()
        self._handler = self._middleware.wrap(self._router.handle)
        self._running = True
        self._thread_pool.start()

        try:
            self._socket_server.start(self._handle_connection, on_ready=self._on_ready)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._shutdown()

    def shutdown(self):
        """
        Ask a running server to stop.

        run() returns once in-flight connections have drained. Safe to
        call from another thread.
        """
        self._socket_server.shutdown()

    def _on_ready(self, address: Tuple[str, int]):
        logger.info(f"Server is running on port {address[1]}...")
        for route in self._router.routes():
            logger.debug(f"Route: {route.method or '*':<7} {route.path}")

    def _setup_logging(self):
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)
        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("movieserver").setLevel(level)

    def _shutdown(self):
        logger.info("Shutting down server...")
        self._running = False
        self._thread_pool.shutdown(wait=True, timeout=self.config.timeout)
        logger.info("Server stopped")

    # =========================================================================
    # CONNECTION HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """Queue a freshly accepted connection (runs on the accept thread)."""
        if not self._thread_pool.submit(self._process_connection, conn):
            logger.warning(f"[{conn.id}] Thread pool full, rejecting connection")
            self._send_error(conn, HTTPStatus.SERVICE_UNAVAILABLE, "Server overloaded")
            conn.close()

    def _process_connection(self, conn: Connection):
        """
        Serve one connection (runs on a worker thread).

        Loops while the client keeps the connection alive. Protocol
        errors get a plain-text reply and close the connection; handler
        errors become a 500 and the connection carries on.
        """
        with conn:
            while self._running:
                try:
                    raw_request = conn.read_request()
                    if raw_request is None:
                        break
                    request = self._parser.parse(raw_request, conn.address)
                except HTTPParseError as e:
                    logger.info(f"[{conn.id}] Bad request: {e}")
                    self._send_error(conn, e.status_code, str(e))
                    break
                except TimeoutError:
                    self._send_error(conn, HTTPStatus.REQUEST_TIMEOUT, "Request timeout")
                    break

                conn.state = ConnectionState.PROCESSING
                response = self._dispatch(conn, request)

                keep_alive = request.is_keep_alive and self.config.keep_alive
                if keep_alive:
                    response.headers.setdefault(
                        "Keep-Alive", f"timeout={int(self.config.keep_alive_timeout)}"
                    )
                else:
                    response.headers["Connection"] = "close"

                if not conn.send_response(response.to_bytes(self.config.server_name)):
                    break
                if not keep_alive:
                    break
                conn.set_keep_alive()

    def _dispatch(self, conn: Connection, request: HTTPRequest) -> HTTPResponse:
        try:
            return self._handler(request)
        except Exception as e:
            logger.exception(f"[{conn.id}] Handler error on {request.method} {request.path}: {e}")
            return internal_error()

    def _send_error(self, conn: Connection, status: HTTPStatus, message: str):
        """Reply to a request that never reached the router."""
        response = error(status, message)
        response.headers["Connection"] = "close"
        conn.send_response(response.to_bytes(self.config.server_name))


def create_app(config: Optional[ServerConfig] = None, store: Optional[MovieStore] = None) -> MovieServer:
    """
    Build a ready-to-run movie server.

    Registers the /movies routes against `store` (or a new empty one)
    and puts the access log middleware in front of them.

    Example:
        app = create_app(ServerConfig(port=3000))
        app.run()
    """
    server = MovieServer(config, store)
    server.use(LoggingMiddleware(log_format=server.config.log_format))
    MovieHandler(server.store).register(server.router)
    return server
