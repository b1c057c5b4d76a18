"""
=============================================================================
TCP SOCKET SERVER
=============================================================================

Owns the listening socket and hands every accepted client to a callback.

    start(callback)
        │
        ├──► socket() + SO_REUSEADDR + TCP_NODELAY
        ├──► bind(host, port)         port 0 → OS picks one
        ├──► listen(backlog)
        ├──► SIGINT/SIGTERM → shutdown()   (main thread only)
        │
        └──► while running:
                 accept()             1s timeout so shutdown() is noticed
                 callback(Connection(...))

=============================================================================
"""

from typing import Callable, Optional, Tuple
import logging
import signal
import socket
import threading

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)


class SocketServer:
    """
    Low-level TCP server.

    Usage:
        server = SocketServer(config)
        server.start(handle_connection)   # Blocks until shutdown()
    """

    def __init__(self, config: ServerConfig):
        self.config = config
        self._socket: Optional[socket.socket] = None
        self._running = False
        self._ready = threading.Event()
        self._bound_address: Optional[Tuple[str, int]] = None
        self._original_handlers: dict = {}

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def address(self) -> Tuple[str, int]:
        """
        The (host, port) actually bound.

        Differs from the config when port 0 was requested.
        """
        return self._bound_address or (self.config.host, self.config.port)

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the socket is listening. Returns False on timeout."""
        return self._ready.wait(timeout)

    def _create_socket(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # Rebind immediately after a restart instead of waiting out TIME_WAIT
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        # Small JSON responses: send right away rather than batching
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)

        # accept() wakes up every second to check _running
        sock.settimeout(1.0)
        return sock

    def _setup_signals(self):
        """
        Turn SIGINT/SIGTERM into a graceful shutdown.

        signal.signal() may only be called from the main thread; when the
        server runs in a background thread (tests) shutdown() is called
        directly instead.
        """
        if threading.current_thread() is not threading.main_thread():
            return

        def shutdown_handler(signum, frame):
            logger.info(f"Received {signal.Signals(signum).name}, initiating shutdown...")
            self.shutdown()

        for sig in (signal.SIGTERM, signal.SIGINT):
            self._original_handlers[sig] = signal.signal(sig, shutdown_handler)

    def _restore_signals(self):
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def start(
        self,
        connection_handler: Callable[[Connection], None],
        on_ready: Optional[Callable[[Tuple[str, int]], None]] = None,
    ):
        """
        Bind, listen and run the accept loop. Blocks until shutdown().

        Args:
            connection_handler: Called with each accepted Connection.
            on_ready: Called once with the bound address, before the
                first accept().

        Raises:
            OSError: If the address can't be bound.
        """
        self._socket = self._create_socket()

        try:
            self._socket.bind((self.config.host, self.config.port))
        except OSError as e:
            logger.error(f"Failed to bind to {self.config.host}:{self.config.port}: {e}")
            self._socket.close()
            self._socket = None
            raise

        self._socket.listen(self.config.backlog)
        self._bound_address = self._socket.getsockname()[:2]
        self._running = True
        self._setup_signals()
        self._ready.set()

        logger.info(f"Listening on {self.address[0]}:{self.address[1]}")
        try:
            if on_ready:
                on_ready(self.address)
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if self._running:
                    logger.error(f"Accept error: {e}")
                break

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")
            conn = Connection(
                socket=client_socket,
                address=client_address,
                buffer_size=self.config.buffer_size,
                timeout=self.config.timeout,
                keep_alive_timeout=self.config.keep_alive_timeout,
                max_request_size=self.config.max_request_size,
            )
            connection_handler(conn)

    def shutdown(self):
        """Stop accepting connections. Safe to call more than once."""
        if self._running:
            logger.info("Shutting down socket server...")
        self._running = False

    def _cleanup(self):
        self._restore_signals()
        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None
        self._ready.clear()
        logger.info("Socket server stopped")
