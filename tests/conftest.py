"""
pytest configuration and fixtures.
"""

import http.client
import json
import socket
import threading
from typing import Callable, Generator, Optional, Tuple
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from movieserver import MovieServer, MovieStore, ServerConfig, create_app


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request."""
    return (
        b"GET /movies?sort=id&limit=10 HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: application/json\r\n"
        b"Connection: keep-alive\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample HTTP POST request with a movie JSON body."""
    body = b'{"title": "Inception", "director": "Nolan", "year": 2010}'
    return (
        b"POST /movies HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"Content-Type: application/json\r\n"
        + f"Content-Length: {len(body)}\r\n".encode()
        + b"Connection: close\r\n"
        b"\r\n"
    ) + body


@pytest.fixture
def config() -> ServerConfig:
    """Test server configuration."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        min_workers=2,
        max_workers=4,
        timeout=5.0,
        keep_alive_timeout=1.0,
        log_level="WARNING",
    )


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


@pytest.fixture
def store() -> MovieStore:
    """Empty movie store."""
    return MovieStore()


@pytest.fixture
def app(config: ServerConfig, store: MovieStore) -> MovieServer:
    """Fully wired app that is never started; drive it through app.router."""
    return create_app(config, store)


class LiveServer:
    """Runs a MovieServer in a background thread."""

    def __init__(self, server: MovieServer):
        self.server = server
        self._thread: Optional[threading.Thread] = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=10.0)

    def connection(self) -> http.client.HTTPConnection:
        return http.client.HTTPConnection("127.0.0.1", self.port, timeout=5.0)

    def request(self, method: str, path: str, body=None) -> Tuple[int, dict, bytes]:
        """
        One request on a fresh connection.

        `body` may be bytes, or anything JSON-serializable.

        Returns:
            (status, headers, body)
        """
        if body is not None and not isinstance(body, bytes):
            body = json.dumps(body).encode("utf-8")

        conn = self.connection()
        try:
            conn.request(method, path, body=body, headers={"Connection": "close"})
            response = conn.getresponse()
            return response.status, dict(response.getheaders()), response.read()
        finally:
            conn.close()

    def raw(self, data: bytes) -> bytes:
        """Send raw bytes and read until the server closes the connection."""
        with socket.create_connection(("127.0.0.1", self.port), timeout=5.0) as s:
            s.sendall(data)
            chunks = []
            while True:
                chunk = s.recv(4096)
                if not chunk:
                    break
                chunks.append(chunk)
        return b"".join(chunks)


@pytest.fixture
def live_server(config: ServerConfig, store: MovieStore) -> Generator[LiveServer, None, None]:
    """A running movie server on a free port."""
    server = LiveServer(create_app(config, store))
    server.start()

    yield server

    server.stop()


@pytest.fixture
def server_factory() -> Generator[Callable[..., LiveServer], None, None]:
    """Start extra servers with their own config; all are stopped at teardown."""
    started = []

    def _start(config: ServerConfig, store: Optional[MovieStore] = None) -> LiveServer:
        server = LiveServer(create_app(config, store))
        server.start()
        started.append(server)
        return server

    yield _start

    for server in started:
        server.stop()
