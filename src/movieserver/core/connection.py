"""
=============================================================================
CLIENT CONNECTION
=============================================================================

Wraps an accepted client socket with buffered request reading.

TCP delivers a byte stream, not messages. A request is complete when:

    1. the header block has arrived (ends with \\r\\n\\r\\n), and
    2. Content-Length more bytes of body have arrived after it.

Bytes past the end of one request stay in the buffer for the next one,
which is what makes keep-alive and pipelining work.

=============================================================================
CONNECTION STATE MACHINE
=============================================================================

    NEW ──► READING ──► PROCESSING ──► WRITING ──► KEEP_ALIVE ──┐
     │         │                          │                      │
     │         ▼                          ▼                      │
     └─────► CLOSING ◄────────────────────┴──────────────────────┘
               │
               ▼
             CLOSED

=============================================================================
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import logging
import socket
import time
import uuid

from ..http.request import HTTPParseError
from ..http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    NEW = "new"
    READING = "reading"
    PROCESSING = "processing"
    WRITING = "writing"
    KEEP_ALIVE = "keep_alive"
    CLOSING = "closing"
    CLOSED = "closed"


@dataclass
class Connection:
    """
    A client connection.

    Attributes:
        socket: The accepted client socket.
        address: Client's (ip, port).
        id: Short random id used as a log prefix.
        requests_handled: Requests read so far on this connection.
    """

    socket: socket.socket
    address: tuple[str, int]
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)
    requests_handled: int = 0

    buffer_size: int = 8192
    timeout: Optional[float] = 30.0          # First request
    keep_alive_timeout: float = 5.0          # Later requests
    max_request_size: int = 1024 * 1024

    _buffer: bytes = field(default=b"", repr=False)

    def __post_init__(self):
        self.socket.setblocking(True)
        self.socket.settimeout(self.timeout)

    def read_request(self) -> Optional[bytes]:
        """
        Read one complete HTTP request from the socket.

        Returns:
            The raw request bytes, or None if the client closed the
            connection (or went idle on a keep-alive connection).

        Raises:
            TimeoutError: The first request stalled past `timeout`.
            HTTPParseError: The request exceeds max_request_size (413).
        """
        self.state = ConnectionState.READING

        if self.requests_handled > 0:
            self.socket.settimeout(self.keep_alive_timeout)

        try:
            while b"\r\n\r\n" not in self._buffer:
                chunk = self._recv()
                if not chunk:
                    return None
                self._buffer += chunk
                self._check_size(len(self._buffer))

            header_end = self._buffer.find(b"\r\n\r\n")
            body_start = header_end + 4
            content_length = self._parse_content_length(self._buffer[:header_end])
            self._check_size(body_start + content_length)

            while len(self._buffer) - body_start < content_length:
                chunk = self._recv()
                if not chunk:
                    break  # Closed mid-body; the parser reports the short body
                self._buffer += chunk

            request_end = body_start + content_length
            request_data = self._buffer[:request_end]
            self._buffer = self._buffer[request_end:]

            self.requests_handled += 1
            return request_data

        except socket.timeout:
            if self.requests_handled > 0 and not self._buffer:
                logger.debug(f"[{self.id}] Keep-alive timeout")
                return None
            raise TimeoutError("Request read timeout")

        finally:
            self.socket.settimeout(self.timeout)

    def _check_size(self, size: int) -> None:
        if size > self.max_request_size:
            raise HTTPParseError(
                f"Request too large: {size} bytes",
                status_code=HTTPStatus.PAYLOAD_TOO_LARGE,
            )

    def _recv(self) -> bytes:
        try:
            return self.socket.recv(self.buffer_size)
        except (ConnectionResetError, BrokenPipeError):
            return b""

    @staticmethod
    def _parse_content_length(headers: bytes) -> int:
        """
        Find Content-Length in the raw header block.

        Only needed to know how much to read; RequestParser validates it
        properly afterwards.
        """
        for line in headers.decode("latin-1").lower().split("\r\n"):
            if line.startswith("content-length:"):
                try:
                    return max(0, int(line.split(":", 1)[1].strip()))
                except ValueError:
                    return 0
        return 0

    def send_response(self, data: bytes) -> bool:
        """Send all bytes. Returns False if the client has gone away."""
        self.state = ConnectionState.WRITING
        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    def set_keep_alive(self):
        self.state = ConnectionState.KEEP_ALIVE

    def close(self):
        """
        Close the connection.

        shutdown(SHUT_WR) sends FIN first so the client sees a clean end
        of stream, then the socket is released.
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSING
        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Client already disconnected
        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Closed after {self.requests_handled} requests")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
