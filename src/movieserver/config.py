"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the movie server.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m movieserver --port 3000                         │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── MOVIES_PORT=3000 python -m movieserver                    │
    │                                                                      │
    │   3. Default values (in this dataclass)                             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "json")


@dataclass
class ServerConfig:
    """
    Configuration for the movie server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, buffer_size, timeout

    HTTP SETTINGS
    - keep_alive, keep_alive_timeout, max_request_size

    THREADING SETTINGS
    - min_workers, max_workers, queue_size

    LOGGING
    - log_level, log_format

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "0.0.0.0"
    """
    The IP address to bind to. All interfaces by default.
    Use "127.0.0.1" to keep the API local to this machine.
    """

    port: int = 8080
    """
    The port number to listen on.
    0 asks the OS for a free port (the bound port is logged at startup).
    """

    backlog: int = 128
    """Maximum number of queued connections waiting for accept()."""

    buffer_size: int = 8192
    """Size of each recv() call in bytes."""

    timeout: Optional[float] = 30.0
    """
    Socket timeout in seconds for reading the first request.
    None = blocking forever.
    """

    # ─────────────────────────────────────────────────────────────────────
    # HTTP SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    keep_alive: bool = True
    """Allow several requests on one TCP connection."""

    keep_alive_timeout: float = 5.0
    """Idle seconds before a keep-alive connection is closed."""

    max_request_size: int = 1024 * 1024  # 1 MB
    """
    Maximum allowed request size (headers + body) in bytes.
    Movie records are tiny, so this is deliberately small.
    """

    # ─────────────────────────────────────────────────────────────────────
    # THREAD POOL SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    min_workers: int = 4
    """Worker threads started with the server."""

    max_workers: int = 16
    """Upper bound on worker threads when connections pile up."""

    queue_size: int = 100
    """Connections waiting for a worker before new ones get 503."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    log_format: str = "text"
    """Access log format: 'text' (Apache style) or 'json'."""

    # ─────────────────────────────────────────────────────────────────────
    # SERVER IDENTITY
    # ─────────────────────────────────────────────────────────────────────

    server_name: str = "MovieServer/1.0"
    """Value of the Server response header."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        MOVIES_HOST        Server host (default: 0.0.0.0)
        MOVIES_PORT        Server port (default: 8080)
        MOVIES_WORKERS     Max worker threads (default: 16)
        MOVIES_TIMEOUT     Request timeout in seconds (default: 30)
        MOVIES_LOG_LEVEL   Logging level (default: INFO)
        MOVIES_LOG_FORMAT  Access log format (default: text)

        =====================================================================
        """
        max_workers = int(os.getenv("MOVIES_WORKERS", "16"))
        return cls(
            host=os.getenv("MOVIES_HOST", "0.0.0.0"),
            port=int(os.getenv("MOVIES_PORT", "8080")),
            min_workers=min(4, max_workers),
            max_workers=max_workers,
            timeout=float(os.getenv("MOVIES_TIMEOUT", "30")),
            log_level=os.getenv("MOVIES_LOG_LEVEL", "INFO").upper(),
            log_format=os.getenv("MOVIES_LOG_FORMAT", "text").lower(),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called by the server at construction time so a bad value fails
        before a socket is ever opened.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.min_workers < 1:
            raise ValueError("min_workers must be >= 1")

        if self.max_workers < self.min_workers:
            raise ValueError("max_workers must be >= min_workers")

        if self.queue_size < 1:
            raise ValueError("queue_size must be >= 1")

        if self.buffer_size < 1024:
            raise ValueError("buffer_size must be >= 1024")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log_level: {self.log_level}")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {LOG_FORMATS}")
