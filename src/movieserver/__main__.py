"""
=============================================================================
MOVIE SERVER CLI ENTRY POINT
=============================================================================

    # Defaults (0.0.0.0:8080)
    python -m movieserver

    # Custom port
    python -m movieserver --port 3000

    # Installed console script, JSON access log
    movie-server --log-format json

Settings come from three places, highest priority first:

    1. command-line flags
    2. MOVIES_* environment variables (see ServerConfig.from_env)
    3. ServerConfig defaults

=============================================================================
"""

import argparse
import sys

from . import __version__
from .config import LOG_FORMATS, LOG_LEVELS, ServerConfig
from .server import create_app


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    """CLI arguments, with the environment-derived config as defaults."""
    parser = argparse.ArgumentParser(
        prog="movie-server",
        description="In-memory movie catalogue served over HTTP/1.1",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m movieserver                    # Run with defaults
  python -m movieserver --port 3000        # Custom port
  python -m movieserver --host 127.0.0.1   # Local connections only
  python -m movieserver --log-level DEBUG  # Verbose logging
        """
    )

    # ─── Network ──────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help=f"Host to bind to (default: {defaults.host})"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=defaults.port,
        help=f"Port to listen on, 0 for any free port (default: {defaults.port})"
    )

    # ─── Performance ──────────────────────────────────────────────────────

    parser.add_argument(
        "--workers", "-w",
        type=int,
        default=defaults.max_workers,
        help=f"Maximum worker threads (default: {defaults.max_workers})"
    )

    # ─── Logging ──────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        type=str.upper,
        choices=LOG_LEVELS,
        default=defaults.log_level,
        help=f"Logging level (default: {defaults.log_level})"
    )

    parser.add_argument(
        "--log-format",
        type=str.lower,
        choices=LOG_FORMATS,
        default=defaults.log_format,
        help=f"Access log format (default: {defaults.log_format})"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"movie-server {__version__}"
    )

    return parser


def main(argv=None):
    """Parse arguments, build the app and serve until interrupted."""
    try:
        defaults = ServerConfig.from_env()
    except ValueError as e:
        print(f"Error: invalid environment configuration: {e}", file=sys.stderr)
        sys.exit(2)

    args = build_parser(defaults).parse_args(argv)

    defaults.host = args.host
    defaults.port = args.port
    defaults.max_workers = args.workers
    defaults.min_workers = min(defaults.min_workers, args.workers)
    defaults.log_level = args.log_level
    defaults.log_format = args.log_format

    try:
        server = create_app(defaults)
        server.run()
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
