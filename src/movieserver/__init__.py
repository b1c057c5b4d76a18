"""
=============================================================================
MOVIESERVER - In-Memory Movie Catalogue over HTTP/1.1
=============================================================================

A small JSON API for movie records, served by an HTTP/1.1 server built
directly on sockets.

    GET     /movies         list every movie, ordered by id
    POST    /movies         create a movie, the server assigns the id
    GET     /movies/{id}    fetch one movie
    PUT     /movies/{id}    update the fields present in the body
    DELETE  /movies/{id}    remove a movie

Records live in memory only and are gone when the process exits.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    movieserver/
    ├── __main__.py          # CLI entry point (python -m movieserver)
    ├── server.py            # MovieServer and create_app()
    ├── config.py            # ServerConfig dataclass
    ├── models.py            # Movie record and JSON body decoding
    ├── store.py             # Thread-safe MovieStore
    ├── core/                # Sockets, connections, thread pool
    ├── http/                # Request parsing, responses, routing
    ├── middleware/          # Middleware pipeline, access logging
    └── handlers/            # /movies request handlers

=============================================================================
QUICK START
=============================================================================

    from movieserver import ServerConfig, create_app

    app = create_app(ServerConfig(port=8080))
    app.run()

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig
from .models import Movie
from .server import MovieServer, create_app
from .store import MovieStore

__all__ = [
    "MovieServer",
    "create_app",
    "ServerConfig",
    "Movie",
    "MovieStore",
    "__version__",
]
