"""
Request handlers.

    movies.py   MovieHandler: list/create/get/update/delete for /movies
"""

from .movies import MovieHandler, parse_movie_id

__all__ = [
    "MovieHandler",
    "parse_movie_id",
]
