"""
=============================================================================
IN-MEMORY MOVIE STORE
=============================================================================

A dict of id → Movie plus an id counter, guarded by one lock.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                          MovieStore                                 │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   _lock      threading.Lock    held for each whole operation        │
    │   _movies    {1: Movie(...), 3: Movie(...)}                          │
    │   _next_id   4                 only ever increases                   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Invariants:
- every key equals the id of its value
- ids are never reused, even after delete
- nothing slow happens under the lock: JSON decoding and socket I/O are
  done by the caller before or after

Each server builds its own store (or receives one), so tests can run
several independent instances side by side.

=============================================================================
"""

from typing import Any, Dict, List
import logging
import threading

from .models import Movie


logger = logging.getLogger(__name__)


class MovieNotFoundError(KeyError):
    """Raised when an id is not in the store."""

    def __init__(self, movie_id: int):
        super().__init__(movie_id)
        self.movie_id = movie_id

    def __str__(self) -> str:
        return f"Movie {self.movie_id} not found"


class MovieStore:
    """Thread-safe in-memory store of movie records."""

    def __init__(self) -> None:
        self._movies: Dict[int, Movie] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._movies)

    def list(self) -> List[Movie]:
        """All records, sorted by id."""
        with self._lock:
            return sorted(self._movies.values(), key=lambda movie: movie.id)

    def create(self, fields: Dict[str, Any]) -> Movie:
        """Insert a new record under the next id and return it."""
        with self._lock:
            movie = Movie.from_fields(self._next_id, fields)
            self._next_id += 1
            self._movies[movie.id] = movie
        logger.debug(f"Created movie {movie.id}")
        return movie

    def get(self, movie_id: int) -> Movie:
        with self._lock:
            try:
                return self._movies[movie_id]
            except KeyError:
                raise MovieNotFoundError(movie_id) from None

    def exists(self, movie_id: int) -> bool:
        with self._lock:
            return movie_id in self._movies

    def update(self, movie_id: int, fields: Dict[str, Any]) -> Movie:
        """
        Merge `fields` into an existing record.

        Fields not in `fields` keep their stored values and the id is
        untouched.

        Raises:
            MovieNotFoundError: If the id is not (or no longer) stored.
        """
        with self._lock:
            current = self._movies.get(movie_id)
            if current is None:
                raise MovieNotFoundError(movie_id)
            movie = current.merge(fields)
            self._movies[movie_id] = movie
        logger.debug(f"Updated movie {movie_id}: {sorted(fields)}")
        return movie

    def delete(self, movie_id: int) -> None:
        with self._lock:
            if self._movies.pop(movie_id, None) is None:
                raise MovieNotFoundError(movie_id)
        logger.debug(f"Deleted movie {movie_id}")
