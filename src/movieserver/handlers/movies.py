"""
=============================================================================
MOVIE RESOURCE HANDLERS
=============================================================================

The five operations of the movie API, bound to one MovieStore.

    ┌───────────┬─────────────────┬───────────────┬───────────────────────┐
    │ Method    │ Path            │ Handler       │ Success               │
    ├───────────┼─────────────────┼───────────────┼───────────────────────┤
    │ GET       │ /movies         │ list_movies   │ 200 + array           │
    │ POST      │ /movies         │ create_movie  │ 201 + object          │
    │ GET       │ /movies/{id}    │ get_movie     │ 200 + object          │
    │ PUT       │ /movies/{id}    │ update_movie  │ 200 + object          │
    │ DELETE    │ /movies/{id}    │ delete_movie  │ 204                   │
    └───────────┴─────────────────┴───────────────┴───────────────────────┘

Errors are plain text:

    400 "invalid movie ID"   id is not a decimal integer (router converter)
    400 "Invalid request"    body is not a movie JSON object
    404 "Movie not found"    id is not in the store
    405 "Method not allowed" method not listed above for the path

=============================================================================
"""

from typing import Optional
import logging
import re

from ..http import (
    HTTPRequest,
    HTTPResponse,
    HTTPStatus,
    PathParamError,
    Router,
    created,
    error,
    no_content,
    ok,
)
from ..models import INT64_MAX, INT64_MIN, InvalidMovieError, decode_movie_fields
from ..store import MovieNotFoundError, MovieStore


logger = logging.getLogger(__name__)


COLLECTION_PATH = "/movies"
ITEM_PATH = "/movies/*id"

INVALID_ID = "invalid movie ID"
INVALID_REQUEST = "Invalid request"
MOVIE_NOT_FOUND = "Movie not found"

_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_movie_id(raw: str) -> int:
    """
    Router converter for the {id} segment.

    Accepts a decimal integer with an optional sign and nothing else:
    "7" and "-7" parse, while "", "abc", "7abc" and "7/extra" do not,
    nor does "7" followed by a newline. Leading zeros are allowed.

    Raises:
        PathParamError: With the "invalid movie ID" message.
    """
    if not _ID_PATTERN.fullmatch(raw):
        raise PathParamError(INVALID_ID)
    # More than 19 significant digits is never an int64
    if len(raw.lstrip("+-").lstrip("0")) > 19:
        raise PathParamError(INVALID_ID)
    movie_id = int(raw)
    if not INT64_MIN <= movie_id <= INT64_MAX:
        raise PathParamError(INVALID_ID)
    return movie_id


def movie_not_found() -> HTTPResponse:
    return error(HTTPStatus.NOT_FOUND, MOVIE_NOT_FOUND)


def invalid_request() -> HTTPResponse:
    return error(HTTPStatus.BAD_REQUEST, INVALID_REQUEST)


class MovieHandler:
    """
    Request handlers for the movie resource.

    Holds the store explicitly rather than reaching for a global, so
    every server (and every test) gets the store it was given.

    Usage:
        store = MovieStore()
        MovieHandler(store).register(server.router)
    """

    def __init__(self, store: MovieStore):
        self.store = store
        self.router: Optional[Router] = None

    def register(self, router: Router) -> None:
        """Add the movie routes and the id converter to `router`."""
        self.router = router
        router.converter("id", parse_movie_id)

        router.get(COLLECTION_PATH, name="list_movies")(self.list_movies)
        router.post(COLLECTION_PATH, name="create_movie")(self.create_movie)
        router.get(ITEM_PATH, name="get_movie")(self.get_movie)
        router.put(ITEM_PATH, name="update_movie")(self.update_movie)
        router.delete(ITEM_PATH, name="delete_movie")(self.delete_movie)

    # =========================================================================
    # COLLECTION: /movies
    # =========================================================================

    def list_movies(self, request: HTTPRequest) -> HTTPResponse:
        return ok([movie.to_dict() for movie in self.store.list()])

    def create_movie(self, request: HTTPRequest) -> HTTPResponse:
        """
        POST /movies

        The body is decoded before the store is touched; a supplied
        "id" is ignored and the store assigns the next one.
        """
        try:
            fields = decode_movie_fields(request.body)
        except InvalidMovieError as e:
            logger.debug(f"Rejected create body: {e}")
            return invalid_request()

        movie = self.store.create(fields)
        return created(movie.to_dict(), location=self.router.url_for("get_movie", id=movie.id))

    # =========================================================================
    # ITEM: /movies/{id}
    # =========================================================================

    def get_movie(self, request: HTTPRequest) -> HTTPResponse:
        try:
            movie = self.store.get(request.path_params["id"])
        except MovieNotFoundError:
            return movie_not_found()
        return ok(movie.to_dict())

    def update_movie(self, request: HTTPRequest) -> HTTPResponse:
        """
        PUT /movies/{id}

        =====================================================================
        ORDER OF CHECKS
        =====================================================================

        1. id not stored          → 404 (even if the body is garbage)
        2. body doesn't decode    → 400
        3. merge under the lock   → 404 if deleted since step 1

        Fields missing from the body keep their stored values.

        =====================================================================
        """
        movie_id = request.path_params["id"]
        if not self.store.exists(movie_id):
            return movie_not_found()

        try:
            fields = decode_movie_fields(request.body)
        except InvalidMovieError as e:
            logger.debug(f"Rejected update body for movie {movie_id}: {e}")
            return invalid_request()

        try:
            movie = self.store.update(movie_id, fields)
        except MovieNotFoundError:
            return movie_not_found()
        return ok(movie.to_dict())

    def delete_movie(self, request: HTTPRequest) -> HTTPResponse:
        try:
            self.store.delete(request.path_params["id"])
        except MovieNotFoundError:
            return movie_not_found()
        return no_content()
