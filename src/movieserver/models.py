"""
=============================================================================
MOVIE RECORD AND JSON CODEC
=============================================================================

The only entity the server knows about:

    {"id": 1, "title": "Inception", "director": "Nolan", "year": 2010}

Decoding follows a field-by-field merge model:

    ┌─────────────────────────────────────────────────────────────────────┐
    │   body                         decode_movie_fields(body)            │
    ├─────────────────────────────────────────────────────────────────────┤
    │   {"year": 2011}               {"year": 2011}                       │
    │   {"title": null}              {}            (null = not present)   │
    │   {"id": 9, "title": "x"}      {"title": "x"} (id checked, dropped) │
    │   {"rating": 5}                {}            (unknown keys ignored) │
    │   {"Year": 2011}               {"year": 2011} (keys match any case) │
    │   {"title": "x"} junk          {"title": "x"} (rest is not read)    │
    │   null                         {}                                   │
    │   {"year": "2010"}             InvalidMovieError                    │
    │   {"year": 1e3}                InvalidMovieError                    │
    │   [1, 2]  /  ""  /  {bad       InvalidMovieError                    │
    └─────────────────────────────────────────────────────────────────────┘

The returned dict only holds the fields the client actually sent, so the
same result drives both create (missing fields take defaults) and update
(missing fields keep their stored values).

=============================================================================
"""

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict
import json


INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

# Fields a client may set. "id" is accepted in payloads but never applied.
STRING_FIELDS = ("title", "director")
INT_FIELDS = ("year",)

JSON_WHITESPACE = " \t\n\r"

# Integer literal too long to fit any movie field
_OVERSIZED = object()


class InvalidMovieError(ValueError):
    """Raised when a request body can't be decoded into movie fields."""


@dataclass(frozen=True)
class Movie:
    """
    A stored movie record.

    Frozen: the store hands these out freely since nobody can mutate
    a record behind the store's lock.
    """

    id: int
    title: str = ""
    director: str = ""
    year: int = 0

    @classmethod
    def from_fields(cls, movie_id: int, fields: Dict[str, Any]) -> "Movie":
        """Build a new record; fields the client omitted get defaults."""
        return cls(id=movie_id, **fields)

    def merge(self, fields: Dict[str, Any]) -> "Movie":
        """Copy of this record with `fields` overwritten. The id never changes."""
        return replace(self, **fields)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _check_int(name: str, value: Any) -> int:
    if value is _OVERSIZED:
        raise InvalidMovieError(f"{name} is out of range")
    # bool is a subclass of int, but true/false are not JSON numbers
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidMovieError(f"{name} must be an integer")
    if not INT64_MIN <= value <= INT64_MAX:
        raise InvalidMovieError(f"{name} is out of range")
    return value


def _check_str(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise InvalidMovieError(f"{name} must be a string")
    return value


def _parse_int(literal: str) -> Any:
    # "-9223372036854775808" is the longest int64 literal
    if len(literal) > 20:
        return _OVERSIZED
    return int(literal)


class _Members(list):
    """A JSON object as (key, value) pairs in document order, repeats kept."""


_decoder = json.JSONDecoder(parse_int=_parse_int, object_pairs_hook=_Members)


def _first_json_value(text: str) -> Any:
    """Decode the first JSON value in `text`; whatever follows it is ignored."""
    return _decoder.raw_decode(text.lstrip(JSON_WHITESPACE))[0]


def decode_movie_fields(body: bytes) -> Dict[str, Any]:
    """
    Decode a request body into the movie fields it sets.

    Keys are matched to fields case-insensitively and applied in order,
    so with repeated keys the last non-null value wins.

    Args:
        body: Raw request body.

    Returns:
        Dict with a subset of "title", "director", "year". A supplied
        "id" is type-checked and then discarded.

    Raises:
        InvalidMovieError: Body is empty, not UTF-8, not JSON, not an
            object (or null), or a field has the wrong JSON type.
    """
    try:
        data = _first_json_value(body.decode("utf-8"))
    except (UnicodeDecodeError, ValueError, RecursionError) as e:
        # ValueError covers JSONDecodeError; RecursionError is deep nesting
        raise InvalidMovieError(f"Invalid JSON body: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, _Members):
        raise InvalidMovieError("Movie must be a JSON object")

    fields: Dict[str, Any] = {}
    for key, value in data:
        name = key.casefold()
        if value is None:
            continue
        if name == "id":
            _check_int("id", value)
        elif name in STRING_FIELDS:
            fields[name] = _check_str(name, value)
        elif name in INT_FIELDS:
            fields[name] = _check_int(name, value)

    return fields
