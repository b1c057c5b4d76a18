"""
Unit tests for MovieStore.
"""

import threading

import pytest

from movieserver.models import Movie
from movieserver.store import MovieNotFoundError, MovieStore


class TestMovieStore:
    """Tests for MovieStore CRUD."""

    def test_starts_empty(self, store: MovieStore):
        assert len(store) == 0
        assert store.list() == []

    def test_create_assigns_increasing_ids(self, store: MovieStore):
        ids = [store.create({"title": f"Movie {n}"}).id for n in range(5)]
        assert ids == [1, 2, 3, 4, 5]

    def test_create_then_get(self, store: MovieStore):
        movie = store.create({"title": "Inception", "director": "Nolan", "year": 2010})

        assert movie == Movie(id=1, title="Inception", director="Nolan", year=2010)
        assert store.get(1) == movie

    def test_ids_are_not_reused(self, store: MovieStore):
        store.create({})
        store.create({})
        store.delete(2)

        assert store.create({}).id == 3

    def test_get_missing(self, store: MovieStore):
        with pytest.raises(MovieNotFoundError) as exc_info:
            store.get(99)

        assert exc_info.value.movie_id == 99
        assert str(exc_info.value) == "Movie 99 not found"

    def test_not_found_is_key_error(self):
        assert issubclass(MovieNotFoundError, KeyError)

    def test_exists(self, store: MovieStore):
        store.create({})
        assert store.exists(1)
        assert not store.exists(2)

    def test_update_merges(self, store: MovieStore):
        store.create({"title": "Inception", "director": "Nolan", "year": 2010})

        updated = store.update(1, {"year": 2011})

        assert updated == Movie(id=1, title="Inception", director="Nolan", year=2011)
        assert store.get(1) == updated

    def test_update_with_no_fields(self, store: MovieStore):
        original = store.create({"title": "Heat"})
        assert store.update(1, {}) == original

    def test_update_missing(self, store: MovieStore):
        with pytest.raises(MovieNotFoundError):
            store.update(1, {"title": "Ghost"})
        assert len(store) == 0

    def test_delete(self, store: MovieStore):
        store.create({})
        store.delete(1)

        assert not store.exists(1)
        with pytest.raises(MovieNotFoundError):
            store.get(1)

    def test_delete_twice(self, store: MovieStore):
        store.create({})
        store.delete(1)

        with pytest.raises(MovieNotFoundError):
            store.delete(1)

    def test_list_after_creates_and_deletes(self, store: MovieStore):
        for n in range(6):
            store.create({"title": f"Movie {n}"})
        store.delete(2)
        store.delete(5)

        movies = store.list()

        assert len(movies) == 4
        assert [movie.id for movie in movies] == [1, 3, 4, 6]

    def test_list_is_a_snapshot(self, store: MovieStore):
        store.create({})
        snapshot = store.list()
        store.create({})

        assert len(snapshot) == 1


class TestMovieStoreConcurrency:
    """The store is shared by every worker thread."""

    def test_concurrent_creates_get_unique_ids(self, store: MovieStore):
        ids = []
        ids_lock = threading.Lock()

        def create_many():
            for _ in range(100):
                movie = store.create({"title": "x"})
                with ids_lock:
                    ids.append(movie.id)

        threads = [threading.Thread(target=create_many) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(ids) == list(range(1, 801))
        assert len(store) == 800

    def test_concurrent_updates_and_deletes(self, store: MovieStore):
        for _ in range(50):
            store.create({"year": 0})

        errors = []

        def updater():
            for movie_id in range(1, 51):
                try:
                    store.update(movie_id, {"year": 1})
                except MovieNotFoundError:
                    pass
                except Exception as e:  # pragma: no cover
                    errors.append(e)

        def deleter():
            for movie_id in range(1, 51, 2):
                store.delete(movie_id)

        threads = [threading.Thread(target=updater) for _ in range(4)]
        threads.append(threading.Thread(target=deleter))
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert [movie.id for movie in store.list()] == list(range(2, 51, 2))
        assert all(movie.year == 1 for movie in store.list())
