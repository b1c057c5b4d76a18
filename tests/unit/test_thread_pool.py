"""
Unit tests for ThreadPool.
"""

import threading

import pytest

from movieserver.core.thread_pool import ThreadPool


@pytest.fixture
def pool():
    pool = ThreadPool(min_workers=2, max_workers=4, queue_size=10, idle_timeout=0.1)
    pool.start()
    yield pool
    pool.shutdown(wait=True, timeout=5.0)


class TestThreadPool:

    def test_runs_tasks(self, pool: ThreadPool):
        done = threading.Event()
        results = []

        def task(value, *, scale):
            results.append(value * scale)
            done.set()

        assert pool.submit(task, 21, scale=2) is True
        assert done.wait(timeout=5.0)
        assert results == [42]

    def test_failing_task_keeps_worker_alive(self, pool: ThreadPool):
        done = threading.Event()

        def boom():
            raise RuntimeError("boom")

        pool.submit(boom)
        pool.submit(done.set)

        assert done.wait(timeout=5.0)
        assert pool.active_workers >= 2

    def test_full_queue_rejects(self):
        pool = ThreadPool(min_workers=1, max_workers=1, queue_size=1, idle_timeout=0.1)
        pool.start()
        release = threading.Event()
        started = threading.Event()

        def block():
            started.set()
            release.wait(timeout=5.0)

        try:
            assert pool.submit(block)
            assert started.wait(timeout=5.0)
            assert pool.submit(block)        # Fills the queue
            assert pool.submit(block) is False
        finally:
            release.set()
            pool.shutdown(wait=True, timeout=5.0)

    def test_submit_before_start(self):
        with pytest.raises(RuntimeError):
            ThreadPool().submit(print)

    def test_shutdown_stops_workers(self):
        pool = ThreadPool(min_workers=3, max_workers=3, idle_timeout=0.1)
        pool.start()
        assert pool.stats["workers"]["total"] == 3

        pool.shutdown()

        assert pool.stats["workers"]["total"] == 0
        with pytest.raises(RuntimeError):
            pool.submit(print)
