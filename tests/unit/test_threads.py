"""Tests for ContextThread and ContextExecutor."""

from __future__ import annotations

import threading

from lspace.manager import Manager
from lspace.node import LSpace
from lspace.threads import ContextExecutor, ContextThread


class TestContextThread:
    """Tests for ContextThread."""

    def test_thread_runs_in_creator_context(self, manager: Manager):
        """The target should see bindings active when the thread was created."""
        seen = {}

        def worker():
            seen["user_id"] = manager.get("user_id")

        thread = manager.with_({"user_id": 6}, ContextThread, target=worker, manager=manager)
        thread.start()
        thread.join(timeout=5)

        assert seen == {"user_id": 6}

    def test_thread_runs_captured_filters(self, manager: Manager):
        """Filters of the captured node should wrap the thread's run()."""
        calls: list[str] = []
        space = LSpace()
        space.around_filter(lambda c: (calls.append("filter"), c())[1])

        thread = manager.enter(
            space,
            lambda: ContextThread(target=lambda: calls.append("body"), manager=manager),
        )
        calls.clear()
        thread.start()
        thread.join(timeout=5)

        assert calls == ["filter", "body"]

    def test_thread_writes_stay_in_thread_scope(self, manager: Manager):
        """set() in the thread lands on the captured node, not the creator's root."""
        done = threading.Event()
        space = LSpace({"a": 1})

        def worker():
            manager.fork()
            manager.set("a", 2)
            done.set()

        thread = manager.enter(space, ContextThread, target=worker, manager=manager)
        thread.start()
        thread.join(timeout=5)

        assert done.is_set()
        assert space.get("a") == 1
        assert manager.get("a") is None


class TestContextExecutor:
    """Tests for ContextExecutor."""

    def test_submit_preserves_context(self, manager: Manager):
        """Submitted work should run with the submitter's bindings."""
        with ContextExecutor(max_workers=2, manager=manager) as pool:
            future = manager.with_({"job_id": 7}, pool.submit, manager.get, "job_id")
            assert future.result(timeout=5) == 7

    def test_map_uses_submit(self, manager: Manager):
        """map() should also carry context to workers."""

        def tagged(x):
            return f"{manager.get('tag')}:{x}"

        with ContextExecutor(max_workers=2, manager=manager) as pool:
            results = manager.with_({"tag": "t"}, lambda: list(pool.map(tagged, [1, 2, 3])))

        assert results == ["t:1", "t:2", "t:3"]

    def test_different_submitters_keep_their_context(self, manager: Manager):
        """Each submission captures the context current at submit time."""
        with ContextExecutor(max_workers=2, manager=manager) as pool:
            first = manager.with_({"n": 1}, pool.submit, manager.get, "n")
            second = manager.with_({"n": 2}, pool.submit, manager.get, "n")
            assert (first.result(timeout=5), second.result(timeout=5)) == (1, 2)

    def test_worker_exception_surfaces_from_future(self, manager: Manager):
        """Errors in submitted work should be delivered through the future."""

        def fail():
            raise ValueError("worker failed")

        with ContextExecutor(max_workers=1, manager=manager) as pool:
            future = pool.submit(fail)
            assert isinstance(future.exception(timeout=5), ValueError)
