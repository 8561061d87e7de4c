"""Tests for around filter composition."""

from __future__ import annotations

from lspace.filters import collect_filters, compose
from lspace.node import LSpace


def _recording(calls: list[str], name: str):
    def around(continuation):
        calls.append(f"{name}:before")
        try:
            return continuation()
        finally:
            calls.append(f"{name}:after")

    return around


class TestCompose:
    """Tests for compose()."""

    def test_no_filters_returns_continuation(self):
        """With no filters, the continuation itself should be returned."""

        def continuation():
            return 42

        assert compose([], continuation) is continuation

    def test_last_filter_is_outermost(self):
        """Filters later in the sequence should wrap earlier ones."""
        calls: list[str] = []
        chain = compose(
            [_recording(calls, "inner"), _recording(calls, "outer")],
            lambda: calls.append("body"),
        )
        chain()
        assert calls == [
            "outer:before",
            "inner:before",
            "body",
            "inner:after",
            "outer:after",
        ]

    def test_filter_can_replace_result(self):
        """A filter's return value should become the chain's result."""
        chain = compose([lambda c: c() * 2], lambda: 21)
        assert chain() == 42

    def test_filter_can_suppress_continuation(self):
        """A filter that never calls its continuation should skip the body."""
        calls: list[str] = []
        chain = compose([lambda c: "skipped"], lambda: calls.append("body"))
        assert chain() == "skipped"
        assert calls == []

    def test_chain_is_reusable(self):
        """A composed chain can be invoked more than once."""
        counter = []
        chain = compose([lambda c: c()], lambda: counter.append(1))
        chain()
        chain()
        assert counter == [1, 1]


class TestCollectFilters:
    """Tests for collect_filters()."""

    def test_nearest_filters_first(self):
        """Filters should be ordered nearest node first."""
        root = LSpace()
        child = LSpace({}, root)

        def f_root(c):
            return c()

        def f_child(c):
            return c()

        root.around_filter(f_root)
        child.around_filter(f_child)

        assert collect_filters(child, None) == [f_child, f_root]

    def test_stops_at_previous(self):
        """Nodes from previous upwards should be excluded."""
        root = LSpace()
        child = LSpace({}, root)
        root.around_filter(lambda c: c())

        def f_child(c):
            return c()

        child.around_filter(f_child)

        assert collect_filters(child, root) == [f_child]

    def test_unrelated_previous_collects_whole_chain(self):
        """If previous is not an ancestor, every filter should be collected."""
        root = LSpace()
        child = LSpace({}, root)

        def f_root(c):
            return c()

        root.around_filter(f_root)
        assert collect_filters(child, LSpace()) == [f_root]

    def test_entering_previous_collects_nothing(self):
        """Re-entering the already-active node should run no filters."""
        space = LSpace()
        space.around_filter(lambda c: c())
        assert collect_filters(space, space) == []
