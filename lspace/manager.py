"""
Manager: Per-thread-of-control current context and the operations on it.

The Manager owns a context variable holding the current LSpace for each
thread (or asyncio task) and provides:
- clean / with_ / fork: create nodes
- enter: activate a node for a call, running its around filters
- preserve: capture the current node into a closure
- get / set / keys / around_filter: delegate to the current node

Activation is strictly nested: the previous node is restored when enter
returns or raises. fork is the one unscoped transition.
"""

from __future__ import annotations

import asyncio
import contextvars
import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Generator, Mapping

from lspace.filters import AroundFilter, collect_filters, compose
from lspace.node import LSpace

logger = logging.getLogger(__name__)


class Manager:
    """
    Tracks the current LSpace per thread of control.

    Each Manager has its own context variable, so independent managers do
    not see each other's state. Most code uses the default manager through
    the module-level functions in lspace.api.
    """

    def __init__(self, name: str = "lspace") -> None:
        """
        Initialize the manager.

        Args:
            name: Name of the underlying context variable (for debugging).
        """
        self._name = name
        # (owner, node): copies inherited by another task or thread are ignored
        self._current: contextvars.ContextVar[tuple[object, LSpace] | None] = (
            contextvars.ContextVar(name, default=None)
        )

    @staticmethod
    def _owner() -> object:
        """Identify the running thread of control: the asyncio task, else the thread."""
        try:
            task = asyncio.current_task()
        except RuntimeError:
            task = None
        return task if task is not None else threading.get_ident()

    def _store(self, space: LSpace) -> None:
        self._current.set((self._owner(), space))

    def current(self) -> LSpace:
        """
        Return the active node, creating an empty root on first access.

        A slot inherited from the thread or task that spawned this one does
        not count: context only crosses that boundary through preserve.
        """
        slot = self._current.get()
        if slot is not None and slot[0] == self._owner():
            return slot[1]
        space = LSpace()
        self._store(space)
        return space

    @contextmanager
    def _activated(self, space: LSpace) -> Generator[LSpace, None, None]:
        """Make space current, restoring the previous node on exit."""
        previous = self.current()
        self._store(space)
        try:
            yield previous
        finally:
            self._store(previous)

    # ------------------------------------------------------------------
    # Creation and activation
    # ------------------------------------------------------------------

    def clean(self, fn: Callable[..., Any] | None = None, *args: Any, **kwargs: Any) -> Any:
        """
        Create a root LSpace that inherits nothing from the current one.

        Args:
            fn: Optional callable to run inside the new root.
            *args: Positional arguments for fn.
            **kwargs: Keyword arguments for fn.

        Returns:
            The new node when fn is None, otherwise fn's result.
        """
        space = LSpace()
        if fn is None:
            return space
        return self.enter(space, fn, *args, **kwargs)

    def with_(
        self,
        overrides: Mapping[Any, Any] | None,
        fn: Callable[..., Any],
        *args: Any,
        **kwargs: Any,
    ) -> Any:
        """
        Run fn in a child of the current LSpace with the given bindings.

        Keys not in overrides are inherited from the current node.

        Example:
            manager.with_({"user_id": 6}, handle_request, request)

        Args:
            overrides: Bindings for the new child (copied).
            fn: Callable to run inside the child.
            *args: Positional arguments for fn.
            **kwargs: Keyword arguments for fn.

        Returns:
            fn's result (as passed through any around filters).
        """
        return self.enter(LSpace(overrides, self.current()), fn, *args, **kwargs)

    def enter(self, space: LSpace, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """
        Activate space for the duration of fn.

        Around filters of space and of its ancestors that were not already
        active run around the call, nearest filters innermost. The previous
        node is restored afterwards, even if fn or a filter raises.

        Args:
            space: The node to activate.
            fn: Callable to run.
            *args: Positional arguments for fn.
            **kwargs: Keyword arguments for fn.

        Returns:
            The result of the composed filter chain (fn's result unless a
            filter replaces it).

        Raises:
            TypeError: If space is not an LSpace.
        """
        if not isinstance(space, LSpace):
            raise TypeError(f"can only enter an LSpace, got {type(space).__name__}")

        def continuation() -> Any:
            return fn(*args, **kwargs)

        with self._activated(space) as previous:
            filters = collect_filters(space, previous)
            if filters:
                logger.debug("Entering %r with %d around filter(s)", space, len(filters))
            return compose(filters, continuation)()

    def fork(self) -> None:
        """
        Replace the current LSpace with a fresh child of itself.

        Values set afterwards no longer affect the previous node. This is not
        undone by the manager, so around filters may see a different current
        node when their continuation returns than when it started.
        """
        space = LSpace(parent=self.current())
        logger.debug("Forking into %r", space)
        self._store(space)

    def preserve(self, fn: Callable[..., Any]) -> Callable[..., Any]:
        """
        Capture the current LSpace into a closure.

        Calling the returned function later, on any thread, re-enters the
        captured node (with its around filters) around fn. Code that defers
        work (queues, callbacks, thread pools) should pass it through here.

        Example:
            queue.put(manager.preserve(process_item))
        """
        return self.current().wrap(fn, manager=self)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def get(self, key: Any, default: Any = None) -> Any:
        """Look up key in the current LSpace or its ancestors."""
        return self.current().get(key, default)

    def set(self, key: Any, value: Any) -> None:
        """Bind key on the current LSpace."""
        self.current().set(key, value)

    def keys(self) -> set[Any]:
        """Return every key visible from the current LSpace."""
        return self.current().keys()

    def around_filter(self, fn: AroundFilter) -> AroundFilter:
        """Register an around filter on the current LSpace."""
        return self.current().around_filter(fn)

    def __repr__(self) -> str:
        return f"Manager(name={self._name!r})"


_default_manager = Manager()


def get_default_manager() -> Manager:
    """Return the process-wide default Manager."""
    return _default_manager
