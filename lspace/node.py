"""
LSpace: A node in the logical execution context hierarchy.

Each node holds:
- Local key/value bindings (only ever written through the node itself)
- A parent link (fixed at construction, None for roots)
- Around filters registered on the node

Lookups walk the parent chain, so a child sees every binding of its
ancestors unless it shadows the key locally.
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING, Any, Callable, Iterator, Mapping

from lspace.filters import AroundFilter

if TYPE_CHECKING:
    from lspace.manager import Manager


class LSpace:
    """
    A context node with local bindings, a parent, and around filters.

    Nodes are normally created through a Manager (clean, with_, fork), but
    can be constructed directly and held as a long-lived handle for later
    Manager.enter calls.

    Example:
        job_space = LSpace({"job_id": 7})
        manager.enter(job_space, run_job)
    """

    def __init__(
        self,
        values: Mapping[Any, Any] | None = None,
        parent: LSpace | None = None,
    ) -> None:
        """
        Initialize the node.

        Args:
            values: Initial local bindings (copied).
            parent: The parent node, or None for a root.
        """
        if parent is not None and not isinstance(parent, LSpace):
            raise TypeError(f"parent must be an LSpace, got {type(parent).__name__}")
        self._locals: dict[Any, Any] = dict(values or {})
        self._parent = parent
        self._filters: list[AroundFilter] = []

    @property
    def parent(self) -> LSpace | None:
        """The parent node, or None for a root."""
        return self._parent

    @property
    def locals(self) -> Mapping[Any, Any]:
        """This node's own bindings (read-only view)."""
        return _ReadOnlyView(self._locals)

    @property
    def around_filters(self) -> list[AroundFilter]:
        """A copy of the filters registered on this node, in order."""
        return list(self._filters)

    @property
    def depth(self) -> int:
        """Number of ancestors above this node (0 for a root)."""
        return sum(1 for _ in self.hierarchy()) - 1

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, key: Any, default: Any = None) -> Any:
        """
        Look up a key in this node or its ancestors.

        Args:
            key: The key to look up.
            default: Returned when no node in the chain binds the key.

        Returns:
            The nearest binding for key, or default.
        """
        for node in self.hierarchy():
            if key in node._locals:
                return node._locals[key]
        return default

    def set(self, key: Any, value: Any) -> None:
        """Bind key to value on this node only."""
        self._locals[key] = value

    def keys(self) -> set[Any]:
        """Return every key visible from this node."""
        result: set[Any] = set()
        for node in self.hierarchy():
            result.update(node._locals)
        return result

    def as_dict(self) -> dict[Any, Any]:
        """Return a flattened copy of the visible bindings (nearest wins)."""
        merged: dict[Any, Any] = {}
        for node in reversed(list(self.hierarchy())):
            merged.update(node._locals)
        return merged

    def hierarchy(self) -> Iterator[LSpace]:
        """Yield this node, then its parent, and so on up to the root."""
        node: LSpace | None = self
        while node is not None:
            yield node
            node = node._parent

    def __getitem__(self, key: Any) -> Any:
        for node in self.hierarchy():
            if key in node._locals:
                return node._locals[key]
        raise KeyError(key)

    def __setitem__(self, key: Any, value: Any) -> None:
        self.set(key, value)

    def __contains__(self, key: Any) -> bool:
        return any(key in node._locals for node in self.hierarchy())

    # ------------------------------------------------------------------
    # Filters and closures
    # ------------------------------------------------------------------

    def around_filter(self, fn: AroundFilter) -> AroundFilter:
        """
        Register an around filter on this node.

        The filter is called with a zero-argument continuation whenever this
        node (or a descendant) is entered from outside it. It may run code
        before and after the continuation, translate its errors, or skip it.
        Whatever the filter returns becomes the result of the activation.

        Returns fn unchanged, so this can be used as a decorator:

            @space.around_filter
            def timed(continuation):
                start = time.monotonic()
                try:
                    return continuation()
                finally:
                    log_duration(time.monotonic() - start)
        """
        if not callable(fn):
            raise TypeError(f"around filter must be callable, got {type(fn).__name__}")
        self._filters.append(fn)
        return fn

    def wrap(self, fn: Callable[..., Any], manager: Manager | None = None) -> Callable[..., Any]:
        """
        Create a closure that re-enters this node whenever it is called.

        Args:
            fn: The callable to wrap.
            manager: Manager to enter through. Defaults to the process
                default manager.

        Returns:
            A callable with fn's signature that runs fn inside this node,
            including its around filters, on whichever thread calls it.
        """
        if manager is None:
            from lspace.manager import get_default_manager

            manager = get_default_manager()

        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            return manager.enter(self, fn, *args, **kwargs)

        return wrapper

    def __repr__(self) -> str:
        return f"LSpace({self._locals!r}, depth={self.depth})"


class _ReadOnlyView(Mapping[Any, Any]):
    """Mapping proxy over a node's locals."""

    def __init__(self, data: dict[Any, Any]) -> None:
        self._data = data

    def __getitem__(self, key: Any) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[Any]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return repr(self._data)
