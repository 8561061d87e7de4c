"""
Module-level functions operating on the default Manager.

These are re-exported from the lspace package:

    import lspace

    lspace.with_({"request_id": rid}, handle, request)
    lspace.get("request_id")
"""

from __future__ import annotations

import builtins
from typing import Any, Callable, Mapping

from lspace.filters import AroundFilter
from lspace.manager import get_default_manager
from lspace.node import LSpace


def current() -> LSpace:
    """Return the current LSpace."""
    return get_default_manager().current()


def clean(fn: Callable[..., Any] | None = None, *args: Any, **kwargs: Any) -> Any:
    """Create a clean root LSpace, optionally running fn inside it."""
    return get_default_manager().clean(fn, *args, **kwargs)


def with_(overrides: Mapping[Any, Any] | None, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Run fn in a child of the current LSpace with the given bindings."""
    return get_default_manager().with_(overrides, fn, *args, **kwargs)


def enter(space: LSpace, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Activate space for the duration of fn."""
    return get_default_manager().enter(space, fn, *args, **kwargs)


def fork() -> None:
    """Replace the current LSpace with a fresh child of itself."""
    get_default_manager().fork()


def preserve(fn: Callable[..., Any]) -> Callable[..., Any]:
    """Wrap fn so that it runs in the current LSpace when called later."""
    return get_default_manager().preserve(fn)


def get(key: Any, default: Any = None) -> Any:
    """Look up key in the current LSpace or its ancestors."""
    return get_default_manager().get(key, default)


def set(key: Any, value: Any) -> None:
    """Bind key on the current LSpace."""
    get_default_manager().set(key, value)


def keys() -> builtins.set[Any]:
    """Return every key visible from the current LSpace."""
    return get_default_manager().keys()


def around_filter(fn: AroundFilter) -> AroundFilter:
    """Register an around filter on the current LSpace."""
    return get_default_manager().around_filter(fn)
