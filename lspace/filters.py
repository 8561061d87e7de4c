"""
Around filter composition.

An around filter is a callable taking a zero-argument continuation. This
module folds an ordered list of filters around a continuation, and assembles
that list from a node hierarchy on activation.
"""

from __future__ import annotations

import functools
from itertools import takewhile
from typing import TYPE_CHECKING, Any, Callable, Iterable

if TYPE_CHECKING:
    from lspace.node import LSpace

# A filter receives the continuation and returns the activation's result
AroundFilter = Callable[[Callable[[], Any]], Any]


def compose(filters: Iterable[AroundFilter], continuation: Callable[[], Any]) -> Callable[[], Any]:
    """
    Fold filters around a continuation.

    The first filter wraps the continuation directly, the second wraps that,
    and so on: the last filter in the sequence ends up outermost.

    Args:
        filters: Filters in innermost-first order.
        continuation: The zero-argument callable at the centre.

    Returns:
        A zero-argument callable that runs the whole chain.
    """
    return functools.reduce(_wrap_one, filters, continuation)


def _wrap_one(inner: Callable[[], Any], around: AroundFilter) -> Callable[[], Any]:
    def wrapped() -> Any:
        return around(inner)

    return wrapped


def collect_filters(node: LSpace, previous: LSpace | None) -> list[AroundFilter]:
    """
    Gather the filters to run when entering node while previous is active.

    Walks node's hierarchy up to (not including) previous, so filters of
    nodes that are already active are not run again. Nearest node's filters
    come first.
    """
    filters: list[AroundFilter] = []
    for space in takewhile(lambda n: n is not previous, node.hierarchy()):
        filters.extend(space.around_filters)
    return filters
