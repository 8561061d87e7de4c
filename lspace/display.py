"""
Rich rendering of LSpace hierarchies for debugging.

Requires the 'rich' package: pip install lspace[rich]
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.text import Text
from rich.tree import Tree

from lspace.manager import get_default_manager

if TYPE_CHECKING:
    from lspace.manager import Manager
    from lspace.node import LSpace


def _label(space: LSpace) -> Text:
    label = Text("LSpace", style="bold cyan")
    if space.locals:
        bindings = ", ".join(f"{k!r}: {v!r}" for k, v in space.locals.items())
        label.append(f" {{{bindings}}}")
    else:
        label.append(" {}", style="dim")
    count = len(space.around_filters)
    if count:
        label.append(f"  [{count} filter{'s' if count != 1 else ''}]", style="yellow")
    return label


def render_hierarchy(space: LSpace) -> Tree:
    """
    Build a tree from the root down to space.

    Each level is one node of the hierarchy, showing its own bindings and
    the number of around filters registered on it.
    """
    chain = list(space.hierarchy())
    chain.reverse()

    tree = Tree(_label(chain[0]))
    branch = tree
    for node in chain[1:]:
        branch = branch.add(_label(node))
    return tree


def print_hierarchy(
    space: LSpace | None = None,
    console: Console | None = None,
    manager: Manager | None = None,
) -> None:
    """Print the hierarchy of space (default: the current LSpace)."""
    if space is None:
        space = (manager or get_default_manager()).current()
    (console or Console()).print(render_hierarchy(space))
