"""Declarative construction of layout trees.

Example::

    layout = split(
        SplitOrientation.HORIZONTAL,
        (1.0, pane("Pane 1")),
        (2.0, tabbed(pane("Tab 1"), pane("Tab 2"))),
    )

A bare pane given as a split child is wrapped in its own tabbed container.
Nodes without an explicit id take the next generated one.
"""

from __future__ import annotations

from typing import Any

from layoutkit.multipane.nodes import LayoutNode, Pane, Split, SplitOrientation, Tabbed, generate_id


def pane(title: str, id: str | None = None, content: Any = None) -> Pane:
    return Pane(title=title, content=content, id=generate_id() if id is None else id)


def tabbed(*panes: Pane, id: str | None = None, selected_tab_index: int = 0) -> Tabbed:
    for child in panes:
        if not isinstance(child, Pane):
            raise TypeError(f"tabbed() children must be panes, got {type(child).__name__}")
    return Tabbed(children=panes, id=generate_id() if id is None else id, selected_tab_index=selected_tab_index)


def split(
    orientation: SplitOrientation,
    *children: tuple[float, LayoutNode | Pane],
    id: str | None = None,
) -> Split:
    """Build a split from ``(weight, node)`` pairs."""
    nodes: list[LayoutNode] = []
    weights: list[float] = []
    for weight, child in children:
        if weight <= 0:
            raise ValueError(f"Child weight must be positive, got {weight}")
        if isinstance(child, Pane):
            child = Tabbed(children=(child,))
        nodes.append(child)
        weights.append(weight)
    return Split(
        orientation=orientation,
        children=tuple(nodes),
        weights=tuple(weights),
        id=generate_id() if id is None else id,
    )
