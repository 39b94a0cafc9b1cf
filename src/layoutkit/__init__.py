"""layoutkit: layered graph layout and multi-pane layout trees as pure data."""

from __future__ import annotations

from layoutkit.errors import (
    InvalidDropTargetError,
    LayoutError,
    LayoutTreeError,
    NodeNotFoundError,
    UnknownNodeError,
)
from layoutkit.graph import EdgeRouting, LayoutConfig, LayoutResult, SugiyamaLayout, layout_graph

__version__ = "0.1.0"

__all__ = [
    "EdgeRouting",
    "InvalidDropTargetError",
    "LayoutConfig",
    "LayoutError",
    "LayoutResult",
    "LayoutTreeError",
    "NodeNotFoundError",
    "SugiyamaLayout",
    "UnknownNodeError",
    "layout_graph",
]
