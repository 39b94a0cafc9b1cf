"""Layered (Sugiyama) graph layout engine and its public API."""

from __future__ import annotations

from layoutkit.graph.sugiyama import (
    SugiyamaLayout,
    assign_coordinates,
    assign_layers,
    build_graph,
    build_layered_graph,
    count_crossings,
    find_back_edges,
    layout_graph,
    make_acyclic,
    rectilinear_path,
    reduce_crossings,
)
from layoutkit.graph.types import (
    CROSSING_ITERATIONS,
    DEFAULT_LAYER_SPACING,
    DEFAULT_NODE_HEIGHT,
    DEFAULT_NODE_SPACING,
    DEFAULT_NODE_WIDTH,
    DummyId,
    EdgeRouting,
    LayoutConfig,
    LayoutResult,
    Position,
    SNode,
)

__all__ = [
    "CROSSING_ITERATIONS",
    "DEFAULT_LAYER_SPACING",
    "DEFAULT_NODE_HEIGHT",
    "DEFAULT_NODE_SPACING",
    "DEFAULT_NODE_WIDTH",
    "DummyId",
    "EdgeRouting",
    "LayoutConfig",
    "LayoutResult",
    "Position",
    "SNode",
    "SugiyamaLayout",
    "assign_coordinates",
    "assign_layers",
    "build_graph",
    "build_layered_graph",
    "count_crossings",
    "find_back_edges",
    "layout_graph",
    "make_acyclic",
    "rectilinear_path",
    "reduce_crossings",
]
