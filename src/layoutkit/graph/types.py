"""Value types shared by the layered graph layout phases."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

NT = TypeVar("NT", bound=Hashable)

Position = tuple[float, float]

# Geometry defaults (top-to-bottom layout, arbitrary length units).
DEFAULT_NODE_WIDTH: float = 100.0
DEFAULT_NODE_HEIGHT: float = 50.0
DEFAULT_LAYER_SPACING: float = 80.0  # vertical gap between adjacent layers
DEFAULT_NODE_SPACING: float = 50.0  # horizontal gap between nodes in a layer

CROSSING_ITERATIONS: int = 24  # fixed number of down/up barycenter sweeps


class EdgeRouting(Enum):
    """How waypoints between routed nodes are joined."""

    DIRECT = "direct"
    RECTILINEAR = "rectilinear"


@dataclass(frozen=True)
class LayoutConfig:
    """Geometry settings fixed for the lifetime of a layout engine."""

    node_width: float = DEFAULT_NODE_WIDTH
    node_height: float = DEFAULT_NODE_HEIGHT
    layer_spacing: float = DEFAULT_LAYER_SPACING
    node_spacing: float = DEFAULT_NODE_SPACING
    edge_routing: EdgeRouting = EdgeRouting.DIRECT

    def __post_init__(self) -> None:
        if self.node_width < 0 or self.node_height < 0:
            raise ValueError(f"Node size must be non-negative, got {self.node_width}x{self.node_height}")
        if self.layer_spacing < 0 or self.node_spacing < 0:
            raise ValueError("Spacing must be non-negative")


@dataclass(frozen=True)
class DummyId:
    """Identity of a synthetic node placed on an intermediate layer of a long edge.

    Kept as its own type so it can never compare equal to a caller's node value.
    """

    index: int

    def __str__(self) -> str:
        return f"dummy_{self.index}"


@dataclass(eq=False)
class SNode(Generic[NT]):
    """A node of the layered graph, scoped to a single layout run.

    Hashes by identity: two SNodes are the same vertex only if they are the
    same object. ``pos_in_layer`` is rewritten by crossing reduction.
    """

    node: NT | DummyId
    layer: int
    pos_in_layer: int = 0

    @property
    def is_dummy(self) -> bool:
        return isinstance(self.node, DummyId)

    def __repr__(self) -> str:
        return f"SNode({self.node}, layer={self.layer}, pos={self.pos_in_layer})"


@dataclass
class LayoutResult(Generic[NT]):
    """Output of a layout run.

    Attributes:
        node_positions: Top-left position of every input node.
        edge_routes: Waypoints of every input edge, source first, endpoint-inclusive.
        total_width: Width of the widest layer.
        total_height: Distance from the top of the first layer to the bottom of the last.
    """

    node_positions: dict[NT, Position] = field(default_factory=dict)
    edge_routes: dict[tuple[NT, NT], list[Position]] = field(default_factory=dict)
    total_width: float = 0.0
    total_height: float = 0.0
