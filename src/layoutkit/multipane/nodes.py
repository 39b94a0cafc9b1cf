"""Layout tree node types: Split / Tabbed containers and their Panes.

Nodes are frozen dataclasses. Edits never mutate a node; they rebuild the path
from the root to the changed node and share every untouched subtree.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class IdGenerator:
    """Thread-safe source of ``id0``, ``id1``, … node ids."""

    def __init__(self, prefix: str = "id") -> None:
        self.prefix = prefix
        self._next = 0
        self._lock = threading.Lock()

    def __call__(self) -> str:
        with self._lock:
            value = self._next
            self._next += 1
        return f"{self.prefix}{value}"

    def reset(self, start: int = 0) -> None:
        with self._lock:
            self._next = start


# Shared by every node created without an explicit id.
ID_GENERATOR = IdGenerator()


def generate_id() -> str:
    return ID_GENERATOR()


class SplitOrientation(Enum):
    """Horizontal lays children out in a row, Vertical in a column."""

    HORIZONTAL = "Horizontal"
    VERTICAL = "Vertical"


@dataclass(frozen=True)
class Pane:
    """A single content pane, shown as one tab of a Tabbed container.

    ``content`` is an opaque caller handle and takes no part in equality.
    """

    title: str
    content: Any = field(default=None, compare=False, repr=False)
    id: str = field(default_factory=generate_id)

    def as_string(self, indent: str = "") -> str:
        return f"{indent}pane({self.id}, '{self.title}')"


@dataclass(frozen=True)
class Tabbed:
    """An ordered group of panes, one of which is selected."""

    children: tuple[Pane, ...] = ()
    id: str = field(default_factory=generate_id)
    selected_tab_index: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))

    def as_string(self, indent: str = "") -> str:
        lines = [f"{indent}tabbed ({self.id}) {{"]
        lines.extend(child.as_string(indent + "  ") for child in self.children)
        lines.append(f"{indent}}}")
        return "\n".join(lines)


@dataclass(frozen=True)
class Split:
    """A division of space between child nodes in proportion to ``weights``."""

    orientation: SplitOrientation
    children: tuple[LayoutNode, ...]
    weights: tuple[float, ...]
    id: str = field(default_factory=generate_id)

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))
        object.__setattr__(self, "weights", tuple(float(w) for w in self.weights))
        if len(self.children) != len(self.weights):
            raise ValueError(
                f"Number of children ({len(self.children)}) must match number of weights ({len(self.weights)})"
            )
        if any(w <= 0 for w in self.weights):
            raise ValueError(f"Weights must be positive, got {list(self.weights)}")

    def as_string(self, indent: str = "") -> str:
        weights = ", ".join(repr(w) for w in self.weights)
        lines = [f"{indent}split {self.orientation.value} ({self.id}) [{weights}] {{"]
        lines.extend(child.as_string(indent + "  ") for child in self.children)
        lines.append(f"{indent}}}")
        return "\n".join(lines)


LayoutNode = Split | Tabbed

# Anything addressable by id inside a tree.
TreeItem = Split | Tabbed | Pane
