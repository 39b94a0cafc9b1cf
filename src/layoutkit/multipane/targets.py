"""Drop targets: where, structurally, a pane should land in the layout tree."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


@dataclass(frozen=True)
class DropTarget:
    """Base for the three drop target variants.

    Attributes:
        kind: Variant-specific placement (a member of the subclass's ``Kind``).
        target_node_id: Id of the container the drop lands in.
        other_id: Id of the pane or child the placement is relative to.
    """

    kind: Enum
    target_node_id: str
    other_id: str | None = None

    label: ClassVar[str] = "DropTarget"

    def __post_init__(self) -> None:
        kinds = getattr(type(self), "Kind", None)
        if kinds is not None and not isinstance(self.kind, kinds):
            raise TypeError(f"{type(self).__name__} kind must be a {type(self).__name__}.Kind, got {self.kind!r}")

    def __str__(self) -> str:
        return f"DropTarget.{self.label} {self.kind.name} {self.target_node_id} {self.other_id}"


@dataclass(frozen=True)
class TabbedDropTarget(DropTarget):
    """Insert as a new tab before/after pane ``other_id`` of tabbed container ``target_node_id``."""

    label: ClassVar[str] = "Tabbed"

    class Kind(Enum):
        BEFORE = "before"
        AFTER = "after"


@dataclass(frozen=True)
class SplitDropTarget(DropTarget):
    """Split a container, putting the new pane on one side of it.

    Aimed at a Tabbed, the Tabbed itself is split. Aimed at a Split, only its
    child ``other_id`` is.
    """

    label: ClassVar[str] = "Split"

    class Kind(Enum):
        LEFT = "left"
        RIGHT = "right"
        TOP = "top"
        BOTTOM = "bottom"


@dataclass(frozen=True)
class ReorderDropTarget(DropTarget):
    """Place a new child of split ``target_node_id`` before/after its child ``other_id``.

    Tabbed containers reject this target.
    """

    label: ClassVar[str] = "Reorder"

    class Kind(Enum):
        BEFORE = "before"
        AFTER = "after"
