"""Multi-pane layout tree: split / tabbed / pane nodes and drop-target edits."""

from __future__ import annotations

from layoutkit.multipane.builder import pane, split, tabbed
from layoutkit.multipane.nodes import (
    ID_GENERATOR,
    IdGenerator,
    LayoutNode,
    Pane,
    Split,
    SplitOrientation,
    Tabbed,
    TreeItem,
    generate_id,
)
from layoutkit.multipane.targets import (
    DropTarget,
    ReorderDropTarget,
    SplitDropTarget,
    TabbedDropTarget,
)
from layoutkit.multipane.tree import (
    MIN_SPLITTER_WEIGHT,
    NEW_SPLIT_WEIGHT,
    add_pane,
    adjust_splitter_weights,
    all_ids,
    all_pane_ids,
    find_by_id,
    find_pane,
    find_split,
    find_tabbed,
    first_pane_of,
    insert_pane,
    move_pane,
    remove_pane,
    resize_split,
    select_tab,
    update_split_weights,
)

__all__ = [
    "ID_GENERATOR",
    "MIN_SPLITTER_WEIGHT",
    "NEW_SPLIT_WEIGHT",
    "DropTarget",
    "IdGenerator",
    "LayoutNode",
    "Pane",
    "ReorderDropTarget",
    "Split",
    "SplitDropTarget",
    "SplitOrientation",
    "Tabbed",
    "TabbedDropTarget",
    "TreeItem",
    "add_pane",
    "adjust_splitter_weights",
    "all_ids",
    "all_pane_ids",
    "find_by_id",
    "find_pane",
    "find_split",
    "find_tabbed",
    "first_pane_of",
    "generate_id",
    "insert_pane",
    "move_pane",
    "pane",
    "remove_pane",
    "resize_split",
    "select_tab",
    "split",
    "tabbed",
    "update_split_weights",
]
