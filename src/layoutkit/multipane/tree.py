"""Layout tree operations: queries, pane insertion/removal and weight edits.

Every operation is a pure function of the tree it is given and returns a new
root. Lookup misses and drop targets that do not fit the node they name raise
a ``LayoutTreeError`` subclass before anything is built, so callers never see
a partially edited tree.
"""

from __future__ import annotations

import dataclasses
import logging
from collections import deque
from collections.abc import Callable, Sequence
from typing import TypeVar

from layoutkit.errors import InvalidDropTargetError, LayoutTreeError, NodeNotFoundError
from layoutkit.multipane.nodes import (
    ID_GENERATOR,
    IdGenerator,
    LayoutNode,
    Pane,
    Split,
    SplitOrientation,
    Tabbed,
    TreeItem,
)
from layoutkit.multipane.targets import (
    DropTarget,
    ReorderDropTarget,
    SplitDropTarget,
    TabbedDropTarget,
)

logger = logging.getLogger(__name__)

R = TypeVar("R")

# Weight given to each side of a freshly created split, and to a child added
# to an existing split by a reorder drop.
NEW_SPLIT_WEIGHT: float = 0.5
# Lower bound for a weight after a splitter drag.
MIN_SPLITTER_WEIGHT: float = 0.01


# ─── Queries ──────────────────────────────────────────────────────────────────


def find_by_id(root: LayoutNode, node_id: str) -> TreeItem | None:
    """Depth-first search for the split, tabbed or pane with ``node_id``."""
    if root.id == node_id:
        return root
    if isinstance(root, Tabbed):
        for pane in root.children:
            if pane.id == node_id:
                return pane
        return None
    for child in root.children:
        found = find_by_id(child, node_id)
        if found is not None:
            return found
    return None


def first_pane_of(
    root: LayoutNode,
    transform: Callable[[Split | None, Tabbed, Pane], R | None],
    parent_split: Split | None = None,
) -> R | None:
    """Visit panes in tree order and return the first non-None ``transform`` result.

    ``transform`` receives the split directly containing the pane's tabbed
    container (None at the root), the tabbed container and the pane.
    """
    if isinstance(root, Tabbed):
        for pane in root.children:
            result = transform(parent_split, root, pane)
            if result is not None:
                return result
        return None
    for child in root.children:
        result = first_pane_of(child, transform, root)
        if result is not None:
            return result
    return None


def find_pane(root: LayoutNode, predicate: Callable[[Pane], bool]) -> Pane | None:
    return first_pane_of(root, lambda split, tabbed, pane: pane if predicate(pane) else None)


def find_tabbed(root: LayoutNode, predicate: Callable[[Tabbed], bool]) -> Tabbed | None:
    """Return the first tabbed container satisfying ``predicate``.

    Used by callers to locate valid drop targets.
    """
    return first_pane_of(root, lambda split, tabbed, pane: tabbed if predicate(tabbed) else None)


def find_split(root: LayoutNode, predicate: Callable[[Split], bool]) -> Split | None:
    if isinstance(root, Tabbed):
        return None
    if predicate(root):
        return root
    for child in root.children:
        found = find_split(child, predicate)
        if found is not None:
            return found
    return None


def all_pane_ids(root: LayoutNode) -> set[str]:
    ids: set[str] = set()
    queue: deque[LayoutNode] = deque([root])
    while queue:
        node = queue.popleft()
        if isinstance(node, Split):
            queue.extend(node.children)
        else:
            ids.update(pane.id for pane in node.children)
    return ids


def all_ids(root: LayoutNode) -> set[str]:
    """Ids of every split, tabbed container and pane in the tree."""
    ids: set[str] = set()
    queue: deque[LayoutNode] = deque([root])
    while queue:
        node = queue.popleft()
        ids.add(node.id)
        if isinstance(node, Split):
            queue.extend(node.children)
        else:
            ids.update(pane.id for pane in node.children)
    return ids


# ─── Path rebuilding ──────────────────────────────────────────────────────────


def _replace_node(
    node: LayoutNode,
    node_id: str,
    update: Callable[[LayoutNode], LayoutNode],
) -> LayoutNode:
    """Rebuild the path to container ``node_id``, replacing it with ``update(node)``.

    Subtrees off the path are shared, not copied.
    """
    if node.id == node_id:
        return update(node)
    if isinstance(node, Tabbed):
        return node
    children = tuple(_replace_node(child, node_id, update) for child in node.children)
    if all(new is old for new, old in zip(children, node.children)):
        return node
    return dataclasses.replace(node, children=children)


def _require_container(root: LayoutNode, node_id: str, operation: str) -> LayoutNode:
    found = find_by_id(root, node_id)
    if found is None:
        raise NodeNotFoundError(node_id, operation)
    if isinstance(found, Pane):
        raise LayoutTreeError(f"{operation}: {node_id} is a pane, not a split or tabbed container")
    return found


def _child_index(ids: Sequence[str], other_id: str | None, operation: str) -> int:
    try:
        return list(ids).index(other_id)
    except ValueError:
        raise NodeNotFoundError(other_id, operation) from None


# ─── Insertion ────────────────────────────────────────────────────────────────


def insert_pane(
    root: LayoutNode,
    new_pane: Pane,
    drop_target: DropTarget,
    id_generator: IdGenerator | None = None,
) -> LayoutNode:
    """Insert ``new_pane`` into the tree at ``drop_target``.

    - Tabbed target on a tabbed container: new tab BEFORE/AFTER pane ``other_id``.
    - Split target on a tabbed container: the container and a new tabbed
      holding the pane become the two halves of a new split.
    - Split target on a split: only child ``other_id`` is wrapped that way.
    - Reorder target on a split: a new tabbed holding the pane is placed
      BEFORE/AFTER child ``other_id``.

    New containers take ids from ``id_generator`` (the shared generator by
    default); the new tabbed is numbered before its enclosing split.

    The weights of an existing parent split are kept as they are, not
    renormalised: a wrapped child keeps its weight and a reordered-in child
    is added with weight NEW_SPLIT_WEIGHT. Only relative weights matter.

    Raises:
        NodeNotFoundError: ``target_node_id`` or ``other_id`` does not exist.
        InvalidDropTargetError: the target kind does not fit the container,
            e.g. a Reorder target aimed at a tabbed container, or
            ``target_node_id`` names a pane.
    """
    ids = id_generator or ID_GENERATOR
    target = find_by_id(root, drop_target.target_node_id)
    if target is None:
        raise NodeNotFoundError(drop_target.target_node_id, "insert_pane")
    if isinstance(target, Pane):
        raise InvalidDropTargetError("Cannot drop onto a pane, only into a split or tabbed container", drop_target)
    logger.debug("insert pane %s at %s", new_pane.id, drop_target)
    return _replace_node(
        root,
        drop_target.target_node_id,
        lambda node: _insert_at(node, new_pane, drop_target, ids),
    )


def _insert_at(node: LayoutNode, new_pane: Pane, drop_target: DropTarget, ids: IdGenerator) -> LayoutNode:
    if isinstance(node, Tabbed):
        if isinstance(drop_target, TabbedDropTarget):
            return _insert_tab(node, new_pane, drop_target)
        if isinstance(drop_target, SplitDropTarget):
            return _wrap_in_split(node, new_pane, drop_target.kind, ids)
        if isinstance(drop_target, ReorderDropTarget):
            raise InvalidDropTargetError("Cannot Reorder a pane into a tabbed container", drop_target)
    else:
        if isinstance(drop_target, SplitDropTarget):
            return _split_child(node, new_pane, drop_target, ids)
        if isinstance(drop_target, ReorderDropTarget):
            return _insert_split_child(node, new_pane, drop_target, ids)
        if isinstance(drop_target, TabbedDropTarget):
            raise InvalidDropTargetError("Cannot add a tab to a split container", drop_target)
    raise InvalidDropTargetError("Unsupported drop target", drop_target)


def _insert_tab(tabbed: Tabbed, new_pane: Pane, drop_target: TabbedDropTarget) -> Tabbed:
    index = _child_index([pane.id for pane in tabbed.children], drop_target.other_id, "insert_pane")
    if drop_target.kind is TabbedDropTarget.Kind.AFTER:
        index += 1
    children = tabbed.children[:index] + (new_pane,) + tabbed.children[index:]
    return dataclasses.replace(tabbed, children=children, selected_tab_index=index)


def _wrap_in_split(node: LayoutNode, new_pane: Pane, kind: SplitDropTarget.Kind, ids: IdGenerator) -> Split:
    new_tabbed = Tabbed(children=(new_pane,), id=ids())
    if kind in (SplitDropTarget.Kind.LEFT, SplitDropTarget.Kind.RIGHT):
        orientation = SplitOrientation.HORIZONTAL
    else:
        orientation = SplitOrientation.VERTICAL
    if kind in (SplitDropTarget.Kind.LEFT, SplitDropTarget.Kind.TOP):
        children = (new_tabbed, node)
    else:
        children = (node, new_tabbed)
    return Split(
        orientation=orientation,
        children=children,
        weights=(NEW_SPLIT_WEIGHT, NEW_SPLIT_WEIGHT),
        id=ids(),
    )


def _split_child(split: Split, new_pane: Pane, drop_target: SplitDropTarget, ids: IdGenerator) -> Split:
    index = _child_index([child.id for child in split.children], drop_target.other_id, "insert_pane")
    wrapped = _wrap_in_split(split.children[index], new_pane, drop_target.kind, ids)
    children = split.children[:index] + (wrapped,) + split.children[index + 1 :]
    return dataclasses.replace(split, children=children)


def _insert_split_child(split: Split, new_pane: Pane, drop_target: ReorderDropTarget, ids: IdGenerator) -> Split:
    index = _child_index([child.id for child in split.children], drop_target.other_id, "insert_pane")
    if drop_target.kind is ReorderDropTarget.Kind.AFTER:
        index += 1
    new_tabbed = Tabbed(children=(new_pane,), id=ids())
    return dataclasses.replace(
        split,
        children=split.children[:index] + (new_tabbed,) + split.children[index:],
        weights=split.weights[:index] + (NEW_SPLIT_WEIGHT,) + split.weights[index:],
    )


def add_pane(root: LayoutNode, tabbed_id: str, after_id: str, new_pane: Pane) -> LayoutNode:
    """Add ``new_pane`` as the tab right after ``after_id`` in ``tabbed_id``."""
    return insert_pane(root, new_pane, TabbedDropTarget(TabbedDropTarget.Kind.AFTER, tabbed_id, after_id))


# ─── Removal and moves ────────────────────────────────────────────────────────


def remove_pane(root: LayoutNode, pane_id: str) -> tuple[LayoutNode | None, Pane | None]:
    """Remove a pane, collapsing containers left empty.

    A tabbed container losing its last pane is removed; a split left with one
    child is replaced by that child, and one left with none is removed.

    Returns:
        (new_root, removed_pane). new_root is None if the whole tree
        collapsed; removed_pane is None (and the root returned as-is) if no
        pane has that id.
    """
    if isinstance(root, Tabbed):
        remaining = tuple(pane for pane in root.children if pane.id != pane_id)
        if len(remaining) == len(root.children):
            return root, None
        removed = next(pane for pane in root.children if pane.id == pane_id)
        if not remaining:
            return None, removed
        selected = min(root.selected_tab_index, len(remaining) - 1)
        return dataclasses.replace(root, children=remaining, selected_tab_index=selected), removed

    removed_pane: Pane | None = None
    children: list[LayoutNode] = []
    weights: list[float] = []
    for child, weight in zip(root.children, root.weights):
        updated, found = remove_pane(child, pane_id)
        if found is not None:
            removed_pane = found
        if updated is not None:
            children.append(updated)
            weights.append(weight)

    if removed_pane is None:
        return root, None
    if not children:
        return None, removed_pane
    if len(children) == 1:
        return children[0], removed_pane
    return dataclasses.replace(root, children=tuple(children), weights=tuple(weights)), removed_pane


def move_pane(
    root: LayoutNode,
    pane_id: str,
    drop_target: DropTarget,
    id_generator: IdGenerator | None = None,
) -> LayoutNode:
    """Move an existing pane to ``drop_target`` (remove, then insert).

    Dropping a pane onto itself leaves the tree unchanged.

    Raises:
        NodeNotFoundError: the pane does not exist, or the target no longer
            exists once the pane has been removed.
    """
    if pane_id == drop_target.target_node_id:
        return root
    remaining, pane = remove_pane(root, pane_id)
    if pane is None:
        raise NodeNotFoundError(pane_id, "move_pane")
    if remaining is None:
        raise NodeNotFoundError(drop_target.target_node_id, "move_pane")
    return insert_pane(remaining, pane, drop_target, id_generator)


# ─── Tabs and weights ─────────────────────────────────────────────────────────


def select_tab(root: LayoutNode, tabbed_id: str, index: int) -> LayoutNode:
    tabbed = _require_container(root, tabbed_id, "select_tab")
    if not isinstance(tabbed, Tabbed):
        raise LayoutTreeError(f"select_tab: {tabbed_id} is not a tabbed container")
    if not 0 <= index < len(tabbed.children):
        raise LayoutTreeError(f"select_tab: tab index {index} out of range for {tabbed_id}")
    return _replace_node(root, tabbed_id, lambda node: dataclasses.replace(node, selected_tab_index=index))


def update_split_weights(root: LayoutNode, split_id: str, weights: Sequence[float]) -> LayoutNode:
    """Replace the weights of split ``split_id``.

    Raises:
        ValueError: weight count or values are invalid for the split.
    """
    split = _require_container(root, split_id, "update_split_weights")
    if not isinstance(split, Split):
        raise LayoutTreeError(f"update_split_weights: {split_id} is not a split")
    return _replace_node(root, split_id, lambda node: dataclasses.replace(node, weights=tuple(weights)))


def adjust_splitter_weights(total_size: float, f1: float, f2: float, drag_amount: float) -> tuple[float, float]:
    """Move weight across a splitter dragged by ``drag_amount``.

    The weight shift is ``drag_amount / total_size``; each side is clamped to
    at least MIN_SPLITTER_WEIGHT. The pair is not renormalised, so its sum may
    drift once a side hits the clamp.
    """
    if total_size <= 0:
        raise ValueError(f"total_size must be positive, got {total_size}")
    delta = drag_amount / total_size
    return max(f1 + delta, MIN_SPLITTER_WEIGHT), max(f2 - delta, MIN_SPLITTER_WEIGHT)


def resize_split(
    root: LayoutNode,
    split_id: str,
    index: int,
    total_size: float,
    drag_amount: float,
) -> LayoutNode:
    """Apply a drag of the splitter between children ``index`` and ``index + 1``."""
    split = _require_container(root, split_id, "resize_split")
    if not isinstance(split, Split):
        raise LayoutTreeError(f"resize_split: {split_id} is not a split")
    if not 0 <= index < len(split.weights) - 1:
        raise LayoutTreeError(f"resize_split: no splitter at index {index} in {split_id}")
    f1, f2 = adjust_splitter_weights(total_size, split.weights[index], split.weights[index + 1], drag_amount)
    weights = split.weights[:index] + (f1, f2) + split.weights[index + 2 :]
    return update_split_weights(root, split_id, weights)
