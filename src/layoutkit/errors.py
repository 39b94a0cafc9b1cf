"""Exceptions raised by layoutkit.

The graph engine handles every well-formed input algorithmically; the layout
tree engine treats id lookup misses and kind mismatches as precondition
violations and raises immediately.
"""


class LayoutError(Exception):
    """Base exception for layoutkit errors."""

    pass


class UnknownNodeError(LayoutError):
    """Raised when an edge references a node missing from the node list."""

    def __init__(self, node, edge):
        self.node = node
        self.edge = edge
        super().__init__(f"Edge {edge!r} references unknown node: {node!r}")


class LayoutTreeError(LayoutError):
    """Base exception for layout tree precondition violations."""

    pass


class NodeNotFoundError(LayoutTreeError):
    """Raised when no node with the requested id exists in the tree."""

    def __init__(self, node_id, operation=None):
        self.node_id = node_id
        self.operation = operation
        prefix = f"{operation}: " if operation else ""
        super().__init__(f"{prefix}layout node not found: {node_id}")


class InvalidDropTargetError(LayoutTreeError):
    """Raised when a drop target does not fit the node it resolves to."""

    def __init__(self, message, drop_target):
        self.drop_target = drop_target
        super().__init__(f"{message}: {drop_target}")
