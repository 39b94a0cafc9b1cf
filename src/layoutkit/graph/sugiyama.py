"""Sugiyama-style layered graph layout pipeline.

Phases:
  1. Cycle removal  (DFS back-edge reversal)
  2. Layer assignment (longest path, Kahn order, BFS fallback)
  3. Dummy node insertion (every edge spans exactly one layer)
  4. Crossing minimization (barycenter heuristic, fixed sweep count)
  5. Coordinate assignment (x/y positions + edge routes)

Each phase is a plain function so it can be exercised on its own;
``SugiyamaLayout`` chains them for a full run.
"""

from __future__ import annotations

import itertools
import logging
from collections import Counter, deque
from collections.abc import Hashable, Iterable, Iterator, Sequence
from typing import Generic

import networkx as nx

from layoutkit.errors import UnknownNodeError
from layoutkit.graph.types import (
    CROSSING_ITERATIONS,
    DEFAULT_LAYER_SPACING,
    DEFAULT_NODE_HEIGHT,
    DEFAULT_NODE_SPACING,
    DEFAULT_NODE_WIDTH,
    NT,
    DummyId,
    EdgeRouting,
    LayoutConfig,
    LayoutResult,
    Position,
    SNode,
)

logger = logging.getLogger(__name__)

Edge = tuple[Hashable, Hashable]


def build_graph(nodes: Iterable[Hashable], edges: Iterable[Edge]) -> nx.MultiDiGraph:
    """Build a MultiDiGraph from a node list and (src, tgt) pairs.

    Parallel edges are kept so degree counts match the edge list.
    """
    graph: nx.MultiDiGraph = nx.MultiDiGraph()
    graph.add_nodes_from(nodes)
    for src, tgt in edges:
        graph.add_edge(src, tgt)
    return graph


# ─── Cycle Removal (DFS back edges) ───────────────────────────────────────────


def find_back_edges(nodes: Sequence[Hashable], graph: nx.DiGraph) -> list[Edge]:
    """Return the back edges met by a depth-first traversal, in discovery order.

    Traversal starts from each unvisited node in ``nodes`` order. An edge
    (u, v) is a back edge when v is on the current DFS stack, so a self-loop
    always is one. An explicit stack of successor iterators replaces recursion;
    the classification is the same as the recursive formulation.
    """
    visited: set[Hashable] = set()
    on_stack: set[Hashable] = set()
    # dict as an insertion-ordered set
    back_edges: dict[Edge, None] = {}

    for root in nodes:
        if root in visited:
            continue
        visited.add(root)
        on_stack.add(root)
        stack: list[tuple[Hashable, Iterator[Hashable]]] = [(root, iter(graph.successors(root)))]

        while stack:
            node, successors = stack[-1]
            for succ in successors:
                if succ in on_stack:
                    back_edges[(node, succ)] = None
                elif succ not in visited:
                    visited.add(succ)
                    on_stack.add(succ)
                    stack.append((succ, iter(graph.successors(succ))))
                    break
            else:
                stack.pop()
                on_stack.discard(node)

    return list(back_edges)


def make_acyclic(nodes: Sequence[Hashable], edges: Sequence[Edge]) -> tuple[list[Edge], list[Edge]]:
    """Make the edge list acyclic by reversing DFS back edges.

    Returns a tuple of:
    - acyclic_edges: forward edges in input order, followed by one reversed
      copy for every occurrence of a back edge, in DFS discovery order
    - reversed_edges: the distinct back edges, in their ORIGINAL direction

    Self-loops are back edges; reversing them leaves them unchanged.
    """
    graph = build_graph(nodes, edges)
    back_edges = find_back_edges(nodes, graph)
    back_set = set(back_edges)

    acyclic_edges: list[Edge] = [edge for edge in edges if edge not in back_set]
    occurrences = Counter(edges)
    for src, tgt in back_edges:
        acyclic_edges.extend([(tgt, src)] * occurrences[(src, tgt)])

    logger.debug("cycle removal: %d of %d edges reversed", len(back_edges), len(edges))
    return acyclic_edges, back_edges


# ─── Layer Assignment ─────────────────────────────────────────────────────────


def assign_layers(nodes: Sequence[Hashable], edges: Sequence[Edge]) -> dict[Hashable, int]:
    """Assign every node a layer using longest-path topological processing.

    Zero in-degree nodes seed layer 0. Processing u sets
    layer[v] = max(layer[v], layer[u] + 1) for each outgoing edge, and v is
    queued once all of its incoming edges have been seen.

    Nodes the main pass never reaches (only possible around self-loops) are
    placed by a BFS seeded at layer 0 that only fills in missing layers, so a
    fallback node may share a layer with a neighbour.
    """
    graph = build_graph(nodes, edges)
    layers: dict[Hashable, int] = {}
    in_degree: dict[Hashable, int] = {node: graph.in_degree(node) for node in nodes}

    queue: deque[Hashable] = deque()
    for node in nodes:
        if in_degree[node] == 0:
            queue.append(node)
            layers[node] = 0

    while queue:
        u = queue.popleft()
        for _, v in graph.out_edges(u):
            layers[v] = max(layers.get(v, 0), layers[u] + 1)
            in_degree[v] -= 1
            if in_degree[v] == 0:
                queue.append(v)

    fallback_count = 0
    for node in nodes:
        if node in layers:
            continue
        layers[node] = 0
        fallback_count += 1
        pending: deque[Hashable] = deque([node])
        while pending:
            u = pending.popleft()
            for v in graph.successors(u):
                if v not in layers:
                    layers[v] = layers[u] + 1
                    fallback_count += 1
                    pending.append(v)

    if fallback_count:
        logger.debug("layer assignment: %d nodes placed by fallback pass", fallback_count)
    return layers


# ─── Dummy Node Insertion ─────────────────────────────────────────────────────


def build_layered_graph(
    nodes: Sequence[Hashable],
    edges: Sequence[Edge],
    layers: dict[Hashable, int],
    dummy_ids: Iterator[int] | None = None,
) -> tuple[list[list[SNode]], nx.MultiDiGraph]:
    """Wrap nodes as SNodes and replace long edges with dummy chains.

    For each edge (u → v) where layer[v] > layer[u] + 1, the edge becomes
        u → d₁ → d₂ → … → dₖ → v
    with one dummy per intermediate layer. Dummy ids are drawn from
    ``dummy_ids`` (a fresh counter per call when omitted).

    Returns:
        layered: SNodes bucketed by layer, ascending; real nodes in input
            order, then dummies in creation order.
        graph: MultiDiGraph over the SNodes with the unit-span edges.
    """
    counter = dummy_ids if dummy_ids is not None else itertools.count()

    snodes: dict[Hashable, SNode] = {node: SNode(node, layers[node]) for node in nodes}
    all_snodes: list[SNode] = list(snodes.values())

    graph: nx.MultiDiGraph = nx.MultiDiGraph()
    graph.add_nodes_from(all_snodes)

    for src, tgt in edges:
        start = snodes[src]
        end = snodes[tgt]
        chain_prev = start
        for layer in range(start.layer + 1, end.layer):
            dummy = SNode(DummyId(next(counter)), layer)
            all_snodes.append(dummy)
            graph.add_edge(chain_prev, dummy)
            chain_prev = dummy
        graph.add_edge(chain_prev, end)

    by_layer: dict[int, list[SNode]] = {}
    for snode in all_snodes:
        by_layer.setdefault(snode.layer, []).append(snode)
    layered = [by_layer[layer] for layer in sorted(by_layer)]

    logger.debug(
        "layered graph: %d layers, %d dummy nodes",
        len(layered),
        len(all_snodes) - len(snodes),
    )
    return layered, graph


# ─── Crossing Minimization (Barycenter) ───────────────────────────────────────


def _barycenter(snode: SNode, graph: nx.MultiDiGraph, direction: str) -> float:
    """Average ``pos_in_layer`` of a node's neighbours (barycenter weight).

    direction: "incoming" to look at predecessors, "outgoing" for successors.
    Parallel edges count once each. Returns -1.0 if there are no neighbours,
    which sorts isolated nodes to the front.
    """
    if direction == "incoming":
        neighbors = [src for src, _ in graph.in_edges(snode)]
    else:
        neighbors = [tgt for _, tgt in graph.out_edges(snode)]
    if not neighbors:
        return -1.0
    return sum(nb.pos_in_layer for nb in neighbors) / len(neighbors)


def _sort_layer(layer: list[SNode], graph: nx.MultiDiGraph, direction: str) -> None:
    barycenters = {snode: _barycenter(snode, graph, direction) for snode in layer}
    layer.sort(key=barycenters.__getitem__)
    _renumber(layer)


def _renumber(layer: list[SNode]) -> None:
    for index, snode in enumerate(layer):
        snode.pos_in_layer = index


def reduce_crossings(
    layered: list[list[SNode]],
    graph: nx.MultiDiGraph,
    iterations: int = CROSSING_ITERATIONS,
) -> None:
    """Reorder each layer in place to reduce edge crossings.

    Every iteration runs a top-down sweep (layer 1 → last, keyed on
    predecessors) then a bottom-up sweep (second-to-last → layer 0, keyed on
    successors). The iteration count is fixed; there is no convergence check.
    Sorting is stable, so equal barycenters keep their relative order.
    """
    for layer in layered:
        _renumber(layer)

    before = count_crossings(layered, graph) if logger.isEnabledFor(logging.DEBUG) else None

    for _ in range(iterations):
        for layer_idx in range(1, len(layered)):
            _sort_layer(layered[layer_idx], graph, "incoming")
        for layer_idx in range(len(layered) - 2, -1, -1):
            _sort_layer(layered[layer_idx], graph, "outgoing")

    if before is not None:
        logger.debug("crossing reduction: %d -> %d crossings", before, count_crossings(layered, graph))


def count_crossings(layered: list[list[SNode]], graph: nx.MultiDiGraph) -> int:
    """Count edge crossings between consecutive layers (inversion count heuristic)."""
    total = 0
    for l_idx in range(len(layered) - 1):
        tgt_pos: dict[SNode, int] = {snode: i for i, snode in enumerate(layered[l_idx + 1])}
        edges: list[tuple[int, int]] = []
        for sp, snode in enumerate(layered[l_idx]):
            for _, nb in graph.out_edges(snode):
                if nb in tgt_pos:
                    edges.append((sp, tgt_pos[nb]))
        for i in range(len(edges)):
            for j in range(i + 1, len(edges)):
                ei, ej = edges[i], edges[j]
                if (ei[0] < ej[0] and ei[1] > ej[1]) or (ei[0] > ej[0] and ei[1] < ej[1]):
                    total += 1
    return total


# ─── Coordinate Assignment ────────────────────────────────────────────────────


def _find_route(graph: nx.MultiDiGraph, start: SNode, end: SNode) -> list[SNode] | None:
    """Breadth-first search from ``start`` to ``end`` through dummy nodes only.

    Only dummies are expanded, so the path found is an edge's own dummy chain
    and never detours through another real node.
    """
    if start is end:
        return [start]
    parents: dict[SNode, SNode | None] = {start: None}
    queue: deque[SNode] = deque([start])
    while queue:
        current = queue.popleft()
        for succ in graph.successors(current):
            if succ in parents:
                continue
            parents[succ] = current
            if succ is end:
                path = [succ]
                step = parents[succ]
                while step is not None:
                    path.append(step)
                    step = parents[step]
                path.reverse()
                return path
            if succ.is_dummy:
                queue.append(succ)
    return None


def rectilinear_path(
    points: list[Position],
    node_rects: list[tuple[float, float, float, float]],
) -> list[Position]:
    """Turn a polyline into axis-aligned segments.

    Each segment p1 → p2 runs vertically to a horizontal channel, across, and
    on to p2. The channel is the vertical midpoint unless that cuts through a
    node rectangle (left, top, right, bottom), in which case the closest clear
    line just above or below an overlapping node is used. Collinear and
    repeated points are dropped; the first and last points are kept.
    """
    if len(points) < 2:
        return list(points)

    path: list[Position] = [points[0]]
    for p1, p2 in zip(points, points[1:]):
        y_mid = (p1[1] + p2[1]) / 2
        x_min = min(p1[0], p2[0])
        x_max = max(p1[0], p2[0])

        def is_clear(y: float) -> bool:
            return not any(
                top < y < bottom and x_max > left and x_min < right for left, top, right, bottom in node_rects
            )

        route_y = y_mid
        if not is_clear(y_mid):
            candidates = [
                y
                for left, top, right, bottom in node_rects
                if x_max > left and x_min < right
                for y in (top - 1, bottom + 1)
                if is_clear(y)
            ]
            if candidates:
                route_y = min(candidates, key=lambda y: abs(y - y_mid))
        path.append((p1[0], route_y))
        path.append((p2[0], route_y))
    path.append(points[-1])

    cleaned: list[Position] = [path[0]]
    for j in range(1, len(path) - 1):
        prev, curr, nxt = cleaned[-1], path[j], path[j + 1]
        collinear = (prev[0] == curr[0] == nxt[0]) or (prev[1] == curr[1] == nxt[1])
        if not collinear:
            cleaned.append(curr)
    cleaned.append(path[-1])
    return list(dict.fromkeys(cleaned))


def assign_coordinates(
    layered: list[list[SNode]],
    graph: nx.MultiDiGraph,
    nodes: Sequence[Hashable],
    acyclic_edges: Sequence[Edge],
    reversed_edges: Iterable[Edge],
    original_edges: Sequence[Edge],
    config: LayoutConfig | None = None,
) -> LayoutResult:
    """Place every node and route every original edge.

    Layers are stacked top-down at y = layer_index * (layer_spacing + node_height).
    Each layer is centred against the widest one, nodes left-to-right in
    ``pos_in_layer`` order; dummies take a full node slot. Positions are
    top-left corners.

    Routes are the positions along each edge's chain. Edges reversed during
    cycle removal are looked up under their reversed key and their waypoints
    flipped, so every route runs from the caller's source to its target.
    """
    config = config or LayoutConfig()
    width = config.node_width
    slot = config.node_width + config.node_spacing
    row = config.layer_spacing + config.node_height

    layer_widths = [len(layer) * width + max(0, len(layer) - 1) * config.node_spacing for layer in layered]
    max_width = max(layer_widths, default=0.0)

    positions: dict[SNode, Position] = {}
    real: dict[Hashable, SNode] = {}
    for layer_idx, layer in enumerate(layered):
        x = (max_width - layer_widths[layer_idx]) / 2.0
        y = layer_idx * row
        for snode in sorted(layer, key=lambda s: s.pos_in_layer):
            positions[snode] = (x, y)
            if not snode.is_dummy:
                real[snode.node] = snode
            x += slot

    node_positions = {node: positions[real[node]] for node in nodes}

    node_rects = [(x, y, x + width, y + config.node_height) for x, y in node_positions.values()]

    acyclic_routes: dict[Edge, list[Position]] = {}
    for edge in acyclic_edges:
        if edge in acyclic_routes:
            continue
        path = _find_route(graph, real[edge[0]], real[edge[1]])
        if path is None:
            logger.error("no route through the layered graph for edge %r", edge)
            continue
        points = [positions[snode] for snode in path]
        if config.edge_routing is EdgeRouting.RECTILINEAR:
            points = rectilinear_path(points, node_rects)
        acyclic_routes[edge] = points

    reversed_set = set(reversed_edges)
    edge_routes: dict[Edge, list[Position]] = {}
    for src, tgt in original_edges:
        edge = (src, tgt)
        if edge in edge_routes:
            continue
        if edge in reversed_set:
            route = acyclic_routes.get((tgt, src))
            if route is not None:
                edge_routes[edge] = route[::-1]
        else:
            route = acyclic_routes.get(edge)
            if route is not None:
                edge_routes[edge] = list(route)
        if edge not in edge_routes:
            logger.error("edge %r has no route and is left out of the result", edge)

    total_height = (len(layered) - 1) * row + config.node_height if layered else 0.0
    return LayoutResult(
        node_positions=node_positions,
        edge_routes=edge_routes,
        total_width=max_width,
        total_height=total_height,
    )


# ─── Full Layout Pipeline ─────────────────────────────────────────────────────


class SugiyamaLayout(Generic[NT]):
    """Sugiyama layered layout engine.

    Geometry is fixed per instance. The engine keeps no state between runs
    (the dummy counter is local to each ``layout_graph`` call), so one
    instance can serve concurrent callers.
    """

    def __init__(
        self,
        node_width: float = DEFAULT_NODE_WIDTH,
        node_height: float = DEFAULT_NODE_HEIGHT,
        layer_spacing: float = DEFAULT_LAYER_SPACING,
        node_spacing: float = DEFAULT_NODE_SPACING,
        edge_routing: EdgeRouting = EdgeRouting.DIRECT,
        *,
        config: LayoutConfig | None = None,
    ) -> None:
        self.config = config or LayoutConfig(
            node_width=node_width,
            node_height=node_height,
            layer_spacing=layer_spacing,
            node_spacing=node_spacing,
            edge_routing=edge_routing,
        )

    def layout_graph(self, nodes: Iterable[NT], edges: Iterable[tuple[NT, NT]]) -> LayoutResult[NT]:
        """Compute node positions and edge routes for a directed graph.

        Cyclic, disconnected and empty graphs and self-loops are all laid out;
        a self-loop comes back as a single-point route. Duplicate nodes are
        ignored and duplicate edges share one route.

        Raises:
            UnknownNodeError: an edge endpoint is missing from ``nodes``.
        """
        node_list: list[NT] = list(dict.fromkeys(nodes))
        edge_list: list[tuple[NT, NT]] = [(src, tgt) for src, tgt in edges]

        known = set(node_list)
        for edge in edge_list:
            for endpoint in edge:
                if endpoint not in known:
                    raise UnknownNodeError(endpoint, edge)

        acyclic_edges, reversed_edges = make_acyclic(node_list, edge_list)
        layers = assign_layers(node_list, acyclic_edges)
        layered, graph = build_layered_graph(node_list, acyclic_edges, layers, itertools.count())
        reduce_crossings(layered, graph)
        return assign_coordinates(
            layered,
            graph,
            node_list,
            acyclic_edges,
            reversed_edges,
            edge_list,
            self.config,
        )


def layout_graph(nodes: Iterable[NT], edges: Iterable[tuple[NT, NT]], **kwargs) -> LayoutResult[NT]:
    """Run the full layout pipeline with a throwaway engine."""
    return SugiyamaLayout(**kwargs).layout_graph(nodes, edges)
