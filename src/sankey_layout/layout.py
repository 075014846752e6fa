"""Layout module — layered Sankey layout pipeline.

Phases:
  1. Layer assignment (longest path from zero-inflow nodes, FIFO relaxation)
  2. Column placement (x positions per layer)
  3. Vertical distribution (stack nodes per layer proportional to flow)
  4. Link geometry (thickness, stacked anchors, Bezier path, stroke)

Every call works on the ``FlowGraph`` it is given and mutates only that graph.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

import networkx as nx
from loguru import logger

from sankey_layout.config import LayoutConfig
from sankey_layout.errors import CyclicFlow, NoSourceNodes, UnreachableNode
from sankey_layout.graph import FlowGraph, SankeyNode
from sankey_layout.types import GradientStroke, LayoutResult, LinkPath, Point, PositionedLink, SolidStroke, Stroke

# ─── Layer Assignment ─────────────────────────────────────────────────────────


class LayerAssignment:
    """Result of layer assignment: each node is assigned a layer (column).

    Layer 0 holds the source nodes (no inflow); every other node sits one
    layer past the furthest of its predecessors.

    Attributes:
        layers: Layer index per node index.
        layer_count: Total number of layers.
        sources: Indices of the nodes the traversal started from.
    """

    def __init__(self, layers: list[int], layer_count: int, sources: list[int]) -> None:
        self.layers = layers
        self.layer_count = layer_count
        self.sources = sources

    @classmethod
    def assign(cls, graph: FlowGraph) -> LayerAssignment:
        """Assign layers with a breadth-first longest-path relaxation.

        Algorithm: seed a FIFO queue with every zero-inflow node at layer 0.
        For each popped node u and outgoing link u→v, set
        layer[v] = max(layer[v], layer[u] + 1) and re-enqueue v when it grows.

        An acyclic path visits each node at most once, so no layer can reach
        ``node_count``; crossing that bound means a cycle is being walked.
        """
        nodes = graph.nodes
        node_count = len(nodes)
        sources = [n.index for n in nodes if n.value_in == 0]
        if not sources:
            raise NoSourceNodes()

        layers: list[int | None] = [None] * node_count
        queue: deque[int] = deque()
        for idx in sources:
            layers[idx] = 0
            queue.append(idx)

        while queue:
            current = queue.popleft()
            next_layer = layers[current] + 1  # type: ignore[operator]
            for link in nodes[current].source_links:
                target_layer = layers[link.target]
                if target_layer is not None and target_layer >= next_layer:
                    continue
                if next_layer >= node_count:
                    raise _cyclic_flow(graph, link.target)
                layers[link.target] = next_layer
                queue.append(link.target)

        unreached = [i for i, layer in enumerate(layers) if layer is None]
        if unreached:
            raise UnreachableNode(unreached, graph.node_names(unreached))

        resolved: list[int] = [layer for layer in layers if layer is not None]
        for node, layer in zip(nodes, resolved):
            node.layer = layer

        layer_count = max(resolved, default=0) + 1
        logger.debug("Assigned {} node(s) to {} layer(s) from {} source(s)", node_count, layer_count, len(sources))
        return cls(layers=resolved, layer_count=layer_count, sources=sources)

    def group(self, graph: FlowGraph) -> list[list[SankeyNode]]:
        """Nodes bucketed by layer, each bucket in node index order."""
        buckets: list[list[SankeyNode]] = [[] for _ in range(self.layer_count)]
        for node in graph.nodes:
            buckets[self.layers[node.index]].append(node)
        return buckets


def _cyclic_flow(graph: FlowGraph, start: int) -> CyclicFlow:
    try:
        edges = nx.find_cycle(graph.digraph, source=start)
    except nx.NetworkXNoCycle:
        edges = nx.find_cycle(graph.digraph)
    cycle = [edge[0] for edge in edges]
    return CyclicFlow(cycle, graph.node_names(cycle))


# ─── Column Placement ─────────────────────────────────────────────────────────


def assign_columns(graph: FlowGraph, la: LayerAssignment, config: LayoutConfig) -> None:
    """Spread layers evenly across the width; the last layer ends flush right.

    A single-layer graph places every node at x0 = 0.
    """
    max_layer = la.layer_count - 1
    x_scale = (config.width - config.node_width) / max_layer if max_layer > 0 else 0.0
    for node in graph.nodes:
        node.x0 = la.layers[node.index] * x_scale
        node.x1 = node.x0 + config.node_width


# ─── Vertical Distribution ────────────────────────────────────────────────────


def sort_layer(layer_nodes: list[SankeyNode]) -> list[SankeyNode]:
    """Largest outflow first; ties keep their input order (sorted() is stable)."""
    return sorted(layer_nodes, key=lambda n: n.value_out, reverse=True)


def distribute_layer(layer_nodes: list[SankeyNode], total_height: float, padding: float) -> bool:
    """Stack ``layer_nodes`` top to bottom, sized by ``max(value_in, value_out)``.

    The available height (total minus the gaps) is divided in proportion to
    each node's value. Returns True when the layer carries no flow at all, in
    which case the height is split evenly instead.
    """
    if not layer_nodes:
        return False

    count = len(layer_nodes)
    available = max(0.0, total_height - padding * (count - 1))
    total_value = sum(n.value for n in layer_nodes)
    degenerate = total_value == 0

    y = 0.0
    for node in layer_nodes:
        node_height = available / count if degenerate else node.value / total_value * available
        node.y0 = y
        node.y1 = y + node_height
        y += node_height + padding
    return degenerate


def distribute_nodes(graph: FlowGraph, la: LayerAssignment, config: LayoutConfig) -> list[int]:
    """Distribute every layer; returns the indices of zero-value layers."""
    degenerate_layers: list[int] = []
    for layer_idx, layer_nodes in enumerate(la.group(graph)):
        ordered = sort_layer(layer_nodes)
        if distribute_layer(ordered, config.height, config.node_padding):
            logger.warning(
                "Layer {} has zero total flow; splitting its height evenly across {} node(s)",
                layer_idx,
                len(ordered),
            )
            degenerate_layers.append(layer_idx)
    return degenerate_layers


# ─── Link Geometry ────────────────────────────────────────────────────────────


class OffsetAccumulator:
    """Running vertical offsets for links leaving / entering each node.

    Links are stacked in input order: every link claims ``thickness + padding``
    on its source's right edge and its target's left edge.
    """

    def __init__(self, node_count: int, padding: float) -> None:
        self.padding = padding
        self.out_offsets: list[float] = [0.0] * node_count
        self.in_offsets: list[float] = [0.0] * node_count

    def take_out(self, node: SankeyNode, thickness: float) -> float:
        """Claim a slot on ``node``'s outgoing side; returns the slot's centre y."""
        y = node.y0 + self.out_offsets[node.index] + thickness / 2
        self.out_offsets[node.index] += thickness + self.padding
        return y

    def take_in(self, node: SankeyNode, thickness: float) -> float:
        """Claim a slot on ``node``'s incoming side; returns the slot's centre y."""
        y = node.y0 + self.in_offsets[node.index] + thickness / 2
        self.in_offsets[node.index] += thickness + self.padding
        return y

    def commit(self, nodes: list[SankeyNode]) -> None:
        for node in nodes:
            node.out_offset = self.out_offsets[node.index]
            node.in_offset = self.in_offsets[node.index]


def link_width_scale(source: SankeyNode, padding: float) -> float:
    """Pixels per unit of flow so that a node's outgoing links (and the gaps
    between them) exactly fill its height.

    Zero outflow, or a node too short to hold its gaps, yields 0.
    """
    if source.value_out == 0:
        return 0.0
    usable = source.height - padding * (len(source.source_links) - 1)
    return max(0.0, usable) / source.value_out


def link_path(x0: float, y0: float, x1: float, y1: float, curvature: float) -> LinkPath:
    """Horizontal S-curve; control points sit at ``curvature`` and
    ``1 - curvature`` of the x-span."""
    x2 = x0 + (x1 - x0) * curvature
    x3 = x0 + (x1 - x0) * (1 - curvature)
    return LinkPath(start=Point(x0, y0), c1=Point(x2, y0), c2=Point(x3, y1), end=Point(x1, y1))


def link_stroke(source: SankeyNode, target: SankeyNode, link_index: int) -> Stroke:
    if source.color == target.color:
        return SolidStroke(source.color)
    return GradientStroke(
        id=f"gradient-{source.index}-{target.index}-{link_index}",
        start_color=source.color,
        end_color=target.color,
        x1=source.x1,
        x2=target.x0,
    )


def resolve_links(graph: FlowGraph, config: LayoutConfig) -> list[PositionedLink]:
    """Compute thickness, anchors, path and stroke for every link, in input order."""
    padding = config.node_padding
    offsets = OffsetAccumulator(len(graph.nodes), padding)

    positioned: list[PositionedLink] = []
    for link in graph.links:
        source = graph.nodes[link.source]
        target = graph.nodes[link.target]

        thickness = link.value * link_width_scale(source, padding)
        sy = offsets.take_out(source, thickness)
        ty = offsets.take_in(target, thickness)

        positioned.append(
            PositionedLink(
                index=link.index,
                source=link.source,
                target=link.target,
                value=link.value,
                thickness=thickness,
                sy=sy,
                ty=ty,
                path=link_path(source.x1, sy, target.x0, ty, config.curvature),
                stroke=link_stroke(source, target, link.index),
            )
        )

    offsets.commit(graph.nodes)
    return positioned


# ─── Full Layout Pipeline ─────────────────────────────────────────────────────


def sankey_layout(graph: FlowGraph, config: LayoutConfig) -> LayoutResult:
    """Run the full layout pipeline on ``graph`` and return the positioned result."""
    la = LayerAssignment.assign(graph)
    assign_columns(graph, la, config)
    degenerate_layers = distribute_nodes(graph, la, config)
    links = resolve_links(graph, config)
    gradients = [link.stroke for link in links if isinstance(link.stroke, GradientStroke)]

    return LayoutResult(
        nodes=graph.nodes,
        links=links,
        width=config.width,
        height=config.height,
        node_width=config.node_width,
        layer_count=la.layer_count,
        gradients=gradients,
        degenerate_layers=degenerate_layers,
    )
