"""Graph builder — resolves raw node/link descriptors into an indexed flow graph.

Nodes are addressed by their position in the input list. Links may name their
endpoints either by node name or by zero-based index; both are resolved here
so the layout phases only ever see integer indices.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

import networkx as nx
from loguru import logger

from sankey_layout.colors import ColorStrategy, PaletteColors, is_hex_color
from sankey_layout.errors import (
    InvalidLinkValue,
    InvalidNodeColor,
    InvalidNodeName,
    NodeIndexOutOfRange,
    UnknownNodeReference,
)

# ─── Input Descriptors ────────────────────────────────────────────────────────


@dataclass
class NodeSpec:
    """A node as supplied by the caller. Both fields are optional."""

    name: str | None = None
    color: str | None = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> NodeSpec:
        return cls(name=raw.get("name"), color=raw.get("color"))


@dataclass
class LinkSpec:
    """A link as supplied by the caller; endpoints are names or indices."""

    source: Any
    target: Any
    value: Any

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> LinkSpec:
        return cls(source=raw.get("source"), target=raw.get("target"), value=raw.get("value"))


# ─── Graph Records ────────────────────────────────────────────────────────────


@dataclass(eq=False)
class SankeyLink:
    """A resolved link between two node indices."""

    index: int
    source: int
    target: int
    value: float


@dataclass(eq=False)
class SankeyNode:
    """A node plus everything the layout phases attach to it."""

    index: int
    name: str
    color: str
    layer: int | None = None
    value_in: float = 0.0
    value_out: float = 0.0
    x0: float = 0.0
    x1: float = 0.0
    y0: float = 0.0
    y1: float = 0.0
    source_links: list[SankeyLink] = field(default_factory=list)
    target_links: list[SankeyLink] = field(default_factory=list)
    out_offset: float = 0.0
    in_offset: float = 0.0

    @property
    def value(self) -> float:
        """The flow that sizes this node: the larger of inflow and outflow."""
        return max(self.value_in, self.value_out)

    @property
    def height(self) -> float:
        return self.y1 - self.y0


@dataclass
class FlowGraph:
    """Indexed flow graph built fresh for every layout call.

    ``digraph`` mirrors the links as a MultiDiGraph (node key = node index,
    edge key = link index) for cycle and reachability queries.
    """

    nodes: list[SankeyNode]
    links: list[SankeyLink]
    digraph: nx.MultiDiGraph

    @classmethod
    def build(
        cls,
        nodes: Iterable[NodeSpec | Mapping[str, Any]],
        links: Iterable[LinkSpec | Mapping[str, Any]],
        colors: ColorStrategy | None = None,
    ) -> FlowGraph:
        """Resolve descriptors into a graph with adjacency lists and in/out totals."""
        colors = colors if colors is not None else PaletteColors()

        graph_nodes = [_make_node(i, _as_node_spec(spec), colors) for i, spec in enumerate(nodes)]
        name_to_index = build_name_index(graph_nodes)

        digraph: nx.MultiDiGraph = nx.MultiDiGraph()
        digraph.add_nodes_from(n.index for n in graph_nodes)

        graph_links: list[SankeyLink] = []
        for link_index, raw in enumerate(links):
            spec = _as_link_spec(raw)
            link = SankeyLink(
                index=link_index,
                source=resolve_reference(spec.source, name_to_index, "source"),
                target=resolve_reference(spec.target, name_to_index, "target"),
                value=coerce_value(spec.value, link_index),
            )
            _attach(link, graph_nodes)
            digraph.add_edge(link.source, link.target, key=link.index, value=link.value)
            graph_links.append(link)

        logger.debug("Built flow graph with {} node(s) and {} link(s)", len(graph_nodes), len(graph_links))
        return cls(nodes=graph_nodes, links=graph_links, digraph=digraph)

    def node_names(self, indices: Iterable[int]) -> list[str]:
        return [self.nodes[i].name for i in indices]


# ─── Resolution Helpers ───────────────────────────────────────────────────────


def _as_node_spec(raw: NodeSpec | Mapping[str, Any]) -> NodeSpec:
    return raw if isinstance(raw, NodeSpec) else NodeSpec.from_dict(raw)


def _as_link_spec(raw: LinkSpec | Mapping[str, Any]) -> LinkSpec:
    return raw if isinstance(raw, LinkSpec) else LinkSpec.from_dict(raw)


def _make_node(index: int, spec: NodeSpec, colors: ColorStrategy) -> SankeyNode:
    if spec.name is None or spec.name == "":
        name = f"Node {index}"
    elif isinstance(spec.name, str):
        name = spec.name
    else:
        raise InvalidNodeName(spec.name, index)
    if spec.color is not None and spec.color != "":
        if not is_hex_color(spec.color):
            raise InvalidNodeColor(spec.color, index)
        color = spec.color
    else:
        color = colors.color_for(index)
    return SankeyNode(index=index, name=name, color=color)


def build_name_index(nodes: list[SankeyNode]) -> dict[str, int]:
    """Map node name → index. The first node carrying a name owns it."""
    name_to_index: dict[str, int] = {}
    for node in nodes:
        if node.name in name_to_index:
            logger.warning(
                "Duplicate node name {!r} at index {}; links by name resolve to index {}",
                node.name,
                node.index,
                name_to_index[node.name],
            )
            continue
        name_to_index[node.name] = node.index
    return name_to_index


def resolve_reference(ref: object, name_to_index: Mapping[str, int], role: str) -> int:
    """Turn a name or index reference into an index.

    Indices are returned unchecked; bounds are enforced when the link is
    attached to the adjacency lists.
    """
    if isinstance(ref, str):
        if ref not in name_to_index:
            raise UnknownNodeReference(ref, role)
        return name_to_index[ref]
    if isinstance(ref, bool):
        raise UnknownNodeReference(ref, role)
    if isinstance(ref, int):
        return ref
    if isinstance(ref, float) and ref.is_integer():
        return int(ref)
    raise UnknownNodeReference(ref, role)


def coerce_value(value: object, link_index: int) -> float:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise InvalidLinkValue(value, link_index) from None
    if not math.isfinite(number) or number < 0:
        raise InvalidLinkValue(value, link_index)
    return number


def _attach(link: SankeyLink, nodes: list[SankeyNode]) -> None:
    node_count = len(nodes)
    for index, role in ((link.source, "source"), (link.target, "target")):
        if not 0 <= index < node_count:
            raise NodeIndexOutOfRange(index, role, node_count)

    source = nodes[link.source]
    target = nodes[link.target]
    source.source_links.append(link)
    target.target_links.append(link)
    source.value_out += link.value
    target.value_in += link.value
