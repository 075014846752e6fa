"""Errors raised while building or laying out a Sankey graph."""

from __future__ import annotations


class SankeyError(Exception):
    """Base class for every error the layout engine raises."""


class UnknownNodeReference(SankeyError):
    """A link refers to a node name that does not exist (or uses an unsupported reference type)."""

    def __init__(self, reference: object, role: str) -> None:
        self.reference = reference
        self.role = role
        super().__init__(f"{role.capitalize()} node {reference!r} not found in nodes list")


class NodeIndexOutOfRange(SankeyError):
    """A numeric link endpoint falls outside ``[0, node_count)``."""

    def __init__(self, index: int, role: str, node_count: int) -> None:
        self.index = index
        self.role = role
        self.node_count = node_count
        super().__init__(f"{role.capitalize()} index {index} out of range for {node_count} node(s)")


class InvalidLinkValue(SankeyError):
    """A link value does not coerce to a finite number >= 0."""

    def __init__(self, value: object, link_index: int) -> None:
        self.value = value
        self.link_index = link_index
        super().__init__(f"Link {link_index} has invalid value {value!r} (expected a finite number >= 0)")


class InvalidNodeName(SankeyError):
    """A node name is present but is not a string."""

    def __init__(self, name: object, node_index: int) -> None:
        self.name = name
        self.node_index = node_index
        super().__init__(f"Node {node_index} has invalid name {name!r} (expected a string)")


class InvalidNodeColor(SankeyError):
    """A node color is not a ``#rgb`` or ``#rrggbb`` hex string."""

    def __init__(self, color: object, node_index: int) -> None:
        self.color = color
        self.node_index = node_index
        super().__init__(f"Node {node_index} has invalid color {color!r}")


class NoSourceNodes(SankeyError):
    """No node has zero inflow, so layering has nowhere to start."""

    def __init__(self) -> None:
        super().__init__("No source nodes: every node has incoming flow")


class CyclicFlow(SankeyError):
    """Layer relaxation ran past the longest possible acyclic path."""

    def __init__(self, cycle: list[int], names: list[str]) -> None:
        self.cycle = cycle
        path = " -> ".join(names + names[:1]) if names else "<unknown>"
        super().__init__(f"Flow graph contains a cycle: {path}")


class UnreachableNode(SankeyError):
    """Nodes that no source node reaches, so they never receive a layer."""

    def __init__(self, indices: list[int], names: list[str]) -> None:
        self.indices = indices
        super().__init__(f"Node(s) unreachable from any source node: {', '.join(names)}")


class InvalidDocument(SankeyError):
    """A Sankey document is not an object with ``nodes`` and ``links`` lists."""
