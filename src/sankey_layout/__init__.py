"""Layered Sankey diagram layout with SVG rendering."""

from sankey_layout.api import SankeyDocument, compute_layout, load_document, parse_document, render_svg
from sankey_layout.colors import PaletteColors, RandomColors
from sankey_layout.config import LayoutConfig
from sankey_layout.errors import (
    CyclicFlow,
    InvalidDocument,
    InvalidLinkValue,
    InvalidNodeColor,
    InvalidNodeName,
    NodeIndexOutOfRange,
    NoSourceNodes,
    SankeyError,
    UnknownNodeReference,
    UnreachableNode,
)
from sankey_layout.graph import FlowGraph, LinkSpec, NodeSpec
from sankey_layout.layout import sankey_layout
from sankey_layout.types import LayoutResult

__all__ = [
    "CyclicFlow",
    "FlowGraph",
    "InvalidDocument",
    "InvalidLinkValue",
    "InvalidNodeColor",
    "InvalidNodeName",
    "LayoutConfig",
    "LayoutResult",
    "LinkSpec",
    "NodeIndexOutOfRange",
    "NoSourceNodes",
    "NodeSpec",
    "PaletteColors",
    "RandomColors",
    "SankeyDocument",
    "SankeyError",
    "UnknownNodeReference",
    "UnreachableNode",
    "compute_layout",
    "load_document",
    "parse_document",
    "render_svg",
    "sankey_layout",
]
