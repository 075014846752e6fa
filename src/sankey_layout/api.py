"""Public entry points: document loading, layout and SVG rendering."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import orjson

from sankey_layout.colors import ColorStrategy
from sankey_layout.config import LayoutConfig
from sankey_layout.errors import InvalidDocument
from sankey_layout.graph import FlowGraph, LinkSpec, NodeSpec
from sankey_layout.layout import sankey_layout
from sankey_layout.renderers.svg import InteractionHooks, SvgRenderer
from sankey_layout.types import LayoutResult

# Document keys that map onto LayoutConfig fields.
_OPTION_KEYS: dict[str, str] = {
    "width": "width",
    "height": "height",
    "nodeWidth": "node_width",
    "nodePadding": "node_padding",
    "curvature": "curvature",
}


@dataclass
class SankeyDocument:
    """Nodes, links and any layout options carried alongside them."""

    nodes: list[NodeSpec]
    links: list[LinkSpec]
    options: dict[str, Any] = field(default_factory=dict)


def parse_document(raw: object) -> SankeyDocument:
    """Validate the shape of ``{"nodes": [...], "links": [...], ...}``."""
    if not isinstance(raw, Mapping):
        raise InvalidDocument(f"Sankey document must be an object, got {type(raw).__name__}")

    nodes = raw.get("nodes")
    links = raw.get("links")
    if not isinstance(nodes, list):
        raise InvalidDocument("Sankey document needs a 'nodes' list")
    if not isinstance(links, list):
        raise InvalidDocument("Sankey document needs a 'links' list")
    for kind, items in (("node", nodes), ("link", links)):
        for i, item in enumerate(items):
            if not isinstance(item, Mapping):
                raise InvalidDocument(f"{kind.capitalize()} {i} must be an object, got {type(item).__name__}")

    return SankeyDocument(
        nodes=[NodeSpec.from_dict(n) for n in nodes],
        links=[LinkSpec.from_dict(link) for link in links],
        options={name: raw[key] for key, name in _OPTION_KEYS.items() if key in raw},
    )


def load_document(path: str | Path) -> SankeyDocument:
    """Read and parse a JSON Sankey document."""
    try:
        raw = orjson.loads(Path(path).read_bytes())
    except orjson.JSONDecodeError as exc:
        raise InvalidDocument(f"{path}: invalid JSON ({exc})") from exc
    return parse_document(raw)


def resolve_config(
    document: SankeyDocument,
    config: LayoutConfig | None = None,
    **options: Any,
) -> LayoutConfig:
    """Merge document options, an explicit config and keyword overrides (last wins).

    Only fields set explicitly on ``config`` override the document; its defaults
    do not. Unknown keyword options are rejected by ``LayoutConfig``.
    """
    merged: dict[str, Any] = dict(document.options)
    if config is not None:
        merged.update(config.model_dump(exclude_unset=True))
    merged.update({_OPTION_KEYS.get(k, k): v for k, v in options.items() if v is not None})
    return LayoutConfig.model_validate(merged)


def compute_layout(
    data: SankeyDocument | Mapping[str, Any],
    config: LayoutConfig | None = None,
    *,
    colors: ColorStrategy | None = None,
    **options: Any,
) -> LayoutResult:
    """Build a fresh flow graph from ``data`` and lay it out."""
    document = data if isinstance(data, SankeyDocument) else parse_document(data)
    layout_config = resolve_config(document, config, **options)
    graph = FlowGraph.build(document.nodes, document.links, colors=colors)
    return sankey_layout(graph, layout_config)


def render_svg(
    data: SankeyDocument | Mapping[str, Any],
    config: LayoutConfig | None = None,
    *,
    colors: ColorStrategy | None = None,
    hooks: InteractionHooks | None = None,
    tooltips: bool = True,
    **options: Any,
) -> str:
    """Lay out ``data`` and render it as an SVG document string."""
    result = compute_layout(data, config, colors=colors, **options)
    return SvgRenderer(hooks=hooks, tooltips=tooltips).render(result)


def dump_layout(result: LayoutResult) -> bytes:
    """Serialize a layout result as indented JSON."""
    return orjson.dumps(result.to_dict(), option=orjson.OPT_INDENT_2)
