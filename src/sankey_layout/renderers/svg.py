"""SVG renderer — renders a Sankey layout to an SVG string."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from sankey_layout.graph import SankeyNode
from sankey_layout.types import GradientStroke, LayoutResult, PositionedLink, fmt_number

# ─── Constants ──────────────────────────────────────────────────────────────

CSS_PREFIX = "sankey"
FONT_SIZE = 12
FONT_FAMILY = "sans-serif"
LINK_OPACITY = 0.2
LINK_HOVER_OPACITY = 0.7
NODE_HOVER_FILL = "orange"
NODE_RADIUS = 5

_STYLE = (
    f".{CSS_PREFIX}-link {{ stroke-opacity: {LINK_OPACITY}; }}\n"
    f".{CSS_PREFIX}-link:hover {{ stroke-opacity: {LINK_HOVER_OPACITY}; }}\n"
    f".{CSS_PREFIX}-rect:hover {{ fill: {NODE_HOVER_FILL}; }}"
)


def _escape(s: str) -> str:
    return s.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;")


def _font(size: int = FONT_SIZE) -> str:
    return f'font-family="{FONT_FAMILY}" font-size="{size}"'


def _attrs(extra: Mapping[str, str] | None) -> str:
    if not extra:
        return ""
    return "".join(f' {name}="{_escape(str(value))}"' for name, value in extra.items())


# ─── Interaction Hooks ──────────────────────────────────────────────────────


@dataclass
class InteractionHooks:
    """Caller-supplied extra attributes keyed by node / link index.

    Lets callers attach ``onclick`` handlers, ``data-*`` attributes and the
    like without the layout engine knowing about presentation events.
    """

    node_attrs: dict[int, dict[str, str]] = field(default_factory=dict)
    link_attrs: dict[int, dict[str, str]] = field(default_factory=dict)


# ─── Gradient Definitions ───────────────────────────────────────────────────


def _render_gradient(g: GradientStroke) -> str:
    return "\n".join(
        [
            f'  <linearGradient id="{_escape(g.id)}" gradientUnits="userSpaceOnUse" '
            f'x1="{fmt_number(g.x1)}" y1="0" x2="{fmt_number(g.x2)}" y2="0">',
            f'    <stop offset="0%" stop-color="{g.start_color}"/>',
            f'    <stop offset="100%" stop-color="{g.end_color}"/>',
            "  </linearGradient>",
        ]
    )


# ─── Link Rendering ─────────────────────────────────────────────────────────


def _render_link(
    link: PositionedLink,
    nodes: list[SankeyNode],
    extra: Mapping[str, str] | None,
    tooltips: bool,
) -> str:
    attrs = (
        f'class="{CSS_PREFIX}-link" d="{link.path.d}" stroke="{link.stroke.paint}" '
        f'stroke-width="{fmt_number(link.thickness)}" fill="none"'
    )
    if not tooltips:
        return f"<path {attrs}{_attrs(extra)}/>"

    source, target = nodes[link.source], nodes[link.target]
    title = _escape(f"Link: {source.name} -> {target.name}\nValue: {link.value:g}")
    return f"<path {attrs}{_attrs(extra)}><title>{title}</title></path>"


# ─── Node Rendering ─────────────────────────────────────────────────────────


def _render_node(
    node: SankeyNode,
    node_width: float,
    extra: Mapping[str, str] | None,
    tooltips: bool,
) -> str:
    x, y, h = fmt_number(node.x0), fmt_number(node.y0), fmt_number(node.height)
    cx = fmt_number(node.x0 + node_width / 2)
    cy = fmt_number(node.y0 + node.height / 2)

    title = ""
    if tooltips:
        text = f"Node: {node.name}\nIn: {node.value_in:g}\nOut: {node.value_out:g}"
        title = f"<title>{_escape(text)}</title>"

    rect = (
        f'<rect class="{CSS_PREFIX}-rect" x="{x}" y="{y}" width="{fmt_number(node_width)}" height="{h}" '
        f'fill="{node.color}" stroke="#ffffff" stroke-width="2" rx="{NODE_RADIUS}" ry="{NODE_RADIUS}">{title}</rect>'
    )
    label = (
        f'<text class="{CSS_PREFIX}-text" x="{cx}" y="{cy}" dy="0.35em" text-anchor="middle" {_font()}>'
        f"{_escape(node.name)}</text>"
    )
    return "\n".join([f'<g class="{CSS_PREFIX}-node"{_attrs(extra)}>', rect, label, "</g>"])


# ─── Public Renderer ────────────────────────────────────────────────────────


class SvgRenderer:
    """SVG renderer — consumes a LayoutResult, produces an SVG string."""

    def __init__(self, hooks: InteractionHooks | None = None, tooltips: bool = True) -> None:
        self.hooks = hooks if hooks is not None else InteractionHooks()
        self.tooltips = tooltips

    def render(self, result: LayoutResult) -> str:
        w, h = fmt_number(result.width), fmt_number(result.height)
        parts = [
            f'<svg xmlns="http://www.w3.org/2000/svg" class="{CSS_PREFIX}-svg" width="{w}" height="{h}" '
            f'viewBox="0 0 {w} {h}">',
            f"<style>\n{_STYLE}\n</style>",
        ]

        # Gradients must be registered before the links referencing them.
        if result.gradients:
            parts.append("<defs>")
            parts.extend(_render_gradient(g) for g in result.gradients)
            parts.append("</defs>")

        # Links (behind nodes), in input order
        for link in result.links:
            parts.append(_render_link(link, result.nodes, self.hooks.link_attrs.get(link.index), self.tooltips))

        # Nodes (on top)
        for node in result.nodes:
            parts.append(_render_node(node, result.node_width, self.hooks.node_attrs.get(node.index), self.tooltips))

        parts.append("</svg>")
        return "\n".join(parts)
