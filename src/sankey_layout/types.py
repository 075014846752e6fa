"""Layout types shared between the layout engine and renderers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from sankey_layout.graph import SankeyNode


def fmt_number(value: float) -> str:
    """Compact fixed-point text for SVG attributes (at most two decimals)."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


@dataclass(frozen=True)
class Point:
    """A 2D point in drawing coordinates."""

    x: float
    y: float


@dataclass(frozen=True)
class LinkPath:
    """A cubic Bezier from the source node's right edge to the target's left edge."""

    start: Point
    c1: Point
    c2: Point
    end: Point

    @property
    def d(self) -> str:
        """SVG path data."""
        s, c1, c2, e = self.start, self.c1, self.c2, self.end
        f = fmt_number
        return f"M{f(s.x)},{f(s.y)} C{f(c1.x)},{f(c1.y)} {f(c2.x)},{f(c2.y)} {f(e.x)},{f(e.y)}"


@dataclass(frozen=True)
class SolidStroke:
    color: str

    @property
    def paint(self) -> str:
        return self.color


@dataclass(frozen=True)
class GradientStroke:
    """A two-stop horizontal gradient spanning ``x1``..``x2``.

    ``id`` is unique within one layout so renderers can register the gradient
    once and reference it from the link.
    """

    id: str
    start_color: str
    end_color: str
    x1: float
    x2: float

    @property
    def paint(self) -> str:
        return f"url(#{self.id})"


Stroke = SolidStroke | GradientStroke


@dataclass(frozen=True)
class PositionedLink:
    """A link with its resolved thickness, anchors, path and stroke."""

    index: int
    source: int
    target: int
    value: float
    thickness: float
    sy: float
    ty: float
    path: LinkPath
    stroke: Stroke


@dataclass
class LayoutResult:
    """Self-contained layout output — everything renderers need."""

    nodes: list[SankeyNode]
    links: list[PositionedLink]
    width: float
    height: float
    node_width: float
    layer_count: int
    gradients: list[GradientStroke] = field(default_factory=list)
    degenerate_layers: list[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Plain-data view of the layout, suitable for JSON output."""
        return {
            "width": self.width,
            "height": self.height,
            "layerCount": self.layer_count,
            "degenerateLayers": list(self.degenerate_layers),
            "nodes": [
                {
                    "index": n.index,
                    "name": n.name,
                    "color": n.color,
                    "layer": n.layer,
                    "valueIn": n.value_in,
                    "valueOut": n.value_out,
                    "x0": n.x0,
                    "x1": n.x1,
                    "y0": n.y0,
                    "y1": n.y1,
                }
                for n in self.nodes
            ],
            "links": [
                {
                    "index": link.index,
                    "source": link.source,
                    "target": link.target,
                    "value": link.value,
                    "thickness": link.thickness,
                    "sy": link.sy,
                    "ty": link.ty,
                    "path": link.path.d,
                    "pathControlPoints": {
                        name: {"x": point.x, "y": point.y}
                        for name, point in (
                            ("start", link.path.start),
                            ("c1", link.path.c1),
                            ("c2", link.path.c2),
                            ("end", link.path.end),
                        )
                    },
                    "stroke": link.stroke.paint,
                }
                for link in self.links
            ],
            "gradients": [
                {
                    "id": g.id,
                    "startColor": g.start_color,
                    "endColor": g.end_color,
                    "x1": g.x1,
                    "x2": g.x2,
                }
                for g in self.gradients
            ],
        }
