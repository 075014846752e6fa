"""Node color assignment.

Nodes without an explicit color get one from a ``ColorStrategy``. The default
cycles a fixed palette by node index so layouts are reproducible; a seeded
``RandomColors`` gives random hex colors from a caller-owned generator.
"""

from __future__ import annotations

import random
import re
from typing import Protocol

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

# d3 schemeCategory10
CATEGORY10: tuple[str, ...] = (
    "#1f77b4",
    "#ff7f0e",
    "#2ca02c",
    "#d62728",
    "#9467bd",
    "#8c564b",
    "#e377c2",
    "#7f7f7f",
    "#bcbd22",
    "#17becf",
)


def is_hex_color(value: object) -> bool:
    return isinstance(value, str) and _HEX_COLOR.match(value) is not None


class ColorStrategy(Protocol):
    """Anything that can pick a color for the node at ``index``."""

    def color_for(self, index: int) -> str: ...


class PaletteColors:
    """Cycle through a palette by node index."""

    def __init__(self, palette: tuple[str, ...] | list[str] = CATEGORY10) -> None:
        if not palette:
            raise ValueError("palette must not be empty")
        self.palette = tuple(palette)

    def color_for(self, index: int) -> str:
        return self.palette[index % len(self.palette)]


class RandomColors:
    """Random ``#RRGGBB`` colors drawn from a caller-owned generator."""

    def __init__(self, rng: random.Random | None = None, seed: int | None = None) -> None:
        self.rng = rng if rng is not None else random.Random(seed)

    def color_for(self, index: int) -> str:
        return f"#{self.rng.randrange(0x1000000):06X}"
