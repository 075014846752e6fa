"""Command line: lay out a JSON Sankey document and write SVG or layout JSON."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from sankey_layout.api import compute_layout, dump_layout, load_document
from sankey_layout.colors import ColorStrategy, RandomColors
from sankey_layout.errors import SankeyError
from sankey_layout.renderers.svg import SvgRenderer


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sankey-layout",
        description="Lay out a Sankey flow diagram and render it as SVG.",
    )
    parser.add_argument("input", help="Path to a JSON document with 'nodes' and 'links'")
    parser.add_argument("-o", "--output", help="Write to this file instead of stdout")
    parser.add_argument("--format", choices=("svg", "json"), default="svg", help="Output format (default: svg)")
    parser.add_argument("--width", type=float, help="Drawing width (overrides the document)")
    parser.add_argument("--height", type=float, help="Drawing height (overrides the document)")
    parser.add_argument("--node-width", type=float, help="Node rectangle width (default 20)")
    parser.add_argument("--node-padding", type=float, help="Vertical gap between nodes (default 10)")
    parser.add_argument("--curvature", type=float, help="Link curvature in [0, 1] (default 0.5)")
    parser.add_argument("--seed", type=int, help="Use seeded random colors for nodes without a color")
    parser.add_argument("--no-tooltips", action="store_true", help="Omit <title> tooltips from the SVG")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log layout progress to stderr")
    return parser


def _configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


def main(argv: list[str] | None = None) -> int:
    args = create_parser().parse_args(argv)
    _configure_logging(args.verbose)

    colors: ColorStrategy | None = RandomColors(seed=args.seed) if args.seed is not None else None

    try:
        document = load_document(args.input)
        result = compute_layout(
            document,
            colors=colors,
            width=args.width,
            height=args.height,
            node_width=args.node_width,
            node_padding=args.node_padding,
            curvature=args.curvature,
        )
    except (SankeyError, ValidationError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"error: cannot read {args.input}: {exc.strerror}", file=sys.stderr)
        return 1

    if args.format == "json":
        output = dump_layout(result)
    else:
        output = SvgRenderer(tooltips=not args.no_tooltips).render(result).encode()

    if args.output:
        try:
            Path(args.output).write_bytes(output + b"\n")
        except OSError as exc:
            print(f"error: cannot write {args.output}: {exc.strerror}", file=sys.stderr)
            return 1
        logger.debug("Wrote {} bytes to {}", len(output) + 1, args.output)
    else:
        sys.stdout.write(output.decode() + "\n")
    return 0
