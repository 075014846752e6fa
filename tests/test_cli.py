"""Tests for cli.py — argument handling, output formats and error exits."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest
from loguru import logger

from sankey_layout.cli import create_parser, main

# ─── Helpers ──────────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def restore_logger():
    """main() swaps the loguru sinks; put the default stderr sink back afterwards."""
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def doc_path(tmp_path: Path) -> Path:
    path = tmp_path / "flows.json"
    path.write_text(
        json.dumps(
            {
                "width": 200,
                "height": 100,
                "nodes": [{"name": "A"}, {"name": "B"}],
                "links": [{"source": "A", "target": "B", "value": 10}],
            }
        )
    )
    return path


# ─── Parser ───────────────────────────────────────────────────────────────────


class TestParser:
    def test_defaults(self):
        args = create_parser().parse_args(["in.json"])
        assert args.format == "svg"
        assert args.output is None
        assert args.width is None
        assert args.seed is None

    def test_rejects_unknown_format(self):
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args(["in.json", "--format", "png"])
        assert exc_info.value.code == 2


# ─── Main ─────────────────────────────────────────────────────────────────────


class TestMain:
    def test_svg_to_stdout(self, doc_path, capsys):
        assert main([str(doc_path)]) == 0
        out = capsys.readouterr().out
        assert out.startswith("<svg")
        assert out.rstrip().endswith("</svg>")

    def test_svg_to_file(self, doc_path, tmp_path):
        out_path = tmp_path / "out.svg"
        assert main([str(doc_path), "-o", str(out_path)]) == 0
        assert out_path.read_text().startswith("<svg")

    def test_json_format(self, doc_path, capsys):
        assert main([str(doc_path), "--format", "json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["layerCount"] == 2
        assert [n["name"] for n in data["nodes"]] == ["A", "B"]

    def test_size_overrides(self, doc_path, capsys):
        assert main([str(doc_path), "--format", "json", "--width", "400", "--node-width", "10"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["width"] == 400
        assert data["nodes"][1]["x0"] == 390

    def test_no_tooltips(self, doc_path, capsys):
        assert main([str(doc_path), "--no-tooltips"]) == 0
        assert "<title>" not in capsys.readouterr().out

    def test_seeded_colors_reproducible(self, doc_path, capsys):
        main([str(doc_path), "--format", "json", "--seed", "11"])
        first = json.loads(capsys.readouterr().out)
        main([str(doc_path), "--format", "json", "--seed", "11"])
        second = json.loads(capsys.readouterr().out)
        assert [n["color"] for n in first["nodes"]] == [n["color"] for n in second["nodes"]]

    def test_layout_error_exit_code(self, tmp_path, capsys):
        path = tmp_path / "cycle.json"
        path.write_text(
            json.dumps(
                {
                    "width": 100,
                    "height": 100,
                    "nodes": [{"name": "A"}, {"name": "B"}],
                    "links": [{"source": "A", "target": "B", "value": 1}, {"source": "B", "target": "A", "value": 1}],
                }
            )
        )
        assert main([str(path)]) == 1
        assert "error: No source nodes" in capsys.readouterr().err

    def test_missing_size_exit_code(self, tmp_path, capsys):
        path = tmp_path / "nosize.json"
        path.write_text(json.dumps({"nodes": [], "links": []}))
        assert main([str(path)]) == 1
        assert "error:" in capsys.readouterr().err

    def test_missing_file_exit_code(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.json")]) == 1
        assert "cannot read" in capsys.readouterr().err

    def test_non_string_node_name_exit_code(self, tmp_path, capsys):
        path = tmp_path / "numeric-name.json"
        path.write_text(
            json.dumps(
                {
                    "width": 200,
                    "height": 100,
                    "nodes": [{"name": 2020}, {"name": "B"}],
                    "links": [{"source": 0, "target": 1, "value": 5}],
                }
            )
        )
        assert main([str(path)]) == 1
        assert "error: Node 0 has invalid name 2020" in capsys.readouterr().err

    def test_unwritable_output_exit_code(self, doc_path, tmp_path, capsys):
        out_path = tmp_path / "missing-dir" / "out.svg"
        assert main([str(doc_path), "-o", str(out_path)]) == 1
        assert f"cannot write {out_path}" in capsys.readouterr().err
        assert not out_path.exists()
