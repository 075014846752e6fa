"""Tests for api.py and config.py — documents, config merging and entry points."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from sankey_layout import (
    InvalidDocument,
    InvalidNodeName,
    LayoutConfig,
    RandomColors,
    SankeyDocument,
    UnknownNodeReference,
    compute_layout,
    load_document,
    parse_document,
    render_svg,
)
from sankey_layout.api import dump_layout, resolve_config

DOC = {
    "nodes": [{"name": "A"}, {"name": "B"}],
    "links": [{"source": "A", "target": "B", "value": 10}],
}


# ─── LayoutConfig ─────────────────────────────────────────────────────────────


class TestLayoutConfig:
    def test_defaults(self):
        config = LayoutConfig(width=300, height=200)
        assert config.node_width == 20
        assert config.node_padding == 10
        assert config.curvature == 0.5

    def test_camel_case_aliases(self):
        config = LayoutConfig.model_validate({"width": 1, "height": 1, "nodeWidth": 8, "nodePadding": 2})
        assert (config.node_width, config.node_padding) == (8, 2)

    def test_snake_case_names(self):
        config = LayoutConfig(width=1, height=1, node_width=8)
        assert config.node_width == 8

    @pytest.mark.parametrize(
        "fields",
        [
            {"width": 0, "height": 100},
            {"width": 100, "height": -1},
            {"width": 100, "height": 100, "curvature": 1.5},
            {"width": 100, "height": 100, "nodePadding": -1},
            {"height": 100},
            {"width": 100, "height": 100, "padding": 5},
        ],
    )
    def test_invalid_values_rejected(self, fields):
        with pytest.raises(ValidationError):
            LayoutConfig.model_validate(fields)


# ─── Documents ────────────────────────────────────────────────────────────────


class TestParseDocument:
    def test_parses_nodes_links_and_options(self):
        doc = parse_document({**DOC, "width": 300, "height": 150, "nodeWidth": 12})
        assert [n.name for n in doc.nodes] == ["A", "B"]
        assert doc.links[0].value == 10
        assert doc.options == {"width": 300, "height": 150, "node_width": 12}

    def test_not_an_object(self):
        with pytest.raises(InvalidDocument):
            parse_document([1, 2, 3])

    def test_missing_links(self):
        with pytest.raises(InvalidDocument, match="links"):
            parse_document({"nodes": []})

    def test_non_object_entry(self):
        with pytest.raises(InvalidDocument, match="Link 0"):
            parse_document({"nodes": [], "links": ["A->B"]})

    def test_load_document(self, tmp_path):
        path = tmp_path / "doc.json"
        path.write_text('{"nodes": [{"name": "A"}], "links": [], "height": 50}')
        doc = load_document(path)
        assert isinstance(doc, SankeyDocument)
        assert doc.options == {"height": 50}

    def test_load_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{nodes:")
        with pytest.raises(InvalidDocument, match="invalid JSON"):
            load_document(path)


# ─── Config Resolution ────────────────────────────────────────────────────────


class TestResolveConfig:
    def test_document_options_used(self):
        doc = parse_document({**DOC, "width": 300, "height": 150, "nodePadding": 4})
        config = resolve_config(doc)
        assert (config.width, config.height, config.node_padding) == (300, 150, 4)

    def test_explicit_config_overrides_document(self):
        doc = parse_document({**DOC, "width": 300, "height": 150, "nodeWidth": 30})
        config = resolve_config(doc, LayoutConfig(width=500, height=250, node_width=8))
        assert (config.width, config.height, config.node_width) == (500, 250, 8)

    def test_config_defaults_do_not_override_document(self):
        """Fields left at their defaults on an explicit config keep the document's values."""
        doc = parse_document({**DOC, "nodeWidth": 30, "nodePadding": 12, "curvature": 0.25})
        config = resolve_config(doc, LayoutConfig(width=100, height=100))
        assert (config.node_width, config.node_padding, config.curvature) == (30, 12, 0.25)

    def test_config_set_to_default_value_still_overrides(self):
        doc = parse_document({**DOC, "nodePadding": 12})
        config = resolve_config(doc, LayoutConfig(width=100, height=100, nodePadding=10))
        assert config.node_padding == 10

    def test_keyword_overrides_win(self):
        doc = parse_document({**DOC, "width": 300, "height": 150})
        config = resolve_config(doc, LayoutConfig(width=500, height=250), nodeWidth=5, height=None)
        assert (config.width, config.height, config.node_width) == (500, 250, 5)

    def test_missing_size_rejected(self):
        with pytest.raises(ValidationError):
            resolve_config(parse_document(DOC))

    def test_unknown_keyword_option_rejected(self):
        with pytest.raises(ValidationError, match="padding"):
            resolve_config(parse_document(DOC), width=100, height=100, padding=5)


# ─── Entry Points ─────────────────────────────────────────────────────────────


class TestComputeLayout:
    def test_from_mapping(self):
        result = compute_layout(DOC, width=200, height=100)
        assert [n.layer for n in result.nodes] == [0, 1]
        assert result.links[0].thickness == pytest.approx(100)

    def test_each_call_builds_a_fresh_graph(self):
        """Layout state never leaks between calls."""
        first = compute_layout(DOC, width=200, height=100)
        second = compute_layout(DOC, width=400, height=100)
        assert first.nodes is not second.nodes
        assert first.nodes[1].x0 == 180
        assert second.nodes[1].x0 == 380

    def test_injected_colors(self):
        r1 = compute_layout(DOC, width=200, height=100, colors=RandomColors(seed=3))
        r2 = compute_layout(DOC, width=200, height=100, colors=RandomColors(seed=3))
        assert [n.color for n in r1.nodes] == [n.color for n in r2.nodes]

    def test_unknown_option_rejected(self):
        with pytest.raises(ValidationError):
            compute_layout(DOC, width=200, height=100, nodeGap=5)

    def test_errors_propagate(self):
        bad = {"nodes": [{"name": "A"}], "links": [{"source": "A", "target": "Z", "value": 1}]}
        with pytest.raises(UnknownNodeReference):
            compute_layout(bad, width=100, height=100)

    def test_numeric_node_name_rejected_before_rendering(self):
        doc = {"nodes": [{"name": 2020}, {"name": "B"}], "links": [{"source": 0, "target": 1, "value": 5}]}
        with pytest.raises(InvalidNodeName):
            render_svg(doc, width=200, height=100)

    def test_render_svg(self):
        svg = render_svg(DOC, LayoutConfig(width=200, height=100), tooltips=False)
        assert svg.startswith("<svg")
        assert "<title>" not in svg

    def test_dump_layout(self):
        data = dump_layout(compute_layout(DOC, width=200, height=100))
        assert data.startswith(b"{")
        assert b'"layerCount": 2' in data
