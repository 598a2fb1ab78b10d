"""Unit tests for Figma node normalisation"""

import pytest

from component_engine.integrations import node_from_figma, nodes_from_figma
from component_engine.integrations.figma_loader import (
    figma_bounds,
    figma_corner_radius,
    figma_layout,
    figma_number,
    figma_paints,
    figma_typography,
)
from component_engine.models import NodeKind
from component_engine.settings import EngineConfig

REST_FRAME = {
    "id": "1:1",
    "name": "Hero",
    "type": "FRAME",
    "absoluteBoundingBox": {"x": 100, "y": 200, "width": 400, "height": 300},
    "layoutMode": "VERTICAL",
    "itemSpacing": 16,
    "paddingTop": 24,
    "fills": [{"type": "SOLID", "color": {"r": 1, "g": 0, "b": 0, "a": 1}, "opacity": 0.5}],
    "effects": [{"type": "DROP_SHADOW", "visible": True}],
    "rectangleCornerRadii": [4, 8, 8, 4],
    "children": [
        {
            "id": "1:2",
            "name": "Title",
            "type": "TEXT",
            "characters": "Build faster",
            "style": {"fontSize": 48, "fontFamily": "Inter"},
            "absoluteBoundingBox": {"x": 120, "y": 260, "width": 300, "height": 56},
        },
        {
            "id": "1:3",
            "name": "Cover",
            "type": "RECTANGLE",
            "relativeTransform": [[1, 0, 5], [0, 1, 7]],
            "absoluteBoundingBox": {"x": 999, "y": 999, "width": 100, "height": 100},
            "fills": [{"type": "IMAGE"}],
        },
        {"id": "1:4", "name": "Hidden", "type": "FRAME", "visible": False},
    ],
}

PLUGIN_NODE = {
    "id": 42,
    "name": "Avatar",
    "type": "ELLIPSE",
    "width": 40,
    "height": 40,
    "cornerRadius": 20,
}


class TestNodeFromFigma:
    """Test conversion of REST and plugin export shapes."""

    def test_root(self):
        node = node_from_figma(REST_FRAME)

        assert node.name == "Hero"
        assert node.kind == NodeKind.FRAME
        assert node.width == 400 and node.height == 300
        assert (node.geometry.x, node.geometry.y) == (100, 200)
        assert node.layout.mode == "VERTICAL"
        assert node.layout.item_spacing == 16
        assert node.layout.padding[0] == 24
        assert node.corner_radius == 8
        assert node.effects[0].kind == "DROP_SHADOW"

    def test_fill_opacity(self):
        node = node_from_figma(REST_FRAME)
        assert node.fills[0].color == (1.0, 0.0, 0.0, 0.5)

    def test_children_relative_offsets(self):
        title, cover = node_from_figma(REST_FRAME).children

        assert (title.geometry.x, title.geometry.y) == (20, 60)
        assert (cover.geometry.x, cover.geometry.y) == (5, 7)

    def test_text_properties(self):
        title = node_from_figma(REST_FRAME).children[0]

        assert title.kind == NodeKind.TEXT
        assert title.text == "Build faster"
        assert title.font_size == 48
        assert title.font_family == "Inter"

    def test_invisible_children_dropped(self):
        names = [c.name for c in node_from_figma(REST_FRAME).children]
        assert "Hidden" not in names

    def test_image_fill(self):
        cover = node_from_figma(REST_FRAME).children[1]
        assert cover.fills[0].kind == "IMAGE"

    def test_plugin_shape(self):
        node = node_from_figma(PLUGIN_NODE)

        assert node.id == "42"
        assert node.kind == NodeKind.ELLIPSE
        assert node.width == 40
        assert node.geometry.x is None
        assert node.corner_radius == 20
        assert node.text is None

    def test_depth_cut(self):
        node = node_from_figma(REST_FRAME, max_depth=0)
        assert node.children == ()

    def test_depth_from_config(self):
        nested = {"name": "L0", "type": "FRAME", "children": [
            {"name": "L1", "type": "FRAME", "children": [{"name": "L2", "type": "FRAME"}]},
        ]}
        node = node_from_figma(nested, config=EngineConfig(max_depth=1))

        assert node.children[0].name == "L1"
        assert node.children[0].children == ()

    def test_nodes_from_figma(self):
        nodes = nodes_from_figma([REST_FRAME, PLUGIN_NODE])
        assert [n.name for n in nodes] == ["Hero", "Avatar"]


class TestHelpers:
    """Test individual property helpers."""

    def test_bounds_size_vector(self):
        assert figma_bounds({"size": {"x": 10, "y": 20}})["height"] == 20

    def test_unknown_type(self):
        assert node_from_figma({"name": "X", "type": "STICKY"}).kind == NodeKind.OTHER

    def test_legacy_symbol(self):
        assert node_from_figma({"name": "X", "type": "SYMBOL"}).kind == NodeKind.COMPONENT

    def test_layout_none(self):
        assert figma_layout({"layoutMode": "NONE"}).mode is None

    def test_hidden_paint(self):
        paints = figma_paints([{"type": "SOLID", "visible": False}])
        assert paints[0].visible is False
        assert paints[0].color is None

    def test_corner_radius_default(self):
        assert figma_corner_radius({}) == 0

    @pytest.mark.parametrize(
        "node,expected",
        [
            ({"style": {"fontSize": 14}}, (14.0, None)),
            ({"typeStyle": {"fontSize": 12, "fontFamily": "Roboto"}}, (12.0, "Roboto")),
            ({}, (None, None)),
        ],
    )
    def test_typography(self, node, expected):
        assert figma_typography(node) == expected

    def test_null_padding(self):
        layout = figma_layout({"layoutMode": "VERTICAL", "paddingTop": None, "itemSpacing": None})

        assert layout.padding == (0.0, 0.0, 0.0, 0.0)
        assert layout.item_spacing == 0.0

    def test_mixed_corner_radius(self):
        assert figma_corner_radius({"cornerRadius": "mixed"}) == 0
        assert figma_corner_radius({"cornerRadius": "mixed", "rectangleCornerRadii": [4, 12, 12, 4]}) == 12

    def test_mixed_values_in_a_tree(self):
        data = {
            "name": "Card", "type": "FRAME", "cornerRadius": "mixed", "paddingLeft": None,
            "fills": "mixed",
            "children": [{"name": "Title", "type": "TEXT", "characters": "Hi", "style": {"fontSize": "mixed"}}],
        }
        node = node_from_figma(data)

        assert node.corner_radius == 0
        assert node.fills == ()
        assert node.children[0].font_size is None

    @pytest.mark.parametrize("value,expected", [(3, 3.0), (2.5, 2.5), (None, 0.0), ("mixed", 0.0), (True, 0.0)])
    def test_number(self, value, expected):
        assert figma_number(value) == expected
