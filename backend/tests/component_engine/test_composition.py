"""Unit tests for composition, layout and characteristics analysis"""

import pytest

from component_engine.blocks import (
    analyze,
    analyze_composition,
    characteristics,
    cluster_rows,
    detect_layout_pattern,
)
from component_engine.context import ClassificationContext
from component_engine.models import (
    ComponentType,
    DesignNode,
    Geometry,
    LayoutFacets,
    LayoutPattern,
    NodeKind,
    Paint,
)
from component_engine.settings import EngineConfig


def _button():
    return DesignNode(
        "Primary Button",
        kind=NodeKind.INSTANCE,
        geometry=Geometry(width=120, height=40),
        fills=(Paint(),),
        corner_radius=6,
        children=(DesignNode("Label", kind=NodeKind.TEXT, text="Go"),),
    )


def _box(name, y=None, mode=None, children=()):
    return DesignNode(
        name,
        geometry=Geometry(width=200, height=80, x=0, y=y),
        layout=LayoutFacets(mode=mode),
        children=tuple(children),
    )


def _chain(levels):
    node = DesignNode("Leaf", kind=NodeKind.TEXT, text="deep")
    for i in range(levels):
        node = DesignNode(f"Layer {i}", children=(node,))
    return node


class TestComposition:
    """Test leaf types found below a node."""

    def test_root_level_button(self):
        node = _box("Section", children=[_button()])
        composition = {c.component_type: c for c in analyze_composition(node)}

        button = composition[ComponentType.BUTTON]
        assert button.count == 1
        assert button.location == "root"
        assert button.confidence == pytest.approx(0.72)
        assert composition[ComponentType.TEXT].location == "nested"

    def test_deep_button_is_damped(self):
        node = _box("Section", children=[_box("Wrapper", children=[_box("Wrapper", children=[_button()])])])
        composition = {c.component_type: c for c in analyze_composition(node)}

        button = composition[ComponentType.BUTTON]
        assert button.location == "deep"
        assert button.confidence == pytest.approx(0.56)

    def test_counts_and_shallowest_location(self):
        node = _box("Section", children=[_button(), _box("Row", children=[_button(), _button()])])
        composition = {c.component_type: c for c in analyze_composition(node)}

        assert composition[ComponentType.BUTTON].count == 3
        assert composition[ComponentType.BUTTON].location == "root"

    def test_containers_not_counted(self):
        node = _box("Section", children=[_box("Spacer")])
        assert analyze_composition(node) == []

    def test_depth_limited(self):
        ctx = ClassificationContext(EngineConfig(max_depth=4))
        analysis = analyze(_chain(10), ctx)
        assert analysis.depth_limited
        assert ctx.depth_limited


class TestLayout:
    """Test layout detection from auto layout and y offsets."""

    def test_cluster_rows(self):
        assert cluster_rows([0, 10, 100, 110], 50) == [2, 2]
        assert cluster_rows([300, 0, 150], 50) == [1, 1, 1]
        assert cluster_rows([], 50) == []

    def test_grid(self):
        node = _box("Grid", children=[_box("A", 0), _box("B", 0), _box("C", 100), _box("D", 100)])
        layout = detect_layout_pattern(node)

        assert layout.type == "grid"
        assert layout.columns == 2
        assert layout.rows == 2

    def test_single_row_is_horizontal(self):
        node = _box("Row", children=[_box("A", 0), _box("B", 5), _box("C", 10)])
        assert detect_layout_pattern(node).type == "horizontal"

    def test_stacked_rows_are_vertical(self):
        node = _box("Stack", children=[_box("A", 0), _box("B", 100), _box("C", 200)])
        assert detect_layout_pattern(node).type == "vertical"

    def test_auto_layout_wins(self):
        node = _box("Row", mode="HORIZONTAL", children=[_box("A", 0), _box("B", 100)])
        assert detect_layout_pattern(node).type == "horizontal"

    def test_unknown_without_offsets(self):
        node = _box("Group", children=[_box("A"), _box("B")])
        layout = detect_layout_pattern(node)

        assert layout.type == "unknown"
        assert layout.columns is None

    def test_content_flags(self, login_card):
        layout = analyze(login_card).layout

        assert layout.type == "vertical"
        assert layout.has_text
        assert layout.has_buttons
        assert layout.has_form
        assert not layout.has_images
        assert layout.complexity == "moderate"

    def test_complexity_buckets(self):
        few = _box("Few", children=[_box(str(i)) for i in range(4)])
        many = _box("Many", children=[_box(str(i)) for i in range(15)])

        assert detect_layout_pattern(few).complexity == "simple"
        assert detect_layout_pattern(many).complexity == "complex"


class TestCharacteristics:
    """Test size classes, dominant content and complexity score."""

    def test_full_width_grid(self):
        node = DesignNode(
            "Section",
            geometry=Geometry(width=1440, height=600),
            children=(_box("A"), _box("B"), _box("C")),
        )
        layout = LayoutPattern(type="grid", columns=2, rows=2, has_images=True, has_text=True)
        traits = characteristics(node, layout)

        assert traits.is_full_width
        assert traits.is_large_section
        assert traits.has_multiple_columns
        assert traits.has_hierarchy
        assert traits.dominant_content == "mixed"
        assert traits.estimated_complexity == 5

    def test_form_dominates(self):
        node = DesignNode("Form", geometry=Geometry(width=400, height=300), children=(_box("A"),))
        traits = characteristics(node, LayoutPattern(type="vertical", has_form=True, has_text=True))

        assert traits.dominant_content == "forms"
        assert not traits.is_full_width
        assert not traits.has_hierarchy

    def test_complexity_capped(self):
        node = DesignNode("Huge", children=tuple(_box(str(i)) for i in range(40)))
        traits = characteristics(node, LayoutPattern(type="grid", columns=4, has_form=True, has_images=True))
        assert traits.estimated_complexity == 10
