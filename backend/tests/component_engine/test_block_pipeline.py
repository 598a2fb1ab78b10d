"""Unit tests for block classification

Tests cover:
- Sign-in card vs call-to-action precedence
- Call-to-action sections
- Candidate screening and the generic layout fallback
- Block scorer registry and order tables
"""

import pytest

from component_engine.blocks import (
    BLOCK_SCORERS,
    GENERIC_BLOCK_TYPE,
    BlockClassifier,
    analyze,
    build_block_pipeline,
    characteristics,
    classify_block,
    is_block_candidate,
    subtype_to_readable,
)
from component_engine.blocks.scorers import build_facts, count_similar_children
from component_engine.context import ClassificationContext
from component_engine.errors import PipelineConfigError
from component_engine.models import (
    BlockCategory,
    BlockSubType,
    ComponentType,
    DesignNode,
    Geometry,
)
from component_engine.pipelines import load_pipeline_tables
from component_engine.settings import DEFAULT_CONFIG, EngineConfig

GENERIC_GROUP = DesignNode(
    "Group 5",
    geometry=Geometry(width=800, height=600),
    children=(DesignNode("Box 1"), DesignNode("Box 2")),
)


def _facts(node, ctx):
    analysis = analyze(node, ctx)
    traits = characteristics(node, analysis.layout, ctx.config)
    return build_facts(node, ctx.signals(node), analysis, traits, ctx.config.max_depth)


class TestBlockClassification:
    """Test ordered block classification of typical sections."""

    def test_login_card(self, login_card):
        result = classify_block(login_card)

        assert result.category == BlockCategory.AUTHENTICATION
        assert result.sub_type == BlockSubType.LOGIN
        assert result.block_type == "Login"
        assert result.confidence == pytest.approx(0.6)
        assert "Credential fields (email/password)" in result.reasons
        assert result.characteristics.estimated_complexity == 5

    def test_login_card_would_also_pass_cta(self, login_card):
        """Only the order keeps the sign-in card from becoming a CTA."""
        ctx = ClassificationContext()
        verdict = BLOCK_SCORERS["cta"](_facts(login_card, ctx))
        assert verdict.confidence == pytest.approx(0.7)

        order = list(load_pipeline_tables().block)
        assert order.index("authentication") < order.index("cta")
        assert order.index("form") < order.index("cta")

    def test_cta_section(self, cta_block):
        result = classify_block(cta_block)

        assert result.category == BlockCategory.CTA
        assert result.block_type == "Call-to-Action Section"
        assert result.confidence == pytest.approx(0.9)
        assert result.layout_pattern.type == "vertical"

    def test_composition_reported(self, login_card):
        result = classify_block(login_card)
        composed = {c.component_type: c.count for c in result.composed_of}

        assert composed[ComponentType.INPUT] == 2
        assert composed[ComponentType.BUTTON] == 1

    def test_to_dict(self, cta_block):
        data = classify_block(cta_block).to_dict()

        assert data["category"] == "CTA"
        assert data["sub_type"] == "Unknown"
        assert data["layout_pattern"]["type"] == "vertical"
        assert data["characteristics"]["estimated_complexity"] == 2


class TestFallback:
    """Test screening and the generic layout fallback."""

    def test_small_node_is_not_a_block(self):
        node = DesignNode(
            "Chip",
            geometry=Geometry(width=80, height=24),
            children=(DesignNode("A"), DesignNode("B")),
        )
        assert classify_block(node) is None

    def test_single_child_is_not_a_block(self):
        node = DesignNode("Frame", geometry=Geometry(width=800, height=600), children=(DesignNode("A"),))
        assert not is_block_candidate(node, DEFAULT_CONFIG)

    def test_large_section_fallback(self):
        result = classify_block(GENERIC_GROUP)

        assert result.category == BlockCategory.SECTION
        assert result.sub_type == BlockSubType.UNKNOWN
        assert result.block_type == GENERIC_BLOCK_TYPE
        assert result.confidence == DEFAULT_CONFIG.block_fallback_confidence
        assert "Large section block" in result.reasons

    def test_layout_fallback(self):
        node = DesignNode(
            "Group 6",
            geometry=Geometry(width=800, height=300),
            children=(DesignNode("Box 1"), DesignNode("Box 2")),
        )
        result = classify_block(node)
        assert result.category == BlockCategory.LAYOUT

    def test_threshold(self, cta_block):
        result = classify_block(cta_block, config=EngineConfig(block_threshold=0.95))
        assert result.block_type == GENERIC_BLOCK_TYPE


class TestBlockScorers:
    """Test scorer bounds and helpers."""

    @pytest.mark.parametrize("fixture", ["login_card", "cta_block", "landing_page"])
    def test_all_scorers_clamped(self, fixture, request):
        node = request.getfixturevalue(fixture)
        ctx = ClassificationContext()
        facts = _facts(node, ctx)
        for name, scorer in BLOCK_SCORERS.items():
            assert 0.0 <= scorer(facts).confidence <= 1.0, name

    def test_name_contradiction(self, login_card):
        renamed = DesignNode(
            "Pricing",
            geometry=login_card.geometry,
            layout=login_card.layout,
            children=login_card.children,
        )
        verdict = BLOCK_SCORERS["cta"](_facts(renamed, ClassificationContext()))
        assert any("identifies a Pricing block" in r for r in verdict.reasons)

    def test_layout_complexity_biases_scorers(self):
        """Fifteen or more children read as a dashboard, not a call to action."""
        boxes = tuple(DesignNode(f"Box {i}") for i in range(16))
        ctx = ClassificationContext()

        overview = _facts(DesignNode("Overview", children=boxes), ctx)
        assert overview.layout.complexity == "complex"
        verdict = BLOCK_SCORERS["dashboard"](overview)
        assert "Many child sections" in verdict.reasons
        assert verdict.confidence == pytest.approx(0.2)

        cta = BLOCK_SCORERS["cta"](_facts(DesignNode("CTA", children=boxes), ctx))
        assert "Penalty -0.2: Too many sections for a call to action" in cta.reasons
        assert cta.confidence == pytest.approx(0.5)

        few = _facts(DesignNode("Overview", children=boxes[:4]), ctx)
        assert "Many child sections" not in BLOCK_SCORERS["dashboard"](few).reasons

    def test_count_similar_children(self):
        children = tuple(
            DesignNode(f"Item {i}", geometry=Geometry(width=300, height=200)) for i in range(3)
        ) + (DesignNode("Other", geometry=Geometry(width=900, height=40)),)
        assert count_similar_children(children) == 3

    @pytest.mark.parametrize(
        "sub_type,expected",
        [
            (BlockSubType.HERO_WITH_IMAGE, "Hero With Image"),
            (BlockSubType.LOGIN, "Login"),
            (BlockSubType.FORGOT_PASSWORD, "Forgot Password"),
            (BlockSubType.DASHBOARD_STATS, "Dashboard Stats"),
        ],
    )
    def test_subtype_to_readable(self, sub_type, expected):
        assert subtype_to_readable(sub_type) == expected


class TestBlockPipelineConfig:
    """Test block order validation."""

    def test_bundled_order_resolves(self):
        order = load_pipeline_tables().block
        assert BlockClassifier().order == tuple(order)
        assert set(order) == set(BLOCK_SCORERS)

    def test_pricing_before_features(self):
        order = list(load_pipeline_tables().block)
        assert order.index("pricing") < order.index("features")

    def test_duplicate_rejected(self):
        with pytest.raises(PipelineConfigError, match="Duplicate"):
            build_block_pipeline(["hero", "hero"])

    def test_unknown_rejected(self):
        with pytest.raises(PipelineConfigError, match="Unknown block scorer"):
            build_block_pipeline(["nope"])

    def test_empty_rejected(self):
        with pytest.raises(PipelineConfigError, match="empty"):
            build_block_pipeline([])

    def test_custom_order(self, login_card):
        """Without the authentication scorer the sign-in card reads as a CTA."""
        classifier = BlockClassifier(order=["hero", "cta"])
        result = classifier.classify(login_card)
        assert result.category == BlockCategory.CTA
