"""Unit tests for block analysis and page statistics"""

import pytest

from component_engine.blocks import analyze_block, block_statistics
from component_engine.models import BlockCategory, ComponentType, DesignNode, Geometry


class TestAnalyzeBlock:
    """Test block classification combined with schema and component lookup."""

    def test_login_analysis(self, login_card):
        analysis = analyze_block(login_card)

        assert analysis.is_block
        assert analysis.classification.category == BlockCategory.AUTHENTICATION
        assert analysis.schema.block_type == "Login-Form"
        types = [c.type for _, c in analysis.components]
        assert types.count(ComponentType.INPUT) == 2
        assert ComponentType.BUTTON in types
        assert ComponentType.CONTAINER not in types

    def test_summary(self, login_card):
        summary = analyze_block(login_card).summary()

        assert "Classified as: Login (Authentication)" in summary
        assert "Confidence: 60.0%" in summary
        assert "Schema available: yes (Login-Form)" in summary
        assert "Layout: vertical" in summary

    def test_not_a_block(self):
        node = DesignNode("Tiny", geometry=Geometry(width=40, height=40))
        analysis = analyze_block(node)

        assert not analysis.is_block
        assert analysis.schema is None
        assert analysis.summary().startswith("Not a block")

    def test_to_dict(self, cta_block):
        data = analyze_block(cta_block).to_dict()

        assert data["node"] == "20:1"
        assert data["is_block"] is True
        assert data["schema"] == "CTA"
        assert data["classification"]["category"] == "CTA"
        assert {"node": "20:4"}.items() <= data["components"][2].items()


class TestBlockStatistics:
    """Test aggregation over whole trees."""

    def test_landing_page(self, landing_page):
        stats = block_statistics([landing_page])

        assert stats.total_nodes == 15
        # the page itself, the sign-in card and the CTA section
        assert stats.total_blocks == 3
        assert stats.blocks_by_category["CTA"] == 1
        assert stats.blocks_by_category.get("Authentication", 0) >= 1
        assert 0.0 < stats.average_confidence <= 1.0
        assert stats.average_complexity >= 1
        assert stats.detection_rate == pytest.approx(3 / 15)

    def test_several_roots(self, login_card, cta_block):
        stats = block_statistics([login_card, cta_block])

        assert stats.total_blocks == 2
        assert stats.blocks_by_category == {"Authentication": 1, "CTA": 1}
        assert stats.blocks_by_sub_type == {"Login": 1, "Unknown": 1}
        assert stats.average_confidence == pytest.approx(0.75)
        assert stats.average_complexity == pytest.approx(3.5)

    def test_empty(self):
        stats = block_statistics([])

        assert stats.total_nodes == 0
        assert stats.detection_rate == 0.0
        assert stats.to_dict()["average_confidence"] == 0.0
