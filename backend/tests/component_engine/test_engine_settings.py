"""Unit tests for engine settings and per-request context"""

import pytest
from pydantic import ValidationError

from component_engine.context import ClassificationContext, ensure_context
from component_engine.errors import ConfigError
from component_engine.models import DesignNode
from component_engine.settings import DEFAULT_CONFIG, EngineConfig, build_config


class TestEngineConfig:
    """Test threshold defaults and validation."""

    def test_defaults(self):
        config = EngineConfig()

        assert config.leaf_threshold == 0.4
        assert config.container_confidence == 0.3
        assert config.slot_threshold == 0.5
        assert (config.suggestion_low, config.suggestion_high) == (0.5, 0.7)
        assert config.block_threshold == 0.5
        assert config.row_cluster_threshold == 50
        assert config.max_depth == 12

    def test_frozen(self):
        with pytest.raises(ValidationError):
            DEFAULT_CONFIG.leaf_threshold = 0.9

    def test_unknown_field_rejected(self):
        with pytest.raises(ConfigError):
            build_config(leaf_treshold=0.5)

    @pytest.mark.parametrize(
        "values",
        [
            {"leaf_threshold": 1.5},
            {"slot_threshold": -0.1},
            {"block_threshold": float("nan")},
            {"max_depth": 0},
            {"suggestion_low": 0.8, "suggestion_high": 0.6},
        ],
    )
    def test_invalid_values(self, values):
        with pytest.raises(ConfigError, match="Invalid engine configuration"):
            build_config(**values)

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("ENGINE_LEAF_THRESHOLD", "0.55")
        monkeypatch.setenv("ENGINE_MAX_DEPTH", "20")
        config = EngineConfig.from_env()

        assert config.leaf_threshold == 0.55
        assert config.max_depth == 20

    def test_from_env_overrides_win(self, monkeypatch):
        monkeypatch.setenv("ENGINE_SLOT_THRESHOLD", "0.6")
        assert EngineConfig.from_env(slot_threshold=0.8).slot_threshold == 0.8

    def test_from_env_invalid(self, monkeypatch):
        monkeypatch.setenv("ENGINE_BLOCK_THRESHOLD", "2.0")
        with pytest.raises(ConfigError):
            EngineConfig.from_env()


class TestClassificationContext:
    """Test per-request memo tables."""

    def test_default_config(self):
        assert ClassificationContext().config is DEFAULT_CONFIG

    def test_signals_memoised(self):
        ctx = ClassificationContext()
        node = DesignNode("Box")
        assert ctx.signals(node) is ctx.signals(node)

    def test_separate_nodes(self):
        ctx = ClassificationContext()
        first, second = DesignNode("Box"), DesignNode("Box")
        assert ctx.signals(first) is not ctx.signals(second)

    def test_ensure_context(self):
        ctx = ClassificationContext()
        config = EngineConfig(max_depth=3)

        assert ensure_context(ctx) is ctx
        assert ensure_context(None, config).config is config
