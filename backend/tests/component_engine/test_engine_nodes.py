"""Unit tests for the engine's workflow node adapters

Tests cover:
- Node type registration and queries
- Node instance creation and config validation
- Component and block classifier execution
- Engine logger set up on first run, not at import
"""

import logging

import pytest

from component_engine import logging_config
from component_engine.errors import ConfigError
from component_engine.nodes import (
    NODE_CLASSES,
    NODE_REGISTRY,
    BaseNodeImpl,
    NodeDefinition,
    create_node,
    get_node_definition,
    is_node_type_registered,
    list_node_types,
    list_node_types_by_category,
    register_node_type,
)
from component_engine.nodes.classifier_nodes import BlockClassifierNode, ComponentClassifierNode


class TestNodeDefinition:
    """Test NodeDefinition validation."""

    def test_valid(self):
        definition = NodeDefinition(
            node_type="test_node",
            display_name="Test Node",
            description="Test description",
            category="test",
            input_schema={"type": "object"},
            output_schema={"type": "object"},
        )
        assert definition.icon is None

    @pytest.mark.parametrize(
        "field,value,message",
        [
            ("node_type", "", "node_type cannot be empty"),
            ("display_name", "", "display_name cannot be empty"),
            ("input_schema", "object", "input_schema must be a dictionary"),
            ("output_schema", None, "output_schema must be a dictionary"),
        ],
    )
    def test_invalid(self, field, value, message):
        values = {
            "node_type": "test_node",
            "display_name": "Test Node",
            "description": "",
            "category": "test",
            "input_schema": {},
            "output_schema": {},
        }
        values[field] = value
        with pytest.raises(ValueError, match=message):
            NodeDefinition(**values)


class TestRegistry:
    """Test registration and registry queries."""

    def test_engine_nodes_registered(self):
        assert is_node_type_registered("component_classifier")
        assert is_node_type_registered("block_classifier")
        assert NODE_CLASSES["component_classifier"] is ComponentClassifierNode
        assert NODE_CLASSES["block_classifier"] is BlockClassifierNode

    def test_queries(self):
        analysis = list_node_types_by_category("analysis")

        assert {d.node_type for d in analysis} >= {"component_classifier", "block_classifier"}
        assert get_node_definition("block_classifier").display_name == "Block Classifier"
        assert get_node_definition("missing") is None
        assert len(list_node_types()) == len(NODE_REGISTRY)

    def test_register_custom_node(self):
        @register_node_type(
            node_type="test_echo",
            display_name="Echo",
            description="Returns its inputs",
            category="test",
            input_schema={"type": "object", "required": ["value"]},
            output_schema={"type": "object"},
        )
        class EchoNode(BaseNodeImpl):
            async def execute(self, inputs):
                return {"value": self.resolve(inputs, "value")}

        try:
            node = create_node("n1", "test_echo", {})
            assert isinstance(node, EchoNode)
            assert node.validate_config() == [
                {"field": "value", "error": "Required field 'value' is missing"},
            ]
            assert create_node("n2", "test_echo", {"value": 1}).validate_config() == []
        finally:
            NODE_REGISTRY.pop("test_echo", None)
            NODE_CLASSES.pop("test_echo", None)

    def test_unknown_type(self):
        with pytest.raises(ValueError, match="Unknown node type: nope"):
            create_node("n1", "nope")

    def test_resolve_prefers_inputs(self):
        node = create_node("n1", "component_classifier", {"decompose": False})

        assert node.resolve({}, "decompose") is False
        assert node.resolve({"decompose": True}, "decompose") is True
        assert node.resolve({}, "missing", "default") == "default"


class TestComponentClassifierNode:
    """Test component classification through the node interface."""

    @pytest.mark.asyncio
    async def test_execute(self, standard_card_data):
        node = create_node("classify", "component_classifier")
        assert node.validate_config() == []

        output = await node.execute({"design": standard_card_data})

        assert output["classifications"]["1:1"]["type"] == "Card"
        assert output["classifications"]["1:3"]["type"] == "Text"
        assert output["depth_limited"] is False
        card = next(m for m in output["mappings"] if m["node"] == "1:1")
        assert [m["slot"] for m in card["mappings"]] == [
            "CardHeader", "CardTitle", "CardDescription", "CardContent", "CardFooter",
        ]
        assert output["type_counts"]["Text"] == 2

    @pytest.mark.asyncio
    async def test_without_decomposition(self, standard_card_data):
        node = create_node("classify", "component_classifier", {"decompose": False})
        output = await node.execute({"design": standard_card_data})
        assert output["mappings"] == []

    @pytest.mark.asyncio
    async def test_engine_overrides(self, standard_card_data):
        node = create_node("classify", "component_classifier")
        output = await node.execute({"design": standard_card_data, "engine": {"leaf_threshold": 0.99}})
        assert output["classifications"]["1:1"]["type"] == "Container"

    @pytest.mark.asyncio
    async def test_invalid_overrides(self, standard_card_data):
        node = create_node("classify", "component_classifier")
        with pytest.raises(ConfigError):
            await node.execute({"design": standard_card_data, "engine": {"leaf_threshold": 3}})

    @pytest.mark.asyncio
    async def test_missing_design(self):
        node = create_node("classify", "component_classifier")
        with pytest.raises(ValueError, match="'design' must be a Figma node dict"):
            await node.execute({})


class TestBlockClassifierNode:
    """Test block classification through the node interface."""

    @pytest.mark.asyncio
    async def test_execute(self, page_data):
        node = create_node("blocks", "block_classifier", {"design": page_data})
        output = await node.execute({})

        block_nodes = [b["node"] for b in output["blocks"]]
        assert block_nodes == ["0:1", "10:1", "20:1"]
        by_node = {b["node"]: b for b in output["blocks"]}
        assert by_node["10:1"]["classification"]["category"] == "Authentication"
        assert by_node["10:1"]["schema"] == "Login-Form"
        assert by_node["20:1"]["classification"]["category"] == "CTA"
        assert output["statistics"]["total_blocks"] == 3
        assert output["statistics"]["total_nodes"] == 15

    @pytest.mark.asyncio
    async def test_single_block(self, login_card_data):
        node = create_node("blocks", "block_classifier")
        output = await node.execute({"design": login_card_data})

        assert len(output["blocks"]) == 1
        assert output["statistics"]["blocks_by_sub_type"] == {"Login": 1}


class TestEngineLogging:
    """Test when the engine logger gets its handlers."""

    @pytest.fixture
    def fresh_engine_logger(self, monkeypatch):
        engine = logging.getLogger("component_engine")
        monkeypatch.setattr(logging_config, "_configured_loggers", set())
        monkeypatch.setattr(logging_config, "LOG_DIR", None)
        monkeypatch.setattr(engine, "handlers", [])
        monkeypatch.setattr(engine, "propagate", True)
        return engine

    def test_import_leaves_logging_alone(self, fresh_engine_logger):
        from component_engine.nodes import classifier_nodes

        assert classifier_nodes.logger.name == "component_engine.nodes.classifier_nodes"
        assert fresh_engine_logger.propagate
        assert fresh_engine_logger.handlers == []

    @pytest.mark.asyncio
    async def test_first_run_configures(self, fresh_engine_logger, standard_card_data):
        node = create_node("classify", "component_classifier", {"decompose": False})
        await node.execute({"design": standard_card_data})

        assert "component_engine" in logging_config._configured_loggers
        assert len(fresh_engine_logger.handlers) == 1
