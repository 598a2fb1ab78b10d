"""Unit tests for block schema lookup and validation"""

import pytest

from component_engine.blocks import (
    get_block_schema,
    get_block_schema_by_type,
    get_block_schemas,
    get_block_schemas_by_category,
    load_block_schemas,
    parse_block_schemas,
)
from component_engine.errors import SchemaValidationError
from component_engine.models import BlockCategory, BlockSubType


def _block(block_type, category="CTA", sub_type="Unknown", structure=None):
    return {
        "block_type": block_type,
        "category": category,
        "sub_type": sub_type,
        "structure": structure or [{"name": "Heading", "component_type": "Text"}],
    }


class TestBlockSchemaLookup:
    """Test lookups against the bundled block schemas."""

    def test_exact_match(self):
        schema = get_block_schema(BlockCategory.AUTHENTICATION, BlockSubType.LOGIN)

        assert schema.block_type == "Login-Form"
        assert "Input" in schema.component_types()
        assert "Button" in schema.component_types()

    def test_single_archetype_category(self):
        schema = get_block_schema(BlockCategory.CTA, BlockSubType.UNKNOWN)
        assert schema.block_type == "CTA"

    def test_no_generic_entry(self):
        assert get_block_schema(BlockCategory.HERO, BlockSubType.UNKNOWN) is None

    def test_by_type(self):
        assert get_block_schema_by_type("Pricing-Cards").category == BlockCategory.PRICING
        assert get_block_schema_by_type("Nope") is None

    def test_by_category(self):
        hero = get_block_schemas_by_category(BlockCategory.HERO)
        assert {s.sub_type for s in hero} == {
            BlockSubType.HERO_SIMPLE,
            BlockSubType.HERO_WITH_IMAGE,
            BlockSubType.HERO_SPLIT,
            BlockSubType.HERO_CENTERED,
        }

    def test_bundled_types_unique(self):
        types = [s.block_type for s in get_block_schemas()]
        assert len(types) == len(set(types))


class TestBlockSchemaValidation:
    """Test rejection of broken block schema documents."""

    def test_valid_document(self):
        schemas = parse_block_schemas({"blocks": [_block("CTA-Banner")]})

        assert len(schemas) == 1
        assert schemas[0].wrapper == "section"

    def test_not_a_list(self):
        with pytest.raises(SchemaValidationError, match="'blocks' list"):
            parse_block_schemas({"blocks": {}})

    def test_unknown_component_type(self):
        structure = [{"name": "Thing", "component_type": "Widget"}]
        with pytest.raises(SchemaValidationError, match="unknown component type"):
            parse_block_schemas({"blocks": [_block("CTA-Banner", structure=structure)]})

    def test_wrapper_type_allowed(self):
        structure = [{
            "name": "Container",
            "component_type": "Wrapper",
            "children": [{"name": "Heading", "component_type": "Text"}],
        }]
        schemas = parse_block_schemas({"blocks": [_block("CTA-Banner", structure=structure)]})
        assert schemas[0].component_types() == ["Wrapper", "Text"]

    def test_duplicate_slot_name(self):
        structure = [
            {"name": "Heading", "component_type": "Text"},
            {"name": "Group", "component_type": "Wrapper",
             "children": [{"name": "Heading", "component_type": "Text"}]},
        ]
        with pytest.raises(SchemaValidationError, match="duplicate slot name"):
            parse_block_schemas({"blocks": [_block("CTA-Banner", structure=structure)]})

    def test_duplicate_block_type(self):
        with pytest.raises(SchemaValidationError, match="Duplicate block type"):
            parse_block_schemas({"blocks": [_block("CTA-Banner"), _block("CTA-Banner")]})

    def test_duplicate_category_sub_type(self):
        blocks = [
            _block("Login-A", category="Authentication", sub_type="Login"),
            _block("Login-B", category="Authentication", sub_type="Login"),
        ]
        with pytest.raises(SchemaValidationError, match="Authentication/Login"):
            parse_block_schemas({"blocks": blocks})

    def test_unknown_category(self):
        with pytest.raises(SchemaValidationError):
            parse_block_schemas({"blocks": [_block("X", category="Carousel")]})

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "blocks.yaml"
        path.write_text(
            "blocks:\n"
            "  - block_type: Footer\n"
            "    category: Footer\n"
            "    structure:\n"
            "      - {name: Links, component_type: Wrapper}\n"
        )
        schemas = load_block_schemas(str(path))
        assert schemas[0].category == BlockCategory.FOOTER
