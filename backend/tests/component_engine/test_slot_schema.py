"""Unit tests for slot schema loading and rule predicates"""

import pytest

from component_engine.context import ClassificationContext
from component_engine.errors import SchemaValidationError
from component_engine.models import ComponentType, DesignNode, NodeKind
from component_engine.slots import (
    DetectionRule,
    RuleContext,
    RuleKind,
    evaluate,
    get_default_schemas,
    load_slot_schemas,
    parse_slot_schemas,
)


def _doc(*slots):
    return {"schemas": {"Card": {"slots": list(slots)}}}


def _slot(name, **extra):
    body = {"name": name, "rules": [{"kind": "name_keyword", "weight": 0.7, "keywords": ["x"]}]}
    body.update(extra)
    return body


class TestSchemaLoading:
    """Test the bundled schemas and validation of broken documents."""

    def test_bundled_schemas(self):
        schemas = get_default_schemas()

        for component_type in (
            ComponentType.CARD, ComponentType.DIALOG, ComponentType.ALERT_DIALOG,
            ComponentType.TABS, ComponentType.TABLE, ComponentType.SELECT,
        ):
            assert component_type in schemas
        card = schemas[ComponentType.CARD]
        assert [s.name for s in card.iter_slots()] == [
            "CardHeader", "CardTitle", "CardDescription", "CardContent", "CardFooter",
        ]
        assert [s.name for s in card.required_slots] == ["CardContent"]

    def test_bundled_schemas_read_only(self):
        with pytest.raises(TypeError):
            get_default_schemas()[ComponentType.CARD] = None

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "slots.yaml"
        path.write_text(
            "schemas:\n"
            "  Card:\n"
            "    slots:\n"
            "      - name: CardContent\n"
            "        required: true\n"
            "        rules:\n"
            "          - {kind: position, weight: 1.0, position: first}\n"
        )
        schemas = load_slot_schemas(str(path))
        assert schemas[ComponentType.CARD].slot("CardContent").required

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("schemas: [unclosed\n")
        with pytest.raises(SchemaValidationError, match="not valid YAML"):
            load_slot_schemas(str(path))

    def test_missing_schemas_key(self):
        with pytest.raises(SchemaValidationError, match="'schemas' mapping"):
            parse_slot_schemas({"Card": {}})

    def test_unknown_component_type(self):
        with pytest.raises(SchemaValidationError, match="Unknown component type"):
            parse_slot_schemas({"schemas": {"Widget": {"slots": [_slot("A")]}}})

    def test_unknown_rule_kind(self):
        slot = {"name": "A", "rules": [{"kind": "color_match", "weight": 0.5}]}
        with pytest.raises(SchemaValidationError):
            parse_slot_schemas(_doc(slot))

    @pytest.mark.parametrize("weight", [-0.1, float("nan"), float("inf")])
    def test_invalid_weight(self, weight):
        slot = {"name": "A", "rules": [{"kind": "position", "weight": weight, "position": "first"}]}
        with pytest.raises(SchemaValidationError):
            parse_slot_schemas(_doc(slot))

    def test_missing_rule_parameter(self):
        slot = {"name": "A", "rules": [{"kind": "name_keyword", "weight": 0.5}]}
        with pytest.raises(SchemaValidationError, match="keyword"):
            parse_slot_schemas(_doc(slot))

    def test_duplicate_slot_name(self):
        doc = _doc(_slot("Header", children=[_slot("Title")]), _slot("Title"))
        with pytest.raises(SchemaValidationError, match="duplicate slot name"):
            parse_slot_schemas(doc)

    def test_slot_without_rules(self):
        with pytest.raises(SchemaValidationError):
            parse_slot_schemas(_doc({"name": "A", "rules": []}))


class TestRulePredicates:
    """Test individual rule predicates against a small parent."""

    PARENT = DesignNode(
        "Card",
        children=(
            DesignNode("Title", kind=NodeKind.TEXT, text="Hello", font_size=24),
            DesignNode("Subtitle", kind=NodeKind.TEXT, text="World", font_size=14),
            DesignNode("CardFooter", children=(DesignNode("Label", kind=NodeKind.TEXT, text="OK"),)),
        ),
    )

    def _rc(self, index):
        return RuleContext.for_parent(self.PARENT, ClassificationContext()).at(index)

    def test_name_keyword_whole_and_partial(self):
        rule = DetectionRule(kind=RuleKind.NAME_KEYWORD, weight=1.0, keywords=("footer",))
        assert evaluate(rule, self.PARENT.children[2], self._rc(2)) == 1.0

        partial = DetectionRule(kind=RuleKind.NAME_KEYWORD, weight=1.0, keywords=("foot",))
        assert evaluate(partial, self.PARENT.children[2], self._rc(2)) == 0.5

    def test_position(self):
        last = DetectionRule(kind=RuleKind.POSITION, weight=1.0, position="last")
        middle = DetectionRule(kind=RuleKind.POSITION, weight=1.0, position="middle")

        assert evaluate(last, self.PARENT.children[2], self._rc(2)) == 1.0
        assert evaluate(middle, self.PARENT.children[1], self._rc(1)) == 1.0
        assert evaluate(middle, self.PARENT.children[0], self._rc(0)) == 0.0

    def test_largest_text(self):
        rule = DetectionRule(kind=RuleKind.LARGEST_TEXT, weight=1.0)

        assert evaluate(rule, self.PARENT.children[0], self._rc(0)) == 1.0
        assert evaluate(rule, self.PARENT.children[1], self._rc(1)) == 0.0

    def test_text_keyword_searches_descendants(self):
        rule = DetectionRule(kind=RuleKind.TEXT_KEYWORD, weight=1.0, keywords=("ok",))
        assert evaluate(rule, self.PARENT.children[2], self._rc(2)) == 1.0

    def test_node_kind_aliases(self):
        rule = DetectionRule(kind=RuleKind.NODE_KIND, weight=1.0, kinds=("container",))

        assert evaluate(rule, self.PARENT.children[2], self._rc(2)) == 1.0
        assert evaluate(rule, self.PARENT.children[0], self._rc(0)) == 0.0

    def test_child_count_bounds(self):
        with pytest.raises(ValueError):
            DetectionRule(kind=RuleKind.CHILD_COUNT, weight=1.0, min=3, max=1)

        rule = DetectionRule(kind=RuleKind.CHILD_COUNT, weight=1.0, min=1)
        assert evaluate(rule, self.PARENT.children[2], self._rc(2)) == 1.0
        assert evaluate(rule, self.PARENT.children[0], self._rc(0)) == 0.0
