"""Slot schemas: the declarative structure of composite components.

A schema lists the named slots a composite type is expected to contain
(Card -> CardHeader{CardTitle, CardDescription}, CardContent, CardFooter).
Each slot carries weighted detection rules; the decomposer scores children
with them.

Schemas are YAML (``schemas/component_slots.yaml``) validated by the
pydantic models below when loaded. Anything the decomposer could not
evaluate (unknown rule kind, missing rule parameters, negative or NaN
weights, duplicate slot names) is rejected here as SchemaValidationError,
never discovered mid-classification.
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Literal, Mapping, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..errors import SchemaValidationError
from ..models import ComponentType, NodeKind

logger = logging.getLogger(__name__)

SLOT_SCHEMAS_PATH = Path(__file__).resolve().parent.parent / "schemas" / "component_slots.yaml"

# Pseudo kinds accepted by node_kind rules besides NodeKind values
KIND_ALIASES = ("container", "component")


class RuleKind(str, Enum):
    NAME_KEYWORD = "name_keyword"
    TEXT_KEYWORD = "text_keyword"
    NODE_KIND = "node_kind"
    POSITION = "position"
    CHILD_COUNT = "child_count"
    HAS_TEXT = "has_text"
    LARGEST_TEXT = "largest_text"
    LAYOUT_MODE = "layout_mode"
    COMPONENT_TYPE = "component_type"


class DetectionRule(BaseModel):
    """One weighted signal for a slot. Parameters depend on ``kind``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: RuleKind
    weight: float
    keywords: Tuple[str, ...] = ()
    kinds: Tuple[str, ...] = ()
    position: Optional[Literal["first", "second", "middle", "last"]] = None
    min: Optional[int] = Field(default=None, ge=0)
    max: Optional[int] = Field(default=None, ge=0)
    mode: Optional[Literal["HORIZONTAL", "VERTICAL"]] = None
    types: Tuple[ComponentType, ...] = ()

    @field_validator("weight")
    @classmethod
    def validate_weight(cls, weight: float) -> float:
        if math.isnan(weight) or math.isinf(weight):
            raise ValueError(f"rule weight must be finite (got {weight})")
        if weight < 0:
            raise ValueError(f"rule weight must not be negative (got {weight})")
        return weight

    @field_validator("keywords")
    @classmethod
    def lowercase_keywords(cls, keywords: Tuple[str, ...]) -> Tuple[str, ...]:
        return tuple(k.strip().lower() for k in keywords if k.strip())

    @field_validator("kinds")
    @classmethod
    def validate_kinds(cls, kinds: Tuple[str, ...]) -> Tuple[str, ...]:
        valid = {k.value for k in NodeKind} | set(KIND_ALIASES)
        normalized = tuple(k if k in KIND_ALIASES else k.upper() for k in kinds)
        unknown = [k for k in normalized if k not in valid]
        if unknown:
            raise ValueError(f"unknown node kinds: {unknown}")
        return normalized

    @model_validator(mode="after")
    def check_parameters(self) -> "DetectionRule":
        kind = self.kind
        if kind in (RuleKind.NAME_KEYWORD, RuleKind.TEXT_KEYWORD) and not self.keywords:
            raise ValueError(f"{kind.value} rule needs at least one keyword")
        if kind == RuleKind.NODE_KIND and not self.kinds:
            raise ValueError("node_kind rule needs 'kinds'")
        if kind == RuleKind.POSITION and self.position is None:
            raise ValueError("position rule needs 'position'")
        if kind == RuleKind.CHILD_COUNT:
            if self.min is None and self.max is None:
                raise ValueError("child_count rule needs 'min' and/or 'max'")
            if self.min is not None and self.max is not None and self.min > self.max:
                raise ValueError(f"child_count min ({self.min}) exceeds max ({self.max})")
        if kind == RuleKind.LAYOUT_MODE and self.mode is None:
            raise ValueError("layout_mode rule needs 'mode'")
        if kind == RuleKind.COMPONENT_TYPE and not self.types:
            raise ValueError("component_type rule needs 'types'")
        return self


class SlotSpec(BaseModel):
    """A named sub-region of a composite component."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1)
    required: bool = False
    allows_multiple: bool = False
    description: str = ""
    rules: Tuple[DetectionRule, ...] = Field(..., min_length=1)
    children: Tuple["SlotSpec", ...] = ()

    @property
    def primary_keyword(self) -> str:
        """First name keyword, used in rename suggestions."""
        for rule in self.rules:
            if rule.kind == RuleKind.NAME_KEYWORD:
                return rule.keywords[0]
        return self.name.lower()


SlotSpec.model_rebuild()


class SlotSchema(BaseModel):
    """Expected slot tree of one composite component type."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    component_type: ComponentType
    description: str = ""
    slots: Tuple[SlotSpec, ...] = Field(..., min_length=1)

    @model_validator(mode="after")
    def unique_slot_names(self) -> "SlotSchema":
        seen = set()
        for spec in self.iter_slots():
            if spec.name in seen:
                raise ValueError(f"duplicate slot name {spec.name!r}")
            seen.add(spec.name)
        return self

    def iter_slots(self) -> Iterator[SlotSpec]:
        """Every slot in the tree, depth first, in declaration order."""
        stack = list(reversed(self.slots))
        while stack:
            spec = stack.pop()
            yield spec
            stack.extend(reversed(spec.children))

    def slot(self, name: str) -> Optional[SlotSpec]:
        for spec in self.iter_slots():
            if spec.name == name:
                return spec
        return None

    @property
    def required_slots(self) -> List[SlotSpec]:
        return [s for s in self.iter_slots() if s.required]


# =====================================================================
# Loading
# =====================================================================

def parse_slot_schemas(data: Any) -> Dict[ComponentType, SlotSchema]:
    """Validate a raw document (as loaded from YAML) into schemas by type.

    The document maps component type names to ``{description, slots}``
    under a top-level ``schemas`` key. Other top-level keys (e.g. a block
    of YAML anchors) are ignored.

    Raises:
        SchemaValidationError: the document or any schema is invalid
    """
    if not isinstance(data, dict) or not isinstance(data.get("schemas"), dict):
        raise SchemaValidationError("Slot schema document must have a 'schemas' mapping")

    schemas: Dict[ComponentType, SlotSchema] = {}
    for type_name, body in data["schemas"].items():
        try:
            component_type = ComponentType(type_name)
        except ValueError as exc:
            raise SchemaValidationError(f"Unknown component type in slot schemas: {type_name!r}") from exc
        if not isinstance(body, dict):
            raise SchemaValidationError(f"Schema for {type_name} must be a mapping")
        try:
            schemas[component_type] = SlotSchema(component_type=component_type, **body)
        except (ValidationError, TypeError) as exc:
            raise SchemaValidationError(f"Invalid slot schema for {type_name}: {exc}") from exc
    return schemas


def load_slot_schemas(path: Optional[str] = None) -> Dict[ComponentType, SlotSchema]:
    """Read and validate a slot schema YAML file."""
    path = path or str(SLOT_SCHEMAS_PATH)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise SchemaValidationError(f"Slot schema file {path} is not valid YAML: {exc}") from exc
    schemas = parse_slot_schemas(data)
    logger.info("Loaded %d slot schemas from %s", len(schemas), path)
    return schemas


@lru_cache(maxsize=1)
def get_default_schemas() -> Mapping[ComponentType, SlotSchema]:
    """Bundled schemas, loaded once and shared read-only."""
    return MappingProxyType(load_slot_schemas())


def get_schema(component_type: ComponentType) -> Optional[SlotSchema]:
    return get_default_schemas().get(component_type)
