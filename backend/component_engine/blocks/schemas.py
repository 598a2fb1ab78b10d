"""Block schemas: the expected component structure of each block archetype.

A block schema describes which components a classified block is built
from (a Login form is a Card holding a Form with email and password
Inputs and a submit Button). Schemas are descriptive: they are looked up
after classification and never influence scoring.

Loaded from ``schemas/block_schemas.yaml`` and validated with pydantic;
broken documents raise SchemaValidationError at load time.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, List, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..errors import SchemaValidationError
from ..models import BlockCategory, BlockSubType, ComponentType

logger = logging.getLogger(__name__)

BLOCK_SCHEMAS_PATH = Path(__file__).resolve().parent.parent / "schemas" / "block_schemas.yaml"

# Structural slot types that are not leaf components
WRAPPER_TYPE = "Wrapper"


class BlockSlot(BaseModel):
    """One component position inside a block."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1)
    component_type: str
    required: bool = False
    allows_multiple: bool = False
    description: str = ""
    children: Tuple["BlockSlot", ...] = ()

    @field_validator("component_type")
    @classmethod
    def validate_component_type(cls, value: str) -> str:
        valid = {t.value for t in ComponentType} | {WRAPPER_TYPE}
        if value not in valid:
            raise ValueError(f"unknown component type {value!r}")
        return value


BlockSlot.model_rebuild()


class BlockSchema(BaseModel):
    """Expected structure of one block archetype (category + sub-type)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    block_type: str = Field(..., min_length=1)
    category: BlockCategory
    sub_type: BlockSubType = BlockSubType.UNKNOWN
    description: str = ""
    wrapper: str = "section"
    usage: str = ""
    structure: Tuple[BlockSlot, ...] = Field(..., min_length=1)

    @model_validator(mode="after")
    def unique_slot_names(self) -> "BlockSchema":
        seen = set()
        stack = list(self.structure)
        while stack:
            slot = stack.pop()
            if slot.name in seen:
                raise ValueError(f"duplicate slot name {slot.name!r} in {self.block_type}")
            seen.add(slot.name)
            stack.extend(slot.children)
        return self

    def component_types(self) -> List[str]:
        """Every component type used in the structure, depth first."""
        found: List[str] = []
        stack = list(reversed(self.structure))
        while stack:
            slot = stack.pop()
            if slot.component_type not in found:
                found.append(slot.component_type)
            stack.extend(reversed(slot.children))
        return found


def parse_block_schemas(data: Any) -> Tuple[BlockSchema, ...]:
    """Validate a raw document with a top-level ``blocks`` list.

    Raises:
        SchemaValidationError: malformed document, invalid schema or a
            duplicate block type / category+sub-type pair
    """
    if not isinstance(data, dict) or not isinstance(data.get("blocks"), list):
        raise SchemaValidationError("Block schema document must have a 'blocks' list")

    schemas: List[BlockSchema] = []
    for index, body in enumerate(data["blocks"]):
        if not isinstance(body, dict):
            raise SchemaValidationError(f"Block schema #{index} must be a mapping")
        try:
            schemas.append(BlockSchema(**body))
        except (ValidationError, TypeError) as exc:
            raise SchemaValidationError(
                f"Invalid block schema {body.get('block_type', index)!r}: {exc}"
            ) from exc

    seen_types = set()
    seen_keys = set()
    for schema in schemas:
        key = (schema.category, schema.sub_type)
        if schema.block_type in seen_types:
            raise SchemaValidationError(f"Duplicate block type {schema.block_type!r}")
        if schema.sub_type != BlockSubType.UNKNOWN and key in seen_keys:
            raise SchemaValidationError(
                f"Duplicate block schema for {schema.category.value}/{schema.sub_type.value}"
            )
        seen_types.add(schema.block_type)
        seen_keys.add(key)
    return tuple(schemas)


def load_block_schemas(path: Optional[str] = None) -> Tuple[BlockSchema, ...]:
    path = path or str(BLOCK_SCHEMAS_PATH)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise SchemaValidationError(f"Block schema file {path} is not valid YAML: {exc}") from exc
    schemas = parse_block_schemas(data)
    logger.info("Loaded %d block schemas from %s", len(schemas), path)
    return schemas


@lru_cache(maxsize=1)
def get_block_schemas() -> Tuple[BlockSchema, ...]:
    """Bundled block schemas, loaded once."""
    return load_block_schemas()


def get_block_schema(category: BlockCategory, sub_type: BlockSubType) -> Optional[BlockSchema]:
    """Schema for a category/sub-type pair.

    Categories with a single archetype (CTA, Footer, ...) are stored with
    sub-type Unknown; that entry is returned when no exact match exists.
    """
    fallback = None
    for schema in get_block_schemas():
        if schema.category != category:
            continue
        if schema.sub_type == sub_type:
            return schema
        if schema.sub_type == BlockSubType.UNKNOWN:
            fallback = schema
    return fallback


def get_block_schema_by_type(block_type: str) -> Optional[BlockSchema]:
    for schema in get_block_schemas():
        if schema.block_type == block_type:
            return schema
    return None


def get_block_schemas_by_category(category: BlockCategory) -> List[BlockSchema]:
    return [s for s in get_block_schemas() if s.category == category]
