"""Scorer order tables for the leaf and block pipelines.

The order lives in ``schemas/pipelines.yaml`` so that precedence between
overlapping scorers is reviewable data rather than source layout. Tables
are validated when loaded; a bad table never reaches classification.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import PipelineConfigError

logger = logging.getLogger(__name__)

PIPELINES_PATH = Path(__file__).parent / "schemas" / "pipelines.yaml"


class _PipelineTablesModel(BaseModel):
    version: str
    leaf: List[str] = Field(..., min_length=1)
    block: List[str] = Field(..., min_length=1)

    @field_validator("leaf", "block")
    @classmethod
    def no_duplicates(cls, names: List[str]) -> List[str]:
        seen = set()
        dupes = [n for n in names if n in seen or seen.add(n)]
        if dupes:
            raise ValueError(f"duplicate scorer names: {dupes}")
        return names


@dataclass(frozen=True)
class PipelineTables:
    version: str
    leaf: Tuple[str, ...]
    block: Tuple[str, ...]


def parse_pipeline_tables(data: Dict[str, Any]) -> PipelineTables:
    """Validate a raw mapping (as loaded from YAML) into PipelineTables."""
    if not isinstance(data, dict):
        raise PipelineConfigError("Pipeline table document must be a mapping")
    try:
        model = _PipelineTablesModel(**data)
    except ValidationError as exc:
        raise PipelineConfigError(f"Invalid pipeline table: {exc}") from exc
    return PipelineTables(
        version=str(model.version),
        leaf=tuple(model.leaf),
        block=tuple(model.block),
    )


@lru_cache(maxsize=None)
def load_pipeline_tables(path: str = str(PIPELINES_PATH)) -> PipelineTables:
    """Load and validate the order tables (cached per path)."""
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    tables = parse_pipeline_tables(data)
    logger.debug(
        "Loaded pipeline tables v%s: %d leaf scorers, %d block scorers",
        tables.version, len(tables.leaf), len(tables.block),
    )
    return tables
