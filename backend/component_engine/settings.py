"""Engine settings: tunable thresholds for classification and decomposition.

Defaults can be overridden through environment variables (read once at
import time, like the rest of the backend settings). The values are
bundled into an immutable ``EngineConfig`` that is passed explicitly into
every entry point, so tests can exercise threshold sensitivity without
touching module state.
"""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .errors import ConfigError


def _int(key: str, default: int) -> int:
    return int(os.getenv(key, str(default)))


def _float(key: str, default: float) -> float:
    return float(os.getenv(key, str(default)))


# =====================================================================
# Leaf classification
# =====================================================================

# First scorer at or above this confidence wins
LEAF_THRESHOLD = 0.4

# Fixed confidence of the Container fallback
CONTAINER_CONFIDENCE = 0.3


# =====================================================================
# Slot decomposition
# =====================================================================

# Minimum candidate score for a child to be assigned to a slot
SLOT_THRESHOLD = 0.5

# Matched slots in [low, high) produce a rename suggestion
SUGGESTION_LOW = 0.5
SUGGESTION_HIGH = 0.7

# Weights of required vs optional slots in overall confidence
REQUIRED_SLOT_WEIGHT = 2.0
OPTIONAL_SLOT_WEIGHT = 1.0


# =====================================================================
# Blocks / layout
# =====================================================================

BLOCK_THRESHOLD = 0.5
BLOCK_FALLBACK_CONFIDENCE = 0.3

# Minimum size of a subtree considered for block classification
BLOCK_MIN_WIDTH = 200.0
BLOCK_MIN_HEIGHT = 100.0

# Width/height that mark a full-width or large page section
FULL_WIDTH_MIN = 1000.0
LARGE_SECTION_MIN = 500.0

# Children whose y offsets differ by less than this share a row (px)
ROW_CLUSTER_THRESHOLD = 50.0

# Composition confidence loses this fraction per level of depth
COMPOSITION_DEPTH_DECAY = 0.1


# =====================================================================
# Traversal
# =====================================================================

# Deepest level any recursive walk will descend to
MAX_DEPTH = 12


class EngineConfig(BaseModel):
    """Thresholds and limits for one engine instance."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    leaf_threshold: float = Field(default=LEAF_THRESHOLD, ge=0.0, le=1.0)
    container_confidence: float = Field(default=CONTAINER_CONFIDENCE, ge=0.0, le=1.0)
    slot_threshold: float = Field(default=SLOT_THRESHOLD, ge=0.0, le=1.0)
    suggestion_low: float = Field(default=SUGGESTION_LOW, ge=0.0, le=1.0)
    suggestion_high: float = Field(default=SUGGESTION_HIGH, ge=0.0, le=1.0)
    required_slot_weight: float = Field(default=REQUIRED_SLOT_WEIGHT, gt=0.0)
    optional_slot_weight: float = Field(default=OPTIONAL_SLOT_WEIGHT, gt=0.0)
    block_threshold: float = Field(default=BLOCK_THRESHOLD, ge=0.0, le=1.0)
    block_fallback_confidence: float = Field(default=BLOCK_FALLBACK_CONFIDENCE, ge=0.0, le=1.0)
    block_min_width: float = Field(default=BLOCK_MIN_WIDTH, ge=0.0)
    block_min_height: float = Field(default=BLOCK_MIN_HEIGHT, ge=0.0)
    full_width_min: float = Field(default=FULL_WIDTH_MIN, gt=0.0)
    large_section_min: float = Field(default=LARGE_SECTION_MIN, gt=0.0)
    row_cluster_threshold: float = Field(default=ROW_CLUSTER_THRESHOLD, gt=0.0)
    composition_depth_decay: float = Field(default=COMPOSITION_DEPTH_DECAY, ge=0.0, lt=1.0)
    max_depth: int = Field(default=MAX_DEPTH, ge=1, le=1000)

    @field_validator("*", mode="before")
    @classmethod
    def reject_nan(cls, value):
        if isinstance(value, float) and value != value:
            raise ValueError("NaN is not a valid threshold")
        return value

    @model_validator(mode="after")
    def check_suggestion_band(self) -> "EngineConfig":
        if self.suggestion_low > self.suggestion_high:
            raise ValueError(
                f"suggestion_low ({self.suggestion_low}) must not exceed "
                f"suggestion_high ({self.suggestion_high})"
            )
        return self

    @classmethod
    def from_env(cls, **overrides) -> "EngineConfig":
        """Build a config from ``ENGINE_*`` environment variables.

        Explicit keyword overrides win over the environment.
        """
        values = {
            "leaf_threshold": _float("ENGINE_LEAF_THRESHOLD", LEAF_THRESHOLD),
            "container_confidence": _float("ENGINE_CONTAINER_CONFIDENCE", CONTAINER_CONFIDENCE),
            "slot_threshold": _float("ENGINE_SLOT_THRESHOLD", SLOT_THRESHOLD),
            "suggestion_low": _float("ENGINE_SUGGESTION_LOW", SUGGESTION_LOW),
            "suggestion_high": _float("ENGINE_SUGGESTION_HIGH", SUGGESTION_HIGH),
            "block_threshold": _float("ENGINE_BLOCK_THRESHOLD", BLOCK_THRESHOLD),
            "row_cluster_threshold": _float("ENGINE_ROW_CLUSTER_THRESHOLD", ROW_CLUSTER_THRESHOLD),
            "max_depth": _int("ENGINE_MAX_DEPTH", MAX_DEPTH),
        }
        values.update(overrides)
        return build_config(**values)


def build_config(**values) -> EngineConfig:
    """Create an EngineConfig, reporting invalid values as ConfigError."""
    try:
        return EngineConfig(**values)
    except ValidationError as exc:
        raise ConfigError(f"Invalid engine configuration: {exc}") from exc


DEFAULT_CONFIG = EngineConfig()
