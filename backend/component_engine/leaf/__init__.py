"""Leaf classification: one ComponentType per node."""

from .pipeline import (
    FALLBACK_REASON,
    LeafClassifier,
    build_leaf_pipeline,
    classify,
    default_classifier,
)
from .registry import LEAF_SCORERS, get_leaf_scorer, leaf_scorer

__all__ = [
    "FALLBACK_REASON",
    "LEAF_SCORERS",
    "LeafClassifier",
    "build_leaf_pipeline",
    "classify",
    "default_classifier",
    "get_leaf_scorer",
    "leaf_scorer",
]
