"""Ordered, threshold-gated block classification.

A subtree is first screened for being block-like (big enough, at least two
children). Its composition, layout and characteristics are computed once
and handed to each block scorer in the order of the ``block`` table of
``schemas/pipelines.yaml``; the first verdict at or above
``config.block_threshold`` wins. Authentication and Form run before CTA,
whose "text plus a button" evidence would otherwise claim every sign-in
card.

Nothing above the threshold gives a generic Layout block (Section for
large sections) at ``config.block_fallback_confidence``.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Iterable, List, Optional, Sequence, Tuple

from ..context import ClassificationContext, ensure_context
from ..errors import PipelineConfigError
from ..models import (
    BlockCategory,
    BlockClassification,
    BlockSubType,
    DesignNode,
)
from ..pipelines import load_pipeline_tables
from ..settings import EngineConfig
from .composition import analyze, characteristics
from .scorers import BLOCK_SCORERS, BlockScorer, BlockVerdict, build_facts

logger = logging.getLogger(__name__)

GENERIC_BLOCK_TYPE = "Generic Layout Block"

_CAMEL_BOUNDARY_RE = re.compile(r"([a-z])([A-Z])")


def subtype_to_readable(sub_type: BlockSubType) -> str:
    """Readable block type, e.g. "Hero-WithImage" -> "Hero With Image"."""
    spaced = _CAMEL_BOUNDARY_RE.sub(r"\1 \2", sub_type.value)
    words = re.split(r"[-_\s]+", spaced)
    return " ".join(w[:1].upper() + w[1:] for w in words if w)


def is_block_candidate(node: DesignNode, config: EngineConfig) -> bool:
    """Big enough and composed of at least two children."""
    if node.width <= 0 or node.height <= 0:
        return False
    if node.width < config.block_min_width or node.height < config.block_min_height:
        return False
    return len(node.children) >= 2


def build_block_pipeline(order: Iterable[str]) -> Tuple[Tuple[str, BlockScorer], ...]:
    """Resolve scorer names in order.

    Raises:
        PipelineConfigError: unknown or duplicate scorer name, empty order
    """
    resolved: List[Tuple[str, BlockScorer]] = []
    seen = set()
    for name in order:
        if name in seen:
            raise PipelineConfigError(f"Duplicate block scorer in order: {name!r}")
        scorer = BLOCK_SCORERS.get(name)
        if scorer is None:
            raise PipelineConfigError(
                f"Unknown block scorer {name!r}. Available scorers: {sorted(BLOCK_SCORERS)}"
            )
        seen.add(name)
        resolved.append((name, scorer))
    if not resolved:
        raise PipelineConfigError("Block order is empty")
    return tuple(resolved)


class BlockClassifier:
    """Classifies page-section subtrees with an ordered list of scorers."""

    def __init__(self, order: Optional[Sequence[str]] = None):
        if order is None:
            order = load_pipeline_tables().block
        self._pipeline = build_block_pipeline(order)

    @property
    def order(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self._pipeline)

    def classify(
        self,
        node: DesignNode,
        context: Optional[ClassificationContext] = None,
    ) -> Optional[BlockClassification]:
        """Block classification of ``node``, or None when it is not block-like."""
        ctx = ensure_context(context)
        config = ctx.config
        if not is_block_candidate(node, config):
            return None

        analysis = analyze(node, ctx)
        traits = characteristics(node, analysis.layout, config)
        facts = build_facts(node, ctx.signals(node), analysis, traits, config.max_depth)

        for name, scorer in self._pipeline:
            verdict = scorer(facts)
            if verdict.confidence >= config.block_threshold:
                logger.debug(
                    "Block %r matched %s (%.2f) via %s",
                    node.name, verdict.category.value, verdict.confidence, name,
                )
                return _to_classification(verdict, analysis, traits)

        category = BlockCategory.SECTION if traits.is_large_section else BlockCategory.LAYOUT
        reasons = ["No specific block type detected", "Classified as generic layout block"]
        if traits.is_large_section:
            reasons.append("Large section block")
        logger.debug("Block %r fell back to %s", node.name, category.value)
        return BlockClassification(
            category=category,
            sub_type=BlockSubType.UNKNOWN,
            block_type=GENERIC_BLOCK_TYPE,
            confidence=config.block_fallback_confidence,
            composed_of=analysis.composition,
            layout_pattern=analysis.layout,
            characteristics=traits,
            reasons=tuple(reasons),
        )


def _to_classification(verdict: BlockVerdict, analysis, traits) -> BlockClassification:
    block_type = verdict.block_type or subtype_to_readable(verdict.sub_type)
    return BlockClassification(
        category=verdict.category,
        sub_type=verdict.sub_type,
        block_type=block_type,
        confidence=verdict.confidence,
        composed_of=analysis.composition,
        layout_pattern=analysis.layout,
        characteristics=traits,
        reasons=tuple(verdict.reasons),
    )


@lru_cache(maxsize=1)
def default_block_classifier() -> BlockClassifier:
    """Process-wide block classifier built from the bundled order table."""
    return BlockClassifier()


def classify_block(
    node: DesignNode,
    config: Optional[EngineConfig] = None,
    context: Optional[ClassificationContext] = None,
) -> Optional[BlockClassification]:
    """Classify one subtree with the default block pipeline."""
    return default_block_classifier().classify(node, ensure_context(context, config))
