"""Ordered, threshold-gated leaf classification.

The pipeline walks the scorers in the order given by the ``leaf`` table of
``schemas/pipelines.yaml`` and returns the first result at or above the
acceptance threshold. It never takes a global maximum: several scorer
pairs exclude each other through negative evidence, and an argmax would
let a broad scorer beat a correctly penalised narrow one.

If nothing clears the threshold the node becomes a Container with a fixed
confidence.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..context import ClassificationContext, ensure_context
from ..errors import PipelineConfigError
from ..models import Classification, ComponentType, DesignNode
from ..pipelines import load_pipeline_tables
from ..scoring import summarize
from ..settings import EngineConfig
from ..signals import iter_descendants
from . import data_display, feedback, inputs, navigation, overlays  # noqa: F401
from .registry import LEAF_SCORERS, LeafScorer

logger = logging.getLogger(__name__)

FALLBACK_REASON = "No specific component type detected"


def build_leaf_pipeline(order: Iterable[str]) -> Tuple[Tuple[ComponentType, LeafScorer], ...]:
    """Resolve type names to registered scorers, in order.

    Raises:
        PipelineConfigError: unknown type name, duplicate entry, or a type
            with no registered scorer
    """
    resolved: List[Tuple[ComponentType, LeafScorer]] = []
    seen = set()
    for name in order:
        try:
            component_type = ComponentType(name)
        except ValueError as exc:
            raise PipelineConfigError(f"Unknown component type in leaf order: {name!r}") from exc
        if component_type in seen:
            raise PipelineConfigError(f"Duplicate component type in leaf order: {name!r}")
        scorer = LEAF_SCORERS.get(component_type)
        if scorer is None:
            available = sorted(t.value for t in LEAF_SCORERS)
            raise PipelineConfigError(
                f"No scorer registered for {name!r}. Available types: {available}"
            )
        seen.add(component_type)
        resolved.append((component_type, scorer))
    if not resolved:
        raise PipelineConfigError("Leaf order is empty")
    return tuple(resolved)


class LeafClassifier:
    """Classifies single nodes with an ordered list of scorers."""

    def __init__(self, order: Optional[Sequence[str]] = None):
        if order is None:
            order = load_pipeline_tables().leaf
        self._pipeline = build_leaf_pipeline(order)

    @property
    def order(self) -> Tuple[ComponentType, ...]:
        return tuple(t for t, _ in self._pipeline)

    def classify(
        self,
        node: DesignNode,
        context: Optional[ClassificationContext] = None,
    ) -> Classification:
        """First scorer result at or above the threshold, else Container."""
        ctx = ensure_context(context)
        cached = ctx.cached_classification(node, self.order)
        if cached is not None:
            return cached

        signals = ctx.signals(node)
        threshold = ctx.config.leaf_threshold
        result = None
        for component_type, scorer in self._pipeline:
            candidate = scorer(signals, ctx)
            if candidate.confidence >= threshold:
                result = candidate
                break

        if result is None:
            result = Classification(
                type=ComponentType.CONTAINER,
                confidence=ctx.config.container_confidence,
                reasons=(FALLBACK_REASON,),
            )
        logger.debug(
            "Classified %r as %s (%.2f): %s",
            node.name, result.type.value, result.confidence, "; ".join(summarize(result.reasons)),
        )
        ctx.remember_classification(node, result, self.order)
        return result

    def score_all(
        self,
        node: DesignNode,
        context: Optional[ClassificationContext] = None,
    ) -> List[Classification]:
        """Every scorer's verdict in pipeline order (diagnostics only)."""
        ctx = ensure_context(context)
        signals = ctx.signals(node)
        return [scorer(signals, ctx) for _, scorer in self._pipeline]

    def classify_tree(
        self,
        root: DesignNode,
        context: Optional[ClassificationContext] = None,
    ) -> Dict[str, Classification]:
        """Classify ``root`` and its descendants, keyed by node id (or name).

        Descendants below ``config.max_depth`` are skipped and the context is
        flagged ``depth_limited``.
        """
        ctx = ensure_context(context)
        max_depth = ctx.config.max_depth
        results = {_key(root): self.classify(root, ctx)}
        for node, depth in iter_descendants(root, max_depth):
            results[_key(node)] = self.classify(node, ctx)
            if depth == max_depth and node.children:
                ctx.depth_limited = True
        if ctx.depth_limited:
            logger.warning(
                "Tree under %r exceeds max depth %d; deeper nodes were not classified",
                root.name, max_depth,
            )
        return results


def _key(node: DesignNode) -> str:
    return node.id or node.name


@lru_cache(maxsize=1)
def default_classifier() -> LeafClassifier:
    """Process-wide classifier built from the bundled order table."""
    return LeafClassifier()


def classify(
    node: DesignNode,
    config: Optional[EngineConfig] = None,
    context: Optional[ClassificationContext] = None,
) -> Classification:
    """Classify one node with the default pipeline."""
    return default_classifier().classify(node, ensure_context(context, config))
