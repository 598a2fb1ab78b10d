"""Per-request state: config plus memo tables for one classification call.

A context is created at the start of a request (``classify``, ``decompose``,
``analyze``, ``classify_block``) and thrown away with it. Nothing in here is
shared across requests.
"""

from __future__ import annotations

from typing import Dict, Hashable, Optional, Tuple

from .models import Classification, DesignNode
from .settings import DEFAULT_CONFIG, EngineConfig
from .signals import NodeSignals, extract_signals


class ClassificationContext:
    """Config and memoised per-node facts for one request."""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or DEFAULT_CONFIG
        # id(node) -> (node, value); the node reference keeps the id stable
        self._signals: Dict[int, Tuple[DesignNode, NodeSignals]] = {}
        # keyed by pipeline too: classifiers with different orders may disagree
        self._classifications: Dict[Tuple[int, Hashable], Tuple[DesignNode, Classification]] = {}
        self.depth_limited = False

    def signals(self, node: DesignNode) -> NodeSignals:
        entry = self._signals.get(id(node))
        if entry is None or entry[0] is not node:
            entry = (node, extract_signals(node))
            self._signals[id(node)] = entry
        return entry[1]

    def cached_classification(
        self, node: DesignNode, pipeline: Hashable = None
    ) -> Optional[Classification]:
        entry = self._classifications.get((id(node), pipeline))
        if entry is None or entry[0] is not node:
            return None
        return entry[1]

    def remember_classification(
        self, node: DesignNode, classification: Classification, pipeline: Hashable = None
    ) -> None:
        self._classifications[(id(node), pipeline)] = (node, classification)


def ensure_context(
    context: Optional[ClassificationContext],
    config: Optional[EngineConfig] = None,
) -> ClassificationContext:
    """Reuse ``context`` when given, otherwise start a fresh request."""
    if context is not None:
        return context
    return ClassificationContext(config)
