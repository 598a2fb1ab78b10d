"""Leaf scorer registry.

Each scorer module decorates its functions with ``@leaf_scorer(type)``;
the pipeline then looks scorers up by type name in the order table.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, TypeVar

from ..context import ClassificationContext
from ..models import Classification, ComponentType
from ..signals import NodeSignals

logger = logging.getLogger(__name__)

LeafScorer = Callable[[NodeSignals, ClassificationContext], Classification]
F = TypeVar("F", bound=LeafScorer)

# Global registry: one scorer per component type
LEAF_SCORERS: Dict[ComponentType, LeafScorer] = {}


def leaf_scorer(component_type: ComponentType) -> Callable[[F], F]:
    """Decorator registering ``fn`` as the scorer for ``component_type``."""

    def decorator(fn: F) -> F:
        existing = LEAF_SCORERS.get(component_type)
        if existing is not None and existing is not fn:
            raise ValueError(
                f"Scorer for {component_type.value} already registered "
                f"({existing.__module__}.{existing.__name__})"
            )
        LEAF_SCORERS[component_type] = fn
        logger.debug("Registered leaf scorer: %s -> %s", component_type.value, fn.__name__)
        return fn

    return decorator


def get_leaf_scorer(component_type: ComponentType) -> LeafScorer:
    if component_type not in LEAF_SCORERS:
        available = sorted(t.value for t in LEAF_SCORERS)
        raise ValueError(
            f"No scorer registered for {component_type.value}. "
            f"Available types: {available}"
        )
    return LEAF_SCORERS[component_type]
