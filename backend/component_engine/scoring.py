"""Scorer contract shared by the leaf and block pipelines.

A scorer starts from zero and records every piece of evidence it sees in an
``Evidence`` ledger:

- ``add``: positive evidence (name match, variant metadata, structure, size)
- ``penalize``: negative evidence pointing at a confusable type
- ``scale``: multiplicative damping (e.g. table-with-toolbar)
- ``veto``: early return with confidence 0

The running total may leave [0, 1] while evidence accumulates; it is
clamped exactly once, when the result is read.
"""

from __future__ import annotations

import math
from typing import Iterable, List, Tuple

from .models import Classification, ComponentType
from .signals import NodeSignals, named_component

# Subtracted when a layer name explicitly names another component
CONTRADICTING_NAME_PENALTY = 0.8


def clamp01(value: float) -> float:
    """Clamp to [0, 1]; NaN becomes 0."""
    if value is None or math.isnan(value):
        return 0.0
    return max(0.0, min(1.0, value))


class Evidence:
    """Running, explained score for one candidate type."""

    def __init__(self, component_type: ComponentType):
        self.component_type = component_type
        self.score = 0.0
        self.reasons: List[str] = []
        self.vetoed = False

    def add(self, weight: float, reason: str) -> None:
        self.score += weight
        self.reasons.append(reason)

    def penalize(self, weight: float, reason: str) -> None:
        self.score -= weight
        self.reasons.append(f"Penalty -{weight:g}: {reason}")

    def scale(self, factor: float, reason: str) -> None:
        self.score *= factor
        self.reasons.append(f"Scaled x{factor:g}: {reason}")

    def contradict(self, signals: NodeSignals, allow: Iterable[str] = ()) -> bool:
        """Penalise a name that explicitly names a different component.

        Call only when the scorer's own name evidence did not fire. Tokens in
        ``allow`` are treated as compatible with this scorer's type.
        """
        allowed = set(allow)
        tokens = [t for t in signals.tokens if t not in allowed]
        hit = named_component(tokens)
        if hit is None or hit[1] == self.component_type:
            return False
        token, other = hit
        self.penalize(
            CONTRADICTING_NAME_PENALTY,
            f"Name \"{token}\" identifies a {other.value}",
        )
        return True

    def require_cue(self, has_cue: bool, factor: float, label: str) -> None:
        """Damp purely structural evidence when the name gives no cue."""
        if not has_cue and self.score > 0:
            self.scale(factor, f"No {label} cue in the layer name")

    def veto(self, reason: str) -> Classification:
        self.vetoed = True
        self.score = 0.0
        self.reasons.append(reason)
        return self.result()

    @property
    def total(self) -> float:
        return 0.0 if self.vetoed else clamp01(self.score)

    def result(self) -> Classification:
        return Classification(
            type=self.component_type,
            confidence=self.total,
            reasons=tuple(self.reasons),
        )


def summarize(reasons: Iterable[str], limit: int = 3) -> Tuple[str, ...]:
    """First ``limit`` reasons, used in log lines."""
    return tuple(list(reasons)[:limit])
