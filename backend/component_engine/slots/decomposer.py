"""Recursive slot decomposition of composite components.

For each slot of a schema, in declaration order:

1. Score every unclaimed direct child of the current root. A rule adds
   ``weight x predicate``; the sum is clamped to 1.0, never renormalised.
   A child whose name is a whole-word keyword of another slot of the
   schema, and not of this one, is left for that slot.
2. Keep the best candidate at or above ``config.slot_threshold`` (or every
   such candidate, in document order, when the slot allows multiples).
   A child is claimed by at most one slot.
3. Recurse into the matched child with the slot's own child slots.

When a slot that has child slots finds no container, its child slots are
matched directly against the current root ("flattening"): a Card whose
title and description sit directly under the card still decomposes, and
the result suggests grouping them.

Decomposition never raises. Missing structure is reported as warnings.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Sequence, Set, Tuple

from ..context import ClassificationContext, ensure_context
from ..leaf.pipeline import default_classifier
from ..models import ComponentType, DesignNode, SemanticMappingResult, SlotMapping
from ..scoring import clamp01
from ..settings import EngineConfig
from .rules import RuleContext, describe, evaluate
from .schema import RuleKind, SlotSchema, SlotSpec, get_default_schemas

logger = logging.getLogger(__name__)


def score_candidate(spec: SlotSpec, node: DesignNode, rc: RuleContext) -> Tuple[float, List[str]]:
    """Clamped rule sum of ``node`` for ``spec`` plus one reason per firing rule."""
    total = 0.0
    reasons: List[str] = []
    for rule in spec.rules:
        value = evaluate(rule, node, rc)
        if value <= 0 or rule.weight <= 0:
            continue
        contribution = rule.weight * value
        total += contribution
        reasons.append(f"{describe(rule)} +{contribution:.2f}")
    return clamp01(total), reasons


def name_score(spec: SlotSpec, node: DesignNode, rc: RuleContext) -> float:
    """Best name_keyword score of ``node`` for ``spec`` (0 when it has none)."""
    return max(
        (evaluate(rule, node, rc) for rule in spec.rules if rule.kind == RuleKind.NAME_KEYWORD),
        default=0.0,
    )


class _Decomposition:
    """Mutable state of one ``decompose`` call."""

    def __init__(self, schema: SlotSchema, ctx: ClassificationContext):
        self.schema = schema
        self.ctx = ctx
        self.config = ctx.config
        self.mappings: List[SlotMapping] = []
        self.warnings: List[str] = []
        self.suggestions: List[str] = []
        self.claimed: Set[int] = set()
        # slot name -> best confidence over all its mappings
        self.best: Dict[str, float] = {}
        self.slots: List[SlotSpec] = list(schema.iter_slots())

    def match(
        self,
        root: DesignNode,
        specs: Sequence[SlotSpec],
        parent_slot: Optional[str],
        depth: int,
        flattened: bool = False,
    ) -> List[SlotMapping]:
        rc = RuleContext.for_parent(root, self.ctx)
        matched: List[SlotMapping] = []
        for spec in specs:
            mapping, chosen = self._match_slot(root, spec, rc, parent_slot, flattened)
            if mapping is None:
                if spec.children:
                    self._flatten(root, spec, depth, flattened)
                continue
            matched.append(mapping)
            if spec.children:
                for child in chosen:
                    self._descend(child, spec, depth, flattened)
        return matched

    def _match_slot(
        self,
        root: DesignNode,
        spec: SlotSpec,
        rc: RuleContext,
        parent_slot: Optional[str],
        flattened: bool,
    ) -> Tuple[Optional[SlotMapping], List[DesignNode]]:
        threshold = self.config.slot_threshold
        candidates = []
        for index, child in enumerate(root.children):
            if id(child) in self.claimed:
                continue
            if self._named_for_other_slot(spec, child, rc.at(index)):
                continue
            score, reasons = score_candidate(spec, child, rc.at(index))
            if score >= threshold:
                candidates.append((score, index, child, reasons))
        if not candidates:
            logger.debug("Slot %s: no candidate under %r", spec.name, root.name)
            return None, []

        if spec.allows_multiple:
            chosen = sorted(candidates, key=lambda c: c[1])
        else:
            # max() keeps the first of equal scores, i.e. document order
            chosen = [max(candidates, key=lambda c: c[0])]

        for _, _, child, _ in chosen:
            self.claimed.add(id(child))
        confidence = sum(c[0] for c in chosen) / len(chosen)
        best_reasons = max(chosen, key=lambda c: c[0])[3]
        mapping = SlotMapping(
            slot_name=spec.name,
            matched_nodes=tuple(c[2] for c in chosen),
            confidence=confidence,
            parent_slot=parent_slot,
            flattened=flattened,
            reasons=tuple(best_reasons),
        )
        self.mappings.append(mapping)
        self.best[spec.name] = max(confidence, self.best.get(spec.name, 0.0))
        logger.debug(
            "Slot %s -> %s (%.2f)",
            spec.name, [n.name for n in mapping.matched_nodes], confidence,
        )
        self._suggest_rename(spec, mapping)
        return mapping, [c[2] for c in chosen]

    def _named_for_other_slot(self, spec: SlotSpec, node: DesignNode, rc: RuleContext) -> bool:
        """True when the layer name names another slot of the schema but not ``spec``."""
        if name_score(spec, node, rc) >= 1.0:
            return False
        return any(
            other is not spec and name_score(other, node, rc) >= 1.0
            for other in self.slots
        )

    def _descend(self, node: DesignNode, spec: SlotSpec, depth: int, flattened: bool) -> None:
        if depth + 1 >= self.config.max_depth:
            self.ctx.depth_limited = True
            self.warnings.append(
                f"Maximum depth {self.config.max_depth} reached below slot "
                f"'{spec.name}'; nested slots were not decomposed"
            )
            logger.warning(
                "Slot recursion stopped at depth %d under %r", depth + 1, node.name,
            )
            return
        self.match(node, spec.children, spec.name, depth + 1, flattened)

    def _flatten(self, root: DesignNode, spec: SlotSpec, depth: int, flattened: bool) -> None:
        found = self.match(root, spec.children, spec.name, depth, flattened=True)
        if not found:
            return
        names = ", ".join(f"'{n.name}'" for m in found for n in m.matched_nodes)
        self.suggestions.append(
            f"Group {names} into a '{spec.name}' container"
        )

    def _suggest_rename(self, spec: SlotSpec, mapping: SlotMapping) -> None:
        if not self.config.suggestion_low <= mapping.confidence < self.config.suggestion_high:
            return
        keyword = spec.primary_keyword
        for node in mapping.matched_nodes:
            self.suggestions.append(
                f"Rename '{node.name}' to include '{keyword}' to confirm it as {spec.name} "
                f"(confidence {mapping.confidence:.2f})"
            )

    def overall_confidence(self) -> float:
        """Weighted mean of slot confidences; unmatched required slots count 0."""
        weighted = 0.0
        total_weight = 0.0
        for spec in self.schema.iter_slots():
            confidence = self.best.get(spec.name)
            if confidence is None and not spec.required:
                continue
            weight = self.config.required_slot_weight if spec.required else self.config.optional_slot_weight
            weighted += weight * (confidence or 0.0)
            total_weight += weight
        return weighted / total_weight if total_weight else 0.0


def decompose(
    node: DesignNode,
    schema: SlotSchema,
    context: Optional[ClassificationContext] = None,
    config: Optional[EngineConfig] = None,
) -> SemanticMappingResult:
    """Map the children of ``node`` onto the slots of ``schema``."""
    ctx = ensure_context(context, config)
    state = _Decomposition(schema, ctx)

    if not node.children:
        state.warnings.append(f"Node '{node.name}' has no children to decompose")
    else:
        state.match(node, schema.slots, parent_slot=None, depth=0)

    for spec in schema.required_slots:
        if spec.name not in state.best:
            state.warnings.append(f"Required slot '{spec.name}' was not matched")

    unmatched = [c for c in node.children if id(c) not in state.claimed]
    if unmatched and state.mappings:
        state.warnings.append(
            f"{len(unmatched)} child layer(s) not mapped to any slot: "
            + ", ".join(f"'{c.name}'" for c in unmatched)
        )

    result = SemanticMappingResult(
        component_type=schema.component_type,
        schema=schema,
        mappings=state.mappings,
        overall_confidence=state.overall_confidence(),
        warnings=state.warnings,
        suggestions=state.suggestions,
        unmatched=unmatched,
    )
    logger.debug(
        "Decomposed %r as %s: %d mappings, confidence %.2f, %d warnings",
        node.name, schema.component_type.value, len(result.mappings),
        result.overall_confidence, len(result.warnings),
    )
    return result


def map_component(
    node: DesignNode,
    component_type: Optional[ComponentType] = None,
    context: Optional[ClassificationContext] = None,
    config: Optional[EngineConfig] = None,
    schemas: Optional[Mapping[ComponentType, SlotSchema]] = None,
) -> SemanticMappingResult:
    """Classify ``node`` when no type is given, then decompose it.

    Types without a slot schema (leaf types, Container) yield an empty
    result carrying a warning.
    """
    ctx = ensure_context(context, config)
    if component_type is None:
        component_type = default_classifier().classify(node, ctx).type

    registry = schemas if schemas is not None else get_default_schemas()
    schema = registry.get(component_type)
    if schema is None:
        logger.warning("No slot schema for %s (node %r)", component_type.value, node.name)
        return SemanticMappingResult(
            component_type=component_type,
            schema=None,
            warnings=[f"No slot schema for component type '{component_type.value}'"],
            unmatched=list(node.children),
        )
    return decompose(node, schema, ctx)
