"""Rule predicates for slot detection.

Every predicate maps ``(candidate, RuleContext, rule)`` to a float in
[0, 1]; the decomposer multiplies it by the rule weight. Predicates never
raise on missing attributes.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Dict, Optional, Tuple

from ..context import ClassificationContext
from ..leaf.pipeline import default_classifier
from ..models import COMPONENT_KINDS, CONTAINER_KINDS, DesignNode, NodeKind
from ..signals import iter_descendants, name_tokens, normalize_name, strip_variant_pairs
from .schema import DetectionRule, RuleKind

# Score for a keyword found only inside a longer token ("cardheader")
PARTIAL_KEYWORD_SCORE = 0.5

# Levels below a candidate searched for text content
TEXT_SEARCH_DEPTH = 3


@dataclass(frozen=True)
class RuleContext:
    """Where a candidate sits: its parent, siblings and index."""
    parent: DesignNode
    siblings: Tuple[DesignNode, ...]
    index: int
    context: ClassificationContext
    largest_font: Optional[float] = None

    @classmethod
    def for_parent(
        cls,
        parent: DesignNode,
        context: ClassificationContext,
    ) -> "RuleContext":
        sizes = [s for s in (_font_size(n) for n in parent.children) if s is not None]
        return cls(
            parent=parent,
            siblings=parent.children,
            index=0,
            context=context,
            largest_font=max(sizes) if sizes else None,
        )

    @property
    def sibling_count(self) -> int:
        return len(self.siblings)

    def at(self, index: int) -> "RuleContext":
        return replace(self, index=index)


def _font_size(node: DesignNode) -> Optional[float]:
    if node.kind == NodeKind.TEXT:
        return node.font_size
    for child in node.children:
        if child.kind == NodeKind.TEXT and child.font_size is not None:
            return child.font_size
    return None


def text_content(node: DesignNode, max_depth: int = TEXT_SEARCH_DEPTH) -> str:
    """Concatenated, normalised text of ``node`` and its text descendants."""
    parts = [node.text] if node.kind == NodeKind.TEXT and node.text else []
    parts.extend(n.text for n, _ in iter_descendants(node, max_depth) if n.kind == NodeKind.TEXT and n.text)
    return normalize_name(" ".join(parts))


# =====================================================================
# Predicates
# =====================================================================

def name_keyword(node: DesignNode, rc: RuleContext, rule: DetectionRule) -> float:
    """1.0 for a whole-token keyword, 0.5 for a keyword inside a token."""
    label = normalize_name(strip_variant_pairs(node.name))
    tokens = name_tokens(strip_variant_pairs(node.name))
    best = 0.0
    for keyword in rule.keywords:
        if " " in keyword:
            if keyword in label:
                return 1.0
            continue
        if keyword in tokens or any(t.endswith("s") and t[:-1] == keyword for t in tokens):
            return 1.0
        if keyword in label:
            best = PARTIAL_KEYWORD_SCORE
    return best


def text_keyword(node: DesignNode, rc: RuleContext, rule: DetectionRule) -> float:
    text = text_content(node)
    if not text:
        return 0.0
    return 1.0 if any(k in text for k in rule.keywords) else 0.0


def node_kind(node: DesignNode, rc: RuleContext, rule: DetectionRule) -> float:
    for kind in rule.kinds:
        if kind == "container" and node.kind in CONTAINER_KINDS:
            return 1.0
        if kind == "component" and node.kind in COMPONENT_KINDS:
            return 1.0
        if node.kind.value == kind:
            return 1.0
    return 0.0


def position(node: DesignNode, rc: RuleContext, rule: DetectionRule) -> float:
    """Ordinal position among siblings; ``last`` and ``middle`` need 2+/3+."""
    n, i = rc.sibling_count, rc.index
    where = rule.position
    if where == "first":
        return 1.0 if i == 0 else 0.0
    if where == "second":
        return 1.0 if i == 1 else 0.0
    if where == "last":
        return 1.0 if n >= 2 and i == n - 1 else 0.0
    if where == "middle":
        return 1.0 if 0 < i < n - 1 else 0.0
    return 0.0


def child_count(node: DesignNode, rc: RuleContext, rule: DetectionRule) -> float:
    count = len(node.children)
    if rule.min is not None and count < rule.min:
        return 0.0
    if rule.max is not None and count > rule.max:
        return 0.0
    return 1.0


def has_text(node: DesignNode, rc: RuleContext, rule: DetectionRule) -> float:
    if node.kind == NodeKind.TEXT:
        return 1.0
    return 1.0 if any(n.kind == NodeKind.TEXT for n, _ in iter_descendants(node, TEXT_SEARCH_DEPTH)) else 0.0


def largest_text(node: DesignNode, rc: RuleContext, rule: DetectionRule) -> float:
    """1.0 when the candidate carries the largest font among its siblings."""
    size = _font_size(node)
    largest = rc.largest_font
    if size is None or largest is None:
        return 0.0
    return 1.0 if size >= largest else 0.0


def layout_mode(node: DesignNode, rc: RuleContext, rule: DetectionRule) -> float:
    return 1.0 if node.layout.mode == rule.mode else 0.0


def component_type(node: DesignNode, rc: RuleContext, rule: DetectionRule) -> float:
    """Leaf classification confidence when the type is one of ``types``."""
    result = default_classifier().classify(node, rc.context)
    return result.confidence if result.type in rule.types else 0.0


Predicate = Callable[[DesignNode, RuleContext, DetectionRule], float]

PREDICATES: Dict[RuleKind, Predicate] = {
    RuleKind.NAME_KEYWORD: name_keyword,
    RuleKind.TEXT_KEYWORD: text_keyword,
    RuleKind.NODE_KIND: node_kind,
    RuleKind.POSITION: position,
    RuleKind.CHILD_COUNT: child_count,
    RuleKind.HAS_TEXT: has_text,
    RuleKind.LARGEST_TEXT: largest_text,
    RuleKind.LAYOUT_MODE: layout_mode,
    RuleKind.COMPONENT_TYPE: component_type,
}


def describe(rule: DetectionRule) -> str:
    """Short human-readable label of a rule, used in mapping reasons."""
    if rule.keywords:
        return f"{rule.kind.value}({', '.join(rule.keywords)})"
    if rule.kinds:
        return f"{rule.kind.value}({', '.join(rule.kinds)})"
    if rule.position:
        return f"position({rule.position})"
    if rule.mode:
        return f"layout_mode({rule.mode})"
    if rule.types:
        return f"component_type({', '.join(t.value for t in rule.types)})"
    if rule.kind == RuleKind.CHILD_COUNT:
        return f"child_count({rule.min}..{rule.max})"
    return rule.kind.value


def evaluate(rule: DetectionRule, node: DesignNode, rc: RuleContext) -> float:
    value = PREDICATES[rule.kind](node, rc, rule)
    return max(0.0, min(1.0, value))
