"""Layout and composition analysis of a subtree.

- composition: which leaf types occur under a node, how often, how deep
- layout: vertical / horizontal / grid / unknown, from auto layout or from
  the children's y offsets
- characteristics: size class, dominant content and a 1-10 complexity score

The block pipeline reads all three; nothing here classifies blocks.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..context import ClassificationContext, ensure_context
from ..leaf.pipeline import default_classifier
from ..models import (
    BlockCharacteristics,
    ComponentComposition,
    ComponentType,
    DesignNode,
    LayoutPattern,
    NodeKind,
)
from ..settings import DEFAULT_CONFIG, EngineConfig
from ..signals import has_image_fill, iter_descendants, normalize_name

logger = logging.getLogger(__name__)

_IMAGE_TYPES = frozenset({ComponentType.IMAGE, ComponentType.AVATAR})
_FORM_TYPES = frozenset({
    ComponentType.FORM, ComponentType.INPUT, ComponentType.FIELD, ComponentType.TEXTAREA,
    ComponentType.SELECT, ComponentType.CHECKBOX, ComponentType.INPUT_GROUP,
    ComponentType.INPUT_OTP, ComponentType.COMBOBOX,
})

_IMAGE_WORDS = ("image", "img", "picture", "photo")
_BUTTON_WORDS = ("button", "btn")
_FORM_WORDS = ("form", "input", "field")


@dataclass(frozen=True)
class SubtreeAnalysis:
    """Composition and layout of one subtree."""
    composition: Tuple[ComponentComposition, ...]
    layout: LayoutPattern
    depth_limited: bool = False

    def count(self, component_type: ComponentType) -> int:
        for entry in self.composition:
            if entry.component_type == component_type:
                return entry.count
        return 0

    def has(self, *component_types: ComponentType) -> bool:
        return any(self.count(t) > 0 for t in component_types)


# =====================================================================
# Composition
# =====================================================================

def _location(depth: int) -> str:
    if depth <= 1:
        return "root"
    if depth == 2:
        return "nested"
    return "deep"


def analyze_composition(
    node: DesignNode,
    context: Optional[ClassificationContext] = None,
) -> List[ComponentComposition]:
    """Leaf types found below ``node`` (root excluded), in first-seen order.

    Container results are not counted. Location is that of the shallowest
    occurrence; confidence is the best classification confidence damped by
    depth.
    """
    ctx = ensure_context(context)
    config = ctx.config
    classifier = default_classifier()
    counts: Dict[ComponentType, int] = {}
    shallowest: Dict[ComponentType, int] = {}
    best: Dict[ComponentType, float] = {}

    for descendant, depth in iter_descendants(node, config.max_depth):
        if depth == config.max_depth and descendant.children:
            ctx.depth_limited = True
        result = classifier.classify(descendant, ctx)
        if result.type == ComponentType.CONTAINER:
            continue
        damped = result.confidence * max(0.0, 1 - config.composition_depth_decay * depth)
        counts[result.type] = counts.get(result.type, 0) + 1
        shallowest[result.type] = min(depth, shallowest.get(result.type, depth))
        best[result.type] = max(damped, best.get(result.type, 0.0))

    if ctx.depth_limited:
        logger.warning(
            "Composition of %r truncated at max depth %d", node.name, config.max_depth,
        )
    return [
        ComponentComposition(
            component_type=t,
            count=counts[t],
            location=_location(shallowest[t]),
            confidence=best[t],
        )
        for t in counts
    ]


# =====================================================================
# Layout
# =====================================================================

def cluster_rows(offsets: List[float], threshold: float) -> List[int]:
    """Sizes of row buckets after sorting ``offsets``.

    A new row starts whenever the gap to the previous offset exceeds
    ``threshold``.
    """
    if not offsets:
        return []
    ordered = sorted(offsets)
    buckets = [1]
    for previous, current in zip(ordered, ordered[1:]):
        if current - previous > threshold:
            buckets.append(1)
        else:
            buckets[-1] += 1
    return buckets


def detect_layout_pattern(
    node: DesignNode,
    composition: Optional[List[ComponentComposition]] = None,
    config: Optional[EngineConfig] = None,
) -> LayoutPattern:
    """Arrangement of the direct children plus content flags for the subtree."""
    config = config or DEFAULT_CONFIG
    children = node.children
    n = len(children)

    layout_type, columns, rows = "unknown", None, None
    mode = node.layout.mode
    if mode == "HORIZONTAL":
        layout_type = "horizontal"
    elif mode == "VERTICAL":
        layout_type = "vertical"
    else:
        offsets = [c.geometry.y for c in children if c.geometry.y is not None]
        if len(offsets) >= 2:
            buckets = cluster_rows(offsets, config.row_cluster_threshold)
            if n >= 4 and len(buckets) >= 2:
                layout_type = "grid"
                columns = buckets[0]
                rows = math.ceil(n / columns)
            elif len(buckets) == 1:
                layout_type = "horizontal"
            elif all(size == 1 for size in buckets):
                layout_type = "vertical"

    if n < 5:
        complexity = "simple"
    elif n < 15:
        complexity = "moderate"
    else:
        complexity = "complex"

    flags = _content_flags(node, composition or [], config.max_depth)
    return LayoutPattern(
        type=layout_type,
        columns=columns,
        rows=rows,
        complexity=complexity,
        **flags,
    )


def _content_flags(
    node: DesignNode,
    composition: List[ComponentComposition],
    max_depth: int,
) -> Dict[str, bool]:
    found = {c.component_type for c in composition}
    flags = {
        "has_images": bool(found & _IMAGE_TYPES),
        "has_text": ComponentType.TEXT in found,
        "has_buttons": ComponentType.BUTTON in found,
        "has_form": bool(found & _FORM_TYPES),
    }
    for descendant, _ in iter_descendants(node, max_depth):
        name = normalize_name(descendant.name)
        if any(w in name for w in _IMAGE_WORDS) or has_image_fill(descendant):
            flags["has_images"] = True
        if descendant.kind == NodeKind.TEXT and descendant.text:
            flags["has_text"] = True
        if any(w in name for w in _BUTTON_WORDS):
            flags["has_buttons"] = True
        if any(w in name for w in _FORM_WORDS):
            flags["has_form"] = True
    return flags


# =====================================================================
# Entry points
# =====================================================================

def analyze(
    node: DesignNode,
    context: Optional[ClassificationContext] = None,
    config: Optional[EngineConfig] = None,
) -> SubtreeAnalysis:
    """Composition and layout of ``node`` in one request."""
    ctx = ensure_context(context, config)
    composition = analyze_composition(node, ctx)
    layout = detect_layout_pattern(node, composition, ctx.config)
    logger.debug(
        "Analyzed %r: %d component types, %s layout",
        node.name, len(composition), layout.type,
    )
    return SubtreeAnalysis(
        composition=tuple(composition),
        layout=layout,
        depth_limited=ctx.depth_limited,
    )


def characteristics(
    node: DesignNode,
    layout: LayoutPattern,
    config: Optional[EngineConfig] = None,
) -> BlockCharacteristics:
    config = config or DEFAULT_CONFIG
    child_count = len(node.children)
    multiple_columns = (layout.columns or 1) > 1

    if layout.has_form:
        dominant = "forms"
    elif layout.has_images and not layout.has_text:
        dominant = "images"
    elif layout.has_text and not layout.has_images:
        dominant = "text"
    else:
        dominant = "mixed"

    score = 1 + child_count * 0.3
    score += 2 if multiple_columns else 0
    score += 2 if layout.has_form else 0
    score += 1 if layout.has_images else 0

    return BlockCharacteristics(
        is_full_width=node.width >= config.full_width_min,
        is_large_section=node.height >= config.large_section_min,
        has_multiple_columns=multiple_columns,
        has_hierarchy=child_count >= 3,
        dominant_content=dominant,
        estimated_complexity=min(int(math.floor(score + 0.5)), 10),
    )
