"""Figma node dict -> DesignNode normalisation.

Accepts nodes from the REST API (``absoluteBoundingBox``) and from plugin
exports (``width``/``height`` or ``size``, ``relativeTransform``). Offsets
are always relative to the parent: ``relativeTransform`` when present,
else the difference of the absolute bounding boxes. No I/O.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from ..models import DesignNode, Effect, Geometry, LayoutFacets, NodeKind, Paint
from ..settings import DEFAULT_CONFIG, EngineConfig

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Property helpers
# ---------------------------------------------------------------------------


def figma_number(value: Any, default: Optional[float] = 0.0) -> Optional[float]:
    """Numeric property value; null and mixed values (``"mixed"``) give ``default``."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return float(value)


def figma_bounds(node: Dict) -> Dict[str, Optional[float]]:
    """Absolute x/y plus width/height, whichever export shape is present."""
    bbox = node.get("absoluteBoundingBox") or {}
    size = node.get("size") or {}
    width = bbox.get("width", node.get("width", size.get("x", 0)))
    height = bbox.get("height", node.get("height", size.get("y", 0)))
    return {
        "x": bbox.get("x"),
        "y": bbox.get("y"),
        "width": figma_number(width),
        "height": figma_number(height),
    }


def figma_relative_offset(
    node: Dict, parent_bounds: Optional[Dict[str, Optional[float]]]
) -> Tuple[Optional[float], Optional[float]]:
    """Offset from the parent's origin.

    ``relativeTransform`` is a 2x3 affine matrix [[a, b, tx], [c, d, ty]].
    """
    transform = node.get("relativeTransform")
    if isinstance(transform, list) and len(transform) == 2:
        try:
            return float(transform[0][2]), float(transform[1][2])
        except (IndexError, TypeError, ValueError):
            logger.debug("Ignoring malformed relativeTransform on %r", node.get("name"))

    bounds = figma_bounds(node)
    if parent_bounds is None:
        return bounds["x"], bounds["y"]
    x = y = None
    if bounds["x"] is not None and parent_bounds.get("x") is not None:
        x = bounds["x"] - parent_bounds["x"]
    if bounds["y"] is not None and parent_bounds.get("y") is not None:
        y = bounds["y"] - parent_bounds["y"]
    return x, y


def figma_paints(paints: Optional[List[Dict]]) -> Tuple[Paint, ...]:
    result = []
    if not isinstance(paints, list):
        return ()
    for paint in paints:
        color = paint.get("color")
        rgba = None
        if isinstance(color, dict):
            rgba = (
                figma_number(color.get("r")),
                figma_number(color.get("g")),
                figma_number(color.get("b")),
                figma_number(color.get("a"), 1.0) * figma_number(paint.get("opacity"), 1.0),
            )
        result.append(Paint(
            kind=paint.get("type", "SOLID"),
            visible=paint.get("visible", True),
            color=rgba,
        ))
    return tuple(result)


def figma_effects(effects: Optional[List[Dict]]) -> Tuple[Effect, ...]:
    return tuple(
        Effect(kind=e.get("type", "DROP_SHADOW"), visible=e.get("visible", True))
        for e in effects or []
    )


def figma_corner_radius(node: Dict) -> float:
    """Uniform radius, or the largest corner of ``rectangleCornerRadii``."""
    radii = node.get("rectangleCornerRadii")
    if isinstance(radii, list):
        corners = [r for r in (figma_number(v, None) for v in radii) if r is not None]
        if corners:
            return max(corners)
    return figma_number(node.get("cornerRadius"))


def figma_layout(node: Dict) -> LayoutFacets:
    mode = node.get("layoutMode")
    if mode not in ("HORIZONTAL", "VERTICAL"):
        mode = None
    return LayoutFacets(
        mode=mode,
        primary_align=node.get("primaryAxisAlignItems"),
        counter_align=node.get("counterAxisAlignItems"),
        padding=(
            figma_number(node.get("paddingTop")),
            figma_number(node.get("paddingRight")),
            figma_number(node.get("paddingBottom")),
            figma_number(node.get("paddingLeft")),
        ),
        item_spacing=figma_number(node.get("itemSpacing")),
    )


def figma_typography(node: Dict) -> Tuple[Optional[float], Optional[str]]:
    style = node.get("style") or {}
    # Some exports use "typeStyle" instead of "style"
    if not style.get("fontFamily") and node.get("typeStyle"):
        style = node["typeStyle"]
    size = figma_number(style.get("fontSize"), None)
    return (size or None), style.get("fontFamily")


# ---------------------------------------------------------------------------
# Tree conversion
# ---------------------------------------------------------------------------


def node_from_figma(
    data: Dict[str, Any],
    max_depth: Optional[int] = None,
    config: Optional[EngineConfig] = None,
) -> DesignNode:
    """Convert a Figma node dict (and its subtree) into a DesignNode.

    Invisible children (``visible: false``) are dropped. Subtrees deeper
    than ``max_depth`` (default ``config.max_depth``) are cut off with a
    warning.
    """
    if max_depth is None:
        max_depth = (config or DEFAULT_CONFIG).max_depth
    return _convert(data, None, 0, max_depth)


def _convert(
    data: Dict[str, Any],
    parent_bounds: Optional[Dict[str, Optional[float]]],
    depth: int,
    max_depth: int,
) -> DesignNode:
    bounds = figma_bounds(data)
    x, y = figma_relative_offset(data, parent_bounds)
    kind = NodeKind.from_raw(data.get("type"))
    font_size, font_family = figma_typography(data)

    raw_children = [c for c in data.get("children") or [] if c.get("visible", True)]
    children: Tuple[DesignNode, ...] = ()
    if raw_children:
        if depth + 1 > max_depth:
            logger.warning(
                "Depth limit %d reached at %r; dropped %d children",
                max_depth, data.get("name"), len(raw_children),
            )
        else:
            children = tuple(
                _convert(child, bounds, depth + 1, max_depth) for child in raw_children
            )

    return DesignNode(
        name=data.get("name") or "",
        kind=kind,
        id=str(data.get("id") or ""),
        geometry=Geometry(width=bounds["width"], height=bounds["height"], x=x, y=y),
        fills=figma_paints(data.get("fills")),
        strokes=figma_paints(data.get("strokes")),
        effects=figma_effects(data.get("effects")),
        corner_radius=figma_corner_radius(data),
        text=data.get("characters") if kind == NodeKind.TEXT else None,
        font_size=font_size,
        font_family=font_family,
        layout=figma_layout(data),
        children=children,
    )


def nodes_from_figma(
    data: List[Dict[str, Any]],
    max_depth: Optional[int] = None,
    config: Optional[EngineConfig] = None,
) -> List[DesignNode]:
    """Convert several top-level node dicts (e.g. a page's frames)."""
    return [node_from_figma(item, max_depth, config) for item in data]
