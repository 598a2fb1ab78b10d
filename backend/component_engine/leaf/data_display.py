"""Scorers for data display and media: tables, charts, carousels, cards,
badges, avatars, icons, text and images."""

from __future__ import annotations

from ..context import ClassificationContext
from ..models import ComponentType, NodeKind
from ..scoring import Evidence
from ..signals import NodeSignals, name_tokens
from .registry import leaf_scorer

_HORIZONTAL = "HORIZONTAL"
_VERTICAL = "VERTICAL"

_CHART_KINDS = ("bar", "line", "pie", "donut", "area", "radar", "scatter")


# --- Table ---

@leaf_scorer(ComponentType.TABLE)
def score_table(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.TABLE)
    cue = True

    if s.name_has("carousel", "slider"):
        ev.penalize(0.5, "Name points at a Carousel")

    if s.name_has("table"):
        ev.add(0.7, 'Name contains "table"')
    elif s.name_has("grid") and not s.name_has("data"):
        ev.add(0.2, 'Name contains "grid"')
        cue = False
    else:
        cue = False
        ev.contradict(s, allow=("grid",))

    v = s.variant
    if v.value_in("striped", ("yes", "no", "true", "false")):
        ev.add(0.2, "Has striped variant")
    if v.has("hoverable"):
        ev.add(0.15, "Has hoverable variant")
    if v.has("selectable"):
        ev.add(0.15, "Has selectable variant")

    carousel_controls = [
        n for n in s.child_names
        if "carousel" in n or "slide" in n or "dot" in n or "indicator" in n
        or ("arrow" in n and ("left" in n or "right" in n))
    ]
    if carousel_controls:
        ev.penalize(0.4, "Carousel controls (slides/arrows/dots) present")

    if s.has_child_token("header", "thead") or s.has_child_named("table head"):
        ev.add(0.3, "Has header row")
    if s.has_child_token("body", "tbody", "rows"):
        ev.add(0.2, "Has body section")

    rows = [
        c for c, toks in zip(s.children, s.child_tokens)
        if "row" in toks or "tr" in toks or "rows" in toks
        or (c.layout.mode == _HORIZONTAL and len(c.children) >= 2)
    ]
    if len(rows) >= 2:
        ev.add(0.3, f"Has {len(rows)} row-like children")
        with_cells = [
            r for r in rows
            if any(t in ("cell", "cells", "td", "th") for c in r.children for t in name_tokens(c.name))
        ]
        if with_cells:
            ev.add(0.2, "Rows contain cells")
            if s.layout_mode == _VERTICAL:
                ev.add(0.2, "Vertical stack of cell rows")

    if s.width > 300 and s.height > 100:
        ev.add(0.1, "Table-like size")

    if not cue and s.has_child_named("sort", "filter", "search", "pagination"):
        ev.scale(0.5, "Toolbar controls suggest a data view wrapper")

    ev.require_cue(cue, 0.5, "table")
    return ev.result()


# --- Chart ---

@leaf_scorer(ComponentType.CHART)
def score_chart(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.CHART)
    cue = True

    if s.name_has("chart"):
        ev.add(0.8, 'Name contains "chart"')
    elif s.name_has("graph"):
        ev.add(0.7, 'Name contains "graph"')
    elif s.name_has("visualization", "visualisation") or s.has_token("viz"):
        ev.add(0.6, "Name mentions a visualization")
    else:
        cue = False
        ev.contradict(s)

    for kind in _CHART_KINDS:
        if kind in s.tokens:
            ev.add(0.3, f"Name names a {kind} chart")
            break

    if s.variant.value_in("type", ("bar", "line", "pie", "area", "donut")):
        ev.add(0.3, f"Type={s.variant.get('type')} chart variant")

    if s.has_child_named("axis"):
        ev.add(0.3, "Has axis child")
    if s.has_child_named("legend"):
        ev.add(0.2, "Has legend child")
    if s.has_child_token("bar", "line", "series", "data", "point"):
        ev.add(0.2, "Has data series children")
    if s.has_child_named("grid"):
        ev.add(0.1, "Has grid lines")
    if s.width > 200 and s.height > 150:
        ev.add(0.1, "Chart-like size")

    ev.require_cue(cue, 0.5, "chart")
    return ev.result()


# --- Carousel ---

@leaf_scorer(ComponentType.CAROUSEL)
def score_carousel(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.CAROUSEL)
    cue = True

    if s.name_has("carousel"):
        ev.add(0.8, 'Name contains "carousel"')
    elif s.name_has("slider") and s.has_token("image", "slide"):
        ev.add(0.6, "Name describes an image slider")
    elif s.name_has("gallery") and s.name_has("scroll"):
        ev.add(0.5, "Name describes a scrolling gallery")
    else:
        cue = False
        ev.contradict(s)

    v = s.variant
    if v.value_in("orientation", ("horizontal", "vertical")):
        ev.add(0.25, "Has orientation variant")
    if v.has("dots"):
        ev.add(0.2, "Has dots variant")
    if v.has("arrows"):
        ev.add(0.2, "Has arrows variant")

    arrows = [
        n for n in s.child_names
        if "prev" in n or "next" in n
        or (("arrow" in n or "chevron" in n) and ("left" in n or "right" in n))
    ]
    if arrows:
        ev.add(0.3, "Has previous/next arrows")
    if s.has_child_named("dot", "indicator", "pagination"):
        ev.add(0.25, "Has slide indicators")
    slides = s.children_with_token("slide", "item", "card")
    if len(slides) >= 2:
        ev.add(0.3, f"Has {len(slides)} slide children")
    for c in s.children_named("container", "track", "viewport"):
        if len(c.children) >= 2:
            ev.add(0.2, "Has a slide track with multiple items")
            break
    if s.layout_mode == _HORIZONTAL or s.child_count >= 2:
        ev.add(0.1, "Horizontal or multi-item structure")

    if s.has_child_token("row", "cell", "td", "th", "thead"):
        ev.penalize(0.4, "Table rows/cells present")

    ev.require_cue(cue, 0.5, "carousel")
    return ev.result()


# --- Card ---

@leaf_scorer(ComponentType.CARD)
def score_card(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.CARD)
    if s.is_text:
        return ev.veto("Text layers are not cards")
    if s.name_has("card"):
        ev.add(0.5, 'Name contains "card"')
    else:
        ev.contradict(s)
    if s.has_shadow and s.child_count >= 2:
        ev.add(0.3, "Elevated container with multiple children")
    if s.width > 200 and s.height > 100:
        ev.add(0.1, "Card-like size")
    return ev.result()


# --- Badge ---

@leaf_scorer(ComponentType.BADGE)
def score_badge(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.BADGE)
    if s.name_has("badge", "chip") or s.has_token("tag"):
        ev.add(0.6, "Name names a badge/tag/chip")
    else:
        ev.contradict(s)
    if s.has_text_child and 0 < s.width < 100 and 0 < s.height < 40 and s.corner_radius >= 4:
        ev.add(0.3, "Small rounded label")
    return ev.result()


# --- Avatar ---

@leaf_scorer(ComponentType.AVATAR)
def score_avatar(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.AVATAR)
    if s.is_text:
        return ev.veto("Text layers are not avatars")
    if s.name_has("avatar", "profile"):
        ev.add(0.6, "Name names an avatar/profile picture")
    else:
        ev.contradict(s)
    if (s.is_circular or s.is_square) and s.width < 100:
        ev.add(0.3, "Small circular or square shape")
    return ev.result()


# --- Icon ---

@leaf_scorer(ComponentType.ICON)
def score_icon(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.ICON)
    if s.has_token("icon", "ico") or s.name_has("icon"):
        ev.add(0.6, 'Name contains "icon"')
    if s.variant.size == "icon":
        ev.add(0.5, "Size=icon marks an icon-sized control")
    w, h = s.width, s.height
    if 0 < w <= 32 and 0 < h <= 32 and abs(w - h) / max(w, h) < 0.2:
        ev.add(0.3, "Small square shape")
    if s.kind in (NodeKind.VECTOR, NodeKind.GROUP, NodeKind.BOOLEAN_OPERATION):
        ev.add(0.1, f"{s.kind.value} node")
    return ev.result()


# --- Text ---

@leaf_scorer(ComponentType.TEXT)
def score_text(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.TEXT)
    if s.is_text:
        ev.add(1.0, "Is a text node")
    return ev.result()


# --- Image ---

@leaf_scorer(ComponentType.IMAGE)
def score_image(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.IMAGE)
    if s.name_has("image", "picture", "photo") or s.has_token("img"):
        ev.add(0.5, "Name names an image")
    if s.has_image_fill:
        ev.add(0.5, "Has an image fill")
    return ev.result()
