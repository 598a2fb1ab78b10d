"""Scorers for loading and status feedback: skeletons, progress bars,
spinners and empty states."""

from __future__ import annotations

import re

from ..context import ClassificationContext
from ..models import ComponentType, NodeKind
from ..scoring import Evidence
from ..signals import NodeSignals, solid_fill_color
from .registry import leaf_scorer

_VALUE_RE = re.compile(r"^\d+$")


def _has_text_within(node) -> bool:
    return node.kind == NodeKind.TEXT or any(c.kind == NodeKind.TEXT for c in node.children)


# --- Skeleton ---

@leaf_scorer(ComponentType.SKELETON)
def score_skeleton(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.SKELETON)
    if s.is_text:
        return ev.veto("Text layers are not skeleton placeholders")
    v = s.variant

    cue = True
    if s.name_has("skeleton"):
        ev.add(0.9, 'Name contains "skeleton"')
    elif s.name_has("placeholder") and s.name_has("loading"):
        ev.add(0.8, "Name contains loading placeholder")
    elif s.name_has("shimmer"):
        ev.add(0.7, 'Name contains "shimmer"')
    elif s.name_has("placeholder") and not s.name_has("empty"):
        ev.add(0.5, 'Name contains "placeholder"')
    else:
        cue = False
        ev.contradict(s)

    if v.value_in("shape", ("rectangle", "circle", "text")):
        ev.add(0.3, "Shape variant")
    if v.value_in("animated", ("yes", "no", "true", "false")):
        ev.add(0.2, "Animated variant")

    if s.children:
        if s.has_child_named("arrow", "pointer"):
            ev.penalize(0.4, "Arrow/pointer child points at a Tooltip")
        real_text = [
            c for c, n in zip(s.children, s.child_names)
            if c.kind == NodeKind.TEXT and "placeholder" not in n and "skeleton" not in n
        ]
        if real_text:
            ev.penalize(0.3, "Real text content")
        if s.has_child_named("header") and s.has_child_named("content", "body"):
            ev.penalize(0.3, "Header and content sections point at a card")

        shapes = [
            c for c, n in zip(s.children, s.child_names)
            if "line" in n or "box" in n or "rect" in n or not c.children
        ]
        if len(shapes) >= 2:
            ev.add(0.35, f"{len(shapes)} placeholder shapes")
        if s.has_child_named("gradient", "shimmer", "shine", "effect"):
            ev.add(0.3, "Shimmer/gradient child")

    color = solid_fill_color(s.node)
    if color is not None:
        r, g, b, _ = color
        if r == g == b and 0.8 <= r <= 0.95:
            ev.add(0.25, "Light gray fill")
    if s.corner_radius > 0:
        ev.add(0.1, "Rounded corners")

    ev.require_cue(cue, 0.6, "skeleton")
    return ev.result()


# --- Progress ---

@leaf_scorer(ComponentType.PROGRESS)
def score_progress(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.PROGRESS)
    if s.is_text:
        return ev.veto("Text layers are not progress bars")
    v = s.variant

    cue = True
    if s.name_has("progressbar", "progress bar"):
        ev.add(0.95, 'Name contains "progress bar"')
    elif s.name_has("progress"):
        ev.add(0.9, 'Name contains "progress"')
    elif s.name_has("loading") and s.name_has("bar", "indicator"):
        ev.add(0.7, "Name suggests a loading bar")
    else:
        cue = False
        ev.contradict(s)

    if s.children and any(
        "axis" in n or "legend" in n or "grid" in n or "data point" in n
        or "series" in n or "x-" in n or "y-" in n
        for n in s.child_names
    ):
        ev.penalize(0.5, "Chart elements (axis/legend/series)")

    if v.value_in("type", ("linear", "circular", "radial")) and not s.name_has("chart"):
        ev.add(0.25, "Progress type variant")
    value = v.get("value")
    if value is not None and _VALUE_RE.match(value):
        ev.add(0.2, "Value variant")
    if v.value_in("indeterminate", ("yes", "no", "true", "false")):
        ev.add(0.2, "Indeterminate variant")

    if s.children:
        has_track = s.has_child_named("track", "background", "rail")
        has_fill = any(
            ("fill" in n or "indicator" in n or "value" in n) and "chart" not in n
            for n in s.child_names
        )
        if has_track and has_fill:
            ev.add(0.45, "Track and fill children")
        elif has_track or has_fill:
            ev.add(0.25, "Track or fill child")
        if any(
            ("circle" in n or "ring" in n) and ("progress" in n or "indicator" in n or "track" in n)
            for n in s.child_names
        ):
            ev.add(0.35, "Circular progress structure")

    if s.height > 0 and s.width > s.height * 3 and s.height < 50:
        ev.add(0.35, "Thin horizontal bar")
    if abs(s.width - s.height) < 10 and s.width > 0 and s.corner_radius >= s.width / 2:
        ev.add(0.35, "Circular shape")
    if s.corner_radius > 0 and s.height > 0 and s.width > s.height * 2:
        ev.add(0.15, "Rounded bar")

    ev.require_cue(cue, 0.5, "progress")
    return ev.result()


# --- Spinner ---

@leaf_scorer(ComponentType.SPINNER)
def score_spinner(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.SPINNER)
    if s.is_text:
        return ev.veto("Text layers are not spinners")

    cue = True
    if s.name_has("spinner", "loading"):
        ev.add(0.7, 'Name contains "spinner" or "loading"')
    elif s.name_has("loader"):
        ev.add(0.6, 'Name contains "loader"')
    else:
        cue = False
        ev.contradict(s)

    if s.variant.size in ("xs", "sm", "md", "lg", "xl"):
        ev.add(0.2, "Size variant")
    if s.is_circular or (s.is_square and s.width < 100):
        ev.add(0.3, "Circular or square shape")
    if 0 < s.width < 80 and 0 < s.height < 80:
        ev.add(0.2, "Small size")
    if s.kind in (NodeKind.VECTOR, NodeKind.BOOLEAN_OPERATION):
        ev.add(0.1, "Vector shape")
    if any(c.corner_radius and c.width and c.corner_radius >= c.width / 2 for c in s.children):
        ev.add(0.1, "Circular segments")

    ev.require_cue(cue, 0.5, "spinner")
    return ev.result()


# --- Empty state ---

@leaf_scorer(ComponentType.EMPTY)
def score_empty(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.EMPTY)
    if s.is_text:
        return ev.veto("Text layers are not empty states")

    cue = True
    if s.name_has("empty state", "empty-state"):
        ev.add(0.95, 'Name contains "empty state"')
    elif s.name_has("empty"):
        ev.add(0.85, 'Name contains "empty"')
    elif s.name_has("zero state", "zero-state", "blank slate", "blank-slate"):
        ev.add(0.85, "Name suggests a zero state")
    elif s.name_has("no data", "no-data", "nodata"):
        ev.add(0.8, "Name suggests a no-data state")
    elif s.name_has("placeholder") and not s.name_has("loading"):
        ev.add(0.5, "Name suggests a placeholder state")
    else:
        cue = False
        ev.contradict(s)

    if s.children:
        if s.has_child_named("trigger", "arrow", "pointer"):
            ev.penalize(0.4, "Trigger/arrow child points at an overlay")
        if s.name_has("hover", "popover", "card") and not s.name_has("empty"):
            ev.penalize(0.3, "Name points at a hover card or popover")

        if s.has_child_named("icon", "illustration", "image", "graphic"):
            ev.add(0.35, "Icon or illustration")
        if any(
            ("title" in n or "heading" in n or "message" in n) and _has_text_within(c)
            for c, n in zip(s.children, s.child_names)
        ):
            ev.add(0.3, "Title text")
        if any(
            ("description" in n or "subtitle" in n or "text" in n) and _has_text_within(c)
            for c, n in zip(s.children, s.child_names)
        ):
            ev.add(0.25, "Description text")
        if s.has_child_named("button", "action", "cta"):
            ev.add(0.2, "Action button")
        layout = s.node.layout
        if layout.mode == "VERTICAL" and s.child_count >= 2 and (
            layout.primary_align == "CENTER" or layout.counter_align == "CENTER"
        ):
            ev.add(0.25, "Centered vertical stack")

    if s.width > 200 and s.height > 150:
        ev.add(0.15, "Fills its container")
    if s.width > 350 or s.height > 250:
        ev.add(0.1, "Larger than a hover card")

    ev.require_cue(cue, 0.3, "empty state")
    return ev.result()
