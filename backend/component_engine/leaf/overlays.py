"""Scorers for floating and modal surfaces.

Tooltip and HoverCard overlap on structure (small floating box with a
shadow), so each one subtracts evidence that points at the other:

- an arrow/pointer child implies Tooltip
- header + content sections, a footer or a medium size imply HoverCard
"""

from __future__ import annotations

from ..context import ClassificationContext
from ..models import ComponentType, NodeKind
from ..scoring import Evidence
from ..signals import NodeSignals
from .registry import leaf_scorer

_SIDES = ("top", "bottom", "left", "right")
_TOAST_POSITIONS = (
    "top-left", "top-center", "top-right", "bottom-left", "bottom-center", "bottom-right",
)
_TOAST_TYPES = ("success", "error", "info", "warning", "default")


def _trigger_and_content(s: NodeSignals, triggers, contents) -> bool:
    return s.has_child_named(*triggers) and s.has_child_named(*contents)


def _names_hover_card(s: NodeSignals) -> bool:
    return s.name_has("hovercard", "hover card") or (
        s.name_has("hover") and s.name_has("popover")
    )


# --- Tooltip / HoverCard ---

@leaf_scorer(ComponentType.TOOLTIP)
def score_tooltip(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.TOOLTIP)
    if s.is_text:
        return ev.veto("Text layers are not tooltips")

    if _names_hover_card(s):
        ev.penalize(0.5, "Name points at a HoverCard")

    cue = True
    if s.name_has("tooltip"):
        ev.add(0.9, 'Name contains "tooltip"')
    elif s.has_token("hint", "tip"):
        ev.add(0.5, "Name suggests a hint")
    else:
        cue = False
        ev.contradict(s)

    if s.variant.value_in("side", _SIDES) and not s.name_has("hover"):
        ev.add(0.2, "Side variant (tooltip placement)")

    if s.children:
        has_header = any("header" in n and "text" not in n for n in s.child_names)
        has_content = s.has_child_named("content", "body")
        if (has_header and has_content) or s.has_child_named("footer"):
            ev.penalize(0.4, "Structured sections point at a HoverCard")
        if s.has_child_named("arrow", "pointer") or s.has_child_token("tip"):
            ev.add(0.3, "Arrow/pointer child")
        if any(c.kind == NodeKind.TEXT or any(g.kind == NodeKind.TEXT for g in c.children)
               for c in s.children):
            ev.add(0.2, "Text content")
        if s.child_count <= 2:
            ev.add(0.15, "Simple one- or two-part structure")
        if 0 < s.width < 200 and 0 < s.height < 80:
            ev.add(0.35, "Small floating label")
        elif s.width >= 200 and s.height >= 100:
            ev.penalize(0.3, "Too large for a tooltip")

    if s.has_shadow:
        ev.add(0.15, "Drop shadow")
    if s.has_stroke or s.has_fill:
        ev.add(0.1, "Border or background")

    ev.require_cue(cue, 0.4, "tooltip")
    return ev.result()


@leaf_scorer(ComponentType.HOVER_CARD)
def score_hover_card(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.HOVER_CARD)
    cue = True
    if s.name_has("hovercard", "hover card"):
        ev.add(0.95, 'Name contains "hover card"')
    elif s.name_has("hover") and s.name_has("popover"):
        ev.add(0.8, "Name suggests a hover popover")
    elif s.name_has("popover") and s.name_has("card"):
        ev.add(0.7, "Name suggests a popover card")
    else:
        cue = False
        ev.contradict(s)

    if s.variant.value_in("side", _SIDES) and s.name_has("hover"):
        ev.add(0.2, "Side variant with hover pattern")

    if s.children:
        if s.has_child_named("arrow", "pointer"):
            ev.penalize(0.25, "Arrow/pointer child points at a Tooltip")
        has_header = s.has_child_named("header", "title")
        has_content = s.has_child_named("content", "body")
        if has_header and has_content:
            ev.add(0.4, "Header and content sections")
        elif has_header or has_content or s.has_child_named("footer"):
            ev.add(0.25, "Structured content sections")
        if s.child_count >= 3:
            ev.add(0.25, "Three or more sections")

    if 200 <= s.width <= 400 and 80 <= s.height <= 350:
        ev.add(0.35, "Medium floating card size")
    if s.has_shadow:
        ev.add(0.15, "Drop shadow")

    ev.require_cue(cue, 0.3, "hover card")
    return ev.result()


# --- Alerts ---

@leaf_scorer(ComponentType.ALERT_DIALOG)
def score_alert_dialog(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.ALERT_DIALOG)
    cue = True
    if s.name_has("alertdialog") or (s.name_has("alert") and s.name_has("dialog")):
        ev.add(0.8, 'Name contains "alert" and "dialog"')
    else:
        cue = False
        ev.contradict(s)
    if s.variant.variant:
        ev.add(0.1, "Has variant properties")
    if _trigger_and_content(s, ("trigger", "button"), ("content", "modal")):
        ev.add(0.3, "Trigger and content")
    if s.has_child_named("action", "cancel", "continue", "confirm"):
        ev.add(0.2, "Confirm/cancel actions")
    ev.require_cue(cue, 0.3, "alert dialog")
    return ev.result()


@leaf_scorer(ComponentType.ALERT)
def score_alert(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.ALERT)
    if not s.name_has("alert") or s.name_has("dialog"):
        return ev.veto('Name does not contain "alert"')
    ev.add(0.8, 'Name contains "alert"')
    if s.variant.variant in ("default", "destructive"):
        ev.add(0.3, f"Alert variant ({s.variant.variant})")
    has_icon = s.has_child_named("icon") or bool(s.children_of_kind(NodeKind.VECTOR))
    if has_icon and s.has_child_named("title", "heading", "description", "message"):
        ev.add(0.3, "Icon with title/description")
    if s.height > 0 and s.width > s.height * 2:
        ev.add(0.1, "Wide banner proportions")
    if s.has_fill or s.has_stroke:
        ev.add(0.1, "Background or border")
    return ev.result()


# --- Edge panels ---

@leaf_scorer(ComponentType.DRAWER)
def score_drawer(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.DRAWER)
    cue = True
    if s.name_has("drawer"):
        ev.add(0.7, 'Name contains "drawer"')
    elif s.name_has("side panel") and not s.name_has("sidebar"):
        ev.add(0.5, "Name suggests a side panel")
    else:
        cue = False
        ev.contradict(s)
    if s.variant.value_in("side", _SIDES):
        ev.add(0.3, "Side variant")
    if _trigger_and_content(s, ("trigger", "button"), ("content", "panel")):
        ev.add(0.3, "Trigger and content")
    ratio = s.aspect_ratio
    if ratio is not None and (ratio < 0.5 or ratio > 2.5):
        ev.add(0.1, "Edge-panel proportions")
    ev.require_cue(cue, 0.3, "drawer")
    return ev.result()


@leaf_scorer(ComponentType.SHEET)
def score_sheet(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.SHEET)
    cue = True
    if s.name_has("bottom sheet", "bottomsheet"):
        ev.add(0.8, 'Name contains "bottom sheet"')
    elif s.name_has("sheet"):
        ev.add(0.7, 'Name contains "sheet"')
    else:
        cue = False
        ev.contradict(s)
    if s.variant.value_in("side", _SIDES):
        ev.add(0.2, "Side variant")
    if _trigger_and_content(s, ("trigger", "button", "open"), ("content", "modal")):
        ev.add(0.3, "Trigger and content")
    if s.has_child_named("header", "title", "description"):
        ev.add(0.2, "Header section")
    if s.has_shadow:
        ev.add(0.1, "Drop shadow")
    ev.require_cue(cue, 0.3, "sheet")
    return ev.result()


# --- Floating panels ---

@leaf_scorer(ComponentType.POPOVER)
def score_popover(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.POPOVER)
    cue = True
    if s.name_has("popover"):
        ev.add(0.7, 'Name contains "popover"')
    elif s.name_has("popup") and not s.name_has("dialog"):
        ev.add(0.5, "Name suggests a popup")
    else:
        cue = False
        ev.contradict(s)
    if _trigger_and_content(s, ("trigger", "button"), ("content", "body")):
        ev.add(0.4, "Trigger and content")
    if 0 < s.width < 400 and 0 < s.height < 300:
        ev.add(0.2, "Small floating panel")
    if s.has_shadow:
        ev.add(0.1, "Drop shadow")
    ev.require_cue(cue, 0.3, "popover")
    return ev.result()


@leaf_scorer(ComponentType.SONNER)
def score_sonner(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.SONNER)
    v = s.variant
    cue = True
    if s.name_has("sonner", "toast"):
        ev.add(0.7, 'Name contains "sonner" or "toast"')
    elif s.name_has("snackbar"):
        ev.add(0.6, 'Name contains "snackbar"')
    elif s.name_has("notification") and not s.name_has("bell"):
        ev.add(0.5, "Name suggests a notification toast")
    else:
        cue = False
        ev.contradict(s)

    if v.value_in("position", _TOAST_POSITIONS):
        ev.add(0.3, "Position variant")
    if v.value_in("type", _TOAST_TYPES) or v.variant in _TOAST_TYPES:
        ev.add(0.2, "Type variant (success/error/info/warning)")
    has_icon = s.has_child_named("icon") or bool(s.children_of_kind(NodeKind.VECTOR))
    if has_icon and s.has_child_named("message", "text", "title"):
        ev.add(0.2, "Icon with message")
    if 200 < s.width < 500 and 50 < s.height < 150:
        ev.add(0.1, "Compact toast size")
    if s.has_fill and s.has_shadow:
        ev.add(0.1, "Floating background")
    ev.require_cue(cue, 0.3, "toast")
    return ev.result()


# --- Dialog ---

@leaf_scorer(ComponentType.DIALOG)
def score_dialog(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.DIALOG)
    if s.is_text:
        return ev.veto("Text layers are not dialogs")
    if s.name_has("dialog", "modal", "popup"):
        ev.add(0.7, "Name contains dialog/modal")
    else:
        ev.contradict(s)
    if s.has_shadow and s.width > 300 and s.height > 200 and s.child_count >= 3:
        ev.add(0.2, "Large elevated container with sections")
    return ev.result()
