"""Scorers for navigation: tabs, pagination, breadcrumbs, menus and sidebars."""

from __future__ import annotations

from ..context import ClassificationContext
from ..models import ComponentType, NodeKind
from ..scoring import Evidence
from ..signals import NodeSignals
from .registry import leaf_scorer

_HORIZONTAL = "HORIZONTAL"
_VERTICAL = "VERTICAL"

_SEPARATOR_GLYPHS = ("/", ">", "›", "»")


@leaf_scorer(ComponentType.TABS)
def score_tabs(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.TABS)
    if s.name_has("tab group", "tab-group"):
        ev.add(0.6, 'Name contains "tab group"')
    elif s.has_token("tabs", "tab"):
        ev.add(0.7, 'Name contains "tabs"')
    else:
        ev.contradict(s)

    list_child = any(
        ("tab" in n or "trigger" in n)
        and c.layout.mode == _HORIZONTAL and len(c.children) >= 2
        for c, n in zip(s.children, s.child_names)
    )
    if list_child:
        ev.add(0.4, "Horizontal list of tab triggers")
    panels = s.count_children_named("content", "panel", "pane")
    if panels >= 2:
        ev.add(0.3, f"{panels} content panels")
    if s.child_count >= 2:
        first, first_name = s.children[0], s.child_names[0]
        if ("list" in first_name or "trigger" in first_name) and first.layout.mode == _HORIZONTAL:
            ev.add(0.2, "First child is a horizontal trigger list")
        if s.layout_mode == _VERTICAL:
            ev.add(0.1, "Vertical stack of list and panels")
    tab_like = [n for n in s.child_names if "tab" in n and "content" not in n and "table" not in n]
    if len(tab_like) >= 2:
        ev.add(0.3, f"{len(tab_like)} tab-like children")
    return ev.result()


@leaf_scorer(ComponentType.PAGINATION)
def score_pagination(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.PAGINATION)
    if s.name_has("pagination", "pager"):
        ev.add(0.7, 'Name contains "pagination"')
    else:
        ev.contradict(s)
    if s.has_child_named("prev") and s.has_child_named("next"):
        ev.add(0.2, "Previous and next controls")
    numbered = [
        c for c, n in zip(s.children, s.child_names)
        if n.strip().isdigit() or (c.kind == NodeKind.TEXT and (c.text or "").strip().isdigit())
    ]
    if len(numbered) >= 2:
        ev.add(0.2, f"{len(numbered)} page numbers")
    return ev.result()


@leaf_scorer(ComponentType.BREADCRUMB)
def score_breadcrumb(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.BREADCRUMB)
    v = s.variant
    named = s.name_has("breadcrumb")
    if named:
        ev.add(0.7, 'Name contains "breadcrumb"')
        if v.variant or v.state:
            ev.add(0.2, "Variant/state properties")
    else:
        ev.contradict(s)

    has_separator = any(
        "separator" in n or "chevron" in n or "slash" in n
        or (c.kind == NodeKind.TEXT and (c.text or "").strip() in _SEPARATOR_GLYPHS)
        for c, n in zip(s.children, s.child_names)
    )
    # Without a separator a horizontal row of links is just a nav bar
    if has_separator:
        ev.add(0.2, "Separator children")
        if s.layout_mode == _HORIZONTAL:
            ev.add(0.2, "Horizontal trail")
        if s.child_count >= 2:
            ev.add(0.1, "Several crumbs")
        if s.has_child_named("link", "item", "page"):
            ev.add(0.1, "Link/item children")
        if 0 < s.height < 50 and s.width > 100:
            ev.add(0.1, "Single-line trail size")
    return ev.result()


@leaf_scorer(ComponentType.NAVIGATION_MENU)
def score_navigation_menu(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.NAVIGATION_MENU)
    if s.name_has("navigation") and s.name_has("menu"):
        ev.add(0.7, 'Name contains "navigation menu"')
    elif s.has_token("nav") and s.name_has("menu"):
        ev.add(0.6, 'Name contains "nav menu"')
    else:
        ev.contradict(s)
    if s.layout_mode == _HORIZONTAL and s.count_children_named("item", "link", "trigger") >= 2:
        ev.add(0.2, "Horizontal row of menu items")
    return ev.result()


@leaf_scorer(ComponentType.SIDEBAR)
def score_sidebar(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.SIDEBAR)
    v = s.variant
    if s.name_has("sidebar", "side-bar"):
        ev.add(0.7, 'Name contains "sidebar"')
    elif s.name_has("side panel", "side-panel", "sidepanel"):
        ev.add(0.6, 'Name contains "side panel"')
    elif s.name_has("navigation panel", "nav panel"):
        ev.add(0.5, 'Name contains "navigation panel"')
    elif s.has_token("nav") and s.name_has("side", "left"):
        ev.add(0.4, "Name suggests side navigation")
    else:
        ev.contradict(s)

    if v.value_in("type", ("collapsible", "simple", "tree", "checkbox")):
        ev.add(0.3, "Sidebar type variant")
    if v.state in ("default", "hover", "active", "focused"):
        ev.add(0.2, "Interactive state")
    if v.value_in("collapsed", ("true", "false")):
        ev.add(0.2, "Collapsed variant")

    if s.layout_mode == _VERTICAL and s.child_count >= 3:
        ev.add(0.2, "Vertical stack of sections")
    if s.has_child_named("menu", "item", "button", "nav"):
        ev.add(0.15, "Navigation children")
    ratio = s.aspect_ratio
    if ratio is not None:
        if s.height > 400 and ratio < 0.8:
            ev.add(0.2, "Tall and narrow")
        elif s.height > 300 and ratio < 1.0:
            ev.add(0.15, "Taller than wide")
    if s.has_child_named("header", "content", "footer"):
        ev.add(0.1, "Header/content/footer sections")
    return ev.result()


@leaf_scorer(ComponentType.DROPDOWN_MENU)
def score_dropdown_menu(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.DROPDOWN_MENU)
    cue = True
    if s.name_has("dropdownmenu") or (s.name_has("dropdown") and s.name_has("menu")):
        ev.add(0.7, 'Name contains "dropdown menu"')
    elif s.name_has("dropdown") and not s.name_has("select"):
        ev.add(0.4, 'Name contains "dropdown"')
    else:
        cue = False
        ev.contradict(s)
    if s.has_child_named("trigger", "button") and s.has_child_named("content", "menu"):
        ev.add(0.5, "Trigger and menu content")
    ev.require_cue(cue, 0.5, "dropdown")
    return ev.result()


@leaf_scorer(ComponentType.MENUBAR)
def score_menubar(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.MENUBAR)
    if s.name_has("menubar", "menu bar", "app menu"):
        ev.add(0.7, 'Name contains "menubar"')
    else:
        ev.contradict(s)
    if s.layout_mode == _HORIZONTAL:
        ev.add(0.2, "Horizontal layout")
    desktop = ("file", "edit", "view", "help")
    menu_like = s.count_children_named("menu", "trigger", *desktop)
    if menu_like >= 2:
        ev.add(0.3, f"{menu_like} menu-like children")
    if s.has_child_named(*desktop):
        ev.add(0.2, "File/Edit/View/Help menus")
    if s.height > 0 and s.width > s.height * 3:
        ev.add(0.1, "Wide bar proportions")
    return ev.result()
