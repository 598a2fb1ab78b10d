"""Scorers for form controls and composite inputs."""

from __future__ import annotations

import re

from ..context import ClassificationContext
from ..models import ComponentType
from ..scoring import Evidence
from ..signals import NodeSignals
from .registry import leaf_scorer

_HORIZONTAL = "HORIZONTAL"
_VERTICAL = "VERTICAL"
_AXIS_MODES = (_HORIZONTAL, _VERTICAL)

_BUTTON_VARIANTS = frozenset({
    "default", "primary", "secondary", "outline", "ghost", "link", "destructive", "tertiary",
})
_BUTTON_STATES = frozenset({"hover", "focus", "active", "pressed", "disabled", "loading"})
_BUTTON_STYLE_WORDS = ("primary", "secondary", "destructive", "outline", "ghost")

_INPUT_STATES = frozenset({"focus", "error", "disabled", "filled", "empty"})
_TEXTAREA_STATES = frozenset({"focus", "error", "disabled", "filled", "default"})

_DIGIT_RE = re.compile(r"\b\d{1,2}\b")
_SINGLE_DIGIT_RE = re.compile(r"\b[0-9]\b")


def _is_pill(s: NodeSignals) -> bool:
    return (
        s.height > 0
        and s.height * 1.5 < s.width < s.height * 2.5
        and s.corner_radius >= s.height / 2
    )


def _circular_children(s: NodeSignals) -> int:
    return sum(
        1 for c in s.children
        if c.corner_radius and abs(c.width - c.height) < 4 and c.corner_radius >= c.width / 2
    )


def _toggle_like_children(s: NodeSignals, include_buttons: bool) -> int:
    words = ["toggle", "item", "option"]
    if include_buttons:
        words.append("button")
    return s.count_children_named(*words)


# =====================================================================
# Button
# =====================================================================

@leaf_scorer(ComponentType.BUTTON)
def score_button(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.BUTTON)
    v = s.variant

    # Icon-only controls belong to the Icon scorer
    if v.size == "icon":
        return ev.veto("Size=icon marks an icon-only control, not a Button")

    if s.name_has("button", "btn"):
        ev.add(0.5, 'Name contains "button"')
    else:
        ev.contradict(s)

    if v.variant or v.state or v.size:
        if v.variant in _BUTTON_VARIANTS:
            ev.add(0.5, f'Variant "{v.variant}" is a button variant')
        else:
            ev.add(0.2, "Has variant/state/size properties")
    if v.state in _BUTTON_STATES:
        ev.add(0.3, f"Interactive state ({v.state})")

    if not s.name_has("button") and any(w in s.name for w in _BUTTON_STYLE_WORDS):
        ev.add(0.2, "Name contains a button style keyword")

    if s.has_fill and s.is_component:
        if s.has_text_child:
            ev.add(0.2, "Filled component instance with a text label")
        else:
            ev.add(0.1, "Filled component instance")

    if 40 < s.width < 300 and 24 < s.height < 60:
        ev.add(0.05, "Typical button dimensions")
    if s.corner_radius > 0:
        ev.add(0.05, "Rounded corners")
    return ev.result()


# =====================================================================
# Text entry
# =====================================================================

@leaf_scorer(ComponentType.INPUT)
def score_input(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.INPUT)
    v = s.variant
    if s.name_has("input", "textfield", "text field"):
        ev.add(0.6, "Name contains an input keyword")
    else:
        ev.contradict(s)

    if (v.variant or v.state) and s.name_has("input", "field"):
        ev.add(0.3, "Variant/state properties on an input-like name")
    if v.state in _INPUT_STATES:
        ev.add(0.2, f"Input state ({v.state})")
    if s.has_stroke and s.has_text_child:
        ev.add(0.2, "Bordered box with text")
    if s.height > 0 and s.width > s.height * 2:
        ev.add(0.1, "Wide, input-like proportions")
    return ev.result()


@leaf_scorer(ComponentType.FIELD)
def score_field(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.FIELD)
    v = s.variant
    if s.name_has("field") and not s.name_has("textfield", "text field"):
        ev.add(0.6, 'Name contains "field"')
    else:
        ev.contradict(s)
    if s.name_has("formfield", "form field", "inputfield"):
        ev.add(0.5, "Name names a form field")

    has_label = s.has_child_named("label", "title", "name")
    has_control = s.has_child_named("input", "control", "field", "textbox", "textarea", "select")
    if has_label and has_control:
        ev.add(0.4, "Label and control children")
    if s.has_child_named("description", "helper", "hint", "help", "caption", "subtitle"):
        ev.add(0.1, "Helper text child")
    if s.has_child_named("error", "message", "invalid", "validation", "warning", "alert"):
        ev.add(0.1, "Validation message child")

    if v.value_in("data invalid", ("true", "false")):
        ev.add(0.2, 'Has "Data Invalid" variant')
    if v.value_in("orientation", ("vertical", "horizontal", "responsive")):
        ev.add(0.15, 'Has "Orientation" variant')
    if v.has("description placement"):
        ev.add(0.15, 'Has "Description Placement" variant')

    if s.layout_mode == _VERTICAL:
        ev.add(0.05, "Vertical layout")
    if 2 <= s.child_count <= 4:
        ev.add(0.05, "Child count matches a field")
    if 60 <= s.height <= 200:
        ev.add(0.05, "Field-like height")
    return ev.result()


@leaf_scorer(ComponentType.TEXTAREA)
def score_textarea(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.TEXTAREA)
    v = s.variant
    if s.name_has("textarea", "text area"):
        ev.add(0.7, "Name contains textarea")
        if v.variant or v.state:
            ev.add(0.3, "Variant/state properties on a textarea")
    else:
        ev.contradict(s)
    if v.state in _TEXTAREA_STATES:
        ev.add(0.1, f"Textarea state ({v.state})")
    if s.has_stroke and s.has_text_child:
        ev.add(0.1, "Bordered box with text")

    # Height separates multi-line fields from inputs; only bordered boxes qualify
    if s.has_stroke and s.child_count <= 2 and not s.is_text and s.height > 0:
        ratio = s.aspect_ratio or 0.0
        if s.height >= 80:
            ev.add(0.6, "Height >= 80px suggests a multi-line field")
        elif s.height >= 60 and 0.8 <= ratio <= 3:
            ev.add(0.5, "Height 60-80px with textarea proportions")
        elif s.height >= 40 and 1 <= ratio <= 2:
            ev.add(0.3, "Squarish proportions")
    return ev.result()


# =====================================================================
# Choice controls
# =====================================================================

@leaf_scorer(ComponentType.CHECKBOX)
def score_checkbox(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.CHECKBOX)
    if s.is_text:
        return ev.veto("Text layers are not checkboxes")
    if s.name_has("checkbox", "check"):
        ev.add(0.6, 'Name contains "checkbox"')
    else:
        ev.contradict(s)
    if s.is_square and s.width < 30:
        ev.add(0.2, "Small square")
    return ev.result()


@leaf_scorer(ComponentType.RADIO_GROUP)
def score_radio_group(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.RADIO_GROUP)
    if s.name_has("radio group", "radio-group", "radiogroup"):
        ev.add(0.8, 'Name contains "radio group"')
    radios = [n for n in s.child_names if "radio" in n and "group" not in n]
    if len(radios) >= 2:
        ev.add(0.5, f"Has {len(radios)} radio children")
        if s.layout_mode in _AXIS_MODES:
            ev.add(0.2, "Auto-layout stack of options")
        if s.node.layout.item_spacing > 0:
            ev.add(0.1, "Spacing between options")
    return ev.result()


@leaf_scorer(ComponentType.RADIO)
def score_radio(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.RADIO)
    if s.name_has("group") or s.child_count > 3:
        return ev.veto("Looks like a radio group, not a single radio")
    if s.name_has("radio"):
        ev.add(0.7, 'Name contains "radio"')
    else:
        ev.contradict(s)
    if s.is_circular:
        ev.add(0.2, "Circular shape")
    return ev.result()


@leaf_scorer(ComponentType.SWITCH)
def score_switch(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.SWITCH)
    if s.name_has("toggle", "switch") and s.name_has("group", "bar"):
        return ev.veto("Name describes a toggle group")
    if s.child_count >= 2 and _toggle_like_children(s, include_buttons=True) >= 2:
        return ev.veto("Several toggle-like children: a toggle group")

    pill = _is_pill(s)
    if s.name_has("switch"):
        ev.add(0.7, 'Name contains "switch"')
    elif s.name_has("toggle"):
        ev.add(0.5 if pill else 0.2, 'Name contains "toggle"')
    else:
        ev.contradict(s)
    if pill:
        ev.add(0.2, "Pill shape")
    return ev.result()


@leaf_scorer(ComponentType.TOGGLE)
def score_toggle(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.TOGGLE)
    if s.name_has("toggle") and not s.name_has("group"):
        ev.add(0.7, 'Name contains "toggle"')
    return ev.result()


@leaf_scorer(ComponentType.TOGGLE_GROUP)
def score_toggle_group(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.TOGGLE_GROUP)
    group_name = s.name_has("togglegroup", "toggle group", "toggle-group")
    if group_name:
        ev.add(0.7, 'Name contains "toggle group"')
    elif s.name_has("toggle") and s.name_has("group", "bar"):
        ev.add(0.5, 'Name contains "toggle" with "group" or "bar"')
    else:
        ev.contradict(s, allow=("button", "buttons"))

    # Button children only count when the name already says toggle/segmented
    include_buttons = s.name_has("toggle", "group", "segmented")
    if s.child_count >= 2 and _toggle_like_children(s, include_buttons) >= 2:
        ev.add(0.4, "Multiple toggle items")
    if s.layout_mode in _AXIS_MODES:
        ev.add(0.1, "Auto-layout container")
    if s.has_fill or s.has_stroke:
        ev.add(0.1, "Container background or border")
    if s.child_count >= 2:
        first = s.children[0]
        similar = [
            c for c in s.children
            if abs(c.width - first.width) < 20 and abs(c.height - first.height) < 20
        ]
        if len(similar) >= 2:
            ev.add(0.1, "Children share a size")
    return ev.result()


@leaf_scorer(ComponentType.SELECT)
def score_select(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.SELECT)
    if s.name_has("select", "dropdown", "combobox"):
        ev.add(0.6, "Name contains select/dropdown")
    else:
        ev.contradict(s)
    if s.has_text_child and s.has_child_named("icon", "chevron"):
        ev.add(0.3, "Text with a trailing icon")
    return ev.result()


@leaf_scorer(ComponentType.SLIDER)
def score_slider(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.SLIDER)
    v = s.variant
    if s.name_has("slider"):
        ev.add(0.7, 'Name contains "slider"')
    else:
        ev.contradict(s)
    if v.value_in("range", ("yes", "no")):
        ev.add(0.3, "Has Range=Yes/No variant")
    if v.state in ("default", "focus", "hover"):
        ev.add(0.2, "Slider state")
    if s.height > 0 and s.width > s.height * 4:
        ev.add(0.2, "Wide horizontal track proportions")

    has_track = s.has_child_named("track", "rail")
    has_thumb = s.has_child_named("thumb", "handle", "knob")
    if has_track and has_thumb:
        ev.add(0.3, "Track and thumb children")
    elif has_track or has_thumb:
        ev.add(0.15, "Track or thumb child")

    round_kids = _circular_children(s)
    if round_kids >= 2:
        ev.add(0.15, f"{round_kids} circular children")
    elif round_kids == 1:
        ev.add(0.1, "One circular child (thumb)")
    return ev.result()


# =====================================================================
# Forms and composite inputs
# =====================================================================

@leaf_scorer(ComponentType.FORM)
def score_form(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.FORM)
    if s.is_text:
        return ev.veto("Text layers are not forms")
    if s.has_token("form"):
        ev.add(0.6, 'Name contains "form"')
    else:
        ev.contradict(s)
    if s.child_count >= 2 and s.has_child_named("input", "field", "textfield", "label"):
        ev.add(0.3, "Contains form fields")
    if s.has_child_named("button", "submit"):
        ev.add(0.1, "Contains an action button")
    if s.layout_mode == _VERTICAL:
        ev.add(0.05, "Vertical layout")
    if s.height > 150:
        ev.add(0.05, "Form-sized container")
    return ev.result()


@leaf_scorer(ComponentType.INPUT_OTP)
def score_input_otp(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.INPUT_OTP)
    if s.has_token("otp") or s.name_has("one-time", "onetime"):
        ev.add(0.7, "Name names a one-time code input")
    elif s.name_has("verification") and s.name_has("code"):
        ev.add(0.5, "Name names a verification code")
    elif s.has_token("pin") and s.name_has("code"):
        ev.add(0.5, "Name names a PIN code")
    else:
        ev.contradict(s)

    length = s.variant.get("length")
    if length is not None and length.isdigit():
        ev.add(0.2, f"Has Length={length} variant")

    segments = [
        c for c, n in zip(s.children, s.child_names)
        if (
            any(w in n for w in ("slot", "box", "digit", "char"))
            or _SINGLE_DIGIT_RE.search(n)
        ) and abs(c.width - c.height) < 10
    ]
    if 4 <= len(segments) <= 8:
        ev.add(0.4, f"{len(segments)} square segments")
    if len(segments) >= 4 and all(abs(c.width - segments[0].width) < 5 for c in segments):
        ev.add(0.15, "Segments share a width")
    if s.layout_mode == _HORIZONTAL:
        ev.add(0.1, "Horizontal layout")
    return ev.result()


@leaf_scorer(ComponentType.INPUT_GROUP)
def score_input_group(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.INPUT_GROUP)
    v = s.variant
    if s.name_has("inputgroup", "input group", "input-group"):
        ev.add(0.7, 'Name contains "input group"')
    elif s.name_has("input", "field") and s.name_has("addon", "prefix", "suffix"):
        ev.add(0.6, "Input name with addon/prefix/suffix")
    else:
        ev.contradict(s)
    if v.has("start addon") or v.has("end addon"):
        ev.add(0.2, "Has addon variant")
    if v.has("start element") or v.has("end element"):
        ev.add(0.2, "Has element variant")

    if s.child_count >= 2:
        has_input = s.has_child_named("input", "field", "textbox")
        has_extra = (
            s.has_child_named("addon", "prefix", "suffix", "start", "end", "element")
            or s.has_child_named("icon")
            or s.has_child_named("button")
        )
        if has_input and has_extra:
            ev.add(0.3, "Input with addon/icon/button")
        if s.child_count >= 3:
            ev.add(0.1, "Three or more parts")
    if s.layout_mode == _HORIZONTAL:
        ev.add(0.1, "Horizontal layout")
    if s.width > 150 and 30 <= s.height <= 60:
        ev.add(0.05, "Input-like dimensions")
    return ev.result()


@leaf_scorer(ComponentType.COMBOBOX)
def score_combobox(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.COMBOBOX)
    if s.name_has("combobox", "combo box", "combo-box"):
        ev.add(0.8, 'Name contains "combobox"')
    elif s.name_has("autocomplete", "auto complete", "auto-complete"):
        ev.add(0.6, "Name contains autocomplete")
    elif s.name_has("select", "dropdown") and s.name_has("search"):
        ev.add(0.5, "Searchable select name")
    else:
        ev.contradict(s)
    if s.variant.variant in ("default", "outline"):
        ev.add(0.1, "Combobox variant")

    has_input = s.has_child_named("input", "search", "trigger")
    has_popup = s.has_child_named("popover", "dropdown", "list", "menu")
    has_options = s.has_child_named("command", "option", "item")
    if has_input and has_popup and has_options:
        ev.add(0.4, "Input, popup and options")
    elif has_input and has_popup:
        ev.add(0.25, "Input with popup")
    if s.has_child_named("search", "filter"):
        ev.add(0.15, "Search child")
    if any(
        "chevron" in n or "arrow" in n or ("icon" in n and ("down" in n or "expand" in n))
        for n in s.child_names
    ):
        ev.add(0.1, "Chevron child")
    return ev.result()


@leaf_scorer(ComponentType.COMMAND)
def score_command(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.COMMAND)
    if s.name_has("command") and not s.name_has("combobox"):
        ev.add(0.7, 'Name contains "command"')
    elif s.name_has("palette") or s.has_token("cmd", "cmdk"):
        ev.add(0.6, "Name names a command palette")
    else:
        ev.contradict(s)
    if s.variant.has("show shortcut"):
        ev.add(0.2, "Has Show Shortcut variant")

    has_input = s.has_child_named("input", "search")
    if has_input and s.has_child_named("list", "group", "items", "item", "option"):
        ev.add(0.3, "Search input with a result list")
    if s.has_child_named("shortcut", "kbd", "key"):
        ev.add(0.2, "Keyboard shortcut children")
    if s.has_child_named("group", "section", "separator"):
        ev.add(0.15, "Grouped results")
    if s.count_children_named("icon") >= 2:
        ev.add(0.1, "Item icons")
    if s.height > 200 and 250 < s.width < 600:
        ev.add(0.05, "Palette-sized")
    return ev.result()


@leaf_scorer(ComponentType.DATE_PICKER)
def score_date_picker(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.DATE_PICKER)
    if s.name_has("datepicker", "date picker", "date-picker"):
        ev.add(0.8, 'Name contains "date picker"')
    elif s.has_token("date") and s.name_has("input", "field"):
        ev.add(0.5, "Date input name")
    else:
        ev.contradict(s)
    if s.variant.variant in ("default", "outline", "ghost"):
        ev.add(0.1, "Date picker variant")

    has_input = s.has_child_named("input", "field", "trigger")
    has_calendar = s.has_child_named("calendar", "popover", "dropdown")
    if has_input and has_calendar:
        ev.add(0.4, "Input with calendar popup")
    elif has_input:
        ev.add(0.2, "Input child")
    if any(("icon" in n and "calendar" in n) or "calendaricon" in n for n in s.child_names):
        ev.add(0.15, "Calendar icon")
    return ev.result()


@leaf_scorer(ComponentType.CALENDAR)
def score_calendar(s: NodeSignals, ctx: ClassificationContext):
    ev = Evidence(ComponentType.CALENDAR)
    v = s.variant
    if s.name_has("calendar", "datepicker", "date picker"):
        ev.add(0.7, 'Name contains "calendar"')
    else:
        ev.contradict(s)
    if v.has("weekday names"):
        ev.add(0.15, "Has Weekday Names variant")
    if v.has("outside month days"):
        ev.add(0.15, "Has Outside Month Days variant")

    if s.has_child_named("grid", "days", "week"):
        ev.add(0.2, "Day grid child")
    if any(
        ("header" in n or "month" in n) and ("year" in n or "nav" in n)
        for n in s.child_names
    ):
        ev.add(0.15, "Month/year header")
    if s.has_child_named("prev", "next", "arrow", "chevron"):
        ev.add(0.1, "Month navigation")
    days = [n for n in s.child_names if "day" in n or _DIGIT_RE.search(n)]
    if len(days) >= 7:
        ev.add(0.2, f"{len(days)} day cells")
    ratio = s.aspect_ratio or 0.0
    if 0.8 <= ratio <= 1.5 and s.width > 200:
        ev.add(0.05, "Calendar proportions")
    return ev.result()


