"""Signal extractors: normalised facts about a single DesignNode.

Every scorer in the leaf and block pipelines reads these facts instead of
raw node attributes:
- name normalisation and tokens
- variant metadata parsed out of layer names ("Variant=Primary, State=Hover")
- style presence (fill, stroke, drop shadow) and corner-radius class
- aspect ratio (None when the height is zero)
- child names and the child-type histogram

All functions are pure and tolerate missing attributes.
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .models import (
    COMPONENT_KINDS,
    CONTAINER_KINDS,
    ComponentType,
    DesignNode,
    NodeKind,
)

# ---------------------------------------------------------------------------
# Names
# ---------------------------------------------------------------------------

_WHITESPACE_RE = re.compile(r"\s+")
_CAMEL_RE = re.compile(r"([a-z0-9])([A-Z])")
_TOKEN_RE = re.compile(r"[a-z0-9]+")

# key=value pairs inside a layer name; keys may contain spaces
_VARIANT_PAIR_RE = re.compile(r"([a-z][a-z0-9 _\-]*?)\s*=\s*([a-z0-9_.\-]+)")
_VARIANT_PAIR_ANY_CASE_RE = re.compile(_VARIANT_PAIR_RE.pattern, re.IGNORECASE)


def normalize_name(name: Optional[str]) -> str:
    """Lower-case and collapse whitespace."""
    if not name:
        return ""
    return _WHITESPACE_RE.sub(" ", str(name)).strip().lower()


def strip_variant_pairs(name: Optional[str]) -> str:
    """Layer name without its ``key=value`` pairs ("Button/State=Hover" -> "Button/").

    Name rules read this label so that variant values such as
    ``State=Loading`` or ``State=Empty`` never look like name keywords.
    """
    if not name:
        return ""
    return _VARIANT_PAIR_ANY_CASE_RE.sub(" ", str(name))


def name_tokens(name: Optional[str]) -> Tuple[str, ...]:
    """Alphanumeric tokens, splitting camelCase ("CardHeader" -> card, header)."""
    if not name:
        return ()
    return tuple(_TOKEN_RE.findall(_CAMEL_RE.sub(r"\1 \2", str(name)).lower()))


def _compact_key(key: str) -> str:
    return re.sub(r"[\s_\-]+", "", key)


@dataclass(frozen=True)
class VariantProps:
    """Structured ``key=value`` metadata recovered from a layer name."""
    variant: Optional[str] = None
    state: Optional[str] = None
    size: Optional[str] = None
    properties: Tuple[Tuple[str, str], ...] = ()

    @property
    def declared(self) -> bool:
        return bool(self.properties)

    def get(self, key: str) -> Optional[str]:
        """Value for ``key`` ("data invalid" also matches "Data-Invalid=").

        A key also matches when it ends a longer key, so "Primary Button
        Size=Icon" yields size="icon".
        """
        wanted = _compact_key(key.lower())
        for k, v in self.properties:
            if _compact_key(k) == wanted or k.endswith(" " + key.lower()):
                return v
        return None

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def value_in(self, key: str, values: Iterable[str]) -> bool:
        value = self.get(key)
        return value is not None and value in set(values)


def parse_variant_props(name: Optional[str]) -> VariantProps:
    """Parse every ``key=value`` pair out of a layer name.

    >>> parse_variant_props("Button/Variant=Primary, State=Hover").state
    'hover'
    """
    lowered = normalize_name(name)
    if "=" not in lowered:
        return VariantProps()
    pairs: List[Tuple[str, str]] = []
    for match in _VARIANT_PAIR_RE.finditer(lowered):
        key = _WHITESPACE_RE.sub(" ", match.group(1).replace("_", " ")).strip()
        pairs.append((key, match.group(2)))
    props = VariantProps(properties=tuple(pairs))
    return VariantProps(
        variant=props.get("variant"),
        state=props.get("state"),
        size=props.get("size"),
        properties=props.properties,
    )


# ---------------------------------------------------------------------------
# Style / geometry facts
# ---------------------------------------------------------------------------

def has_fill(node: DesignNode) -> bool:
    return any(p.visible for p in node.fills)


def has_image_fill(node: DesignNode) -> bool:
    return any(p.visible and p.kind == "IMAGE" for p in node.fills)


def has_stroke(node: DesignNode) -> bool:
    return any(p.visible for p in node.strokes)


def has_shadow(node: DesignNode) -> bool:
    return any(e.visible and e.kind == "DROP_SHADOW" for e in node.effects)


def solid_fill_color(node: DesignNode) -> Optional[Tuple[float, float, float, float]]:
    """Colour of the first visible solid fill, if any."""
    for p in node.fills:
        if p.visible and p.kind == "SOLID" and p.color is not None:
            return p.color
    return None


def aspect_ratio(node: DesignNode) -> Optional[float]:
    """width / height, or None when the height is zero."""
    if not node.height:
        return None
    return node.width / node.height


def corner_radius_class(node: DesignNode) -> str:
    """none | rounded | pill | circle."""
    r = node.corner_radius or 0.0
    if r <= 0:
        return "none"
    w, h = node.width, node.height
    if w > 0 and h > 0 and abs(w - h) < 4 and r >= min(w, h) / 2:
        return "circle"
    if h > 0 and r >= h / 2:
        return "pill"
    return "rounded"


# ---------------------------------------------------------------------------
# Primitive type inference (child-type histogram)
# ---------------------------------------------------------------------------

# Ordered keyword table; first hit wins
_PRIMITIVE_KEYWORDS: Tuple[Tuple[ComponentType, Tuple[str, ...]], ...] = (
    (ComponentType.BUTTON, ("button", "btn")),
    (ComponentType.INPUT, ("input", "text-field", "textfield", "text field")),
    (ComponentType.CARD, ("card",)),
    (ComponentType.BADGE, ("badge", "chip")),
    (ComponentType.AVATAR, ("avatar", "profile")),
    (ComponentType.ICON, ("icon",)),
    (ComponentType.IMAGE, ("image", "img", "picture", "photo")),
    (ComponentType.FORM, ("form",)),
    (ComponentType.TABLE, ("table",)),
)

_VECTOR_KINDS = frozenset({
    NodeKind.VECTOR, NodeKind.BOOLEAN_OPERATION, NodeKind.ELLIPSE, NodeKind.LINE,
})


def infer_primitive_type(node: DesignNode) -> ComponentType:
    """Cheap name/kind based guess used for histograms, not a classification."""
    if node.kind == NodeKind.TEXT:
        return ComponentType.TEXT
    name = normalize_name(node.name)
    for component_type, keywords in _PRIMITIVE_KEYWORDS:
        if any(k in name for k in keywords):
            return component_type
    if has_image_fill(node):
        return ComponentType.IMAGE
    if node.kind in _VECTOR_KINDS:
        return ComponentType.ICON
    return ComponentType.CONTAINER


def child_type_histogram(node: DesignNode) -> Dict[ComponentType, int]:
    return dict(Counter(infer_primitive_type(c) for c in node.children))


# ---------------------------------------------------------------------------
# Names that identify a specific component
# ---------------------------------------------------------------------------

# token -> component it names; used to detect names contradicting a scorer
COMPONENT_NAME_TOKENS: Mapping[str, ComponentType] = {
    "button": ComponentType.BUTTON,
    "btn": ComponentType.BUTTON,
    "input": ComponentType.INPUT,
    "textfield": ComponentType.INPUT,
    "textarea": ComponentType.TEXTAREA,
    "checkbox": ComponentType.CHECKBOX,
    "radio": ComponentType.RADIO,
    "switch": ComponentType.SWITCH,
    "toggle": ComponentType.TOGGLE,
    "select": ComponentType.SELECT,
    "dropdown": ComponentType.DROPDOWN_MENU,
    "card": ComponentType.CARD,
    "dialog": ComponentType.DIALOG,
    "modal": ComponentType.DIALOG,
    "badge": ComponentType.BADGE,
    "chip": ComponentType.BADGE,
    "avatar": ComponentType.AVATAR,
    "icon": ComponentType.ICON,
    "image": ComponentType.IMAGE,
    "img": ComponentType.IMAGE,
    "form": ComponentType.FORM,
    "table": ComponentType.TABLE,
    "tab": ComponentType.TABS,
    "tabs": ComponentType.TABS,
    "tooltip": ComponentType.TOOLTIP,
    "popover": ComponentType.POPOVER,
    "sheet": ComponentType.SHEET,
    "drawer": ComponentType.DRAWER,
    "sidebar": ComponentType.SIDEBAR,
    "slider": ComponentType.SLIDER,
    "calendar": ComponentType.CALENDAR,
    "alert": ComponentType.ALERT,
    "breadcrumb": ComponentType.BREADCRUMB,
    "pagination": ComponentType.PAGINATION,
    "progress": ComponentType.PROGRESS,
    "skeleton": ComponentType.SKELETON,
    "spinner": ComponentType.SPINNER,
    "toast": ComponentType.SONNER,
    "chart": ComponentType.CHART,
    "carousel": ComponentType.CAROUSEL,
    "field": ComponentType.FIELD,
    "accordion": ComponentType.ACCORDION,
}


def named_component(tokens: Iterable[str]) -> Optional[Tuple[str, ComponentType]]:
    """First token (singular or plural) that names a component."""
    for token in tokens:
        hit = COMPONENT_NAME_TOKENS.get(token)
        if hit is None and token.endswith("s"):
            hit = COMPONENT_NAME_TOKENS.get(token[:-1])
        if hit is not None:
            return token, hit
    return None


# ---------------------------------------------------------------------------
# Bundled facts
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class NodeSignals:
    """All extracted facts about one node. Build with ``extract_signals``.

    ``name`` is the full normalised layer name; ``label`` and ``tokens``
    exclude variant pairs and are what name rules match against.
    """
    node: DesignNode
    name: str
    label: str
    tokens: Tuple[str, ...]
    variant: VariantProps
    width: float
    height: float
    aspect_ratio: Optional[float]
    has_fill: bool
    has_image_fill: bool
    has_stroke: bool
    has_shadow: bool
    corner_radius: float
    radius_class: str
    layout_mode: Optional[str]
    child_names: Tuple[str, ...]
    child_tokens: Tuple[Tuple[str, ...], ...] = ()
    child_histogram: Mapping[ComponentType, int] = field(default_factory=dict)

    # --- node ---

    @property
    def kind(self) -> NodeKind:
        return self.node.kind

    @property
    def is_text(self) -> bool:
        return self.node.kind == NodeKind.TEXT

    @property
    def is_container(self) -> bool:
        return self.node.kind in CONTAINER_KINDS

    @property
    def is_component(self) -> bool:
        return self.node.kind in COMPONENT_KINDS

    @property
    def children(self) -> Tuple[DesignNode, ...]:
        return self.node.children

    @property
    def child_count(self) -> int:
        return len(self.node.children)

    @property
    def is_square(self) -> bool:
        return self.width > 0 and abs(self.width - self.height) < 4

    @property
    def is_circular(self) -> bool:
        return self.radius_class == "circle"

    # --- name queries ---

    def name_has(self, *words: str) -> bool:
        """Substring match against the label (variant pairs excluded)."""
        return any(w in self.label for w in words)

    def name_matches(self, pattern: str) -> bool:
        return re.search(pattern, self.label) is not None

    def has_token(self, *words: str) -> bool:
        """Whole-token match, plural tolerant ("tabs" matches "tab")."""
        return _tokens_match(self.tokens, words)

    # --- child queries ---

    @property
    def has_text_child(self) -> bool:
        return any(c.kind == NodeKind.TEXT for c in self.node.children)

    def children_named(self, *words: str) -> List[DesignNode]:
        return [
            c for c, n in zip(self.node.children, self.child_names)
            if any(w in n for w in words)
        ]

    def child_named(self, *words: str) -> Optional[DesignNode]:
        found = self.children_named(*words)
        return found[0] if found else None

    def has_child_named(self, *words: str) -> bool:
        return any(any(w in n for w in words) for n in self.child_names)

    def count_children_named(self, *words: str) -> int:
        return len(self.children_named(*words))

    def children_with_token(self, *words: str) -> List[DesignNode]:
        return [
            c for c, toks in zip(self.node.children, self.child_tokens)
            if _tokens_match(toks, words)
        ]

    def has_child_token(self, *words: str) -> bool:
        return any(_tokens_match(toks, words) for toks in self.child_tokens)

    def children_of_kind(self, *kinds: NodeKind) -> List[DesignNode]:
        return [c for c in self.node.children if c.kind in kinds]

    def histogram_count(self, component_type: ComponentType) -> int:
        return self.child_histogram.get(component_type, 0)


def extract_signals(node: DesignNode) -> NodeSignals:
    """Compute every fact for ``node`` (direct children only, no recursion)."""
    label = strip_variant_pairs(node.name)
    return NodeSignals(
        node=node,
        name=normalize_name(node.name),
        label=normalize_name(label),
        tokens=name_tokens(label),
        variant=parse_variant_props(node.name),
        width=node.width or 0.0,
        height=node.height or 0.0,
        aspect_ratio=aspect_ratio(node),
        has_fill=has_fill(node),
        has_image_fill=has_image_fill(node),
        has_stroke=has_stroke(node),
        has_shadow=has_shadow(node),
        corner_radius=node.corner_radius or 0.0,
        radius_class=corner_radius_class(node),
        layout_mode=node.layout.mode,
        child_names=tuple(normalize_name(c.name) for c in node.children),
        child_tokens=tuple(name_tokens(c.name) for c in node.children),
        child_histogram=child_type_histogram(node),
    )


def _tokens_match(tokens: Iterable[str], words: Iterable[str]) -> bool:
    wanted = set(words)
    return any(t in wanted or (t.endswith("s") and t[:-1] in wanted) for t in tokens)


def has_text_descendant(node: DesignNode, max_depth: int) -> bool:
    """True when a TEXT node exists within ``max_depth`` levels below ``node``."""
    stack = [(c, 1) for c in node.children]
    while stack:
        current, depth = stack.pop()
        if current.kind == NodeKind.TEXT:
            return True
        if depth < max_depth:
            stack.extend((c, depth + 1) for c in current.children)
    return False


def iter_descendants(node: DesignNode, max_depth: int):
    """Yield ``(descendant, depth)`` pairs in pre-order, root excluded.

    Children deeper than ``max_depth`` are not visited.
    """
    stack = [(c, 1) for c in reversed(node.children)]
    while stack:
        current, depth = stack.pop()
        yield current, depth
        if depth < max_depth:
            stack.extend((c, depth + 1) for c in reversed(current.children))
