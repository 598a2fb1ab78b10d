"""Core data model shared by every stage of the engine.

- DesignNode: immutable, already-normalised design tree node (the input)
- Classification: one scorer's verdict for one node
- SlotMapping / SemanticMappingResult: output of slot decomposition
- ComponentComposition / LayoutPattern / BlockCharacteristics /
  BlockClassification: output of subtree (block) analysis
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

if TYPE_CHECKING:
    from .slots.schema import SlotSchema


# =====================================================================
# Design tree
# =====================================================================

class NodeKind(str, Enum):
    FRAME = "FRAME"
    GROUP = "GROUP"
    INSTANCE = "INSTANCE"
    COMPONENT = "COMPONENT"
    COMPONENT_SET = "COMPONENT_SET"
    TEXT = "TEXT"
    VECTOR = "VECTOR"
    RECTANGLE = "RECTANGLE"
    ELLIPSE = "ELLIPSE"
    LINE = "LINE"
    BOOLEAN_OPERATION = "BOOLEAN_OPERATION"
    SECTION = "SECTION"
    OTHER = "OTHER"

    @classmethod
    def from_raw(cls, value: Optional[str]) -> "NodeKind":
        """Map an export's node type string onto the enum (unknown -> OTHER)."""
        if not value:
            return cls.OTHER
        upper = str(value).upper()
        if upper == "SYMBOL":  # legacy name for COMPONENT
            return cls.COMPONENT
        try:
            return cls(upper)
        except ValueError:
            return cls.OTHER


# Kinds that can hold children and act as layout containers
CONTAINER_KINDS = frozenset({
    NodeKind.FRAME, NodeKind.GROUP, NodeKind.INSTANCE, NodeKind.COMPONENT,
    NodeKind.COMPONENT_SET, NodeKind.SECTION,
})

# Kinds produced by component instancing (interactive building blocks)
COMPONENT_KINDS = frozenset({
    NodeKind.INSTANCE, NodeKind.COMPONENT, NodeKind.COMPONENT_SET,
})


@dataclass(frozen=True)
class Geometry:
    """Size plus optional offset relative to the parent."""
    width: float = 0.0
    height: float = 0.0
    x: Optional[float] = None
    y: Optional[float] = None


@dataclass(frozen=True)
class Paint:
    """A fill or stroke paint. ``color`` is normalised RGBA in 0-1."""
    kind: str = "SOLID"
    visible: bool = True
    color: Optional[Tuple[float, float, float, float]] = None


@dataclass(frozen=True)
class Effect:
    kind: str = "DROP_SHADOW"
    visible: bool = True


@dataclass(frozen=True)
class LayoutFacets:
    """Auto-layout facets. ``mode`` is HORIZONTAL, VERTICAL or None."""
    mode: Optional[str] = None
    primary_align: Optional[str] = None
    counter_align: Optional[str] = None
    padding: Tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0)
    item_spacing: float = 0.0


@dataclass(frozen=True, eq=False)
class DesignNode:
    """One node of a normalised design tree.

    Nodes compare and hash by identity: two layers with identical
    attributes are still different layers.
    """
    name: str
    kind: NodeKind = NodeKind.FRAME
    id: str = ""
    geometry: Geometry = field(default_factory=Geometry)
    fills: Tuple[Paint, ...] = ()
    strokes: Tuple[Paint, ...] = ()
    effects: Tuple[Effect, ...] = ()
    corner_radius: float = 0.0
    text: Optional[str] = None
    font_size: Optional[float] = None
    font_family: Optional[str] = None
    layout: LayoutFacets = field(default_factory=LayoutFacets)
    children: Tuple["DesignNode", ...] = ()

    @property
    def width(self) -> float:
        return self.geometry.width

    @property
    def height(self) -> float:
        return self.geometry.height

    @property
    def is_text(self) -> bool:
        return self.kind == NodeKind.TEXT

    def __repr__(self) -> str:
        return (
            f"DesignNode(name={self.name!r}, kind={self.kind.value}, "
            f"size={self.width:g}x{self.height:g}, children={len(self.children)})"
        )


# =====================================================================
# Leaf classification
# =====================================================================

class ComponentType(str, Enum):
    BUTTON = "Button"
    INPUT = "Input"
    FIELD = "Field"
    TEXTAREA = "Textarea"
    CHECKBOX = "Checkbox"
    RADIO = "Radio"
    RADIO_GROUP = "RadioGroup"
    SWITCH = "Switch"
    TOGGLE = "Toggle"
    TOGGLE_GROUP = "ToggleGroup"
    SELECT = "Select"
    SLIDER = "Slider"
    FORM = "Form"
    INPUT_OTP = "InputOTP"
    INPUT_GROUP = "InputGroup"
    COMBOBOX = "Combobox"
    COMMAND = "Command"
    DATE_PICKER = "DatePicker"
    CALENDAR = "Calendar"
    DIALOG = "Dialog"
    ALERT_DIALOG = "AlertDialog"
    ALERT = "Alert"
    DRAWER = "Drawer"
    SHEET = "Sheet"
    POPOVER = "Popover"
    TOOLTIP = "Tooltip"
    HOVER_CARD = "HoverCard"
    SONNER = "Sonner"
    CARD = "Card"
    BADGE = "Badge"
    AVATAR = "Avatar"
    ICON = "Icon"
    TEXT = "Text"
    IMAGE = "Image"
    TABLE = "Table"
    CHART = "Chart"
    CAROUSEL = "Carousel"
    SKELETON = "Skeleton"
    PROGRESS = "Progress"
    SPINNER = "Spinner"
    EMPTY = "Empty"
    TABS = "Tabs"
    PAGINATION = "Pagination"
    BREADCRUMB = "Breadcrumb"
    NAVIGATION_MENU = "NavigationMenu"
    SIDEBAR = "Sidebar"
    DROPDOWN_MENU = "DropdownMenu"
    MENUBAR = "Menubar"
    ACCORDION = "Accordion"
    CONTAINER = "Container"


@dataclass(frozen=True)
class Classification:
    """Result of one scorer for one node. ``confidence`` is always in [0, 1]."""
    type: ComponentType
    confidence: float
    reasons: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "confidence": round(self.confidence, 4),
            "reasons": list(self.reasons),
        }


# =====================================================================
# Slot decomposition
# =====================================================================

@dataclass(frozen=True)
class SlotMapping:
    """Nodes assigned to one slot of a composite component."""
    slot_name: str
    matched_nodes: Tuple[DesignNode, ...]
    confidence: float
    parent_slot: Optional[str] = None
    flattened: bool = False
    reasons: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slot": self.slot_name,
            "nodes": [n.id or n.name for n in self.matched_nodes],
            "confidence": round(self.confidence, 4),
            "parent_slot": self.parent_slot,
            "flattened": self.flattened,
            "reasons": list(self.reasons),
        }


@dataclass
class SemanticMappingResult:
    """Decomposition of one composite node into its schema's slots."""
    component_type: ComponentType
    schema: Optional["SlotSchema"]
    mappings: List[SlotMapping] = field(default_factory=list)
    overall_confidence: float = 0.0
    warnings: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    unmatched: List[DesignNode] = field(default_factory=list)

    def mapping(self, slot_name: str) -> Optional[SlotMapping]:
        """First mapping for ``slot_name`` (None when the slot is unmatched)."""
        for m in self.mappings:
            if m.slot_name == slot_name:
                return m
        return None

    def slot_names(self) -> List[str]:
        return [m.slot_name for m in self.mappings]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "component_type": self.component_type.value,
            "mappings": [m.to_dict() for m in self.mappings],
            "overall_confidence": round(self.overall_confidence, 4),
            "warnings": list(self.warnings),
            "suggestions": list(self.suggestions),
            "unmatched": [n.id or n.name for n in self.unmatched],
        }


# =====================================================================
# Block classification
# =====================================================================

class BlockCategory(str, Enum):
    HERO = "Hero"
    FEATURES = "Features"
    PRICING = "Pricing"
    TESTIMONIALS = "Testimonials"
    CTA = "CTA"
    FOOTER = "Footer"
    HEADER = "Header"
    AUTHENTICATION = "Authentication"
    DASHBOARD = "Dashboard"
    SIDEBAR = "Sidebar"
    STATS = "Stats"
    CHARTS = "Charts"
    ECOMMERCE = "E-commerce"
    PRODUCT = "Product"
    CART = "Cart"
    CHECKOUT = "Checkout"
    BLOG = "Blog"
    ARTICLE = "Article"
    CONTENT_GRID = "ContentGrid"
    FORM = "Form"
    CONTACT = "Contact"
    NAVIGATION = "Navigation"
    BREADCRUMB = "Breadcrumb"
    LAYOUT = "Layout"
    SECTION = "Section"
    UNKNOWN = "Unknown"


class BlockSubType(str, Enum):
    HERO_SIMPLE = "Hero-Simple"
    HERO_WITH_IMAGE = "Hero-WithImage"
    HERO_SPLIT = "Hero-Split"
    HERO_CENTERED = "Hero-Centered"
    FEATURES_GRID = "Features-Grid"
    FEATURES_LIST = "Features-List"
    FEATURES_CARDS = "Features-Cards"
    FEATURES_WITH_ICONS = "Features-WithIcons"
    PRICING_SIMPLE = "Pricing-Simple"
    PRICING_COMPARISON = "Pricing-Comparison"
    PRICING_CARDS = "Pricing-Cards"
    PRICING_TABLE = "Pricing-Table"
    LOGIN = "Login"
    REGISTER = "Register"
    FORGOT_PASSWORD = "ForgotPassword"
    RESET_PASSWORD = "ResetPassword"
    TWO_FACTOR = "TwoFactor"
    DASHBOARD_STATS = "Dashboard-Stats"
    DASHBOARD_HEADER = "Dashboard-Header"
    DASHBOARD_SIDEBAR = "Dashboard-Sidebar"
    DASHBOARD_WIDGET = "Dashboard-Widget"
    PRODUCT_CARD = "Product-Card"
    PRODUCT_LIST = "Product-List"
    PRODUCT_DETAIL = "Product-Detail"
    CART_SUMMARY = "Cart-Summary"
    CHECKOUT_FORM = "Checkout-Form"
    BLOG_CARD = "Blog-Card"
    BLOG_LIST = "Blog-List"
    BLOG_POST = "Blog-Post"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class ComponentComposition:
    """How often a leaf type occurs inside a subtree and how deep."""
    component_type: ComponentType
    count: int
    location: str  # root | nested | deep
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "component_type": self.component_type.value,
            "count": self.count,
            "location": self.location,
            "confidence": round(self.confidence, 4),
        }


@dataclass(frozen=True)
class LayoutPattern:
    type: str  # vertical | horizontal | grid | unknown
    columns: Optional[int] = None
    rows: Optional[int] = None
    has_images: bool = False
    has_text: bool = False
    has_buttons: bool = False
    has_form: bool = False
    complexity: str = "simple"  # simple | moderate | complex; read by block scorers

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "columns": self.columns,
            "rows": self.rows,
            "has_images": self.has_images,
            "has_text": self.has_text,
            "has_buttons": self.has_buttons,
            "has_form": self.has_form,
            "complexity": self.complexity,
        }


@dataclass(frozen=True)
class BlockCharacteristics:
    is_full_width: bool
    is_large_section: bool
    has_multiple_columns: bool
    has_hierarchy: bool
    dominant_content: str  # text | images | forms | mixed
    estimated_complexity: int  # 1-10

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_full_width": self.is_full_width,
            "is_large_section": self.is_large_section,
            "has_multiple_columns": self.has_multiple_columns,
            "has_hierarchy": self.has_hierarchy,
            "dominant_content": self.dominant_content,
            "estimated_complexity": self.estimated_complexity,
        }


@dataclass(frozen=True)
class BlockClassification:
    category: BlockCategory
    sub_type: BlockSubType
    block_type: str
    confidence: float
    composed_of: Tuple[ComponentComposition, ...]
    layout_pattern: LayoutPattern
    characteristics: BlockCharacteristics
    reasons: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "sub_type": self.sub_type.value,
            "block_type": self.block_type,
            "confidence": round(self.confidence, 4),
            "composed_of": [c.to_dict() for c in self.composed_of],
            "layout_pattern": self.layout_pattern.to_dict(),
            "characteristics": self.characteristics.to_dict(),
            "reasons": list(self.reasons),
        }
