"""Block scorers: one function per page-section archetype.

Scorers register with ``@block_scorer("name")`` and receive the
precomputed ``BlockFacts`` of a candidate subtree (leaf composition,
layout pattern, characteristics and the words found in the subtree).
They return a ``BlockVerdict``; the pipeline accepts the first verdict
whose confidence clears the block threshold, in the order of the
``block`` table in ``schemas/pipelines.yaml``.

As with leaf scorers, a section name that explicitly names a different
archetype ("Pricing", "Footer") subtracts a fixed penalty from scorers
whose own name cue did not fire.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Tuple, TypeVar

from ..models import (
    BlockCategory,
    BlockCharacteristics,
    BlockSubType,
    ComponentType,
    DesignNode,
    LayoutPattern,
    NodeKind,
)
from ..scoring import clamp01
from ..signals import NodeSignals, iter_descendants, normalize_name
from .composition import SubtreeAnalysis

logger = logging.getLogger(__name__)

# Subtracted when the section name names another archetype
CONTRADICTING_NAME_PENALTY = 0.6

# Size buckets (px) used to spot repeated children
_SIMILARITY_BUCKET = 50

# Name fragments that identify an archetype, checked in this order
BLOCK_NAME_WORDS: Tuple[Tuple[str, BlockCategory], ...] = (
    ("hero", BlockCategory.HERO),
    ("pricing", BlockCategory.PRICING),
    ("feature", BlockCategory.FEATURES),
    ("testimonial", BlockCategory.TESTIMONIALS),
    ("footer", BlockCategory.FOOTER),
    ("navbar", BlockCategory.HEADER),
    ("header", BlockCategory.HEADER),
    ("login", BlockCategory.AUTHENTICATION),
    ("sign in", BlockCategory.AUTHENTICATION),
    ("sign up", BlockCategory.AUTHENTICATION),
    ("register", BlockCategory.AUTHENTICATION),
    ("dashboard", BlockCategory.DASHBOARD),
    ("sidebar", BlockCategory.SIDEBAR),
    ("stats", BlockCategory.STATS),
    ("product", BlockCategory.ECOMMERCE),
    ("checkout", BlockCategory.ECOMMERCE),
    ("blog", BlockCategory.BLOG),
    ("breadcrumb", BlockCategory.BREADCRUMB),
    ("cta", BlockCategory.CTA),
)

_CREDENTIAL_WORDS = ("password", "email", "e-mail", "username", "sign in", "log in", "login")
_PRICE_WORDS = ("$", "€", "£", "/mo", "per month", "/month", "/year", "per year")


@dataclass(frozen=True)
class BlockFacts:
    """Everything a block scorer may read about one candidate subtree."""
    node: DesignNode
    signals: NodeSignals
    analysis: SubtreeAnalysis
    characteristics: BlockCharacteristics
    # Normalised names and text of every descendant, " | " separated
    subtree_words: str = ""

    @property
    def layout(self) -> LayoutPattern:
        return self.analysis.layout

    def has(self, *component_types: ComponentType) -> bool:
        return self.analysis.has(*component_types)

    def count(self, component_type: ComponentType) -> int:
        return self.analysis.count(component_type)

    def mentions(self, *words: str) -> bool:
        """True when any word occurs in a descendant name or text."""
        return any(w in self.subtree_words for w in words)


def collect_subtree_words(node: DesignNode, max_depth: int) -> str:
    parts = []
    for descendant, _ in iter_descendants(node, max_depth):
        parts.append(normalize_name(descendant.name))
        if descendant.kind == NodeKind.TEXT and descendant.text:
            parts.append(normalize_name(descendant.text))
    return " | ".join(parts)


@dataclass
class BlockVerdict:
    """Running, explained score for one block archetype."""
    category: BlockCategory
    sub_type: BlockSubType = BlockSubType.UNKNOWN
    block_type: str = ""
    score: float = 0.0
    reasons: List[str] = field(default_factory=list)

    def add(self, weight: float, reason: str) -> None:
        self.score += weight
        self.reasons.append(reason)

    def penalize(self, weight: float, reason: str) -> None:
        self.score -= weight
        self.reasons.append(f"Penalty -{weight:g}: {reason}")

    def scale(self, factor: float, reason: str) -> None:
        self.score *= factor
        self.reasons.append(f"Scaled x{factor:g}: {reason}")

    def contradict(self, f: BlockFacts) -> bool:
        """Penalise a section name that names a different archetype."""
        for word, category in BLOCK_NAME_WORDS:
            if word in f.signals.label:
                if category == self.category:
                    return False
                self.penalize(
                    CONTRADICTING_NAME_PENALTY,
                    f"Name \"{word}\" identifies a {category.value} block",
                )
                return True
        return False

    @property
    def confidence(self) -> float:
        return clamp01(self.score)


# =====================================================================
# Registry
# =====================================================================

BlockScorer = Callable[[BlockFacts], BlockVerdict]
F = TypeVar("F", bound=BlockScorer)

# Global registry: scorer name -> function
BLOCK_SCORERS: Dict[str, BlockScorer] = {}


def block_scorer(name: str) -> Callable[[F], F]:
    """Decorator registering ``fn`` as the block scorer called ``name``."""

    def decorator(fn: F) -> F:
        existing = BLOCK_SCORERS.get(name)
        if existing is not None and existing is not fn:
            raise ValueError(f"Block scorer {name!r} already registered ({existing.__name__})")
        BLOCK_SCORERS[name] = fn
        logger.debug("Registered block scorer: %s -> %s", name, fn.__name__)
        return fn

    return decorator


def count_similar_children(children: Tuple[DesignNode, ...]) -> int:
    """Size of the largest group of children with similar dimensions."""
    if len(children) < 2:
        return 0
    groups: Dict[Tuple[int, int], int] = {}
    for child in children:
        if child.width <= 0 and child.height <= 0:
            continue
        key = (round(child.width / _SIMILARITY_BUCKET), round(child.height / _SIMILARITY_BUCKET))
        groups[key] = groups.get(key, 0) + 1
    return max(groups.values(), default=0)


# =====================================================================
# Marketing
# =====================================================================

@block_scorer("hero")
def score_hero(f: BlockFacts) -> BlockVerdict:
    v = BlockVerdict(BlockCategory.HERO, BlockSubType.HERO_SIMPLE)
    layout, ch = f.layout, f.characteristics
    if f.signals.name_has("hero"):
        v.add(0.8, 'Name contains "hero"')
    else:
        v.contradict(f)
        if layout.has_form:
            v.penalize(0.4, "Form fields point at a form or sign-in block")

    if ch.is_large_section and ch.is_full_width:
        v.add(0.3, "Large, full-width section")
    if layout.has_text and layout.has_buttons:
        v.add(0.4, "Text with call-to-action buttons")

    if layout.has_images and layout.type == "horizontal":
        v.sub_type = BlockSubType.HERO_SPLIT
        v.reasons.append("Split layout with image")
    elif layout.has_images:
        v.sub_type = BlockSubType.HERO_WITH_IMAGE
        v.reasons.append("Contains a hero image")
    elif layout.type == "vertical":
        v.sub_type = BlockSubType.HERO_CENTERED
        v.reasons.append("Centered vertical layout")
    return v


@block_scorer("pricing")
def score_pricing(f: BlockFacts) -> BlockVerdict:
    v = BlockVerdict(BlockCategory.PRICING, BlockSubType.PRICING_SIMPLE)
    layout = f.layout
    cue = True
    if f.signals.name_has("pricing", "price") or f.signals.has_token("plan"):
        v.add(0.8, "Name indicates pricing content")
    elif f.mentions(*_PRICE_WORDS):
        v.add(0.2, "Prices in the section text")
    else:
        cue = False
        v.contradict(f)

    if f.has(ComponentType.CARD) and f.has(ComponentType.BUTTON):
        v.add(0.4, "Cards with call-to-action buttons")
        v.sub_type = BlockSubType.PRICING_CARDS
    if f.has(ComponentType.TABLE):
        v.sub_type = BlockSubType.PRICING_TABLE
    if f.signals.name_has("comparison", "compare"):
        v.sub_type = BlockSubType.PRICING_COMPARISON
    if f.has(ComponentType.BADGE):
        v.add(0.2, "Badges (plan highlights)")
    if layout.columns and 2 <= layout.columns <= 4:
        v.add(0.3, f"{layout.columns}-column layout")

    if not cue and v.score > 0:
        v.scale(0.5, "No pricing cue in the name or text")
    return v


@block_scorer("features")
def score_features(f: BlockFacts) -> BlockVerdict:
    v = BlockVerdict(BlockCategory.FEATURES, BlockSubType.FEATURES_LIST)
    layout, ch = f.layout, f.characteristics
    if f.signals.name_has("feature"):
        v.add(0.8, 'Name contains "feature"')
    else:
        v.contradict(f)

    if layout.type == "grid" and ch.has_multiple_columns:
        v.add(0.4, "Grid with multiple columns")
        v.sub_type = BlockSubType.FEATURES_GRID
    if f.has(ComponentType.ICON):
        v.add(0.3, "Icons next to feature text")
        v.sub_type = BlockSubType.FEATURES_WITH_ICONS
    if f.has(ComponentType.CARD):
        v.add(0.2, "Features laid out as cards")
        v.sub_type = BlockSubType.FEATURES_CARDS

    similar = count_similar_children(f.node.children)
    if similar >= 3:
        v.add(0.2, f"{similar} similar child elements")
    return v


@block_scorer("testimonials")
def score_testimonials(f: BlockFacts) -> BlockVerdict:
    v = BlockVerdict(BlockCategory.TESTIMONIALS, block_type="Testimonials Section")
    if f.signals.name_has("testimonial", "review", "quote"):
        v.add(0.8, "Name indicates testimonials or reviews")
    else:
        v.contradict(f)
    if f.has(ComponentType.AVATAR):
        v.add(0.4, "Avatars (customer attribution)")
    if f.has(ComponentType.CARD):
        v.add(0.2, "Quotes laid out as cards")
    return v


@block_scorer("cta")
def score_cta(f: BlockFacts) -> BlockVerdict:
    v = BlockVerdict(BlockCategory.CTA, block_type="Call-to-Action Section")
    layout = f.layout
    if f.signals.has_token("cta") or f.signals.name_has("call to action", "call-to-action"):
        v.add(0.7, "Name indicates a call-to-action section")
    else:
        v.contradict(f)
    if layout.type == "vertical" and layout.has_buttons:
        v.add(0.4, "Vertical layout with buttons")
    buttons = f.count(ComponentType.BUTTON)
    if buttons >= 1:
        v.add(0.3, f"Contains {buttons} button(s)")
    if f.characteristics.estimated_complexity <= 4:
        v.add(0.2, "Simple composition")
    if layout.complexity == "complex":
        v.penalize(0.2, "Too many sections for a call to action")
    return v


@block_scorer("footer")
def score_footer(f: BlockFacts) -> BlockVerdict:
    v = BlockVerdict(BlockCategory.FOOTER, block_type="Footer Section")
    ch, layout = f.characteristics, f.layout
    if f.signals.name_has("footer"):
        v.add(0.9, 'Name contains "footer"')
    else:
        v.contradict(f)
    if ch.is_full_width and ch.has_multiple_columns:
        v.add(0.4, "Full-width, multi-column layout")
    if f.has(ComponentType.ICON) and layout.columns and layout.columns >= 3:
        v.add(0.3, "Link columns with icons")
    return v


@block_scorer("header")
def score_header(f: BlockFacts) -> BlockVerdict:
    v = BlockVerdict(BlockCategory.HEADER, block_type="Header/Navigation")
    if f.signals.name_has("header", "navbar") or f.signals.has_token("nav"):
        v.add(0.8, "Name indicates a header or navbar")
    else:
        v.contradict(f)
    if f.layout.type == "horizontal" and f.characteristics.is_full_width and f.node.height < 150:
        v.add(0.4, "Horizontal, full-width and compact")
    if f.has(ComponentType.BUTTON, ComponentType.AVATAR):
        v.add(0.3, "Action buttons or user avatar")
    return v


# =====================================================================
# Forms
# =====================================================================

_AUTH_NAMES: Tuple[Tuple[Tuple[str, ...], BlockSubType, str], ...] = (
    (("login", "log in", "sign in", "signin", "sign-in"), BlockSubType.LOGIN, "login form"),
    (("register", "sign up", "signup", "sign-up", "create account"), BlockSubType.REGISTER, "registration form"),
    (("forgot",), BlockSubType.FORGOT_PASSWORD, "password recovery"),
    (("reset",), BlockSubType.RESET_PASSWORD, "password reset"),
    (("2fa", "two-factor", "two factor", "otp", "verification"), BlockSubType.TWO_FACTOR, "two-factor authentication"),
)


@block_scorer("authentication")
def score_authentication(f: BlockFacts) -> BlockVerdict:
    v = BlockVerdict(BlockCategory.AUTHENTICATION, BlockSubType.LOGIN)
    for words, sub_type, label in _AUTH_NAMES:
        if f.signals.name_has(*words):
            v.add(0.8, f"Name indicates a {label}")
            v.sub_type = sub_type
            break
    else:
        if not f.mentions(*_CREDENTIAL_WORDS):
            v.reasons.append("No sign-in cue in the name or fields")
            return v
        v.reasons.append("Credential fields (email/password)")
        if f.mentions("sign up", "create account", "confirm password", "register"):
            v.sub_type = BlockSubType.REGISTER
        elif f.has(ComponentType.INPUT_OTP):
            v.sub_type = BlockSubType.TWO_FACTOR

    if f.has(ComponentType.INPUT, ComponentType.INPUT_OTP) and f.has(ComponentType.BUTTON):
        v.add(0.4, "Inputs with a submit button")
    if f.has(ComponentType.CARD):
        v.add(0.2, "Card wrapper")
    if f.layout.type == "vertical" and not f.characteristics.is_full_width:
        v.add(0.2, "Narrow vertical layout")
    return v


@block_scorer("form")
def score_form(f: BlockFacts) -> BlockVerdict:
    v = BlockVerdict(BlockCategory.FORM, block_type="Form Block")
    s = f.signals
    if s.name_has("form") and not s.name_has("login", "register", "sign in", "sign up"):
        v.add(0.7, 'Name contains "form"')
    else:
        v.contradict(f)
    if s.name_has("contact"):
        v.category = BlockCategory.CONTACT
        v.block_type = "Contact Form"
        v.add(0.3, "Contact form")

    fields = sum(f.count(t) for t in (
        ComponentType.INPUT, ComponentType.TEXTAREA, ComponentType.SELECT, ComponentType.FIELD,
    ))
    if f.layout.has_form and fields >= 2 and f.layout.has_buttons:
        v.add(0.5, f"{fields} fields with a submit button")
    return v


# =====================================================================
# Application
# =====================================================================

@block_scorer("dashboard")
def score_dashboard(f: BlockFacts) -> BlockVerdict:
    v = BlockVerdict(BlockCategory.DASHBOARD, BlockSubType.DASHBOARD_WIDGET)
    s = f.signals
    if s.name_has("dashboard"):
        v.add(0.7, 'Name contains "dashboard"')
        if s.name_has("stats", "metric"):
            v.sub_type = BlockSubType.DASHBOARD_STATS
        elif s.name_has("header"):
            v.sub_type = BlockSubType.DASHBOARD_HEADER
        elif s.name_has("sidebar"):
            v.sub_type = BlockSubType.DASHBOARD_SIDEBAR
    else:
        v.contradict(f)
    if f.has(ComponentType.CARD) and f.has(ComponentType.CHART, ComponentType.BADGE):
        v.add(0.4, "Cards with charts or metrics")
    if f.layout.type == "grid" and f.characteristics.estimated_complexity >= 5:
        v.add(0.3, "Complex grid layout")
    if f.layout.complexity == "complex":
        v.add(0.2, "Many child sections")
    return v


@block_scorer("sidebar")
def score_sidebar(f: BlockFacts) -> BlockVerdict:
    v = BlockVerdict(
        BlockCategory.SIDEBAR, BlockSubType.DASHBOARD_SIDEBAR, block_type="Sidebar Navigation",
    )
    if f.signals.name_has("sidebar", "side bar", "side-bar"):
        v.add(0.9, 'Name contains "sidebar"')
    else:
        v.contradict(f)
    if f.layout.type == "vertical":
        if f.node.width < 400 and f.node.height > 500:
            v.add(0.4, "Narrow, tall vertical layout")
        if f.has(ComponentType.ICON):
            v.add(0.3, "Vertical list with icons")
    return v


@block_scorer("stats")
def score_stats(f: BlockFacts) -> BlockVerdict:
    v = BlockVerdict(
        BlockCategory.STATS, BlockSubType.DASHBOARD_STATS, block_type="Statistics/Metrics Section",
    )
    layout = f.layout
    if f.signals.has_token("stat", "stats", "kpi", "metric", "metrics"):
        v.add(0.8, "Name indicates statistics or metrics")
    else:
        v.contradict(f)
    if layout.type == "horizontal" or (layout.type == "grid" and layout.columns and layout.columns <= 4):
        v.add(0.3, "Horizontal or grid layout")
    if f.has(ComponentType.CARD) and 2 <= len(f.node.children) <= 6:
        v.add(0.4, "Several metric cards")
    return v


# =====================================================================
# Commerce and content
# =====================================================================

@block_scorer("ecommerce")
def score_ecommerce(f: BlockFacts) -> BlockVerdict:
    v = BlockVerdict(BlockCategory.ECOMMERCE, BlockSubType.PRODUCT_CARD)
    s = f.signals
    if s.name_has("product"):
        v.add(0.7, 'Name contains "product"')
        if s.name_has("list", "grid"):
            v.sub_type = BlockSubType.PRODUCT_LIST
        elif s.name_has("detail"):
            v.sub_type = BlockSubType.PRODUCT_DETAIL
    elif s.name_has("cart"):
        v.add(0.8, 'Name contains "cart"')
        v.sub_type = BlockSubType.CART_SUMMARY
    elif s.name_has("checkout"):
        v.add(0.8, 'Name contains "checkout"')
        v.sub_type = BlockSubType.CHECKOUT_FORM
    else:
        v.contradict(f)
    if f.layout.has_images and f.has(ComponentType.BADGE) and f.layout.has_buttons:
        v.add(0.4, "Image, badge and button")
    return v


@block_scorer("blog")
def score_blog(f: BlockFacts) -> BlockVerdict:
    v = BlockVerdict(BlockCategory.BLOG, BlockSubType.BLOG_CARD)
    s = f.signals
    if s.name_has("blog", "article") or s.has_token("post"):
        v.add(0.7, "Name indicates blog or article content")
        if s.name_has("list"):
            v.sub_type = BlockSubType.BLOG_LIST
        elif s.has_token("post") and not s.name_has("card"):
            v.sub_type = BlockSubType.BLOG_POST
    else:
        v.contradict(f)
    if f.has(ComponentType.CARD) and f.layout.has_images:
        v.add(0.4, "Cards with images")
    if f.has(ComponentType.BADGE):
        v.add(0.2, "Category badges")
    return v


@block_scorer("navigation")
def score_navigation(f: BlockFacts) -> BlockVerdict:
    s = f.signals
    if s.name_has("breadcrumb"):
        v = BlockVerdict(BlockCategory.BREADCRUMB, block_type="Breadcrumb Navigation")
        v.add(0.9, "Breadcrumb navigation")
        return v
    v = BlockVerdict(BlockCategory.NAVIGATION, block_type="Navigation Block")
    if s.name_has("navigation", "menu") or s.has_token("nav"):
        v.add(0.7, "Name indicates navigation")
    else:
        v.contradict(f)
    if f.layout.type == "horizontal":
        v.add(0.3, "Horizontal layout")
    return v


@block_scorer("content")
def score_content(f: BlockFacts) -> BlockVerdict:
    v = BlockVerdict(BlockCategory.CONTENT_GRID, block_type="Content Section")
    ch = f.characteristics
    if f.signals.name_has("content", "section"):
        v.add(0.5, "Name indicates a content section")
    if ch.is_full_width and f.layout.has_text:
        v.add(0.3, "Full-width text content")
    if 3 <= ch.estimated_complexity <= 6:
        v.add(0.2, "Moderate complexity")
    return v


def build_facts(
    node: DesignNode,
    signals: NodeSignals,
    analysis: SubtreeAnalysis,
    characteristics: BlockCharacteristics,
    max_depth: int,
) -> BlockFacts:
    return BlockFacts(
        node=node,
        signals=signals,
        analysis=analysis,
        characteristics=characteristics,
        subtree_words=collect_subtree_words(node, max_depth),
    )

