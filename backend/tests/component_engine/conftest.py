"""Shared design-tree fixtures for component engine tests.

Trees are written in Figma REST export shape (the same dicts the loader
receives in production) and normalised with ``node_from_figma``.
"""

from __future__ import annotations

import pytest

from component_engine.context import ClassificationContext
from component_engine.integrations.figma_loader import node_from_figma

WHITE = {"r": 1.0, "g": 1.0, "b": 1.0, "a": 1.0}
GRAY = {"r": 0.8, "g": 0.8, "b": 0.8, "a": 1.0}
BLUE = {"r": 0.2, "g": 0.4, "b": 0.9, "a": 1.0}


def _box(x, y, w, h):
    return {"x": x, "y": y, "width": w, "height": h}


# ---------------------------------------------------------------------------
# Card: Header{Title, Description}, Content, Footer
# ---------------------------------------------------------------------------

STANDARD_CARD = {
    "id": "1:1", "name": "Card", "type": "FRAME",
    "absoluteBoundingBox": _box(0, 0, 360, 300),
    "fills": [{"type": "SOLID", "color": WHITE}],
    "children": [
        {
            "id": "1:2", "name": "Card Header", "type": "FRAME",
            "absoluteBoundingBox": _box(0, 0, 360, 80),
            "children": [
                {"id": "1:3", "name": "Card Title", "type": "TEXT", "characters": "Create project",
                 "absoluteBoundingBox": _box(24, 24, 200, 28), "style": {"fontSize": 20}},
                {"id": "1:4", "name": "Card Description", "type": "TEXT",
                 "characters": "Deploy your new project in one click.",
                 "absoluteBoundingBox": _box(24, 56, 300, 18), "style": {"fontSize": 14}},
            ],
        },
        {"id": "1:5", "name": "Card Content", "type": "FRAME", "absoluteBoundingBox": _box(0, 80, 360, 150)},
        {"id": "1:6", "name": "Card Footer", "type": "FRAME", "absoluteBoundingBox": _box(0, 230, 360, 70)},
    ],
}

# Header flattened away: title and description sit directly under the card
FLAT_CARD = {
    "id": "2:1", "name": "Card", "type": "FRAME",
    "absoluteBoundingBox": _box(0, 0, 360, 300),
    "children": [
        {"id": "2:2", "name": "Card Title", "type": "TEXT", "characters": "Notifications"},
        {"id": "2:3", "name": "Card Description", "type": "TEXT", "characters": "You have 3 unread messages."},
        {"id": "2:4", "name": "Main Content", "type": "FRAME"},
        {"id": "2:5", "name": "Button Group", "type": "FRAME"},
    ],
}

# Generic section names: only position and kind identify the slots
POSITIONAL_CARD = {
    "id": "3:1", "name": "Card", "type": "FRAME",
    "absoluteBoundingBox": _box(0, 0, 360, 300),
    "children": [
        {
            "id": "3:2", "name": "Top", "type": "FRAME",
            "children": [
                {"id": "3:3", "name": "Heading", "type": "TEXT", "characters": "Team members"},
                {"id": "3:4", "name": "Subheading", "type": "TEXT", "characters": "Invite your team."},
            ],
        },
        {"id": "3:5", "name": "Middle", "type": "FRAME"},
        {"id": "3:6", "name": "Bottom", "type": "FRAME"},
    ],
}


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------

def _input(node_id, name, placeholder, y):
    return {
        "id": node_id, "name": name, "type": "FRAME",
        "absoluteBoundingBox": _box(40, y, 320, 40),
        "strokes": [{"type": "SOLID", "color": GRAY}],
        "children": [
            {"id": node_id + "t", "name": "Value", "type": "TEXT", "characters": placeholder,
             "absoluteBoundingBox": _box(52, y + 10, 200, 20)},
        ],
    }


def _button(node_id, name, label, x, y, w=320):
    return {
        "id": node_id, "name": name, "type": "INSTANCE",
        "absoluteBoundingBox": _box(x, y, w, 40),
        "fills": [{"type": "SOLID", "color": BLUE}],
        "cornerRadius": 6,
        "children": [
            {"id": node_id + "t", "name": "Label", "type": "TEXT", "characters": label,
             "absoluteBoundingBox": _box(x + 16, y + 10, 80, 20)},
        ],
    }


LOGIN_CARD = {
    "id": "10:1", "name": "Welcome Back Card", "type": "FRAME",
    "absoluteBoundingBox": _box(0, 0, 400, 480),
    "layoutMode": "VERTICAL",
    "fills": [{"type": "SOLID", "color": WHITE}],
    "children": [
        {"id": "10:2", "name": "Title", "type": "TEXT", "characters": "Welcome back",
         "absoluteBoundingBox": _box(40, 40, 320, 32), "style": {"fontSize": 24}},
        {"id": "10:3", "name": "Description", "type": "TEXT", "characters": "Sign in to your account",
         "absoluteBoundingBox": _box(40, 80, 320, 20), "style": {"fontSize": 14}},
        _input("10:4", "Email Input", "you@example.com", 140),
        _input("10:5", "Password Input", "********", 200),
        _button("10:6", "Sign In Button", "Sign in", 40, 280),
    ],
}

CTA_BLOCK = {
    "id": "20:1", "name": "Get Started", "type": "FRAME",
    "absoluteBoundingBox": _box(0, 600, 800, 300),
    "layoutMode": "VERTICAL",
    "children": [
        {"id": "20:2", "name": "Heading", "type": "TEXT", "characters": "Ready to ship faster?",
         "absoluteBoundingBox": _box(100, 660, 600, 40)},
        {"id": "20:3", "name": "Body", "type": "TEXT", "characters": "Start your free trial today.",
         "absoluteBoundingBox": _box(100, 710, 600, 24)},
        _button("20:4", "Get Started Button", "Start now", 340, 780, w=120),
    ],
}

PAGE = {
    "id": "0:1", "name": "Landing", "type": "FRAME",
    "absoluteBoundingBox": _box(0, 0, 1440, 1200),
    "children": [LOGIN_CARD, CTA_BLOCK],
}


@pytest.fixture
def ctx():
    return ClassificationContext()


@pytest.fixture
def standard_card_data():
    return STANDARD_CARD


@pytest.fixture
def login_card_data():
    return LOGIN_CARD


@pytest.fixture
def page_data():
    return PAGE


@pytest.fixture
def standard_card():
    return node_from_figma(STANDARD_CARD)


@pytest.fixture
def flat_card():
    return node_from_figma(FLAT_CARD)


@pytest.fixture
def positional_card():
    return node_from_figma(POSITIONAL_CARD)


@pytest.fixture
def login_card():
    return node_from_figma(LOGIN_CARD)


@pytest.fixture
def cta_block():
    return node_from_figma(CTA_BLOCK)


@pytest.fixture
def landing_page():
    return node_from_figma(PAGE)
