"""Slot decomposition of composite components (Card, Dialog, Tabs, ...)."""

from .decomposer import decompose, map_component, score_candidate
from .rules import PREDICATES, RuleContext, evaluate
from .schema import (
    DetectionRule,
    RuleKind,
    SlotSchema,
    SlotSpec,
    get_default_schemas,
    get_schema,
    load_slot_schemas,
    parse_slot_schemas,
)

__all__ = [
    "DetectionRule",
    "PREDICATES",
    "RuleContext",
    "RuleKind",
    "SlotSchema",
    "SlotSpec",
    "decompose",
    "evaluate",
    "get_default_schemas",
    "get_schema",
    "load_slot_schemas",
    "map_component",
    "parse_slot_schemas",
    "score_candidate",
]
