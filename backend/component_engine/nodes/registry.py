"""Node registry for the engine's workflow adapters.

Engine entry points are exposed as workflow nodes: a node type is a class
registered with ``@register_node_type`` together with its metadata, and a
workflow instantiates it by name through ``create_node``.

- NodeDefinition: metadata of a node type (schemas, category, UI hints)
- EngineNode: protocol every node instance satisfies
- BaseNodeImpl: base class with config validation against input_schema
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="BaseNodeImpl")


@dataclass
class NodeDefinition:
    """Metadata of one registered node type.

    Attributes:
        node_type: Unique identifier (e.g. "component_classifier")
        display_name: Human-readable name
        description: What the node does
        category: Grouping key (e.g. "analysis")
        input_schema: JSON schema of the node config; ``required`` is enforced
        output_schema: JSON schema of the execute() result
    """

    node_type: str
    display_name: str
    description: str
    category: str
    input_schema: Dict[str, Any]
    output_schema: Dict[str, Any]
    icon: Optional[str] = None
    color: Optional[str] = None

    def __post_init__(self):
        if not self.node_type:
            raise ValueError("node_type cannot be empty")
        if not self.display_name:
            raise ValueError("display_name cannot be empty")
        if not isinstance(self.input_schema, dict):
            raise ValueError("input_schema must be a dictionary")
        if not isinstance(self.output_schema, dict):
            raise ValueError("output_schema must be a dictionary")


class EngineNode(Protocol):
    node_id: str
    node_type: str
    config: Dict[str, Any]

    async def execute(self, inputs: Dict[str, Any]) -> Dict[str, Any]:
        ...

    def validate_config(self) -> List[Dict[str, str]]:
        ...


class BaseNodeImpl(ABC):
    """Common node state; subclasses implement ``execute``."""

    def __init__(self, node_id: str, node_type: str, config: Dict[str, Any]):
        self.node_id = node_id
        self.node_type = node_type
        self.config = config

    @abstractmethod
    async def execute(self, inputs: Dict[str, Any]) -> Dict[str, Any]:
        """Run the node on upstream ``inputs`` merged over its config."""

    def validate_config(self) -> List[Dict[str, str]]:
        """Errors as ``{"field", "error"}`` dicts; empty when valid."""
        definition = NODE_REGISTRY.get(self.node_type)
        if definition is None:
            return [{"field": "node_type", "error": f"Unknown node type: {self.node_type}"}]

        errors = []
        for field_name in definition.input_schema.get("required", []):
            if field_name not in self.config:
                errors.append({
                    "field": field_name,
                    "error": f"Required field '{field_name}' is missing",
                })
        return errors

    def resolve(self, inputs: Dict[str, Any], key: str, default: Any = None) -> Any:
        """Upstream input wins over the static node config."""
        if key in inputs:
            return inputs[key]
        return self.config.get(key, default)


NODE_REGISTRY: Dict[str, NodeDefinition] = {}
NODE_CLASSES: Dict[str, Type[BaseNodeImpl]] = {}


def register_node_type(
    node_type: str,
    display_name: str,
    description: str,
    category: str,
    input_schema: Dict[str, Any],
    output_schema: Dict[str, Any],
    icon: Optional[str] = None,
    color: Optional[str] = None,
) -> Callable[[Type[T]], Type[T]]:
    """Class decorator registering a node type and its metadata.

    Example:
        @register_node_type(
            node_type="component_classifier",
            display_name="Component Classifier",
            description="Labels every node of a design tree",
            category="analysis",
            input_schema={"type": "object", "properties": {...}},
            output_schema={"type": "object", "properties": {...}},
        )
        class ComponentClassifierNode(BaseNodeImpl):
            async def execute(self, inputs):
                ...
    """

    def decorator(cls: Type[T]) -> Type[T]:
        definition = NodeDefinition(
            node_type=node_type,
            display_name=display_name,
            description=description,
            category=category,
            input_schema=input_schema,
            output_schema=output_schema,
            icon=icon,
            color=color,
        )
        if node_type in NODE_CLASSES and NODE_CLASSES[node_type] is not cls:
            logger.warning("Node type %s re-registered by %s", node_type, cls.__name__)
        NODE_REGISTRY[node_type] = definition
        NODE_CLASSES[node_type] = cls
        logger.debug("Registered node type: %s (%s)", node_type, display_name)
        return cls

    return decorator


def create_node(node_id: str, node_type: str, config: Optional[Dict[str, Any]] = None) -> BaseNodeImpl:
    """Instantiate a registered node type.

    Raises:
        ValueError: ``node_type`` is not registered
    """
    if node_type not in NODE_CLASSES:
        raise ValueError(
            f"Unknown node type: {node_type}. "
            f"Available types: {sorted(NODE_CLASSES)}"
        )
    node = NODE_CLASSES[node_type](node_id=node_id, node_type=node_type, config=config or {})
    logger.debug("Created node: %s (type=%s)", node_id, node_type)
    return node


def get_node_definition(node_type: str) -> Optional[NodeDefinition]:
    return NODE_REGISTRY.get(node_type)


def list_node_types() -> List[NodeDefinition]:
    return list(NODE_REGISTRY.values())


def list_node_types_by_category(category: str) -> List[NodeDefinition]:
    return [d for d in NODE_REGISTRY.values() if d.category == category]


def is_node_type_registered(node_type: str) -> bool:
    return node_type in NODE_REGISTRY
