"""Normalisers from raw design exports into DesignNode trees."""

from .figma_loader import node_from_figma, nodes_from_figma

__all__ = ["node_from_figma", "nodes_from_figma"]
