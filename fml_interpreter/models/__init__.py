"""
Models module for FML documents.

Contains the typed document tree produced by the builder.
"""

from .nodes import (
    CONTAINER_TYPES,
    NODE_TYPES,
    Anchor,
    BinaryRef,
    Box,
    ContainerNode,
    Document,
    DocumentNode,
    Inline,
    Link,
    Text,
    VBox,
    children_of,
    iter_tree,
)

__all__ = [
    "CONTAINER_TYPES",
    "NODE_TYPES",
    "Anchor",
    "BinaryRef",
    "Box",
    "ContainerNode",
    "Document",
    "DocumentNode",
    "Inline",
    "Link",
    "Text",
    "VBox",
    "children_of",
    "iter_tree",
]
