"""
Document tree for FML pages.

The node variants are plain frozen dataclasses forming a closed union; code
that depends on the node kind dispatches over all of them and raises
``TypeError`` for anything else. Nodes hold no parent references. Source
positions and the named styles an item referenced (``classes``) are carried
for diagnostics and export but ignored by equality.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple, Union

from ..diagnostics import Diagnostic
from ..styles.style_model import Style
from ..styles.style_table import NamedStyleTable


@dataclass(frozen=True, slots=True)
class Text:
    content: str
    style: Style
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)
    classes: Tuple[str, ...] = field(default=(), compare=False)


@dataclass(frozen=True, slots=True)
class Box:
    """Horizontal flow: children share the width left to right."""

    children: Tuple["DocumentNode", ...]
    style: Style
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)
    classes: Tuple[str, ...] = field(default=(), compare=False)


@dataclass(frozen=True, slots=True)
class VBox:
    """Vertical flow: children stack top to bottom at full width."""

    children: Tuple["DocumentNode", ...]
    style: Style
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)
    classes: Tuple[str, ...] = field(default=(), compare=False)


@dataclass(frozen=True, slots=True)
class Inline:
    """Children flow into one paragraph instead of starting new lines."""

    children: Tuple["DocumentNode", ...]
    style: Style
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)
    classes: Tuple[str, ...] = field(default=(), compare=False)


@dataclass(frozen=True, slots=True)
class Anchor:
    name: str
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)


@dataclass(frozen=True, slots=True)
class Link:
    url: str
    text: Optional[str]
    style: Style
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)
    classes: Tuple[str, ...] = field(default=(), compare=False)

    @property
    def display_text(self) -> str:
        return self.text if self.text is not None else self.url


@dataclass(frozen=True, slots=True)
class BinaryRef:
    name: str
    style: Style
    alt_text: Optional[str] = None
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)
    classes: Tuple[str, ...] = field(default=(), compare=False)

    @property
    def placeholder_text(self) -> str:
        return self.alt_text if self.alt_text else self.name


DocumentNode = Union[Text, Box, VBox, Inline, Anchor, Link, BinaryRef]
ContainerNode = Union[Box, VBox, Inline]

CONTAINER_TYPES = (Box, VBox, Inline)
NODE_TYPES = (Text, Box, VBox, Inline, Anchor, Link, BinaryRef)


def children_of(node: DocumentNode) -> Tuple[DocumentNode, ...]:
    if isinstance(node, CONTAINER_TYPES):
        return node.children
    if isinstance(node, (Text, Anchor, Link, BinaryRef)):
        return ()
    raise TypeError(f"not a document node: {node!r}")


def iter_tree(root: DocumentNode) -> Iterator[DocumentNode]:
    """Pre-order traversal without recursion."""
    stack: List[DocumentNode] = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(children_of(node)))


@dataclass(slots=True)
class Document:
    """A built page: the root vbox plus document-scoped state."""

    root: VBox
    styles: NamedStyleTable = field(default_factory=NamedStyleTable.empty)
    anchors: Tuple[str, ...] = ()
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def iter_nodes(self) -> Iterator[DocumentNode]:
        return iter_tree(self.root)

    def referenced_names(self) -> List[str]:
        """Binary reference names in first-appearance order, deduplicated."""
        seen: dict[str, None] = {}
        for node in self.iter_nodes():
            if isinstance(node, BinaryRef):
                seen.setdefault(node.name, None)
        return list(seen)
