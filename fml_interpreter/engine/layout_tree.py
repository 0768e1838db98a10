"""
Layout tree: the positioned result of laying out a document.

All frames are in page pixels with the origin at the top-left corner of the
page and y growing downward. Text-bearing nodes carry their wrapped lines;
each line holds fragments (words, images, placeholders) ready for painting.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from ..diagnostics import Diagnostic
from ..media.object_set import BinaryObject
from ..models.nodes import DocumentNode
from ..styles.style_model import Style
from .geometry import Rect, Size


class NodeKind(Enum):
    TEXT = "text"
    BOX = "box"
    VBOX = "vbox"
    INLINE = "inline"
    ANCHOR = "anchor"
    LINK = "link"
    IMAGE = "image"
    ALT_TEXT = "alt-text"
    PLACEHOLDER = "placeholder"


class FragmentKind(Enum):
    WORD = "word"
    IMAGE = "image"
    ANCHOR = "anchor"
    BLOCK = "block"


@dataclass(slots=True)
class Fragment:
    """Smallest painted piece: one word, one image, or a zero-size anchor mark."""

    kind: FragmentKind
    frame: Rect
    text: str = ""
    style: Optional[Style] = None
    link: Optional[str] = None
    image: Optional[BinaryObject] = None


@dataclass(slots=True)
class LayoutLine:
    frame: Rect
    fragments: List[Fragment] = field(default_factory=list)

    @property
    def text(self) -> str:
        return " ".join(f.text for f in self.fragments if f.kind is FragmentKind.WORD)


@dataclass(eq=False, slots=True)
class LayoutNode:
    """
    One positioned node. ``source`` points back at the document node it was
    laid out from; the document itself is never modified.
    """

    kind: NodeKind
    source: Optional[DocumentNode]
    frame: Rect
    style: Optional[Style] = None
    children: List["LayoutNode"] = field(default_factory=list)
    lines: List[LayoutLine] = field(default_factory=list)
    image: Optional[BinaryObject] = None
    fill: float = 0.0
    content_height: float = 0.0
    degraded: bool = False

    @property
    def width(self) -> float:
        return self.frame.width

    @property
    def height(self) -> float:
        return self.frame.height

    def iter(self) -> Iterator["LayoutNode"]:
        """Pre-order traversal without recursion."""
        stack: List[LayoutNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def translate(self, dx: float, dy: float) -> None:
        """Shift this subtree, its lines and fragments by (dx, dy)."""
        # inline children share fragment objects with their inline's lines
        moved: set[int] = set()
        for node in self.iter():
            node.frame = node.frame.translated(dx, dy)
            for line in node.lines:
                line.frame = line.frame.translated(dx, dy)
                for fragment in line.fragments:
                    if id(fragment) not in moved:
                        moved.add(id(fragment))
                        fragment.frame = fragment.frame.translated(dx, dy)

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data rendering of this subtree (for JSON output)."""
        def convert(node: "LayoutNode") -> Dict[str, Any]:
            data: Dict[str, Any] = {
                "kind": node.kind.value,
                "frame": [node.frame.x, node.frame.y, node.frame.width, node.frame.height],
                "children": [],
            }
            if node.degraded:
                data["degraded"] = True
            if node.fill:
                data["fill"] = node.fill
            if node.lines:
                data["lines"] = [line.text for line in node.lines]
            if node.image is not None:
                data["image"] = node.image.name
            return data

        root = convert(self)
        stack = [(self, root)]
        while stack:
            node, data = stack.pop()
            for child in node.children:
                child_data = convert(child)
                data["children"].append(child_data)
                stack.append((child, child_data))
        return root


@dataclass(slots=True)
class LinkTarget:
    url: str
    text: str
    node: LayoutNode


@dataclass
class LayoutTree:
    """Layout result handed to painters and to the navigating client."""

    root: LayoutNode
    viewport: Size
    dpi: float
    anchors: Dict[str, float] = field(default_factory=dict)
    links: List[LinkTarget] = field(default_factory=list)
    warnings: List[Diagnostic] = field(default_factory=list)

    @property
    def width(self) -> float:
        return self.root.frame.width

    @property
    def height(self) -> float:
        return self.root.frame.height

    def iter_nodes(self) -> Iterator[LayoutNode]:
        return self.root.iter()

    def anchor_offset(self, name: str) -> Optional[float]:
        return self.anchors.get(name)

    def link_at(self, x: float, y: float) -> Optional[LinkTarget]:
        """Link whose fragments cover the point, for click mapping."""
        for target in self.links:
            for line in target.node.lines:
                for fragment in line.fragments:
                    if fragment.frame.contains(x, y):
                        return target
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "viewport": [self.viewport.width, self.viewport.height],
            "dpi": self.dpi,
            "size": [self.width, self.height],
            "anchors": dict(self.anchors),
            "links": [{"url": link.url, "text": link.text} for link in self.links],
            "warnings": [str(warning) for warning in self.warnings],
            "root": self.root.to_dict(),
        }
