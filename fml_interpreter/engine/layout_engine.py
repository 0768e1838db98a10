"""
Layout engine: document tree -> positioned layout tree.

A layout run has three passes over the document, each driven by an explicit
work stack:

1. Widths, top-down. The root gets the viewport width. A ``Box`` splits its
   width among its children (fill ratios, required widths); a ``VBox`` hands
   its full width to every child. Every node's frame width is fixed here.
2. Content heights, bottom-up. Text is wrapped with the shaper, images keep
   their aspect ratio, inline flows are wrapped as one paragraph, boxes take
   the tallest child and vboxes the sum of their children.
3. Positions, top-down. Containers in a row are stretched to the row height
   and vbox slack is handed to filling children. Relative frames of lines and
   fragments are shifted to page coordinates.

The document is never modified; all intermediate state lives on the
:class:`_LayoutRun` of one invocation, so one document may be laid out from
several threads at once (one engine call per thread).
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Tuple, Union

from ..config import LayoutConfig
from ..diagnostics import DiagnosticCollector, DiagnosticKind
from ..media.object_set import BinaryObject, ObjectSet, Payload
from ..models.nodes import (
    Anchor,
    BinaryRef,
    Box,
    Document,
    DocumentNode,
    Inline,
    Link,
    Text,
    VBox,
    children_of,
)
from ..styles.style_model import Style
from .geometry import Rect, Size
from .layout_tree import (
    Fragment,
    FragmentKind,
    LayoutLine,
    LayoutNode,
    LayoutTree,
    LinkTarget,
    NodeKind,
)
from .line_breaker import FlowItem, FlowLine, break_text_into_lines, flow_items, run_to_items, widest_word
from .text_metrics import ReportLabShaper, TextMeasure, TextShaper

logger = logging.getLogger(__name__)

CONTAINER_KINDS = (NodeKind.BOX, NodeKind.VBOX, NodeKind.INLINE)

Objects = Union[ObjectSet, Mapping[str, Payload], None]


def allocate_row(available: float, required: List[float], fills: List[float],
                 exempt: List[bool]) -> List[float]:
    """
    Split ``available`` among the children of a box.

    Filling children (ratio > 0) share what is left after every non-filling
    child got its required width. Without filling children the width is
    water-filled: equal shares, except children that need more keep their
    requirement and the rest is split again. Exempt children (anchors) get 0.
    The result may sum to more than ``available`` when requirements overflow.
    """
    widths = [0.0] * len(required)
    active = [i for i in range(len(required)) if not exempt[i]]
    total_fill = sum(fills[i] for i in active if fills[i] > 0)

    if total_fill > 0:
        fixed = [i for i in active if fills[i] <= 0]
        for i in fixed:
            widths[i] = required[i]
        remaining = max(0.0, available - sum(required[i] for i in fixed))
        for i in active:
            if fills[i] > 0:
                widths[i] = remaining * fills[i] / total_fill
        return widths

    pending = active
    remaining = available
    while pending:
        share = remaining / len(pending)
        over = [i for i in pending if required[i] > share]
        if not over:
            for i in pending:
                widths[i] = share
            break
        for i in over:
            widths[i] = required[i]
            remaining -= required[i]
        pending = [i for i in pending if required[i] <= share]
    return widths


class _LayoutRun:
    """State of one layout invocation."""

    def __init__(self, shaper: TextShaper, config: LayoutConfig, objects: ObjectSet,
                 dpi: float, diagnostics: DiagnosticCollector):
        self.shaper = shaper
        self.config = config
        self.objects = objects
        self.dpi = dpi
        self.diagnostics = diagnostics
        self._measures: Dict[Tuple[str, Style], TextMeasure] = {}
        self._required: Dict[int, float] = {}
        # boxes and vboxes nested in inline flows, laid out at their own origin
        self._blocks: Dict[int, LayoutNode] = {}

    # measurement ---------------------------------------------------------

    def measure(self, text: str, style: Style) -> TextMeasure:
        key = (text, style)
        result = self._measures.get(key)
        if result is None:
            result = self.shaper.measure(text, style, self.dpi)
            self._measures[key] = result
        return result

    def line_height(self, style: Style) -> float:
        return self.measure("", style).line_height

    def intrinsic_width(self, node: BinaryRef, obj: BinaryObject) -> float:
        return obj.width * (node.style.scale or 1.0)

    def required_width(self, root: DocumentNode) -> float:
        """Min-content width of ``root``, memoised per node for this run."""
        if id(root) in self._required:
            return self._required[id(root)]

        stack: List[Tuple[DocumentNode, bool]] = [(root, False)]
        while stack:
            node, expanded = stack.pop()
            if id(node) in self._required:
                continue
            children = children_of(node)
            if children and not expanded:
                stack.append((node, True))
                stack.extend((child, False) for child in children)
                continue
            self._required[id(node)] = self._own_required(node)
        return self._required[id(root)]

    def _own_required(self, node: DocumentNode) -> float:
        if isinstance(node, Text):
            return widest_word(node.content, node.style, self.measure)
        if isinstance(node, Link):
            return widest_word(node.display_text, node.style, self.measure)
        if isinstance(node, BinaryRef):
            obj = self.objects.get(node.name)
            if obj is not None:
                return self.intrinsic_width(node, obj)
            return widest_word(node.placeholder_text, node.style, self.measure)
        if isinstance(node, Anchor):
            return 0.0
        if isinstance(node, Box):
            return sum(self._required[id(child)] for child in node.children)
        if isinstance(node, (VBox, Inline)):
            return max((self._required[id(child)] for child in node.children), default=0.0)
        raise TypeError(f"not a document node: {node!r}")

    def fill_of(self, node: DocumentNode) -> float:
        """Validated fill ratio of a direct child of a box or vbox."""
        if isinstance(node, Anchor):
            return 0.0
        fill = node.style.fill
        if fill is None:
            return 0.0
        if fill < 0:
            self.diagnostics.report(
                DiagnosticKind.INVALID_FILL_RATIO,
                f"negative fill ratio {fill:g}; laid out as content-sized",
                node.line, node.column,
            )
            return 0.0
        return fill

    # driver --------------------------------------------------------------

    def layout_subtree(self, root: DocumentNode, width: float) -> LayoutNode:
        """Lay out ``root`` at ``width`` with its origin at (0, 0)."""
        self.required_width(root)
        order = self._resolve_widths(root, width)
        for lnode in reversed(order):
            self._resolve_height(lnode)
        self._position(order[0])
        return order[0]

    # pass 1 --------------------------------------------------------------

    def _resolve_widths(self, root: DocumentNode, width: float) -> List[LayoutNode]:
        order: List[LayoutNode] = []
        stack: List[Tuple[DocumentNode, float, float, Optional[LayoutNode]]] = [(root, width, 0.0, None)]

        while stack:
            node, available, fill, parent = stack.pop()
            lnode = self._create_node(node, available, fill)
            order.append(lnode)
            if parent is not None:
                parent.children.append(lnode)
            else:
                self._blocks[id(node)] = lnode
            if lnode.kind is NodeKind.INLINE:
                stack.extend(reversed(self._inline_blocks(node, lnode.width)))
                continue
            if lnode.kind not in (NodeKind.BOX, NodeKind.VBOX):
                continue

            children = node.children
            fills = [self.fill_of(child) for child in children]
            if lnode.kind is NodeKind.BOX:
                widths = allocate_row(
                    available,
                    [self._required[id(child)] for child in children],
                    fills,
                    [isinstance(child, Anchor) for child in children],
                )
            else:
                widths = [available] * len(children)
            for child, child_width, child_fill in reversed(list(zip(children, widths, fills))):
                stack.append((child, child_width, child_fill, lnode))

        return order

    def _inline_blocks(self, inline: Inline, width: float) -> List[Tuple[DocumentNode, float, float, None]]:
        """Width entries for the boxes and vboxes flowing in ``inline``."""
        entries: List[Tuple[DocumentNode, float, float, None]] = []
        stack: List[DocumentNode] = list(reversed(inline.children))
        while stack:
            node = stack.pop()
            if isinstance(node, Inline):
                stack.extend(reversed(node.children))
            elif isinstance(node, (Box, VBox)):
                entries.append((node, min(self._required[id(node)], width), 0.0, None))
        return entries

    def _create_node(self, node: DocumentNode, width: float, fill: float) -> LayoutNode:
        if isinstance(node, Anchor):
            return LayoutNode(NodeKind.ANCHOR, node, Rect(0.0, 0.0, 0.0, 0.0))

        # content that needs no width is laid out at zero width
        if width <= 0 and self._required[id(node)] > 0:
            self.diagnostics.report(
                DiagnosticKind.ZERO_AVAILABLE_WIDTH,
                f"no width left for {type(node).__name__.lower()}; drawn as placeholder",
                node.line, node.column,
            )
            height = self.config.placeholder_height
            return LayoutNode(
                NodeKind.PLACEHOLDER,
                node,
                Rect(0.0, 0.0, self.config.min_placeholder_width, height),
                style=node.style,
                fill=fill,
                content_height=height,
                degraded=True,
            )

        if isinstance(node, Text):
            kind = NodeKind.TEXT
        elif isinstance(node, Link):
            kind = NodeKind.LINK
        elif isinstance(node, BinaryRef):
            kind = NodeKind.IMAGE
        elif isinstance(node, Box):
            kind = NodeKind.BOX
        elif isinstance(node, VBox):
            kind = NodeKind.VBOX
        elif isinstance(node, Inline):
            kind = NodeKind.INLINE
        else:
            raise TypeError(f"not a document node: {node!r}")
        return LayoutNode(kind, node, Rect(0.0, 0.0, width, 0.0), style=node.style, fill=fill)

    # pass 2 --------------------------------------------------------------

    def _resolve_height(self, lnode: LayoutNode) -> None:
        kind = lnode.kind
        if kind is NodeKind.BOX:
            lnode.content_height = max((child.content_height for child in lnode.children), default=0.0)
        elif kind is NodeKind.VBOX:
            lnode.content_height = sum(child.content_height for child in lnode.children)
        elif kind in (NodeKind.TEXT, NodeKind.LINK):
            source = lnode.source
            text = source.content if isinstance(source, Text) else source.display_text
            url = source.url if isinstance(source, Link) else None
            self._wrap_leaf(lnode, text, url)
        elif kind is NodeKind.IMAGE:
            self._layout_image(lnode)
        elif kind is NodeKind.INLINE:
            self._layout_inline(lnode)
        lnode.frame.height = lnode.content_height

    def _wrap_leaf(self, lnode: LayoutNode, text: str, url: Optional[str]) -> None:
        style = lnode.style
        line_height = self.line_height(style)
        space = self.measure(" ", style).width

        for index, wrapped in enumerate(break_text_into_lines(text, style, lnode.width, self.measure)):
            y = index * line_height
            line = LayoutLine(Rect(0.0, y, wrapped.width, line_height))
            x = 0.0
            for word in wrapped.text.split():
                word_width = self.measure(word, style).width
                line.fragments.append(Fragment(
                    FragmentKind.WORD, Rect(x, y, word_width, line_height), word, style, link=url,
                ))
                x += word_width + space
            lnode.lines.append(line)

        lnode.content_height = len(lnode.lines) * line_height

    def _unresolved(self, node: BinaryRef) -> None:
        self.diagnostics.report(
            DiagnosticKind.UNRESOLVED_BINARY_REFERENCE,
            f"binary object {node.name!r} is not available; showing alt text",
            node.line, node.column,
        )

    def _layout_image(self, lnode: LayoutNode) -> None:
        node: BinaryRef = lnode.source
        obj = self.objects.get(node.name)
        if obj is None:
            self._unresolved(node)
            lnode.kind = NodeKind.ALT_TEXT
            lnode.degraded = True
            self._wrap_leaf(lnode, node.placeholder_text, None)
            return

        if lnode.fill > 0:
            display_width = lnode.width
        else:
            display_width = min(lnode.width, self.intrinsic_width(node, obj))
        height = display_width * obj.aspect_ratio
        frame = Rect(0.0, 0.0, display_width, height)
        lnode.image = obj
        lnode.lines.append(LayoutLine(
            Rect(0.0, 0.0, display_width, height),
            [Fragment(FragmentKind.IMAGE, frame, node.name, node.style, image=obj)],
        ))
        lnode.content_height = height

    def _layout_inline(self, lnode: LayoutNode) -> None:
        """Wrap every descendant of an inline node as one paragraph."""
        width = lnode.width
        owners: List[LayoutNode] = []
        items: List[FlowItem] = []
        space_pending = False

        stack: List[Tuple[DocumentNode, LayoutNode]] = [
            (child, lnode) for child in reversed(lnode.source.children)
        ]
        while stack:
            node, parent = stack.pop()
            owner_index = len(owners)

            if isinstance(node, Inline):
                owner = LayoutNode(NodeKind.INLINE, node, Rect(0.0, 0.0, 0.0, 0.0), style=node.style)
                stack.extend((child, owner) for child in reversed(node.children))
            elif isinstance(node, (Text, Link)):
                kind = NodeKind.TEXT if isinstance(node, Text) else NodeKind.LINK
                text = node.content if isinstance(node, Text) else node.display_text
                owner = LayoutNode(kind, node, Rect(0.0, 0.0, 0.0, 0.0), style=node.style)
                words, space_pending = run_to_items(text, node.style, self.measure, owner_index, space_pending)
                items.extend(words)
            elif isinstance(node, Anchor):
                owner = LayoutNode(NodeKind.ANCHOR, node, Rect(0.0, 0.0, 0.0, 0.0))
                items.append(FlowItem(FragmentKind.ANCHOR, 0.0, 0.0, owner=owner_index))
            elif isinstance(node, BinaryRef):
                obj = self.objects.get(node.name)
                if obj is None:
                    self._unresolved(node)
                    owner = LayoutNode(NodeKind.ALT_TEXT, node, Rect(0.0, 0.0, 0.0, 0.0),
                                       style=node.style, degraded=True)
                    words, space_pending = run_to_items(
                        node.placeholder_text, node.style, self.measure, owner_index, space_pending,
                    )
                    items.extend(words)
                else:
                    owner = LayoutNode(NodeKind.IMAGE, node, Rect(0.0, 0.0, 0.0, 0.0),
                                       style=node.style, image=obj)
                    display_width = min(width, self.intrinsic_width(node, obj))
                    items.append(FlowItem(
                        FragmentKind.IMAGE, display_width, display_width * obj.aspect_ratio,
                        text=node.name, style=node.style,
                        space_before=self._gap(node.style, space_pending),
                        owner=owner_index, payload=obj,
                    ))
                    space_pending = False
            elif isinstance(node, (Box, VBox)):
                owner = self._blocks[id(node)]
                self._position(owner)
                items.append(FlowItem(
                    FragmentKind.BLOCK, owner.width, owner.height,
                    space_before=self._gap(node.style, space_pending),
                    owner=owner_index, payload=owner,
                ))
                space_pending = False
            else:
                raise TypeError(f"not a document node: {node!r}")

            owners.append(owner)
            parent.children.append(owner)

        self._place_flow(lnode, owners, flow_items(items, width))

    def _gap(self, style: Style, space_pending: bool) -> float:
        return self.measure(" ", style).width if space_pending else 0.0

    def _place_flow(self, lnode: LayoutNode, owners: List[LayoutNode], lines: List[FlowLine]) -> None:
        owner_lines: Dict[Tuple[int, int], LayoutLine] = {}
        y = 0.0

        for line_index, flow_line in enumerate(lines):
            line = LayoutLine(Rect(0.0, y, flow_line.width, flow_line.height))
            for item, x in zip(flow_line.items, flow_line.offsets):
                owner = owners[item.owner]
                if item.kind is FragmentKind.ANCHOR:
                    frame = Rect(x, y, 0.0, 0.0)
                else:
                    frame = Rect(x, y + flow_line.height - item.height, item.width, item.height)

                if item.kind is FragmentKind.BLOCK:
                    owner.translate(frame.x, frame.y)
                    fragment = Fragment(FragmentKind.BLOCK, frame, style=item.style)
                else:
                    fragment = Fragment(
                        item.kind, frame, item.text, item.style,
                        link=owner.source.url if owner.kind is NodeKind.LINK else None,
                        image=item.payload if item.kind is FragmentKind.IMAGE else None,
                    )
                    owned = owner_lines.get((item.owner, line_index))
                    if owned is None:
                        owned = LayoutLine(frame)
                        owner_lines[(item.owner, line_index)] = owned
                        owner.lines.append(owned)
                    else:
                        owned.frame = owned.frame.union(frame)
                    owned.fragments.append(fragment)
                line.fragments.append(fragment)
            lnode.lines.append(line)
            y += flow_line.height

        # owners were created in pre-order, so nested inlines see their
        # children's final frames; owners without fragments stay empty
        placed = {id(owners[index]) for flow_line in lines for index in (item.owner for item in flow_line.items)}
        for owner in reversed(owners):
            if owner.kind is NodeKind.INLINE:
                frames = [child.frame for child in owner.children if id(child) in placed]
                if frames:
                    placed.add(id(owner))
            else:
                frames = [owned.frame for owned in owner.lines]
            if frames:
                union = frames[0]
                for frame in frames[1:]:
                    union = union.union(frame)
                owner.frame = union
            owner.content_height = owner.frame.height

        lnode.content_height = y

    # pass 3 --------------------------------------------------------------

    def _position(self, root: LayoutNode) -> None:
        stack: List[Tuple[LayoutNode, float, float, Optional[float]]] = [(root, 0.0, 0.0, None)]

        while stack:
            lnode, x, y, assigned = stack.pop()
            kind = lnode.kind

            if kind not in (NodeKind.BOX, NodeKind.VBOX):
                lnode.translate(x, y)
                if kind is NodeKind.INLINE:
                    lnode.frame.height = max(lnode.content_height, assigned or 0.0)
                elif assigned is not None:
                    lnode.frame.height = assigned
                continue

            final = max(lnode.content_height, assigned or 0.0)
            lnode.frame = Rect(x, y, lnode.frame.width, final)
            placed: List[Tuple[LayoutNode, float, float, Optional[float]]] = []

            if kind is NodeKind.BOX:
                cursor = x
                for child in lnode.children:
                    child_assigned = final if child.kind in CONTAINER_KINDS else None
                    placed.append((child, cursor, y, child_assigned))
                    cursor += child.frame.width
            else:
                slack = final - lnode.content_height if assigned is not None else 0.0
                total_fill = sum(child.fill for child in lnode.children if child.fill > 0)
                cursor = y
                for child in lnode.children:
                    extra = 0.0
                    if slack > 0 and total_fill > 0 and child.fill > 0:
                        extra = slack * child.fill / total_fill
                    placed.append((child, x, cursor, child.content_height + extra if extra else None))
                    cursor += child.content_height + extra

            stack.extend(reversed(placed))


class LayoutEngine:
    """
    Lays out documents with one shaper and one configuration.

    The engine holds no per-document state; every :meth:`layout` call starts
    a fresh run.
    """

    def __init__(self, shaper: Optional[TextShaper] = None, config: Optional[LayoutConfig] = None,
                 objects: Objects = None):
        self.config = (config or LayoutConfig()).validate()
        self.shaper = shaper if shaper is not None else ReportLabShaper(self.config.line_spacing)
        self.objects = ObjectSet.coerce(objects)

    def layout(self, root: Union[Document, DocumentNode], viewport_width: float, viewport_height: float,
               dpi: Optional[float] = None, objects: Objects = None) -> LayoutTree:
        """
        Lay out a document or a bare node tree.

        Args:
            root: Built document, or any document node
            viewport_width: Viewport width in pixels
            viewport_height: Viewport height in pixels; recorded, not enforced
            dpi: Resolution for point-to-pixel conversion (config default)
            objects: Binary objects for this call (engine default)

        Returns:
            LayoutTree with anchors, links and every warning

        Raises:
            ShapingTimeout: The shaper gave up on a measurement
        """
        diagnostics = DiagnosticCollector()
        if isinstance(root, Document):
            node: DocumentNode = root.root
            document_warnings = list(root.diagnostics)
        else:
            node = root
            document_warnings = []

        dpi = float(dpi or self.config.dpi)
        object_set = ObjectSet.coerce(objects) if objects is not None else self.objects
        run = _LayoutRun(self.shaper, self.config, object_set, dpi, diagnostics)

        logger.debug("Layout started: viewport %.1fx%.1f px at %.1f dpi", viewport_width, viewport_height, dpi)
        layout_root = run.layout_subtree(node, float(viewport_width))

        anchors: Dict[str, float] = {}
        links: List[LinkTarget] = []
        for lnode in layout_root.iter():
            if lnode.kind is NodeKind.ANCHOR:
                anchors.setdefault(lnode.source.name, lnode.frame.y)
            elif lnode.kind is NodeKind.LINK:
                links.append(LinkTarget(lnode.source.url, lnode.source.display_text, lnode))

        warnings = document_warnings + diagnostics.to_list()
        logger.debug(
            "Layout finished: %.1fx%.1f px, %d anchors, %d links, %d warnings",
            layout_root.width, layout_root.height, len(anchors), len(links), len(warnings),
        )
        return LayoutTree(
            root=layout_root,
            viewport=Size(float(viewport_width), float(viewport_height)),
            dpi=dpi,
            anchors=anchors,
            links=links,
            warnings=warnings,
        )


def layout(root: Union[Document, DocumentNode], viewport_width_px: float, viewport_height_px: float,
           dpi: Optional[float] = None, shaper: Optional[TextShaper] = None, objects: Objects = None,
           config: Optional[LayoutConfig] = None) -> LayoutTree:
    """Lay out ``root`` once; see :meth:`LayoutEngine.layout`."""
    return LayoutEngine(shaper, config, objects).layout(root, viewport_width_px, viewport_height_px, dpi)
