"""
Document builder.

Turns the raw item tree into a typed :class:`Document`. Containers are built
with an explicit stack of frames: a frame collects its finished children and
becomes a node once its last raw child has been consumed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .diagnostics import DiagnosticCollector, DiagnosticKind
from .exceptions import BuildError
from .models.nodes import Anchor, BinaryRef, Box, Document, DocumentNode, Inline, Link, Text, VBox
from .parser.markup_parser import RawList, RawPage, RawStyleList, RawText, parse
from .styles.defaults import BUILTIN_KINDS, ItemKind
from .styles.style_model import Style
from .styles.style_resolver import StyleResolver
from .styles.style_table import NamedStyleTable

logger = logging.getLogger(__name__)

_CONTAINER_KINDS = {
    ItemKind.BOX: Box,
    ItemKind.VBOX: VBox,
    ItemKind.INLINE: Inline,
}


@dataclass
class _Frame:
    kind: ItemKind
    style: Style
    items: Sequence[Union[RawList, RawText, RawStyleList]]
    line: int = 0
    column: int = 0
    classes: Tuple[str, ...] = ()
    index: int = 0
    built: List[DocumentNode] = field(default_factory=list)


class DocumentBuilder:
    """Builds one document. Not reusable across documents."""

    def __init__(self, table: NamedStyleTable, diagnostics: Optional[DiagnosticCollector] = None):
        self.table = table
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticCollector()
        self.resolver = StyleResolver(table, self.diagnostics)
        self._anchors: Dict[str, Anchor] = {}

    # -- leaves --------------------------------------------------------

    @staticmethod
    def _strings(item: RawList) -> List[RawText]:
        strings = []
        for argument in item.arguments:
            if not isinstance(argument, RawText):
                raise BuildError(
                    f"'{item.name}' items take only string arguments", argument.line, argument.column
                )
            strings.append(argument)
        return strings

    @staticmethod
    def _join(strings: Sequence[RawText]) -> Optional[str]:
        if not strings:
            return None
        return "".join(string.value for string in strings)

    def _build_leaf(self, item: RawList, kind: ItemKind) -> Optional[DocumentNode]:
        if kind is ItemKind.TEXT:
            style = self.resolver.resolve(kind, item.modifiers)
            content = self._join(self._strings(item)) or ""
            return Text(content, style, item.line, item.column, self.resolver.references(item.modifiers))

        if kind is ItemKind.ANCHOR:
            return self._build_anchor(item)

        if kind is ItemKind.LINK:
            strings = self._strings(item)
            if not strings:
                raise BuildError("links need a url", item.line, item.column)
            style = self.resolver.resolve(kind, item.modifiers)
            return Link(strings[0].value, self._join(strings[1:]), style, item.line, item.column,
                        self.resolver.references(item.modifiers))

        if kind is ItemKind.BINARY:
            strings = self._strings(item)
            if not strings:
                raise BuildError("binary references need an object name", item.line, item.column)
            style = self.resolver.resolve(kind, item.modifiers)
            return BinaryRef(strings[0].value, style, self._join(strings[1:]), item.line, item.column,
                             self.resolver.references(item.modifiers))

        raise TypeError(f"not a leaf item kind: {kind}")

    def _build_anchor(self, item: RawList) -> Optional[Anchor]:
        if item.has_style_list:
            raise BuildError("anchors take no style list", item.line, item.column)
        strings = self._strings(item)
        if len(strings) != 1:
            raise BuildError(
                "anchors take exactly one name", item.line, item.column,
                details=f"got {len(strings)} arguments",
            )
        name = strings[0].value
        if name in self._anchors:
            first = self._anchors[name]
            self.diagnostics.report(
                DiagnosticKind.DUPLICATE_ANCHOR,
                f"anchor '{name}' already defined on line {first.line}; dropping this one",
                item.line, item.column,
            )
            return None
        anchor = Anchor(name, item.line, item.column)
        self._anchors[name] = anchor
        return anchor

    # -- containers ----------------------------------------------------

    def _open(self, kind: ItemKind, item: RawList) -> _Frame:
        style = self.resolver.resolve(kind, item.modifiers)
        return _Frame(kind, style, item.children, item.line, item.column,
                      self.resolver.references(item.modifiers))

    @staticmethod
    def _close(frame: _Frame) -> DocumentNode:
        node_type = _CONTAINER_KINDS[frame.kind]
        return node_type(tuple(frame.built), frame.style, frame.line, frame.column, frame.classes)

    def build_items(self, items: Sequence[Union[RawList, RawText]],
                    kind: ItemKind = ItemKind.VBOX) -> DocumentNode:
        """Build ``items`` as the children of a synthetic container of ``kind``."""
        stack = [_Frame(kind, self.resolver.resolve(kind), items)]
        result: Optional[DocumentNode] = None

        while stack:
            frame = stack[-1]
            if frame.index >= len(frame.items):
                stack.pop()
                node = self._close(frame)
                if stack:
                    stack[-1].built.append(node)
                else:
                    result = node
                continue

            item = frame.items[frame.index]
            frame.index += 1

            if isinstance(item, RawStyleList):
                continue
            if isinstance(item, RawText):
                style = self.resolver.resolve(ItemKind.TEXT)
                frame.built.append(Text(item.value, style, item.line, item.column))
                continue

            item_kind = BUILTIN_KINDS[item.name]
            if item_kind in _CONTAINER_KINDS:
                stack.append(self._open(item_kind, item))
            else:
                node = self._build_leaf(item, item_kind)
                if node is not None:
                    frame.built.append(node)

        return result

    def build_page(self, page: RawPage) -> Document:
        root = self.build_items(page.items, ItemKind.VBOX)
        logger.debug("Built document with %d anchors", len(self._anchors))
        return Document(
            root=root,
            styles=self.table,
            anchors=tuple(self._anchors),
            diagnostics=self.diagnostics.to_list(),
        )


def build(page: RawPage, table: Optional[NamedStyleTable] = None,
          diagnostics: Optional[DiagnosticCollector] = None) -> Document:
    """
    Build a document from a parsed page.

    Args:
        page: Output of :func:`fml_interpreter.parser.parse`
        table: Named style table; built from ``page.style_rules`` when omitted
        diagnostics: Sink for recoverable problems

    Returns:
        The built document, with its diagnostics attached
    """
    diagnostics = diagnostics if diagnostics is not None else DiagnosticCollector()
    if table is None:
        table = NamedStyleTable.build(page.style_rules, diagnostics)
    return DocumentBuilder(table, diagnostics).build_page(page)


def load(source: str) -> Document:
    """Parse and build markup text in one step."""
    return build(parse(source))
