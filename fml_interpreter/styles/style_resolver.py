"""
Style resolver for FML items.

Resolves the final style of an item by applying patches in precedence order,
lowest first:

1. the builtin default style of the item kind
2. the type-selector rule of the page style block (``(text ...)``, ``(box ...)``)
3. named style references of the item, left to right
4. ad hoc modifiers of the item, in the order written
"""

from typing import List, Sequence, Tuple
import logging

from ..diagnostics import DiagnosticCollector, DiagnosticKind
from ..parser.markup_parser import StyleModifier
from .defaults import ItemKind, default_style
from .modifiers import is_style_reference, to_patch
from .style_model import Style, StylePatch, apply_patches
from .style_table import NamedStyleTable

logger = logging.getLogger(__name__)


class StyleResolver:
    """
    Resolves item styles against one document's named style table.

    The resolver holds no state of its own besides the table and the
    diagnostics sink it reports to.
    """

    def __init__(self, table: NamedStyleTable, diagnostics: DiagnosticCollector):
        """
        Args:
            table: Named styles of the document being built
            diagnostics: Sink for unknown references and bad arguments
        """
        self.table = table
        self.diagnostics = diagnostics

    def patches_for(self, modifiers: Sequence[StyleModifier]) -> List[StylePatch]:
        """
        Order an item's modifiers into patches: named references first, then
        ad hoc modifiers. Unknown references are reported and skipped.
        """
        named: List[StylePatch] = []
        ad_hoc: List[StylePatch] = []
        for modifier in modifiers:
            if is_style_reference(modifier):
                if modifier.name in self.table:
                    named.extend(self.table[modifier.name])
                else:
                    self.diagnostics.report(
                        DiagnosticKind.UNKNOWN_STYLE_REFERENCE,
                        f"unknown style '{modifier.name}'",
                        modifier.line, modifier.column,
                    )
                continue
            patch = to_patch(modifier, self.diagnostics)
            if patch is not None:
                ad_hoc.append(patch)
        return named + ad_hoc

    def references(self, modifiers: Sequence[StyleModifier]) -> Tuple[str, ...]:
        """Known named styles referenced by ``modifiers``, first use order."""
        names: List[str] = []
        for modifier in modifiers:
            if is_style_reference(modifier) and modifier.name in self.table and modifier.name not in names:
                names.append(modifier.name)
        return tuple(names)

    def resolve(self, kind: ItemKind, modifiers: Sequence[StyleModifier] = ()) -> Style:
        """
        Resolve the style of one item.

        Args:
            kind: Builtin kind of the item
            modifiers: Contents of the item's ``{...}`` lists

        Returns:
            Resolved style
        """
        style = default_style(kind)
        style = apply_patches(style, self.table.selector_patches(kind))
        return apply_patches(style, self.patches_for(modifiers))
