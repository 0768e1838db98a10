"""
Named style table.

Built once per document from the page style block and read-only afterwards.
Each rule is expanded up front into a flat tuple of patches: references to
other named styles are spliced in place, so resolving an item never walks
the rule graph again.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from ..diagnostics import DiagnosticCollector, DiagnosticKind
from ..parser.markup_parser import StyleModifier, StyleRule
from .defaults import SELECTOR_KINDS, ItemKind
from .modifiers import is_style_reference, to_patch
from .style_model import StylePatch

logger = logging.getLogger(__name__)


class NamedStyleTable(Mapping[str, Tuple[StylePatch, ...]]):
    """Mapping from style name to its expanded patches."""

    def __init__(self, rules: Optional[Mapping[str, Tuple[StyleModifier, ...]]] = None,
                 patches: Optional[Mapping[str, Tuple[StylePatch, ...]]] = None):
        self._rules = MappingProxyType(dict(rules or {}))
        self._patches = MappingProxyType(dict(patches or {}))

    @classmethod
    def empty(cls) -> "NamedStyleTable":
        return cls()

    @classmethod
    def build(cls, rules: Sequence[StyleRule], diagnostics: DiagnosticCollector) -> "NamedStyleTable":
        """
        Build the table from the style block.

        A rule defined twice keeps its last definition. Unknown and cyclic
        references inside rules are reported once and skipped.
        """
        raw: Dict[str, Tuple[StyleModifier, ...]] = {}
        for rule in rules:
            if rule.name in raw:
                logger.debug("Style rule %r redefined on line %d", rule.name, rule.line)
            raw[rule.name] = rule.modifiers

        expanded: Dict[str, Tuple[StylePatch, ...]] = {}
        for name in raw:
            if name not in expanded:
                cls._expand(name, raw, expanded, diagnostics)

        logger.debug("Built style table with %d rules", len(raw))
        return cls(raw, expanded)

    @staticmethod
    def _expand(root: str, raw: Mapping[str, Tuple[StyleModifier, ...]],
                expanded: Dict[str, Tuple[StylePatch, ...]],
                diagnostics: DiagnosticCollector) -> None:
        # frame: (name, modifier iterator, collected patches)
        stack: List[Tuple[str, Iterator[StyleModifier], List[StylePatch]]] = [
            (root, iter(raw[root]), [])
        ]
        active = {root}
        while stack:
            name, modifiers, collected = stack[-1]
            modifier = next(modifiers, None)
            if modifier is None:
                stack.pop()
                active.discard(name)
                expanded[name] = tuple(collected)
                if stack:
                    stack[-1][2].extend(collected)
                continue

            if not is_style_reference(modifier):
                patch = to_patch(modifier, diagnostics)
                if patch is not None:
                    collected.append(patch)
                continue

            reference = modifier.name
            if reference in active:
                diagnostics.report(
                    DiagnosticKind.RECURSIVE_STYLE,
                    f"style '{name}' refers back to '{reference}'",
                    modifier.line, modifier.column,
                )
            elif reference in expanded:
                collected.extend(expanded[reference])
            elif reference in raw:
                active.add(reference)
                stack.append((reference, iter(raw[reference]), []))
            else:
                diagnostics.report(
                    DiagnosticKind.UNKNOWN_STYLE_REFERENCE,
                    f"style '{name}' refers to unknown style '{reference}'",
                    modifier.line, modifier.column,
                )

    # -- Mapping interface ---------------------------------------------

    def __getitem__(self, name: str) -> Tuple[StylePatch, ...]:
        return self._patches[name]

    def __iter__(self):
        return iter(self._patches)

    def __len__(self) -> int:
        return len(self._patches)

    # -- queries -------------------------------------------------------

    @property
    def rules(self) -> Mapping[str, Tuple[StyleModifier, ...]]:
        """Rules as written in the style block."""
        return self._rules

    def selector_patches(self, kind: ItemKind) -> Tuple[StylePatch, ...]:
        """Patches of the type-selector rule for ``kind``, if one exists."""
        for name, selector_kind in SELECTOR_KINDS.items():
            if selector_kind is kind and name in self._patches:
                return self._patches[name]
        return ()

    def named_rules(self) -> Dict[str, Tuple[StyleModifier, ...]]:
        """Rules that are not type selectors."""
        return {name: mods for name, mods in self._rules.items() if name not in SELECTOR_KINDS}
