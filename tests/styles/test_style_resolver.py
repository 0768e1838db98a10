"""Tests for style resolution."""

import pytest

from fml_interpreter.diagnostics import DiagnosticCollector, DiagnosticKind
from fml_interpreter.parser import StyleModifier, parse
from fml_interpreter.styles.defaults import BASE_STYLE, LINK_STYLE, ItemKind, default_style
from fml_interpreter.styles.style_model import Color, Decoration, FontFamily, FontWeight
from fml_interpreter.styles.style_resolver import StyleResolver
from fml_interpreter.styles.style_table import NamedStyleTable


@pytest.fixture
def make_resolver():
    def factory(style_block=""):
        diagnostics = DiagnosticCollector()
        table = NamedStyleTable.build(parse(style_block).style_rules, diagnostics)
        return StyleResolver(table, diagnostics), diagnostics
    return factory


def mods(*entries):
    result = []
    for entry in entries:
        if isinstance(entry, tuple):
            result.append(StyleModifier(*entry))
        else:
            result.append(StyleModifier(entry))
    return result


class TestDefaults:
    """Test suite for builtin defaults."""

    def test_text_default(self):
        style = default_style(ItemKind.TEXT)

        assert style.font_family is FontFamily.SANS
        assert style.weight is FontWeight.NORMAL
        assert style.foreground == Color(0x30, 0x30, 0x30)
        assert style.size == 12.0
        assert style.background is None
        assert style.fill is None

    def test_link_default(self):
        assert LINK_STYLE.underline
        assert LINK_STYLE.foreground == Color(0, 0, 0xEE)

    def test_containers_share_text_default(self):
        for kind in (ItemKind.BOX, ItemKind.VBOX, ItemKind.INLINE, ItemKind.BINARY):
            assert default_style(kind) == BASE_STYLE


class TestStyleResolver:
    """Test suite for StyleResolver."""

    def test_no_modifiers_gives_default(self, make_resolver):
        resolver, _ = make_resolver()

        assert resolver.resolve(ItemKind.TEXT) == BASE_STYLE
        assert resolver.resolve(ItemKind.LINK) == LINK_STYLE

    def test_ad_hoc_beats_named(self, make_resolver):
        resolver, _ = make_resolver('{ (warn (fg "ff0000") bold) }')

        style = resolver.resolve(ItemKind.TEXT, mods(("fg", "00ff00"), "warn"))

        assert style.foreground == Color(0, 255, 0)
        assert style.bold

    def test_named_beat_type_selector(self, make_resolver):
        resolver, _ = make_resolver('{ (text serif (size "10")) (code mono) }')

        plain = resolver.resolve(ItemKind.TEXT)
        coded = resolver.resolve(ItemKind.TEXT, mods("code"))

        assert plain.font_family is FontFamily.SERIF
        assert plain.size == 10.0
        assert coded.font_family is FontFamily.MONO
        assert coded.size == 10.0

    def test_type_selector_only_matches_its_kind(self, make_resolver):
        resolver, _ = make_resolver('{ (^ bold) }')

        assert resolver.resolve(ItemKind.LINK).bold
        assert not resolver.resolve(ItemKind.TEXT).bold

    def test_named_references_apply_left_to_right(self, make_resolver):
        resolver, _ = make_resolver('{ (a (size "20")) (b (size "30")) }')

        assert resolver.resolve(ItemKind.TEXT, mods("a", "b")).size == 30.0
        assert resolver.resolve(ItemKind.TEXT, mods("b", "a")).size == 20.0

    def test_ad_hoc_in_order(self, make_resolver):
        resolver, _ = make_resolver()

        style = resolver.resolve(ItemKind.TEXT, mods("serif", "mono"))

        assert style.font_family is FontFamily.MONO

    def test_decorations_are_additive(self, make_resolver):
        resolver, _ = make_resolver('{ (emph italic) }')

        style = resolver.resolve(ItemKind.LINK, mods("emph", "strike"))

        assert style.decorations == frozenset({Decoration.UNDERLINE, Decoration.ITALIC, Decoration.STRIKE})

    def test_normal_resets_weight(self, make_resolver):
        resolver, _ = make_resolver('{ (box bold) }')

        assert not resolver.resolve(ItemKind.BOX, mods("normal")).bold

    def test_unknown_reference_is_reported_and_skipped(self, make_resolver):
        resolver, diagnostics = make_resolver()

        style = resolver.resolve(ItemKind.TEXT, [StyleModifier("ghost", None, 3, 7), StyleModifier("bold")])

        assert style.bold
        [diagnostic] = diagnostics.of_kind(DiagnosticKind.UNKNOWN_STYLE_REFERENCE)
        assert (diagnostic.line, diagnostic.column) == (3, 7)
        assert "ghost" in diagnostic.message

    def test_fill_and_scale(self, make_resolver):
        resolver, _ = make_resolver()

        style = resolver.resolve(ItemKind.BINARY, mods(("fill", "2.5"), ("scale", "0.5")))

        assert style.fill == 2.5
        assert style.fill_ratio == 2.5
        assert style.scale == 0.5

    def test_negative_fill_is_kept(self, make_resolver):
        resolver, diagnostics = make_resolver()

        assert resolver.resolve(ItemKind.TEXT, mods(("fill", "-1"))).fill == -1.0
        assert len(diagnostics) == 0

    def test_non_positive_scale_is_rejected(self, make_resolver):
        resolver, diagnostics = make_resolver()

        style = resolver.resolve(ItemKind.BINARY, mods(("scale", "0")))

        assert style.scale is None
        assert len(diagnostics.of_kind(DiagnosticKind.INVALID_STYLE_ARGUMENT)) == 1

    def test_bad_color_is_rejected(self, make_resolver):
        resolver, diagnostics = make_resolver()

        style = resolver.resolve(ItemKind.TEXT, mods(("bg", "zzz")))

        assert style.background is None
        assert len(diagnostics.of_kind(DiagnosticKind.INVALID_STYLE_ARGUMENT)) == 1

    def test_plain_clears_link_underline(self, make_resolver):
        resolver, diagnostics = make_resolver()

        style = resolver.resolve(ItemKind.LINK, mods("plain", "strike"))

        assert style.decorations == frozenset({Decoration.STRIKE})
        assert style.foreground == LINK_STYLE.foreground
        assert len(diagnostics) == 0

    def test_plain_clears_named_decorations(self, make_resolver):
        resolver, _ = make_resolver('{ (em italic underline bold) }')

        style = resolver.resolve(ItemKind.TEXT, mods("plain", "em"))

        assert style.decorations == frozenset()
        assert style.bold

    def test_references_keep_first_use_order(self, make_resolver):
        resolver, _ = make_resolver('{ (a bold) (b italic) }')

        assert resolver.references(mods("b", "bold", "ghost", "a", "b")) == ("b", "a")
