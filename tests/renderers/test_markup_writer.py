"""Tests for the canonical markup writer."""

import pytest

from fml_interpreter.builder import load
from fml_interpreter.renderers.markup_writer import MarkupWriter, format_number, quote, style_modifiers, to_markup
from fml_interpreter.styles.defaults import BASE_STYLE, LINK_STYLE
from fml_interpreter.styles.style_model import FontWeight

ROUND_TRIP_SOURCES = [
    '("a")(" b")(" c")',
    '(box "left" ("right") ({bold} "x"))',
    '(box ({(fill "2")} "x") ("abcde") ({(fill "4")} "y"))',
    '{ (note serif (fg "ff0000") underline) (warn note bold) } ({note} "n") ({warn (size "20")} "w")',
    '{ (text mono) (^ strike) } ("code") (^ "u" "link")',
    '{ (vbox bold (bg "white")) } ("x") (vbox {normal} ("y"))',
    '(inline "see " (^ {italic} "gopher://h/1" "the docs") (& {(scale "0.5")} "logo" "Logo") " now")',
    '(# "top") (vbox (box) (inline)) (^ "u") (& "x")',
    '("say \\"hi\\" and \\\\ ok")',
    '({bold}) (^ "u" "")',
    '(vbox (vbox (box (vbox ({(fill "1.25")} "deep")))))',
    '{ (em italic underline) } ({em plain strike} "x") (^ {plain} "u" "bare link")',
]


class TestHelpers:
    """Test suite for formatting helpers."""

    def test_quote(self):
        assert quote('a"b\\c') == '"a\\"b\\\\c"'
        assert quote("") == '""'

    @pytest.mark.parametrize("value, expected", [
        (2.0, "2"),
        (2.5, "2.5"),
        (12.0, "12"),
        (1 / 3, repr(1 / 3)),
    ])
    def test_format_number(self, value, expected):
        assert format_number(value) == expected

    def test_style_modifiers(self):
        load_style = load('({serif bold strike italic (fg "ff0000") (size "9")} "x")').root.children[0].style

        assert style_modifiers(load_style, BASE_STYLE) == [
            "serif", "bold", "strike", "italic", '(fg "ff0000")', '(size "9")',
        ]
        assert style_modifiers(BASE_STYLE, load_style)[:2] == ["sans", "normal"]
        assert style_modifiers(LINK_STYLE, LINK_STYLE) == []

    def test_cleared_decorations_are_written_as_plain(self):
        struck_link = load('(^ {plain strike} "u")').root.children[0].style

        assert style_modifiers(struck_link, LINK_STYLE) == ["plain", "strike"]
        assert style_modifiers(BASE_STYLE, LINK_STYLE) == ["plain", '(fg "303030")']


class TestMarkupWriter:
    """Test suite for MarkupWriter."""

    def test_text(self):
        assert to_markup(load('("a")')) == '({} "a")\n'

    def test_containers(self):
        markup = to_markup(load('(box {bold} ("x") (box))'))

        assert markup == '(box {bold}\n  ({} "x")\n  (box)\n)\n'

    def test_leaves(self):
        markup = to_markup(load('(^ {bold} "u" "t") (& {(scale "2")} "logo" "alt") (# "a") (^ "v")'))

        assert markup.splitlines() == [
            '(^ {bold} "u" "t")',
            '(& {(scale "2")} "logo" "alt")',
            '(# "a")',
            '(^ "v")',
        ]

    def test_styles_are_written_resolved(self):
        markup = to_markup(load('{ (note bold (fg "00ff00")) } ({note} "x")'))

        assert markup == '({bold (fg "00ff00")} "x")\n'

    def test_root_style_becomes_vbox_rule(self):
        document = load('{ (vbox bold) } ("x") (vbox ("y")) (vbox {normal} ("z"))')

        assert document.root.style.weight is FontWeight.BOLD
        assert to_markup(document).splitlines() == [
            "{ (vbox bold) }",
            '({} "x")',
            "(vbox",
            '  ({} "y")',
            ")",
            "(vbox {normal}",
            '  ({} "z")',
            ")",
        ]

    def test_indent(self):
        markup = MarkupWriter(indent="\t").write(load('(vbox ("x"))'))

        assert markup == '(vbox\n\t({} "x")\n)\n'

    def test_writer_is_reusable(self):
        writer = MarkupWriter()

        writer.write(load('{ (vbox bold) } (vbox ("x"))'))

        assert writer.write(load('(vbox ("x"))')) == '(vbox\n  ({} "x")\n)\n'

    def test_empty_page(self):
        assert to_markup(load("")) == ""

    @pytest.mark.parametrize("source", ROUND_TRIP_SOURCES)
    def test_round_trip(self, source):
        document = load(source)

        rebuilt = load(to_markup(document))

        assert rebuilt.root == document.root
        assert rebuilt.anchors == document.anchors
        assert rebuilt.diagnostics == []

    def test_output_is_stable(self):
        once = to_markup(load(ROUND_TRIP_SOURCES[3]))

        assert to_markup(load(once)) == once
