"""Tests for the HTML renderer."""

from dataclasses import replace

import pytest

from fml_interpreter.builder import load
from fml_interpreter.exceptions import RenderingError
from fml_interpreter.renderers.html_renderer import HTMLRenderer, HTMLRendererConfig, style_declarations, to_html
from fml_interpreter.styles.defaults import BASE_STYLE, LINK_STYLE
from fml_interpreter.styles.style_model import Color, Decoration, FontFamily


class TestStyleDeclarations:
    """Test suite for style_declarations."""

    def test_no_difference(self):
        assert style_declarations(BASE_STYLE, BASE_STYLE) == []

    def test_every_attribute(self):
        style = replace(
            BASE_STYLE,
            font_family=FontFamily.MONO,
            decorations=frozenset({Decoration.ITALIC}),
            foreground=Color(255, 0, 0),
            background=Color(0, 0, 255),
            size=14.0,
            fill=2.0,
        )

        assert style_declarations(style, BASE_STYLE) == [
            "font-family: monospace;",
            "font-style: italic;",
            "color: #ff0000;",
            "background-color: #0000ff;",
            "font-size: 14pt;",
            "flex-grow: 2;",
        ]

    def test_text_decorations_combine(self):
        struck_link = replace(LINK_STYLE, decorations=LINK_STYLE.decorations | {Decoration.STRIKE})

        assert style_declarations(struck_link, LINK_STYLE) == ["text-decoration: underline line-through;"]
        assert style_declarations(LINK_STYLE, LINK_STYLE) == []

    def test_cleared_decorations(self):
        plain_link = replace(LINK_STYLE, decorations=frozenset())
        upright = replace(BASE_STYLE, decorations=frozenset())

        assert style_declarations(plain_link, LINK_STYLE) == ["text-decoration: none;"]
        assert style_declarations(upright, replace(BASE_STYLE, decorations=frozenset({Decoration.ITALIC}))) == [
            "font-style: normal;",
        ]


class TestHTMLRenderer:
    """Test suite for HTMLRenderer."""

    def test_page_skeleton(self):
        html = to_html(load('("hello")'), HTMLRendererConfig(title="A & B", html_lang="pl"))

        assert html.startswith("<!DOCTYPE html>\n")
        assert '<html lang="pl">' in html
        assert "<title>A &amp; B</title>" in html
        assert "max-width: 850px;" in html
        assert "scrollIntoView" in html
        assert html.endswith("</body>\n</html>\n")

    def test_elements(self):
        html = to_html(load(
            '(# "top") (box ({bold} "x") (inline "a" (^ "gopher://h/" "Home")))'
            ' (& "logo" "Our logo")'
        ))

        assert '    <div style="flex-direction: column;">\n' in html
        assert '      <div id="top" style="display: none;"></div>\n' in html
        assert '      <div>\n' in html
        assert '        <span style="font-weight: bold;">x</span>\n' in html
        assert '        <span>\n' in html
        assert '          <a href="gopher://h/">Home</a>\n' in html
        assert '      <img src="logo" alt="Our logo">\n' in html

    def test_text_is_escaped(self):
        html = to_html(load('("<b> & co")'))

        assert "<span>&lt;b&gt; &amp; co</span>" in html

    def test_fill_becomes_flex_grow(self):
        html = to_html(load('(box ({(fill "3")} "wide") ("narrow"))'))

        assert '<span style="flex-grow: 3;">wide</span>' in html

    def test_style_block_is_carried_over(self):
        html = to_html(load('{ (note (fg "ff0000") italic) (^ bold) } ({note} "x")'))

        assert ".note {\n    font-style: italic;\n    color: #ff0000;\n}\n" in html
        assert "a {\n    font-weight: bold;\n}\n" in html

    def test_named_styles_become_classes(self):
        html = to_html(load('{ (note italic) (wide (fill "2")) } (box {wide note} ({note ghost} "x"))'))

        assert '<div class="wide note" style="font-style: italic; flex-grow: 2;">' in html
        assert '<span class="note" style="font-style: italic;">x</span>' in html
        assert "ghost" not in html

    def test_custom_indent(self):
        html = HTMLRenderer(HTMLRendererConfig(indent="\t")).render(load('("x")'))

        assert "\t\t\t<span>x</span>\n" in html

    def test_render_to_file(self, temp_dir):
        path = HTMLRenderer().render_to_file(load('("x")'), temp_dir / "page.html")

        assert path.read_text(encoding="utf-8").startswith("<!DOCTYPE html>")

    def test_render_to_unwritable_path(self, temp_dir):
        with pytest.raises(RenderingError):
            HTMLRenderer().render_to_file(load('("x")'), temp_dir)
