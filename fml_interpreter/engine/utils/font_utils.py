from __future__ import annotations

from ...styles.style_model import FontFamily, Style

FAMILY_BASE_FONTS = {
    FontFamily.SANS: "Helvetica",
    FontFamily.SERIF: "Times-Roman",
    FontFamily.MONO: "Courier",
}


def resolve_font_variant(family: FontFamily, bold: bool, italic: bool) -> str:
    base = FAMILY_BASE_FONTS[family]

    if base == "Helvetica":
        if bold and italic:
            return "Helvetica-BoldOblique"
        if bold:
            return "Helvetica-Bold"
        if italic:
            return "Helvetica-Oblique"
        return "Helvetica"

    if base == "Times-Roman":
        if bold and italic:
            return "Times-BoldItalic"
        if bold:
            return "Times-Bold"
        if italic:
            return "Times-Italic"
        return "Times-Roman"

    if bold and italic:
        return "Courier-BoldOblique"
    if bold:
        return "Courier-Bold"
    if italic:
        return "Courier-Oblique"
    return "Courier"


def font_for_style(style: Style) -> str:
    return resolve_font_variant(style.font_family, style.bold, style.italic)
