#!/usr/bin/env python3
"""
Example use of the high-level API.

Parses the sample page once, lays it out for two viewport widths and exports
it as HTML and canonical markup.
"""

from pathlib import Path

from fml_interpreter import MISSING, Page


def main():
    """Walk through the Page API."""
    here = Path(__file__).parent

    # 1. Open the page; the logo is not delivered, so it degrades to alt text
    print("Opening page...")
    page = Page.open(here / "welcome.fml", objects={"logo": MISSING})
    print(f"   Binary references: {page.referenced_names()}")
    print(f"   Missing objects: {page.missing_objects()}")

    # 2. Lay out for a wide and a narrow viewport
    for width in (800, 320):
        tree = page.layout(width, 600)
        print(f"Layout at {width}px: {tree.width:.0f}x{tree.height:.0f}")
        for name, offset in tree.anchors.items():
            print(f"   #{name} at y={offset:.1f}")
        for link in tree.links:
            print(f"   link {link.text!r} -> {link.url}")
        for warning in tree.warnings:
            print(f"   warning: {warning}")

    # 3. Export
    output_dir = here / "output"
    output_dir.mkdir(exist_ok=True)
    html_path = output_dir / "welcome.html"
    html_path.write_text(page.to_html(), encoding="utf-8")
    print(f"HTML saved: {html_path}")
    print("Canonical markup:")
    print(page.to_markup())


if __name__ == "__main__":
    main()
