"""
Command-line interface for the FML interpreter.

Usage:
    fml check page.fml
    fml layout page.fml --width 800 --height 600 --json
    fml layout page.fml --object logo=logo.png
    fml html page.fml --output page.html
    fml format page.fml
    fml version
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Dict, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from .exceptions import FmlInterpreterError
from .utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="fml",
        description="FML interpreter - parse, lay out and export FML pages",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  fml check page.fml
  fml layout page.fml --width 800 --height 600
  fml layout page.fml --json --shaper fixed
  fml html page.fml -o page.html
  fml format page.fml
  fml version
        """,
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    check_parser = subparsers.add_parser("check", help="Parse and build a page, report diagnostics")
    check_parser.add_argument("input", help="Input markup file")

    layout_parser = subparsers.add_parser("layout", help="Lay out a page and print the layout tree")
    layout_parser.add_argument("input", help="Input markup file")
    layout_parser.add_argument("--width", type=float, default=800.0, help="Viewport width in pixels (default: 800)")
    layout_parser.add_argument("--height", type=float, default=600.0, help="Viewport height in pixels (default: 600)")
    layout_parser.add_argument("--dpi", type=float, default=96.0, help="Resolution (default: 96)")
    layout_parser.add_argument("--json", action="store_true", help="Output as JSON")
    layout_parser.add_argument(
        "--shaper",
        choices=["reportlab", "fixed"],
        default="reportlab",
        help="Text measurement backend (default: reportlab)"
    )
    layout_parser.add_argument(
        "--object",
        action="append",
        default=[],
        metavar="NAME=PATH",
        help="Binary object for a reference; may be repeated"
    )

    html_parser = subparsers.add_parser("html", help="Export a page as HTML")
    html_parser.add_argument("input", help="Input markup file")
    html_parser.add_argument("-o", "--output", help="Output file path (default: stdout)")

    format_parser = subparsers.add_parser("format", help="Print a page as canonical markup")
    format_parser.add_argument("input", help="Input markup file")

    subparsers.add_parser("version", help="Show version information")

    return parser


def _read_objects(entries: List[str]) -> Dict[str, bytes]:
    objects: Dict[str, bytes] = {}
    for entry in entries:
        name, sep, path = entry.partition("=")
        if not sep or not name:
            raise ValueError(f"expected NAME=PATH, got {entry!r}")
        objects[name] = Path(path).read_bytes()
    return objects


def _open_page(args, console: Console, objects: Optional[Dict[str, bytes]] = None):
    from .api import Page

    input_path = Path(args.input)
    if not input_path.exists():
        console.print(f"[red]Error:[/red] File not found: {escape(str(input_path))}")
        return None
    return Page.open(input_path, objects)


def _print_diagnostics(console: Console, diagnostics) -> None:
    for diagnostic in diagnostics:
        console.print(f"[yellow]warning[/yellow] {escape(str(diagnostic))}", highlight=False)


def cmd_check(args, console: Console) -> int:
    """Handle check command."""
    page = _open_page(args, console)
    if page is None:
        return 1
    _print_diagnostics(console, page.diagnostics)
    document = page.document
    console.print(
        f"OK: {sum(1 for _ in document.iter_nodes())} nodes, {len(document.anchors)} anchors, "
        f"{len(document.referenced_names())} binary references, {len(page.diagnostics)} warnings"
    )
    return 0


def _layout_tree_view(tree) -> Tree:
    def label(node) -> str:
        frame = node.frame
        text = f"[bold]{node.kind.value}[/bold] ({frame.x:.1f}, {frame.y:.1f}) {frame.width:.1f}x{frame.height:.1f}"
        if node.degraded:
            text += " [red]degraded[/red]"
        if node.lines and node.kind.value != "inline":
            preview = " / ".join(line.text for line in node.lines)
            if preview:
                text += f" [dim]{escape(preview[:60])}[/dim]"
        return text

    view = Tree(label(tree.root))
    stack = [(tree.root, view)]
    while stack:
        node, branch = stack.pop()
        for child in node.children:
            stack.append((child, branch.add(label(child))))
    return view


def cmd_layout(args, console: Console) -> int:
    """Handle layout command."""
    from .engine.text_metrics import FixedAdvanceShaper, ReportLabShaper

    objects = _read_objects(args.object)
    page = _open_page(args, console, objects)
    if page is None:
        return 1

    shaper = FixedAdvanceShaper() if args.shaper == "fixed" else ReportLabShaper()
    tree = page.layout(args.width, args.height, args.dpi, shaper)

    if args.json:
        print(json.dumps(tree.to_dict(), indent=2, ensure_ascii=False))
        return 0

    out = Console()
    out.print(_layout_tree_view(tree))
    out.print(f"Size: {tree.width:.1f}x{tree.height:.1f} px")
    for name, offset in tree.anchors.items():
        out.print(f"  #{name} -> y={offset:.1f}", markup=False)
    for link in tree.links:
        out.print(f"  {link.text} -> {link.url}", markup=False)
    _print_diagnostics(console, tree.warnings)
    return 0


def cmd_html(args, console: Console) -> int:
    """Handle html command."""
    from .renderers.html_renderer import HTMLRenderer

    page = _open_page(args, console)
    if page is None:
        return 1
    renderer = HTMLRenderer()
    if args.output:
        path = renderer.render_to_file(page.document, args.output)
        console.print(f"Saved: {path}")
    else:
        sys.stdout.write(renderer.render(page.document))
    return 0


def cmd_format(args, console: Console) -> int:
    """Handle format command."""
    page = _open_page(args, console)
    if page is None:
        return 1
    sys.stdout.write(page.to_markup())
    return 0


def cmd_version(args=None, console: Optional[Console] = None) -> int:
    """Handle version command."""
    from .version import __version__
    print(f"fml-interpreter v{__version__}")
    print("FML page markup parser and layout engine")
    return 0


COMMANDS = {
    "check": cmd_check,
    "layout": cmd_layout,
    "html": cmd_html,
    "format": cmd_format,
    "version": cmd_version,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging("DEBUG" if args.verbose else "WARNING")

    if args.command is None:
        parser.print_help()
        return 0

    console = Console(stderr=True)
    try:
        return COMMANDS[args.command](args, console)
    except FmlInterpreterError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}", highlight=False)
        return 1
    except (OSError, ValueError) as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}", highlight=False)
        return 1


if __name__ == "__main__":
    sys.exit(main())
