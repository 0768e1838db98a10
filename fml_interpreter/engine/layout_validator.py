"""
Layout Validator - consistency checks for a finished LayoutTree.

Checks:
- vbox children are stacked top to bottom at the parent's full width
- box children sit side by side on the parent's row
- children stay inside their parent vertically
- anchor offsets fall inside the page
- rows wider than their box (overflow) and degraded nodes are reported as
  warnings, not errors
"""

from typing import List

from .layout_tree import LayoutNode, LayoutTree, NodeKind

EPSILON = 0.01


class LayoutValidator:
    """Layout validator - checks the geometry of a LayoutTree."""

    def __init__(self, tree: LayoutTree):
        """
        Args:
            tree: LayoutTree to validate
        """
        self.tree = tree
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def validate(self) -> tuple[bool, List[str], List[str]]:
        """
        Run every check.

        Returns:
            Tuple (is_valid, errors, warnings)
        """
        self.errors.clear()
        self.warnings.clear()

        self._validate_root()
        for node in self.tree.iter_nodes():
            if node.kind is NodeKind.VBOX:
                self._validate_column(node)
            elif node.kind is NodeKind.BOX:
                self._validate_row(node)
            if node.degraded:
                self.warnings.append(f"{node.kind.value} node at y={node.frame.y:.1f} is degraded")
        self._validate_anchors()
        self._validate_links()

        is_valid = len(self.errors) == 0
        return is_valid, self.errors.copy(), self.warnings.copy()

    def _validate_root(self) -> None:
        root = self.tree.root
        if abs(root.frame.x) > EPSILON or abs(root.frame.y) > EPSILON:
            self.errors.append(f"root is not at the page origin ({root.frame.x}, {root.frame.y})")
        if root.kind is not NodeKind.PLACEHOLDER and abs(root.frame.width - self.tree.viewport.width) > EPSILON:
            self.errors.append(
                f"root width {root.frame.width} differs from viewport width {self.tree.viewport.width}"
            )

    def _validate_column(self, node: LayoutNode) -> None:
        cursor = node.frame.y
        for child in node.children:
            frame = child.frame
            if abs(frame.y - cursor) > EPSILON:
                self.errors.append(
                    f"{child.kind.value} in vbox starts at y={frame.y:.2f}, expected {cursor:.2f}"
                )
            if abs(frame.x - node.frame.x) > EPSILON:
                self.errors.append(f"{child.kind.value} in vbox is shifted to x={frame.x:.2f}")
            if child.kind not in (NodeKind.ANCHOR, NodeKind.PLACEHOLDER) and abs(frame.width - node.frame.width) > EPSILON:
                self.errors.append(
                    f"{child.kind.value} in vbox has width {frame.width:.2f}, expected {node.frame.width:.2f}"
                )
            cursor = frame.bottom
            self._validate_inside(node, child)

    def _validate_row(self, node: LayoutNode) -> None:
        cursor = node.frame.x
        for child in node.children:
            frame = child.frame
            if abs(frame.x - cursor) > EPSILON:
                self.errors.append(
                    f"{child.kind.value} in box starts at x={frame.x:.2f}, expected {cursor:.2f}"
                )
            if abs(frame.y - node.frame.y) > EPSILON:
                self.errors.append(f"{child.kind.value} in box is shifted to y={frame.y:.2f}")
            cursor = frame.right
            self._validate_inside(node, child)

        if cursor - node.frame.right > EPSILON:
            self.warnings.append(
                f"box row at y={node.frame.y:.1f} overflows by {cursor - node.frame.right:.2f}px"
            )

    def _validate_inside(self, parent: LayoutNode, child: LayoutNode) -> None:
        if child.frame.bottom - parent.frame.bottom > EPSILON:
            self.errors.append(
                f"{child.kind.value} ends at y={child.frame.bottom:.2f}, "
                f"below its {parent.kind.value} (y={parent.frame.bottom:.2f})"
            )

    def _validate_anchors(self) -> None:
        for name, offset in self.tree.anchors.items():
            if offset < -EPSILON or offset - self.tree.height > EPSILON:
                self.errors.append(f"anchor {name!r} offset {offset:.2f} is outside the page")

    def _validate_links(self) -> None:
        for target in self.tree.links:
            if not any(line.fragments for line in target.node.lines):
                self.warnings.append(f"link to {target.url!r} has no visible fragments")
