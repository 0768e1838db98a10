"""Tests for the layout validator."""

import pytest

from fml_interpreter.builder import load
from fml_interpreter.engine.geometry import Rect
from fml_interpreter.engine.layout_engine import layout
from fml_interpreter.engine.layout_validator import LayoutValidator


@pytest.fixture
def tree_for(shaper):
    def factory(source, width=300, objects=None):
        return layout(load(source), width, 400, shaper=shaper, objects=objects)
    return factory


class TestLayoutValidator:
    """Test suite for LayoutValidator."""

    def test_valid_layout(self, tree_for):
        tree = tree_for(
            '(# "top") ("title")'
            ' (box ({(fill "1")} "left column") (vbox ({bold} "a") (^ "u" "link")) ({(fill "2")} "right"))'
            ' (inline "some " ({bold} "bold") " text")'
        )

        is_valid, errors, warnings = LayoutValidator(tree).validate()

        assert is_valid, errors
        assert errors == []
        assert warnings == []

    def test_slack_layout_is_valid(self, tree_for):
        tree = tree_for('(box (vbox ({(fill "1")} "a") ("b")) (vbox ({bold} "c") ("d") ({bold} "e")))')

        is_valid, errors, _ = LayoutValidator(tree).validate()

        assert is_valid, errors

    def test_overflow_is_a_warning(self, tree_for):
        tree = tree_for('(box ("abcdefghijklmno") ({bold} "abcdefghijklmno"))', width=100)

        is_valid, errors, warnings = LayoutValidator(tree).validate()

        assert is_valid, errors
        assert any("overflows" in warning for warning in warnings)

    def test_degraded_nodes_are_warnings(self, tree_for):
        tree = tree_for('(& "missing" "alt")')

        is_valid, _, warnings = LayoutValidator(tree).validate()

        assert is_valid
        assert warnings == ["alt-text node at y=0.0 is degraded"]

    def test_detects_shifted_child(self, tree_for):
        tree = tree_for('("a") ({bold} "b")')
        second = tree.root.children[1]
        second.frame = second.frame.translated(0, 5)

        is_valid, errors, _ = LayoutValidator(tree).validate()

        assert not is_valid
        assert any("expected 20.00" in error for error in errors)

    def test_detects_child_below_parent(self, tree_for):
        tree = tree_for('(box ({bold} "a") ("b"))')
        child = tree.root.children[0].children[0]
        child.frame = Rect(child.frame.x, child.frame.y, child.frame.width, 500)

        is_valid, errors, _ = LayoutValidator(tree).validate()

        assert not is_valid
        assert any("below its box" in error for error in errors)

    def test_detects_root_width_mismatch(self, tree_for):
        tree = tree_for('("a")')
        tree.root.frame = Rect(0, 0, 10, tree.root.frame.height)

        is_valid, errors, _ = LayoutValidator(tree).validate()

        assert not is_valid
        assert any("viewport width" in error for error in errors)

    def test_detects_anchor_outside_page(self, tree_for):
        tree = tree_for('(# "a") ("x")')
        tree.anchors["a"] = 1000.0

        is_valid, errors, _ = LayoutValidator(tree).validate()

        assert not is_valid
        assert errors == ["anchor 'a' offset 1000.00 is outside the page"]

    def test_validate_is_repeatable(self, tree_for):
        validator = LayoutValidator(tree_for('(& "missing")'))

        assert validator.validate() == validator.validate()
