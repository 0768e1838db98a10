"""Tests for greedy line breaking."""

from fml_interpreter.engine.layout_tree import FragmentKind
from fml_interpreter.engine.line_breaker import (
    FlowItem,
    WrappedLine,
    break_text_into_lines,
    flow_items,
    run_to_items,
    widest_word,
)
from fml_interpreter.styles.defaults import BASE_STYLE


def make_measure(shaper):
    def measure(text, style):
        return shaper.measure(text, style, 96.0)
    return measure


def word(width, space_before=0.0, height=20.0):
    return FlowItem(FragmentKind.WORD, width, height, space_before=space_before)


class TestBreakTextIntoLines:
    """Test suite for break_text_into_lines."""

    def test_fits_on_one_line(self, shaper):
        lines = break_text_into_lines("hello world", BASE_STYLE, 200, make_measure(shaper))

        assert lines == [WrappedLine("hello world", 110)]

    def test_wraps_greedily(self, shaper):
        lines = break_text_into_lines("aa bb cc dd", BASE_STYLE, 50, make_measure(shaper))

        assert [line.text for line in lines] == ["aa bb", "cc dd"]
        assert [line.width for line in lines] == [50, 50]

    def test_collapses_whitespace(self, shaper):
        lines = break_text_into_lines("  a \n\t b  ", BASE_STYLE, 200, make_measure(shaper))

        assert lines == [WrappedLine("a b", 30)]

    def test_long_word_gets_its_own_line(self, shaper):
        lines = break_text_into_lines("a abcdefgh b", BASE_STYLE, 40, make_measure(shaper))

        assert [line.text for line in lines] == ["a", "abcdefgh", "b"]
        assert lines[1].width == 80

    def test_empty_text(self, shaper):
        assert break_text_into_lines("   ", BASE_STYLE, 100, make_measure(shaper)) == [WrappedLine("", 0.0)]

    def test_widest_word(self, shaper):
        measure = make_measure(shaper)

        assert widest_word("a abcd ab", BASE_STYLE, measure) == 40
        assert widest_word("", BASE_STYLE, measure) == 0.0


class TestRunToItems:
    """Test suite for run_to_items."""

    def test_words_and_gaps(self, shaper):
        items, trailing = run_to_items("ab cde", BASE_STYLE, make_measure(shaper), 3, False)

        assert [(item.text, item.width, item.space_before) for item in items] == [("ab", 20, 0), ("cde", 30, 10)]
        assert all(item.owner == 3 for item in items)
        assert not trailing

    def test_leading_and_trailing_space(self, shaper):
        items, trailing = run_to_items(" ab ", BASE_STYLE, make_measure(shaper), 0, False)

        assert items[0].space_before == 10
        assert trailing

    def test_pending_space_carries_over(self, shaper):
        items, _ = run_to_items("ab", BASE_STYLE, make_measure(shaper), 0, True)

        assert items[0].space_before == 10

    def test_whitespace_only_run(self, shaper):
        measure = make_measure(shaper)

        assert run_to_items("  ", BASE_STYLE, measure, 0, False) == ([], True)
        assert run_to_items("", BASE_STYLE, measure, 0, False) == ([], False)
        assert run_to_items("", BASE_STYLE, measure, 0, True) == ([], True)


class TestFlowItems:
    """Test suite for flow_items."""

    def test_single_line(self):
        [line] = flow_items([word(20), word(30, 10), word(10, 10)], 100)

        assert line.offsets == [0, 30, 70]
        assert line.width == 80
        assert line.height == 20

    def test_breaks_and_drops_leading_gap(self):
        lines = flow_items([word(40), word(40, 10), word(30, 10)], 100)

        assert [len(line.items) for line in lines] == [2, 1]
        assert lines[1].offsets == [0]
        assert lines[1].width == 30

    def test_zero_width_items_never_break(self):
        anchor = FlowItem(FragmentKind.ANCHOR, 0.0, 0.0)

        [line] = flow_items([word(100), anchor], 100)

        assert line.offsets == [0, 100]

    def test_oversized_item_stays_alone(self):
        lines = flow_items([word(10), word(500, 10), word(10, 10)], 100)

        assert [[item.width for item in line.items] for line in lines] == [[10], [500], [10]]

    def test_line_height_is_tallest_item(self):
        [line] = flow_items([word(10), FlowItem(FragmentKind.IMAGE, 10, 45)], 100)

        assert line.height == 45

    def test_no_items(self):
        assert flow_items([], 100) == []
