"""Unit tests for the scrollable viewport."""

import pytest
from rich.text import Text

from cwtui.cli.tui.theme import Theme
from cwtui.cli.tui.widgets.viewport import Viewport, soft_wrap

pytestmark = pytest.mark.unit


def _viewport(lines: int, height: int = 3, width: int = 10) -> Viewport:
    viewport = Viewport(width, height)
    viewport.set_content("\n".join(f"line{i}" for i in range(lines)))
    return viewport


class TestSoftWrap:
    """Tests for soft_wrap."""

    def test_breaks_long_lines(self):
        lines = soft_wrap(Text("abcdefghij"), 4)
        assert [line.plain for line in lines] == ["abcd", "efgh", "ij"]

    def test_keeps_blank_lines(self):
        lines = soft_wrap(Text("a\n\nb"), 10)
        assert [line.plain for line in lines] == ["a", "", "b"]

    def test_zero_width_is_treated_as_one(self):
        assert [line.plain for line in soft_wrap(Text("ab"), 0)] == ["a", "b"]

    def test_wide_characters_wrap_by_column(self):
        lines = soft_wrap(Text("日本語日本語日本語日本語"), 10)
        assert [line.plain for line in lines] == ["日本語日本", "語日本語日", "本語"]
        assert all(line.cell_len <= 10 for line in lines)

    def test_wide_character_never_straddles_the_edge(self):
        lines = soft_wrap(Text("ab日c"), 3)
        assert [line.plain for line in lines] == ["ab", "日c"]


class TestViewportScrolling:
    """Tests for offsets, clamping and scroll percentage."""

    def test_initial_window(self):
        viewport = _viewport(5)
        assert [line.plain for line in viewport.visible_lines()] == ["line0", "line1", "line2"]
        assert viewport.scroll_percent() == 0.0

    def test_scroll_is_clamped(self):
        viewport = _viewport(5)
        viewport.line_down(10)
        assert viewport.y_offset == 2
        assert viewport.at_bottom()
        assert viewport.scroll_percent() == 1.0
        viewport.line_up(10)
        assert viewport.y_offset == 0

    def test_content_that_fits_reports_full(self):
        viewport = _viewport(2)
        assert viewport.scroll_percent() == 1.0
        viewport.line_down()
        assert viewport.y_offset == 0

    def test_shrinking_content_clamps_offset(self):
        viewport = _viewport(10)
        viewport.goto_bottom()
        viewport.set_content("short")
        assert viewport.y_offset == 0

    def test_resize_rewraps(self):
        viewport = Viewport(10, 5)
        viewport.set_content("x" * 20)
        assert viewport.total_lines() == 2
        viewport.set_size(5, 5)
        assert viewport.total_lines() == 4

    def test_fit_screen_subtracts_chrome_and_scrollbar(self):
        viewport = Viewport.for_screen(80, 24, 4)
        assert (viewport.width, viewport.height) == (78, 20)

    def test_fit_screen_never_below_one(self):
        viewport = Viewport.for_screen(1, 2, 4)
        assert (viewport.width, viewport.height) == (1, 1)


class TestViewportKeys:
    """Tests for handle_key."""

    @pytest.mark.parametrize(
        "key,expected",
        [("j", 1), ("down", 1), ("f", 3), ("pgdown", 3), (" ", 3), ("d", 1), ("end", 7)],
    )
    def test_scroll_keys(self, key, expected):
        viewport = _viewport(10)
        assert viewport.handle_key(key) is True
        assert viewport.y_offset == expected

    def test_up_keys_from_bottom(self):
        viewport = _viewport(10)
        viewport.goto_bottom()
        viewport.handle_key("k")
        assert viewport.y_offset == 6
        viewport.handle_key("b")
        assert viewport.y_offset == 3
        viewport.handle_key("home")
        assert viewport.y_offset == 0

    def test_other_keys_are_not_consumed(self):
        viewport = _viewport(10)
        assert viewport.handle_key("x") is False
        assert viewport.y_offset == 0


class TestViewportRender:
    """Tests for render."""

    def test_scrollbar_drawn_when_overflowing(self):
        out = _viewport(10).render(Theme(color=False)).plain.split("\n")
        assert len(out) == 3
        assert out[0].startswith("line0")
        assert out[0].endswith("┃")

    def test_no_scrollbar_when_fitting(self):
        out = _viewport(2).render(Theme(color=False))
        assert out.plain == "line0\nline1"

    def test_wide_characters_survive_scrollbar_column(self):
        viewport = Viewport(width=10, height=2)
        viewport.set_content("日本語日本語日本語日本語\nb\nc\nd")
        assert viewport.total_lines() == 6
        out = viewport.render(Theme(color=False)).plain.split("\n")
        assert out[0] == "日本語日本 ┃"
        assert out[1] == "語日本語日 │"
