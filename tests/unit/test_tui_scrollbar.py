"""Unit tests for scrollbar geometry and rendering."""

import pytest
from rich.text import Text

from cwtui.cli.tui.theme import Theme
from cwtui.cli.tui.widgets.scrollbar import (
    THUMB_GLYPH,
    TRACK_GLYPH,
    join_with_scrollbar,
    render_scrollbar,
    scrollbar_geometry,
)

pytestmark = pytest.mark.unit


class TestScrollbarGeometry:
    """Tests for scrollbar_geometry."""

    def test_top_of_long_list(self):
        """Thumb is one row at the top when a tenth of the items are visible."""
        assert scrollbar_geometry(10, 100, 10, 0.0) == (0, 1)

    def test_bottom_of_long_list(self):
        """Thumb sits on the last row when fully scrolled."""
        assert scrollbar_geometry(10, 100, 10, 1.0) == (9, 1)

    def test_half_visible(self):
        """Thumb size is proportional to the visible fraction."""
        assert scrollbar_geometry(10, 20, 10, 0.0) == (0, 5)
        assert scrollbar_geometry(10, 20, 10, 1.0) == (5, 5)

    def test_everything_fits(self):
        """No scrollbar when all items are visible."""
        assert scrollbar_geometry(10, 10, 10, 0.0) is None
        assert scrollbar_geometry(10, 3, 10, 0.0) is None

    def test_no_track(self):
        """No scrollbar without a track row."""
        assert scrollbar_geometry(0, 100, 10, 0.5) is None

    @pytest.mark.parametrize("percent", [0.0, 0.1, 0.33, 0.7, 0.99, 1.0])
    def test_thumb_stays_inside_track(self, percent):
        """thumb_start + thumb_size never exceeds the track."""
        start, size = scrollbar_geometry(7, 23, 3, percent)
        assert start >= 0
        assert size >= 1
        assert start + size <= 7


class TestRenderScrollbar:
    """Tests for render_scrollbar and join_with_scrollbar."""

    def test_one_cell_per_track_row(self):
        rows = render_scrollbar(10, 20, 10, 0.0, Theme(color=False))
        assert len(rows) == 10
        assert [r.plain for r in rows].count(THUMB_GLYPH) == 5
        assert [r.plain for r in rows[5:]] == [TRACK_GLYPH] * 5

    def test_empty_when_fits(self):
        assert render_scrollbar(10, 5, 10, 0.0, Theme(color=False)) == []

    def test_join_pads_lines_to_width(self):
        out = join_with_scrollbar([Text("ab"), Text("abcdef")], [Text("┃"), Text("│")], 4)
        assert out.plain == "ab   ┃\nabcd │"

    def test_join_without_bar_leaves_lines(self):
        out = join_with_scrollbar([Text("one"), Text("two")], [], 10)
        assert out.plain == "one\ntwo"
