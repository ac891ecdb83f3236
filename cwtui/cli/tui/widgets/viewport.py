"""Scrollable text pane with soft wrapping."""

from __future__ import annotations

from rich.cells import cell_len
from rich.text import Text

from cwtui.cli.tui.keys import KEY_DOWN, KEY_PGDOWN, KEY_PGUP, KEY_UP
from cwtui.cli.tui.theme import Theme
from cwtui.cli.tui.widgets.scrollbar import SCROLLBAR_WIDTH, join_with_scrollbar, render_scrollbar


def _wrap_offsets(plain: str, width: int) -> list[int]:
    """Character offsets where a new row starts so no row exceeds `width` cells."""
    offsets: list[int] = []
    column = 0
    for index, char in enumerate(plain):
        char_width = cell_len(char)
        if column and column + char_width > width:
            offsets.append(index)
            column = 0
        column += char_width
    return offsets


def soft_wrap(text: Text, width: int) -> list[Text]:
    """Split on newlines, then break each line at `width` terminal columns."""
    width = max(1, width)
    lines: list[Text] = []
    for line in text.split("\n", allow_blank=True):
        if line.cell_len <= width:
            lines.append(line)
            continue
        lines.extend(line.divide(_wrap_offsets(line.plain, width)))
    return lines


class Viewport:
    """Window of `height` lines over wrapped content.

    The width passed in excludes the scrollbar column; `for_screen` does that
    arithmetic from full terminal dimensions.
    """

    def __init__(self, width: int = 1, height: int = 1) -> None:
        self.width = max(1, width)
        self.height = max(1, height)
        self.y_offset = 0
        self._source = Text()
        self._lines: list[Text] = []

    @classmethod
    def for_screen(cls, width: int, height: int, chrome_lines: int) -> "Viewport":
        viewport = cls()
        viewport.fit_screen(width, height, chrome_lines)
        return viewport

    def fit_screen(self, width: int, height: int, chrome_lines: int) -> None:
        """Size to the terminal minus header/footer lines and the scrollbar column."""
        self.set_size(max(1, width - SCROLLBAR_WIDTH), max(1, height - chrome_lines))

    # --- Content ---

    def set_content(self, content: Text | str) -> None:
        self._source = Text(content) if isinstance(content, str) else content
        self._lines = soft_wrap(self._source, self.width)
        self._clamp()

    @property
    def content(self) -> Text:
        return self._source

    @property
    def plain(self) -> str:
        return self._source.plain

    def set_size(self, width: int, height: int) -> None:
        self.width = max(1, width)
        self.height = max(1, height)
        self._lines = soft_wrap(self._source, self.width)
        self._clamp()

    def total_lines(self) -> int:
        return len(self._lines)

    def visible_lines(self) -> list[Text]:
        return self._lines[self.y_offset : self.y_offset + self.height]

    # --- Scrolling ---

    def _max_offset(self) -> int:
        return max(0, len(self._lines) - self.height)

    def _clamp(self) -> None:
        self.y_offset = max(0, min(self.y_offset, self._max_offset()))

    def scroll_percent(self) -> float:
        """Fraction scrolled in [0, 1]; 1.0 when everything fits."""
        if self.height >= len(self._lines):
            return 1.0
        return self.y_offset / self._max_offset()

    def at_bottom(self) -> bool:
        return self.y_offset >= self._max_offset()

    def line_up(self, n: int = 1) -> None:
        self.y_offset -= n
        self._clamp()

    def line_down(self, n: int = 1) -> None:
        self.y_offset += n
        self._clamp()

    def page_up(self) -> None:
        self.line_up(self.height)

    def page_down(self) -> None:
        self.line_down(self.height)

    def goto_top(self) -> None:
        self.y_offset = 0

    def goto_bottom(self) -> None:
        self.y_offset = self._max_offset()

    def handle_key(self, key: str) -> bool:
        """Apply a scroll key; returns False when the key is not a scroll key."""
        if key in (KEY_UP, "k"):
            self.line_up()
        elif key in (KEY_DOWN, "j"):
            self.line_down()
        elif key in (KEY_PGUP, "b"):
            self.page_up()
        elif key in (KEY_PGDOWN, "f", " "):
            self.page_down()
        elif key == "u":
            self.line_up(max(1, self.height // 2))
        elif key == "d":
            self.line_down(max(1, self.height // 2))
        elif key == "home":
            self.goto_top()
        elif key == "end":
            self.goto_bottom()
        else:
            return False
        return True

    # --- Rendering ---

    def render(self, theme: Theme) -> Text:
        lines = self.visible_lines()
        bar = render_scrollbar(self.height, self.total_lines(), self.height, self.scroll_percent(), theme)
        return join_with_scrollbar(lines, bar, self.width)
