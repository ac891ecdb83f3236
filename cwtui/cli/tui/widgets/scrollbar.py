"""Proportional one-column scrollbar."""

from __future__ import annotations

from rich.text import Text

from cwtui.cli.tui.theme import Theme

SCROLLBAR_WIDTH = 2  # space + glyph
THUMB_GLYPH = "┃"
TRACK_GLYPH = "│"


def scrollbar_geometry(
    track_height: int, total_items: int, visible_items: int, scroll_percent: float
) -> tuple[int, int] | None:
    """Return (thumb_start, thumb_size), or None when everything fits.

    thumb_start + thumb_size never exceeds track_height.
    """
    if total_items <= visible_items or track_height < 1:
        return None
    thumb_size = max(1, track_height * visible_items // total_items)
    thumb_size = min(thumb_size, track_height)
    thumb_start = round(scroll_percent * (track_height - thumb_size))
    thumb_start = max(0, min(thumb_start, track_height - thumb_size))
    return thumb_start, thumb_size


def render_scrollbar(
    track_height: int,
    total_items: int,
    visible_items: int,
    scroll_percent: float,
    theme: Theme,
) -> list[Text]:
    """One styled cell per track row; empty when no scrollbar is needed."""
    geometry = scrollbar_geometry(track_height, total_items, visible_items, scroll_percent)
    if geometry is None:
        return []
    thumb_start, thumb_size = geometry
    thumb_style = theme.fg(theme.secondary)
    track_style = theme.fg(theme.muted)
    rows: list[Text] = []
    for i in range(track_height):
        if thumb_start <= i < thumb_start + thumb_size:
            rows.append(Text(THUMB_GLYPH, style=thumb_style))
        else:
            rows.append(Text(TRACK_GLYPH, style=track_style))
    return rows


def join_with_scrollbar(lines: list[Text], bar: list[Text], width: int) -> Text:
    """Lay `lines` out in a `width`-wide column with the scrollbar to its right."""
    out = Text()
    rows = max(len(lines), len(bar))
    for i in range(rows):
        line = lines[i].copy() if i < len(lines) else Text()
        if bar:
            line.truncate(width, pad=True)
            line.append(" ")
            if i < len(bar):
                line.append_text(bar[i])
        out.append_text(line)
        if i < rows - 1:
            out.append("\n")
    return out
