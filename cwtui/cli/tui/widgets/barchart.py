"""Fixed-height Unicode block bar chart for cost time series."""

from __future__ import annotations

import math
from typing import Sequence

from rich.style import Style
from rich.text import Text

from cwtui.cli.tui.theme import Theme
from cwtui.cost import ChartEntry

# Block elements ordered by height (1/8 to 8/8)
BAR_CHARS = "▁▂▃▄▅▆▇█"

CHART_ROWS = 8
Y_AXIS_WIDTH = 8  # "$" + up to 4 digits + " ┤"
BAR_WIDTH = 2
BAR_GAP = 1
BAR_SLOT = BAR_WIDTH + BAR_GAP
CHART_PADDING = 2

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
LABEL_BUDGET = 6


def nice_max(v: float) -> float:
    """Round up to 1, 2, 5 or 10 times a power of ten."""
    if v <= 0:
        return 1
    magnitude = 10 ** math.floor(math.log10(v))
    normalized = v / magnitude
    if normalized <= 1:
        return magnitude
    if normalized <= 2:
        return 2 * magnitude
    if normalized <= 5:
        return 5 * magnitude
    return 10 * magnitude


def format_dollar(v: float) -> str:
    if v == 0:
        return "$0"
    if v >= 10:
        return f"${v:.0f}"
    return f"${v:.1f}"


def short_label(label: str) -> str:
    """Compact x-axis label.

    2026-02-27 -> 2/27, 2026-01 -> Jan, 2026-W08 -> W8, anything else is cut to
    six characters.
    """
    if len(label) == 10 and label[4] == "-" and label[7] == "-":
        return f"{label[5:7].lstrip('0')}/{label[8:10].lstrip('0')}"
    if len(label) == 7 and label[4] == "-" and label[5:7].isdigit():
        month = int(label[5:7])
        if 1 <= month <= 12:
            return _MONTHS[month - 1]
    if len(label) >= 7 and label[4] == "-" and label[5] == "W":
        return "W" + (label[6:].lstrip("0") or "0")
    return label[:LABEL_BUDGET]


def render_bar_chart(entries: Sequence[ChartEntry], max_width: int, theme: Theme) -> Text:
    """Render the most recent entries that fit in `max_width` columns.

    Returns empty Text when there is nothing to draw or no room for a single bar;
    callers omit the chart in that case.
    """
    if not entries:
        return Text()
    available = max_width - Y_AXIS_WIDTH - CHART_PADDING
    if available < BAR_SLOT:
        return Text()

    max_bars = available // BAR_SLOT
    visible = list(entries[-max_bars:])

    max_cost = max(e.value for e in visible)
    if max_cost <= 0:
        max_cost = 1
    max_label = nice_max(max_cost)

    bar_style = theme.fg(theme.primary)
    axis_style = theme.fg(theme.muted)

    out = Text("\n")
    for row in range(CHART_ROWS, 0, -1):
        _y_axis_label(out, row, max_label, axis_style)
        _bar_row(out, row, visible, max_label, bar_style, axis_style)
        out.append("\n")
    _x_axis(out, visible, axis_style)
    return out


def _y_axis_label(out: Text, row: int, max_label: float, axis_style: Style) -> None:
    if row == CHART_ROWS:
        label = format_dollar(max_label)
    elif row == CHART_ROWS // 2:
        label = format_dollar(max_label / 2)
    elif row == 1:
        label = format_dollar(0)
    else:
        label = ""
    out.append(label.rjust(Y_AXIS_WIDTH - 2))
    out.append(" ┤", style=axis_style)


def _bar_row(out: Text, row: int, visible: list[ChartEntry], max_label: float, bar_style: Style, axis_style: Style) -> None:
    for entry in visible:
        height = entry.value / max_label * CHART_ROWS
        out.append(" ")
        if height >= row:
            out.append(BAR_CHARS[-1] * BAR_WIDTH, style=bar_style)
        elif height > row - 1:
            idx = min(int((height - (row - 1)) * len(BAR_CHARS)), len(BAR_CHARS) - 1)
            out.append(BAR_CHARS[idx] * BAR_WIDTH, style=bar_style)
        elif row == 1 and entry.value > 0:
            out.append(BAR_CHARS[0] * BAR_WIDTH, style=bar_style)
        elif row == 1:
            out.append("─" * BAR_WIDTH, style=axis_style)
        else:
            out.append(" " * BAR_WIDTH)


def _x_axis(out: Text, visible: list[ChartEntry], axis_style: Style) -> None:
    out.append(" " * Y_AXIS_WIDTH)
    out.append("─" * BAR_SLOT * len(visible), style=axis_style)
    out.append("\n")

    # Thin labels as the bar count grows so they don't collide
    label_every = 1
    if len(visible) > 15:
        label_every = 3
    elif len(visible) > 8:
        label_every = 2

    out.append(" " * Y_AXIS_WIDTH)
    col = 0
    for i, entry in enumerate(visible):
        if i % label_every == 0:
            label = short_label(entry.label)
            out.append(label)
            col += len(label)
        next_col = (i + 1) * BAR_SLOT
        if col < next_col:
            out.append(" " * (next_col - col))
            col = next_col
    out.append("\n")
