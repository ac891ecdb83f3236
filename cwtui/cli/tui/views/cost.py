"""Usage & Costs: ccusage reports per time window, with a bar chart."""

from __future__ import annotations

from typing import Optional

import structlog
from rich.text import Text

from cwtui.cli.tui.context import TuiConfig
from cwtui.cli.tui.keys import KEY_LEFT, KEY_RIGHT, KEY_SHIFT_TAB, KEY_TAB, is_back, is_quit
from cwtui.cli.tui.loader import GenerationTracker, LoadState, load_task, unique_tag
from cwtui.cli.tui.messages import ContentLoaded, KeyPress, Message
from cwtui.cli.tui.tasks import CancelToken, Task
from cwtui.cli.tui.theme import Theme
from cwtui.cli.tui.views.base import BaseView, Frame
from cwtui.cli.tui.widgets.barchart import render_bar_chart
from cwtui.cli.tui.widgets.viewport import Viewport
from cwtui.cost import CostClient, parse_cost_json
from cwtui.errors import CwtuiError, TaskCancelled

logger = structlog.get_logger(__name__)

COST_TABS: tuple[tuple[str, str], ...] = (
    ("Daily", "daily"),
    ("Weekly", "weekly"),
    ("Monthly", "monthly"),
    ("Session", "session"),
    ("Blocks", "blocks"),
)

HEADER_LINES = 4  # banner + tab bar + separator + blank
FOOTER_LINES = 2  # blank + help
MIN_CHART_WIDTH = 40


def load_cost_report(client: CostClient, subcommand: str, width: int, theme: Theme, token: CancelToken) -> Text:
    """Chart from `<sub> --json` followed by the `<sub>` table.

    The two ccusage runs are sequential. A chart failure only drops the chart; a
    table failure fails the load.
    """
    chart = Text()
    try:
        entries = parse_cost_json(subcommand, client.capture([subcommand, "--json"], cancel=token))
        if entries:
            chart = render_bar_chart(entries, max(MIN_CHART_WIDTH, width), theme)
    except TaskCancelled:
        raise
    except (CwtuiError, ValueError, TypeError) as exc:
        logger.info("No chart for %s: %s", subcommand, exc)
    if token.cancelled:
        raise TaskCancelled(subcommand)

    table = client.capture([subcommand], cancel=token)
    content = Text()
    if chart.plain:
        content.append_text(chart)
        content.append("\n")
    content.append_text(Text.from_ansi(table))
    return content


class CostView(BaseView):
    def __init__(self, config: TuiConfig, client: CostClient | None = None) -> None:
        super().__init__()
        self.config = config
        self.client = client or CostClient(config.runner, config.settings.ccusage_runtime)
        self.tracker = GenerationTracker()
        self.tag_prefix = unique_tag("cost")
        self.active_tab = 0
        self.state = LoadState.LOADING
        self.error: str | None = None
        self.viewport = Viewport()

    @property
    def subcommand(self) -> str:
        return COST_TABS[self.active_tab][1]

    def tag_for(self, tab: int) -> str:
        return f"{self.tag_prefix}:{COST_TABS[tab][1]}"

    def initialize(self) -> Optional[Task]:
        generation, token = self.tracker.begin()
        return self._load(generation, token)

    def _load(self, generation: int, token: CancelToken) -> Task:
        client, subcommand, theme = self.client, self.subcommand, self.config.theme
        return load_task(
            self.tag_for(self.active_tab),
            generation,
            lambda: load_cost_report(client, subcommand, self.width, theme, token),
            token,
        )

    def switch_tab(self, tab: int) -> list[Task]:
        if tab == self.active_tab and self.state is not LoadState.LOADING:
            return []
        generation, token = self.tracker.advance()
        self.active_tab = tab
        self.state = LoadState.LOADING
        self.error = None
        return [self._load(generation, token)]

    def on_resize(self) -> None:
        self.viewport.fit_screen(self.width, self.height, HEADER_LINES + FOOTER_LINES)

    def handle(self, msg: Message) -> list[Task]:
        if isinstance(msg, ContentLoaded):
            self.accept(msg)
            return []
        if not isinstance(msg, KeyPress):
            return []
        key = msg.key
        if is_quit(key) or is_back(key):
            self.tracker.cancel()
            return self.pop()
        if key in ("1", "2", "3", "4", "5"):
            return self.switch_tab(int(key) - 1)
        if key in (KEY_TAB, KEY_RIGHT, "l"):
            return self.switch_tab((self.active_tab + 1) % len(COST_TABS))
        if key in (KEY_SHIFT_TAB, KEY_LEFT, "h"):
            return self.switch_tab((self.active_tab - 1) % len(COST_TABS))
        if self.state is LoadState.READY:
            if key == "g":
                self.viewport.goto_top()
            elif key == "G":
                self.viewport.goto_bottom()
            else:
                self.viewport.handle_key(key)
        return []

    def accept(self, msg: ContentLoaded) -> bool:
        if msg.tag != self.tag_for(self.active_tab) or not self.tracker.is_current(msg.generation):
            logger.debug("Dropping stale cost result %s gen=%d", msg.tag, msg.generation)
            return False
        if msg.error is not None:
            self.state = LoadState.ERROR
            self.error = msg.error
            return True
        self.state = LoadState.READY
        self.error = None
        self.viewport.set_content(msg.payload)
        self.viewport.goto_top()
        return True

    def render(self) -> Frame:
        theme = self.config.theme
        out = theme.section_banner("Usage & Costs")
        out.append_text(self.render_tabs())
        out.append("\n")

        if self.state is LoadState.LOADING:
            out.append("\n  Loading...")
            return Frame(out)
        if self.state is LoadState.ERROR:
            out.append_text(theme.error_block(self.error or "unknown error"))
            return Frame(out)

        out.append_text(self.viewport.render(theme))
        out.append("\n")
        pct = Text(f"{round(self.viewport.scroll_percent() * 100)}%", style=theme.help_key)
        pairs = [
            ("1-5", "switch"),
            ("tab/shift+tab", "cycle"),
            ("j/k", "scroll"),
            ("pgup/pgdn", "page"),
            ("g/G", "top/bottom"),
            ("esc", "back"),
        ]
        out.append_text(theme.help_line(pairs, pct))
        return Frame(out)

    def render_tabs(self) -> Text:
        theme = self.config.theme
        line = Text("  ")
        for i, (label, _) in enumerate(COST_TABS):
            style = theme.selected if i == self.active_tab else theme.fg(theme.muted)
            line.append(f"[{i + 1}] {label}", style=style)
            line.append("  ")
        line.append("\n")
        line.append("  " + "─" * max(1, self.width - 4), style=theme.fg(theme.muted))
        return line
