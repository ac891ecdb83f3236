"""Session list with drill-down into a session's prompts."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from rich.text import Text

from cwtui import sessions as session_data
from cwtui.cli.tui.context import TuiConfig
from cwtui.cli.tui.keys import KEY_DOWN, KEY_ENTER, KEY_PGDOWN, KEY_PGUP, KEY_UP, is_back, is_quit
from cwtui.cli.tui.loader import LoadState, OneShotLoader
from cwtui.cli.tui.messages import ContentLoaded, KeyPress, Message, Resize
from cwtui.cli.tui.tasks import Task
from cwtui.cli.tui.theme import Theme
from cwtui.cli.tui.views.base import BaseView, Frame, ScrollableListMixin
from cwtui.cli.tui.views.viewer import ViewerView
from cwtui.cli.tui.widgets.scrollbar import join_with_scrollbar, render_scrollbar

# banner (3) + blank and table header (2) + rule (1) + blank and footer (2)
LIST_OVERHEAD = 8
ROW_TITLE_MAX = 60


def format_prompts(session: session_data.Session, prompts: list[session_data.Prompt], slug: str, theme: Theme) -> Text:
    heading = theme.fg(theme.secondary, bold=True)
    muted = theme.fg(theme.muted)
    title = f"{slug} ({session.id[:8]})" if slug else session.id

    out = Text("  ")
    out.append(title, style=heading)
    out.append("\n  Project: ")
    out.append(session.project, style=muted)
    out.append("\n  Prompts: ")
    out.append(str(len(prompts)), style=muted)
    out.append("\n\n")
    for i, prompt in enumerate(prompts, start=1):
        out.append("  ")
        out.append(f"[{i}] {prompt.timestamp.astimezone().strftime('%H:%M:%S')}", style=heading)
        out.append("\n")
        for line in prompt.content.split("\n"):
            out.append(f"  {line}\n")
        out.append("\n")
    return out


def row_title(title: str) -> str:
    if len(title) > ROW_TITLE_MAX:
        return title[: ROW_TITLE_MAX - 3] + "..."
    return title


class SessionsView(ScrollableListMixin[session_data.Session], BaseView):
    def __init__(self, config: TuiConfig, home: Optional[Path] = None) -> None:
        super().__init__()
        self.config = config
        self.home = home
        self.items = []
        self.selected_index = 0
        self.scroll_offset = 0
        limit = config.settings.sessions_limit
        self.loader: OneShotLoader[list[session_data.Session]] = OneShotLoader(
            "sessions", lambda: session_data.list_sessions(session_data.projects_dir(self.home), limit)
        )
        self.prompt_loader: OneShotLoader[Text] | None = None
        self.prompt_viewer: ViewerView | None = None
        self.pending_session: session_data.Session | None = None
        self.error: str | None = None

    def initialize(self) -> Optional[Task]:
        return self.loader.start()

    def visible_rows(self) -> int:
        return max(1, self.height - LIST_OVERHEAD)

    def on_resize(self) -> None:
        self.clamp_scroll()

    def update(self, msg: Message) -> tuple["SessionsView", list[Task]]:
        if self.prompt_viewer is None:
            return super().update(msg)
        if isinstance(msg, Resize):
            self.width = msg.width
            self.height = msg.height
        if isinstance(msg, KeyPress) and (is_quit(msg.key) or is_back(msg.key)):
            self.prompt_viewer = None
            return self, []
        _, tasks = self.prompt_viewer.update(msg)
        return self, tasks

    def handle(self, msg: Message) -> list[Task]:
        if isinstance(msg, ContentLoaded):
            self.accept(msg)
            return []
        if isinstance(msg, KeyPress):
            return self.handle_key(msg.key)
        return []

    def accept(self, msg: ContentLoaded) -> None:
        if self.loader.accept(msg):
            if msg.ok:
                self.items = list(msg.payload or [])
                self.move_to(0)
            return
        if self.prompt_loader is None or not self.prompt_loader.accept(msg):
            return
        session = self.pending_session
        if not msg.ok or session is None:
            self.error = msg.error
            return
        viewer = ViewerView(f"Session: {session.title}", self.config, content=msg.payload)
        if self.width > 0 and self.height > 0:
            viewer.update(Resize(self.width, self.height))
        self.prompt_viewer = viewer

    def handle_key(self, key: str) -> list[Task]:
        if is_quit(key) or is_back(key):
            self.loader.cancel()
            if self.prompt_loader is not None:
                self.prompt_loader.cancel()
            return self.pop()
        if self.loader.state is not LoadState.READY or self.error:
            return []
        if key in (KEY_UP, "k"):
            self.move_up()
        elif key in (KEY_DOWN, "j"):
            self.move_down()
        elif key in (KEY_PGUP, "b"):
            self.page_up()
        elif key in (KEY_PGDOWN, "f"):
            self.page_down()
        elif key == "g":
            self.move_to(0)
        elif key == "G":
            self.move_to(len(self.items) - 1)
        elif key == KEY_ENTER and self.items:
            return [self.open_selected()]
        return []

    def open_selected(self) -> Task:
        session = self.items[self.selected_index]
        home, theme = self.home, self.config.theme
        self.pending_session = session

        def load() -> Text:
            prompts, slug = session_data.load_session_prompts(session_data.projects_dir(home), session)
            return format_prompts(session, prompts, slug, theme)

        self.prompt_loader = OneShotLoader("session-prompts", load)
        return self.prompt_loader.start()

    def render(self) -> Frame:
        if self.prompt_viewer is not None:
            return self.prompt_viewer.render()

        theme = self.config.theme
        out = theme.section_banner("Sessions")
        error = self.error or self.loader.error
        if self.loader.state is LoadState.LOADING:
            out.append("\n  Loading...")
            return Frame(out)
        if error:
            out.append_text(theme.error_block(error))
            return Frame(out)
        if not self.items:
            out.append("\n  No sessions found.\n")
            return Frame(out)

        out.append(f"\n  {'ID':<10}  {'DATE':<12}  TITLE\n")
        out.append(f"  {'─' * 10:<10}  {'─' * 12:<12}  {'─' * 50}", style=theme.fg(theme.muted))
        out.append("\n")

        visible = self.visible_rows()
        end = min(self.scroll_offset + visible, len(self.items))
        rows: list[Text] = []
        for i in range(self.scroll_offset, end):
            session = self.items[i]
            date = session.start_time.astimezone().strftime("%Y-%m-%d")
            line = f"{session.id[:8]:<10}  {date:<12}  {row_title(session.title)}"
            row = Text()
            if i == self.selected_index:
                row.append("  ")
                row.append("> ", style=theme.selected)
                row.append(line, style=theme.selected)
            else:
                row.append(f"    {line}")
            rows.append(row)

        total = len(self.items)
        scroll_pct = self.scroll_offset / (total - visible) if total > visible else 0.0
        bar = render_scrollbar(len(rows), total, visible, scroll_pct, theme)
        row_width = max((len(r) for r in rows), default=0)
        out.append_text(join_with_scrollbar(rows, bar, row_width))
        out.append("\n\n")
        pairs = [("j/k", "navigate"), ("pgup/pgdn", "page"), ("g/G", "top/bottom"), (KEY_ENTER, "view prompts"), ("esc", "back")]
        out.append_text(theme.help_line(pairs, f"{self.selected_index + 1}/{total}"))
        return Frame(out)
