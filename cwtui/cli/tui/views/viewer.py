"""Scrollable read-only output screen."""

from __future__ import annotations

from typing import Callable, Optional

import pyperclip
import structlog
from rich.text import Text

from cwtui.cli.tui.context import TuiConfig
from cwtui.cli.tui.keys import is_back, is_quit
from cwtui.cli.tui.loader import LoadState, OneShotLoader
from cwtui.cli.tui.messages import ClipboardWritten, ContentLoaded, CopyFlashExpired, KeyPress, Message
from cwtui.cli.tui.tasks import Task, after, background
from cwtui.cli.tui.views.base import BaseView, Frame
from cwtui.cli.tui.widgets.viewport import Viewport

logger = structlog.get_logger(__name__)

HEADER_LINES = 2  # title + blank
FOOTER_LINES = 2  # blank + help
COPY_FLASH_SECONDS = 2.0
COPIED = "Copied!"
COPY_FAILED = "Copy failed"


def clipboard_task(text: str) -> Task:
    """Write `text` to the system clipboard off the UI thread."""

    def run() -> ClipboardWritten:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as exc:
            return ClipboardWritten(error=str(exc) or "clipboard unavailable")
        return ClipboardWritten()

    return background(run, name="clipboard")


class ViewerView(BaseView):
    """Title, viewport over loaded text, and a scroll/copy footer.

    Either `load` runs once in the background when the view is initialized, or
    `content` is shown as-is.
    """

    def __init__(
        self,
        title: str,
        config: TuiConfig,
        load: Optional[Callable[[], Text]] = None,
        content: Optional[Text] = None,
    ) -> None:
        super().__init__()
        self.title = title
        self.config = config
        self.viewport = Viewport()
        self.flash = ""
        self.flash_id = 0
        self.loader: OneShotLoader[Text] | None = None
        if load is not None:
            self.loader = OneShotLoader(f"viewer:{title}", load)
        else:
            self.viewport.set_content(content if content is not None else Text())

    @property
    def state(self) -> LoadState:
        return self.loader.state if self.loader is not None else LoadState.READY

    @property
    def error(self) -> str | None:
        return self.loader.error if self.loader is not None else None

    def initialize(self) -> Optional[Task]:
        if self.loader is None:
            return None
        return self.loader.start()

    def on_resize(self) -> None:
        self.viewport.fit_screen(self.width, self.height, HEADER_LINES + FOOTER_LINES)

    def handle(self, msg: Message) -> list[Task]:
        if isinstance(msg, ContentLoaded):
            if self.loader is not None and self.loader.accept(msg) and msg.ok:
                self.viewport.set_content(msg.payload if msg.payload is not None else Text())
            return []
        if isinstance(msg, CopyFlashExpired):
            if msg.flash_id == self.flash_id:
                self.flash = ""
            return []
        if isinstance(msg, ClipboardWritten):
            if msg.error is not None:
                logger.warning("Clipboard write failed: %s", msg.error)
                self.flash = COPY_FAILED
            return []
        if isinstance(msg, KeyPress):
            return self.handle_key(msg.key)
        return []

    def handle_key(self, key: str) -> list[Task]:
        if is_quit(key) or is_back(key):
            if self.loader is not None:
                self.loader.cancel()
            return self.pop()
        if key == "r" and self.loader is not None and not self.loader.loading:
            return [self.loader.start()]
        if self.state is not LoadState.READY:
            return []
        if key == "g":
            self.viewport.goto_top()
        elif key == "G":
            self.viewport.goto_bottom()
        elif key == "y":
            return self.copy()
        else:
            self.viewport.handle_key(key)
        return []

    def copy(self) -> list[Task]:
        self.flash = COPIED
        self.flash_id += 1
        expiry = CopyFlashExpired(self.flash_id)
        return [clipboard_task(self.viewport.plain), after(COPY_FLASH_SECONDS, expiry)]

    def render(self) -> Frame:
        theme = self.config.theme
        out = Text()
        out.append(self.title, style=theme.title)
        out.append("\n\n")

        if self.state is LoadState.LOADING:
            out.append("  Loading...", style=theme.subtitle)
            return Frame(out)
        if self.state is LoadState.ERROR:
            out.append_text(theme.error_block(self.error or "unknown error"))
            return Frame(out)

        out.append_text(self.viewport.render(theme))
        out.append("\n\n")
        out.append_text(self.render_footer())
        return Frame(out)

    def render_footer(self) -> Text:
        theme = self.config.theme
        if self.flash:
            trail = Text(self.flash, style=theme.fg(theme.success if self.flash == COPIED else theme.error, bold=True))
        else:
            trail = Text(f"{round(self.viewport.scroll_percent() * 100)}%", style=theme.help_desc)
        pairs = [("↑/↓", "scroll"), ("g/G", "top/bottom"), ("y", "copy")]
        if self.loader is not None:
            pairs.append(("r", "reload"))
        pairs.append(("q", "back"))
        return theme.help_line(pairs, trail)
