"""Textual host for the navigation stack.

The app owns the terminal: it turns Textual key and resize events into
messages, schedules the tasks the controller hands back, and performs the
quit/suspend/exec requests the controller makes through the TuiHost protocol.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Optional, Sequence

import structlog
from rich.text import Text
from textual import events
from textual.app import App, ComposeResult, SuspendNotSupported
from textual.binding import Binding
from textual.widget import Widget

from cwtui.cli.tui.bridge import hand_off, run_suspended
from cwtui.cli.tui.context import TuiConfig
from cwtui.cli.tui.controller import TuiController
from cwtui.cli.tui.keys import KEY_CTRL_C, KEY_ESC, KEY_PGDOWN, KEY_PGUP, KEY_SHIFT_TAB, KEY_TAB
from cwtui.cli.tui.messages import CommandFinished, KeyPress, Message, Resize
from cwtui.cli.tui.tasks import Task, execute

logger = structlog.get_logger(__name__)

_KEY_ALIASES = {
    "escape": KEY_ESC,
    "pageup": KEY_PGUP,
    "pagedown": KEY_PGDOWN,
}


def translate_key(key: str, character: str | None) -> str:
    """Textual key event -> key string used by views."""
    if character and len(character) == 1 and character.isprintable():
        return character
    return _KEY_ALIASES.get(key, key)


@dataclass(frozen=True)
class ExitRequest:
    """App result asking `run_tui` to exec argv once the terminal is restored."""

    argv: tuple[str, ...]


class ScreenView(Widget, can_focus=True):
    """Full-screen widget drawing the controller's current frame."""

    DEFAULT_CSS = """
    ScreenView {
        width: 1fr;
        height: 1fr;
    }
    """

    def __init__(self, controller: TuiController, **kwargs: object) -> None:
        super().__init__(**kwargs)
        self.controller = controller

    def render(self) -> Text:
        return self.controller.render().content

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        app = self.app
        if isinstance(app, CwtuiApp):
            app.deliver(KeyPress(translate_key(event.key, event.character)))


class CwtuiApp(App[Optional[ExitRequest]]):
    """Hosts one TuiController for the lifetime of the UI."""

    BINDINGS = [
        Binding("ctrl+c", f"forward('{KEY_CTRL_C}')", "Quit", show=False, priority=True),
        Binding("tab", f"forward('{KEY_TAB}')", show=False, priority=True),
        Binding("shift+tab", f"forward('{KEY_SHIFT_TAB}')", show=False, priority=True),
    ]

    def __init__(self, config: TuiConfig, **kwargs: object) -> None:
        super().__init__(**kwargs)
        self.tui_config = config
        self.controller = TuiController(config, self)
        self.screen_view = ScreenView(self.controller, id="screen-view")

    def compose(self) -> ComposeResult:
        yield self.screen_view

    def on_mount(self) -> None:
        self.screen_view.focus()
        self.schedule(self.controller.start())
        self.deliver(Resize(self.size.width, self.size.height))

    def on_resize(self, event: events.Resize) -> None:
        self.deliver(Resize(event.size.width, event.size.height))

    def action_forward(self, key: str) -> None:
        self.deliver(KeyPress(key))

    # --- Message loop ---

    def deliver(self, msg: Message) -> None:
        """Dispatch on the app thread, redraw, and schedule follow-up tasks."""
        tasks = self.controller.dispatch(msg)
        self.screen_view.refresh()
        self.schedule(tasks)

    def schedule(self, tasks: list[Task]) -> None:
        for task in tasks:
            if task.delay > 0:
                self.set_timer(task.delay, partial(self._run_timed, task), name=task.name)
            else:
                self.run_worker(
                    partial(self._run_background, task),
                    name=task.name,
                    group="tasks",
                    thread=True,
                    exit_on_error=False,
                )

    def _run_timed(self, task: Task) -> None:
        msg = execute(task)
        if msg is not None:
            self.deliver(msg)

    def _run_background(self, task: Task) -> None:
        msg = execute(task)
        if msg is None:
            return
        if not self.is_running:
            logger.debug("Dropping %s result after exit", task.name)
            return
        self.call_from_thread(self.deliver, msg)

    # --- TuiHost ---

    def quit(self) -> None:
        self.exit()

    def run_and_resume(self, argv: Sequence[str]) -> None:
        self.call_later(self._run_and_resume, tuple(argv))

    def _run_and_resume(self, argv: tuple[str, ...]) -> None:
        try:
            returncode = run_suspended(self, self.tui_config.runner, argv)
        except SuspendNotSupported:
            logger.warning("Terminal suspend unsupported; cannot run %s", argv)
            self.notify("This terminal cannot be suspended to run commands", severity="error")
            returncode = 1
        self.deliver(CommandFinished(argv=argv, returncode=returncode))

    def run_and_exit(self, argv: Sequence[str]) -> None:
        self.exit(result=ExitRequest(tuple(argv)))


def run_tui(config: TuiConfig) -> int:
    """Run the UI until quit; exec the requested command if one was chosen."""
    app = CwtuiApp(config)
    result = app.run()
    if isinstance(result, ExitRequest):
        return hand_off(result.argv)
    return app.return_code or 0
