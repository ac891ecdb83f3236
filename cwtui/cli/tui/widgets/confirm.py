"""Yes/no confirmation dialog."""

from __future__ import annotations

from rich.text import Text

from cwtui.cli.tui.keys import KEY_CTRL_C, KEY_ENTER, KEY_LEFT, KEY_RIGHT, KEY_TAB
from cwtui.cli.tui.messages import ConfirmResult, KeyPress, Message
from cwtui.cli.tui.tasks import Task, emit
from cwtui.cli.tui.theme import Theme


class Confirm:
    def __init__(self, title: str, body: Text | str, theme: Theme, default_yes: bool = True) -> None:
        self.title = title
        self.body = Text(body) if isinstance(body, str) else body
        self.theme = theme
        self.yes_selected = default_yes
        self.done = False

    def update(self, msg: Message) -> list[Task]:
        if not isinstance(msg, KeyPress) or self.done:
            return []
        key = msg.key
        if key in ("y", "Y"):
            return self._answer(True)
        if key in ("n", "N", "q", KEY_CTRL_C):
            return self._answer(False)
        if key == KEY_ENTER:
            return self._answer(self.yes_selected)
        if key in (KEY_LEFT, "h", KEY_TAB, KEY_RIGHT, "l"):
            self.yes_selected = not self.yes_selected
        return []

    def _answer(self, confirmed: bool) -> list[Task]:
        self.yes_selected = confirmed
        self.done = True
        return [emit(ConfirmResult(confirmed=confirmed))]

    def render(self) -> Text:
        theme = self.theme
        out = Text()
        out.append(self.title, style=theme.title)
        out.append("\n\n")
        if self.body.plain:
            out.append_text(self.body)
            out.append("\n\n")

        selected = theme.fg(theme.primary, bold=True)
        unselected = theme.fg(theme.muted)
        yes_style, no_style = (selected, unselected) if self.yes_selected else (unselected, selected)
        out.append("╭─────╮  ╭────╮\n", style=theme.fg(theme.muted))
        out.append("│ ")
        out.append("Yes", style=yes_style)
        out.append(" │  │ ")
        out.append("No", style=no_style)
        out.append(" │\n")
        out.append("╰─────╯  ╰────╯\n", style=theme.fg(theme.muted))
        out.append("\n")
        out.append_text(theme.help_line([("←/→", "switch"), (KEY_ENTER, "confirm"), ("q", "cancel")]))
        return out
