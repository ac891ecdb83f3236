"""Keyboard shortcut reference."""

from __future__ import annotations

from cwtui.cli.tui.context import TuiConfig
from cwtui.cli.tui.keys import KEY_ENTER, is_back, is_quit
from cwtui.cli.tui.messages import KeyPress, Message
from cwtui.cli.tui.tasks import Task
from cwtui.cli.tui.views.base import BaseView, Frame

KEY_COLUMN_WIDTH = 18

HELP_SECTIONS: list[tuple[str, list[tuple[str, str]]]] = [
    (
        "Navigation",
        [
            ("↑ / k", "Move up"),
            ("↓ / j", "Move down"),
            (KEY_ENTER, "Select / confirm"),
            ("x", "Run outside the UI"),
            ("esc", "Go back"),
            ("q / ctrl+c", "Quit"),
        ],
    ),
    (
        "Forms",
        [
            ("tab / ↓", "Next field"),
            ("shift+tab / ↑", "Previous field"),
            (KEY_ENTER, "Next field / submit"),
            ("esc", "Cancel"),
        ],
    ),
    ("Path autocomplete", [("↑ / ↓", "Cycle suggestions"), ("tab", "Accept suggestion")]),
    (
        "Lists",
        [
            ("j / k", "Move up / down"),
            ("pgup / pgdn", "Page up / down"),
            ("g / G", "Go to top / bottom"),
            (KEY_ENTER, "Select item"),
            ("esc / q", "Go back"),
        ],
    ),
    (
        "Viewers",
        [
            ("j / k", "Scroll up / down"),
            ("pgup / pgdn", "Page up / down"),
            ("g / G", "Go to top / bottom"),
            ("y", "Copy to clipboard"),
            ("r", "Reload output"),
            ("esc / q", "Close viewer"),
        ],
    ),
    (
        "Confirmation dialogs",
        [
            ("y / Y", "Confirm yes"),
            ("n / N", "Confirm no"),
            ("← / → / tab", "Switch selection"),
            (KEY_ENTER, "Confirm selection"),
        ],
    ),
    ("Help", [("?", "Show / hide this screen")]),
]


class HelpView(BaseView):
    def __init__(self, config: TuiConfig) -> None:
        super().__init__()
        self.config = config

    def handle(self, msg: Message) -> list[Task]:
        if isinstance(msg, KeyPress) and (is_quit(msg.key) or is_back(msg.key) or msg.key == "?"):
            return self.pop()
        return []

    def render(self) -> Frame:
        theme = self.config.theme
        out = theme.section_banner("Keyboard Shortcuts")
        out.append("\n")
        key_style = theme.fg(theme.primary, bold=True)
        for title, binds in HELP_SECTIONS:
            out.append(title, style=theme.section_head)
            out.append("\n")
            for key, desc in binds:
                out.append("  ")
                out.append(key.ljust(KEY_COLUMN_WIDTH), style=key_style)
                out.append(desc, style=theme.help_desc)
                out.append("\n")
            out.append("\n")
        out.append_text(theme.help_line([("esc / q / ?", "close")]))
        return Frame(out)
