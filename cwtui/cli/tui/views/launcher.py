"""Command launcher: the root of the navigation stack."""

from __future__ import annotations

from dataclasses import dataclass

from rich.text import Text

from cwtui.cli.tui.context import TuiConfig
from cwtui.cli.tui.keys import KEY_DOWN, KEY_ENTER, KEY_UP, is_quit
from cwtui.cli.tui.messages import ExecAndExit, ExecAndReturn, KeyPress, Message, PushView, Quit
from cwtui.cli.tui.tasks import Task, emit
from cwtui.cli.tui.views.base import BaseView, Frame, View
from cwtui.cli.tui.views.cost import CostView
from cwtui.cli.tui.views.forms import AttachScreen, EnrichScreen, McpAddScreen, SandboxScreen
from cwtui.cli.tui.views.help import HelpView
from cwtui.cli.tui.views.sessions import SessionsView
from cwtui.cli.tui.views.upgrade import UpgradeView
from cwtui.cli.tui.views.viewers import backend_viewer


@dataclass(frozen=True)
class CommandItem:
    name: str
    desc: str
    icon: str
    command: str
    args: tuple[str, ...] = ()

    @property
    def key(self) -> str:
        return " ".join((self.command, *self.args))


@dataclass(frozen=True)
class CommandGroup:
    title: str
    items: tuple[CommandItem, ...]


COMMAND_GROUPS: tuple[CommandGroup, ...] = (
    CommandGroup(
        "Getting Started",
        (
            CommandItem("Setup", "First-time setup & API key provisioning", "⚙ ", "setup"),
            CommandItem("Attach", "Overlay platform config onto a project", "📎", "attach"),
            CommandItem("Enrich", "Re-generate CLAUDE.md with AI analysis", "✨", "enrich"),
            CommandItem("Sandbox", "Create a sandboxed branch worktree", "🔀", "sandbox"),
        ),
    ),
    CommandGroup(
        "MCP Servers",
        (
            CommandItem("Add Server", "Add a local or remote MCP server", "➕", "mcp", ("add",)),
            CommandItem("List Servers", "Show all configured servers", "📋", "mcp", ("list",)),
        ),
    ),
    CommandGroup(
        "Inspect & Manage",
        (
            CommandItem("Doctor", "Check platform configuration health", "🩺", "doctor"),
            CommandItem("Skills", "List available skills and personal commands", "🛠 ", "skills"),
            CommandItem("Sessions", "Browse and review session prompts", "💬", "sessions"),
            CommandItem("Memory", "Inspect and manage memory layers", "🧠", "memory"),
            CommandItem("Cost", "View usage and costs", "💰", "cost"),
        ),
    ),
    CommandGroup(
        "Maintenance",
        (
            CommandItem("Upgrade", "Upgrade claude-workspace and CLI", "⬆ ", "upgrade"),
            CommandItem("Statusline", "Configure Claude Code statusline", "📊", "statusline"),
        ),
    ),
)

SUBTITLE = "Claude Code Platform Engineering Kit"

_FORM_SCREENS = {
    "attach": AttachScreen,
    "sandbox": SandboxScreen,
    "enrich": EnrichScreen,
    "mcp add": McpAddScreen,
}


class LauncherView(BaseView):
    def __init__(self, config: TuiConfig) -> None:
        super().__init__()
        self.config = config
        self.items = [item for group in COMMAND_GROUPS for item in group.items]
        self.cursor = 0

    @property
    def selected(self) -> CommandItem:
        return self.items[self.cursor]

    def handle(self, msg: Message) -> list[Task]:
        if not isinstance(msg, KeyPress):
            return []
        key = msg.key
        if is_quit(key):
            return [emit(Quit())]
        if key in (KEY_UP, "k"):
            self.cursor = max(0, self.cursor - 1)
        elif key in (KEY_DOWN, "j"):
            self.cursor = min(len(self.items) - 1, self.cursor + 1)
        elif key == KEY_ENTER:
            return [emit(self.activate(self.selected))]
        elif key == "x":
            item = self.selected
            return [emit(ExecAndExit(item.command, item.args))]
        elif key == "?":
            return [emit(PushView(HelpView(self.config)))]
        return []

    def activate(self, item: CommandItem) -> Message:
        """Dedicated screens are pushed; anything else runs with the UI suspended."""
        view = self.view_for(item)
        if view is None:
            return ExecAndReturn(item.command, item.args)
        return PushView(view)

    def view_for(self, item: CommandItem) -> View | None:
        config = self.config
        key = item.key
        if key in _FORM_SCREENS:
            return _FORM_SCREENS[key](config)
        if key == "upgrade":
            return UpgradeView(config)
        if key == "sessions":
            return SessionsView(config)
        if key == "cost":
            return CostView(config)
        if key in ("doctor", "skills", "memory", "mcp list", "statusline"):
            return backend_viewer(config, key)
        return None

    def render(self) -> Frame:
        theme = self.config.theme
        out = Text()
        out.append(f"claude-workspace  {self.config.version}", style=theme.title)
        out.append("\n")
        out.append(SUBTITLE, style=theme.subtitle)
        out.append("\n\n")

        name_width = max(len(item.name) for item in self.items)
        muted = theme.fg(theme.muted)
        index = 0
        for group in COMMAND_GROUPS:
            out.append(group.title, style=theme.section_head)
            out.append("\n")
            for item in group.items:
                name = item.name.ljust(name_width)
                if index == self.cursor:
                    out.append("> ", style=theme.selected)
                    out.append(item.icon, style=theme.fg(theme.primary))
                    out.append(" ")
                    out.append(name, style=theme.selected)
                else:
                    out.append("  ")
                    out.append(item.icon, style=muted)
                    out.append(" ")
                    out.append(name)
                out.append("  ")
                out.append(item.desc, style=muted)
                out.append("\n")
                index += 1

        out.append("\n")
        pairs = [("↑/↓", "navigate"), (KEY_ENTER, "select"), ("x", "run & exit"), ("?", "help"), ("q", "quit")]
        out.append_text(theme.help_line(pairs))
        out.append("\n")
        return Frame(out)
