"""Viewers over backend subcommand output."""

from __future__ import annotations

from typing import Callable

from rich.text import Text

from cwtui.cli.tui.context import TuiConfig
from cwtui.cli.tui.views.viewer import ViewerView

# Launcher command -> (viewer title, backend argv tail)
BACKEND_VIEWERS: dict[str, tuple[str, tuple[str, ...]]] = {
    "doctor": ("Doctor", ("doctor",)),
    "skills": ("Skills", ("skills",)),
    "memory": ("Memory Layers", ("memory",)),
    "mcp list": ("MCP Servers", ("mcp", "list")),
    "statusline": ("Statusline", ("statusline",)),
}


def backend_output_loader(config: TuiConfig, command: str, *args: str) -> Callable[[], Text]:
    """Capture `backend <command> <args>` and decode its ANSI colors."""
    runner = config.runner

    def load() -> Text:
        return Text.from_ansi(runner.capture(runner.backend_argv(command, args)))

    return load


def backend_viewer(config: TuiConfig, key: str) -> ViewerView:
    title, argv = BACKEND_VIEWERS[key]
    return ViewerView(title, config, load=backend_output_loader(config, *argv))
