"""Form screens that collect arguments and run a cwtui subcommand."""

from __future__ import annotations

import shlex

from cwtui.cli.tui.context import TuiConfig
from cwtui.cli.tui.keys import KEY_CTRL_C, is_back
from cwtui.cli.tui.messages import CommandFinished, ExecAndReturn, FormResult, KeyPress, Message
from cwtui.cli.tui.tasks import Task, emit
from cwtui.cli.tui.views.base import BaseView, Frame
from cwtui.cli.tui.widgets.form import Form, FormField

PATH_PLACEHOLDER = "e.g. ./my-project or /abs/path"


class FormScreen(BaseView):
    """A Form that turns its submitted values into ExecAndReturn.

    Subclasses define TITLE, FIELDS and `command_for`.
    """

    TITLE = ""
    FIELDS: tuple[FormField, ...] = ()

    def __init__(self, config: TuiConfig) -> None:
        super().__init__()
        self.config = config
        self.form = Form(self.TITLE, list(self.FIELDS), config.theme)
        self.submitted = False

    def command_for(self, values: tuple[str, ...]) -> ExecAndReturn:
        raise NotImplementedError

    def handle(self, msg: Message) -> list[Task]:
        if isinstance(msg, CommandFinished):
            return self.pop()
        if isinstance(msg, FormResult):
            if msg.cancelled:
                return self.pop()
            self.submitted = True
            return [emit(self.command_for(msg.values))]
        if isinstance(msg, KeyPress) and (msg.key == KEY_CTRL_C or is_back(msg.key)):
            return self.pop()
        if self.submitted:
            return []
        return self.form.update(msg)

    def render(self) -> Frame:
        return Frame(self.form.render())


class AttachScreen(FormScreen):
    TITLE = "Attach Platform Config"
    FIELDS = (FormField("Project path", placeholder=PATH_PLACEHOLDER, required=True),)

    def command_for(self, values: tuple[str, ...]) -> ExecAndReturn:
        return ExecAndReturn("attach", (values[0].strip(),))


class SandboxScreen(FormScreen):
    TITLE = "Create Sandbox Worktree"
    FIELDS = (
        FormField("Project path", placeholder=PATH_PLACEHOLDER, required=True, is_path=True),
        FormField("Branch name", placeholder="e.g. feature-auth, bugfix-login", required=True),
    )

    def command_for(self, values: tuple[str, ...]) -> ExecAndReturn:
        return ExecAndReturn("sandbox", (values[0].strip(), values[1].strip()))


class EnrichScreen(FormScreen):
    TITLE = "Enrich CLAUDE.md with AI"
    FIELDS = (FormField("Project path", placeholder="leave blank for current directory", is_path=True),)

    def command_for(self, values: tuple[str, ...]) -> ExecAndReturn:
        path = values[0].strip()
        return ExecAndReturn("enrich", (path,) if path else ())


class McpAddScreen(FormScreen):
    TITLE = "Add MCP Server"
    FIELDS = (
        FormField("Server name", placeholder="e.g. postgres, brave-search", required=True),
        FormField("API key env var", placeholder="e.g. DATABASE_URL (leave blank if not needed)"),
        FormField("Command", placeholder="e.g. npx -y @bytebase/dbhub", required=True),
    )

    def command_for(self, values: tuple[str, ...]) -> ExecAndReturn:
        name, api_key, command = (v.strip() for v in values)
        args = ["add", name]
        if api_key:
            args += ["--api-key", api_key]
        args += ["--", *command_words(command)]
        return ExecAndReturn("mcp", tuple(args))


def command_words(command: str) -> list[str]:
    """Split a command line shell-style, falling back to whitespace on bad quoting."""
    try:
        return shlex.split(command)
    except ValueError:
        return command.split()
