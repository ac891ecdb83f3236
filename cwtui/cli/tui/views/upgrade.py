"""Upgrade screen: fetch the latest release, confirm, run `cwtui upgrade --yes`."""

from __future__ import annotations

from typing import Optional

from rich.text import Text

from cwtui.cli.tui.context import TuiConfig
from cwtui.cli.tui.keys import is_quit
from cwtui.cli.tui.loader import LoadState, OneShotLoader
from cwtui.cli.tui.messages import CommandFinished, ConfirmResult, ContentLoaded, ExecAndReturn, KeyPress, Message
from cwtui.cli.tui.tasks import Task, emit
from cwtui.cli.tui.views.base import BaseView, Frame
from cwtui.cli.tui.widgets.confirm import Confirm
from cwtui.releases import Release, fetch_latest

UPGRADE_ARGS = ("--yes",)


class UpgradeView(BaseView):
    def __init__(self, config: TuiConfig) -> None:
        super().__init__()
        self.config = config
        settings = config.settings
        self.loader: OneShotLoader[Release] = OneShotLoader(
            "upgrade", lambda: fetch_latest(settings.releases_url, settings.release_timeout_s)
        )
        self.confirm: Confirm | None = None

    def initialize(self) -> Optional[Task]:
        return self.loader.start()

    def handle(self, msg: Message) -> list[Task]:
        if isinstance(msg, ContentLoaded):
            if self.loader.accept(msg) and msg.ok:
                self.confirm = Confirm("Upgrade claude-workspace?", self.confirm_body(msg.payload), self.config.theme)
            return []
        if isinstance(msg, ConfirmResult):
            if msg.confirmed:
                return [emit(ExecAndReturn("upgrade", UPGRADE_ARGS))]
            return self.pop()
        if isinstance(msg, CommandFinished):
            return self.pop()
        if isinstance(msg, KeyPress) and is_quit(msg.key):
            self.loader.cancel()
            return self.pop()
        if self.confirm is not None:
            return self.confirm.update(msg)
        return []

    def confirm_body(self, release: Release) -> Text:
        theme = self.config.theme
        body = Text()
        body.append("Current: ", style=theme.fg(theme.muted))
        body.append(f"{self.config.version}\n")
        body.append("Latest:  ", style=theme.fg(theme.success))
        body.append(release.tag_name)
        if release.published_at:
            body.append(f"  ({release.published_date})", style=theme.fg(theme.muted))
        body.append("\n")

        if release.body:
            body.append("\n")
            body.append("Changelog:", style=theme.section_head)
            body.append("\n")
            for line in release.body.splitlines():
                line = line.strip()
                if line:
                    body.append("  ")
                    body.append(line, style=theme.fg(theme.muted))
                    body.append("\n")
        return body

    def render(self) -> Frame:
        theme = self.config.theme
        out = theme.section_banner("Upgrade")
        if self.loader.state is LoadState.LOADING:
            out.append("\n  Checking for updates...")
        elif self.loader.state is LoadState.ERROR:
            out.append_text(theme.error_block(f"Could not fetch release info: {self.loader.error}"))
        elif self.confirm is not None:
            out.append("\n")
            out.append_text(self.confirm.render())
        return Frame(out)
