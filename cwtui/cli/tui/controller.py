"""Navigation stack controller.

The controller owns the view stack and routes every message: navigation and
external-command messages are handled here, everything else goes to the view on
top. Inline tasks returned by views are applied before `dispatch` returns; the
rest are handed back to the host for scheduling.
"""

from __future__ import annotations

from collections import deque
from typing import Optional, Protocol, Sequence

import structlog

from cwtui.cli.tui.context import TuiConfig
from cwtui.cli.tui.messages import ExecAndExit, ExecAndReturn, Message, PopView, PushView, Quit, Resize
from cwtui.cli.tui.tasks import Task, execute
from cwtui.cli.tui.views.base import Frame, View
from cwtui.cli.tui.views.launcher import LauncherView

logger = structlog.get_logger(__name__)


class TuiHost(Protocol):
    """Terminal-side effects the controller requests."""

    def quit(self) -> None: ...

    def run_and_resume(self, argv: Sequence[str]) -> None: ...

    def run_and_exit(self, argv: Sequence[str]) -> None: ...


class TuiController:
    """Central controller for the view stack."""

    def __init__(self, config: TuiConfig, host: TuiHost) -> None:
        self.config = config
        self.host = host
        self.stack: list[View] = [LauncherView(config)]
        self.size: Optional[Resize] = None

    @property
    def top(self) -> View:
        return self.stack[-1]

    def start(self) -> list[Task]:
        """Initialize the root view."""
        task = self.top.initialize()
        return self._run_inline([task] if task is not None else [])

    def dispatch(self, msg: Message) -> list[Task]:
        """Consume one message; returns tasks for the host to schedule."""
        pending: deque[Message] = deque([msg])
        deferred: list[Task] = []
        while pending:
            for task in self._route(pending.popleft()):
                if task.inline:
                    produced = execute(task)
                    if produced is not None:
                        pending.append(produced)
                else:
                    deferred.append(task)
        return deferred

    def _run_inline(self, tasks: list[Task]) -> list[Task]:
        deferred: list[Task] = []
        for task in tasks:
            if not task.inline:
                deferred.append(task)
                continue
            produced = execute(task)
            if produced is not None:
                deferred.extend(self.dispatch(produced))
        return deferred

    def _route(self, msg: Message) -> list[Task]:
        if isinstance(msg, Resize):
            self.size = msg
            return self._to_top(msg)
        if isinstance(msg, PushView):
            return self.push(msg.view)
        if isinstance(msg, PopView):
            self.pop()
            return []
        if isinstance(msg, Quit):
            logger.debug("Quit requested")
            self.host.quit()
            return []
        if isinstance(msg, ExecAndReturn):
            self.host.run_and_resume(self.config.runner.self_argv(msg.command, msg.args))
            return []
        if isinstance(msg, ExecAndExit):
            self.host.run_and_exit(self.config.runner.self_argv(msg.command, msg.args))
            return []
        return self._to_top(msg)

    def _to_top(self, msg: Message) -> list[Task]:
        view, tasks = self.top.update(msg)
        self.stack[-1] = view
        return tasks

    def push(self, view: View) -> list[Task]:
        logger.debug("Push %s (depth %d)", type(view).__name__, len(self.stack) + 1)
        self.stack.append(view)
        tasks: list[Task] = []
        task = view.initialize()
        if task is not None:
            tasks.append(task)
        if self.size is not None:
            tasks.extend(self._to_top(self.size))
        return tasks

    def pop(self) -> None:
        if len(self.stack) == 1:
            logger.debug("Pop on root view; quitting")
            self.host.quit()
            return
        view = self.stack.pop()
        logger.debug("Pop %s (depth %d)", type(view).__name__, len(self.stack))

    def render(self) -> Frame:
        return self.top.render()
