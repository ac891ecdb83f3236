"""Deferred units of work and their cancellation handles.

A Task computes one Message off the synchronous path. Inline tasks are applied by
the controller before the next event; timed and background tasks are scheduled
by the terminal host.
"""

from __future__ import annotations

import subprocess
import threading
from dataclasses import dataclass
from typing import Callable, Optional

import structlog

from cwtui.cli.tui.messages import ContentLoaded, Message

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Task:
    run: Callable[[], Optional[Message]]
    name: str = "task"
    delay: float = 0.0  # seconds before the task runs
    inline: bool = False  # applied synchronously by the controller


def emit(msg: Message) -> Task:
    """Task that immediately yields `msg`."""
    return Task(run=lambda: msg, name=type(msg).__name__, inline=True)


def after(seconds: float, msg: Message) -> Task:
    """Task that yields `msg` once `seconds` have elapsed."""
    return Task(run=lambda: msg, name=type(msg).__name__, delay=seconds)


def background(fn: Callable[[], Optional[Message]], name: str) -> Task:
    """Task that runs `fn` on a worker thread."""
    return Task(run=fn, name=name)


def execute(task: Task) -> Optional[Message]:
    """Run a task, turning any exception into an error-carrying message."""
    try:
        return task.run()
    except Exception as exc:  # pylint: disable=broad-exception-caught
        logger.exception("Task %s failed", task.name)
        return ContentLoaded(generation=-1, tag=task.name, error=str(exc) or type(exc).__name__)


class CancelToken:
    """Best-effort cancellation for one in-flight load.

    Cancelling sets a flag the task polls between steps and terminates the child
    process currently attached, if any.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._process: subprocess.Popen[bytes] | None = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def attach(self, process: subprocess.Popen[bytes]) -> None:
        with self._lock:
            self._process = process
        if self.cancelled:
            _terminate(process)

    def detach(self) -> None:
        with self._lock:
            self._process = None

    def cancel(self) -> None:
        self._event.set()
        with self._lock:
            process = self._process
        if process is not None:
            _terminate(process)


def _terminate(process: subprocess.Popen[bytes]) -> None:
    if process.poll() is None:
        logger.debug("Terminating pid %s", process.pid)
        try:
            process.terminate()
        except ProcessLookupError:
            pass
