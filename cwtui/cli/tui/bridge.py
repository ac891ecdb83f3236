"""Hand the terminal to a child command, either temporarily or for good."""

from __future__ import annotations

import os
import sys
from typing import Sequence

import structlog
from textual.app import App

from cwtui.runner import EXIT_COMMAND_NOT_FOUND, CommandRunner

logger = structlog.get_logger(__name__)


def run_suspended(app: App[object], runner: CommandRunner, argv: Sequence[str]) -> int:
    """Leave the alternate screen, run argv on the real terminal, then come back.

    Raises:
        SuspendNotSupported: the app's driver cannot suspend (e.g. a web driver).
    """
    with app.suspend():
        returncode = runner.run_to_terminal(argv)
    logger.info("Resumed after %s (exit %d)", argv[-1] if argv else "?", returncode)
    return returncode


def hand_off(argv: Sequence[str]) -> int:
    """Replace this process with argv; only returns if exec fails."""
    argv = list(argv)
    logger.info("Handing off terminal", argv=argv)
    sys.stdout.flush()
    sys.stderr.flush()
    try:
        os.execvp(argv[0], argv)
    except OSError as exc:
        sys.stderr.write(f"cwtui error: {argv[0]}: {exc}\n")
        return EXIT_COMMAND_NOT_FOUND
    return 0  # unreachable after a successful exec
