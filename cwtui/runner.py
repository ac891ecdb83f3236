"""Child process execution: buffered capture for viewers, passthrough for the terminal."""

from __future__ import annotations

import shutil
import subprocess
import sys
from typing import Sequence

import structlog

from cwtui.cli.tui.tasks import CancelToken
from cwtui.errors import CommandError, CommandNotFoundError, TaskCancelled

logger = structlog.get_logger(__name__)

# Exit status a shell reports for a missing executable
EXIT_COMMAND_NOT_FOUND = 127


def which(program: str) -> str | None:
    return shutil.which(program)


class CommandRunner:
    """Builds argv for cwtui and its backend, and runs them.

    Args:
        backend: Executable implementing the forwarded subcommands (doctor, setup, ...).
    """

    def __init__(self, backend: str = "claude-workspace") -> None:
        self.backend = backend

    def self_argv(self, command: str, args: Sequence[str] = ()) -> list[str]:
        """Re-execute this program with a subcommand."""
        return [sys.executable, "-m", "cwtui", command, *args]

    def backend_argv(self, command: str, args: Sequence[str] = ()) -> list[str]:
        return [self.backend, command, *args]

    def capture(self, argv: Sequence[str], cancel: CancelToken | None = None) -> str:
        """Run argv to completion and return its stdout.

        Raises:
            CommandNotFoundError: argv[0] is not executable.
            CommandError: the process exited non-zero.
            TaskCancelled: `cancel` fired before or during the run.
        """
        argv = list(argv)
        if cancel is not None and cancel.cancelled:
            raise TaskCancelled(argv[0])
        logger.debug("capture", argv=argv)
        try:
            process = subprocess.Popen(  # pylint: disable=consider-using-with
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except FileNotFoundError as exc:
            raise CommandNotFoundError(argv[0]) from exc

        if cancel is not None:
            cancel.attach(process)
        try:
            stdout, stderr = process.communicate()
        finally:
            if cancel is not None:
                cancel.detach()

        if cancel is not None and cancel.cancelled:
            raise TaskCancelled(argv[0])
        out = stdout.decode("utf-8", errors="replace")
        if process.returncode != 0:
            raise CommandError(argv, process.returncode, stderr.decode("utf-8", errors="replace"))
        return out

    def run_to_terminal(self, argv: Sequence[str]) -> int:
        """Run argv with the terminal's stdio attached; returns the exit code."""
        argv = list(argv)
        logger.info("run_to_terminal", argv=argv)
        try:
            completed = subprocess.run(argv, check=False)
        except FileNotFoundError:
            sys.stderr.write(f"cwtui error: {argv[0]}: command not found\n")
            return EXIT_COMMAND_NOT_FOUND
        return completed.returncode
