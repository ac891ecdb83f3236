"""Domain errors raised by cwtui collaborators."""

from __future__ import annotations


class CwtuiError(Exception):
    """Base class for errors surfaced to the user."""


class CommandError(CwtuiError):
    """A child process exited with a non-zero status."""

    def __init__(self, argv: list[str], returncode: int, stderr: str = "") -> None:
        self.argv = argv
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip() or f"exit status {returncode}"
        super().__init__(f"{argv[0]} failed: {detail}")


class CommandNotFoundError(CwtuiError):
    """The executable for a command is not on PATH."""

    def __init__(self, program: str) -> None:
        self.program = program
        super().__init__(f"{program}: command not found")


class TaskCancelled(CwtuiError):
    """A background task observed its cancellation token."""


class ReleaseFetchError(CwtuiError):
    """Release metadata could not be fetched or parsed."""


class SessionDataError(CwtuiError):
    """Session logs are missing or unreadable."""
