"""Messages routed through the navigation stack.

Every message is consumed exactly once by `TuiController.dispatch`. The set is
closed: `Message` below is the full union.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from cwtui.cli.tui.views.base import View

# --- Terminal events ---


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


@dataclass(frozen=True)
class KeyPress:
    key: str


# --- Navigation ---


@dataclass(frozen=True)
class PushView:
    view: "View"


@dataclass(frozen=True)
class PopView:
    pass


@dataclass(frozen=True)
class Quit:
    pass


# --- Background results ---


@dataclass(frozen=True)
class ContentLoaded:
    """Result of a background load, tagged with the generation it was started at."""

    generation: int
    tag: str
    payload: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class CopyFlashExpired:
    flash_id: int = 0


@dataclass(frozen=True)
class ClipboardWritten:
    error: str | None = None


@dataclass(frozen=True)
class PathSuggestions:
    """Completion candidates for the path typed into field `field_index`."""

    field_index: int
    query: str
    suggestions: tuple[str, ...] = ()


# --- External commands ---


@dataclass(frozen=True)
class ExecAndReturn:
    """Suspend the UI, run `cwtui <command> <args>` attached to the terminal, resume."""

    command: str
    args: tuple[str, ...] = ()


@dataclass(frozen=True)
class ExecAndExit:
    """Leave the UI and hand the terminal to `cwtui <command> <args>` for good."""

    command: str
    args: tuple[str, ...] = ()


@dataclass(frozen=True)
class CommandFinished:
    argv: tuple[str, ...]
    returncode: int


# --- Dialog results ---


@dataclass(frozen=True)
class FormResult:
    values: tuple[str, ...] = field(default_factory=tuple)
    cancelled: bool = False


@dataclass(frozen=True)
class ConfirmResult:
    confirmed: bool


Message = Union[
    Resize,
    KeyPress,
    PushView,
    PopView,
    Quit,
    ContentLoaded,
    CopyFlashExpired,
    ClipboardWritten,
    PathSuggestions,
    ExecAndReturn,
    ExecAndExit,
    CommandFinished,
    FormResult,
    ConfirmResult,
]
