"""View protocol, base class and list-scrolling mixin."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, Protocol, TypeVar

from rich.text import Text

from cwtui.cli.tui.messages import Message, PopView, Resize
from cwtui.cli.tui.tasks import Task, emit


@dataclass(frozen=True)
class Frame:
    """Rendered output of a view."""

    content: Text
    full_screen: bool = True


class View(Protocol):
    """Capability set every screen on the navigation stack implements."""

    def initialize(self) -> Optional[Task]: ...

    def update(self, msg: Message) -> tuple["View", list[Task]]: ...

    def render(self) -> Frame: ...


class BaseView:
    """Default lifecycle for concrete views.

    Subclasses override `handle` for their own messages; `update` records terminal
    size before handing over.
    """

    def __init__(self) -> None:
        self.width = 0
        self.height = 0

    def initialize(self) -> Optional[Task]:
        return None

    def update(self, msg: Message) -> tuple["BaseView", list[Task]]:
        if isinstance(msg, Resize):
            self.width = msg.width
            self.height = msg.height
            self.on_resize()
        return self, self.handle(msg)

    def handle(self, msg: Message) -> list[Task]:
        return []

    def on_resize(self) -> None:
        """Hook for re-deriving size-dependent widgets."""

    def render(self) -> Frame:
        raise NotImplementedError(f"{self.__class__.__name__} must implement render()")

    @staticmethod
    def pop() -> list[Task]:
        return [emit(PopView())]


T = TypeVar("T")


class ScrollableListMixin(Generic[T]):
    """Cursor and scroll offset over a flat item list.

    Requires:
    - items: list - Items to scroll through
    - selected_index: int - Cursor position
    - scroll_offset: int - First visible item index
    - visible_rows() - Number of rows that fit on screen
    """

    items: list[T]
    selected_index: int
    scroll_offset: int

    def visible_rows(self) -> int:
        raise NotImplementedError

    def clamp_scroll(self) -> None:
        """Keep the cursor inside the visible window and the window inside the list."""
        visible = self.visible_rows()
        if self.selected_index < self.scroll_offset:
            self.scroll_offset = self.selected_index
        if self.selected_index >= self.scroll_offset + visible:
            self.scroll_offset = self.selected_index - visible + 1
        max_scroll = max(0, len(self.items) - visible)
        self.scroll_offset = min(self.scroll_offset, max_scroll)

    def move_to(self, index: int) -> None:
        last = max(0, len(self.items) - 1)
        self.selected_index = min(max(0, index), last)
        self.clamp_scroll()

    def move_up(self) -> None:
        self.move_to(self.selected_index - 1)

    def move_down(self) -> None:
        self.move_to(self.selected_index + 1)

    def page_up(self) -> None:
        self.move_to(self.selected_index - self.visible_rows())

    def page_down(self) -> None:
        self.move_to(self.selected_index + self.visible_rows())
