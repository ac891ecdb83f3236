"""Multi-field text form with validation and path autocompletion."""

from __future__ import annotations

from dataclasses import dataclass

from rich.text import Text

from cwtui.cli.tui.keys import (
    KEY_BACKSPACE,
    KEY_CTRL_C,
    KEY_DOWN,
    KEY_ENTER,
    KEY_ESC,
    KEY_LEFT,
    KEY_RIGHT,
    KEY_SHIFT_TAB,
    KEY_TAB,
    KEY_UP,
)
from cwtui.cli.tui.messages import FormResult, KeyPress, Message, PathSuggestions
from cwtui.cli.tui.tasks import Task, background, emit
from cwtui.cli.tui.theme import Theme
from cwtui.cli.tui.widgets.path_complete import list_path_suggestions, suggestion_window

PASSWORD_MASK = "•"


@dataclass(frozen=True)
class FormField:
    label: str
    placeholder: str = ""
    password: bool = False
    required: bool = False
    is_path: bool = False  # enables path autocomplete with tab completion


class TextInput:
    """Single-line editable value with an optional suggestion list."""

    def __init__(self, placeholder: str = "", password: bool = False) -> None:
        self.placeholder = placeholder
        self.password = password
        self.value = ""
        self.cursor = 0
        self.focused = False
        self.suggestions: list[str] = []
        self.selected_suggestion = 0

    def set_value(self, value: str) -> None:
        self.value = value
        self.cursor = len(value)
        self.selected_suggestion = 0

    def set_suggestions(self, suggestions: list[str]) -> None:
        self.suggestions = list(suggestions)
        self.selected_suggestion = 0

    def matched_suggestions(self) -> list[str]:
        if not self.value:
            return []
        return [s for s in self.suggestions if s.startswith(self.value) and s != self.value]

    def current_suggestion(self) -> str:
        matches = self.matched_suggestions()
        if not matches:
            return ""
        return matches[min(self.selected_suggestion, len(matches) - 1)]

    def next_suggestion(self) -> None:
        matches = self.matched_suggestions()
        if matches:
            self.selected_suggestion = (self.selected_suggestion + 1) % len(matches)

    def prev_suggestion(self) -> None:
        matches = self.matched_suggestions()
        if matches:
            self.selected_suggestion = (self.selected_suggestion - 1) % len(matches)

    def edit(self, key: str) -> bool:
        """Apply an editing key; returns whether it was one."""
        if len(key) == 1 and key.isprintable():
            self.value = self.value[: self.cursor] + key + self.value[self.cursor :]
            self.cursor += 1
        elif key == KEY_BACKSPACE:
            if self.cursor > 0:
                self.value = self.value[: self.cursor - 1] + self.value[self.cursor :]
                self.cursor -= 1
        elif key == "delete":
            self.value = self.value[: self.cursor] + self.value[self.cursor + 1 :]
        elif key == KEY_LEFT:
            self.cursor = max(0, self.cursor - 1)
        elif key == KEY_RIGHT:
            self.cursor = min(len(self.value), self.cursor + 1)
        elif key in ("home", "ctrl+a"):
            self.cursor = 0
        elif key in ("end", "ctrl+e"):
            self.cursor = len(self.value)
        elif key == "ctrl+u":
            self.value = self.value[self.cursor :]
            self.cursor = 0
        else:
            return False
        self.selected_suggestion = 0
        return True

    def render(self, theme: Theme) -> Text:
        prompt_style = theme.fg(theme.primary) if self.focused else theme.fg(theme.muted)
        text = Text("> ", style=prompt_style)
        if not self.value:
            if self.focused:
                text.append("█")
            text.append(self.placeholder, style=theme.fg(theme.muted, italic=True))
            return text
        shown = PASSWORD_MASK * len(self.value) if self.password else self.value
        if not self.focused:
            text.append(shown)
            return text
        text.append(shown[: self.cursor])
        under = shown[self.cursor : self.cursor + 1] or " "
        text.append(under, style="reverse")
        text.append(shown[self.cursor + 1 :])
        # Ghost text for the pending completion
        completion = self.current_suggestion()
        if completion and self.cursor == len(self.value):
            text.append(completion[len(self.value) :], style=theme.fg(theme.muted))
        return text


class Form:
    """Ordered fields with focus traversal, required-field validation and submit."""

    def __init__(self, title: str, fields: list[FormField], theme: Theme) -> None:
        self.title = title
        self.fields = list(fields)
        self.theme = theme
        self.inputs = [TextInput(f.placeholder, f.password) for f in self.fields]
        self.cursor = 0
        self.done = False
        if self.inputs:
            self.inputs[0].focused = True

    def values(self) -> tuple[str, ...]:
        return tuple(i.value for i in self.inputs)

    @property
    def focused_field(self) -> FormField:
        return self.fields[self.cursor]

    @property
    def focused_input(self) -> TextInput:
        return self.inputs[self.cursor]

    def focus(self, index: int) -> None:
        self.inputs[self.cursor].focused = False
        self.cursor = index % len(self.inputs)
        self.inputs[self.cursor].focused = True

    def focus_next(self) -> None:
        self.focus(self.cursor + 1)

    def focus_prev(self) -> None:
        self.focus(self.cursor - 1)

    def update(self, msg: Message) -> list[Task]:
        if isinstance(msg, PathSuggestions):
            return self._apply_suggestions(msg)
        if isinstance(msg, KeyPress):
            return self._handle_key(msg.key)
        return []

    def _apply_suggestions(self, msg: PathSuggestions) -> list[Task]:
        if not 0 <= msg.field_index < len(self.inputs):
            return []
        field_input = self.inputs[msg.field_index]
        # Results for a value the user has since edited are stale
        if field_input.value != msg.query:
            return []
        field_input.set_suggestions(list(msg.suggestions))
        return []

    def _handle_key(self, key: str) -> list[Task]:
        if key in (KEY_CTRL_C, KEY_ESC):
            self.done = True
            return [emit(FormResult(cancelled=True))]
        if key == KEY_TAB:
            return self._handle_tab()
        if key == KEY_DOWN:
            if self._has_matches():
                self.focused_input.next_suggestion()
            else:
                self.focus_next()
            return []
        if key == KEY_UP:
            if self._has_matches():
                self.focused_input.prev_suggestion()
            else:
                self.focus_prev()
            return []
        if key == KEY_SHIFT_TAB:
            self.focus_prev()
            return []
        if key == KEY_ENTER:
            if self.cursor == len(self.inputs) - 1:
                return self.submit()
            self.focus_next()
            return []

        before = self.focused_input.value
        if self.focused_input.edit(key) and self.focused_field.is_path and self.focused_input.value != before:
            return [self.suggestion_task(self.cursor)]
        return []

    def _has_matches(self) -> bool:
        return self.focused_field.is_path and bool(self.focused_input.matched_suggestions())

    def _handle_tab(self) -> list[Task]:
        suggestion = self.focused_input.current_suggestion() if self.focused_field.is_path else ""
        if suggestion:
            self.focused_input.set_value(suggestion)
            return [self.suggestion_task(self.cursor)]
        self.focus_next()
        return []

    def suggestion_task(self, index: int) -> Task:
        query = self.inputs[index].value

        def run() -> PathSuggestions:
            return PathSuggestions(field_index=index, query=query, suggestions=tuple(list_path_suggestions(query)))

        return background(run, name="path-suggestions")

    def submit(self) -> list[Task]:
        """Emit FormResult, or focus the first empty required field instead."""
        for i, f in enumerate(self.fields):
            if f.required and not self.inputs[i].value.strip():
                self.focus(i)
                return []
        self.done = True
        return [emit(FormResult(values=self.values()))]

    # --- Rendering ---

    def render(self) -> Text:
        theme = self.theme
        out = Text()
        out.append(self.title, style=theme.title)
        out.append("\n\n")
        label_style = theme.fg(theme.secondary, bold=True)

        for i, f in enumerate(self.fields):
            out.append(f.label, style=label_style)
            if f.required:
                out.append(" *", style=theme.fg(theme.error))
            out.append("\n  ")
            out.append_text(self.inputs[i].render(theme))
            out.append("\n")
            if i == self.cursor and f.is_path:
                matches = self.inputs[i].matched_suggestions()
                if matches:
                    out.append_text(self._render_suggestions(matches, self.inputs[i].selected_suggestion))
            out.append("\n")

        out.append("\n")
        if self.focused_field.is_path:
            pairs = [("↑/↓", "select"), ("tab", "accept"), (KEY_ENTER, "submit"), ("esc", "cancel")]
        else:
            pairs = [("tab", "next field"), (KEY_ENTER, "submit"), ("esc", "cancel")]
        out.append_text(theme.help_line(pairs))
        return out

    def _render_suggestions(self, matches: list[str], selected: int) -> Text:
        theme = self.theme
        total = len(matches)
        selected = min(selected, total - 1)
        start, end = suggestion_window(total, selected)
        count_style = theme.fg(theme.muted, italic=True)
        out = Text()
        if start > 0:
            out.append("    ")
            out.append("...", style=count_style)
            out.append("\n")
        for i in range(start, end):
            if i == selected:
                out.append("  ")
                out.append(f"> {matches[i]}", style=theme.selected)
            else:
                out.append("    ")
                out.append(matches[i], style=theme.fg(theme.muted))
            out.append("\n")
        if end < total:
            out.append("    ")
            out.append("...", style=count_style)
            out.append("\n")
        if end - start < total:
            out.append("    ")
            out.append(f"({selected + 1}/{total})", style=count_style)
            out.append("\n")
        return out
