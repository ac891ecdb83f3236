"""Colors and styles for the TUI.

The theme is built once at boot from config and handed to every view; nothing
reads colors from module state.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Mapping

from rich.style import Style
from rich.text import Text

from cwtui.config.schema import ThemeColors

# Brand and status palette (hex)
PRIMARY = "#7C3AED"  # violet
SECONDARY = "#06B6D4"  # cyan
ACCENT = "#F59E0B"  # amber
SUCCESS = "#10B981"  # emerald
WARNING = "#F59E0B"  # amber
ERROR = "#EF4444"  # red
MUTED = "#6B7280"  # gray

BANNER_RULE_WIDTH = 40


def is_accessible(environ: Mapping[str, str] | None = None) -> bool:
    """True when the environment asks for plain output (NO_COLOR or ACCESSIBLE=1)."""
    env = os.environ if environ is None else environ
    return bool(env.get("NO_COLOR", "")) or env.get("ACCESSIBLE", "") == "1"


@lru_cache(maxsize=None)
def _style(hex_color: str, bold: bool, italic: bool) -> Style:
    return Style(color=hex_color, bold=bold or None, italic=italic or None)


@dataclass(frozen=True)
class Theme:
    primary: str = PRIMARY
    secondary: str = SECONDARY
    accent: str = ACCENT
    success: str = SUCCESS
    warning: str = WARNING
    error: str = ERROR
    muted: str = MUTED
    color: bool = True

    @classmethod
    def from_config(cls, colors: ThemeColors | None = None, color_enabled: bool = True) -> "Theme":
        overrides = {}
        if colors is not None:
            overrides = {k: v for k, v in colors.model_dump(exclude_none=True).items() if k in _COLOR_FIELDS}
        return cls(color=color_enabled, **overrides)

    def fg(self, hex_color: str, *, bold: bool = False, italic: bool = False) -> Style:
        """Foreground style, or a null style when color is disabled."""
        if not self.color:
            return Style.null()
        return _style(hex_color, bold, italic)

    # --- Component styles ---

    @property
    def title(self) -> Style:
        return self.fg(self.primary, bold=True)

    @property
    def subtitle(self) -> Style:
        return self.fg(self.muted)

    @property
    def section_head(self) -> Style:
        return self.fg(self.secondary, bold=True)

    @property
    def help_key(self) -> Style:
        return self.fg(self.muted, bold=True)

    @property
    def help_desc(self) -> Style:
        return self.fg(self.muted)

    @property
    def selected(self) -> Style:
        return self.fg(self.primary, bold=True)

    # --- Fragments ---

    def section_banner(self, title: str) -> Text:
        """Blank line, a cyan rule, then `  ▶ Title`.

        Always three lines followed by a newline.
        """
        text = Text("\n")
        text.append("─" * BANNER_RULE_WIDTH, style=self.fg(self.secondary))
        text.append("\n  ")
        text.append(f"▶ {title}", style=self.section_head)
        text.append("\n")
        return text

    def error_line(self, message: str) -> Text:
        return Text(message, style=self.fg(self.error))

    def error_block(self, message: str) -> Text:
        """Error line plus the back hint every error state must show."""
        text = Text("\n  ")
        text.append_text(self.error_line(message))
        text.append("\n\n  Press q to go back.\n")
        return text

    def help_line(self, pairs: list[tuple[str, str]], trail: Text | str | None = None) -> Text:
        """Footer of `key desc` pairs separated by two spaces."""
        text = Text()
        for i, (key, desc) in enumerate(pairs):
            if i:
                text.append("  ")
            text.append(key, style=self.help_key)
            text.append(" ")
            text.append(desc, style=self.help_desc)
        if trail is not None:
            text.append("  ")
            text.append(trail)
        return text


_COLOR_FIELDS = ("primary", "secondary", "accent", "success", "warning", "error", "muted")
