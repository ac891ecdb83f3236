"""Filesystem path completion for form fields."""

from __future__ import annotations

import os

import structlog

logger = structlog.get_logger(__name__)

MAX_VISIBLE_SUGGESTIONS = 8


def _ends_with_sep(value: str) -> bool:
    return value.endswith("/") or value.endswith(os.sep)


def expand_tilde(prefix: str, home: str | None = None) -> tuple[str, bool]:
    """Expand a leading `~` or `~/`. Returns (expanded, whether expansion happened)."""
    if prefix == "~" or prefix.startswith("~/"):
        home_dir = home if home is not None else os.path.expanduser("~")
        if home_dir == "~":
            return "", False
        return home_dir + prefix[1:], True
    return prefix, False


def split_dir_partial(prefix: str, expanded: str) -> tuple[str, str]:
    """Directory to scan and the partial name to match inside it."""
    if _ends_with_sep(prefix):
        return expanded, ""
    return os.path.dirname(expanded) or ".", os.path.basename(expanded)


def list_path_suggestions(prefix: str, home: str | None = None) -> list[str]:
    """Completion candidates for `prefix`.

    Dot entries are hidden unless the partial name starts with a dot; directories
    get a trailing `/`; input typed with `~` yields `~`-relative suggestions.
    """
    if not prefix:
        return []
    expanded, tilde = expand_tilde(prefix, home)
    if not expanded:
        return []
    scan_dir, partial = split_dir_partial(prefix, expanded)

    try:
        entries = sorted(os.scandir(scan_dir), key=lambda e: e.name)
    except OSError as exc:
        logger.debug("No suggestions for %s: %s", prefix, exc)
        return []

    show_dotfiles = partial.startswith(".")
    home_dir = home if home is not None else os.path.expanduser("~")
    suggestions: list[str] = []
    for entry in entries:
        name = entry.name
        if not show_dotfiles and name.startswith("."):
            continue
        if partial and not name.startswith(partial):
            continue
        suggestion = _build_suggestion(prefix, name, tilde, home_dir)
        if entry.is_dir():
            suggestion += "/"
        suggestions.append(suggestion)
    return suggestions


def _build_suggestion(prefix: str, name: str, tilde: bool, home_dir: str) -> str:
    if _ends_with_sep(prefix):
        return prefix + name
    parent = os.path.dirname(prefix)
    suggestion = os.path.join(parent, name) if parent else name
    if tilde and suggestion.startswith(home_dir):
        suggestion = "~" + suggestion[len(home_dir) :]
    return suggestion


def suggestion_window(total: int, selected: int, limit: int = MAX_VISIBLE_SUGGESTIONS) -> tuple[int, int]:
    """Visible [start, end) slice of a suggestion list, centred on `selected`."""
    if total <= limit:
        return 0, total
    start = max(0, selected - limit // 2)
    end = start + limit
    if end > total:
        end = total
        start = end - limit
    return start, end
