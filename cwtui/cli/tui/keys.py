"""Key names shared by every view.

Keys arrive as the strings produced by `app.translate_key`: printable characters
as themselves, named keys lowercase (`enter`, `esc`, `tab`, `shift+tab`, `pgup`).
"""

KEY_ENTER = "enter"
KEY_ESC = "esc"
KEY_TAB = "tab"
KEY_SHIFT_TAB = "shift+tab"
KEY_UP = "up"
KEY_DOWN = "down"
KEY_LEFT = "left"
KEY_RIGHT = "right"
KEY_PGUP = "pgup"
KEY_PGDOWN = "pgdown"
KEY_CTRL_C = "ctrl+c"
KEY_BACKSPACE = "backspace"


def is_quit(key: str) -> bool:
    """q or ctrl+c."""
    return key in ("q", KEY_CTRL_C)


def is_back(key: str) -> bool:
    return key == KEY_ESC
