"""cwtui logging configuration.

cwtui logs through structlog on top of the stdlib `logging` module. The TUI owns the
terminal, so records always go to a file:

- `$CWTUI_LOG_FILE` when set
- otherwise `~/.local/state/cwtui/cwtui.log`

The level comes from the `level` argument, then `$CWTUI_LOG_LEVEL`, then WARNING.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

import structlog

LOG_LEVEL_ENV_VAR = "CWTUI_LOG_LEVEL"
LOG_FILE_ENV_VAR = "CWTUI_LOG_FILE"
DEFAULT_LOG_FILE = Path("~/.local/state/cwtui/cwtui.log")


def resolve_log_file() -> Path:
    env_path = os.environ.get(LOG_FILE_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_LOG_FILE.expanduser()


def setup_logging(level: Optional[str] = None) -> Path:
    """Configure cwtui logging.

    Args:
        level: Optional override for `CWTUI_LOG_LEVEL`.

    Returns:
        The log file records are written to.
    """
    if level:
        os.environ[LOG_LEVEL_ENV_VAR] = level
    level_name = os.environ.get(LOG_LEVEL_ENV_VAR, "WARNING").upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING

    log_file = resolve_log_file()
    log_file.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(message)s"))

    root = logging.getLogger("cwtui")
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(numeric_level)
    root.propagate = False

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.KeyValueRenderer(key_order=["timestamp", "level", "logger", "event"]),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    return log_file
