"""Usage and cost reports via ccusage (run through bun or npx)."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from typing import Sequence

import structlog

from cwtui.cli.tui.tasks import CancelToken
from cwtui.errors import CwtuiError
from cwtui.runner import CommandRunner, which

logger = structlog.get_logger(__name__)

COST_SUBCOMMANDS = ("daily", "weekly", "monthly", "session", "blocks")
DEFAULT_SUBCOMMAND = "daily"

# Record fields tried in order for a display label
_LABEL_FIELDS = ("date", "month", "week", "title", "name", "id")

_RUNTIMES = {
    "bun": ["bun", "x", "ccusage"],
    "npx": ["npx", "-y", "ccusage"],
}

RUNTIME_MISSING = "bun or npx not found; install Node.js (https://nodejs.org) or Bun (https://bun.sh)"


@dataclass(frozen=True)
class ChartEntry:
    label: str
    value: float


class CostDataError(CwtuiError):
    """ccusage JSON did not have the expected envelope."""


def record_label(record: dict) -> str:
    for key in _LABEL_FIELDS:
        value = record.get(key)
        if isinstance(value, str) and value:
            return value
    return "?"


def parse_cost_json(subcommand: str, data: str) -> list[ChartEntry]:
    """Chart entries from `ccusage <subcommand> --json` output.

    The subcommand name is the envelope key holding the record list.
    """
    try:
        raw = json.loads(data)
    except json.JSONDecodeError as exc:
        raise CostDataError(f"parsing {subcommand} JSON: {exc}") from exc
    if not isinstance(raw, dict) or subcommand not in raw:
        raise CostDataError(f'missing "{subcommand}" key in JSON')
    records = raw[subcommand]
    if not isinstance(records, list):
        raise CostDataError(f"parsing {subcommand} entries: expected a list")

    entries: list[ChartEntry] = []
    for record in records:
        if not isinstance(record, dict):
            continue
        total = record.get("totalCost", 0) or 0
        entries.append(ChartEntry(label=record_label(record), value=float(total)))
    return entries


def detect_runtime(preference: str = "auto") -> list[str] | None:
    """argv prefix that runs ccusage, or None when neither bun nor npx is installed."""
    candidates = ("bun", "npx") if preference == "auto" else (preference,)
    for name in candidates:
        if which(name):
            return list(_RUNTIMES[name])
    return None


class CostClient:
    """Runs ccusage subcommands through the detected JavaScript runtime."""

    def __init__(self, runner: CommandRunner, runtime: str = "auto") -> None:
        self.runner = runner
        self.runtime = runtime

    def argv(self, args: Sequence[str]) -> list[str]:
        prefix = detect_runtime(self.runtime)
        if prefix is None:
            raise CwtuiError(RUNTIME_MISSING)
        logger.debug("ccusage via %s", prefix[0], args=list(args))
        return [*prefix, *args]

    def capture(self, args: Sequence[str], cancel: CancelToken | None = None) -> str:
        return self.runner.capture(self.argv(args), cancel=cancel)

    def run(self, args: Sequence[str]) -> int:
        """Passthrough for `cwtui cost ...`."""
        try:
            argv = self.argv(list(args) or [DEFAULT_SUBCOMMAND])
        except CwtuiError:
            sys.stderr.write("  bun or npx is required to run ccusage.\n")
            sys.stderr.write("  Install Node.js: https://nodejs.org\n")
            sys.stderr.write("  Install Bun:     https://bun.sh\n")
            raise
        return self.runner.run_to_terminal(argv)
