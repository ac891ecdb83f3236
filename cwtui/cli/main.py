"""cwtui CLI entry point."""

from __future__ import annotations

import sys

import structlog
from pydantic import ValidationError

from cwtui import __version__, sessions
from cwtui.cli.tui.app import run_tui
from cwtui.cli.tui.context import TuiConfig
from cwtui.cli.tui.theme import is_accessible
from cwtui.config import WorkspaceConfig, load_config
from cwtui.cost import CostClient
from cwtui.errors import CwtuiError
from cwtui.logging_config import setup_logging
from cwtui.runner import CommandRunner

logger = structlog.get_logger(__name__)

# Subcommands implemented by the backend binary and passed through unchanged
FORWARDED_COMMANDS = (
    "setup",
    "attach",
    "enrich",
    "sandbox",
    "mcp",
    "upgrade",
    "doctor",
    "skills",
    "statusline",
    "memory",
)

HELP_TEXT = """
cwtui - interactive front end for claude-workspace

Usage:
  cwtui                          Open the interactive launcher
  cwtui <command> [options]

Commands:
  setup                          First-time setup & API key provisioning
  attach <project-path>          Attach platform config to a project
  enrich [project-path]          Re-generate .claude/CLAUDE.md with AI analysis
  sandbox <project-path> <name>  Create a sandboxed branch worktree
  mcp add <name> [options]       Add an MCP server (local or remote)
  mcp list                       List all configured MCP servers
  upgrade [--yes]                Upgrade claude-workspace and Claude Code CLI
  doctor                         Check platform configuration health
  skills                         List available skills and personal commands
  statusline                     Configure Claude Code statusline
  memory [subcommand]            Inspect and manage memory layers
  sessions [list|show] [options] Browse and review session prompts
    list                         List sessions for current project (default)
    list --all                   List sessions across all projects
    list --limit N               Limit results (default: 20)
    show <session-id>            Show all user prompts from a session
  cost [subcommand] [options]    View Claude Code usage and costs (via ccusage)
    daily|weekly|monthly         Usage by time period (default: daily)
    session                      Usage by conversation session
    blocks                       Usage by 5-hour billing window

Options:
  --help, -h       Show this help message
  --version, -v    Show version

Environment:
  CWTUI_CONFIG     Config file (default: ~/.config/cwtui/config.yml)
  CWTUI_LOG_LEVEL  Log level (default: WARNING)
  CWTUI_LOG_FILE   Log file (default: ~/.local/state/cwtui/cwtui.log)
  NO_COLOR         Disable colors; with ACCESSIBLE=1, skip the launcher
"""


def print_help() -> None:
    sys.stdout.write(HELP_TEXT)


def _run_launcher(settings: WorkspaceConfig) -> int:
    accessible = is_accessible()
    if accessible or not sys.stdout.isatty():
        print_help()
        return 0
    return run_tui(TuiConfig.build(settings, __version__, accessible=accessible))


def _main_impl(argv: list[str]) -> int:
    if argv and argv[0] in ("--help", "-h"):
        print_help()
        return 0
    if argv and argv[0] in ("--version", "-v"):
        sys.stdout.write(f"cwtui {__version__}\n")
        return 0

    settings = load_config()
    setup_logging(settings.log_level)
    logger.debug("cwtui %s starting", __version__, argv=argv)

    if not argv:
        return _run_launcher(settings)

    command, args = argv[0], argv[1:]
    runner = CommandRunner(settings.backend)
    if command == "sessions":
        return sessions.run(args)
    if command == "cost":
        return CostClient(runner, settings.ccusage_runtime).run(args)
    if command in FORWARDED_COMMANDS:
        return runner.run_to_terminal(runner.backend_argv(command, args))

    sys.stderr.write(f"Unknown command: {command}\n")
    print_help()
    return 1


def main() -> None:
    try:
        code = _main_impl(sys.argv[1:])
    except KeyboardInterrupt:
        sys.exit(130)
    except (CwtuiError, ValidationError, OSError) as exc:
        sys.stderr.write(f"cwtui error: {exc}\n")
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
