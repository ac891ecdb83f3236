"""Interactive terminal front end for the claude-workspace CLI."""

__version__ = "0.1.0"
