"""Boot-time configuration shared by every view."""

from __future__ import annotations

from dataclasses import dataclass, field

from cwtui.cli.tui.theme import Theme, is_accessible
from cwtui.config.schema import WorkspaceConfig
from cwtui.runner import CommandRunner


@dataclass(frozen=True)
class TuiConfig:
    theme: Theme
    version: str
    color: bool = True
    settings: WorkspaceConfig = field(default_factory=WorkspaceConfig)
    runner: CommandRunner = field(default_factory=CommandRunner)

    @classmethod
    def build(cls, settings: WorkspaceConfig, version: str, accessible: bool | None = None) -> "TuiConfig":
        """Derive theme and runner from loaded settings.

        Args:
            settings: Loaded config file.
            version: Version string shown in the launcher banner.
            accessible: Result of the single accessibility check; checked here when None.
        """
        if accessible is None:
            accessible = is_accessible()
        color = settings.color and not accessible
        return cls(
            theme=Theme.from_config(settings.theme, color_enabled=color),
            version=version,
            color=color,
            settings=settings,
            runner=CommandRunner(settings.backend),
        )
