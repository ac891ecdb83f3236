from cwtui.config.loader import load_config
from cwtui.config.schema import ThemeColors, WorkspaceConfig

__all__ = ["ThemeColors", "WorkspaceConfig", "load_config"]
