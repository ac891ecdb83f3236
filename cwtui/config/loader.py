import os
import re
from pathlib import Path
from typing import Optional

import structlog
import yaml
from pydantic import BaseModel

from cwtui.config.schema import WorkspaceConfig

logger = structlog.get_logger(__name__)

CONFIG_ENV_VAR = "CWTUI_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/cwtui/config.yml")


def expand_env_vars(config: object) -> object:
    """Recursively replace ${VAR} patterns with environment variable values."""
    if isinstance(config, dict):
        return {k: expand_env_vars(v) for k, v in config.items()}
    if isinstance(config, list):
        return [expand_env_vars(item) for item in config]
    if isinstance(config, str):

        def replace_env_var(match: re.Match[str]) -> str:
            return os.getenv(match.group(1), match.group(0))

        return re.sub(r"\$\{([^}]+)\}", replace_env_var, config)
    return config


def _warn_unknown_keys(model: BaseModel, path: str, config_path: Path) -> None:
    if model.model_extra:
        logger.warning("Unknown keys in %s at %s: %s", path, config_path, list(model.model_extra.keys()))
    for field_name, field_value in model.__dict__.items():
        if isinstance(field_value, BaseModel):
            _warn_unknown_keys(field_value, f"{path}.{field_name}", config_path)


def resolve_config_path(path: Optional[Path] = None) -> Path:
    if path is not None:
        return path
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_PATH.expanduser()


def load_config(path: Optional[Path] = None) -> WorkspaceConfig:
    """Load and validate the cwtui configuration file.

    Args:
        path: Explicit config path. Defaults to $CWTUI_CONFIG, then ~/.config/cwtui/config.yml.

    Returns:
        The validated configuration, or defaults when the file is absent or unreadable.
    """
    config_path = resolve_config_path(path)
    if not config_path.exists():
        return WorkspaceConfig()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to read config file %s: %s", config_path, e)
        return WorkspaceConfig()

    model = WorkspaceConfig.model_validate(expand_env_vars(raw))
    _warn_unknown_keys(model, "root", config_path)
    return model
