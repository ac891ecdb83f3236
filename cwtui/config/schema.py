import re
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_RELEASES_URL = "https://api.github.com/repos/lamchakchan/claude-workspace/releases/latest"

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


class ThemeColors(BaseModel):
    model_config = ConfigDict(extra="allow")
    primary: Optional[str] = None
    secondary: Optional[str] = None
    accent: Optional[str] = None
    success: Optional[str] = None
    warning: Optional[str] = None
    error: Optional[str] = None
    muted: Optional[str] = None

    @field_validator("primary", "secondary", "accent", "success", "warning", "error", "muted")
    @classmethod
    def validate_hex(cls, v: Optional[str]) -> Optional[str]:
        """Colors must be #RRGGBB."""
        if v is None:
            return v
        if not _HEX_COLOR.match(v):
            raise ValueError(f"Invalid color: {v}. Expected format: #RRGGBB (e.g., '#7C3AED')")
        return v


class WorkspaceConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    backend: str = "claude-workspace"  # binary that implements the forwarded subcommands
    ccusage_runtime: Literal["auto", "bun", "npx"] = "auto"
    sessions_limit: int = Field(default=50, ge=1)
    releases_url: str = DEFAULT_RELEASES_URL
    release_timeout_s: float = Field(default=10.0, gt=0)
    log_level: Optional[str] = None
    color: bool = True
    theme: ThemeColors = ThemeColors()
