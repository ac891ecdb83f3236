"""Unit tests for config loading, theme construction and accessibility."""

import pytest
from pydantic import ValidationError
from rich.style import Style

from cwtui.cli.tui.context import TuiConfig
from cwtui.cli.tui.theme import PRIMARY, Theme, is_accessible
from cwtui.config import ThemeColors, WorkspaceConfig, load_config
from cwtui.config.loader import expand_env_vars, resolve_config_path

pytestmark = pytest.mark.unit


class TestLoadConfig:
    """Tests for load_config."""

    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "missing.yml")
        assert config == WorkspaceConfig()
        assert config.backend == "claude-workspace"
        assert config.ccusage_runtime == "auto"

    def test_reads_values_and_expands_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CW_BIN", "/opt/cw/bin/claude-workspace")
        path = tmp_path / "config.yml"
        path.write_text(
            "backend: ${CW_BIN}\nccusage_runtime: npx\nsessions_limit: 5\ntheme:\n  primary: '#112233'\n",
            encoding="utf-8",
        )
        config = load_config(path)
        assert config.backend == "/opt/cw/bin/claude-workspace"
        assert config.ccusage_runtime == "npx"
        assert config.sessions_limit == 5
        assert config.theme.primary == "#112233"

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == WorkspaceConfig()

    def test_malformed_yaml_gives_defaults(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("backend: [unclosed\n", encoding="utf-8")
        assert load_config(path) == WorkspaceConfig()

    def test_invalid_values_raise(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("theme:\n  primary: purple\n", encoding="utf-8")
        with pytest.raises(ValidationError, match="Invalid color"):
            load_config(path)

    def test_invalid_runtime_raises(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("ccusage_runtime: deno\n", encoding="utf-8")
        with pytest.raises(ValidationError):
            load_config(path)

    def test_unknown_keys_are_kept_as_extra(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("colour: false\n", encoding="utf-8")
        config = load_config(path)
        assert config.model_extra == {"colour": False}
        assert config.color is True

    def test_env_var_selects_path(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.yml"
        monkeypatch.setenv("CWTUI_CONFIG", str(path))
        assert resolve_config_path() == path
        assert resolve_config_path(tmp_path / "explicit.yml") == tmp_path / "explicit.yml"

    def test_expand_env_vars_leaves_unknown(self, monkeypatch):
        monkeypatch.delenv("CWTUI_TEST_UNSET", raising=False)
        assert expand_env_vars({"a": ["${CWTUI_TEST_UNSET}"], "b": 1}) == {"a": ["${CWTUI_TEST_UNSET}"], "b": 1}


class TestTheme:
    """Tests for Theme and TuiConfig.build."""

    def test_overrides_from_config(self):
        theme = Theme.from_config(ThemeColors(primary="#000000"))
        assert theme.primary == "#000000"
        assert theme.fg(theme.primary) == Style(color="#000000")

    def test_defaults(self):
        assert Theme.from_config(None).primary == PRIMARY

    def test_styles_are_shared_across_themes(self):
        first = Theme().fg("#123456", bold=True)
        assert Theme(primary="#000000").fg("#123456", bold=True) is first
        assert Theme().fg("#123456") is not first
        assert Theme() == Theme()
        assert "_styles" not in vars(Theme())

    def test_color_disabled_gives_null_styles(self):
        theme = Theme(color=False)
        assert theme.fg(theme.primary, bold=True) == Style.null()
        assert theme.title == Style.null()

    def test_section_banner_is_three_lines(self):
        banner = Theme(color=False).section_banner("Sessions").plain
        assert banner == "\n" + "─" * 40 + "\n  ▶ Sessions\n"

    def test_help_line(self):
        text = Theme(color=False).help_line([("q", "quit"), ("?", "help")], trail="50%")
        assert text.plain == "q quit  ? help  50%"

    @pytest.mark.parametrize(
        "environ,expected",
        [({}, False), ({"NO_COLOR": "1"}, True), ({"ACCESSIBLE": "1"}, True), ({"ACCESSIBLE": "0"}, False)],
    )
    def test_is_accessible(self, environ, expected):
        assert is_accessible(environ) is expected

    def test_build_disables_color_when_accessible(self):
        config = TuiConfig.build(WorkspaceConfig(backend="cw"), "9.9.9", accessible=True)
        assert config.color is False
        assert config.theme.color is False
        assert config.runner.backend == "cw"
        assert config.version == "9.9.9"

    def test_build_respects_color_setting(self):
        config = TuiConfig.build(WorkspaceConfig(color=False), "1", accessible=False)
        assert config.color is False
        assert TuiConfig.build(WorkspaceConfig(), "1", accessible=False).color is True
