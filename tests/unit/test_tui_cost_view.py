"""Unit tests for the Usage & Costs screen."""

import json
from unittest.mock import MagicMock

import pytest
from rich.text import Text

from cwtui.cli.tui.loader import LoadState
from cwtui.cli.tui.messages import ContentLoaded, KeyPress, PopView, Resize
from cwtui.cli.tui.tasks import CancelToken
from cwtui.cli.tui.theme import Theme
from cwtui.cli.tui.views.cost import COST_TABS, CostView, load_cost_report
from cwtui.errors import CommandError, TaskCancelled

pytestmark = pytest.mark.unit

DAILY_JSON = json.dumps(
    {
        "daily": [
            {"date": "2025-01-01", "totalCost": 1.5},
            {"date": "2025-01-02", "totalCost": 4.25},
        ]
    }
)


class FakeCostClient:
    """Returns canned ccusage output keyed by argv."""

    def __init__(self, outputs, on_capture=None):
        self.outputs = outputs
        self.calls = []
        self.on_capture = on_capture

    def capture(self, args, cancel=None):
        self.calls.append(list(args))
        if self.on_capture is not None:
            self.on_capture(cancel)
        value = self.outputs[" ".join(args)]
        if isinstance(value, Exception):
            raise value
        return value


def _press(view, key):
    _, tasks = view.update(KeyPress(key))
    return tasks


class TestLoadCostReport:
    """Tests for load_cost_report."""

    def test_chart_then_table(self):
        client = FakeCostClient({"daily --json": DAILY_JSON, "daily": "TABLE"})
        content = load_cost_report(client, "daily", 60, Theme(color=False), CancelToken())
        assert client.calls == [["daily", "--json"], ["daily"]]
        assert "┤" in content.plain
        assert "1/2" in content.plain
        assert content.plain.endswith("TABLE")

    def test_chart_failure_keeps_table(self):
        client = FakeCostClient({"weekly --json": "not json", "weekly": "TABLE"})
        content = load_cost_report(client, "weekly", 60, Theme(color=False), CancelToken())
        assert content.plain == "TABLE"

    def test_chart_command_failure_keeps_table(self):
        client = FakeCostClient({"blocks --json": CommandError(["bun"], 1, "boom"), "blocks": "TABLE"})
        content = load_cost_report(client, "blocks", 60, Theme(color=False), CancelToken())
        assert content.plain == "TABLE"

    def test_table_failure_fails_the_load(self):
        client = FakeCostClient({"daily --json": DAILY_JSON, "daily": CommandError(["bun"], 1, "boom")})
        with pytest.raises(CommandError):
            load_cost_report(client, "daily", 60, Theme(color=False), CancelToken())

    def test_cancel_between_runs_skips_table(self):
        token = CancelToken()
        client = FakeCostClient({"daily --json": DAILY_JSON, "daily": "TABLE"}, on_capture=lambda _c: token.cancel())
        with pytest.raises(TaskCancelled):
            load_cost_report(client, "daily", 60, Theme(color=False), token)
        assert client.calls == [["daily", "--json"]]

    def test_ansi_table_is_decoded(self):
        client = FakeCostClient({"daily --json": json.dumps({"daily": []}), "daily": "\x1b[1mTotal\x1b[0m"})
        content = load_cost_report(client, "daily", 60, Theme(color=False), CancelToken())
        assert content.plain == "Total"


class TestCostViewTabs:
    """Tab switching and generation-based staleness."""

    def test_initial_load_uses_first_tab(self, tui_config):
        view = CostView(tui_config, client=MagicMock())
        task = view.initialize()
        assert task.name == f"load:{view.tag_for(0)}"
        assert view.state is LoadState.LOADING

    def test_slow_result_from_previous_tab_is_dropped(self, tui_config):
        view = CostView(tui_config, client=MagicMock())
        view.initialize()
        first_token = view.tracker.token
        tasks = _press(view, "2")
        assert len(tasks) == 1
        assert first_token.cancelled
        assert view.active_tab == 1

        view.update(ContentLoaded(generation=0, tag=view.tag_for(0), payload=Text("daily")))
        assert view.state is LoadState.LOADING

        view.update(ContentLoaded(generation=1, tag=view.tag_for(1), payload=Text("weekly")))
        assert view.state is LoadState.READY
        assert view.viewport.plain == "weekly"

    def test_same_generation_wrong_tab_is_dropped(self, tui_config):
        view = CostView(tui_config, client=MagicMock())
        view.initialize()
        _press(view, "3")
        view.update(ContentLoaded(generation=1, tag=view.tag_for(0), payload=Text("daily")))
        assert view.state is LoadState.LOADING

    def test_other_view_results_are_dropped(self, tui_config):
        first = CostView(tui_config, client=MagicMock())
        second = CostView(tui_config, client=MagicMock())
        second.initialize()
        second.update(ContentLoaded(generation=0, tag=first.tag_for(0), payload=Text("x")))
        assert second.state is LoadState.LOADING

    def test_reselecting_ready_tab_is_a_no_op(self, tui_config):
        view = CostView(tui_config, client=MagicMock())
        view.initialize()
        view.update(ContentLoaded(generation=0, tag=view.tag_for(0), payload=Text("daily")))
        assert _press(view, "1") == []
        assert view.tracker.generation == 0

    def test_reselecting_loading_tab_restarts(self, tui_config):
        view = CostView(tui_config, client=MagicMock())
        view.initialize()
        assert len(_press(view, "1")) == 1
        assert view.tracker.generation == 1

    def test_cycle_wraps(self, tui_config):
        view = CostView(tui_config, client=MagicMock())
        view.initialize()
        _press(view, "shift+tab")
        assert view.active_tab == len(COST_TABS) - 1
        _press(view, "tab")
        assert view.active_tab == 0
        _press(view, "l")
        assert view.active_tab == 1
        _press(view, "h")
        assert view.active_tab == 0

    def test_error_state(self, tui_config):
        view = CostView(tui_config, client=MagicMock())
        view.initialize()
        view.update(ContentLoaded(generation=0, tag=view.tag_for(0), error="bun or npx not found"))
        assert view.state is LoadState.ERROR
        text = view.render().content.plain
        assert "bun or npx not found" in text
        assert "Press q to go back." in text

    def test_quit_cancels_and_pops(self, tui_config):
        view = CostView(tui_config, client=MagicMock())
        view.initialize()
        token = view.tracker.token
        tasks = _press(view, "esc")
        assert token.cancelled
        assert [t.run() for t in tasks] == [PopView()]


class TestCostViewEndToEnd:
    """Running the real load task against a fake client."""

    def test_load_and_render(self, tui_config):
        client = FakeCostClient({"daily --json": DAILY_JSON, "daily": "TABLE"})
        view = CostView(tui_config, client=client)
        task = view.initialize()
        view.update(Resize(80, 40))
        view.update(task.run())
        assert view.state is LoadState.READY
        text = view.render().content.plain
        assert "▶ Usage & Costs" in text
        assert "[1] Daily" in text
        assert "TABLE" in text
        assert "1-5 switch" in text

    def test_chart_uses_width_at_run_time(self, tui_config):
        """The view is sized after initialize; the chart must see that size."""
        entries = [{"date": f"2025-01-{d:02d}", "totalCost": float(d)} for d in range(1, 31)]
        client = FakeCostClient({"daily --json": json.dumps({"daily": entries}), "daily": "TABLE"})
        view = CostView(tui_config, client=client)
        task = view.initialize()
        view.update(Resize(100, 40))
        view.update(task.run())
        axis = next(line for line in view.viewport.plain.split("\n") if line.strip().startswith("───"))
        assert axis.count("─") == 30 * 3
