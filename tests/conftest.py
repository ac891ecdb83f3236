"""Pytest configuration for cwtui tests."""

import logging

import pytest
import structlog

from cwtui.cli.tui.context import TuiConfig
from cwtui.cli.tui.theme import Theme


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch):
    """Keep structlog off stdout and never touch the real log file."""
    monkeypatch.setattr("cwtui.cli.main.setup_logging", lambda *_args, **_kwargs: None)
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(logging.CRITICAL))
    yield
    structlog.reset_defaults()
    logging.getLogger("cwtui").handlers.clear()


@pytest.fixture
def tui_config():
    """Colorless config so rendered text can be compared as plain strings."""
    return TuiConfig(theme=Theme(color=False), version="1.2.3", color=False)


def pytest_collection_modifyitems(config, items):
    """Set per-marker timeouts: unit=1s, integration=5s."""
    for item in items:
        if "unit" in item.keywords:
            item.add_marker(pytest.mark.timeout(1))
        elif "integration" in item.keywords:
            item.add_marker(pytest.mark.timeout(5))
