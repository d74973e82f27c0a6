"""Shared pytest fixtures for Cadence tests."""

import sys
import pytest

from PyQt6.QtCore import QCoreApplication

from cadence.timer.engine import Timer

from helpers import ManualScheduler


@pytest.fixture(scope="session")
def qapp():
    """A single Qt application instance shared across the entire test run."""
    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point every test at a settings file inside its own tmp dir."""
    monkeypatch.setattr("cadence.settings.APP_SUPPORT_DIR", tmp_path)
    monkeypatch.setattr("cadence.settings.SETTINGS_PATH", tmp_path / "settings.json")
    yield


@pytest.fixture
def scheduler():
    """Manual scheduler + clock starting at t=0."""
    return ManualScheduler()


@pytest.fixture
def make_timer(qapp, scheduler):
    """Factory for Timers driven by the manual scheduler."""

    def factory(duration, **kwargs):
        return Timer(duration, scheduler=scheduler, clock=scheduler.now, **kwargs)

    return factory
