"""Shared test fixtures for the qlog test suite."""

import io
import json
import os
from datetime import datetime
from unittest.mock import patch

import pytest

from qlog import config as _config_mod
from qlog import log as _log_mod
from qlog.config import Switches
from qlog.log import Log


# Fixed instant used wherever DATE is rendered
FIXED_NOW = datetime(2024, 3, 9, 14, 5, 7)


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "slow: subprocess tests that start a real interpreter")


# ---------------------------------------------------------------------------
# Global state isolation
# ---------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def _isolate_globals():
    """Reset the default Log and switches around every test.

    Switches are forced to all-enabled so QLOG_NO_* variables in the
    developer's environment (or python -O) cannot change results.
    """
    saved_log = _log_mod._log
    saved_switches = _config_mod._switches
    _log_mod._log = None
    _config_mod._switches = Switches(assertions=True)
    yield
    _log_mod._log = saved_log
    _config_mod._switches = saved_switches


# ---------------------------------------------------------------------------
# Sinks and registries
# ---------------------------------------------------------------------------
@pytest.fixture
def buf():
    """A StringIO buffer for capturing output."""
    return io.StringIO()


@pytest.fixture
def log():
    """A Log with no external attachment, a fixed clock and all flags zero."""
    log = Log(clock=lambda: FIXED_NOW)
    log.set_trace_flags(0)
    return log


@pytest.fixture
def log_with_buf(log, buf):
    """A Log whose combined stream writes into buf."""
    log.combined_stream.attach(buf)
    return log


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def tmp_config_home(tmp_path):
    """Provide a temporary home directory for ~/.qlog/config.json."""
    home = tmp_path / "home"
    home.mkdir()
    with patch.dict(os.environ, {"HOME": str(home), "USERPROFILE": str(home)}):
        with patch("pathlib.Path.home", return_value=home):
            yield home


@pytest.fixture
def tmp_workdir(tmp_path, monkeypatch):
    """Run the test from an empty directory with no .qlog.json above it."""
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    with patch("qlog.config.find_project_config", return_value=None):
        yield work


@pytest.fixture
def sample_project_config(tmp_path):
    """Write a .qlog.json file in a temporary project directory."""
    project = tmp_path / "project"
    project.mkdir()
    config = {
        "trace": "line",
        "attach": ["error:stderr"],
        "disable": ["debug"],
    }
    path = project / ".qlog.json"
    path.write_text(json.dumps(config, indent=2), encoding="utf-8")
    return path, config


@pytest.fixture
def sample_global_config(tmp_config_home):
    """Write a global config file in the tmp home."""
    config_dir = tmp_config_home / ".qlog"
    config_dir.mkdir()
    config = {
        "trace": "date",
        "attach": ["combined:stdout"],
        "disable": ["log"],
    }
    path = config_dir / "config.json"
    path.write_text(json.dumps(config, indent=2), encoding="utf-8")
    return path, config
