# -*- coding: utf-8 -*-
"""Shared fixtures for mastoclean tests."""

import pytest
import sys
from pathlib import Path
from typing import Any, Dict, List
from unittest.mock import Mock

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from mastoclean.config import Settings
from mastoclean.datalayer import DataLayerError
from mastoclean.logging_setup import setup_logging
from mastoclean.runner import CommandRunner
from mastoclean.steps import StepContext


class FakeDataLayer:
    """In-memory stand-in for the rails runner data layer."""

    def __init__(self, domains=None, fail=()):
        self.domains = list(domains or [])
        self.fail = set(fail)
        self.calls: List[str] = []

    def _answer(self, query: str, value: Any) -> Any:
        self.calls.append(query)
        if query in self.fail:
            raise DataLayerError(f"{query} failed (exit code: 1)")
        return value

    def domain_blocks(self) -> List[str]:
        return self._answer("domain_blocks", sorted(self.domains))

    def instance_info(self) -> Dict[str, Any]:
        return self._answer("instance_info", {"version": "4.3.0", "domain": "example.social"})

    def instance_counters(self) -> Dict[str, Any]:
        return self._answer("instance_counters", {"local_accounts": 12, "statuses": 3400})

    def queue_status(self) -> Dict[str, Any]:
        return self._answer("queue_status", {"processes": 2, "enqueued": 0})

    def cache_status(self) -> Dict[str, Any]:
        return self._answer("cache_status", {"ping": "PONG"})


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """Run every test in a scratch directory with no user config file."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("MASTOCLEAN_CONFIG", str(tmp_path / "no-config.toml"))
    setup_logging()
    return tmp_path


@pytest.fixture
def mock_subprocess(mocker):
    """Mock subprocess calls."""
    mock_run = mocker.patch("subprocess.run")
    mock_run.return_value = Mock(returncode=0)

    mock_check_output = mocker.patch("subprocess.check_output")
    mock_check_output.return_value = ""

    return {"run": mock_run, "check_output": mock_check_output}


@pytest.fixture
def mock_tools_present(mocker):
    """tootctl and rails resolvable on PATH."""
    return mocker.patch("mastoclean.runner.which", side_effect=lambda cmd: f"/usr/local/bin/{cmd}")


@pytest.fixture
def make_settings(tmp_path):
    def _make(**overrides) -> Settings:
        overrides.setdefault("workdir", tmp_path)
        return Settings(**overrides)
    return _make


@pytest.fixture
def fake_data_layer():
    return FakeDataLayer(domains=["gamma.example", "alpha.example", "beta.example"])


@pytest.fixture
def make_ctx(make_settings, fake_data_layer):
    def _make(data_layer=None, **overrides) -> StepContext:
        settings = make_settings(**overrides)
        return StepContext(
            settings=settings,
            runner=CommandRunner(settings),
            data_layer=data_layer if data_layer is not None else fake_data_layer,
        )
    return _make


def run_commands(mock_run) -> List[List[str]]:
    """Argument vectors passed to the mocked subprocess.run, in call order."""
    return [list(c.args[0]) for c in mock_run.call_args_list]
