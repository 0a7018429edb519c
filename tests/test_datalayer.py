# -*- coding: utf-8 -*-
"""Tests for the rails runner data layer."""

import subprocess

import pytest

from mastoclean.datalayer import (
    CACHE_STATUS_SCRIPT, DOMAIN_BLOCKS_SCRIPT, DataLayerError, RailsDataLayer, parse_json_tail,
)


def test_domain_blocks_sorted(mock_subprocess, make_settings, tmp_path):
    mock_subprocess["check_output"].return_value = "mu.example\n\nalpha.example\n  zeta.example \n"

    domains = RailsDataLayer(make_settings()).domain_blocks()

    assert domains == ["alpha.example", "mu.example", "zeta.example"]
    args, kwargs = mock_subprocess["check_output"].call_args
    assert args[0] == ["rails", "runner", DOMAIN_BLOCKS_SCRIPT]
    assert kwargs["cwd"] == tmp_path


def test_uses_configured_rails_prefix(mock_subprocess, make_settings):
    mock_subprocess["check_output"].return_value = '{"ping": "PONG"}'

    RailsDataLayer(make_settings(rails=("bundle", "exec", "rails"))).cache_status()

    args, _ = mock_subprocess["check_output"].call_args
    assert args[0] == ["bundle", "exec", "rails", "runner", CACHE_STATUS_SCRIPT]


def test_json_answer_after_noise(mock_subprocess, make_settings):
    mock_subprocess["check_output"].return_value = (
        "W, [2026-10-19] WARN -- : deprecated\n"
        '{"local_accounts": 12, "statuses": 3400}'
    )

    counters = RailsDataLayer(make_settings()).instance_counters()

    assert counters == {"local_accounts": 12, "statuses": 3400}


def test_runner_failure_raises(mock_subprocess, make_settings):
    mock_subprocess["check_output"].side_effect = subprocess.CalledProcessError(1, ["rails"])

    with pytest.raises(DataLayerError, match="Queue status failed \\(exit code: 1\\)"):
        RailsDataLayer(make_settings()).queue_status()


def test_missing_rails_raises(mock_subprocess, make_settings):
    mock_subprocess["check_output"].side_effect = FileNotFoundError("rails")

    with pytest.raises(DataLayerError, match="System information failed"):
        RailsDataLayer(make_settings()).instance_info()


@pytest.mark.parametrize("output", ["", "not json", "[1, 2]"])
def test_parse_json_tail_rejects_bad_output(output):
    with pytest.raises(DataLayerError):
        parse_json_tail(output)


def test_verbose_echoes_command_and_workdir(mock_subprocess, make_settings, caplog, tmp_path):
    mock_subprocess["check_output"].return_value = '{"ping": "PONG"}'

    RailsDataLayer(make_settings(verbose=True)).cache_status()

    assert "Command: rails runner" in caplog.text
    assert f"Working directory: {tmp_path}" in caplog.text
