# -*- coding: utf-8 -*-
"""Tests for the command runner and prerequisite check."""

import subprocess
from unittest.mock import Mock

from mastoclean.runner import EXIT_NOT_FOUND, SMOKE_SCRIPT, CommandRunner


def test_execute_success(mock_subprocess, make_settings, tmp_path):
    runner = CommandRunner(make_settings())

    result = runner.execute("Prune non-interactive accounts", ["tootctl", "accounts", "prune"])

    assert result.success
    assert result.exit_code == 0
    mock_subprocess["run"].assert_called_once_with(
        ["tootctl", "accounts", "prune"], cwd=tmp_path, stderr=subprocess.STDOUT, check=False
    )


def test_execute_failure_reports_exit_code(mock_subprocess, make_settings, caplog):
    mock_subprocess["run"].return_value = Mock(returncode=3)
    runner = CommandRunner(make_settings())

    result = runner.execute("Build all feeds", ["tootctl", "feeds", "build"])

    assert not result.success
    assert result.exit_code == 3
    assert "Failed: Build all feeds (exit code: 3)" in caplog.text


def test_execute_missing_program_never_raises(mock_subprocess, make_settings, caplog):
    mock_subprocess["run"].side_effect = FileNotFoundError("No such file or directory: 'tootctl'")
    runner = CommandRunner(make_settings())

    result = runner.execute("Clear cache", ["tootctl", "cache", "clear"])

    assert not result.success
    assert result.exit_code == EXIT_NOT_FOUND
    assert "could not start tootctl" in caplog.text


def test_dry_run_suppresses_only_when_it_applies(mock_subprocess, make_settings, caplog):
    runner = CommandRunner(make_settings(dry_run=True))

    suppressed = runner.execute("Purge domain: a.example", ["tootctl", "domains", "purge", "a.example"],
                                dry_run_applies=True)
    assert suppressed.success
    mock_subprocess["run"].assert_not_called()
    assert "DRY RUN: Would execute: tootctl domains purge a.example" in caplog.text

    runner.execute("Remove orphaned media files", ["tootctl", "media", "remove-orphans"])
    mock_subprocess["run"].assert_called_once()


def test_verbose_echoes_command_and_workdir(mock_subprocess, make_settings, caplog, tmp_path):
    runner = CommandRunner(make_settings(verbose=True))

    runner.execute("Media statistics", ["tootctl", "media", "usage"])

    assert "Command: tootctl media usage" in caplog.text
    assert f"Working directory: {tmp_path}" in caplog.text


def test_quiet_mode_hides_command(mock_subprocess, make_settings, caplog):
    CommandRunner(make_settings()).execute("Media statistics", ["tootctl", "media", "usage"])

    assert "Command: tootctl" not in caplog.text


def test_command_prefixes(make_settings):
    runner = CommandRunner(make_settings(tootctl=("bin/tootctl",), rails=("bundle", "exec", "rails")))

    assert runner.tootctl("cache", "clear") == ["bin/tootctl", "cache", "clear"]
    assert runner.rails_runner("puts 1") == ["bundle", "exec", "rails", "runner", "puts 1"]


def test_check_prerequisites_ok(mock_subprocess, mock_tools_present, make_settings, tmp_path):
    runner = CommandRunner(make_settings())

    assert runner.check_prerequisites()
    mock_subprocess["check_output"].assert_called_once()
    args, kwargs = mock_subprocess["check_output"].call_args
    assert args[0] == ["rails", "runner", SMOKE_SCRIPT]
    assert kwargs["cwd"] == tmp_path


def test_check_prerequisites_missing_command(mock_subprocess, mocker, make_settings, caplog):
    mocker.patch("mastoclean.runner.which", side_effect=lambda cmd: None if cmd == "tootctl" else "/usr/bin/rails")

    assert not CommandRunner(make_settings()).check_prerequisites()
    assert "Missing required commands: tootctl" in caplog.text
    mock_subprocess["check_output"].assert_not_called()


def test_check_prerequisites_rails_smoke_failure(mock_subprocess, mock_tools_present, make_settings, caplog):
    mock_subprocess["check_output"].side_effect = subprocess.CalledProcessError(1, ["rails", "runner"])

    assert not CommandRunner(make_settings()).check_prerequisites()
    assert "Rails environment not properly configured" in caplog.text
