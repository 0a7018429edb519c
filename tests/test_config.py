# -*- coding: utf-8 -*-
"""Tests for configuration loading and validation."""

from pathlib import Path

import pytest

from mastoclean.config import (
    Settings, default_config, load_config, parser_defaults, validate_settings,
)


@pytest.mark.parametrize("value", [1, 2, 16, 31, 32])
def test_concurrency_in_range(value):
    assert validate_settings(Settings(concurrency=value)) == []


@pytest.mark.parametrize("value", [0, 33, 100])
def test_concurrency_out_of_range(value):
    errors = validate_settings(Settings(concurrency=value))
    assert len(errors) == 1
    assert "Concurrency must be between 1 and 32" in errors[0]


@pytest.mark.parametrize("field", ["media_days", "profile_media_days", "preview_cards_days", "statuses_days"])
@pytest.mark.parametrize("value", [1, 30, 365])
def test_days_in_range(field, value):
    assert validate_settings(Settings(**{field: value})) == []


@pytest.mark.parametrize("field", ["media_days", "profile_media_days", "preview_cards_days", "statuses_days"])
@pytest.mark.parametrize("value", [0, 366, 1000])
def test_days_out_of_range(field, value):
    errors = validate_settings(Settings(**{field: value}))
    assert errors == [f"--{field.replace('_', '-')} must be between 1 and 365 (got {value})"]


def test_every_bad_value_reported():
    errors = validate_settings(Settings(concurrency=0, media_days=0, statuses_days=400))
    assert len(errors) == 3


def test_settings_are_immutable():
    settings = Settings()
    with pytest.raises(Exception):
        settings.concurrency = 4  # type: ignore[misc]


def test_domain_blocks_path_relative_to_workdir(tmp_path):
    settings = Settings(workdir=tmp_path)
    assert settings.domain_blocks_path == tmp_path / "domain_blocks.txt"

    absolute = tmp_path / "elsewhere" / "blocks.txt"
    assert Settings(workdir=tmp_path, domain_blocks_file=absolute).domain_blocks_path == absolute


def test_load_config_without_file_returns_defaults():
    assert load_config() == default_config()


def test_load_config_overlays_file(tmp_path, monkeypatch):
    path = tmp_path / "config.toml"
    path.write_text(
        '[defaults]\nconcurrency = 8\ninclude_subdomains = true\n\n'
        '[tools]\ntootctl = "env RAILS_ENV=production bin/tootctl"\n\n'
        '[paths]\nworkdir = "/home/mastodon/live"\n',
        encoding="utf-8",
    )
    monkeypatch.setenv("MASTOCLEAN_CONFIG", str(path))

    config = load_config()

    assert config["defaults"]["concurrency"] == 8
    assert config["defaults"]["include_subdomains"] is True
    assert config["defaults"]["media_days"] == 90
    assert config["paths"]["workdir"] == "/home/mastodon/live"


def test_load_config_rejects_wrong_types(tmp_path, monkeypatch, caplog):
    path = tmp_path / "config.toml"
    path.write_text('[defaults]\nconcurrency = "lots"\nmedia_days = true\nunknown = 1\n', encoding="utf-8")
    monkeypatch.setenv("MASTOCLEAN_CONFIG", str(path))

    config = load_config()

    assert config["defaults"]["concurrency"] == 16
    assert config["defaults"]["media_days"] == 90
    assert "Invalid value for defaults.concurrency" in caplog.text


def test_load_config_invalid_toml_falls_back(tmp_path, monkeypatch, caplog):
    path = tmp_path / "config.toml"
    path.write_text("[defaults\nconcurrency = ", encoding="utf-8")
    monkeypatch.setenv("MASTOCLEAN_CONFIG", str(path))

    assert load_config() == default_config()
    assert "Error loading config" in caplog.text


def test_parser_defaults_split_tool_commands(tmp_path):
    config = default_config()
    config["tools"]["rails"] = "bundle exec rails"
    config["paths"]["workdir"] = str(tmp_path)

    defaults = parser_defaults(config)

    assert defaults["rails"] == ("bundle", "exec", "rails")
    assert defaults["tootctl"] == ("tootctl",)
    assert defaults["workdir"] == tmp_path
    assert defaults["domain_blocks_file"] == Path("domain_blocks.txt")
    assert defaults["concurrency"] == 16


def test_parser_defaults_workdir_falls_back_to_cwd(tmp_path):
    assert parser_defaults(default_config())["workdir"] == Path.cwd()
