#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Configuration management for mastoclean.

Settings are resolved once per run: built-in defaults, overlaid by the
optional config.toml, overlaid by command-line flags. The resulting
`Settings` value is immutable and handed to every component explicitly.
"""

from __future__ import annotations
import os
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

# TOML support (tomllib for Python 3.11+, tomli for <3.11)
try:
    import tomllib
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore

from mastoclean.catalog import Operation
from mastoclean.constants import (
    CONCURRENCY_MAX, CONCURRENCY_MIN, CONFIG_ENV_VAR, DAYS_MAX, DAYS_MIN,
    DEFAULT_CONCURRENCY, DEFAULT_INCLUDE_SUBDOMAINS, DEFAULT_MEDIA_DAYS,
    DEFAULT_PREVIEW_CARDS_DAYS, DEFAULT_PROFILE_MEDIA_DAYS, DEFAULT_RAILS,
    DEFAULT_STATUSES_DAYS, DEFAULT_TOOTCTL, DOMAIN_BLOCKS_FILE,
)
from mastoclean.logging_setup import logger

DAY_FIELDS = ("media_days", "profile_media_days", "preview_cards_days", "statuses_days")


@dataclass(frozen=True)
class Settings:
    concurrency: int = DEFAULT_CONCURRENCY
    media_days: int = DEFAULT_MEDIA_DAYS
    profile_media_days: int = DEFAULT_PROFILE_MEDIA_DAYS
    preview_cards_days: int = DEFAULT_PREVIEW_CARDS_DAYS
    statuses_days: int = DEFAULT_STATUSES_DAYS
    dry_run: bool = False
    include_subdomains: bool = DEFAULT_INCLUDE_SUBDOMAINS
    verbose: bool = False
    log_to_file: bool = False
    log_file: Optional[Path] = None
    operation: Operation = Operation.FULL
    tootctl: Tuple[str, ...] = (DEFAULT_TOOTCTL,)
    rails: Tuple[str, ...] = (DEFAULT_RAILS,)
    workdir: Path = field(default_factory=Path.cwd)
    domain_blocks_file: Path = Path(DOMAIN_BLOCKS_FILE)

    @property
    def domain_blocks_path(self) -> Path:
        if self.domain_blocks_file.is_absolute():
            return self.domain_blocks_file
        return self.workdir / self.domain_blocks_file


def config_dir() -> Path:
    return Path("~/.config/mastoclean").expanduser()


def config_file_path() -> Path:
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return config_dir() / "config.toml"


def default_config() -> Dict[str, Any]:
    """Return default configuration."""
    return {
        "defaults": {
            "concurrency": DEFAULT_CONCURRENCY,
            "media_days": DEFAULT_MEDIA_DAYS,
            "profile_media_days": DEFAULT_PROFILE_MEDIA_DAYS,
            "preview_cards_days": DEFAULT_PREVIEW_CARDS_DAYS,
            "statuses_days": DEFAULT_STATUSES_DAYS,
            "include_subdomains": DEFAULT_INCLUDE_SUBDOMAINS,
        },
        "tools": {
            "tootctl": DEFAULT_TOOTCTL,
            "rails": DEFAULT_RAILS,
        },
        "paths": {
            "workdir": "",
            "domain_blocks_file": DOMAIN_BLOCKS_FILE,
        },
    }


def load_config() -> Dict[str, Any]:
    """Load configuration from config.toml merged over the defaults."""
    config = default_config()
    config_path = config_file_path()

    if not config_path.exists():
        logger.debug("Config file not found, using defaults")
        return config

    try:
        with open(config_path, "rb") as f:
            loaded = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.error(f"Error loading config {config_path}: {e}")
        return config

    for section, values in loaded.items():
        if section not in config or not isinstance(values, dict):
            logger.debug(f"Ignoring unknown config section: {section}")
            continue
        for key, value in values.items():
            if key not in config[section]:
                logger.debug(f"Ignoring unknown config key: {section}.{key}")
                continue
            expected = type(config[section][key])
            if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
                logger.error(f"Invalid value for {section}.{key} in {config_path}: {value!r}")
                continue
            config[section][key] = value
    logger.debug(f"Loaded config from {config_path}")
    return config


def parser_defaults(config: Dict[str, Any]) -> Dict[str, Any]:
    """Flatten a loaded config into argparse defaults."""
    defaults = dict(config["defaults"])
    defaults["tootctl"] = tuple(shlex.split(config["tools"]["tootctl"])) or (DEFAULT_TOOTCTL,)
    defaults["rails"] = tuple(shlex.split(config["tools"]["rails"])) or (DEFAULT_RAILS,)
    workdir = config["paths"]["workdir"]
    defaults["workdir"] = Path(workdir).expanduser() if workdir else Path.cwd()
    defaults["domain_blocks_file"] = Path(config["paths"]["domain_blocks_file"])
    return defaults


def settings_from_namespace(ns: Any) -> Settings:
    return Settings(
        concurrency=ns.concurrency,
        media_days=ns.media_days,
        profile_media_days=ns.profile_media_days,
        preview_cards_days=ns.preview_cards_days,
        statuses_days=ns.statuses_days,
        dry_run=ns.dry_run,
        include_subdomains=ns.include_subdomains,
        verbose=ns.verbose,
        log_to_file=ns.log_to_file,
        operation=ns.operation or Operation.FULL,
        tootctl=tuple(ns.tootctl),
        rails=tuple(ns.rails),
        workdir=ns.workdir,
        domain_blocks_file=ns.domain_blocks_file,
    )


def validate_settings(settings: Settings) -> List[str]:
    """Return one message per out-of-range value (empty when valid)."""
    errors = []
    if not CONCURRENCY_MIN <= settings.concurrency <= CONCURRENCY_MAX:
        errors.append(
            f"Concurrency must be between {CONCURRENCY_MIN} and {CONCURRENCY_MAX} "
            f"(got {settings.concurrency})"
        )
    for name in DAY_FIELDS:
        value = getattr(settings, name)
        if not DAYS_MIN <= value <= DAYS_MAX:
            flag = "--" + name.replace("_", "-")
            errors.append(f"{flag} must be between {DAYS_MIN} and {DAYS_MAX} (got {value})")
    return errors
