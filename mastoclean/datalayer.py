#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Read-only access to the Mastodon data layer through `rails runner`.

Each query is a fixed Ruby snippet; nothing is interpolated into it.
Structured answers come back as a JSON object on the last output line.
"""

from __future__ import annotations
import json
import subprocess
from typing import Any, Dict, List, Protocol

from mastoclean.config import Settings
from mastoclean.helpers import capture, printable
from mastoclean.logging_setup import logger

DOMAIN_BLOCKS_SCRIPT = "DomainBlock.order(:domain).pluck(:domain).each { |d| puts d }"

INSTANCE_INFO_SCRIPT = (
    "require 'json'; "
    "puts({version: Mastodon::Version.to_s, domain: Rails.configuration.x.local_domain, "
    "environment: Rails.env, ruby: RUBY_VERSION, rails: Rails.version}.to_json)"
)

INSTANCE_COUNTERS_SCRIPT = (
    "require 'json'; "
    "puts({local_accounts: Account.local.count, remote_accounts: Account.remote.count, "
    "statuses: Status.count, media_attachments: MediaAttachment.count, "
    "preview_cards: PreviewCard.count, domain_blocks: DomainBlock.count}.to_json)"
)

QUEUE_STATUS_SCRIPT = (
    "require 'json'; require 'sidekiq/api'; stats = Sidekiq::Stats.new; "
    "puts({processes: Sidekiq::ProcessSet.new.size, busy_workers: Sidekiq::Workers.new.size, "
    "enqueued: stats.enqueued, scheduled: stats.scheduled_size, retries: stats.retry_size, "
    "dead: stats.dead_size}.to_json)"
)

CACHE_STATUS_SCRIPT = (
    "require 'json'; "
    "puts({ping: Rails.cache.redis.with { |r| r.ping }, store: Rails.cache.class.name}.to_json)"
)


class DataLayerError(Exception):
    """A data-layer query failed or returned something unparseable."""


class DataLayer(Protocol):
    def domain_blocks(self) -> List[str]: ...

    def instance_info(self) -> Dict[str, Any]: ...

    def instance_counters(self) -> Dict[str, Any]: ...

    def queue_status(self) -> Dict[str, Any]: ...

    def cache_status(self) -> Dict[str, Any]: ...


def parse_json_tail(output: str) -> Dict[str, Any]:
    """Parse the last non-empty line of `output` as a JSON object."""
    lines = [ln for ln in output.splitlines() if ln.strip()]
    if not lines:
        raise DataLayerError("no output")
    try:
        data = json.loads(lines[-1])
    except ValueError as e:
        raise DataLayerError(f"unexpected output: {lines[-1]!r}") from e
    if not isinstance(data, dict):
        raise DataLayerError(f"expected a JSON object, got {type(data).__name__}")
    return data


class RailsDataLayer:
    """DataLayer backed by `rails runner` in the Mastodon directory."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def _run(self, label: str, script: str) -> str:
        cmd = [*self.settings.rails, "runner", script]
        if self.settings.verbose:
            logger.info(f"Command: {printable(cmd)}")
            logger.info(f"Working directory: {self.settings.workdir}")
        try:
            return capture(cmd, cwd=self.settings.workdir)
        except subprocess.CalledProcessError as e:
            raise DataLayerError(f"{label} failed (exit code: {e.returncode})") from e
        except OSError as e:
            raise DataLayerError(f"{label} failed: {e}") from e

    def domain_blocks(self) -> List[str]:
        out = self._run("Domain block export", DOMAIN_BLOCKS_SCRIPT)
        return sorted(ln.strip() for ln in out.splitlines() if ln.strip())

    def instance_info(self) -> Dict[str, Any]:
        return parse_json_tail(self._run("System information", INSTANCE_INFO_SCRIPT))

    def instance_counters(self) -> Dict[str, Any]:
        return parse_json_tail(self._run("System statistics", INSTANCE_COUNTERS_SCRIPT))

    def queue_status(self) -> Dict[str, Any]:
        return parse_json_tail(self._run("Queue status", QUEUE_STATUS_SCRIPT))

    def cache_status(self) -> Dict[str, Any]:
        return parse_json_tail(self._run("Cache status", CACHE_STATUS_SCRIPT))
