#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Maintenance steps.

Every step builds one (or, for the domain purge, one per domain) external
invocation and hands it to the command runner, or asks the data layer a
read-only question. Steps are stateless; all inputs come from the
StepContext.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from mastoclean.config import Settings
from mastoclean.datalayer import DataLayer, DataLayerError
from mastoclean.domains import read_domain_entries, write_domain_blocks
from mastoclean.helpers import percent
from mastoclean.logging_setup import header, logger, success
from mastoclean.output import kv_table, status_text, table
from mastoclean.runner import CommandRunner, ExecutionResult


@dataclass
class StepContext:
    settings: Settings
    runner: CommandRunner
    data_layer: DataLayer


class Step:
    """Base class: subclasses implement `execute`."""

    name = ""
    title = ""

    def __init__(self, info: Optional[str] = None, warning: Optional[str] = None) -> None:
        self.info = info
        self.warning = warning

    def run(self, ctx: StepContext) -> ExecutionResult:
        header(self.title)
        if self.info:
            logger.info(self.info)
        if self.warning:
            logger.warning(self.warning)
        return self.execute(ctx)

    def execute(self, ctx: StepContext) -> ExecutionResult:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class ToolStep(Step):
    """
    A single tootctl invocation.

    `description` and every element of `args` are format strings filled
    from the Settings fields, e.g. "{media_days}".
    """

    def __init__(self, name: str, title: str, description: str, args: Sequence[str],
                 info: Optional[str] = None, warning: Optional[str] = None) -> None:
        super().__init__(info=info, warning=warning)
        self.name = name
        self.title = title
        self.description = description
        self.args = tuple(args)

    def command_args(self, settings: Settings) -> List[str]:
        values = vars(settings)
        return [a.format_map(values) for a in self.args]

    def execute(self, ctx: StepContext) -> ExecutionResult:
        desc = self.description.format_map(vars(ctx.settings))
        return ctx.runner.execute(desc, ctx.runner.tootctl(*self.command_args(ctx.settings)))


class ExportDomainBlocksStep(Step):
    name = "export_domain_blocks"
    title = "Exporting Domain Blocks"

    def execute(self, ctx: StepContext) -> ExecutionResult:
        path = ctx.settings.domain_blocks_path
        logger.info(f"Exporting domain blocks to {path}")
        try:
            domains = ctx.data_layer.domain_blocks()
            count = write_domain_blocks(path, domains)
        except DataLayerError as e:
            logger.error(f"Failed to export domain blocks: {e}")
            return ExecutionResult(self.title, False, 1)
        except OSError as e:
            logger.error(f"Failed to write {path}: {e}")
            return ExecutionResult(self.title, False, 1)
        success(f"Exported {count} domains to {path}")
        return ExecutionResult(self.title, True, 0)


class PurgeDomainsStep(Step):
    name = "purge_domains"
    title = "Purging Blocked Domains"

    @staticmethod
    def purge_command(runner: CommandRunner, settings: Settings, domain: str) -> List[str]:
        cmd = runner.tootctl("domains", "purge", domain, "--concurrency", str(settings.concurrency))
        if settings.dry_run:
            cmd.append("--dry-run")
        if settings.include_subdomains:
            cmd.append("--include-subdomains")
        return cmd

    def execute(self, ctx: StepContext) -> ExecutionResult:
        settings = ctx.settings
        path = settings.domain_blocks_path
        try:
            domains = read_domain_entries(path)
        except FileNotFoundError:
            logger.error(f"Domain blocks file not found: {path}")
            return ExecutionResult(self.title, False, 1)
        except OSError as e:
            logger.error(f"Could not read domain blocks file {path}: {e}")
            return ExecutionResult(self.title, False, 1)

        logger.info("Configuration:")
        logger.info(f"  Dry run: {settings.dry_run}")
        logger.info(f"  Include subdomains: {settings.include_subdomains}")
        logger.info(f"  Concurrency: {settings.concurrency}")

        total = len(domains)
        if not total:
            logger.warning(f"No domains found in {path}; nothing to purge")
            return ExecutionResult(self.title, True, 0)

        processed = 0
        errors = 0
        for i, domain in enumerate(domains, 1):
            logger.info(f"Processing domain {i}/{total} ({percent(i, total)}%): {domain}")
            cmd = self.purge_command(ctx.runner, settings, domain)
            result = ctx.runner.execute(f"Purge domain: {domain}", cmd, dry_run_applies=True)
            if result.success:
                processed += 1
            else:
                errors += 1

        if errors:
            logger.error(f"Domain purge completed: {processed} processed, {errors} errors")
            return ExecutionResult(self.title, False, 1)
        success(f"Domain purge completed: {processed} processed, {errors} errors")
        return ExecutionResult(self.title, True, 0)


class InspectionStep(Step):
    """Ask the data layer one question and render the answer as a table."""

    def __init__(self, name: str, title: str, query: str, info: Optional[str] = None,
                 check: Optional[Callable[[Dict[str, Any]], bool]] = None) -> None:
        super().__init__(info=info)
        self.name = name
        self.title = title
        self.query = query
        self.check = check

    def inspect(self, data_layer: DataLayer) -> Tuple[bool, Dict[str, Any]]:
        """Returns (healthy, data); failures are logged here."""
        try:
            data = getattr(data_layer, self.query)()
        except DataLayerError as e:
            logger.error(f"Failed: {self.title} ({e})")
            return False, {}
        if self.check is not None and not self.check(data):
            logger.error(f"Failed: {self.title} (unhealthy answer: {data})")
            return False, data
        return True, data

    def execute(self, ctx: StepContext) -> ExecutionResult:
        logger.info(f"Executing: {self.title}")
        ok, data = self.inspect(ctx.data_layer)
        if data:
            kv_table(self.title, [(str(k), str(v)) for k, v in data.items()])
        if ok:
            success(f"Completed: {self.title}")
        return ExecutionResult(self.title, ok, 0 if ok else 1)


def _cache_answers(data: Dict[str, Any]) -> bool:
    return str(data.get("ping", "")).upper() == "PONG"


SYSTEM_INFO = InspectionStep(
    "system_info", "System Information", "instance_info",
    info="Showing system information and health",
)
SYSTEM_STATS = InspectionStep(
    "system_stats", "System Statistics", "instance_counters",
    info="Showing instance statistics and usage",
)
QUEUE_STATUS = InspectionStep(
    "queue_status", "Queue Status", "queue_status",
    info="Checking background job queue status",
)
CACHE_STATUS = InspectionStep(
    "cache_status", "Cache Status", "cache_status",
    info="Checking cache connectivity", check=_cache_answers,
)

HEALTH_CHECKS = (SYSTEM_INFO, SYSTEM_STATS, QUEUE_STATUS, CACHE_STATUS)


class SystemHealthStep(Step):
    """The four inspections under a single header with one summary table."""

    name = "system_health"
    title = "System Health"

    def execute(self, ctx: StepContext) -> ExecutionResult:
        rows = []
        failed = []
        for check in HEALTH_CHECKS:
            ok, data = check.inspect(ctx.data_layer)
            detail = ", ".join(f"{k}={v}" for k, v in data.items()) if data else "-"
            rows.append([check.title, status_text(ok), detail])
            if not ok:
                failed.append(check.title)
        table(self.title, ["Check", "Status", "Details"], rows)
        if failed:
            logger.error(f"Health checks failed: {', '.join(failed)}")
            return ExecutionResult(self.title, False, 1)
        success("All health checks passed")
        return ExecutionResult(self.title, True, 0)


TOOL_STEPS = (
    ToolStep("list_domain_blocks", "Listing Domain Blocks", "List domain blocks",
             ["domains", "list"], info="Showing current domain blocks"),
    ToolStep("check_domain_health", "Checking Domain Health", "Check domain health",
             ["domains", "check"], info="Testing connectivity to blocked domains"),
    ToolStep("cull_accounts", "Culling Non-existent Accounts", "Cull non-existent accounts",
             ["accounts", "cull", "--concurrency", "{concurrency}"]),
    ToolStep("prune_accounts", "Pruning Non-interactive Accounts", "Prune non-interactive accounts",
             ["accounts", "prune"]),
    ToolStep("list_inactive_accounts", "Listing Inactive Accounts", "List inactive accounts",
             ["accounts", "list", "--inactive"],
             info="This will show accounts that haven't been active recently"),
    ToolStep("delete_inactive_accounts", "Deleting Inactive Accounts", "Delete inactive accounts",
             ["accounts", "delete", "--inactive"],
             warning="This will permanently delete inactive accounts"),
    ToolStep("remove_old_media", "Removing Old Media Files",
             "Remove media files older than {media_days} days",
             ["media", "remove", "--days", "{media_days}", "--concurrency", "{concurrency}"]),
    ToolStep("remove_old_profile_media", "Removing Old Profile Media",
             "Remove profile media older than {profile_media_days} days",
             ["media", "remove", "--prune-profiles", "--days", "{profile_media_days}",
              "--concurrency", "{concurrency}"]),
    ToolStep("remove_old_preview_cards", "Removing Old Preview Cards",
             "Remove preview cards older than {preview_cards_days} days",
             ["preview_cards", "remove", "--days", "{preview_cards_days}", "--concurrency", "{concurrency}"]),
    ToolStep("remove_old_remote_statuses", "Removing Old Remote Statuses",
             "Remove remote statuses older than {statuses_days} days",
             ["statuses", "remove", "--days", "{statuses_days}"]),
    ToolStep("remove_orphaned_media", "Removing Orphaned Media", "Remove orphaned media files",
             ["media", "remove-orphans"]),
    ToolStep("media_stats", "Media Statistics", "Media statistics",
             ["media", "usage"], info="Showing media storage statistics"),
    ToolStep("list_orphaned_media", "Listing Orphaned Media", "List orphaned media",
             ["media", "remove-orphans", "--dry-run"],
             info="This will show orphaned media files before removal"),
    ToolStep("build_feeds", "Building All Feeds", "Build all feeds",
             ["feeds", "build", "--all", "--concurrency", "{concurrency}"],
             info="This operation is expensive but useful for feed fixing"),
    ToolStep("cache_clear", "Clearing Cache", "Clear cache",
             ["cache", "clear"], info="Clearing Redis cache (safe operation)"),
    ToolStep("search_deploy", "Rebuilding Search Index", "Deploy search index",
             ["search", "deploy", "--concurrency", "{concurrency}"],
             info="Re-indexing searchable content; this can take a while"),
)

STEPS: Dict[str, Step] = {
    s.name: s
    for s in (
        ExportDomainBlocksStep(),
        PurgeDomainsStep(),
        *TOOL_STEPS,
        *HEALTH_CHECKS,
        SystemHealthStep(),
    )
}
