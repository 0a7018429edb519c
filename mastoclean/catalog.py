#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Operation catalog: every user-facing operation and the ordered steps it runs.
"""

from __future__ import annotations
from enum import Enum
from typing import List, Tuple

GROUPS = ("Basic", "Combined", "Enhanced", "Maintenance")

_ACCOUNTS = ("cull_accounts", "prune_accounts")
_DOMAINS = ("export_domain_blocks", "purge_domains")
_MEDIA_AGE = ("remove_old_media", "remove_old_profile_media", "remove_old_preview_cards")
_FULL = (
    *_DOMAINS,
    *_ACCOUNTS,
    *_MEDIA_AGE,
    "remove_old_remote_statuses",
    "remove_orphaned_media",
    "build_feeds",
)


class Operation(Enum):
    """One selectable operation; the value is its command-line flag name."""

    DOMAINS = ("domains", "Basic", "Export and purge blocked domains", _DOMAINS)
    ACCOUNTS = ("accounts", "Basic", "Clean up accounts (cull + prune)", _ACCOUNTS)
    MEDIA = ("media", "Basic", "Remove old media files", ("remove_old_media",))
    PROFILE_MEDIA = ("profile-media", "Basic", "Remove old profile media", ("remove_old_profile_media",))
    PREVIEW_CARDS = ("preview-cards", "Basic", "Remove old preview cards", ("remove_old_preview_cards",))
    REMOTE_STATUSES = ("remote-statuses", "Basic", "Remove old remote statuses", ("remove_old_remote_statuses",))
    ORPHANED_MEDIA = ("orphaned-media", "Basic", "Remove orphaned media", ("remove_orphaned_media",))
    FEEDS = ("feeds", "Basic", "Build all feeds", ("build_feeds",))

    ALL_MEDIA = ("all-media", "Combined", "All media operations", (*_MEDIA_AGE, "remove_orphaned_media"))
    MAINTENANCE = (
        "maintenance", "Combined", "Standard maintenance operations",
        (*_ACCOUNTS, *_MEDIA_AGE, "remove_old_remote_statuses", "remove_orphaned_media"),
    )
    FULL = ("full", "Combined", "Complete cleanup (all operations)", _FULL)

    ACCOUNT_CLEANUP = (
        "account-cleanup", "Enhanced", "Enhanced account cleanup (inactive + cull + prune)",
        ("list_inactive_accounts", "delete_inactive_accounts", *_ACCOUNTS),
    )
    MEDIA_AUDIT = (
        "media-audit", "Enhanced", "Media audit (stats + orphaned + cleanup)",
        ("media_stats", "list_orphaned_media", "remove_orphaned_media", *_MEDIA_AGE),
    )
    DOMAIN_AUDIT = (
        "domain-audit", "Enhanced", "Domain audit (list + check + purge)",
        ("list_domain_blocks", "check_domain_health", *_DOMAINS),
    )
    SYSTEM_HEALTH = (
        "system-health", "Enhanced", "System health check (info + stats + queue + cache)",
        ("system_info", "system_stats", "queue_status", "cache_status"),
    )
    DEEP_CLEANUP = ("deep-cleanup", "Enhanced", "Complete cleanup with cache clearing", (*_FULL, "cache_clear"))

    CACHE_CLEAR = ("cache-clear", "Maintenance", "Clear the application cache", ("cache_clear",))
    SEARCH_INDEX = ("search-index", "Maintenance", "Rebuild the search index", ("search_deploy",))

    def __init__(self, flag: str, group: str, help_text: str, steps: Tuple[str, ...]) -> None:
        self.flag = flag
        self.group = group
        self.help_text = help_text
        self.steps = steps

    @property
    def option(self) -> str:
        return f"--{self.flag}"

    @classmethod
    def in_group(cls, group: str) -> List["Operation"]:
        return [op for op in cls if op.group == group]
