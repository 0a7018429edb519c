#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Constants and default values for mastoclean.
"""

APP_NAME = "Mastodon Cleanup"
VERSION = "1.1.0"
AUTHOR = "@johndotpub@rewt.link"
PROJECT_URL = "https://github.com/johndotpub/mastodon-cleanup"
TAGLINE = "Scheduled maintenance for Mastodon instances."

BANNER = r"""                      _             _
 _ __ ___   __ _ ___| |_ ___   ___| | ___  __ _ _ __
| '_ ` _ \ / _` / __| __/ _ \ / __| |/ _ \/ _` | '_ \
| | | | | | (_| \__ \ || (_) | (__| |  __/ (_| | | | |
|_| |_| |_|\__,_|___/\__\___/ \___|_|\___|\__,_|_| |_|"""

# Defaults
DEFAULT_CONCURRENCY = 16
DEFAULT_MEDIA_DAYS = 90
DEFAULT_PROFILE_MEDIA_DAYS = 90
DEFAULT_PREVIEW_CARDS_DAYS = 30
DEFAULT_STATUSES_DAYS = 30
DEFAULT_INCLUDE_SUBDOMAINS = False

# Bounds (inclusive)
CONCURRENCY_MIN = 1
CONCURRENCY_MAX = 32
DAYS_MIN = 1
DAYS_MAX = 365

DOMAIN_BLOCKS_FILE = "domain_blocks.txt"
LOG_FILE_PATTERN = "cleanup_%Y%m%d_%H%M%S.log"

# External tools
DEFAULT_TOOTCTL = "tootctl"
DEFAULT_RAILS = "rails"

CONFIG_ENV_VAR = "MASTOCLEAN_CONFIG"
