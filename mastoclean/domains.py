#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Blocked-domain list file: written by the export step, read by the purge step.
"""

from __future__ import annotations
from pathlib import Path
from typing import Iterable, List, Optional

from mastoclean.logging_setup import logger


def parse_domain_line(line: str) -> Optional[str]:
    """
    Extract the domain name from one line of the domain list.

    Lines may be a bare domain or a CSV record whose first field is the
    domain.

    Returns:
        None for blank and comment lines, "" for an entry with an empty
        first field, otherwise the trimmed domain name
    """
    stripped = line.strip()
    if not stripped or stripped.startswith("#"):
        return None
    return stripped.split(",", 1)[0].strip()


def read_domain_entries(path: Path) -> List[str]:
    """
    Read domain names from `path` in file order.

    Raises:
        FileNotFoundError: if the file does not exist
    """
    domains = []
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        for lineno, line in enumerate(f, 1):
            name = parse_domain_line(line)
            if name is None:
                continue
            if not name:
                logger.warning(f"Skipping empty domain entry (line {lineno})")
                continue
            domains.append(name)
    return domains


def write_domain_blocks(path: Path, domains: Iterable[str]) -> int:
    """Replace `path` with the sorted domains, one per line. Returns the count."""
    if path.exists():
        logger.info("Removing existing domain blocks file")
        path.unlink()
    ordered = sorted(domains)
    body = "".join(f"{d}\n" for d in ordered)
    path.write_text(body, encoding="utf-8")
    return len(ordered)
