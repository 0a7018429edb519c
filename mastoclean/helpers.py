#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Helper utility functions for mastoclean.
"""

from __future__ import annotations
import shlex
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from mastoclean.logging_setup import logger


def which(cmd: str) -> Optional[str]:
    """Find the full path of a command."""
    from shutil import which as _which
    return _which(cmd)


def printable(cmd: Sequence[str]) -> str:
    """Shell-quoted rendering of an argument vector."""
    return " ".join(shlex.quote(x) for x in cmd)


def capture(cmd: Sequence[str], cwd: Optional[Path] = None) -> str:
    """
    Execute a command and capture its output.

    Args:
        cmd: Command and arguments as list
        cwd: Working directory for the command

    Returns:
        Command output as string (stripped)

    Raises:
        subprocess.CalledProcessError: on non-zero exit
    """
    logger.debug(f"Capturing output: {printable(cmd)}")
    result = subprocess.check_output(list(cmd), text=True, cwd=cwd, stderr=subprocess.DEVNULL).strip()
    logger.debug(f"Captured {len(result)} bytes")
    return result


def now_str() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


def percent(n: int, total: int) -> int:
    """Integer percentage of n over total (0 when total is 0)."""
    if total <= 0:
        return 0
    return (n * 100) // total
