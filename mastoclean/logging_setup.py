#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Logging configuration for mastoclean.

Every line carries a timestamp and a level tag. The console copy is
coloured through rich, the optional session log file gets the same line
as plain text.
"""

from __future__ import annotations
import logging
from logging.handlers import MemoryHandler
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.text import Text

from mastoclean.output import console, err_console

logger = logging.getLogger("mastoclean")

HEADER = 22
SUCCESS = 25
logging.addLevelName(HEADER, "HEADER")
logging.addLevelName(SUCCESS, "SUCCESS")

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
FILE_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"

LEVEL_STYLES = {
    logging.DEBUG: "dim",
    logging.INFO: "blue",
    HEADER: "magenta",
    SUCCESS: "green",
    logging.WARNING: "yellow",
    logging.ERROR: "red",
    logging.CRITICAL: "bold red",
}

HEADER_RULE = "=" * 32


class ConsoleHandler(logging.Handler):
    """Render records as coloured, timestamped lines; errors go to stderr."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = record.getMessage()
            ts = datetime.fromtimestamp(record.created).strftime(DATE_FORMAT)
            style = LEVEL_STYLES.get(record.levelno, "")
            target = err_console if record.levelno >= logging.ERROR else console
            if record.levelno == HEADER:
                target.print(HEADER_RULE, style=style, markup=False, highlight=False)
                target.print(Text(f"[{ts}] {msg}", style=style), soft_wrap=True)
                target.print(HEADER_RULE, style=style, markup=False, highlight=False)
                return
            line = Text(f"[{ts}] [{record.levelname}]", style=style)
            line.append(" ")
            line.append(msg)
            target.print(line, soft_wrap=True)
        except Exception:
            self.handleError(record)


def _drop_handlers(kind: type) -> None:
    for h in list(logger.handlers):
        if isinstance(h, kind):
            logger.removeHandler(h)
            h.close()


def setup_logging(verbose: bool = False) -> None:
    """
    Configure console logging.

    Args:
        verbose: If True, set DEBUG level. Otherwise INFO.
    """
    _drop_handlers(logging.FileHandler)
    _drop_handlers(MemoryHandler)
    _drop_handlers(ConsoleHandler)
    logger.addHandler(ConsoleHandler())
    set_verbose(verbose)


def set_verbose(verbose: bool) -> None:
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    if verbose:
        logger.debug("Verbose logging enabled")


def enable_file_logging(path: Path) -> bool:
    """
    Mirror all log lines to `path` (appending, without colours).

    Returns:
        True if the file handler was attached
    """
    try:
        with open(path, "a", encoding="utf-8") as f:
            f.write(f"=== Mastodon Cleanup Log - {datetime.now().strftime(DATE_FORMAT)} ===\n")
        file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    except OSError as e:
        logger.warning(f"Failed to create log file {path}: {e}")
        return False
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    _drop_handlers(logging.FileHandler)
    logger.addHandler(file_handler)
    return True


def start_buffering() -> MemoryHandler:
    """Hold records logged before the session log file is known."""
    buffer = MemoryHandler(capacity=10000, flushLevel=logging.CRITICAL + 1)
    logger.addHandler(buffer)
    return buffer


def stop_buffering(buffer: MemoryHandler) -> None:
    """Detach `buffer`, replaying its records into the session log file if one is open."""
    logger.removeHandler(buffer)
    for h in logger.handlers:
        if isinstance(h, logging.FileHandler):
            buffer.setTarget(h)
            break
    buffer.close()


def log_file_path() -> Optional[Path]:
    """Path of the active session log file, if any."""
    for h in logger.handlers:
        if isinstance(h, logging.FileHandler):
            return Path(h.baseFilename)
    return None


def success(msg: str) -> None:
    logger.log(SUCCESS, msg)


def header(msg: str) -> None:
    logger.log(HEADER, msg)
