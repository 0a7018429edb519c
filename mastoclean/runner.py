#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Command runner: executes external tools and reports their exit status.
"""

from __future__ import annotations
import subprocess
from dataclasses import dataclass
from typing import List, Sequence

from mastoclean.config import Settings
from mastoclean.helpers import capture, printable, which
from mastoclean.logging_setup import header, logger, success

SMOKE_SCRIPT = "puts 'Rails environment check passed'"
EXIT_NOT_FOUND = 127


@dataclass
class ExecutionResult:
    description: str
    success: bool
    exit_code: int = 0


class CommandRunner:
    """Runs external commands synchronously, streaming their output."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def tootctl(self, *args: str) -> List[str]:
        return [*self.settings.tootctl, *args]

    def rails_runner(self, script: str) -> List[str]:
        return [*self.settings.rails, "runner", script]

    def execute(self, description: str, cmd: Sequence[str], dry_run_applies: bool = False) -> ExecutionResult:
        """
        Run `cmd` and report success iff it exits with status 0.

        Args:
            description: Human readable label used in log lines
            cmd: Program and arguments
            dry_run_applies: Whether --dry-run suppresses this command

        Returns:
            ExecutionResult (never raises)
        """
        logger.info(f"Executing: {description}")
        cmd = list(cmd)
        if self.settings.verbose:
            logger.info(f"Command: {printable(cmd)}")
            logger.info(f"Working directory: {self.settings.workdir}")

        if dry_run_applies and self.settings.dry_run:
            logger.warning(f"DRY RUN: Would execute: {printable(cmd)}")
            return ExecutionResult(description, True, 0)

        try:
            # stderr is merged into the inherited stdout so output streams live
            proc = subprocess.run(cmd, cwd=self.settings.workdir, stderr=subprocess.STDOUT, check=False)
        except OSError as e:
            logger.error(f"Failed: {description} (could not start {cmd[0]}: {e})")
            return ExecutionResult(description, False, EXIT_NOT_FOUND)
        logger.debug(f"Command completed with return code: {proc.returncode}")

        if proc.returncode == 0:
            success(f"Completed: {description}")
            return ExecutionResult(description, True, 0)
        logger.error(f"Failed: {description} (exit code: {proc.returncode})")
        return ExecutionResult(description, False, proc.returncode)

    def check_prerequisites(self) -> bool:
        """Verify that tootctl and rails exist and the Rails environment boots."""
        header("Checking Prerequisites")
        missing = [prefix[0] for prefix in (self.settings.tootctl, self.settings.rails) if not which(prefix[0])]
        if missing:
            logger.error(f"Missing required commands: {' '.join(missing)}")
            logger.error("Please ensure Rails and tootctl are available in your PATH")
            logger.error("Make sure you're running this script from your Mastodon installation directory")
            return False

        try:
            capture(self.rails_runner(SMOKE_SCRIPT), cwd=self.settings.workdir)
        except (OSError, subprocess.CalledProcessError) as e:
            logger.error(f"Rails environment not properly configured: {e}")
            logger.error("Please ensure you're running this script from your Mastodon installation directory")
            return False

        success("All prerequisites satisfied")
        return True
