#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Command-line entry point for mastoclean.
"""

from __future__ import annotations
import argparse
import dataclasses
import re
import sys
from datetime import datetime
from logging.handlers import MemoryHandler
from typing import Any, Dict, List, Optional, Sequence, Tuple

from rich.text import Text

from mastoclean.catalog import GROUPS, Operation
from mastoclean.config import (
    load_config, parser_defaults, settings_from_namespace, validate_settings, Settings,
)
from mastoclean.constants import (
    APP_NAME, AUTHOR, CONCURRENCY_MAX, CONCURRENCY_MIN, DAYS_MAX, DAYS_MIN,
    LOG_FILE_PATTERN, VERSION,
)
from mastoclean.datalayer import RailsDataLayer
from mastoclean.helpers import now_str
from mastoclean.logging_setup import (
    enable_file_logging, header, log_file_path, logger, set_verbose, setup_logging,
    start_buffering, stop_buffering, success,
)
from mastoclean.operations import print_summary, run_operation
from mastoclean.output import console, p, print_banner
from mastoclean.runner import CommandRunner
from mastoclean.steps import StepContext

PROG = "mastoclean"


# -----------------------------
# Informational output
# -----------------------------
def print_block(title: str, items: List[Tuple[str, str]], pad: int) -> None:
    p("")
    p(title)
    for key, desc in items:
        line = Text(key.ljust(pad), style="blue")
        line.append(f"  {desc}")
        console.print(line, soft_wrap=True)


def print_help(defaults: Dict[str, Any]) -> None:
    print_banner(banner_style="bold magenta", url_style="blue")
    p(f"{APP_NAME} v{VERSION}")
    p(f"Usage: {PROG} [OPTIONS] [OPERATION]")
    options = [
        ("--dry-run", "Dry-run mode (only affects domain purges)"),
        ("--include-subdomains", "Include subdomains when purging domains"),
        ("--concurrency N", f"Concurrency level, {CONCURRENCY_MIN}-{CONCURRENCY_MAX} (default: {defaults['concurrency']})"),
        ("--media-days N", f"Media retention in days, {DAYS_MIN}-{DAYS_MAX} (default: {defaults['media_days']})"),
        ("--profile-media-days N", f"Profile media retention in days, {DAYS_MIN}-{DAYS_MAX} (default: {defaults['profile_media_days']})"),
        ("--preview-cards-days N", f"Preview card retention in days, {DAYS_MIN}-{DAYS_MAX} (default: {defaults['preview_cards_days']})"),
        ("--statuses-days N", f"Remote status retention in days, {DAYS_MIN}-{DAYS_MAX} (default: {defaults['statuses_days']})"),
        ("--verbose", "Echo commands and working directory, detailed health checks"),
        ("--log-file", "Log operations to a timestamped file"),
        ("--list-operations", "List operations and the steps they run"),
        ("--help", "Show this help message"),
        ("--version", "Show version information"),
    ]
    operations = [(op.option, op.help_text) for op in Operation]
    pad = max(len(k) for k, _ in options + operations) + 2
    print_block("OPTIONS", options, pad)
    for group in GROUPS:
        print_block(f"OPERATIONS ({group})", [(op.option, op.help_text) for op in Operation.in_group(group)], pad)
    p("")
    p("Without an operation flag --full is run.")
    p("")
    p("EXAMPLES")
    p(f"  {PROG} --dry-run --domains")
    p(f"  {PROG} --concurrency 8 --domains")
    p(f"  {PROG} --media --media-days 30")
    p(f"  {PROG} --maintenance --log-file")
    p(f"  {PROG} --system-health --verbose")
    p(f"  {PROG} --deep-cleanup")


def print_version() -> None:
    p(f"{APP_NAME} v{VERSION}")
    p(f"Author: {AUTHOR}")


def list_operations() -> None:
    header("Available Operations")
    for group in GROUPS:
        p("")
        p(f"{group} Operations:")
        for op in Operation.in_group(group):
            line = Text(f"  {op.option}", style="cyan")
            line.append(f" (steps: {' '.join(op.steps)})")
            console.print(line, soft_wrap=True)
    p("")
    logger.info("Use --domains, --accounts, --media, etc. to run a specific operation")
    logger.info("Use --full to run all operations")


# -----------------------------
# Argument parsing
# -----------------------------
class Parser(argparse.ArgumentParser):
    """
    ArgumentParser that logs usage errors and exits with status 1.

    Unknown arguments are rejected as soon as they are reached, before any
    later flag is acted on.
    """

    def parse_args(self, args=None, namespace=None):  # type: ignore[override]
        args = sys.argv[1:] if args is None else list(args)
        self.reject_unknown(args)
        return super().parse_args(args, namespace)

    def reject_unknown(self, args: List[str]) -> None:
        takes_value = False
        for arg in args:
            if takes_value:
                takes_value = False
                continue
            option = arg.split("=", 1)[0] if arg.startswith("--") else arg
            action = self._option_string_actions.get(option)
            if action is None:
                self.error(f"unrecognized arguments: {arg}")
            takes_value = action.nargs is None and "=" not in arg

    def error(self, message: str) -> None:  # type: ignore[override]
        logger.error(message)
        logger.error("Use --help for usage information")
        self.exit(1)


def count(value: str) -> int:
    if not re.fullmatch(r"\d+", value):
        raise argparse.ArgumentTypeError(f"invalid value: {value!r} (expected a positive integer)")
    return int(value)


class FlagAction(argparse.Action):
    """store_true that records why it was set."""

    def __init__(self, option_strings, dest, message: str = "", warning: str = "", **kwargs) -> None:
        self.message = message
        self.warning = warning
        super().__init__(option_strings, dest, nargs=0, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None) -> None:
        setattr(namespace, self.dest, True)
        if self.message:
            logger.info(self.message)
        if self.warning:
            logger.warning(self.warning)


class VerboseAction(FlagAction):
    def __call__(self, parser, namespace, values, option_string=None) -> None:
        set_verbose(True)
        super().__call__(parser, namespace, values, option_string)


class NumberAction(argparse.Action):
    def __init__(self, option_strings, dest, label: str = "", **kwargs) -> None:
        self.label = label
        super().__init__(option_strings, dest, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None) -> None:
        setattr(namespace, self.dest, values)
        logger.info(f"{self.label} set to: {values}")


class OperationAction(argparse.Action):
    def __init__(self, option_strings, dest, **kwargs) -> None:
        super().__init__(option_strings, dest, nargs=0, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None) -> None:
        current = getattr(namespace, self.dest)
        if current is not None:
            parser.error(
                f"argument {option_string}: only one operation may be selected "
                f"({current.option} already given)"
            )
        setattr(namespace, self.dest, self.const)
        logger.info(f"Added operation '{self.const.flag}' (steps: {' '.join(self.const.steps)})")


class InfoAction(argparse.Action):
    """Print informational text and exit 0 straight from the parser."""

    def __init__(self, option_strings, dest, show=None, **kwargs) -> None:
        self.show = show
        super().__init__(option_strings, dest, nargs=0, default=argparse.SUPPRESS, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None) -> None:
        self.show(parser)
        parser.exit(0)


def build_parser(defaults: Dict[str, Any]) -> Parser:
    ap = Parser(prog=PROG, add_help=False, allow_abbrev=False)
    ap.add_argument("--dry-run", action=FlagAction, default=False,
                    message="Dry run mode enabled (only affects domain operations)",
                    warning="Note: Dry-run mode only works with domain operations. Other operations will run normally.")
    ap.add_argument("--include-subdomains", action=FlagAction,
                    message="Subdomain inclusion enabled")
    ap.add_argument("--concurrency", action=NumberAction, type=count, metavar="N", label="Concurrency")
    ap.add_argument("--media-days", action=NumberAction, type=count, metavar="N", label="Media retention days")
    ap.add_argument("--profile-media-days", action=NumberAction, type=count, metavar="N",
                    label="Profile media retention days")
    ap.add_argument("--preview-cards-days", action=NumberAction, type=count, metavar="N",
                    label="Preview cards retention days")
    ap.add_argument("--statuses-days", action=NumberAction, type=count, metavar="N",
                    label="Remote statuses retention days")
    ap.add_argument("--verbose", action=VerboseAction, default=False, message="Verbose mode enabled")
    ap.add_argument("--log-file", action=FlagAction, dest="log_to_file", default=False,
                    message="Log to file enabled")
    for op in Operation:
        ap.add_argument(op.option, dest="operation", action=OperationAction, const=op, default=None)
    ap.add_argument("--list-operations", action=InfoAction, show=lambda parser: list_operations())
    ap.add_argument("--help", action=InfoAction, show=lambda parser: print_help(defaults))
    ap.add_argument("--version", action=InfoAction, show=lambda parser: print_version())
    ap.set_defaults(**defaults)
    return ap


def parse_settings(argv: Optional[Sequence[str]] = None) -> Settings:
    """
    Parse the command line into Settings.

    Raises:
        SystemExit: for --help/--version/--list-operations (0) and usage errors (1)
    """
    defaults = parser_defaults(load_config())
    ns = build_parser(defaults).parse_args(argv)
    if ns.operation is None:
        logger.info("No operation selected, running --full")
    return settings_from_namespace(ns)


def open_session_log(settings: Settings, buffer: MemoryHandler) -> Settings:
    """
    Start the timestamped log file in the working directory when requested.

    Lines held in `buffer` while parsing are written to the file first.
    """
    path = settings.workdir / datetime.now().strftime(LOG_FILE_PATTERN)
    opened = settings.log_to_file and enable_file_logging(path)
    stop_buffering(buffer)
    if not opened:
        return settings
    logger.info(f"Logging to file: {path}")
    return dataclasses.replace(settings, log_file=path)


def show_configuration(settings: Settings) -> None:
    header("Configuration Summary")
    logger.info(f"Operation: {settings.operation.option}")
    logger.info(f"Dry run mode: {settings.dry_run}")
    logger.info(f"Include subdomains: {settings.include_subdomains}")
    logger.info(f"Concurrency: {settings.concurrency}")
    logger.info(
        f"Retention days: media={settings.media_days} profile-media={settings.profile_media_days} "
        f"preview-cards={settings.preview_cards_days} statuses={settings.statuses_days}"
    )
    logger.info(f"Verbose mode: {settings.verbose}")
    logger.info(f"Log to file: {settings.log_to_file}")
    logger.info(f"Working directory: {settings.workdir}")


# -----------------------------
# Main CLI
# -----------------------------
def main(argv: Optional[Sequence[str]] = None) -> int:
    setup_logging()
    try:
        buffer = start_buffering()
        try:
            settings = parse_settings(argv)
        except SystemExit as e:
            stop_buffering(buffer)
            return e.code if isinstance(e.code, int) else 1
        settings = open_session_log(settings, buffer)

        header("Starting Mastodon Cleanup Process")
        logger.info(f"Script version: {VERSION}")
        logger.info(f"Started at: {now_str()}")
        logger.debug(f"Command invoked: {' '.join(sys.argv)}")

        errors = validate_settings(settings)
        if errors:
            for msg in errors:
                logger.error(msg)
            return 1
        success("Arguments parsed successfully")
        show_configuration(settings)

        runner = CommandRunner(settings)
        if not runner.check_prerequisites():
            return 1

        ctx = StepContext(settings=settings, runner=runner, data_layer=RailsDataLayer(settings))
        summary = run_operation(settings.operation, ctx)
        print_summary(summary)
        log_path = log_file_path()
        if log_path:
            logger.info(f"Log written to {log_path}")
        return summary.exit_code
    except KeyboardInterrupt:
        logger.error("Interrupted by user")
        return 130


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
