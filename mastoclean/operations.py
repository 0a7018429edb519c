#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Operation dispatch and run summary.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Union

from mastoclean.catalog import Operation
from mastoclean.config import Settings
from mastoclean.helpers import now_str
from mastoclean.logging_setup import header, logger, success
from mastoclean.output import status_text, table
from mastoclean.runner import ExecutionResult
from mastoclean.steps import STEPS, Step, StepContext


@dataclass
class RunSummary:
    results: List[ExecutionResult] = field(default_factory=list)

    @property
    def executed(self) -> int:
        return len(self.results)

    @property
    def successful(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return self.executed - self.successful

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0

    def add(self, result: ExecutionResult) -> None:
        self.results.append(result)


def steps_for(operation: Operation, settings: Settings) -> List[Union[Step, str]]:
    """
    Resolve an operation to its ordered steps.

    Names without a registered step are returned as plain strings so the
    dispatcher can report them as failures.
    """
    if operation is Operation.SYSTEM_HEALTH and not settings.verbose:
        return [STEPS["system_health"]]
    resolved: List[Union[Step, str]] = []
    for name in operation.steps:
        resolved.append(STEPS.get(name, name))
    return resolved


def run_operation(operation: Optional[Operation], ctx: StepContext) -> RunSummary:
    """Execute every step of `operation` in order; failures never stop the run."""
    summary = RunSummary()
    if operation is None:
        logger.error("Unknown operation: nothing to run")
        summary.add(ExecutionResult("unknown operation", False, 1))
        return summary

    steps = steps_for(operation, ctx.settings)
    logger.info(f"Starting execution of {len(steps)} steps for --{operation.flag}")
    for step in steps:
        if isinstance(step, str):
            logger.error(f"Unknown step: {step}")
            summary.add(ExecutionResult(step, False, 1))
            continue
        header(f"Operation: {step.name}")
        result = step.run(ctx)
        summary.add(result)
        if not result.success:
            logger.error(f"Operation {step.name} failed")
    logger.info("Main execution loop completed")
    return summary


def print_summary(summary: RunSummary) -> None:
    header("Cleanup Process Complete")
    if summary.results:
        rows = [[r.description, status_text(r.success), str(r.exit_code)] for r in summary.results]
        table("Results", ["Step", "Status", "Exit code"], rows)
    logger.info(f"Total operations executed: {summary.executed}")
    logger.info(f"Successful operations: {summary.successful}")
    logger.info(f"Failed operations: {summary.failed}")
    logger.info(f"Completed at: {now_str()}")
    if summary.failed:
        logger.warning("Some operations failed. Check the output above for details.")
    else:
        success("All cleanup operations completed successfully!")
