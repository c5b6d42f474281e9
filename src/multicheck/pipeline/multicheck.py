from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import logging
import time

from multicheck.adapters.match import extract
from multicheck.adapters.process import run_shell, substitute_hostname
from multicheck.adapters.sender import make_staging_path, send_batch
from multicheck.config.hostconf import TargetContext
from multicheck.config.parser import CommandSpec, Configuration
from multicheck.pipeline.batch import MetricRecord, build_batch

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunContext:
    target: TargetContext
    config: Configuration
    sender_path: Path
    timestamp: int
    staging_path: Path
    debug: bool = False
    first_rule_only: bool = False
    timeout_sec: float | None = None


@dataclass(frozen=True)
class RunSummary:
    commands: int
    records: int
    sent: int
    failed: int
    empty: int


def make_run_context(
    *,
    target: TargetContext,
    config: Configuration,
    sender_path: str | Path,
    debug: bool = False,
    first_rule_only: bool = False,
    timeout_sec: float | None = None,
    timestamp: int | None = None,
    staging_dir: str | Path | None = None,
) -> RunContext:
    ts = int(time.time()) if timestamp is None else timestamp
    return RunContext(
        target=target,
        config=config,
        sender_path=Path(sender_path),
        timestamp=ts,
        staging_path=make_staging_path(ts, staging_dir),
        debug=debug,
        first_rule_only=first_rule_only,
        timeout_sec=timeout_sec,
    )


def collect_records(ctx: RunContext, spec: CommandSpec) -> list[MetricRecord]:
    """Run one command and turn its output into records."""
    if not spec.rules:
        logger.debug("No items for: %s", spec.command_line)
        return []

    command_line = substitute_hostname(spec.command_line, ctx.target.hostname)
    logger.debug("Running: %s", command_line)

    result = run_shell(command_line, timeout_sec=ctx.timeout_sec)
    if not result.stdout.strip():
        logger.debug("No output from: %s", command_line)
        return []

    extracted = extract(spec, result.lines, first_rule_only=ctx.first_rule_only)
    return build_batch(extracted, ctx.timestamp)


def run_multicheck(ctx: RunContext) -> RunSummary:
    """
    Run every configured command and send its records.

    Commands run one after the other in declaration order. Nothing that goes
    wrong for one command stops the others.
    """
    records_total = 0
    sent = 0
    failed = 0
    empty = 0

    for spec in ctx.config.commands:
        records = collect_records(ctx, spec)
        if not records:
            logger.debug("No matches for: %s", spec.command_line)
            empty += 1
            continue

        records_total += len(records)
        result = send_batch(
            records,
            sender_path=ctx.sender_path,
            target=ctx.target,
            staging_path=ctx.staging_path,
            debug=ctx.debug,
        )
        if result.ok:
            sent += 1
        else:
            failed += 1
            logger.debug("Send failed for: %s", spec.command_line)

    summary = RunSummary(
        commands=len(ctx.config.commands),
        records=records_total,
        sent=sent,
        failed=failed,
        empty=empty,
    )
    logger.debug(
        "Done: %d commands, %d records, %d batches sent, %d failed, %d empty",
        summary.commands,
        summary.records,
        summary.sent,
        summary.failed,
        summary.empty,
    )
    return summary
