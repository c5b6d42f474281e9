from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Sequence
import logging
import random
import subprocess
import tempfile

from multicheck.config.errors import SenderBinaryNotFoundError
from multicheck.config.hostconf import TargetContext
from multicheck.pipeline.batch import MetricRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SendResult:
    ok: bool
    exit_code: int | None
    stdout: str
    stderr: str
    suppressed: bool = False  # debug mode, nothing was transmitted


def make_staging_path(timestamp: int, directory: str | Path | None = None) -> Path:
    """Staging file name embeds the run timestamp plus a random number."""
    base = Path(directory) if directory is not None else Path(tempfile.gettempdir())
    return base / f"multicheck-{timestamp}-{random.randint(0, 999_999):06d}.txt"


def check_sender_binary(path: str | Path) -> Path:
    p = Path(path)
    if not p.is_file():
        raise SenderBinaryNotFoundError(f"Sender binary not found: {p}")
    try:
        with p.open("rb"):
            pass
    except OSError as e:
        raise SenderBinaryNotFoundError(f"Sender binary is not readable: {p}") from e
    return p


def write_staging_file(path: Path, records: Sequence[MetricRecord]) -> None:
    text = "".join(record.to_line() + "\n" for record in records)
    path.write_text(text, encoding="utf-8")


def sender_argv(sender_path: str | Path, target: TargetContext, staging_path: Path) -> list[str]:
    return [
        str(sender_path),
        "-z",
        target.server_address,
        "-p",
        str(target.server_port),
        "-s",
        target.hostname,
        "-T",
        "-i",
        str(staging_path),
    ]


def send_batch(
    records: Sequence[MetricRecord],
    *,
    sender_path: str | Path,
    target: TargetContext,
    staging_path: Path,
    debug: bool = False,
) -> SendResult:
    """
    Stage records to a file and hand it to the sender binary.

    Transmission failures are reported in the result, never raised.
    The staging file is removed whatever happens.
    """
    argv = sender_argv(sender_path, target, staging_path)
    try:
        write_staging_file(staging_path, records)

        if debug:
            logger.debug("Transmission suppressed (debug): %s", " ".join(argv))
            for record in records:
                logger.debug("  %s", record.to_line())
            return SendResult(ok=True, exit_code=None, stdout="", stderr="", suppressed=True)

        try:
            proc = subprocess.run(argv, capture_output=True, text=True)
        except OSError as e:
            logger.warning("Failed to launch sender %s: %s", argv[0], e)
            return SendResult(ok=False, exit_code=None, stdout="", stderr=str(e))

        if proc.returncode != 0:
            logger.warning(
                "Sender exited with %d: %s",
                proc.returncode,
                (proc.stderr or proc.stdout or "").strip(),
            )
        return SendResult(
            ok=proc.returncode == 0,
            exit_code=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
        )
    except OSError as e:
        logger.warning("Failed to write staging file %s: %s", staging_path, e)
        return SendResult(ok=False, exit_code=None, stdout="", stderr=str(e))
    finally:
        staging_path.unlink(missing_ok=True)
