from __future__ import annotations

from dataclasses import dataclass
import logging
import subprocess
import time

from multicheck.config.parser import HOSTNAME_PLACEHOLDER

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    cmd: str
    exit_code: int | None  # None if the command timed out
    stdout: str
    stderr: str
    duration_ms: int
    timed_out: bool = False

    @property
    def lines(self) -> list[str]:
        return self.stdout.splitlines()


def substitute_hostname(command_line: str, hostname: str) -> str:
    return command_line.replace(HOSTNAME_PLACEHOLDER, hostname)


def _as_text(data: str | bytes | None) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


def run_shell(command_line: str, *, timeout_sec: float | None = None) -> CmdResult:
    """
    Run a command line through the shell and capture stdout/stderr.

    Design decisions:
      - We do NOT throw on non-zero exit codes (we return them). The caller decides.
      - The shell and environment are inherited from the caller.
      - With no timeout the call blocks until the command exits. On timeout the
        result is flagged and keeps whatever output was captured.
    """
    if not isinstance(command_line, str) or not command_line.strip():
        raise ValueError("command_line must be a non-empty string")

    start = time.perf_counter()

    try:
        proc = subprocess.run(
            command_line,
            shell=True,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout_sec,
        )
    except subprocess.TimeoutExpired as e:
        dur_ms = int((time.perf_counter() - start) * 1000)
        logger.warning("Command timed out after %ss: %s", timeout_sec, command_line)
        return CmdResult(
            cmd=command_line,
            exit_code=None,
            stdout=_as_text(e.stdout),
            stderr=_as_text(e.stderr),
            duration_ms=dur_ms,
            timed_out=True,
        )

    dur_ms = int((time.perf_counter() - start) * 1000)
    if proc.returncode != 0:
        logger.debug("Command exited with %d: %s", proc.returncode, command_line)

    return CmdResult(
        cmd=command_line,
        exit_code=proc.returncode,
        stdout=proc.stdout or "",
        stderr=proc.stderr or "",
        duration_ms=dur_ms,
    )
