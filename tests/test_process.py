from __future__ import annotations

import shlex
import sys

from multicheck.adapters.process import run_shell, substitute_hostname


def _py(code: str) -> str:
    return f"{shlex.quote(sys.executable)} -c {shlex.quote(code)}"


def test_substitute_hostname_replaces_every_placeholder() -> None:
    assert substitute_hostname("ping -c1 @HOSTNAME@", "db1") == "ping -c1 db1"
    assert substitute_hostname("ssh @HOSTNAME@ hostname; echo @HOSTNAME@", "db1") == "ssh db1 hostname; echo db1"
    assert substitute_hostname("uptime", "db1") == "uptime"


def test_run_shell_captures_lines_in_order() -> None:
    result = run_shell(_py("print('a 1'); print('b 2'); print('c 3')"))

    assert result.exit_code == 0
    assert result.lines == ["a 1", "b 2", "c 3"]
    assert not result.timed_out


def test_run_shell_uses_the_shell() -> None:
    result = run_shell(_py("print('x 1')") + " | tr x y")

    assert result.lines == ["y 1"]


def test_run_shell_does_not_raise_on_failure() -> None:
    result = run_shell(_py("import sys; print('partial 5'); sys.exit(4)"))

    assert result.exit_code == 4
    assert result.lines == ["partial 5"]


def test_run_shell_empty_output() -> None:
    result = run_shell(_py("pass"))

    assert result.stdout == ""
    assert result.lines == []


def test_run_shell_timeout_is_not_fatal() -> None:
    result = run_shell(_py("import time; time.sleep(3)"), timeout_sec=0.2)

    assert result.timed_out
    assert result.exit_code is None
    assert result.lines == []
