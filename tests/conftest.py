from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from pathlib import Path

import pytest

_FAKE_SENDER = """\
#!{python}
import json
import sys

argv = sys.argv[1:]
staging = argv[argv.index("-i") + 1]
with open(staging, encoding="utf-8") as handle:
    lines = handle.read().splitlines()
with open({log!r}, "a", encoding="utf-8") as log:
    log.write(json.dumps({{"argv": argv, "lines": lines}}) + "\\n")
sys.exit({exit_code})
"""


@dataclass
class FakeSender:
    path: Path
    log_path: Path

    def calls(self) -> list[dict]:
        if not self.log_path.exists():
            return []
        return [json.loads(line) for line in self.log_path.read_text(encoding="utf-8").splitlines()]


def _make_sender(tmp_path: Path, name: str, exit_code: int) -> FakeSender:
    path = tmp_path / name
    log_path = tmp_path / f"{name}.log"
    path.write_text(
        _FAKE_SENDER.format(python=sys.executable, log=str(log_path), exit_code=exit_code),
        encoding="utf-8",
    )
    path.chmod(0o755)
    return FakeSender(path=path, log_path=log_path)


@pytest.fixture
def fake_sender(tmp_path: Path) -> FakeSender:
    return _make_sender(tmp_path, "fake_sender", 0)


@pytest.fixture
def failing_sender(tmp_path: Path) -> FakeSender:
    return _make_sender(tmp_path, "failing_sender", 2)
