from __future__ import annotations

from dataclasses import dataclass, field
import re

from .errors import (
    ConfigSyntaxError,
    DuplicateCommandError,
    EmptyConfigError,
    OrphanItemError,
)

HOSTNAME_PLACEHOLDER = "@HOSTNAME@"

# "<keyword> = <value>"; the keyword picks the value grammar below.
_KEYWORD_RE = re.compile(r"^\s*(?P<keyword>[A-Za-z_]+)\s*=\s*(?P<value>.*?)\s*$")

# Greedy: the pattern runs up to the last "/" that is followed by ",".
_ITEM_VALUE_RE = re.compile(r"^/(?P<pattern>.+)/\s*,\s*(?P<item>[A-Za-z0-9._-]+)$")


@dataclass(frozen=True)
class Rule:
    pattern: str
    item_prefix: str
    line_no: int | None = field(default=None, compare=False)


@dataclass(frozen=True)
class CommandSpec:
    command_line: str
    rules: tuple[Rule, ...]


@dataclass(frozen=True)
class Configuration:
    commands: tuple[CommandSpec, ...]
    source: str | None = None

    def get(self, command_line: str) -> CommandSpec | None:
        for spec in self.commands:
            if spec.command_line == command_line:
                return spec
        return None

    def __len__(self) -> int:
        return len(self.commands)


def _is_ignorable(line: str) -> bool:
    stripped = line.strip()
    return not stripped or stripped.startswith("#")


def parse_config_text(text: str, *, source: str | None = None) -> Configuration:
    """
    Parse multicheck config text into a Configuration.

    Grammar (one statement per line):
        command = <shell command line>
        item = /<regex>/, <item prefix>

    Blank lines and '#' comments are skipped. Items attach to the most
    recent command. Patterns are kept verbatim; compiling them is left to
    validation.

    Raises:
        DuplicateCommandError, OrphanItemError, ConfigSyntaxError, EmptyConfigError
    """
    order: list[str] = []
    rules: dict[str, list[Rule]] = {}
    current: str | None = None

    for line_no, line in enumerate(text.splitlines(), start=1):
        if _is_ignorable(line):
            continue

        m = _KEYWORD_RE.match(line)
        keyword = m.group("keyword") if m else None

        if keyword == "command" and m.group("value"):
            command_line = m.group("value")
            if command_line in rules:
                raise DuplicateCommandError(
                    f"Duplicate command definition: '{command_line}'",
                    line_no=line_no,
                    source=source,
                )
            order.append(command_line)
            rules[command_line] = []
            current = command_line
            continue

        if keyword == "item":
            im = _ITEM_VALUE_RE.match(m.group("value"))
            if im is not None:
                if current is None:
                    raise OrphanItemError(
                        f"Item defined before any command: '{line.strip()}'",
                        line_no=line_no,
                        source=source,
                    )
                rules[current].append(
                    Rule(pattern=im.group("pattern"), item_prefix=im.group("item"), line_no=line_no)
                )
                continue

        raise ConfigSyntaxError(f"Syntax error in line: '{line.strip()}'", line_no=line_no, source=source)

    if not order:
        raise EmptyConfigError("No commands defined", source=source)

    if not any(rules.values()):
        raise EmptyConfigError("No items defined for any command", source=source)

    return Configuration(
        commands=tuple(CommandSpec(command_line=c, rules=tuple(rules[c])) for c in order),
        source=source,
    )
