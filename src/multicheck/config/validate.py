from __future__ import annotations

import re

from .errors import InvalidPatternError
from .parser import Configuration, Rule

REQUIRED_GROUPS = 2


def _validate_rule(rule: Rule, *, command_line: str, source: str | None) -> None:
    try:
        rx = re.compile(rule.pattern)
    except re.error as e:
        raise InvalidPatternError(
            f"Invalid pattern for item '{rule.item_prefix}' under command '{command_line}': /{rule.pattern}/ ({e})",
            line_no=rule.line_no,
            source=source,
        ) from e

    if rx.groups != REQUIRED_GROUPS:
        raise InvalidPatternError(
            f"Pattern for item '{rule.item_prefix}' under command '{command_line}' must have exactly "
            f"{REQUIRED_GROUPS} capture groups (key, value), got {rx.groups}: /{rule.pattern}/",
            line_no=rule.line_no,
            source=source,
        )


def validate_configuration(cfg: Configuration) -> None:
    """
    Validate a parsed Configuration.

    Every item pattern must compile and contain exactly two capture groups:
    group 1 is the item key parameter, group 2 the value.

    Raises:
        InvalidPatternError on the first bad pattern.
    """
    for spec in cfg.commands:
        for rule in spec.rules:
            _validate_rule(rule, command_line=spec.command_line, source=cfg.source)
