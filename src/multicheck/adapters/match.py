from __future__ import annotations

from typing import Iterable, Union
import re

from multicheck.config.parser import CommandSpec, Rule


def compile_rule(rule: Rule) -> re.Pattern[str]:
    return re.compile(rule.pattern)


def match_lines(rule: Union[Rule, re.Pattern[str]], lines: Iterable[str]) -> dict[str, str]:
    """
    Apply one rule to command output, line by line.

    v1 rules:
      - each line is searched once (not a full match)
      - group 1 is the key parameter, group 2 the value, both kept as text
        (surrounding whitespace stripped)
      - a key seen again later overwrites the earlier value
      - lines that do not match are skipped
    """
    rx = compile_rule(rule) if isinstance(rule, Rule) else rule

    out: dict[str, str] = {}
    for line in lines:
        m = rx.search(line)
        if m is None:
            continue
        key, value = m.group(1, 2)
        if key is None or value is None:
            # optional group that did not take part in the match
            continue
        out[key.strip()] = value.strip()
    return out


def applicable_rules(spec: CommandSpec, *, first_rule_only: bool = False) -> tuple[Rule, ...]:
    if first_rule_only:
        return spec.rules[:1]
    return spec.rules


def extract(
    spec: CommandSpec,
    lines: Iterable[str],
    *,
    first_rule_only: bool = False,
) -> dict[Rule, dict[str, str]]:
    """
    Apply every applicable rule of a command to its output lines.

    Results are kept per rule, so two rules sharing a key parameter do not
    clobber each other. With first_rule_only only the first declared rule is used.
    """
    lines = list(lines)
    out: dict[Rule, dict[str, str]] = {}
    for rule in applicable_rules(spec, first_rule_only=first_rule_only):
        matches = match_lines(rule, lines)
        # A rule declared twice shares its result set; later matches still win.
        out.setdefault(rule, {}).update(matches)
    return out
