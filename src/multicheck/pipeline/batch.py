from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from multicheck.config.parser import Rule


@dataclass(frozen=True)
class MetricRecord:
    item_key: str
    timestamp: int
    value: str

    def to_line(self) -> str:
        # "-" tells the sender to use the hostname given on its command line.
        return f"- {self.item_key} {self.timestamp} {self.value}"


def make_item_key(item_prefix: str, discriminator: str) -> str:
    return f"{item_prefix}[{discriminator}]"


def build_records(item_prefix: str, matches: Mapping[str, str], timestamp: int) -> list[MetricRecord]:
    return [
        MetricRecord(item_key=make_item_key(item_prefix, key), timestamp=timestamp, value=value)
        for key, value in matches.items()
    ]


def build_batch(extracted: Mapping[Rule, Mapping[str, str]], timestamp: int) -> list[MetricRecord]:
    """Flatten one command's per-rule matches into a batch of records."""
    batch: list[MetricRecord] = []
    for rule, matches in extracted.items():
        batch.extend(build_records(rule.item_prefix, matches, timestamp))
    return batch
