from __future__ import annotations

from multicheck.adapters.match import extract, match_lines
from multicheck.config.parser import CommandSpec, Rule
from multicheck.pipeline.batch import MetricRecord, build_batch, build_records, make_item_key

TS = 1_700_000_000


def test_make_item_key() -> None:
    assert make_item_key("multicheck.powerdns.recursor", "packetcache-hits") == (
        "multicheck.powerdns.recursor[packetcache-hits]"
    )


def test_build_records_from_powerdns_line() -> None:
    rule = Rule(pattern=r"(.*)[\=\:\s]+([\d.]+)", item_prefix="multicheck.powerdns.recursor")

    records = build_records(rule.item_prefix, match_lines(rule, ["packetcache-hits        52002"]), TS)

    assert records == [
        MetricRecord(item_key="multicheck.powerdns.recursor[packetcache-hits]", timestamp=TS, value="52002")
    ]
    assert records[0].to_line() == f"- multicheck.powerdns.recursor[packetcache-hits] {TS} 52002"


def test_build_records_one_per_key() -> None:
    records = build_records("app", {"a": "1", "b": "2"}, TS)

    assert {r.item_key for r in records} == {"app[a]", "app[b]"}
    assert all(r.timestamp == TS for r in records)


def test_build_batch_unions_rules() -> None:
    spec = CommandSpec(
        command_line="stats",
        rules=(
            Rule(pattern=r"(\w+) (\d+) \d+", item_prefix="first"),
            Rule(pattern=r"(\w+) \d+ (\d+)", item_prefix="second"),
        ),
    )

    batch = build_batch(extract(spec, ["x 1 2"]), TS)

    assert set(batch) == {
        MetricRecord(item_key="first[x]", timestamp=TS, value="1"),
        MetricRecord(item_key="second[x]", timestamp=TS, value="2"),
    }


def test_build_batch_is_idempotent() -> None:
    spec = CommandSpec(command_line="stats", rules=(Rule(pattern=r"(\w+)=(\d+)", item_prefix="s"),))
    lines = ["a=1", "b=2", "a=3", "noise"]

    assert set(build_batch(extract(spec, lines), TS)) == set(build_batch(extract(spec, lines), TS))


def test_build_batch_empty() -> None:
    assert build_batch({}, TS) == []
