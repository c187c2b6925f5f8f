"""Aggregation and display of benchmark timings."""

from typing import NamedTuple

from rich.table import Table

import lazychain as lc

from ._registery import BENCHMARKS, CALLS_BY_RUN, Row, collect_raw_timings


class Stat(NamedTuple):
    """Median timing of one benchmark variant."""

    category: str
    name: str
    size: int
    runs: int
    median: float


def _stat(group: lc.Collection) -> Stat:
    first: Row = group.first_or_fail()
    return Stat(
        first.category,
        first.name,
        first.size,
        len(group),
        group.median("time") / CALLS_BY_RUN,
    )


def run_pipeline(category: str | None = None) -> lc.LazySeq[Stat]:
    """Run every registered benchmark, optionally restricted to one category."""
    selected = lc.LazySeq(BENCHMARKS)
    if category is not None:
        selected = selected.where("category", category)
    if selected.is_empty():
        msg = f"No benchmarks registered for {category or 'any category'}!"
        raise LookupError(msg)
    return (
        collect_raw_timings(selected)
        .lazy()
        .group_by(lambda row: f"{row.category}/{row.name}/{row.size}")
        .values()
        .map(_stat)
        .eager()
    )


def to_table(stats: lc.LazySeq[Stat]) -> Table:
    table = Table(title="lazychain benchmarks")
    for column in ("category", "name", "size", "runs"):
        table.add_column(column)
    table.add_column("median (µs)", justify="right")
    for s in stats.sort_by(["category", "name", "size"]):
        table.add_row(
            s.category, s.name, str(s.size), str(s.runs), f"{s.median * 1e6:.2f}"
        )
    return table
