import timeit
from collections.abc import Callable
from dataclasses import dataclass
from functools import partial
from typing import Any, Final, NamedTuple, Self

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)

import lazychain as lc

type BenchFn = Callable[[], object]


WARMUP_RUNS: Final = 5
CALLS_BY_RUN: Final = 10
TARGET_BENCH_SEC: Final = 1
MIN_RUNS: Final = 20
SIZES: Final = (256, 1024, 4096)

CONSOLE: Final = Console()


class Variant(NamedTuple):
    """A specific benchmark variant size."""

    size: int
    n_runs: int
    fn: BenchFn

    @classmethod
    def from_fn(cls, fn: BenchFn, size: int) -> Self:
        """Estimate number of runs needed for benchmark variant."""
        warmup_time = timeit.timeit(fn, number=WARMUP_RUNS) / WARMUP_RUNS
        est = int(TARGET_BENCH_SEC / 2 / warmup_time / CALLS_BY_RUN)
        return cls(size, max(MIN_RUNS, est), fn)


class Benchmark(NamedTuple):
    """A benchmark with multiple data sizes."""

    category: str
    name: str
    variants: tuple[Variant, ...]


@dataclass(slots=True)
class Row:
    """Raw row of timing data."""

    category: str
    name: str
    size: int
    run_idx: int
    time: float


BENCHMARKS: Final[list[Benchmark]] = []


def bench[P](
    *, gen: Callable[[lc.LazySeq[int]], P] = lambda size: size
) -> Callable[[Callable[[P], object]], Callable[[P], object]]:
    """Decorator to register benchmarks with multiple data sizes.

    **gen** receives a `LazySeq` over `range(size)` and builds the benchmark input from it.
    """

    def decorator(func: Callable[[P], object]) -> Callable[[P], object]:
        variants = tuple(
            Variant.from_fn(partial(func, lc.LazySeq(range(size)).into(gen)), size)
            for size in SIZES
        )
        BENCHMARKS.append(
            Benchmark(func.__qualname__.split(".")[0], func.__name__, variants)
        )
        return func

    return decorator


def collect_raw_timings(benchmarks: lc.LazySeq[Benchmark]) -> lc.Collection:
    """Collect raw timing data for all benchmarks. Stats computed at the end."""
    total_runs: int = benchmarks.flat_map(lambda b: b.variants).map(lambda v: v.n_runs).sum()
    CONSOLE.print(
        f"Found {benchmarks.count()} benchmarks, {total_runs} total runs",
        style="bold white",
    )

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TimeRemainingColumn(),
        console=CONSOLE,
    ) as progress:
        task = progress.add_task("[cyan]Running benchmarks...", total=total_runs)
        f = partial(_run_variant, progress, task)
        return benchmarks.flat_map(
            lambda b: lc.LazySeq(b.variants).flat_map(lambda v: f(v, b))
        ).collect()


def _run_variant(
    progress: Progress,
    task: Any,  # noqa: ANN401
    variant: Variant,
    bench: Benchmark,
) -> lc.LazySeq[Row]:
    def _update_progress(run_idx: int) -> Row:
        progress.update(
            task,
            description=f"[cyan]{bench.category}: {bench.name} @ {variant.size}",
        )
        time_taken = timeit.timeit(variant.fn, number=CALLS_BY_RUN)
        progress.advance(task)
        return Row(bench.category, bench.name, variant.size, run_idx, time_taken)

    return lc.LazySeq.times(variant.n_runs).map(lambda run_idx: _update_progress(run_idx))
