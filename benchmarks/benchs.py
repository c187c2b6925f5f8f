"""Benchmarks for lazychain package - benchs.py."""

from collections.abc import Iterator

import lazychain as lc

from ._registery import bench


def _rows(data: lc.LazySeq[int]) -> list[dict[str, int]]:
    return data.map(lambda n: {"id": n, "group": n % 7, "score": n * 3 % 11}).to_list()


def _generator(data: lc.LazySeq[int]) -> lc.LazySeq[int]:
    values = data.to_list()

    def _produce() -> Iterator[int]:
        yield from values

    return lc.LazySeq(_produce)


class Pipeline:
    """Benchmark chained lazy combinators against plain comprehensions."""

    @bench()
    @staticmethod
    def filter_map_take(data: lc.LazySeq[int]) -> object:
        """Benchmark filter, map then a short-circuiting take."""
        return data.filter(lambda n: n % 2 == 0).map(lambda n: n * n).take(100).to_list()

    @bench()
    @staticmethod
    def filter_map_with_keys(data: lc.LazySeq[int]) -> object:
        """Benchmark callbacks receiving both value and key."""
        return data.filter(lambda n, k: (n + k) % 3 == 0).map(lambda n, k: n - k).to_list()

    @bench(gen=lambda size: size.to_list())
    @staticmethod
    def comprehension(data: list[int]) -> object:
        """Baseline without lazychain."""
        return [n * n for n in data if n % 2 == 0][:100]


class Remember:
    """Benchmark replaying a generator-backed sequence with and without memoization."""

    @bench(gen=_generator)
    @staticmethod
    def replay_plain(data: lc.LazySeq[int]) -> object:
        """Traverse the generator three times."""
        return [data.count() for _ in range(3)]

    @bench(gen=lambda size: _generator(size).remember())
    @staticmethod
    def replay_remembered(data: lc.LazySeq[int]) -> object:
        """Traverse a memoized generator three times."""
        return [data.count() for _ in range(3)]


class Windows:
    """Benchmark windowing combinators."""

    @bench()
    @staticmethod
    def chunk(data: lc.LazySeq[int]) -> object:
        """Benchmark fixed-size chunks."""
        return data.chunk(16).map(lambda c: c.count()).to_list()

    @bench()
    @staticmethod
    def sliding(data: lc.LazySeq[int]) -> object:
        """Benchmark overlapping windows."""
        return data.sliding(4).map(lambda w: w.sum()).to_list()

    @bench()
    @staticmethod
    def take_last(data: lc.LazySeq[int]) -> object:
        """Benchmark the ring buffer behind negative take."""
        return data.take(-32).to_list()


class Where:
    """Benchmark key path filtering and eager passthroughs."""

    @bench(gen=_rows)
    @staticmethod
    def where_operator(data: list[dict[str, int]]) -> object:
        """Benchmark a where triple over dict rows."""
        return lc.LazySeq(data).where("score", ">=", 5).count()

    @bench(gen=_rows)
    @staticmethod
    def sort_by_group_then_score(data: list[dict[str, int]]) -> object:
        """Benchmark a two-key stable sort."""
        return lc.LazySeq(data).sort_by(["group", ("score", "desc")]).take(10).to_list()
