"""Tests for the memoizing cache adapter."""

from collections.abc import Iterator

import pytest

import lazychain as lc
from lazychain._cache import MemoCache
from lazychain._sources import ArraySource, ProducerSource


class CountingSource:
    """Finite producer counting every element it yields."""

    def __init__(self, size: int) -> None:
        self.size = size
        self.produced = 0
        self.started = 0

    def __call__(self) -> Iterator[int]:
        self.started += 1
        for n in range(self.size):
            self.produced += 1
            yield n


def test_collect_twice_drives_upstream_once() -> None:
    source = CountingSource(5)
    cached = lc.LazySeq(source).remember()
    assert cached.collect().to_list() == [0, 1, 2, 3, 4]
    assert cached.collect().to_list() == [0, 1, 2, 3, 4]
    assert source.produced == 5
    assert source.started == 1


def test_remember_is_lazy() -> None:
    source = CountingSource(5)
    _cached = lc.LazySeq(source).remember()
    assert source.started == 0


def test_partial_consumption_then_full() -> None:
    source = CountingSource(6)
    cached = lc.LazySeq(source).remember()
    assert cached.take(2).to_list() == [0, 1]
    assert source.produced == 2
    assert cached.take(4).to_list() == [0, 1, 2, 3]
    assert source.produced == 4
    assert cached.to_list() == [0, 1, 2, 3, 4, 5]
    assert source.produced == 6


def test_interleaved_cursors_see_the_same_elements() -> None:
    source = CountingSource(4)
    cached = lc.LazySeq(source).remember()
    left, right = iter(cached), iter(cached)
    assert next(left) == 0
    assert next(left) == 1
    assert next(right) == 0
    assert list(right) == [1, 2, 3]
    assert list(left) == [2, 3]
    assert source.produced == 4


def test_combinators_on_remembered_share_the_cache() -> None:
    source = CountingSource(10)
    cached = lc.LazySeq(source).remember()
    assert cached.filter(lambda n: n % 3 == 0).to_list() == [0, 3, 6, 9]
    assert cached.map(lambda n: -n).take(2).to_list() == [0, -1]
    assert source.produced == 10


def test_keys_are_replayed() -> None:
    cached = lc.LazySeq({"a": 1, "b": 2}).remember()
    assert list(cached.items()) == [("a", 1), ("b", 2)]
    assert cached.to_dict() == {"a": 1, "b": 2}


def test_entry_caches_every_visited_position() -> None:
    source = CountingSource(5)
    cache = MemoCache(ProducerSource(source))
    assert cache.entry(3) == (3, 3)
    assert len(cache) == 4
    assert cache.cursor == 3
    assert cache.entry(1) == (1, 1)
    assert source.produced == 4


def test_exhaustion_is_cached() -> None:
    source = CountingSource(2)
    cache = MemoCache(ProducerSource(source))
    assert cache.entry(5) is None
    assert cache.exhausted
    assert cache.entry(2) is None
    assert source.started == 1
    assert list(cache.traverse()) == [(0, 0), (1, 1)]


def test_empty_source() -> None:
    cache = MemoCache(ArraySource(()))
    assert list(cache.traverse()) == []
    assert cache.exhausted
    assert cache.cursor == -1


class FlakySource:
    """Yields 1, then fails during its first traversal only."""

    def __init__(self) -> None:
        self.started = 0

    def __call__(self) -> Iterator[int]:
        self.started += 1
        yield 1
        if self.started == 1:
            msg = "upstream failed"
            raise RuntimeError(msg)
        yield 2


def test_upstream_error_is_not_cached_as_exhaustion() -> None:
    source = FlakySource()
    cached = lc.LazySeq(source).remember()
    with pytest.raises(RuntimeError, match="upstream failed"):
        cached.to_list()
    with pytest.raises(RuntimeError, match="upstream failed"):
        cached.to_list()
    assert cached.take(1).to_list() == [1]
    assert source.started == 1


def test_memo_cache_reraises_past_cached_positions() -> None:
    cache = MemoCache(ProducerSource(FlakySource()))
    with pytest.raises(RuntimeError):
        cache.entry(1)
    assert not cache.exhausted
    assert cache.entry(0) == (0, 1)
    with pytest.raises(RuntimeError):
        cache.entry(1)
