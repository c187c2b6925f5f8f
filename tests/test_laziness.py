"""Tests for deferred evaluation and short-circuiting."""

from collections.abc import Iterator

import pytest

import lazychain as lc


class Counter:
    """Infinite source recording how many elements were produced."""

    def __init__(self) -> None:
        self.pulled = 0

    def __call__(self) -> Iterator[int]:
        n = 0
        while True:
            n += 1
            self.pulled += 1
            yield n


def test_chaining_consumes_nothing() -> None:
    """Building a pipeline on an infinite source must not pull any element."""
    source = Counter()
    _pipeline = (
        lc.LazySeq(source)
        .filter(lambda n: n % 2 == 0)
        .map(lambda n: n * 10)
        .skip(3)
        .chunk(2)
        .sliding(2)
        .take(-2)
    )
    assert source.pulled == 0


def test_infinite_filter_take_collect() -> None:
    """range(1, inf).filter(even).take(3) completes."""
    result = lc.LazySeq(Counter()).filter(lambda n: n % 2 == 0).take(3).collect()
    assert result.to_list() == [2, 4, 6]


def test_take_stops_upstream() -> None:
    """take(n) never advances the upstream past position n - 1."""
    source = Counter()
    assert lc.LazySeq(source).take(4).to_list() == [1, 2, 3, 4]
    assert source.pulled == 4


def test_take_zero_pulls_nothing() -> None:
    source = Counter()
    assert lc.LazySeq(source).take(0).to_list() == []
    assert source.pulled == 0


def test_predicate_called_once_per_element_in_order() -> None:
    """filter invokes its predicate exactly once per pulled element, in source order."""
    seen: list[int] = []

    def _check(value: int) -> bool:
        seen.append(value)
        return value > 2

    pipeline = lc.LazySeq([1, 2, 3, 4, 5]).filter(_check)
    assert seen == []
    assert pipeline.take(2).to_list() == [3, 4]
    assert seen == [1, 2, 3, 4]


def test_first_short_circuits() -> None:
    """first() with a predicate matching the 5th element never evaluates the 6th."""
    evaluated: list[int] = []

    def _check(value: int) -> bool:
        evaluated.append(value)
        return value == 5

    source = Counter()
    assert lc.LazySeq(source).first(_check) == 5
    assert evaluated == [1, 2, 3, 4, 5]
    assert source.pulled == 5


def test_contains_and_search_short_circuit() -> None:
    source = Counter()
    assert lc.LazySeq(source).contains(lambda n: n == 3)
    assert source.pulled == 3
    assert lc.LazySeq(Counter()).search(lambda n: n == 4) == 3


def test_replay_restarts_producer() -> None:
    """Two traversals of the same LazySeq call the producer twice, independently."""
    calls: list[str] = []

    def _source() -> Iterator[int]:
        calls.append("start")
        yield from (1, 2, 3)

    seq = lc.LazySeq(_source).map(lambda n: n * 2)
    first, second = seq.items(), seq.items()
    assert next(first).value == 2
    assert [p.value for p in second] == [2, 4, 6]
    assert [p.value for p in first] == [4, 6]
    assert calls == ["start", "start"]


def test_parent_is_never_mutated() -> None:
    parent = lc.LazySeq([1, 2, 3])
    child = parent.map(lambda n: n + 1)
    assert parent.to_list() == [1, 2, 3]
    assert child.to_list() == [2, 3, 4]


def test_callback_errors_propagate_unchanged() -> None:
    """Errors raised by user callables reach the terminal operation unwrapped."""

    def _boom(value: int) -> int:
        if value == 2:
            msg = "bad value"
            raise KeyError(msg)
        return value

    pipeline = lc.LazySeq([1, 2, 3]).map(_boom)
    with pytest.raises(KeyError, match="bad value"):
        pipeline.to_list()


def test_take_until_timeout_with_past_deadline_yields_nothing() -> None:
    source = Counter()
    seq = lc.LazySeq(source).take_until_timeout(100.0, clock=lambda: 200.0)
    assert seq.to_list() == []
    assert source.pulled == 0


def test_take_until_timeout_checks_after_each_pair() -> None:
    ticks = iter([0.0, 1.0, 2.0, 3.0, 4.0])
    seq = lc.LazySeq(Counter()).take_until_timeout(3.0, clock=lambda: next(ticks))
    assert seq.to_list() == [1, 2, 3]


def test_tap_each_runs_only_when_consumed() -> None:
    tapped: list[tuple[int, int]] = []
    seq = lc.LazySeq([10, 20, 30]).tap_each(lambda v, k: tapped.append((k, v)))
    assert tapped == []
    assert seq.take(2).to_list() == [10, 20]
    assert tapped == [(0, 10), (1, 20)]
