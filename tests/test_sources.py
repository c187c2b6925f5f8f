"""Tests for LazySeq construction, keys and terminal operations."""

from collections.abc import Iterator

import pytest

import lazychain as lc
from lazychain._sources import ArraySource


def _numbers() -> Iterator[int]:
    yield from (1, 2, 3)


def test_generator_object_is_rejected() -> None:
    with pytest.raises(lc.InvalidSourceError):
        lc.LazySeq(_numbers())


def test_iterator_is_rejected() -> None:
    with pytest.raises(lc.InvalidSourceError):
        lc.LazySeq(iter([1, 2]))


def test_non_iterable_is_rejected() -> None:
    with pytest.raises(lc.InvalidSourceError):
        lc.LazySeq(42)


def test_invalid_source_is_a_type_error() -> None:
    with pytest.raises(TypeError):
        lc.LazySeq.empty().concat(x for x in "ab")


def test_generator_function_is_accepted_and_replayable() -> None:
    seq = lc.LazySeq(_numbers)
    assert seq.to_list() == [1, 2, 3]
    assert seq.to_list() == [1, 2, 3]


def test_none_is_empty() -> None:
    assert lc.LazySeq().to_list() == []
    assert lc.LazySeq().is_empty()


def test_producer_returning_a_scalar_is_wrapped() -> None:
    assert lc.LazySeq(lambda: 5).to_list() == [5]


def test_producer_returning_a_mapping_keeps_keys() -> None:
    assert lc.LazySeq(lambda: {"a": 1}).to_dict() == {"a": 1}


def test_from_pairs_keeps_duplicate_keys() -> None:
    def _rows() -> Iterator[tuple[str, int]]:
        yield "k", 1
        yield "k", 2

    seq = lc.LazySeq.from_pairs(_rows)
    assert list(seq.items()) == [("k", 1), ("k", 2)]
    assert seq.count() == 2
    assert seq.to_dict() == {"k": 2}


def test_count_in_memory_does_not_traverse() -> None:
    seq = lc.LazySeq([1, 2, 3])
    assert seq.count() == 3
    assert isinstance(seq.source, ArraySource)


def test_count_drains_producers() -> None:
    assert lc.LazySeq.range(1, 10).count() == 10
    assert lc.LazySeq.range(1, 10).filter(lambda n: n > 5).count() == 5


def test_range_counts_down() -> None:
    assert lc.LazySeq.range(3, -1).to_list() == [3, 2, 1, 0, -1]


def test_times() -> None:
    assert lc.LazySeq.times(3).to_list() == [1, 2, 3]
    assert lc.LazySeq.times(0).to_list() == []


def test_first_and_last_defaults() -> None:
    seq = lc.LazySeq([1, 2, 3, 4])
    assert seq.first() == 1
    assert seq.last() == 4
    assert seq.first(lambda v: v > 2) == 3
    assert seq.last(lambda v: v < 3) == 2
    assert seq.first(lambda v: v > 9, "none") == "none"
    assert seq.last(lambda v: v > 9, "none") == "none"


def test_callbacks_receive_keys() -> None:
    seq = lc.LazySeq({"a": 1, "b": 2})
    assert seq.first(lambda _v, k: k == "b") == 2
    assert seq.filter(lambda _v, k: k != "a").to_dict() == {"b": 2}
    assert seq.map(lambda v, k: k * v).to_list() == ["a", "bb"]


def test_contains_forms() -> None:
    seq = lc.LazySeq([{"n": 1}, {"n": 2}])
    assert seq.contains(lambda item: item["n"] == 2)
    assert seq.contains("n", 2)
    assert seq.contains("n", ">", 1)
    assert not seq.contains({"n": 3})
    assert seq.doesnt_contain("n", ">", 5)
    assert lc.LazySeq([1, 2]).contains_strict(1)
    assert seq.contains_strict("n", 2)
    assert not seq.contains_strict("n", 2.0)


def test_search() -> None:
    seq = lc.LazySeq({"a": 1, "b": "2"})
    assert seq.search("2") == "b"
    assert seq.search(2) is None
    assert seq.search(1, strict=True) == "a"


def test_get_has_has_any() -> None:
    seq = lc.LazySeq({"a": 1, "b": 2})
    assert seq.get("b") == 2
    assert seq.get("z", 0) == 0
    assert seq.has("a", "b")
    assert not seq.has("a", "z")
    assert seq.has_any("z", "a")
    assert not seq.has()


def test_emptiness_and_single_item() -> None:
    assert lc.LazySeq([1]).contains_one_item()
    assert not lc.LazySeq([1, 2]).contains_one_item()
    assert lc.LazySeq.count_from().is_not_empty()


def test_sole() -> None:
    assert lc.LazySeq([1, 2, 3]).sole(lambda v: v == 2) == 2
    assert lc.LazySeq([{"n": 1}, {"n": 2}]).sole("n", 2) == {"n": 2}


def test_sole_not_found() -> None:
    with pytest.raises(lc.ItemNotFoundError) as exc:
        lc.LazySeq([1, 2]).sole(lambda v: v > 5)
    assert exc.value.count == 0


def test_sole_multiple_found_carries_count() -> None:
    with pytest.raises(lc.MultipleItemsFoundError) as exc:
        lc.LazySeq.count_from().sole(lambda v: v > 0)
    assert exc.value.count == 2


def test_first_or_fail() -> None:
    assert lc.LazySeq([3, 4]).first_or_fail() == 3
    assert lc.LazySeq([{"n": 1}, {"n": 2}]).first_or_fail("n", ">", 1) == {"n": 2}
    with pytest.raises(lc.ItemNotFoundError):
        lc.LazySeq([]).first_or_fail()


def test_every() -> None:
    seq = lc.LazySeq([{"ok": True, "n": 2}, {"ok": True, "n": 4}])
    assert seq.every("ok")
    assert seq.every("n", ">", 1)
    assert not seq.every(lambda item: item["n"] > 2)


def test_reduce_and_aggregates() -> None:
    seq = lc.LazySeq([1, 2, 3, 4])
    assert seq.reduce(lambda carry, v: carry + v, 0) == 10
    assert seq.sum() == 10
    assert seq.avg() == 2.5
    assert seq.min() == 1
    assert seq.max() == 4
    assert seq.median() == 2.5
    assert seq.implode("-") == "1-2-3-4"
    assert lc.LazySeq([]).avg() is None


def test_repr_does_not_consume() -> None:
    def _boom() -> Iterator[int]:
        msg = "should not run"
        raise AssertionError(msg)
        yield 0

    assert repr(lc.LazySeq(_boom).map(str)) == "LazySeq(GeneratorSource)"


def test_tail_is_deprecated() -> None:
    with pytest.deprecated_call():
        assert lc.LazySeq([1, 2, 3]).tail(2).to_list() == [2, 3]


def test_concat_starts_tail_only_after_head() -> None:
    calls: list[str] = []

    def _tail() -> Iterator[int]:
        calls.append("tail")
        yield 3

    seq = lc.LazySeq([1, 2]).concat(_tail)
    assert seq.first() == 1
    assert seq.take(2).to_list() == [1, 2]
    assert calls == []
    assert seq.to_list() == [1, 2, 3]
    assert calls == ["tail"]


def test_concat_empty_head_reindexes_tail() -> None:
    assert list(lc.LazySeq().concat({"x": 1}).items()) == [(0, 1)]
