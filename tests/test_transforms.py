"""Tests for the element-wise and reshaping combinators."""

import pytest

import lazychain as lc


def test_map_with_keys_expands_and_drops() -> None:
    seq = lc.LazySeq([1, 2, 3]).map_with_keys(
        lambda v: [(f"{v}a", v), (f"{v}b", v)] if v != 2 else []
    )
    assert seq.to_dict() == {"1a": 1, "1b": 1, "3a": 3, "3b": 3}


def test_map_spread_and_flat_map() -> None:
    assert lc.LazySeq([(1, 2), (3, 4)]).map_spread(lambda a, b: a + b).to_list() == [3, 7]
    assert lc.LazySeq([1, 2]).flat_map(lambda v: [v, v]).to_list() == [1, 1, 2, 2]


def test_keys_values_flip() -> None:
    seq = lc.LazySeq({"a": 1, "b": 2})
    assert seq.keys().to_list() == ["a", "b"]
    assert list(seq.values().items()) == [(0, 1), (1, 2)]
    assert seq.flip().to_dict() == {1: "a", 2: "b"}


def test_key_by_last_write_wins() -> None:
    rows = [{"id": 1, "v": "a"}, {"id": 1, "v": "b"}]
    assert lc.LazySeq(rows).key_by("id").to_dict() == {1: {"id": 1, "v": "b"}}


def test_pluck_nested() -> None:
    rows = [{"user": {"name": "Ada"}}, {"user": {}}]
    assert lc.LazySeq(rows).pluck("user.name").to_list() == ["Ada", None]


def test_skip_and_skip_while_and_skip_until() -> None:
    seq = lc.LazySeq([1, 2, 3, 4, 1])
    assert seq.skip(2).to_list() == [3, 4, 1]
    assert seq.skip(-1).to_list() == [1, 2, 3, 4, 1]
    assert seq.skip_while(lambda v: v < 3).to_list() == [3, 4, 1]
    assert seq.skip_while(1).to_list() == [2, 3, 4, 1]
    assert seq.skip_until(4).to_list() == [4, 1]
    assert seq.skip_until(lambda v: v > 9).to_list() == []


def test_take_while_and_take_until() -> None:
    seq = lc.LazySeq([1, 2, 3, 4])
    assert seq.take_while(lambda v: v < 3).to_list() == [1, 2]
    assert seq.take_until(3).to_list() == [1, 2]
    assert seq.take_until(lambda v: v > 9).to_list() == [1, 2, 3, 4]


def test_take_until_on_infinite_source() -> None:
    assert lc.LazySeq.count_from(1).take_until(4).to_list() == [1, 2, 3]


def test_reject() -> None:
    assert lc.LazySeq([1, 2, 3]).reject(lambda v: v == 2).to_list() == [1, 3]
    assert lc.LazySeq([True, False, True]).reject().to_list() == [False]


def test_unique() -> None:
    assert lc.LazySeq([1, 2, 1, 3, 2]).unique().to_list() == [1, 2, 3]
    rows = [{"c": "x"}, {"c": "y"}, {"c": "x"}]
    assert lc.LazySeq(rows).unique("c").count() == 2


def test_count_by() -> None:
    counts = lc.LazySeq(["a", "b", "a"]).count_by().to_dict()
    assert counts == {"a": 2, "b": 1}
    assert lc.LazySeq([1, 2, 3]).count_by(lambda v: v % 2).to_dict() == {1: 2, 0: 1}


def test_collapse_and_flatten() -> None:
    assert lc.LazySeq([[1, 2], 3, (4,)]).collapse().to_list() == [1, 2, 4]
    assert lc.LazySeq([{"a": [1, {"b": 2}]}]).flatten().to_list() == [1, 2]


def test_nth() -> None:
    assert lc.LazySeq(range(10)).nth(4).to_list() == [0, 4, 8]
    assert lc.LazySeq([1, 2, 3, 4, 5]).nth(2, -3).to_list() == [3, 5]
    assert lc.LazySeq([1, 2, 3, 4, 5]).nth(2, 1).to_list() == [2, 4]
    with pytest.raises(ValueError, match="step"):
        lc.LazySeq([1]).nth(0)


def test_only_stops_early() -> None:
    seq = lc.LazySeq.count_from(0).only(1, 3)
    assert list(seq.items()) == [(1, 1), (3, 3)]


def test_only_without_keys_keeps_everything() -> None:
    assert lc.LazySeq({"a": 1, "b": 2}).only().to_dict() == {"a": 1, "b": 2}


def test_only_does_not_pull_past_the_last_key() -> None:
    pulled: list[int] = []
    seq = lc.LazySeq([10, 20, 30]).tap_each(lambda v: pulled.append(v)).only(1)
    assert seq.to_list() == [20]
    assert pulled == [10, 20]


def test_slice() -> None:
    seq = lc.LazySeq(range(10))
    assert seq.slice(2, 3).to_list() == [2, 3, 4]
    assert seq.slice(7).to_list() == [7, 8, 9]
    assert seq.slice(-3).to_list() == [7, 8, 9]
    assert seq.slice(2, -5).to_list() == [2, 3, 4]


def test_pad() -> None:
    assert lc.LazySeq([1, 2]).pad(4, 0).to_list() == [1, 2, 0, 0]
    assert lc.LazySeq([1, 2]).pad(-4, 0).to_list() == [0, 0, 1, 2]
    assert lc.LazySeq([1, 2]).pad(1, 0).to_list() == [1, 2]


def test_replace() -> None:
    seq = lc.LazySeq({"a": 1, "b": 2}).replace({"b": 20, "c": 30})
    assert seq.to_dict() == {"a": 1, "b": 20, "c": 30}


def test_eager_snapshots() -> None:
    pulled: list[int] = []

    def _source() -> list[int]:
        pulled.append(1)
        return [1, 2]

    snapshot = lc.LazySeq(_source).eager()
    assert pulled == [1]
    assert snapshot.to_list() == [1, 2]
    assert snapshot.to_list() == [1, 2]
    assert pulled == [1]


def test_passthrough_is_deferred() -> None:
    calls: list[int] = []

    def _source() -> list[int]:
        calls.append(1)
        return [3, 1, 2]

    ordered = lc.LazySeq(_source).sort()
    assert calls == []
    assert ordered.to_list() == [1, 2, 3]
    assert list(ordered.items()) == [(1, 1), (2, 2), (0, 3)]


def test_passthrough_sorting() -> None:
    seq = lc.LazySeq([3, 1, 2])
    assert seq.sort_desc().to_list() == [3, 2, 1]
    assert seq.sort(lambda a, b: b - a).to_list() == [3, 2, 1]
    assert seq.reverse().to_list() == [2, 1, 3]
    assert lc.LazySeq({"b": 1, "a": 2}).sort_keys().keys().to_list() == ["a", "b"]
    assert lc.LazySeq({"b": 1, "a": 2}).sort_keys_desc().keys().to_list() == ["b", "a"]


def test_passthrough_set_algebra() -> None:
    seq = lc.LazySeq([1, 2, 3, 4])
    assert seq.diff([2, 4]).to_list() == [1, 3]
    assert seq.intersect(lc.LazySeq([4, 1])).to_list() == [1, 4]
    keyed = lc.LazySeq({"a": 1, "b": 2})
    assert keyed.diff_keys({"a": 0}).to_dict() == {"b": 2}
    assert keyed.intersect_by_keys({"a": 0}).to_dict() == {"a": 1}


def test_passthrough_group_by() -> None:
    groups = lc.LazySeq(["apple", "avocado", "banana"]).group_by(lambda s: s[0])
    assert {k: g.to_list() for k, g in groups.items()} == {
        "a": ["apple", "avocado"],
        "b": ["banana"],
    }


def test_passthrough_shuffle_is_seeded() -> None:
    seq = lc.LazySeq(range(20))
    assert seq.shuffle(7).to_list() == seq.shuffle(7).to_list()
    assert sorted(seq.shuffle(7)) == list(range(20))


def test_random() -> None:
    seq = lc.LazySeq(range(5))
    assert seq.random(seed=1) in range(5)
    assert seq.random(3, seed=1).count() == 3
    with pytest.raises(ValueError, match="requested"):
        seq.random(6)


def test_dot_and_split_and_duplicates() -> None:
    assert lc.LazySeq({"a": {"b": 1}}).dot().to_dict() == {"a.b": 1}
    parts = lc.LazySeq(range(5)).split(2)
    assert [p.to_list() for p in parts] == [[0, 1, 2], [3, 4]]
    assert lc.LazySeq([1, 2, 1]).duplicates().to_dict() == {2: 1}


def test_for_page() -> None:
    seq = lc.LazySeq(range(1, 8))
    assert seq.for_page(1, 3).to_list() == [1, 2, 3]
    assert seq.for_page(3, 3).to_list() == [7]
    assert seq.for_page(0, 3).to_list() == [1, 2, 3]
    assert seq.for_page(4, 3).to_list() == []


def test_except() -> None:
    seq = lc.LazySeq({"a": 1, "b": 2, "c": 3})
    assert seq.except_("a", "c").to_dict() == {"b": 2}
    assert seq.except_().to_dict() == {"a": 1, "b": 2, "c": 3}


def test_merge_overwrites_names_and_appends_indexes() -> None:
    keyed = lc.LazySeq({"a": 1, "b": 2}).merge({"b": 20, "c": 3})
    assert list(keyed.items()) == [("a", 1), ("b", 20), ("c", 3)]
    listed = lc.LazySeq([1, 2]).merge(lc.LazySeq([3, 4]))
    assert list(listed.items()) == [(0, 1), (1, 2), (2, 3), (3, 4)]


def test_union_keeps_existing_keys() -> None:
    seq = lc.LazySeq({"a": 1}).union({"a": 10, "b": 2})
    assert seq.to_dict() == {"a": 1, "b": 2}
    assert lc.LazySeq([1, 2]).union([7, 8, 9]).to_list() == [1, 2, 9]


def test_cross_join() -> None:
    rows = lc.LazySeq([1, 2]).cross_join(["a"], ("x", "y")).to_list()
    assert rows == [[1, "a", "x"], [1, "a", "y"], [2, "a", "x"], [2, "a", "y"]]


def test_partition() -> None:
    passed, failed = lc.LazySeq({"a": 1, "b": 0, "c": 2}).partition(lambda v: v > 0)
    assert passed.to_dict() == {"a": 1, "c": 2}
    assert failed.to_dict() == {"b": 0}
    active, inactive = lc.LazySeq([{"on": True}, {"on": False}]).partition("on")
    assert (active.count(), inactive.count()) == (1, 1)


def test_undot_inverts_dot() -> None:
    nested = {"user": {"name": "Ada", "tags": ["a", "b"]}}
    assert lc.LazySeq(nested).dot().undot().to_dict() == nested


def test_mode() -> None:
    assert lc.LazySeq([1, 1, 2, 3, 3]).mode() == [1, 3]
    assert lc.LazySeq([{"c": "x"}, {"c": "y"}, {"c": "y"}]).mode("c") == ["y"]
    assert lc.LazySeq([]).mode() is None


def test_each_stops_on_false() -> None:
    seen: list[tuple[str, int]] = []

    def _visit(value: int, key: str) -> bool | None:
        seen.append((key, value))
        return False if key == "b" else None

    seq = lc.LazySeq({"a": 1, "b": 2, "c": 3})
    assert seq.each(_visit) is seq
    assert seen == [("a", 1), ("b", 2)]


def test_each_ignores_falsy_non_false_results() -> None:
    seen: list[int] = []
    lc.LazySeq([1, 2, 3]).each(lambda v: seen.append(v) or 0)
    assert seen == [1, 2, 3]
