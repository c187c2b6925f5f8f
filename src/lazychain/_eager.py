from __future__ import annotations

import functools
import itertools
import statistics
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from random import Random
from typing import TYPE_CHECKING, Any, Literal, overload

import cytoolz as cz

from ._core import CommonBase, get_config
from ._errors import ItemNotFoundError, MultipleItemsFoundError
from ._keys import value_retriever
from ._predicates import MISSING, operator_for_where, strict_equals
from ._sources import pairs_of
from ._types import KeyPath, Pair

if TYPE_CHECKING:
    from ._lazy import LazySeq

type SortKey = KeyPath | tuple[KeyPath, Literal["asc", "desc"]]


def _reindexed(values: Iterable[Any]) -> tuple[Pair[int, Any], ...]:
    return tuple(Pair(idx, v) for idx, v in enumerate(values))


def _contains(haystack: Sequence[Any], needle: object, *, strict: bool = False) -> bool:
    if strict:
        return any(strict_equals(needle, item) for item in haystack)
    return needle in haystack


def _values_of(items: Iterable[Any]) -> list[Any]:
    match items:
        case Collection():
            return items.to_list()
        case Mapping():
            return list(items.values())  # pyright: ignore[reportUnknownArgumentType, reportUnknownMemberType]
        case _:
            return [pair.value for pair in _pairs_of_other(items)]


def _keys_of(items: Iterable[Any]) -> list[Any]:
    return [pair.key for pair in _pairs_of_other(items)]


def _pairs_of_other(items: Iterable[Any]) -> Iterable[Pair[Any, Any]]:
    from ._lazy import LazySeq

    match items:
        case Collection():
            return items.as_pairs()
        case LazySeq():
            return items.items()
        case _:
            return pairs_of(items)


def _dot(data: object, prepend: str) -> Iterator[Pair[str, Any]]:
    match data:
        case Mapping() if data:
            for key, value in data.items():  # pyright: ignore[reportUnknownVariableType, reportUnknownMemberType]
                yield from _dot(value, f"{prepend}{key}.")
        case list() if data:
            for idx, value in enumerate(data):  # pyright: ignore[reportUnknownVariableType, reportUnknownArgumentType]
                yield from _dot(value, f"{prepend}{idx}.")
        case _:
            yield Pair(prepend[:-1], data)


def _is_index(key: object) -> bool:
    return isinstance(key, int) and not isinstance(key, bool)


def _listified(data: object) -> object:
    match data:
        case dict():
            items = {k: _listified(v) for k, v in data.items()}  # pyright: ignore[reportUnknownVariableType]
            if items and list(items) == [str(idx) for idx in range(len(items))]:
                return list(items.values())
            return items
        case _:
            return data


class Collection(CommonBase[tuple[Pair[Any, Any], ...]], Sequence[Any]):
    """An eager, immutable collection of `(key, value)` pairs.

    `LazySeq.collect()` drains into a `Collection`, and every operation that cannot be done
    lazily (sorting, shuffling, set algebra, grouping, ...) is computed here on a fully
    materialized snapshot, then handed back to the lazy side.

    Iterating yields the values; positional indexing returns values too.
    Use `as_pairs()`/`items()` to see the keys, which may repeat.

    Args:
        data (tuple[Pair[Any, Any], ...]): The pairs to wrap.
    """

    _inner: tuple[Pair[Any, Any], ...]

    __slots__ = ("_inner",)

    def __init__(self, data: tuple[Pair[Any, Any], ...] = ()) -> None:
        self._inner = data

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({get_config().iter_repr(self._inner)})"

    def __len__(self) -> int:
        return len(self._inner)

    def __iter__(self) -> Iterator[Any]:
        return (pair.value for pair in self._inner)

    @overload
    def __getitem__(self, index: int) -> Any: ...  # noqa: ANN401
    @overload
    def __getitem__(self, index: slice) -> Collection: ...
    def __getitem__(self, index: int | slice) -> Any:  # pyright: ignore[reportIncompatibleMethodOverride]
        if isinstance(index, slice):
            return Collection(self._inner[index])
        return self._inner[index].value

    @staticmethod
    def from_(data: Iterable[Any]) -> Collection:
        """Create a `Collection` from any iterable: mappings keep their keys, anything else is keyed by position.

        Example:
        ```python
        >>> import lazychain as lc
        >>> lc.Collection.from_({"a": 1, "b": 2})
        Collection({'a': 1, 'b': 2})
        >>> lc.Collection.from_("ab").as_pairs()
        ((0, 'a'), (1, 'b'))

        ```
        """
        return Collection(tuple(_pairs_of_other(data)))

    @staticmethod
    def from_pairs(pairs: Iterable[tuple[Any, Any]]) -> Collection:
        return Collection(tuple(Pair(k, v) for k, v in pairs))

    def as_pairs(self) -> tuple[Pair[Any, Any], ...]:
        return self._inner

    def items(self) -> Iterator[Pair[Any, Any]]:
        return iter(self._inner)

    def keys(self) -> list[Any]:
        return [pair.key for pair in self._inner]

    def to_list(self) -> list[Any]:
        """Values in order, keys dropped."""
        return [pair.value for pair in self._inner]

    def to_dict(self) -> dict[Any, Any]:
        """Pairs as a dict; on duplicate keys the last one wins."""
        return dict(self._inner)

    def count(self) -> int:  # pyright: ignore[reportIncompatibleMethodOverride]
        return len(self._inner)

    def eq(self, other: Collection) -> bool:
        """Check if two collections hold the same pairs, in the same order."""
        return self._inner == other.as_pairs()

    def ne(self, other: Collection) -> bool:
        return not self.eq(other)

    def lazy(self) -> LazySeq[Any]:
        """Go back to a `LazySeq` over this snapshot, for free."""
        from ._lazy import LazySeq

        return LazySeq(self)

    # sorting

    def sort(self, comparator: Callable[[Any, Any], int] | None = None) -> Collection:
        """Stable sort on values, keys preserved.

        Args:
            comparator (Callable[[Any, Any], int] | None): Optional three-way comparison function.

        Example:
        ```python
        >>> import lazychain as lc
        >>> lc.Collection.from_([3, 1, 2]).sort().as_pairs()
        ((1, 1), (2, 2), (0, 3))

        ```
        """
        if comparator is None:
            return Collection(tuple(sorted(self._inner, key=lambda p: p.value)))
        key = functools.cmp_to_key(comparator)
        return Collection(tuple(sorted(self._inner, key=lambda p: key(p.value))))

    def sort_desc(self) -> Collection:
        return Collection(
            tuple(sorted(self._inner, key=lambda p: p.value, reverse=True))
        )

    def sort_by(self, keys: SortKey | list[SortKey], *, descending: bool = False) -> Collection:
        """Stable sort on one or several retrieved keys.

        Each entry of a list is either a key path/callable or a `(key, "asc" | "desc")` tuple.
        Later entries break ties left by earlier ones.

        Example:
        ```python
        >>> import lazychain as lc
        >>> people = [
        ...     {"name": "b", "age": 30},
        ...     {"name": "a", "age": 30},
        ...     {"name": "c", "age": 20},
        ... ]
        >>> lc.Collection.from_(people).sort_by([("age", "desc"), "name"]).pluck("name")
        ['a', 'b', 'c']

        ```
        """
        entries: list[SortKey] = keys if isinstance(keys, list) else [keys]
        pairs = list(self._inner)
        # least significant key first: stability keeps earlier passes as tie-breakers
        for entry in reversed(entries):
            match entry:
                case (path, "asc" | "desc" as direction) if isinstance(entry, tuple):
                    reverse = direction == "desc"
                case _:
                    path, reverse = entry, descending
            retrieve = value_retriever(path)  # pyright: ignore[reportArgumentType]
            pairs.sort(key=lambda p: retrieve(p.value, p.key), reverse=reverse)
        return Collection(tuple(pairs))

    def sort_by_desc(self, keys: SortKey | list[SortKey]) -> Collection:
        return self.sort_by(keys, descending=True)

    def sort_keys(self, *, descending: bool = False) -> Collection:
        return Collection(
            tuple(sorted(self._inner, key=lambda p: p.key, reverse=descending))
        )

    def sort_keys_desc(self) -> Collection:
        return self.sort_keys(descending=True)

    def reverse(self) -> Collection:
        return Collection(self._inner[::-1])

    # sampling

    def shuffle(self, seed: int | None = None) -> Collection:
        values = self.to_list()
        Random(seed).shuffle(values)
        return Collection(_reindexed(values))

    def random(self, n: int | None = None, seed: int | None = None) -> Any:  # noqa: ANN401
        """Pick one value, or a `Collection` of **n** distinct positions.

        Raises:
            ValueError: If more values are requested than available.
        """
        rng = Random(seed)
        requested = 1 if n is None else n
        if requested > len(self._inner):
            msg = (
                f"You requested {requested} items, but there are only "
                f"{len(self._inner)} items available."
            )
            raise ValueError(msg)
        if n is None:
            return rng.choice(self._inner).value
        return Collection(_reindexed(rng.sample(self.to_list(), n)))

    # set algebra

    def diff(self, items: Iterable[Any]) -> Collection:
        others = _values_of(items)
        return Collection(tuple(p for p in self._inner if not _contains(others, p.value)))

    def diff_keys(self, items: Iterable[Any]) -> Collection:
        others = _keys_of(items)
        return Collection(tuple(p for p in self._inner if p.key not in others))

    def intersect(self, items: Iterable[Any]) -> Collection:
        others = _values_of(items)
        return Collection(tuple(p for p in self._inner if _contains(others, p.value)))

    def intersect_by_keys(self, items: Iterable[Any]) -> Collection:
        others = _keys_of(items)
        return Collection(tuple(p for p in self._inner if p.key in others))

    def except_(self, *keys: Any) -> Collection:  # noqa: ANN401
        """Drop the pairs whose key is one of **keys**."""
        return Collection(tuple(p for p in self._inner if p.key not in keys))

    def merge(self, items: Iterable[Any]) -> Collection:
        """Append **items**, overwriting pairs with the same non-integer key in place.

        Integer keys never collide: they are appended, then renumbered `0..n-1` across the result.

        Example:
        ```python
        >>> import lazychain as lc
        >>> lc.Collection.from_({"a": 1, "b": 2}).merge({"b": 3, "c": 4}).to_dict()
        {'a': 1, 'b': 3, 'c': 4}
        >>> lc.Collection.from_([1, 2]).merge([3]).as_pairs()
        ((0, 1), (1, 2), (2, 3))

        ```
        """
        merged: list[tuple[Any, Any, bool]] = []
        positions: dict[Any, int] = {}
        for pair in itertools.chain(self._inner, _pairs_of_other(items)):
            if _is_index(pair.key):
                merged.append((None, pair.value, True))
            elif pair.key in positions:
                merged[positions[pair.key]] = (pair.key, pair.value, False)
            else:
                positions[pair.key] = len(merged)
                merged.append((pair.key, pair.value, False))
        counter = itertools.count()
        return Collection(
            tuple(
                Pair(next(counter) if numeric else key, value)
                for key, value, numeric in merged
            )
        )

    def union(self, items: Iterable[Any]) -> Collection:
        """Append the pairs of **items** whose key is not present yet; existing pairs win.

        Example:
        ```python
        >>> import lazychain as lc
        >>> lc.Collection.from_({"a": 1}).union({"a": 9, "b": 2}).to_dict()
        {'a': 1, 'b': 2}

        ```
        """
        seen = {p.key for p in self._inner}
        added: list[Pair[Any, Any]] = []
        for pair in _pairs_of_other(items):
            if pair.key not in seen:
                seen.add(pair.key)
                added.append(pair)
        return Collection(self._inner + tuple(added))

    def cross_join(self, *items: Iterable[Any]) -> Collection:
        """Cartesian product of the values with the values of every **items**, as lists.

        Example:
        ```python
        >>> import lazychain as lc
        >>> lc.Collection.from_([1, 2]).cross_join(["a", "b"]).to_list()
        [[1, 'a'], [1, 'b'], [2, 'a'], [2, 'b']]

        ```
        """
        others = [_values_of(other) for other in items]
        rows = itertools.product(self.to_list(), *others)
        return Collection(_reindexed(list(row) for row in rows))

    def duplicates(self, key: KeyPath = None, *, strict: bool = False) -> Collection:
        """Pairs whose (retrieved) value already appeared earlier.

        Example:
        ```python
        >>> import lazychain as lc
        >>> lc.Collection.from_(["a", "b", "a", "c", "b"]).duplicates().to_dict()
        {2: 'a', 4: 'b'}

        ```
        """
        retrieve = value_retriever(key)
        seen: list[Any] = []
        found: list[Pair[Any, Any]] = []
        for pair in self._inner:
            value = retrieve(pair.value, pair.key)
            if _contains(seen, value, strict=strict):
                found.append(pair)
            else:
                seen.append(value)
        return Collection(tuple(found))

    # reshaping

    def group_by(self, key: KeyPath, *, preserve_keys: bool = False) -> Collection:
        """Group values by a retrieved key; "last write wins" never applies, groups accumulate.

        A retrieved list puts the value in every listed group.

        Example:
        ```python
        >>> import lazychain as lc
        >>> groups = lc.Collection.from_([1, 2, 3, 4]).group_by(lambda v: v % 2)
        >>> {k: g.to_list() for k, g in groups.items()}
        {1: [1, 3], 0: [2, 4]}

        ```
        """
        retrieve = value_retriever(key)
        groups: dict[Any, list[Pair[Any, Any]]] = {}
        for pair in self._inner:
            group_keys = retrieve(pair.value, pair.key)
            if not isinstance(group_keys, list):
                group_keys = [group_keys]
            for group_key in group_keys:  # pyright: ignore[reportUnknownVariableType]
                bucket = groups.setdefault(group_key, [])
                bucket.append(pair if preserve_keys else Pair(len(bucket), pair.value))
        return Collection(tuple(Pair(k, Collection(tuple(v))) for k, v in groups.items()))

    def partition(
        self, key: KeyPath, operator: object = MISSING, value: object = MISSING
    ) -> Collection:
        """Split into the pairs passing a test and the ones failing it, keys preserved.

        With only **key**, the retrieved value's truthiness decides; otherwise the arguments
        form a `where` triple.

        Example:
        ```python
        >>> import lazychain as lc
        >>> passed, failed = lc.Collection.from_([1, 2, 3, 4]).partition(lambda v: v > 2)
        >>> passed.to_dict(), failed.to_dict()
        ({2: 3, 3: 4}, {0: 1, 1: 2})

        ```
        """
        check = (
            value_retriever(key)
            if operator is MISSING
            else operator_for_where(key, operator, value)
        )
        passed: list[Pair[Any, Any]] = []
        failed: list[Pair[Any, Any]] = []
        for pair in self._inner:
            (passed if check(pair.value, pair.key) else failed).append(pair)
        return Collection(_reindexed((Collection(tuple(passed)), Collection(tuple(failed)))))

    def dot(self) -> Collection:
        """Flatten nested mappings and lists into dotted keys.

        Example:
        ```python
        >>> import lazychain as lc
        >>> lc.Collection.from_({"a": {"b": 1, "c": [2, 3]}}).dot().to_dict()
        {'a.b': 1, 'a.c.0': 2, 'a.c.1': 3}

        ```
        """
        return Collection(
            tuple(
                cz.itertoolz.concat(_dot(pair.value, f"{pair.key}.") for pair in self._inner)
            )
        )

    def undot(self) -> Collection:
        """Expand dotted keys back into nested mappings; the inverse of `dot`.

        Mappings whose keys are exactly `"0".."n-1"` become lists.

        Example:
        ```python
        >>> import lazychain as lc
        >>> lc.Collection.from_({"a.b": 1, "a.c.0": 2, "a.c.1": 3}).undot().to_dict()
        {'a': {'b': 1, 'c': [2, 3]}}

        ```
        """
        nested: dict[str, Any] = {}
        for pair in self._inner:
            *parents, last = str(pair.key).split(".")
            target = nested
            for segment in parents:
                child = target.get(segment)
                if not isinstance(child, dict):
                    child = target[segment] = {}
                target = child  # pyright: ignore[reportUnknownVariableType]
            target[last] = pair.value
        return Collection.from_(_listified(nested))

    def split(self, groups: int) -> Collection:
        """Split into **groups** groups, as evenly as possible, earlier groups being larger."""
        if groups <= 0:
            msg = f"number of groups must be positive, got {groups}"
            raise ValueError(msg)
        size, remainder = divmod(len(self._inner), groups)
        parts: list[Collection] = []
        start = 0
        for idx in range(groups):
            stop = start + size + (1 if idx < remainder else 0)
            if stop == start:
                break
            parts.append(Collection(self._inner[start:stop]))
            start = stop
        return Collection(_reindexed(parts))

    def slice(self, offset: int, length: int | None = None) -> Collection:
        """Slice by position, keys preserved; a negative **length** stops that far from the end."""
        sliced = self._inner[offset:]
        return Collection(sliced if length is None else sliced[:length])

    def pad(self, size: int, value: object) -> Collection:
        """Pad values up to `abs(size)`, on the right for a positive size, on the left otherwise."""
        values = self.to_list()
        missing = abs(size) - len(values)
        if missing <= 0:
            return self
        filler = [value] * missing
        return Collection(_reindexed(values + filler if size > 0 else filler + values))

    # cardinality

    def sole(self) -> Any:  # noqa: ANN401
        """The only value.

        Raises:
            ItemNotFoundError: If the collection is empty.
            MultipleItemsFoundError: If it holds more than one value.
        """
        match len(self._inner):
            case 0:
                raise ItemNotFoundError
            case 1:
                return self._inner[0].value
            case count:
                raise MultipleItemsFoundError(count)

    def first_or_fail(self) -> Any:  # noqa: ANN401
        if not self._inner:
            raise ItemNotFoundError
        return self._inner[0].value

    # aggregations

    def pluck(self, key: KeyPath) -> list[Any]:
        retrieve = value_retriever(key)
        return [retrieve(p.value, p.key) for p in self._inner]

    def sum(self, key: KeyPath = None) -> Any:  # noqa: ANN401
        return sum(self.pluck(key))

    def avg(self, key: KeyPath = None) -> float | None:
        values = [v for v in self.pluck(key) if v is not None]
        return statistics.fmean(values) if values else None

    def median(self, key: KeyPath = None) -> float | None:
        values = [v for v in self.pluck(key) if v is not None]
        return statistics.median(values) if values else None

    def mode(self, key: KeyPath = None) -> list[Any] | None:
        """Most frequent (retrieved) values, in order of first appearance; `None` when empty.

        Example:
        ```python
        >>> import lazychain as lc
        >>> lc.Collection.from_([1, 2, 2, 3, 3]).mode()
        [2, 3]

        ```
        """
        counts = cz.itertoolz.frequencies(self.pluck(key))
        if not counts:
            return None
        highest = max(counts.values())
        return [value for value, count in counts.items() if count == highest]

    def min(self, key: KeyPath = None) -> Any:  # noqa: ANN401
        values = [v for v in self.pluck(key) if v is not None]
        return min(values, default=None)

    def max(self, key: KeyPath = None) -> Any:  # noqa: ANN401
        values = [v for v in self.pluck(key) if v is not None]
        return max(values, default=None)

    def implode(self, glue: str = "", key: KeyPath = None) -> str:
        """Join the (retrieved) values as strings.

        Example:
        ```python
        >>> import lazychain as lc
        >>> lc.Collection.from_([1, 2, 3]).implode(", ")
        '1, 2, 3'

        ```
        """
        return glue.join(str(v) for v in self.pluck(key))
