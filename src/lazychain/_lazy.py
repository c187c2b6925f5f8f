from __future__ import annotations

import itertools
import logging
import time
from collections.abc import Callable, Iterable, Iterator, Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any, Concatenate, Final

import cytoolz as cz
import more_itertools as mit

from ._cache import MemoCache
from ._callables import adapt
from ._core import CommonBase, deprecated
from ._eager import Collection
from ._keys import data_get, split_path, use_as_callable, value_retriever
from ._predicates import (
    MISSING,
    equality,
    negate,
    operator_for_where,
    predicate_or_equality,
    strict_equals,
)
from ._sources import (
    ArraySource,
    CacheSource,
    GeneratorSource,
    ProducerSource,
    Source,
    make_source,
)
from ._types import Clock, Deadline, KeyPath, Pair, Producer
from ._windows import (
    Group,
    chunk,
    chunk_while,
    combine_pairs,
    sliding,
    take_last,
    zip_pairs,
)

if TYPE_CHECKING:
    from ._eager import SortKey

logger = logging.getLogger(__name__)

_PLACEHOLDER: Final = object()


def _truthy(value: object, _key: object = None) -> bool:
    return bool(value)


def _timestamp(deadline: Deadline) -> float:
    return deadline.timestamp() if isinstance(deadline, datetime) else float(deadline)


class LazySeq[T](CommonBase[Source]):
    """A replayable, lazily evaluated sequence of `(key, value)` pairs.

    A `LazySeq` wraps a *source*, never a live iterator:

    - A list, tuple, range, str or set is keyed by position.
    - A mapping keeps its keys.
    - A zero-argument callable (typically a generator function) is called again for every traversal.
    - Another `LazySeq` or a `Collection` shares its data.

    Every combinator returns a new `LazySeq` closing over its parent and nothing is read
    until a terminal operation (`collect`, `count`, `first`, iteration, ...) pulls from it.
    Each traversal starts from scratch, unless the sequence was wrapped with `remember()`.

    Callbacks receive `(value, key)`, but may declare fewer parameters.

    Iterating over a `LazySeq` yields its values; use `items()` for the pairs.

    Args:
        source (object): The data to wrap. Defaults to an empty sequence.

    Raises:
        InvalidSourceError: If **source** is an iterator or a generator object.

    Example:
    ```python
    >>> import lazychain as lc
    >>> def numbers():
    ...     n = 1
    ...     while True:
    ...         yield n
    ...         n += 1
    >>> lc.LazySeq(numbers).filter(lambda n: n % 2 == 0).take(3).to_list()
    [2, 4, 6]
    >>> lc.LazySeq({"a": 1, "b": 2}).map(lambda v, k: f"{k}={v}").to_list()
    ['a=1', 'b=2']

    ```
    """

    _inner: Source

    __slots__ = ("_inner",)

    def __init__(self, source: object = None) -> None:
        self._inner = make_source(source)

    @classmethod
    def _from_source(cls, source: Source) -> LazySeq[Any]:
        instance = cls.__new__(cls)
        instance._inner = source
        return instance

    def _new[**P](
        self,
        factory: Callable[Concatenate[Iterator[Pair[Any, Any]], P], Iterator[Pair[Any, Any]]],
        *args: P.args,
        **kwargs: P.kwargs,
    ) -> LazySeq[Any]:
        def _traverse() -> Iterator[Pair[Any, Any]]:
            return factory(self._inner.traverse(), *args, **kwargs)

        return LazySeq._from_source(GeneratorSource(_traverse))

    def _groups[**P](
        self,
        factory: Callable[Concatenate[Iterator[Pair[Any, Any]], P], Iterator[Group]],
        *args: P.args,
        **kwargs: P.kwargs,
    ) -> LazySeq[LazySeq[Any]]:
        def _wrap(pairs: Iterator[Pair[Any, Any]]) -> Iterator[Pair[Any, Any]]:
            groups = factory(pairs, *args, **kwargs)
            return (
                Pair(idx, LazySeq._from_source(ArraySource(group)))
                for idx, group in enumerate(groups)
            )

        return self._new(_wrap)

    def _passthru[**P](
        self,
        method: Callable[Concatenate[Collection, P], Collection],
        *args: P.args,
        **kwargs: P.kwargs,
    ) -> LazySeq[Any]:
        def _delegate(pairs: Iterator[Pair[Any, Any]]) -> Iterator[Pair[Any, Any]]:
            logger.debug("materializing for Collection.%s", method.__name__)
            return method(Collection(tuple(pairs)), *args, **kwargs).items()

        return self._new(_delegate)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._inner.__class__.__name__})"

    def __iter__(self) -> Iterator[T]:
        return (pair.value for pair in self._inner.traverse())

    @property
    def source(self) -> Source:
        return self._inner

    def items(self) -> Iterator[Pair[Any, T]]:
        """Start a fresh traversal of the `(key, value)` pairs."""
        return self._inner.traverse()

    # constructors

    @staticmethod
    def from_pairs(producer: Producer) -> LazySeq[Any]:
        """Build from a producer yielding `(key, value)` tuples.

        Example:
        ```python
        >>> import lazychain as lc
        >>> def rows():
        ...     yield "a", 1
        ...     yield "a", 2
        >>> list(lc.LazySeq.from_pairs(rows).items())
        [('a', 1), ('a', 2)]

        ```
        """
        return LazySeq._from_source(ProducerSource(producer, keyed=True))

    @staticmethod
    def empty() -> LazySeq[Any]:
        return LazySeq._from_source(ArraySource(()))

    @staticmethod
    def range(start: int, stop: int) -> LazySeq[int]:
        """Inclusive range, counting down when **start** is greater than **stop**.

        Example:
        ```python
        >>> import lazychain as lc
        >>> lc.LazySeq.range(3, 1).to_list()
        [3, 2, 1]

        ```
        """
        step = 1 if start <= stop else -1
        return LazySeq(lambda: range(start, stop + step, step))

    @staticmethod
    def count_from(start: int = 0, step: int = 1) -> LazySeq[int]:
        """Create an infinite sequence of evenly spaced values.

        **Warning** ⚠️
            This creates an infinite sequence.
            Be sure to use `take()` or `take_while()` before any terminal operation that drains it.
        """
        return LazySeq(lambda: itertools.count(start, step))

    @staticmethod
    def times[U](n: int, func: Callable[[int], U] | None = None) -> LazySeq[U]:
        """Call **func** with `1..n`, or just count to **n**.

        Example:
        ```python
        >>> import lazychain as lc
        >>> lc.LazySeq.times(3, lambda i: i * 10).to_list()
        [10, 20, 30]

        ```
        """
        if n < 1:
            return LazySeq.empty()
        numbers = LazySeq.range(1, n)
        return numbers if func is None else numbers.map(func)

    # transformations

    def filter(self, predicate: Callable[..., Any] | None = None) -> LazySeq[T]:
        """Keep the pairs for which **predicate(value, key)** is truthy, values' truthiness by default.

        Example:
        ```python
        >>> import lazychain as lc
        >>> lc.LazySeq([0, 1, None, 2]).filter().to_list()
        [1, 2]

        ```
        """
        check = _truthy if predicate is None else adapt(predicate)

        def _filter(pairs: Iterator[Pair[Any, Any]]) -> Iterator[Pair[Any, Any]]:
            return (p for p in pairs if check(p.value, p.key))

        return self._new(_filter)

    def reject(self, callback: object = True) -> LazySeq[T]:
        """Drop the pairs matching a predicate, or strictly equal to a value."""
        check = adapt(callback) if use_as_callable(callback) else equality(callback)  # pyright: ignore[reportArgumentType]
        return self.filter(negate(check))

    def map[R](self, func: Callable[..., R]) -> LazySeq[R]:
        """Transform each value with **func(value, key)**, keeping keys."""
        call = adapt(func)

        def _map(pairs: Iterator[Pair[Any, Any]]) -> Iterator[Pair[Any, Any]]:
            return (Pair(p.key, call(p.value, p.key)) for p in pairs)

        return self._new(_map)

    def map_with_keys(
        self, func: Callable[..., Mapping[Any, Any] | Iterable[tuple[Any, Any]]]
    ) -> LazySeq[Any]:
        """Replace each pair with the pairs returned by **func(value, key)**, zero or many.

        **func** returns a mapping or an iterable of `(key, value)` tuples.

        Example:
        ```python
        >>> import lazychain as lc
        >>> users = [{"id": 1, "name": "Ada"}, {"id": 2, "name": "Alan"}]
        >>> lc.LazySeq(users).map_with_keys(lambda u: {u["id"]: u["name"]}).to_dict()
        {1: 'Ada', 2: 'Alan'}

        ```
        """
        call = adapt(func)

        def _expand(pairs: Iterator[Pair[Any, Any]]) -> Iterator[Pair[Any, Any]]:
            for p in pairs:
                result = call(p.value, p.key)
                entries = result.items() if isinstance(result, Mapping) else result
                yield from (Pair(k, v) for k, v in entries)

        return self._new(_expand)

    def map_spread[R](self, func: Callable[..., R]) -> LazySeq[R]:
        """Unpack each value (itself an iterable) as positional arguments of **func**."""

        def _spread(pairs: Iterator[Pair[Any, Any]]) -> Iterator[Pair[Any, Any]]:
            return (Pair(p.key, func(*p.value)) for p in pairs)

        return self._new(_spread)

    def flat_map[R](self, func: Callable[..., Iterable[R]]) -> LazySeq[R]:
        """Map each value to an iterable, then flatten one level and reindex."""
        return self.map(func).collapse()

    def tap_each(self, func: Callable[..., object]) -> LazySeq[T]:
        """Call **func(value, key)** on each pair as it flows through, without altering it."""
        call = adapt(func)

        def _tap(pairs: Iterator[Pair[Any, Any]]) -> Iterator[Pair[Any, Any]]:
            for p in pairs:
                call(p.value, p.key)
                yield p

        return self._new(_tap)

    def values(self) -> LazySeq[T]:
        """Reindex keys to `0..n-1`."""

        def _values(pairs: Iterator[Pair[Any, Any]]) -> Iterator[Pair[Any, Any]]:
            return (Pair(idx, p.value) for idx, p in enumerate(pairs))

        return self._new(_values)

    def keys(self) -> LazySeq[Any]:
        def _keys(pairs: Iterator[Pair[Any, Any]]) -> Iterator[Pair[Any, Any]]:
            return (Pair(idx, p.key) for idx, p in enumerate(pairs))

        return self._new(_keys)

    def flip(self) -> LazySeq[Any]:
        def _flip(pairs: Iterator[Pair[Any, Any]]) -> Iterator[Pair[Any, Any]]:
            return (Pair(p.value, p.key) for p in pairs)

        return self._new(_flip)

    def key_by(self, key: KeyPath) -> LazySeq[T]:
        """Re-key each value by a retrieved key; `to_dict()` then keeps the last value per key.

        Example:
        ```python
        >>> import lazychain as lc
        >>> rows = [{"id": "x", "v": 1}, {"id": "y", "v": 2}, {"id": "x", "v": 3}]
        >>> lc.LazySeq(rows).key_by("id").map(lambda r: r["v"]).to_dict()
        {'x': 3, 'y': 2}

        ```
        """
        retrieve = value_retriever(key)

        def _key_by(pairs: Iterator[Pair[Any, Any]]) -> Iterator[Pair[Any, Any]]:
            return (Pair(retrieve(p.value, p.key), p.value) for p in pairs)

        return self._new(_key_by)

    def pluck(self, value: KeyPath, key: KeyPath = None) -> LazySeq[Any]:
        """Retrieve a path from every value, optionally keyed by another path.

        Example:
        ```python
        >>> import lazychain as lc
        >>> rows = [{"id": 7, "user": {"name": "Ada"}}]
        >>> lc.LazySeq(rows).pluck("user.name", "id").to_dict()
        {7: 'Ada'}

        ```
        """
        value_path = value if use_as_callable(value) else split_path(value)  # pyright: ignore[reportArgumentType]
        key_path = key if key is None or use_as_callable(key) else split_path(key)  # pyright: ignore[reportArgumentType]

        def _pluck(pairs: Iterator[Pair[Any, Any]]) -> Iterator[Pair[Any, Any]]:
            for idx, p in enumerate(pairs):
                item_value = data_get(p.value, value_path)
                if key_path is None:
                    yield Pair(idx, item_value)
                else:
                    yield Pair(data_get(p.value, key_path), item_value)

        return self._new(_pluck)

    def collapse(self) -> LazySeq[Any]:
        """Flatten one level of nested lists, tuples, mappings or sequences, dropping scalars."""

        def _collapse(pairs: Iterator[Pair[Any, Any]]) -> Iterator[Any]:
            for p in pairs:
                match p.value:
                    case LazySeq() | Collection() | list() | tuple():
                        yield from p.value
                    case Mapping():
                        yield from p.value.values()  # pyright: ignore[reportUnknownMemberType]
                    case _:
                        continue

        return LazySeq._from_source(
            GeneratorSource(lambda: (Pair(i, v) for i, v in enumerate(_collapse(self.items()))))
        )

    def flatten(self, depth: float = float("inf")) -> LazySeq[Any]:
        """Flatten nested lists, tuples, mappings and sequences up to **depth** levels.

        Example:
        ```python
        >>> import lazychain as lc
        >>> lc.LazySeq([1, [2, [3, [4]]]]).flatten().to_list()
        [1, 2, 3, 4]
        >>> lc.LazySeq([1, [2, [3, [4]]]]).flatten(1).to_list()
        [1, 2, [3, [4]]]

        ```
        """

        def _flatten(values: Iterable[Any], level: float) -> Iterator[Any]:
            for value in values:
                match value:
                    case LazySeq() | Collection() | list() | tuple():
                        nested: Iterable[Any] = value
                    case Mapping():
                        nested = value.values()  # pyright: ignore[reportUnknownMemberType, reportUnknownVariableType]
                    case _:
                        yield value
                        continue
                if level <= 1:
                    yield from nested
                else:
                    yield from _flatten(nested, level - 1)

        return LazySeq._from_source(
            GeneratorSource(
                lambda: (Pair(i, v) for i, v in enumerate(_flatten(self, depth)))
            )
        )

    def unique(self, key: KeyPath = None, *, strict: bool = False) -> LazySeq[T]:
        """Keep the first pair for each distinct (retrieved) value.

        Example:
        ```python
        >>> import lazychain as lc
        >>> lc.LazySeq(["cat", "mouse", "dog", "hen"]).unique(len).to_list()
        ['cat', 'mouse']
        >>> lc.LazySeq([1, "1", 1.0]).unique(strict=True).to_list()
        [1, '1', 1.0]

        ```
        """
        retrieve = value_retriever(key)

        def _unique(pairs: Iterator[Pair[Any, Any]]) -> Iterator[Pair[Any, Any]]:
            exists: list[Any] = []
            for p in pairs:
                ident = retrieve(p.value, p.key)
                seen = (
                    any(strict_equals(ident, e) for e in exists) if strict else ident in exists
                )
                if not seen:
                    exists.append(ident)
                    yield p

        return self._new(_unique)

    def count_by(self, key: KeyPath = None) -> LazySeq[int]:
        """Count occurrences of each (retrieved) value. Consumes the whole parent once iterated."""
        retrieve = value_retriever(key)

        def _count_by(pairs: Iterator[Pair[Any, Any]]) -> Iterator[Pair[Any, Any]]:
            counts = cz.itertoolz.frequencies(retrieve(p.value, p.key) for p in pairs)
            return (Pair(k, v) for k, v in counts.items())

        return self._new(_count_by)

    def replace(self, items: Mapping[Any, Any] | Iterable[Any]) -> LazySeq[T]:
        """Overwrite values at matching keys, then append the replacement keys never seen."""

        def _replace(pairs: Iterator[Pair[Any, Any]]) -> Iterator[Pair[Any, Any]]:
            pending = dict(Collection.from_(items).as_pairs())
            for p in pairs:
                if p.key in pending:
                    yield Pair(p.key, pending.pop(p.key))
                else:
                    yield p
            yield from (Pair(k, v) for k, v in pending.items())

        return self._new(_replace)

    def pad(self, size: int, value: object) -> LazySeq[Any]:
        """Append **value** until **size** elements; a negative size pads on the left (eagerly)."""
        if size < 0:
            return self._passthru(Collection.pad, size, value)

        def _pad(pairs: Iterator[Pair[Any, Any]]) -> Iterator[Pair[Any, Any]]:
            yielded = 0
            for p in pairs:
                yield p
                yielded += 1
            yield from (Pair(idx, value) for idx in range(yielded, size))

        return self._new(_pad)

    # slicing

    def take(self, n: int) -> LazySeq[T]:
        """Take the first **n** pairs or, for a negative **n**, the last `abs(n)` pairs.

        For `n >= 0` the upstream is never advanced past position `n - 1`.
        For `n < 0` the whole upstream is consumed before anything is yielded.

        Example:
        ```python
        >>> import lazychain as lc
        >>> lc.LazySeq([1, 2, 3, 4, 5, 6, 7]).take(-3).to_list()
        [5, 6, 7]
        >>> lc.LazySeq([1, 2]).take(-3).to_list()
        [1, 2]

        ```
        """
        if n < 0:
            return self._new(take_last, abs(n))
        return self._new(lambda pairs: cz.itertoolz.take(n, pairs))

    @deprecated("LazySeq.tail(n) is deprecated, use LazySeq.take(-n) instead.", since="0.2.0")
    def tail(self, n: int) -> LazySeq[T]:
        return self.take(-n)

    def skip(self, n: int) -> LazySeq[T]:
        """Discard the first **n** pairs (none when `n <= 0`)."""
        return self._new(lambda pairs: cz.itertoolz.drop(max(n, 0), pairs))

    def skip_while(self, predicate: object) -> LazySeq[T]:
        """Discard pairs while the predicate holds (or while equal to a value), then yield the rest."""
        check = predicate_or_equality(predicate)

        def _skip_while(pairs: Iterator[Pair[Any, Any]]) -> Iterator[Pair[Any, Any]]:
            return itertools.dropwhile(lambda p: check(p.value, p.key), pairs)

        return self._new(_skip_while)

    def skip_until(self, predicate: object) -> LazySeq[T]:
        """Discard pairs until the predicate holds (or a value is found), then yield the rest.

        Example:
        ```python
        >>> import lazychain as lc
        >>> lc.LazySeq([1, 2, 3, 4]).skip_until(3).to_list()
        [3, 4]
        >>> lc.LazySeq([1, 2, 3, 4]).skip_until(lambda v: v > 1).to_list()
        [2, 3, 4]

        ```
        """
        return self.skip_while(negate(predicate_or_equality(predicate)))

    def take_until(self, predicate: object) -> LazySeq[T]:
        """Yield pairs until the predicate holds (or a value is found), that pair excluded."""
        check = predicate_or_equality(predicate)

        def _take_until(pairs: Iterator[Pair[Any, Any]]) -> Iterator[Pair[Any, Any]]:
            return itertools.takewhile(lambda p: not check(p.value, p.key), pairs)

        return self._new(_take_until)

    def take_while(self, predicate: object) -> LazySeq[T]:
        """Yield pairs while the predicate holds (or while equal to a value).

        Example:
        ```python
        >>> import lazychain as lc
        >>> lc.LazySeq([1, 2, 3, 1]).take_while(lambda v: v < 3).to_list()
        [1, 2]

        ```
        """
        return self.take_until(negate(predicate_or_equality(predicate)))

    def take_until_timeout(
        self, deadline: Deadline, *, clock: Clock = time.time
    ) -> LazySeq[T]:
        """Yield pairs until wall-clock time reaches **deadline**.

        The clock is checked once before starting and once after each yielded pair.

        Args:
            deadline (Deadline): A `datetime` or a POSIX timestamp.
            clock (Clock): Returns the current POSIX timestamp. Defaults to `time.time`.
        """
        limit = _timestamp(deadline)

        def _until_timeout(pairs: Iterator[Pair[Any, Any]]) -> Iterator[Pair[Any, Any]]:
            if clock() >= limit:
                return
            for p in pairs:
                yield p
                if clock() >= limit:
                    break

        return self._new(_until_timeout)

    def slice(self, offset: int, length: int | None = None) -> LazySeq[T]:
        """Positional slice; negative arguments need the whole sequence and go through `Collection`."""
        if offset < 0 or (length is not None and length < 0):
            return self._passthru(Collection.slice, offset, length)
        skipped = self.skip(offset)
        return skipped if length is None else skipped.take(length)

    def for_page(self, page: int, per_page: int) -> LazySeq[T]:
        """The **page**-th group of **per_page** pairs, pages counting from 1.

        Example:
        ```python
        >>> import lazychain as lc
        >>> lc.LazySeq.count_from(1).for_page(3, 2).to_list()
        [5, 6]

        ```
        """
        return self.slice(max(0, (page - 1) * per_page), per_page)

    def nth(self, step: int, offset: int = 0) -> LazySeq[T]:
        """Every **step**-th pair, starting at position **offset**.

        A negative **offset** starts from the last `abs(offset)` pairs, which needs the whole
        sequence.

        Example:
        ```python
        >>> import lazychain as lc
        >>> lc.LazySeq("abcdefg").nth(3, 1).to_list()
        ['b', 'e']
        >>> lc.LazySeq([1, 2, 3, 4, 5]).nth(2, -3).to_list()
        [3, 5]

        ```
        """
        if step <= 0:
            msg = f"step must be positive, got {step}"
            raise ValueError(msg)
        if offset < 0:
            return self.slice(offset).nth(step)
        return self._new(lambda pairs: itertools.islice(pairs, offset, None, step))

    def only(self, *keys: Any) -> LazySeq[T]:  # noqa: ANN401
        """Keep the first pair for each of the given keys, stopping once all were found.

        Without any key, every pair is kept.
        """
        if not keys:
            return self

        def _only(pairs: Iterator[Pair[Any, Any]]) -> Iterator[Pair[Any, Any]]:
            wanted = set(keys)
            for p in pairs:
                if p.key in wanted:
                    wanted.discard(p.key)
                    yield p
                    if not wanted:
                        return

        return self._new(_only)

    # windowing

    def chunk(self, size: int) -> LazySeq[LazySeq[T]]:
        """Consecutive groups of **size** pairs, the last one possibly shorter; keys preserved.

        Example:
        ```python
        >>> import lazychain as lc
        >>> lc.LazySeq([1, 2, 3, 4, 5]).chunk(2).map(list).to_list()
        [[1, 2], [3, 4], [5]]
        >>> lc.LazySeq([1, 2, 3]).chunk(0).to_list()
        []

        ```
        """
        if size <= 0:
            return LazySeq.empty()
        return self._groups(chunk, size)

    def chunk_while(self, predicate: Callable[..., Any]) -> LazySeq[LazySeq[T]]:
        """Start a new group whenever **predicate(value, key, group)** is falsy.

        **group** is the `Collection` accumulated so far.

        Example:
        ```python
        >>> import lazychain as lc
        >>> (
        ...     lc.LazySeq("AABBCCC")
        ...     .chunk_while(lambda v, k, group: v == group.lazy().last())
        ...     .map(lambda g: "".join(g))
        ...     .to_list()
        ... )
        ['AA', 'BB', 'CCC']

        ```
        """
        call = adapt(predicate, 3)

        def _check(value: object, key: object, group: Group) -> Any:  # noqa: ANN401
            return call(value, key, Collection(group))

        return self._groups(chunk_while, _check)

    def sliding(self, size: int = 2, step: int = 1) -> LazySeq[LazySeq[T]]:
        """Overlapping windows of **size** pairs, each starting **step** pairs after the previous.

        Only full windows are yielded. When **step** exceeds **size**, the pairs between
        windows belong to no window.

        Example:
        ```python
        >>> import lazychain as lc
        >>> lc.LazySeq([1, 2, 3, 4, 5]).sliding(3).map(list).to_list()
        [[1, 2, 3], [2, 3, 4], [3, 4, 5]]
        >>> lc.LazySeq([1, 2, 3, 4, 5, 6, 7]).sliding(2, 3).map(list).to_list()
        [[1, 2], [4, 5]]

        ```
        """
        if size <= 0 or step <= 0:
            msg = f"size and step must be positive, got size={size}, step={step}"
            raise ValueError(msg)
        return self._groups(sliding, size, step)

    def split_in(self, groups: int) -> LazySeq[LazySeq[T]]:
        """Chunk into **groups** groups of equal size (the last one smaller). Counts the source first."""
        if groups <= 0:
            msg = f"number of groups must be positive, got {groups}"
            raise ValueError(msg)

        def _split_in(pairs: Iterator[Pair[Any, Any]]) -> Iterator[Group]:
            items = tuple(pairs)
            return chunk(iter(items), -(-len(items) // groups))

        return self._groups(_split_in)

    # memoization

    def remember(self) -> LazySeq[T]:
        """Cache pairs as they are produced, so any number of traversals drive the upstream once.

        Example:
        ```python
        >>> import lazychain as lc
        >>> calls = []
        >>> def source():
        ...     for n in range(3):
        ...         calls.append(n)
        ...         yield n
        >>> cached = lc.LazySeq(source).remember()
        >>> cached.take(2).to_list(), calls
        ([0, 1], [0, 1])
        >>> cached.to_list(), cached.to_list(), calls
        ([0, 1, 2], [0, 1, 2], [0, 1, 2])

        ```
        """
        return LazySeq._from_source(CacheSource(MemoCache(self._inner)))

    def eager(self) -> LazySeq[T]:
        """Drain now into a `LazySeq` backed by an in-memory snapshot."""
        return LazySeq._from_source(ArraySource(tuple(self.items())))

    # combining

    def concat(self, other: object) -> LazySeq[Any]:
        """Append **other** and reindex keys to `0..n-1`.

        Example:
        ```python
        >>> import lazychain as lc
        >>> list(lc.LazySeq({"a": 1}).concat([2]).items())
        [(0, 1), (1, 2)]

        ```
        """
        tail = make_source(other)

        def _concat(pairs: Iterator[Pair[Any, Any]]) -> Iterator[Pair[Any, Any]]:
            idx = -1
            for idx, p in enumerate(pairs):
                yield Pair(idx, p.value)
            # the tail is only started once the head is exhausted
            for offset, p in enumerate(tail.traverse(), idx + 1):
                yield Pair(offset, p.value)

        return self._new(_concat)

    def zip(self, *others: object) -> LazySeq[LazySeq[Any]]:
        """Advance this sequence and **others** in lock-step, stopping at the shortest.

        Example:
        ```python
        >>> import lazychain as lc
        >>> lc.LazySeq([1, 2, 3]).zip(["a", "b"]).map(list).to_list()
        [[1, 'a'], [2, 'b']]

        ```
        """
        sources = [make_source(other) for other in others]

        def _zip(pairs: Iterator[Pair[Any, Any]]) -> Iterator[Group]:
            return zip_pairs(pairs, *(s.traverse() for s in sources))

        return self._groups(_zip)

    def combine(self, values: object) -> LazySeq[Any]:
        """Use this sequence's values as keys for the values of another.

        Emits an `UnequalLengthWarning` and stops at the shorter side on a length mismatch.

        Example:
        ```python
        >>> import lazychain as lc
        >>> lc.LazySeq(["name", "age"]).combine(["Ada", 36]).to_dict()
        {'name': 'Ada', 'age': 36}

        ```
        """
        other = make_source(values)
        return self._new(lambda pairs: combine_pairs(pairs, other.traverse()))

    def where(self, key: KeyPath, operator: object = MISSING, value: object = MISSING) -> LazySeq[T]:
        """Filter with a `(key, operator, value)` triple; see `operator_for_where`.

        Example:
        ```python
        >>> import lazychain as lc
        >>> rows = [{"n": 1}, {"n": 5}, {"n": 9}]
        >>> lc.LazySeq(rows).where("n", ">", 3).pluck("n").to_list()
        [5, 9]
        >>> lc.LazySeq(rows).where("n", 5).pluck("n").to_list()
        [5]

        ```
        """
        return self.filter(operator_for_where(key, operator, value))

    def where_strict(self, key: KeyPath, value: object) -> LazySeq[T]:
        return self.where(key, "===", value)

    def where_null(self, key: KeyPath = None) -> LazySeq[T]:
        return self.where_strict(key, None)

    def where_not_null(self, key: KeyPath = None) -> LazySeq[T]:
        return self.where(key, "!==", None)

    def where_in(self, key: KeyPath, values: Iterable[Any], *, strict: bool = False) -> LazySeq[T]:
        candidates = list(values)

        def _in(item: object) -> bool:
            retrieved = data_get(item, key)
            if strict:
                return any(strict_equals(retrieved, c) for c in candidates)
            return retrieved in candidates

        return self.filter(_in)

    def where_not_in(
        self, key: KeyPath, values: Iterable[Any], *, strict: bool = False
    ) -> LazySeq[T]:
        candidates = list(values)

        def _not_in(item: object) -> bool:
            retrieved = data_get(item, key)
            if strict:
                return not any(strict_equals(retrieved, c) for c in candidates)
            return retrieved not in candidates

        return self.filter(_not_in)

    def where_between(self, key: KeyPath, bounds: Iterable[Any]) -> LazySeq[T]:
        """Keep items whose retrieved value lies within the first and last bounds, inclusive."""
        low, *_, high = bounds
        return self.where(key, ">=", low).where(key, "<=", high)

    def where_not_between(self, key: KeyPath, bounds: Iterable[Any]) -> LazySeq[T]:
        low, *_, high = bounds

        def _outside(item: object) -> bool:
            retrieved = data_get(item, key)
            return retrieved < low or retrieved > high

        return self.filter(_outside)

    def where_instance_of(self, *types: type) -> LazySeq[T]:
        return self.filter(lambda item: isinstance(item, types))

    # delegated to Collection

    def sort(self, comparator: Callable[[Any, Any], int] | None = None) -> LazySeq[T]:
        return self._passthru(Collection.sort, comparator)

    def sort_desc(self) -> LazySeq[T]:
        return self._passthru(Collection.sort_desc)

    def sort_by(self, keys: SortKey | list[SortKey], *, descending: bool = False) -> LazySeq[T]:
        """Stable, possibly multi-key sort; see `Collection.sort_by`.

        Example:
        ```python
        >>> import lazychain as lc
        >>> lc.LazySeq([{"n": 2}, {"n": 1}]).sort_by("n").pluck("n").to_list()
        [1, 2]

        ```
        """
        return self._passthru(Collection.sort_by, keys, descending=descending)

    def sort_by_desc(self, keys: SortKey | list[SortKey]) -> LazySeq[T]:
        return self._passthru(Collection.sort_by_desc, keys)

    def sort_keys(self, *, descending: bool = False) -> LazySeq[T]:
        return self._passthru(Collection.sort_keys, descending=descending)

    def sort_keys_desc(self) -> LazySeq[T]:
        return self._passthru(Collection.sort_keys_desc)

    def reverse(self) -> LazySeq[T]:
        return self._passthru(Collection.reverse)

    def shuffle(self, seed: int | None = None) -> LazySeq[T]:
        return self._passthru(Collection.shuffle, seed)

    def diff(self, items: Iterable[Any]) -> LazySeq[T]:
        return self._passthru(Collection.diff, items)

    def diff_keys(self, items: Iterable[Any]) -> LazySeq[T]:
        return self._passthru(Collection.diff_keys, items)

    def intersect(self, items: Iterable[Any]) -> LazySeq[T]:
        return self._passthru(Collection.intersect, items)

    def intersect_by_keys(self, items: Iterable[Any]) -> LazySeq[T]:
        return self._passthru(Collection.intersect_by_keys, items)

    def duplicates(self, key: KeyPath = None, *, strict: bool = False) -> LazySeq[T]:
        return self._passthru(Collection.duplicates, key, strict=strict)

    def group_by(self, key: KeyPath, *, preserve_keys: bool = False) -> LazySeq[Collection]:
        return self._passthru(Collection.group_by, key, preserve_keys=preserve_keys)

    def dot(self) -> LazySeq[Any]:
        return self._passthru(Collection.dot)

    def except_(self, *keys: Any) -> LazySeq[T]:  # noqa: ANN401
        return self._passthru(Collection.except_, *keys)

    def merge(self, items: Iterable[Any]) -> LazySeq[T]:
        return self._passthru(Collection.merge, items)

    def union(self, items: Iterable[Any]) -> LazySeq[T]:
        return self._passthru(Collection.union, items)

    def cross_join(self, *items: Iterable[Any]) -> LazySeq[list[Any]]:
        return self._passthru(Collection.cross_join, *items)

    def partition(
        self, key: KeyPath, operator: object = MISSING, value: object = MISSING
    ) -> LazySeq[Collection]:
        """The pairs passing a test, then the ones failing it, as two `Collection` values.

        Example:
        ```python
        >>> import lazychain as lc
        >>> rows = [{"n": 1}, {"n": 5}, {"n": 9}]
        >>> big, small = lc.LazySeq(rows).partition("n", ">", 3)
        >>> big.pluck("n"), small.pluck("n")
        ([5, 9], [1])

        ```
        """
        return self._passthru(Collection.partition, key, operator, value)

    def undot(self) -> LazySeq[Any]:
        return self._passthru(Collection.undot)

    def split(self, groups: int) -> LazySeq[Collection]:
        return self._passthru(Collection.split, groups)

    # terminal operations

    def collect(self) -> Collection:
        """Drain into an eager `Collection`."""
        return Collection(tuple(self._inner.traverse()))

    def to_list(self) -> list[T]:
        return list(self)

    def to_dict(self) -> dict[Any, T]:
        """Drain into a dict; on duplicate keys the last one wins."""
        return dict(self._inner.traverse())

    def count(self) -> int:
        """Number of pairs; free when the source is already in memory.

        Example:
        ```python
        >>> import lazychain as lc
        >>> lc.LazySeq([1, 2, 3]).count(), lc.LazySeq(lambda: iter("ab")).count()
        (3, 2)

        ```
        """
        if isinstance(self._inner, ArraySource):
            return len(self._inner)
        return mit.ilen(self._inner.traverse())

    def first(self, predicate: Callable[..., Any] | None = None, default: object = None) -> Any:  # noqa: ANN401
        """First value (matching **predicate**), or **default**. Stops at the first match.

        Example:
        ```python
        >>> import lazychain as lc
        >>> lc.LazySeq.count_from(1).first(lambda n: n % 5 == 0)
        5
        >>> lc.LazySeq([]).first(default="none")
        'none'

        ```
        """
        if predicate is None:
            pair = next(self._inner.traverse(), None)
            return default if pair is None else pair.value
        check = adapt(predicate)
        for p in self._inner.traverse():
            if check(p.value, p.key):
                return p.value
        return default

    def last(self, predicate: Callable[..., Any] | None = None, default: object = None) -> Any:  # noqa: ANN401
        """Last value (matching **predicate**), or **default**. Consumes the whole sequence."""
        check = None if predicate is None else adapt(predicate)
        found: object = _PLACEHOLDER
        for p in self._inner.traverse():
            if check is None or check(p.value, p.key):
                found = p.value
        return default if found is _PLACEHOLDER else found

    def first_where(
        self, key: KeyPath, operator: object = MISSING, value: object = MISSING
    ) -> Any:  # noqa: ANN401
        return self.first(operator_for_where(key, operator, value))

    def contains(self, key: object, operator: object = MISSING, value: object = MISSING) -> bool:
        """Whether any element matches a predicate, a strict value, or a `(key, operator, value)` triple.

        Example:
        ```python
        >>> import lazychain as lc
        >>> lc.LazySeq.count_from(1).contains(lambda n: n > 10)
        True
        >>> lc.LazySeq([1, 2]).contains(2), lc.LazySeq([1, 2]).contains(2.0)
        (True, False)
        >>> lc.LazySeq([{"n": 1}]).contains("n", ">", 0)
        True

        ```
        """
        if operator is MISSING:
            if use_as_callable(key):
                return self.first(key, _PLACEHOLDER) is not _PLACEHOLDER  # pyright: ignore[reportArgumentType]
            return any(strict_equals(v, key) for v in self)
        return self.contains(operator_for_where(key, operator, value))  # pyright: ignore[reportArgumentType]

    def contains_strict(self, key: object, value: object = MISSING) -> bool:
        if value is not MISSING:
            return self.contains(lambda item: strict_equals(data_get(item, key), value))  # pyright: ignore[reportArgumentType]
        return self.contains(key)

    def doesnt_contain(
        self, key: object, operator: object = MISSING, value: object = MISSING
    ) -> bool:
        return not self.contains(key, operator, value)

    def search(self, value: object, *, strict: bool = False) -> Any:  # noqa: ANN401
        """Key of the first value matching a predicate or equal to **value**, `None` if absent.

        Example:
        ```python
        >>> import lazychain as lc
        >>> lc.LazySeq({"a": 1, "b": 2}).search(2)
        'b'
        >>> lc.LazySeq([1, 2]).search(lambda v: v > 5) is None
        True

        ```
        """
        if use_as_callable(value):
            check = adapt(value)  # pyright: ignore[reportArgumentType]
        elif strict:
            check = equality(value)
        else:

            def check(item: object, _key: object = None) -> bool:
                return item == value

        for p in self._inner.traverse():
            if check(p.value, p.key):
                return p.key
        return None

    def get(self, key: object, default: object = None) -> Any:  # noqa: ANN401
        """Value of the first pair with the given key."""
        for p in self._inner.traverse():
            if p.key == key:
                return p.value
        return default

    def has(self, *keys: Any) -> bool:  # noqa: ANN401
        """Whether every key is present; stops once all were seen. `False` without any key."""
        if not keys:
            return False
        wanted = set(keys)
        for p in self._inner.traverse():
            wanted.discard(p.key)
            if not wanted:
                return True
        return not wanted

    def has_any(self, *keys: Any) -> bool:  # noqa: ANN401
        wanted = set(keys)
        return any(p.key in wanted for p in self._inner.traverse())

    def is_empty(self) -> bool:
        return next(self._inner.traverse(), None) is None

    def is_not_empty(self) -> bool:
        return not self.is_empty()

    def contains_one_item(self) -> bool:
        return self.take(2).count() == 1

    def every(self, key: object, operator: object = MISSING, value: object = MISSING) -> bool:
        """Whether all elements pass a predicate, a truthy path, or a `(key, operator, value)` triple."""
        check = (
            value_retriever(key)  # pyright: ignore[reportArgumentType]
            if operator is MISSING
            else operator_for_where(key, operator, value)  # pyright: ignore[reportArgumentType]
        )
        return all(check(p.value, p.key) for p in self._inner.traverse())

    def _narrowed(self, key: object, operator: object, value: object) -> LazySeq[T]:
        if operator is not MISSING:
            return self.filter(operator_for_where(key, operator, value))  # pyright: ignore[reportArgumentType]
        if key is None:
            return self
        return self.filter(key)  # pyright: ignore[reportArgumentType]

    def sole(self, key: object = None, operator: object = MISSING, value: object = MISSING) -> Any:  # noqa: ANN401
        """The only element (matching the filter). Never reads past the second match.

        Raises:
            ItemNotFoundError: If nothing matches.
            MultipleItemsFoundError: If more than one element matches.

        Example:
        ```python
        >>> import lazychain as lc
        >>> lc.LazySeq([1, 2, 3]).sole(lambda v: v == 2)
        2
        >>> lc.LazySeq.count_from(1).sole(lambda v: v > 1)
        Traceback (most recent call last):
            ...
        lazychain._errors.MultipleItemsFoundError: 2 items were found.

        ```
        """
        return self._narrowed(key, operator, value).take(2).collect().sole()

    def first_or_fail(
        self, key: object = None, operator: object = MISSING, value: object = MISSING
    ) -> Any:  # noqa: ANN401
        """The first element (matching the filter).

        Raises:
            ItemNotFoundError: If nothing matches.
        """
        return self._narrowed(key, operator, value).take(1).collect().first_or_fail()

    def reduce[U](self, func: Callable[[U, T, Any], U], initial: U) -> U:
        """Fold the pairs with **func(carry, value, key)**."""
        call = adapt(func, 3)
        carry = initial
        for p in self._inner.traverse():
            carry = call(carry, p.value, p.key)
        return carry

    def sum(self, key: KeyPath = None) -> Any:  # noqa: ANN401
        return self.collect().sum(key)

    def avg(self, key: KeyPath = None) -> float | None:
        return self.collect().avg(key)

    def median(self, key: KeyPath = None) -> float | None:
        return self.collect().median(key)

    def each(self, func: Callable[..., object]) -> LazySeq[T]:
        """Call **func(value, key)** on each pair, stopping as soon as it returns `False`.

        Example:
        ```python
        >>> import lazychain as lc
        >>> seen = []
        >>> _ = lc.LazySeq.count_from(1).each(lambda n: seen.append(n) or n < 3)
        >>> seen
        [1, 2, 3]

        ```
        """
        call = adapt(func)
        for p in self._inner.traverse():
            if call(p.value, p.key) is False:
                break
        return self

    def mode(self, key: KeyPath = None) -> list[Any] | None:
        return self.collect().mode(key)

    def min(self, key: KeyPath = None) -> Any:  # noqa: ANN401
        return self.collect().min(key)

    def max(self, key: KeyPath = None) -> Any:  # noqa: ANN401
        return self.collect().max(key)

    def implode(self, glue: str = "", key: KeyPath = None) -> str:
        return self.collect().implode(glue, key)

    def random(self, n: int | None = None, seed: int | None = None) -> Any:  # noqa: ANN401
        """One random value, or a `LazySeq` of **n** of them."""
        result = self.collect().random(n, seed)
        return result if n is None else LazySeq(result)
