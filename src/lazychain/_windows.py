"""Windowing, chunking and lock-step algorithms over pair iterators.

All functions here are generators: nothing is pulled from the upstream iterator before the
result is iterated, and they never pull further than the group they are about to yield.
Groups are yielded as tuples of `Pair`; `LazySeq` wraps them back into sequences.
"""

from __future__ import annotations

import warnings
from collections.abc import Callable, Iterable, Iterator
from typing import Any

import cytoolz as cz
import more_itertools as mit

from ._errors import UnequalLengthWarning
from ._types import Pair

type Group = tuple[Pair[Any, Any], ...]


class RingBuffer[T]:
    """Fixed-capacity circular buffer overwriting its oldest entry on overflow.

    Iterating yields the surviving entries oldest-to-newest.

    Args:
        capacity (int): Maximum number of entries kept. Must be positive.

    Example:
    ```python
    >>> from lazychain._windows import RingBuffer
    >>> buf = RingBuffer[int](3)
    >>> for i in range(1, 8):
    ...     buf.push(i)
    >>> list(buf), len(buf), buf.seen
    ([5, 6, 7], 3, 7)

    ```
    """

    __slots__ = ("_buffer", "_capacity", "_position", "_seen")

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            msg = f"capacity must be positive, got {capacity}"
            raise ValueError(msg)
        self._capacity = capacity
        self._buffer: list[T | None] = [None] * capacity
        self._position = 0
        self._seen = 0

    @property
    def seen(self) -> int:
        """Total number of entries pushed, including overwritten ones."""
        return self._seen

    def __len__(self) -> int:
        return min(self._capacity, self._seen)

    def push(self, item: T) -> None:
        self._buffer[self._position] = item
        self._position = (self._position + 1) % self._capacity
        self._seen += 1

    def __iter__(self) -> Iterator[T]:
        # before the first wraparound the oldest entry sits at index 0
        start = self._position if self._seen >= self._capacity else 0
        for i in range(len(self)):
            yield self._buffer[(start + i) % self._capacity]  # pyright: ignore[reportReturnType]


def take_last(pairs: Iterable[Pair[Any, Any]], n: int) -> Iterator[Pair[Any, Any]]:
    """Yield the last **n** pairs, once the upstream is exhausted."""
    buffer = RingBuffer[Pair[Any, Any]](n)
    for pair in pairs:
        buffer.push(pair)
    yield from buffer


def chunk(pairs: Iterable[Pair[Any, Any]], size: int) -> Iterator[Group]:
    if size <= 0:
        return iter(())
    return cz.itertoolz.partition_all(size, pairs)


def chunk_while(
    pairs: Iterable[Pair[Any, Any]],
    predicate: Callable[[Any, Any, Group], Any],
) -> Iterator[Group]:
    """Group consecutive pairs while **predicate(value, key, current_group)** holds."""
    current: list[Pair[Any, Any]] = []
    for pair in pairs:
        if current and not predicate(pair.value, pair.key, tuple(current)):
            yield tuple(current)
            current = []
        current.append(pair)
    if current:
        yield tuple(current)


def sliding(
    pairs: Iterable[Pair[Any, Any]], size: int, step: int
) -> Iterator[Group]:
    """Yield full windows of **size** pairs, each starting **step** pairs after the previous one.

    When **step** exceeds **size**, the pairs between two windows are pulled and discarded.
    """
    iterator = iter(pairs)
    window: list[Pair[Any, Any]] = []
    for pair in iterator:
        window.append(pair)
        if len(window) == size:
            yield tuple(window)
            window = window[step:]
            if step > size:
                mit.consume(iterator, step - size)


def zip_pairs(
    first: Iterator[Pair[Any, Any]], *others: Iterator[Pair[Any, Any]]
) -> Iterator[Group]:
    """Advance every iterator in lock-step, stopping as soon as one of them is exhausted.

    Each group holds the current value of every input, keyed by argument position.
    """
    for row in zip(first, *others):
        yield tuple(Pair(idx, pair.value) for idx, pair in enumerate(row))


_UNEQUAL = "Both parameters should have an equal number of elements"


def combine_pairs(
    keys: Iterable[Pair[Any, Any]], values: Iterator[Pair[Any, Any]]
) -> Iterator[Pair[Any, Any]]:
    """Pair the values of **keys** (as keys) with the values of **values**.

    Emits an `UnequalLengthWarning` and stops at the shorter side on a length mismatch.
    """
    for key_pair in keys:
        value_pair = next(values, None)
        if value_pair is None:
            warnings.warn(_UNEQUAL, UnequalLengthWarning, stacklevel=2)
            return
        yield Pair(key_pair.value, value_pair.value)
    if next(values, None) is not None:
        warnings.warn(_UNEQUAL, UnequalLengthWarning, stacklevel=2)
