"""Sources a `LazySeq` can be built on.

A source is a repeatable factory for traversals: `traverse()` starts a fresh, independent
iterator of `Pair` every time it is called. Nothing is read before that iterator is pulled.
"""

from __future__ import annotations

from collections.abc import (
    Callable,
    Generator,
    Iterable,
    Iterator,
    Mapping,
    Set,
)
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, Self

from ._cache import MemoCache
from ._errors import InvalidSourceError
from ._types import Pair, Producer

if TYPE_CHECKING:
    from ._eager import Collection
    from ._lazy import LazySeq


class Source(Protocol):
    def traverse(self) -> Iterator[Pair[Any, Any]]: ...


def pairs_of(data: Iterable[Any]) -> Iterator[Pair[Any, Any]]:
    """Key a plain iterable: mappings by their keys, anything else by position."""
    match data:
        case Mapping():
            return (Pair(k, v) for k, v in data.items())  # pyright: ignore[reportUnknownVariableType, reportUnknownMemberType]
        case _:
            return (Pair(idx, v) for idx, v in enumerate(data))


@dataclass(slots=True, frozen=True)
class ArraySource:
    """A finite, already known sequence of pairs."""

    pairs: tuple[Pair[Any, Any], ...]

    def __len__(self) -> int:
        return len(self.pairs)

    @classmethod
    def from_values(cls, data: Iterable[Any]) -> Self:
        return cls(tuple(pairs_of(data)))

    def traverse(self) -> Iterator[Pair[Any, Any]]:
        return iter(self.pairs)


@dataclass(slots=True, frozen=True)
class ProducerSource:
    """A zero-argument producer called anew for each traversal.

    With `keyed=True` the producer yields `(key, value)` pairs, otherwise its output is keyed
    like any plain iterable.
    """

    producer: Producer
    keyed: bool = False

    def traverse(self) -> Iterator[Pair[Any, Any]]:
        data = self.producer()
        if self.keyed:
            return (Pair(*kv) for kv in data)
        if not isinstance(data, Iterable):
            return iter((Pair(0, data),))
        return pairs_of(data)


@dataclass(slots=True, frozen=True)
class GeneratorSource:
    """Internal variant for combinators: the factory already yields `Pair` instances."""

    factory: Callable[[], Iterator[Pair[Any, Any]]]

    def traverse(self) -> Iterator[Pair[Any, Any]]:
        return self.factory()


@dataclass(slots=True, frozen=True)
class CacheSource:
    """Replays a `MemoCache` shared by every traversal."""

    cache: MemoCache

    def traverse(self) -> Iterator[Pair[Any, Any]]:
        return self.cache.traverse()


def _is_single_use(data: object) -> bool:
    return isinstance(data, (Iterator, Generator))


def make_source(data: object) -> Source:
    """Build the right `Source` variant for **data**.

    Raises:
        InvalidSourceError: If **data** is an iterator/generator, or is not iterable at all.

    Example:
    ```python
    >>> from lazychain._sources import make_source
    >>> list(make_source({"a": 1}).traverse())
    [('a', 1)]
    >>> make_source(x for x in range(3))
    Traceback (most recent call last):
        ...
    lazychain._errors.InvalidSourceError: Iterators and generators are single-use and cannot back a LazySeq. Pass a generator function instead.

    ```
    """
    from ._eager import Collection
    from ._lazy import LazySeq

    match data:
        case None:
            return ArraySource(())
        case LazySeq():
            return data.source
        case Collection():
            return ArraySource(data.as_pairs())
        case _ if _is_single_use(data):
            msg = (
                "Iterators and generators are single-use and cannot back a LazySeq. "
                "Pass a generator function instead."
            )
            raise InvalidSourceError(msg)
        case Mapping() | Set() | tuple() | list() | range() | str():
            return ArraySource.from_values(data)  # pyright: ignore[reportUnknownArgumentType]
        case Iterable():
            # re-iterable containers that are not sequences: replay through a producer
            return ProducerSource(lambda: data)  # pyright: ignore[reportUnknownLambdaType]
        case _ if callable(data):
            return ProducerSource(data)  # pyright: ignore[reportArgumentType]
        case _:
            msg = f"Cannot build a LazySeq from {type(data).__name__!r}."
            raise InvalidSourceError(msg)
