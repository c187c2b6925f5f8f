from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from datetime import datetime
from typing import Any, NamedTuple

# Iterations result types


class Pair[K, V](NamedTuple):
    """Represents one `(key, value)` element of a sequence.

    Keys are not required to be unique.
    """

    key: K
    """The key of the element."""
    value: V
    """The value of the element."""

    def __repr__(self) -> str:
        return f"({self.key.__repr__()}, {self.value.__repr__()})"


# aliases

type Producer = Callable[[], Iterable[Any]]
"""Zero-argument factory returning a fresh iterable each time it is called."""
type PairIter = Iterator[Pair[Any, Any]]
"""A single-use traversal of pairs."""
type KeyPath = str | int | list[str | int] | Callable[..., Any] | None
"""Anything `data_get` knows how to resolve against an element."""
type Deadline = datetime | float
"""An aware/naive `datetime` or a POSIX timestamp."""
type Clock = Callable[[], float]
"""Returns the current POSIX timestamp."""

