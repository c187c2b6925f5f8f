from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from ._types import Pair, PairIter

if TYPE_CHECKING:
    from ._sources import Source

logger = logging.getLogger(__name__)


class MemoCache:
    """Memoize one traversal of a `Source` so it can be replayed by any number of cursors.

    - Entries are append-only: once position `n` is cached it never changes.
    - Requesting a cached position never touches the upstream traversal.
    - Requesting an unseen position advances the single upstream traversal, caching every
      position visited along the way.
    - Once the upstream reports its end, every cursor agrees there is nothing beyond it.
    - If the upstream raises, the error is re-raised to every cursor reaching past the cached
      positions, never mistaken for the end of the source.

    The upstream traversal is only started by the first request.

    Not safe for concurrent advancement from several threads: callers must serialize it.

    Args:
        source (Source): The source whose traversal is memoized.

    Example:
    ```python
    >>> from lazychain._cache import MemoCache
    >>> from lazychain._sources import ArraySource
    >>> cache = MemoCache(ArraySource.from_values("abc"))
    >>> cache.entry(1)
    (1, 'b')
    >>> len(cache)
    2
    >>> [pair.value for pair in cache.traverse()]
    ['a', 'b', 'c']
    >>> cache.entry(3) is None, cache.exhausted
    (True, True)

    ```
    """

    __slots__ = ("_entries", "_error", "_exhausted", "_iterator", "_source")

    def __init__(self, source: Source) -> None:
        self._source = source
        self._iterator: PairIter | None = None
        self._entries: list[Pair[Any, Any]] = []
        self._exhausted = False
        self._error: Exception | None = None

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def exhausted(self) -> bool:
        """Whether the upstream traversal has reported its end."""
        return self._exhausted

    @property
    def cursor(self) -> int:
        """Furthest position the upstream traversal has been advanced to, `-1` before any."""
        return len(self._entries) - 1

    def _advance(self) -> bool:
        if self._error is not None:
            raise self._error
        if self._iterator is None:
            self._iterator = self._source.traverse()
        try:
            pair = next(self._iterator)
        except StopIteration:
            self._exhausted = True
            self._iterator = None
            logger.debug("memoized source exhausted after %d entries", len(self._entries))
            return False
        except Exception as e:
            # a failed generator cannot resume: positions past the cache stay unreachable
            self._error = e
            self._iterator = None
            logger.debug("memoized source failed after %d entries", len(self._entries))
            raise
        self._entries.append(pair)
        return True

    def entry(self, index: int) -> Pair[Any, Any] | None:
        """Return the pair at position **index**, or `None` if the source ends before it.

        Args:
            index (int): 0-based position.

        Returns:
            Pair[Any, Any] | None: The cached pair.

        Raises:
            Exception: Whatever the upstream raised, once it failed before reaching **index**.
        """
        if index < 0:
            msg = f"position must be non-negative, got {index}"
            raise IndexError(msg)
        while index >= len(self._entries):
            if self._exhausted or not self._advance():
                return None
        return self._entries[index]

    def traverse(self) -> Iterator[Pair[Any, Any]]:
        """Start an independent cursor over the shared cache."""
        index = 0
        while (pair := self.entry(index)) is not None:
            yield pair
            index += 1
