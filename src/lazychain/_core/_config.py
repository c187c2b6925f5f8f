from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from ._format import pairs_repr


@dataclass(slots=True, frozen=True)
class Config:
    """Display settings shared by every eager collection."""

    max_items: int = 20
    """Maximum number of elements shown before truncating with `...`."""
    depth: int = 3
    """Nesting depth forwarded to `pprint`."""
    width: int = 80
    """Line width forwarded to `pprint`."""

    def iter_repr(self, pairs: tuple[tuple[Any, Any], ...]) -> str:
        return pairs_repr(
            pairs, max_items=self.max_items, depth=self.depth, width=self.width
        )


_CONFIG = Config()


def get_config() -> Config:
    return _CONFIG


def set_config(**changes: Any) -> Config:  # noqa: ANN401
    """Replace the active configuration, returning the new one.

    Example:
    ```python
    >>> import lazychain as lc
    >>> old = lc.get_config()
    >>> lc.set_config(max_items=2)
    Config(max_items=2, depth=3, width=80)
    >>> lc.Collection.from_([1, 2, 3])
    Collection([1, 2]...)
    >>> _ = lc.set_config(max_items=old.max_items)

    ```
    """
    global _CONFIG  # noqa: PLW0603
    _CONFIG = replace(_CONFIG, **changes)
    return _CONFIG
