from collections.abc import Sequence
from pprint import pformat
from typing import Any


def _is_list_like(pairs: Sequence[tuple[Any, Any]]) -> bool:
    return all(key == idx for idx, (key, _) in enumerate(pairs))


def pairs_repr(
    pairs: Sequence[tuple[Any, Any]],
    max_items: int = 20,
    depth: int = 3,
    width: int = 80,
    *,
    compact: bool = True,
) -> str:
    truncated = pairs[:max_items]
    suffix = "..." if len(pairs) > max_items else ""
    if _is_list_like(truncated):
        shown: object = [value for _, value in truncated]
    else:
        shown = dict(truncated)
    return pformat(shown, depth=depth, width=width, compact=compact) + suffix
