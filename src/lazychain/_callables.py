from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


def arity(func: Callable[..., Any]) -> int | None:
    """Number of positional parameters **func** accepts, `None` if unbounded or unknown."""
    try:
        params = inspect.signature(func).parameters.values()
    except (TypeError, ValueError):
        return None
    if any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in params):
        return None
    return sum(1 for p in params if p.kind in _POSITIONAL)


def adapt(func: Callable[..., Any], max_args: int = 2) -> Callable[..., Any]:
    """Wrap **func** so it can always be called with `(value, key, ...)`.

    Callbacks receive up to **max_args** positional arguments, but a callback
    declaring fewer only gets as many as it accepts. Builtins without an
    introspectable signature receive the value alone.

    Example:
    ```python
    >>> from lazychain._callables import adapt
    >>> adapt(lambda v: v * 2)(3, "key")
    6
    >>> adapt(lambda v, k: (k, v))(3, "key")
    ('key', 3)
    >>> adapt(str.upper)("a", 0)
    'A'

    ```
    """
    n = arity(func)
    match n:
        case None:
            if inspect.isbuiltin(func) or isinstance(func, type):
                return _take(func, 1)
            return _take(func, max_args)
        case _ if n >= max_args:
            return func
        case _:
            return _take(func, n)


def _take(func: Callable[..., Any], n: int) -> Callable[..., Any]:
    def _call(*args: Any) -> Any:  # noqa: ANN401
        return func(*args[:n])

    return _call
