import warnings
from collections.abc import Callable
from functools import wraps


def deprecated[**P, R](
    msg: str, *, since: str | None = None
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Emit a `DeprecationWarning` pointing at the caller each time the wrapped function runs.

    Example:
    ```python
    >>> import warnings
    >>> from lazychain._core import deprecated
    >>> @deprecated("use new_name()", since="0.2")
    ... def old_name() -> int:
    ...     return 1
    >>> with warnings.catch_warnings(record=True) as caught:
    ...     warnings.simplefilter("always")
    ...     old_name()
    1
    >>> str(caught[0].message)
    'use new_name() (deprecated since 0.2)'

    ```
    """
    text = msg if since is None else f"{msg} (deprecated since {since})"

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            warnings.warn(text, DeprecationWarning, stacklevel=2)
            return func(*args, **kwargs)

        return wrapper

    return decorator
