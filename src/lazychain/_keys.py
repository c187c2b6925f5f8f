"""Value retrieval by path.

Every keyed combinator (`pluck`, `key_by`, `where`, `sort_by`, `group_by`, ...) resolves
its key argument through `data_get`, so they all accept the same path syntax:

- `None`: the element itself.
- A callable: called with the element.
- An `int`: a single index/key.
- A dotted `str` (`"user.address.city"`) or a list of segments.

Segments are resolved against mappings (by key), sequences (by integer index) and
any other object (by attribute). A `"*"` segment fans out over every child.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

import cytoolz as cz

from ._callables import adapt
from ._types import KeyPath

_WILDCARD = "*"
_MISSING = object()


def split_path(path: str | int | Iterable[str | int]) -> list[str | int]:
    """Split a dotted path into its segments.

    Example:
    ```python
    >>> from lazychain._keys import split_path
    >>> split_path("a.b.0")
    ['a', 'b', '0']
    >>> split_path(3)
    [3]

    ```
    """
    match path:
        case str():
            return path.split(".") if path else []
        case int():
            return [path]
        case _:
            return list(path)


def _child(target: object, segment: str | int) -> object:
    match target:
        case Mapping():
            if segment in target:
                return target[segment]
            if isinstance(segment, str) and segment.lstrip("-").isdigit():
                return target.get(int(segment), _MISSING)  # pyright: ignore[reportUnknownMemberType]
            return _MISSING
        case str() | bytes():
            return _MISSING
        case Sequence():
            try:
                return target[int(segment)]
            except IndexError:
                return _MISSING
            except ValueError:
                # named tuples also resolve their fields by name
                if segment in getattr(target, "_fields", ()):
                    return getattr(target, str(segment))
                return _MISSING
        case _:
            if isinstance(segment, str):
                return getattr(target, segment, _MISSING)
            return _MISSING


def _children(target: object) -> Iterable[object]:
    match target:
        case Mapping():
            return target.values()  # pyright: ignore[reportUnknownMemberType, reportUnknownVariableType]
        case str() | bytes():
            return ()
        case Sequence():
            return target
        case _:
            return ()


def _resolve(target: object, segments: list[str | int], default: object) -> object:
    for idx, segment in enumerate(segments):
        if segment == _WILDCARD:
            rest = segments[idx + 1 :]
            if not isinstance(target, (Mapping, Sequence)) or isinstance(
                target, (str, bytes)
            ):
                return default
            results = [_resolve(child, rest, default) for child in _children(target)]
            if _WILDCARD in rest:
                return list(cz.itertoolz.concat(r for r in results if isinstance(r, list)))
            return results
        target = _child(target, segment)
        if target is _MISSING:
            return default
    return target


def data_get(target: object, path: KeyPath, default: object = None) -> Any:  # noqa: ANN401
    """Resolve **path** against **target**, returning **default** when any segment is missing.

    Args:
        target (object): The element to inspect.
        path (KeyPath): Dotted path, segment list, index, callable or `None`.
        default (object): Value returned for missing segments.

    Returns:
        Any: The resolved value.

    Example:
    ```python
    >>> from lazychain import data_get
    >>> user = {"name": "Ada", "roles": [{"id": 1}, {"id": 7}]}
    >>> data_get(user, "roles.1.id")
    7
    >>> data_get(user, "roles.*.id")
    [1, 7]
    >>> data_get(user, "address.city", "unknown")
    'unknown'
    >>> data_get(user, None) is user
    True

    ```
    """
    if path is None:
        return target
    if callable(path) and not isinstance(path, str):
        return path(target)
    return _resolve(target, split_path(path), default)


def use_as_callable(value: object) -> bool:
    """Whether **value** should be called rather than treated as a path or a literal."""
    return callable(value) and not isinstance(value, str)


def value_retriever(path: KeyPath) -> Callable[..., Any]:
    """Build a `(value, key) -> Any` function from a path or a callable.

    Example:
    ```python
    >>> from lazychain import value_retriever
    >>> value_retriever("a.b")({"a": {"b": 2}}, 0)
    2
    >>> value_retriever(None)(5, 0)
    5

    ```
    """
    if use_as_callable(path):
        return adapt(path)  # pyright: ignore[reportArgumentType]

    def _retrieve(value: object, _key: object = None) -> Any:  # noqa: ANN401
        return data_get(value, path)

    return _retrieve
