"""Predicate builders shared by the filtering and searching combinators.

`operator_for_where` turns a `(key, operator, value)` triple into a boolean predicate.

Comparison policy:

- `=`/`==` and `!=`/`<>` use Python equality.
- `===`/`!==` use strict equality: same object, or same type and equal.
- `<`, `>`, `<=`, `>=` on values that cannot be ordered against each other are `False`.
- `<=>` returns `-1`, `0` or `1`, which is truthy whenever the operands differ.
- When fewer than two operands are stringable and exactly one of them is a plain object,
  only the negated operators (`!=`, `<>`, `!==`) hold.
"""

from __future__ import annotations

import operator as op
from collections.abc import Callable
from decimal import Decimal
from fractions import Fraction
from typing import Any, Final, Literal

from ._callables import adapt
from ._keys import data_get, use_as_callable
from ._types import KeyPath

type Operator = Literal["=", "==", "!=", "<>", "<", ">", "<=", ">=", "===", "!==", "<=>"]


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Final = _Missing()
"""Marker for arguments that were not given at all (as opposed to given as `None`)."""

_NEGATED: Final = frozenset(("!=", "<>", "!=="))
_SCALARS: Final = (
    type(None),
    bool,
    int,
    float,
    complex,
    Decimal,
    Fraction,
    str,
    bytes,
    list,
    tuple,
    dict,
    set,
    frozenset,
)


def strict_equals(left: object, right: object) -> bool:
    """Equality that also requires both operands to share the same type.

    Example:
    ```python
    >>> from lazychain import strict_equals
    >>> strict_equals(1, 1), strict_equals(1, 1.0), strict_equals(1, True)
    (True, False, False)

    ```
    """
    return left is right or (type(left) is type(right) and left == right)


def spaceship(left: Any, right: Any) -> int:  # noqa: ANN401
    return (left > right) - (left < right)


def _ordered(func: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def _compare(left: object, right: object) -> bool:
        try:
            return bool(func(left, right))
        except TypeError:
            return False

    return _compare


_OPERATORS: Final[dict[str, Callable[[Any, Any], Any]]] = {
    "=": op.eq,
    "==": op.eq,
    "!=": op.ne,
    "<>": op.ne,
    "<": _ordered(op.lt),
    ">": _ordered(op.gt),
    "<=": _ordered(op.le),
    ">=": _ordered(op.ge),
    "===": strict_equals,
    "!==": lambda left, right: not strict_equals(left, right),
    "<=>": spaceship,
}


def _is_object(value: object) -> bool:
    return not isinstance(value, _SCALARS)


def _is_stringable(value: object) -> bool:
    return isinstance(value, str) or (
        _is_object(value) and type(value).__str__ is not object.__str__
    )


def compare(retrieved: object, operator: str, value: object) -> Any:  # noqa: ANN401
    """Apply **operator** to `(retrieved, value)` following the comparison policy.

    Unknown operators behave like `=`.

    Example:
    ```python
    >>> from lazychain import compare
    >>> compare(3, ">=", 2), compare("a", "<", 1), compare(1, "===", 1.0)
    (True, False, False)
    >>> compare(1, "<=>", 2)
    -1
    >>> class Point:
    ...     pass
    >>> compare(Point(), "=", None), compare(Point(), "!=", None)
    (False, True)

    ```
    """
    operands = (retrieved, value)
    strings = sum(1 for v in operands if _is_stringable(v))
    objects = sum(1 for v in operands if _is_object(v))
    if strings < 2 and objects == 1:
        return operator in _NEGATED
    return _OPERATORS.get(operator, op.eq)(retrieved, value)


def operator_for_where(
    key: KeyPath,
    operator: object = MISSING,
    value: object = MISSING,
) -> Callable[..., Any]:
    """Build a predicate from a key path, an optional operator and a value.

    - `operator_for_where(callable)` returns the callable (adapted to `(value, key)`).
    - `operator_for_where(key)` checks that the retrieved value equals `True`.
    - `operator_for_where(key, value)` checks for equality with **value**.
    - `operator_for_where(key, operator, value)` applies **operator**.

    Example:
    ```python
    >>> from lazychain import operator_for_where
    >>> adult = operator_for_where("age", ">=", 18)
    >>> adult({"age": 21}), adult({"age": 12})
    (True, False)
    >>> operator_for_where("name", "Ada")({"name": "Ada"})
    True
    >>> operator_for_where("active")({"active": True})
    True

    ```
    """
    if use_as_callable(key):
        return adapt(key)  # pyright: ignore[reportArgumentType]
    if operator is MISSING:
        operator, value = "=", True
    elif value is MISSING:
        operator, value = "=", operator

    def _where(item: object, _key: object = None) -> Any:  # noqa: ANN401
        return compare(data_get(item, key), str(operator), value)

    return _where


def equality(value: object) -> Callable[..., bool]:
    """Strict equality against **value**."""

    def _equals(item: object, _key: object = None) -> bool:
        return strict_equals(item, value)

    return _equals


def negate(func: Callable[..., Any]) -> Callable[..., bool]:
    def _negated(*args: Any) -> bool:  # noqa: ANN401
        return not func(*args)

    return _negated


def identity() -> Callable[..., Any]:
    def _identity(value: object, _key: object = None) -> object:
        return value

    return _identity


def predicate_or_equality(value: object) -> Callable[..., Any]:
    """Use **value** as a `(value, key)` predicate when callable, else as a strict equality check."""
    return adapt(value) if use_as_callable(value) else equality(value)  # pyright: ignore[reportArgumentType]
