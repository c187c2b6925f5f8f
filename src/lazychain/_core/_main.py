from __future__ import annotations

from abc import ABC
from collections.abc import Callable
from typing import Concatenate, Self


class Pipeable:
    """Mixin letting any sequence be handed to plain functions mid-chain."""

    def into[**P, R](
        self,
        func: Callable[Concatenate[Self, P], R],
        *args: P.args,
        **kwargs: P.kwargs,
    ) -> R:
        """Call **func** with the sequence as first argument and return its result.

        `seq.into(f, x)` reads left to right where `f(seq, x)` would not.

        Args:
            func (Callable[Concatenate[Self, P], R]): Receives the sequence first.
            *args (P.args): Extra positional arguments for **func**.
            **kwargs (P.kwargs): Extra keyword arguments for **func**.

        Returns:
            R: Whatever **func** returns.

        Example:
        ```python
        >>> import lazychain as lc
        >>> def total_over(seq, threshold):
        ...     return seq.filter(lambda n: n > threshold).sum()
        >>> lc.LazySeq.range(1, 5).into(total_over, 2)
        12

        ```
        """
        return func(self, *args, **kwargs)

    def inspect[**P](
        self,
        func: Callable[Concatenate[Self, P], object],
        *args: P.args,
        **kwargs: P.kwargs,
    ) -> Self:
        """Call **func** with the sequence for its side effects, then keep chaining on the same sequence.

        On a `LazySeq`, **func** sees the unevaluated sequence: nothing is pulled unless it does so itself.

        Example:
        ```python
        >>> import lazychain as lc
        >>> lc.Collection.from_([1, 2]).inspect(print).count()
        Collection([1, 2])
        2

        ```
        """
        func(self, *args, **kwargs)
        return self


class CommonBase[T](ABC, Pipeable):
    """Shared base of `LazySeq` and `Collection`, holding what they wrap.

    Args:
        data (T): A `Source` for lazy sequences, a tuple of `Pair` for eager ones.
    """

    _inner: T

    __slots__ = ("_inner",)

    def __init__(self, data: T) -> None:
        self._inner = data

    def inner(self) -> T:
        """Return the wrapped `Source` or pairs tuple, ending the chain."""
        return self._inner
