from __future__ import annotations


class InvalidSourceError(TypeError):
    """A `LazySeq` was built from something that cannot be replayed.

    Iterators and generators are single-use: pass the generator *function*
    (or any zero-argument callable) instead.
    """


class ItemNotFoundError(LookupError):
    """No element matched where at least one was required."""

    count: int

    def __init__(self, msg: str = "No items were found.") -> None:
        super().__init__(msg)
        self.count = 0


class MultipleItemsFoundError(LookupError):
    """More than one element matched where exactly one was required."""

    count: int

    def __init__(self, count: int) -> None:
        super().__init__(f"{count} items were found.")
        self.count = count


class UnequalLengthWarning(UserWarning):
    """`combine` received key and value sources of different lengths."""
