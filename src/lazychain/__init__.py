from ._core import Config, get_config, set_config
from ._eager import Collection
from ._errors import (
    InvalidSourceError,
    ItemNotFoundError,
    MultipleItemsFoundError,
    UnequalLengthWarning,
)
from ._keys import data_get, value_retriever
from ._lazy import LazySeq
from ._predicates import (
    MISSING,
    compare,
    equality,
    identity,
    negate,
    operator_for_where,
    strict_equals,
)
from ._types import Pair

__all__ = [
    "MISSING",
    "Collection",
    "Config",
    "InvalidSourceError",
    "ItemNotFoundError",
    "LazySeq",
    "MultipleItemsFoundError",
    "Pair",
    "UnequalLengthWarning",
    "compare",
    "data_get",
    "equality",
    "get_config",
    "identity",
    "negate",
    "operator_for_where",
    "set_config",
    "strict_equals",
    "value_retriever",
]
