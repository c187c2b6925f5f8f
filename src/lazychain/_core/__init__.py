from ._config import Config, get_config, set_config
from ._deprecation import deprecated
from ._main import CommonBase, Pipeable

__all__ = [
    "CommonBase",
    "Config",
    "Pipeable",
    "deprecated",
    "get_config",
    "set_config",
]
