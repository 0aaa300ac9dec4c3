"""General utilities shared by the native layer and the facade."""

__version__ = "0.1.0"

from .general import list_if, as_float_matrix
from .log_utils import ConsoleHandler

__all__ = [
    # general
    "list_if",
    "as_float_matrix",
    # log_utils
    "ConsoleHandler",
]
