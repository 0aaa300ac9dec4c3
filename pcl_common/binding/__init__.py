"""Generation of shared pointer and value wrappers around native types."""

__version__ = "0.1.0"

from .codegen import CodeGen, parse_params
from .macros import (
    TypeFamily,
    boost_shared_ptr,
    defconstructor,
    defpcltype,
    defptrconstructor,
    register_constructor,
)
from .wrappers import (
    PCLWrapper,
    SharedWrapper,
    ValueWrapper,
    deref,
    handle,
    move,
    pointer,
    release,
    use_count,
)

__all__ = [
    # codegen
    "CodeGen",
    "parse_params",
    # macros
    "TypeFamily",
    "boost_shared_ptr",
    "defconstructor",
    "defpcltype",
    "defptrconstructor",
    "register_constructor",
    # wrappers
    "PCLWrapper",
    "SharedWrapper",
    "ValueWrapper",
    "deref",
    "handle",
    "move",
    "pointer",
    "release",
    "use_count",
]
