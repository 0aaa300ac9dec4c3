"""Python bindings for the PCL common module.

Generated shared pointer and value wrappers around the PCL point cloud
types, with the pcl/common algorithms, range images and point cloud I/O.
"""

__version__ = "0.1.0"

# Load unconfigured logger
import logging
import logging.config

from .set_config import load_config, log_config_file

log = logging.getLogger('pcl_common')

# load log config
log_config = load_config(log_config_file, load_to_env=False)

try:
    logging.config.dictConfig(log_config)
except (ValueError, TypeError, AttributeError, ImportError) as e:
    log.error(f"Error loading log config {log_config_file}: {e}")
    log.error("Default values will be used")

from . import binding, common, native  # noqa: E402
from .binding import (  # noqa: E402
    boost_shared_ptr,
    defconstructor,
    defpcltype,
    defptrconstructor,
    deref,
    handle,
    move,
    pointer,
    release,
    use_count,
)
from .common import *  # noqa: E402,F401,F403
from .common import __all__ as _common_names  # noqa: E402
from .errors import (  # noqa: E402
    BindingError,
    NativeError,
    NativeIndexError,
    NullHandleError,
    PCLError,
    PCLIOError,
)

__all__ = [
    "binding",
    "common",
    "native",
    # binding
    "boost_shared_ptr",
    "defconstructor",
    "defpcltype",
    "defptrconstructor",
    "deref",
    "handle",
    "move",
    "pointer",
    "release",
    "use_count",
    # errors
    "BindingError",
    "NativeError",
    "NativeIndexError",
    "NullHandleError",
    "PCLError",
    "PCLIOError",
    *_common_names,
]
