"""Exceptions raised by the binding generator, the native layer and the facade."""


class PCLError(RuntimeError):
    """Base class for every failure surfaced by pcl_common"""


class BindingError(PCLError):
    """
    Raised while wrapper types or constructors are being generated:
        malformed type names, unknown native types, a template
        placeholder with no substitution, or two constructors
        declared with the same arity.
    """


class NullHandleError(PCLError):
    """Raised when a released or empty handle is dereferenced"""


class NativeError(PCLError):
    """Raised when a native routine reports a failure"""


class PCLIOError(NativeError):
    """Raised when a point cloud file cannot be loaded"""


class NativeIndexError(NativeError, IndexError):
    """Raised when a native container is indexed out of range"""
