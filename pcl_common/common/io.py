"""
Point cloud file loading, and the ``PointCloud[T](path)`` constructors
built on it.
"""

import os
from logging import getLogger

from .. import native
from ..binding import deref, register_constructor
from ..binding.wrappers import deleter_for, native_constructor
from ..native.smart_ptr import SharedPtr
from .point_cloud import PointCloudPtr, PointCloudVal

log = getLogger(__name__)


def load(path, cloud) -> int:
    """
    Reads ``path`` into an existing cloud wrapper.
        .pcd/.ply/.xyz/.pts go through open3d, .las/.laz through laspy and
        .npy/.npz through numpy.

    Raises:
        PCLIOError: the path is empty, missing, unsupported or unreadable;
            ``cloud`` is left untouched
    """
    return native.load(path, deref(cloud))


def _read_new(cls, path):
    obj = native_constructor(cls, cls._cxxtemplate)()
    native.load(os.fspath(path), obj)
    return obj


def _ptr_from_file(cls, path):
    obj = _read_new(cls, path)
    return SharedPtr(obj, deleter_for(obj))


def _val_from_file(cls, path):
    return _read_new(cls, path)


register_constructor(PointCloudPtr, "path: PathLike", _ptr_from_file)
register_constructor(PointCloudVal, "path: PathLike", _val_from_file)
