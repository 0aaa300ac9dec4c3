"""
PCLBase interface: algorithms that take an input cloud and optional
indices share it.
"""

from ..binding import SharedWrapper, deref, handle
from ..errors import NativeError
from .containers import PointIndices
from .point_cloud import PointCloud


class PCLBase:
    """Similar to pcl::PCLBase, for dispatch"""

    def set_input_cloud(self, cloud):
        if not isinstance(cloud, SharedWrapper):
            raise NativeError('the input cloud must be held by a shared pointer wrapper')
        deref(self).set_input_cloud(handle(cloud))

    def get_input_cloud(self):
        return PointCloud.from_handle(deref(self).get_input_cloud())

    def set_indices(self, indices):
        if not isinstance(indices, SharedWrapper):
            raise NativeError('indices must be held by a shared pointer wrapper')
        deref(self).set_indices(handle(indices))

    def get_indices(self):
        return PointIndices.from_handle(deref(self).get_indices())


def set_input_cloud(base, cloud):
    base.set_input_cloud(cloud)


def get_input_cloud(base):
    return base.get_input_cloud()


def set_indices(base, indices):
    base.set_indices(indices)


def get_indices(base):
    return base.get_indices()
