"""
Forwarders to the native pcl/common routines. Each function takes
wrappers, hands their native objects to the routine and returns the
output wrapper; native failures propagate unchanged.
"""

from logging import getLogger

from .. import native
from ..binding import deref
from ..errors import NativeError
from ..native import NativePointIndices, NativeVector

log = getLogger(__name__)

INDEX_TYPES = ('int', 'int32_t', 'long', 'int64_t', 'unsigned int', 'uint32_t', 'size_t')


def deg2rad(alpha):
    """pcl::deg2rad"""
    return native.deg2rad(alpha)


def rad2deg(alpha):
    return native.rad2deg(alpha)


def get_transformation(x, y, z, roll, pitch, yaw):
    """pcl::getTransformation, a 4x4 affine"""
    return native.get_transformation(x, y, z, roll, pitch, yaw)


def get_translation_and_euler_angles(transform):
    return native.get_translation_and_euler_angles(transform)


def transform_point_cloud(cloud_in, cloud_out, transform):
    """
    Applies a rigid/affine transform to every point of ``cloud_in`` and
        writes the result to ``cloud_out``; both may be the same cloud.

    Args:
        cloud_in: source point cloud wrapper
        cloud_out: destination point cloud wrapper of the same point type
        transform: 4x4, 3x4 or 3x3 matrix
    """
    src, dst = deref(cloud_in), deref(cloud_out)
    if src.point_type is not dst.point_type:
        raise NativeError(f'cannot transform {src.point_type!r} points into a cloud of {dst.point_type!r}')
    native.transform_point_cloud(src, dst, transform)
    return cloud_out


def compute_3d_centroid(cloud, centroid):
    """
    Writes the mean point position ``[cx, cy, cz, 1]`` into ``centroid``
        (any writable 4 element sequence, e.g. ``np.zeros(4)``).

    Returns:
        int: number of points that contributed
    """
    return native.compute_3d_centroid(deref(cloud), centroid)


def _index_vector(indices):
    target = deref(indices)
    if isinstance(target, NativePointIndices):
        target = target.indices
    if not isinstance(target, NativeVector) or target.element_type not in INDEX_TYPES:
        raise NativeError(f'indices must be an integer StdVector or PointIndices, got {indices!r}')
    return target


def remove_nan_from_point_cloud(cloud_in, *args):
    """
    Removes points with non finite coordinates.

    ``remove_nan_from_point_cloud(cloud_in, indices)`` only fills
    ``indices``; ``remove_nan_from_point_cloud(cloud_in, cloud_out, indices)``
    also writes the kept points, in order, to ``cloud_out`` (which may be
    ``cloud_in``). ``indices`` receives the ascending original indices.
    """
    if len(args) == 1:
        cloud_out, indices = None, args[0]
    elif len(args) == 2:
        cloud_out, indices = args
    else:
        raise TypeError(f'remove_nan_from_point_cloud takes 2 or 3 arguments, got {len(args) + 1}')
    src = deref(cloud_in)
    dst = deref(cloud_out) if cloud_out is not None else None
    if dst is not None and dst.point_type is not src.point_type:
        raise NativeError(f'cannot copy {src.point_type!r} points into a cloud of {dst.point_type!r}')
    native.remove_nan_from_point_cloud(src, dst, _index_vector(indices))
    return indices
