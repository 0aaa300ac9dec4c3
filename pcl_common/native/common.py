"""
Native entry points from pcl/common: transforms, centroid, NaN removal
"""

from logging import getLogger

import numpy as np
from scipy.spatial.transform import Rotation

from ..errors import NativeError
from ..utils.general import as_float_matrix
from .cloud import copy_point_cloud

log = getLogger(__name__)


def deg2rad(alpha):
    return np.float32(alpha) * np.float32(np.pi / 180.0)


def rad2deg(alpha):
    return np.float32(alpha) * np.float32(180.0 / np.pi)


def to_affine(transform):
    """
    Normalizes a transform to a 4x4 affine matrix.
        Accepts 4x4 (Affine3f/Matrix4f), 3x4 (upper rows) or 3x3 (rotation only).
    """
    mat = as_float_matrix(transform)
    if mat.shape == (4, 4):
        return mat
    affine = np.eye(4)
    if mat.shape == (3, 4):
        affine[:3, :] = mat
    elif mat.shape == (3, 3):
        affine[:3, :3] = mat
    else:
        raise NativeError(f'transform must be 4x4, 3x4 or 3x3, got {mat.shape}')
    return affine


def get_transformation(x, y, z, roll, pitch, yaw):
    """
    pcl::getTransformation: translation followed by rotations
        about Z (yaw), Y (pitch) and X (roll).
    """
    affine = np.eye(4)
    affine[:3, :3] = Rotation.from_euler('ZYX', [yaw, pitch, roll]).as_matrix()
    affine[:3, 3] = [x, y, z]
    return affine


def get_translation_and_euler_angles(transform):
    """Inverse of get_transformation, returns (x, y, z, roll, pitch, yaw)"""
    affine = to_affine(transform)
    yaw, pitch, roll = Rotation.from_matrix(affine[:3, :3]).as_euler('ZYX')
    x, y, z = affine[:3, 3]
    return x, y, z, roll, pitch, yaw


def transform_point_cloud(cloud_in, cloud_out, transform):
    """
    pcl::transformPointCloud. Every other field is copied from the input;
        non finite points are left untouched when the input is not dense.
        ``cloud_in`` and ``cloud_out`` may be the same cloud.
    """
    affine = to_affine(transform)
    if not cloud_in.point_type.has_xyz:
        raise NativeError(f'{cloud_in.point_type.name} has no coordinates to transform')
    if cloud_in is not cloud_out:
        copy_point_cloud(cloud_in, cloud_out)
    pts = cloud_out.points
    xyz = np.stack([pts['x'], pts['y'], pts['z']], axis=-1).astype(np.float64)
    if cloud_in.is_dense:
        mask = np.ones(len(xyz), dtype=bool)
    else:
        mask = np.isfinite(xyz).all(axis=1)
    moved = xyz[mask] @ affine[:3, :3].T + affine[:3, 3]
    for axis, fname in enumerate(('x', 'y', 'z')):
        column = pts[fname]
        column[mask] = moved[:, axis]
    return cloud_out


def compute_3d_centroid(cloud, centroid):
    """
    pcl::compute3DCentroid. Writes [cx, cy, cz, 1] into ``centroid`` and
        returns the number of points used. Non finite points are skipped
        unless the cloud is dense.
    """
    if not cloud.point_type.has_xyz:
        raise NativeError(f'{cloud.point_type.name} has no coordinates')
    xyz = cloud.xyz().astype(np.float64)
    if not cloud.is_dense:
        xyz = xyz[np.isfinite(xyz).all(axis=1)]
    count = len(xyz)
    if count == 0:
        raise NativeError('cannot compute the centroid of a cloud without valid points')
    mean = xyz.mean(axis=0)
    values = (mean[0], mean[1], mean[2], 1.0)
    try:
        for i, value in enumerate(values):
            centroid[i] = value
    except (IndexError, TypeError) as err:
        raise NativeError(f'centroid output must hold 4 writable components: {err}') from err
    return count


def remove_nan_indices(cloud_in):
    """Ascending indices of the points with finite coordinates"""
    if not cloud_in.point_type.has_xyz:
        raise NativeError(f'{cloud_in.point_type.name} has no coordinates')
    return np.flatnonzero(cloud_in.finite_mask())


def remove_nan_from_point_cloud(cloud_in, cloud_out, index):
    """
    pcl::removeNaNFromPointCloud. Copies the finite points of ``cloud_in``
        into ``cloud_out`` (which may be ``cloud_in``) as an unorganized,
        dense cloud and fills ``index`` with the kept input indices.
    """
    kept = remove_nan_indices(cloud_in)
    dropped = cloud_in.size() - len(kept)
    if dropped:
        log.debug(f'removing {dropped} non finite points of {cloud_in.size()}')
    if cloud_out is not None:
        copy_point_cloud(cloud_in, cloud_out, indices=kept)
        cloud_out.width = len(kept)
        cloud_out.height = 1
        cloud_out.is_dense = True
    index.assign(kept)
    return index
