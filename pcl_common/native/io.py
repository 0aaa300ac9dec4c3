"""
File loading (pcl::io::load). Reading is delegated to open3d for the
point cloud formats it knows, laspy for LAS/LAZ and numpy for saved arrays.
"""

import os
from logging import getLogger

import numpy as np
import open3d as o3d

from ..errors import PCLIOError
from ..set_config import get_setting
from ..utils.general import list_if

log = getLogger(__name__)

DEFAULT_PCD_EXTENSIONS = ['.pcd', '.ply', '.xyz', '.xyzn', '.xyzrgb', '.pts']
DEFAULT_LAS_EXTENSIONS = ['.las', '.laz']
DEFAULT_NUMPY_EXTENSIONS = ['.npy', '.npz']


def _read_o3d(path):
    pcd = o3d.io.read_point_cloud(path)
    attrs = {'points': np.asarray(pcd.points)}
    if pcd.has_colors():
        attrs['colors'] = np.asarray(pcd.colors)
    if pcd.has_normals():
        attrs['normals'] = np.asarray(pcd.normals)
    return attrs


def get_attrs_las(las_file, header=None):
    try:
        x = las_file.X * header.scales[0] + header.offsets[0]
        y = las_file.Y * header.scales[1] + header.offsets[1]
        z = las_file.Z * header.scales[2] + header.offsets[2]
    except AttributeError:
        log.info('No scale attributes found, using coordinates directly')
        x, y, z = las_file.x, las_file.y, las_file.z
    attrs = {'points': np.vstack((x, y, z)).T}
    dims = set(las_file.point_format.dimension_names)
    if {'red', 'green', 'blue'} <= dims:
        colors = np.vstack((las_file.red, las_file.green, las_file.blue)).T.astype(np.float64)
        attrs['colors'] = colors / 65535.0
    if 'intensity' in dims:
        attrs['intensity'] = np.asarray(las_file.intensity, dtype=np.float64)
    if 'classification' in dims:
        attrs['label'] = np.asarray(las_file.classification, dtype=np.uint32)
    return attrs


def _read_las(path):
    import laspy
    las = laspy.read(path)
    return get_attrs_las(las, las.header)


def _read_numpy(path):
    data = np.load(path, allow_pickle=False)
    if isinstance(data, np.ndarray):
        if data.dtype.names:
            return {'records': data.reshape(-1)}
        if data.ndim != 2 or data.shape[1] < 3:
            raise PCLIOError(f'{path} must hold an Nx3 (or wider) array, got shape {data.shape}')
        attrs = {'points': data[:, :3]}
        if data.shape[1] >= 6:
            attrs['colors'] = data[:, 3:6]
        return attrs
    with data:
        if 'points' not in data.files:
            raise PCLIOError(f'{path} has no "points" array (found {data.files})')
        return {key: data[key] for key in data.files}


def _check_attrs(attrs, path):
    """Loader arrays must be Nx3 (points may be wider) and agree on N"""
    if 'records' in attrs:
        return
    points = np.asarray(attrs['points'])
    if points.ndim != 2 or points.shape[1] < 3:
        raise PCLIOError(f'{path}: points must be an Nx3 (or wider) array, got shape {points.shape}')
    for key in ('colors', 'normals'):
        values = attrs.get(key)
        if values is not None and np.shape(values) != (len(points), 3):
            raise PCLIOError(f'{path}: {key} must be a {len(points)}x3 array, got shape {np.shape(values)}')
    for key in ('intensity', 'label'):
        values = attrs.get(key)
        if values is not None and np.shape(values) != (len(points),):
            raise PCLIOError(f'{path}: {key} must hold {len(points)} values, got shape {np.shape(values)}')


def _to_records(attrs, point_type):
    """Fills a record array of ``point_type`` from loader attributes"""
    if 'records' in attrs:
        src = attrs['records']
        out = point_type.default_array(len(src))
        for fname in point_type.fields:
            if fname in src.dtype.names:
                out[fname] = src[fname]
        return out
    points = np.asarray(attrs['points'], dtype=np.float64)
    out = point_type.default_array(len(points))
    for axis, fname in enumerate(('x', 'y', 'z')):
        if fname in point_type.fields:
            out[fname] = points[:, axis]
    colors = attrs.get('colors')
    if colors is not None and 'r' in point_type.fields:
        colors = np.asarray(colors, dtype=np.float64)
        if colors.size and colors.max() <= 1.0:
            colors = colors * 255.0
        for axis, fname in enumerate(('r', 'g', 'b')):
            out[fname] = np.clip(np.rint(colors[:, axis]), 0, 255)
    normals = attrs.get('normals')
    if normals is not None and 'normal_x' in point_type.fields:
        for axis, fname in enumerate(('normal_x', 'normal_y', 'normal_z')):
            out[fname] = normals[:, axis]
    for fname in ('intensity', 'label'):
        if attrs.get(fname) is not None and fname in point_type.fields:
            out[fname] = attrs[fname]
    return out


def load(path, cloud):
    """
    Loads ``path`` into ``cloud``. The cloud is only modified once the
        file has been read completely; any failure raises PCLIOError.

    Returns:
        int: number of points loaded
    """
    if not path:
        raise PCLIOError('empty file path')
    path = os.fspath(path)
    if not os.path.isfile(path):
        raise PCLIOError(f'no such file: {path}')
    ext = os.path.splitext(path)[1].lower()
    pcd_exts = list_if(get_setting('io', 'pcd_extensions', DEFAULT_PCD_EXTENSIONS))
    las_exts = list_if(get_setting('io', 'las_extensions', DEFAULT_LAS_EXTENSIONS))
    np_exts = list_if(get_setting('io', 'numpy_extensions', DEFAULT_NUMPY_EXTENSIONS))
    try:
        if ext in pcd_exts:
            attrs = _read_o3d(path)
        elif ext in las_exts:
            attrs = _read_las(path)
        elif ext in np_exts:
            attrs = _read_numpy(path)
        else:
            raise PCLIOError(f'unsupported file extension {ext!r} for {path}')
    except PCLIOError:
        raise
    except (OSError, ValueError, RuntimeError) as err:
        raise PCLIOError(f'failed to read {path}: {err}') from err

    _check_attrs(attrs, path)
    try:
        records = _to_records(attrs, cloud.point_type)
    except (ValueError, TypeError) as err:
        raise PCLIOError(f'failed to convert {path}: {err}') from err
    if len(records) == 0:
        raise PCLIOError(f'{path} contained no points')
    cloud.points = records
    cloud.width, cloud.height = len(records), 1
    cloud.is_dense = bool(np.isfinite(cloud.xyz()).all()) if cloud.point_type.has_xyz else True
    log.info(f'loaded {len(records)} points from {path}')
    return len(records)
