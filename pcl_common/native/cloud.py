"""
The native point cloud container (pcl::PointCloud<PointT>)

Points are stored in a growable numpy structured array. ``points`` is a
live view of the stored records; it is invalidated (detached) when the
container grows past its capacity, like an iterator into a std::vector.
"""

from dataclasses import dataclass, field

import numpy as np

from ..errors import NativeError, NativeIndexError
from .point_types import Point, PointType


@dataclass
class Header:
    seq: int = 0
    stamp: int = 0
    frame_id: str = ''


class NativePointCloud:
    """pcl::PointCloud<PointT>"""

    cxxname = 'pcl::PointCloud'

    def __init__(self, point_type: PointType, width: int = 0, height: int = 0):
        if not isinstance(point_type, PointType):
            raise NativeError(f'{point_type!r} is not a point type')
        if width < 0 or height < 0:
            raise NativeError(f'invalid cloud dimensions {width}x{height}')
        self.point_type = point_type
        self.header = Header()
        self.width = int(width)
        self.height = int(height)
        self.is_dense = True
        self.sensor_origin = np.zeros(4, dtype=np.float32)
        self.sensor_orientation = np.array([1, 0, 0, 0], dtype=np.float32)  # w, x, y, z
        self._size = self.width * self.height
        self._buf = point_type.default_array(self._size)

    @classmethod
    def instantiate(cls, point_type):
        """Binds the template parameter, returning a constructor"""
        def _construct(*args):
            return cls(point_type, *args)
        _construct.__qualname__ = f'{cls.__name__}<{point_type.name}>'
        return _construct

    @property
    def template_args(self):
        return (self.point_type,)

    @property
    def points(self):
        return self._buf[:self._size]

    @points.setter
    def points(self, values):
        values = np.asarray(values)
        if values.dtype != self.point_type.dtype:
            raise NativeError(f'cannot assign {values.dtype} records to a cloud of {self.point_type.name}')
        self._buf = np.array(values, dtype=self.point_type.dtype).reshape(-1)
        self._size = len(self._buf)

    def size(self):
        return self._size

    def empty(self):
        return self._size == 0

    def is_organized(self):
        return self.height > 1

    def _reserve(self, capacity):
        if capacity <= len(self._buf):
            return
        new_buf = self.point_type.default_array(max(capacity, 2 * len(self._buf), 8))
        new_buf[:self._size] = self._buf[:self._size]
        self._buf = new_buf

    def _check_record(self, p):
        if not isinstance(p, Point):
            raise NativeError(f'expected a {self.point_type.name} record, got {type(p).__name__}')
        if p.point_type is not self.point_type:
            raise NativeError(f'cannot store a {p.point_type.name} in a cloud of {self.point_type.name}')

    def push_back(self, p):
        self._check_record(p)
        self._reserve(self._size + 1)
        self._buf[self._size] = p.data
        self._size += 1
        self.width = self._size
        self.height = 1

    def extend(self, other):
        """operator+= : appends every point of ``other``"""
        if other.point_type is not self.point_type:
            raise NativeError(f'cannot concatenate {other.point_type.name} onto {self.point_type.name}')
        incoming = other.points.copy()
        self._reserve(self._size + len(incoming))
        self._buf[self._size:self._size + len(incoming)] = incoming
        self._size += len(incoming)
        self.width = self._size
        self.height = 1
        self.is_dense = self.is_dense and other.is_dense

    def resize(self, n):
        if n < 0:
            raise NativeError(f'invalid size {n}')
        self._reserve(n)
        if n > self._size:
            self._buf[self._size:n] = self.point_type.default_array(n - self._size)
        self._size = n
        if self.width * self.height != n:
            self.width = n
            self.height = 1

    def clear(self):
        self._size = 0
        self.width = 0
        self.height = 0

    def _check_index(self, i):
        if isinstance(i, (bool, np.bool_)) or not isinstance(i, (int, np.integer)):
            raise TypeError(f'point index must be an integer, got {type(i).__name__}')
        if not 0 <= i < self._size:
            raise NativeIndexError(f'index {i} out of range for a cloud of {self._size} points')
        return int(i)

    def at(self, i):
        i = self._check_index(i)
        return Point(self.point_type, self._buf[i:i + 1].reshape(()))

    def at2d(self, column, row):
        """Organized access, ``at(column, row)``"""
        if self.height <= 1:
            raise NativeError('cloud is not organized')
        if not (0 <= column < self.width and 0 <= row < self.height):
            raise NativeIndexError(f'({column}, {row}) outside a {self.width}x{self.height} cloud')
        return self.at(row * self.width + column)

    def set(self, i, p):
        i = self._check_index(i)
        self._check_record(p)
        self._buf[i] = p.data

    def xyz(self):
        """Nx3 float32 copy of the coordinates"""
        if not self.point_type.has_xyz:
            raise NativeError(f'{self.point_type.name} has no coordinates')
        pts = self.points
        return np.stack([pts['x'], pts['y'], pts['z']], axis=-1)

    def finite_mask(self):
        xyz = self.xyz()
        return np.isfinite(xyz).all(axis=1)

    def clone(self):
        other = type(self).__new__(type(self))
        other.__dict__.update(self.__dict__)
        other.header = Header(self.header.seq, self.header.stamp, self.header.frame_id)
        other.sensor_origin = self.sensor_origin.copy()
        other.sensor_orientation = self.sensor_orientation.copy()
        other._buf = self._buf[:self._size].copy()
        return other

    def __deepcopy__(self, memo):
        return self.clone()

    def destroy(self):
        self._buf = self.point_type.default_array(0)
        self._size = 0

    def __str__(self):
        origin = ' '.join(f'{v:g}' for v in self.sensor_origin)
        orientation = ' '.join(f'{v:g}' for v in self.sensor_orientation)
        return (f'header:\n  seq: {self.header.seq}\n  stamp: {self.header.stamp}\n'
                f'  frame_id: {self.header.frame_id}\n'
                f'points[]: {self._size}\nwidth: {self.width}\nheight: {self.height}\n'
                f'is_dense: {int(self.is_dense)}\n'
                f'sensor origin (xyz): [{origin}] / orientation (wxyz): [{orientation}]\n')


def copy_point_cloud(cloud_in, cloud_out, indices=None):
    """
    pcl::copyPointCloud. Fields present in both layouts are copied by name;
        fields only present in the output layout keep their defaults.
        ``cloud_in`` and ``cloud_out`` may be the same object.
    """
    src = cloud_in.points
    if indices is not None:
        idx = np.asarray(list(indices), dtype=np.int64)
        if idx.size and (idx.min() < 0 or idx.max() >= len(src)):
            raise NativeIndexError(f'index list references points outside a cloud of {len(src)}')
        src = src[idx]
    out_type = cloud_out.point_type
    if cloud_in.point_type is out_type:
        converted = src.copy()
    else:
        converted = out_type.default_array(len(src))
        for fname in out_type.fields:
            if fname in cloud_in.point_type.fields:
                converted[fname] = src[fname]
    header = Header(cloud_in.header.seq, cloud_in.header.stamp, cloud_in.header.frame_id)
    width, height, is_dense = cloud_in.width, cloud_in.height, cloud_in.is_dense
    origin, orientation = cloud_in.sensor_origin.copy(), cloud_in.sensor_orientation.copy()
    cloud_out._buf = converted
    cloud_out._size = len(converted)
    cloud_out.header = header
    if indices is None:
        cloud_out.width, cloud_out.height = width, height
    else:
        cloud_out.width, cloud_out.height = len(converted), 1
    cloud_out.is_dense = is_dense
    cloud_out.sensor_origin = origin
    cloud_out.sensor_orientation = orientation
    return cloud_out
