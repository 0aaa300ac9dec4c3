"""
pcl::RangeImage: a spherical depth image built from a point cloud
"""

from enum import IntEnum
from logging import getLogger

import numpy as np

from ..errors import NativeError, NativeIndexError
from .cloud import NativePointCloud
from .common import to_affine
from .point_types import POINT_TYPES, Point

log = getLogger(__name__)


class CoordinateFrame(IntEnum):
    CAMERA_FRAME = 0
    LASER_FRAME = 1


def coordinate_frame_transformation(coordinate_frame):
    """Rotation taking the given frame convention to the camera convention (z forward)"""
    transformation = np.eye(4)
    if CoordinateFrame(coordinate_frame) == CoordinateFrame.LASER_FRAME:
        transformation[:3, :3] = [[0.0, 0.0, 1.0],
                                  [-1.0, 0.0, 0.0],
                                  [0.0, -1.0, 0.0]]
    return transformation


class NativeRangeImage(NativePointCloud):
    """
    A cloud of PointWithRange laid out as an image. Unobserved pixels
        carry NaN coordinates and a range of -inf.
    """

    cxxname = 'pcl::RangeImage'

    def __init__(self):
        super().__init__(POINT_TYPES['PointWithRange'])
        self.reset()

    @property
    def template_args(self):
        return ()

    def reset(self):
        self.is_dense = True
        self.width = self.height = 0
        self.points = self.point_type.default_array(0)
        self.to_range_image_system = np.eye(4)
        self.to_world_system = np.eye(4)
        self.set_angular_resolution(np.float32(np.pi / 360.0))
        self.image_offset_x = 0
        self.image_offset_y = 0

    def _unobserved(self, count):
        pts = self.point_type.default_array(count)
        for fname in ('x', 'y', 'z'):
            pts[fname] = np.nan
        pts['range'] = -np.inf
        return pts

    def set_angular_resolution(self, angular_resolution_x, angular_resolution_y=None):
        if angular_resolution_y is None:
            angular_resolution_y = angular_resolution_x
        if angular_resolution_x <= 0 or angular_resolution_y <= 0:
            raise NativeError('angular resolution must be positive')
        self.angular_resolution_x = np.float32(angular_resolution_x)
        self.angular_resolution_y = np.float32(angular_resolution_y)

    def create_from_point_cloud(self, cloud, angular_resolution_x, angular_resolution_y,
                                max_angle_width, max_angle_height, sensor_pose,
                                coordinate_frame, noise_level, min_range, border_size):
        if not cloud.point_type.has_xyz:
            raise NativeError(f'{cloud.point_type.name} has no coordinates')
        if border_size < 0:
            raise NativeError(f'border size must not be negative, got {border_size}')
        self.set_angular_resolution(angular_resolution_x, angular_resolution_y)
        res_x = float(self.angular_resolution_x)
        res_y = float(self.angular_resolution_y)

        width = int(np.floor(max_angle_width / res_x))
        height = int(np.floor(max_angle_height / res_y))
        full_width = int(np.floor(2.0 * np.pi / res_x))
        full_height = int(np.floor(np.pi / res_y))
        self.width, self.height = width, height
        self.image_offset_x = (full_width - width) // 2
        self.image_offset_y = (full_height - height) // 2
        self.is_dense = False

        self.to_world_system = to_affine(sensor_pose) @ coordinate_frame_transformation(coordinate_frame)
        self.to_range_image_system = np.linalg.inv(self.to_world_system)
        self.points = self._unobserved(width * height)

        log.info(f'projecting {cloud.size()} points into a {width}x{height} range image')
        bounds = self._do_z_buffer(cloud, noise_level, min_range)
        self._crop_image(border_size, *bounds)
        self._recalculate_3d_point_positions()
        return self

    def _do_z_buffer(self, cloud, noise_level, min_range):
        width, height = self.width, self.height
        ranges = self.points['range']

        xyz = cloud.xyz().astype(np.float64)
        xyz = xyz[np.isfinite(xyz).all(axis=1)]
        image_x, image_y, point_ranges = self._image_points(xyz)
        xs = np.rint(image_x).astype(np.int64)
        ys = np.rint(image_y).astype(np.int64)
        keep = (point_ranges >= min_range) & self._in_image(xs, ys)
        image_x, image_y, point_ranges = image_x[keep], image_y[keep], point_ranges[keep]
        xs, ys = xs[keep], ys[keep]
        if not len(xs):
            return height, -1, -1, width
        hit = ys * width + xs

        if noise_level == 0:
            nearest = np.full(width * height, np.inf)
            np.minimum.at(nearest, hit, point_ranges)
            counters = np.isfinite(nearest)
            ranges[counters] = nearest[counters]
        else:
            # averaging within the noise level depends on point order
            counters = np.zeros(width * height, dtype=np.int64)
            for pos, range_ in zip(hit, point_ranges):
                if counters[pos] == 0 or range_ < ranges[pos] - noise_level:
                    counters[pos] = 1
                    ranges[pos] = range_
                elif abs(range_ - ranges[pos]) <= noise_level:
                    counters[pos] += 1
                    ranges[pos] += (range_ - ranges[pos]) / counters[pos]
            counters = counters > 0

        # pixels no point hit take the nearest range of the points next to them
        all_x, all_y = [xs], [ys]
        neighbour = np.full(width * height, np.inf)
        floor_x, floor_y = np.floor(image_x).astype(np.int64), np.floor(image_y).astype(np.int64)
        ceil_x, ceil_y = np.ceil(image_x).astype(np.int64), np.ceil(image_y).astype(np.int64)
        for n_x, n_y in ((floor_x, floor_y), (floor_x, ceil_y), (ceil_x, floor_y), (ceil_x, ceil_y)):
            valid = self._in_image(n_x, n_y) & ~((n_x == xs) & (n_y == ys))
            np.minimum.at(neighbour, n_y[valid] * width + n_x[valid], point_ranges[valid])
            all_x.append(n_x[valid])
            all_y.append(n_y[valid])
        filled = ~counters & np.isfinite(neighbour)
        ranges[filled] = neighbour[filled]

        all_x, all_y = np.concatenate(all_x), np.concatenate(all_y)
        return int(all_y.min()), int(all_x.max()), int(all_y.max()), int(all_x.min())

    def _in_image(self, xs, ys):
        return (xs >= 0) & (xs < self.width) & (ys >= 0) & (ys < self.height)

    def _crop_image(self, border_size, top, right, bottom, left):
        if right < left or bottom < top:
            log.info('no point fell inside the range image, leaving it empty')
            self.width = self.height = 0
            self.points = self.point_type.default_array(0)
            return
        old_points = self.points.reshape(self.height, self.width)
        old_width, old_height = self.width, self.height
        top -= border_size
        right += border_size
        bottom += border_size
        left -= border_size
        new_width, new_height = right - left + 1, bottom - top + 1
        cropped = self._unobserved(new_width * new_height).reshape(new_height, new_width)
        src_top, src_left = max(top, 0), max(left, 0)
        src_bottom, src_right = min(bottom, old_height - 1), min(right, old_width - 1)
        cropped[src_top - top:src_bottom - top + 1, src_left - left:src_right - left + 1] = \
            old_points[src_top:src_bottom + 1, src_left:src_right + 1]
        self.image_offset_x += left
        self.image_offset_y += top
        self.width, self.height = new_width, new_height
        self.points = cropped.reshape(-1)

    def _recalculate_3d_point_positions(self):
        if not self.width or not self.height:
            return
        pts = self.points
        ys, xs = np.divmod(np.arange(self.width * self.height), self.width)
        observed = np.isfinite(pts['range'])
        world = self._calculate_3d_points(xs[observed], ys[observed], pts['range'][observed].astype(np.float64))
        for axis, fname in enumerate(('x', 'y', 'z')):
            column = pts[fname]
            column[observed] = world[:, axis]

    def _image_points(self, xyz):
        local = xyz @ self.to_range_image_system[:3, :3].T + self.to_range_image_system[:3, 3]
        ranges = np.linalg.norm(local, axis=1)
        with np.errstate(invalid='ignore', divide='ignore'):
            angle_x = np.arctan2(local[:, 0], local[:, 2])
            angle_y = np.arcsin(np.clip(local[:, 1] / ranges, -1.0, 1.0))
        angle_y = np.where(ranges > 0, angle_y, 0.0)
        image_x = (angle_x * np.cos(angle_y) + np.pi) / float(self.angular_resolution_x) - self.image_offset_x
        image_y = (angle_y + 0.5 * np.pi) / float(self.angular_resolution_y) - self.image_offset_y
        return image_x, image_y, ranges

    def _angles_from_image_points(self, image_x, image_y):
        angle_y = (np.asarray(image_y, dtype=np.float64) + self.image_offset_y) * float(self.angular_resolution_y) - 0.5 * np.pi
        cos_y = np.cos(angle_y)
        with np.errstate(invalid='ignore', divide='ignore'):
            angle_x = np.where(cos_y == 0.0, 0.0,
                               ((np.asarray(image_x, dtype=np.float64) + self.image_offset_x)
                                * float(self.angular_resolution_x) - np.pi) / cos_y)
        return angle_x, angle_y

    def _calculate_3d_points(self, image_x, image_y, ranges):
        angle_x, angle_y = self._angles_from_image_points(image_x, image_y)
        cos_y = np.cos(angle_y)
        local = np.stack([ranges * np.sin(angle_x) * cos_y,
                          ranges * np.sin(angle_y),
                          ranges * np.cos(angle_x) * cos_y], axis=-1)
        return local @ self.to_world_system[:3, :3].T + self.to_world_system[:3, 3]

    def get_image_point(self, point):
        """(image_x, image_y, range) of a world point"""
        image_x, image_y, ranges = self._image_points(np.asarray(point, dtype=np.float64).reshape(1, 3))
        return float(image_x[0]), float(image_y[0]), float(ranges[0])

    def calculate_3d_point(self, image_x, image_y, range_):
        return self._calculate_3d_points(np.atleast_1d(image_x), np.atleast_1d(image_y),
                                         np.atleast_1d(float(range_)))[0]

    def is_in_image(self, x, y):
        return 0 <= x < self.width and 0 <= y < self.height

    def get_point(self, x, y):
        if not self.is_in_image(x, y):
            raise NativeIndexError(f'({x}, {y}) outside a {self.width}x{self.height} range image')
        i = y * self.width + x
        return Point(self.point_type, self.points[i:i + 1].reshape(()))

    def is_valid(self, x, y):
        return self.is_in_image(x, y) and bool(np.isfinite(self.points['range'][y * self.width + x]))

    def is_observed(self, x, y):
        if not self.is_in_image(x, y):
            return False
        value = self.points['range'][y * self.width + x]
        return not (np.isinf(value) and value < 0)

    def get_min_max_ranges(self):
        ranges = self.points['range']
        finite = ranges[np.isfinite(ranges)]
        if finite.size == 0:
            return float('inf'), float('-inf')
        return float(finite.min()), float(finite.max())

    def clone(self):
        other = super().clone()
        other.to_range_image_system = self.to_range_image_system.copy()
        other.to_world_system = self.to_world_system.copy()
        return other
