"""
pcl::RangeImage wrappers. A range image is itself a cloud of
PointWithRange, so the cloud accessors (len, width, points, ...) apply.
"""

from logging import getLogger

import numpy as np

from ..binding import defconstructor, defpcltype, defptrconstructor, deref
from ..native import CoordinateFrame, deg2rad
from ..set_config import get_setting
from .point_cloud import PointCloudMethods

log = getLogger(__name__)

CAMERA_FRAME = CoordinateFrame.CAMERA_FRAME
LASER_FRAME = CoordinateFrame.LASER_FRAME


class RangeImageMethods:

    def get_point(self, x, y):
        return deref(self).get_point(x, y)

    def is_valid(self, x, y) -> bool:
        return deref(self).is_valid(x, y)


RangeImagePtr, RangeImageVal = defpcltype("RangeImage", "pcl::RangeImage",
                                          bases=(RangeImageMethods, PointCloudMethods))
RangeImage = RangeImagePtr

defptrconstructor(RangeImage, "", "pcl::RangeImage")
defconstructor(RangeImageVal, "", "pcl::RangeImage")


def _angle_setting(key, default):
    return float(deg2rad(get_setting('range_image', key, default, cast=float)))


def create_from_point_cloud(range_image, cloud,
                            angular_resolution=None,
                            max_angle_width=None,
                            max_angle_height=None,
                            sensor_pose=None,
                            coordinate_frame=CAMERA_FRAME,
                            noise_level=None,
                            min_range=None,
                            border_size=None):
    """
    Projects ``cloud`` onto ``range_image`` (pcl::RangeImage::createFromPointCloud).

    Args:
        range_image: a RangeImage wrapper, overwritten
        cloud: any point cloud wrapper whose points have x, y, z
        angular_resolution (float | tuple, optional): radians per pixel,
            or an ``(x, y)`` pair. Defaults to [range_image] angular_resolution_deg.
        max_angle_width (float, optional): horizontal field of view in radians.
        max_angle_height (float, optional): vertical field of view in radians.
        sensor_pose (array, optional): 4x4 pose of the sensor. Defaults to identity.
        coordinate_frame (CoordinateFrame, optional): CAMERA_FRAME or LASER_FRAME.
        noise_level (float, optional): points within this distance of the
            nearest one are averaged into a pixel.
        min_range (float, optional): closer points are ignored.
        border_size (int, optional): unobserved pixels kept around the crop.

    Returns:
        the range image wrapper
    """
    if angular_resolution is None:
        angular_resolution = _angle_setting('angular_resolution_deg', 0.5)
    if np.ndim(angular_resolution) == 0:
        res_x = res_y = angular_resolution
    else:
        res_x, res_y = angular_resolution
    if max_angle_width is None:
        max_angle_width = _angle_setting('max_angle_width_deg', 360.0)
    if max_angle_height is None:
        max_angle_height = _angle_setting('max_angle_height_deg', 180.0)
    if sensor_pose is None:
        sensor_pose = np.eye(4)
    if noise_level is None:
        noise_level = get_setting('range_image', 'noise_level', 0.0, cast=float)
    if min_range is None:
        min_range = get_setting('range_image', 'min_range', 0.0, cast=float)
    if border_size is None:
        border_size = get_setting('range_image', 'border_size', 0, cast=int)

    deref(range_image).create_from_point_cloud(deref(cloud), float(res_x), float(res_y),
                                               float(max_angle_width), float(max_angle_height),
                                               sensor_pose, CoordinateFrame(coordinate_frame),
                                               float(noise_level), float(min_range), int(border_size))
    return range_image


def get_angular_resolution(range_image):
    """Horizontal angular resolution in radians"""
    return deref(range_image).angular_resolution_x


def get_angular_resolution_x(range_image):
    return deref(range_image).angular_resolution_x


def get_angular_resolution_y(range_image):
    return deref(range_image).angular_resolution_y


def set_angular_resolution(range_image, angular_resolution_x, angular_resolution_y=None):
    deref(range_image).set_angular_resolution(angular_resolution_x, angular_resolution_y)


def get_point(range_image, x, y):
    return deref(range_image).get_point(x, y)


def is_valid(range_image, x, y) -> bool:
    return deref(range_image).is_valid(x, y)


def is_observed(range_image, x, y) -> bool:
    return deref(range_image).is_observed(x, y)


def get_min_max_ranges(range_image):
    """(min, max) over pixels holding a finite range"""
    return deref(range_image).get_min_max_ranges()


def get_image_offsets(range_image):
    ri = deref(range_image)
    return ri.image_offset_x, ri.image_offset_y


def get_image_point(range_image, point):
    return deref(range_image).get_image_point(point)
