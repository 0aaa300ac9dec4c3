"""Typed wrappers of pcl/common: point types, clouds, containers and the range image."""

__version__ = "0.1.0"

from .point_types import *  # noqa: F401,F403
from .point_types import __all__ as _point_type_names
from .point_cloud import (
    PointCloud,
    PointCloudMethods,
    PointCloudPtr,
    PointCloudVal,
    convert,
    eltype,
    height,
    is_dense,
    is_organized,
    points,
    push,
    similar,
    size,
    width,
)
from .containers import (
    Correspondence,
    CorrespondencePtr,
    CorrespondenceVal,
    Correspondences,
    CorrespondencesPtr,
    CorrespondencesVal,
    ModelCoefficients,
    ModelCoefficientsPtr,
    ModelCoefficientsVal,
    PCLPointCloud2,
    PCLPointCloud2Ptr,
    PCLPointCloud2Val,
    PointIndices,
    PointIndicesPtr,
    PointIndicesVal,
    StdVector,
    StdVectorPtr,
    StdVectorVal,
    from_pcl_point_cloud2,
    to_pcl_point_cloud2,
)
from .algorithms import (
    compute_3d_centroid,
    deg2rad,
    get_transformation,
    get_translation_and_euler_angles,
    rad2deg,
    remove_nan_from_point_cloud,
    transform_point_cloud,
)
from .base import PCLBase, get_indices, get_input_cloud, set_indices, set_input_cloud
from .range_image import (
    CAMERA_FRAME,
    LASER_FRAME,
    CoordinateFrame,
    RangeImage,
    RangeImagePtr,
    RangeImageVal,
    create_from_point_cloud,
    get_angular_resolution,
    get_angular_resolution_x,
    get_angular_resolution_y,
    get_image_offsets,
    get_image_point,
    get_min_max_ranges,
    get_point,
    is_observed,
    is_valid,
    set_angular_resolution,
)
from .io import load
from .display import cloud_table

__all__ = [
    *_point_type_names,
    # point_cloud
    "PointCloud",
    "PointCloudMethods",
    "PointCloudPtr",
    "PointCloudVal",
    "convert",
    "eltype",
    "height",
    "is_dense",
    "is_organized",
    "points",
    "push",
    "similar",
    "size",
    "width",
    # containers
    "Correspondence",
    "CorrespondencePtr",
    "CorrespondenceVal",
    "Correspondences",
    "CorrespondencesPtr",
    "CorrespondencesVal",
    "ModelCoefficients",
    "ModelCoefficientsPtr",
    "ModelCoefficientsVal",
    "PCLPointCloud2",
    "PCLPointCloud2Ptr",
    "PCLPointCloud2Val",
    "PointIndices",
    "PointIndicesPtr",
    "PointIndicesVal",
    "StdVector",
    "StdVectorPtr",
    "StdVectorVal",
    "from_pcl_point_cloud2",
    "to_pcl_point_cloud2",
    # algorithms
    "compute_3d_centroid",
    "deg2rad",
    "get_transformation",
    "get_translation_and_euler_angles",
    "rad2deg",
    "remove_nan_from_point_cloud",
    "transform_point_cloud",
    # base
    "PCLBase",
    "get_indices",
    "get_input_cloud",
    "set_indices",
    "set_input_cloud",
    # range_image
    "CAMERA_FRAME",
    "LASER_FRAME",
    "CoordinateFrame",
    "RangeImage",
    "RangeImagePtr",
    "RangeImageVal",
    "create_from_point_cloud",
    "get_angular_resolution",
    "get_angular_resolution_x",
    "get_angular_resolution_y",
    "get_image_offsets",
    "get_image_point",
    "get_min_max_ranges",
    "get_point",
    "is_observed",
    "is_valid",
    "set_angular_resolution",
    # io
    "load",
    # display
    "cloud_table",
]
