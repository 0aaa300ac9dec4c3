"""
Native layer: numpy implementations of the PCL common types and routines,
looked up by their C++ names.
"""

__version__ = "0.1.0"

from logging import getLogger

from ..errors import BindingError
from .cloud import Header, NativePointCloud, copy_point_cloud
from .common import (
    compute_3d_centroid,
    deg2rad,
    get_transformation,
    get_translation_and_euler_angles,
    rad2deg,
    remove_nan_from_point_cloud,
    remove_nan_indices,
    to_affine,
    transform_point_cloud,
)
from .containers import (
    SCALAR_TYPES,
    NativeCorrespondence,
    NativeModelCoefficients,
    NativePCLBase,
    NativePCLPointCloud2,
    NativePointIndices,
    NativeVector,
    from_pcl_point_cloud2,
    native_correspondences,
    to_pcl_point_cloud2,
)
from .cxxtypes import CxxType, parse_args, parse_cxx_type
from .io import load
from .point_types import POINT_TYPES, Point, PointType, get_point_type
from .range_image import CoordinateFrame, NativeRangeImage
from .smart_ptr import SharedPtr, make_shared

log = getLogger(__name__)

# C++ name -> (factory, number of template parameters)
NATIVE_TYPES = {}


def register_native_type(cxxname, factory, template_params=0):
    """
    Makes a native type constructible by name. Template factories must
        provide ``instantiate(*template_args)`` returning a constructor.
    """
    if template_params and not hasattr(factory, 'instantiate'):
        raise BindingError(f'{cxxname} is a template but {factory!r} has no instantiate()')
    NATIVE_TYPES[cxxname] = (factory, template_params)
    return factory


register_native_type('pcl::PointCloud', NativePointCloud, 1)
register_native_type('pcl::PCLBase', NativePCLBase, 1)
register_native_type('std::vector', NativeVector, 1)
register_native_type('pcl::RangeImage', NativeRangeImage)
register_native_type('pcl::PCLPointCloud2', NativePCLPointCloud2)
register_native_type('pcl::Correspondence', NativeCorrespondence)
register_native_type('pcl::Correspondences', native_correspondences)
register_native_type('pcl::ModelCoefficients', NativeModelCoefficients)
register_native_type('pcl::PointIndices', NativePointIndices)
for _point_type in POINT_TYPES.values():
    register_native_type(_point_type.cxxname, _point_type)


def resolve_template_arg(arg: CxxType):
    """Point types resolve to their layout, scalars stay as names, other types to their factory"""
    if arg.name in SCALAR_TYPES and not arg.args:
        return arg.name
    if arg.name.startswith('pcl::') and arg.name[len('pcl::'):] in POINT_TYPES:
        return get_point_type(arg.name)
    return resolve(arg)


def resolve(cxxtype):
    """
    Returns a constructor for the native type spelled ``cxxtype``,
        e.g. ``"pcl::PointCloud<pcl::PointXYZ>"``.
    """
    if isinstance(cxxtype, str):
        cxxtype = parse_cxx_type(cxxtype)
    if cxxtype.name not in NATIVE_TYPES:
        raise BindingError(f'unknown native type {cxxtype.name!r}')
    factory, n_params = NATIVE_TYPES[cxxtype.name]
    if len(cxxtype.args) != n_params:
        raise BindingError(f'{cxxtype.name} takes {n_params} template arguments, got {len(cxxtype.args)} in {cxxtype}')
    if not n_params:
        return factory
    args = [resolve_template_arg(arg) for arg in cxxtype.args]
    log.debug(f'instantiating {cxxtype}')
    return factory.instantiate(*args)


__all__ = [
    "CoordinateFrame",
    "CxxType",
    "Header",
    "NATIVE_TYPES",
    "NativeCorrespondence",
    "NativeModelCoefficients",
    "NativePCLBase",
    "NativePCLPointCloud2",
    "NativePointCloud",
    "NativePointIndices",
    "NativeRangeImage",
    "NativeVector",
    "POINT_TYPES",
    "Point",
    "PointType",
    "SharedPtr",
    "compute_3d_centroid",
    "copy_point_cloud",
    "deg2rad",
    "from_pcl_point_cloud2",
    "get_point_type",
    "get_transformation",
    "get_translation_and_euler_angles",
    "load",
    "make_shared",
    "parse_args",
    "parse_cxx_type",
    "rad2deg",
    "register_native_type",
    "remove_nan_from_point_cloud",
    "remove_nan_indices",
    "resolve",
    "to_affine",
    "to_pcl_point_cloud2",
    "transform_point_cloud",
]
