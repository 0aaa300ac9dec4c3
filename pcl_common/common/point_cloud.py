"""
pcl::PointCloud wrappers.

The primary export is ``PointCloud`` (aliased to ``PointCloudPtr``), a
shared pointer to a native point cloud:

```python
cloud = PointCloud[PointXYZ]()          # empty
cloud = PointCloud[PointXYZRGBA](100, 200)  # width=100, height=200
```

``copy.copy`` aliases the native cloud (use_count + 1), ``copy.deepcopy``
duplicates its points.
"""

from logging import getLogger

from ..binding import defconstructor, defpcltype, defptrconstructor, deref
from ..native import copy_point_cloud
from ..native.point_types import Point

log = getLogger(__name__)


class PointCloudMethods:
    """Container protocol shared by every wrapper of a native point cloud"""

    def __len__(self):
        return deref(self).size()

    def __iter__(self):
        native = deref(self)
        for i in range(native.size()):
            yield native.at(i)

    def __getitem__(self, key):
        native = deref(self)
        if isinstance(key, tuple):
            i, name = key
            return native.at(i)[name]
        return native.at(key)

    def __setitem__(self, key, value):
        native = deref(self)
        if isinstance(key, tuple):
            i, name = key
            native.at(i)[name] = value
        else:
            native.set(key, value)

    def append(self, p: Point):
        deref(self).push_back(p)

    def extend(self, other):
        deref(self).extend(deref(other))

    @property
    def width(self) -> int:
        return deref(self).width

    @property
    def height(self) -> int:
        return deref(self).height

    @property
    def is_dense(self) -> bool:
        return deref(self).is_dense

    @is_dense.setter
    def is_dense(self, value):
        deref(self).is_dense = bool(value)

    @property
    def points(self):
        """Live structured array of the stored records"""
        return deref(self).points

    @property
    def header(self):
        return deref(self).header

    def is_organized(self) -> bool:
        return deref(self).is_organized()

    def xyz(self):
        return deref(self).xyz()

    def __repr__(self):
        native = deref(self)
        kind = 'Dereferenced native representation' if self.shared else 'Native representation'
        return f'{native.size()}-element {type(self).__name__}\n{kind}:\n{native}'


PointCloudPtr, PointCloudVal = defpcltype("PointCloud", "pcl::PointCloud", params=("T",),
                                          bases=(PointCloudMethods,))
PointCloud = PointCloudPtr

defptrconstructor(PointCloud, "", "pcl::PointCloud")
defptrconstructor(PointCloud, "w: int, h: int", "pcl::PointCloud")
defconstructor(PointCloudVal, "", "pcl::PointCloud")
defconstructor(PointCloudVal, "w: int, h: int", "pcl::PointCloud")


def size(cloud) -> int:
    """Number of stored points, read from the native cloud on every call"""
    return deref(cloud).size()


def width(cloud) -> int:
    return deref(cloud).width


def height(cloud) -> int:
    return deref(cloud).height


def is_dense(cloud) -> bool:
    return deref(cloud).is_dense


def is_organized(cloud) -> bool:
    return deref(cloud).is_organized()


def points(cloud):
    return deref(cloud).points


def eltype(cloud):
    """Point type stored in ``cloud``"""
    return deref(cloud).point_type


def push(cloud, p):
    deref(cloud).push_back(p)
    return cloud


def similar(cloud):
    """A new cloud of the same wrapper type and dimensions, default initialized"""
    return type(cloud)(width(cloud), height(cloud))


def convert(cloud_type, cloud):
    """
    Converts a point cloud to a different type of point cloud.
        Fields common to both layouts are copied, the others take their
        defaults.

    Example:
        ``xyz_cloud = convert(PointCloud[PointXYZ], rgb_cloud)``
    """
    if getattr(cloud_type, 'is_generic', True):
        raise TypeError(f'{cloud_type!r} must be a specialized point cloud type, e.g. PointCloud[PointXYZ]')
    cloud_out = cloud_type()
    copy_point_cloud(deref(cloud), deref(cloud_out))
    log.debug(f'converted {eltype(cloud)!r} cloud of {size(cloud)} points to {eltype(cloud_out)!r}')
    return cloud_out
