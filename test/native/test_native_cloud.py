from __future__ import annotations

import copy

import numpy as np
import pytest

from pcl_common import native
from pcl_common.errors import BindingError, NativeError, NativeIndexError
from pcl_common.native import NativePointCloud, copy_point_cloud, get_point_type

PointXYZ = get_point_type("PointXYZ")
PointXYZRGBA = get_point_type("PointXYZRGBA")
PointXYZI = get_point_type("PointXYZI")


@pytest.fixture
def xyz_cloud():
    cloud = NativePointCloud(PointXYZ)
    for i in range(5):
        cloud.push_back(PointXYZ(i, 2 * i, 3 * i))
    return cloud


def test_point_defaults():
    p = PointXYZRGBA()
    assert (p.x, p.y, p.z) == (0.0, 0.0, 0.0)
    assert p.a == 255
    assert p.r == p.g == p.b == 0


def test_point_fields_positional_and_keyword():
    p = PointXYZI(1, 2, intensity=7.5)
    assert p.x == 1.0 and p.y == 2.0 and p.z == 0.0
    assert p["intensity"] == 7.5
    with pytest.raises(TypeError):
        PointXYZ(1, 2, 3, 4)
    with pytest.raises(TypeError):
        PointXYZ(bogus=1)
    with pytest.raises(TypeError):
        PointXYZ(1, x=2)


def test_point_unknown_attribute():
    p = PointXYZ()
    with pytest.raises(AttributeError):
        p.intensity = 1


def test_point_isinstance():
    assert isinstance(PointXYZ(), PointXYZ)
    assert not isinstance(PointXYZ(), PointXYZI)


def test_point_copy_is_independent():
    p = PointXYZ(1, 2, 3)
    q = copy.copy(p)
    q.x = 10
    assert p.x == 1.0
    assert p != q
    assert p == PointXYZ(1, 2, 3)


def test_unknown_point_type():
    with pytest.raises(BindingError):
        get_point_type("PointXYZW")
    assert get_point_type("pcl::PointXYZ") is PointXYZ


def test_organized_construction():
    cloud = NativePointCloud(PointXYZ, 2, 3)
    assert cloud.size() == 6
    assert cloud.width == 2 and cloud.height == 3
    assert cloud.is_organized()
    assert cloud.is_dense
    assert cloud.at2d(1, 2) == PointXYZ()


def test_invalid_dimensions():
    with pytest.raises(NativeError):
        NativePointCloud(PointXYZ, -1, 2)


def test_push_back_grows_unorganized(xyz_cloud):
    assert xyz_cloud.size() == 5
    assert xyz_cloud.width == 5 and xyz_cloud.height == 1
    assert not xyz_cloud.is_organized()
    assert xyz_cloud.at(4).y == 8.0


def test_push_back_checks_type(xyz_cloud):
    with pytest.raises(NativeError):
        xyz_cloud.push_back(PointXYZI())
    with pytest.raises(NativeError):
        xyz_cloud.push_back((1, 2, 3))


def test_at_bounds(xyz_cloud):
    with pytest.raises(NativeIndexError):
        xyz_cloud.at(5)
    with pytest.raises(NativeIndexError):
        xyz_cloud.at(-1)
    with pytest.raises(IndexError):
        xyz_cloud.at(100)
    with pytest.raises(TypeError):
        xyz_cloud.at(1.0)


def test_at_writes_through(xyz_cloud):
    xyz_cloud.at(0).x = 42
    assert xyz_cloud.points["x"][0] == 42.0


def test_resize_and_clear(xyz_cloud):
    xyz_cloud.resize(7)
    assert xyz_cloud.size() == 7 and xyz_cloud.width == 7
    assert xyz_cloud.at(6) == PointXYZ()
    xyz_cloud.clear()
    assert xyz_cloud.empty()
    assert xyz_cloud.width == xyz_cloud.height == 0


def test_points_setter_checks_dtype(xyz_cloud):
    with pytest.raises(NativeError):
        xyz_cloud.points = np.zeros(3)


def test_clone_is_independent(xyz_cloud):
    other = xyz_cloud.clone()
    other.at(0).x = -1
    other.header.frame_id = "map"
    assert xyz_cloud.at(0).x == 0.0
    assert xyz_cloud.header.frame_id == ""


def test_copy_point_cloud_between_layouts(xyz_cloud):
    rgba = NativePointCloud(PointXYZRGBA)
    copy_point_cloud(xyz_cloud, rgba)
    assert rgba.size() == 5
    np.testing.assert_array_equal(rgba.xyz(), xyz_cloud.xyz())
    assert (rgba.points["a"] == 255).all()


def test_copy_point_cloud_with_indices(xyz_cloud):
    out = NativePointCloud(PointXYZ)
    copy_point_cloud(xyz_cloud, out, indices=[4, 0])
    assert out.width == 2 and out.height == 1
    np.testing.assert_array_equal(out.points["x"], [4.0, 0.0])
    with pytest.raises(NativeIndexError):
        copy_point_cloud(xyz_cloud, out, indices=[9])


def test_str_mentions_size(xyz_cloud):
    text = str(xyz_cloud)
    assert "points[]: 5" in text
    assert "width: 5" in text


def test_resolve_native_types():
    ctor = native.resolve("pcl::PointCloud<pcl::PointXYZ>")
    assert ctor().point_type is PointXYZ
    vec = native.resolve("std::vector<double>")(3)
    assert vec.size() == 3
    with pytest.raises(BindingError):
        native.resolve("pcl::Unknown")
    with pytest.raises(BindingError):
        native.resolve("pcl::PointCloud")
