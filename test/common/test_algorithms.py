from __future__ import annotations

import math

import numpy as np
import pytest

from pcl_common.common import (
    PointCloud,
    PointIndices,
    PointXYZ,
    PointXYZRGBA,
    StdVector,
    compute_3d_centroid,
    deg2rad,
    get_transformation,
    get_translation_and_euler_angles,
    rad2deg,
    remove_nan_from_point_cloud,
    transform_point_cloud,
)
from pcl_common.errors import NativeError

nan = float("nan")


def make_cloud(coords, point_type=PointXYZ):
    cloud = PointCloud[point_type]()
    for xyz in coords:
        cloud.append(point_type(*xyz))
    return cloud


@pytest.fixture
def cloud_with_nans():
    coords = [
        (0.0, 0.0, 0.0),
        (nan, 1.0, 1.0),
        (2.0, 2.0, 2.0),
        (3.0, nan, 3.0),
        (4.0, 4.0, 4.0),
        (5.0, 5.0, math.inf),
    ]
    cloud = make_cloud(coords)
    cloud.is_dense = False
    return cloud


def test_deg2rad():
    assert deg2rad(180.0) == pytest.approx(math.pi)
    assert rad2deg(math.pi / 2) == pytest.approx(90.0)


def test_remove_nan_indices_only(cloud_with_nans):
    indices = StdVector["int"]()
    remove_nan_from_point_cloud(cloud_with_nans, indices)
    assert list(indices) == [0, 2, 4]
    assert len(cloud_with_nans) == 6


def test_remove_nan_to_new_cloud(cloud_with_nans):
    out = PointCloud[PointXYZ]()
    indices = StdVector["int"]()
    remove_nan_from_point_cloud(cloud_with_nans, out, indices)
    assert len(out) == len(cloud_with_nans) - 3
    assert out.width == 3 and out.height == 1
    assert out.is_dense
    assert list(indices) == sorted(indices)
    np.testing.assert_array_equal(out.points["x"], [0.0, 2.0, 4.0])


def test_remove_nan_in_place_with_point_indices(cloud_with_nans):
    indices = PointIndices()
    remove_nan_from_point_cloud(cloud_with_nans, cloud_with_nans, indices)
    assert len(cloud_with_nans) == 3
    np.testing.assert_array_equal(indices.indices, [0, 2, 4])


def test_remove_nan_scans_dense_clouds():
    cloud = make_cloud([(0, 0, 0), (nan, 0, 0)])
    assert cloud.is_dense
    indices = StdVector["int"]()
    remove_nan_from_point_cloud(cloud, indices)
    assert list(indices) == [0]


def test_remove_nan_argument_checks(cloud_with_nans):
    with pytest.raises(TypeError):
        remove_nan_from_point_cloud(cloud_with_nans)
    with pytest.raises(NativeError):
        remove_nan_from_point_cloud(cloud_with_nans, StdVector["double"]())
    with pytest.raises(NativeError):
        remove_nan_from_point_cloud(cloud_with_nans, PointCloud[PointXYZRGBA](), StdVector["int"]())


def test_compute_3d_centroid():
    cloud = make_cloud([(0, 0, 0), (2, 4, 6), (4, 8, 12)])
    centroid = np.zeros(4)
    assert compute_3d_centroid(cloud, centroid) == 3
    np.testing.assert_allclose(centroid, [2.0, 4.0, 6.0, 1.0])


def test_compute_3d_centroid_skips_invalid(cloud_with_nans):
    centroid = [0.0] * 4
    assert compute_3d_centroid(cloud_with_nans, centroid) == 3
    assert centroid == pytest.approx([2.0, 2.0, 2.0, 1.0])


def test_compute_3d_centroid_empty():
    with pytest.raises(NativeError):
        compute_3d_centroid(PointCloud[PointXYZ](), np.zeros(4))


def test_compute_3d_centroid_bad_output():
    cloud = make_cloud([(1, 1, 1)])
    with pytest.raises(NativeError):
        compute_3d_centroid(cloud, np.zeros(2))


def test_get_transformation_round_trip():
    transform = get_transformation(1.0, 2.0, 3.0, 0.1, 0.2, 0.3)
    assert transform.shape == (4, 4)
    np.testing.assert_allclose(transform[3], [0, 0, 0, 1])
    values = get_translation_and_euler_angles(transform)
    np.testing.assert_allclose(values, [1.0, 2.0, 3.0, 0.1, 0.2, 0.3], atol=1e-6)


def test_transform_point_cloud_translation():
    cloud = make_cloud([(0, 0, 0), (1, 1, 1)])
    out = PointCloud[PointXYZ]()
    transform = np.eye(4)
    transform[:3, 3] = [1, 2, 3]
    transform_point_cloud(cloud, out, transform)
    np.testing.assert_allclose(out.xyz(), [[1, 2, 3], [2, 3, 4]])
    np.testing.assert_allclose(cloud.xyz(), [[0, 0, 0], [1, 1, 1]])


def test_transform_point_cloud_in_place_rotation():
    cloud = make_cloud([(1, 0, 0)])
    rotation = get_transformation(0, 0, 0, 0, 0, math.pi / 2)
    transform_point_cloud(cloud, cloud, rotation[:3, :3])
    np.testing.assert_allclose(cloud.xyz(), [[0, 1, 0]], atol=1e-6)


def test_transform_keeps_other_fields_and_nans():
    cloud = make_cloud([(0, 0, 0), (nan, 0, 0)], PointXYZRGBA)
    cloud[0, "r"] = 200
    cloud.is_dense = False
    out = PointCloud[PointXYZRGBA]()
    transform_point_cloud(cloud, out, np.eye(3, 4) + np.array([[0, 0, 0, 1]] * 3))
    assert out[0].x == 1.0
    assert out[0].r == 200
    assert math.isnan(out[1].x)


def test_transform_rejects_bad_matrix():
    cloud = make_cloud([(0, 0, 0)])
    with pytest.raises(NativeError):
        transform_point_cloud(cloud, cloud, np.eye(2))
    with pytest.raises(NativeError):
        transform_point_cloud(cloud, PointCloud[PointXYZRGBA](), np.eye(4))
