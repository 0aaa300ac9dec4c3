from __future__ import annotations

import numpy as np
import open3d as o3d
import pytest

from pcl_common.binding import use_count
from pcl_common.common import (
    PointCloud,
    PointCloudVal,
    PointXYZ,
    PointXYZI,
    PointXYZRGBA,
    load,
)
from pcl_common.errors import PCLIOError


@pytest.fixture
def sample_points():
    return np.array([
        [0.0, 0.0, 0.0],
        [1.0, 0.0, 0.5],
        [0.5, 1.0, 1.0],
        [0.5, 0.5, 1.5],
    ])


@pytest.fixture
def npy_file(tmp_path, sample_points):
    path = tmp_path / "cloud.npy"
    np.save(path, sample_points)
    return path


def test_load_npy(npy_file, sample_points):
    cloud = PointCloud[PointXYZ]()
    assert load(str(npy_file), cloud) == 4
    assert len(cloud) == 4
    assert cloud.width == 4 and cloud.height == 1
    assert cloud.is_dense
    np.testing.assert_allclose(cloud.xyz(), sample_points)


def test_load_npz_with_intensity(tmp_path, sample_points):
    path = tmp_path / "cloud.npz"
    np.savez(path, points=sample_points, intensity=np.arange(4, dtype=np.float32))
    cloud = PointCloud[PointXYZI]()
    load(path, cloud)
    np.testing.assert_allclose(cloud.points["intensity"], [0, 1, 2, 3])


def test_load_marks_non_finite_clouds(tmp_path, sample_points):
    sample_points[1, 0] = np.nan
    path = tmp_path / "holes.npy"
    np.save(path, sample_points)
    cloud = PointCloud[PointXYZ]()
    load(path, cloud)
    assert not cloud.is_dense


def test_load_ply(tmp_path, sample_points):
    pcd = o3d.geometry.PointCloud()
    pcd.points = o3d.utility.Vector3dVector(sample_points)
    pcd.colors = o3d.utility.Vector3dVector(np.tile([1.0, 0.0, 0.0], (4, 1)))
    path = tmp_path / "cloud.ply"
    o3d.io.write_point_cloud(str(path), pcd)
    cloud = PointCloud[PointXYZRGBA]()
    assert load(path, cloud) == 4
    np.testing.assert_allclose(cloud.xyz(), sample_points, atol=1e-6)
    assert cloud[0].r == 255
    assert cloud[0].a == 255


@pytest.mark.parametrize("cloud_type", [
    pytest.param(PointCloud, id="ptr"),
    pytest.param(PointCloudVal, id="val"),
])
def test_path_constructor(cloud_type, npy_file):
    cloud = cloud_type[PointXYZ](npy_file)
    assert len(cloud) == 4
    if cloud.shared:
        assert use_count(cloud) == 1


def test_empty_path():
    with pytest.raises(PCLIOError):
        load("", PointCloud[PointXYZ]())


def test_missing_file(tmp_path):
    with pytest.raises(PCLIOError, match="no such file"):
        PointCloud[PointXYZ](str(tmp_path / "missing.pcd"))


def test_unsupported_extension(tmp_path):
    path = tmp_path / "cloud.txt"
    path.write_text("0 0 0\n")
    with pytest.raises(PCLIOError, match="unsupported"):
        load(path, PointCloud[PointXYZ]())


def test_failed_load_leaves_cloud_untouched(tmp_path):
    path = tmp_path / "broken.npy"
    path.write_bytes(b"not a numpy file")
    cloud = PointCloud[PointXYZ]()
    cloud.append(PointXYZ(1, 2, 3))
    with pytest.raises(PCLIOError):
        load(path, cloud)
    assert len(cloud) == 1
    assert cloud[0].z == 3.0


def test_wrong_array_shape(tmp_path):
    path = tmp_path / "flat.npy"
    np.save(path, np.arange(5.0))
    with pytest.raises(PCLIOError):
        load(path, PointCloud[PointXYZ]())


@pytest.mark.parametrize("arrays", [
    pytest.param({"points": np.zeros((3, 2))}, id="narrow_points"),
    pytest.param({"points": np.zeros((3, 3)), "colors": np.zeros((3, 2))}, id="narrow_colors"),
    pytest.param({"points": np.zeros((3, 3)), "normals": np.zeros((2, 3))}, id="short_normals"),
    pytest.param({"points": np.zeros((3, 3)), "intensity": np.zeros(4)}, id="long_intensity"),
])
def test_malformed_npz(tmp_path, arrays):
    path = tmp_path / "malformed.npz"
    np.savez(path, **arrays)
    cloud = PointCloud[PointXYZRGBA]()
    with pytest.raises(PCLIOError):
        load(path, cloud)
    assert len(cloud) == 0
