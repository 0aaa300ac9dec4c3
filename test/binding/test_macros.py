from __future__ import annotations

import pytest

from pcl_common.binding import (
    boost_shared_ptr,
    defconstructor,
    defpcltype,
    defptrconstructor,
    deref,
    register_constructor,
    use_count,
)
from pcl_common.common import PointCloud, PointCloudVal, PointXYZ
from pcl_common.errors import BindingError


@pytest.fixture
def indices_family():
    return defpcltype("TestIndices", "pcl::PointIndices")


def test_defpcltype_names_and_preference(indices_family):
    ptr, val = indices_family
    assert ptr.__name__ == "TestIndicesPtr"
    assert val.__name__ == "TestIndicesVal"
    assert indices_family.preferred is ptr
    assert ptr.cxxname == val.cxxname == "pcl::PointIndices"
    assert ptr.__module__ == __name__
    assert not ptr.is_generic


def test_defpcltype_generic():
    ptr, _ = defpcltype("TestCloud", "pcl::PointCloud", params=("T",))
    assert ptr.is_generic
    assert ptr.cxxname == "pcl::PointCloud<$T>"
    assert ptr[PointXYZ].cxxname == "pcl::PointCloud<pcl::PointXYZ>"


def test_defpcltype_explicit_placeholders():
    ptr, _ = defpcltype("TestVec", "std::vector<$T>", params=("T",))
    assert ptr["double"].cxxname == "std::vector<double>"


def test_defpcltype_unknown_native_type():
    with pytest.raises(BindingError):
        defpcltype("Nothing", "pcl::DoesNotExist")


@pytest.mark.parametrize(
    "name, cxxname, params",
    [
        pytest.param("Bad Name", "pcl::PointIndices", (), id="name"),
        pytest.param("Dup", "pcl::PointCloud<$T,$T>", ("T", "T"), id="duplicate_param"),
        pytest.param("Missing", "pcl::PointCloud<$T>", ("T", "U"), id="missing_placeholder"),
        pytest.param("Undeclared", "pcl::PointCloud<$U>", ("T",), id="undeclared_placeholder"),
    ],
)
def test_defpcltype_rejects(name, cxxname, params):
    with pytest.raises(BindingError):
        defpcltype(name, cxxname, params=params)


def test_constructors_dispatch_by_arity(indices_family):
    ptr, val = indices_family
    defptrconstructor(ptr, "")
    defconstructor(val, "")
    assert deref(ptr()).indices.size() == 0
    assert use_count(ptr()) == 1
    assert val().shared is False


def test_duplicate_arity_is_rejected(indices_family):
    ptr, _ = indices_family
    defptrconstructor(ptr, "")
    with pytest.raises(BindingError, match="already has a constructor"):
        defptrconstructor(ptr, "")


def test_duplicate_arity_ignores_parameter_names():
    ptr, _ = defpcltype("TestSized", "std::vector", params=("T",))
    defptrconstructor(ptr, "n: int")
    with pytest.raises(BindingError):
        defptrconstructor(ptr, "count: int")


def test_constructor_kind_must_match(indices_family):
    ptr, val = indices_family
    with pytest.raises(BindingError):
        defconstructor(ptr, "")
    with pytest.raises(BindingError):
        defptrconstructor(val, "")


def test_constructors_belong_to_the_generic_type():
    with pytest.raises(BindingError):
        defptrconstructor(PointCloud[PointXYZ], "a, b, c")


def test_constructor_template_is_validated():
    ptr, _ = defpcltype("TestTemplated", "pcl::PointCloud", params=("T",))
    with pytest.raises(BindingError):
        defptrconstructor(ptr, "", "pcl::PointCloud<$U>")


def test_undeclared_arity_is_a_type_error():
    with pytest.raises(TypeError):
        PointCloud[PointXYZ](1, 2, 3)
    with pytest.raises(TypeError):
        PointCloud[PointXYZ](1.5, 2)
    with pytest.raises(TypeError):
        PointCloudVal[PointXYZ](1, 2, 3, 4)


def test_generated_source_is_kept():
    ctor = PointCloud._constructors[2]
    assert ctor.__source__.startswith("def ")
    assert ctor.cxxtemplate == "pcl::PointCloud<$T>"


def test_register_constructor_custom():
    ptr, _ = defpcltype("TestCustom", "pcl::ModelCoefficients")

    def _from_values(cls, values):
        obj = boost_shared_ptr("pcl::ModelCoefficients")
        deref(obj).values.assign(values)
        return obj

    register_constructor(ptr, "values", _from_values)
    coefficients = ptr([1.0, 2.0, 3.0])
    assert deref(coefficients).values.size() == 3


@pytest.mark.parametrize(
    "args, expected",
    [
        pytest.param(None, 0, id="default"),
        pytest.param("10", 10, id="string"),
        pytest.param([4], 4, id="values"),
    ],
)
def test_boost_shared_ptr_vector(args, expected):
    ptr = boost_shared_ptr("std::vector<double>", args)
    assert ptr.use_count() == 1
    assert ptr.get().size() == expected


def test_boost_shared_ptr_substitutes_type_args():
    ptr = boost_shared_ptr("pcl::PointCloud<$T>", "2, 2", T=PointXYZ)
    assert ptr.get().size() == 4


def test_boost_shared_ptr_unknown():
    with pytest.raises(BindingError):
        boost_shared_ptr("std::list<int>")


def test_specialized_constructor_is_a_binding_error():
    with pytest.raises(BindingError, match="must be declared on PointCloudPtr"):
        defptrconstructor(PointCloud[PointXYZ], "a, b, c")
    with pytest.raises(BindingError, match="must be declared on PointCloudVal"):
        defconstructor(PointCloudVal[PointXYZ], "a, b, c")


def test_generated_constructor_checks_arguments(indices_family):
    ptr, _ = indices_family
    ctor = defptrconstructor(ptr, "")
    assert ctor.__name__ == "_new_TestIndicesPtr_0"
    assert "pcl::PointIndices" in ctor.__source__
    with pytest.raises(TypeError):
        ctor(ptr, 1)
