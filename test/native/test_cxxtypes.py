from __future__ import annotations

import pytest

from pcl_common.errors import BindingError
from pcl_common.native.cxxtypes import (
    CxxType,
    check_placeholders,
    parse_args,
    parse_cxx_type,
    placeholders,
    substitute,
    template_string,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        pytest.param("pcl::PointXYZ", CxxType("pcl::PointXYZ"), id="plain"),
        pytest.param("pcl::PointCloud<pcl::PointXYZ>",
                     CxxType("pcl::PointCloud", (CxxType("pcl::PointXYZ"),)), id="template"),
        pytest.param("std::vector< unsigned  int >",
                     CxxType("std::vector", (CxxType("unsigned int"),)), id="multi_word"),
        pytest.param("std::map<int,std::vector<double>>",
                     CxxType("std::map", (CxxType("int"), CxxType("std::vector", (CxxType("double"),)))),
                     id="nested"),
        pytest.param("Eigen::Matrix<float,4,1>",
                     CxxType("Eigen::Matrix", (CxxType("float"), CxxType("4"), CxxType("1"))),
                     id="numeric_args"),
    ],
)
def test_parse_cxx_type(text, expected):
    assert parse_cxx_type(text) == expected


def test_parsed_type_renders_compactly():
    parsed = parse_cxx_type("std::vector< pcl::PointCloud< pcl::PointXYZ > >")
    assert str(parsed) == "std::vector<pcl::PointCloud<pcl::PointXYZ>>"
    assert parsed.is_template


@pytest.mark.parametrize(
    "text",
    [
        pytest.param("", id="empty"),
        pytest.param("pcl::PointCloud<", id="unclosed"),
        pytest.param("pcl::PointCloud<>", id="no_args"),
        pytest.param("pcl::PointCloud<$T>", id="placeholder"),
        pytest.param("std::vector<int> extra<", id="trailing"),
    ],
)
def test_parse_cxx_type_rejects(text):
    with pytest.raises(BindingError):
        parse_cxx_type(text)


def test_placeholders_in_order():
    assert placeholders("pcl::Foo<$T,$(U),$T>") == ["T", "U", "T"]


def test_template_string():
    assert template_string("pcl::PointCloud", ("T",)) == "pcl::PointCloud<$T>"
    assert template_string("pcl::PointXYZ", ()) == "pcl::PointXYZ"


def test_check_placeholders_missing():
    with pytest.raises(BindingError, match="no placeholder"):
        check_placeholders("pcl::PointCloud", ("T",))


def test_check_placeholders_undeclared():
    with pytest.raises(BindingError, match="undeclared"):
        check_placeholders("pcl::PointCloud<$U>", ("T",))


def test_substitute():
    assert substitute("pcl::PointCloud<$T>", {"T": "pcl::PointXYZ"}) == "pcl::PointCloud<pcl::PointXYZ>"
    with pytest.raises(BindingError):
        substitute("pcl::PointCloud<$T>", {})


@pytest.mark.parametrize(
    "text, expected",
    [
        pytest.param(None, [], id="none"),
        pytest.param("", [], id="empty"),
        pytest.param("10", [10], id="int"),
        pytest.param("0, 1, 0.5f", [0, 1, 0.5], id="suffix"),
        pytest.param("'name', (1, 2)", ["name", (1, 2)], id="literals"),
    ],
)
def test_parse_args(text, expected):
    assert parse_args(text) == expected


def test_parse_args_rejects_expressions():
    with pytest.raises(BindingError):
        parse_args("new int")
