from __future__ import annotations

import os

import pytest

from pcl_common import set_config
from pcl_common.set_config import get_setting, load_config


def test_packaged_config_sections():
    config = set_config.config
    assert {"range_image", "io", "display"} <= set(config)
    assert config["range_image"]["angular_resolution_deg"] == pytest.approx(0.5)


def test_get_setting_reads_config():
    assert get_setting("display", "max_rows", cast=int) == 10
    assert ".npz" in get_setting("io", "numpy_extensions")


def test_get_setting_prefers_environment(monkeypatch):
    monkeypatch.setenv("PCLC_DISPLAY_MAX_ROWS", "3")
    assert get_setting("display", "max_rows", cast=int) == 3


def test_get_setting_default():
    assert get_setting("missing", "key", 1.5) == 1.5
    assert get_setting("missing", "key") is None


def test_get_setting_bool(monkeypatch):
    monkeypatch.setenv("PCLC_IO_STRICT", "yes")
    assert get_setting("io", "strict", cast=bool) is True


def test_load_config_missing_file(tmp_path):
    assert load_config(str(tmp_path / "nothing.toml"), load_to_env=False) == {}


def test_load_config_yaml(tmp_path):
    path = tmp_path / "settings.yml"
    path.write_text("display:\n  max_rows: 4\n")
    assert load_config(str(path), load_to_env=False) == {"display": {"max_rows": 4}}


def test_load_config_exports_scalars(tmp_path, monkeypatch):
    monkeypatch.delenv("PCLC_DISPLAY_MAX_ROWS", raising=False)
    path = tmp_path / "settings.toml"
    path.write_text('[display]\nmax_rows = 4\nsizes = [1, 2]\n')
    load_config(str(path))
    assert os.environ["PCLC_DISPLAY_MAX_ROWS"] == "4"
    assert "PCLC_DISPLAY_SIZES" not in os.environ
