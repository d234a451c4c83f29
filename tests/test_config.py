from pathlib import Path

import pytest

from idmfollow.errors import InvalidParameter
from idmfollow.utils.config import AppConfig, deep_merge, params_from_config


def test_deep_merge_nested_override():
    base = {"idm": {"a": 1.0, "b": 1.5}, "output": {"format": "parquet"}}
    merged = deep_merge(base, {"idm": {"b": 2.0}})
    assert merged == {"idm": {"a": 1.0, "b": 2.0}, "output": {"format": "parquet"}}
    assert base["idm"]["b"] == 1.5


def test_from_files_merges_over_defaults(tmp_path: Path):
    first = tmp_path / "base.yaml"
    first.write_text("idm:\n  v_0: 25.0\nfollower:\n  xn0: 0.0\n  vn0: 12.0\n", encoding="utf-8")
    second = tmp_path / "override.yaml"
    second.write_text("idm:\n  Tg: 1.2\n", encoding="utf-8")

    cfg = AppConfig.from_files(first, second)
    params = params_from_config(cfg)
    assert params.v_0 == 25.0
    assert params.Tg == 1.2
    assert params.small_delta == 4.0
    assert cfg.section("follower")["vn0"] == 12.0
    assert cfg.section("numerics")["on_degenerate_gap"] == "floor"


def test_empty_yaml_keeps_defaults(tmp_path: Path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    params = params_from_config(AppConfig.from_files(path))
    assert params.resolution == 0.1


def test_params_from_config_rejects_bad_values(tmp_path: Path):
    path = tmp_path / "bad.yaml"
    path.write_text("idm:\n  b: 0\n", encoding="utf-8")
    with pytest.raises(InvalidParameter):
        params_from_config(AppConfig.from_files(path))

    path.write_text("idm:\n  accel: 1.0\n", encoding="utf-8")
    with pytest.raises(KeyError):
        params_from_config(AppConfig.from_files(path))


@pytest.mark.parametrize("text,field", [("idm:\n  a: fast\n", "a"), ("idm:\n  b:\n", "b")])
def test_params_from_config_names_non_numeric_field(tmp_path: Path, text, field):
    path = tmp_path / "bad.yaml"
    path.write_text(text, encoding="utf-8")
    with pytest.raises(InvalidParameter) as excinfo:
        params_from_config(AppConfig.from_files(path))
    assert excinfo.value.field == field
