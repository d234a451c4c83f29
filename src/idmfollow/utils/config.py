from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml

from idmfollow.control.idm import IDMParams
from idmfollow.errors import InvalidParameter

DEFAULT_CONFIG: Dict[str, Any] = {
    "idm": {
        "resolution": 0.1,
        "s_0": 2.0,
        "Tg": 1.5,
        "a": 1.0,
        "b": 1.5,
        "v_0": 30.0,
        "small_delta": 4.0,
        "ln1": 5.0,
    },
    "follower": {"vehicle_id": 1},
    "numerics": {"min_gap": 1e-3, "on_degenerate_gap": "floor"},
    "output": {"format": "parquet"},
}


def load_yaml(path: str | Path) -> Dict[str, Any]:
    """Load YAML config into a dict."""
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged: Dict[str, Any] = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


@dataclass
class AppConfig:
    raw: Dict[str, Any] = field(default_factory=lambda: copy.deepcopy(DEFAULT_CONFIG))

    @classmethod
    def from_files(cls, *paths: str | Path) -> "AppConfig":
        merged: Dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)
        for path in paths:
            merged = deep_merge(merged, load_yaml(path))
        return cls(raw=merged)

    def section(self, name: str) -> Dict[str, Any]:
        return dict(self.raw.get(name) or {})


def params_from_config(cfg: AppConfig) -> IDMParams:
    idm_cfg = cfg.section("idm")
    unknown = set(idm_cfg) - set(IDMParams.__dataclass_fields__)
    if unknown:
        raise KeyError(f"Unknown idm config keys: {sorted(unknown)}")
    values = {}
    for key, value in idm_cfg.items():
        try:
            values[key] = float(value)
        except (TypeError, ValueError):
            raise InvalidParameter(key, value, "must be a real number") from None
    params = IDMParams(**values)
    return params.validate()
