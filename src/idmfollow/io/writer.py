from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np
import pandas as pd

from idmfollow.control.idm import IDMParams
from idmfollow.sim.trajectory import Trajectory

OUTPUT_COLUMNS = ["fvn", "Time", "xn1", "vn1", "ln1", "bn", "xn", "vn", "sn", "deltav", "sn_star"]
OUTPUT_FORMATS = ("parquet", "csv")


def to_frame(trajectory: Trajectory, params: IDMParams, vehicle_id: Any) -> pd.DataFrame:
    """One row per time index; scalar fields are broadcast to every row."""
    n = trajectory.time_length
    sn_star = [np.nan if value is None else value for value in trajectory.sn_star]
    df = pd.DataFrame(
        {
            "fvn": [vehicle_id] * n,
            "Time": trajectory.Time,
            "xn1": trajectory.xn1,
            "vn1": trajectory.vn1,
            "ln1": [params.ln1] * n,
            "bn": trajectory.bn,
            "xn": trajectory.xn,
            "vn": trajectory.vn,
            "sn": trajectory.sn,
            "deltav": trajectory.deltav,
            "sn_star": np.asarray(sn_star, dtype=float),
        },
        columns=OUTPUT_COLUMNS,
    )
    return df


class OutputWriter:
    def __init__(self, output_root: str, fmt: str = "parquet") -> None:
        if fmt not in OUTPUT_FORMATS:
            raise ValueError(f"Unsupported output format {fmt!r}; expected one of {OUTPUT_FORMATS}")
        self.output_root = Path(output_root)
        self.fmt = fmt

    def write_run(
        self,
        run_id: str,
        table: pd.DataFrame,
        meta: Dict[str, Any],
        summary: Optional[Dict[str, Any]] = None,
    ) -> Path:
        run_dir = self.output_root / "runs" / str(run_id)
        run_dir.mkdir(parents=True, exist_ok=True)

        with open(run_dir / "meta.json", "w", encoding="utf-8") as f:
            json.dump(meta, f, ensure_ascii=False, indent=2)
        if summary is not None:
            with open(run_dir / "summary.json", "w", encoding="utf-8") as f:
                json.dump(summary, f, ensure_ascii=False, indent=2)

        if self.fmt == "parquet":
            path = run_dir / "trajectory.parquet"
            table.to_parquet(path, index=False)
        else:
            path = run_dir / "trajectory.csv"
            table.to_csv(path, index=False)
        return path


def read_run(path: str | Path) -> pd.DataFrame:
    path = Path(path)
    if path.suffix == ".parquet":
        return pd.read_parquet(path)
    return pd.read_csv(path)
