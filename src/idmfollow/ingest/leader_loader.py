from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from idmfollow.errors import InvalidTrajectory


@dataclass
class LeaderTrace:
    Time: List[float]
    xn1: List[float]
    vn1: List[float]

    def __len__(self) -> int:
        return len(self.Time)


def _read_table(path: Path) -> pd.DataFrame:
    if path.suffix == ".parquet":
        return pd.read_parquet(path)
    if path.suffix in (".csv", ".txt"):
        return pd.read_csv(path)
    raise ValueError(f"Unsupported leader file type: {path.suffix or path.name}")


def leader_from_frame(
    df: pd.DataFrame,
    columns: Optional[Dict[str, str]] = None,
    vehicle_id: Optional[object] = None,
    id_column: str = "vehicle_id",
) -> LeaderTrace:
    """Extract a leader trace from a table.

    ``columns`` maps source column names onto ``Time``/``xn1``/``vn1``.
    When ``vehicle_id`` is given, rows are filtered on ``id_column`` first;
    ids are compared as strings so CLI arguments match numeric columns.
    Rows are sorted by time.
    """
    if columns:
        df = df.rename(columns=columns)
    if vehicle_id is not None:
        if id_column not in df.columns:
            raise InvalidTrajectory(f"Leader table has no {id_column!r} column to filter on.")
        df = df[df[id_column].astype(str) == str(vehicle_id)]

    missing = [name for name in ("Time", "xn1", "vn1") if name not in df.columns]
    if missing:
        raise InvalidTrajectory(f"Leader table is missing columns: {missing}")
    if df.empty:
        raise InvalidTrajectory("Leader table has no rows.")

    df = df.sort_values("Time", kind="stable")
    return LeaderTrace(
        Time=df["Time"].astype(float).tolist(),
        xn1=df["xn1"].astype(float).tolist(),
        vn1=df["vn1"].astype(float).tolist(),
    )


class LeaderLoader:
    """Load leader trajectories from CSV or parquet files."""

    def __init__(self, columns: Optional[Dict[str, str]] = None, id_column: str = "vehicle_id") -> None:
        self.columns = columns or {}
        self.id_column = id_column

    def load(self, path: str | Path, vehicle_id: Optional[object] = None) -> LeaderTrace:
        df = _read_table(Path(path))
        return leader_from_frame(df, columns=self.columns, vehicle_id=vehicle_id, id_column=self.id_column)
