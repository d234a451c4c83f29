from pathlib import Path

import math

import pandas as pd
import pytest

from idmfollow.control.idm import IDMParams
from idmfollow.errors import InvalidTrajectory
from idmfollow.ingest.leader_loader import LeaderLoader, leader_from_frame
from idmfollow.io.writer import OUTPUT_COLUMNS, OutputWriter, read_run, to_frame
from idmfollow.sim.rollout import run
from idmfollow.sim.trajectory import Trajectory

PARAMS = IDMParams(resolution=0.1, s_0=2.0, Tg=1.5, a=1.0, b=1.5, v_0=30.0, small_delta=4.0, ln1=5.0)


def _completed_run():
    traj = Trajectory.allocate([0.0, 0.1, 0.2], [30.0, 32.0, 34.0], [20.0] * 3, xn0=0.0, vn0=20.0, ln1=PARAMS.ln1)
    return run(PARAMS, traj)


def test_to_frame_columns_and_rows():
    df = to_frame(_completed_run(), PARAMS, vehicle_id=7)
    assert list(df.columns) == OUTPUT_COLUMNS
    assert len(df) == 3
    assert (df["fvn"] == 7).all()
    assert (df["ln1"] == 5.0).all()
    assert df["sn_star"].iloc[0] == 32.0
    assert math.isnan(df["sn_star"].iloc[-1])
    assert df["xn"].iloc[1] == pytest.approx(1.9925)


@pytest.mark.parametrize("fmt,name", [("csv", "trajectory.csv"), ("parquet", "trajectory.parquet")])
def test_output_writer(tmp_path: Path, fmt, name):
    writer = OutputWriter(str(tmp_path), fmt=fmt)
    table = to_frame(_completed_run(), PARAMS, vehicle_id="veh-1")
    path = writer.write_run("veh-1", table, meta={"vehicle_id": "veh-1"}, summary={"min_gap": 1.0})

    assert path == tmp_path / "runs" / "veh-1" / name
    assert (tmp_path / "runs" / "veh-1" / "meta.json").exists()
    assert (tmp_path / "runs" / "veh-1" / "summary.json").exists()
    loaded = read_run(path)
    assert list(loaded.columns) == OUTPUT_COLUMNS
    assert loaded["vn"].tolist() == pytest.approx(table["vn"].tolist())


def test_output_writer_rejects_unknown_format(tmp_path: Path):
    with pytest.raises(ValueError):
        OutputWriter(str(tmp_path), fmt="xlsx")


def test_leader_loader_renames_filters_and_sorts(tmp_path: Path):
    df = pd.DataFrame(
        {
            "vehicle_id": [2, 1, 1, 1],
            "t": [0.0, 0.2, 0.0, 0.1],
            "pos": [99.0, 34.0, 30.0, 32.0],
            "speed": [1.0, 20.0, 20.0, 20.0],
        }
    )
    path = tmp_path / "leader.csv"
    df.to_csv(path, index=False)

    loader = LeaderLoader(columns={"t": "Time", "pos": "xn1", "speed": "vn1"})
    leader = loader.load(path, vehicle_id=1)
    assert len(leader) == 3
    assert leader.Time == [0.0, 0.1, 0.2]
    assert leader.xn1 == [30.0, 32.0, 34.0]


def test_leader_from_frame_missing_columns():
    with pytest.raises(InvalidTrajectory):
        leader_from_frame(pd.DataFrame({"Time": [0.0], "xn1": [1.0]}))
    with pytest.raises(InvalidTrajectory):
        leader_from_frame(pd.DataFrame({"Time": [], "xn1": [], "vn1": []}))


def test_leader_loader_rejects_unknown_suffix(tmp_path: Path):
    path = tmp_path / "leader.json"
    path.write_text("{}", encoding="utf-8")
    with pytest.raises(ValueError):
        LeaderLoader().load(path)
