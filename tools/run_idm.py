from __future__ import annotations

import argparse
from typing import List, Optional

from idmfollow.ingest.leader_loader import LeaderLoader
from idmfollow.io.writer import OutputWriter, to_frame
from idmfollow.metrics.summary import summarize
from idmfollow.sim.rollout import Simulator
from idmfollow.sim.trajectory import Trajectory
from idmfollow.utils.config import AppConfig, params_from_config
from idmfollow.utils.logging_utils import get_logger


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Simulate an IDM follower behind a recorded leader")
    parser.add_argument("--config", action="append", default=[], help="YAML config; may be repeated")
    parser.add_argument("--leader", required=True, help="CSV or parquet with Time, xn1, vn1 columns")
    parser.add_argument("--leader_id", required=False, help="Filter the leader file on vehicle_id")
    parser.add_argument("--xn0", type=float, required=False, help="Initial follower position")
    parser.add_argument("--vn0", type=float, required=False, help="Initial follower speed")
    parser.add_argument("--vehicle_id", required=False)
    parser.add_argument("--format", choices=("parquet", "csv"), required=False)
    parser.add_argument("--output", required=True)
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    logger = get_logger(verbose=args.verbose)

    cfg = AppConfig.from_files(*args.config)
    params = params_from_config(cfg)
    follower_cfg = cfg.section("follower")
    numerics_cfg = cfg.section("numerics")
    output_cfg = cfg.section("output")

    xn0 = args.xn0 if args.xn0 is not None else follower_cfg.get("xn0")
    vn0 = args.vn0 if args.vn0 is not None else follower_cfg.get("vn0")
    if xn0 is None or vn0 is None:
        raise SystemExit("Initial follower state is required (--xn0/--vn0 or follower.xn0/vn0 in config).")
    vehicle_id = args.vehicle_id if args.vehicle_id is not None else follower_cfg.get("vehicle_id", 1)

    loader = LeaderLoader(columns=cfg.section("leader").get("columns"))
    leader = loader.load(args.leader, vehicle_id=args.leader_id)
    logger.info("Loaded leader trace from %s with %d samples", args.leader, len(leader))

    trajectory = Trajectory.allocate(leader.Time, leader.xn1, leader.vn1, float(xn0), float(vn0), params.ln1)
    sim = Simulator(
        params,
        min_gap=float(numerics_cfg.get("min_gap", 1e-3)),
        on_degenerate=str(numerics_cfg.get("on_degenerate_gap", "floor")),
    )
    sim.rollout(trajectory)

    table = to_frame(trajectory, params, vehicle_id)
    summary = summarize(trajectory, params)
    meta = {
        "vehicle_id": vehicle_id,
        "leader_file": str(args.leader),
        "params": cfg.section("idm"),
        "xn0": float(xn0),
        "vn0": float(vn0),
    }

    writer = OutputWriter(args.output, fmt=args.format or output_cfg.get("format", "parquet"))
    path = writer.write_run(str(vehicle_id), table, meta, summary=summary)

    print(
        f"Wrote {len(table)} rows to {path} "
        f"(min_gap={summary['min_gap']:.2f}, min_speed={summary['min_speed']:.2f}, "
        f"clipped_steps={summary['clipped_steps']})"
    )


if __name__ == "__main__":
    main()
