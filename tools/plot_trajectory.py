from __future__ import annotations

import argparse

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from idmfollow.io.writer import read_run


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Plot speed, gap and acceleration of a simulated run")
    parser.add_argument("--run", required=True, help="trajectory.parquet or trajectory.csv written by run_idm")
    parser.add_argument("--output", required=True, help="Image path, e.g. run.png")
    parser.add_argument("--dpi", type=int, default=120)
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    df = read_run(args.run)
    gap = df["sn"] - df["ln1"]

    fig, axes = plt.subplots(3, 1, figsize=(8, 8), sharex=True)
    axes[0].plot(df["Time"], df["vn1"], label="leader")
    axes[0].plot(df["Time"], df["vn"], label="follower")
    axes[0].set_ylabel("speed [m/s]")
    axes[0].legend(loc="best")

    axes[1].plot(df["Time"], gap, label="gap")
    axes[1].plot(df["Time"], df["sn_star"], linestyle="--", label="desired spacing")
    axes[1].set_ylabel("gap [m]")
    axes[1].legend(loc="best")

    # Last row carries no computed acceleration.
    axes[2].plot(df["Time"].iloc[:-1], df["bn"].iloc[:-1])
    axes[2].set_ylabel("accel [m/s^2]")
    axes[2].set_xlabel("time [s]")

    fig.tight_layout()
    fig.savefig(args.output, dpi=args.dpi)
    plt.close(fig)
    print(f"Saved plot to {args.output}")


if __name__ == "__main__":
    main()
