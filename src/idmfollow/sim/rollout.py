from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Optional

from idmfollow.control.idm import IDMController, IDMParams
from idmfollow.errors import NumericDegeneracy
from .trajectory import Trajectory

logger = logging.getLogger(__name__)

DEFAULT_MIN_GAP = 1e-3
DEGENERATE_POLICIES = ("floor", "raise")


@dataclass
class StepFrame:
    """State produced by one step: inputs at index ``t``, outputs at ``t + 1``."""

    t: int
    time: float
    sn_star: Optional[float]
    bn: float
    xn: float
    vn: float
    sn: float
    frsn: float
    deltav: float


def iter_steps(
    params: IDMParams,
    trajectory: Trajectory,
    min_gap: float = DEFAULT_MIN_GAP,
    on_degenerate: str = "floor",
) -> Iterator[StepFrame]:
    """Validate inputs, then lazily advance the follower one index per item.

    Validation runs eagerly so bad inputs fail before any step is taken.
    With ``on_degenerate="raise"`` an initial gap at or below ``min_gap``
    is rejected here; gaps that collapse later are always floored and
    recorded in ``trajectory.degenerate_steps``.
    The returned iterator writes into ``trajectory`` as it is consumed and
    cannot be restarted.
    """
    controller = IDMController(params)
    trajectory.validate(ln1=params.ln1)
    if on_degenerate not in DEGENERATE_POLICIES:
        raise ValueError(f"on_degenerate must be one of {DEGENERATE_POLICIES}, got {on_degenerate!r}")
    if on_degenerate == "raise" and trajectory.frsn[0] <= min_gap:
        raise NumericDegeneracy(0, trajectory.frsn[0], min_gap)
    return _steps(controller, trajectory, min_gap)


def _steps(controller: IDMController, traj: Trajectory, min_gap: float) -> Iterator[StepFrame]:
    dt = controller.params.resolution
    ln1 = controller.params.ln1

    for t in range(traj.time_length - 1):
        traj.sn_star[t] = controller.desired_spacing(traj.vn[t], traj.deltav[t])

        gap = traj.frsn[t]
        if gap <= min_gap:
            logger.warning("Gap frsn[%d]=%.6g at or below floor %.6g; using floor", t, gap, min_gap)
            traj.degenerate_steps.append(t)
            gap = min_gap
        traj.bn[t] = controller.step(traj.vn[t], gap, traj.sn_star[t])

        v_next = traj.vn[t] + traj.bn[t] * dt
        traj.vn[t + 1] = v_next if v_next > 0 else 0.0
        # Position uses the pre-update speed, not the clamped vn[t + 1].
        traj.xn[t + 1] = traj.xn[t] + traj.vn[t] * dt + 0.5 * traj.bn[t] * dt ** 2

        traj.sn[t + 1] = traj.xn1[t + 1] - traj.xn[t + 1]
        traj.frsn[t + 1] = traj.sn[t + 1] - ln1
        traj.deltav[t + 1] = traj.vn[t + 1] - traj.vn1[t + 1]

        yield StepFrame(
            t=t,
            time=traj.Time[t],
            sn_star=traj.sn_star[t],
            bn=traj.bn[t],
            xn=traj.xn[t + 1],
            vn=traj.vn[t + 1],
            sn=traj.sn[t + 1],
            frsn=traj.frsn[t + 1],
            deltav=traj.deltav[t + 1],
        )


def run(
    params: IDMParams,
    trajectory: Trajectory,
    min_gap: float = DEFAULT_MIN_GAP,
    on_degenerate: str = "floor",
) -> Trajectory:
    """Fill follower columns at indices ``1..time_length-1`` and return the trajectory."""
    steps = iter_steps(params, trajectory, min_gap=min_gap, on_degenerate=on_degenerate)
    logger.info("Running IDM follower over %d time indices (dt=%s)", trajectory.time_length, params.resolution)
    for _ in steps:
        pass
    if trajectory.degenerate_steps:
        logger.warning("Gap floor applied at %d step(s)", len(trajectory.degenerate_steps))
    logger.info("IDM run finished: final vn=%.4f, final sn=%.4f", trajectory.vn[-1], trajectory.sn[-1])
    return trajectory


class Simulator:
    def __init__(self, params: IDMParams, min_gap: float = DEFAULT_MIN_GAP, on_degenerate: str = "floor") -> None:
        self.params = params.validate()
        self.min_gap = min_gap
        self.on_degenerate = on_degenerate

    def rollout(self, trajectory: Trajectory) -> Trajectory:
        return run(self.params, trajectory, min_gap=self.min_gap, on_degenerate=self.on_degenerate)
