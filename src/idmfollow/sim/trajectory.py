from __future__ import annotations

from dataclasses import dataclass, field
from math import isfinite
from typing import List, Optional, Sequence

from idmfollow.errors import InvalidTrajectory

LEADER_COLUMNS = ("Time", "xn1", "vn1")
FOLLOWER_COLUMNS = ("xn", "vn", "sn", "frsn", "deltav", "bn")


def _finite(value: Optional[float]) -> bool:
    try:
        return value is not None and isfinite(value)
    except TypeError:
        return False


@dataclass
class Trajectory:
    """Column buffers for one leader/follower pair, one entry per time index.

    Leader columns are fixed for the whole run. Follower columns hold the
    initial state at index 0 and are filled in place by the rollout.
    """

    Time: List[float]
    xn1: List[float]
    vn1: List[float]
    xn: List[float]
    vn: List[float]
    sn: List[float]
    frsn: List[float]
    deltav: List[float]
    bn: List[float]
    sn_star: List[Optional[float]]
    degenerate_steps: List[int] = field(default_factory=list)

    @classmethod
    def allocate(
        cls,
        time: Sequence[float],
        xn1: Sequence[float],
        vn1: Sequence[float],
        xn0: float,
        vn0: float,
        ln1: float,
    ) -> "Trajectory":
        n = len(time)
        if len(xn1) != n or len(vn1) != n:
            raise InvalidTrajectory(
                f"Leader columns must match Time length {n}: xn1={len(xn1)}, vn1={len(vn1)}"
            )
        if n == 0:
            raise InvalidTrajectory("Leader trace is empty.")

        traj = cls(
            Time=[float(v) for v in time],
            xn1=[float(v) for v in xn1],
            vn1=[float(v) for v in vn1],
            xn=[0.0] * n,
            vn=[0.0] * n,
            sn=[0.0] * n,
            frsn=[0.0] * n,
            deltav=[0.0] * n,
            bn=[0.0] * n,
            sn_star=[None] * n,
        )
        traj.xn[0] = xn0
        traj.vn[0] = vn0
        if _finite(xn0) and _finite(vn0):
            traj.sn[0] = traj.xn1[0] - xn0
            traj.frsn[0] = traj.sn[0] - ln1
            traj.deltav[0] = vn0 - traj.vn1[0]
        return traj

    @property
    def time_length(self) -> int:
        return len(self.Time)

    def validate(self, ln1: Optional[float] = None) -> "Trajectory":
        """Reject buffers the rollout cannot step.

        When ``ln1`` is given, the index-0 spacing and gap must equal the
        values derived from the positions.
        """
        n = self.time_length
        if n == 0:
            raise InvalidTrajectory("Trajectory has no time indices.")
        for name in LEADER_COLUMNS + FOLLOWER_COLUMNS + ("sn_star",):
            size = len(getattr(self, name))
            if size != n:
                raise InvalidTrajectory(f"Column {name} has length {size}, expected {n}.")
        for name in ("xn1", "vn1"):
            column = getattr(self, name)
            bad = [idx for idx, value in enumerate(column) if not _finite(value)]
            if bad:
                raise InvalidTrajectory(f"Leader column {name} is not finite at indices {bad[:5]}.")
        for name in ("xn", "vn", "sn", "frsn", "deltav"):
            if not _finite(getattr(self, name)[0]):
                raise InvalidTrajectory(f"Initial follower state {name}[0] is missing.")
        if self.vn[0] < 0:
            raise InvalidTrajectory(f"Initial follower speed vn[0]={self.vn[0]!r} is negative.")
        if ln1 is not None:
            if self.sn[0] != self.xn1[0] - self.xn[0]:
                raise InvalidTrajectory(f"sn[0]={self.sn[0]!r} does not equal xn1[0] - xn[0].")
            if self.frsn[0] != self.sn[0] - ln1:
                raise InvalidTrajectory(f"frsn[0]={self.frsn[0]!r} does not equal sn[0] - ln1.")
        return self
