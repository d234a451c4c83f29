from __future__ import annotations

from dataclasses import asdict, dataclass
from math import isfinite, isnan, sqrt
from typing import Optional

from idmfollow.errors import InvalidParameter


@dataclass(frozen=True)
class IDMParams:
    resolution: float
    s_0: float
    Tg: float
    a: float
    b: float
    v_0: float
    small_delta: float = 4.0
    ln1: float = 5.0

    def validate(self) -> "IDMParams":
        for name, value in asdict(self).items():
            try:
                finite = isfinite(value)
            except TypeError:
                raise InvalidParameter(name, value, "must be a real number") from None
            if not finite:
                raise InvalidParameter(name, value, "must be finite")
        for name in ("resolution", "a", "b", "v_0", "small_delta"):
            if getattr(self, name) <= 0:
                raise InvalidParameter(name, getattr(self, name), "must be > 0")
        for name in ("Tg", "s_0"):
            if getattr(self, name) < 0:
                raise InvalidParameter(name, getattr(self, name), "must be >= 0")
        return self


class IDMController:
    """Intelligent Driver Model evaluated at a single time index.

    The controller holds no state between calls; the rollout owns the
    trajectory buffers and feeds it the follower state one index at a time.
    """

    def __init__(self, params: IDMParams) -> None:
        self.params = params.validate()
        self._brake_term = 2.0 * sqrt(params.a * params.b)

    def desired_spacing(self, v: float, deltav: float) -> float:
        p = self.params
        # s* = s0 + max(0, v*T + v*dv/(2*sqrt(a*b)))
        closing = v * p.Tg + (v * deltav) / self._brake_term
        if closing < 0:
            return p.s_0
        return p.s_0 + closing

    def free_road(self, v: float) -> float:
        p = self.params
        return 1.0 - (v / p.v_0) ** p.small_delta

    def step(self, v: float, gap: float, sn_star: Optional[float]) -> float:
        """Acceleration for speed ``v`` at bumper-to-bumper ``gap``.

        ``sn_star`` of ``None`` (or NaN) means the desired spacing is
        unknown, in which case only the free-road term applies. The result
        is floored at ``-b``; there is no upper clip.
        """
        p = self.params
        if sn_star is None or isnan(sn_star):
            accel = p.a * self.free_road(v)
        else:
            accel = p.a * (self.free_road(v) - (sn_star / gap) ** 2)
        if accel < -p.b:
            accel = -p.b
        return accel

    def equilibrium_gap(self, v: float) -> float:
        """Steady-state gap at constant speed ``v`` behind a leader at ``v``."""
        p = self.params
        free = self.free_road(v)
        if free <= 0:
            return float("inf")
        return (p.s_0 + v * p.Tg) / sqrt(free)
