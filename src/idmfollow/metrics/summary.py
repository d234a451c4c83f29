from __future__ import annotations

from typing import Any, Dict

import numpy as np

from idmfollow.control.idm import IDMController, IDMParams
from idmfollow.sim.trajectory import Trajectory


def summarize(trajectory: Trajectory, params: IDMParams) -> Dict[str, Any]:
    """Aggregate statistics of a completed run, JSON-serialisable."""
    n = trajectory.time_length
    vn = np.asarray(trajectory.vn, dtype=float)
    frsn = np.asarray(trajectory.frsn, dtype=float)
    # bn at the last index is never computed.
    bn = np.asarray(trajectory.bn[: max(n - 1, 0)], dtype=float)

    controller = IDMController(params)
    final_leader_speed = float(trajectory.vn1[-1])
    equilibrium_gap = controller.equilibrium_gap(final_leader_speed)

    return {
        "time_length": n,
        "min_speed": float(vn.min()),
        "max_speed": float(vn.max()),
        "min_gap": float(frsn.min()),
        "final_gap": float(frsn[-1]),
        "equilibrium_gap": float(equilibrium_gap),
        "max_accel": float(bn.max()) if bn.size else 0.0,
        "max_decel": float(bn.min()) if bn.size else 0.0,
        "clipped_steps": int(np.count_nonzero(bn == -params.b)),
        "stopped_steps": int(np.count_nonzero(vn == 0.0)),
        "degenerate_steps": len(trajectory.degenerate_steps),
    }
