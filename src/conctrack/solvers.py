# src/conctrack/solvers.py
from typing import Sequence, Tuple

import numpy as np
from scipy.integrate import solve_ivp

from .config import NG_PER_ML_PER_MG_PER_L
from .models.one_compartment import one_compartment_first_order
from .types import SubstanceProfile


def simulate_one_compartment(profile: SubstanceProfile, doses: Sequence[Tuple[float, float]],
                             body_weight_kg: float, t_end_h: float, dt_h: float = 0.25):
    """
    Integrate the one-compartment model numerically for a list of doses.

    Each dose (start_h, amount_mg) adds its bioavailable fraction to the
    absorption depot as an instantaneous jump at start_h. This is the
    reference the closed-form superposition in the engine is checked against.

    Returns:
      t : array of time points (hours), 0..t_end_h every dt_h
      C : array of concentrations (ng/mL)
    """
    ka = profile.absorption_rate
    ke = profile.elimination_rate
    V_L = profile.volume_of_distribution * body_weight_kg
    F = profile.bioavailability

    n_steps = int(np.floor(t_end_h / dt_h + 1e-9))
    t_grid = np.arange(n_steps + 1) * dt_h

    # Segment boundaries at every dose time inside the horizon
    boundaries = sorted({0.0, float(t_end_h)} | {float(s) for s, _ in doses if 0.0 < s < t_end_h})

    def rhs(t, y):
        return one_compartment_first_order(t, y, ka, ke)

    y0 = [0.0, 0.0]
    for start_h, amount_mg in doses:
        if np.isclose(start_h, 0.0):
            y0[0] += F * float(amount_mg)

    t_out: list[float] = [0.0]
    Ac_out: list[float] = [y0[1]]

    prev = boundaries[0]
    for curr in boundaries[1:]:
        t_eval_seg = t_grid[(t_grid > prev) & (t_grid <= curr)]
        sol_seg = solve_ivp(rhs, t_span=(prev, curr), y0=y0, method="LSODA",
                            t_eval=t_eval_seg if t_eval_seg.size else None,
                            dense_output=True, rtol=1e-8, atol=1e-10)
        if t_eval_seg.size:
            t_out.extend(sol_seg.t.tolist())
            Ac_out.extend(sol_seg.y[1].tolist())
        # State at the boundary itself, which need not be a grid point
        y_end = sol_seg.sol(curr)

        # Doses exactly at the segment end enter before the next segment
        y0 = [float(y_end[0]), float(y_end[1])]
        for start_h, amount_mg in doses:
            if np.isclose(start_h, curr) and curr < t_end_h:
                y0[0] += F * float(amount_mg)

        prev = curr

    t_arr = np.asarray(t_out, dtype=float)
    C = np.asarray(Ac_out, dtype=float) / V_L * NG_PER_ML_PER_MG_PER_L
    return t_arr, np.maximum(C, 0.0)
