# src/conctrack/curves.py
from datetime import datetime, timedelta
from typing import Optional, Sequence

import numpy as np

from .config import SAMPLING, Sampling
from .dosing import normalize_dose
from .engine import concentration_at
from .exceptions import InvalidDoseError
from .helpers import hours_between, split_doses_by_substance
from .logger import get_logger
from .profiles import lookup, unit_for
from .types import CurveResult, DoseEvent

logger = get_logger(__name__)


def sample_hours(duration_h: float, sampling: Sampling = SAMPLING) -> np.ndarray:
    """
    Elapsed-time grid for a single-dose curve: every 15 minutes up to 12 h,
    hourly afterwards, ending at or before `duration_h`.
    """
    fine_end = min(sampling.fine_until_h, duration_h)
    n_fine = int(np.floor(fine_end / sampling.fine_step_h + 1e-9))
    fine = np.arange(n_fine + 1) * sampling.fine_step_h
    if duration_h <= sampling.fine_until_h:
        return fine
    n_coarse = int(np.floor((duration_h - sampling.fine_until_h) / sampling.coarse_step_h + 1e-9))
    coarse = sampling.fine_until_h + np.arange(1, n_coarse + 1) * sampling.coarse_step_h
    return np.concatenate([fine, coarse])


def default_duration_h(substance: str, route: str, sampling: Sampling = SAMPLING) -> float:
    """About five half-lives, capped at the plotting window; the full window when t1/2 is unknown."""
    profile = lookup(substance, route)
    if profile is None or not profile.half_life:
        return sampling.max_duration_h
    return min(sampling.max_duration_h, sampling.half_lives_to_plot * profile.half_life)


def generate_curve(dose_mg: float, substance: str, route: str, start: datetime,
                   body_weight_kg: float, age_years: float = 25,
                   duration_h: Optional[float] = None,
                   sampling: Sampling = SAMPLING) -> CurveResult:
    """
    Sample a single dose taken at `start` over `duration_h` hours
    (default_duration_h when None).
    """
    if duration_h is None:
        duration_h = default_duration_h(substance, route, sampling)
    t = sample_hours(duration_h, sampling)
    C = concentration_at(dose_mg, substance, route, t, body_weight_kg, age_years)
    return CurveResult(
        substance=substance,
        route=route,
        start=start,
        hours=t,
        times=tuple(start + timedelta(hours=float(h)) for h in t),
        concentrations=C,
        unit=unit_for(substance),
    )


def plot_window(doses: Sequence[DoseEvent], sampling: Sampling = SAMPLING) -> tuple[datetime, datetime]:
    """From `lead_h` before the earliest dose to `tail_h` after the latest one."""
    if not doses:
        raise InvalidDoseError("No doses to plot.")
    earliest = min(d.time for d in doses)
    latest = max(d.time for d in doses)
    return earliest - timedelta(hours=sampling.lead_h), latest + timedelta(hours=sampling.tail_h)


def generate_substance_curves(doses: Sequence[DoseEvent], body_weight_kg: float,
                              age_years: float = 25,
                              start: Optional[datetime] = None, end: Optional[datetime] = None,
                              step_h: Optional[float] = None,
                              sampling: Sampling = SAMPLING) -> dict[str, CurveResult]:
    """
    One combined curve per substance on a shared fixed-cadence grid.

    Every dose contributes its own curve shifted to its administration time;
    contributions of the same substance are summed (superposition). Samples
    before a dose's time get nothing from it.

    Returns
    -------
    dict[str, CurveResult]
        substance -> aggregated curve; empty when there are no doses.
    """
    if not doses:
        return {}
    if start is None or end is None:
        default_start, default_end = plot_window(doses, sampling)
        start = default_start if start is None else start
        end = default_end if end is None else end
    step_h = sampling.grid_step_h if step_h is None else step_h
    if not (step_h > 0):
        raise ValueError(f"step_h must be > 0 (got {step_h}).")

    n_steps = int(np.floor(hours_between(start, end) / step_h + 1e-9))
    hours = np.arange(max(n_steps, 0) + 1) * step_h
    times = tuple(start + timedelta(hours=float(h)) for h in hours)

    results: dict[str, CurveResult] = {}
    for substance, group in split_doses_by_substance(doses).items():
        total = np.zeros_like(hours)
        for d in group:
            dose_mg = normalize_dose(d.quantity, d.unit, d.substance)
            elapsed = hours - hours_between(start, d.time)
            total += concentration_at(dose_mg, d.substance, d.route, elapsed, body_weight_kg, age_years)

        routes = {d.route for d in group}
        results[substance] = CurveResult(
            substance=substance,
            route=routes.pop() if len(routes) == 1 else None,
            start=start,
            hours=hours,
            times=times,
            concentrations=total,
            unit=unit_for(substance),
        )
        logger.debug("Aggregated %d dose(s) of %s over %d samples", len(group), substance, len(hours))
    return results


def current_concentration(dose: DoseEvent, evaluation_time: datetime,
                          body_weight_kg: float, age_years: float = 25) -> float:
    """Concentration contributed by one dose at `evaluation_time` (0 for future doses)."""
    elapsed_h = hours_between(dose.time, evaluation_time)
    if elapsed_h < 0:
        return 0.0
    dose_mg = normalize_dose(dose.quantity, dose.unit, dose.substance)
    return concentration_at(dose_mg, dose.substance, dose.route, elapsed_h, body_weight_kg, age_years)
