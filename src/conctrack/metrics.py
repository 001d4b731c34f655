# src/conctrack/metrics.py
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Tuple

import numpy as np

from .config import NOISE_FLOOR
from .types import CurveResult


def cmax_tmax(t: np.ndarray, C: np.ndarray) -> Tuple[float, float]:
    """Return Cmax and the time (h) it is reached."""
    idx = np.argmax(C)
    return float(C[idx]), float(t[idx])

def auc_trapz(t: np.ndarray, C: np.ndarray) -> float:
    """Area Under the Curve (AUC) via trapezoidal rule (concentration*h)."""
    return float(np.trapezoid(C, t))

def time_below(t: np.ndarray, C: np.ndarray, threshold: float) -> float:
    """
    First sample time after the peak at which the concentration is at or below
    `threshold` (e.g., when BAC drops under a driving limit).
    Returns nan if the curve never comes back down within the series.
    """
    peak = int(np.argmax(C))
    after = np.nonzero(C[peak:] <= threshold)[0]
    if after.size == 0:
        return float("nan")
    return float(t[peak + int(after[0])])


@dataclass(frozen=True)
class CurveSummary:
    """
    Headline numbers of one concentration curve.

    peak       : highest sampled concentration, in `unit`
    peak_time  : when it is reached
    auc        : exposure, unit*h
    clear_time : first time after the peak at or below the threshold;
                 None if the curve is still above it at the end
    """
    substance: str
    unit: str
    peak: float
    peak_time: datetime
    auc: float
    clear_time: Optional[datetime]


def summarize_curve(curve: CurveResult, threshold: float = NOISE_FLOOR) -> CurveSummary:
    """Peak, exposure and time-to-clear for a curve from curves.generate_*."""
    t, C = curve.hours, curve.concentrations
    peak, peak_h = cmax_tmax(t, C)
    clear_h = time_below(t, C, threshold)
    return CurveSummary(
        substance=curve.substance,
        unit=curve.unit,
        peak=peak,
        peak_time=curve.start + timedelta(hours=peak_h),
        auc=auc_trapz(t, C),
        clear_time=None if np.isnan(clear_h) else curve.start + timedelta(hours=clear_h),
    )
