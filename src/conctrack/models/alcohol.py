# src/conctrack/models/alcohol.py
import numpy as np

from ..config import ALCOHOL_CALIBRATION, AlcoholCalibration
from ..types import SubstanceProfile


def peak_bac(dose_mg, F, body_weight_kg, calibration: AlcoholCalibration = ALCOHOL_CALIBRATION):
    """
    Widmark-style peak blood alcohol concentration (mg/dL).

    Absorbed grams are expressed in standard drinks; each drink peaks at
    `peak_per_drink_mg_dl` for the reference weight and scales inversely with weight.
    """
    absorbed_g = dose_mg / 1000.0 * F
    drinks = absorbed_g / calibration.grams_per_drink
    return drinks * calibration.peak_per_drink_mg_dl * (calibration.reference_weight_kg / body_weight_kg)


def zero_order_bac(t, peak, tmax, elimination_capacity, steepness=3.0):
    """
    Two-phase BAC curve (mg/dL).

    t <= tmax : exponential approach normalized to reach exactly `peak` at tmax
    t >  tmax : linear decline at `elimination_capacity` mg/dL per hour, floored at 0
    """
    t = np.asarray(t, dtype=float)
    tp = np.maximum(t, 0.0)
    rising = peak * (1.0 - np.exp(-steepness * tp / tmax)) / (1.0 - np.exp(-steepness))
    falling = peak - elimination_capacity * (tp - tmax)
    C = np.where(tp <= tmax, rising, falling)
    return np.where(t > 0.0, np.maximum(C, 0.0), 0.0)


def alcohol_model(dose_mg, profile: SubstanceProfile, t, body_weight_kg,
                  calibration: AlcoholCalibration = ALCOHOL_CALIBRATION):
    """Blood alcohol curve with zero-order elimination, in mg/dL."""
    peak = peak_bac(dose_mg, profile.bioavailability, body_weight_kg, calibration)
    return zero_order_bac(t, peak, profile.tmax, profile.elimination_capacity,
                          steepness=calibration.absorption_steepness)
