# src/conctrack/models/empirical.py
import numpy as np

from ..config import EmpiricalCalibration
from ..types import SubstanceProfile
from .one_compartment import normalized_shape


def pinned_peak(dose_mg, F, body_weight_kg, calibration: EmpiricalCalibration):
    """
    Peak concentration anchored to an observed reference:
      (D*F / D_ref) * C_ref * (W_ref / W)
    """
    return (dose_mg * F / calibration.reference_dose_mg) * calibration.reference_peak \
        * (calibration.reference_weight_kg / body_weight_kg)


def empirical_model(dose_mg, profile: SubstanceProfile, t, body_weight_kg,
                    calibration: EmpiricalCalibration):
    """
    Peak-pinned empirical curve: a one-compartment shape whose maximum is a literature peak.

    ke comes from the half-life, ka = steepness / tmax (about 95% absorbed at tmax),
    and the exponential-difference curve is divided by its true maximum before
    being scaled to the pinned peak.
    """
    ke = np.log(2.0) / profile.half_life
    ka = calibration.absorption_steepness / profile.tmax
    peak = pinned_peak(dose_mg, profile.bioavailability, body_weight_kg, calibration)
    return peak * normalized_shape(t, ka, ke)
