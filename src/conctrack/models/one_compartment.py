# src/conctrack/models/one_compartment.py
import numpy as np

from ..config import NG_PER_ML_PER_MG_PER_L, RATE_EQUALITY_TOLERANCE
from ..types import SubstanceProfile


def one_compartment_oral(t, dose_mg, F, ka, ke, V_L):
    """
    Closed-form one-compartment model with first-order absorption and elimination.

      C(t) = (F*D*ka) / (V*(ka-ke)) * (exp(-ke*t) - exp(-ka*t))

    When ka and ke coincide the coefficient is undefined; the limit
      C(t) = (F*D*ka/V) * t * exp(-ka*t)
    is used instead.

    Parameters:
      t       : elapsed time(s) since dosing (h), scalar or array
      dose_mg : administered dose (mg)
      F       : bioavailability (0-1)
      ka, ke  : absorption / elimination rate constants (1/h)
      V_L     : volume of distribution (L)

    Returns concentration in mg/L, zero for t <= 0 and clamped at zero.
    """
    t = np.asarray(t, dtype=float)
    tp = np.maximum(t, 0.0)
    if abs(ka - ke) < RATE_EQUALITY_TOLERANCE:
        C = (F * dose_mg * ka / V_L) * tp * np.exp(-ka * tp)
    else:
        coefficient = (F * dose_mg * ka) / (V_L * (ka - ke))
        C = coefficient * (np.exp(-ke * tp) - np.exp(-ka * tp))
    return np.where(t > 0.0, np.maximum(C, 0.0), 0.0)


def peak_time(ka, ke):
    """Time (h) at which the exponential-difference curve peaks: ln(ka/ke) / (ka-ke)."""
    if abs(ka - ke) < RATE_EQUALITY_TOLERANCE:
        return 1.0 / ka
    return float(np.log(ka / ke) / (ka - ke))


def normalized_shape(t, ka, ke):
    """
    exp(-ke*t) - exp(-ka*t) divided by its own maximum, so the peak is exactly 1.
    Falls back to the ka == ke limit k*t*exp(1 - k*t).
    """
    t = np.asarray(t, dtype=float)
    tp = np.maximum(t, 0.0)
    if abs(ka - ke) < RATE_EQUALITY_TOLERANCE:
        shape = ka * tp * np.exp(1.0 - ka * tp)
    else:
        t_star = peak_time(ka, ke)
        max_value = np.exp(-ke * t_star) - np.exp(-ka * t_star)
        shape = (np.exp(-ke * tp) - np.exp(-ka * tp)) / max_value
    return np.where(t > 0.0, np.maximum(shape, 0.0), 0.0)


def one_compartment_model(dose_mg, profile: SubstanceProfile, t, body_weight_kg):
    """First-order absorption and elimination from the profile, in ng/mL."""
    C = one_compartment_oral(
        t,
        dose_mg=dose_mg,
        F=profile.bioavailability,
        ka=profile.absorption_rate,
        ke=profile.elimination_rate,
        V_L=profile.volume_of_distribution * body_weight_kg,
    )
    return C * NG_PER_ML_PER_MG_PER_L


def one_compartment_first_order(t, y, ka, ke):
    """
    ODE right-hand side of the same model, for numerical cross-checks.
    Two states:
      y[0] = drug in absorption depot (mg, bioavailable fraction only)
      y[1] = drug in central compartment (mg)
    """
    A_gut, A_c = y

    dA_gut_dt = -ka * A_gut
    dA_c_dt   = ka * A_gut - ke * A_c

    return [dA_gut_dt, dA_c_dt]
