# src/conctrack/engine.py
from dataclasses import replace
from functools import partial
from types import MappingProxyType
from typing import Callable, Mapping

import numpy as np

from .config import AGE_ADJUSTMENT, EMPIRICAL_CALIBRATION, AgeAdjustment
from .exceptions import InvalidPatientError
from .logger import get_logger
from .models.alcohol import alcohol_model
from .models.empirical import empirical_model
from .models.one_compartment import one_compartment_model
from .profiles import lookup
from .types import SubstanceProfile

logger = get_logger(__name__)

# model(dose_mg, profile, elapsed_h, body_weight_kg) -> concentration array
KineticModel = Callable[[float, SubstanceProfile, np.ndarray, float], np.ndarray]

# Static substance -> model dispatch; anything not listed uses the one-compartment model.
MODELS: Mapping[str, KineticModel] = MappingProxyType({
    "alcohol": alcohol_model,
    "mdma": partial(empirical_model, calibration=EMPIRICAL_CALIBRATION["mdma"]),
    "psilocybin": partial(empirical_model, calibration=EMPIRICAL_CALIBRATION["psilocybin"]),
})
DEFAULT_MODEL: KineticModel = one_compartment_model


def model_for(substance: str) -> KineticModel:
    return MODELS.get(substance, DEFAULT_MODEL)


def age_adjusted(profile: SubstanceProfile, age_years: float,
                 adjustment: AgeAdjustment = AGE_ADJUSTMENT) -> SubstanceProfile:
    """
    Slow clearance above the age threshold: ke scaled by the factor and the
    half-life stretched by its inverse. Zero-order profiles are left alone.
    """
    if age_years <= adjustment.threshold_years or profile.elimination_rate is None:
        return profile
    factor = adjustment.elimination_factor
    return replace(
        profile,
        elimination_rate=profile.elimination_rate * factor,
        half_life=profile.half_life / factor if profile.half_life else profile.half_life,
    )


def concentration_at(dose_mg, substance, route, elapsed_h, body_weight_kg, age_years=25):
    """
    Concentration of `substance` `elapsed_h` hours after taking `dose_mg` by `route`.

    elapsed_h may be a scalar (returns float) or an array (returns array).
    Unsupported (substance, route) pairs, zero doses and elapsed times <= 0 give 0.
    Units follow the profile: mg/dL for alcohol, ng/mL otherwise.
    """
    _validate_patient(body_weight_kg, age_years)
    scalar = np.ndim(elapsed_h) == 0
    t = np.asarray(elapsed_h, dtype=float)

    profile = lookup(substance, route)
    if profile is None:
        logger.debug("No profile for %s/%s; concentration is zero", substance, route)
        C = np.zeros_like(t)
    elif dose_mg <= 0:
        C = np.zeros_like(t)
    else:
        profile = age_adjusted(profile, age_years)
        C = model_for(substance)(dose_mg, profile, t, body_weight_kg)
        C = np.where(t > 0.0, np.maximum(C, 0.0), 0.0)

    return float(C) if scalar else C


def _validate_patient(body_weight_kg: float, age_years: float) -> None:
    if not (body_weight_kg > 0):
        raise InvalidPatientError(f"body_weight_kg must be > 0 (got {body_weight_kg}).")
    if not (age_years >= 0):
        raise InvalidPatientError(f"age_years must be >= 0 (got {age_years}).")
