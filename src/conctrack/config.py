"""
Calibration constants and runtime settings.

Every number below is an empirical/editorial choice taken from literature
ranges, not a physical law. They are grouped in frozen dataclasses so a
caller can pass a replacement (``dataclasses.replace``) to the functions
that use them. Session defaults can be overridden with CONCTRACK_*
environment variables through ``load_settings``.
"""

import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from .exceptions import ConfigurationError


# --- Dose conversion ---
@dataclass(frozen=True)
class DoseConversion:
    mg_per_g: float = 1000.0
    ethanol_density_mg_per_ml: float = 789.0
    assumed_abv: float = 0.4              # "ml" of alcohol is read as 40% spirits
    mg_per_standard_drink: float = 14000.0


# --- Age ---
@dataclass(frozen=True)
class AgeAdjustment:
    """Single-threshold clearance adjustment; not a clinical model."""
    threshold_years: float = 65.0
    elimination_factor: float = 0.8


# --- Alcohol (Widmark-style peak) ---
@dataclass(frozen=True)
class AlcoholCalibration:
    """
    peak BAC (mg/dL) = (grams * F / grams_per_drink) * peak_per_drink * (reference_weight / weight)

    One standard drink peaks at ~30 mg/dL for an 82 kg (180 lb) adult.
    """
    grams_per_drink: float = 14.0
    peak_per_drink_mg_dl: float = 30.0
    reference_weight_kg: float = 82.0
    absorption_steepness: float = 3.0     # ~95% absorbed by tmax before normalization


# --- Empirically pinned peaks (MDMA, psilocybin) ---
@dataclass(frozen=True)
class EmpiricalCalibration:
    """Observed peak for a reference dose and weight; scaled linearly by dose, inversely by weight."""
    reference_dose_mg: float
    reference_peak: float                 # ng/mL
    reference_weight_kg: float = 70.0
    absorption_steepness: float = 3.0     # ka = steepness / tmax


EMPIRICAL_CALIBRATION: Mapping[str, EmpiricalCalibration] = MappingProxyType({
    "mdma": EmpiricalCalibration(reference_dose_mg=100.0, reference_peak=200.0),
    # psilocin plasma peak after oral psilocybin
    "psilocybin": EmpiricalCalibration(reference_dose_mg=30.0, reference_peak=21.0),
})

# One-compartment output is mg/L; reported as ng/mL.
NG_PER_ML_PER_MG_PER_L = 1000.0

# Doses at or below this concentration count as inactive in summaries.
NOISE_FLOOR = 0.01

# Below this |ka - ke| the exponential-difference form is replaced by its limit.
RATE_EQUALITY_TOLERANCE = 1e-9


# --- Cross-substance normalization ---
# concentration unit -> alcohol-equivalent mg/dL for comparable subjective impairment
SUBJECTIVE_EFFECT_FACTORS: Mapping[str, float] = MappingProxyType({
    "alcohol": 1.0,       # reference unit, BAC mg/dL
    "thc": 8.0,           # 10 ng/mL ~ 80 mg/dL
    "cbd": 2.0,           # 50 ng/mL ~ 100 mg/dL
    "mdma": 0.4,          # 200 ng/mL ~ 80 mg/dL
    "psilocybin": 4.0,    # 20 ng/mL psilocin ~ 80 mg/dL
})

# Raw per-unit potency, kept for side-by-side comparison only.
POTENCY_FACTORS: Mapping[str, float] = MappingProxyType({
    "alcohol": 1.0,
    "thc": 500.0,
    "mdma": 50.0,
    "psilocybin": 1000.0,
})

DEFAULT_FACTOR = 1.0


@dataclass(frozen=True)
class ImpairmentBands:
    """
    Upper bounds (exclusive) of each level in alcohol-equivalent mg/dL.

    Defaults: <10 Minimal (<0.01% BAC), <30 Mild, <50 Moderate,
    <80 Significant (<0.08%), <150 Severe, otherwise Dangerous.
    """
    breakpoints: tuple[float, ...] = (10.0, 30.0, 50.0, 80.0, 150.0)
    levels: tuple[str, ...] = ("Minimal", "Mild", "Moderate", "Significant", "Severe", "Dangerous")

    def __post_init__(self):
        if len(self.levels) != len(self.breakpoints) + 1:
            raise ConfigurationError(
                f"Need exactly one more level than breakpoints (got {len(self.levels)} levels, "
                f"{len(self.breakpoints)} breakpoints)."
            )
        if any(b <= a for a, b in zip(self.breakpoints, self.breakpoints[1:])):
            raise ConfigurationError(f"Impairment breakpoints must be strictly ascending (got {self.breakpoints}).")


# --- Sampling / plotting ---
@dataclass(frozen=True)
class Sampling:
    fine_step_h: float = 0.25             # 15 minutes...
    fine_until_h: float = 12.0            # ...for the first 12 hours
    coarse_step_h: float = 1.0
    max_duration_h: float = 48.0
    half_lives_to_plot: float = 5.0
    grid_step_h: float = 0.25             # shared grid for multi-dose aggregation
    lead_h: float = 6.0                   # plotted before the earliest dose
    tail_h: float = 48.0                  # plotted after the latest dose


DOSE_CONVERSION = DoseConversion()
AGE_ADJUSTMENT = AgeAdjustment()
ALCOHOL_CALIBRATION = AlcoholCalibration()
IMPAIRMENT_BANDS = ImpairmentBands()
SAMPLING = Sampling()


@dataclass(frozen=True)
class Settings:
    """
    Session defaults, overridable from the environment.

    The core functions take these values as arguments rather than reading
    them globally; a caller passes them on, e.g.

        settings = load_settings()
        curves = generate_substance_curves(doses, settings.body_weight_kg, settings.age_years,
                                           sampling=settings.sampling)
        summary = summarize_active_doses(doses, now, settings.body_weight_kg, settings.age_years,
                                         noise_floor=settings.noise_floor,
                                         bands=settings.impairment_bands)
    """
    body_weight_kg: float = 70.0
    age_years: float = 25.0
    noise_floor: float = NOISE_FLOOR
    sampling: Sampling = field(default_factory=Sampling)
    impairment_bands: ImpairmentBands = field(default_factory=ImpairmentBands)

    def __post_init__(self):
        if not (self.body_weight_kg > 0):
            raise ConfigurationError(f"body_weight_kg must be > 0 (got {self.body_weight_kg}).")
        if not (self.age_years >= 0):
            raise ConfigurationError(f"age_years must be >= 0 (got {self.age_years}).")
        if not (self.noise_floor >= 0):
            raise ConfigurationError(f"noise_floor must be >= 0 (got {self.noise_floor}).")
        if not (self.sampling.max_duration_h > 0):
            raise ConfigurationError(f"max_duration_h must be > 0 (got {self.sampling.max_duration_h}).")


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number (got {raw!r}).") from None


def _env_breakpoints(env: Mapping[str, str], name: str,
                     default: tuple[float, ...]) -> tuple[float, ...]:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return tuple(float(part) for part in raw.split(","))
    except ValueError:
        raise ConfigurationError(f"{name} must be comma-separated numbers (got {raw!r}).") from None


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from CONCTRACK_* variables.

    CONCTRACK_BODY_WEIGHT_KG, CONCTRACK_AGE_YEARS, CONCTRACK_NOISE_FLOOR,
    CONCTRACK_MAX_DURATION_H, CONCTRACK_IMPAIRMENT_BREAKPOINTS (e.g. "10,30,50,80,150").
    Out-of-range values raise ConfigurationError.
    """
    env = os.environ if env is None else env
    defaults = Settings()

    sampling = Sampling(
        max_duration_h=_env_float(env, "CONCTRACK_MAX_DURATION_H", defaults.sampling.max_duration_h),
    )
    bands = ImpairmentBands(
        breakpoints=_env_breakpoints(env, "CONCTRACK_IMPAIRMENT_BREAKPOINTS",
                                     defaults.impairment_bands.breakpoints),
    )
    return Settings(
        body_weight_kg=_env_float(env, "CONCTRACK_BODY_WEIGHT_KG", defaults.body_weight_kg),
        age_years=_env_float(env, "CONCTRACK_AGE_YEARS", defaults.age_years),
        noise_floor=_env_float(env, "CONCTRACK_NOISE_FLOOR", defaults.noise_floor),
        sampling=sampling,
        impairment_bands=bands,
    )
