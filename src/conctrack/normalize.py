# src/conctrack/normalize.py
"""
Cross-substance comparison on an alcohol-equivalent scale.

Concentrations of different substances are not comparable as such; each is
multiplied by a subjective-effect factor that maps it onto the BAC (mg/dL)
level producing similar impairment. The factors and the impairment bands in
config.py are rough literature anchors, not pharmacology.
"""
from bisect import bisect_right
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Mapping, Optional

import numpy as np

from .config import (DEFAULT_FACTOR, IMPAIRMENT_BANDS, NOISE_FLOOR, POTENCY_FACTORS,
                     SUBJECTIVE_EFFECT_FACTORS, ImpairmentBands)
from .curves import current_concentration
from .types import CurveResult, DoseEvent


def to_subjective_effect(concentration, substance: str,
                         factors: Mapping[str, float] = SUBJECTIVE_EFFECT_FACTORS):
    """Alcohol-equivalent mg/dL; unknown substances use a factor of 1."""
    return concentration * factors.get(substance, DEFAULT_FACTOR)


def to_alcohol_equivalent_by_potency(concentration, substance: str,
                                     factors: Mapping[str, float] = POTENCY_FACTORS):
    """Raw potency scaling, for comparison with to_subjective_effect only."""
    return concentration * factors.get(substance, DEFAULT_FACTOR)


def classify_impairment(total_alcohol_equivalent: float,
                        bands: ImpairmentBands = IMPAIRMENT_BANDS) -> str:
    """Level whose band contains the value; a value on a breakpoint belongs to the higher band."""
    return bands.levels[bisect_right(bands.breakpoints, total_alcohol_equivalent)]


@dataclass(frozen=True)
class ActiveDose:
    dose: DoseEvent
    concentration: float
    alcohol_equivalent: float


@dataclass(frozen=True)
class EffectSummary:
    active: tuple[ActiveDose, ...]
    total_alcohol_equivalent: float
    level: str


def summarize_active_doses(doses: Iterable[DoseEvent], evaluation_time: datetime,
                           body_weight_kg: float, age_years: float = 25,
                           noise_floor: float = NOISE_FLOOR,
                           bands: ImpairmentBands = IMPAIRMENT_BANDS) -> EffectSummary:
    """
    Current concentration and alcohol equivalent of every dose still above
    `noise_floor`, with their total and its impairment level.
    """
    active = []
    for d in doses:
        c = current_concentration(d, evaluation_time, body_weight_kg, age_years)
        if c > noise_floor:
            active.append(ActiveDose(dose=d, concentration=c,
                                     alcohol_equivalent=float(to_subjective_effect(c, d.substance))))
    total = sum(a.alcohol_equivalent for a in active)
    return EffectSummary(active=tuple(active), total_alcohol_equivalent=total,
                         level=classify_impairment(total, bands))


def total_subjective_effect(doses: Iterable[DoseEvent], evaluation_time: datetime,
                            body_weight_kg: float, age_years: float = 25,
                            noise_floor: float = NOISE_FLOOR) -> float:
    """Sum of alcohol equivalents over doses whose concentration exceeds the noise floor."""
    return summarize_active_doses(doses, evaluation_time, body_weight_kg, age_years,
                                  noise_floor).total_alcohol_equivalent


def subjective_effect_curve(curves: Mapping[str, CurveResult],
                            factors: Optional[Mapping[str, float]] = None) -> CurveResult:
    """
    Combine per-substance curves that share one grid (generate_substance_curves)
    into a single alcohol-equivalent series.
    """
    if not curves:
        raise ValueError("subjective_effect_curve needs at least one curve.")
    factors = SUBJECTIVE_EFFECT_FACTORS if factors is None else factors
    first = next(iter(curves.values()))
    total = np.zeros_like(first.concentrations)
    for substance, curve in curves.items():
        if curve.start != first.start or not np.array_equal(curve.hours, first.hours):
            raise ValueError(f"Curve for {substance} is not on the shared grid.")
        total += to_subjective_effect(curve.concentrations, substance, factors)
    return CurveResult(
        substance="combined",
        route=None,
        start=first.start,
        hours=first.hours,
        times=first.times,
        concentrations=total,
        unit="mg/dL alcohol-eq",
    )
