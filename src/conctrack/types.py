# src/conctrack/types.py
from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Optional

import numpy as np

# Elapsed time is kept in HOURS internally; only DoseEvent/CurveResult carry wall-clock datetimes.
Substance = Literal["alcohol", "thc", "cbd", "mdma", "psilocybin"]
Route = Literal["oral", "inhaled", "liquid"]
Unit = Literal["mg", "g", "ml", "drinks"]


@dataclass(frozen=True)
class SubstanceProfile:
    """
    Kinetic parameters for one (substance, route) pair.

    bioavailability        : fraction of the dose reaching circulation (0-1)
    absorption_rate        : first-order absorption constant ka (1/h)
    elimination_rate       : first-order elimination constant ke (1/h);
                             None means zero-order (capacity-limited) elimination
    volume_of_distribution : L per kg body weight
    tmax                   : observed time to peak (h)
    half_life              : hours, None for zero-order substances
    elimination_capacity   : constant elimination rate in mg/dL/h (alcohol only)
    non_linear             : dose-dependent kinetics approximated empirically
    unit                   : unit of the concentrations produced for this profile
    """
    bioavailability: float
    absorption_rate: Optional[float]
    elimination_rate: Optional[float]
    volume_of_distribution: float
    tmax: float
    half_life: Optional[float] = None
    elimination_capacity: Optional[float] = None
    non_linear: bool = False
    unit: str = "ng/mL"


@dataclass(frozen=True)
class DoseEvent:
    """
    A single administration as entered by the user.

    substance : what was taken (e.g., "thc")
    route     : how it was taken (oral, inhaled, liquid)
    quantity  : raw amount as entered, in `unit`
    unit      : mg, g, ml or drinks (see dosing.normalize_dose)
    time      : when it was taken
    """
    substance: Substance
    route: Route
    quantity: float
    unit: Unit
    time: datetime


@dataclass(frozen=True)
class ConcentrationSample:
    time: datetime
    concentration: float


@dataclass(frozen=True, eq=False)
class CurveResult:
    """
    A concentration-time series, ordered by time ascending.

    hours          : elapsed hours from `start` for each sample
    times          : absolute timestamps for each sample
    concentrations : concentration at each sample (>= 0), in `unit`
    route          : None when the curve aggregates doses of several routes
    """
    substance: str
    route: Optional[str]
    start: datetime
    hours: np.ndarray
    times: tuple[datetime, ...]
    concentrations: np.ndarray
    unit: str

    @property
    def samples(self) -> list[ConcentrationSample]:
        return [
            ConcentrationSample(time=t, concentration=float(c))
            for t, c in zip(self.times, self.concentrations)
        ]

    def __len__(self) -> int:
        return len(self.times)
