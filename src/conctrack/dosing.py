# src/conctrack/dosing.py
from __future__ import annotations

from datetime import datetime
from typing import Iterable, Sequence, Tuple

from .config import DOSE_CONVERSION, DoseConversion
from .exceptions import InvalidDoseError
from .logger import get_logger
from .profiles import SUBSTANCES, routes_for
from .types import DoseEvent, Route, Substance, Unit

logger = get_logger(__name__)


def normalize_dose(quantity: float, unit: str, substance: str,
                   conversion: DoseConversion = DOSE_CONVERSION) -> float:
    """
    Convert an entered quantity to milligrams.

      g                -> x 1000
      ml  (alcohol)    -> pure-ethanol mass of a 40% ABV spirit: x 789 mg/mL x 0.4
      drinks (alcohol) -> x 14000 (one standard drink = 14 g ethanol)
      mg, or anything else -> unchanged

    Unrecognized units (and ml/drinks for non-alcohol substances) pass through
    unchanged on purpose; no error is raised.
    """
    if unit == "g":
        return quantity * conversion.mg_per_g
    if substance == "alcohol":
        if unit == "ml":
            return quantity * conversion.ethanol_density_mg_per_ml * conversion.assumed_abv
        if unit == "drinks":
            return quantity * conversion.mg_per_standard_drink
    if unit != "mg":
        logger.debug("Unit %r not converted for %s; treating quantity as mg", unit, substance)
    return quantity


def dose_event(substance: Substance, route: Route, quantity: float, unit: Unit = "mg",
               time: datetime | None = None) -> DoseEvent:
    """
    Create one validated dose event.
    Examples:
      - 2 drinks of alcohol orally now
      - 10 mg THC inhaled at 21:00
    time : administration time (defaults to now)
    """
    _validate_substance(substance)
    _validate_non_negative("quantity", quantity)
    if route not in routes_for(substance):
        # Allowed: the engine reports zero for unsupported pairs.
        logger.debug("Route %r has no profile for %s; its concentration will be zero", route, substance)
    return DoseEvent(substance=substance, route=route, quantity=float(quantity), unit=unit,
                     time=time if time is not None else datetime.now())


def from_explicit_schedule(entries: Sequence[Tuple[datetime, float]], substance: Substance,
                           route: Route, unit: Unit = "mg") -> tuple[DoseEvent, ...]:
    """
    Build dose events from manual (time, quantity) entries of one substance.
    Example: entries=[(t0, 1), (t0 + timedelta(hours=1), 1)] with unit="drinks"
    """
    doses = [dose_event(substance, route, quantity, unit, time) for time, quantity in entries]
    doses.sort(key=lambda d: d.time)
    return tuple(doses)


def combine_doses(*groups: Iterable[DoseEvent]) -> tuple[DoseEvent, ...]:
    """
    Merge several dose lists (e.g., an evening of drinks + an edible) into one,
    sorted by administration time.
    """
    all_doses: list[DoseEvent] = []
    for g in groups:
        all_doses.extend(g)
    return tuple(sorted(all_doses, key=lambda d: (d.time, d.substance)))


# --------------------------
# Small input validators
# --------------------------
def _validate_non_negative(name: str, x: float) -> None:
    if not (x >= 0):
        raise InvalidDoseError(f"{name} must be >= 0 (got {x}).")

def _validate_substance(substance: str) -> None:
    if substance not in SUBSTANCES:
        raise InvalidDoseError(f"Unknown substance '{substance}' (expected one of {', '.join(SUBSTANCES)}).")
