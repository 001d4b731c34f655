from datetime import timedelta

import pytest

from conctrack.dosing import combine_doses, dose_event, from_explicit_schedule, normalize_dose
from conctrack.exceptions import InvalidDoseError


def test_grams_to_mg_for_any_substance():
    for substance in ("alcohol", "thc", "cbd", "mdma", "psilocybin", "unknown"):
        assert normalize_dose(1, "g", substance) == 1000


def test_mg_passes_through():
    assert normalize_dose(12.5, "mg", "thc") == 12.5
    assert normalize_dose(12.5, "mg", "alcohol") == 12.5


def test_alcohol_units():
    assert normalize_dose(1, "drinks", "alcohol") == 14000
    # 100 mL of 40% spirit: 100 * 789 mg/mL * 0.4
    assert normalize_dose(100, "ml", "alcohol") == pytest.approx(31560.0)


def test_alcohol_only_units_ignored_for_other_substances():
    assert normalize_dose(2, "drinks", "thc") == 2
    assert normalize_dose(5, "ml", "cbd") == 5


def test_unknown_unit_is_identity():
    assert normalize_dose(3, "tabs", "mdma") == 3


def test_dose_event_validation(evening):
    d = dose_event("thc", "inhaled", 10, "mg", evening)
    assert d.quantity == 10.0 and d.time == evening

    with pytest.raises(InvalidDoseError):
        dose_event("thc", "oral", -1, "mg", evening)
    with pytest.raises(ValueError):
        dose_event("ketamine", "oral", 10, "mg", evening)


def test_unsupported_route_still_builds(evening):
    d = dose_event("mdma", "inhaled", 100, "mg", evening)
    assert d.route == "inhaled"


def test_explicit_schedule_sorted(evening):
    entries = [(evening + timedelta(hours=2), 1), (evening, 1), (evening + timedelta(hours=1), 1)]
    doses = from_explicit_schedule(entries, "alcohol", "oral", unit="drinks")
    assert [d.time for d in doses] == sorted(e[0] for e in entries)
    assert all(d.unit == "drinks" for d in doses)


def test_combine_doses(evening):
    drinks = from_explicit_schedule([(evening, 1), (evening + timedelta(hours=1), 1)], "alcohol", "oral", "drinks")
    edible = (dose_event("thc", "oral", 10, "mg", evening + timedelta(minutes=30)),)
    combined = combine_doses(drinks, edible)

    assert len(combined) == 3
    assert [d.substance for d in combined] == ["alcohol", "thc", "alcohol"]
