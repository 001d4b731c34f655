from datetime import timedelta

import numpy as np
import pytest

from conctrack.curves import (current_concentration, default_duration_h, generate_curve,
                              generate_substance_curves, plot_window, sample_hours)
from conctrack.dosing import dose_event
from conctrack.engine import concentration_at
from conctrack.exceptions import InvalidDoseError


def test_sampling_cadence():
    t = sample_hours(48.0)
    assert t[0] == 0.0 and t[-1] == 48.0
    assert np.allclose(np.diff(t[:49]), 0.25)     # 0 .. 12 h every 15 min
    assert np.allclose(np.diff(t[48:]), 1.0)      # then hourly
    assert len(t) == 49 + 36

    short = sample_hours(6.0)
    assert len(short) == 25 and short[-1] == 6.0


def test_default_duration():
    assert default_duration_h("psilocybin", "oral") == 15.0   # 5 half-lives
    assert default_duration_h("thc", "oral") == 48.0           # capped
    assert default_duration_h("alcohol", "oral") == 48.0       # no half-life
    assert default_duration_h("mdma", "inhaled") == 48.0       # unknown pair


def test_generate_curve(evening, adult):
    curve = generate_curve(100.0, "mdma", "oral", evening, **adult)

    assert curve.times[0] == evening
    assert curve.times[-1] == evening + timedelta(hours=40)
    assert len(curve) == len(curve.hours) == len(curve.concentrations)
    assert curve.concentrations[0] == 0.0
    assert np.all(curve.concentrations >= 0.0)
    assert curve.unit == "ng/mL"

    samples = curve.samples
    assert samples[8].time == evening + timedelta(hours=2)
    assert samples[8].concentration == pytest.approx(
        concentration_at(100.0, "mdma", "oral", 2.0, **adult))


def test_two_identical_doses_double_the_curve(evening, adult):
    d = dose_event("mdma", "oral", 100, "mg", evening)
    window = dict(start=evening - timedelta(hours=6), end=evening + timedelta(hours=24))

    single = generate_substance_curves([d], **adult, **window)["mdma"]
    double = generate_substance_curves([d, d], **adult, **window)["mdma"]

    assert np.array_equal(double.concentrations, 2.0 * single.concentrations)


def test_future_doses_contribute_nothing_before_their_time(evening, adult):
    later = evening + timedelta(hours=10)
    curves = generate_substance_curves(
        [dose_event("thc", "oral", 10, "mg", later)], **adult,
        start=evening, end=evening + timedelta(hours=20),
    )
    curve = curves["thc"]
    before = curve.hours <= 10.0
    assert np.all(curve.concentrations[before] == 0.0)
    assert np.all(curve.concentrations[~before] > 0.0)


def test_staggered_doses_sum_on_shared_grid(evening, adult):
    first = dose_event("alcohol", "oral", 1, "drinks", evening)
    second = dose_event("alcohol", "oral", 1, "drinks", evening + timedelta(minutes=70))
    window = dict(start=evening, end=evening + timedelta(hours=8))

    both = generate_substance_curves([first, second], **adult, **window)["alcohol"]
    a = generate_substance_curves([first], **adult, **window)["alcohol"]
    b = generate_substance_curves([second], **adult, **window)["alcohol"]

    assert np.allclose(both.concentrations, a.concentrations + b.concentrations)
    assert both.unit == "mg/dL"


def test_aggregated_curve_matches_single_dose_curve(evening, adult):
    d = dose_event("psilocybin", "oral", 25, "mg", evening)
    aggregated = generate_substance_curves([d], **adult, start=evening,
                                           end=evening + timedelta(hours=12))["psilocybin"]
    single = generate_curve(25.0, "psilocybin", "oral", evening, duration_h=12.0, **adult)

    assert np.allclose(aggregated.hours, single.hours)
    assert np.allclose(aggregated.concentrations, single.concentrations)


def test_one_curve_per_substance_with_default_window(evening, adult):
    doses = [
        dose_event("thc", "oral", 10, "mg", evening),
        dose_event("thc", "inhaled", 5, "mg", evening + timedelta(hours=2)),
        dose_event("alcohol", "oral", 2, "drinks", evening + timedelta(hours=1)),
    ]
    curves = generate_substance_curves(doses, **adult)

    assert set(curves) == {"thc", "alcohol"}
    assert curves["thc"].route is None
    assert curves["alcohol"].route == "oral"

    start, end = plot_window(doses)
    assert start == evening - timedelta(hours=6)
    assert end == evening + timedelta(hours=50)
    for curve in curves.values():
        assert curve.times[0] == start and curve.times[-1] == end
        assert np.allclose(np.diff(curve.hours), 0.25)


def test_no_doses(adult):
    assert generate_substance_curves([], **adult) == {}
    with pytest.raises(InvalidDoseError):
        plot_window([])


def test_current_concentration(evening, adult):
    d = dose_event("mdma", "oral", 0.1, "g", evening)

    assert current_concentration(d, evening - timedelta(hours=1), **adult) == 0.0
    now = current_concentration(d, evening + timedelta(hours=2), **adult)
    assert now == pytest.approx(concentration_at(100.0, "mdma", "oral", 2.0, **adult))
