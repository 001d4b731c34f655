import logging
from dataclasses import replace
from datetime import timedelta

import pytest

from conctrack.config import ALCOHOL_CALIBRATION, Settings, load_settings
from conctrack.curves import default_duration_h, generate_curve
from conctrack.dosing import dose_event
from conctrack.exceptions import ConfigurationError
from conctrack.logger import get_logger, setup_logging
from conctrack.models.alcohol import peak_bac
from conctrack.normalize import summarize_active_doses


def test_defaults_without_environment():
    settings = load_settings({})
    assert settings == Settings()
    assert settings.body_weight_kg == 70.0
    assert settings.noise_floor == 0.01
    assert settings.impairment_bands.breakpoints == (10.0, 30.0, 50.0, 80.0, 150.0)


def test_environment_overrides():
    settings = load_settings({
        "CONCTRACK_BODY_WEIGHT_KG": "82",
        "CONCTRACK_AGE_YEARS": "70",
        "CONCTRACK_NOISE_FLOOR": "0.5",
        "CONCTRACK_MAX_DURATION_H": "24",
        "CONCTRACK_IMPAIRMENT_BREAKPOINTS": "20,40,60,80,100",
    })
    assert settings.body_weight_kg == 82.0
    assert settings.age_years == 70.0
    assert settings.noise_floor == 0.5
    assert settings.sampling.max_duration_h == 24.0
    assert settings.impairment_bands.breakpoints == (20.0, 40.0, 60.0, 80.0, 100.0)


@pytest.mark.parametrize("env", [
    {"CONCTRACK_BODY_WEIGHT_KG": "heavy"},
    {"CONCTRACK_BODY_WEIGHT_KG": "0"},
    {"CONCTRACK_AGE_YEARS": "-3"},
    {"CONCTRACK_NOISE_FLOOR": "-0.5"},
    {"CONCTRACK_MAX_DURATION_H": "0"},
    {"CONCTRACK_IMPAIRMENT_BREAKPOINTS": "10,x"},
    {"CONCTRACK_IMPAIRMENT_BREAKPOINTS": "50,30,10,5,1"},
])
def test_bad_overrides(env):
    with pytest.raises(ConfigurationError):
        load_settings(env)


def test_calibration_is_replaceable():
    stronger = replace(ALCOHOL_CALIBRATION, peak_per_drink_mg_dl=40.0)
    assert peak_bac(14000.0, 1.0, 82.0, stronger) == pytest.approx(40.0)
    assert peak_bac(14000.0, 1.0, 82.0) == pytest.approx(30.0)


def test_setup_logging_writes_file(tmp_path):
    logger = setup_logging(log_level="DEBUG", log_dir=tmp_path, logger_name="conctrack.test_setup")
    assert logger.level == logging.DEBUG
    get_logger("conctrack.test_setup").debug("hello")
    for h in logger.handlers:
        h.flush()
    assert "hello" in (tmp_path / "conctrack.log").read_text()
    for h in list(logger.handlers):
        h.close()
        logger.removeHandler(h)


def test_settings_validated_when_built_directly():
    with pytest.raises(ConfigurationError):
        Settings(noise_floor=-1.0)


def test_loaded_settings_drive_curves_and_summary(evening):
    settings = load_settings({
        "CONCTRACK_MAX_DURATION_H": "24",
        "CONCTRACK_NOISE_FLOOR": "1000",
        "CONCTRACK_IMPAIRMENT_BREAKPOINTS": "1,2,3,4,5",
    })
    d = dose_event("alcohol", "oral", 2, "drinks", evening)

    assert default_duration_h("thc", "oral", sampling=settings.sampling) == 24.0
    curve = generate_curve(10.0, "thc", "oral", evening, settings.body_weight_kg, settings.age_years,
                           sampling=settings.sampling)
    assert curve.times[-1] == evening + timedelta(hours=24)

    now = evening + timedelta(hours=1)
    quiet = summarize_active_doses([d], now, settings.body_weight_kg, settings.age_years,
                                   noise_floor=settings.noise_floor, bands=settings.impairment_bands)
    assert quiet.active == () and quiet.level == "Minimal"

    strict = summarize_active_doses([d], now, settings.body_weight_kg, settings.age_years,
                                    bands=settings.impairment_bands)
    assert strict.level == "Dangerous"
