"""
Shared fixtures for the conctrack tests.
"""

from datetime import datetime

import pytest


@pytest.fixture
def evening():
    """Fixed reference time for dose events."""
    return datetime(2025, 6, 14, 20, 0)


@pytest.fixture
def adult():
    """Reference adult used by the empirical calibrations."""
    return {"body_weight_kg": 70.0, "age_years": 25}
