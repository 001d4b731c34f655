"""
Exceptions raised by conctrack.

Most problems in the kinetic core fail soft (an unknown substance/route
yields zero concentration, an unknown unit converts as identity). The
classes below cover the inputs that cannot be evaluated at all.

ConcTrackError (base)
├── InvalidDoseError      bad quantity, unknown substance in a dose builder
├── InvalidPatientError   non-positive body weight, negative age
└── ConfigurationError    malformed calibration or environment override
"""


class ConcTrackError(Exception):
    """Base exception for all conctrack errors."""
    pass


class InvalidDoseError(ConcTrackError, ValueError):
    """
    Raised when a dose event cannot be built.

    Examples:
        - Negative quantity
        - Substance without any profile in the parameter table
    """
    pass


class InvalidPatientError(ConcTrackError, ValueError):
    """
    Raised for body parameters the models cannot scale by.

    Examples:
        - Body weight of zero or below
        - Negative age
    """
    pass


class ConfigurationError(ConcTrackError, ValueError):
    """
    Raised for calibration values that would break the models.

    Examples:
        - Impairment breakpoints that are not strictly ascending
        - Non-numeric CONCTRACK_* environment override
    """
    pass
