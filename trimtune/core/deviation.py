"""Length deviation and severity classification."""

import math

from trimtune.constants import WARN_MARGIN_MM
from trimtune.core.models import DeviationResult


SEVERITY_NONE = "none"
SEVERITY_OK = "ok"
SEVERITY_YELLOW = "yellow"
SEVERITY_RED = "red"


def is_finite(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def round_half_away(value):
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    a = abs(value)
    whole = math.floor(a)
    if a - whole >= 0.5:
        whole += 1
    return int(math.copysign(whole, value))


def delta_mm(nominal, measured, correction=0, adjustment=0):
    """Signed deviation in mm, None when nominal or measured is missing."""
    if nominal is None or measured is None:
        return None
    return measured + (correction or 0) + (adjustment or 0) - nominal


def severity(delta, tolerance):
    """Classify a deviation against the tolerance.

    The yellow band starts a fixed 3 mm below the tolerance. A tolerance of
    zero or less means nothing is ever flagged.
    """
    if not is_finite(delta):
        return SEVERITY_NONE
    tol = tolerance or 0
    if tol <= 0:
        return SEVERITY_OK
    warn_band = max(0, tol - WARN_MARGIN_MM)
    a = abs(delta)
    if a >= tol:
        return SEVERITY_RED
    if a >= warn_band:
        return SEVERITY_YELLOW
    return SEVERITY_OK


def deviation(nominal, measured, correction, adjustment, tolerance):
    delta = delta_mm(nominal, measured, correction, adjustment)
    return DeviationResult(delta=delta, severity=severity(delta, tolerance))
