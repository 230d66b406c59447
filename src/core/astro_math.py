"""
Scalar helpers shared by the series evaluations: fractional part, modular
reduction of angles and arc-seconds, and the two polynomial conventions used
by the coefficient tables (ascending powers and Horner / descending powers).
"""

import math
from typing import Sequence

import numpy as np
from numpy.polynomial import polynomial as P

from core.constants import ARCSEC_PER_CIRCLE


def frac(x: float) -> float:
    """Fractional part of *x*, always in [0, 1)."""
    return x - math.floor(x)


def modulo(x: float, y: float) -> float:
    """*x* modulo *y* with the sign of *y*."""
    return y * frac(x / y)


def mod3600(arcsec: float) -> float:
    """Reduce an angle in arc-seconds to [0, 1296000)."""
    return arcsec - ARCSEC_PER_CIRCLE * math.floor(arcsec / ARCSEC_PER_CIRCLE)


def polynomial_sum(coefficients: Sequence[float], x: float) -> float:
    """
    Evaluate ``c[0] + c[1]*x + c[2]*x**2 + ...`` (ascending powers).

    This is the layout of the obliquity and orbital-element tables.
    """
    return float(P.polyval(x, coefficients))


def horner(coefficients: Sequence[float], x: float) -> float:
    """
    Evaluate ``c[0]*x**(n-1) + ... + c[n-1]`` by Horner's rule
    (descending powers).

    This is the layout of the ecliptic precession tables.
    """
    return float(np.polyval(coefficients, x))
