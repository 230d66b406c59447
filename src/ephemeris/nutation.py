"""
===============================================================================
APPARENT POSITION - Nutation
===============================================================================
Short-period oscillation of the true equator and equinox about their mean
positions, expressed by two angles:

    dpsi  -- nutation in longitude
    deps  -- nutation in obliquity

Models:

    IAU1980   106-term series of the 1980 IAU theory (Seidelmann 1982)
    IAU2000   IAU 2000A luni-solar and planetary series (via ERFA)
    IAU2006   IAU2000 with the Wallace & Capitaine (2006) corrections
              for consistency with IAU 2006 precession
    FAST      Duffett-Smith's short series, usable for 1900-2100

From the angles and the mean obliquity eps two rotations follow:

    geocentric (equatorial):  Rx(-(eps + deps)) @ Rz(-dpsi) @ Rx(eps)
    ecliptic:                 Rx(-deps) @ Rz(-dpsi)

Both are orthonormal, so nutation is removed with the transpose.

References
----------
    [1] Seidelmann, "Summary of 1980 IAU Theory of Nutation", Trans. IAU
        XVIII A, 1982.
    [2] Explanatory Supplement to the Astronomical Almanac, pp. 114-115.
    [3] Wallace & Capitaine, A&A 459, 981 (2006), Eq. 5.
    [4] Duffett-Smith, "Practical Astronomy with your Calculator".
===============================================================================
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

import erfa
import numpy as np

from core.constants import (
    ARCSEC2RAD,
    DEG2RAD,
    JD_J2000,
    JULIAN_DAYS_PER_CENTURY,
)
from core.astro_math import frac, mod3600
from core.frames import Rx, Rz, compose, rotate, rotate_transposed
from core.vector import RectangularVector, Vector
from ephemeris.nutation_iau1980 import IAU1980_LEADING_TERM, IAU1980_TERMS
from ephemeris.obliquity import Obliquity

logger = logging.getLogger(__name__)


class NutationModel(Enum):
    """Nutation theories."""
    IAU1980 = "iau1980"
    IAU2000 = "iau2000"
    IAU2006 = "iau2006"
    FAST = "fast"


_IAU1980_TABLE = np.array(IAU1980_TERMS, dtype=np.float64)


# =============================================================================
# NUTATION ANGLES
# =============================================================================

def iau1980_fundamental_arguments(T: float) -> np.ndarray:
    """
    Delaunay arguments of the 1980 theory, FK5 system.

    Returns
    -------
    np.ndarray
        ``[MM, MS, FF, DD, OM]`` in radians: mean anomaly of the Moon, mean
        anomaly of the Sun, argument of latitude of the Moon, mean
        elongation of the Moon from the Sun, longitude of the Moon's node.
    """
    T2 = T * T
    MM = mod3600(1717915922.633 * T + 485866.733) + (0.064 * T + 31.310) * T2
    MS = mod3600(129596581.224 * T + 1287099.804) - (0.012 * T + 0.577) * T2
    FF = mod3600(1739527263.137 * T + 335778.877) + (0.011 * T - 13.257) * T2
    DD = mod3600(1602961601.328 * T + 1072261.307) + (0.019 * T - 6.891) * T2
    OM = mod3600(-6962890.539 * T + 450160.280) + (0.008 * T + 7.455) * T2
    return np.array([MM, MS, FF, DD, OM]) * ARCSEC2RAD


def _iau1980(T: float) -> Tuple[float, float]:
    T10 = T / 10.0
    args = iau1980_fundamental_arguments(T)

    W = _IAU1980_TABLE[:, :5] @ args
    a, b, c, d = (_IAU1980_TABLE[:, col] for col in range(5, 9))
    C = float(np.sum((a + b * T10) * np.sin(W)))
    D = float(np.sum((c + d * T10) * np.cos(W)))

    a0, b0, c0, d0 = IAU1980_LEADING_TERM
    OM = args[4]
    C += (a0 + b0 * T10) * math.sin(OM)
    D += (c0 + d0 * T10) * math.cos(OM)

    # Table units are 0.0001 arcsec
    return 1e-4 * C * ARCSEC2RAD, 1e-4 * D * ARCSEC2RAD


def _iau2000(T: float) -> Tuple[float, float]:
    dpsi, deps = erfa.nut00a(JD_J2000, T * JULIAN_DAYS_PER_CENTURY)
    return float(dpsi), float(deps)


def _iau2006(T: float) -> Tuple[float, float]:
    dpsi, deps = _iau2000(T)
    return (dpsi * (1.0 + (0.4697e-6 - 2.7774e-6 * T)),
            deps * (1.0 - 2.7774e-6 * T))


def _fast(T: float) -> Tuple[float, float]:
    # Arguments count centuries from 1900 January 0.5 (JD 2415020.0)
    T = T + 1.0
    T2 = T * T

    L1 = 279.6967 + 0.000303 * T2 + 360.0 * frac(100.0021358 * T)
    L2 = 2.0 * L1 * DEG2RAD

    D1 = 270.4342 - 0.001133 * T2 + 360.0 * frac(1336.855231 * T)
    D2 = 2.0 * D1 * DEG2RAD

    M1 = (358.4758 - 0.00015 * T2 + 360.0 * frac(99.99736056 * T)) * DEG2RAD
    M2 = (296.1046 + 0.009192 * T2 + 360.0 * frac(1325.552359 * T)) * DEG2RAD

    N1 = (259.1833 + 0.002078 * T2 - 360.0 * frac(5.372616667 * T)) * DEG2RAD
    N2 = 2.0 * N1

    dp = (-17.2327 - 0.01737 * T) * math.sin(N1)
    dp += (-1.2729 - 0.00013 * T) * math.sin(L2) + 0.2088 * math.sin(N2)
    dp += -0.2037 * math.sin(D2) + (0.1261 - 0.00031 * T) * math.sin(M1)
    dp += 0.0675 * math.sin(M2) - (0.0497 - 0.00012 * T) * math.sin(L2 + M1)
    dp += -0.0342 * math.sin(D2 - N1) - 0.0261 * math.sin(D2 + M2)
    dp += 0.0214 * math.sin(L2 - M1) - 0.0149 * math.sin(L2 - D2 + M2)
    dp += 0.0124 * math.sin(L2 - N1) + 0.0114 * math.sin(D2 - M2)

    de = (9.21 + 0.00091 * T) * math.cos(N1)
    de += (0.5522 - 0.00029 * T) * math.cos(L2) - 0.0904 * math.cos(N2)
    de += 0.0884 * math.cos(D2) + 0.0216 * math.cos(L2 + M1)
    de += 0.0183 * math.cos(D2 - N1) + 0.0113 * math.cos(D2 + M2)
    de += -0.0093 * math.cos(L2 - M1) - 0.0066 * math.cos(L2 - N1)

    return dp * ARCSEC2RAD, de * ARCSEC2RAD


_ANGLE_FUNCTIONS = {
    NutationModel.IAU1980: _iau1980,
    NutationModel.IAU2000: _iau2000,
    NutationModel.IAU2006: _iau2006,
    NutationModel.FAST: _fast,
}


def nutation_angles(model: NutationModel, T: float) -> Tuple[float, float]:
    """
    Nutation in longitude and obliquity.

    Parameters
    ----------
    model : NutationModel
        Theory to evaluate.
    T : float
        Julian centuries since J2000 (TT).

    Returns
    -------
    tuple of float
        ``(dpsi, deps)`` in radians.
    """
    dpsi, deps = _ANGLE_FUNCTIONS[model](T)
    logger.debug("Nutation %s at T=%.8f: dpsi=%.4f\" deps=%.4f\"",
                 model.name, T, dpsi / ARCSEC2RAD, deps / ARCSEC2RAD)
    return dpsi, deps


# =============================================================================
# NUTATION TRANSFORM
# =============================================================================

@dataclass(frozen=True)
class Nutation:
    """
    Nutation angles at one epoch and the rotations they define.

    Attributes
    ----------
    model : NutationModel
        Theory used.
    T : float
        Julian centuries since J2000.
    dpsi, deps : float
        Nutation in longitude and obliquity (rad).
    mean_eps : float
        Mean obliquity of date the geocentric matrix is built around (rad).
    """
    model: NutationModel
    T: float
    dpsi: float
    deps: float
    mean_eps: float
    geocentric_matrix: np.ndarray = field(init=False, repr=False, compare=False)
    ecliptic_matrix: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        geocentric = compose(Rx(-(self.mean_eps + self.deps)), Rz(-self.dpsi), Rx(self.mean_eps))
        ecliptic = compose(Rx(-self.deps), Rz(-self.dpsi))
        object.__setattr__(self, 'geocentric_matrix', geocentric)
        object.__setattr__(self, 'ecliptic_matrix', ecliptic)

    @classmethod
    def create(cls, model: NutationModel, T: float, obliquity: Obliquity) -> 'Nutation':
        dpsi, deps = nutation_angles(model, T)
        return cls(model, T, dpsi, deps, obliquity.mean_eps)

    @property
    def true_eps(self) -> float:
        """True obliquity of date, eps + deps (rad)."""
        return self.mean_eps + self.deps

    def apply_to_ecliptic(self, vector: Vector) -> RectangularVector:
        """Mean ecliptic of date -> true ecliptic of date."""
        return rotate(self.ecliptic_matrix, vector)

    def remove_from_ecliptic(self, vector: Vector) -> RectangularVector:
        """True ecliptic of date -> mean ecliptic of date."""
        return rotate_transposed(self.ecliptic_matrix, vector)

    def apply_to_geocentric(self, vector: Vector) -> RectangularVector:
        """Mean equator and equinox of date -> true equator and equinox."""
        return rotate(self.geocentric_matrix, vector)

    def remove_from_geocentric(self, vector: Vector) -> RectangularVector:
        """True equator and equinox of date -> mean equator and equinox."""
        return rotate_transposed(self.geocentric_matrix, vector)
