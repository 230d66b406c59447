"""
===============================================================================
APPARENT POSITION - Mean Obliquity of the Ecliptic
===============================================================================
Angle between the mean ecliptic and the mean equator of date, and the
rotation it defines between ecliptic and equatorial coordinates:

    v_equatorial = Rx(-eps) @ v_ecliptic

Available expansions (T in Julian centuries since J2000):

    WILLIAMS_1994   Williams (1994), DE403 ephemeris
    SIMON_1994      Simon et al. (1994)
    LASKAR_1996     Laskar (1986), 0.01" after 1000 years
    IAU_1976        Lieske et al. (1977)
    IAU_2006        Capitaine et al. (2003), Hilton et al. (2006)
    VONDRAK_2011    Vondrak et al. (2011), long-term, +-200 000 years

The polynomial models are evaluated in T/100 (Julian ten-millennia) around
a J2000 constant ``23 deg 26' X"``.  Vondrak's model is a cubic in T plus ten
periodic terms.
===============================================================================
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from core.constants import ARCSEC2RAD, MINUTES_PER_DEGREE, SECONDS_PER_DEGREE, TWO_PI
from core.astro_math import polynomial_sum
from core.frames import Rx, rotate, transpose
from core.vector import RectangularVector, Vector

logger = logging.getLogger(__name__)


class ObliquityModel(Enum):
    """Mean obliquity expansions."""
    WILLIAMS_1994 = "williams_1994"
    SIMON_1994 = "simon_1994"
    LASKAR_1996 = "laskar_1996"
    IAU_1976 = "iau_1976"
    IAU_2006 = "iau_2006"
    VONDRAK_2011 = "vondrak_2011"


def _j2000_value(arcsec: float) -> float:
    """23 degrees 26 minutes plus *arcsec*, in arc-seconds."""
    return 23.0 * SECONDS_PER_DEGREE + 26.0 * MINUTES_PER_DEGREE + arcsec


# (J2000 value in arcsec, coefficients of T/100 in arcsec)
_POLYNOMIAL_MODELS = {
    ObliquityModel.WILLIAMS_1994: (
        _j2000_value(21.406173),
        (0.0, -4683.396, -1.75, 1998.9, -51.38, -249.67, -39.05, 7.12, 27.87, 5.79, 2.45),
    ),
    ObliquityModel.SIMON_1994: (
        _j2000_value(21.412),
        (0.0, -4680.927, -1.52, 1998.9, -51.38, -249.67, -39.05, 7.12, 27.87, 5.79, 2.45),
    ),
    ObliquityModel.LASKAR_1996: (
        _j2000_value(21.448),
        (0.0, -4680.93, -1.55, 1999.25, -51.38, -249.67, -39.05, 7.12, 27.87, 5.79, 2.45),
    ),
    ObliquityModel.IAU_1976: (
        _j2000_value(21.448),
        (0.0, -4681.5, -5.9, 1813.0),
    ),
    ObliquityModel.IAU_2006: (
        _j2000_value(21.406),
        (0.0, -4683.6769, -1.831, 2003.400, -57.6, -434.0),
    ),
}

# Vondrak et al. (2011): polynomial part in T (arcsec)
VONDRAK_POLYNOMIAL = (84028.206305, 0.3624445, -0.00004039, -110e-9)

# Vondrak et al. (2011): (period in centuries, cosine amplitude, sine amplitude), arcsec
VONDRAK_PERIODIC = (
    (409.90, 753.872780, -1704.720302),
    (396.15, -247.805823, -862.308358),
    (537.22, 379.471484, 447.832178),
    (402.90, -53.880558, -889.571909),
    (417.15, -90.109153, 190.402846),
    (288.92, -353.600190, -56.564991),
    (4043.00, -63.115353, -296.222622),
    (306.00, -28.248187, -75.859952),
    (277.00, 17.703387, 67.473503),
    (203.00, 38.911307, 3.014055),
)


def _vondrak_obliquity(T: float) -> float:
    w = TWO_PI * T
    periodic = sum(
        c * math.cos(w / period) + s * math.sin(w / period)
        for period, c, s in VONDRAK_PERIODIC
    )
    return (polynomial_sum(VONDRAK_POLYNOMIAL, T) + periodic) * ARCSEC2RAD


def mean_obliquity(model: ObliquityModel, T: float) -> float:
    """
    Mean obliquity of the ecliptic.

    Parameters
    ----------
    model : ObliquityModel
        Expansion to evaluate.
    T : float
        Julian centuries since J2000.

    Returns
    -------
    float
        Mean obliquity (rad).
    """
    if model is ObliquityModel.VONDRAK_2011:
        return _vondrak_obliquity(T)
    j2000, coeffs = _POLYNOMIAL_MODELS[model]
    return (j2000 + polynomial_sum(coeffs, T / 100.0)) * ARCSEC2RAD


# =============================================================================
# OBLIQUITY TRANSFORM
# =============================================================================

@dataclass(frozen=True)
class Obliquity:
    """
    Mean obliquity at one epoch together with its rotation matrices.

    Attributes
    ----------
    model : ObliquityModel
        Expansion used.
    T : float
        Julian centuries since J2000.
    mean_eps : float
        Mean obliquity (rad).
    """
    model: ObliquityModel
    T: float
    mean_eps: float
    ecliptic_to_equatorial_matrix: np.ndarray = field(init=False, repr=False, compare=False)
    equatorial_to_ecliptic_matrix: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        m = Rx(-self.mean_eps)
        object.__setattr__(self, 'ecliptic_to_equatorial_matrix', m)
        object.__setattr__(self, 'equatorial_to_ecliptic_matrix', transpose(m))

    @classmethod
    def create(cls, model: ObliquityModel, T: float) -> 'Obliquity':
        eps = mean_obliquity(model, T)
        logger.debug("Mean obliquity %s at T=%.8f: %.10f rad", model.name, T, eps)
        return cls(model, T, eps)

    def ecliptic_to_equatorial(self, vector: Vector) -> RectangularVector:
        """Rotate an ecliptic vector onto the mean equator."""
        return rotate(self.ecliptic_to_equatorial_matrix, vector)

    def equatorial_to_ecliptic(self, vector: Vector) -> RectangularVector:
        """Rotate a mean-equatorial vector onto the ecliptic."""
        return rotate(self.equatorial_to_ecliptic_matrix, vector)
