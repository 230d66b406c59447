"""
===============================================================================
APPARENT POSITION - Precession
===============================================================================
Rotation from the mean frame of J2000 to the mean frame of date.

Two families of models exist:

    **Ecliptic** (operate on ecliptic vectors)
        WILLIAMS_1994, DE4XX, SIMON_1994, LASKAR_1986, IAU_1976

        M = Rz(-(W + p_A)) @ Rx(z) @ Rz(W)

        with p_A (general precession, arcsec) and the ecliptic pole angles
        W, z (rad) given as Horner polynomials in T/10.

    **Equatorial** (operate on equatorial vectors)
        VONDRAK_2011, IAU_2009, IAU_2006, IAU_2000

        M = Rz(chi_A) @ Rx(-omega_A) @ Rz(-psi_A) @ Rx(eps_0)

        Vondrak's long-term model adds 14 periodic terms to each angle.

Every matrix is a rotation, so ``to_j2000_matrix`` is the transpose of
``from_j2000_matrix`` for every model.

References
----------
    [1] Williams, AJ 108, 711 (1994).
    [2] Simon et al., A&A 282, 663 (1994).
    [3] Laskar, A&A 157, 59 (1986).
    [4] Lieske et al., A&A 58, 1 (1977).
    [5] Capitaine et al., A&A 412, 567 (2003); A&A 400, 1145 (2003).
    [6] Vondrak, Capitaine & Wallace, A&A 534, A22 (2011).
===============================================================================
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from core.constants import ARCSEC2RAD, TWO_PI
from core.astro_math import horner, polynomial_sum
from core.frames import Rx, Rz, compose, rotate, transpose
from core.vector import RectangularVector, Vector

logger = logging.getLogger(__name__)


class PrecessionModel(Enum):
    """Precession theories."""
    VONDRAK_2011 = "vondrak_2011"
    IAU_2009 = "iau_2009"
    IAU_2006 = "iau_2006"
    IAU_2000 = "iau_2000"
    DE4XX = "de4xx"
    SIMON_1994 = "simon_1994"
    WILLIAMS_1994 = "williams_1994"
    LASKAR_1986 = "laskar_1986"
    IAU_1976 = "iau_1976"

    @property
    def is_ecliptic(self) -> bool:
        return self in _ECLIPTIC_TABLES


# =============================================================================
# ECLIPTIC MODELS
# =============================================================================
# (p_A in arcsec, W in rad, z in rad); descending powers of T/10.

_PI_WILLIAMS = (6.6402e-16, -2.69151e-15, -1.547021e-12, 7.521313e-12, 1.9e-10,
                -3.54e-9, -1.8103e-7, 1.26e-7, 7.436169e-5, -0.04207794833,
                3.052115282424)
_PI_LASKAR = (6.6402e-16, -2.69151e-15, -1.547021e-12, 7.521313e-12, 6.3190131e-10,
              -3.48388152e-9, -1.813065896e-7, 2.75036225e-8, 7.4394531426e-5,
              -0.042078604317, 3.052112654975)
_Z_WILLIAMS = (1.2147e-16, 7.3759e-17, -8.26287e-14, 2.503410e-13, 2.4650839e-11,
               -5.4000441e-11, 1.32115526e-9, -6.012e-7, -1.62442e-5,
               0.00227850649, 0.0)
_Z_LASKAR = (1.2147e-16, 7.3759e-17, -8.26287e-14, 2.503410e-13, 2.4650839e-11,
             -5.4000441e-11, 1.32115526e-9, -5.998737027e-7, -1.6242797091e-5,
             0.002278495537, 0.0)
_PA_HIGH_ORDER = (-8.66e-10, -4.759e-8, 2.424e-7, 1.3095e-5, 1.7451e-4,
                  -1.8055e-3, -0.235316)

_ECLIPTIC_TABLES = {
    PrecessionModel.WILLIAMS_1994: (
        _PA_HIGH_ORDER + (0.076, 110.5407, 50287.70000),
        _PI_WILLIAMS,
        _Z_WILLIAMS,
    ),
    PrecessionModel.DE4XX: (
        _PA_HIGH_ORDER + (0.076, 110.5414, 50287.91959),
        _PI_WILLIAMS,
        _Z_WILLIAMS,
    ),
    PrecessionModel.SIMON_1994: (
        _PA_HIGH_ORDER + (0.07732, 111.2022, 50288.200),
        (6.6402e-16, -2.69151e-15, -1.547021e-12, 7.521313e-12, 1.9e-10, -3.54e-9,
         -1.8103e-7, 2.579e-8, 7.4379679e-5, -0.0420782900, 3.0521126906),
        (1.2147e-16, 7.3759e-17, -8.26287e-14, 2.503410e-13, 2.4650839e-11,
         -5.4000441e-11, 1.32115526e-9, -5.99908e-7, -1.624383e-5,
         0.002278492868, 0.0),
    ),
    PrecessionModel.LASKAR_1986: (
        _PA_HIGH_ORDER + (0.07732, 111.1971, 50290.966),
        _PI_LASKAR,
        _Z_LASKAR,
    ),
    PrecessionModel.IAU_1976: (
        (0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, -0.006, 111.113, 50290.966),
        _PI_LASKAR,
        _Z_LASKAR,
    ),
}


def ecliptic_precession_matrix(model: PrecessionModel, T: float) -> np.ndarray:
    """
    J2000 ecliptic -> mean ecliptic and equinox of date.

    Parameters
    ----------
    model : PrecessionModel
        One of the ecliptic models.
    T : float
        Julian centuries since J2000.
    """
    pa_coeffs, pi_coeffs, z_coeffs = _ECLIPTIC_TABLES[model]
    T10 = T / 10.0
    p_A = horner(pa_coeffs, T10) * ARCSEC2RAD * T10
    W = horner(pi_coeffs, T10)
    z = horner(z_coeffs, T10)
    return compose(Rz(-(W + p_A)), Rx(z), Rz(W))


# =============================================================================
# EQUATORIAL MODELS
# =============================================================================

def _equatorial_matrix(psi_a: float, omega_a: float, chi_a: float, eps0: float) -> np.ndarray:
    return compose(Rz(chi_a), Rx(-omega_a), Rz(-psi_a), Rx(eps0))


def iau2006_precession_matrix(T: float) -> np.ndarray:
    """Capitaine et al. (2003) P03 precession, J2000 equator -> mean equator of date."""
    eps0 = 84381.406
    psi_a = ((((-0.0000000951 * T + 0.000132851) * T - 0.00114045) * T - 1.0790069) * T
             + 5038.481507) * T
    omega_a = ((((0.0000003337 * T - 0.000000467) * T - 0.00772503) * T + 0.0512623) * T
               - 0.025754) * T + eps0
    chi_a = ((((-0.0000000560 * T + 0.000170663) * T - 0.00121197) * T - 2.3814292) * T
             + 10.556403) * T
    return _equatorial_matrix(psi_a * ARCSEC2RAD, omega_a * ARCSEC2RAD,
                              chi_a * ARCSEC2RAD, eps0 * ARCSEC2RAD)


def iau2000_precession_matrix(T: float) -> np.ndarray:
    """
    IAU 2000 precession (Lieske 1977 with the IAU 2000 rate corrections),
    J2000 equator -> mean equator of date.
    """
    eps0 = 84381.448
    # -0.29965" and -0.02524" per century: IAU 2000 precession-rate corrections
    psi_a = ((-0.001147 * T - 1.07259) * T + 5038.7784) * T - 0.29965 * T
    omega_a = (-0.007726 * T + 0.05127) * T * T + eps0 - 0.02524 * T
    chi_a = ((-0.001125 * T - 2.38064) * T + 10.5526) * T
    return _equatorial_matrix(psi_a * ARCSEC2RAD, omega_a * ARCSEC2RAD,
                              chi_a * ARCSEC2RAD, eps0 * ARCSEC2RAD)


# Vondrak et al. (2011): polynomial parts of psi_A, omega_A, chi_A (arcsec, powers of T)
VONDRAK_POLYNOMIALS = (
    (8473.343527, 5042.7980307, -0.00740913, 289e-9),
    (84283.175915, -0.4436568, 0.00000146, 151e-9),
    (-19.657270, 0.0790159, 0.00001472, -61e-9),
)

# (period in centuries, cos psi, cos omega, sin psi, sin omega), arcsec
VONDRAK_PSI_OMEGA_PERIODIC = (
    (402.90, -22206.325946, 1267.727824, -3243.236469, -8571.476251),
    (256.75, 12236.649447, 1702.324248, -3969.723769, 5309.796459),
    (292.00, -1589.008343, -2970.553839, 7099.207893, -610.393953),
    (537.22, 2482.103195, 693.790312, -1903.696711, 923.201931),
    (241.45, 150.322920, -14.724451, 146.435014, 3.759055),
    (375.22, -13.632066, -516.649401, 1300.630106, -40.691114),
    (157.87, 389.437420, -356.794454, 1727.498039, 80.437484),
    (274.20, 2031.433792, -129.552058, 299.854055, 807.300668),
    (203.00, 363.748303, 256.129314, -1217.125982, 83.712326),
    (440.00, -896.747562, 190.266114, -471.367487, -368.654854),
    (170.72, -926.995700, 95.103991, -441.682145, -191.881064),
    (713.37, 37.070667, -332.907067, -86.169171, -4.263770),
    (313.00, -597.682468, 131.337633, -308.320429, -270.353691),
    (128.38, 66.282812, 82.731919, -422.815629, 11.602861),
)

# (period in centuries, cos chi, sin chi), arcsec
VONDRAK_CHI_PERIODIC = (
    (402.90, -13765.924050, -2206.967126),
    (256.75, 13511.858383, -4186.752711),
    (292.00, -1455.229106, 6737.949677),
    (537.22, 1054.394467, -856.922846),
    (375.22, -112.300144, 957.149088),
    (157.87, 202.769908, 1709.440735),
    (274.20, 1936.050095, 154.425505),
    (202.00, 327.517465, -1049.071786),
    (440.00, -655.484214, -243.520976),
    (170.72, -891.898637, -406.539008),
    (315.00, -494.780332, -301.504189),
    (136.32, 585.492621, 41.348740),
    (128.38, -333.322021, -446.656435),
    (490.00, 110.512834, 142.525186),
)


def vondrak_precession_matrix(T: float) -> np.ndarray:
    """Vondrak et al. (2011) long-term precession, J2000 equator -> mean equator of date."""
    w = TWO_PI * T
    psi_a = omega_a = chi_a = 0.0

    for period, c_psi, c_omega, s_psi, s_omega in VONDRAK_PSI_OMEGA_PERIODIC:
        a = w / period
        psi_a += math.cos(a) * c_psi + math.sin(a) * s_psi
        omega_a += math.cos(a) * c_omega + math.sin(a) * s_omega

    for period, c_chi, s_chi in VONDRAK_CHI_PERIODIC:
        a = w / period
        chi_a += math.cos(a) * c_chi + math.sin(a) * s_chi

    psi_poly, omega_poly, chi_poly = VONDRAK_POLYNOMIALS
    psi_a += polynomial_sum(psi_poly, T)
    omega_a += polynomial_sum(omega_poly, T)
    chi_a += polynomial_sum(chi_poly, T)

    return _equatorial_matrix(psi_a * ARCSEC2RAD, omega_a * ARCSEC2RAD,
                              chi_a * ARCSEC2RAD, 84381.406 * ARCSEC2RAD)


_EQUATORIAL_BUILDERS = {
    PrecessionModel.VONDRAK_2011: vondrak_precession_matrix,
    PrecessionModel.IAU_2009: iau2006_precession_matrix,
    PrecessionModel.IAU_2006: iau2006_precession_matrix,
    PrecessionModel.IAU_2000: iau2000_precession_matrix,
}


def precession_matrix(model: PrecessionModel, T: float) -> np.ndarray:
    """Rotation from the mean J2000 frame to the mean frame of date."""
    if model.is_ecliptic:
        return ecliptic_precession_matrix(model, T)
    return _EQUATORIAL_BUILDERS[model](T)


# =============================================================================
# PRECESSION TRANSFORM
# =============================================================================

@dataclass(frozen=True)
class Precession:
    """
    Precession between J2000 and one epoch.

    Attributes
    ----------
    model : PrecessionModel
        Theory used.
    T : float
        Julian centuries since J2000 of the target epoch.
    from_j2000_matrix : np.ndarray
        Mean J2000 frame -> mean frame of date.
    to_j2000_matrix : np.ndarray
        Transpose of ``from_j2000_matrix``.
    """
    model: PrecessionModel
    T: float
    from_j2000_matrix: np.ndarray = field(repr=False, compare=False)
    to_j2000_matrix: np.ndarray = field(repr=False, compare=False)

    @classmethod
    def create(cls, model: PrecessionModel, T: float) -> 'Precession':
        m = precession_matrix(model, T)
        logger.debug("Precession %s at T=%.8f (%s)", model.name, T,
                     "ecliptic" if model.is_ecliptic else "equatorial")
        return cls(model, T, m, transpose(m))

    @property
    def is_ecliptic(self) -> bool:
        """True when the matrices act on ecliptic vectors."""
        return self.model.is_ecliptic

    def from_j2000(self, vector: Vector) -> RectangularVector:
        """Precess a J2000 vector to the mean frame of date."""
        return rotate(self.from_j2000_matrix, vector)

    def to_j2000(self, vector: Vector) -> RectangularVector:
        """Refer a vector in the mean frame of date back to J2000."""
        return rotate(self.to_j2000_matrix, vector)
