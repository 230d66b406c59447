"""
===============================================================================
APPARENT POSITION - Orbital Element Sets
===============================================================================
Mean orbital elements of the major planets as polynomials in time, and the
heliocentric orbit they define.

Two theories are tabulated:

    jpl    Standish, "Keplerian Elements for Approximate Positions of the
           Major Planets" (JPL), valid 3000 BC -- 3000 AD.  Polynomials in
           Julian centuries T; Jupiter through Pluto carry the additional
           mean-anomaly terms  b T^2 + c cos(f T) + s sin(f T).

    simon  Simon et al. (1994), "Numerical expressions for precession
           formulae and mean elements for the Moon and planets", A&A 282.
           Polynomials in Julian millennia (T / 10), referred to the mean
           ecliptic and equinox of J2000.

Angular elements are tabulated in degrees.  Simon's higher-order terms are
published in arc-seconds and converted when the table is built.

All element sets are referred to the J2000 ecliptic.  ``orbital_plane`` can
optionally refer the node to the equinox of date by adding the general
precession in longitude p_A.
===============================================================================
"""

import logging
import math
from abc import ABC, abstractmethod
from typing import Dict, Optional, Sequence, Tuple

from core.constants import ARCSEC2DEG, ARCSEC2RAD, DEG2RAD, GM_SUN
from core.astro_math import polynomial_sum
from core.vector import RectangularVector
from kepler.orbit import OrbitalPlane, elliptic_orbit, gaussian_matrix

logger = logging.getLogger(__name__)


# General precession in longitude p_A (arcsec), polynomial in T
GENERAL_PRECESSION_COEFFS = (
    0.0, 5028.791959, 1.105414, 0.000076, -0.0000235316, -1.8055e-8,
    1.7451e-10, 1.3095e-12, 2.424e-15, -4.759e-17, -8.66e-20,
)


def general_precession(T: float) -> float:
    """General precession in longitude p_A (rad) at T Julian centuries."""
    return polynomial_sum(GENERAL_PRECESSION_COEFFS, T) * ARCSEC2RAD


# =============================================================================
# ABSTRACT BASE: KeplerElements
# =============================================================================

class KeplerElements(ABC):
    """
    Osculating-like mean elements of a heliocentric orbit as functions of T.

    Angles are returned in radians, the semi-major axis in AU.  T is in
    Julian centuries since J2000.
    """

    name: str = ""

    @abstractmethod
    def semi_major_axis(self, T: float) -> float:
        """Semi-major axis a (AU)."""

    @abstractmethod
    def eccentricity(self, T: float) -> float:
        """Eccentricity e."""

    @abstractmethod
    def inclination(self, T: float) -> float:
        """Inclination i (rad)."""

    @abstractmethod
    def longitude(self, T: float) -> float:
        """Mean longitude L (rad)."""

    @abstractmethod
    def perihelion_longitude(self, T: float) -> float:
        """Longitude of perihelion varpi (rad)."""

    @abstractmethod
    def ascending_node_longitude(self, T: float) -> float:
        """Longitude of the ascending node Omega (rad)."""

    def mean_anomaly(self, T: float) -> float:
        """Mean anomaly M = L - varpi (rad)."""
        return self.longitude(T) - self.perihelion_longitude(T)

    def orbital_plane(self, T: float, of_date: bool = False) -> OrbitalPlane:
        """
        Heliocentric ecliptic position (AU) and velocity (AU/d).

        Parameters
        ----------
        T : float
            Julian centuries since J2000.
        of_date : bool
            When True the node is advanced by the general precession p_A,
            referring the result to the equinox of date instead of J2000.
        """
        node = self.ascending_node_longitude(T)
        plane = elliptic_orbit(GM_SUN, self.mean_anomaly(T),
                               self.semi_major_axis(T), self.eccentricity(T))
        node_of_frame = node + general_precession(T) if of_date else node
        pqr = gaussian_matrix(node_of_frame, self.inclination(T),
                              self.perihelion_longitude(T) - node)
        return plane.rotated(pqr)

    def heliocentric_position(self, T: float) -> RectangularVector:
        """Heliocentric J2000 ecliptic position (AU)."""
        return self.orbital_plane(T).position.to_rectangular()

    def __call__(self, T: float) -> RectangularVector:
        return self.heliocentric_position(T)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


# =============================================================================
# POLYNOMIAL ELEMENT SET
# =============================================================================

class PolynomialElements(KeplerElements):
    """
    Element set whose members are ascending-power polynomials in ``T / scale``.

    Parameters
    ----------
    name : str
        Body name.
    a, e : sequence of float
        Semi-major axis (AU) and eccentricity coefficients.
    i, L, varpi, node : sequence of float
        Inclination, mean longitude, longitude of perihelion and longitude
        of the node coefficients (degrees).
    scale : float
        Time divisor; 1 for centuries, 10 for millennia.
    mean_anomaly_terms : tuple of float, optional
        ``(b, c, s, f)`` in degrees: the mean anomaly gains
        ``b T^2 + c cos(f T) + s sin(f T)``.
    """

    def __init__(self, name: str, a: Sequence[float], e: Sequence[float],
                 i: Sequence[float], L: Sequence[float], varpi: Sequence[float],
                 node: Sequence[float], scale: float = 1.0,
                 mean_anomaly_terms: Optional[Tuple[float, float, float, float]] = None) -> None:
        self.name = name
        self._a = tuple(a)
        self._e = tuple(e)
        self._i = tuple(i)
        self._L = tuple(L)
        self._varpi = tuple(varpi)
        self._node = tuple(node)
        self.scale = float(scale)
        self.mean_anomaly_terms = mean_anomaly_terms

    def semi_major_axis(self, T: float) -> float:
        return polynomial_sum(self._a, T / self.scale)

    def eccentricity(self, T: float) -> float:
        return polynomial_sum(self._e, T / self.scale)

    def inclination(self, T: float) -> float:
        return polynomial_sum(self._i, T / self.scale) * DEG2RAD

    def longitude(self, T: float) -> float:
        return polynomial_sum(self._L, T / self.scale) * DEG2RAD

    def perihelion_longitude(self, T: float) -> float:
        return polynomial_sum(self._varpi, T / self.scale) * DEG2RAD

    def ascending_node_longitude(self, T: float) -> float:
        return polynomial_sum(self._node, T / self.scale) * DEG2RAD

    def mean_anomaly(self, T: float) -> float:
        M = super().mean_anomaly(T)
        if self.mean_anomaly_terms is None:
            return M
        b, c, s, f = self.mean_anomaly_terms
        fT = f * T * DEG2RAD
        return M + (b * T * T + c * math.cos(fT) + s * math.sin(fT)) * DEG2RAD


def _arcsec(*values: float) -> Tuple[float, ...]:
    return tuple(v * ARCSEC2DEG for v in values)


# =============================================================================
# JPL APPROXIMATE ELEMENTS (3000 BC -- 3000 AD)
# =============================================================================

JPL_ELEMENTS: Dict[str, PolynomialElements] = {
    "mercury": PolynomialElements(
        "mercury",
        a=(0.38709843,),
        e=(0.20563661, 0.00002123),
        i=(7.00559432, -0.00590158),
        L=(252.25166724, 149472.67486623),
        varpi=(77.45771895, 0.15940013),
        node=(48.33961819, -0.12214182)),
    "venus": PolynomialElements(
        "venus",
        a=(0.72332102, -0.00000026),
        e=(0.00676399, -0.00005107),
        i=(3.39777545, 0.00043494),
        L=(181.97970850, 58517.81560260),
        varpi=(131.76755713, 0.05679648),
        node=(76.67261496, -0.27274174)),
    "earth_moon_barycenter": PolynomialElements(
        "earth_moon_barycenter",
        a=(1.00000018, -0.00000003),
        e=(0.01673163, -0.00003661),
        i=(-0.00054346, -0.01337178),
        L=(100.46691572, 35999.37306329),
        varpi=(102.93005885, 0.31795260),
        node=(-5.11260389, -0.24123856)),
    "mars": PolynomialElements(
        "mars",
        a=(1.52371243, 0.00000097),
        e=(0.09336511, 0.00009149),
        i=(1.85181869, -0.00724757),
        L=(-4.56813164, 19140.29934243),
        varpi=(-23.91744784, 0.45223625),
        node=(49.71320984, -0.26852431)),
    "jupiter": PolynomialElements(
        "jupiter",
        a=(5.20248019, -0.00002864),
        e=(0.04853590, 0.00018026),
        i=(1.29861416, -0.00322699),
        L=(34.33479152, 3034.90371757),
        varpi=(14.27495244, 0.18199196),
        node=(100.29282654, 0.13024619),
        mean_anomaly_terms=(-0.00012452, 0.06064060, -0.35635438, 38.35125000)),
    "saturn": PolynomialElements(
        "saturn",
        a=(9.54149883, -0.00003065),
        e=(0.05550825, -0.00032044),
        i=(2.49424102, 0.00451969),
        L=(50.07571329, 1222.11494724),
        varpi=(92.86136063, 0.54179478),
        node=(113.63998702, -0.25015002),
        mean_anomaly_terms=(0.00025899, -0.13434469, 0.87320147, 38.35125000)),
    "uranus": PolynomialElements(
        "uranus",
        a=(19.18797948, -0.00020455),
        e=(0.04685740, -0.00001550),
        i=(0.77298127, -0.00180155),
        L=(314.20276625, 428.49512595),
        varpi=(172.43404441, 0.09266985),
        node=(73.96250215, 0.05739699),
        mean_anomaly_terms=(0.00058331, -0.97731848, 0.17689245, 7.67025000)),
    "neptune": PolynomialElements(
        "neptune",
        a=(30.06952752, 0.00006447),
        e=(0.00895439, 0.00000818),
        i=(1.77005520, 0.00022400),
        L=(304.22289287, 218.46515314),
        varpi=(46.68158724, 0.01009938),
        node=(131.78635853, -0.00606302),
        mean_anomaly_terms=(-0.00041348, 0.68346318, -0.10162547, 7.67025000)),
    "pluto": PolynomialElements(
        "pluto",
        a=(39.48686035, 0.00449751),
        e=(0.24885238, 0.00006016),
        i=(17.14104260, 0.00000501),
        L=(238.96535011, 145.18042903),
        varpi=(224.09702598, -0.00968827),
        node=(110.30167986, -0.00809981),
        mean_anomaly_terms=(-0.01262724, 0.0, 0.0, 0.0)),
}


# =============================================================================
# SIMON ET AL. (1994) MEAN ELEMENTS, J2000 ECLIPTIC, T / 10
# =============================================================================

SIMON_ELEMENTS: Dict[str, PolynomialElements] = {
    "mercury": PolynomialElements(
        "mercury",
        a=(0.3870983098,),
        e=(0.2056317526, 0.0002040653, -28349e-10, -1805e-10, 23e-10, -2e-10),
        i=(7.00498625,) + _arcsec(-214.25629, 0.28977, 0.15421, -0.00169, -0.00002),
        L=(252.25090552 - 0.047 * ARCSEC2DEG,) + _arcsec(5381016286.88982, -1.92789, 0.00639),
        varpi=(77.45611904,) + _arcsec(5719.1159, -4.83016, -0.02464, -0.00016, 0.00004),
        node=(48.33089304,) + _arcsec(-4515.21727, -31.79892, -0.71933, 0.01242),
        scale=10.0),
    "venus": PolynomialElements(
        "venus",
        a=(0.7233298200,),
        e=(0.0067719164, -0.0004776521, 98127e-10, 4639e-10, 123e-10, -3e-10),
        i=(3.39466189,) + _arcsec(-30.84437, -11.67836, 0.03338, 0.00269, 0.00004),
        L=(181.97980085,) + _arcsec(2106641364.33548, 0.59381, -0.00627),
        varpi=(131.56370300,) + _arcsec(175.48640, -498.48184, -20.50042, -0.72432, 0.00224),
        node=(76.67992019,) + _arcsec(-10008.48154, -51.32614, -0.5891, -0.004665),
        scale=10.0),
    "earth": PolynomialElements(
        "earth",
        a=(1.0000010178,),
        e=(0.0167086342, -0.0004203654, -0.0000126734, 1444e-10, -2e-10, 3e-10),
        i=(0.0,) + _arcsec(469.97289, -3.35053, -0.12374, 0.00027, -0.00001, 0.00001),
        L=(100.46645683,) + _arcsec(1295977422.83429, -2.04411, -0.00523),
        varpi=(102.93734808,) + _arcsec(11612.35290, 53.27577, -0.14095, 0.11440, 0.00478),
        node=(174.87317577,) + _arcsec(-8679.27034, 15.34191, 0.00532, -0.03734, -0.00073, 0.00004),
        scale=10.0),
    "mars": PolynomialElements(
        "mars",
        a=(1.5236793419, 3e-10),
        e=(0.0934006477, 0.0009048438, -80641e-10, -2519e-10, 124e-10, -10e-10),
        i=(1.84972648,) + _arcsec(-293.31722, -8.11830, -0.10326, -0.00153, 0.00048),
        L=(355.43299958,) + _arcsec(689050774.93988, 0.94264, -0.01043),
        varpi=(336.06023395,) + _arcsec(15980.45908, -62.32800, 1.86464, -0.04603, -0.00164),
        node=(49.55809321,) + _arcsec(-10620.90088, -230.57416, -7.06942, -0.6892, -0.05829),
        scale=10.0),
    "jupiter": PolynomialElements(
        "jupiter",
        a=(5.2026032092, 19132e-10, -39e-10, -60e-10, -10e-10, 1e-10),
        e=(0.0484979255, 0.0016322542, -0.0000471366, -20063e-10, 1018e-10, -21e-10, 1e-10),
        i=(1.30326698,) + _arcsec(-71.55890, 11.95297, 0.340909, -0.02710, -0.00124, 0.00003),
        L=(34.35151874,) + _arcsec(109256603.77991, -30.60378, 0.05706, 0.04667, 0.00591, -0.00034),
        varpi=(14.33120687,) + _arcsec(7758.75163, 259.95938, -16.14731, 0.74704, -0.02087, -0.00016),
        node=(100.46440702,) + _arcsec(6362.03561, 326.52178, -26.18091, -2.10322, 0.04453, 0.01154),
        scale=10.0),
    "saturn": PolynomialElements(
        "saturn",
        a=(9.5549091915, -0.0000213896, 444e-10, 670e-10, 110e-10, -7e-10, -1e-10),
        e=(0.0555481426, -0.0034664062, -0.0000643639, 33956e-10, -219e-10, -3e-10, 6e-10),
        i=(2.48887878,) + _arcsec(91.85195, -17.66225, 0.06105, 0.02638, -0.00152, -0.00012),
        L=(50.07744430,) + _arcsec(43996098.55732, 75.61614, -0.16618, -0.11484, -0.01452, 0.00083),
        varpi=(93.05723748,) + _arcsec(20395.49439, 190.25952, 17.68303, 1.23148, 0.10310, 0.00702),
        node=(113.66550252,) + _arcsec(-9240.19942, -66.23743, 1.72778, 0.2699, 0.03610, -0.00248),
        scale=10.0),
    "uranus": PolynomialElements(
        "uranus",
        a=(19.2184460618, -3716e-10, 979e-10),
        e=(0.0463812221, -0.0002729293, 0.0000078913, 2447e-10, -171e-10),
        i=(0.77319689,) + _arcsec(-60.72723, 1.25759, 0.05808, 0.00031),
        L=(314.05500511,) + _arcsec(15424811.93933, -1.75083, 0.02156),
        varpi=(173.00529106,) + _arcsec(3215.56238, -34.09288, 1.48909, 0.066),
        node=(74.00595701,) + _arcsec(2669.15033, 145.93964, 0.42917, -0.0912),
        scale=10.0),
    "neptune": PolynomialElements(
        "neptune",
        a=(30.1103868694, -16635e-10, 686e-10),
        e=(0.0094557470, 0.0000603263, 0.0, -483e-10),
        i=(1.76995259,) + _arcsec(8.12333, 0.08135, -0.00046),
        L=(304.34866548,) + _arcsec(7865503.20744, 0.21103, -0.00895),
        varpi=(48.12027554,) + _arcsec(1050.71912, 27.39717),
        node=(131.78405702,) + _arcsec(-221.94322, -0.78728, -0.28070, 0.00049),
        scale=10.0),
}


_THEORIES = {
    "jpl": JPL_ELEMENTS,
    "simon": SIMON_ELEMENTS,
}


def get_elements(name: str, theory: str = "jpl") -> PolynomialElements:
    """
    Look up a tabulated element set.

    Parameters
    ----------
    name : str
        Body name (case-insensitive), e.g. ``'mars'`` or
        ``'earth_moon_barycenter'``.
    theory : str
        ``'jpl'`` or ``'simon'``.

    Raises
    ------
    ValueError
        If the theory or body is not tabulated.
    """
    table = _THEORIES.get(theory.lower())
    if table is None:
        raise ValueError(
            f"Unknown element theory '{theory}'. Available: {', '.join(_THEORIES)}"
        )
    key = name.lower().replace(" ", "_").replace("-", "_")
    if key not in table:
        raise ValueError(
            f"Unknown body '{name}' for theory '{theory}'. "
            f"Available: {', '.join(sorted(table))}"
        )
    return table[key]
