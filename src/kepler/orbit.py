"""
===============================================================================
APPARENT POSITION - Kepler Orbit Solver
===============================================================================
Position and velocity on a two-body conic, in the orbital plane and rotated
into the ecliptic by the Gaussian vectors P, Q, R.

Three regimes are solved separately:

    1. **Elliptic** (e < 1) -- Newton iteration on Kepler's equation
       E - e sin(E) = M.

    2. **Hyperbolic** (e > 1) -- Newton iteration on
       e sinh(H) - H = Mh.

    3. **Parabolic / near-parabolic** (e ~ 1) -- universal-variable
       iteration with the Stumpff functions c1, c2, c3.

``kepler_orbit`` dispatches between them from the perihelion distance,
eccentricity and time since perihelion.  Each iteration is capped at
``KEPLER_MAX_ITERATIONS``; exceeding the cap raises
``KeplerConvergenceError`` instead of returning a poor result.

Units: AU, days, AU/d.  The gravitational parameter is in AU^3/d^2.
Epochs passed to ``kepler_orbit``, ``hyperbolic_orbit`` and
``parabolic_orbit`` are Julian centuries since J2000 and are converted to
days internally.

References
----------
    [1] Montenbruck & Pfleger, "Astronomy on the Personal Computer",
        4th ed., Springer, 2000, Ch. 4.
    [2] Vallado, "Fundamentals of Astrodynamics and Applications", 4th ed.,
        Sec. 2.2 (Kepler's problem).
===============================================================================
"""

import logging
import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from core.constants import (
    PI,
    TWO_PI,
    KEPLER_EPS,
    KEPLER_MAX_ITERATIONS,
    JULIAN_DAYS_PER_CENTURY,
    PARABOLIC_MEAN_ANOMALY_LIMIT,
    PARABOLIC_ECCENTRICITY_BAND,
)
from core.astro_math import modulo
from core.exceptions import KeplerConvergenceError
from core.frames import Rx, Rz, compose, rotate
from core.vector import RectangularVector, Vector

logger = logging.getLogger(__name__)


# =============================================================================
# ORBITAL PLANE DATACLASS
# =============================================================================

@dataclass
class OrbitalPlane:
    """
    Position and velocity on the orbit at a single instant.

    Attributes
    ----------
    position : Vector
        Position (AU) in the orbital plane, or in the ecliptic once
        rotated by the Gaussian matrix.
    velocity : Vector
        Velocity (AU/d) in the same frame as ``position``.
    """
    position: Vector
    velocity: Vector

    def rotated(self, pqr: np.ndarray) -> 'OrbitalPlane':
        """Both vectors multiplied by the matrix *pqr*."""
        return OrbitalPlane(rotate(pqr, self.position), rotate(pqr, self.velocity))


# =============================================================================
# ELLIPTIC REGIME
# =============================================================================

def eccentric_anomaly(M: float, e: float) -> float:
    """
    Solve Kepler's equation ``E - e sin(E) = M`` by Newton iteration.

    Parameters
    ----------
    M : float
        Mean anomaly (rad).  Reduced to [0, 2*pi) before iterating.
    e : float
        Eccentricity, 0 <= e < 1.

    Returns
    -------
    float
        Eccentric anomaly (rad).

    Raises
    ------
    KeplerConvergenceError
        If the residual has not dropped below one ulp of 100 after
        ``KEPLER_MAX_ITERATIONS`` steps.
    """
    M = modulo(M, TWO_PI)
    # High eccentricities start from pi, where the Newton step is well behaved
    E = M if e < 0.8 else PI

    f = E - e * math.sin(E) - M
    for iteration in range(1, KEPLER_MAX_ITERATIONS + 1):
        E -= f / (1.0 - e * math.cos(E))
        if abs(f) <= KEPLER_EPS:
            logger.debug("Elliptic anomaly converged in %d iterations (e=%.6f)", iteration, e)
            return E
        f = E - e * math.sin(E) - M

    raise KeplerConvergenceError("elliptic", KEPLER_MAX_ITERATIONS, abs(f))


def elliptic_orbit(gm: float, M: float, a: float, e: float) -> OrbitalPlane:
    """
    Position and velocity on an elliptic orbit, in the orbital plane.

    Parameters
    ----------
    gm : float
        Gravitational parameter of the central body (AU^3/d^2).
    M : float
        Mean anomaly (rad).
    a : float
        Semi-major axis (AU).
    e : float
        Eccentricity, 0 <= e < 1.

    Returns
    -------
    OrbitalPlane
        Perihelion along +x, motion towards +y, z = 0.
    """
    k = math.sqrt(gm / a)
    E = eccentric_anomaly(M, e)
    cos_e = math.cos(E)
    sin_e = math.sin(E)
    fac = math.sqrt((1.0 - e) * (1.0 + e))
    rho = 1.0 - e * cos_e

    return OrbitalPlane(
        RectangularVector(a * (cos_e - e), a * fac * sin_e, 0.0),
        RectangularVector(-k * sin_e / rho, k * fac * cos_e / rho, 0.0),
    )


# =============================================================================
# HYPERBOLIC REGIME
# =============================================================================

def hyperbolic_anomaly(Mh: float, e: float) -> float:
    """
    Solve ``e sinh(H) - H = Mh`` by Newton iteration.

    The convergence threshold scales with ``1 + |H + Mh|`` because H grows
    logarithmically with Mh far from perihelion.

    Parameters
    ----------
    Mh : float
        Hyperbolic mean anomaly (rad).
    e : float
        Eccentricity, e > 1.

    Returns
    -------
    float
        Hyperbolic anomaly H.
    """
    H = math.log(2.0 * abs(Mh) / e + 1.8)
    if Mh < 0.0:
        H = -H

    for iteration in range(1, KEPLER_MAX_ITERATIONS + 1):
        f = e * math.sinh(H) - H - Mh
        H -= f / (e * math.cosh(H) - 1.0)
        if abs(f) <= KEPLER_EPS * (1.0 + abs(H + Mh)):
            logger.debug("Hyperbolic anomaly converged in %d iterations (e=%.6f)", iteration, e)
            return H

    raise KeplerConvergenceError("hyperbolic", KEPLER_MAX_ITERATIONS, abs(f))


def hyperbolic_orbit(gm: float, t0: float, t: float, a: float, e: float) -> OrbitalPlane:
    """
    Position and velocity on a hyperbolic orbit, in the orbital plane.

    Parameters
    ----------
    gm : float
        Gravitational parameter (AU^3/d^2).
    t0 : float
        Time of perihelion passage (Julian centuries since J2000).
    t : float
        Time of evaluation (Julian centuries since J2000).
    a : float
        Semi-major axis (AU); the sign is ignored.
    e : float
        Eccentricity, e > 1.
    """
    a = abs(a)
    k = math.sqrt(gm / a)
    dt_days = (t - t0) * JULIAN_DAYS_PER_CENTURY

    Mh = k * dt_days / a
    H = hyperbolic_anomaly(Mh, e)
    cosh_h = math.cosh(H)
    sinh_h = math.sinh(H)
    fac = math.sqrt((e + 1.0) * (e - 1.0))
    rho = e * cosh_h - 1.0

    return OrbitalPlane(
        RectangularVector(a * (e - cosh_h), a * fac * sinh_h, 0.0),
        RectangularVector(-k * sinh_h / rho, k * fac * cosh_h / rho, 0.0),
    )


# =============================================================================
# PARABOLIC / NEAR-PARABOLIC REGIME
# =============================================================================

def stumpff(E2: float) -> Tuple[float, float, float]:
    """
    Stumpff functions for the near-parabolic solution.

    Parameters
    ----------
    E2 : float
        Square of the eccentric anomaly (rad^2).

    Returns
    -------
    tuple of float
        ``(c1, c2, c3)`` with c1 = sin(E)/E, c2 = (1 - cos(E))/E^2 and
        c3 = (E - sin(E))/E^3, summed as power series in -E2.
    """
    c1 = c2 = c3 = 0.0
    add = 1.0
    n = 1.0
    while True:
        c1 += add
        add /= 2.0 * n
        c2 += add
        add /= 2.0 * n + 1.0
        c3 += add
        add *= -E2
        n += 1.0
        if abs(add) < KEPLER_EPS:
            break
    return c1, c2, c3


def parabolic_orbit(gm: float, t0: float, t: float, q: float, e: float) -> OrbitalPlane:
    """
    Position and velocity on a parabolic or near-parabolic orbit.

    Universal-variable iteration: the cubic Barker solution seeds ``u``,
    which is refined through the Stumpff functions until the squared
    eccentric anomaly stops changing.

    Parameters
    ----------
    gm : float
        Gravitational parameter (AU^3/d^2).
    t0, t : float
        Perihelion time and evaluation time (Julian centuries since J2000).
    q : float
        Perihelion distance (AU).
    e : float
        Eccentricity, close to 1.

    Raises
    ------
    KeplerConvergenceError
        If E^2 has not settled after ``KEPLER_MAX_ITERATIONS`` passes.
    """
    fac = 0.5 * e
    k = math.sqrt(gm / (q * (1.0 + e)))
    tau = math.sqrt(gm) * (t - t0) * JULIAN_DAYS_PER_CENTURY

    E2 = 0.0
    for iteration in range(1, KEPLER_MAX_ITERATIONS + 1):
        E20 = E2
        A = 1.5 * math.sqrt(fac / (q * q * q)) * tau
        B = (math.sqrt(A * A + 1.0) + A) ** (1.0 / 3.0)
        u = B - 1.0 / B
        u2 = u * u
        E2 = u2 * (1.0 - e) / fac
        c1, c2, c3 = stumpff(E2)
        fac = 3.0 * e * c3
        if abs(E2 - E20) < KEPLER_EPS:
            logger.debug("Parabolic solution converged in %d iterations (e=%.6f)", iteration, e)
            break
    else:
        raise KeplerConvergenceError("parabolic", KEPLER_MAX_ITERATIONS, abs(E2 - E20))

    R = q * (1.0 + u2 * c2 * e / fac)
    x = q * (1.0 - u2 * c2 / fac)
    y = q * math.sqrt((1.0 + e) / fac) * u * c1

    return OrbitalPlane(
        RectangularVector(x, y, 0.0),
        RectangularVector(-k * y / R, k * (x / R + e), 0.0),
    )


# =============================================================================
# ORIENTATION AND DISPATCH
# =============================================================================

def gaussian_matrix(node: float, inclination: float, argument_of_perihelion: float) -> np.ndarray:
    """
    Rotation from the orbital plane to the ecliptic (Gaussian vectors P, Q, R).

    Parameters
    ----------
    node : float
        Longitude of the ascending node (rad).
    inclination : float
        Inclination to the ecliptic (rad).
    argument_of_perihelion : float
        Argument of perihelion (rad).

    Returns
    -------
    np.ndarray
        ``Rz(-node) @ Rx(-inclination) @ Rz(-argument_of_perihelion)``.
    """
    return compose(Rz(-node), Rx(-inclination), Rz(-argument_of_perihelion))


def kepler_orbit(gm: float, t0: float, t: float, q: float, e: float,
                 pqr: np.ndarray) -> OrbitalPlane:
    """
    Heliocentric ecliptic position and velocity on any conic.

    The parabolic branch is used when the size of the normalized mean
    motion ``|M|`` and ``|1 - e|`` are both below 0.1; otherwise the elliptic solver
    handles e < 1 and the hyperbolic solver e >= 1.

    Parameters
    ----------
    gm : float
        Gravitational parameter (AU^3/d^2).
    t0 : float
        Time of perihelion passage (Julian centuries since J2000).
    t : float
        Time of evaluation (Julian centuries since J2000).
    q : float
        Perihelion distance (AU).
    e : float
        Eccentricity.
    pqr : np.ndarray
        Gaussian matrix from :func:`gaussian_matrix`.

    Returns
    -------
    OrbitalPlane
        Position (AU) and velocity (AU/d) in the ecliptic frame of *pqr*.

    Raises
    ------
    ValueError
        If the perihelion distance is not positive.
    """
    if q <= 0.0:
        raise ValueError(f"Perihelion distance must be positive, got {q}")

    delta = abs(1.0 - e)
    invax = delta / q
    tau = math.sqrt(gm) * (t - t0) * JULIAN_DAYS_PER_CENTURY
    M = tau * math.sqrt(invax * invax * invax)

    if abs(M) < PARABOLIC_MEAN_ANOMALY_LIMIT and delta < PARABOLIC_ECCENTRICITY_BAND:
        logger.debug("Kepler regime: parabolic (e=%.6f, M=%.6f)", e, M)
        orbit = parabolic_orbit(gm, t0, t, q, e)
    elif e < 1.0:
        logger.debug("Kepler regime: elliptic (e=%.6f, M=%.6f)", e, M)
        orbit = elliptic_orbit(gm, M, 1.0 / invax, e)
    else:
        logger.debug("Kepler regime: hyperbolic (e=%.6f, M=%.6f)", e, M)
        orbit = hyperbolic_orbit(gm, t0, t, 1.0 / invax, e)

    return orbit.rotated(pqr)
