"""
===============================================================================
APPARENT POSITION - Astronomical Constants
===============================================================================
Central repository for the constants used by the Kepler solver, the frame
models and the position assembler.

Unit system: astronomical units, days and radians.  Time arguments of the
series are Julian centuries of 36525 days counted from J2000.0 (TT).

Values follow the IAU 1976/2009 systems of astronomical constants and the
JPL DE4xx conventions where applicable.
===============================================================================
"""

import numpy as np


# =============================================================================
# MATHEMATICAL CONSTANTS
# =============================================================================
PI = np.pi
TWO_PI = 2.0 * np.pi
DEG2RAD = PI / 180.0
RAD2DEG = 180.0 / PI
ARCSEC2RAD = DEG2RAD / 3600.0
ARCSEC2DEG = 1.0 / 3600.0
RAD2HOUR = 12.0 / PI

SECONDS_PER_DEGREE = 3600.0
MINUTES_PER_DEGREE = 60.0
ARCSEC_PER_CIRCLE = 1296000.0

# Tolerance shared by the Newton iterations (one ulp of 100.0)
KEPLER_EPS = float(np.spacing(100.0))
KEPLER_MAX_ITERATIONS = 15

# =============================================================================
# TIME
# =============================================================================
JULIAN_DAYS_PER_CENTURY = 36525.0
JD_J2000 = 2451545.0                   # Julian date of J2000.0
MJD_J2000 = 51544.5                    # Modified Julian date of J2000.0
T_J2000 = 0.0                          # Julian centuries of J2000.0

# =============================================================================
# SOLAR SYSTEM
# =============================================================================
AU = 149597870.7                       # Astronomical unit (km)
C_LIGHT = 173.14                       # Speed of light (AU/d)
K_GAUSS = 0.01720209895                # Gaussian gravitational constant
GM_SUN = K_GAUSS * K_GAUSS             # Heliocentric gravitational constant (AU^3/d^2)

# =============================================================================
# KEPLER REGIME GUARD BAND
# =============================================================================
# Parabolic branch is taken when the normalized mean motion and |1 - e|
# are both below these limits.
PARABOLIC_MEAN_ANOMALY_LIMIT = 0.1
PARABOLIC_ECCENTRICITY_BAND = 0.1


def centuries_from_mjd(mjd: float) -> float:
    """Julian centuries since J2000.0 for a Modified Julian Date."""
    return (mjd - MJD_J2000) / JULIAN_DAYS_PER_CENTURY


def centuries_from_jd(jd: float) -> float:
    """Julian centuries since J2000.0 for a Julian Date."""
    return (jd - JD_J2000) / JULIAN_DAYS_PER_CENTURY
