"""
===============================================================================
APPARENT POSITION - Kepler Solver Test Suite
===============================================================================
Tests for the two-body solver: residual of Kepler's equation in the elliptic
and hyperbolic regimes, circular orbits, vis-viva energy, Barker's equation
on the parabolic branch, regime dispatch at perihelion, the Gaussian
orientation matrix and the iteration cap.
===============================================================================
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import math

import numpy as np
import pytest
from numpy.testing import assert_allclose

from core.constants import DEG2RAD, GM_SUN, JULIAN_DAYS_PER_CENTURY, TWO_PI
from core.exceptions import KeplerConvergenceError
from core.frames import is_rotation
from kepler import orbit
from kepler.orbit import (
    eccentric_anomaly, elliptic_orbit, gaussian_matrix, hyperbolic_anomaly,
    hyperbolic_orbit, kepler_orbit, parabolic_orbit, stumpff,
)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def identity():
    """Orbital plane == ecliptic."""
    return np.eye(3)


@pytest.fixture
def comet_pqr():
    """Orientation of an inclined comet orbit."""
    return gaussian_matrix(58.1 * DEG2RAD, 162.2 * DEG2RAD, 111.3 * DEG2RAD)


# =============================================================================
# Helper functions
# =============================================================================

def days_to_centuries(days):
    return days / JULIAN_DAYS_PER_CENTURY


# =============================================================================
# Elliptic regime
# =============================================================================

class TestEllipticRegime:
    """Newton iteration on E - e sin(E) = M."""

    @pytest.mark.parametrize("e", [0.0, 0.1, 0.5, 0.8, 0.9, 0.99])
    @pytest.mark.parametrize("M", [0.5, 1.0, 2.0, 3.0, 5.0, 6.0])
    def test_kepler_equation_residual(self, e, M):
        """The returned E satisfies Kepler's equation to 1e-9."""
        E = eccentric_anomaly(M, e)
        residual = E - e * math.sin(E) - M
        assert abs(residual) < 1e-9, (
            f"Residual {residual:.3e} for e={e}, M={M}"
        )

    def test_mean_anomaly_is_reduced(self):
        """M and M + 4*pi give the same anomaly."""
        assert_allclose(eccentric_anomaly(1.3 + 2.0 * TWO_PI, 0.3),
                        eccentric_anomaly(1.3, 0.3), atol=1e-12)

    @pytest.mark.parametrize("a", [0.39, 1.0, 5.2, 30.1])
    @pytest.mark.parametrize("M", [0.0, 1.0, 4.0])
    def test_circular_orbit(self, a, M):
        """e = 0 gives |r| = a and |v| = sqrt(GM/a)."""
        plane = elliptic_orbit(GM_SUN, M, a, 0.0)
        assert_allclose(plane.position.norm(), a, rtol=1e-12)
        assert_allclose(plane.velocity.norm(), math.sqrt(GM_SUN / a), rtol=1e-12)
        assert plane.position.to_rectangular().z == 0.0

    @pytest.mark.parametrize("e", [0.05, 0.4, 0.9])
    @pytest.mark.parametrize("M", [0.3, 2.0, 4.4])
    def test_vis_viva(self, e, M):
        """v^2 = GM (2/r - 1/a)."""
        a = 2.7
        plane = elliptic_orbit(GM_SUN, M, a, e)
        r = plane.position.norm()
        v2 = plane.velocity.norm() ** 2
        assert_allclose(v2, GM_SUN * (2.0 / r - 1.0 / a), rtol=1e-12)

    def test_perihelion_along_x(self):
        plane = elliptic_orbit(GM_SUN, 0.0, 1.5, 0.2)
        assert_allclose(plane.position.to_rectangular().components,
                        [1.2, 0.0, 0.0], atol=1e-15)


# =============================================================================
# Hyperbolic regime
# =============================================================================

class TestHyperbolicRegime:
    """Newton iteration on e sinh(H) - H = Mh."""

    @pytest.mark.parametrize("e", [1.01, 1.1, 1.5, 2.0, 5.0])
    @pytest.mark.parametrize("Mh", [-5.0, -0.5, 0.0, 0.5, 2.0, 10.0])
    def test_hyperbolic_equation_residual(self, e, Mh):
        H = hyperbolic_anomaly(Mh, e)
        residual = e * math.sinh(H) - H - Mh
        assert abs(residual) < 1e-9 * (1.0 + abs(Mh)), (
            f"Residual {residual:.3e} for e={e}, Mh={Mh}"
        )

    def test_antisymmetric_in_mean_anomaly(self):
        assert_allclose(hyperbolic_anomaly(-3.0, 1.4), -hyperbolic_anomaly(3.0, 1.4),
                        atol=1e-12)

    @pytest.mark.parametrize("days", [-200.0, 30.0, 400.0])
    def test_energy(self, days):
        """v^2 = GM (2/r + 1/|a|) on a hyperbola."""
        a, e = 3.0, 1.3
        plane = hyperbolic_orbit(GM_SUN, 0.0, days_to_centuries(days), a, e)
        r = plane.position.norm()
        v2 = plane.velocity.norm() ** 2
        assert_allclose(v2, GM_SUN * (2.0 / r + 1.0 / a), rtol=1e-10)


# =============================================================================
# Parabolic regime
# =============================================================================

class TestParabolicRegime:
    """Universal-variable solution with the Stumpff functions."""

    @pytest.mark.parametrize("E2", [0.0, 0.25, 1.0, -0.5])
    def test_stumpff_closed_form(self, E2):
        c1, c2, c3 = stumpff(E2)
        if E2 == 0.0:
            expected = (1.0, 0.5, 1.0 / 6.0)
        elif E2 > 0.0:
            E = math.sqrt(E2)
            expected = (math.sin(E) / E, (1.0 - math.cos(E)) / E2,
                        (E - math.sin(E)) / (E2 * E))
        else:
            H = math.sqrt(-E2)
            expected = (math.sinh(H) / H, (math.cosh(H) - 1.0) / -E2,
                        (math.sinh(H) - H) / (-E2 * H))
        assert_allclose((c1, c2, c3), expected, rtol=0.0, atol=1e-13)

    @pytest.mark.parametrize("q", [0.3, 1.0, 2.5])
    @pytest.mark.parametrize("days", [-150.0, -10.0, 5.0, 60.0, 365.0])
    def test_barker_equation(self, q, days):
        """tan(v/2) + tan^3(v/2)/3 = sqrt(GM / (2 q^3)) (t - T) for e = 1."""
        plane = parabolic_orbit(GM_SUN, 0.0, days_to_centuries(days), q, 1.0)
        p = plane.position.to_rectangular()
        D = math.tan(0.5 * math.atan2(p.y, p.x))
        lhs = D + D ** 3 / 3.0
        rhs = math.sqrt(GM_SUN / (2.0 * q ** 3)) * days
        assert_allclose(lhs, rhs, rtol=1e-9, atol=1e-12)

    @pytest.mark.parametrize("days", [-80.0, 20.0, 300.0])
    def test_parabolic_escape_speed(self, days):
        """On a parabola |v|^2 = 2 GM / r."""
        plane = parabolic_orbit(GM_SUN, 0.0, days_to_centuries(days), 0.8, 1.0)
        r = plane.position.norm()
        assert_allclose(plane.velocity.norm() ** 2, 2.0 * GM_SUN / r, rtol=1e-10)

    def test_near_parabolic_matches_elliptic(self):
        """Both solvers agree for an eccentricity inside the guard band."""
        q, e, days = 1.0, 0.95, 20.0
        a = q / (1.0 - e)
        M = math.sqrt(GM_SUN / a ** 3) * days
        ell = elliptic_orbit(GM_SUN, M, a, e)
        par = parabolic_orbit(GM_SUN, 0.0, days_to_centuries(days), q, e)
        assert_allclose(par.position.to_rectangular().components,
                        ell.position.to_rectangular().components, atol=1e-10)


# =============================================================================
# Dispatch and orientation
# =============================================================================

class TestKeplerOrbit:
    """Regime selection and the Gaussian matrix."""

    @pytest.mark.parametrize("e", [0.0, 0.5, 0.95, 1.0, 1.05, 2.0])
    def test_at_perihelion(self, e, identity):
        """Every regime puts the body at distance q on +x at t = t0."""
        q = 1.3
        plane = kepler_orbit(GM_SUN, 0.25, 0.25, q, e, identity)
        assert_allclose(plane.position.to_rectangular().components,
                        [q, 0.0, 0.0], atol=1e-12)
        v_peri = math.sqrt(GM_SUN * (1.0 + e) / q)
        assert_allclose(plane.velocity.norm(), v_peri, rtol=1e-12)

    def test_elliptic_dispatch(self, identity):
        q, e, days = 0.8, 0.3, 123.0
        a = q / (1.0 - e)
        M = math.sqrt(GM_SUN / a ** 3) * days
        expected = elliptic_orbit(GM_SUN, M, a, e)
        plane = kepler_orbit(GM_SUN, 0.0, days_to_centuries(days), q, e, identity)
        assert_allclose(plane.position.to_rectangular().components,
                        expected.position.to_rectangular().components, atol=1e-12)

    def test_hyperbolic_dispatch(self, identity):
        q, e, days = 0.8, 1.7, 50.0
        a = q / (e - 1.0)
        expected = hyperbolic_orbit(GM_SUN, 0.0, days_to_centuries(days), a, e)
        plane = kepler_orbit(GM_SUN, 0.0, days_to_centuries(days), q, e, identity)
        assert_allclose(plane.position.to_rectangular().components,
                        expected.position.to_rectangular().components, atol=1e-12)

    def test_orientation_preserves_geometry(self, comet_pqr, identity):
        flat = kepler_orbit(GM_SUN, 0.0, 0.001, 0.6, 0.99, identity)
        tilted = kepler_orbit(GM_SUN, 0.0, 0.001, 0.6, 0.99, comet_pqr)
        assert_allclose(tilted.position.norm(), flat.position.norm(), rtol=1e-14)
        assert_allclose(tilted.position.dot(tilted.velocity),
                        flat.position.dot(flat.velocity), rtol=1e-12, atol=1e-18)

    def test_gaussian_matrix(self, comet_pqr):
        assert is_rotation(comet_pqr)
        assert_allclose(gaussian_matrix(0.0, 0.0, 0.0), np.eye(3), atol=1e-15)
        # Third column is the orbit normal: its z component is cos(i)
        assert_allclose(comet_pqr[2, 2], math.cos(162.2 * DEG2RAD), atol=1e-15)

    @pytest.mark.parametrize("e, days", [
        (0.95, 5.0 * 365.25),    # elliptic, |M| ~ 1
        (1.05, 5.0 * 365.25),    # hyperbolic
        (0.99, 20.0),            # parabolic branch
    ])
    def test_before_and_after_perihelion(self, e, days, identity):
        """Equal times either side of perihelion mirror the orbit in x."""
        q, t0 = 0.5, 0.1
        dt = days_to_centuries(days)
        after = kepler_orbit(GM_SUN, t0, t0 + dt, q, e, identity)
        before = kepler_orbit(GM_SUN, t0, t0 - dt, q, e, identity)
        assert_allclose(before.position.norm(), after.position.norm(), rtol=1e-12)
        x, y, z = after.position.to_rectangular().components
        assert_allclose(before.position.to_rectangular().components, [x, -y, z],
                        rtol=1e-12, atol=1e-12)

    @pytest.mark.parametrize("q", [0.0, -1.0])
    def test_invalid_perihelion_distance(self, q, identity):
        with pytest.raises(ValueError, match="Perihelion distance"):
            kepler_orbit(GM_SUN, 0.0, 0.1, q, 0.5, identity)


# =============================================================================
# Iteration cap
# =============================================================================

class TestConvergenceError:
    """Exceeding the iteration cap raises instead of returning."""

    def test_elliptic_cap(self, monkeypatch):
        monkeypatch.setattr(orbit, 'KEPLER_MAX_ITERATIONS', 1)
        with pytest.raises(KeplerConvergenceError) as info:
            eccentric_anomaly(2.0, 0.5)
        assert info.value.regime == "elliptic"
        assert info.value.iterations == 1

    def test_hyperbolic_cap(self, monkeypatch):
        monkeypatch.setattr(orbit, 'KEPLER_MAX_ITERATIONS', 1)
        with pytest.raises(KeplerConvergenceError) as info:
            hyperbolic_anomaly(50.0, 1.2)
        assert info.value.regime == "hyperbolic"

    def test_is_runtime_error(self, monkeypatch):
        monkeypatch.setattr(orbit, 'KEPLER_MAX_ITERATIONS', 1)
        with pytest.raises(RuntimeError, match="Convergence problems"):
            eccentric_anomaly(2.0, 0.5)
