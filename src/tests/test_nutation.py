"""
===============================================================================
APPARENT POSITION - Nutation Test Suite
===============================================================================
Tests for the nutation series (IAU 1980 and IAU 2006 against ERFA, the fast
series against IAU 1980) and for the geocentric and ecliptic nutation
matrices built from them.
===============================================================================
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import erfa
import numpy as np
import pytest
from numpy.testing import assert_allclose

from core.constants import ARCSEC2RAD, JD_J2000, JULIAN_DAYS_PER_CENTURY
from core.frames import Rx, compose, is_rotation
from core.vector import RectangularVector
from ephemeris.nutation import (
    Nutation, NutationModel, iau1980_fundamental_arguments, nutation_angles,
)
from ephemeris.nutation_iau1980 import IAU1980_TERMS
from ephemeris.obliquity import Obliquity, ObliquityModel


EPOCHS = [-1.0, -0.3, 0.0, 0.1, 0.24, 0.7, 1.0]


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def obliquity():
    """IAU 2006 mean obliquity at T = 0.2."""
    return Obliquity.create(ObliquityModel.IAU_2006, 0.2)


@pytest.fixture
def probe():
    """Arbitrary geocentric vector."""
    return RectangularVector(0.41, -1.73, 0.66)


# =============================================================================
# Nutation angles
# =============================================================================

class TestNutationAngles:
    """dpsi and deps from each series."""

    def test_table_size(self):
        """105 tabulated terms plus the leading 18.6-year term."""
        assert len(IAU1980_TERMS) == 105
        assert all(len(row) == 9 for row in IAU1980_TERMS)

    @pytest.mark.parametrize("T", EPOCHS)
    def test_iau1980_matches_erfa(self, T):
        dpsi, deps = nutation_angles(NutationModel.IAU1980, T)
        ref_dpsi, ref_deps = erfa.nut80(JD_J2000, T * JULIAN_DAYS_PER_CENTURY)
        assert_allclose(dpsi, ref_dpsi, rtol=0.0, atol=1e-11)
        assert_allclose(deps, ref_deps, rtol=0.0, atol=1e-11)

    @pytest.mark.parametrize("T", EPOCHS)
    def test_iau2000_is_erfa_2000a(self, T):
        dpsi, deps = nutation_angles(NutationModel.IAU2000, T)
        ref_dpsi, ref_deps = erfa.nut00a(JD_J2000, T * JULIAN_DAYS_PER_CENTURY)
        assert_allclose((dpsi, deps), (ref_dpsi, ref_deps), rtol=0.0, atol=1e-15)

    @pytest.mark.parametrize("T", EPOCHS)
    def test_iau2006_matches_erfa(self, T):
        dpsi, deps = nutation_angles(NutationModel.IAU2006, T)
        ref_dpsi, ref_deps = erfa.nut06a(JD_J2000, T * JULIAN_DAYS_PER_CENTURY)
        assert_allclose((dpsi, deps), (ref_dpsi, ref_deps), rtol=0.0, atol=1e-14)

    @pytest.mark.parametrize("T", [-0.5, -0.1, 0.0, 0.2, 0.5])
    def test_iau2000_close_to_iau1980(self, T):
        """The two theories differ by a few tens of mas."""
        new = np.array(nutation_angles(NutationModel.IAU2000, T))
        old = np.array(nutation_angles(NutationModel.IAU1980, T))
        assert np.all(np.abs(new - old) < 0.2 * ARCSEC2RAD)

    @pytest.mark.parametrize("T", [-0.9, -0.5, -0.12, 0.0, 0.3, 0.6, 0.9])
    def test_fast_within_two_arcsec(self, T):
        """The short series stays within 2" of IAU 1980 over 1900-2100."""
        fast = np.array(nutation_angles(NutationModel.FAST, T))
        full = np.array(nutation_angles(NutationModel.IAU1980, T))
        diff = np.abs(fast - full) / ARCSEC2RAD
        assert np.all(diff < 2.0), f"T={T}: dpsi off {diff[0]:.3f}\", deps off {diff[1]:.3f}\""

    @pytest.mark.parametrize("model", list(NutationModel))
    def test_amplitude(self, model):
        """|dpsi| < 25" and |deps| < 12" for every theory."""
        for T in EPOCHS:
            dpsi, deps = nutation_angles(model, T)
            assert abs(dpsi) < 25.0 * ARCSEC2RAD
            assert abs(deps) < 12.0 * ARCSEC2RAD

    def test_fundamental_arguments_at_j2000(self):
        """Delaunay arguments of J2000 in degrees."""
        args = np.degrees(iau1980_fundamental_arguments(0.0))
        assert_allclose(args, [134.96298, 357.52772, 93.27191, 297.85036, 125.04452],
                        atol=1e-4)


# =============================================================================
# Nutation matrices
# =============================================================================

class TestNutationTransform:
    """Geocentric and ecliptic nutation rotations."""

    @pytest.mark.parametrize("model", list(NutationModel))
    def test_matrices_are_rotations(self, model, obliquity):
        nutation = Nutation.create(model, 0.2, obliquity)
        assert is_rotation(nutation.geocentric_matrix)
        assert is_rotation(nutation.ecliptic_matrix)
        for m in (nutation.geocentric_matrix, nutation.ecliptic_matrix):
            assert_allclose(m @ m.T, np.eye(3), rtol=0.0, atol=1e-12)

    @pytest.mark.parametrize("model", list(NutationModel))
    def test_remove_undoes_apply(self, model, obliquity, probe):
        nutation = Nutation.create(model, 0.2, obliquity)
        back = nutation.remove_from_geocentric(nutation.apply_to_geocentric(probe))
        assert_allclose(back.components, probe.components, rtol=0.0, atol=1e-12)
        back = nutation.remove_from_ecliptic(nutation.apply_to_ecliptic(probe))
        assert_allclose(back.components, probe.components, rtol=0.0, atol=1e-12)

    def test_geocentric_is_conjugated_ecliptic(self, obliquity):
        """N_geo = Rx(-eps) N_ecl Rx(eps)."""
        nutation = Nutation.create(NutationModel.IAU1980, 0.2, obliquity)
        eps = obliquity.mean_eps
        expected = compose(Rx(-eps), nutation.ecliptic_matrix, Rx(eps))
        assert_allclose(nutation.geocentric_matrix, expected, rtol=0.0, atol=1e-14)

    def test_true_obliquity(self, obliquity):
        nutation = Nutation.create(NutationModel.IAU2006, 0.2, obliquity)
        assert nutation.mean_eps == obliquity.mean_eps
        assert_allclose(nutation.true_eps, obliquity.mean_eps + nutation.deps, atol=0.0)

    def test_equinox_moves_by_dpsi(self, obliquity):
        """The ecliptic matrix shifts longitudes by dpsi."""
        nutation = Nutation.create(NutationModel.IAU1980, 0.2, obliquity)
        v = nutation.apply_to_ecliptic(RectangularVector(1.0, 0.0, 0.0))
        assert_allclose(np.arctan2(v.y, v.x), nutation.dpsi, atol=1e-15)

    def test_zero_angles_give_identity(self, obliquity):
        nutation = Nutation(NutationModel.FAST, 0.0, 0.0, 0.0, obliquity.mean_eps)
        assert_allclose(nutation.geocentric_matrix, np.eye(3), atol=1e-15)
        assert_allclose(nutation.ecliptic_matrix, np.eye(3), atol=0.0)
