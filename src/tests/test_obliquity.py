"""
===============================================================================
APPARENT POSITION - Mean Obliquity Test Suite
===============================================================================
Tests for the mean obliquity expansions against ERFA, the mutual agreement
of the models near J2000 and the ecliptic <-> equatorial rotation.
===============================================================================
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import math

import erfa
import numpy as np
import pytest
from numpy.testing import assert_allclose

from core.constants import ARCSEC2RAD, JD_J2000, JULIAN_DAYS_PER_CENTURY, PI
from core.frames import is_rotation
from core.vector import RectangularVector, SphericalVector
from ephemeris.obliquity import Obliquity, ObliquityModel, mean_obliquity


EPOCHS = [-2.0, -0.5, 0.0, 0.24, 0.5, 2.0]


# =============================================================================
# Reference values
# =============================================================================

class TestMeanObliquity:
    """Obliquity values against ERFA and each other."""

    @pytest.mark.parametrize("T", EPOCHS)
    def test_iau_2006_matches_erfa(self, T):
        expected = erfa.obl06(JD_J2000, T * JULIAN_DAYS_PER_CENTURY)
        assert_allclose(mean_obliquity(ObliquityModel.IAU_2006, T), expected,
                        rtol=0.0, atol=1e-12)

    @pytest.mark.parametrize("T", EPOCHS)
    def test_iau_1976_matches_erfa(self, T):
        expected = erfa.obl80(JD_J2000, T * JULIAN_DAYS_PER_CENTURY)
        assert_allclose(mean_obliquity(ObliquityModel.IAU_1976, T), expected,
                        rtol=0.0, atol=1e-12)

    @pytest.mark.parametrize("model, arcsec", [
        (ObliquityModel.WILLIAMS_1994, 84381.406173),
        (ObliquityModel.SIMON_1994, 84381.412),
        (ObliquityModel.LASKAR_1996, 84381.448),
        (ObliquityModel.IAU_1976, 84381.448),
        (ObliquityModel.IAU_2006, 84381.406),
    ])
    def test_j2000_constant(self, model, arcsec):
        assert_allclose(mean_obliquity(model, 0.0) / ARCSEC2RAD, arcsec, atol=1e-6)

    def test_vondrak_at_j2000(self):
        """The long-term model reproduces 84381.406" at J2000 to a few mas."""
        assert_allclose(mean_obliquity(ObliquityModel.VONDRAK_2011, 0.0) / ARCSEC2RAD,
                        84381.406, atol=0.01)

    @pytest.mark.parametrize("model", list(ObliquityModel))
    @pytest.mark.parametrize("T", [-1.0, 0.5, 1.0])
    def test_models_agree_near_j2000(self, model, T):
        reference = mean_obliquity(ObliquityModel.IAU_2006, T)
        diff = abs(mean_obliquity(model, T) - reference) / ARCSEC2RAD
        assert diff < 1.0, f"{model.name} differs from IAU 2006 by {diff:.3f} arcsec"

    def test_obliquity_decreases(self):
        """Current secular rate is about -46.8" per century."""
        for model in ObliquityModel:
            rate = (mean_obliquity(model, 0.01) - mean_obliquity(model, -0.01)) / 0.02
            assert_allclose(rate / ARCSEC2RAD, -46.8, atol=0.2)


# =============================================================================
# Rotation
# =============================================================================

class TestObliquityTransform:
    """Rx(-eps) between ecliptic and equator."""

    @pytest.mark.parametrize("model", list(ObliquityModel))
    def test_matrices(self, model):
        obliquity = Obliquity.create(model, 0.3)
        m = obliquity.ecliptic_to_equatorial_matrix
        assert is_rotation(m)
        assert_allclose(obliquity.equatorial_to_ecliptic_matrix, m.T, atol=0.0)
        assert_allclose(m @ obliquity.equatorial_to_ecliptic_matrix, np.eye(3),
                        rtol=0.0, atol=1e-12)

    def test_round_trip(self):
        obliquity = Obliquity.create(ObliquityModel.WILLIAMS_1994, -0.7)
        v = RectangularVector(1.2, -0.4, 0.3)
        back = obliquity.equatorial_to_ecliptic(obliquity.ecliptic_to_equatorial(v))
        assert_allclose(back.components, v.components, rtol=0.0, atol=1e-12)

    def test_ecliptic_pole(self):
        """The north ecliptic pole sits at RA 18h, Dec 90 deg - eps."""
        obliquity = Obliquity.create(ObliquityModel.IAU_2006, 0.0)
        pole = obliquity.ecliptic_to_equatorial(SphericalVector(0.0, PI / 2.0)).to_spherical()
        assert_allclose(pole.phi, 1.5 * PI, atol=1e-12)
        assert_allclose(pole.theta, PI / 2.0 - obliquity.mean_eps, atol=1e-12)

    def test_equinox_is_fixed(self):
        """The x axis is common to both frames."""
        obliquity = Obliquity.create(ObliquityModel.LASKAR_1996, 1.0)
        v = obliquity.ecliptic_to_equatorial(RectangularVector(1.0, 0.0, 0.0))
        assert_allclose(v.components, [1.0, 0.0, 0.0], atol=1e-15)

    def test_create_records_epoch(self):
        obliquity = Obliquity.create(ObliquityModel.SIMON_1994, 0.25)
        assert obliquity.T == 0.25
        assert obliquity.model is ObliquityModel.SIMON_1994
        assert_allclose(obliquity.mean_eps,
                        mean_obliquity(ObliquityModel.SIMON_1994, 0.25), atol=0.0)
        assert math.isclose(obliquity.mean_eps, 23.4392 * PI / 180.0, abs_tol=1e-4)
