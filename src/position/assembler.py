"""
===============================================================================
APPARENT POSITION - Position Assembler
===============================================================================
Turns ecliptic coordinate providers into the apparent geocentric equatorial
position of a body at time T:

    1. geometric geocentric vector       body(T) - earth(T)
    2. light time                        lt = |v| / c, body re-evaluated once
                                         at T - lt
    3. precession J2000 -> date          ecliptic precession models only
    4. annual aberration                 relativistic formula, Earth velocity
    5. ecliptic -> equatorial            mean obliquity
       precession J2000 -> date          equatorial precession models only
    6. nutation                          mean -> true equator and equinox

Providers tagged ``Epoch.APPARENT`` already refer to the equinox of date and
skip step 3 and the equatorial precession of step 5.

The Earth velocity used for aberration comes from, in order of preference,
the request's ``previous_velocity``, the orbit of the Earth-Moon barycenter
(method ``'kepler'``), or a central difference of the Earth provider (method
``'derivative'``).  It is returned with every result so a caller stepping
through time can feed it back.
Geocentric providers such as the Moon get no annual aberration, since for
them it cancels against the light-time shift.

References
----------
    [1] Explanatory Supplement to the Astronomical Almanac, Sec. 3.2.
    [2] Montenbruck & Pfleger, "Astronomy on the Personal Computer", Ch. 6.
===============================================================================
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from core.constants import C_LIGHT, JULIAN_DAYS_PER_CENTURY
from core.config import EARTH_VELOCITY_METHODS, PipelineConfig
from core.exceptions import EpochMismatchError
from core.vector import RectangularVector, Vector
from ephemeris.models import FrameModels, parse_precession_model
from ephemeris.obliquity import Obliquity
from ephemeris.precession import PrecessionModel
from kepler.elements import KeplerElements, get_elements
from position.providers import (
    EclipticCoordinates,
    Epoch,
    GeocentricBody,
    HeliocentricBody,
    ProviderLike,
    as_ecliptic_coordinates,
)

logger = logging.getLogger(__name__)

Request = Union[HeliocentricBody, GeocentricBody]


@dataclass
class ApparentPosition:
    """
    Result of :meth:`PositionAssembler.apparent`.

    Attributes
    ----------
    position : RectangularVector
        Geocentric position (AU) on the true equator and equinox of date.
    light_time : float
        One-way light time (days); zero when the correction is off.
    earth_velocity : RectangularVector or None
        Earth velocity (AU/d) used for aberration, None when aberration is off
        or the request is geocentric.
    """
    position: RectangularVector
    light_time: float
    earth_velocity: Optional[RectangularVector]


def aberration(position: Vector, earth_velocity: Vector, light_time: float) -> RectangularVector:
    """
    Annual aberration, relativistic form.

    Parameters
    ----------
    position : Vector
        Geocentric position of the body (AU).
    earth_velocity : Vector
        Barycentric (or heliocentric) velocity of the Earth (AU/d).
    light_time : float
        One-way light time (days).

    Returns
    -------
    RectangularVector
        Aberrated position.  The input is returned unchanged when the light
        time is not positive or the velocity is zero.
    """
    p = position.to_rectangular()
    if light_time <= 0.0:
        return p

    v = earth_velocity.to_rectangular()
    v_mag = v.norm()
    if v_mag == 0.0:
        return p

    p_mag = light_time * C_LIGHT
    beta = v_mag / C_LIGHT
    cos_d = p.dot(v) / (p_mag * v_mag)
    gamma_inv = math.sqrt(1.0 - beta * beta)
    P = beta * cos_d
    Q = (1.0 + P / (1.0 + gamma_inv)) * light_time
    R = 1.0 + P

    return RectangularVector.from_array(
        (gamma_inv * p.components + Q * v.components) / R
    )


# =============================================================================
# ASSEMBLER
# =============================================================================

class PositionAssembler:
    """
    Apparent geocentric positions for one Earth provider and one set of
    frame models.

    Parameters
    ----------
    precession_model : PrecessionModel or str
        Precession theory; obliquity and nutation follow from it.
    earth : provider
        Heliocentric ecliptic coordinates of the Earth.
    light_time : bool
        Apply the light-time correction.
    aberration : bool
        Apply annual aberration.
    earth_velocity : str
        ``'derivative'`` or ``'kepler'``.
    earth_elements : KeplerElements, optional
        Orbit used by the ``'kepler'`` method; defaults to the JPL
        Earth-Moon barycenter.
    step_days : float
        Half-width of the central difference (days).
    """

    def __init__(self, precession_model: Union[PrecessionModel, str],
                 earth: ProviderLike,
                 light_time: bool = True,
                 aberration: bool = True,
                 earth_velocity: str = 'derivative',
                 earth_elements: Optional[KeplerElements] = None,
                 step_days: float = 0.1) -> None:
        if earth_velocity not in EARTH_VELOCITY_METHODS:
            raise ValueError(
                f"Unknown earth_velocity method '{earth_velocity}'. "
                f"Available: {', '.join(EARTH_VELOCITY_METHODS)}"
            )
        if step_days <= 0.0:
            raise ValueError(f"step_days must be positive, got {step_days}")

        self.precession_model = parse_precession_model(precession_model)
        self.earth = as_ecliptic_coordinates(earth)
        self.light_time = light_time
        self.aberration = aberration
        self.earth_velocity_method = earth_velocity
        if earth_elements is None and earth_velocity == 'kepler':
            earth_elements = get_elements('earth_moon_barycenter')
        self.earth_elements = earth_elements
        self.step_days = step_days

        logger.debug("PositionAssembler: %s, earth=%s, light_time=%s, aberration=%s (%s)",
                     self.precession_model.name, self.earth.name,
                     light_time, aberration, earth_velocity)

    @classmethod
    def from_config(cls, config: PipelineConfig, earth: ProviderLike) -> 'PositionAssembler':
        """Build from a loaded :class:`PipelineConfig`."""
        return cls(
            config.precession,
            earth,
            light_time=config.light_time,
            aberration=config.aberration,
            earth_velocity=config.earth_velocity_method,
            step_days=config.step_days,
        )

    # -------------------------------------------------------------------------
    # Public entry points
    # -------------------------------------------------------------------------

    def apparent(self, T: float, request: Request) -> ApparentPosition:
        """
        Apparent geocentric equatorial position at T.

        Parameters
        ----------
        T : float
            Julian centuries since J2000 (TT).
        request : HeliocentricBody or GeocentricBody
            Body to observe.

        Raises
        ------
        EpochMismatchError
            If the Earth and body providers declare different epochs.
        ValueError
            If *request* is of an unsupported type.
        """
        return self._assemble(T, request, self.light_time, self.aberration)

    def geometric(self, T: float, request: Request) -> RectangularVector:
        """Geocentric equatorial position of date without light time or aberration."""
        return self._assemble(T, request, False, False).position

    def light_time_corrected(self, T: float, request: Request) -> Tuple[RectangularVector, float]:
        """
        Geocentric ecliptic vector in the provider's frame, corrected for
        light time.

        Returns
        -------
        tuple
            ``(vector, light_time)`` with the light time in days.
        """
        body, earth_position = self._resolve(T, request)
        return self._correct_light_time(T, body, earth_position)

    def heliocentric_ecliptic(self, T: float, request: HeliocentricBody) -> RectangularVector:
        """Heliocentric ecliptic position of the body at T minus the light time."""
        if not isinstance(request, HeliocentricBody):
            raise ValueError("heliocentric_ecliptic requires a HeliocentricBody request")
        body, earth_position = self._resolve(T, request)
        _, lt = self._correct_light_time(T, body, earth_position)
        return body(T - lt / JULIAN_DAYS_PER_CENTURY).to_rectangular()

    def earth_velocity(self, T: float, request: Optional[Request] = None) -> RectangularVector:
        """
        Earth velocity (AU/d) for the aberration correction.

        ``request.previous_velocity`` takes precedence over the configured
        method.
        """
        previous = getattr(request, 'previous_velocity', None)
        if previous is not None:
            logger.debug("Earth velocity: reusing previous value")
            return previous.to_rectangular()

        if self.earth_velocity_method == 'kepler':
            logger.debug("Earth velocity: %s orbit at T=%.8f", self.earth_elements.name, T)
            return self.earth_elements.orbital_plane(T).velocity.to_rectangular()

        dT = self.step_days / JULIAN_DAYS_PER_CENTURY
        ahead = self.earth(T + dT)
        behind = self.earth(T - dT)
        logger.debug("Earth velocity: central difference, step %.4f d", self.step_days)
        return (ahead - behind) / (2.0 * self.step_days)

    # -------------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------------

    def _resolve(self, T: float, request: Request) -> Tuple[EclipticCoordinates, RectangularVector]:
        if isinstance(request, HeliocentricBody):
            body = request.provider
            if body.epoch is not self.earth.epoch:
                raise EpochMismatchError(self.earth.epoch, body.epoch)
            return body, self.earth(T).to_rectangular()
        if isinstance(request, GeocentricBody):
            return request.provider, RectangularVector()
        raise ValueError(
            f"Unsupported request type {type(request).__name__}; "
            f"expected HeliocentricBody or GeocentricBody"
        )

    def _correct_light_time(self, T: float, body: EclipticCoordinates,
                            earth_position: RectangularVector) -> Tuple[RectangularVector, float]:
        geocentric = body(T) - earth_position
        lt = geocentric.norm() / C_LIGHT
        if lt > 0.0:
            geocentric = body(T - lt / JULIAN_DAYS_PER_CENTURY) - earth_position
        logger.debug("Light time for %s: %.8f d", body.name, lt)
        return geocentric, lt

    def _assemble(self, T: float, request: Request,
                  correct_light_time: bool, apply_aberration: bool) -> ApparentPosition:
        body, earth_position = self._resolve(T, request)

        if correct_light_time:
            geocentric, lt = self._correct_light_time(T, body, earth_position)
        else:
            geocentric, lt = body(T) - earth_position, 0.0

        models = FrameModels.create(self.precession_model, T)
        precession = models.precession
        of_date = body.epoch is Epoch.APPARENT

        if precession.is_ecliptic and not of_date:
            geocentric = precession.from_j2000(geocentric)

        # Light time and annual aberration cancel for a geocentric ephemeris
        velocity = None
        if apply_aberration and isinstance(request, HeliocentricBody):
            velocity = self.earth_velocity(T, request)
            geocentric = aberration(geocentric, velocity, lt)

        obliquity = models.obliquity
        if of_date and not precession.is_ecliptic:
            # Vectors of date need the obliquity of date
            obliquity = Obliquity.create(obliquity.model, T)
        equatorial = obliquity.ecliptic_to_equatorial(geocentric)

        if not precession.is_ecliptic and not of_date:
            equatorial = precession.from_j2000(equatorial)

        equatorial = models.nutation.apply_to_geocentric(equatorial)
        return ApparentPosition(equatorial, lt, velocity)
