"""
Ecliptic coordinate providers and position requests.

A provider is any function ``T -> Vector`` (T in Julian centuries since
J2000) returning heliocentric or geocentric ecliptic coordinates in AU.
``EclipticCoordinates`` tags such a function with the equinox its output is
referred to; plain callables and Kepler element sets are wrapped as J2000
providers.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Union

from core.vector import Vector, as_vector
from kepler.elements import KeplerElements


class Epoch(Enum):
    """Equinox a provider's vectors are referred to."""
    J2000 = "j2000"
    APPARENT = "apparent"


class EclipticCoordinates:
    """
    Ecliptic coordinate function with an epoch tag.

    Parameters
    ----------
    function : callable
        ``T -> Vector`` (or any length-3 sequence), AU.
    epoch : Epoch
        ``Epoch.J2000`` for the mean ecliptic and equinox of J2000,
        ``Epoch.APPARENT`` for the ecliptic and equinox of date.
    name : str
        Label used in log messages.
    """

    def __init__(self, function: Callable[[float], Vector],
                 epoch: Epoch = Epoch.J2000, name: str = "") -> None:
        if not callable(function):
            raise ValueError(f"Coordinate provider must be callable, got {type(function).__name__}")
        self.function = function
        self.epoch = epoch
        self.name = name or getattr(function, '__name__', type(function).__name__)

    def __call__(self, T: float) -> Vector:
        return as_vector(self.function(T))

    def __repr__(self) -> str:
        return f"EclipticCoordinates({self.name!r}, epoch={self.epoch.name})"


ProviderLike = Union[EclipticCoordinates, KeplerElements, Callable[[float], Vector]]


def as_ecliptic_coordinates(provider: ProviderLike) -> EclipticCoordinates:
    """
    Wrap *provider* as an ``EclipticCoordinates``.

    Kepler element sets become J2000 providers of their heliocentric
    position; other callables are taken to be J2000 providers.

    Raises
    ------
    ValueError
        If *provider* is not callable.
    """
    if isinstance(provider, EclipticCoordinates):
        return provider
    if isinstance(provider, KeplerElements):
        return EclipticCoordinates(provider.heliocentric_position, Epoch.J2000, provider.name)
    return EclipticCoordinates(provider, Epoch.J2000)


# =============================================================================
# REQUESTS
# =============================================================================

@dataclass
class HeliocentricBody:
    """
    Body whose provider returns heliocentric ecliptic coordinates.

    Attributes
    ----------
    get_coordinates : provider, optional
        Heliocentric ecliptic coordinates.  When omitted, ``elements`` is
        used instead.
    elements : KeplerElements, optional
        Orbital elements of the body.
    previous_velocity : Vector, optional
        Earth velocity (AU/d) returned by an earlier call; reused for the
        aberration correction when given.
    """
    get_coordinates: Optional[ProviderLike] = None
    elements: Optional[KeplerElements] = None
    previous_velocity: Optional[Vector] = None

    def __post_init__(self):
        if self.get_coordinates is None and self.elements is None:
            raise ValueError("HeliocentricBody needs get_coordinates or elements")

    @property
    def provider(self) -> EclipticCoordinates:
        source = self.get_coordinates if self.get_coordinates is not None else self.elements
        return as_ecliptic_coordinates(source)


@dataclass
class GeocentricBody:
    """
    Body whose provider returns geocentric ecliptic coordinates (e.g. the Moon).

    Attributes
    ----------
    get_coordinates : provider
        Geocentric ecliptic coordinates.
    previous_velocity : Vector, optional
        Earth velocity (AU/d) for the aberration correction.
    """
    get_coordinates: ProviderLike
    previous_velocity: Optional[Vector] = None

    @property
    def provider(self) -> EclipticCoordinates:
        return as_ecliptic_coordinates(self.get_coordinates)
