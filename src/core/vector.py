"""
===============================================================================
APPARENT POSITION - Three-Component Vectors
===============================================================================
Positions and velocities travel through the pipeline as ``Vector`` objects
in one of two interchangeable representations:

    RectangularVector(x, y, z)
    SphericalVector(phi, theta, r)      phi   = longitude / right ascension
                                        theta = latitude / declination
                                        r     = radius

Conversion in either direction is lossless to rounding.  Arithmetic
(add, subtract, scale, dot, cross) is defined on the rectangular form;
spherical operands are converted first, silently.

Singularities of the rectangular -> spherical conversion are resolved
rather than reported:

    x = y = 0          ->  phi   = 0
    z = 0 and rho = 0  ->  theta = 0

so the zero vector maps to (0, 0, 0).  Longitudes are normalized into
[0, 2*pi).

References
----------
    [1] Montenbruck & Pfleger, "Astronomy on the Personal Computer",
        4th ed., Springer, 2000, Sec. 2.1 (class Vec3D).
===============================================================================
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import Iterator, Union

import numpy as np

from core.constants import TWO_PI


class VectorType(Enum):
    """Representation of a :class:`Vector`."""
    RECTANGULAR = auto()
    SPHERICAL = auto()


# =============================================================================
# ABSTRACT BASE: Vector
# =============================================================================

class Vector(ABC):
    """
    Common interface of rectangular and spherical vectors.

    Subclasses implement the two conversions; everything else is defined
    here on top of the rectangular form.
    """

    vector_type: VectorType

    @abstractmethod
    def to_rectangular(self) -> 'RectangularVector':
        """Return the rectangular representation."""

    @abstractmethod
    def to_spherical(self) -> 'SphericalVector':
        """Return the spherical representation."""

    def get_vector_of_type(self, vector_type: VectorType) -> 'Vector':
        """Return this vector in the requested representation."""
        if vector_type is VectorType.RECTANGULAR:
            return self.to_rectangular()
        return self.to_spherical()

    # -------------------------------------------------------------------------
    # Linear algebra (rectangular form)
    # -------------------------------------------------------------------------

    def norm(self) -> float:
        """Euclidean length."""
        return float(np.linalg.norm(self.to_rectangular()._v))

    def unit(self) -> 'RectangularVector':
        """Unit vector in the same direction; the zero vector is returned unchanged."""
        v = self.to_rectangular()._v
        n = np.linalg.norm(v)
        if n == 0.0:
            return RectangularVector.from_array(v)
        return RectangularVector.from_array(v / n)

    def dot(self, other: 'Vector') -> float:
        """Scalar product."""
        return float(np.dot(self.to_rectangular()._v, other.to_rectangular()._v))

    def cross(self, other: 'Vector') -> 'RectangularVector':
        """Vector product ``self x other``."""
        return RectangularVector.from_array(
            np.cross(self.to_rectangular()._v, other.to_rectangular()._v)
        )

    def __add__(self, other: 'Vector') -> 'RectangularVector':
        if isinstance(other, Vector):
            return RectangularVector.from_array(
                self.to_rectangular()._v + other.to_rectangular()._v
            )
        return NotImplemented

    def __sub__(self, other: 'Vector') -> 'RectangularVector':
        if isinstance(other, Vector):
            return RectangularVector.from_array(
                self.to_rectangular()._v - other.to_rectangular()._v
            )
        return NotImplemented

    def __mul__(self, scalar: Union[float, int]) -> 'RectangularVector':
        if isinstance(scalar, (int, float, np.floating)):
            return RectangularVector.from_array(self.to_rectangular()._v * float(scalar))
        return NotImplemented

    def __rmul__(self, scalar: Union[float, int]) -> 'RectangularVector':
        return self.__mul__(scalar)

    def __truediv__(self, scalar: Union[float, int]) -> 'RectangularVector':
        if isinstance(scalar, (int, float, np.floating)):
            return RectangularVector.from_array(self.to_rectangular()._v / float(scalar))
        return NotImplemented

    def __neg__(self) -> 'RectangularVector':
        return RectangularVector.from_array(-self.to_rectangular()._v)


# =============================================================================
# RECTANGULAR VECTOR
# =============================================================================

class RectangularVector(Vector):
    """
    Cartesian vector ``(x, y, z)`` backed by a float64 NumPy array.

    Parameters
    ----------
    x, y, z : float
        Components (default zero).
    """

    vector_type = VectorType.RECTANGULAR

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0) -> None:
        self._v = np.array([x, y, z], dtype=np.float64)

    @staticmethod
    def from_array(values) -> 'RectangularVector':
        """Build from any length-3 sequence or array."""
        arr = np.asarray(values, dtype=np.float64).reshape(3)
        return RectangularVector(arr[0], arr[1], arr[2])

    @property
    def x(self) -> float:
        return float(self._v[0])

    @property
    def y(self) -> float:
        return float(self._v[1])

    @property
    def z(self) -> float:
        return float(self._v[2])

    @property
    def components(self) -> np.ndarray:
        """Copy of ``[x, y, z]``."""
        return self._v.copy()

    def set(self, x: float, y: float, z: float) -> None:
        """Overwrite the components in place."""
        self._v[:] = (x, y, z)

    def to_rectangular(self) -> 'RectangularVector':
        return self

    def to_spherical(self) -> 'SphericalVector':
        x, y, z = self._v
        rho_sqr = x * x + y * y
        r = math.sqrt(rho_sqr + z * z)

        if x == 0.0 and y == 0.0:
            phi = 0.0
        else:
            phi = math.atan2(y, x)
            if phi < 0.0:
                phi += TWO_PI

        rho = math.sqrt(rho_sqr)
        if z == 0.0 and rho == 0.0:
            theta = 0.0
        else:
            theta = math.atan2(z, rho)

        return SphericalVector(phi, theta, r)

    def __getitem__(self, index: int) -> float:
        return float(self._v[index])

    def __iter__(self) -> Iterator[float]:
        return iter(float(c) for c in self._v)

    def __repr__(self) -> str:
        return f"RectangularVector(x={self.x:+.12e}, y={self.y:+.12e}, z={self.z:+.12e})"


# =============================================================================
# SPHERICAL VECTOR
# =============================================================================

class SphericalVector(Vector):
    """
    Spherical vector ``(phi, theta, r)``.

    Parameters
    ----------
    phi : float
        Longitude (or right ascension) in radians.
    theta : float
        Latitude (or declination) in radians.
    r : float
        Radius (default 1.0).
    """

    vector_type = VectorType.SPHERICAL

    def __init__(self, phi: float = 0.0, theta: float = 0.0, r: float = 1.0) -> None:
        self.phi = float(phi)
        self.theta = float(theta)
        self.r = float(r)

    def set(self, phi: float, theta: float, r: float) -> None:
        """Overwrite the coordinates in place."""
        self.phi, self.theta, self.r = float(phi), float(theta), float(r)

    def to_rectangular(self) -> RectangularVector:
        cos_theta = math.cos(self.theta)
        return RectangularVector(
            self.r * cos_theta * math.cos(self.phi),
            self.r * cos_theta * math.sin(self.phi),
            self.r * math.sin(self.theta),
        )

    def to_spherical(self) -> 'SphericalVector':
        return self

    def __repr__(self) -> str:
        return (f"SphericalVector(phi={self.phi:.12f}, theta={self.theta:.12f}, "
                f"r={self.r:.12e})")


def as_vector(value) -> Vector:
    """Accept a Vector or any length-3 sequence from a caller-supplied provider."""
    if isinstance(value, Vector):
        return value
    return RectangularVector.from_array(value)
