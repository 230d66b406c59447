"""
===============================================================================
APPARENT POSITION - Rotation Matrices
===============================================================================
Elementary rotations and the small amount of matrix algebra the frame models
need.  Every matrix in the pipeline is one of these rotations or a product of
them, so it is orthonormal and its transpose is its inverse; no general
inversion routine exists.

Convention (passive, "rotate the frame"):

    Rx(a) = | 1    0       0     |
            | 0   cos(a)  sin(a)  |
            | 0  -sin(a)  cos(a)  |

A vector expressed in the old frame is multiplied on the left:
``v_new = R @ v_old``.  Products compose left to right, so
``compose(A, B, C) @ v`` applies C first.

References
----------
    [1] Montenbruck & Pfleger, "Astronomy on the Personal Computer",
        4th ed., Springer, 2000, Sec. 2.1.
    [2] Vallado, "Fundamentals of Astrodynamics and Applications", 4th ed.
===============================================================================
"""

from enum import Enum
from functools import reduce

import numpy as np

from core.vector import RectangularVector, Vector


class Axis(Enum):
    """Principal axis of an elementary rotation."""
    X = 0
    Y = 1
    Z = 2


# =============================================================================
# ELEMENTARY ROTATION MATRICES
# =============================================================================

def Rx(angle: float) -> np.ndarray:
    """
    Elementary rotation matrix about the X-axis.

    Parameters
    ----------
    angle : float
        Rotation angle in radians.

    Returns
    -------
    np.ndarray
        3x3 rotation matrix.
    """
    c = np.cos(angle)
    s = np.sin(angle)
    return np.array([
        [1.0,  0.0,  0.0],
        [0.0,    c,    s],
        [0.0,   -s,    c],
    ], dtype=np.float64)


def Ry(angle: float) -> np.ndarray:
    """Elementary rotation matrix about the Y-axis (radians)."""
    c = np.cos(angle)
    s = np.sin(angle)
    return np.array([
        [  c,  0.0,   -s],
        [0.0,  1.0,  0.0],
        [  s,  0.0,    c],
    ], dtype=np.float64)


def Rz(angle: float) -> np.ndarray:
    """Elementary rotation matrix about the Z-axis (radians)."""
    c = np.cos(angle)
    s = np.sin(angle)
    return np.array([
        [  c,    s,  0.0],
        [ -s,    c,  0.0],
        [0.0,  0.0,  1.0],
    ], dtype=np.float64)


_ELEMENTARY = {
    Axis.X: Rx,
    Axis.Y: Ry,
    Axis.Z: Rz,
}


def rotation(axis: Axis, angle: float) -> np.ndarray:
    """
    Elementary rotation built from a single (axis, angle) pair.

    Parameters
    ----------
    axis : Axis
        Principal axis.
    angle : float
        Rotation angle in radians.

    Returns
    -------
    np.ndarray
        3x3 rotation matrix.
    """
    return _ELEMENTARY[axis](angle)


# =============================================================================
# COMPOSITION AND APPLICATION
# =============================================================================

def compose(*matrices: np.ndarray) -> np.ndarray:
    """Left-to-right matrix product ``M1 @ M2 @ ... @ Mn``."""
    if not matrices:
        return np.eye(3)
    return reduce(np.matmul, matrices)


def transpose(matrix: np.ndarray) -> np.ndarray:
    """Transpose (and therefore inverse) of a rotation matrix."""
    return np.ascontiguousarray(np.asarray(matrix, dtype=np.float64).T)


def rotate(matrix: np.ndarray, vector: Vector) -> RectangularVector:
    """Matrix times vector, ``M @ v``.  Spherical vectors are converted first."""
    return RectangularVector.from_array(matrix @ vector.to_rectangular().components)


def rotate_transposed(matrix: np.ndarray, vector: Vector) -> RectangularVector:
    """
    Vector times matrix, ``v @ M``, which equals ``M.T @ v``.

    Undoes :func:`rotate` for any matrix built in this module.
    """
    return RectangularVector.from_array(vector.to_rectangular().components @ matrix)


def is_rotation(matrix: np.ndarray, tol: float = 1e-12) -> bool:
    """True when ``M @ M.T`` is the identity within *tol* and det(M) = +1."""
    m = np.asarray(matrix, dtype=np.float64)
    if m.shape != (3, 3):
        return False
    orthogonal = np.allclose(m @ m.T, np.eye(3), rtol=0.0, atol=tol)
    return bool(orthogonal and abs(np.linalg.det(m) - 1.0) < 1e3 * tol)
