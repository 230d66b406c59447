"""
===============================================================================
APPARENT POSITION - Kepler Module
===============================================================================
Two-body orbits of the planets and of small bodies.

Submodules:
    orbit     -- Elliptic, hyperbolic and parabolic solvers, Gaussian matrix,
                 regime dispatch
    elements  -- JPL and Simon (1994) mean element polynomials
===============================================================================
"""
