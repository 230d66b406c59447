"""
===============================================================================
APPARENT POSITION - Core Module
===============================================================================
Building blocks shared by every other package.

Submodules:
    constants   -- Astronomical constants, unit conversions, time scales
    exceptions  -- KeplerConvergenceError, EpochMismatchError
    astro_math  -- Angle reduction and polynomial evaluation helpers
    vector      -- Rectangular and spherical three-component vectors
    frames      -- Elementary rotation matrices and their composition
    config      -- YAML pipeline configuration
===============================================================================
"""
