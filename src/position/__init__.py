"""
===============================================================================
APPARENT POSITION - Position Module
===============================================================================
From ecliptic coordinate providers to apparent geocentric positions.

Submodules:
    providers  -- Epoch-tagged ecliptic coordinate functions and requests
    assembler  -- Light time, aberration and frame rotations
===============================================================================
"""
