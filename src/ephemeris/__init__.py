"""
===============================================================================
APPARENT POSITION - Ephemeris Frame Models
===============================================================================
Interchangeable models that carry a vector from the J2000 ecliptic to the
true equator and equinox of date.

Submodules:
    obliquity         -- Mean obliquity of the ecliptic (six expansions)
    nutation_iau1980  -- Periodic terms of the 1980 IAU nutation series
    nutation          -- IAU1980, IAU2000, IAU2006 and fast nutation
    precession        -- Ecliptic and equatorial precession theories
    models            -- Precession -> (obliquity, nutation) pairing
===============================================================================
"""
