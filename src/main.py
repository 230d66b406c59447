#!/usr/bin/env python3
"""
===============================================================================
APPARENT POSITION - Command-Line Entry Point
===============================================================================
Prints the apparent geocentric right ascension, declination and distance of
a planet whose orbit is given by the JPL approximate elements.  The Earth is
represented by the Earth-Moon barycenter.

Usage:
    python src/main.py --body mars --mjd 60000.0
    python src/main.py --body jupiter --t 0.25 --precession IAU_2006
    python src/main.py --body venus --mjd 60000.0 --geometric --verbose
===============================================================================
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.config import load_config
from core.constants import RAD2DEG, RAD2HOUR, AU, centuries_from_jd, centuries_from_mjd
from kepler.elements import JPL_ELEMENTS, get_elements
from position.assembler import PositionAssembler
from position.providers import HeliocentricBody

logger = logging.getLogger('APPARENT_MAIN')


def format_hms(hours: float) -> str:
    """Hours as ``HHh MMm SS.SSs``."""
    h = int(hours)
    m = int((hours - h) * 60.0)
    s = ((hours - h) * 60.0 - m) * 60.0
    return f"{h:02d}h {m:02d}m {s:05.2f}s"


def format_dms(degrees: float) -> str:
    """Degrees as ``+DDd MM' SS.S"``."""
    sign = '-' if degrees < 0.0 else '+'
    a = abs(degrees)
    d = int(a)
    m = int((a - d) * 60.0)
    s = ((a - d) * 60.0 - m) * 60.0
    return f"{sign}{d:02d}d {m:02d}' {s:04.1f}\""


def main(argv=None) -> int:
    """
    Parse command line arguments and print the position of the requested body.
    """
    bodies = sorted(name for name in JPL_ELEMENTS if name != 'earth_moon_barycenter')

    parser = argparse.ArgumentParser(
        description='Apparent geocentric position of a planet',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --body mars --mjd 60000.0
  python main.py --body saturn --t 0.24 --precession VONDRAK_2011
  python main.py --body venus --mjd 60000.0 --geometric
        """
    )
    parser.add_argument('--body', type=str, default='mars', choices=bodies,
                        help='Planet to observe (default: mars)')
    time_group = parser.add_mutually_exclusive_group()
    time_group.add_argument('--mjd', type=float, default=None,
                            help='Modified Julian Date (TT)')
    time_group.add_argument('--jd', type=float, default=None,
                            help='Julian Date (TT)')
    time_group.add_argument('--t', type=float, default=None,
                            help='Julian centuries since J2000 (TT)')
    parser.add_argument('--precession', type=str, default=None,
                        help='Precession model (overrides the config file)')
    parser.add_argument('--config', type=str, default=None,
                        help='Path to pipeline config YAML')
    parser.add_argument('--geometric', action='store_true',
                        help='Skip light time and aberration')
    parser.add_argument('--verbose', action='store_true',
                        help='Debug logging')

    args = parser.parse_args(argv)

    config = load_config(args.config)
    if args.precession is not None:
        config = replace(config, precession=args.precession)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, config.log_level),
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    if args.t is not None:
        T = args.t
    elif args.mjd is not None:
        T = centuries_from_mjd(args.mjd)
    elif args.jd is not None:
        T = centuries_from_jd(args.jd)
    else:
        T = 0.0
    logger.info("Body %s at T=%.10f", args.body, T)

    earth = get_elements('earth_moon_barycenter')
    assembler = PositionAssembler.from_config(config, earth)
    request = HeliocentricBody(elements=get_elements(args.body))

    if args.geometric:
        position = assembler.geometric(T, request)
        light_time = 0.0
    else:
        result = assembler.apparent(T, request)
        position, light_time = result.position, result.light_time

    spherical = position.to_spherical()
    print("=" * 50)
    print(f"  {args.body.upper()}  T = {T:+.10f}  ({config.precession})")
    print("=" * 50)
    print(f"  RA        : {format_hms(spherical.phi * RAD2HOUR)}")
    print(f"  Dec       : {format_dms(spherical.theta * RAD2DEG)}")
    print(f"  Distance  : {spherical.r:.8f} AU  ({spherical.r * AU:.0f} km)")
    if light_time > 0.0:
        print(f"  Light time: {light_time * 1440.0:.3f} min")
    print("=" * 50)
    return 0


if __name__ == '__main__':
    sys.exit(main())
