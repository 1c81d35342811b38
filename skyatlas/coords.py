"""Angle unit conversions and compact sexagesimal corner parsing.

Corner strings use the atlas notation ``HHMM.M±DDMM``:
two-digit hours, minutes with one decimal, sign, two-digit degrees,
two-digit arcminutes. Example: ``0200.0+2000`` is RA 2h 00.0m, Dec +20° 00'.
"""
import re

import astropy.units as u
import numpy as np
from numpy.typing import ArrayLike

from skyatlas.models import CelestialCoordinate

_CORNER_RE = re.compile(
    r"^(?P<hh>\d{2})(?P<mm>\d{2}(?:\.\d+)?)(?P<sign>[+-])(?P<dd>\d{2})(?P<am>\d{2})$"
)


class CoordinateParseError(ValueError):
    """Raised when a corner coordinate string is malformed."""


def hours_to_radians(hours: ArrayLike) -> np.ndarray | float:
    return (np.asarray(hours, dtype=float) * u.hourangle).to_value(u.rad)


def degrees_to_radians(degrees: ArrayLike) -> np.ndarray | float:
    return (np.asarray(degrees, dtype=float) * u.deg).to_value(u.rad)


def radians_to_degrees(radians: ArrayLike) -> np.ndarray | float:
    return (np.asarray(radians, dtype=float) * u.rad).to_value(u.deg)


def radians_to_hours(radians: ArrayLike) -> np.ndarray | float:
    return (np.asarray(radians, dtype=float) * u.rad).to_value(u.hourangle)


def wrap_degrees(lon: float) -> float:
    """Wrap a longitude in degrees into (-180, 180]."""
    wrapped = lon % 360.0
    if wrapped > 180.0:
        wrapped -= 360.0
    return wrapped


def coordinate_from_degrees(ra_deg: float, dec_deg: float) -> CelestialCoordinate:
    return CelestialCoordinate(
        ra=float(degrees_to_radians(ra_deg)),
        dec=float(degrees_to_radians(dec_deg)),
    )


def parse_corner(text: str) -> CelestialCoordinate:
    """Parse ``HHMM.M±DDMM`` into a CelestialCoordinate (radians).

    Raises:
        CoordinateParseError: if the string does not match the format or a
            field is out of range.
    """
    match = _CORNER_RE.match(text.strip())
    if match is None:
        raise CoordinateParseError(f"Expected HHMM.M±DDMM, got {text!r}")

    hours = int(match["hh"])
    minutes = float(match["mm"])
    degrees = int(match["dd"])
    arcmin = int(match["am"])
    if hours >= 24 or minutes >= 60:
        raise CoordinateParseError(f"Right ascension out of range in {text!r}")
    if arcmin >= 60 or degrees * 60 + arcmin > 90 * 60:
        raise CoordinateParseError(f"Declination out of range in {text!r}")

    sign = -1.0 if match["sign"] == "-" else 1.0
    ra_hours = hours + minutes / 60.0
    dec_deg = sign * (degrees + arcmin / 60.0)
    return CelestialCoordinate(
        ra=float(hours_to_radians(ra_hours)),
        dec=float(degrees_to_radians(dec_deg)),
    )
