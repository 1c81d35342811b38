"""Polyline densification and great-circle interpolation.

Border segments that run along a parallel are straight in RA/Dec but
curved on a conic chart, so extra vertices are inserted before projecting.
Constellation lines are drawn along the true great circle between their
two stars, sampled in equal fractional steps.
"""
import math
from typing import Sequence

import numpy as np

from skyatlas.models import CelestialCoordinate

Point = tuple[float, float]

HORIZONTAL_THRESHOLD_DEG = 0.2  # |dDec| below this counts as along a parallel
HORIZONTAL_INSERTS = 5
GREAT_CIRCLE_STEPS = 10
POLE_EPSILON = 1e-9  # cos(dec) below this is treated as sitting on a pole


def _is_horizontal(a: Point, b: Point) -> bool:
    return abs(b[1] - a[1]) < HORIZONTAL_THRESHOLD_DEG


def find_horizontal(points: Sequence[Point], start: int = 0) -> int | None:
    """First index i >= start where points[i] -> points[i + 1] is near-horizontal."""
    for i in range(start, len(points) - 1):
        if _is_horizontal(points[i], points[i + 1]):
            return i
    return None


def _inserts(a: Point, b: Point) -> list[Point]:
    lon_b = b[0]
    if lon_b - a[0] > 180.0:
        lon_b -= 360.0
    elif a[0] - lon_b > 180.0:
        lon_b += 360.0
    fractions = np.linspace(0.0, 1.0, HORIZONTAL_INSERTS + 2)[1:-1]
    lons = a[0] + fractions * (lon_b - a[0])
    lats = a[1] + fractions * (b[1] - a[1])
    return list(zip(lons.tolist(), lats.tolist()))


def densify_horizontal(points: Sequence[Point]) -> list[Point]:
    """Insert evenly spaced vertices into every near-horizontal segment.

    Original vertices are kept unchanged; each qualifying segment gains
    HORIZONTAL_INSERTS points along the straight RA/Dec segment.
    """
    points = list(points)
    if len(points) < 2:
        return points

    result: list[Point] = []
    cursor = 0
    while True:
        i = find_horizontal(points, cursor)
        if i is None:
            result.extend(points[cursor:])
            return result
        result.extend(points[cursor: i + 1])
        result.extend(_inserts(points[i], points[i + 1]))
        cursor = i + 1


def great_circle(
    p1: CelestialCoordinate,
    p2: CelestialCoordinate,
    steps: int = GREAT_CIRCLE_STEPS,
) -> list[CelestialCoordinate]:
    """Sample the great circle between two points in ``steps`` equal parts.

    The pair is ordered so that p1.ra <= p2.ra. With the pole, the two
    points form a spherical triangle: sides a = pi/2 - dec2 and
    b = pi/2 - dec1 meet at the pole with angle C = dRA. The arc length
    comes from the law of cosines and the bearing at p1 from the
    four-parts formula. Returns steps + 1 points, p1 first and p2 last.
    A path leaving a pole runs down p2's meridian.
    """
    if p1.ra > p2.ra:
        p1, p2 = p2, p1

    a = math.pi / 2 - p2.dec
    b = math.pi / 2 - p1.dec
    big_c = p2.ra - p1.ra

    cos_c = math.cos(a) * math.cos(b) + math.sin(a) * math.sin(b) * math.cos(big_c)
    arc = math.acos(max(-1.0, min(1.0, cos_c)))
    bearing = math.atan2(
        math.sin(big_c) * math.sin(a),
        math.cos(a) * math.sin(b) - math.sin(a) * math.cos(b) * math.cos(big_c),
    )

    sin_d1, cos_d1 = math.sin(p1.dec), math.cos(p1.dec)
    # From a pole every great circle is a meridian; the bearing is undefined
    from_pole = abs(cos_d1) < POLE_EPSILON
    if from_pole:
        bearing = math.pi if p1.dec > 0 else 0.0
    points = []
    for k in range(steps):
        d = arc * k / steps
        sin_dec = sin_d1 * math.cos(d) + cos_d1 * math.sin(d) * math.cos(bearing)
        sin_dec = max(-1.0, min(1.0, sin_dec))
        if from_pole:
            dra = big_c if k else 0.0
        else:
            dra = math.atan2(
                math.sin(bearing) * math.sin(d) * cos_d1,
                math.cos(d) - sin_d1 * sin_dec,
            )
        points.append(CelestialCoordinate(ra=p1.ra + dra, dec=math.asin(sin_dec)))
    points.append(p2)
    return points
