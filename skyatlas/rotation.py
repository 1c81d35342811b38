"""Re-cut Milky Way rings at the meridian opposite the chart centre.

Brightness-contour rings arrive split at a fixed seam: the ring runs along
one edge of a band, drops vertically at the seam, runs back along the other
edge and climbs vertically at the seam again. Projected around any other
centre that vertical drop shows up as a false edge inside the chart.
``rotate_ring`` moves the vertical drops to the split longitude
``s = ra0 + 180`` where the projection itself wraps.

Points are ``(lon, lat)`` pairs in degrees, as in the GeoJSON catalogs.
"""
from typing import Sequence

from skyatlas.coords import wrap_degrees

Point = tuple[float, float]

REVERSAL_THRESHOLD_DEG = 5.0  # Adjacent |dDec| above this marks the seam


def find_reversal(ring: Sequence[Point], stop: int | None = None) -> int | None:
    """Index i where ring[i] -> ring[i + 1] jumps in declination.

    Pairs wrap, so the last index pairs with the first point. Only indices
    below ``stop`` are examined.
    """
    n = len(ring)
    for i in range(n if stop is None else stop):
        if abs(ring[(i + 1) % n][1] - ring[i][1]) > REVERSAL_THRESHOLD_DEG:
            return i
    return None


def _crosses(a: float, b: float, split: float) -> bool:
    if abs(b - a) >= 180.0:
        return False  # Segment wraps the old seam, not a crossing
    return (a - split) * (b - split) <= 0 and a != b


def find_crossing(arc: Sequence[Point], split: float, reverse: bool = False) -> int | None:
    """Index i such that arc[i] -> arc[i + 1] crosses longitude ``split``.

    Scans forward from the start, or backward from the end when ``reverse``.
    """
    lons = [wrap_degrees(p[0]) for p in arc]
    indices = range(len(arc) - 1)
    if reverse:
        indices = reversed(indices)
    for i in indices:
        if _crosses(lons[i], lons[i + 1], split):
            return i
    return None


def split_longitude(ra0_deg: float) -> float:
    return wrap_degrees(ra0_deg + 180.0)


def rotate_ring(ring: Sequence[Point], ra0_deg: float) -> list[Point]:
    """Move the seam of a closed ring to the meridian opposite ``ra0_deg``.

    The two arcs between the old seam jumps are each cut at the split
    meridian and stitched (A from its crossing, A up to it, then B likewise)
    so both vertical edges of the re-cut ring sit on the split meridian.

    Returns the ring unchanged (as a list) when the chart is centred on
    0h, when no seam reversal exists, or when the two seam crossings cannot
    be located.
    """
    points = list(ring)
    if wrap_degrees(ra0_deg) == 0.0:
        return points

    closed = len(points) > 1 and points[0] == points[-1]
    cycle = points[:-1] if closed else points
    if len(cycle) < 4:
        return points

    first = find_reversal(cycle)
    if first is None:
        return points

    # Start just after the existing seam
    start = (first + 1) % len(cycle)
    rotated = cycle[start:] + cycle[:start]

    # The last pair of `rotated` is the first reversal itself
    second = find_reversal(rotated, stop=len(rotated) - 1)
    if second is None:
        return points

    arc_a = rotated[: second + 1]
    arc_b = rotated[second + 1:]
    split = split_longitude(ra0_deg)
    cross_a = find_crossing(arc_a, split)
    cross_b = find_crossing(arc_b, split, reverse=True)
    if cross_a is None or cross_b is None:
        return points

    recut = (
        arc_a[cross_a + 1:]
        + arc_a[: cross_a + 1]
        + arc_b[cross_b + 1:]
        + arc_b[: cross_b + 1]
    )
    recut.append(recut[0])
    return recut
