"""Conic / cylindrical map projection and viewport clipping.

Pipeline: RA/Dec (radians) -> normalise RA around the frame centre ->
Albers-style conic (or its cylindrical limit) -> plane (x, y), y down.
"""
import numpy as np
from numpy.typing import ArrayLike, NDArray

from skyatlas.models import CelestialCoordinate, MapFrame, Viewport

TWO_PI = 2.0 * np.pi
CYLINDRICAL_EPSILON = 0.001  # |phi1 + phi2| below this selects the cylindrical branch


def is_cylindrical(frame: MapFrame) -> bool:
    return abs(frame.phi1 + frame.phi2) < CYLINDRICAL_EPSILON


def normalize_ra(ra: ArrayLike, ra0: float) -> NDArray[np.float64]:
    """Shift RA by whole turns so that |ra0 - ra| <= pi."""
    d = ra0 - np.asarray(ra, dtype=float)
    d = np.where(d > np.pi, d - TWO_PI * np.ceil((d - np.pi) / TWO_PI), d)
    d = np.where(d < -np.pi, d + TWO_PI * np.ceil((-np.pi - d) / TWO_PI), d)
    return ra0 - d


def project_points(
    ra: ArrayLike,
    dec: ArrayLike,
    frame: MapFrame,
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Bulk-project RA/Dec arrays (radians) to plane coordinates.

    Math (conic):
        n   = (sin phi1 + sin phi2) / 2
        th  = n * (ra0 - ra)
        c   = cos^2 phi1 + 2 n sin phi1
        rho = sqrt(c - 2 n sin dec) / n
        x = rho sin th,  y = rho0 - rho cos th
    Math (cylindrical, phi1 + phi2 ~ 0):
        x = ra0 - ra,  y = tan(dec) cos phi1
    Returns (scale * x, -scale * y); the plane y axis grows downward.
    """
    ra = normalize_ra(ra, frame.ra0)
    dec = np.asarray(dec, dtype=float)

    if is_cylindrical(frame):
        x = frame.ra0 - ra
        y = np.tan(dec) * np.cos(frame.phi1)
    else:
        n = (np.sin(frame.phi1) + np.sin(frame.phi2)) / 2.0
        theta = n * (frame.ra0 - ra)
        c = np.cos(frame.phi1) ** 2 + 2.0 * n * np.sin(frame.phi1)
        rho = np.sqrt(c - 2.0 * n * np.sin(dec)) / n
        rho0 = np.sqrt(c - 2.0 * n * np.sin(frame.dec0)) / n
        x = rho * np.sin(theta)
        y = rho0 - rho * np.cos(theta)

    return frame.scale * x, -frame.scale * y


def project(ra: float, dec: float, frame: MapFrame) -> tuple[float, float]:
    """Project a single RA/Dec (radians) to a plane point."""
    x, y = project_points(np.array([ra]), np.array([dec]), frame)
    return float(x[0]), float(y[0])


def project_coordinate(coord: CelestialCoordinate, frame: MapFrame) -> tuple[float, float]:
    return project(coord.ra, coord.dec, frame)


def project_polyline(
    points: list[CelestialCoordinate],
    frame: MapFrame,
) -> list[tuple[float, float]]:
    """Project every vertex of a polyline, preserving order."""
    if not points:
        return []
    x, y = project_points(
        np.array([p.ra for p in points]),
        np.array([p.dec for p in points]),
        frame,
    )
    return list(zip(x.tolist(), y.tolist()))


def in_bounds(x: float, y: float, viewport: Viewport) -> bool:
    """Inclusive point-in-viewport test."""
    return viewport.xmin <= x <= viewport.xmax and viewport.ymin <= y <= viewport.ymax


def in_bounds_mask(
    x: NDArray[np.float64],
    y: NDArray[np.float64],
    viewport: Viewport,
) -> NDArray[np.bool_]:
    """Vectorised in_bounds: True where the point lies inside or on the edge."""
    return (
        (x >= viewport.xmin) & (x <= viewport.xmax)
        & (y >= viewport.ymin) & (y <= viewport.ymax)
    )


def any_in_bounds(points: list[tuple[float, float]], viewport: Viewport) -> bool:
    """Conservative polyline visibility: visible if any vertex is in bounds."""
    return any(in_bounds(x, y, viewport) for x, y in points)
