"""Map selection: atlas index table, corner input, scale and viewport.

The frame is derived once per chart. Corners are projected at unit scale
to measure the plane width, the scale is chosen so that width maps to the
requested physical size, then the corners are re-projected at that scale
to give the viewport.
"""
import logging
from dataclasses import replace
from typing import NamedTuple

from skyatlas.coords import degrees_to_radians, hours_to_radians, parse_corner
from skyatlas.models import CelestialCoordinate, MapFrame, MapSelection, Viewport
from skyatlas.projection import project_coordinate

logger = logging.getLogger(__name__)


class AtlasEntry(NamedTuple):
    """One printed-atlas chart. Degrees for phi/dec, hours for RA."""

    phi1: float
    phi2: float
    ra0: float
    dec0: float
    ra1: float   # Upper-left corner
    dec1: float
    ra2: float   # Lower-right corner
    dec2: float


def _north_cap(ra0: float) -> AtlasEntry:
    return AtlasEntry(71, 59, ra0, 65, (ra0 + 8) % 24, 60, (ra0 - 3) % 24, 45)


def _north_mid(ra0: float) -> AtlasEntry:
    return AtlasEntry(48, 32, ra0, 40, (ra0 + 2) % 24, 60, (ra0 - 2) % 24, 20)


def _equatorial(ra0: float) -> AtlasEntry:
    return AtlasEntry(14, -14, ra0, 0, (ra0 + 2) % 24, 20, (ra0 - 2) % 24, -20)


def _south_mid(ra0: float) -> AtlasEntry:
    return AtlasEntry(-32, -48, ra0, -40, (ra0 + 2) % 24, -20, (ra0 - 2) % 24, -60)


def _south_cap(ra0: float) -> AtlasEntry:
    return AtlasEntry(-59, -71, ra0, -65, (ra0 + 3) % 24, -45, (ra0 - 8) % 24, -60)


# Chart numbers follow the printed layout: north cap, northern band,
# equator, southern band, south cap, then the two pole-centred charts.
ATLAS_MAPS: dict[int, AtlasEntry] = {
    **{i + 1: _north_cap(ra0) for i, ra0 in enumerate((0, 8, 16))},
    **{i + 4: _north_mid(ra0) for i, ra0 in enumerate((2, 6, 10, 14, 18, 22))},
    **{i + 10: _equatorial(ra0) for i, ra0 in enumerate((2, 6, 10, 14, 18, 22))},
    **{i + 16: _south_mid(ra0) for i, ra0 in enumerate((2, 6, 10, 14, 18, 22))},
    **{i + 22: _south_cap(ra0) for i, ra0 in enumerate((0, 8, 16))},
    25: AtlasEntry(85, 75, 0, 90, 9, 60, 21, 60),
    26: AtlasEntry(-75, -85, 0, -90, 3, -60, 15, -60),
}


class MapSelectionError(ValueError):
    """Raised when the requested chart cannot be resolved."""


def select_atlas_map(index: int) -> MapSelection:
    """Resolve an atlas chart number (1-26) to a MapSelection."""
    entry = ATLAS_MAPS.get(index)
    if entry is None:
        raise MapSelectionError(
            f"Atlas map index must be between 1 and {len(ATLAS_MAPS)}, got {index}"
        )
    return MapSelection(
        phi1=float(degrees_to_radians(entry.phi1)),
        phi2=float(degrees_to_radians(entry.phi2)),
        ra0=float(hours_to_radians(entry.ra0)),
        dec0=float(degrees_to_radians(entry.dec0)),
        upper_left=CelestialCoordinate(
            ra=float(hours_to_radians(entry.ra1)),
            dec=float(degrees_to_radians(entry.dec1)),
        ),
        lower_right=CelestialCoordinate(
            ra=float(hours_to_radians(entry.ra2)),
            dec=float(degrees_to_radians(entry.dec2)),
        ),
        number=index,
    )


def select_corners(upper_left: str, lower_right: str) -> MapSelection:
    """Derive a MapSelection from two ``HHMM.M±DDMM`` corner strings.

    phi1 = dec2 + 0.7 (dec1 - dec2), phi2 = dec2 + 0.3 (dec1 - dec2),
    ra0 and dec0 are the corner midpoints.
    """
    ul = parse_corner(upper_left)
    lr = parse_corner(lower_right)

    ra1 = ul.ra
    if ra1 < lr.ra:
        # Upper-left is east of lower-right across 0h
        ra1 += float(hours_to_radians(24.0))
    span = ul.dec - lr.dec
    return MapSelection(
        phi1=lr.dec + 0.7 * span,
        phi2=lr.dec + 0.3 * span,
        ra0=(ra1 + lr.ra) / 2.0,
        dec0=(ul.dec + lr.dec) / 2.0,
        upper_left=ul,
        lower_right=lr,
    )


def select_map(
    index: int | None = None,
    upper_left: str | None = None,
    lower_right: str | None = None,
) -> MapSelection:
    """Pick the chart from an atlas index, or from both corners.

    Raises:
        MapSelectionError: if the index is out of range or neither an index
            nor both corners were supplied.
        CoordinateParseError: if a corner string is malformed.
    """
    if index is not None:
        return select_atlas_map(index)
    if upper_left and lower_right:
        return select_corners(upper_left, lower_right)
    raise MapSelectionError(
        "Supply either an atlas map index or both upper-left and lower-right corners"
    )


def build_frame(
    selection: MapSelection,
    width: float,
    resolution: float,
) -> tuple[MapFrame, Viewport]:
    """Compute the final-scale MapFrame and its Viewport.

    Args:
        selection: Chart region and projection parameters.
        width: Target physical chart width.
        resolution: Points per unit of physical length.
    """
    unit = MapFrame(
        phi1=selection.phi1,
        phi2=selection.phi2,
        ra0=selection.ra0,
        dec0=selection.dec0,
        scale=1.0,
    )
    x1, _ = project_coordinate(selection.upper_left, unit)
    x2, _ = project_coordinate(selection.lower_right, unit)
    unit_width = abs(x2 - x1)
    if unit_width == 0:
        raise MapSelectionError("Corners project to zero chart width")

    frame = replace(unit, scale=width * resolution / unit_width)
    x1, y1 = project_coordinate(selection.upper_left, frame)
    x2, y2 = project_coordinate(selection.lower_right, frame)
    viewport = Viewport(
        xmin=min(x1, x2),
        xmax=max(x1, x2),
        ymin=min(y1, y2),
        ymax=max(y1, y2),
    )
    logger.debug("frame %s viewport %s", frame, viewport)
    return frame, viewport
