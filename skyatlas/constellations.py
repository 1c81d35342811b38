"""Parse constellation lines, borders and Milky Way contours from GeoJSON."""
import re
from typing import Iterator

Point = tuple[float, float]

_LEVEL_RE = re.compile(r"(\d+)$")


def iter_polylines(geometry: dict) -> Iterator[list[Point]]:
    """Yield every vertex list in a (Multi)LineString or (Multi)Polygon.

    Coordinates are degrees. RA may be negative (-180 to +180).
    """
    kind = geometry.get("type")
    coords = geometry.get("coordinates") or []
    if kind == "LineString":
        parts = [coords]
    elif kind in ("MultiLineString", "Polygon"):
        parts = coords
    elif kind == "MultiPolygon":
        parts = [ring for polygon in coords for ring in polygon]
    else:
        return
    for part in parts:
        if len(part) >= 2:
            yield [(float(p[0]), float(p[1])) for p in part]


def iter_line_segments(collection: dict) -> Iterator[tuple[Point, Point]]:
    """Yield all constellation line segments as ((ra1, dec1), (ra2, dec2)).

    Each segment is a pair of consecutive points within a polyline.
    A constellation's MultiLineString contains multiple polylines,
    each with N points producing N-1 segments.
    """
    for feature in collection.get("features", []):
        for polyline in iter_polylines(feature.get("geometry") or {}):
            for i in range(len(polyline) - 1):
                yield polyline[i], polyline[i + 1]


def iter_border_lines(collection: dict) -> Iterator[list[Point]]:
    """Yield constellation boundary polylines."""
    for feature in collection.get("features", []):
        yield from iter_polylines(feature.get("geometry") or {})


def _feature_level(feature: dict) -> int | None:
    level = (feature.get("properties") or {}).get("level")
    if level is not None:
        return int(level)
    match = _LEVEL_RE.search(str(feature.get("id") or ""))
    return int(match.group(1)) if match else None


def iter_milky_way_rings(collection: dict) -> Iterator[tuple[int, list[Point]]]:
    """Yield (brightness level, ring) for every Milky Way contour ring.

    Features carry their level either as ``properties.level`` or as the
    trailing digits of the id ("ol3" -> 3). Within a feature the first patch
    is drawn at the feature level and every later patch one level lighter.
    """
    for feature in collection.get("features", []):
        level = _feature_level(feature)
        if level is None:
            continue
        for i, ring in enumerate(iter_polylines(feature.get("geometry") or {})):
            yield (level if i == 0 else level - 1), ring
