"""Drawable -> primitive mapping: DSO symbols, star sizes, line styles.

Deep-sky type codes are folded into a closed set of kinds; each kind has
one geometry and one style used for every catalog (Messier, NGC/IC,
Herschel). Unrecognised codes fall back to a small filled square.
"""
import math
from dataclasses import replace
from enum import Enum

from skyatlas.models import (
    ConstellationBorder,
    ConstellationLine,
    DeepSky,
    Drawable,
    GridLine,
    MapLabel,
    MilkyWayContour,
    Star,
)
from skyatlas.primitives import (
    Circle,
    Ellipse,
    Group,
    Line,
    Polyline,
    Primitive,
    Rect,
    Style,
    Text,
)

# -- Symbol geometry (points) --
SYMBOL_SIZE = 4.0
GALAXY_RX = 5.0
GALAXY_RY = 2.5
PN_CROSS_FACTOR = 1.75   # Planetary-nebula cross arms reach past the circle
LABEL_OFFSET = 6.0
LABEL_SIZE = 6.0
MAP_LABEL_SIZE = 14.0

# -- Star sizes: radius = 10 * 0.70^n, brightest first --
STAR_RADII: tuple[float, ...] = tuple(10.0 * 0.70**n for n in range(12))


class DsoKind(Enum):
    GALAXY = "galaxy"
    GLOBULAR_CLUSTER = "globular_cluster"
    PLANETARY_NEBULA = "planetary_nebula"
    OPEN_CLUSTER = "open_cluster"
    DIFFUSE_NEBULA = "diffuse_nebula"
    UNKNOWN = "unknown"


DSO_CODES: dict[str, DsoKind] = {
    **dict.fromkeys(("G", "GG", "GX", "S", "S0", "SD", "SB", "I", "E"), DsoKind.GALAXY),
    **dict.fromkeys(("GC", "GB"), DsoKind.GLOBULAR_CLUSTER),
    **dict.fromkeys(("PN", "PL"), DsoKind.PLANETARY_NEBULA),
    **dict.fromkeys(("OC", "CL", "AS"), DsoKind.OPEN_CLUSTER),
    **dict.fromkeys(
        ("EN", "RN", "BN", "DN", "SNR", "SFR", "NB", "EN+OC"), DsoKind.DIFFUSE_NEBULA
    ),
}

DSO_STYLES: dict[DsoKind, Style] = {
    DsoKind.GALAXY: Style(fill="#f4c7c3", stroke="#c62828", stroke_width=0.6),
    DsoKind.GLOBULAR_CLUSTER: Style(fill="#fff59d", stroke="#5d4037", stroke_width=0.6),
    DsoKind.PLANETARY_NEBULA: Style(fill="#c8e6c9", stroke="#2e7d32", stroke_width=0.6),
    DsoKind.OPEN_CLUSTER: Style(
        fill="#fff59d", stroke="#5d4037", stroke_width=0.6, dash=(1.5, 1.0)
    ),
    DsoKind.DIFFUSE_NEBULA: Style(fill="#c8e6c9", stroke="#2e7d32", stroke_width=0.6),
    DsoKind.UNKNOWN: Style(fill="#424242", stroke="#424242", stroke_width=0.4),
}

MARKER_STYLE = Style(stroke="#b71c1c", stroke_width=0.8)
STAR_STYLE = Style(fill="#000000", stroke="#ffffff", stroke_width=0.5)
LABEL_STYLE = Style(fill="#37474f")

LAYER_STYLES: dict[type, Style] = {
    ConstellationLine: Style(stroke="#546e7a", stroke_width=0.5),
    ConstellationBorder: Style(stroke="#8d6e63", stroke_width=0.5, dash=(4.0, 2.0)),
    GridLine: Style(stroke="#90caf9", stroke_width=0.3),
    MapLabel: Style(fill="#000000"),
}

# Brightness level -> fill; level 0 is the chart background
MILKY_WAY_FILLS: dict[int, str] = {
    0: "#ffffff",
    1: "#eef3fa",
    2: "#dde7f4",
    3: "#cbdaee",
    4: "#b9cde8",
    5: "#a7c0e2",
}


def classify(type_code: str) -> DsoKind:
    """Fold a catalog type code (any case) into a DsoKind."""
    return DSO_CODES.get(type_code.strip().upper(), DsoKind.UNKNOWN)


def _cross(x: float, y: float, half: float, style: Style) -> tuple[Line, Line]:
    return (
        Line(x - half, y, x + half, y, style),
        Line(x, y - half, x, y + half, style),
    )


def select_symbol(
    type_code: str,
    marker_override: bool = False,
    x: float = 0.0,
    y: float = 0.0,
) -> Primitive:
    """Return the symbol for a deep-sky object centred at (x, y).

    With ``marker_override`` every object is a plain plus-sign cross.
    """
    if marker_override:
        return Group(_cross(x, y, SYMBOL_SIZE, MARKER_STYLE))

    kind = classify(type_code)
    style = DSO_STYLES[kind]
    r = SYMBOL_SIZE
    if kind is DsoKind.GALAXY:
        return Ellipse(x, y, GALAXY_RX, GALAXY_RY, style)
    if kind is DsoKind.GLOBULAR_CLUSTER:
        return Group((Circle(x, y, r, style), *_cross(x, y, r, style)))
    if kind is DsoKind.PLANETARY_NEBULA:
        return Group(
            (Circle(x, y, r * 0.6, style), *_cross(x, y, r * PN_CROSS_FACTOR * 0.6, style))
        )
    if kind is DsoKind.OPEN_CLUSTER:
        return Circle(x, y, r, style)
    if kind is DsoKind.DIFFUSE_NEBULA:
        return Rect(x - r, y - r, 2 * r, 2 * r, style)
    half = r / 2
    return Rect(x - half, y - half, 2 * half, 2 * half, style)


def star_radius(mag: float) -> float:
    """Symbol radius for a star; brighter stars get larger radii.

    Magnitudes fall into unit buckets n = floor(mag - 0.5), clamped to the
    sequence. Stars of magnitude 1.0 and brighter all land in bucket 0, the
    head of 10 * 0.7^n, so first-magnitude stars draw the largest disc.
    """
    n = min(max(math.floor(mag - 0.5), 0), len(STAR_RADII) - 1)
    return STAR_RADII[n]


def mag_to_opacity(mag: float) -> float:
    """Star magnitude -> opacity. Brighter = more opaque.

    Range: 0.5 (mag 7 and fainter) to 1.0 (mag <= 2).
    """
    return max(0.5, min(1.0, 1.0 - (mag - 2.0) * 0.1))


def milky_way_fill(level: int) -> str:
    return MILKY_WAY_FILLS[min(max(level, 0), max(MILKY_WAY_FILLS))]


def to_primitive(drawable: Drawable, points: list[tuple[float, float]]) -> Primitive:
    """Map a drawable and its projected point(s) to a styled primitive."""
    if isinstance(drawable, Star):
        x, y = points[0]
        style = replace(STAR_STYLE, opacity=mag_to_opacity(drawable.mag))
        return Circle(x, y, star_radius(drawable.mag), style)
    if isinstance(drawable, DeepSky):
        x, y = points[0]
        symbol = select_symbol(drawable.type_code, drawable.marker_override, x, y)
        if not drawable.label:
            return symbol
        label = Text(x + LABEL_OFFSET, y + LABEL_SIZE / 3, drawable.label, LABEL_STYLE, LABEL_SIZE)
        return Group((symbol, label))
    if isinstance(drawable, MilkyWayContour):
        style = Style(fill=milky_way_fill(drawable.level))
        return Polyline(tuple(points), style, closed=True)
    if isinstance(drawable, MapLabel):
        x, y = points[0]
        return Text(x, y, drawable.text, LAYER_STYLES[MapLabel], MAP_LABEL_SIZE)
    return Polyline(tuple(points), LAYER_STYLES[type(drawable)])
