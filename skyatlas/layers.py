"""Chart layers in paint order.

Each layer is a descriptor (name, clipped, enabled, draw); ``LAYERS`` is
iterated once and later layers paint over earlier ones, so the tuple order
is the chart's z-order.
"""
from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Callable, Iterator

import numpy as np

from skyatlas.catalog import DATA_DIR, DsoRecord, StarRecord, load_collection, parse_dsos, parse_stars
from skyatlas.constellations import (
    iter_border_lines,
    iter_line_segments,
    iter_milky_way_rings,
)
from skyatlas.coords import coordinate_from_degrees, degrees_to_radians, radians_to_degrees
from skyatlas.frame import build_frame
from skyatlas.interpolate import densify_horizontal, great_circle
from skyatlas.models import (
    ChartOptions,
    ConstellationBorder,
    ConstellationLine,
    DeepSky,
    GridLine,
    MapFrame,
    MapLabel,
    MapSelection,
    MilkyWayContour,
    Star,
    Viewport,
)
from skyatlas.primitives import Primitive, Rect, Style
from skyatlas.projection import (
    any_in_bounds,
    in_bounds_mask,
    project_points,
    project_polyline,
)
from skyatlas.rotation import rotate_ring
from skyatlas.symbols import to_primitive

logger = logging.getLogger(__name__)

Point = tuple[float, float]

# -- Grid Constants --
GRID_RA_STEP_H = 1
GRID_DEC_STEP_DEG = 10
GRID_SAMPLE_DEG = 2
GRID_DEC_LIMIT_DEG = 88  # Keeps the cylindrical branch away from tan(90)

# -- Frame Constants --
FRAME_STYLE = Style(stroke="#000000", stroke_width=1.0)
MAP_LABEL_INSET = (6.0, 18.0)

# Catalog file stems under the data directory
CATALOG_FILES = {
    "stars": "stars.6",
    "messier": "messier",
    "deep_sky": "dsos.bright",
    "herschel": "herschel",
    "lines": "constellations.lines",
    "borders": "constellations.borders",
    "milky_way": "mw",
}


@dataclass
class ChartData:
    """Catalog material for one chart, already materialised in memory."""

    stars: list[StarRecord] = field(default_factory=list)
    messier: list[DsoRecord] = field(default_factory=list)
    deep_sky: list[DsoRecord] = field(default_factory=list)
    herschel: list[DsoRecord] = field(default_factory=list)
    lines: dict = field(default_factory=dict)
    borders: dict = field(default_factory=dict)
    milky_way: dict = field(default_factory=dict)


@dataclass(frozen=True)
class ChartContext:
    frame: MapFrame
    viewport: Viewport
    selection: MapSelection
    options: ChartOptions
    data: ChartData


@dataclass(frozen=True)
class LayerSpec:
    name: str
    clipped: bool
    enabled: Callable[[ChartContext], bool]
    draw: Callable[[ChartContext], Iterator[Primitive]]


@dataclass(frozen=True)
class RenderedLayer:
    name: str
    clipped: bool
    primitives: tuple[Primitive, ...]


def load_chart_data(data_dir: Path = DATA_DIR) -> ChartData:
    """Load every catalog present in ``data_dir``; missing files leave that layer empty."""
    loaded: dict[str, dict] = {}
    for key, stem in CATALOG_FILES.items():
        try:
            loaded[key] = load_collection(stem, data_dir)
        except FileNotFoundError:
            logger.warning("catalog %s.json not found in %s; layer %s is empty", stem, data_dir, key)
            loaded[key] = {}
    return ChartData(
        stars=parse_stars(loaded["stars"]),
        messier=parse_dsos(loaded["messier"]),
        deep_sky=parse_dsos(loaded["deep_sky"]),
        herschel=parse_dsos(loaded["herschel"]),
        lines=loaded["lines"],
        borders=loaded["borders"],
        milky_way=loaded["milky_way"],
    )


def prepare_context(
    selection: MapSelection,
    options: ChartOptions,
    data: ChartData,
) -> ChartContext:
    frame, viewport = build_frame(selection, options.width, options.resolution)
    return ChartContext(frame, viewport, selection, options, data)


def _project_degrees(points: list[Point], frame: MapFrame) -> list[Point]:
    if not points:
        return []
    lons, lats = np.array(points, dtype=float).T
    x, y = project_points(degrees_to_radians(lons), degrees_to_radians(lats), frame)
    return list(zip(x.tolist(), y.tolist()))


def draw_milky_way(ctx: ChartContext) -> Iterator[Primitive]:
    ra0_deg = float(radians_to_degrees(ctx.frame.ra0))
    for level, ring in iter_milky_way_rings(ctx.data.milky_way):
        points = _project_degrees(rotate_ring(ring, ra0_deg), ctx.frame)
        if any_in_bounds(points, ctx.viewport):
            yield to_primitive(MilkyWayContour(level), points)


def _grid_lines(ra0_deg: float) -> Iterator[list[Point]]:
    decs = np.arange(-GRID_DEC_LIMIT_DEG, GRID_DEC_LIMIT_DEG + GRID_SAMPLE_DEG, GRID_SAMPLE_DEG)
    for hour in range(0, 24, GRID_RA_STEP_H):
        yield [(hour * 15.0, float(d)) for d in decs]

    ras = np.arange(ra0_deg - 180.0, ra0_deg + 180.0 + GRID_SAMPLE_DEG, GRID_SAMPLE_DEG)
    ras = np.clip(ras, ra0_deg - 180.0, ra0_deg + 180.0)
    for dec in range(-90 + GRID_DEC_STEP_DEG, 90, GRID_DEC_STEP_DEG):
        yield [(float(r), float(dec)) for r in ras]


def draw_grid(ctx: ChartContext) -> Iterator[Primitive]:
    ra0_deg = float(radians_to_degrees(ctx.frame.ra0))
    for line in _grid_lines(ra0_deg):
        points = _project_degrees(line, ctx.frame)
        if any_in_bounds(points, ctx.viewport):
            yield to_primitive(GridLine(), points)


def draw_stars(ctx: ChartContext) -> Iterator[Primitive]:
    stars = [s for s in ctx.data.stars if s["mag"] <= ctx.options.star_mag_limit]
    if not stars:
        return
    # Faint first so bright discs paint on top
    stars.sort(key=lambda s: s["mag"], reverse=True)
    ra = degrees_to_radians(np.array([s["ra"] for s in stars]))
    dec = degrees_to_radians(np.array([s["dec"] for s in stars]))
    x, y = project_points(ra, dec, ctx.frame)
    mask = in_bounds_mask(x, y, ctx.viewport)
    for i in np.flatnonzero(mask):
        yield to_primitive(Star(stars[i]["mag"]), [(float(x[i]), float(y[i]))])


def draw_constellation_lines(ctx: ChartContext) -> Iterator[Primitive]:
    for a, b in iter_line_segments(ctx.data.lines):
        arc = great_circle(coordinate_from_degrees(*a), coordinate_from_degrees(*b))
        points = project_polyline(arc, ctx.frame)
        if any_in_bounds(points, ctx.viewport):
            yield to_primitive(ConstellationLine(), points)


def draw_constellation_borders(ctx: ChartContext) -> Iterator[Primitive]:
    for line in iter_border_lines(ctx.data.borders):
        points = _project_degrees(densify_horizontal(line), ctx.frame)
        if any_in_bounds(points, ctx.viewport):
            yield to_primitive(ConstellationBorder(), points)


def _draw_dsos(records: list[DsoRecord], ctx: ChartContext) -> Iterator[Primitive]:
    records = [r for r in records if r["mag"] <= ctx.options.dso_mag_limit]
    if not records:
        return
    ra = degrees_to_radians(np.array([r["ra"] for r in records]))
    dec = degrees_to_radians(np.array([r["dec"] for r in records]))
    x, y = project_points(ra, dec, ctx.frame)
    mask = in_bounds_mask(x, y, ctx.viewport)
    for i in np.flatnonzero(mask):
        drawable = DeepSky(records[i]["type"], records[i]["name"], ctx.options.marker_mode)
        yield to_primitive(drawable, [(float(x[i]), float(y[i]))])


def draw_map_label(ctx: ChartContext) -> Iterator[Primitive]:
    dx, dy = MAP_LABEL_INSET
    position = (ctx.viewport.xmin + dx, ctx.viewport.ymin + dy)
    yield to_primitive(MapLabel(f"Map {ctx.selection.number}"), [position])


def draw_frame(ctx: ChartContext) -> Iterator[Primitive]:
    vp = ctx.viewport
    yield Rect(vp.xmin, vp.ymin, vp.width, vp.height, FRAME_STYLE)


LAYERS: tuple[LayerSpec, ...] = (
    LayerSpec("milky_way", True, lambda c: c.options.milky_way, draw_milky_way),
    LayerSpec("grid", True, lambda c: c.options.grid, draw_grid),
    LayerSpec("stars", True, lambda c: c.options.stars, draw_stars),
    LayerSpec(
        "constellation_lines", True,
        lambda c: c.options.constellation_lines, draw_constellation_lines,
    ),
    LayerSpec(
        "constellation_borders", True,
        lambda c: c.options.constellation_borders, draw_constellation_borders,
    ),
    LayerSpec("messier", True, lambda c: c.options.messier,
              lambda c: _draw_dsos(c.data.messier, c)),
    LayerSpec("deep_sky", True, lambda c: c.options.deep_sky,
              lambda c: _draw_dsos(c.data.deep_sky, c)),
    LayerSpec("herschel", True, lambda c: c.options.herschel,
              lambda c: _draw_dsos(c.data.herschel, c)),
    LayerSpec("map_label", False, lambda c: c.selection.number is not None, draw_map_label),
    LayerSpec("frame", False, lambda c: True, draw_frame),
)


def build_chart(ctx: ChartContext) -> list[RenderedLayer]:
    """Run every enabled layer once, in paint order."""
    rendered: list[RenderedLayer] = []
    for layer in LAYERS:
        if not layer.enabled(ctx):
            continue
        primitives = tuple(layer.draw(ctx))
        logger.debug("layer %s: %d primitives", layer.name, len(primitives))
        rendered.append(RenderedLayer(layer.name, layer.clipped, primitives))
    return rendered
