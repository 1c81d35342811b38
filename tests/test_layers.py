import pytest

from skyatlas.frame import select_atlas_map, select_map
from skyatlas.layers import (
    LAYERS,
    ChartData,
    build_chart,
    load_chart_data,
    prepare_context,
)
from skyatlas.models import ChartOptions
from skyatlas.primitives import Circle, Ellipse, Group, Polyline, Rect, Text
from skyatlas.symbols import STAR_RADII

PAINT_ORDER = [
    "milky_way", "grid", "stars", "constellation_lines", "constellation_borders",
    "messier", "deep_sky", "herschel", "map_label", "frame",
]

ONLY_FRAME = ChartOptions(
    milky_way=False, grid=False, stars=False, constellation_lines=False,
    constellation_borders=False, messier=False, deep_sky=False, herschel=False,
)


def dso(ra, dec, type_code, name, mag=5.0):
    return {"ra": ra, "dec": dec, "mag": mag, "type": type_code, "name": name}


def sample_data() -> ChartData:
    """Catalog material centred on atlas map 10 (RA 0h-4h, Dec -20..+20)."""
    return ChartData(
        stars=[
            {"ra": 30.0, "dec": 0.0, "mag": 1.0, "id": 1},
            {"ra": 40.0, "dec": 10.0, "mag": 5.2, "id": 2},
            {"ra": 150.0, "dec": 10.0, "mag": 0.1, "id": 3},  # outside map 10
            {"ra": 35.0, "dec": 5.0, "mag": 11.0, "id": 4},   # too faint
        ],
        messier=[dso(40.7, -0.01, "gg", "M77")],
        deep_sky=[dso(20.0, 5.0, "oc", "NGC 1"), dso(25.0, 5.0, "pn", "NGC 2", mag=14.0)],
        herschel=[dso(45.0, -5.0, "gc", "H 1")],
        lines={"type": "FeatureCollection", "features": [{
            "type": "Feature", "id": "Cet", "properties": {},
            "geometry": {"type": "MultiLineString", "coordinates": [[[20, 5], [40, -10]]]},
        }]},
        borders={"type": "FeatureCollection", "features": [{
            "type": "Feature", "id": "Cet:Psc", "properties": {},
            "geometry": {"type": "LineString", "coordinates": [[10, 0], [30, 0], [30, 10]]},
        }]},
        milky_way={"type": "FeatureCollection", "features": [{
            "type": "Feature", "id": "ol1", "properties": {},
            "geometry": {"type": "Polygon", "coordinates": [
                [[20, -5], [40, -5], [40, 5], [20, 5], [20, -5]],
            ]},
        }]},
    )


def test_layer_order_is_paint_order():
    assert [layer.name for layer in LAYERS] == PAINT_ORDER


def test_full_chart_emits_layers_in_order():
    ctx = prepare_context(select_atlas_map(10), ChartOptions(), sample_data())
    layers = build_chart(ctx)
    assert [layer.name for layer in layers] == PAINT_ORDER
    for layer in layers:
        assert layer.primitives, f"layer {layer.name} is empty"
    assert [layer.name for layer in layers if not layer.clipped] == ["map_label", "frame"]


def test_map_10_star_at_origin_with_largest_symbol():
    ctx = prepare_context(select_atlas_map(10), ChartOptions(), sample_data())
    stars = next(layer for layer in build_chart(ctx) if layer.name == "stars")
    assert len(stars.primitives) == 2, "out-of-frame and too-faint stars are dropped"
    brightest = stars.primitives[-1]
    assert isinstance(brightest, Circle)
    assert brightest.cx == pytest.approx(0.0, abs=1e-9)
    assert brightest.cy == pytest.approx(0.0, abs=1e-9)
    assert brightest.r == max(STAR_RADII)


def test_dso_layers_use_symbols_and_labels():
    ctx = prepare_context(select_atlas_map(10), ChartOptions(), sample_data())
    by_name = {layer.name: layer for layer in build_chart(ctx)}
    messier = by_name["messier"].primitives
    assert len(messier) == 1
    symbol, label = messier[0].children
    assert isinstance(symbol, Ellipse)
    assert label.content == "M77"
    assert len(by_name["deep_sky"].primitives) == 1, "DSO fainter than the limit is skipped"


def test_marker_mode_draws_crosses():
    options = ChartOptions(marker_mode=True)
    ctx = prepare_context(select_atlas_map(10), options, sample_data())
    herschel = next(layer for layer in build_chart(ctx) if layer.name == "herschel")
    symbol = herschel.primitives[0].children[0]
    assert isinstance(symbol, Group) and len(symbol.children) == 2


def test_constellation_line_is_great_circle_polyline():
    ctx = prepare_context(select_atlas_map(10), ChartOptions(), sample_data())
    lines = next(layer for layer in build_chart(ctx) if layer.name == "constellation_lines")
    assert isinstance(lines.primitives[0], Polyline)
    assert len(lines.primitives[0].points) == 11


def test_border_is_densified():
    ctx = prepare_context(select_atlas_map(10), ChartOptions(), sample_data())
    borders = next(layer for layer in build_chart(ctx) if layer.name == "constellation_borders")
    assert len(borders.primitives[0].points) == 3 + 5


def test_disabled_layers_are_skipped():
    ctx = prepare_context(select_atlas_map(10), ONLY_FRAME, sample_data())
    layers = build_chart(ctx)
    assert [layer.name for layer in layers] == ["map_label", "frame"]
    label, = layers[0].primitives
    assert isinstance(label, Text) and label.content == "Map 10"
    frame, = layers[1].primitives
    assert isinstance(frame, Rect)
    assert frame.width == pytest.approx(ctx.viewport.width)


def test_corner_chart_has_no_map_label():
    selection = select_map(upper_left="0200.0+2000", lower_right="0000.0-2000")
    ctx = prepare_context(selection, ONLY_FRAME, ChartData())
    assert [layer.name for layer in build_chart(ctx)] == ["frame"]


def test_grid_lines_pass_any_point_rule():
    options = ChartOptions(
        milky_way=False, stars=False, constellation_lines=False,
        constellation_borders=False, messier=False, deep_sky=False, herschel=False,
    )
    ctx = prepare_context(select_atlas_map(10), options, ChartData())
    grid = next(layer for layer in build_chart(ctx) if layer.name == "grid")
    # Map 10 spans 0h-4h and Dec -20..+20: interior meridians 1h-3h always,
    # 0h and 4h lie on the frame edge; parallels -20..+20 touch or cross it
    assert 3 + 5 <= len(grid.primitives) <= 5 + 5


def test_load_chart_data_tolerates_missing_files(tmp_path):
    data = load_chart_data(tmp_path)
    assert data.stars == [] and data.lines == {}
