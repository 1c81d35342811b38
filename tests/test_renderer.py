import pytest

from skyatlas.frame import select_atlas_map
from skyatlas.layers import ChartData, RenderedLayer
from skyatlas.models import ChartOptions, Viewport
from skyatlas.primitives import (
    Circle,
    Ellipse,
    Group,
    Line,
    Polyline,
    Rect,
    Style,
    Text,
)
from skyatlas.renderer import primitive_to_svg, render_atlas_chart, render_svg

VIEWPORT = Viewport(xmin=-100.0, xmax=100.0, ymin=-50.0, ymax=50.0)


def test_circle_and_style_attributes():
    svg = primitive_to_svg(Circle(1.0, 2.0, 3.0, Style(fill="#000", stroke="#fff", stroke_width=0.5)))
    assert svg == '<circle cx="1.00" cy="2.00" r="3.00" fill="#000" stroke="#fff" stroke-width="0.5"/>'


def test_dash_pattern():
    svg = primitive_to_svg(Line(0, 0, 1, 1, Style(stroke="#000", stroke_width=1, dash=(4.0, 2.0))))
    assert 'stroke-dasharray="4,2"' in svg


def test_polyline_open_and_closed():
    points = ((0.0, 0.0), (1.5, 2.25))
    assert primitive_to_svg(Polyline(points)).startswith('<polyline points="0.00,0.00 1.50,2.25"')
    assert primitive_to_svg(Polyline(points, closed=True)).startswith("<polygon ")


def test_group_and_shapes():
    svg = primitive_to_svg(Group((Ellipse(0, 0, 5, 2), Rect(0, 0, 4, 4))))
    assert svg.startswith("<g><ellipse ") and "<rect " in svg and svg.endswith("</g>")


def test_text_is_escaped():
    svg = primitive_to_svg(Text(0, 0, "M<31> & co", Style(fill="#000")))
    assert "M&lt;31&gt; &amp; co" in svg


def test_unknown_primitive_rejected():
    with pytest.raises(TypeError):
        primitive_to_svg("not a primitive")


def test_render_svg_structure_and_order():
    layers = [
        RenderedLayer("stars", True, (Circle(0, 0, 1),)),
        RenderedLayer("frame", False, (Rect(-100, -50, 200, 100),)),
    ]
    svg = render_svg(layers, VIEWPORT, margin=10.0)
    assert svg.startswith("<svg") and svg.endswith("</svg>")
    assert 'viewBox="-110.00 -60.00 220.00 120.00"' in svg
    assert '<clipPath id="chart-clip">' in svg
    assert '<g id="stars" clip-path="url(#chart-clip)">' in svg
    assert '<g id="frame">' in svg
    assert svg.index('id="stars"') < svg.index('id="frame"')


def test_render_atlas_chart_with_empty_catalogs():
    options = ChartOptions(width=5.0, resolution=100.0)
    svg = render_atlas_chart(select_atlas_map(10), options, ChartData())
    assert 'width="536"' in svg  # 500 plus two 18-point margins
    assert "Map 10" in svg
    for name in ("milky_way", "grid", "stars", "messier", "frame"):
        assert f'id="{name}"' in svg


def test_opacity_written_only_when_faded():
    assert "opacity" not in primitive_to_svg(Circle(0, 0, 1, Style(fill="#000")))
    svg = primitive_to_svg(Circle(0, 0, 1, Style(fill="#000", opacity=0.6)))
    assert 'opacity="0.6"' in svg
