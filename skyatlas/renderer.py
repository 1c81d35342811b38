"""SVG atlas chart renderer.

Serialises the ordered layer stream to an SVG string. The canvas is the
viewport plus a margin; clipped layers share a clip path equal to the
viewport so lines that pass the any-point test are trimmed at the frame.
"""
import logging
from xml.sax.saxutils import escape

from skyatlas.layers import ChartData, RenderedLayer, build_chart, load_chart_data, prepare_context
from skyatlas.models import ChartOptions, MapSelection, Viewport
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

logger = logging.getLogger(__name__)

# -- Canvas Constants --
BACKGROUND = "#ffffff"
CLIP_ID = "chart-clip"
TEXT_FONT = "'Helvetica', 'Arial', sans-serif"


def _style_attrs(style: Style) -> str:
    attrs = [f'fill="{style.fill}"', f'stroke="{style.stroke}"']
    if style.stroke_width:
        attrs.append(f'stroke-width="{style.stroke_width:g}"')
    if style.dash:
        attrs.append(f'stroke-dasharray="{",".join(f"{d:g}" for d in style.dash)}"')
    if style.opacity != 1.0:
        attrs.append(f'opacity="{style.opacity:g}"')
    return " ".join(attrs)


def _points_attr(points: tuple[tuple[float, float], ...]) -> str:
    return " ".join(f"{x:.2f},{y:.2f}" for x, y in points)


def primitive_to_svg(primitive: Primitive) -> str:
    """Serialise one primitive (recursively for groups) to SVG markup."""
    if isinstance(primitive, Group):
        inner = "".join(primitive_to_svg(child) for child in primitive.children)
        return f"<g>{inner}</g>"
    if isinstance(primitive, Circle):
        return (
            f'<circle cx="{primitive.cx:.2f}" cy="{primitive.cy:.2f}" '
            f'r="{primitive.r:.2f}" {_style_attrs(primitive.style)}/>'
        )
    if isinstance(primitive, Ellipse):
        return (
            f'<ellipse cx="{primitive.cx:.2f}" cy="{primitive.cy:.2f}" '
            f'rx="{primitive.rx:.2f}" ry="{primitive.ry:.2f}" {_style_attrs(primitive.style)}/>'
        )
    if isinstance(primitive, Line):
        return (
            f'<line x1="{primitive.x1:.2f}" y1="{primitive.y1:.2f}" '
            f'x2="{primitive.x2:.2f}" y2="{primitive.y2:.2f}" {_style_attrs(primitive.style)}/>'
        )
    if isinstance(primitive, Polyline):
        tag = "polygon" if primitive.closed else "polyline"
        return (
            f'<{tag} points="{_points_attr(primitive.points)}" '
            f'{_style_attrs(primitive.style)}/>'
        )
    if isinstance(primitive, Rect):
        return (
            f'<rect x="{primitive.x:.2f}" y="{primitive.y:.2f}" '
            f'width="{primitive.width:.2f}" height="{primitive.height:.2f}" '
            f'{_style_attrs(primitive.style)}/>'
        )
    if isinstance(primitive, Text):
        return (
            f'<text x="{primitive.x:.2f}" y="{primitive.y:.2f}" '
            f'text-anchor="{primitive.anchor}" font-family="{TEXT_FONT}" '
            f'font-size="{primitive.size:g}" fill="{primitive.style.fill}">'
            f"{escape(primitive.content)}</text>"
        )
    raise TypeError(f"Unsupported primitive: {type(primitive).__name__}")


def render_svg(layers: list[RenderedLayer], viewport: Viewport, margin: float = 18.0) -> str:
    """Assemble the complete SVG document for a chart.

    Layers are written in the order given; each becomes one ``<g>``.
    """
    x0 = viewport.xmin - margin
    y0 = viewport.ymin - margin
    width = viewport.width + 2 * margin
    height = viewport.height + 2 * margin

    parts: list[str] = []
    parts.append(
        f'<svg xmlns="http://www.w3.org/2000/svg" '
        f'viewBox="{x0:.2f} {y0:.2f} {width:.2f} {height:.2f}" '
        f'width="{width:.0f}" height="{height:.0f}">'
    )
    parts.append(
        f'<rect x="{x0:.2f}" y="{y0:.2f}" width="{width:.2f}" height="{height:.2f}" '
        f'fill="{BACKGROUND}"/>'
    )

    parts.append("<defs>")
    parts.append(f'<clipPath id="{CLIP_ID}">')
    parts.append(
        f'<rect x="{viewport.xmin:.2f}" y="{viewport.ymin:.2f}" '
        f'width="{viewport.width:.2f}" height="{viewport.height:.2f}"/>'
    )
    parts.append("</clipPath>")
    parts.append("</defs>")

    for layer in layers:
        clip = f' clip-path="url(#{CLIP_ID})"' if layer.clipped else ""
        parts.append(f'<g id="{layer.name}"{clip}>')
        parts.extend(primitive_to_svg(p) for p in layer.primitives)
        parts.append("</g>")

    parts.append("</svg>")
    return "\n".join(parts)


def render_atlas_chart(
    selection: MapSelection,
    options: ChartOptions | None = None,
    data: ChartData | None = None,
) -> str:
    """Generate a complete atlas chart as an SVG XML string.

    Full pipeline:
        1. Derive frame and viewport from the selection
        2. Run every enabled layer in paint order
        3. Serialise to SVG

    Args:
        selection: Chart region (atlas index or corners).
        options: Sizing and layer switches; defaults to ChartOptions().
        data: Catalog material; loaded from the data directory if None.

    Returns:
        Complete SVG XML string.
    """
    options = options or ChartOptions()
    if data is None:
        data = load_chart_data()
    ctx = prepare_context(selection, options, data)
    layers = build_chart(ctx)
    logger.info(
        "rendered map %s: %d primitives",
        selection.number if selection.number is not None else "custom",
        sum(len(layer.primitives) for layer in layers),
    )
    return render_svg(layers, ctx.viewport, options.margin)
