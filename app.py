"""Flask web application for atlas chart generation.

Routes:
    GET  /              -- Form page
    POST /generate      -- Generate chart, return page with inline SVG preview
    POST /download/svg  -- SVG file download
"""
import logging

from flask import Flask, Response, render_template, request

from skyatlas.coords import CoordinateParseError
from skyatlas.frame import ATLAS_MAPS, MapSelectionError, select_map
from skyatlas.models import ChartOptions, MapSelection
from skyatlas.renderer import render_atlas_chart

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = Flask(__name__)

LAYER_FIELDS = (
    "milky_way", "grid", "stars", "constellation_lines",
    "constellation_borders", "messier", "deep_sky", "herschel",
)


def _parse_form() -> tuple[MapSelection, ChartOptions] | str:
    """Parse and validate form data. Returns tuple on success, error string on failure.

    Validates:
        - map: integer atlas index, or blank when corners are given
        - upper_left / lower_right: HHMM.M±DDMM corner strings
        - width: positive float
        - layer checkboxes and marker mode: booleans
    """
    index_str = request.form.get("map", "").strip()
    index = None
    if index_str:
        try:
            index = int(index_str)
        except ValueError:
            return "Invalid map number. Enter a number like 10."

    try:
        selection = select_map(
            index=index,
            upper_left=request.form.get("upper_left", "").strip() or None,
            lower_right=request.form.get("lower_right", "").strip() or None,
        )
    except (MapSelectionError, CoordinateParseError) as exc:
        return str(exc)

    try:
        width = float(request.form.get("width", "") or ChartOptions.width)
        if width <= 0:
            return "Width must be positive."
    except ValueError:
        return "Invalid width. Enter a number like 8."

    layers = {name: request.form.get(name) == "on" for name in LAYER_FIELDS}
    options = ChartOptions(
        width=width,
        marker_mode=request.form.get("marker_mode") == "on",
        **layers,
    )
    return selection, options


def _page(svg: str | None, error: str | None) -> str:
    return render_template(
        "index.html",
        maps=sorted(ATLAS_MAPS),
        layers=LAYER_FIELDS,
        svg=svg,
        error=error,
        form_data=request.form.to_dict(),
    )


@app.route("/")
def index() -> str:
    """Render the form page with no chart."""
    return _page(svg=None, error=None)


@app.route("/generate", methods=["POST"])
def generate() -> str:
    """Generate chart from form data, return page with inline SVG preview."""
    result = _parse_form()
    if isinstance(result, str):
        return _page(svg=None, error=result)
    selection, options = result
    return _page(svg=render_atlas_chart(selection, options), error=None)


@app.route("/download/svg", methods=["POST"])
def download_svg() -> Response:
    """Generate and download chart as SVG file."""
    result = _parse_form()
    if isinstance(result, str):
        return Response(result, status=400, mimetype="text/plain")
    selection, options = result
    svg = render_atlas_chart(selection, options)
    name = f"map{selection.number:02d}" if selection.number is not None else "chart"
    return Response(svg, mimetype="image/svg+xml",
                    headers={"Content-Disposition": f"attachment; filename={name}.svg"})


if __name__ == "__main__":
    app.run(debug=True, port=5000)
