import math

import numpy as np
import pytest

from skyatlas.frame import build_frame, select_atlas_map
from skyatlas.models import MapFrame, Viewport
from skyatlas.projection import (
    any_in_bounds,
    in_bounds,
    in_bounds_mask,
    is_cylindrical,
    normalize_ra,
    project,
    project_points,
)

CONIC = MapFrame(phi1=math.radians(48), phi2=math.radians(32),
                 ra0=math.radians(90), dec0=math.radians(40), scale=100.0)
CYLINDRICAL = MapFrame(phi1=math.radians(14), phi2=math.radians(-14),
                       ra0=math.radians(30), dec0=0.0, scale=100.0)


@pytest.mark.parametrize("frame", [CONIC, CYLINDRICAL])
def test_centre_maps_to_origin(frame):
    x, y = project(frame.ra0, frame.dec0, frame)
    assert x == pytest.approx(0.0, abs=1e-9)
    assert y == pytest.approx(0.0, abs=1e-9)


@pytest.mark.parametrize("index", range(1, 27))
def test_atlas_centres_map_to_origin(index):
    selection = select_atlas_map(index)
    frame, _ = build_frame(selection, 8.0, 72.0)
    x, y = project(frame.ra0, frame.dec0, frame)
    assert x == pytest.approx(0.0, abs=1e-6)
    assert y == pytest.approx(0.0, abs=1e-6)


def test_branch_selection():
    assert is_cylindrical(CYLINDRICAL)
    assert not is_cylindrical(CONIC)
    assert is_cylindrical(MapFrame(0.0005, 0.0, 0.0, 0.0))


def test_cylindrical_formula():
    ra, dec = math.radians(10), math.radians(25)
    x, y = project(ra, dec, CYLINDRICAL)
    assert x == pytest.approx(100.0 * (CYLINDRICAL.ra0 - ra))
    assert y == pytest.approx(-100.0 * math.tan(dec) * math.cos(CYLINDRICAL.phi1))


def test_cylindrical_y_monotonic_in_dec():
    decs = np.linspace(-1.5, 1.5, 61)
    _, y = project_points(np.full_like(decs, 0.3), decs, CYLINDRICAL)
    assert np.all(np.diff(y) < 0), "plane y must fall as declination rises"


def test_north_is_up_and_east_is_left_on_conic():
    _, y_north = project(CONIC.ra0, CONIC.dec0 + 0.1, CONIC)
    x_east, _ = project(CONIC.ra0 + 0.1, CONIC.dec0, CONIC)
    assert y_north < 0
    assert x_east < 0


def test_normalize_ra_keeps_points_near_centre():
    ra0 = math.radians(10)
    for ra in (math.radians(350), math.radians(350) + 4 * math.pi, math.radians(-330)):
        assert abs(ra0 - float(normalize_ra(ra, ra0))) <= math.pi + 1e-12


def test_opposite_meridian_wraps_to_same_side():
    a = project(math.radians(280), 0.0, CYLINDRICAL)
    b = project(math.radians(280 - 360), 0.0, CYLINDRICAL)
    assert a == pytest.approx(b)


def test_project_points_matches_scalar():
    ra = np.radians([80.0, 95.0, 120.0])
    dec = np.radians([30.0, 45.0, 50.0])
    xs, ys = project_points(ra, dec, CONIC)
    for i in range(3):
        assert (xs[i], ys[i]) == pytest.approx(project(ra[i], dec[i], CONIC))


VIEWPORT = Viewport(xmin=-10.0, xmax=10.0, ymin=-5.0, ymax=5.0)


@pytest.mark.parametrize("x, y", [(-10, 0), (10, 0), (0, -5), (0, 5), (10, 5), (0, 0)])
def test_in_bounds_is_inclusive(x, y):
    assert in_bounds(x, y, VIEWPORT)


@pytest.mark.parametrize("x, y", [(-10.01, 0), (10.01, 0), (0, -5.01), (0, 5.01)])
def test_out_of_bounds(x, y):
    assert not in_bounds(x, y, VIEWPORT)


def test_in_bounds_mask_matches_scalar():
    x = np.array([-10.0, 11.0, 0.0, 3.0])
    y = np.array([5.0, 0.0, -6.0, 1.0])
    mask = in_bounds_mask(x, y, VIEWPORT)
    assert mask.tolist() == [in_bounds(a, b, VIEWPORT) for a, b in zip(x, y)]


def test_any_in_bounds():
    assert any_in_bounds([(-50, 0), (0, 0), (50, 0)], VIEWPORT)
    assert not any_in_bounds([(-50, 0), (50, 0)], VIEWPORT)
    assert not any_in_bounds([], VIEWPORT)
