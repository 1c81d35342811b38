import pytest

from app import app


@pytest.fixture
def client():
    app.config.update(TESTING=True)
    with app.test_client() as client:
        yield client


def test_index_page(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert b"Sky Atlas Charts" in resp.data


def test_generate_inline_svg(client):
    resp = client.post("/generate", data={"map": "10", "grid": "on"})
    assert resp.status_code == 200
    assert b"<svg" in resp.data
    assert b"Map 10" in resp.data


def test_generate_reports_selection_error(client):
    resp = client.post("/generate", data={})
    assert resp.status_code == 200
    assert b"<svg" not in resp.data
    assert b"atlas map index" in resp.data


def test_download_svg(client):
    resp = client.post("/download/svg", data={"map": "5"})
    assert resp.status_code == 200
    assert resp.mimetype == "image/svg+xml"
    assert "map05.svg" in resp.headers["Content-Disposition"]


def test_download_from_corners(client):
    resp = client.post(
        "/download/svg",
        data={"upper_left": "0200.0+2000", "lower_right": "0000.0-2000"},
    )
    assert resp.status_code == 200
    assert "chart.svg" in resp.headers["Content-Disposition"]


@pytest.mark.parametrize("data, message", [
    ({"map": "27"}, b"between 1 and 26"),
    ({"map": "ten"}, b"Invalid map number"),
    ({"upper_left": "nonsense", "lower_right": "0000.0-2000"}, b"HHMM.M"),
    ({"map": "10", "width": "-3"}, b"Width must be positive"),
])
def test_download_rejects_bad_input(client, data, message):
    resp = client.post("/download/svg", data=data)
    assert resp.status_code == 400
    assert message in resp.data
