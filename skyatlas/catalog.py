"""Load GeoJSON catalogs (d3-celestial layout) and extract point records."""
from pathlib import Path
import json
import logging
from typing import Iterator, TypedDict

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent.parent / "data"
_cache: dict[Path, dict] = {}


class StarRecord(TypedDict):
    ra: float       # Right ascension in degrees (-180 to +180)
    dec: float      # Declination in degrees (-90 to +90)
    mag: float      # Apparent visual magnitude
    id: int | str | None


class DsoRecord(TypedDict):
    ra: float
    dec: float
    mag: float
    type: str       # Catalog type code, e.g. "gc", "pn", "oc"
    name: str       # Display label, e.g. "M13" or "NGC 7000"


def load_collection(name: str, data_dir: Path = DATA_DIR) -> dict:
    """Load ``<data_dir>/<name>.json`` as a GeoJSON dict. Cached per path.

    Raises FileNotFoundError if the file does not exist.
    """
    path = Path(data_dir) / f"{name}.json"
    if path not in _cache:
        with open(path) as f:
            _cache[path] = json.load(f)
    return _cache[path]


def _iter_points(collection: dict) -> Iterator[tuple[dict, float, float]]:
    """Yield (properties, ra, dec) for every Point feature with coordinates."""
    for feature in collection.get("features", []):
        geometry = feature.get("geometry") or {}
        coords = geometry.get("coordinates")
        if geometry.get("type") != "Point" or not coords or len(coords) < 2:
            logger.debug("skipping feature %s: no point coordinates", feature.get("id"))
            continue
        props = dict(feature.get("properties") or {})
        props.setdefault("id", feature.get("id"))
        yield props, float(coords[0]), float(coords[1])


def _magnitude(props: dict) -> float | None:
    """Numeric ``mag`` property, or None when it is missing or unparseable."""
    mag = props.get("mag")
    if mag is None:
        return None
    try:
        return float(mag)
    except (TypeError, ValueError):
        logger.debug("skipping feature %s: bad magnitude %r", props.get("id"), mag)
        return None


def parse_stars(collection: dict) -> list[StarRecord]:
    """Extract star records, brightest first. Records without mag are skipped."""
    stars: list[StarRecord] = []
    for props, ra, dec in _iter_points(collection):
        mag = _magnitude(props)
        if mag is None:
            continue
        stars.append({"ra": ra, "dec": dec, "mag": mag, "id": props.get("id")})
    stars.sort(key=lambda s: s["mag"])
    return stars


def parse_dsos(collection: dict) -> list[DsoRecord]:
    """Extract deep-sky records. Records without type or mag are skipped.

    The label prefers ``desig`` (e.g. "M13"), then ``name``, then the
    feature id.
    """
    dsos: list[DsoRecord] = []
    for props, ra, dec in _iter_points(collection):
        type_code = props.get("type")
        mag = _magnitude(props)
        if not type_code or mag is None:
            continue
        label = props.get("desig") or props.get("name") or props.get("id") or ""
        dsos.append({
            "ra": ra,
            "dec": dec,
            "mag": mag,
            "type": str(type_code),
            "name": str(label),
        })
    return dsos
