"""Data model shared by the projection engine, layers and renderers."""
from dataclasses import dataclass


@dataclass(frozen=True)
class CelestialCoordinate:
    """Position on the celestial sphere."""

    ra: float   # Right ascension (radians), unbounded until normalised
    dec: float  # Declination (radians), -pi/2..pi/2


@dataclass(frozen=True)
class MapFrame:
    """Projection parameters for a single chart. Computed once per run."""

    phi1: float   # First standard parallel (radians)
    phi2: float   # Second standard parallel (radians)
    ra0: float    # Centre right ascension (radians)
    dec0: float   # Centre declination (radians)
    scale: float = 1.0  # Plane units per radian


@dataclass(frozen=True)
class Viewport:
    """Rectangle in plane units bounding the rendered chart."""

    xmin: float
    xmax: float
    ymin: float
    ymax: float

    @property
    def width(self) -> float:
        return self.xmax - self.xmin

    @property
    def height(self) -> float:
        return self.ymax - self.ymin


@dataclass(frozen=True)
class MapSelection:
    """Which region of sky to chart: frame parameters plus the two corners."""

    phi1: float
    phi2: float
    ra0: float
    dec0: float
    upper_left: CelestialCoordinate
    lower_right: CelestialCoordinate
    number: int | None = None  # Atlas map index when chosen from the table


@dataclass(frozen=True)
class ChartOptions:
    """Physical sizing and layer switches for one chart."""

    width: float = 8.0          # Target chart width (units of length)
    resolution: float = 72.0    # Points per unit of length
    margin: float = 18.0        # Canvas margin around the frame (points)
    milky_way: bool = True
    grid: bool = True
    stars: bool = True
    constellation_lines: bool = True
    constellation_borders: bool = True
    messier: bool = True
    deep_sky: bool = True
    herschel: bool = True
    marker_mode: bool = False   # Draw every DSO as a plain cross
    star_mag_limit: float = 8.0
    dso_mag_limit: float = 12.0


# -- Drawables: what a layer asks the symbol selector to draw --


@dataclass(frozen=True)
class Star:
    mag: float


@dataclass(frozen=True)
class DeepSky:
    type_code: str
    label: str = ""
    marker_override: bool = False


@dataclass(frozen=True)
class ConstellationLine:
    pass


@dataclass(frozen=True)
class ConstellationBorder:
    pass


@dataclass(frozen=True)
class GridLine:
    pass


@dataclass(frozen=True)
class MilkyWayContour:
    level: int


@dataclass(frozen=True)
class MapLabel:
    text: str


Drawable = (
    Star
    | DeepSky
    | ConstellationLine
    | ConstellationBorder
    | GridLine
    | MilkyWayContour
    | MapLabel
)
