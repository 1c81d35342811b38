"""Vector draw primitives handed to a rendering sink, in paint order."""
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Style:
    fill: str = "none"
    stroke: str = "none"
    stroke_width: float = 0.0
    dash: tuple[float, ...] = ()
    opacity: float = 1.0


@dataclass(frozen=True)
class Circle:
    cx: float
    cy: float
    r: float
    style: Style = Style()


@dataclass(frozen=True)
class Ellipse:
    cx: float
    cy: float
    rx: float
    ry: float
    style: Style = Style()


@dataclass(frozen=True)
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    style: Style = Style()


@dataclass(frozen=True)
class Polyline:
    points: tuple[tuple[float, float], ...]
    style: Style = Style()
    closed: bool = False  # Closed rings are filled as polygons


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float
    style: Style = Style()


@dataclass(frozen=True)
class Text:
    x: float
    y: float
    content: str
    style: Style = Style()
    size: float = 8.0
    anchor: str = "start"


@dataclass(frozen=True)
class Group:
    """Compound symbol drawn as one unit (e.g. circle plus cross)."""

    children: tuple["Primitive", ...] = field(default_factory=tuple)


Primitive = Circle | Ellipse | Line | Polyline | Rect | Text | Group
