# route_sketch/domain/entities/geography.py
from dataclasses import dataclass


# Core geometry types used by fitting
@dataclass(frozen=True)
class Point:
    x: float  # meters east of the local origin
    y: float  # meters north of the local origin


@dataclass(frozen=True)
class GeoPoint:
    lat: float  # degrees
    lon: float

    def as_lonlat(self) -> tuple[float, float]:
        return (self.lon, self.lat)


Stroke = tuple[Point, ...]


@dataclass(frozen=True)
class Shape:
    """One named figure: pen-down strokes in normalized planar units."""

    name: str
    strokes: tuple[Stroke, ...]
    asymmetric: bool = False  # fan search uses finer rotation steps
    glyph: bool = False  # multi-stroke letters need more anchors


Pt = Point | tuple[float, float]


def to_point(p: Pt) -> Point:
    return p if isinstance(p, Point) else Point(float(p[0]), float(p[1]))


def to_stroke(pts) -> Stroke:
    return tuple(to_point(p) for p in pts)
