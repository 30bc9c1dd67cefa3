# route_sketch/domain/entities/route.py
from dataclasses import dataclass, field
from enum import Enum

from route_sketch.domain.entities.geography import GeoPoint

GeoLine = tuple[GeoPoint, ...]


class SegmentKind(Enum):
    CONNECTOR = "connector"
    SHAPE = "shape"


@dataclass(frozen=True)
class Candidate:
    east_m: float  # center offset from the origin
    north_m: float
    rotation_deg: float


@dataclass(frozen=True)
class RouteResult:
    """Normalized oracle response; both routing modes produce this."""

    geometry: GeoLine
    distance_m: float
    instructions: tuple[str, ...] = ()


@dataclass(frozen=True)
class StrokeFit:
    ideal: GeoLine  # dense ideal sequence, reused as the overlay
    connector: RouteResult  # current position -> first anchor
    route: RouteResult  # the on-road stroke
    similarity: float


@dataclass(frozen=True)
class ScoredCandidate:
    candidate: Candidate
    center: GeoPoint
    strokes: tuple[StrokeFit, ...]
    closing: RouteResult  # last stroke end -> origin
    similarity: float  # mean over strokes
    score: float
    index: int  # enumeration order, breaks ties

    @property
    def shape_distance_m(self) -> float:
        return sum(s.route.distance_m for s in self.strokes)

    @property
    def total_distance_m(self) -> float:
        return (
            self.shape_distance_m
            + sum(s.connector.distance_m for s in self.strokes)
            + self.closing.distance_m
        )


@dataclass(frozen=True)
class RouteSegment:
    kind: SegmentKind
    geometry: GeoLine
    distance_m: float
    instructions: tuple[str, ...] = ()


@dataclass(frozen=True)
class FinalRoute:
    segments: tuple[RouteSegment, ...]
    ideal: tuple[GeoLine, ...]
    instructions: tuple[str, ...]
    shape_name: str
    rotation_deg: float
    grid_bearing_deg: float
    anchor_count: int
    score: float
    meta: dict = field(default_factory=dict, compare=False)

    def of_kind(self, kind: SegmentKind) -> list[RouteSegment]:
        return [s for s in self.segments if s.kind is kind]

    @property
    def shape_distance_m(self) -> float:
        return sum(s.distance_m for s in self.of_kind(SegmentKind.SHAPE))

    @property
    def connector_distance_m(self) -> float:
        return sum(s.distance_m for s in self.of_kind(SegmentKind.CONNECTOR))

    @property
    def total_distance_m(self) -> float:
        return self.shape_distance_m + self.connector_distance_m
