# route_sketch/io/search_events.py

from dataclasses import dataclass


# Base type for analytics events emitted around a build
@dataclass
class SearchEvent:
    run_id: str
    build_id: int
    name: str  # stable event name


@dataclass
class BuildStarted(SearchEvent):
    shape: str
    target_m: float
    effort: str
    strategy: str


@dataclass
class CandidateEvaluated(SearchEvent):
    index: int
    east_m: float
    north_m: float
    rotation_deg: float
    ok: bool
    score: float | None = None
    similarity: float | None = None
    distance_m: float | None = None
    error: str | None = None


@dataclass
class BuildCompleted(SearchEvent):
    shape: str
    rotation_deg: float
    grid_bearing_deg: float
    score: float
    shape_distance_m: float
    total_distance_m: float
    tried: int
    succeeded: int


@dataclass
class BuildFailed(SearchEvent):
    error_type: str
    message: str
