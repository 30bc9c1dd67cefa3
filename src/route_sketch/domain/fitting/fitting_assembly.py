# route_sketch/domain/fitting/fitting_assembly.py
from route_sketch.domain.entities.route import (
    FinalRoute,
    RouteResult,
    RouteSegment,
    ScoredCandidate,
    SegmentKind,
)

MAX_DISPLAY_STEPS = 120


def _segment(kind: SegmentKind, r: RouteResult) -> RouteSegment:
    return RouteSegment(kind, r.geometry, r.distance_m, r.instructions)


def assemble(
    best: ScoredCandidate,
    *,
    shape_name: str,
    grid_bearing_deg: float,
    anchor_count: int,
) -> FinalRoute:
    """
    [connector, stroke, connector, stroke, ..., connector back to origin].
    The ideal overlay is the dense sequence already built while scoring.
    """
    segments: list[RouteSegment] = []
    for fit in best.strokes:
        segments.append(_segment(SegmentKind.CONNECTOR, fit.connector))
        segments.append(_segment(SegmentKind.SHAPE, fit.route))
    segments.append(_segment(SegmentKind.CONNECTOR, best.closing))

    return FinalRoute(
        segments=tuple(segments),
        ideal=tuple(fit.ideal for fit in best.strokes),
        instructions=tuple(step for seg in segments for step in seg.instructions),
        shape_name=shape_name,
        rotation_deg=best.candidate.rotation_deg,
        grid_bearing_deg=grid_bearing_deg,
        anchor_count=anchor_count,
        score=best.score,
        meta={
            "center": (best.center.lat, best.center.lon),
            "offset_m": (best.candidate.east_m, best.candidate.north_m),
            "similarity": best.similarity,
            "candidate_index": best.index,
        },
    )


def display_steps(route: FinalRoute, limit: int = MAX_DISPLAY_STEPS) -> list[str]:
    steps = [f"{i + 1}. {s}" for i, s in enumerate(route.instructions[:limit])]
    if len(route.instructions) > limit:
        steps.append(f"(Showing first {limit} steps of {len(route.instructions)}.)")
    return steps


def status_line(route: FinalRoute) -> str:
    return (
        f"Ready (used ~{route.rotation_deg:.0f}°; grid ~{route.grid_bearing_deg:.0f}°; "
        f"anchors={route.anchor_count})"
    )
