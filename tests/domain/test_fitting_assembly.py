# tests/domain/test_fitting_assembly.py
from route_sketch.domain.entities.geography import GeoPoint
from route_sketch.domain.entities.route import (
    Candidate,
    RouteResult,
    ScoredCandidate,
    SegmentKind,
    StrokeFit,
)
from route_sketch.domain.fitting.fitting_assembly import (
    MAX_DISPLAY_STEPS,
    assemble,
    display_steps,
    status_line,
)

O = GeoPoint(40.0, -75.0)
A = GeoPoint(40.001, -75.0)
B = GeoPoint(40.001, -74.999)
C = GeoPoint(40.002, -74.999)
D = GeoPoint(40.002, -74.998)


def _rr(*pts, d=100.0, steps=()):
    return RouteResult(tuple(pts), d, tuple(steps))


def _scored(n_steps_per_leg=1):
    def steps(tag):
        return [f"{tag} {k}" for k in range(n_steps_per_leg)]

    fits = (
        StrokeFit(
            (A, B),
            connector=_rr(O, A, d=10.0, steps=steps("to1")),
            route=_rr(A, B, d=100.0, steps=steps("s1")),
            similarity=0.0,
        ),
        StrokeFit(
            (C, D),
            connector=_rr(B, C, d=20.0, steps=steps("to2")),
            route=_rr(C, D, d=200.0, steps=steps("s2")),
            similarity=0.0,
        ),
    )
    return ScoredCandidate(
        candidate=Candidate(240.0, 0.0, 110.0),
        center=GeoPoint(40.0015, -74.9985),
        strokes=fits,
        closing=_rr(D, O, d=30.0, steps=steps("home")),
        similarity=0.0,
        score=0.0,
        index=3,
    )


def _route(**kw):
    return assemble(_scored(**kw), shape_name="hi", grid_bearing_deg=20.0, anchor_count=18)


# ---------- assemble


def test_segments_alternate_connectors_and_strokes():
    route = _route()
    assert [s.kind for s in route.segments] == [
        SegmentKind.CONNECTOR,
        SegmentKind.SHAPE,
        SegmentKind.CONNECTOR,
        SegmentKind.SHAPE,
        SegmentKind.CONNECTOR,
    ]
    assert route.segments[-1].geometry[-1] == O


def test_distances_split_by_kind():
    route = _route()
    assert route.shape_distance_m == 300.0
    assert route.connector_distance_m == 60.0
    assert route.total_distance_m == 360.0


def test_instructions_follow_segment_order():
    route = _route()
    assert route.instructions == ("to1 0", "s1 0", "to2 0", "s2 0", "home 0")


def test_route_carries_placement_metadata():
    route = _route()
    assert route.ideal == ((A, B), (C, D))
    assert route.rotation_deg == 110.0
    assert route.grid_bearing_deg == 20.0
    assert route.anchor_count == 18
    assert route.meta["candidate_index"] == 3
    assert route.meta["offset_m"] == (240.0, 0.0)


# ---------- presentation


def test_display_steps_are_numbered():
    assert display_steps(_route())[:2] == ["1. to1 0", "2. s1 0"]


def test_display_steps_truncate_long_lists():
    route = _route(n_steps_per_leg=30)  # 150 steps
    lines = display_steps(route)
    assert len(lines) == MAX_DISPLAY_STEPS + 1
    assert lines[-1] == f"(Showing first {MAX_DISPLAY_STEPS} steps of 150.)"


def test_status_line_reports_rotation_grid_and_anchors():
    assert status_line(_route()) == "Ready (used ~110°; grid ~20°; anchors=18)"
