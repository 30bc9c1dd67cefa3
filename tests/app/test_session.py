# tests/app/test_session.py
from decimal import Decimal
from fractions import Fraction

import numpy as np
import pytest

from route_sketch.app.session import RouteSession
from route_sketch.config.models import SearchModel
from route_sketch.domain.entities.route import RouteResult
from route_sketch.domain.errors import InvalidInput, OracleError
from route_sketch.domain.fitting.fitting_search import NO_FIT_MESSAGE, FitSearchEngine


class SupersedingRouter:
    """Echo router that starts a newer build on the session after a few calls."""

    def __init__(self, after):
        self.after = after
        self.calls = 0
        self.session = None

    def route(self, points):
        self.calls += 1
        if self.calls == self.after:
            self.session.start()
        return RouteResult(tuple(points), 100.0, ())

    def match(self, trace):
        return self.route(trace)


class DownRouter:
    def route(self, points):
        raise OracleError("service unavailable", status=503)

    def match(self, trace):
        raise OracleError("service unavailable", status=503)


def _session(router, **search):
    engine = FitSearchEngine(router, search=SearchModel(effort="lite", **search))
    return RouteSession(engine, shape="square")


def test_completed_build_updates_shell_state(echo_router, origin):
    session = _session(echo_router)
    route = session.build(1609.34, origin=origin)

    assert route is not None
    assert session.last_route is route
    assert session.status.startswith("Ready (used ~0°; grid ~0°; anchors=12)")
    assert session.current_build_id == 1


def test_build_miles_converts_to_meters(echo_router, origin):
    session = _session(echo_router, strategy="match")
    route = session.build_miles(1, origin=origin)
    assert route.shape_distance_m == pytest.approx(1609.344, rel=0.05)


@pytest.mark.parametrize("miles", [np.int64(1), np.float32(1.0), Fraction(1)])
def test_build_miles_converts_any_real_number(echo_router, origin, miles):
    session = _session(echo_router, strategy="match")
    route = session.build_miles(miles, origin=origin)
    assert route.shape_distance_m == pytest.approx(1609.344, rel=0.05)


@pytest.mark.parametrize("miles", [0, -2, True, "one", Decimal(1)])
def test_bad_distance_sets_status_and_calls_nothing(echo_router, origin, miles):
    session = _session(echo_router)
    assert session.build_miles(miles, origin=origin) is None
    assert echo_router.calls == []
    assert session.last_route is None
    assert session.status != "Idle"


def test_no_feasible_placement_reports_guidance(origin):
    session = _session(DownRouter())
    assert session.build(1609.34, origin=origin) is None
    assert session.status == NO_FIT_MESSAGE


def test_superseded_build_is_discarded(origin):
    router = SupersedingRouter(after=4)
    session = _session(router)
    router.session = session

    assert session.build(1609.34, origin=origin) is None
    assert router.calls == 4  # no oracle calls after supersession
    assert session.last_route is None
    assert session.current_build_id == 2
    # the stale build leaves the shell alone
    assert session.status == "Searching placement + orientation…"


def test_new_build_clears_the_previous_route(echo_router, origin):
    session = _session(echo_router)
    session.build(1609.34, origin=origin)
    assert session.last_route is not None

    session.start()
    assert session.last_route is None


def test_cancel_marks_in_flight_ticket(echo_router):
    session = _session(echo_router)
    ticket = session.start()
    assert not ticket.cancelled
    session.cancel()
    assert ticket.cancelled


def test_select_shape_rejects_unknown_names(echo_router):
    session = _session(echo_router)
    session.select_shape("heart")
    assert session.shape == "heart"
    with pytest.raises(InvalidInput):
        session.select_shape("pentagon")
    assert session.shape == "heart"
