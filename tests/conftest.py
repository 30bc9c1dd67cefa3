# tests/conftest.py
import pytest

from route_sketch.domain.entities.geography import GeoPoint
from route_sketch.domain.entities.route import RouteResult
from route_sketch.domain.errors import InsufficientData
from route_sketch.domain.fitting.fitting_geometry import geo_length_m

ORIGIN = GeoPoint(40.0, -75.0)


# ---------- Oracle doubles


class EchoRouter:
    """Returns the requested points verbatim; distance is their polyline length."""

    def __init__(self):
        self.calls: list[tuple[str, tuple[GeoPoint, ...]]] = []

    def _echo(self, mode, pts):
        self.calls.append((mode, tuple(pts)))
        line = tuple(pts)
        return RouteResult(line, geo_length_m(line), (f"{mode} {len(line)} pts",))

    def route(self, points):
        return self._echo("route", points)

    def match(self, trace):
        return self._echo("match", trace)


class CountingBearing:
    def __init__(self, bearing_deg: float | None):
        self.bearing_deg = bearing_deg
        self.calls = 0

    def dominant_bearing(self, origin, radius_m):
        self.calls += 1
        if self.bearing_deg is None:
            raise InsufficientData("too few roads")
        return self.bearing_deg


@pytest.fixture
def origin() -> GeoPoint:
    return ORIGIN


@pytest.fixture
def echo_router() -> EchoRouter:
    return EchoRouter()


@pytest.fixture
def grid_bearing() -> CountingBearing:
    return CountingBearing(20.0)


@pytest.fixture
def no_grid_bearing() -> CountingBearing:
    return CountingBearing(None)
