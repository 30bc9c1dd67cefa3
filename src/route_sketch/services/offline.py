# route_sketch/services/offline.py
from collections.abc import Sequence

from route_sketch.app.protocols import BearingOracle, GeolocationProvider, RoutingOracle
from route_sketch.domain.entities.geography import GeoPoint
from route_sketch.domain.entities.route import RouteResult
from route_sketch.domain.errors import InsufficientData, LocationUnavailable, OracleError
from route_sketch.domain.fitting.fitting_geometry import geo_length_m


class StraightLineRouter(RoutingOracle):
    """Connects the requested points with straight lines; no road network."""

    def route(self, points: Sequence[GeoPoint]) -> RouteResult:
        return self._straight(points)

    def match(self, trace: Sequence[GeoPoint]) -> RouteResult:
        return self._straight(trace)

    def _straight(self, pts: Sequence[GeoPoint]) -> RouteResult:
        if len(pts) < 2:
            raise OracleError("need at least 2 points", status="InvalidInput")
        line = tuple(pts)
        d = geo_length_m(line)
        return RouteResult(line, d, (f"Walk {d:.0f} m",))


class FixedBearing(BearingOracle):
    def __init__(self, bearing_deg: float | None = None):
        self.bearing_deg = bearing_deg

    def dominant_bearing(self, origin: GeoPoint, radius_m: float) -> float:
        if self.bearing_deg is None:
            raise InsufficientData("no street grid configured")
        return self.bearing_deg % 180.0


class FixedGeolocation(GeolocationProvider):
    def __init__(self, lat: float, lon: float):
        self.origin = GeoPoint(lat, lon)

    def get_origin(self) -> GeoPoint:
        return self.origin


class UnavailableGeolocation(GeolocationProvider):
    def __init__(self, reason: str = "no location provider configured"):
        self.reason = reason

    def get_origin(self) -> GeoPoint:
        raise LocationUnavailable(self.reason)
