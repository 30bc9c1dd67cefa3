# route_sketch/services/osrm.py
"""OSRM HTTP adapter: both routing modes normalized to RouteResult."""

import logging
from collections.abc import Sequence

import requests

from route_sketch.app.protocols import RoutingOracle
from route_sketch.domain.entities.geography import GeoPoint
from route_sketch.domain.entities.route import RouteResult
from route_sketch.domain.errors import NoMatch, OracleError

_logger = logging.getLogger(__name__)


def format_coords(points: Sequence[GeoPoint]) -> str:
    return ";".join(f"{p.lon:.6f},{p.lat:.6f}" for p in points)


def geometry_from_geojson(line: dict | None) -> tuple[GeoPoint, ...]:
    # encoded polylines and other non-GeoJSON geometries decode to nothing
    if not isinstance(line, dict):
        return ()
    return tuple(GeoPoint(float(lat), float(lon)) for lon, lat, *_ in line.get("coordinates", []))


def instruction_text(step: dict) -> str:
    """OSRM only ships instruction text on some builds; synthesize it otherwise."""
    maneuver = step.get("maneuver", {})
    if maneuver.get("instruction"):
        return maneuver["instruction"]
    kind = maneuver.get("type", "continue")
    modifier = maneuver.get("modifier")
    name = step.get("name")
    if kind == "depart":
        text = "Head out"
    elif kind == "arrive":
        return "Arrive" + (f" at {name}" if name else "")
    elif modifier:
        text = f"{kind.replace('_', ' ').capitalize()} {modifier}"
    else:
        text = kind.replace("_", " ").capitalize()
    return text + (f" onto {name}" if name else "")


def instructions_from_legs(legs: list[dict]) -> tuple[str, ...]:
    return tuple(instruction_text(st) for leg in legs for st in leg.get("steps", []))


class OSRMRouter(RoutingOracle):
    """
    Thin client for the OSRM route and match services.

    Args:
        base_url: Server root, e.g. ``https://router.project-osrm.org``.
        profile: Routing profile (``foot``, ``bike``, ``car``).
        timeout_s: Per-call bound; a hung call surfaces as OracleError.
        continue_straight: Forbid u-turns at via points on the route service.
        session: Injected ``requests.Session`` (tests, connection pooling).

    No retries: the search decides whether a failure is fatal or skippable.
    """

    def __init__(
        self,
        base_url: str = "https://router.project-osrm.org",
        profile: str = "foot",
        *,
        timeout_s: float = 20.0,
        continue_straight: bool = True,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.profile = profile
        self.timeout_s = timeout_s
        self.continue_straight = continue_straight
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": "route-sketch/0.1"})

    def route(self, points: Sequence[GeoPoint]) -> RouteResult:
        if len(points) < 2:
            raise OracleError("route needs at least 2 points", status="InvalidInput")
        data = self._get(
            "route",
            points,
            {
                "overview": "full",
                "steps": "true",
                "geometries": "geojson",
                "continue_straight": str(self.continue_straight).lower(),
            },
        )
        routes = data.get("routes")
        if not isinstance(routes, list) or not routes:
            raise OracleError("route response has no routes", status=data.get("code"))
        return self._result(routes[0])

    def match(self, trace: Sequence[GeoPoint]) -> RouteResult:
        if len(trace) < 2:
            raise OracleError("match needs at least 2 points", status="InvalidInput")
        data = self._get(
            "match",
            trace,
            {"overview": "full", "steps": "true", "geometries": "geojson"},
        )
        matchings = data.get("matchings")
        if not isinstance(matchings, list) or not matchings:
            raise NoMatch("no plausible road path for the trace", status=data.get("code"))
        # OSRM may split a trace into several matchings; join them in order
        geometry: list[GeoPoint] = []
        steps: list[str] = []
        distance = 0.0
        for m in matchings:
            part = self._result(m)
            geometry.extend(part.geometry)
            steps.extend(part.instructions)
            distance += part.distance_m
        return RouteResult(tuple(geometry), distance, tuple(steps))

    # --------------- Helpers -----------------------------

    def _get(self, service: str, points: Sequence[GeoPoint], params: dict) -> dict:
        url = f"{self.base_url}/{service}/v1/{self.profile}/{format_coords(points)}"
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout_s)
        except requests.Timeout as exc:
            raise OracleError(f"OSRM {service} timed out", status="Timeout") from exc
        except requests.RequestException as exc:
            raise OracleError(f"OSRM {service} failed: {exc}", status="ConnectionError") from exc

        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}
        code = data.get("code")
        if code == "NoMatch":
            raise NoMatch(data.get("message") or "no match", status=code)
        if not resp.ok or code != "Ok":
            message = data.get("message") or f"OSRM {service} failed"
            _logger.debug("OSRM %s rejected: http=%s code=%s", service, resp.status_code, code)
            raise OracleError(message, status=code or resp.status_code)
        return data

    @staticmethod
    def _result(obj: dict) -> RouteResult:
        try:
            geometry = geometry_from_geojson(obj.get("geometry"))
            distance = float(obj.get("distance") or 0.0)
            steps = instructions_from_legs(obj.get("legs") or [])
        except (TypeError, ValueError, KeyError, AttributeError) as exc:
            raise OracleError(f"malformed OSRM response: {exc}", status="NoGeometry") from exc
        if len(geometry) < 2:
            raise OracleError("response geometry is unusable", status="NoGeometry")
        return RouteResult(geometry=geometry, distance_m=distance, instructions=steps)
