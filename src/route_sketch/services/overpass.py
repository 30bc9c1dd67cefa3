# route_sketch/services/overpass.py
import logging
from collections.abc import Iterator

import requests

from route_sketch.app.protocols import BearingOracle
from route_sketch.domain.entities.geography import GeoPoint
from route_sketch.domain.errors import OracleError
from route_sketch.domain.fitting.fitting_orientation import dominant_bearing

_logger = logging.getLogger(__name__)


def highway_query(origin: GeoPoint, radius_m: float, timeout_s: int = 25) -> str:
    return (
        f"[out:json][timeout:{timeout_s}];\n"
        f'(\n  way(around:{radius_m:.0f},{origin.lat:.6f},{origin.lon:.6f})["highway"];\n);\n'
        "out geom;"
    )


def road_segments(data: dict) -> Iterator[tuple[GeoPoint, GeoPoint]]:
    """Consecutive node pairs of every way that carries a geometry."""
    for el in data.get("elements") or []:
        g = el.get("geometry") or []
        if len(g) < 2:
            continue
        for a, b in zip(g, g[1:]):
            yield GeoPoint(a["lat"], a["lon"]), GeoPoint(b["lat"], b["lon"])


class OverpassBearingOracle(BearingOracle):
    """One Overpass request per build; the histogram runs locally."""

    def __init__(
        self,
        url: str = "https://overpass-api.de/api/interpreter",
        *,
        timeout_s: float = 30.0,
        query_timeout_s: int = 25,
        min_segments: int = 50,
        bin_deg: float = 10.0,
        session: requests.Session | None = None,
    ):
        self.url = url
        self.timeout_s = timeout_s
        self.query_timeout_s = query_timeout_s
        self.min_segments = min_segments
        self.bin_deg = bin_deg
        self.session = session or requests.Session()

    def dominant_bearing(self, origin: GeoPoint, radius_m: float) -> float:
        query = highway_query(origin, radius_m, self.query_timeout_s)
        try:
            resp = self.session.post(
                self.url,
                data={"data": query},
                headers={"Content-Type": "application/x-www-form-urlencoded;charset=UTF-8"},
                timeout=self.timeout_s,
            )
        except requests.RequestException as exc:
            raise OracleError(f"Overpass failed: {exc}", status="ConnectionError") from exc
        if not resp.ok:
            raise OracleError("Overpass failed", status=resp.status_code)
        try:
            data = resp.json()
        except ValueError as exc:
            raise OracleError("Overpass returned invalid JSON", status=resp.status_code) from exc

        if not isinstance(data, dict):
            raise OracleError("Overpass returned an unexpected payload", status=resp.status_code)
        try:
            segments = list(road_segments(data))
        except (TypeError, ValueError, KeyError, AttributeError) as exc:
            raise OracleError(f"malformed Overpass element: {exc}", status="NoGeometry") from exc

        deg = dominant_bearing(segments, bin_deg=self.bin_deg, min_segments=self.min_segments)
        _logger.debug("dominant street bearing %.0f° around %s", deg, origin)
        return deg
