# route_sketch/app/protocols.py
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from route_sketch.domain.entities.geography import GeoPoint
from route_sketch.domain.entities.route import RouteResult


# ------------- External collaborators --------------------
@runtime_checkable
class GeolocationProvider(Protocol):
    """
    Responsibilities:
      • Yield the user's single current coordinate.
    Raises LocationUnavailable on denied permission, timeout or no signal.
    """

    def get_origin(self) -> GeoPoint: ...


@runtime_checkable
class BearingOracle(Protocol):
    """
    Responsibilities:
      • Report the dominant local road orientation in [0, 180) degrees.
    Raises InsufficientData when too few roads are known, OracleError on failure.
    """

    def dominant_bearing(self, origin: GeoPoint, radius_m: float) -> float: ...


@runtime_checkable
class RoutingOracle(Protocol):
    """
    Responsibilities:
      • route: a path through >= 2 points, in order, intermediate points forced.
      • match: the road path most consistent with a dense trace.
    Both raise OracleError (match additionally NoMatch); neither retries.
    Units: meters for distances, degrees for coordinates.
    """

    def route(self, points: Sequence[GeoPoint]) -> RouteResult: ...
    def match(self, trace: Sequence[GeoPoint]) -> RouteResult: ...


@runtime_checkable
class CancelToken(Protocol):
    @property
    def cancelled(self) -> bool: ...
