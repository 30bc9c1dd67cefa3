# route_sketch/domain/fitting/fitting_orientation.py
import logging
from collections.abc import Iterable
from dataclasses import dataclass

from route_sketch.app.protocols import BearingOracle
from route_sketch.domain.entities.geography import GeoPoint
from route_sketch.domain.errors import InsufficientData, OracleError
from route_sketch.domain.fitting.fitting_geometry import bearing_deg

_logger = logging.getLogger(__name__)

FALLBACK_BEARING_DEG = 0.0


def fold_bearing(deg: float) -> float:
    """Undirected line orientation in [0, 180)."""
    return deg % 180.0


def dominant_bearing(
    segments: Iterable[tuple[GeoPoint, GeoPoint]],
    *,
    bin_deg: float = 10.0,
    min_segments: int = 50,
) -> float:
    """
    Histogram folded segment bearings and return the center of the fullest bin.
    Earlier bins win ties. Raises InsufficientData below min_segments.
    """
    n_bins = max(1, int(round(180.0 / bin_deg)))
    bins = [0] * n_bins
    total = 0
    for a, b in segments:
        br = fold_bearing(bearing_deg(a, b))
        bins[max(0, min(n_bins - 1, int(br // bin_deg)))] += 1
        total += 1
    if total < min_segments:
        raise InsufficientData(f"only {total} road segments, need {min_segments}")
    best = max(range(n_bins), key=lambda i: (bins[i], -i))
    return best * bin_deg + bin_deg / 2


def perpendicular(deg: float) -> float:
    return (deg + 90.0) % 180.0


@dataclass(frozen=True)
class OrientationEstimate:
    bearing_deg: float
    degraded: bool  # True when the oracle gave no usable grid

    def rotations(self) -> tuple[float, ...]:
        if self.degraded:
            return (self.bearing_deg,)
        return (self.bearing_deg, perpendicular(self.bearing_deg))


class OrientationEstimator:
    def __init__(self, oracle: BearingOracle | None, radius_m: float = 900.0):
        self.oracle, self.radius_m = oracle, radius_m

    def estimate(self, origin: GeoPoint) -> OrientationEstimate:
        if self.oracle is None:
            return OrientationEstimate(FALLBACK_BEARING_DEG, degraded=True)
        try:
            deg = self.oracle.dominant_bearing(origin, self.radius_m)
        except (InsufficientData, OracleError) as exc:
            _logger.info("street grid unavailable, using %.0f°: %s", FALLBACK_BEARING_DEG, exc)
            return OrientationEstimate(FALLBACK_BEARING_DEG, degraded=True)
        return OrientationEstimate(fold_bearing(float(deg)), degraded=False)
