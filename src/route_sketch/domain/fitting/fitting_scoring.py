# route_sketch/domain/fitting/fitting_scoring.py
from collections.abc import Sequence

import numpy as np

from route_sketch.domain.entities.geography import GeoPoint

INFEASIBLE = 1e9


def _as_array(line: Sequence[GeoPoint]) -> np.ndarray:
    return np.array([(g.lat, g.lon) for g in line], dtype=float).reshape(-1, 2)


def mean_deviation(ideal: Sequence[GeoPoint], candidate: Sequence[GeoPoint]) -> float:
    """
    One-sided mean distance ideal -> candidate, in degrees.
    For every ideal point take the nearest candidate segment, then average.
    Detours that still pass near every ideal point are not penalized.
    """
    if len(candidate) < 2:
        return INFEASIBLE
    if not ideal:
        return 0.0
    p = _as_array(ideal)[:, None, :]  # (P, 1, 2)
    c = _as_array(candidate)
    a, b = c[:-1][None, :, :], c[1:][None, :, :]  # (1, S, 2)
    v = b - a
    w = p - a
    c1 = np.sum(v * w, axis=-1)
    c2 = np.sum(v * v, axis=-1)
    # clamp the projection onto each segment; zero-length segments fall to a
    t = np.where(c2 > 0, np.clip(c1 / np.where(c2 > 0, c2, 1.0), 0.0, 1.0), 0.0)
    nearest = a + t[..., None] * v
    d = np.hypot(p[..., 0] - nearest[..., 0], p[..., 1] - nearest[..., 1])
    return float(d.min(axis=1).mean())


def aggregate_score(
    similarities: Sequence[float],
    closing_distance_m: float,
    *,
    penalty_cap: float = 0.35,
    penalty_scale_m: float = 5000.0,
) -> float:
    """Similarity-dominant score, lightly and boundedly penalized by the closing connector."""
    if not similarities:
        return INFEASIBLE
    avg = sum(similarities) / len(similarities)
    return avg * (1.0 + min(penalty_cap, closing_distance_m / max(penalty_scale_m, 1e-9)))
