# route_sketch/domain/fitting/fitting_geometry.py
"""
Planar geometry over point sequences in a local meter frame, plus the
local-tangent-plane projection to and from latitude/longitude.

The projection is equirectangular and only valid near its center; project
every candidate from its own center and never reuse scale factors.
"""

import math
from collections.abc import Sequence

import numpy as np

from route_sketch.domain.entities.geography import GeoPoint, Point, Stroke

METERS_PER_DEG_LAT = 111_320.0
METERS_PER_MILE = 1609.344
EARTH_RADIUS_M = 6_371_008.8
EPS = 1e-9


def miles_to_meters(mi: float) -> float:
    return mi * METERS_PER_MILE


def length(stroke: Sequence[Point]) -> float:
    return sum(math.hypot(b.x - a.x, b.y - a.y) for a, b in zip(stroke, stroke[1:]))


def scale_to_total_length(strokes: Sequence[Stroke], target_m: float) -> tuple[Stroke, ...]:
    total = sum(length(s) for s in strokes)
    k = target_m / max(total, EPS)
    return tuple(tuple(Point(p.x * k, p.y * k) for p in s) for s in strokes)


def rotate(stroke: Sequence[Point], angle_deg: float) -> Stroke:
    # rotate in the planar frame, before projecting
    r = math.radians(angle_deg)
    c, s = math.cos(r), math.sin(r)
    return tuple(Point(p.x * c - p.y * s, p.x * s + p.y * c) for p in stroke)


def resample(stroke: Sequence[Point], n: int) -> Stroke:
    """
    Arc-length-uniform resampling to exactly n points.
    First and last points are kept as given; interior point k sits at
    k * L / (n - 1) along the stroke. Degenerate strokes come back unchanged.
    """
    pts = tuple(stroke)
    if len(pts) < 2 or n < 2:
        return pts
    xs = np.array([p.x for p in pts], dtype=float)
    ys = np.array([p.y for p in pts], dtype=float)
    cum = np.concatenate([[0.0], np.cumsum(np.hypot(np.diff(xs), np.diff(ys)))])
    total = float(cum[-1])
    if total < EPS:
        return pts

    step = total / (n - 1)
    targets = step * np.arange(1, n - 1)
    targets = targets[targets < total]
    out = [pts[0]]
    out.extend(
        Point(float(x), float(y))
        for x, y in zip(np.interp(targets, cum, xs), np.interp(targets, cum, ys))
    )
    # accumulated float error can eat the tail; pad with the last point
    while len(out) < n - 1:
        out.append(pts[-1])
    out.append(pts[-1])
    return tuple(out)


def point_to_segment_distance(p, a, b) -> float:
    """
    Distance from p to segment [a, b] on raw 2-tuples.
    On (lat, lon) pairs the value is a relative proxy, not meters.
    """
    px, py = p
    ax, ay = a
    bx, by = b
    vx, vy = bx - ax, by - ay
    wx, wy = px - ax, py - ay
    c1 = vx * wx + vy * wy
    if c1 <= 0:
        return math.hypot(px - ax, py - ay)
    c2 = vx * vx + vy * vy
    if c2 <= c1:
        return math.hypot(px - bx, py - by)
    t = c1 / c2
    return math.hypot(px - (ax + t * vx), py - (ay + t * vy))


# ---------------- projection ----------------------


def _meters_per_deg_lon(lat: float) -> float:
    return METERS_PER_DEG_LAT * math.cos(math.radians(lat))


def local_to_geo(center: GeoPoint, x: float, y: float) -> GeoPoint:
    return GeoPoint(
        center.lat + y / METERS_PER_DEG_LAT,
        center.lon + x / max(_meters_per_deg_lon(center.lat), EPS),
    )


def geo_to_local(center: GeoPoint, g: GeoPoint) -> Point:
    return Point(
        (g.lon - center.lon) * _meters_per_deg_lon(center.lat),
        (g.lat - center.lat) * METERS_PER_DEG_LAT,
    )


def project(center: GeoPoint, stroke: Sequence[Point]) -> tuple[GeoPoint, ...]:
    return tuple(local_to_geo(center, p.x, p.y) for p in stroke)


# ---------------- spherical helpers ----------------------


def bearing_deg(a: GeoPoint, b: GeoPoint) -> float:
    """Initial great-circle bearing a -> b in [0, 360)."""
    lat1, lon1 = math.radians(a.lat), math.radians(a.lon)
    lat2, lon2 = math.radians(b.lat), math.radians(b.lon)
    y = math.sin(lon2 - lon1) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(lon2 - lon1)
    return (math.degrees(math.atan2(y, x)) + 360.0) % 360.0


def haversine_m(a: GeoPoint, b: GeoPoint) -> float:
    lat1, lat2 = math.radians(a.lat), math.radians(b.lat)
    dlat = lat2 - lat1
    dlon = math.radians(b.lon - a.lon)
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(h)))


def geo_length_m(line: Sequence[GeoPoint]) -> float:
    return sum(haversine_m(a, b) for a, b in zip(line, line[1:]))
