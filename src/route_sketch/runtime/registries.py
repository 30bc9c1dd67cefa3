# route_sketch/runtime/registries.py
from collections.abc import Callable
from typing import Any

from route_sketch.app.protocols import BearingOracle, GeolocationProvider, RoutingOracle
from route_sketch.config.models import (
    BearingFixedModel,
    BearingOverpassModel,
    BearingUnion,
    GeolocationFixedModel,
    GeolocationUnavailableModel,
    GeolocationUnion,
    RouterOSRMModel,
    RouterStraightModel,
    RouterUnion,
)
from route_sketch.services.offline import (
    FixedBearing,
    FixedGeolocation,
    StraightLineRouter,
    UnavailableGeolocation,
)
from route_sketch.services.osrm import OSRMRouter
from route_sketch.services.overpass import OverpassBearingOracle

RouterFactory = Callable[[RouterUnion, dict[str, Any]], RoutingOracle]
BearingFactory = Callable[[BearingUnion, dict[str, Any]], BearingOracle]
GeolocationFactory = Callable[[GeolocationUnion, dict[str, Any]], GeolocationProvider]

_router_registry: dict[str, RouterFactory] = {}
_bearing_registry: dict[str, BearingFactory] = {}
_geolocation_registry: dict[str, GeolocationFactory] = {}


def _lookup(registry: dict, kind: str, what: str):
    try:
        return registry[kind]
    except KeyError:
        raise ValueError(f"Unknown {what} kind {kind!r}")


# --------------------- Routers  ---------------------
def register_router(kind: str):
    def deco(fn: RouterFactory):
        _router_registry[kind] = fn
        return fn

    return deco


def make_router(cfg: RouterUnion, *, deps: dict | None = None) -> RoutingOracle:
    return _lookup(_router_registry, cfg.kind, "router")(cfg, deps or {})


@register_router("osrm")
def _make_osrm(cfg: RouterOSRMModel, deps):
    return OSRMRouter(
        cfg.base_url,
        cfg.profile,
        timeout_s=cfg.timeout_s,
        continue_straight=cfg.continue_straight,
        session=deps.get("session"),
    )


@register_router("straight")
def _make_straight(cfg: RouterStraightModel, deps):
    return StraightLineRouter()


# --------------------- Bearing oracles ---------------------
def register_bearing(kind: str):
    def deco(fn: BearingFactory):
        _bearing_registry[kind] = fn
        return fn

    return deco


def make_bearing(cfg: BearingUnion, *, deps: dict | None = None) -> BearingOracle:
    return _lookup(_bearing_registry, cfg.kind, "bearing")(cfg, deps or {})


@register_bearing("overpass")
def _make_overpass(cfg: BearingOverpassModel, deps):
    return OverpassBearingOracle(
        cfg.url,
        timeout_s=cfg.timeout_s,
        query_timeout_s=cfg.query_timeout_s,
        min_segments=cfg.min_segments,
        bin_deg=cfg.bin_deg,
        session=deps.get("session"),
    )


@register_bearing("fixed")
def _make_fixed_bearing(cfg: BearingFixedModel, deps):
    return FixedBearing(cfg.bearing_deg)


# --------------------- Geolocation ---------------------
def register_geolocation(kind: str):
    def deco(fn: GeolocationFactory):
        _geolocation_registry[kind] = fn
        return fn

    return deco


def make_geolocation(cfg: GeolocationUnion, *, deps: dict | None = None) -> GeolocationProvider:
    return _lookup(_geolocation_registry, cfg.kind, "geolocation")(cfg, deps or {})


@register_geolocation("fixed")
def _make_fixed_geolocation(cfg: GeolocationFixedModel, deps):
    return FixedGeolocation(cfg.lat, cfg.lon)


@register_geolocation("unavailable")
def _make_unavailable(cfg: GeolocationUnavailableModel, deps):
    return UnavailableGeolocation(cfg.reason)
