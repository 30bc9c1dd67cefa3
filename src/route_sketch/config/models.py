# route_sketch/config/models.py
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False
    sample_every: int = 1


class SearchModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    effort: Literal["lite", "normal", "max"] = "normal"
    strategy: Literal["route", "match"] = "route"  # route-through anchors | snap dense trace
    rotation: Literal["grid", "fan"] = "grid"
    fan_step_deg: float = 30.0
    fan_fine_step_deg: float = 15.0  # asymmetric figures
    dense_min_points: int = 60
    anchor_count: int | None = None  # None => effort tier
    bearing_radius_m: float = 900.0
    penalty_cap: float = 0.35
    penalty_scale_m: float = 5000.0
    max_workers: int = 1  # 1 => strictly sequential oracle calls

    @field_validator("fan_step_deg", "fan_fine_step_deg", "penalty_scale_m", "bearing_radius_m")
    @classmethod
    def _positive(cls, v: float, info: ValidationInfo) -> float:
        if v <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v

    @field_validator("dense_min_points", "max_workers")
    @classmethod
    def _at_least_one(cls, v: int, info: ValidationInfo) -> int:
        if v < 1:
            raise ValueError(f"{info.field_name} must be >= 1")
        return v

    @field_validator("anchor_count")
    @classmethod
    def _two_anchors(cls, v: int | None) -> int | None:
        if v is not None and v < 2:
            raise ValueError("anchor_count must be >= 2")
        return v


# ----------------- ROUTERS ---------------------


class RouterOSRMModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["osrm"] = "osrm"
    base_url: str = "https://router.project-osrm.org"
    profile: str = "foot"
    timeout_s: float = 20.0
    continue_straight: bool = True

    @field_validator("base_url")
    @classmethod
    def _strip(cls, v: str) -> str:
        return v.rstrip("/")


class RouterStraightModel(BaseModel):
    """Offline router: returns the requested points verbatim."""

    model_config = ConfigDict(extra="forbid")
    kind: Literal["straight"] = "straight"


RouterUnion = Annotated[RouterOSRMModel | RouterStraightModel, Field(discriminator="kind")]

# ----------------- BEARING ORACLES ---------------------


class BearingOverpassModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["overpass"] = "overpass"
    url: str = "https://overpass-api.de/api/interpreter"
    timeout_s: float = 30.0
    query_timeout_s: int = 25
    min_segments: int = 50
    bin_deg: float = 10.0


class BearingFixedModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["fixed"] = "fixed"
    bearing_deg: float | None = None  # None => no grid information


BearingUnion = Annotated[BearingOverpassModel | BearingFixedModel, Field(discriminator="kind")]

# ----------------- GEOLOCATION ---------------------


class GeolocationFixedModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["fixed"] = "fixed"
    lat: float
    lon: float

    @field_validator("lat")
    @classmethod
    def _lat(cls, v: float) -> float:
        if not -90.0 <= v <= 90.0:
            raise ValueError("lat must be within [-90, 90]")
        return v

    @field_validator("lon")
    @classmethod
    def _lon(cls, v: float) -> float:
        if not -180.0 <= v <= 180.0:
            raise ValueError("lon must be within [-180, 180]")
        return v


class GeolocationUnavailableModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["unavailable"] = "unavailable"
    reason: str = "no location provider configured"


GeolocationUnion = Annotated[
    GeolocationFixedModel | GeolocationUnavailableModel, Field(discriminator="kind")
]


# ------------------------------------------------------------------


class AppModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "route-sketch"
    run_id: str = "local"
    shape: str = "hi"
    log: LogModel = LogModel()
    search: SearchModel = SearchModel()
    router: RouterUnion = Field(default_factory=RouterOSRMModel)
    bearing: BearingUnion = Field(default_factory=BearingOverpassModel)
    geolocation: GeolocationUnion = Field(default_factory=GeolocationUnavailableModel)
