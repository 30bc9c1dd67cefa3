# route_sketch/domain/fitting/fitting_search.py
"""
Fit search: place, rotate and route a figure near an origin, keeping the
lowest-scoring candidate.

Every oracle call is a suspension point where the cancel token is checked.
Segments inside one candidate are strictly ordered (each connector starts
where the previous segment ended); independent candidates may run on a
bounded pool when max_workers > 1.
"""

import math
import numbers
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from functools import reduce

from route_sketch.app.hooks import NoopHooks, SearchHooks
from route_sketch.app.protocols import (
    BearingOracle,
    CancelToken,
    GeolocationProvider,
    RoutingOracle,
)
from route_sketch.config.models import SearchModel
from route_sketch.domain.entities.geography import GeoPoint, Shape, Stroke
from route_sketch.domain.entities.route import (
    Candidate,
    FinalRoute,
    GeoLine,
    RouteResult,
    ScoredCandidate,
    StrokeFit,
)
from route_sketch.domain.errors import (
    BuildCancelled,
    InvalidInput,
    LocationUnavailable,
    NoFeasiblePlacement,
    OracleError,
)
from route_sketch.domain.fitting import fitting_candidates as candidates_mod
from route_sketch.domain.fitting.fitting_assembly import assemble
from route_sketch.domain.fitting.fitting_geometry import (
    local_to_geo,
    project,
    resample,
    rotate,
    scale_to_total_length,
)
from route_sketch.domain.fitting.fitting_orientation import (
    OrientationEstimate,
    OrientationEstimator,
)
from route_sketch.domain.fitting.fitting_scoring import aggregate_score, mean_deviation
from route_sketch.domain.fitting.fitting_shapes import strokes_for

NO_FIT_MESSAGE = (
    "Couldn't fit the figure here. Try increasing the distance or move to a more grid-like area."
)


class BuildState(Enum):
    IDLE = "idle"
    LOCATING_ORIGIN = "locating_origin"
    ESTIMATING_ORIENTATION = "estimating_orientation"
    SEARCHING_CANDIDATES = "searching_candidates"
    ASSEMBLING = "assembling"
    READY = "ready"
    FAILED = "failed"


class NeverCancelled:
    cancelled = False


def validate_target(target_m) -> float:
    if isinstance(target_m, bool) or not isinstance(target_m, numbers.Real):
        raise InvalidInput(f"Target distance must be a number, got {target_m!r}")
    value = float(target_m)
    if not math.isfinite(value) or value <= 0:
        raise InvalidInput("Enter a target distance > 0")
    return value


@dataclass(frozen=True)
class CandidateOutcome:
    """Per-candidate result: exactly one of scored / error is set."""

    candidate: Candidate
    index: int
    scored: ScoredCandidate | None = None
    error: OracleError | None = None

    @property
    def ok(self) -> bool:
        return self.scored is not None


@dataclass(frozen=True)
class SearchReport:
    outcomes: tuple[CandidateOutcome, ...]
    best: ScoredCandidate | None
    orientation: OrientationEstimate
    anchor_count: int

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def failed(self) -> int:
        return len(self.outcomes) - self.succeeded


@dataclass(frozen=True)
class _Fold:
    # immutable per-step state threaded through the strokes
    position: GeoPoint
    fits: tuple[StrokeFit, ...] = ()


class FitSearchEngine:
    def __init__(
        self,
        router: RoutingOracle,
        *,
        geolocation: GeolocationProvider | None = None,
        bearing: BearingOracle | None = None,
        search: SearchModel | None = None,
        hooks: SearchHooks | None = None,
    ):
        self.router = router
        self.geolocation = geolocation
        self.search_cfg = search or SearchModel()
        self.orientation = OrientationEstimator(bearing, radius_m=self.search_cfg.bearing_radius_m)
        self._hooks = hooks or NoopHooks()
        self._state = BuildState.IDLE

    @property
    def state(self) -> BuildState:
        return self._state

    def _enter(self, state: BuildState, build_id: int) -> None:
        self._state = state
        self._hooks.state(build_id=build_id, state=state.value)

    # --------------- Public API -----------------------------

    def build(
        self,
        shape_name: str,
        target_m,
        *,
        origin: GeoPoint | None = None,
        build_id: int = 0,
        cancel: CancelToken | None = None,
    ) -> FinalRoute:
        """
        Run one full build. Fatal errors (InvalidInput, LocationUnavailable,
        NoFeasiblePlacement, BuildCancelled) propagate after moving to FAILED.
        """
        t0 = time.perf_counter()
        cancel = cancel or NeverCancelled()
        cfg = self.search_cfg
        try:
            target = validate_target(target_m)
            shape = strokes_for(shape_name)
            self._hooks.build_start(
                build_id=build_id,
                shape=shape_name,
                target_m=target,
                effort=cfg.effort,
                strategy=cfg.strategy,
            )

            self._enter(BuildState.LOCATING_ORIGIN, build_id)
            origin = origin or self._locate()

            report = self.search(shape, target, origin, build_id=build_id, cancel=cancel)
            if report.best is None:
                raise NoFeasiblePlacement(NO_FIT_MESSAGE)

            self._check(cancel)
            self._enter(BuildState.ASSEMBLING, build_id)
            route = assemble(
                report.best,
                shape_name=shape.name,
                grid_bearing_deg=report.orientation.bearing_deg,
                anchor_count=report.anchor_count,
            )
        except Exception as exc:
            self._enter(BuildState.FAILED, build_id)
            self._hooks.build_failed(build_id=build_id, error=exc)
            raise

        self._enter(BuildState.READY, build_id)
        self._hooks.build_end(
            route,
            build_id=build_id,
            tried=len(report.outcomes),
            succeeded=report.succeeded,
            wall_ms=(time.perf_counter() - t0) * 1000,
        )
        return route

    def search(
        self,
        shape: Shape,
        target_m: float,
        origin: GeoPoint,
        *,
        build_id: int = 0,
        cancel: CancelToken | None = None,
    ) -> SearchReport:
        cancel = cancel or NeverCancelled()
        cfg = self.search_cfg

        self._check(cancel)
        self._enter(BuildState.ESTIMATING_ORIENTATION, build_id)
        if cfg.rotation == "grid":
            orientation = self.orientation.estimate(origin)
            rotations = orientation.rotations()
        else:
            orientation = OrientationEstimate(0.0, degraded=True)
            step = cfg.fan_fine_step_deg if shape.asymmetric else cfg.fan_step_deg
            rotations = candidates_mod.fan_rotations(step)

        strokes = scale_to_total_length(shape.strokes, target_m)
        anchors = cfg.anchor_count or candidates_mod.anchor_count(shape, cfg.effort)
        dense = max(cfg.dense_min_points, anchors * 2)
        todo = candidates_mod.generate(candidates_mod.center_offsets(cfg.effort), rotations)

        self._enter(BuildState.SEARCHING_CANDIDATES, build_id)
        self._hooks.search_start(
            build_id=build_id,
            candidates=len(todo),
            rotations=list(rotations),
            grid_deg=orientation.bearing_deg,
            degraded=orientation.degraded,
        )

        def run(item: tuple[int, Candidate]) -> CandidateOutcome:
            i, c = item
            try:
                scored = self.evaluate(
                    c, strokes, origin, anchors=anchors, dense=dense, index=i, cancel=cancel
                )
            except OracleError as exc:
                return CandidateOutcome(c, i, error=exc)
            return CandidateOutcome(c, i, scored=scored)

        if cfg.max_workers > 1 and len(todo) > 1:
            with ThreadPoolExecutor(max_workers=cfg.max_workers) as pool:
                outcomes = tuple(pool.map(run, enumerate(todo)))
        else:
            outcomes = tuple(run(item) for item in enumerate(todo))

        best: ScoredCandidate | None = None
        for o in outcomes:  # enumeration order; strict < keeps the first of equals
            if not o.ok:
                self._hooks.candidate_failed(
                    o.candidate, build_id=build_id, index=o.index, error=o.error
                )
                continue
            is_best = best is None or o.scored.score < best.score
            if is_best:
                best = o.scored
            self._hooks.candidate_scored(o.scored, build_id=build_id, best=is_best)

        return SearchReport(outcomes, best, orientation, anchors)

    def evaluate(
        self,
        candidate: Candidate,
        strokes: tuple[Stroke, ...],
        origin: GeoPoint,
        *,
        anchors: int,
        dense: int,
        index: int = 0,
        cancel: CancelToken | None = None,
    ) -> ScoredCandidate:
        """Route every stroke of one placement; any OracleError abandons it."""
        cancel = cancel or NeverCancelled()
        center = local_to_geo(origin, candidate.east_m, candidate.north_m)

        def step(acc: _Fold, stroke: Stroke) -> _Fold:
            rotated = rotate(stroke, candidate.rotation_deg)
            ideal = project(center, resample(rotated, dense))
            anchor_pts = _at_least_two(project(center, resample(rotated, anchors)))

            connector = self._call(cancel, self.router.route, (acc.position, anchor_pts[0]))
            if self.search_cfg.strategy == "match":
                routed = self._call(cancel, self.router.match, _at_least_two(ideal))
            else:
                routed = self._call(cancel, self.router.route, anchor_pts)

            fit = StrokeFit(ideal, connector, routed, mean_deviation(ideal, routed.geometry))
            return _Fold(routed.geometry[-1], acc.fits + (fit,))

        folded = reduce(step, strokes, _Fold(origin))
        closing = self._call(cancel, self.router.route, (folded.position, origin))

        sims = [f.similarity for f in folded.fits]
        return ScoredCandidate(
            candidate=candidate,
            center=center,
            strokes=folded.fits,
            closing=closing,
            similarity=sum(sims) / max(len(sims), 1),
            score=aggregate_score(
                sims,
                closing.distance_m,
                penalty_cap=self.search_cfg.penalty_cap,
                penalty_scale_m=self.search_cfg.penalty_scale_m,
            ),
            index=index,
        )

    # --------------- Helpers -----------------------------

    def _locate(self) -> GeoPoint:
        if self.geolocation is None:
            raise LocationUnavailable("No location provider available")
        return self.geolocation.get_origin()

    @staticmethod
    def _check(cancel: CancelToken) -> None:
        if cancel.cancelled:
            raise BuildCancelled("build superseded")

    def _call(self, cancel: CancelToken, fn, points) -> RouteResult:
        self._check(cancel)
        result = fn(tuple(points))
        if not result.geometry:
            raise OracleError("oracle returned no geometry")
        return result


def _at_least_two(line: GeoLine) -> GeoLine:
    return line if len(line) >= 2 else (line[0], line[0])
