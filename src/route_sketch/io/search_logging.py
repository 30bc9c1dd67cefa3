# route_sketch/io/search_logging.py
import json
import logging
import sys

from route_sketch.app.hooks import NoopHooks
from route_sketch.io.recorder import Recorder
from route_sketch.io.search_events import (
    BuildCompleted,
    BuildFailed,
    BuildStarted,
    CandidateEvaluated,
)


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        return json.dumps(payload, default=str)


def default_json_logger(name="route_sketch", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stderr)  # stdout carries GeoJSON
        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
        logger.setLevel(level)
    return logger


class SearchLogging(NoopHooks):
    """
    One place to shape and emit structured logs for the build lifecycle
    and to forward analytics events to a Recorder.
    """

    def __init__(
        self,
        run_id: str = "local",
        level: str = "INFO",
        debug: bool = False,
        sample_every: int = 1,
        logger: logging.Logger | None = None,
        recorder: Recorder | None = None,
    ):
        self.run_id, self.debug, self.sample_every = run_id, debug, max(1, sample_every)
        self.recorder = recorder
        self.log = logger or default_json_logger(level=level)
        self._seen = 0

    # --------------- Helpers -----------------------------

    def _emit(self, level: str, msg: str, **extra):
        payload = {"run_id": self.run_id}
        self.log.log(getattr(logging, level), msg, extra={"extra": {**payload, **extra}})

    def _biz(self, ev):
        if self.recorder:
            self.recorder.emit(ev)

    # --------------------------------------------------------

    def build_start(self, *, build_id, shape, target_m, effort, strategy):
        self._seen = 0
        self._emit(
            "INFO",
            "build_start",
            build_id=build_id,
            shape=shape,
            target_m=round(target_m, 1),
            effort=effort,
            strategy=strategy,
        )
        self._biz(
            BuildStarted(self.run_id, build_id, "BuildStarted", shape, target_m, effort, strategy)
        )

    def state(self, *, build_id, state):
        if self.debug:
            self._emit("DEBUG", "state", build_id=build_id, state=state)

    def search_start(self, *, build_id, candidates, rotations, grid_deg, degraded):
        self._emit(
            "INFO",
            "search_start",
            build_id=build_id,
            candidates=candidates,
            rotations=rotations,
            grid_deg=grid_deg,
            degraded=degraded,
        )

    def candidate_scored(self, scored, *, build_id, best: bool):
        self._seen += 1
        c = scored.candidate
        if best or (self.debug and self._seen % self.sample_every == 0):
            self._emit(
                "INFO" if best else "DEBUG",
                "candidate_best" if best else "candidate_scored",
                build_id=build_id,
                index=scored.index,
                offset_m=[c.east_m, c.north_m],
                rotation_deg=c.rotation_deg,
                score=scored.score,
            )
        self._biz(
            CandidateEvaluated(
                self.run_id,
                build_id,
                "CandidateEvaluated",
                index=scored.index,
                east_m=c.east_m,
                north_m=c.north_m,
                rotation_deg=c.rotation_deg,
                ok=True,
                score=scored.score,
                similarity=scored.similarity,
                distance_m=scored.total_distance_m,
            )
        )

    def candidate_failed(self, candidate, *, build_id, index: int, error: BaseException):
        self._seen += 1
        self._emit("WARNING", "candidate_failed", build_id=build_id, index=index, error=str(error))
        self._biz(
            CandidateEvaluated(
                self.run_id,
                build_id,
                "CandidateEvaluated",
                index=index,
                east_m=candidate.east_m,
                north_m=candidate.north_m,
                rotation_deg=candidate.rotation_deg,
                ok=False,
                error=str(error),
            )
        )

    def build_end(self, route, *, build_id, tried: int, succeeded: int, wall_ms: float):
        self._emit(
            "INFO",
            "build_end",
            build_id=build_id,
            tried=tried,
            succeeded=succeeded,
            rotation_deg=route.rotation_deg,
            score=route.score,
            shape_m=round(route.shape_distance_m, 1),
            total_m=round(route.total_distance_m, 1),
            wall_ms=round(wall_ms, 1),
        )
        self._biz(
            BuildCompleted(
                self.run_id,
                build_id,
                "BuildCompleted",
                shape=route.shape_name,
                rotation_deg=route.rotation_deg,
                grid_bearing_deg=route.grid_bearing_deg,
                score=route.score,
                shape_distance_m=route.shape_distance_m,
                total_distance_m=route.total_distance_m,
                tried=tried,
                succeeded=succeeded,
            )
        )

    def build_failed(self, *, build_id, error: BaseException):
        self._emit(
            "ERROR",
            "build_failed",
            build_id=build_id,
            error=type(error).__name__,
            message=str(error),
        )
        self._biz(
            BuildFailed(self.run_id, build_id, "BuildFailed", type(error).__name__, str(error))
        )
