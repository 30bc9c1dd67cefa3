# route_sketch/app/build.py
from collections.abc import Mapping
from dataclasses import dataclass

from route_sketch.app.hooks import NoopHooks, SearchHooks
from route_sketch.app.session import RouteSession
from route_sketch.config.models import AppModel
from route_sketch.domain.fitting.fitting_search import FitSearchEngine
from route_sketch.io.recorder import JsonlSink, Recorder, Sink
from route_sketch.io.search_logging import SearchLogging
from route_sketch.runtime.registries import make_bearing, make_geolocation, make_router


@dataclass
class App:
    config: AppModel
    engine: FitSearchEngine
    session: RouteSession
    hooks: SearchHooks
    recorder: Recorder | None


def build(
    cfg: AppModel | Mapping,
    *,
    use_logging: bool = True,
    sinks: list[Sink] | None = None,
    deps: dict | None = None,
) -> App:
    # 0) Validate config
    model = cfg if isinstance(cfg, AppModel) else AppModel.model_validate(cfg)
    deps = deps or {}

    # 1) Logging & analytics
    recorder = Recorder(*(sinks if sinks is not None else [JsonlSink()])) if use_logging else None
    hooks = (
        SearchLogging(
            run_id=model.run_id,
            recorder=recorder,
            level=model.log.level,
            debug=model.log.debug,
            sample_every=model.log.sample_every,
        )
        if use_logging
        else NoopHooks()
    )

    # 2) External collaborators (injected deps override config, e.g. test doubles)
    router = deps.get("router") or make_router(model.router, deps=deps)
    bearing = deps.get("bearing") or make_bearing(model.bearing, deps=deps)
    geolocation = deps.get("geolocation") or make_geolocation(model.geolocation, deps=deps)

    # 3) Core + shell
    engine = FitSearchEngine(
        router,
        geolocation=geolocation,
        bearing=bearing,
        search=model.search,
        hooks=hooks,
    )
    session = RouteSession(engine)
    session.select_shape(model.shape)

    return App(model, engine, session, hooks, recorder)
