# route_sketch/app/hooks.py
from typing import Protocol


class SearchHooks(Protocol):
    def build_start(self, *, build_id, shape, target_m, effort, strategy): ...
    def state(self, *, build_id, state): ...
    def search_start(self, *, build_id, candidates, rotations, grid_deg, degraded): ...
    def candidate_scored(self, scored, *, build_id, best: bool): ...
    def candidate_failed(self, candidate, *, build_id, index: int, error: BaseException): ...
    def build_end(self, route, *, build_id, tried: int, succeeded: int, wall_ms: float): ...
    def build_failed(self, *, build_id, error: BaseException): ...


class NoopHooks:
    def build_start(self, **_):
        pass

    def state(self, **_):
        pass

    def search_start(self, **_):
        pass

    def candidate_scored(self, *_, **__):
        pass

    def candidate_failed(self, *_, **__):
        pass

    def build_end(self, *_, **__):
        pass

    def build_failed(self, **_):
        pass
