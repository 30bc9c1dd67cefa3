# route_sketch/app/session.py
"""
Application shell around the fitting core.

Owns the selected shape, the last completed route and the status line.
Each build is tagged with a fresh build id; a build whose id is no longer
current is stale and its result is dropped without touching shell state.
"""

import numbers
from dataclasses import dataclass, field

from route_sketch.domain.entities.geography import GeoPoint
from route_sketch.domain.entities.route import FinalRoute
from route_sketch.domain.errors import BuildCancelled, RouteSketchError
from route_sketch.domain.fitting.fitting_assembly import status_line
from route_sketch.domain.fitting.fitting_geometry import miles_to_meters
from route_sketch.domain.fitting.fitting_search import FitSearchEngine
from route_sketch.domain.fitting.fitting_shapes import strokes_for


class BuildTicket:
    """Cancel token bound to one build id."""

    def __init__(self, session: "RouteSession", build_id: int):
        self._session, self.build_id = session, build_id

    @property
    def cancelled(self) -> bool:
        return self._session.current_build_id != self.build_id


@dataclass
class RouteSession:
    engine: FitSearchEngine
    shape: str = "hi"
    last_route: FinalRoute | None = None
    status: str = "Idle"
    current_build_id: int = field(default=0, init=False)

    def select_shape(self, name: str) -> None:
        strokes_for(name)  # raises InvalidInput for unknown names
        self.shape = name

    def start(self) -> BuildTicket:
        # supersede any in-flight build and clear what it drew
        self.current_build_id += 1
        self.last_route = None
        return BuildTicket(self, self.current_build_id)

    def cancel(self) -> None:
        self.current_build_id += 1

    def build(self, target_m, *, origin: GeoPoint | None = None) -> FinalRoute | None:
        ticket = self.start()
        self.status = "Searching placement + orientation…"
        try:
            route = self.engine.build(
                self.shape,
                target_m,
                origin=origin,
                build_id=ticket.build_id,
                cancel=ticket,
            )
        except BuildCancelled:
            return None
        except RouteSketchError as exc:
            if not ticket.cancelled:
                self.status = str(exc)
            return None

        if ticket.cancelled:
            return None
        self.last_route = route
        self.status = status_line(route)
        return route

    def build_miles(self, miles, *, origin: GeoPoint | None = None) -> FinalRoute | None:
        numeric = isinstance(miles, numbers.Real) and not isinstance(miles, bool)
        target = miles_to_meters(float(miles)) if numeric else miles
        return self.build(target, origin=origin)
