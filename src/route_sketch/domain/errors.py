# route_sketch/domain/errors.py


class RouteSketchError(Exception):
    """Base for every error the fitting core raises."""


class InvalidInput(RouteSketchError, ValueError):
    pass


class LocationUnavailable(RouteSketchError):
    pass


class OracleError(RouteSketchError):
    def __init__(self, message: str, status: int | str | None = None):
        super().__init__(message)
        self.message = message
        self.status = status

    def __str__(self) -> str:
        if self.status is None:
            return self.message
        return f"{self.message} (status={self.status})"


class NoMatch(OracleError):
    """The matcher accepted the trace but found no plausible road path."""


class InsufficientData(RouteSketchError):
    pass


class NoFeasiblePlacement(RouteSketchError):
    pass


class BuildCancelled(RouteSketchError):
    pass
