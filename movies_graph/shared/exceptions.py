"""
Custom exception hierarchy for the movies graph service.

All service errors inherit from MoviesGraphError so they can be caught
uniformly at the gateway level and turned into an opaque error payload.
"""


class MoviesGraphError(Exception):
    """Base exception for all service errors."""

    def __init__(self, message: str, component: str = "unknown"):
        self.component = component
        super().__init__(f"[{component}] {message}")


class ValidationError(MoviesGraphError):
    """A request parameter cannot be interpreted as its declared type."""

    def __init__(self, message: str, parameter: str | None = None, component: str = "request"):
        self.parameter = parameter
        super().__init__(message, component=component)


class StoreError(MoviesGraphError):
    """Query execution or transport failure at the Neo4j boundary."""

    def __init__(self, message: str):
        super().__init__(message, component="store")


class DatabaseConnectionError(StoreError):
    """Failed to connect to Neo4j."""
    pass


class NotFoundError(MoviesGraphError):
    """A single-record lookup matched nothing."""

    def __init__(self, message: str):
        super().__init__(message, component="movies")


class RequestTimeoutError(MoviesGraphError):
    """The request did not finish within the configured timeout."""

    def __init__(self, message: str):
        super().__init__(message, component="gateway")
