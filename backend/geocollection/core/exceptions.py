class GeometryError(ValueError):
    """Raised when a geometry cannot be constructed from its input."""


class InvalidCoordinateDimension(GeometryError):
    pass


class InconsistentDimensionality(GeometryError):
    pass


class UnclosedRing(GeometryError):
    pass


class InsufficientCoordinates(GeometryError):
    pass


class WKTParseError(GeometryError):
    pass


class CrsMismatch(ValueError):
    pass


class PersistenceError(Exception):
    pass


class ConnectionUnavailable(PersistenceError):
    pass


class QueryFailure(PersistenceError):
    pass


class RowNotFound(QueryFailure):
    """Raised when a read query returns no rows."""
