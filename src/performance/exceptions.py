"""Error taxonomy of the performance engine.

An empty scope is not an error: it is reported through
``ScopeResult.is_empty`` and yields empty or zeroed payloads.
"""


class PerformanceError(Exception):
    """Base class for performance engine errors."""


class ScopeViolation(PerformanceError):
    """The caller's role cannot access the requested data."""


class InvalidFilter(PerformanceError):
    """A filter or target value is malformed; nothing was aggregated or written."""

    def __init__(self, message, field=None):
        super().__init__(message)
        self.field = field

    def as_dict(self):
        return {self.field or "detail": str(self)}


class TerritoryNotFound(PerformanceError):
    """The requested territory does not exist."""


class UpstreamFetchFailure(PerformanceError):
    """A data collaborator failed; the aggregation for this request is aborted."""
