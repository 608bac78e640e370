class RouteSequencerError(Exception):
    """Base exception for route sequencing errors."""


class InvalidCoordinateError(RouteSequencerError):
    """Raised when a coordinate is missing or outside the valid range."""


class DuplicateStopError(RouteSequencerError):
    """Raised when two stops share the same identity."""


class UnknownStrategyError(RouteSequencerError):
    """Raised when the construction strategy is not recognised."""


class ExternalServiceError(RouteSequencerError):
    """Raised when an upstream API call fails."""


class InvalidLocationError(RouteSequencerError):
    """Raised when an address query cannot be resolved to a coordinate."""
