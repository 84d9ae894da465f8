"""Errors surfaced by the journey engine."""


class EngineError(Exception):
    """Base class for failures that must be acknowledged by the user"""


class LocationUnavailable(EngineError):
    """No starting coordinate could be resolved"""

    def __init__(self, message: str = "Starting location unavailable"):
        super().__init__(message)


class RouteSynthesisFailed(EngineError):
    """A route satisfying the plan invariants could not be produced"""
