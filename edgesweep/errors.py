"""
Exceptions raised by the edge sweep.
"""


class SweepError(RuntimeError):
    """Base class for edge sweep failures."""


class InvalidConfigurationError(SweepError, ValueError):
    """Raised when a sweep is started without a usable intersection collaborator."""


class EngineStateError(SweepError):
    """Raised when an engine is driven out of order or reused after a sweep."""
