"""Exceptions raised by the burden analyses."""


class BurdenAnalysisError(Exception):
    """Base class for analysis failures."""
    pass


class DataIntegrityError(BurdenAnalysisError):
    """Raised when input tables disagree (e.g. samples without a status label)."""
    pass


class ModelFitError(BurdenAnalysisError):
    """Raised when a regression cannot be fit or yields non-finite statistics."""
    pass


class InsufficientSampleError(BurdenAnalysisError):
    """Raised when a group is smaller than the requested draw size."""
    pass
