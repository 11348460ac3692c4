"""
Exception hierarchy.

Every failure is raised immediately; nothing here is retried.
"""


class ProjectedLeastSquaresError(Exception):
    """Base class for all pyprojls errors."""
    pass


class InvalidArgumentError(ProjectedLeastSquaresError, ValueError):
    """Malformed dimensions, inverted column ranges, bad robustness level."""
    pass


class LogicError(ProjectedLeastSquaresError, RuntimeError):
    """A LAPACK routine or workspace step returned an unexpected status."""
    pass


class DegenerateInputError(ProjectedLeastSquaresError, RuntimeError):
    """Degenerate validation input (rank-deficient test matrix, broken RNG)."""
    pass


class RankDeficiencyWarning(UserWarning):
    """A robust solve detected a rank-deficient R factor."""
    pass


__all__ = [
    'ProjectedLeastSquaresError',
    'InvalidArgumentError',
    'LogicError',
    'DegenerateInputError',
    'RankDeficiencyWarning',
]
