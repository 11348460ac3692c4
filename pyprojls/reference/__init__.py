"""
Reference solver and validation harness.

The batch least-squares solve is the baseline every incremental path is
checked against.
"""

from .lstsq import solve_lapack
from .validation import (
    UpdateColumnReport,
    check_givens_rotation,
    check_update_column,
    format_matrix,
    least_squares_residual_norm,
    make_random_problem,
    solution_error,
    validation_table,
)

__all__ = [
    "solve_lapack",
    "UpdateColumnReport",
    "check_givens_rotation",
    "check_update_column",
    "format_matrix",
    "least_squares_residual_norm",
    "make_random_problem",
    "solution_error",
    "validation_table",
]
