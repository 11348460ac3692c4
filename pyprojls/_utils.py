"""
Utility functions.
"""

import numpy as np

from .exceptions import InvalidArgumentError


def check_matrix(A, name='A'):
    """Validate a dense matrix argument (no copy, no finiteness check)."""
    if not isinstance(A, np.ndarray):
        raise InvalidArgumentError(f"{name} must be a numpy array, got {type(A).__name__}")
    if A.ndim != 2:
        raise InvalidArgumentError(f"{name} must be 2-dimensional, got ndim={A.ndim}")
    return A


def check_column_range(start_col, end_col, name='updateColumns'):
    """Validate an inclusive, zero-based column range."""
    if start_col < 0:
        raise InvalidArgumentError(f"{name}: startCol = {start_col} < 0.")
    if start_col > end_col:
        raise InvalidArgumentError(
            f"{name}: startCol = {start_col} > endCol = {end_col}."
        )
