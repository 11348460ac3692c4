"""
Least-squares condition number estimation.

Used only to validate the solvers against each other, never on the
production solve path.
"""

import math
from typing import Tuple

import numpy as np

from .._utils import check_matrix
from ..exceptions import DegenerateInputError


def extreme_singular_values(A: np.ndarray, backend=None) -> Tuple[float, float]:
    """
    The (largest, smallest) singular values of A.

    Returned separately rather than as a quotient, so the largest value
    is still visible when the smallest is zero.
    """
    check_matrix(A, 'A')
    if backend is None:
        from .._backends import get_backend
        backend = get_backend('cpu')
    sigmas = backend.singular_values(A)
    return float(sigmas[0]), float(sigmas[-1])


def least_squares_condition_number(
    A: np.ndarray,
    b: np.ndarray,
    residual_norm: float,
    backend=None,
) -> float:
    """
    Normwise 2-norm condition number of the least-squares problem.

    See Section 3.3 of J. W. Demmel, "Applied Numerical Linear Algebra".

    Parameters
    ----------
    A : ndarray, shape (m, n)
        Matrix of the least-squares problem
    b : ndarray, shape (m, k)
        Right-hand side
    residual_norm : float
        Residual norm from a known good (forward stable) solver

    Returns
    -------
    float
        2 kappa / cos(theta) + tan(theta) kappa^2, possibly +inf

    Raises
    ------
    DegenerateInputError
        If A is rank deficient (smallest singular value is zero) or b is zero
    """
    sigma_max, sigma_min = extreme_singular_values(A, backend=backend)

    # Our solvers assume that H has full rank
    if sigma_min == 0:
        raise DegenerateInputError(
            "The test matrix is rank deficient; the SVD reports that its "
            "smallest singular value is zero."
        )
    A_cond = sigma_max / sigma_min

    # theta is the angle between b and A x
    b_norm = float(np.linalg.norm(b))
    if b_norm == 0:
        raise DegenerateInputError("The right-hand side of the test problem is zero.")
    sin_theta = residual_norm / b_norm

    # sin_theta > 1 is impossible in exact arithmetic but not in floating point
    cos_theta = 0.0 if sin_theta > 1 else math.sqrt(1 - sin_theta * sin_theta)
    if cos_theta == 0:
        # b is orthogonal to range(A): the condition number is infinite
        return math.inf
    tan_theta = sin_theta / cos_theta

    return 2 * A_cond / cos_theta + tan_theta * A_cond * A_cond
