"""
Upper triangular solves for the projected least-squares problem.

Three robustness levels trade speed for rank detection:

0. Direct triangular solve, no rank checks.
1. Scaled back-substitution in the manner of LAPACK's _LATRS, with
   rudimentary rank detection from the diagonal of R and the column norms.
2. Minimum-norm least-squares solution via the SVD (_GELSS).
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

import numpy as np

from .._utils import check_matrix
from ..exceptions import InvalidArgumentError
from .scalar_traits import scalar_traits

logger = logging.getLogger(__name__)


class Robustness(IntEnum):
    """Robustness level of the triangular solve."""
    NONE = 0
    SCALED = 1
    SVD = 2


@dataclass
class RankInfo:
    """Rank detected by a triangular solve."""
    rank: int                # Detected rank (N if no check was done)
    rank_deficient: bool     # Whether rank deficiency was detected
    scale: float = 1.0       # Smallest robustness-1 scale factor (1.0 at other levels)


def as_robustness(robustness) -> Robustness:
    """Validate and convert a robustness level."""
    try:
        return Robustness(robustness)
    except ValueError as exc:
        raise InvalidArgumentError(f"Invalid robustness value {robustness}.") from exc


def column_norms(R):
    """
    1-norms of the strictly upper triangular part of each column of R.

    This is the CNORM array _LATRS computes when NORMIN = 'N'.
    """
    N = R.shape[1]
    cnorm = np.zeros(N, dtype=np.abs(R[:0, :0]).dtype)
    for j in range(1, N):
        cnorm[j] = np.sum(np.abs(R[:j, j]))
    return cnorm


def scaled_upper_triangular_solve(R, b, cnorm=None):
    """
    Solve R x = scale * b, choosing scale <= 1 so that x cannot overflow.

    Mirrors LAPACK's _LATRS('U', 'N', 'N'). If a diagonal entry of R is
    exactly zero, scale is set to 0 and x is a nonzero vector with R x = 0.

    Parameters
    ----------
    R : ndarray, shape (n, n)
        Upper triangular matrix
    b : ndarray, shape (n,)
        Right-hand side (not modified)
    cnorm : ndarray, shape (n,), optional
        Precomputed column norms, see ``column_norms``

    Returns
    -------
    (x, scale, cnorm)
    """
    N = R.shape[1]
    if cnorm is None:
        cnorm = column_norms(R)
    x = np.array(b, dtype=np.result_type(R, b), copy=True)
    finfo = np.finfo(cnorm.dtype)
    bignum = float(finfo.eps / finfo.tiny)
    scale = 1.0

    for j in range(N - 1, -1, -1):
        r_jj = R[j, j]
        abs_r = float(np.abs(r_jj))
        abs_x = float(np.abs(x[j]))
        if abs_r == 0:
            # R is singular: return a null vector of R
            x[:] = 0
            x[j] = 1
            scale = 0.0
        else:
            if abs_r < 1 and abs_x > abs_r * bignum:
                factor = (abs_r * bignum) / abs_x
                x *= factor
                scale *= factor
            x[j] = x[j] / r_jj

        abs_x = float(np.abs(x[j]))
        if j > 0:
            x_max = float(np.max(np.abs(x[:j])))
            if abs_x > 1 and cnorm[j] > (bignum - x_max) / abs_x:
                factor = 0.5 / abs_x
                x *= factor
                scale *= factor
            x[:j] -= x[j] * R[:j, j]

    return x, scale, cnorm


def solve_upper_triangular_system(
    x: np.ndarray,
    R: np.ndarray,
    b: np.ndarray,
    robustness=Robustness.NONE,
    backend=None,
) -> RankInfo:
    """
    Solve the square upper triangular linear system R x = b.

    The number of columns N of R is the dimension of the system, so R may
    have more rows than columns; the extra rows are ignored. The solution
    overwrites x[:N]. If b has more columns than x, the extra columns of b
    are ignored. R is never modified.

    At robustness 1, a column whose solution would overflow x's dtype is
    left scaled (x holds scale * solution), the problem is reported as
    rank deficient, and the smallest scale is returned in ``RankInfo.scale``.

    Parameters
    ----------
    x : ndarray, shape (>= N, k)
        Output
    R : ndarray, shape (>= N, N)
        Upper triangular factor
    b : ndarray, shape (>= N, >= k)
        Right-hand side(s)
    robustness : int or Robustness
        0, 1 or 2, see module docstring
    backend : BackendBase, optional
        Dense linear algebra backend (CPU by default)

    Returns
    -------
    RankInfo
        Detected rank, whether rank deficiency was found, and the scale

    Raises
    ------
    InvalidArgumentError
        On incompatible dimensions or an invalid robustness level
    LogicError
        If the underlying LAPACK routine fails
    """
    check_matrix(x, 'x')
    check_matrix(R, 'R')
    check_matrix(b, 'b')
    M, N = R.shape
    nrhs = x.shape[1]

    if nrhs > b.shape[1]:
        raise InvalidArgumentError(
            f"The solution vector x has more columns than the right-hand "
            f"side vector b.  x has {x.shape[1]} columns and b has "
            f"{b.shape[1]} columns."
        )
    if b.shape[0] < N:
        raise InvalidArgumentError(
            f"The right-hand side vector b has only {b.shape[0]} rows, but "
            f"needs at least {N} rows to match the matrix."
        )
    if x.shape[0] < N:
        raise InvalidArgumentError(
            f"The solution vector x has only {x.shape[0]} rows, but needs "
            f"at least {N} rows to match the matrix."
        )
    if M < N:
        raise InvalidArgumentError(
            f"R is {M} x {N}, but solveUpperTriangularSystem needs R to have "
            f"at least as many rows as columns."
        )
    robustness = as_robustness(robustness)

    if backend is None:
        from .._backends import get_backend
        backend = get_backend('cpu')

    R_square = R[:N, :N]
    rhs = b[:N, :nrhs]
    detected_rank = N
    rank_deficient = False
    min_scale = 1.0

    if robustness == Robustness.NONE:
        x[:N, :] = backend.solve_triangular(R_square, rhs)

    elif robustness == Robustness.SCALED:
        cnorm = column_norms(R_square)
        for j in range(nrhs):
            x_j, scale, cnorm = scaled_upper_triangular_solve(R_square, rhs[:, j], cnorm)
            min_scale = min(min_scale, scale)
            if scale == 0:
                # Singular; x_j is a null vector of R
                rank_deficient = True
                x[:N, j] = x_j
                continue
            with np.errstate(over='ignore', invalid='ignore'):
                unscaled = (x_j / np.float64(scale)).astype(x.dtype, copy=False)
            if np.all(np.isfinite(unscaled)):
                x[:N, j] = unscaled
            else:
                # The true solution is not representable; keep scale * x
                rank_deficient = True
                x[:N, j] = x_j

        rank = N
        for j in range(N):
            if R_square[j, j] == 0 and (j == 0 or cnorm[j] == 0):
                rank -= 1
        if rank < N:
            rank_deficient = True
        detected_rank = rank

    else:
        # Scalar's machine precision, not the magnitude type's
        rank_tolerance = scalar_traits(np.result_type(R_square, rhs)).eps
        solution, detected_rank = backend.lstsq_min_norm(R_square.copy(), rhs, rank_tolerance)
        x[:N, :] = solution
        rank_deficient = detected_rank < N

    if rank_deficient:
        logger.debug(
            "Rank deficiency detected (robustness=%d): rank %d of %d, scale %g",
            int(robustness), detected_rank, N, min_scale
        )
    return RankInfo(rank=detected_rank, rank_deficient=rank_deficient, scale=min_scale)


def solve_givens(y, R, z, cur_col, robustness=Robustness.NONE, backend=None) -> RankInfo:
    """
    Solve the projected least-squares problem after Givens updates.

    Call after ``update_column_givens`` with the same cur_col, or after
    ``update_columns_givens`` with cur_col = end_col. Solves the leading
    (cur_col+1) x (cur_col+1) triangular system R y = z.
    """
    if cur_col < 0:
        raise InvalidArgumentError(f"curCol = {cur_col} < 0.")
    num_cols = cur_col + 1
    if R.shape[0] < num_cols or R.shape[1] < num_cols:
        raise InvalidArgumentError(
            f"curCol = {cur_col} is out of range for a "
            f"{R.shape[0]} x {R.shape[1]} R factor."
        )
    return solve_upper_triangular_system(
        y[:num_cols, :],
        R[:num_cols, :num_cols],
        z[:num_cols, :],
        robustness=robustness,
        backend=backend,
    )
