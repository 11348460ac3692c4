"""
Low-level operations on small, local dense matrices.

Thin wrappers around NumPy / SciPy BLAS-3 style kernels. Output arguments are
updated in place, so callers can pass sub-block views of larger buffers. No
output view may share memory with an input view of the same call.
"""

import numpy as np
from scipy.linalg import solve_triangular

from .._utils import check_matrix
from ..exceptions import InvalidArgumentError, LogicError


def block(A, num_rows, num_cols, row=0, col=0):
    """
    View of the num_rows x num_cols block of A starting at (row, col).

    Raises
    ------
    InvalidArgumentError
        If the block does not fit inside A
    """
    check_matrix(A)
    if min(num_rows, num_cols, row, col) < 0:
        raise InvalidArgumentError(
            f"Invalid block ({num_rows} x {num_cols} at ({row}, {col}))."
        )
    if row + num_rows > A.shape[0] or col + num_cols > A.shape[1]:
        raise InvalidArgumentError(
            f"Block of size {num_rows} x {num_cols} at ({row}, {col}) does not "
            f"fit in a {A.shape[0]} x {A.shape[1]} matrix."
        )
    return A[row:row + num_rows, col:col + num_cols]


def check_no_alias(out, *inputs, op='operation'):
    """Reject calls where the output view overlaps any input view."""
    for arg in inputs:
        if np.shares_memory(out, arg):
            raise InvalidArgumentError(
                f"{op}: the output matrix aliases one of the input matrices."
            )


def _check_same_shape(A, B, op):
    if A.shape != B.shape:
        raise InvalidArgumentError(
            f"{op}: The input matrices A and B have incompatible dimensions.  "
            f"A is {A.shape[0]} x {A.shape[1]}, but B is "
            f"{B.shape[0]} x {B.shape[1]}."
        )


def mat_scale(A, alpha):
    """A := alpha * A."""
    A *= alpha


def mat_add(A, B):
    """A := A + B."""
    _check_same_shape(A, B, 'matAdd')
    check_no_alias(A, B, op='matAdd')
    A += B


def mat_sub(A, B):
    """A := A - B."""
    _check_same_shape(A, B, 'matSub')
    check_no_alias(A, B, op='matSub')
    A -= B


def right_upper_tri_solve(B, R):
    """
    In Matlab notation: B = B / R, where R is square upper triangular.

    Only the upper triangle of R is referenced.
    """
    check_matrix(B, 'B')
    check_matrix(R, 'R')
    if R.shape[0] != R.shape[1] or B.shape[1] != R.shape[0]:
        raise InvalidArgumentError(
            f"rightUpperTriSolve: R and B have incompatible dimensions.  "
            f"B has {B.shape[1]} columns, but R is {R.shape[0]} x {R.shape[1]}."
        )
    check_no_alias(B, R, op='rightUpperTriSolve')
    if B.size == 0:
        return
    try:
        # X R = B  <=>  R^T X^T = B^T
        X_t = solve_triangular(R, B.T, trans='T', lower=False, check_finite=False)
    except np.linalg.LinAlgError as exc:
        raise LogicError(f"rightUpperTriSolve: triangular solve failed: {exc}") from exc
    B[...] = X_t.T


def mat_mat_mult(beta, C, alpha, A, B):
    """
    C := beta*C + alpha*A*B.

    C must not alias A or B.
    """
    if A.shape[1] != B.shape[0]:
        raise InvalidArgumentError(
            f"matMatMult: The input matrices A and B have incompatible "
            f"dimensions.  A is {A.shape[0]} x {A.shape[1]}, but B is "
            f"{B.shape[0]} x {B.shape[1]}."
        )
    if A.shape[0] != C.shape[0]:
        raise InvalidArgumentError(
            f"matMatMult: The input matrix A and the output matrix C have "
            f"incompatible dimensions.  A has {A.shape[0]} rows, but C has "
            f"{C.shape[0]} rows."
        )
    if B.shape[1] != C.shape[1]:
        raise InvalidArgumentError(
            f"matMatMult: The input matrix B and the output matrix C have "
            f"incompatible dimensions.  B has {B.shape[1]} columns, but C has "
            f"{C.shape[1]} columns."
        )
    check_no_alias(C, A, B, op='matMatMult')
    product = A @ B
    if beta == 0:
        # beta = 0 overwrites C, even if it held NaN
        C[...] = alpha * product
    else:
        C[...] = beta * C + alpha * product
