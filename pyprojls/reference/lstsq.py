"""
Reference solve of the projected least-squares problem.

Solves the whole problem at once with a general dense least-squares
solver. Inefficient, but independent of the Givens path, which makes it
the baseline the incremental solver is checked against.
"""

import numpy as np

from .._utils import check_matrix
from ..exceptions import InvalidArgumentError


def solve_lapack(H, R, y, z, cur_col, backend=None) -> float:
    """
    Solve min ||H y - z||_2 on the leading (cur_col+2) x (cur_col+1) block.

    Parameters
    ----------
    H : ndarray, shape (m+1, m)
        Upper Hessenberg matrix (not modified)
    R : ndarray, same shape as H
        The leading block of H is copied here
    y : ndarray, shape (m+1, k)
        y[:cur_col+1] receives the solution
    z : ndarray, shape (m+1, >= k)
        Right-hand side (not modified)
    cur_col : int
        Zero-based index of the last column of the problem
    backend : BackendBase, optional

    Returns
    -------
    float
        Residual norm ||H y - z|| (Frobenius norm for several right-hand sides)
    """
    for name, A in (('H', H), ('R', R), ('y', y), ('z', z)):
        check_matrix(A, name)
    num_rows = cur_col + 2
    num_cols = cur_col + 1
    if cur_col < 0 or num_rows > H.shape[0] or num_cols > H.shape[1]:
        raise InvalidArgumentError(
            f"curCol = {cur_col} is out of range for a {H.shape[0]} x "
            f"{H.shape[1]} matrix."
        )
    if R.shape[0] < num_rows or R.shape[1] < num_cols:
        raise InvalidArgumentError(
            f"R is {R.shape[0]} x {R.shape[1]}, but needs at least "
            f"{num_rows} x {num_cols}."
        )
    if y.shape[0] < num_cols or z.shape[0] < num_rows or y.shape[1] > z.shape[1]:
        raise InvalidArgumentError(
            f"y ({y.shape[0]} x {y.shape[1]}) and z ({z.shape[0]} x "
            f"{z.shape[1]}) do not fit a {num_rows} x {num_cols} problem."
        )

    if backend is None:
        from .._backends import get_backend
        backend = get_backend('cpu')

    H_view = H[:num_rows, :num_cols]
    z_view = z[:num_rows, :y.shape[1]]
    R[:num_rows, :num_cols] = H_view

    solution = backend.lstsq(H_view, z_view)
    y[:num_cols, :] = solution

    return float(np.linalg.norm(z_view - H_view @ solution))
