"""
Incremental QR factorization of GMRES' upper Hessenberg matrix.

The R factor is built one column (or one panel of columns) at a time with
Givens rotations. The Q factor is never formed: it is stored implicitly as
the sequence of (cosine, sine) pairs, which are also applied to the
right-hand side z as they are computed.

H is read but never modified, so a GMRES implementation can backtrack and
refactor from any earlier column.
"""

import logging

import numpy as np

from .._utils import check_matrix, check_column_range
from ..exceptions import InvalidArgumentError
from .givens import apply_givens_rotation, compute_givens_rotation, rotate_rows

logger = logging.getLogger(__name__)


def _check_update_args(H, R, z, cosines, sines, end_col):
    check_matrix(H, 'H')
    check_matrix(R, 'R')
    check_matrix(z, 'z')
    if R.shape != H.shape:
        raise InvalidArgumentError(
            f"R must have the same dimensions as H.  H is {H.shape[0]} x "
            f"{H.shape[1]}, but R is {R.shape[0]} x {R.shape[1]}."
        )
    if end_col < 0:
        raise InvalidArgumentError(f"curCol = {end_col} < 0.")
    num_rows = end_col + 2
    if num_rows > H.shape[0] or end_col >= H.shape[1]:
        raise InvalidArgumentError(
            f"curCol = {end_col} is out of range for a {H.shape[0]} x "
            f"{H.shape[1]} upper Hessenberg matrix."
        )
    if z.shape[0] < num_rows:
        raise InvalidArgumentError(
            f"The right-hand side z has only {z.shape[0]} rows, but column "
            f"{end_col} needs {num_rows}."
        )
    if len(cosines) <= end_col or len(sines) <= end_col:
        raise InvalidArgumentError(
            f"The rotation arrays have room for {min(len(cosines), len(sines))} "
            f"rotations, but column {end_col} needs {end_col + 1}."
        )


def _factor_column(R, z, cosines, sines, cur_col, first_rotation):
    """
    Finish column cur_col of R: apply rotations [first_rotation, cur_col),
    then compute, store and apply the new rotation. Returns the residual.
    """
    for j in range(first_rotation, cur_col):
        R[j, cur_col], R[j + 1, cur_col] = apply_givens_rotation(
            cosines[j], sines[j], R[j, cur_col], R[j + 1, cur_col]
        )

    cosine, sine, result = compute_givens_rotation(R[cur_col, cur_col], R[cur_col + 1, cur_col])
    cosines[cur_col] = cosine
    sines[cur_col] = sine

    # computeGivensRotation already gives us [x; y] -> [result; 0]
    R[cur_col, cur_col] = result
    R[cur_col + 1, cur_col] = 0

    # z may have more than one column
    rotate_rows(z, cur_col, cosine, sine)

    # The last entry of z is the nonzero part of the residual
    residual = float(np.abs(z[cur_col + 1, 0]))
    logger.debug("updated column %d: (cos, sin) = (%s, %s), residual = %.6e",
                 cur_col, cosine, sine, residual)
    return residual


def update_column_givens(H, R, z, cosines, sines, cur_col):
    """
    Update column cur_col of the QR factorization of H.

    Columns 0 .. cur_col-1 must already have been updated, in order.

    Parameters
    ----------
    H : ndarray, shape (m+1, m)
        Upper Hessenberg matrix. Only H[:cur_col+2, cur_col] is read.
    R : ndarray, shape (m+1, m)
        Incrementally computed upper triangular factor (in/out)
    z : ndarray, shape (m+1, k)
        Right-hand side of the projected problem (in/out)
    cosines, sines : ndarray, shape (>= m,)
        Rotation history (in/out); entry cur_col is written
    cur_col : int
        Zero-based index of the column to update

    Returns
    -------
    float
        2-norm of the residual of the projected least-squares problem,
        assuming R y = z is then solved exactly.
    """
    _check_update_args(H, R, z, cosines, sines, cur_col)
    num_rows = cur_col + 2

    # 1. Copy the current column from H into R, where it will be modified
    R[:num_rows, cur_col] = H[:num_rows, cur_col]

    # 2-5. Previous rotations, then the new one (also applied to z)
    return _factor_column(R, z, cosines, sines, cur_col, first_rotation=0)


def update_columns_givens(H, R, z, cosines, sines, start_col, end_col):
    """
    Update columns [start_col, end_col] (inclusive), one column at a time.

    Returns
    -------
    float
        Residual norm after the last column
    """
    check_column_range(start_col, end_col, name='updateColumnsGivens')
    residual = 0.0
    for cur_col in range(start_col, end_col + 1):
        residual = update_column_givens(H, R, z, cosines, sines, cur_col)
    return residual


def update_panel_givens(H, R, z, cosines, sines, start_col, end_col):
    """
    Left-looking panel update of columns [start_col, end_col] (inclusive).

    Columns to the right of the panel are not touched. The whole panel is
    copied from H at once and the rotations from earlier panels are applied
    to all of its columns together; then each panel column is finished in
    turn with the rotations computed inside the panel. The arithmetic per
    entry is that of ``update_columns_givens``.

    Returns
    -------
    float
        Residual norm after the last column
    """
    check_column_range(start_col, end_col, name='updatePanelGivens')
    _check_update_args(H, R, z, cosines, sines, end_col)
    num_rows = end_col + 2

    # 1. Copy the panel from H into R
    R[:num_rows, start_col:end_col + 1] = H[:num_rows, start_col:end_col + 1]

    # 2. Apply the rotations from previous panels to the whole panel
    panel = R[:num_rows, start_col:end_col + 1]
    for j in range(start_col):
        rotate_rows(panel, j, cosines[j], sines[j])

    # 3. Factor each panel column with the rotations from this panel
    residual = 0.0
    for cur_col in range(start_col, end_col + 1):
        residual = _factor_column(R, z, cosines, sines, cur_col, first_rotation=start_col)
    return residual
