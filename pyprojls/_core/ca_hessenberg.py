"""
Reconstruction of the upper Hessenberg matrix for CA-GMRES.

Communication-avoiding GMRES generates S Krylov basis vectors per outer
iteration with a matrix powers kernel and orthogonalizes them as a block.
The Arnoldi coefficients H are then not available directly; they are
recovered from the R factor of the Krylov basis and the change-of-basis
matrix B of the powers kernel, after which the Givens update proceeds on H
as usual.

Notation for the outer iteration that produces columns [M, M+S) of H
(M = start_col, S = end_col - start_col + 1):

    V_k           = [q_M, v_1, ..., v_{S-1}]   (starting vector first)
    underline V_k = [V_k, v_S],                  A V_k = underline V_k B
    underline V_k = Q[:, :M] R[:M, M:M+S+1] + Q[:, M:M+S+1] R[M:M+S+1, M:M+S+1]

Here R is the R factor of the Krylov basis, not the R factor of H.
"""

import numpy as np

from .._utils import check_matrix, check_column_range
from ..exceptions import InvalidArgumentError
from .dense_ops import (
    block,
    check_no_alias,
    mat_add,
    mat_mat_mult,
    mat_scale,
    mat_sub,
    right_upper_tri_solve,
)


def update_upper_hessenberg_ca(H, R, B, start_col, end_col):
    """
    Fill columns [start_col, end_col] of H from the Krylov basis R factor.

    After this call, H is ready for ``update_columns_givens``.

    Parameters
    ----------
    H : ndarray, shape (>= end_col+2, >= end_col+1)
        Upper Hessenberg matrix (in/out). Columns before start_col must
        already hold the previous outer iterations' coefficients.
    R : ndarray, shape (>= end_col+2, >= end_col+2)
        Upper triangular orthogonalization coefficients of the Krylov basis
    B : ndarray, shape (>= S+1, >= S)
        Change-of-basis matrix of the matrix powers kernel
    start_col, end_col : int
        Inclusive zero-based range of columns of H to update

    Raises
    ------
    InvalidArgumentError
        On an invalid column range, undersized inputs, or if H shares
        memory with R or B
    """
    check_column_range(start_col, end_col, name='caGmresUpdateUpperHessenberg')
    check_matrix(H, 'H')
    check_matrix(R, 'R')
    check_matrix(B, 'B')
    check_no_alias(H, R, B, op='caGmresUpdateUpperHessenberg')

    S = end_col - start_col + 1
    if H.shape[0] < end_col + 2 or H.shape[1] < end_col + 1:
        raise InvalidArgumentError(
            f"H is {H.shape[0]} x {H.shape[1]}, but columns [{start_col}, "
            f"{end_col}] need at least {end_col + 2} x {end_col + 1}."
        )
    if R.shape[0] < end_col + 2 or R.shape[1] < end_col + 2:
        raise InvalidArgumentError(
            f"R is {R.shape[0]} x {R.shape[1]}, but columns [{start_col}, "
            f"{end_col}] need at least {end_col + 2} x {end_col + 2}."
        )
    if B.shape[0] < S + 1 or B.shape[1] < S:
        raise InvalidArgumentError(
            f"B is {B.shape[0]} x {B.shape[1]}, but must be at least "
            f"{S + 1} x {S}."
        )
    B_k = block(B, S + 1, S)

    if start_col == 0:
        R_underline = block(R, S + 1, S + 1)
        R_k = block(R, S, S)
        H_view = block(H, S + 1, S)

        # H_view := R_underline * B / R_k
        mat_mat_mult(0, H_view, 1, R_underline, B_k)
        right_upper_tri_solve(H_view, R_k)
        return

    M = start_col
    R_km1k_underline = block(R, M, S + 1, 0, M)
    R_km1k = block(R, M, S, 0, M)
    R_k_underline = block(R, S + 1, S + 1, M, M)
    R_k = block(R, S, S, M, M)

    H_km1 = block(H, M, M)
    H_km1k = block(H, M, S, 0, M)
    H_k_underline = block(H, S + 1, S, M, M)
    # Boundary element coupling the previous block to the new one
    h_km1 = H[M, M - 1]

    # T := R_km1k / R_k is needed twice; the solve overwrites its input
    T = np.array(R_km1k, dtype=np.result_type(H, R), copy=True)
    right_upper_tri_solve(T, R_k)
    last_row = T[M - 1:M, :].copy()

    # H_km1k := R_km1k_underline * B_k / R_k - H_km1 * T
    mat_mat_mult(0, H_km1k, -1, H_km1, T)
    temp = np.empty_like(T)
    mat_mat_mult(0, temp, 1, R_km1k_underline, B_k)
    right_upper_tri_solve(temp, R_k)
    mat_add(H_km1k, temp)

    # H_k_underline := R_k_underline * B_k / R_k - h_km1 * e_1 * last_row
    mat_mat_mult(0, H_k_underline, 1, R_k_underline, B_k)
    right_upper_tri_solve(H_k_underline, R_k)
    mat_scale(last_row, h_km1)
    mat_sub(H_k_underline[0:1, :], last_row)
