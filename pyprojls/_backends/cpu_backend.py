"""
CPU backend using NumPy + SciPy.

This is the reference implementation the other backends are checked against.
"""

import numpy as np
from scipy.linalg import lstsq, solve_triangular, svdvals
from typing import Tuple

from .base import BackendBase
from ..exceptions import LogicError


class CPUBackend(BackendBase):
    """
    CPU backend using NumPy + SciPy (LAPACK).

    Works in the precision of its inputs (float32/64, complex64/128).
    """

    def __init__(self):
        self.name = "cpu"

    def solve_triangular(self, R: np.ndarray, b: np.ndarray) -> np.ndarray:
        """Fast LAPACK triangular solve. No rank checks."""
        try:
            return solve_triangular(R, b, lower=False, check_finite=False)
        except np.linalg.LinAlgError as exc:
            raise LogicError(
                f"Triangular solve failed: {exc}.  The R factor is singular; "
                f"use robustness=1 or robustness=2 to detect rank deficiency."
            ) from exc

    def lstsq(self, A: np.ndarray, b: np.ndarray) -> np.ndarray:
        """General dense least-squares solve."""
        try:
            x, _, _, _ = lstsq(A, b, check_finite=False)
        except (np.linalg.LinAlgError, ValueError) as exc:
            raise LogicError(
                f"Solving projected least-squares problem with LAPACK failed "
                f"for a {A.shape[0]} x {A.shape[1]} matrix: {exc}"
            ) from exc
        return x

    def lstsq_min_norm(
        self,
        A: np.ndarray,
        b: np.ndarray,
        rcond: float
    ) -> Tuple[np.ndarray, int]:
        """SVD least-squares solve (_GELSS) on a private copy of A."""
        try:
            x, _, rank, _ = lstsq(
                A, b,
                cond=rcond,
                check_finite=False,
                lapack_driver='gelss'
            )
        except (np.linalg.LinAlgError, ValueError) as exc:
            raise LogicError(f"_GELSS failed: {exc}") from exc
        return x, int(rank)

    def singular_values(self, A: np.ndarray) -> np.ndarray:
        """Singular values via LAPACK _GESDD/_GESVD."""
        try:
            return svdvals(A, check_finite=False)
        except (np.linalg.LinAlgError, ValueError) as exc:
            raise LogicError(f"LAPACK _GESVD failed: {exc}") from exc

    def get_device_info(self) -> dict:
        """Get backend information."""
        import scipy
        return {
            'backend': 'cpu',
            'device': 'cpu',
            'library': f'NumPy {np.__version__}, SciPy {scipy.__version__}',
        }
