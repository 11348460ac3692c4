"""
Abstract base classes for backends.

Defines the dense linear algebra interface all backends must implement.
Backends take and return NumPy arrays; any conversion to native types
happens only at entry/exit.
"""

from abc import ABC, abstractmethod
import numpy as np
from typing import Tuple


class BackendBase(ABC):
    """Abstract base class for all backends."""

    name = "base"

    @abstractmethod
    def solve_triangular(self, R: np.ndarray, b: np.ndarray) -> np.ndarray:
        """
        Solve R x = b for square upper triangular R (BLAS _TRSM).

        No rank checks.

        Parameters
        ----------
        R : ndarray, shape (n, n)
            Upper triangular matrix (strict lower part ignored)
        b : ndarray, shape (n, k)
            Right-hand side(s)

        Returns
        -------
        x : ndarray, shape (n, k)
        """
        pass

    @abstractmethod
    def lstsq(self, A: np.ndarray, b: np.ndarray) -> np.ndarray:
        """
        Solve min ||A x - b||_2 for full-rank A with m >= n (LAPACK _GELS).

        Returns
        -------
        x : ndarray, shape (n, k)
        """
        pass

    @abstractmethod
    def lstsq_min_norm(
        self,
        A: np.ndarray,
        b: np.ndarray,
        rcond: float
    ) -> Tuple[np.ndarray, int]:
        """
        Minimum-norm least-squares solution via the SVD (LAPACK _GELSS).

        Singular values s_i <= rcond * s_max are treated as zero.

        Returns
        -------
        (x, rank)
        """
        pass

    @abstractmethod
    def singular_values(self, A: np.ndarray) -> np.ndarray:
        """All singular values of A, in descending order (LAPACK _GESVD)."""
        pass

    @abstractmethod
    def get_device_info(self) -> dict:
        """Get backend information."""
        pass
