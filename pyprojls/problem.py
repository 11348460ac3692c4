"""
Container for the data of GMRES' projected least-squares problem.
"""

import numpy as np

from ._core.scalar_traits import scalar_traits
from .exceptions import InvalidArgumentError


class ProjectedLeastSquaresProblem:
    """
    The projected least-squares problem min ||H y - z||_2 of a GMRES solver.

    All buffers are allocated for at most ``max_iterations`` GMRES
    iterations. After the first iteration the problem is 2 x 1; after
    iteration k (zero-based column k) it is (k+2) x (k+1). Entries past the
    current column are undefined until reached.

    Attributes
    ----------
    H : ndarray, shape (max_iterations+1, max_iterations)
        Upper Hessenberg matrix from GMRES. Written only by the caller (or
        the CA-GMRES reconstruction), never by the updates, so a solver can
        backtrack and refactor from any earlier column.
    R : ndarray, same shape as H
        Incrementally computed upper triangular factor of H
    y : ndarray, shape (max_iterations+1, 1)
        Solution of the projected problem (one spare entry)
    z : ndarray, shape (max_iterations+1, 1)
        Current right-hand side, rotated along with R
    cosines, sines : ndarray, shape (max_iterations,)
        Givens rotations computed so far; together they are the Q factor

    Examples
    --------
    >>> problem = ProjectedLeastSquaresProblem(30)
    >>> problem.reset(beta=1.0)
    >>> problem.H[:2, 0] = [0.5, 2.0]   # from the Arnoldi process
    """

    def __init__(self, max_iterations: int, dtype=np.float64):
        """
        Reserve space for a problem of size at most
        (max_iterations+1) x max_iterations.

        Parameters
        ----------
        max_iterations : int
            Maximum number of GMRES iterations (columns of H)
        dtype : dtype-like
            float32, float64, complex64 or complex128
        """
        _check_max_iterations(max_iterations)
        self.traits = scalar_traits(dtype)
        self.H = self._zeros((max_iterations + 1, max_iterations))
        self.R = self._zeros((max_iterations + 1, max_iterations))
        self.y = self._zeros((max_iterations + 1, 1))
        self.z = self._zeros((max_iterations + 1, 1))
        self.cosines = self._zeros(max_iterations)
        self.sines = self._zeros(max_iterations)

    def _zeros(self, shape):
        return np.zeros(shape, dtype=self.traits.dtype)

    @property
    def dtype(self):
        return self.traits.dtype

    @property
    def max_iterations(self) -> int:
        """Current capacity, in columns of H."""
        return self.H.shape[1]

    def reset(self, beta) -> None:
        """
        Restore the right-hand side to beta * e_1.

        Nothing is reallocated, and H, R, the cosines and the sines are left
        alone; the caller can refactor H up to any column and re-apply the
        rotations to the fresh right-hand side.

        Parameters
        ----------
        beta : float
            Initial residual norm of the (non-projected) linear system
        """
        _check_beta(beta)
        self.z.fill(0)
        self.z[0, 0] = beta

    def reallocate_and_reset(self, beta, max_iterations: int) -> None:
        """
        Grow the buffers for ``max_iterations`` if needed, then reset.

        H, R and y are zeroed as well; capacity is never reduced.
        """
        _check_beta(beta)
        _check_max_iterations(max_iterations)

        if self.H.shape[0] < max_iterations + 1 or self.H.shape[1] < max_iterations:
            self.H = self._zeros((max_iterations + 1, max_iterations))
        self.H.fill(0)

        if self.R.shape[0] < max_iterations + 1 or self.R.shape[1] < max_iterations:
            self.R = self._zeros((max_iterations + 1, max_iterations))
        self.R.fill(0)

        if self.y.shape[0] < max_iterations + 1:
            self.y = self._zeros((max_iterations + 1, self.y.shape[1]))
        self.y.fill(0)

        if self.z.shape[0] < max_iterations + 1:
            self.z = self._zeros((max_iterations + 1, self.z.shape[1]))

        if len(self.cosines) < max_iterations:
            self.cosines = self._zeros(max_iterations)
            self.sines = self._zeros(max_iterations)

        self.reset(beta)

    def __repr__(self):
        return (f"ProjectedLeastSquaresProblem(max_iterations={self.max_iterations}, "
                f"dtype={self.dtype})")


def _check_beta(beta):
    if beta < 0:
        raise InvalidArgumentError(
            f"reset: initial residual beta = {beta} < 0."
        )


def _check_max_iterations(max_iterations):
    if max_iterations <= 0:
        raise InvalidArgumentError(
            f"Maximum number of iterations {max_iterations} <= 0."
        )
