"""
Solver for GMRES' projected least-squares problem.

This is the user-facing API that GMRES implementations call every iteration.
"""

import logging
import warnings
from typing import Optional

import numpy as np

from ._backends import get_backend
from ._core.ca_hessenberg import update_upper_hessenberg_ca
from ._core.qr_update import (
    update_column_givens,
    update_columns_givens,
    update_panel_givens,
)
from ._core.triangular import RankInfo, as_robustness, solve_givens
from .exceptions import RankDeficiencyWarning
from .problem import ProjectedLeastSquaresProblem

logger = logging.getLogger(__name__)


class ProjectedLeastSquaresSolver:
    """
    Methods for solving GMRES' projected least-squares problem.

    The solver is stateless; all state lives in the
    ProjectedLeastSquaresProblem it is handed, and the caller owns the
    current column index.

    Examples
    --------
    >>> problem = ProjectedLeastSquaresProblem(max_iterations=50)
    >>> problem.reset(beta)
    >>> solver = ProjectedLeastSquaresSolver()
    >>>
    >>> # Inside the GMRES loop, after Arnoldi fills problem.H[:k+2, k]:
    >>> res_norm = solver.update_column(problem, k)
    >>>
    >>> # When the solution update is needed (any time after the update):
    >>> rank_info = solver.solve(problem, k)
    >>> coefficients = problem.y[:k+1, 0]

    Many distributed solvers solve the projected problem redundantly on
    every process. If those processes run different BLAS/LAPACK builds, an
    ill-conditioned problem can give noticeably different coefficients on
    each one. The robust solve levels regularize the problem so that
    processes agree (almost) exactly.
    """

    def __init__(
        self,
        robustness: int = 0,
        backend: str = 'auto',
    ):
        """
        Parameters
        ----------
        robustness : int
            Default robustness of ``solve``:
            - 0: fast triangular solve, assumes full rank
            - 1: scaled triangular solve with rank detection
            - 2: minimum-norm SVD solve
        backend : str or BackendBase
            Dense linear algebra backend: 'auto', 'cpu', 'pytorch'
        """
        self.robustness = as_robustness(robustness)
        self.backend = get_backend(backend)

    def update_column(self, problem: ProjectedLeastSquaresProblem, cur_col: int) -> float:
        """
        Update column cur_col of the projected least-squares problem.

        H is read but not touched. R, the cosines and sines, and z are
        updated. This does not compute the solution; call ``solve`` for that.

        Returns
        -------
        float
            2-norm of the absolute residual of the projected problem
        """
        return update_column_givens(
            problem.H, problem.R, problem.z,
            problem.cosines, problem.sines, cur_col
        )

    def update_columns(
        self,
        problem: ProjectedLeastSquaresProblem,
        start_col: int,
        end_col: int,
        panel: bool = False,
    ) -> float:
        """
        Update columns [start_col, end_col] (inclusive).

        Parameters
        ----------
        panel : bool
            Use the left-looking panel update instead of updating one
            column at a time. Both give the same factorization.

        Returns
        -------
        float
            2-norm of the absolute residual of the projected problem
        """
        update = update_panel_givens if panel else update_columns_givens
        return update(
            problem.H, problem.R, problem.z,
            problem.cosines, problem.sines, start_col, end_col
        )

    def solve(
        self,
        problem: ProjectedLeastSquaresProblem,
        cur_col: int,
        robustness: Optional[int] = None,
    ) -> RankInfo:
        """
        Solve the projected least-squares problem into problem.y.

        Call only after ``update_column`` (same cur_col) or
        ``update_columns`` (cur_col = end_col).

        Parameters
        ----------
        cur_col : int
            Zero-based index of the most recently updated column
        robustness : int, optional
            Overrides the solver's default robustness

        Returns
        -------
        RankInfo
            Detected rank and, at robustness 1, the scale factor of y.
            Rank deficiency is reported, not raised; the caller decides
            whether to restart or continue.
        """
        level = self.robustness if robustness is None else as_robustness(robustness)
        rank_info = solve_givens(
            problem.y, problem.R, problem.z, cur_col,
            robustness=level, backend=self.backend
        )
        if rank_info.rank_deficient:
            if rank_info.rank < cur_col + 1:
                detail = f"rank {rank_info.rank} < {cur_col + 1}."
            else:
                detail = (
                    f"the solution overflows, so y holds it multiplied by "
                    f"scale = {rank_info.scale:.3g}."
                )
            warnings.warn(
                f"Projected least-squares problem is rank deficient at column "
                f"{cur_col}: {detail}",
                RankDeficiencyWarning
            )
        return rank_info

    def update_upper_hessenberg_ca(
        self,
        problem: ProjectedLeastSquaresProblem,
        R: np.ndarray,
        B: np.ndarray,
        start_col: int,
        end_col: int,
    ) -> None:
        """
        Update CA-GMRES' upper Hessenberg matrix.

        R is the R factor of the Krylov basis (the orthogonalization
        coefficients), not problem.R. B is the (S+1) x S change-of-basis
        matrix, S = end_col - start_col + 1. Afterwards, problem.H is ready
        for ``update_columns``.
        """
        logger.debug("CA-GMRES: reconstructing H columns [%d, %d]", start_col, end_col)
        update_upper_hessenberg_ca(problem.H, R, B, start_col, end_col)
