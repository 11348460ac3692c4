"""
Validation harness for the projected least-squares solvers.

Builds random GMRES-like problems and compares the incremental Givens
solvers against the reference batch solve, within an error bound scaled by
the least-squares condition number.
"""

import logging
import math
from dataclasses import asdict, dataclass
from typing import Optional

import numpy as np
import pandas as pd

from .._core.condition import least_squares_condition_number
from .._core.givens import apply_givens_rotation, compute_givens_rotation
from .._core.qr_update import update_column_givens, update_panel_givens
from .._core.scalar_traits import scalar_traits
from .._core.triangular import solve_givens
from ..exceptions import DegenerateInputError
from .lstsq import solve_lapack

logger = logging.getLogger(__name__)

# Attempts at a nonzero first right-hand side entry before giving up on the RNG
MAX_RANDOM_TRIES = 1000


def _format_scalar(value) -> str:
    if np.iscomplexobj(value):
        real, imag = float(value.real), float(value.imag)
        return f"{real!r}{'+' if imag >= 0 else '-'}{abs(imag)!r}i"
    return repr(float(value))


def format_matrix(name: str, A: np.ndarray) -> str:
    """
    Matlab-readable text for a dense matrix.

    Examples
    --------
    >>> print(format_matrix('H', np.array([[1.0, 0.0], [2.0, 1.0]])))
    H = [1.0, 0.0; 2.0, 1.0];
    """
    rows = [", ".join(_format_scalar(v) for v in row) for row in np.atleast_2d(A)]
    return f"{name} = [" + "; ".join(rows) + "];"


def make_random_problem(num_cols: int, dtype=np.float64, rng=None):
    """
    Random upper Hessenberg H and right-hand side z = [beta; 0; ...; 0].

    Parameters
    ----------
    num_cols : int
        Number of columns of H (number of GMRES iterations)
    dtype : dtype-like
        Scalar type
    rng : numpy.random.Generator, optional

    Returns
    -------
    (H, z)
        H is (num_cols+1) x num_cols, z is (num_cols+1) x 1. beta is real
        and positive, as it is in GMRES.

    Raises
    ------
    DegenerateInputError
        If the RNG keeps producing zero for beta
    """
    traits = scalar_traits(dtype)
    if rng is None:
        rng = np.random.default_rng()

    H = np.triu(traits.random(rng, (num_cols + 1, num_cols)), k=-1)
    z = np.zeros((num_cols + 1, 1), dtype=traits.dtype)

    for _ in range(MAX_RANDOM_TRIES):
        beta = abs(traits.random_magnitude(rng))
        if beta != 0:
            z[0, 0] = beta
            return H, z
    raise DegenerateInputError(
        f"The random number generator returned zero {MAX_RANDOM_TRIES} times "
        f"in a row for the right-hand side."
    )


def solution_error(x_approx: np.ndarray, x_exact: np.ndarray) -> float:
    """Relative Frobenius-norm error; absolute if x_exact is zero."""
    diff_norm = float(np.linalg.norm(x_approx - x_exact))
    exact_norm = float(np.linalg.norm(x_exact))
    if exact_norm == 0:
        return diff_norm
    return diff_norm / exact_norm


def least_squares_residual_norm(A: np.ndarray, x: np.ndarray, b: np.ndarray) -> float:
    """||b - A x||, Frobenius norm for several right-hand sides."""
    return float(np.linalg.norm(b - A @ x))


def check_givens_rotation(dtype=np.float64, rng=None) -> bool:
    """
    Check that a random Givens rotation zeros its second input.

    Returns True if |y'| <= 2 eps after applying the computed rotation.
    """
    traits = scalar_traits(dtype)
    if rng is None:
        rng = np.random.default_rng()
    x = traits.random(rng)
    y = traits.random(rng)
    cosine, sine, result = compute_givens_rotation(x, y)
    x_new, y_new = apply_givens_rotation(cosine, sine, x, y)
    error = float(np.abs(y_new))
    logger.debug("Givens check (%s): x=%s y=%s -> r=%s, |y'|=%.3e",
                 traits.dtype, x, y, result, error)
    return error <= 2 * traits.eps


@dataclass
class UpdateColumnReport:
    """Outcome of one ``check_update_column`` run."""
    num_cols: int
    dtype: str
    condition_number: float
    error_bound: float
    lapack_residual: float
    givens_residual: float       # Residual reported by the last column update
    givens_error: float          # Relative solution error vs. the reference
    block_givens_residual: Optional[float] = None
    block_givens_error: Optional[float] = None

    @property
    def passed(self) -> bool:
        """True if every computed error is finite and within the bound."""
        errors = [self.givens_error, self.givens_residual, self.lapack_residual]
        if self.block_givens_error is not None:
            errors += [self.block_givens_error, self.block_givens_residual]
        if any(math.isnan(e) or math.isinf(e) for e in errors):
            return False
        if math.isnan(self.error_bound):
            return False
        within = self.givens_error <= self.error_bound
        if self.block_givens_error is not None:
            within = within and self.block_givens_error <= self.error_bound
        return within

    def as_dict(self) -> dict:
        record = asdict(self)
        record['passed'] = self.passed
        return record

    def summary(self):
        """Print summary of the comparison."""
        print("=" * 60)
        print(f"Projected least-squares check: {self.num_cols} columns, {self.dtype}")
        print("=" * 60)
        print(f"Condition number:       {self.condition_number:.6e}")
        print(f"Error bound:            {self.error_bound:.6e}")
        print(f"LAPACK residual:        {self.lapack_residual:.6e}")
        print(f"Givens residual:        {self.givens_residual:.6e}")
        print(f"Givens solution error:  {self.givens_error:.6e}")
        if self.block_givens_error is not None:
            print(f"Block Givens residual:  {self.block_givens_residual:.6e}")
            print(f"Block Givens error:     {self.block_givens_error:.6e}")
        print(f"Result: {'PASSED' if self.passed else 'FAILED'}")


def _givens_solve(H, z, num_cols, panel_width=None):
    """Factor H column by column (or panel by panel), then solve."""
    traits = scalar_traits(H.dtype)
    R = np.zeros_like(H)
    y = np.zeros((num_cols + 1, 1), dtype=traits.dtype)
    z_work = z.copy()
    cosines = np.zeros(num_cols, dtype=traits.dtype)
    sines = np.zeros(num_cols, dtype=traits.dtype)

    residual = 0.0
    if panel_width is None:
        for cur_col in range(num_cols):
            residual = update_column_givens(H, R, z_work, cosines, sines, cur_col)
    else:
        for start_col in range(0, num_cols, panel_width):
            end_col = min(start_col + panel_width, num_cols) - 1
            residual = update_panel_givens(H, R, z_work, cosines, sines, start_col, end_col)

    solve_givens(y, R, z_work, num_cols - 1)
    return y[:num_cols], residual


def check_update_column(
    num_cols: int,
    test_block_givens: bool = False,
    dtype=np.float64,
    rng=None,
    verbose: bool = False,
) -> UpdateColumnReport:
    """
    Compare the incremental Givens solvers against the reference solve.

    Parameters
    ----------
    num_cols : int
        Number of columns of the random test problem
    test_block_givens : bool
        Also check the panel update (panel width min(3, num_cols))
    dtype : dtype-like
        Scalar type
    rng : numpy.random.Generator, optional
    verbose : bool
        Print the matrices and the summary

    Returns
    -------
    UpdateColumnReport
    """
    traits = scalar_traits(dtype)
    H, z = make_random_problem(num_cols, dtype=dtype, rng=rng)
    if verbose:
        print(format_matrix('H', H))
        print(format_matrix('z', z))

    R_lapack = np.zeros_like(H)
    y_lapack = np.zeros((num_cols + 1, 1), dtype=traits.dtype)
    lapack_residual = solve_lapack(H, R_lapack, y_lapack, z, num_cols - 1)
    y_exact = y_lapack[:num_cols]

    # Forward error bound from the least-squares condition number
    condition_number = least_squares_condition_number(H, z, lapack_residual)
    error_bound = 10 * math.sqrt((num_cols + 1) * num_cols) * condition_number * traits.eps

    y_givens, givens_residual = _givens_solve(H, z, num_cols)
    report = UpdateColumnReport(
        num_cols=num_cols,
        dtype=str(traits.dtype),
        condition_number=condition_number,
        error_bound=error_bound,
        lapack_residual=lapack_residual,
        givens_residual=givens_residual,
        givens_error=solution_error(y_givens, y_exact),
    )

    if test_block_givens:
        y_block, block_residual = _givens_solve(
            H, z, num_cols, panel_width=min(3, num_cols)
        )
        report.block_givens_residual = block_residual
        report.block_givens_error = solution_error(y_block, y_exact)

    logger.debug("check_update_column(%d, %s): passed=%s", num_cols, traits.dtype, report.passed)
    if verbose:
        report.summary()
    return report


def validation_table(
    sizes=(1, 2, 3, 5, 10, 20),
    dtypes=(np.float32, np.float64, np.complex64, np.complex128),
    test_block_givens: bool = True,
    seed: int = 0,
) -> pd.DataFrame:
    """
    Run ``check_update_column`` for every (size, dtype) pair.

    Returns
    -------
    pandas.DataFrame
        One row per run, with a boolean 'passed' column
    """
    rng = np.random.default_rng(seed)
    records = []
    for dtype in dtypes:
        for num_cols in sizes:
            report = check_update_column(
                num_cols, test_block_givens=test_block_givens, dtype=dtype, rng=rng
            )
            records.append(report.as_dict())
    return pd.DataFrame.from_records(records)
