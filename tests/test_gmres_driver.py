"""
Test the solver inside a minimal GMRES iteration.

The residual reported by each column update must track the true residual
||b - A x_k|| of the GMRES iterate, and the iteration must converge on a
well-conditioned system.
"""

import pytest
import numpy as np

from pyprojls import ProjectedLeastSquaresProblem, ProjectedLeastSquaresSolver


def gmres(A, b, max_iterations, solver, problem, tol=0.0):
    """Unrestarted GMRES with modified Gram-Schmidt Arnoldi, x0 = 0."""
    n = A.shape[0]
    beta = np.linalg.norm(b)
    problem.reallocate_and_reset(beta, max_iterations)
    Q = np.zeros((n, max_iterations + 1), dtype=problem.dtype)
    Q[:, 0] = b / beta

    history = []
    for k in range(max_iterations):
        w = A @ Q[:, k]
        for j in range(k + 1):
            problem.H[j, k] = np.vdot(Q[:, j], w)
            w = w - problem.H[j, k] * Q[:, j]
        problem.H[k + 1, k] = np.linalg.norm(w)

        residual = solver.update_column(problem, k)
        solver.solve(problem, k)
        x = Q[:, :k + 1] @ problem.y[:k + 1, 0]
        history.append((residual, np.linalg.norm(b - A @ x)))

        if residual <= tol * beta or problem.H[k + 1, k] == 0:
            break
        Q[:, k + 1] = w / problem.H[k + 1, k]

    return x, history


class TestGMRES:

    @pytest.mark.parametrize("robustness", [0, 1, 2])
    def test_residual_estimate_tracks_true_residual(self, robustness):
        rng = np.random.default_rng(50)
        n = 30
        A = 3.0 * np.eye(n) + rng.normal(size=(n, n)) / np.sqrt(n)
        b = rng.normal(size=n)
        solver = ProjectedLeastSquaresSolver(robustness=robustness)
        problem = ProjectedLeastSquaresProblem(5)

        _, history = gmres(A, b, 20, solver, problem)

        beta = np.linalg.norm(b)
        for estimate, true_residual in history:
            assert abs(estimate - true_residual) <= 1e-8 * beta
        estimates = [estimate for estimate, _ in history]
        assert all(later <= earlier * (1 + 1e-12) for earlier, later in zip(estimates, estimates[1:]))

    def test_converges(self):
        rng = np.random.default_rng(51)
        n = 40
        A = 4.0 * np.eye(n) + rng.normal(size=(n, n)) / np.sqrt(n)
        b = rng.normal(size=n)
        solver = ProjectedLeastSquaresSolver()
        problem = ProjectedLeastSquaresProblem(n)

        x, history = gmres(A, b, n, solver, problem, tol=1e-10)

        assert history[-1][0] <= 1e-10 * np.linalg.norm(b)
        assert np.allclose(x, np.linalg.solve(A, b), atol=1e-8)

    def test_complex_system(self):
        rng = np.random.default_rng(52)
        n = 20
        A = (3.0 * np.eye(n)
             + (rng.normal(size=(n, n)) + 1j * rng.normal(size=(n, n))) / np.sqrt(2 * n))
        b = rng.normal(size=n) + 1j * rng.normal(size=n)
        solver = ProjectedLeastSquaresSolver()
        problem = ProjectedLeastSquaresProblem(n, dtype=np.complex128)

        x, history = gmres(A, b, n, solver, problem, tol=1e-10)

        assert history[-1][0] <= 1e-10 * np.linalg.norm(b)
        assert np.allclose(x, np.linalg.solve(A, b), atol=1e-8)

    def test_backtrack_and_refactor(self):
        """Test H survives the updates, so a prefix can be refactored."""
        rng = np.random.default_rng(53)
        n = 15
        A = 3.0 * np.eye(n) + rng.normal(size=(n, n)) / np.sqrt(n)
        b = rng.normal(size=n)
        solver = ProjectedLeastSquaresSolver()
        problem = ProjectedLeastSquaresProblem(10)

        _, history = gmres(A, b, 10, solver, problem)

        # Refactor the first 4 columns from the untouched H
        problem.reset(np.linalg.norm(b))
        residual = solver.update_columns(problem, 0, 3)
        assert np.isclose(residual, history[3][0])
