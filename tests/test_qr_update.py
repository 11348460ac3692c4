"""
Test the incremental Givens QR factorization of the upper Hessenberg matrix.
"""

import pytest
import numpy as np

from pyprojls._core.qr_update import (
    update_column_givens,
    update_columns_givens,
    update_panel_givens,
)
from pyprojls._core.triangular import solve_givens
from pyprojls.exceptions import InvalidArgumentError
from pyprojls.reference import make_random_problem, solve_lapack


def workspace(H, z):
    """Fresh R, z, cosines, sines for factoring H."""
    num_cols = H.shape[1]
    return (
        np.zeros_like(H),
        z.copy(),
        np.zeros(num_cols, dtype=H.dtype),
        np.zeros(num_cols, dtype=H.dtype),
    )


class TestGoldenProblem:
    """Test the 3 x 2 problem with a known residual."""

    H = np.array([[1.0, 0.0], [2.0, 1.0], [0.0, 3.0]])
    z = np.array([[5.0], [0.0], [0.0]])

    def test_residual(self):
        """Test the residual after the last update is 30/sqrt(46)."""
        R, z, cosines, sines = workspace(self.H, self.z)
        update_column_givens(self.H, R, z, cosines, sines, 0)
        residual = update_column_givens(self.H, R, z, cosines, sines, 1)

        assert np.isclose(residual, 30 / np.sqrt(46))

    def test_solution_matches_normal_equations(self):
        R, z, cosines, sines = workspace(self.H, self.z)
        update_columns_givens(self.H, R, z, cosines, sines, 0, 1)
        y = np.zeros((3, 1))
        solve_givens(y, R, z, 1)

        assert np.allclose(y[:2, 0], [50 / 46, -10 / 46])
        assert np.isclose(np.linalg.norm(self.H @ y[:2] - self.z), 30 / np.sqrt(46))

    def test_first_column_residual(self):
        """Test the 2 x 1 problem after the first update."""
        R, z, cosines, sines = workspace(self.H, self.z)
        residual = update_column_givens(self.H, R, z, cosines, sines, 0)
        # min ||[1; 2] y - [5; 0]|| = 10/sqrt(5)
        assert np.isclose(residual, 10 / np.sqrt(5))


class TestUpdateColumn:
    """Test single-column updates on random problems."""

    @pytest.mark.parametrize("dtype", [np.float32, np.float64, np.complex64, np.complex128])
    def test_subdiagonal_exactly_zero(self, dtype):
        rng = np.random.default_rng(20)
        H, z0 = make_random_problem(8, dtype=dtype, rng=rng)
        R, z, cosines, sines = workspace(H, z0)
        H_before = H.copy()

        for cur_col in range(8):
            update_column_givens(H, R, z, cosines, sines, cur_col)
            assert R[cur_col + 1, cur_col] == 0
            assert np.all(np.tril(R[:cur_col + 2, :cur_col + 1], k=-1) == 0)

        # H is never modified
        assert np.array_equal(H, H_before)

    def test_residual_matches_reference(self):
        rng = np.random.default_rng(21)
        H, z0 = make_random_problem(10, rng=rng)
        R, z, cosines, sines = workspace(H, z0)

        for cur_col in range(10):
            residual = update_column_givens(H, R, z, cosines, sines, cur_col)
            y_ref = np.zeros((11, 1))
            ref_residual = solve_lapack(H, np.zeros_like(H), y_ref, z0, cur_col)
            assert np.isclose(residual, ref_residual, rtol=1e-10)

    def test_residual_non_increasing(self):
        rng = np.random.default_rng(22)
        H, z0 = make_random_problem(12, rng=rng)
        R, z, cosines, sines = workspace(H, z0)

        residuals = [update_column_givens(H, R, z, cosines, sines, k) for k in range(12)]

        assert all(b <= a * (1 + 1e-12) for a, b in zip(residuals, residuals[1:]))

    def test_multiple_right_hand_sides(self):
        """Test every column of z is rotated."""
        rng = np.random.default_rng(23)
        H, z0 = make_random_problem(5, rng=rng)
        z2 = np.hstack([z0, 2 * z0, rng.normal(size=z0.shape)])
        R, z, cosines, sines = workspace(H, z2)

        update_columns_givens(H, R, z, cosines, sines, 0, 4)

        assert np.allclose(z[:, 1], 2 * z[:, 0])
        y = np.zeros((6, 3))
        solve_givens(y, R, z, 4)
        for j in range(3):
            y_ref = np.zeros((6, 1))
            solve_lapack(H, np.zeros_like(H), y_ref, z2[:, j:j + 1], 4)
            assert np.allclose(y[:5, j], y_ref[:5, 0])


class TestUpdateColumns:
    """Test range updates (sequential and panel)."""

    def test_single_column_range_is_identical(self):
        """Test update_columns(s, s) is exactly update_column(s)."""
        rng = np.random.default_rng(30)
        H, z0 = make_random_problem(6, rng=rng)
        R1, z1, c1, s1 = workspace(H, z0)
        R2, z2, c2, s2 = workspace(H, z0)

        for s in range(6):
            r1 = update_column_givens(H, R1, z1, c1, s1, s)
            r2 = update_columns_givens(H, R2, z2, c2, s2, s, s)
            assert r1 == r2

        assert np.array_equal(R1, R2)
        assert np.array_equal(z1, z2)
        assert np.array_equal(c1, c2)
        assert np.array_equal(s1, s2)

    @pytest.mark.parametrize("panel_width", [1, 2, 3, 7])
    @pytest.mark.parametrize("dtype", [np.float64, np.complex128])
    def test_panel_matches_sequential(self, panel_width, dtype):
        rng = np.random.default_rng(31)
        num_cols = 11
        H, z0 = make_random_problem(num_cols, dtype=dtype, rng=rng)
        R1, z1, c1, s1 = workspace(H, z0)
        R2, z2, c2, s2 = workspace(H, z0)

        r1 = update_columns_givens(H, R1, z1, c1, s1, 0, num_cols - 1)
        r2 = 0.0
        for start in range(0, num_cols, panel_width):
            end = min(start + panel_width, num_cols) - 1
            r2 = update_panel_givens(H, R2, z2, c2, s2, start, end)

        assert np.isclose(r1, r2, rtol=1e-12)
        assert np.allclose(np.triu(R1[:num_cols]), np.triu(R2[:num_cols]), atol=1e-12)
        assert np.allclose(z1, z2, atol=1e-12)
        assert np.allclose(c1, c2, atol=1e-12)
        assert np.allclose(s1, s2, atol=1e-12)

    def test_panel_leaves_later_columns(self):
        """Test columns to the right of the panel are not touched."""
        rng = np.random.default_rng(32)
        H, z0 = make_random_problem(6, rng=rng)
        R, z, cosines, sines = workspace(H, z0)
        R[:, 3:] = -7.0

        update_panel_givens(H, R, z, cosines, sines, 0, 2)

        assert np.all(R[:, 3:] == -7.0)

    def test_inverted_range(self):
        H, z0 = make_random_problem(4, rng=np.random.default_rng(0))
        R, z, cosines, sines = workspace(H, z0)
        with pytest.raises(InvalidArgumentError, match="startCol"):
            update_columns_givens(H, R, z, cosines, sines, 2, 1)
        with pytest.raises(InvalidArgumentError, match="startCol"):
            update_panel_givens(H, R, z, cosines, sines, 3, 1)


class TestInvalidArguments:
    """Test bounds and shape checks."""

    def test_column_out_of_range(self):
        H, z0 = make_random_problem(4, rng=np.random.default_rng(0))
        R, z, cosines, sines = workspace(H, z0)
        with pytest.raises(InvalidArgumentError, match="out of range"):
            update_column_givens(H, R, z, cosines, sines, 4)
        with pytest.raises(InvalidArgumentError, match="< 0"):
            update_column_givens(H, R, z, cosines, sines, -1)

    def test_r_shape_mismatch(self):
        H, z0 = make_random_problem(4, rng=np.random.default_rng(0))
        _, z, cosines, sines = workspace(H, z0)
        with pytest.raises(InvalidArgumentError, match="same dimensions"):
            update_column_givens(H, np.zeros((4, 4)), z, cosines, sines, 0)

    def test_short_rotation_arrays(self):
        H, z0 = make_random_problem(4, rng=np.random.default_rng(0))
        R, z, _, _ = workspace(H, z0)
        with pytest.raises(InvalidArgumentError, match="rotation arrays"):
            update_column_givens(H, R, z, np.zeros(2), np.zeros(2), 3)
