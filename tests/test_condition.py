"""
Test the least-squares condition number estimate.
"""

import math

import pytest
import numpy as np

from pyprojls._core.condition import (
    extreme_singular_values,
    least_squares_condition_number,
)
from pyprojls.exceptions import DegenerateInputError


class TestExtremeSingularValues:

    def test_diagonal(self):
        A = np.array([[3.0, 0.0], [0.0, 2.0], [0.0, 0.0]])
        assert np.allclose(extreme_singular_values(A), (3.0, 2.0))

    def test_complex(self):
        A = np.diag([2j, -5.0 + 0j])
        sigma_max, sigma_min = extreme_singular_values(A)
        assert np.isclose(sigma_max, 5.0)
        assert np.isclose(sigma_min, 2.0)


class TestConditionNumber:

    def test_consistent_system(self):
        """Test zero residual gives 2 kappa."""
        A = np.array([[1.0, 0.0], [0.0, 1.0], [0.0, 0.0]])
        b = np.array([[1.0], [1.0], [0.0]])
        assert np.isclose(least_squares_condition_number(A, b, 0.0), 2.0)

    def test_general_formula(self):
        A = np.array([[4.0, 0.0], [0.0, 1.0], [0.0, 0.0]])
        b = np.array([[0.0], [3.0], [4.0]])
        # sin(theta) = 4/5, cos(theta) = 3/5, kappa = 4
        expected = 2 * 4 / 0.6 + (0.8 / 0.6) * 16
        assert np.isclose(least_squares_condition_number(A, b, 4.0), expected)

    def test_residual_exceeds_rhs(self):
        """Test sin(theta) > 1 from rounding gives an infinite condition number."""
        A = np.eye(2)
        b = np.ones((2, 1))
        assert least_squares_condition_number(A, b, 2.0) == math.inf

    def test_rank_deficient(self):
        A = np.array([[1.0, 0.0], [0.0, 0.0], [0.0, 0.0]])
        with pytest.raises(DegenerateInputError, match="rank deficient"):
            least_squares_condition_number(A, np.ones((3, 1)), 0.0)

    def test_zero_rhs(self):
        with pytest.raises(DegenerateInputError, match="zero"):
            least_squares_condition_number(np.eye(2), np.zeros((2, 1)), 0.0)
