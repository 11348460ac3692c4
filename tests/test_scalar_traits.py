"""
Test scalar traits lookup.
"""

import pytest
import numpy as np

from pyprojls._core.scalar_traits import ScalarKind, scalar_traits
from pyprojls.exceptions import InvalidArgumentError


class TestScalarTraits:

    @pytest.mark.parametrize("dtype, magnitude_dtype, kind", [
        (np.float32, np.float32, ScalarKind.REAL),
        (np.float64, np.float64, ScalarKind.REAL),
        (np.complex64, np.float32, ScalarKind.COMPLEX),
        (np.complex128, np.float64, ScalarKind.COMPLEX),
    ])
    def test_supported_types(self, dtype, magnitude_dtype, kind):
        traits = scalar_traits(dtype)
        assert traits.dtype == np.dtype(dtype)
        assert traits.magnitude_dtype == np.dtype(magnitude_dtype)
        assert traits.kind is kind
        assert traits.is_complex == (kind is ScalarKind.COMPLEX)
        assert traits.eps == np.finfo(dtype).eps
        assert traits.zero() == 0 and traits.zero().dtype == np.dtype(dtype)
        assert traits.one() == 1 and traits.one().dtype == np.dtype(dtype)

    def test_magnitude_is_real(self):
        traits = scalar_traits(np.complex64)
        value = traits.magnitude(np.complex64(3 + 4j))
        assert value == 5
        assert value.dtype == np.float32

    def test_random_in_range(self):
        traits = scalar_traits(np.complex128)
        values = traits.random(np.random.default_rng(0), (50,))
        assert values.dtype == np.complex128
        assert np.all(np.abs(values.real) <= 1)
        assert np.all(np.abs(values.imag) <= 1)
        assert np.any(values.imag != 0)

    def test_cached(self):
        assert scalar_traits(np.float64) is scalar_traits('float64')

    def test_unsupported(self):
        with pytest.raises(InvalidArgumentError, match="Unsupported"):
            scalar_traits(np.int32)
