"""
Scalar traits for the supported dense scalar types.

Each supported dtype maps to one immutable ScalarTraits record. The record
is resolved once per dtype and passed around by value; the numerical kernels
never branch on type names.
"""

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache

import numpy as np

from ..exceptions import InvalidArgumentError


class ScalarKind(Enum):
    """Real or complex field."""
    REAL = "real"
    COMPLEX = "complex"


_SUPPORTED = {
    np.dtype(np.float32): np.dtype(np.float32),
    np.dtype(np.float64): np.dtype(np.float64),
    np.dtype(np.complex64): np.dtype(np.float32),
    np.dtype(np.complex128): np.dtype(np.float64),
}


@dataclass(frozen=True)
class ScalarTraits:
    """
    Numeric capabilities of one scalar type.

    Attributes
    ----------
    dtype : numpy.dtype
        The scalar type of matrix and vector entries
    magnitude_dtype : numpy.dtype
        Real type of ``abs(scalar)``
    kind : ScalarKind
        Real or complex
    eps : float
        Machine epsilon of the scalar type
    """
    dtype: np.dtype
    magnitude_dtype: np.dtype
    kind: ScalarKind
    eps: float

    @property
    def is_complex(self) -> bool:
        return self.kind is ScalarKind.COMPLEX

    def zero(self):
        return self.dtype.type(0)

    def one(self):
        return self.dtype.type(1)

    def magnitude(self, x):
        """Absolute value, in the magnitude type."""
        return self.magnitude_dtype.type(np.abs(x))

    def random(self, rng, size=None):
        """Uniform pseudorandom scalars with real (and imaginary) parts in [-1, 1]."""
        values = rng.uniform(-1.0, 1.0, size)
        if self.is_complex:
            values = values + 1j * rng.uniform(-1.0, 1.0, size)
        if size is None:
            return self.dtype.type(values)
        return np.asarray(values, dtype=self.dtype)

    def random_magnitude(self, rng):
        """One uniform pseudorandom real in [-1, 1], in the magnitude type."""
        return self.magnitude_dtype.type(rng.uniform(-1.0, 1.0))


@lru_cache(maxsize=None)
def _traits_for(dtype: np.dtype) -> ScalarTraits:
    magnitude_dtype = _SUPPORTED[dtype]
    kind = ScalarKind.COMPLEX if dtype.kind == 'c' else ScalarKind.REAL
    return ScalarTraits(
        dtype=dtype,
        magnitude_dtype=magnitude_dtype,
        kind=kind,
        eps=float(np.finfo(dtype).eps),
    )


def scalar_traits(dtype) -> ScalarTraits:
    """
    Look up the traits of a scalar type.

    Parameters
    ----------
    dtype : dtype-like
        One of float32, float64, complex64, complex128

    Returns
    -------
    ScalarTraits

    Raises
    ------
    InvalidArgumentError
        If the dtype is not supported
    """
    dtype = np.dtype(dtype)
    if dtype not in _SUPPORTED:
        raise InvalidArgumentError(
            f"Unsupported scalar type {dtype}. "
            f"Use one of: float32, float64, complex64, complex128"
        )
    return _traits_for(dtype)
