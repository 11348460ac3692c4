"""
Givens rotations.

Same conventions as the reference BLAS _ROTG / _ROT pair:

    [ c        s ] [ x ]   [ r ]
    [ -conj(s) c ] [ y ] = [ 0 ]

with c real-valued (stored in the scalar type) and |c|^2 + |s|^2 = 1.
"""

import numpy as np


def compute_givens_rotation(x, y):
    """
    Compute the Givens rotation that maps [x; y] to [result; 0].

    Neither input is modified. Non-finite inputs propagate into the outputs.

    Parameters
    ----------
    x, y : scalar
        Real or complex scalars

    Returns
    -------
    (cosine, sine, result)
    """
    if np.iscomplexobj(x) or np.iscomplexobj(y):
        return _rotg_complex(x, y)
    return _rotg_real(x, y)


def _rotg_real(a, b):
    abs_a = np.abs(a)
    abs_b = np.abs(b)
    roe = a if abs_a > abs_b else b
    scale = abs_a + abs_b
    if scale == 0:
        zero = scale * 0
        return zero + 1, zero, zero
    r = scale * np.sqrt((a / scale) ** 2 + (b / scale) ** 2)
    if not roe >= 0:
        r = -r
    return a / r, b / r, r


def _rotg_complex(a, b):
    abs_a = np.abs(a)
    if abs_a == 0:
        one = b * 0 + 1
        return one * 0, one, b
    scale = abs_a + np.abs(b)
    norm = scale * np.sqrt(np.abs(a / scale) ** 2 + np.abs(b / scale) ** 2)
    alpha = a / abs_a
    cosine = abs_a / norm
    sine = alpha * np.conj(b) / norm
    return cosine + 0j, sine, alpha * norm


def apply_givens_rotation(cosine, sine, x, y):
    """
    Apply a rotation to the pair (x, y).

    Works elementwise when x and y are arrays of equal shape.

    Returns
    -------
    (x_new, y_new)
    """
    return cosine * x + sine * y, cosine * y - np.conj(sine) * x


def rotate_rows(A, i, cosine, sine):
    """Rotate rows i and i+1 of A in place, across every column (BLAS _ROT)."""
    x = A[i].copy()
    y = A[i + 1]
    A[i] = cosine * x + sine * y
    A[i + 1] = cosine * y - np.conj(sine) * x
