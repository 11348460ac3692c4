"""
pyprojls: the projected least-squares problem of GMRES.

Incremental Givens QR of the upper Hessenberg matrix, robust triangular
solves, and the CA-GMRES Hessenberg reconstruction.

Copyright (C) 2024 SGCX
Licensed under GPL-3.0
"""

__version__ = "1.0.0"

# Import main user-facing API
from .problem import ProjectedLeastSquaresProblem
from .solver import ProjectedLeastSquaresSolver
from ._core.triangular import RankInfo, Robustness

# Import backend utilities (for advanced users)
from ._backends import get_backend, list_available_backends, print_backend_info

from .exceptions import (
    ProjectedLeastSquaresError,
    InvalidArgumentError,
    LogicError,
    DegenerateInputError,
    RankDeficiencyWarning,
)

__all__ = [
    'ProjectedLeastSquaresProblem',
    'ProjectedLeastSquaresSolver',
    'RankInfo',
    'Robustness',
    'get_backend',
    'list_available_backends',
    'print_backend_info',
    'ProjectedLeastSquaresError',
    'InvalidArgumentError',
    'LogicError',
    'DegenerateInputError',
    'RankDeficiencyWarning',
]
