"""
Core algorithms (backend-agnostic).
"""

from .scalar_traits import ScalarKind, ScalarTraits, scalar_traits
from .givens import apply_givens_rotation, compute_givens_rotation, rotate_rows
from .qr_update import update_column_givens, update_columns_givens, update_panel_givens
from .triangular import (
    RankInfo,
    Robustness,
    solve_givens,
    solve_upper_triangular_system,
)
from .ca_hessenberg import update_upper_hessenberg_ca
from .condition import extreme_singular_values, least_squares_condition_number

__all__ = [
    "ScalarKind",
    "ScalarTraits",
    "scalar_traits",
    "apply_givens_rotation",
    "compute_givens_rotation",
    "rotate_rows",
    "update_column_givens",
    "update_columns_givens",
    "update_panel_givens",
    "RankInfo",
    "Robustness",
    "solve_givens",
    "solve_upper_triangular_system",
    "update_upper_hessenberg_ca",
    "extreme_singular_values",
    "least_squares_condition_number",
]
