"""Utility modules for the photogrammetric camera toolkit."""

from photocam.utils.logging_utils import setup_logging
from photocam.utils.matrix_utils import (
    apply_matrix4,
    compose_matrix,
    make_scale,
    make_translation,
)
from photocam.utils.polynomial_utils import (
    cube_root,
    evaluate_polynomial,
    solve_cubic,
    solve_quadratic,
)

__all__ = [
    "apply_matrix4",
    "compose_matrix",
    "cube_root",
    "evaluate_polynomial",
    "make_scale",
    "make_translation",
    "setup_logging",
    "solve_cubic",
    "solve_quadratic",
]
