"""Cubic Lab: Robust real roots of cubic polynomials with accuracy diagnostics."""

__version__ = "0.1.0"

from cubic_lab.algorithms.cubic_roots import cubic_roots, quadratic_roots
from cubic_lab.algorithms.diagnostics import (
    cubic_root_condition_number,
    cubic_root_residual,
)
from cubic_lab.data.precision_types import (
    PrecisionFormat,
    get_dtype,
    get_eps,
    get_precision_hierarchy,
)

__all__ = [
    "__version__",
    "PrecisionFormat",
    "cubic_root_condition_number",
    "cubic_root_residual",
    "cubic_roots",
    "get_dtype",
    "get_eps",
    "get_precision_hierarchy",
    "quadratic_roots",
]
