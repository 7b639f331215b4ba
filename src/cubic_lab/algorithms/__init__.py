"""Numerical algorithms module.

This module contains implementations of:
- Real root finding for cubic (and degenerate quadratic) polynomials
- Residual and condition-number diagnostics for computed roots
- Test-problem generation with known roots
- Accuracy sweeps over generated problems
"""

from cubic_lab.algorithms.cubic_roots import cubic_roots, quadratic_roots
from cubic_lab.algorithms.diagnostics import (
    RootDiagnostics,
    cubic_root_condition_number,
    cubic_root_residual,
    diagnose_root,
    diagnose_roots,
)
from cubic_lab.algorithms.problems import (
    DEFAULT_SEED,
    PROBLEM_KINDS,
    CubicProblem,
    create_problem,
    create_problem_set,
    cubic_from_complex_pair,
    cubic_from_roots,
)
from cubic_lab.algorithms.sweep import SweepSummary, run_accuracy_sweep

__all__ = [
    # Root finding
    "cubic_roots",
    "quadratic_roots",
    # Diagnostics
    "RootDiagnostics",
    "cubic_root_condition_number",
    "cubic_root_residual",
    "diagnose_root",
    "diagnose_roots",
    # Problem generation
    "DEFAULT_SEED",
    "PROBLEM_KINDS",
    "CubicProblem",
    "create_problem",
    "create_problem_set",
    "cubic_from_complex_pair",
    "cubic_from_roots",
    # Sweeps
    "SweepSummary",
    "run_accuracy_sweep",
]
