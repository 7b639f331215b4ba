"""Accuracy sweeps over generated cubic problems.

Solves a set of problems with known roots in one precision format and
summarizes forward error, residual quality and solve latency.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import numpy as np

from cubic_lab.algorithms.cubic_roots import cubic_roots
from cubic_lab.algorithms.diagnostics import diagnose_root
from cubic_lab.algorithms.problems import DEFAULT_SEED, create_problem_set
from cubic_lab.data.precision_types import PrecisionFormat, get_spec

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SweepSummary:
    """Aggregate accuracy of one sweep."""

    kind: str
    """Problem kind."""

    precision: str
    """Precision format value (e.g. 'fp64')."""

    problems: int
    """Number of problems solved."""

    root_count_mismatches: int
    """Problems whose number of real roots differs from the true count."""

    max_forward_error: float
    """Max |computed - true| / max(1, |true|) over problems with matching counts."""

    max_residual_ratio: float
    """Max |p(r)| / (ε|r p'(r)|) over all computed roots."""

    trustworthy_fraction: float
    """Fraction of computed roots flagged trustworthy."""

    mean_solve_time_ns: float
    """Mean wall time of one cubic_roots call (nanoseconds)."""

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "kind": self.kind,
            "precision": self.precision,
            "problems": self.problems,
            "root_count_mismatches": self.root_count_mismatches,
            "max_forward_error": self.max_forward_error,
            "max_residual_ratio": self.max_residual_ratio,
            "trustworthy_fraction": self.trustworthy_fraction,
            "mean_solve_time_ns": self.mean_solve_time_ns,
        }


def run_accuracy_sweep(
    kind: str,
    count: int,
    precision: PrecisionFormat | str = PrecisionFormat.FP64,
    *,
    seed: int = DEFAULT_SEED,
    scale: float = 10.0,
) -> SweepSummary:
    """Solve ``count`` generated problems and summarize their accuracy.

    Each problem is solved once; the timed roots are the ones diagnosed.

    Args:
        kind: Problem kind (see ``problems.PROBLEM_KINDS``).
        count: Number of problems.
        precision: Working precision format.
        seed: Seed of the first problem.
        scale: Root magnitude.

    Returns:
        SweepSummary for the sweep.

    Example:
        >>> summary = run_accuracy_sweep("distinct", 100, "fp64")
        >>> summary.root_count_mismatches
        0
    """
    spec = get_spec(precision)
    tiny = float(np.finfo(np.float64).tiny)
    problems = create_problem_set(kind, count, seed=seed, scale=scale)

    mismatches = 0
    max_forward = 0.0
    max_ratio = 0.0
    trusted = 0
    total_roots = 0
    solve_time = 0.0

    for problem in problems:
        start = time.perf_counter()
        roots = cubic_roots(*problem.coefficients, precision=spec.format)
        solve_time += time.perf_counter() - start

        computed = roots[~np.isnan(roots)].astype(np.float64)
        if len(computed) != problem.num_real_roots:
            mismatches += 1
            logger.debug(
                "Root count mismatch for %s: expected %d, got %d",
                problem.coefficients,
                problem.num_real_roots,
                len(computed),
            )
        else:
            true = np.asarray(problem.true_roots)
            forward = np.abs(computed - true) / np.maximum(1.0, np.abs(true))
            max_forward = max(max_forward, float(np.max(forward)))

        for root in roots[~np.isnan(roots)]:
            diag = diagnose_root(*problem.coefficients, root, precision=spec.format)
            ratio = abs(diag.residual) / max(diag.expected_residual, tiny)
            max_ratio = max(max_ratio, ratio)
            trusted += diag.trustworthy
            total_roots += 1

    return SweepSummary(
        kind=kind,
        precision=spec.format.value,
        problems=len(problems),
        root_count_mismatches=mismatches,
        max_forward_error=max_forward,
        max_residual_ratio=max_ratio,
        trustworthy_fraction=trusted / total_roots if total_roots else 0.0,
        mean_solve_time_ns=solve_time / len(problems) * 1e9 if problems else 0.0,
    )


__all__ = [
    "SweepSummary",
    "run_accuracy_sweep",
]
