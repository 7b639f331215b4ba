"""Cubic test-problem generation for accuracy experiments.

This module builds cubics from prescribed roots so that computed roots can be
compared against a known answer.

Key Features:
- Reproducible problem generation with seed control
- Root configurations ranging from well-separated to multiple roots
- JSON-serializable problem metadata

Note:
    Coefficients are expanded in float64, so the stored polynomial is a
    rounded version of the prescribed one. For multiple roots the rounding
    alone can split the root or push it into the complex plane; the true
    roots recorded here are those of the exact product, not of the rounded
    coefficients.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

DEFAULT_SEED: int = 42
"""Default random seed for reproducible experiments."""

PROBLEM_KINDS: tuple[str, ...] = (
    "distinct",
    "double",
    "triple",
    "complex_pair",
    "clustered",
)
"""Supported root configurations."""


@dataclass(frozen=True, slots=True)
class CubicProblem:
    """Cubic with known real roots."""

    coefficients: tuple[float, float, float, float]
    """(a, b, c, d) of ax³ + bx² + cx + d."""

    true_roots: tuple[float, ...]
    """Real roots with multiplicity, ascending."""

    kind: str
    """Root configuration, one of PROBLEM_KINDS."""

    seed: int | None
    """Random seed used for generation."""

    @property
    def num_real_roots(self) -> int:
        """Number of real roots counted with multiplicity."""
        return len(self.true_roots)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "coefficients": list(self.coefficients),
            "true_roots": list(self.true_roots),
            "kind": self.kind,
            "random_seed": self.seed,
        }


def cubic_from_roots(
    r0: float,
    r1: float,
    r2: float,
    *,
    leading: float = 1.0,
) -> tuple[float, float, float, float]:
    """Expand leading·(x - r0)(x - r1)(x - r2).

    Example:
        >>> cubic_from_roots(1.0, 2.0, 3.0)
        (1.0, -6.0, 11.0, -6.0)
    """
    b = -(r0 + r1 + r2)
    c = r0 * r1 + r0 * r2 + r1 * r2
    d = -(r0 * r1 * r2)
    return (float(leading), float(leading * b), float(leading * c), float(leading * d))


def cubic_from_complex_pair(
    real_root: float,
    re: float,
    im: float,
    *,
    leading: float = 1.0,
) -> tuple[float, float, float, float]:
    """Expand leading·(x - real_root)(x² - 2·re·x + re² + im²).

    The quadratic factor has the roots re ± i·im.

    Example:
        >>> cubic_from_complex_pair(3.0, 0.0, 1.0)
        (1.0, -3.0, 1.0, -3.0)
    """
    s = -2.0 * re
    t = re * re + im * im
    b = s - real_root
    c = t - real_root * s
    d = -real_root * t
    return (float(leading), float(leading * b), float(leading * c), float(leading * d))


def create_problem(
    kind: str = "distinct",
    *,
    seed: int | None = DEFAULT_SEED,
    scale: float = 10.0,
) -> CubicProblem:
    """Create a random cubic with a prescribed root configuration.

    Root configurations:
        distinct:     three roots in [-scale, scale], pairwise gaps ≥ scale/10
        double:       a double root and a simple root
        triple:       a triple root
        complex_pair: one real root and a complex pair with |im| ≥ scale/10
        clustered:    three distinct roots within scale·1e-4 of each other

    Args:
        kind: Root configuration.
        seed: Random seed for reproducibility.
        scale: Magnitude of the roots.

    Returns:
        CubicProblem with coefficients and true roots.

    Raises:
        ValueError: If kind is unknown.

    Example:
        >>> problem = create_problem("distinct", seed=42)
        >>> len(problem.true_roots)
        3
    """
    rng = np.random.default_rng(seed)
    leading = float(rng.choice([-1.0, 1.0]) * rng.uniform(0.5, 2.0))

    if kind == "distinct":
        gap = scale / 10
        while True:
            roots = np.sort(rng.uniform(-scale, scale, 3))
            if np.min(np.diff(roots)) >= gap:
                break
    elif kind == "double":
        single, double = rng.uniform(-scale, scale, 2)
        roots = np.sort([single, double, double])
    elif kind == "triple":
        roots = np.full(3, rng.uniform(-scale, scale))
    elif kind == "complex_pair":
        real_root, re = rng.uniform(-scale, scale, 2)
        im = rng.uniform(scale / 10, scale)
        coefficients = cubic_from_complex_pair(real_root, re, im, leading=leading)
        return CubicProblem(
            coefficients=coefficients,
            true_roots=(float(real_root),),
            kind=kind,
            seed=seed,
        )
    elif kind == "clustered":
        center = rng.uniform(-scale, scale)
        roots = np.sort(center + scale * 1e-4 * np.array([-1.0, 0.0, 1.0]))
    else:
        msg = f"Unknown problem kind: {kind}. Valid: {list(PROBLEM_KINDS)}"
        raise ValueError(msg)

    r0, r1, r2 = (float(r) for r in roots)
    return CubicProblem(
        coefficients=cubic_from_roots(r0, r1, r2, leading=leading),
        true_roots=(r0, r1, r2),
        kind=kind,
        seed=seed,
    )


def create_problem_set(
    kind: str,
    count: int,
    *,
    seed: int = DEFAULT_SEED,
    scale: float = 10.0,
) -> list[CubicProblem]:
    """Create ``count`` problems of one kind with seeds seed, seed+1, ..."""
    return [create_problem(kind, seed=seed + i, scale=scale) for i in range(count)]


__all__ = [
    "DEFAULT_SEED",
    "PROBLEM_KINDS",
    "CubicProblem",
    "create_problem",
    "create_problem_set",
    "cubic_from_complex_pair",
    "cubic_from_roots",
]
