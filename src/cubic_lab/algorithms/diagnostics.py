"""Diagnostics for computed cubic roots.

Two independent measures let a caller judge a root returned by
``cubic_roots``:

- Residual: the value p(r), next to the bound ε|r p'(r)| that first-order
  perturbation theory predicts for a root correct to unit roundoff
  (r = r*(1 + ε) gives p(r) ≈ ε r* p'(r*)).
- Condition number: the relative condition number of the root with respect
  to relative perturbations of the coefficients,
      κ = (|a||r|³ + |b||r|² + |c||r| + |d|) / (|r| |p'(r)|),
  which is infinite at a multiple root.

A root whose residual exceeds the expected bound by more than the format's
``residual_factor`` is reported as untrustworthy by ``diagnose_roots``.

References:
- Higham: "Accuracy and Stability of Numerical Algorithms" (2nd ed.), §26.3
- Gautschi, "On the condition of algebraic equations", Numer. Math. 21 (1973)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np

from cubic_lab.algorithms.cubic_roots import cubic_roots
from cubic_lab.algorithms.polynomial import horner_with_derivative
from cubic_lab.data.precision_types import (
    PrecisionFormat,
    format_for_dtype,
    get_eps,
    get_tolerance,
    resolve_dtype,
)

if TYPE_CHECKING:
    from numpy.typing import NDArray


@dataclass(frozen=True, slots=True)
class RootDiagnostics:
    """Quality measures for one computed root."""

    root: float
    """The computed root."""

    residual: float
    """Signed p(root)."""

    expected_residual: float
    """ε·|root·p'(root)|."""

    condition_number: float
    """Relative condition number κ (inf at a multiple root)."""

    trustworthy: bool
    """True if |residual| is within residual_factor of the expected bound."""

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "root": self.root,
            "residual": self.residual,
            "expected_residual": self.expected_residual,
            "condition_number": self.condition_number,
            "trustworthy": self.trustworthy,
        }


def cubic_root_residual(
    a: Any,
    b: Any,
    c: Any,
    d: Any,
    root: Any,
    *,
    precision: PrecisionFormat | str | None = None,
) -> NDArray[np.floating]:
    """Residual of a root of ax³ + bx² + cx + d.

    Args:
        a, b, c, d: Real coefficients.
        root: Candidate root.
        precision: Working precision (inferred if None).

    Returns:
        Array [p(root), ε·|root·p'(root)|] in the working dtype. Both
        p and p' are evaluated by Horner's method; ε is the format's
        machine epsilon (``get_eps``).

    Example:
        >>> cubic_root_residual(1.0, -6.0, 11.0, -6.0, 2.0)
        array([0.00000000e+00, 4.44089210e-16])
    """
    dtype = resolve_dtype(a, b, c, d, root, precision=precision)
    a, b, c, d, root = (dtype.type(v) for v in (a, b, c, d, root))
    eps = dtype.type(get_eps(format_for_dtype(dtype)))

    with np.errstate(all="ignore"):
        value, slope = horner_with_derivative(a, b, c, d, root)
        expected = eps * abs(root * slope)

    return np.array([value, expected], dtype=dtype)


def cubic_root_condition_number(
    a: Any,
    b: Any,
    c: Any,
    d: Any,
    root: Any,
    *,
    precision: PrecisionFormat | str | None = None,
) -> np.floating[Any]:
    """Relative condition number of a root of ax³ + bx² + cx + d.

    Measures how much a relative perturbation of the coefficients is
    amplified in the relative error of the root.

    Special cases:
        - p'(root) == 0 (multiple root): +inf.
        - root == 0: the |root| factors cancel, leaving |c|/|p'(0)|, which
          is 1 for a simple root at the origin (d == 0, c ≠ 0) and +inf
          otherwise.
        - NaN root: NaN.

    Example:
        >>> float(cubic_root_condition_number(1.0, 0.0, -3.0, -2.0, -1.0))
        inf
    """
    dtype = resolve_dtype(a, b, c, d, root, precision=precision)
    a, b, c, d, root = (dtype.type(v) for v in (a, b, c, d, root))
    inf = dtype.type(np.inf)

    if np.isnan(root):
        return dtype.type(np.nan)

    if root == 0:
        if d == 0 and c != 0:
            return dtype.type(1)
        return inf

    with np.errstate(all="ignore"):
        _, slope = horner_with_derivative(a, b, c, d, root)
        if slope == 0:
            return inf

        x = abs(root)
        numerator = ((abs(a) * x + abs(b)) * x + abs(c)) * x + abs(d)
        return numerator / (x * abs(slope))


def diagnose_root(
    a: Any,
    b: Any,
    c: Any,
    d: Any,
    root: Any,
    *,
    precision: PrecisionFormat | str | None = None,
) -> RootDiagnostics:
    """Residual, condition number and trust flag of one computed root.

    Example:
        >>> diagnose_root(1.0, -6.0, 11.0, -6.0, 2.0).condition_number
        30.0
    """
    dtype = resolve_dtype(a, b, c, d, root, precision=precision)
    fmt = format_for_dtype(dtype)
    factor = float(get_tolerance(fmt, "residual_factor"))
    tiny = float(np.finfo(dtype).tiny)

    residual, expected = cubic_root_residual(a, b, c, d, root, precision=fmt)
    kappa = cubic_root_condition_number(a, b, c, d, root, precision=fmt)
    return RootDiagnostics(
        root=float(dtype.type(root)),
        residual=float(residual),
        expected_residual=float(expected),
        condition_number=float(kappa),
        trustworthy=bool(abs(float(residual)) <= factor * max(float(expected), tiny)),
    )


def diagnose_roots(
    a: Any,
    b: Any,
    c: Any,
    d: Any,
    *,
    precision: PrecisionFormat | str | None = None,
) -> list[RootDiagnostics]:
    """Solve a cubic and evaluate every populated root.

    Args:
        a, b, c, d: Real coefficients.
        precision: Working precision (inferred if None).

    Returns:
        One RootDiagnostics per real root (with multiplicity), ascending.

    Example:
        >>> [r.root for r in diagnose_roots(1.0, -6.0, 11.0, -6.0)]
        [1.0, 2.0, 3.0]
    """
    fmt = format_for_dtype(resolve_dtype(a, b, c, d, precision=precision))
    return [
        diagnose_root(a, b, c, d, root, precision=fmt)
        for root in cubic_roots(a, b, c, d, precision=fmt)
        if not np.isnan(root)
    ]


__all__ = [
    "RootDiagnostics",
    "cubic_root_condition_number",
    "cubic_root_residual",
    "diagnose_root",
    "diagnose_roots",
]
