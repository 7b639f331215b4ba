"""Floating-point primitives shared by the cubic kernels.

All helpers operate on numpy scalars of a single working dtype and return
scalars of that dtype. Callers are responsible for converting their inputs
first and for wrapping calls in ``np.errstate`` where overflow is possible.

References:
- Dekker, "A floating-point technique for extending the available
  precision", Numer. Math. 18 (1971)
- Higham: "Accuracy and Stability of Numerical Algorithms" (2nd ed.), §5.1
"""

from __future__ import annotations

from typing import Any

import numpy as np


def horner(
    a: np.floating[Any],
    b: np.floating[Any],
    c: np.floating[Any],
    d: np.floating[Any],
    x: np.floating[Any],
) -> np.floating[Any]:
    """Evaluate ax³ + bx² + cx + d by Horner's method."""
    return ((a * x + b) * x + c) * x + d


def horner_with_derivative(
    a: np.floating[Any],
    b: np.floating[Any],
    c: np.floating[Any],
    d: np.floating[Any],
    x: np.floating[Any],
) -> tuple[np.floating[Any], np.floating[Any]]:
    """Evaluate p(x) and p'(x) together.

    The derivative is accumulated alongside the value (the second row of
    synthetic division), which equals (3ax + 2b)x + c.

    Returns:
        Tuple (p(x), p'(x)).
    """
    value = a
    slope = x * 0
    for coef in (b, c, d):
        slope = slope * x + value
        value = value * x + coef
    return value, slope


def split(x: np.floating[Any], factor: np.floating[Any]) -> tuple[Any, Any]:
    """Veltkamp split of x into a high and a low half-width part.

    ``factor`` is 2^s + 1 for the working dtype (see
    ``PrecisionSpec.split_factor``). hi + lo == x exactly and both halves
    carry at most half the significand bits.
    """
    t = factor * x
    hi = t - (t - x)
    return hi, x - hi


def two_product(
    x: np.floating[Any],
    y: np.floating[Any],
    factor: np.floating[Any],
) -> tuple[np.floating[Any], np.floating[Any]]:
    """Error-free product: returns (fl(x*y), err) with x*y == fl(x*y) + err.

    Exact barring overflow or underflow of the partial products. When the
    splitting overflows the error term is reported as zero, which reduces
    callers to plain rounded arithmetic.
    """
    product = x * y
    x_hi, x_lo = split(x, factor)
    y_hi, y_lo = split(y, factor)
    err = ((x_hi * y_hi - product) + x_hi * y_lo + x_lo * y_hi) + x_lo * y_lo
    if not np.isfinite(err):
        err = product.dtype.type(0)
    return product, err


__all__ = [
    "horner",
    "horner_with_derivative",
    "split",
    "two_product",
]
