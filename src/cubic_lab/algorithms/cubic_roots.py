"""Real roots of cubic polynomials.

Computes the real roots of ax³ + bx² + cx + d in closed form, followed by
deflation and Newton polishing on the original polynomial.

Algorithm Outline:
1. Normalize by a, giving x³ + px² + qx + r with p, q, r = b/a, c/a, d/a, and
   substitute x = 2^e·y so that |p|, |q|, |r| of the scaled cubic are below
   one. Scaling by a power of two is exact and keeps Q³ and R² in range.
2. Form the depressed-cubic invariants Q = (p² - 3q)/9 and
   R = (2p³ - 9pq + 27r)/54. The depressed cubic t³ + Pt + S (x = t - p/3)
   has P = -3Q and S = 2R.
3. Classify on D = R² - Q³ = -Δ/108:
   - D < 0: three distinct real roots, trigonometric (Viète) form
   - D > 0: one real root, Cardano with the cancellation-free cube root
   - D ≈ 0: multiple root, reported as a single plus a double root
4. Polish the largest root with Newton steps on ax³ + bx² + cx + d, divide
   it out and take the other two from the remaining quadratic. The closed
   forms only resolve roots relative to the largest one; deflation recovers
   small roots next to a large one to full relative accuracy.
5. Polish the remaining roots.

Accuracy Caveats:
    A double root is, in floating point, indistinguishable from a pair of
    close real roots or from a complex-conjugate pair with a tiny imaginary
    part. Whether such inputs come back as a double root, two nearly equal
    roots, or a single real root depends on rounding, and can change when the
    arithmetic is reordered. Results near multiple roots should be treated
    with suspicion; check them with ``cubic_root_residual`` and
    ``cubic_root_condition_number``.

    Coefficients of extreme magnitude may overflow or underflow while being
    normalized by a. The result then stays well defined (NaN or a
    lower-degree solution) but its forward error cannot be bounded.

References:
- Press et al., "Numerical Recipes" (3rd ed.), §5.6
- Kahan, "To Solve a Real Cubic Equation" (1986)
- Blinn, "How to Solve a Cubic Equation", IEEE CG&A (2006-2007)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import numpy as np

from cubic_lab.algorithms.polynomial import horner_with_derivative, two_product
from cubic_lab.data.precision_types import (
    PrecisionFormat,
    format_for_dtype,
    get_spec,
    get_tolerance,
    resolve_dtype,
)

if TYPE_CHECKING:
    from numpy.typing import NDArray

logger = logging.getLogger(__name__)


def quadratic_roots(
    a: Any,
    b: Any,
    c: Any,
    *,
    precision: PrecisionFormat | str | None = None,
) -> NDArray[np.floating]:
    """Real roots of ax² + bx + c.

    Uses the cancellation-free form q = -(b + sign(b)√disc)/2, x = q/a, c/q.
    A double root is reported twice. a == 0 degrades to the linear root -c/b;
    a == b == 0 and complex roots give NaN in both slots.

    Args:
        a, b, c: Real coefficients.
        precision: Working precision (inferred from the coefficients if None).

    Returns:
        Array of shape (2,) sorted ascending with NaN in unused slots.

    Example:
        >>> quadratic_roots(1.0, -3.0, 2.0)
        array([1., 2.])
    """
    dtype = resolve_dtype(a, b, c, precision=precision)
    factor = _split_factor(dtype)
    with np.errstate(all="ignore"):
        return _quadratic_kernel(*_as_dtype(dtype, a, b, c), factor)


def cubic_roots(
    a: Any,
    b: Any,
    c: Any,
    d: Any,
    *,
    precision: PrecisionFormat | str | None = None,
) -> NDArray[np.floating]:
    """Real roots of ax³ + bx² + cx + d.

    Always returns three slots. Populated entries are sorted ascending and
    include multiplicity; slots beyond the number of real roots hold NaN.
    A genuine cubic (a ≠ 0, finite coefficients) always populates slot 0.

    Degenerate inputs never raise:
        - a == 0, or b/a, c/a, d/a overflow: solved as bx² + cx + d.
        - d == 0: x = 0 is returned exactly, the rest from ax² + bx + c.
        - non-finite coefficients: all slots NaN.

    See the module docstring for the accuracy caveats near multiple roots.

    Args:
        a, b, c, d: Real coefficients.
        precision: Working precision (inferred from the coefficients if None).

    Returns:
        Array of shape (3,) in the working dtype.

    Example:
        >>> cubic_roots(1.0, -6.0, 11.0, -6.0)
        array([1., 2., 3.])
        >>> cubic_roots(1.0, -3.0, 1.0, -3.0)
        array([ 3., nan, nan])
    """
    dtype = resolve_dtype(a, b, c, d, precision=precision)
    fmt = format_for_dtype(dtype)
    with np.errstate(all="ignore"):
        return _cubic_kernel(*_as_dtype(dtype, a, b, c, d), fmt)


# =============================================================================
# KERNELS
# =============================================================================


def _cubic_kernel(a: Any, b: Any, c: Any, d: Any, fmt: PrecisionFormat) -> Any:
    dtype = a.dtype
    spec = get_spec(fmt)
    factor = dtype.type(spec.split_factor)
    roots = np.full(3, np.nan, dtype=dtype)

    if not all(np.isfinite(x) for x in (a, b, c, d)):
        logger.debug("Non-finite coefficients (%s, %s, %s, %s)", a, b, c, d)
        return roots

    if a == 0:
        logger.debug("Leading coefficient is zero; solving as quadratic")
        roots[:2] = _quadratic_kernel(b, c, d, factor)
        return roots

    if d == 0:
        roots[:2] = _quadratic_kernel(a, b, c, factor)
        roots[2] = 0
        return np.sort(roots)

    p = b / a
    q = c / a
    r = d / a
    if not (np.isfinite(p) and np.isfinite(q) and np.isfinite(r)):
        logger.debug("Normalizing by a=%s overflowed; solving as quadratic", a)
        roots[:2] = _quadratic_kernel(b, c, d, factor)
        return roots

    # Solve for y = x / 2**exponent, whose monic coefficients are all below 1
    # in magnitude, so Q³ and R² cannot overflow.
    exponent = _scale_exponent(p, q, r)
    p = np.ldexp(p, -exponent)
    q = np.ldexp(q, -2 * exponent)
    r = np.ldexp(r, -3 * exponent)

    Q, R = _depress(p, q, r, factor)
    if not (np.isfinite(Q) and np.isfinite(R)):
        logger.debug("Depressed invariants are not finite (Q=%s, R=%s)", Q, R)
        return roots

    disc, scale = _discriminant(Q, R, factor)
    eps = dtype.type(spec.machine_epsilon)
    ulps = get_tolerance(fmt, "discriminant_ulps") * eps
    tol = ulps * scale
    shift = p / 3

    multiple = bool(abs(disc) <= tol)
    if multiple:
        # Multiple root: R² = Q³ makes both Cardano cube roots equal.
        A = -np.copysign(np.cbrt(abs(R)), R)
        roots[0] = 2 * A - shift
        roots[1] = -A - shift
        roots[2] = -A - shift
    elif disc < 0:
        # Three distinct real roots; disc < 0 forces Q > 0.
        sqrt_Q = np.sqrt(Q)
        cos_arg = dtype.type(np.clip(R / (Q * sqrt_Q), -1, 1))
        theta = np.arccos(cos_arg)
        two_pi = dtype.type(2 * np.pi)
        for k in range(3):
            roots[k] = -2 * sqrt_Q * np.cos((theta + k * two_pi) / 3) - shift
    else:
        # One real root. The sign choice keeps |R| + √disc free of cancellation.
        A = -np.copysign(np.cbrt(abs(R) + np.sqrt(disc)), R)
        B = Q / A if A != 0 else A
        roots[0] = A + B - shift

    roots = np.ldexp(roots, exponent)
    if np.isnan(roots).all():
        return roots
    steps = int(get_tolerance(fmt, "polish_steps"))

    # The largest root is accurate relative to the coefficients; the other two
    # are only accurate relative to it. Recover them from the deflated
    # quadratic. When it has no real roots the closed-form values are kept, a
    # multiple root only if it is a root of the cubic to within rounding.
    largest = int(np.nanargmax(np.abs(roots)))
    first = _polish(a, b, c, d, roots[largest], steps)
    rest = _deflate(a, b, c, d, first, factor)
    if np.isnan(rest).any():
        rest = np.delete(roots, largest)
        for k, root in enumerate(rest):
            if multiple and not _is_root(a, b, c, d, root, ulps):
                rest[k] = np.nan

    roots[0] = first
    for k, root in enumerate(rest, start=1):
        roots[k] = root if np.isnan(root) else _polish(a, b, c, d, root, steps)

    return np.sort(roots)


def _quadratic_kernel(a: Any, b: Any, c: Any, factor: Any) -> Any:
    roots = np.full(2, np.nan, dtype=a.dtype)

    if not all(np.isfinite(x) for x in (a, b, c)):
        return roots

    if a == 0:
        if b != 0:
            roots[0] = -c / b
        return roots

    bb, bb_err = two_product(b, b, factor)
    ac, ac_err = two_product(a, c, factor)
    disc = (bb - 4 * ac) + (bb_err - 4 * ac_err)

    if disc < 0:
        return roots
    if disc == 0:
        roots[:] = -b / (2 * a)
        return roots

    q = -(b + np.copysign(np.sqrt(disc), b)) / 2
    roots[0] = q / a
    roots[1] = c / q
    return np.sort(roots)


def _depress(p: Any, q: Any, r: Any, factor: Any) -> tuple[Any, Any]:
    """Invariants (Q, R) of the monic cubic x³ + px² + qx + r.

    The rounding error of p² and of the outer product p(2p² - 9q) is carried
    through error-free products, so cancellation in p² - 3q and in
    2p³ - 9pq + 27r only loses what the 3q, 9q and 27r terms contribute.
    """
    pp, pp_err = two_product(p, p, factor)
    Q = ((pp - 3 * q) + pp_err) / 9

    inner = (2 * pp - 9 * q) + 2 * pp_err
    outer, outer_err = two_product(p, inner, factor)
    R = ((outer + 27 * r) + outer_err) / 54
    return Q, R


def _discriminant(Q: Any, R: Any, factor: Any) -> tuple[Any, Any]:
    """Return (R² - Q³, R² + |Q³|) with R² - Q³ formed from error-free products."""
    rr, rr_err = two_product(R, R, factor)
    qq, qq_err = two_product(Q, Q, factor)
    qqq, qqq_err = two_product(qq, Q, factor)
    disc = (rr - qqq) + (rr_err - qqq_err - qq_err * Q)
    return disc, rr + abs(qqq)


def _scale_exponent(p: Any, q: Any, r: Any) -> int:
    """Exponent e with max(|p|, √|q|, ∛|r|) in [2**(e-1), 2**e)."""
    magnitude = max(abs(p), np.sqrt(abs(q)), np.cbrt(abs(r)))
    _, exponent = np.frexp(magnitude)
    return int(exponent)


def _deflate(a: Any, b: Any, c: Any, d: Any, root: Any, factor: Any) -> Any:
    """Roots of the quadratic ax² + Bx + C left after dividing out (x - root).

    Backward deflation (C from d, then B from c) is stable when ``root`` is
    the largest root in magnitude, forward deflation (B from b, then C from c)
    when it is the smallest. |C/a| is the product of the remaining roots,
    which decides between the two.
    """
    C = -d / root
    if abs(a) * abs(root) * abs(root) >= abs(C):
        B = (C - c) / root
    else:
        B = b + a * root
        C = c + B * root
    return _quadratic_kernel(a, B, C, factor)


def _is_root(a: Any, b: Any, c: Any, d: Any, x: Any, tol: Any) -> bool:
    """|p(x)| ≤ tol·(|a||x|³ + |b||x|² + |c||x| + |d|)."""
    value, _ = horner_with_derivative(a, b, c, d, x)
    size = abs(x)
    magnitude = ((abs(a) * size + abs(b)) * size + abs(c)) * size + abs(d)
    return bool(np.isfinite(value) and abs(value) <= tol * magnitude)


def _polish(a: Any, b: Any, c: Any, d: Any, root: Any, steps: int) -> Any:
    """Newton steps on the original cubic, kept only while |p(x)| decreases."""
    f, df = horner_with_derivative(a, b, c, d, root)
    for _ in range(steps):
        if f == 0 or df == 0:
            break
        candidate = root - f / df
        f_new, df_new = horner_with_derivative(a, b, c, d, candidate)
        if not (np.isfinite(candidate) and abs(f_new) < abs(f)):
            break
        root, f, df = candidate, f_new, df_new
    return root


# =============================================================================
# INTERNAL HELPERS
# =============================================================================


def _as_dtype(dtype: np.dtype[Any], *values: Any) -> tuple[Any, ...]:
    return tuple(dtype.type(v) for v in values)


def _split_factor(dtype: np.dtype[Any]) -> Any:
    return dtype.type(get_spec(format_for_dtype(dtype)).split_factor)


__all__ = [
    "cubic_roots",
    "quadratic_roots",
]
