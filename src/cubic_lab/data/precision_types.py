"""
Precision Format Definitions - Single Source of Truth

This module defines the floating-point formats the cubic solver can work in,
their machine epsilon values, and the per-format tolerances used by the
root-finding kernel and its diagnostics.

The working precision of every kernel call is a numpy dtype. Callers either
name a format explicitly or let it be inferred from the coefficients, in which
case numpy's promotion rules (NEP 50) decide: a float32 scalar combined with
Python floats stays float32, integers promote to float64.

References:
    - IEEE 754-2019 Standard for Floating-Point Arithmetic
    - Higham: "Accuracy and Stability of Numerical Algorithms" (2nd ed.)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, cast

import numpy as np
from numpy.typing import DTypeLike


class PrecisionFormat(Enum):
    """Supported floating-point precision formats."""

    FP64 = "fp64"
    FP32 = "fp32"
    FP16 = "fp16"


@dataclass(frozen=True, slots=True)
class PrecisionSpec:
    """Specification for a floating-point precision format."""

    format: PrecisionFormat
    bits: int
    mantissa_bits: int
    exponent_bits: int
    machine_epsilon: float

    @property
    def bytes(self) -> int:
        """Number of bytes for this format."""
        return self.bits // 8

    @property
    def split_factor(self) -> float:
        """Veltkamp splitting constant 2^s + 1, s = ceil((mantissa_bits + 1) / 2)."""
        return float(2 ** ((self.mantissa_bits + 2) // 2) + 1)


_DTYPES: dict[PrecisionFormat, Any] = {
    PrecisionFormat.FP64: np.float64,
    PrecisionFormat.FP32: np.float32,
    PrecisionFormat.FP16: np.float16,
}


def _make_spec(fmt: PrecisionFormat) -> PrecisionSpec:
    info = np.finfo(_DTYPES[fmt])
    return PrecisionSpec(
        format=fmt,
        bits=info.bits,
        mantissa_bits=info.nmant,
        exponent_bits=info.nexp,
        machine_epsilon=float(info.eps),  # 2^(-mantissa_bits)
    )


# =============================================================================
# PRECISION SPECIFICATIONS
# =============================================================================
# Machine epsilon: 2^(-mantissa_bits), taken from np.finfo so the kernel and
# the tables can never disagree.

_PRECISION_SPECS: dict[PrecisionFormat, PrecisionSpec] = {
    fmt: _make_spec(fmt) for fmt in PrecisionFormat
}


# =============================================================================
# ROOT-FINDING TOLERANCES
# =============================================================================
# discriminant_ulps: |R² - Q³| <= ulps * eps * (R² + |Q|³) is reported as a
#     multiple root. The compensated depression keeps the discriminant error
#     within a few eps of its terms; fp16 has too few bits for a wide band.
# polish_steps: maximum Newton steps on the original polynomial.
# residual_factor: |p(r)| <= factor * eps * |r p'(r)| marks a root trustworthy.

_ROOT_TOLERANCES: dict[PrecisionFormat, dict[str, float | int]] = {
    PrecisionFormat.FP64: {
        "discriminant_ulps": 16.0,
        "polish_steps": 2,
        "residual_factor": 10.0,
    },
    PrecisionFormat.FP32: {
        "discriminant_ulps": 16.0,
        "polish_steps": 2,
        "residual_factor": 10.0,
    },
    PrecisionFormat.FP16: {
        "discriminant_ulps": 8.0,
        "polish_steps": 1,
        "residual_factor": 16.0,
    },
}


# =============================================================================
# PUBLIC API
# =============================================================================


def get_spec(fmt: PrecisionFormat | str) -> PrecisionSpec:
    """
    Get the full specification for a precision format.

    Args:
        fmt: Precision format (enum or string like 'fp32', 'FP16')

    Returns:
        PrecisionSpec with all format properties

    Raises:
        ValueError: If format is unknown

    Example:
        >>> spec = get_spec("fp32")
        >>> spec.machine_epsilon
        1.1920928955078125e-07
    """
    if isinstance(fmt, str):
        fmt = _parse_format(fmt)
    return _PRECISION_SPECS[fmt]


def get_dtype(fmt: PrecisionFormat | str) -> DTypeLike:
    """
    Get the numpy dtype for a precision format.

    Args:
        fmt: Precision format

    Returns:
        Numpy dtype object

    Raises:
        ValueError: If format is unknown

    Example:
        >>> get_dtype("fp32")
        dtype('float32')
    """
    if isinstance(fmt, str):
        fmt = _parse_format(fmt)
    return cast("DTypeLike", _DTYPES[fmt])


def get_eps(fmt: PrecisionFormat | str) -> float:
    """
    Get machine epsilon for a precision format.

    Machine epsilon is the smallest positive number ε such that 1.0 + ε ≠ 1.0
    in the given floating-point representation.

    Example:
        >>> get_eps("fp64")
        2.220446049250313e-16
    """
    return get_spec(fmt).machine_epsilon


def get_tolerance(
    fmt: PrecisionFormat | str,
    tolerance_type: str = "residual_factor",
) -> float | int:
    """
    Get a root-finding tolerance for a precision format.

    Args:
        fmt: Precision format
        tolerance_type: One of 'discriminant_ulps', 'polish_steps', 'residual_factor'

    Returns:
        Tolerance value

    Example:
        >>> get_tolerance("fp32", "polish_steps")
        2
    """
    if isinstance(fmt, str):
        fmt = _parse_format(fmt)

    tols = _ROOT_TOLERANCES[fmt]
    if tolerance_type not in tols:
        valid = list(tols.keys())
        raise ValueError(f"Unknown tolerance type: {tolerance_type}. Valid: {valid}")

    return tols[tolerance_type]


def get_precision_hierarchy() -> list[PrecisionFormat]:
    """
    Get precision formats in order from lowest to highest precision.

    Example:
        >>> get_precision_hierarchy()
        [<PrecisionFormat.FP16: 'fp16'>, <PrecisionFormat.FP32: 'fp32'>, <PrecisionFormat.FP64: 'fp64'>]
    """
    return [
        PrecisionFormat.FP16,
        PrecisionFormat.FP32,
        PrecisionFormat.FP64,
    ]


def list_available_formats() -> list[PrecisionFormat]:
    """List all precision formats the kernels accept."""
    return [PrecisionFormat.FP64, PrecisionFormat.FP32, PrecisionFormat.FP16]


def format_for_dtype(dtype: DTypeLike) -> PrecisionFormat:
    """
    Map a numpy dtype back to its precision format.

    Raises:
        ValueError: If the dtype is not one of the supported float formats

    Example:
        >>> format_for_dtype(np.float32)
        <PrecisionFormat.FP32: 'fp32'>
    """
    dt = np.dtype(dtype)
    for fmt, candidate in _DTYPES.items():
        if dt == np.dtype(candidate):
            return fmt

    valid = [np.dtype(t).name for t in _DTYPES.values()]
    raise ValueError(f"Unsupported dtype: '{dt.name}'. Valid: {valid}")


def resolve_dtype(
    *values: Any,
    precision: PrecisionFormat | str | None = None,
) -> np.dtype[np.floating[Any]]:
    """
    Determine the working dtype for a kernel call.

    An explicit ``precision`` wins. Otherwise the dtype is numpy's promotion
    of ``values``; non-float results (Python ints, integer arrays, bools)
    fall back to float64.

    Args:
        *values: Coefficients (and root) passed to the kernel.
        precision: Optional explicit precision format.

    Returns:
        One of float16, float32, float64.

    Raises:
        ValueError: For complex inputs or unsupported float dtypes.

    Example:
        >>> resolve_dtype(np.float32(1.0), 2.0, 3)
        dtype('float32')
        >>> resolve_dtype(1, 2, 3)
        dtype('float64')
    """
    if precision is not None:
        return np.dtype(get_dtype(precision))

    dt = np.result_type(*values)
    if np.issubdtype(dt, np.complexfloating):
        raise ValueError(
            f"Complex coefficients are not supported (got dtype '{dt.name}')"
        )
    if not np.issubdtype(dt, np.floating):
        return np.dtype(np.float64)

    format_for_dtype(dt)
    return dt


# =============================================================================
# INTERNAL HELPERS
# =============================================================================


def _parse_format(name: str) -> PrecisionFormat:
    """Parse a string into a PrecisionFormat enum."""
    normalized = name.lower().replace("-", "_").replace(" ", "_")

    for fmt in PrecisionFormat:
        if fmt.value == normalized:
            return fmt

    valid = [f.value for f in PrecisionFormat]
    raise ValueError(f"Unknown precision format: '{name}'. Valid: {valid}")
