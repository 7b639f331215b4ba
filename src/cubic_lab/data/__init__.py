"""Data module for precision formats and tolerances."""

from cubic_lab.data.precision_types import (
    PrecisionFormat,
    PrecisionSpec,
    format_for_dtype,
    get_dtype,
    get_eps,
    get_precision_hierarchy,
    get_spec,
    get_tolerance,
    list_available_formats,
    resolve_dtype,
)

__all__ = [
    "PrecisionFormat",
    "PrecisionSpec",
    "format_for_dtype",
    "get_dtype",
    "get_eps",
    "get_precision_hierarchy",
    "get_spec",
    "get_tolerance",
    "list_available_formats",
    "resolve_dtype",
]
