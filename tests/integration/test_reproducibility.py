"""Integration tests for bitwise reproducibility.

The kernels are pure functions of their inputs: repeated calls, calls in a
different order, and calls from concurrent threads must all produce the same
bits. Any hidden state or order dependence will cause these tests to fail.
"""

from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from cubic_lab.algorithms.cubic_roots import cubic_roots
from cubic_lab.algorithms.diagnostics import (
    cubic_root_condition_number,
    cubic_root_residual,
)
from cubic_lab.algorithms.problems import PROBLEM_KINDS, create_problem_set

# Test parameters
PROBLEMS_PER_KIND = 20
SEED = 42
PRECISIONS = ["fp64", "fp32", "fp16"]


@pytest.fixture(scope="module")
def coefficient_sets() -> list[tuple[float, float, float, float]]:
    """Coefficients covering every problem kind plus degenerate inputs."""
    sets = [
        problem.coefficients
        for kind in PROBLEM_KINDS
        for problem in create_problem_set(kind, PROBLEMS_PER_KIND, seed=SEED)
    ]
    sets.extend(
        [
            (1.0, -6.0, 11.0, -6.0),
            (1.0, 0.0, -3.0, -2.0),
            (1.0, -3.0, 1.0, -3.0),
            (1.0, 6.28, 2.3, 3.6),
            (0.0, 1.0, -3.0, 2.0),
            (0.0, 0.0, 0.0, 1.0),
        ]
    )
    return sets


def evaluate(coefficients: tuple, precision: str) -> bytes:
    """Solve one cubic and diagnose each slot, returning the raw bytes."""
    roots = cubic_roots(*coefficients, precision=precision)
    parts = [roots.tobytes()]
    for root in roots:
        parts.append(cubic_root_residual(*coefficients, root, precision=precision).tobytes())
        parts.append(
            np.asarray(
                cubic_root_condition_number(*coefficients, root, precision=precision)
            ).tobytes()
        )
    return b"".join(parts)


class TestBitwiseReproducibility:
    """Repeated evaluation yields identical bits."""

    @pytest.mark.parametrize("precision", PRECISIONS)
    def test_repeated_calls(self, coefficient_sets: list, precision: str) -> None:
        """Calling twice gives identical outputs."""
        first = [evaluate(c, precision) for c in coefficient_sets]
        second = [evaluate(c, precision) for c in coefficient_sets]
        assert first == second

    @pytest.mark.parametrize("precision", PRECISIONS)
    def test_call_order_irrelevant(self, coefficient_sets: list, precision: str) -> None:
        """Reversing the call order does not change any result."""
        forward = [evaluate(c, precision) for c in coefficient_sets]
        backward = [evaluate(c, precision) for c in reversed(coefficient_sets)]
        assert forward == backward[::-1]

    def test_concurrent_threads(self, coefficient_sets: list) -> None:
        """Concurrent evaluation matches sequential evaluation."""
        sequential = [evaluate(c, "fp64") for c in coefficient_sets]
        with ThreadPoolExecutor(max_workers=8) as pool:
            concurrent = list(pool.map(lambda c: evaluate(c, "fp64"), coefficient_sets))
        assert concurrent == sequential


class TestOutputContract:
    """Contract checks over the full coefficient corpus."""

    @pytest.mark.parametrize("precision", PRECISIONS)
    def test_shape_and_dtype(self, coefficient_sets: list, precision: str) -> None:
        """Every result has three slots in the working dtype."""
        dtype = np.dtype({"fp64": np.float64, "fp32": np.float32, "fp16": np.float16}[precision])
        for coefficients in coefficient_sets:
            roots = cubic_roots(*coefficients, precision=precision)
            assert roots.shape == (3,)
            assert roots.dtype == dtype

    def test_genuine_cubics_have_a_root(self, coefficient_sets: list) -> None:
        """A cubic with a ≠ 0 always fills slot 0 in double precision."""
        for coefficients in coefficient_sets:
            if coefficients[0] == 0:
                continue
            assert np.isfinite(cubic_roots(*coefficients)[0])
