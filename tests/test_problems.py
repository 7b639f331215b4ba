"""Tests for cubic test-problem generation."""

import numpy as np
import pytest

from cubic_lab.algorithms.problems import (
    DEFAULT_SEED,
    PROBLEM_KINDS,
    CubicProblem,
    create_problem,
    create_problem_set,
    cubic_from_complex_pair,
    cubic_from_roots,
)


class TestCubicFromRoots:
    """Tests for cubic_from_roots function."""

    def test_known_expansion(self) -> None:
        """(x-1)(x-2)(x-3) = x³ - 6x² + 11x - 6."""
        assert cubic_from_roots(1.0, 2.0, 3.0) == (1.0, -6.0, 11.0, -6.0)

    def test_leading_coefficient(self) -> None:
        """Leading coefficient scales every term."""
        assert cubic_from_roots(1.0, 2.0, 3.0, leading=-2.0) == (-2.0, 12.0, -22.0, 12.0)

    def test_roots_are_zeros(self) -> None:
        """The prescribed roots are zeros of the expansion."""
        roots = (-4.5, 0.25, 7.0)
        coefficients = cubic_from_roots(*roots, leading=1.5)
        values = np.polyval(coefficients, roots)
        np.testing.assert_allclose(values, 0.0, atol=1e-12)


class TestCubicFromComplexPair:
    """Tests for cubic_from_complex_pair function."""

    def test_known_expansion(self) -> None:
        """(x-3)(x²+1) = x³ - 3x² + x - 3."""
        assert cubic_from_complex_pair(3.0, 0.0, 1.0) == (1.0, -3.0, 1.0, -3.0)

    def test_numpy_roots_agree(self) -> None:
        """numpy.roots recovers the real root and the complex pair."""
        coefficients = cubic_from_complex_pair(2.0, -1.0, 0.5, leading=3.0)
        roots = np.roots(coefficients)
        real = roots[np.abs(roots.imag) < 1e-9].real
        upper = roots[roots.imag > 1e-9]
        np.testing.assert_allclose(real, [2.0], atol=1e-12)
        np.testing.assert_allclose(upper, [-1.0 + 0.5j], atol=1e-12)


class TestCreateProblem:
    """Tests for create_problem function."""

    @pytest.mark.parametrize("kind", PROBLEM_KINDS)
    def test_returns_problem(self, kind: str) -> None:
        """Every kind produces a CubicProblem with a nonzero leading term."""
        problem = create_problem(kind, seed=DEFAULT_SEED)
        assert isinstance(problem, CubicProblem)
        assert problem.kind == kind
        assert problem.coefficients[0] != 0

    @pytest.mark.parametrize(
        "kind,expected_count",
        [
            ("distinct", 3),
            ("double", 3),
            ("triple", 3),
            ("complex_pair", 1),
            ("clustered", 3),
        ],
    )
    def test_root_count(self, kind: str, expected_count: int) -> None:
        """True roots are listed with multiplicity."""
        assert create_problem(kind).num_real_roots == expected_count

    def test_true_roots_sorted(self) -> None:
        """True roots are ascending."""
        for kind in PROBLEM_KINDS:
            roots = create_problem(kind, seed=5).true_roots
            assert list(roots) == sorted(roots)

    def test_distinct_roots_separated(self) -> None:
        """Distinct roots keep a gap of at least scale/10."""
        for seed in range(20):
            roots = create_problem("distinct", seed=seed, scale=10.0).true_roots
            assert np.min(np.diff(roots)) >= 1.0

    def test_double_root_repeated(self) -> None:
        """The double root appears twice."""
        roots = create_problem("double", seed=1).true_roots
        assert len(set(roots)) == 2

    def test_triple_root_repeated(self) -> None:
        """The triple root appears three times."""
        roots = create_problem("triple", seed=1).true_roots
        assert len(set(roots)) == 1

    def test_reproducibility(self) -> None:
        """Same seed should produce identical problems."""
        assert create_problem("distinct", seed=42) == create_problem("distinct", seed=42)

    def test_different_seeds_produce_different_problems(self) -> None:
        """Different seeds should produce different problems."""
        assert create_problem("distinct", seed=42) != create_problem("distinct", seed=43)

    def test_unknown_kind_raises(self) -> None:
        """Unknown kind should raise ValueError."""
        with pytest.raises(ValueError, match="Unknown problem kind"):
            create_problem("quartic")

    def test_to_dict(self) -> None:
        """to_dict is JSON-friendly."""
        result = create_problem("distinct", seed=42).to_dict()
        assert result["kind"] == "distinct"
        assert result["random_seed"] == 42
        assert len(result["coefficients"]) == 4
        assert isinstance(result["true_roots"], list)


class TestCreateProblemSet:
    """Tests for create_problem_set function."""

    def test_count(self) -> None:
        """Returns the requested number of problems."""
        assert len(create_problem_set("double", 12)) == 12

    def test_consecutive_seeds(self) -> None:
        """Problem i is generated with seed + i."""
        problems = create_problem_set("distinct", 3, seed=100)
        assert [p.seed for p in problems] == [100, 101, 102]
        assert problems[1] == create_problem("distinct", seed=101)
