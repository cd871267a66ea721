"""Unit tests for the closed-form equation solvers.

Tests cover:
- 3x3 linear systems, including singular systems
- Quadratic, cubic, and quartic root finding against known roots
- Degenerate leading coefficients
- Real-root filtering
- The validation helpers themselves
"""

import cmath

import pytest

from csgtracer.core.algebra import (
    TOLERANCE,
    check_known_cubic_roots,
    check_known_quadratic_roots,
    check_known_quartic_roots,
    check_roots,
    complex_cube_root,
    filter_real_numbers,
    is_zero,
    solve_cubic_equation,
    solve_cubic_real,
    solve_linear_equations,
    solve_quadratic_equation,
    solve_quadratic_real,
    solve_quartic_equation,
    solve_quartic_real,
    validate_polynomial,
)
from csgtracer.core.errors import SolverError


class TestLinearEquations:
    """Tests for solve_linear_equations."""

    def test_known_solution(self):
        """u=1, v=2, w=3 satisfies all three equations."""
        solution = solve_linear_equations(
            1.0, 2.0, 3.0, -14.0,
            2.0, -1.0, 1.0, -3.0,
            1.0, 1.0, -1.0, 0.0,
        )
        assert solution is not None
        u, v, w = solution
        assert abs(u - 1.0) < 1e-12
        assert abs(v - 2.0) < 1e-12
        assert abs(w - 3.0) < 1e-12

    def test_identical_planes_are_unsolvable(self):
        """Three copies of one equation have no unique solution."""
        assert solve_linear_equations(
            1.0, 1.0, 1.0, -3.0,
            1.0, 1.0, 1.0, -3.0,
            1.0, 1.0, 1.0, -3.0,
        ) is None

    def test_zero_first_pivot_is_unsolvable(self):
        """F is the first pivot; a zero F reports no solution."""
        assert solve_linear_equations(
            1.0, 0.0, 0.0, -1.0,
            0.0, 1.0, 0.0, -2.0,
            0.0, 0.0, 1.0, -3.0,
        ) is None


class TestQuadratic:
    """Tests for solve_quadratic_equation."""

    def test_two_real_roots(self):
        roots = solve_quadratic_equation(1.0, -5.0, 6.0)
        assert len(roots) == 2
        assert sorted(r.real for r in roots) == pytest.approx([2.0, 3.0])

    def test_known_roots_check(self):
        check_known_quadratic_roots(2.0, 3.0, 2.0)
        check_known_quadratic_roots(-1.5, 4.0, -7.0)

    def test_double_root_reported_once(self):
        roots = solve_quadratic_equation(1.0, -10.0, 25.0)
        assert len(roots) == 1
        assert abs(roots[0] - 5.0) < TOLERANCE
        check_known_quadratic_roots(1.0, 5.0, 5.0)

    def test_complex_conjugate_roots(self):
        """x^2 - 2x + 5 = 0 has roots 1 +/- 2i."""
        roots = solve_quadratic_equation(1.0, -2.0, 5.0)
        assert len(roots) == 2
        check_roots([1 + 2j, 1 - 2j], roots)
        assert solve_quadratic_real(1.0, -2.0, 5.0) == []

    def test_complex_coefficients(self):
        check_known_quadratic_roots(1 + 1j, 2 - 3j, -0.5 + 4j)

    def test_linear_fallback(self):
        """With a ~ 0 the single root of b*x + c = 0 is returned."""
        roots = solve_quadratic_equation(0.0, 2.0, -8.0)
        assert len(roots) == 1
        assert abs(roots[0] - 4.0) < TOLERANCE

    def test_no_equation(self):
        assert solve_quadratic_equation(0.0, 0.0, 1.0) == []


class TestCubic:
    """Tests for solve_cubic_equation and complex_cube_root."""

    def test_cube_root_branches(self):
        """All three branches cube back to the input and are distinct."""
        z = 8.0 + 0j
        roots = [complex_cube_root(z, n) for n in range(3)]
        for w in roots:
            assert abs(w**3 - z) < 1e-12
        assert abs(roots[0] - 2.0) < 1e-12
        assert abs(roots[1] - roots[2]) > 1.0

    def test_distinct_real_roots(self):
        check_known_cubic_roots(1.0, 1.0, 2.0, 3.0)
        check_known_cubic_roots(-2.0, -4.0, 0.5, 6.0)

    def test_complex_roots(self):
        check_known_cubic_roots(1.0, 1 + 2j, 1 - 2j, -3.0)
        check_known_cubic_roots(2 - 1j, 0.5j, -1.0 + 1j, 3.0)

    def test_always_three_roots(self):
        assert len(solve_cubic_equation(1.0, -6.0, 11.0, -6.0)) == 3

    def test_triple_root(self):
        """(x - 2)^3 has a triple root at 2."""
        roots = solve_cubic_equation(1.0, -6.0, 12.0, -8.0)
        assert len(roots) == 3
        for root in roots:
            assert abs(root - 2.0) < 1e-9

    def test_double_roots(self):
        check_known_cubic_roots(1.0, 2.0, 2.0, 3.0)
        check_known_cubic_roots(1.0, -1.0, -1.0, 4.0)
        check_known_cubic_roots(1.0, 5.0, 5.0, -2.0)

    def test_real_wrapper_keeps_double_root(self):
        """(x - 2)^2 (x - 3) keeps both copies of the double root."""
        real_roots = solve_cubic_real(1.0, -7.0, 16.0, -12.0)
        assert sorted(real_roots) == pytest.approx([2.0, 2.0, 3.0], abs=1e-9)

    def test_quadratic_fallback(self):
        roots = solve_cubic_equation(0.0, 1.0, -5.0, 6.0)
        assert len(roots) == 2
        check_roots([2.0, 3.0], roots)

    def test_real_wrapper_drops_complex_pair(self):
        """(x - 1)(x^2 + 1) has exactly one real root."""
        real_roots = solve_cubic_real(1.0, -1.0, 1.0, -1.0)
        assert len(real_roots) == 1
        assert abs(real_roots[0] - 1.0) < 1e-9


class TestQuartic:
    """Tests for solve_quartic_equation (Ferrari's method)."""

    def test_biquadratic_path(self):
        """Roots symmetric about their mean give a vanishing beta term."""
        check_known_quartic_roots(1.0, 1.0, 2.0, 3.0, 4.0)

    def test_resolvent_cubic_path(self):
        check_known_quartic_roots(1.0, 1.0, 2.0, 3.0, 5.0)
        check_known_quartic_roots(-3.0, -2.0, 0.5, 4.0, 7.0)

    def test_double_root(self):
        check_known_quartic_roots(1.0, 1.0, 1.0, 2.0, 3.0)

    def test_real_wrapper_keeps_double_root(self):
        """(x - 1)^2 (x - 2)(x - 3) = x^4 - 7x^3 + 17x^2 - 17x + 6."""
        real_roots = solve_quartic_real(1.0, -7.0, 17.0, -17.0, 6.0)
        assert sorted(real_roots) == pytest.approx([1.0, 1.0, 2.0, 3.0], abs=1e-9)

    def test_complex_roots(self):
        check_known_quartic_roots(1.0, 1 + 1j, 1 - 1j, 2.0, -3.0)
        check_known_quartic_roots(2.0, 1j, -1j, 1 + 2j, -4.0)

    def test_always_four_roots(self):
        assert len(solve_quartic_equation(1.0, -10.0, 35.0, -50.0, 24.0)) == 4

    def test_cubic_fallback(self):
        roots = solve_quartic_equation(0.0, 1.0, -6.0, 11.0, -6.0)
        assert len(roots) == 3
        check_roots([1.0, 2.0, 3.0], roots)

    def test_real_wrapper(self):
        """(x^2 + 4)(x - 1)(x - 3) = x^4 - 4x^3 + 7x^2 - 16x + 12."""
        real_roots = solve_quartic_real(1.0, -4.0, 7.0, -16.0, 12.0)
        assert sorted(real_roots) == pytest.approx([1.0, 3.0], abs=1e-9)


class TestHelpers:
    """Tests for tolerance and validation helpers."""

    def test_is_zero(self):
        assert is_zero(0.0)
        assert is_zero(TOLERANCE / 2.0 + 1j * TOLERANCE / 2.0)
        assert not is_zero(2.0 * TOLERANCE)
        assert not is_zero(2j * TOLERANCE)

    def test_filter_real_numbers_preserves_order(self):
        values = [3.0 + 0j, 1.0 + 1.0j, -2.0 + 1e-12j, 0.5 - 0.5j]
        assert filter_real_numbers(values) == [3.0, -2.0]

    def test_validate_polynomial(self):
        # x^2 - 1, coefficients in increasing power order
        validate_polynomial([-1.0, 0.0, 1.0], 1.0)
        validate_polynomial([-1.0, 0.0, 1.0], -1.0)
        with pytest.raises(SolverError):
            validate_polynomial([-1.0, 0.0, 1.0], 2.0)

    def test_check_roots_is_bijective(self):
        """A repeated known root cannot be matched twice by one found root."""
        check_roots([1.0, 2.0], [2.0, 1.0])
        with pytest.raises(SolverError):
            check_roots([1.0, 2.0], [1.0, 1.0])

    def test_check_roots_rejects_wrong_values(self):
        with pytest.raises(SolverError):
            check_roots([1.0, 2.0, 3.0], [1.0, 2.0, 3.5])

    def test_principal_square_root_used(self):
        """The quadratic pair is (-b + sqrt(D)) / 2a first."""
        roots = solve_quadratic_equation(1.0, 0.0, 4.0)
        assert abs(roots[0] - cmath.sqrt(-16.0) / 2.0) < TOLERANCE
