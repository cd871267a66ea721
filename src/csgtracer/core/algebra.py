"""Closed-form solvers for linear systems and polynomial equations.

This module solves, without iteration:
    - Linear systems of 3 equations in 3 unknowns (real coefficients)
    - Quadratic, cubic, and quartic equations of one complex variable

The polynomial solvers work in the complex domain and always report the
full set of roots (with multiplicity) that the closed-form method produces.
filter_real_numbers() is the single place where complex roots are reduced to
real values, e.g. distances along a ray.

All "is this zero?" decisions use the one TOLERANCE constant so the solvers
agree with each other about degenerate inputs.

Example:
    >>> from csgtracer.core.algebra import solve_quadratic_equation
    >>> sorted(r.real for r in solve_quadratic_equation(1, -5, 6))
    [2.0, 3.0]
"""

from __future__ import annotations

import cmath
import math
from collections.abc import Sequence

from csgtracer.core.errors import SolverError

# Magnitude below which a value is treated as zero by every solver
TOLERANCE = 1.0e-8

# Maximum number of roots produced by any solver in this module
MAX_ROOTS = 4


def is_zero(x: complex) -> bool:
    """Return True if both parts of x are within TOLERANCE of zero."""
    x = complex(x)
    return abs(x.real) < TOLERANCE and abs(x.imag) < TOLERANCE


# =============================================================================
# Linear Systems
# =============================================================================


def solve_linear_equations(
    D: float, E: float, F: float, G: float,
    H: float, I: float, J: float, K: float,
    L: float, M: float, N: float, P: float,
) -> tuple[float, float, float] | None:
    """Solve a linear system of 3 equations in the unknowns u, v, w.

    The system is:

        D*u + E*v + F*w + G = 0
        H*u + I*v + J*w + K = 0
        L*u + M*v + N*w + P = 0

    Elimination pivots first on F, then on (E*J - F*I), then on the final
    denominator. If any pivot is smaller in magnitude than TOLERANCE the
    system is reported as unsolvable rather than dividing by it.

    Returns:
        The tuple (u, v, w), or None when no reliable solution exists.
    """
    if abs(F) < TOLERANCE:
        return None

    b = E * J - F * I
    if abs(b) < TOLERANCE:
        return None

    a = D * J - F * H
    d = H * N - J * L
    e = I * N - J * M
    denom = a * e - b * d
    if abs(denom) < TOLERANCE:
        return None

    c = G * J - F * K
    f = K * N - J * P

    u = (b * f - e * c) / denom
    v = -(a * u + c) / b
    w = -(D * u + E * v + G) / F
    return u, v, w


# =============================================================================
# Polynomial Equations
# =============================================================================


def filter_real_numbers(values: Sequence[complex]) -> list[float]:
    """Keep the real part of every value whose imaginary part is negligible.

    Order is preserved. The number of real values retained is the length of
    the returned list.
    """
    return [complex(v).real for v in values if abs(complex(v).imag) < TOLERANCE]


def solve_quadratic_equation(a: complex, b: complex, c: complex) -> list[complex]:
    """Find the complex roots of a*x^2 + b*x + c = 0.

    Degenerate inputs fall back gracefully:
        - a ~ 0 and b ~ 0: no roots
        - a ~ 0: the single linear root -c/b
        - discriminant ~ 0: one (doubled) root -b/2a

    Returns:
        A list of 0, 1, or 2 complex roots.
    """
    a, b, c = complex(a), complex(b), complex(c)

    if is_zero(a):
        if is_zero(b):
            return []
        return [-c / b]

    radicand = b * b - 4.0 * a * c
    if is_zero(radicand):
        return [-b / (2.0 * a)]

    r = cmath.sqrt(radicand)
    d = 2.0 * a
    return [(-b + r) / d, (-b - r) / d]


def complex_cube_root(z: complex, n: int) -> complex:
    """Return one of the three complex cube roots of z.

    Args:
        z: The value whose cube root is wanted.
        n: Branch index 0, 1, or 2. Branch 0 is the principal root; each
            following branch is rotated by another 120 degrees.

    Returns:
        A value w with w**3 == z (within rounding).
    """
    z = complex(z)
    rho = abs(z) ** (1.0 / 3.0)
    theta = (2.0 * math.pi * n + cmath.phase(z)) / 3.0
    return complex(rho * math.cos(theta), rho * math.sin(theta))


def _snapped_sqrt(z: complex) -> complex:
    """Principal square root, with radicands within TOLERANCE of 0 treated as 0.

    A repeated root makes a radicand vanish, but rounding leaves a tiny
    residue whose square root is far larger than TOLERANCE.
    """
    if is_zero(z):
        return 0j
    return cmath.sqrt(z)


def _biquadratic_roots(alpha: complex, gamma: complex, t: complex) -> list[complex]:
    """Roots of (y^2)^2 + alpha*y^2 + gamma = 0, shifted by t."""
    rad = _snapped_sqrt(alpha * alpha - 4.0 * gamma)
    r1 = _snapped_sqrt((-alpha + rad) / 2.0)
    r2 = _snapped_sqrt((-alpha - rad) / 2.0)
    return [t + r1, t - r1, t + r2, t - r2]


def solve_cubic_equation(
    a: complex, b: complex, c: complex, d: complex
) -> list[complex]:
    """Find the complex roots of a*x^3 + b*x^2 + c*x + d = 0.

    Uses Cardano's method on the depressed cubic. When a ~ 0 the equation is
    solved as a quadratic in (b, c, d) instead.

    Returns:
        Exactly 3 roots (repeated roots appear repeatedly), or whatever the
        quadratic fallback returns when a ~ 0.
    """
    a, b, c, d = complex(a), complex(b), complex(c), complex(d)

    if is_zero(a):
        return solve_quadratic_equation(b, c, d)

    b /= a
    c /= a
    d /= a

    S = b / 3.0
    D = c / 3.0 - S * S
    E = S * S * S + (d - S * c) / 2.0
    f_root = _snapped_sqrt(E * E + D * D * D)
    F = -f_root - E

    if is_zero(F):
        F = f_root - E

    if is_zero(F):
        # D and E both vanish: the depressed cubic is y^3 = 0.
        return [-S, -S, -S]

    roots = []
    for n in range(3):
        g = complex_cube_root(F, n)
        roots.append(g - D / g - S)
    return roots


def solve_quartic_equation(
    a: complex, b: complex, c: complex, d: complex, e: complex
) -> list[complex]:
    """Find the complex roots of a*x^4 + b*x^3 + c*x^2 + d*x + e = 0.

    Uses Ferrari's method. The quartic is first made monic and depressed
    (x = y - b/4), leaving y^4 + alpha*y^2 + beta*y + gamma = 0:
        - beta ~ 0: biquadratic, solved as a quadratic in y^2
        - otherwise: a root of the resolvent cubic splits the quartic into
          two quadratics

    When a ~ 0 the equation is solved as a cubic in (b, c, d, e) instead.

    Returns:
        Exactly 4 roots (repeated roots appear repeatedly), or whatever the
        cubic fallback returns when a ~ 0.
    """
    a, b, c, d, e = complex(a), complex(b), complex(c), complex(d), complex(e)

    if is_zero(a):
        return solve_cubic_equation(b, c, d, e)

    b /= a
    c /= a
    d /= a
    e /= a

    b2 = b * b
    b3 = b * b2
    b4 = b2 * b2

    alpha = (-3.0 / 8.0) * b2 + c
    beta = b3 / 8.0 - b * c / 2.0 + d
    gamma = (-3.0 / 256.0) * b4 + b2 * c / 16.0 - b * d / 4.0 + e

    alpha2 = alpha * alpha
    t = -b / 4.0

    if is_zero(beta):
        return _biquadratic_roots(alpha, gamma, t)

    alpha3 = alpha * alpha2
    P = -(alpha2 / 12.0 + gamma)
    Q = -alpha3 / 108.0 + alpha * gamma / 3.0 - beta * beta / 8.0
    R = -Q / 2.0 + _snapped_sqrt(Q * Q / 4.0 + P * P * P / 27.0)
    U = complex_cube_root(R, 0)
    y = (-5.0 / 6.0) * alpha + U
    if is_zero(U):
        y -= complex_cube_root(Q, 0)
    else:
        y -= P / (3.0 * U)
    W = _snapped_sqrt(alpha + 2.0 * y)
    if W == 0:
        # Only a biquadratic splits into y^2 factors; beta was rounding noise
        return _biquadratic_roots(alpha, gamma, t)

    r1 = _snapped_sqrt(-(3.0 * alpha + 2.0 * y + 2.0 * beta / W))
    r2 = _snapped_sqrt(-(3.0 * alpha + 2.0 * y - 2.0 * beta / W))

    return [
        t + (W - r1) / 2.0,
        t + (W + r1) / 2.0,
        t + (-W - r2) / 2.0,
        t + (-W + r2) / 2.0,
    ]


def solve_quadratic_real(a: float, b: float, c: float) -> list[float]:
    """Return the real roots of a*x^2 + b*x + c = 0."""
    return filter_real_numbers(solve_quadratic_equation(a, b, c))


def solve_cubic_real(a: float, b: float, c: float, d: float) -> list[float]:
    """Return the real roots of a*x^3 + b*x^2 + c*x + d = 0."""
    return filter_real_numbers(solve_cubic_equation(a, b, c, d))


def solve_quartic_real(a: float, b: float, c: float, d: float, e: float) -> list[float]:
    """Return the real roots of a*x^4 + b*x^3 + c*x^2 + d*x + e = 0."""
    return filter_real_numbers(solve_quartic_equation(a, b, c, d, e))


# =============================================================================
# Solver Validation
# =============================================================================


def validate_polynomial(poly: Sequence[complex], root: complex) -> None:
    """Check that root is a root of the polynomial.

    Args:
        poly: Coefficients in increasing power order (constant term first).
        root: The claimed root.

    Raises:
        SolverError: If the polynomial does not evaluate to ~0 at root.
    """
    power = complex(1.0, 0.0)
    total = complex(0.0, 0.0)
    for coeff in poly:
        total += coeff * power
        power *= root

    if not is_zero(total):
        raise SolverError(f"Invalid polynomial: value at {root} is {total}, not 0.")


def check_roots(known: Sequence[complex], found: Sequence[complex]) -> None:
    """Check that the found roots match the known roots one-to-one.

    Each known root must be paired with a distinct found root within
    TOLERANCE, so a repeated known root needs a repeated found root.

    Raises:
        SolverError: If the lists cannot be matched.
    """
    num_roots = len(found)
    if num_roots > MAX_ROOTS or len(known) < num_roots:
        raise SolverError(f"Internal error: numRoots={num_roots} is out of bounds.")

    used = [False] * num_roots
    for k in range(num_roots):
        for f in range(num_roots):
            if not used[f] and is_zero(complex(known[k]) - complex(found[f])):
                used[f] = True
                break
        else:
            raise SolverError(
                "Solver produced incorrect value(s) for complex roots: "
                f"known={list(known[:num_roots])}, found={list(found)}"
            )


def check_known_quadratic_roots(M: complex, K: complex, L: complex) -> None:
    """Solve M*(x-K)*(x-L) = 0 and verify the roots K and L come back.

    A double root (K ~ L) must be reported exactly once.

    Raises:
        SolverError: On a wrong root count or wrong root values.
    """
    a = M
    b = -M * (K + L)
    c = M * K * L
    poly = [c, b, a]
    validate_polynomial(poly, K)
    validate_polynomial(poly, L)

    found = solve_quadratic_equation(a, b, c)
    expected = 1 if is_zero(complex(K) - complex(L)) else 2
    if len(found) != expected:
        raise SolverError(f"Wrong number of roots found: expected {expected}, found {len(found)}.")

    check_roots([K, L], found)


def check_known_cubic_roots(M: complex, K: complex, L: complex, N: complex) -> None:
    """Solve M*(x-K)*(x-L)*(x-N) = 0 and verify all three roots.

    Raises:
        SolverError: On a wrong root count or wrong root values.
    """
    a = M
    b = -M * (K + L + N)
    c = M * (K * L + N * K + N * L)
    d = -M * K * L * N
    poly = [d, c, b, a]
    for root in (K, L, N):
        validate_polynomial(poly, root)

    found = solve_cubic_equation(a, b, c, d)
    if len(found) != 3:
        raise SolverError(f"Wrong number of roots found: expected 3, found {len(found)}.")

    check_roots([K, L, N], found)


def check_known_quartic_roots(
    m: complex, a: complex, b: complex, c: complex, d: complex
) -> None:
    """Solve m*(x-a)*(x-b)*(x-c)*(x-d) = 0 and verify all four roots.

    Raises:
        SolverError: On a wrong root count or wrong root values.
    """
    A = m
    B = -m * (a + b + c + d)
    C = m * (a * b + c * d + (a + b) * (c + d))
    D = -m * (c * d * (a + b) + a * b * (c + d))
    E = m * a * b * c * d
    poly = [E, D, C, B, A]
    for root in (a, b, c, d):
        validate_polynomial(poly, root)

    found = solve_quartic_equation(A, B, C, D, E)
    if len(found) != 4:
        raise SolverError(f"Wrong number of roots found: expected 4, found {len(found)}.")

    check_roots([a, b, c, d], found)
