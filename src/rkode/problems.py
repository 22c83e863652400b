"""
Sample Initial-Value Problems

Small ODE systems with known behavior, used by the command line and the
tests:

- exponential_decay: y' = -y, exact solution y = y0 exp(-x)
- harmonic_oscillator: y'' + y = 0 as y0' = y1, y1' = -y0
- van_der_pol: y'' - mu (1 - y^2) y' + y = 0, with analytic Jacobian
"""

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from .linalg import Matrix, Vector


def exponential_decay(x: float, y: Vector) -> Vector:
    """y' = -y"""
    return -y


def harmonic_oscillator(x: float, y: Vector) -> Vector:
    """
    Harmonic oscillator as a first-order system.
    State: [y, y']; with y(0) = 0, y'(0) = 1 the solution is (sin x, cos x).
    """
    return Vector.of(y[1], -y[0])


def van_der_pol(mu: float) -> Tuple[Callable[[float, Vector], Vector], Callable[[float, Vector], Matrix]]:
    """
    Van der Pol oscillator and its Jacobian.

    Args:
        mu: Nonlinear damping strength; mu = 0 reduces to the harmonic oscillator

    Returns:
        (problem, jacobian) pair
    """
    def problem(x: float, y: Vector) -> Vector:
        return Vector.of(
            y[1],
            mu * (1.0 - y[0] * y[0]) * y[1] - y[0],
        )

    def jacobian(x: float, y: Vector) -> Matrix:
        return Matrix.square(
            0.0, 1.0,
            -2.0 * mu * y[0] * y[1] - 1.0, mu * (1.0 - y[0] * y[0]),
        )

    return problem, jacobian


@dataclass(frozen=True)
class ProblemSpec:
    """A right-hand side bundled with its usual starting state."""
    problem: Callable[[float, Vector], Vector]
    start_values: Vector
    jacobian: Optional[Callable[[float, Vector], Matrix]] = None


def get_problem(name: str, mu: float = 0.0) -> ProblemSpec:
    """
    Look up a sample problem by name.

    Args:
        name: One of PROBLEM_NAMES
        mu: Damping parameter (van_der_pol only)

    Raises:
        KeyError: If name is unknown
    """
    if name == 'decay':
        return ProblemSpec(exponential_decay, Vector.of(1.0))
    if name == 'harmonic':
        return ProblemSpec(harmonic_oscillator, Vector.of(0.0, 1.0))
    if name == 'van_der_pol':
        problem, jacobian = van_der_pol(mu)
        return ProblemSpec(problem, Vector.of(0.0, 1.0), jacobian)
    raise KeyError(f"Unknown problem: '{name}'. Available: {', '.join(PROBLEM_NAMES)}")


PROBLEM_NAMES = ('decay', 'harmonic', 'van_der_pol')
