"""
Explicit Runge-Kutta Stepper with Doubled-Step Error Estimation

Stages are computed sequentially from a strictly lower triangular A:

    k_i = f(x + c_i h, y + h * sum_{j<i} A[i, j] k_j)
    phi(h, x, y) = y + h * sum_i b_i k_i

Error estimation compares the regular step with one of twice the width
anchored one step earlier, both started from the current state:

    yn1 = phi(h, xn, yn)
    yi  = phi(2h, xn - h, yn)
    err = |yn1 - yi|_inf / (2^(p+1) - 1)

The controller exponent is 1 / (p + 1).
"""

from typing import List, Tuple

from ..errors import ConfigurationError
from ..linalg import Vector
from .base import ODEOptions, RungeKuttaStepper
from .tableau import ERK4, Tableau


class ExplicitRungeKuttaStepper(RungeKuttaStepper):
    """
    Adaptive explicit Runge-Kutta stepper.

    Uses 2s right-hand side evaluations per attempted step (s for the
    regular step, s for the doubled step).

    Example:
        options = ODEOptions(h_init=1e-3, x_start=0.0, x_stop=1.0,
                             start_values=Vector.of(1.0),
                             problem=lambda x, y: -y,
                             absolute_tolerance=1e-6)
        output = ExplicitRungeKuttaStepper(options).integrate()
    """

    def __init__(self, options: ODEOptions, tableau: Tableau = ERK4):
        if not tableau.is_explicit:
            raise ConfigurationError(
                f"Tableau {tableau.name} is not explicit (A must be strictly lower triangular)"
            )
        super().__init__(options, tableau)

    @property
    def error_exponent(self) -> float:
        return 1.0 / (self.tableau.p + 1)

    def _single_step(self, h: float, x: float, y: Vector) -> Vector:
        """One explicit Runge-Kutta step of size h from (x, y)."""
        a = self.tableau.a
        b = self.tableau.b
        c = self.tableau.c
        ks: List[Vector] = []
        for i in range(self.tableau.s):
            increment = Vector.zeros(y.dimension)
            for j in range(i):
                a_ij = a[i, j]
                if a_ij != 0.0:
                    increment = increment + a_ij * ks[j]
            ks.append(self._f(x + c[i] * h, y + h * increment))

        total = Vector.zeros(y.dimension)
        for i, k in enumerate(ks):
            total = total + b[i] * k
        return y + h * total

    def _estimates(self, h: float, xn: float, yn: Vector) -> Tuple[Vector, Vector]:
        yn1 = self._single_step(h, xn, yn)
        yi = self._single_step(2.0 * h, xn - h, yn)
        return yn1, yi

    def _local_error(self, yn1: Vector, yi: Vector) -> float:
        return (yn1 - yi).l1 / (2.0 ** (self.tableau.p + 1) - 1.0)
