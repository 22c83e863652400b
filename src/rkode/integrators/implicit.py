"""
Implicit and Diagonally-Implicit Runge-Kutta Stepper

The stage equations

    K_j = f(xn + c_j h, yn + h * (A K)_j),   j = 0 .. s-1

are NOT solved to convergence. Instead a fixed number m of fixed-point
(Picard) passes over the whole stage matrix is made:

    K_0 = rows f(xn + c_j h, yn)
    K_i = (E + h A K_{i-1}).apply_by_row((j, v) -> f(xn + c_j h, v))

where every row of E equals yn. Each pass gains one order in h, so m
defaults to the tableau order p. For stiff problems this behaves like an
explicit scheme of that order, not like a converged implicit solve.

Estimates and error:

    yn1 = yn + h K_{m-1}^T b        (last iterate)
    yi  = yn + h K_{m-2}^T b        (previous iterate)
    err = |yn1 - yi|                (Euclidean)

The controller exponent is 1 / p.
"""

from typing import Optional, Tuple

from ..errors import ConfigurationError
from ..linalg import Matrix, Vector
from .base import ODEOptions, RungeKuttaStepper
from .tableau import IRK4, Tableau


class ImplicitRungeKuttaStepper(RungeKuttaStepper):
    """
    Adaptive (diagonally) implicit Runge-Kutta stepper using fixed-point
    stage iteration.

    Attributes:
        iterations: Number of stage matrices computed per step (>= 2);
                    defaults to the tableau order

    Example:
        stepper = ImplicitRungeKuttaStepper(options, DIRK3)
        output = stepper.integrate()
    """

    def __init__(
        self,
        options: ODEOptions,
        tableau: Tableau = IRK4,
        iterations: Optional[int] = None,
    ):
        super().__init__(options, tableau)
        self.iterations = tableau.p if iterations is None else iterations
        if self.iterations < 2:
            raise ConfigurationError(
                f"Fixed-point iteration needs at least 2 passes, got {self.iterations}"
            )

    @property
    def error_exponent(self) -> float:
        return 1.0 / self.tableau.p

    def _stage_iterates(self, h: float, xn: float, yn: Vector) -> Tuple[Matrix, Matrix]:
        """Return the last two stage matrices of the fixed-point iteration."""
        c = self.tableau.c
        s = self.tableau.s

        stage = Matrix.from_rows(self._f(xn + c[j] * h, yn) for j in range(s))
        e = Matrix.from_rows([yn] * s)
        ha = h * self.tableau.a

        for _ in range(1, self.iterations):
            previous = stage
            stage = (e + ha @ previous).apply_by_row(
                lambda j, v: self._f(xn + c[j] * h, v)
            )
        return stage, previous

    def _estimates(self, h: float, xn: float, yn: Vector) -> Tuple[Vector, Vector]:
        last, previous = self._stage_iterates(h, xn, yn)
        b = self.tableau.b
        yn1 = yn + h * (last.T @ b)
        yi = yn + h * (previous.T @ b)
        return yn1, yi

    def _local_error(self, yn1: Vector, yi: Vector) -> float:
        return (yn1 - yi).length

    def name(self) -> str:
        return f"{super().name()}, {self.iterations} fixed-point passes"
