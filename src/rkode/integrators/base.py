"""
Base Classes for Adaptive Runge-Kutta Steppers

Provides the integration request (ODEOptions), the integration result
(ODEOutput) and the abstract stepper holding the adaptive step-size
control loop shared by every stage-computation strategy.

Control loop, starting from xn = x_start, yn = start_values, h = h_init:

    while xn != x_stop:
        h = min(xn + h, x_stop) - xn                  # never overshoot
        yn1, yi = estimates(h, xn, yn)                # strategy specific
        err = local_error(yn1, yi)                    # strategy specific
        tol = atol + rtol * |yn1|
        h2 = min(xn + h * factor(tol, err), x_stop) - xn
        if err or tol not finite: fatal
        if err > tol:  reject, retry with h2 (fatal when h2 == h)
        else:          accept, xn += h, yn = yn1, h = h2

    factor = clamp(h_fac * (tol / err)^exponent, h_min, h_max)

Reference: Hairer, Norsett & Wanner (1993), Section II.4
"""

import logging
import math
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, Tuple

import numpy as np

from ..errors import (
    ConfigurationError,
    DimensionMismatch,
    MissingTolerance,
    NonFiniteState,
    StepSizePlateau,
)
from ..linalg import Matrix, Vector
from .tableau import Tableau

logger = logging.getLogger(__name__)

ODEProblem = Callable[[float, Vector], Vector]
ODEJacobian = Callable[[float, Vector], Matrix]
ODESolution = Dict[float, Vector]

# Trajectory downsampling used by plotting consumers
SAMPLE_THRESHOLD = 100_000
SAMPLE_STRIDE = 1000


@dataclass(frozen=True)
class ODEOptions:
    """
    Integration request for y' = problem(x, y), y(x_start) = start_values.

    Attributes:
        h_init: Initial step size (> 0)
        x_start: Start of the interval
        x_stop: End of the interval (> x_start)
        start_values: Initial state vector
        problem: Right-hand side, called as problem(x, y) -> y'
        relative_tolerance: Tolerance scaled by the norm of the new state
        absolute_tolerance: Tolerance added unscaled
        jacobian: Optional d(problem)/dy, reserved for Newton-type stage
                  solvers; the fixed-point strategies do not use it

    Raises:
        MissingTolerance: If both tolerances are None
        ConfigurationError: For any other invalid field
    """
    h_init: float
    x_start: float
    x_stop: float
    start_values: Vector
    problem: ODEProblem
    relative_tolerance: Optional[float] = None
    absolute_tolerance: Optional[float] = None
    jacobian: Optional[ODEJacobian] = None

    def __post_init__(self):
        if self.relative_tolerance is None and self.absolute_tolerance is None:
            raise MissingTolerance()
        for label, value in (('relative', self.relative_tolerance),
                             ('absolute', self.absolute_tolerance)):
            if value is not None and not value >= 0.0:
                raise ConfigurationError(f"The {label} tolerance must be >= 0, got {value}")
        if not (math.isfinite(self.h_init) and math.isfinite(self.x_start)
                and math.isfinite(self.x_stop)):
            raise ConfigurationError(
                f"h_init, x_start and x_stop must be finite, got "
                f"{self.h_init}, {self.x_start}, {self.x_stop}"
            )
        if not self.h_init > 0.0:
            raise ConfigurationError(f"Initial step must be positive, got {self.h_init}")
        if not self.x_stop > self.x_start:
            raise ConfigurationError(
                f"Interval must satisfy x_start < x_stop, got [{self.x_start}, {self.x_stop}]"
            )
        if not callable(self.problem):
            raise ConfigurationError("problem must be callable as problem(x, y)")
        if self.jacobian is not None and not callable(self.jacobian):
            raise ConfigurationError("jacobian must be callable as jacobian(x, y)")

        start = self.start_values
        if not isinstance(start, Vector):
            start = Vector(start)
            object.__setattr__(self, 'start_values', start)
        if start.dimension == 0:
            raise ConfigurationError("start_values must contain at least one component")

    @property
    def dimension(self) -> int:
        return self.start_values.dimension

    def tolerance(self, y: Vector) -> float:
        """Combined absolute-plus-relative tolerance for state y."""
        return (self.absolute_tolerance or 0.0) + (self.relative_tolerance or 0.0) * y.length


@dataclass(frozen=True)
class ODEOutput:
    """
    Result of a complete integration.

    Attributes:
        solution: Accepted states keyed by x, in ascending order; the first
                  key is x_start, the last is exactly x_stop
        successes: Number of accepted steps
        failures: Number of rejected step attempts
        elapsed_ms: Wall-clock duration of integrate()
        derivative_evaluations: Calls made to the right-hand side
    """
    solution: ODESolution
    successes: int
    failures: int
    elapsed_ms: float
    derivative_evaluations: int = 0

    @property
    def size(self) -> int:
        return len(self.solution)

    @property
    def attempts(self) -> int:
        return self.successes + self.failures

    @property
    def final_x(self) -> float:
        return next(reversed(self.solution))

    @property
    def final_state(self) -> Vector:
        return self.solution[self.final_x]

    @property
    def failure_ratio(self) -> float:
        """Rejected per accepted step (0.0 when nothing was accepted)."""
        if self.successes == 0:
            return 0.0
        return self.failures / self.successes

    def step_sizes(self) -> List[float]:
        """Sizes of the accepted steps, in order."""
        xs = list(self.solution)
        return [x1 - x0 for x0, x1 in zip(xs[:-1], xs[1:])]

    @property
    def average_step(self) -> float:
        steps = self.step_sizes()
        if not steps:
            return 0.0
        return sum(steps) / len(steps)

    def sample(
        self,
        threshold: int = SAMPLE_THRESHOLD,
        stride: int = SAMPLE_STRIDE,
    ) -> Iterator[Tuple[float, Vector]]:
        """
        Lazily yield (x, y) pairs in ascending x.

        When the trajectory holds more than threshold points only every
        stride-th point is kept, starting with the first.
        """
        if stride < 1:
            raise ConfigurationError(f"stride must be >= 1, got {stride}")
        keep = stride if self.size > threshold else 1
        return (item for i, item in enumerate(self.solution.items()) if i % keep == 0)

    def component_series(
        self,
        threshold: int = SAMPLE_THRESHOLD,
        stride: int = SAMPLE_STRIDE,
    ) -> List[Tuple[np.ndarray, np.ndarray]]:
        """
        Split the sampled trajectory into one (xs, values) series per component.

        Returns:
            List with entry i holding the x values and component i of y
        """
        points = list(self.sample(threshold, stride))
        xs = np.array([x for x, _ in points], dtype=np.float64)
        states = np.array([y.to_array() for _, y in points], dtype=np.float64)
        return [(xs, states[:, i]) for i in range(states.shape[1])]

    def __repr__(self) -> str:
        return (f"ODEOutput(points={self.size}, successes={self.successes}, "
                f"failures={self.failures}, elapsed={self.elapsed_ms:.1f}ms)")


class RungeKuttaStepper(ABC):
    """
    Abstract adaptive Runge-Kutta stepper.

    Owns one integration request and one tableau, and runs the shared
    accept/reject control loop. Subclasses supply the stage computation:

        - _estimates(): primary estimate yn1 and companion estimate yi
        - _local_error(): scalar error from yn1 and yi
        - error_exponent: exponent of the step-size controller

    Attributes:
        options: Integration request
        tableau: Coefficients and controller constants
    """

    def __init__(self, options: ODEOptions, tableau: Tableau):
        self.options = options
        self.tableau = tableau
        self._evaluations = 0

    @property
    @abstractmethod
    def error_exponent(self) -> float:
        """Exponent applied to tol/err by the step-size controller."""
        pass

    @abstractmethod
    def _estimates(self, h: float, xn: float, yn: Vector) -> Tuple[Vector, Vector]:
        """Return (yn1, yi) for a step of size h from (xn, yn)."""
        pass

    @abstractmethod
    def _local_error(self, yn1: Vector, yi: Vector) -> float:
        """Return the local error estimate of a step."""
        pass

    def name(self) -> str:
        """Return stepper name for logging."""
        return f"{self.tableau.name} ({self.tableau.describe()})"

    def _f(self, x: float, y: Vector) -> Vector:
        """Evaluate the right-hand side, checking the returned dimension."""
        self._evaluations += 1
        dy = self.options.problem(x, y)
        if not isinstance(dy, Vector):
            dy = Vector(dy)
        if dy.dimension != y.dimension:
            raise DimensionMismatch(
                f"problem returned dimension {dy.dimension} for a state of dimension {y.dimension}"
            )
        return dy

    def _factor(self, tol: float, err: float) -> float:
        """Clamped step-size change factor."""
        ratio = math.inf if err == 0.0 else tol / err
        t = self.tableau
        return min(t.h_max, max(t.h_min, t.h_fac * ratio ** self.error_exponent))

    def next_step(self, h: float, xn: float, tol: float, err: float) -> float:
        """Step proposed by the controller, clamped to not pass x_stop."""
        return min(xn + h * self._factor(tol, err), self.options.x_stop) - xn

    def integrate(self) -> ODEOutput:
        """
        Integrate from x_start to x_stop.

        Returns:
            ODEOutput with the accepted trajectory and step statistics

        Raises:
            StepSizePlateau: If a rejected step cannot be shrunk further
            NonFiniteState: If a step yields a NaN or infinite error estimate
            DimensionMismatch: If the right-hand side returns a wrong shape
        """
        opts = self.options
        x_stop = opts.x_stop
        logger.info(
            f"Using {self.name()}, integrating from {opts.x_start} to {x_stop}, "
            f"starting value {opts.start_values}"
        )

        self._evaluations = 0
        start = time.perf_counter()
        solution: ODESolution = {}
        successes = 0
        failures = 0
        xn = opts.x_start
        yn = opts.start_values
        h = opts.h_init
        last_h = h
        solution[xn] = yn

        while xn != x_stop:
            x_next = min(xn + h, x_stop)
            h = x_next - xn
            if h <= 0.0:
                logger.error(f"Step size underflow at x = {xn} (last h = {last_h})")
                raise StepSizePlateau(last_h, xn, solution, reason="underflowed")
            last_h = h

            yn1, yi = self._estimates(h, xn, yn)
            err = self._local_error(yn1, yi)
            tol = opts.tolerance(yn1)
            if not (math.isfinite(err) and math.isfinite(tol)):
                logger.error(f"Non-finite error estimate at x = {xn} (h = {h}, err = {err}, tol = {tol})")
                raise NonFiniteState(xn, h, solution)
            h2 = self.next_step(h, xn, tol, err)

            if err > tol:
                if h2 == h:
                    logger.error(
                        f"Step size plateaued at h = {h} (x = {xn}, err = {err:.3e}, tol = {tol:.3e})"
                    )
                    raise StepSizePlateau(h, xn, solution)
                failures += 1
                logger.debug(f"Rejected h = {h:.3e} at x = {xn} (err = {err:.3e} > tol = {tol:.3e})")
            else:
                successes += 1
                xn = x_next
                yn = yn1
                solution[xn] = yn
                logger.debug(f"Accepted h = {h:.3e}, x = {xn} (err = {err:.3e})")
            h = h2

        elapsed_ms = (time.perf_counter() - start) * 1000.0
        output = ODEOutput(
            solution=solution,
            successes=successes,
            failures=failures,
            elapsed_ms=elapsed_ms,
            derivative_evaluations=self._evaluations,
        )
        logger.info(
            f"Finished {self.tableau.name}: {output.size} points, "
            f"{failures}/{successes} failures/successes in {elapsed_ms:.1f}ms",
            extra={'method': self.tableau.name, 'component': 'stepper'},
        )
        return output

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}(method={self.tableau.name}, "
                f"x=[{self.options.x_start}, {self.options.x_stop}], h_init={self.options.h_init})")
