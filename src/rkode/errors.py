"""
Error Taxonomy for rkode

Every failure raised by the integration core derives from RkodeError.
None of these are retried internally; a raised error aborts the current
integrate() call.

- ConfigurationError: invalid options, ill-formed tableau, unknown method
- MissingTolerance: neither relative nor absolute tolerance was given
- DimensionMismatch: vector/matrix operands of incompatible shape
- SingularMatrix: LU decomposition found no usable pivot
- StepSizePlateau: step controller cannot shrink a rejected step
- NonFiniteState: a step produced a NaN or infinite error estimate
"""

from typing import Dict, Optional


__all__ = [
    'RkodeError',
    'ConfigurationError',
    'MissingTolerance',
    'DimensionMismatch',
    'SingularMatrix',
    'StepSizePlateau',
    'NonFiniteState',
]


class RkodeError(Exception):
    """General rkode error."""


class ConfigurationError(RkodeError, ValueError):
    """Raised at construction time, before any integration step."""


class MissingTolerance(ConfigurationError):
    """Neither a relative nor an absolute tolerance was specified."""

    def __init__(self, message: str = "Specify at least one tolerance."):
        super().__init__(message)


class DimensionMismatch(RkodeError, ValueError):
    """Operands have incompatible shapes."""


class SingularMatrix(RkodeError, ArithmeticError):
    """
    LU decomposition could not find a pivot above the degeneracy threshold.

    Attributes:
        pivot: Magnitude of the best pivot candidate that was found
    """

    def __init__(self, message: str, pivot: float = 0.0):
        super().__init__(message)
        self.pivot = pivot


class StepSizePlateau(RkodeError, RuntimeError):
    """
    Adaptive step-size control stalled on a rejected step.

    Attributes:
        step_size: Step size at which progress stalled
        x: Independent variable where the stalled step started
        partial_solution: Trajectory accepted before the failure
    """

    def __init__(
        self,
        step_size: float,
        x: float,
        partial_solution: Optional[Dict] = None,
        reason: str = "plateaued",
    ):
        super().__init__(f"Value of h {reason} at {step_size} (x = {x})")
        self.step_size = step_size
        self.x = x
        self.partial_solution = partial_solution if partial_solution is not None else {}


class NonFiniteState(RkodeError, ArithmeticError):
    """
    A step produced a NaN or infinite error estimate or tolerance.

    Attributes:
        x: Independent variable where the failing step started
        step_size: Step size of the failing attempt
        partial_solution: Trajectory accepted before the failure
    """

    def __init__(self, x: float, step_size: float, partial_solution: Optional[Dict] = None):
        super().__init__(f"Non-finite error estimate for step h = {step_size} at x = {x}")
        self.x = x
        self.step_size = step_size
        self.partial_solution = partial_solution if partial_solution is not None else {}
