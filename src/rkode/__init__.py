"""
rkode: Adaptive Runge-Kutta Integration of First-Order ODE Systems

Integrates y' = f(x, y), y(x_start) = y0 over [x_start, x_stop] with
adaptive step-size control, returning the accepted trajectory and step
statistics.

Example:
    from rkode import ODEOptions, Vector, create_stepper

    options = ODEOptions(h_init=1e-3, x_start=0.0, x_stop=1.0,
                         start_values=Vector.of(1.0),
                         problem=lambda x, y: -y,
                         relative_tolerance=1e-8)
    output = create_stepper('irk4', options).integrate()
    output.final_state
"""

__version__ = "0.1.0"

from .errors import (
    RkodeError,
    ConfigurationError,
    MissingTolerance,
    DimensionMismatch,
    SingularMatrix,
    StepSizePlateau,
    NonFiniteState,
)
from .linalg import Vector, Matrix
from .integrators import (
    ODEOptions,
    ODEOutput,
    RungeKuttaStepper,
    ExplicitRungeKuttaStepper,
    ImplicitRungeKuttaStepper,
    Tableau,
    ERK4,
    DIRK3,
    IRK4,
    StepperFactory,
    StepperType,
    create_stepper,
)

__all__ = [
    'RkodeError',
    'ConfigurationError',
    'MissingTolerance',
    'DimensionMismatch',
    'SingularMatrix',
    'StepSizePlateau',
    'NonFiniteState',
    'Vector',
    'Matrix',
    'ODEOptions',
    'ODEOutput',
    'RungeKuttaStepper',
    'ExplicitRungeKuttaStepper',
    'ImplicitRungeKuttaStepper',
    'Tableau',
    'ERK4',
    'DIRK3',
    'IRK4',
    'StepperFactory',
    'StepperType',
    'create_stepper',
]
