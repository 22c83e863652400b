"""
Adaptive Runge-Kutta Steppers

This package integrates systems of first-order ODEs y' = f(x, y) over an
interval with adaptive step-size control.

Available Steppers:
- ExplicitRungeKuttaStepper: explicit RK, error by doubled-step comparison
- ImplicitRungeKuttaStepper: (diagonally) implicit RK, stages by fixed-point iteration

Available Tableaus:
- ERK4: classical explicit RK of order 4
- DIRK3: two-stage diagonally implicit RK of order 3
- IRK4: two-stage Gauss-Legendre RK of order 4
"""

from .base import (
    ODEOptions,
    ODEOutput,
    RungeKuttaStepper,
)
from .tableau import Tableau, TableauKind, ERK4, DIRK3, IRK4, TABLEAUS
from .explicit import ExplicitRungeKuttaStepper
from .implicit import ImplicitRungeKuttaStepper
from .factory import StepperFactory, StepperType, create_stepper

__all__ = [
    # Base classes
    'ODEOptions',
    'ODEOutput',
    'RungeKuttaStepper',
    # Tableaus
    'Tableau',
    'TableauKind',
    'ERK4',
    'DIRK3',
    'IRK4',
    'TABLEAUS',
    # Steppers
    'ExplicitRungeKuttaStepper',
    'ImplicitRungeKuttaStepper',
    # Factory
    'StepperFactory',
    'StepperType',
    'create_stepper',
]
