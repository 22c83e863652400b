"""
Stepper Factory

Selects one of the supported (strategy, tableau) pairs by enum or name.
This is the method-selection surface used by configuration files and the
command line.

Example:
    # By name
    stepper = create_stepper('dirk3', options)

    # By enum
    stepper = StepperFactory.create(StepperType.IRK4, options, iterations=6)

    # List available methods
    for name in StepperFactory.available():
        print(name)
"""

from enum import Enum
from typing import Dict, List, Optional, Tuple, Type

from ..errors import ConfigurationError
from .base import ODEOptions, RungeKuttaStepper
from .explicit import ExplicitRungeKuttaStepper
from .implicit import ImplicitRungeKuttaStepper
from .tableau import DIRK3, ERK4, IRK4, Tableau


class StepperType(Enum):
    """Available methods."""
    ERK4 = 'erk4'
    DIRK3 = 'dirk3'
    IRK4 = 'irk4'


# Mapping from type enum to strategy and tableau
_STEPPERS: Dict[StepperType, Tuple[Type[RungeKuttaStepper], Tableau]] = {
    StepperType.ERK4: (ExplicitRungeKuttaStepper, ERK4),
    StepperType.DIRK3: (ImplicitRungeKuttaStepper, DIRK3),
    StepperType.IRK4: (ImplicitRungeKuttaStepper, IRK4),
}

# Mapping from string names to type enum
_NAME_TO_TYPE: Dict[str, StepperType] = {
    # Explicit RK4
    'erk4': StepperType.ERK4,
    'rk4': StepperType.ERK4,
    'explicit': StepperType.ERK4,

    # Diagonally implicit, order 3
    'dirk3': StepperType.DIRK3,
    'dirk': StepperType.DIRK3,
    'sdirk': StepperType.DIRK3,

    # Gauss-Legendre, order 4
    'irk4': StepperType.IRK4,
    'gauss': StepperType.IRK4,
    'gauss_legendre': StepperType.IRK4,
    'implicit': StepperType.IRK4,
}

_DESCRIPTIONS: Dict[StepperType, str] = {
    StepperType.ERK4: (
        "Classical explicit 4-stage Runge-Kutta of order 4. The local error "
        "is estimated by repeating the step with doubled width anchored one "
        "step earlier. Uses 8 derivative evaluations per attempt."
    ),
    StepperType.DIRK3: (
        "Two-stage diagonally implicit Runge-Kutta of order 3. Stages are "
        "approximated by 3 fixed-point passes; the error is the difference "
        "between the last two passes."
    ),
    StepperType.IRK4: (
        "Two-stage implicit Gauss-Legendre Runge-Kutta of order 4. Stages are "
        "approximated by 4 fixed-point passes; the error is the difference "
        "between the last two passes."
    ),
}


class StepperFactory:
    """
    Factory for adaptive Runge-Kutta steppers.

    Supports creation by enum type or string name. String names are
    case-insensitive and support multiple aliases.
    """

    @staticmethod
    def create(
        stepper_type: StepperType,
        options: ODEOptions,
        tableau: Optional[Tableau] = None,
        iterations: Optional[int] = None,
    ) -> RungeKuttaStepper:
        """
        Create stepper by type enum.

        Args:
            stepper_type: Method to create
            options: Integration request
            tableau: Replacement tableau for the method (e.g. with other
                     controller bounds); defaults to the method's own
            iterations: Fixed-point passes (implicit methods only)

        Returns:
            Configured stepper instance

        Raises:
            ConfigurationError: If the type is unknown or iterations is
                                given for an explicit method
        """
        if stepper_type not in _STEPPERS:
            raise ConfigurationError(f"Unknown stepper type: {stepper_type}")

        stepper_class, default_tableau = _STEPPERS[stepper_type]
        tableau = default_tableau if tableau is None else tableau

        if stepper_class is ImplicitRungeKuttaStepper:
            return ImplicitRungeKuttaStepper(options, tableau, iterations=iterations)
        if iterations is not None:
            raise ConfigurationError(f"{stepper_type.value} does not use fixed-point iterations")
        return stepper_class(options, tableau)

    @staticmethod
    def resolve(name: str) -> StepperType:
        """
        Map a (case-insensitive) name or alias to its StepperType.

        Raises:
            ConfigurationError: If name is not recognized
        """
        name_lower = name.lower().strip()
        if name_lower not in _NAME_TO_TYPE:
            available = ', '.join(sorted(_NAME_TO_TYPE))
            raise ConfigurationError(
                f"Unknown method name: '{name}'. Available: {available}"
            )
        return _NAME_TO_TYPE[name_lower]

    @staticmethod
    def from_name(name: str, options: ODEOptions, **kwargs) -> RungeKuttaStepper:
        """
        Create stepper by string name.

        Args:
            name: Method name (case-insensitive). Supported names:
                  - 'erk4', 'rk4', 'explicit': explicit RK4
                  - 'dirk3', 'dirk', 'sdirk': diagonally implicit order 3
                  - 'irk4', 'gauss', 'gauss_legendre', 'implicit': Gauss order 4
            options: Integration request
            **kwargs: tableau / iterations, see create()
        """
        return StepperFactory.create(StepperFactory.resolve(name), options, **kwargs)

    @staticmethod
    def default_tableau(name: str) -> Tableau:
        """Tableau bound to a method name."""
        return _STEPPERS[StepperFactory.resolve(name)][1]

    @staticmethod
    def available() -> List[str]:
        """List canonical method names."""
        return [stepper_type.value for stepper_type in StepperType]

    @staticmethod
    def available_aliases() -> Dict[str, str]:
        """Map every accepted alias to its canonical name."""
        return {alias: stepper_type.value for alias, stepper_type in _NAME_TO_TYPE.items()}

    @staticmethod
    def get_description(name: str) -> str:
        """Human-readable description of a method."""
        name_lower = name.lower().strip()
        if name_lower in _NAME_TO_TYPE:
            return _DESCRIPTIONS[_NAME_TO_TYPE[name_lower]]
        return f"Unknown method: {name}"


def create_stepper(
    name: str,
    options: ODEOptions,
    tableau: Optional[Tableau] = None,
    iterations: Optional[int] = None,
) -> RungeKuttaStepper:
    """
    Convenience function to create a stepper by name.

    Example:
        options = ODEOptions(h_init=1e-4, x_start=0.0, x_stop=2 * np.pi,
                             start_values=Vector.of(0.0, 1.0),
                             problem=harmonic_oscillator,
                             relative_tolerance=1e-8)
        output = create_stepper('irk4', options).integrate()
    """
    return StepperFactory.from_name(name, options, tableau=tableau, iterations=iterations)
