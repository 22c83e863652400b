"""
Centralized Configuration Management for rkode

This module provides a unified interface for loading and accessing
solver configuration from YAML files.
"""

import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Sequence

import yaml

from ..errors import ConfigurationError
from ..integrators import ODEOptions, RungeKuttaStepper, StepperFactory
from ..linalg import Matrix, Vector

CONFIG_ENV_VAR = 'RKODE_CONFIG'


def _coerce_floats(config, names: Sequence[str]) -> None:
    for name in names:
        value = getattr(config, name)
        if value is None:
            continue
        try:
            setattr(config, name, float(value))
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"{name} must be a number, got {value!r}") from exc


@dataclass
class IntegrationConfig:
    """Configuration for the integration request"""

    h_init: float = 1e-4
    x_start: float = 0.0
    x_stop: float = 1.0
    relative_tolerance: Optional[float] = None
    absolute_tolerance: Optional[float] = 1e-8

    def __post_init__(self):
        # YAML 1.1 reads exponent literals such as 1e-8 as strings
        _coerce_floats(self, ('h_init', 'x_start', 'x_stop',
                              'relative_tolerance', 'absolute_tolerance'))


@dataclass
class MethodConfig:
    """Configuration for method selection"""

    name: str = "irk4"
    iterations: Optional[int] = None  # fixed-point passes, implicit methods only

    # Overrides of the tableau's step-size controller constants
    h_min: Optional[float] = None
    h_max: Optional[float] = None
    h_fac: Optional[float] = None

    def __post_init__(self):
        _coerce_floats(self, ('h_min', 'h_max', 'h_fac'))


@dataclass
class LoggingConfig:
    """Configuration for logging output"""

    level: str = "INFO"
    json_format: bool = False
    log_file: Optional[str] = None


def _section(cls, values: Optional[Dict[str, Any]], section: str):
    """Build one config dataclass, rejecting unknown keys."""
    values = values or {}
    known = {f.name for f in fields(cls)}
    unknown = set(values) - known
    if unknown:
        raise ConfigurationError(
            f"Unknown key(s) in '{section}' section: {', '.join(sorted(unknown))}"
        )
    return cls(**values)


@dataclass
class SolverConfig:
    """Master configuration for one rkode run"""

    integration: IntegrationConfig = field(default_factory=IntegrationConfig)
    method: MethodConfig = field(default_factory=MethodConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Sample problem used by the command line
    problem: str = "van_der_pol"
    mu: float = 0.0

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'SolverConfig':
        """Build configuration from a parsed mapping"""
        return cls(
            integration=_section(IntegrationConfig, config_dict.get('integration'), 'integration'),
            method=_section(MethodConfig, config_dict.get('method'), 'method'),
            logging=_section(LoggingConfig, config_dict.get('logging'), 'logging'),
            problem=config_dict.get('problem', 'van_der_pol'),
            mu=float(config_dict.get('mu', 0.0)),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str) -> 'SolverConfig':
        """Load configuration from YAML file"""
        with open(yaml_path, 'r') as f:
            config_dict = yaml.safe_load(f) or {}

        if not isinstance(config_dict, dict):
            raise ConfigurationError(f"{yaml_path} does not contain a mapping")
        return cls.from_dict(config_dict)

    def to_yaml(self, yaml_path: str) -> None:
        """Save configuration to YAML file"""
        config_dict = {
            'integration': asdict(self.integration),
            'method': asdict(self.method),
            'logging': asdict(self.logging),
            'problem': self.problem,
            'mu': self.mu,
        }

        with open(yaml_path, 'w') as f:
            yaml.safe_dump(config_dict, f, default_flow_style=False)

    def build_options(
        self,
        problem: Callable[[float, Vector], Vector],
        start_values: Sequence[float],
        jacobian: Optional[Callable[[float, Vector], Matrix]] = None,
    ) -> ODEOptions:
        """Combine the integration section with a right-hand side"""
        integration = self.integration
        return ODEOptions(
            h_init=integration.h_init,
            x_start=integration.x_start,
            x_stop=integration.x_stop,
            start_values=start_values,
            problem=problem,
            relative_tolerance=integration.relative_tolerance,
            absolute_tolerance=integration.absolute_tolerance,
            jacobian=jacobian,
        )

    def create_stepper(self, options: ODEOptions) -> RungeKuttaStepper:
        """Create the configured stepper, applying controller overrides"""
        method = self.method
        tableau = StepperFactory.default_tableau(method.name).with_bounds(
            h_min=method.h_min,
            h_max=method.h_max,
            h_fac=method.h_fac,
        )
        return StepperFactory.from_name(
            method.name,
            options,
            tableau=tableau,
            iterations=method.iterations,
        )


def get_config(config_path: Optional[str] = None) -> SolverConfig:
    """
    Get solver configuration

    Priority:
    1. Provided config_path
    2. RKODE_CONFIG environment variable
    3. config/rkode.yml
    4. Default configuration
    """
    if config_path is None:
        config_path = os.getenv(CONFIG_ENV_VAR)

    if config_path is None:
        default_path = Path('config/rkode.yml')
        if default_path.exists():
            config_path = str(default_path)

    if config_path and Path(config_path).exists():
        return SolverConfig.from_yaml(config_path)

    if config_path:
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    # Return default configuration
    return SolverConfig()
