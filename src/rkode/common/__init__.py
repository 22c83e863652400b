"""
Shared configuration and logging setup for rkode.
"""

from .config import (
    IntegrationConfig,
    MethodConfig,
    LoggingConfig,
    SolverConfig,
    get_config,
)
from .logging_config import JSONFormatter, setup_logging

__all__ = [
    'IntegrationConfig',
    'MethodConfig',
    'LoggingConfig',
    'SolverConfig',
    'get_config',
    'JSONFormatter',
    'setup_logging',
]
