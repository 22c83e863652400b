"""
rkode Command Line

Runs one integration of a sample problem with the configured method and
logs the run statistics.

Example:
    rkode --problem van_der_pol --mu 1.0 --method dirk3 --x-stop 10
    RKODE_CONFIG=config/rkode.yml rkode --log-level DEBUG
"""

import argparse
import logging
import sys
from typing import List, Optional

from .common.config import get_config
from .common.logging_config import setup_logging
from .errors import RkodeError
from .integrators import StepperFactory
from .problems import PROBLEM_NAMES, get_problem

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Adaptive Runge-Kutta ODE integration')
    parser.add_argument('--config', help='Path to configuration file')
    parser.add_argument('--method', choices=sorted(StepperFactory.available_aliases()),
                        help='Integration method (overrides configuration)')
    parser.add_argument('--problem', choices=PROBLEM_NAMES,
                        help='Sample problem (overrides configuration)')
    parser.add_argument('--mu', type=float, help='Van der Pol damping parameter')
    parser.add_argument('--x-stop', type=float, help='End of the integration interval')
    parser.add_argument('--log-level', default=None,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level')
    parser.add_argument('--json-logs', action='store_true', help='Emit JSON log records')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point; returns the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        config = get_config(args.config)
    except RkodeError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    if args.method:
        config.method.name = args.method
    if args.problem:
        config.problem = args.problem
    if args.mu is not None:
        config.mu = args.mu
    if args.x_stop is not None:
        config.integration.x_stop = args.x_stop

    setup_logging(
        name='rkode',
        log_level=args.log_level or config.logging.level,
        log_file=config.logging.log_file,
        json_format=args.json_logs or config.logging.json_format,
    )

    try:
        selected = get_problem(config.problem, mu=config.mu)
        options = config.build_options(selected.problem, selected.start_values, selected.jacobian)
        stepper = config.create_stepper(options)
        output = stepper.integrate()
    except KeyError as e:
        logger.error(str(e))
        return 1
    except RkodeError as e:
        logger.error(f"Integration failed: {e}")
        return 1

    logger.info(f"Elapsed time: {output.elapsed_ms:.1f}ms")
    logger.info(f"Number of integration points: {output.size}")
    logger.info(
        f"Number of failures/successes (ratio): {output.failures}/{output.successes} "
        f"({output.failure_ratio:.3f})"
    )
    logger.info(f"Average h used: {output.average_step:.3e}")
    logger.info(f"Final state at x = {output.final_x}: {output.final_state}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
