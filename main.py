#!/usr/bin/env python3
"""
Main entry point for the Bayesian Regression Primer.

Runs the lessons on simulated data and writes their plots and summaries:
1. linear: single-intercept linear regression
2. nonidentified: two-intercept regression whose intercepts are not identified
3. probit: probit binary regression with predicted probabilities

Usage:
    bayes-primer --run all
    bayes-primer --run nonidentified --step metropolis --draws 2000
    bayes-primer --run probit --print-model
"""
import sys
import argparse
from pathlib import Path

from utils.logging_utils import get_logger, LoggingManager
from config.config_manager import ConfigManager
from model.constants import LESSONS, SUPPORTED_STEP_METHODS
from model.exceptions import PrimerError
from model.model_spec import linear_regression_spec, two_intercept_spec, probit_spec
from model.model_runner import LessonRunner

logger = get_logger()

SPEC_BUILDERS = {
    "linear": linear_regression_spec,
    "nonidentified": two_intercept_spec,
    "probit": probit_spec,
}


def main(argv=None):
    """Main entry point for the Bayesian Regression Primer."""
    args = parse_arguments(argv)

    if args.print_model:
        lessons = LESSONS if args.run == "all" else (args.run,)
        for lesson in lessons:
            print(f"# {lesson}\n{SPEC_BUILDERS[lesson]().to_text()}\n")
        return 0

    try:
        config_manager = setup_config(args)
    except PrimerError as e:
        LoggingManager.log_error(logger, "Invalid configuration", e)
        return 1

    setup_logging(config_manager.app_config.log_level, config_manager.app_config.log_file)

    results_dir = Path(config_manager.app_config.results_dir)
    config_manager.save_config(results_dir / "config.json")

    runner = LessonRunner(config_manager.app_config)
    lessons = list(LESSONS) if args.run == "all" else [args.run]

    try:
        results = runner.run_all(lessons)
    except PrimerError as e:
        logger.error(f"Error running {args.run} lesson: {str(e)}")
        return 1

    for lesson, result in results.items():
        logger.info(f"Lesson '{lesson}' posterior summary:\n{result.summary.to_string()}")
    logger.info(f"Outputs written to {results_dir}")
    return 0


def setup_config(args):
    """
    Build the configuration from file, environment and command line.

    Args:
        args: Command line arguments

    Returns:
        ConfigManager instance
    """
    config_manager = ConfigManager(args.config)
    config = config_manager.app_config

    if args.results_dir:
        config.results_dir = args.results_dir
    if args.log_level:
        config.log_level = args.log_level
    if args.draws is not None:
        config.model_n_draws = args.draws
    if args.tune is not None:
        config.model_n_tune = args.tune
    if args.chains is not None:
        config.model_n_chains = args.chains
    if args.step:
        config.model_step_method = args.step
    if args.seed is not None:
        config.sim_random_seed = args.seed
    if args.n_obs is not None:
        config.sim_n_obs = args.n_obs
    if args.no_plots:
        config.create_plots = False

    config_manager.validate()
    return config_manager


def parse_arguments(argv=None):
    """
    Parse command line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(description="Bayesian Regression Primer")

    parser.add_argument("--run", choices=list(LESSONS) + ["all"], default="all",
                        help="Lesson to run")
    parser.add_argument("--config", type=str, help="Path to JSON configuration file")
    parser.add_argument("--results-dir", type=str, help="Directory to store results")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Log level")
    parser.add_argument("--print-model", action="store_true",
                        help="Print the model text and exit without sampling")
    parser.add_argument("--no-plots", action="store_true",
                        help="Skip plot generation")

    # Simulation options
    parser.add_argument("--n-obs", type=int, help="Number of simulated observations")
    parser.add_argument("--seed", type=int, help="Random seed for simulation and sampling")

    # Sampler options
    parser.add_argument("--draws", type=int, help="Number of post-warmup draws per chain")
    parser.add_argument("--tune", type=int, help="Number of warmup steps per chain")
    parser.add_argument("--chains", type=int, help="Number of chains")
    parser.add_argument("--step", choices=SUPPORTED_STEP_METHODS, help="Step method")

    return parser.parse_args(argv)


def setup_logging(log_level, log_file=None):
    """
    Set up logging based on the specified log level.

    Args:
        log_level: Log level name
        log_file: Optional log file path
    """
    LoggingManager.setup_logging(log_level=log_level, log_file=log_file or None)


if __name__ == "__main__":
    sys.exit(main())
