#!/usr/bin/env python3
"""
Logging utilities for the Bayesian Regression Primer.

This module provides:
1. Consistent logging setup across the lessons
2. A decorator for structured step logging
3. Helper methods for common logging patterns
"""
import logging
import os
import sys
import json
import functools
import time
from typing import Dict, Any, Optional, Callable, TypeVar

# Type variables for callable
F = TypeVar('F', bound=Callable[..., Any])

LOGGER_NAME = 'Bayes_Primer'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class LoggerProvider:
    """
    Provides centralized access to the application logger.

    All components share one logger instance; ``LoggingManager.setup_logging``
    swaps in a reconfigured logger.
    """
    _logger = None

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get the application logger instance.

        Returns:
            The application logger
        """
        if cls._logger is None:
            # Create a default logger if not yet configured
            cls._logger = logging.getLogger(LOGGER_NAME)
            if not cls._logger.handlers:
                handler = logging.StreamHandler(sys.stdout)
                handler.setFormatter(logging.Formatter(LOG_FORMAT))
                cls._logger.addHandler(handler)
                cls._logger.setLevel(logging.INFO)

        return cls._logger


def get_logger() -> logging.Logger:
    """Get the application logger."""
    return LoggerProvider.get_logger()


# Initialize logger for module-level functions to use
logger = get_logger()


def log_step(step_name: Optional[str] = None) -> Callable[[F], F]:
    """
    Decorator to log the start and end of a step with timing information.

    Can be used with or without a step name:

    @log_step
    def my_func():
        ...

    @log_step("Sampling posterior")
    def my_func():
        ...

    Args:
        step_name: Optional name of the step. If None, function name is used.

    Returns:
        Decorated function that logs step start and end
    """
    def decorator(func: F) -> F:
        name = step_name if isinstance(step_name, str) else func.__name__

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            log = get_logger()
            log.info(f"Starting step: {name}")
            start_time = time.time()
            success = False
            try:
                result = func(*args, **kwargs)
                success = True
            except Exception as e:
                log.error(f"Error in step {name}: {str(e)}")
                raise
            finally:
                elapsed = time.time() - start_time
                status = "completed successfully" if success else "failed"
                log.info(f"Step {name} {status} in {elapsed:.2f} seconds")

            return result

        return wrapper

    # Handle case where decorator is used without arguments: @log_step
    if callable(step_name):
        return decorator(step_name)

    return decorator


class LoggingManager:
    """
    Manages logging configuration and provides utility methods for logging.
    """

    @staticmethod
    def setup_logging(
        logger_name: str = LOGGER_NAME,
        log_level: Any = logging.INFO,
        log_file: Optional[str] = None,
        suppress_warnings: bool = False,
        log_format: str = LOG_FORMAT
    ) -> logging.Logger:
        """
        Set up logging configuration.

        Args:
            logger_name: Name of the logger
            log_level: Logging level, as an int or a level name such as "DEBUG"
            log_file: Path to log file (if None, logs to console only)
            suppress_warnings: Whether to suppress python warnings
            log_format: Format string for log messages

        Returns:
            Configured logger instance
        """
        log = logging.getLogger(logger_name)
        if isinstance(log_level, str):
            log_level = logging.getLevelName(log_level.upper())
        log.setLevel(log_level)

        # Remove existing handlers
        if log.handlers:
            log.handlers.clear()

        formatter = logging.Formatter(log_format)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        log.addHandler(console_handler)

        if log_file:
            os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            log.addHandler(file_handler)

        if suppress_warnings:
            import warnings
            warnings.filterwarnings('ignore')

        # Update the main logger in LoggerProvider
        LoggerProvider._logger = log

        return log

    @staticmethod
    def log_error(
        log: logging.Logger,
        message: str,
        exception: Optional[Exception] = None,
        data: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Log an error with optional exception and data.

        Args:
            log: Logger instance
            message: Error message
            exception: Optional exception object
            data: Optional dictionary with additional data
        """
        if exception:
            log.error(f"{message}: {str(exception)}")
            if exception.__traceback__ is not None:
                import traceback
                log.debug(''.join(traceback.format_tb(exception.__traceback__)))
        else:
            log.error(message)

        if data:
            log.error(f"Error data: {data}")

    @staticmethod
    def log_dict(
        log: logging.Logger,
        title: str,
        data: Dict[str, Any],
        level: str = 'info'
    ) -> None:
        """
        Log a dictionary with a title.

        Args:
            log: Logger instance
            title: Title for the log entry
            data: Dictionary to log
            level: Log level ('debug', 'info', 'warning', 'error')
        """
        log_method = getattr(log, level.lower())
        log_method(f"{title}:\n{json.dumps(data, indent=2, default=str)}")
