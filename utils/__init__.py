"""
Utility package for the Bayesian Regression Primer.

This package provides logging, timing and file helpers shared by the lessons.
"""

from utils.logging_utils import logger, get_logger, LoggingManager, log_step
from utils.file_utils import ensure_dir_exists, save_json, load_json
from utils.decorators import timed, log_errors

__all__ = [
    'logger', 'get_logger', 'LoggingManager', 'ensure_dir_exists',
    'save_json', 'load_json', 'log_step', 'timed', 'log_errors'
]
