#!/usr/bin/env python3
"""
File utility functions for the Bayesian Regression Primer.

This module provides file and directory management utility functions.
"""

import os
import json
from typing import Dict, Any, Union
from pathlib import Path

import numpy as np

from utils.logging_utils import logger


def ensure_dir_exists(directory: Union[str, Path]) -> None:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        directory: Path to directory
    """
    if directory:
        os.makedirs(directory, exist_ok=True)
        logger.debug(f"Ensuring directory exists: {directory}")


def to_serializable(obj: Any) -> Any:
    """
    Convert object to JSON-serializable format.

    Args:
        obj: Object to convert

    Returns:
        JSON-serializable representation of object
    """
    if isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        return float(obj)
    elif isinstance(obj, (np.ndarray, list, tuple)):
        return [to_serializable(x) for x in obj]
    elif isinstance(obj, dict):
        return {str(k): to_serializable(v) for k, v in obj.items()}
    elif obj is None or isinstance(obj, (str, int, float, bool)):
        return obj
    return str(obj)


def save_json(data: Dict[str, Any], filepath: Union[str, Path]) -> None:
    """
    Save dictionary to JSON file.

    Args:
        data: Dictionary to save
        filepath: Path to save JSON file
    """
    ensure_dir_exists(os.path.dirname(str(filepath)))

    with open(filepath, 'w') as f:
        json.dump(to_serializable(data), f, indent=2)

    logger.debug(f"Saved JSON data to {filepath}")


def load_json(filepath: Union[str, Path]) -> Dict[str, Any]:
    """
    Load dictionary from JSON file.

    Args:
        filepath: Path to JSON file

    Returns:
        Dictionary loaded from JSON file, or an empty dict if it does not exist
    """
    if not os.path.exists(filepath):
        logger.warning(f"JSON file not found: {filepath}")
        return {}

    with open(filepath, 'r') as f:
        data = json.load(f)

    logger.debug(f"Loaded JSON data from {filepath}")
    return data
