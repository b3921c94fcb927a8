"""
Configuration package for the Bayesian Regression Primer.

This package provides configuration management for the lessons.
"""

from config.config_manager import AppConfig, ConfigManager, get_config

__all__ = ['AppConfig', 'ConfigManager', 'get_config']
