"""
Configuration manager for the Bayesian Regression Primer.

This module provides a centralized configuration object built on a
dataclass, with JSON file loading/saving and environment variable
overrides.
"""
import json
import os
from typing import Any, Optional, Union, Tuple
from pathlib import Path
from dataclasses import dataclass, asdict, field, fields

from utils.logging_utils import get_logger
from model.exceptions import ConfigurationError
from model.constants import (
    DEFAULT_N_OBS,
    DEFAULT_RANDOM_SEED,
    LINEAR_TRUE_INTERCEPT,
    LINEAR_TRUE_BETAS,
    LINEAR_NOISE_SD,
    PROBIT_TRUE_INTERCEPT,
    PROBIT_TRUE_BETAS,
    DEFAULT_DRAWS,
    DEFAULT_TUNE,
    DEFAULT_CHAINS,
    DEFAULT_TARGET_ACCEPT,
    DEFAULT_STEP_METHOD,
    SUPPORTED_STEP_METHODS,
    DEFAULT_INTERVAL_MULTIPLIER,
    DEFAULT_PPC_SAMPLES,
)

logger = get_logger()

# Singleton config manager instance
_config_manager = None


def get_config() -> 'ConfigManager':
    """Get the singleton ConfigManager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


@dataclass
class AppConfig:
    """Application configuration, grouped by prefix."""
    # App settings
    results_dir: str = "results"
    create_plots: bool = True
    log_level: str = "INFO"
    log_file: str = ""

    # Simulation settings (with sim_ prefix)
    sim_n_obs: int = DEFAULT_N_OBS
    sim_random_seed: int = DEFAULT_RANDOM_SEED
    sim_linear_intercept: float = LINEAR_TRUE_INTERCEPT
    sim_linear_betas: Tuple[float, float] = LINEAR_TRUE_BETAS
    sim_noise_sd: float = LINEAR_NOISE_SD
    sim_probit_intercept: float = PROBIT_TRUE_INTERCEPT
    sim_probit_betas: Tuple[float, float] = PROBIT_TRUE_BETAS
    sim_probit_method: str = "latent"

    # Sampler settings (with model_ prefix)
    model_n_draws: int = DEFAULT_DRAWS
    model_n_tune: int = DEFAULT_TUNE
    model_n_chains: int = DEFAULT_CHAINS
    model_target_accept: float = DEFAULT_TARGET_ACCEPT
    model_step_method: str = DEFAULT_STEP_METHOD

    # Plot settings
    plot_interval_multiplier: float = DEFAULT_INTERVAL_MULTIPLIER
    plot_ppc_samples: int = DEFAULT_PPC_SAMPLES

    extras: dict = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value with fallback to default.

        Args:
            key: Configuration key to look up
            default: Default value if key not found
        """
        return getattr(self, key, default)


class ConfigManager:
    """
    Configuration manager with a typed configuration object.

    Precedence, lowest to highest: dataclass defaults, JSON file,
    ``PRIMER_``-prefixed environment variables.
    """

    # Environment variable prefix for overrides
    ENV_PREFIX = "PRIMER_"

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to a JSON configuration file.
        """
        self.app_config = AppConfig()

        if config_path:
            self.load_config(config_path)

        self._apply_env_overrides()
        self.validate()

    def load_config(self, config_path: Union[str, Path]) -> None:
        """
        Load configuration from a JSON file.

        Unknown keys are kept under ``extras`` and reported.

        Raises:
            ConfigurationError: If the file is not valid JSON
        """
        config_path = Path(config_path)
        if not config_path.exists():
            logger.warning(f"Configuration file not found: {config_path}")
            return

        try:
            with open(config_path, 'r') as f:
                config_dict = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid configuration file {config_path}", details=str(e))

        known = {f.name for f in fields(AppConfig)}
        for key, value in config_dict.items():
            if key in known:
                setattr(self.app_config, key, self._coerce(key, value))
            else:
                logger.warning(f"Unknown configuration key: {key}")
                self.app_config.extras[key] = value

        logger.info(f"Loaded configuration from {config_path}")

    def _coerce(self, field_name: str, value: Any) -> Any:
        """Convert a raw value to the type of the field's current value."""
        current = getattr(self.app_config, field_name)
        if isinstance(current, bool):
            if isinstance(value, str):
                return value.lower() in ('true', 'yes', '1')
            return bool(value)
        if isinstance(current, tuple):
            if isinstance(value, str):
                value = value.split(',')
            return tuple(float(v) for v in value)
        if isinstance(current, dict):
            return json.loads(value) if isinstance(value, str) else dict(value)
        return type(current)(value)

    def _apply_env_overrides(self) -> None:
        """Apply configuration overrides from environment variables."""
        for field_info in fields(AppConfig):
            env_name = f"{self.ENV_PREFIX}{field_info.name.upper()}"
            if env_name not in os.environ:
                continue
            try:
                value = self._coerce(field_info.name, os.environ[env_name])
            except (ValueError, TypeError) as e:
                logger.warning(f"Invalid env value for {field_info.name}: {str(e)}")
                continue
            setattr(self.app_config, field_info.name, value)
            logger.debug(f"Applied env override for {field_info.name}: {value}")

    def save_config(self, filepath: Union[str, Path]) -> None:
        """
        Save the current configuration to a JSON file.

        Args:
            filepath: Path to save the configuration to.
        """
        config_dict = asdict(self.app_config)

        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        with open(filepath, 'w') as f:
            json.dump(config_dict, f, indent=4)

        logger.info(f"Saved configuration to {filepath}")

    def validate(self) -> bool:
        """
        Validate the current configuration and fix common issues.

        Returns:
            True once the configuration is usable

        Raises:
            ConfigurationError: If a value cannot be repaired
        """
        config = self.app_config

        if config.model_step_method not in SUPPORTED_STEP_METHODS:
            raise ConfigurationError(f"Unsupported step method: {config.model_step_method}",
                                     details=f"expected one of {SUPPORTED_STEP_METHODS}")

        if config.sim_n_obs < 1:
            raise ConfigurationError(f"sim_n_obs must be positive, got {config.sim_n_obs}")

        if len(config.sim_linear_betas) != 2 or len(config.sim_probit_betas) != 2:
            raise ConfigurationError("Simulation betas must have exactly two values")

        if not config.results_dir:
            logger.warning("No results directory specified. Using default 'results'.")
            config.results_dir = "results"

        # Ensure minimum values for MCMC parameters
        if config.model_n_draws < 100:
            logger.warning(f"n_draws too small: {config.model_n_draws}. Setting to 100.")
            config.model_n_draws = 100

        if config.model_n_tune < 50:
            logger.warning(f"n_tune too small: {config.model_n_tune}. Setting to 50.")
            config.model_n_tune = 50

        if config.model_n_chains < 1:
            logger.warning(f"n_chains too small: {config.model_n_chains}. Setting to 1.")
            config.model_n_chains = 1

        return True
