#!/usr/bin/env python3
"""
Tests for the configuration manager.
"""
import unittest
import os
import sys
import json
import tempfile
from pathlib import Path
from unittest.mock import patch

sys.path.insert(0, os.path.abspath(os.path.dirname(os.path.dirname(__file__))))

from config.config_manager import AppConfig, ConfigManager, get_config
from model.exceptions import ConfigurationError


def clean_environ():
    return {k: v for k, v in os.environ.items() if not k.startswith(ConfigManager.ENV_PREFIX)}


@patch.dict(os.environ, clean_environ(), clear=True)
class TestConfigManager(unittest.TestCase):
    """Tests for the ConfigManager class"""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.config_path = Path(self.tmpdir.name) / "config.json"

    def tearDown(self):
        self.tmpdir.cleanup()

    def write_config(self, values):
        with open(self.config_path, "w") as f:
            json.dump(values, f)
        return self.config_path

    def test_defaults(self):
        config = ConfigManager().app_config
        self.assertEqual(config.sim_n_obs, 100)
        self.assertEqual(config.sim_linear_betas, (0.3, -0.3))
        self.assertEqual(config.model_step_method, "nuts")
        self.assertTrue(config.create_plots)
        self.assertEqual(config.get("plot_interval_multiplier"), 1.96)
        self.assertEqual(config.get("not_a_setting", "fallback"), "fallback")

    def test_load_json(self):
        manager = ConfigManager(self.write_config({
            "sim_n_obs": 250,
            "sim_probit_betas": [0.5, 0.1],
            "model_step_method": "metropolis",
            "create_plots": False,
        }))
        config = manager.app_config
        self.assertEqual(config.sim_n_obs, 250)
        self.assertEqual(config.sim_probit_betas, (0.5, 0.1))
        self.assertEqual(config.model_step_method, "metropolis")
        self.assertFalse(config.create_plots)

    def test_unknown_keys_go_to_extras(self):
        config = ConfigManager(self.write_config({"colour": "blue"})).app_config
        self.assertEqual(config.extras, {"colour": "blue"})
        self.assertFalse(hasattr(config, "colour"))

    def test_missing_file_keeps_defaults(self):
        config = ConfigManager(Path(self.tmpdir.name) / "absent.json").app_config
        self.assertEqual(config, AppConfig())

    def test_invalid_json(self):
        self.config_path.write_text("{not json")
        with self.assertRaises(ConfigurationError):
            ConfigManager(self.config_path)

    def test_env_overrides(self):
        with patch.dict(os.environ, {
            "PRIMER_MODEL_N_DRAWS": "2500",
            "PRIMER_CREATE_PLOTS": "false",
            "PRIMER_SIM_LINEAR_BETAS": "1.0,2.0",
        }):
            config = ConfigManager(self.write_config({"model_n_draws": 300})).app_config
        self.assertEqual(config.model_n_draws, 2500)
        self.assertFalse(config.create_plots)
        self.assertEqual(config.sim_linear_betas, (1.0, 2.0))

    def test_invalid_env_value_is_ignored(self):
        with patch.dict(os.environ, {"PRIMER_SIM_N_OBS": "many"}):
            config = ConfigManager().app_config
        self.assertEqual(config.sim_n_obs, 100)

    def test_unsupported_step_method(self):
        with self.assertRaises(ConfigurationError):
            ConfigManager(self.write_config({"model_step_method": "gibbs"}))

    def test_bad_betas(self):
        with self.assertRaises(ConfigurationError):
            ConfigManager(self.write_config({"sim_linear_betas": [0.3]}))

    def test_non_positive_n_obs(self):
        with self.assertRaises(ConfigurationError):
            ConfigManager(self.write_config({"sim_n_obs": 0}))

    def test_validate_repairs_small_values(self):
        config = ConfigManager(self.write_config({
            "model_n_draws": 10,
            "model_n_tune": 0,
            "model_n_chains": 0,
            "results_dir": "",
        })).app_config
        self.assertEqual(config.model_n_draws, 100)
        self.assertEqual(config.model_n_tune, 50)
        self.assertEqual(config.model_n_chains, 1)
        self.assertEqual(config.results_dir, "results")

    def test_get_config_is_shared(self):
        self.assertIs(get_config(), get_config())
        self.assertIsInstance(get_config().app_config, AppConfig)

    def test_save_round_trip(self):
        manager = ConfigManager(self.write_config({"sim_random_seed": 7, "plot_ppc_samples": 20}))
        saved = Path(self.tmpdir.name) / "nested" / "saved.json"
        manager.save_config(saved)

        reloaded = ConfigManager(saved).app_config
        self.assertEqual(reloaded, manager.app_config)


if __name__ == "__main__":
    unittest.main()
