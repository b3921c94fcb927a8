#!/usr/bin/env python3
"""
Tests for translating model specifications into PyMC models.
"""
import unittest
import os
import sys

import numpy as np

sys.path.insert(0, os.path.abspath(os.path.dirname(os.path.dirname(__file__))))

from data.simulation import simulate_linear_data, simulate_probit_data, to_model_data
from model.bayesian.model_builder import BayesianModelBuilder
from model.exceptions import ModelBuildError
from model.model_spec import (
    Likelihood, LinearPredictor, ModelSpec, Prior, diffuse_normal,
    linear_regression_spec, two_intercept_spec, probit_spec,
)


class TestBayesianModelBuilder(unittest.TestCase):
    """Tests for the BayesianModelBuilder class"""

    def setUp(self):
        self.builder = BayesianModelBuilder()
        self.linear_data = to_model_data(simulate_linear_data(n_obs=30, random_seed=1).data)
        self.probit_data = to_model_data(simulate_probit_data(n_obs=30, random_seed=1).data)

    def test_linear_model_variables(self):
        model = self.builder.build_model(linear_regression_spec(), self.linear_data)
        self.assertEqual({rv.name for rv in model.free_RVs}, {"a", "b1", "b2", "sigma"})
        self.assertIn("tau", model.named_vars)
        self.assertEqual([rv.name for rv in model.observed_RVs], ["y"])
        self.assertIs(self.builder.get_model(), model)

    def test_two_intercept_model_variables(self):
        model = self.builder.build_model(two_intercept_spec(), self.linear_data)
        self.assertEqual({rv.name for rv in model.free_RVs}, {"a1", "a2", "b1", "b2", "sigma"})

    def test_tau_is_inverse_variance(self):
        model = self.builder.build_model(linear_regression_spec(), self.linear_data)
        # Uniform(0, 100) starts at its midpoint
        tau = model.compile_fn(model["tau"])(model.initial_point())
        self.assertAlmostEqual(float(tau), 50.0 ** -2, places=8)

    def test_probit_model_with_profiles(self):
        spec = probit_spec((-0.5, 0.5, 0.0))
        model = self.builder.build_model(spec, self.probit_data)
        self.assertEqual({rv.name for rv in model.free_RVs}, {"a", "b1", "b2"})
        self.assertIn("p1", model.named_vars)
        self.assertIn("p2", model.named_vars)
        self.assertNotIn("tau", model.named_vars)

    def test_probit_model_without_profiles(self):
        model = self.builder.build_model(probit_spec(), self.probit_data)
        self.assertNotIn("p1", model.named_vars)

    def test_missing_data_key(self):
        data = dict(self.linear_data)
        del data["x2"]
        with self.assertRaises(ModelBuildError):
            self.builder.build_model(linear_regression_spec(), data)

    def test_wrong_length(self):
        data = dict(self.linear_data)
        data["x1"] = data["x1"][:-1]
        with self.assertRaises(ModelBuildError) as ctx:
            self.builder.build_model(linear_regression_spec(), data)
        self.assertIn("x1", ctx.exception.details)

    def test_non_binary_probit_outcome(self):
        data = dict(self.probit_data)
        data["y"] = np.arange(30)
        with self.assertRaises(ModelBuildError):
            self.builder.build_model(probit_spec(), data)

    def test_invalid_spec_is_wrapped(self):
        spec = ModelSpec(
            name="broken",
            likelihood=Likelihood("probit", LinearPredictor(["a"], {"x1": "b1", "x2": "b2"})),
            priors=[Prior("a", diffuse_normal())],
        )
        with self.assertRaises(ModelBuildError):
            self.builder.build_model(spec, self.probit_data)


if __name__ == "__main__":
    unittest.main()
