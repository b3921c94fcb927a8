#!/usr/bin/env python3
"""
Tests for the synthetic data simulators.
"""
import unittest
import os
import sys

import numpy as np
from scipy import stats

sys.path.insert(0, os.path.abspath(os.path.dirname(os.path.dirname(__file__))))

from data.simulation import (
    simulate_linear_data,
    simulate_probit_data,
    covariate_profiles,
    linear_predictor,
    probit_probability,
    to_model_data,
)
from model.exceptions import DataError


class TestLinearSimulation(unittest.TestCase):
    """Linear simulator: y = a + b1*x1 + b2*x2 + e."""

    def setUp(self):
        self.sim = simulate_linear_data(n_obs=100, intercept=0.1, betas=(0.3, -0.3), random_seed=123)
        self.df = self.sim.data

    def test_outcome_matches_generating_formula(self):
        expected = 0.1 + 0.3 * self.df["x1"] - 0.3 * self.df["x2"] + self.df["noise"]
        np.testing.assert_allclose(self.df["y"].to_numpy(), expected.to_numpy(), rtol=0, atol=1e-12)

    def test_shape_and_truth(self):
        self.assertEqual(self.sim.n_obs, 100)
        self.assertEqual(list(self.df.columns), ["x1", "x2", "noise", "y"])
        self.assertEqual(self.sim.true_params, {"a": 0.1, "b1": 0.3, "b2": -0.3, "sigma": 1.0})
        self.assertEqual(self.sim.kind, "linear")

    def test_seed_reproducibility(self):
        again = simulate_linear_data(n_obs=100, intercept=0.1, betas=(0.3, -0.3), random_seed=123)
        np.testing.assert_array_equal(again.data["y"].to_numpy(), self.df["y"].to_numpy())
        other = simulate_linear_data(n_obs=100, intercept=0.1, betas=(0.3, -0.3), random_seed=124)
        self.assertFalse(np.allclose(other.data["y"].to_numpy(), self.df["y"].to_numpy()))

    def test_covariates_are_standard_normal(self):
        big = simulate_linear_data(n_obs=20000, random_seed=7).data
        for col in ("x1", "x2"):
            self.assertAlmostEqual(big[col].mean(), 0.0, delta=0.05)
            self.assertAlmostEqual(big[col].std(), 1.0, delta=0.05)
        self.assertAlmostEqual(np.corrcoef(big["x1"], big["x2"])[0, 1], 0.0, delta=0.05)

    def test_invalid_inputs(self):
        with self.assertRaises(DataError):
            simulate_linear_data(n_obs=0)
        with self.assertRaises(DataError):
            simulate_linear_data(betas=(0.3,))
        with self.assertRaises(DataError):
            simulate_linear_data(noise_sd=0.0)


class TestProbitSimulation(unittest.TestCase):
    """Probit simulator: P(y = 1) = Phi(a + b1*x1 + b2*x2)."""

    def test_outcome_is_binary(self):
        for method in ("latent", "bernoulli"):
            df = simulate_probit_data(n_obs=100, random_seed=1, method=method).data
            self.assertTrue(set(np.unique(df["y"])).issubset({0, 1}))
            np.testing.assert_allclose(df["eta"], 0.2 + 0.4 * df["x1"] - 0.2 * df["x2"])
            np.testing.assert_allclose(df["prob"], stats.norm.cdf(df["eta"]))

    def test_success_probability_goodness_of_fit(self):
        # Pool 200 datasets of N=100 and compare observed successes with
        # the expected count in ten probability bins.
        for method in ("latent", "bernoulli"):
            frames = [simulate_probit_data(n_obs=100, random_seed=seed, method=method).data
                      for seed in range(200)]
            prob = np.concatenate([f["prob"].to_numpy() for f in frames])
            y = np.concatenate([f["y"].to_numpy() for f in frames])

            edges = np.quantile(prob, np.linspace(0, 1, 11))
            bins = np.clip(np.searchsorted(edges, prob, side="right") - 1, 0, 9)
            statistic = 0.0
            for b in range(10):
                in_bin = bins == b
                observed = y[in_bin].sum()
                expected = prob[in_bin].sum()
                variance = (prob[in_bin] * (1 - prob[in_bin])).sum()
                statistic += (observed - expected) ** 2 / variance
            p_value = stats.chi2.sf(statistic, df=10)
            self.assertGreater(p_value, 0.001, msg=f"method={method}")

    def test_unknown_method(self):
        with self.assertRaises(DataError):
            simulate_probit_data(method="logit")

    def test_probability_helpers(self):
        x1 = np.array([0.0, 1.0])
        x2 = np.array([0.0, -1.0])
        np.testing.assert_allclose(linear_predictor(0.2, (0.4, -0.2), x1, x2), [0.2, 0.8])
        np.testing.assert_allclose(probit_probability(0.0, (0.0, 0.0), x1, x2), [0.5, 0.5])


class TestCovariateProfiles(unittest.TestCase):

    def test_order_statistics_and_median(self):
        rng = np.random.default_rng(0)
        x1 = rng.permutation(np.arange(1, 101, dtype=float))
        x2 = np.arange(11, dtype=float)
        x_lo, x_hi, x2_median = covariate_profiles(x1, x2)
        self.assertEqual(x_lo, 25.0)
        self.assertEqual(x_hi, 75.0)
        self.assertEqual(x2_median, 5.0)

    def test_small_sample_clamps_position(self):
        x_lo, x_hi, _ = covariate_profiles(np.array([3.0]), np.array([1.0]))
        self.assertEqual((x_lo, x_hi), (3.0, 3.0))

    def test_empty_raises(self):
        with self.assertRaises(DataError):
            covariate_profiles(np.array([]), np.array([]))


class TestModelData(unittest.TestCase):

    def test_mapping(self):
        df = simulate_linear_data(n_obs=10, random_seed=3).data
        data = to_model_data(df)
        self.assertEqual(data["N"], 10)
        self.assertEqual(set(data), {"N", "x1", "x2", "y"})
        np.testing.assert_array_equal(data["y"], df["y"].to_numpy())

    def test_missing_column(self):
        df = simulate_linear_data(n_obs=10, random_seed=3).data.drop(columns=["x2"])
        with self.assertRaises(DataError):
            to_model_data(df)


if __name__ == "__main__":
    unittest.main()
