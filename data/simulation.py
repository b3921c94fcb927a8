"""
Synthetic Data Simulation for the Regression Lessons.

This module draws the small synthetic datasets the lessons fit, with known
true parameters so posterior draws can be compared against ground truth.

DATA GENERATION MODELS:
    linear:  y = a + b1*x1 + b2*x2 + e,     e ~ N(0, noise_sd^2)
    probit:  y* = a + b1*x1 + b2*x2 + e,    e ~ N(0, 1),  y = 1[y* > 0]
             equivalently P(y = 1 | x) = Phi(a + b1*x1 + b2*x2)

ASSUMPTIONS:
- Covariates x1, x2 are independent standard normal draws
- Noise is independent of the covariates
- A single numpy Generator seeded once drives every draw, so a seed fixes
  the whole dataset

EDGE CASES:
- Tiny samples are allowed but give wide posteriors
- With method="bernoulli" the latent variable is never materialized
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence, Tuple, Any

import numpy as np
import pandas as pd
from scipy import stats

from model.exceptions import DataError
from model.constants import (
    DEFAULT_N_OBS,
    DEFAULT_RANDOM_SEED,
    LINEAR_TRUE_INTERCEPT,
    LINEAR_TRUE_BETAS,
    LINEAR_NOISE_SD,
    PROBIT_TRUE_INTERCEPT,
    PROBIT_TRUE_BETAS,
    PROFILE_LOW_QUANTILE,
    PROFILE_HIGH_QUANTILE,
)

logger = logging.getLogger(__name__)

PROBIT_METHODS = ("latent", "bernoulli")


@dataclass
class SimulatedData:
    """
    Container for one simulated dataset.

    ``data`` holds one row per unit; ``true_params`` maps parameter names
    (``a``, ``b1``, ``b2`` and, for the linear model, ``sigma``) to the
    values used to generate it.
    """
    data: pd.DataFrame
    true_params: Dict[str, float]
    kind: str
    random_seed: Optional[int] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def n_obs(self) -> int:
        return len(self.data)


def _check_inputs(n_obs: int, betas: Sequence[float]) -> Tuple[float, float]:
    if int(n_obs) != n_obs or n_obs < 1:
        raise DataError(f"n_obs must be a positive integer, got {n_obs}")
    if len(betas) != 2:
        raise DataError(f"Expected two slope coefficients, got {len(betas)}")
    return float(betas[0]), float(betas[1])


def linear_predictor(
    intercept: float,
    betas: Sequence[float],
    x1: np.ndarray,
    x2: np.ndarray
) -> np.ndarray:
    """Return a + b1*x1 + b2*x2 elementwise."""
    return intercept + betas[0] * np.asarray(x1) + betas[1] * np.asarray(x2)


def probit_probability(
    intercept: float,
    betas: Sequence[float],
    x1: np.ndarray,
    x2: np.ndarray
) -> np.ndarray:
    """Return Phi(a + b1*x1 + b2*x2), the probit success probability."""
    return stats.norm.cdf(linear_predictor(intercept, betas, x1, x2))


def _draw_covariates(rng: np.random.Generator, n_obs: int) -> Tuple[np.ndarray, np.ndarray]:
    x1 = rng.standard_normal(n_obs)
    x2 = rng.standard_normal(n_obs)
    return x1, x2


def simulate_linear_data(
    n_obs: int = DEFAULT_N_OBS,
    intercept: float = LINEAR_TRUE_INTERCEPT,
    betas: Sequence[float] = LINEAR_TRUE_BETAS,
    noise_sd: float = LINEAR_NOISE_SD,
    random_seed: Optional[int] = DEFAULT_RANDOM_SEED
) -> SimulatedData:
    """
    Simulate a dataset from the linear regression model.

    The returned frame carries the noise term in its ``noise`` column, so
    ``y == a + b1*x1 + b2*x2 + noise`` holds row by row.

    Args:
        n_obs: Number of units
        intercept: True intercept a
        betas: True slopes (b1, b2)
        noise_sd: Standard deviation of the normal noise
        random_seed: Seed for the numpy Generator (None for fresh entropy)

    Returns:
        SimulatedData with columns x1, x2, noise, y

    Raises:
        DataError: If the inputs are invalid
    """
    b1, b2 = _check_inputs(n_obs, betas)
    if noise_sd <= 0:
        raise DataError(f"noise_sd must be positive, got {noise_sd}")

    rng = np.random.default_rng(random_seed)
    x1, x2 = _draw_covariates(rng, int(n_obs))
    noise = rng.normal(0.0, noise_sd, int(n_obs))
    y = linear_predictor(intercept, (b1, b2), x1, x2) + noise

    logger.info(f"Simulated {n_obs} linear observations (a={intercept}, b=({b1}, {b2}), sd={noise_sd})")

    return SimulatedData(
        data=pd.DataFrame({"x1": x1, "x2": x2, "noise": noise, "y": y}),
        true_params={"a": float(intercept), "b1": b1, "b2": b2, "sigma": float(noise_sd)},
        kind="linear",
        random_seed=random_seed,
    )


def simulate_probit_data(
    n_obs: int = DEFAULT_N_OBS,
    intercept: float = PROBIT_TRUE_INTERCEPT,
    betas: Sequence[float] = PROBIT_TRUE_BETAS,
    random_seed: Optional[int] = DEFAULT_RANDOM_SEED,
    method: str = "latent"
) -> SimulatedData:
    """
    Simulate a dataset from the probit model.

    With ``method="latent"`` a standard normal error is added to the linear
    predictor and thresholded at zero; with ``method="bernoulli"`` each
    outcome is a Bernoulli draw with success probability Phi(eta). Both
    produce the same distribution of y.

    Args:
        n_obs: Number of units
        intercept: True intercept a
        betas: True slopes (b1, b2)
        random_seed: Seed for the numpy Generator (None for fresh entropy)
        method: "latent" or "bernoulli"

    Returns:
        SimulatedData with columns x1, x2, eta, prob, y (y in {0, 1})

    Raises:
        DataError: If the inputs are invalid
    """
    b1, b2 = _check_inputs(n_obs, betas)
    if method not in PROBIT_METHODS:
        raise DataError(f"Unknown probit simulation method '{method}'", details=f"expected one of {PROBIT_METHODS}")

    rng = np.random.default_rng(random_seed)
    x1, x2 = _draw_covariates(rng, int(n_obs))
    eta = linear_predictor(intercept, (b1, b2), x1, x2)
    prob = stats.norm.cdf(eta)

    if method == "latent":
        latent = eta + rng.standard_normal(int(n_obs))
        y = (latent > 0).astype(int)
    else:
        y = rng.binomial(1, prob)

    logger.info(f"Simulated {n_obs} probit observations via {method} draws, "
                f"{int(y.sum())} successes")

    return SimulatedData(
        data=pd.DataFrame({"x1": x1, "x2": x2, "eta": eta, "prob": prob, "y": y.astype(int)}),
        true_params={"a": float(intercept), "b1": b1, "b2": b2},
        kind="probit",
        random_seed=random_seed,
        metadata={"method": method},
    )


def covariate_profiles(
    x1: np.ndarray,
    x2: np.ndarray,
    low: float = PROFILE_LOW_QUANTILE,
    high: float = PROFILE_HIGH_QUANTILE
) -> Tuple[float, float, float]:
    """
    Fixed covariate profiles for comparing predicted probabilities.

    x_lo and x_hi are order statistics of x1 at positions round(low * n) and
    round(high * n) (1-based), e.g. the 25th and 75th of 100 sorted values.
    The third value is the sample median of x2.

    Returns:
        (x_lo, x_hi, x2_median)
    """
    x1_sorted = np.sort(np.asarray(x1, dtype=float))
    n = len(x1_sorted)
    if n == 0 or len(x2) == 0:
        raise DataError("Cannot compute covariate profiles from empty covariates")

    def order_stat(q: float) -> float:
        position = min(max(int(round(q * n)), 1), n)
        return float(x1_sorted[position - 1])

    return order_stat(low), order_stat(high), float(np.median(x2))


def to_model_data(df: pd.DataFrame, outcome: str = "y") -> Dict[str, Any]:
    """
    Build the data mapping handed to a model: N, x1, x2 and the outcome.

    Raises:
        DataError: If a required column is missing
    """
    missing = [col for col in ("x1", "x2", outcome) if col not in df.columns]
    if missing:
        raise DataError(f"Missing required columns: {missing}")

    return {
        "N": len(df),
        "x1": df["x1"].to_numpy(dtype=float),
        "x2": df["x2"].to_numpy(dtype=float),
        "y": df[outcome].to_numpy(),
    }
