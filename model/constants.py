"""
Constants for the Bayesian Regression Primer.

This module centralizes the default values used by the simulators, the
model specifications, the sampler and the plots.
"""
from typing import Dict, Any, Tuple

# =======================================================
# Simulation defaults
# =======================================================

DEFAULT_N_OBS = 100
DEFAULT_RANDOM_SEED = 42

# Linear regression ground truth: y = a + b1*x1 + b2*x2 + e
LINEAR_TRUE_INTERCEPT = 0.1
LINEAR_TRUE_BETAS: Tuple[float, float] = (0.3, -0.3)
LINEAR_NOISE_SD = 1.0

# Probit ground truth: P(y=1) = Phi(a + b1*x1 + b2*x2)
PROBIT_TRUE_INTERCEPT = 0.2
PROBIT_TRUE_BETAS: Tuple[float, float] = (0.4, -0.2)

# Order-statistic positions of x1 used for the low/high covariate profiles
PROFILE_LOW_QUANTILE = 0.25
PROFILE_HIGH_QUANTILE = 0.75

# =======================================================
# Prior parameters
# =======================================================

# Normal priors are parameterized by precision; 0.001 gives sd ~ 31.6
DIFFUSE_PRIOR_MEAN = 0.0
DIFFUSE_PRIOR_PRECISION = 0.001

# Residual scale sigma ~ Uniform(0, 100), precision tau = 1 / sigma^2
SIGMA_PRIOR_LOWER = 0.0
SIGMA_PRIOR_UPPER = 100.0

# =======================================================
# MCMC sampling parameters
# =======================================================

DEFAULT_DRAWS = 1000
DEFAULT_TUNE = 1000
DEFAULT_CHAINS = 2
DEFAULT_TARGET_ACCEPT = 0.9
DEFAULT_STEP_METHOD = "nuts"
SUPPORTED_STEP_METHODS = ("nuts", "metropolis")

# =======================================================
# Visualization parameters
# =======================================================

DEFAULT_FIGURE_SIZE = (10, 6)
DEFAULT_DPI = 100
SAVE_DPI = 150
DEFAULT_INTERVAL_MULTIPLIER = 1.96
DEFAULT_PPC_SAMPLES = 50

LESSONS = ("linear", "nonidentified", "probit")

DEFAULT_SAMPLING_CONFIG: Dict[str, Any] = {
    "n_draws": DEFAULT_DRAWS,
    "n_tune": DEFAULT_TUNE,
    "n_chains": DEFAULT_CHAINS,
    "target_accept": DEFAULT_TARGET_ACCEPT,
    "step_method": DEFAULT_STEP_METHOD,
    "random_seed": DEFAULT_RANDOM_SEED,
}
