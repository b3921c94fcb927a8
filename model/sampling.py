"""
Bayesian model sampling component.

This module runs MCMC and posterior predictive sampling on PyMC models and
reshapes the resulting draws into tables.
"""
from typing import Dict, List, Optional, Any

import arviz as az
import pandas as pd
import pymc as pm

from utils.logging_utils import logger, log_step
from model.exceptions import SamplingError
from model.constants import (
    DEFAULT_DRAWS,
    DEFAULT_TUNE,
    DEFAULT_CHAINS,
    DEFAULT_TARGET_ACCEPT,
    DEFAULT_STEP_METHOD,
    DEFAULT_RANDOM_SEED,
    SUPPORTED_STEP_METHODS,
)


class BayesianSampler:
    """
    Handles MCMC sampling for the lesson models.

    This component is responsible for:
    - Running the sampler (NUTS, or random-walk Metropolis)
    - Drawing posterior predictive samples
    - Reshaping draws into DataFrames

    Chains run sequentially in-process (``cores=1``).
    """

    def __init__(
        self,
        n_draws: int = DEFAULT_DRAWS,
        n_tune: int = DEFAULT_TUNE,
        n_chains: int = DEFAULT_CHAINS,
        target_accept: float = DEFAULT_TARGET_ACCEPT,
        step_method: str = DEFAULT_STEP_METHOD,
        random_seed: Optional[int] = DEFAULT_RANDOM_SEED,
        progressbar: bool = False
    ):
        """
        Initialize the sampler.

        Args:
            n_draws: Number of post-warmup draws per chain
            n_tune: Number of warmup steps per chain
            n_chains: Number of independent chains
            target_accept: Target acceptance rate for NUTS
            step_method: "nuts" or "metropolis"
            random_seed: Seed passed to PyMC
            progressbar: Whether PyMC shows its progress bar
        """
        if step_method not in SUPPORTED_STEP_METHODS:
            raise SamplingError(f"Unsupported step method '{step_method}'",
                                details=f"expected one of {SUPPORTED_STEP_METHODS}")

        self.n_draws = n_draws
        self.n_tune = n_tune
        self.n_chains = n_chains
        self.target_accept = target_accept
        self.step_method = step_method
        self.random_seed = random_seed
        self.progressbar = progressbar

        self.trace = None
        self.summary = None

    @log_step("Running MCMC sampling")
    def sample(self, model: pm.Model) -> az.InferenceData:
        """
        Run MCMC sampling on the given PyMC model.

        Args:
            model: PyMC model

        Returns:
            ArviZ InferenceData with posterior draws

        Raises:
            SamplingError: If sampling fails
        """
        logger.info(f"Starting MCMC sampling with parameters: draws={self.n_draws}, tune={self.n_tune}, "
                    f"chains={self.n_chains}, step={self.step_method}, seed={self.random_seed}")

        kwargs: Dict[str, Any] = {}
        try:
            with model:
                if self.step_method == "metropolis":
                    kwargs["step"] = pm.Metropolis()
                else:
                    kwargs["target_accept"] = self.target_accept

                trace = pm.sample(
                    draws=self.n_draws,
                    tune=self.n_tune,
                    chains=self.n_chains,
                    cores=1,
                    random_seed=self.random_seed,
                    progressbar=self.progressbar,
                    return_inferencedata=True,
                    **kwargs
                )
        except ValueError as e:
            raise SamplingError(f"Invalid parameter for MCMC sampling: {str(e)}")
        except RuntimeError as e:
            raise SamplingError(f"Runtime error during MCMC sampling: {str(e)}")
        except TypeError as e:
            raise SamplingError(f"Type error during MCMC sampling: {str(e)}")

        self.trace = trace
        self.summary = {
            'n_samples': self.n_draws * self.n_chains,
            'n_tune': self.n_tune,
            'n_chains': self.n_chains,
            'step_method': self.step_method,
        }

        logger.info(f"Completed MCMC sampling with {self.summary['n_samples']} samples")
        return trace

    @log_step("Sampling posterior predictive")
    def sample_posterior_predictive(self, model: pm.Model) -> az.InferenceData:
        """
        Draw posterior predictive outcomes and add them to the trace.

        Args:
            model: The PyMC model the trace was drawn from

        Returns:
            The trace, extended with a posterior_predictive group

        Raises:
            SamplingError: If no trace is available or sampling fails
        """
        if self.trace is None:
            raise SamplingError("No trace available. Run sampling first.")

        try:
            with model:
                pm.sample_posterior_predictive(
                    self.trace,
                    extend_inferencedata=True,
                    random_seed=self.random_seed,
                    progressbar=self.progressbar,
                )
        except (ValueError, RuntimeError, TypeError) as e:
            raise SamplingError(f"Posterior predictive sampling failed: {str(e)}")

        return self.trace

    def extract_draws(self, var_names: Optional[List[str]] = None) -> pd.DataFrame:
        """
        Reshape posterior draws into a long table.

        Args:
            var_names: Scalar variables to include; defaults to every scalar
                variable in the posterior

        Returns:
            DataFrame with columns chain, draw and one column per variable

        Raises:
            SamplingError: If no trace is available or a variable is missing
        """
        if self.trace is None:
            raise SamplingError("No trace available. Run sampling first.")

        posterior = self.trace.posterior
        if var_names is None:
            var_names = [
                name for name, values in posterior.data_vars.items()
                if set(values.dims) == {"chain", "draw"}
            ]

        missing = [name for name in var_names if name not in posterior.data_vars]
        if missing:
            raise SamplingError(f"Missing variables in trace: {missing}")

        return posterior[var_names].to_dataframe().reset_index()

    def posterior_means(self, var_names: Optional[List[str]] = None) -> Dict[str, float]:
        """
        Posterior mean of each scalar variable, pooled over chains.
        """
        draws = self.extract_draws(var_names).drop(columns=["chain", "draw"])
        return {name: float(value) for name, value in draws.mean().items()}

    def get_trace(self) -> Any:
        """
        Get the sampling trace.

        Returns:
            ArviZ InferenceData or None if not available
        """
        return self.trace

    def get_summary(self) -> Dict[str, Any]:
        """
        Get summary statistics for the MCMC sampling.

        Raises:
            SamplingError: If summary not available
        """
        if self.summary is None:
            raise SamplingError("No sampling summary available. Run sampling first.")

        return self.summary.copy()
