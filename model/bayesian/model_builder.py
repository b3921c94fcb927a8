"""
Bayesian Model Builder for the regression lessons.

This module translates an engine-agnostic ``ModelSpec`` plus a data mapping
into a PyMC model. It is the only place where the lessons' model
descriptions meet the sampling engine.
"""

import logging
from typing import Dict, Any, Mapping

import numpy as np
import pymc as pm

from model.exceptions import ModelBuildError, ModelSpecError
from model.model_spec import ModelSpec, Prior

logger = logging.getLogger(__name__)


class BayesianModelBuilder:
    """
    Builds PyMC model graphs from model specifications.

    ASSUMPTIONS:
    - The data mapping carries every key in ``spec.data_keys``
    - Covariate arrays and the outcome all have length N
    - Probit outcomes are coded 0/1

    EDGE CASES:
    - A missing or mis-sized data key raises ModelBuildError before any
      PyMC object is created
    - Diffuse priors on non-identified parameters build fine; the problem
      only shows up in the draws

    Responsibilities:
    - Turning prior statements into PyMC random variables
    - Building the linear predictor from data containers
    - Attaching the likelihood and derived quantities
    """

    def __init__(self):
        self._model = None
        self._spec = None

    def build_model(self, spec: ModelSpec, data: Mapping[str, Any]) -> pm.Model:
        """
        Build a PyMC model for ``spec`` conditioned on ``data``.

        Args:
            spec: Model specification
            data: Mapping with N, x1, x2 and y

        Returns:
            PyMC model

        Raises:
            ModelBuildError: If the specification or data are unusable
        """
        try:
            spec.validate()
        except ModelSpecError as e:
            raise ModelBuildError(f"Invalid model specification '{spec.name}'", details=str(e))

        self._check_data(spec, data)
        predictor = spec.likelihood.predictor

        logger.info(f"Building {spec.name} with {data['N']} observations and "
                    f"parameters {spec.parameter_names}")

        try:
            with pm.Model() as model:
                covariates = {
                    key: pm.Data(key, np.asarray(data[key], dtype=float))
                    for key in predictor.coefficients
                }

                rvs = {prior.name: self._prior_to_rv(prior) for prior in spec.priors}

                mu = sum(rvs[name] for name in predictor.intercepts)
                for covariate, coef in predictor.coefficients.items():
                    mu = mu + rvs[coef] * covariates[covariate]

                if spec.likelihood.family == "normal":
                    tau = pm.Deterministic("tau", rvs[spec.likelihood.scale] ** -2)
                    pm.Normal("y", mu=mu, tau=tau, observed=np.asarray(data["y"], dtype=float))
                else:
                    p = pm.math.invprobit(mu)
                    pm.Bernoulli("y", p=p, observed=np.asarray(data["y"], dtype=int))

                for quantity in spec.derived:
                    eta = sum(rvs[name] for name in predictor.intercepts)
                    for covariate, coef in predictor.coefficients.items():
                        eta = eta + rvs[coef] * quantity.profile[covariate]
                    pm.Deterministic(quantity.name, pm.math.invprobit(eta))

        except (ValueError, TypeError, KeyError) as e:
            logger.error(f"Error building model: {str(e)}")
            raise ModelBuildError(f"Error building model '{spec.name}': {str(e)}")

        self._model = model
        self._spec = spec
        logger.info(f"Successfully built {spec.name}")
        return model

    def get_model(self) -> Any:
        """
        Get the built model.

        Returns:
            PyMC model or None if not built
        """
        return self._model

    @staticmethod
    def _prior_to_rv(prior: Prior):
        dist = prior.distribution
        if dist.family == "normal":
            return pm.Normal(prior.name, mu=dist.params["mu"], tau=dist.params["tau"])
        if dist.family == "uniform":
            return pm.Uniform(prior.name, lower=dist.params["lower"], upper=dist.params["upper"])
        raise ModelBuildError(f"No PyMC translation for distribution '{dist.family}'")

    @staticmethod
    def _check_data(spec: ModelSpec, data: Mapping[str, Any]) -> None:
        """
        Check the data mapping matches the keys and sizes the spec declares.

        Raises:
            ModelBuildError: If any key is missing or mis-sized
        """
        missing = [key for key in spec.data_keys if key not in data]
        if missing:
            raise ModelBuildError(f"Missing data keys: {missing}")

        n_obs = int(data["N"])
        sizes: Dict[str, int] = {
            key: len(data[key]) for key in spec.data_keys if key != "N"
        }
        wrong = {key: size for key, size in sizes.items() if size != n_obs}
        if wrong:
            raise ModelBuildError(f"Data arrays do not match N={n_obs}", details=wrong)

        if spec.likelihood.family == "probit":
            outcome = np.unique(np.asarray(data["y"]))
            if not set(outcome.tolist()) <= {0, 1}:
                raise ModelBuildError("Probit outcome must be coded 0/1", details=outcome.tolist())
