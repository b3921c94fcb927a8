#!/usr/bin/env python3
"""
Lesson Runner for the Bayesian Regression Primer.

This orchestration module runs each lesson end to end:

EXECUTION FLOW:
1. Simulate a dataset with known parameters
2. Describe the model as an engine-agnostic specification
3. Translate the specification into a PyMC model
4. Sample the posterior (and the posterior predictive for linear lessons)
5. Tabulate the posterior and render the plots the lesson discusses

LESSONS:
- linear: single-intercept regression; draws settle around the truth
- nonidentified: two intercepts a1 + a2; a1 and a2 wander while their sum
  stays put
- probit: binary outcome with predicted probabilities p1, p2 at fixed
  covariate profiles

Every step runs sequentially; errors propagate to the caller.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import arviz as az
import pandas as pd
import pymc as pm

from utils.logging_utils import get_logger, log_step, LoggingManager
from utils.decorators import log_errors, timed
from utils.file_utils import ensure_dir_exists, save_json
from config.config_manager import AppConfig
from data.simulation import (
    SimulatedData,
    simulate_linear_data,
    simulate_probit_data,
    covariate_profiles,
    to_model_data,
)
from model.constants import LESSONS
from model.exceptions import PrimerError, ConfigurationError
from model.model_spec import ModelSpec, linear_regression_spec, two_intercept_spec, probit_spec
from model.bayesian.model_builder import BayesianModelBuilder
from model.sampling import BayesianSampler
from model.diagnostics import BayesianDiagnostics
from model.visualization import BayesianVisualizer

logger = get_logger()


@dataclass
class LessonResult:
    """Everything one lesson produced, held in memory."""
    lesson: str
    spec: ModelSpec
    simulated: SimulatedData
    model: pm.Model
    trace: az.InferenceData
    summary: pd.DataFrame
    plots: Dict[str, Any] = field(default_factory=dict)
    extras: Dict[str, Any] = field(default_factory=dict)

    def posterior_mean(self, var_name: str) -> float:
        return float(self.trace.posterior[var_name].mean())


class LessonRunner:
    """Runs the regression lessons with one configuration."""

    def __init__(self, config: Optional[AppConfig] = None, results_dir: Optional[Union[str, Path]] = None):
        """
        Initialize the runner.

        Args:
            config: Application configuration (defaults if None)
            results_dir: Overrides ``config.results_dir``; outputs for each
                lesson go to a subdirectory named after it
        """
        self.config = config or AppConfig()
        self.results_dir = Path(results_dir or self.config.results_dir)
        self.builder = BayesianModelBuilder()
        self.results: Dict[str, LessonResult] = {}

        ensure_dir_exists(self.results_dir)
        logger.info(f"LessonRunner initialized with results directory: {self.results_dir}")

    def _sampler(self) -> BayesianSampler:
        return BayesianSampler(
            n_draws=self.config.model_n_draws,
            n_tune=self.config.model_n_tune,
            n_chains=self.config.model_n_chains,
            target_accept=self.config.model_target_accept,
            step_method=self.config.model_step_method,
            random_seed=self.config.sim_random_seed,
        )

    def _lesson_dir(self, lesson: str) -> Path:
        lesson_dir = self.results_dir / lesson
        ensure_dir_exists(lesson_dir)
        return lesson_dir

    def _record(self, lesson: str, spec: ModelSpec, simulated: SimulatedData) -> Path:
        """Write the model text and the true parameters next to the plots."""
        lesson_dir = self._lesson_dir(lesson)
        (lesson_dir / "model.txt").write_text(spec.to_text() + "\n")
        save_json({
            "lesson": lesson,
            "model": spec.name,
            "n_obs": simulated.n_obs,
            "random_seed": simulated.random_seed,
            "true_params": simulated.true_params,
        }, lesson_dir / "truth.json")
        return lesson_dir

    def _fit(self, spec: ModelSpec, simulated: SimulatedData, predictive: bool):
        data = to_model_data(simulated.data)
        model = self.builder.build_model(spec, data)
        sampler = self._sampler()
        trace = sampler.sample(model)
        if predictive:
            trace = sampler.sample_posterior_predictive(model)
        return model, trace

    def _simulate_linear(self) -> SimulatedData:
        return simulate_linear_data(
            n_obs=self.config.sim_n_obs,
            intercept=self.config.sim_linear_intercept,
            betas=self.config.sim_linear_betas,
            noise_sd=self.config.sim_noise_sd,
            random_seed=self.config.sim_random_seed,
        )

    @timed("Linear lesson")
    @log_step("Linear regression lesson")
    def run_linear(self) -> LessonResult:
        """Single-intercept regression on simulated data."""
        simulated = self._simulate_linear()
        spec = linear_regression_spec()
        lesson_dir = self._record("linear", spec, simulated)

        model, trace = self._fit(spec, simulated, predictive=True)
        var_names = spec.parameter_names
        diagnostics = BayesianDiagnostics(lesson_dir)
        summary = diagnostics.summarize(trace, var_names)

        plots = {}
        if self.config.create_plots:
            visualizer = BayesianVisualizer(lesson_dir)
            plots["trace"] = diagnostics.plot_trace(trace, var_names)
            plots["posterior"] = diagnostics.plot_posterior(trace, var_names)
            plots["ppc"] = diagnostics.plot_ppc(trace, num_pp_samples=self.config.plot_ppc_samples)
            plots["density_overlay"] = visualizer.plot_density_overlay(
                trace, n_samples=self.config.plot_ppc_samples, random_seed=self.config.sim_random_seed)

        return self._store(LessonResult("linear", spec, simulated, model, trace, summary, plots))

    @timed("Non-identified lesson")
    @log_step("Non-identified regression lesson")
    def run_nonidentified(self) -> LessonResult:
        """
        Two-intercept regression on the same simulated data as the linear
        lesson. a1 and a2 drift; a1 + a2 matches the single intercept.
        """
        simulated = self._simulate_linear()
        spec = two_intercept_spec()
        lesson_dir = self._record("nonidentified", spec, simulated)

        model, trace = self._fit(spec, simulated, predictive=True)
        var_names = spec.parameter_names
        diagnostics = BayesianDiagnostics(lesson_dir)
        summary = diagnostics.summarize(trace, var_names)

        intercept_sum = trace.posterior["a1"] + trace.posterior["a2"]
        extras = {
            "intercept_sum_mean": float(intercept_sum.mean()),
            "intercept_sum_sd": float(intercept_sum.std()),
        }
        LoggingManager.log_dict(logger, "Intercept sum a1 + a2", extras)

        plots = {}
        if self.config.create_plots:
            visualizer = BayesianVisualizer(lesson_dir)
            plots["trace"] = diagnostics.plot_trace(trace, var_names)
            plots["trace_series"] = visualizer.plot_trace_series(
                trace, ["a1", "a2"], sums={"a1 + a2": ["a1", "a2"]})
            plots["posterior"] = diagnostics.plot_posterior(trace, var_names)
            plots["density_overlay"] = visualizer.plot_density_overlay(
                trace, n_samples=self.config.plot_ppc_samples, random_seed=self.config.sim_random_seed)

        return self._store(LessonResult("nonidentified", spec, simulated, model, trace, summary, plots, extras))

    @timed("Probit lesson")
    @log_step("Probit regression lesson")
    def run_probit(self) -> LessonResult:
        """Probit regression with predicted probabilities p1 and p2."""
        simulated = simulate_probit_data(
            n_obs=self.config.sim_n_obs,
            intercept=self.config.sim_probit_intercept,
            betas=self.config.sim_probit_betas,
            random_seed=self.config.sim_random_seed,
            method=self.config.sim_probit_method,
        )
        profiles = covariate_profiles(simulated.data["x1"], simulated.data["x2"])
        spec = probit_spec(profiles)
        lesson_dir = self._record("probit", spec, simulated)

        model, trace = self._fit(spec, simulated, predictive=False)
        var_names = spec.parameter_names + spec.derived_names
        diagnostics = BayesianDiagnostics(lesson_dir)
        summary = diagnostics.summarize(trace, var_names)

        visualizer = BayesianVisualizer(lesson_dir)
        intervals = visualizer.interval_table(trace, spec.derived_names, self.config.plot_interval_multiplier)
        extras = {"profiles": dict(zip(("x_lo", "x_hi", "x2_median"), profiles)), "intervals": intervals}

        plots = {}
        if self.config.create_plots:
            plots["trace"] = diagnostics.plot_trace(trace, spec.parameter_names)
            plots["posterior"] = diagnostics.plot_posterior(trace, var_names)
            plots["interval"] = visualizer.plot_interval(
                trace, spec.derived_names, self.config.plot_interval_multiplier)

        return self._store(LessonResult("probit", spec, simulated, model, trace, summary, plots, extras))

    def _store(self, result: LessonResult) -> LessonResult:
        self.results[result.lesson] = result
        return result

    @log_errors(PrimerError, msg="Error running lesson")
    def run(self, lesson: str) -> LessonResult:
        """
        Run one lesson by name.

        Raises:
            ConfigurationError: If the lesson is unknown
        """
        runners = {
            "linear": self.run_linear,
            "nonidentified": self.run_nonidentified,
            "probit": self.run_probit,
        }
        if lesson not in runners:
            raise ConfigurationError(f"Unknown lesson '{lesson}'", details=f"expected one of {LESSONS}")
        return runners[lesson]()

    def run_all(self, lessons: Optional[List[str]] = None) -> Dict[str, LessonResult]:
        """Run the given lessons (default: all three) in order."""
        for lesson in lessons or LESSONS:
            self.run(lesson)
        return self.results
