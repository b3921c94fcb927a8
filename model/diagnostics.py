"""
Diagnostics module for the lesson models.

This module produces the descriptive posterior summary table and the
ArviZ-based diagnostic plots the lessons inspect by eye: trace plots,
marginal densities and posterior predictive overlays. No convergence
verdict is computed here; the plots are for the reader to judge.
"""
from typing import List, Optional, Union
from pathlib import Path

import arviz as az
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from utils.logging_utils import logger
from model.exceptions import VisualizationError
from model.constants import DEFAULT_PPC_SAMPLES
from model.visualization import finalize_figure

PlotResult = Union[Path, plt.Figure]


class BayesianDiagnostics:
    """
    Provides diagnostics for the lesson models.

    Responsibilities:
    - Tabulating posterior summaries
    - Producing trace and marginal density plots
    - Producing posterior predictive overlays
    """

    def __init__(
        self,
        results_dir: Optional[Union[str, Path]] = None
    ):
        """
        Initialize the diagnostics component.

        Args:
            results_dir: Directory to save diagnostic outputs; when None,
                plots are returned as figures and nothing is written
        """
        self.results_dir = Path(results_dir) if results_dir is not None else None
        if self.results_dir is not None:
            self.diagnostics_dir = self.results_dir / "diagnostics"
            self.diagnostics_dir.mkdir(parents=True, exist_ok=True)
        else:
            self.diagnostics_dir = None

    def summarize(
        self,
        trace: az.InferenceData,
        var_names: Optional[List[str]] = None,
        filename: str = "summary.csv"
    ) -> pd.DataFrame:
        """
        Posterior summary table (mean, sd and HDI bounds) for the given variables.

        Args:
            trace: ArviZ InferenceData object with posterior samples
            var_names: Variables to summarize (default: all)
            filename: CSV file name used when a results directory is set

        Returns:
            Summary DataFrame indexed by variable name

        Raises:
            VisualizationError: If the summary cannot be computed
        """
        try:
            summary = az.summary(trace, var_names=var_names, kind="stats", round_to=4)
        except (KeyError, ValueError) as e:
            raise VisualizationError(f"Posterior summary failed: {str(e)}")

        logger.info(f"Posterior summary:\n{summary.to_string()}")

        if self.diagnostics_dir is not None:
            summary_path = self.diagnostics_dir / filename
            summary.to_csv(summary_path)
            logger.info(f"Saved summary table to {summary_path}")

        return summary

    def plot_trace(self,
                   trace: az.InferenceData,
                   variables: Optional[List[str]] = None,
                   filename: str = "trace_plot.png") -> PlotResult:
        """
        Generate trace plots (draw index vs. value, with marginal densities).

        A stationary "caterpillar" trace suggests the chain has settled; a
        directionless wander suggests it has not.

        Args:
            trace: ArviZ InferenceData object with posterior samples
            variables: Variables to plot (if None, every posterior variable)
            filename: Name of the file to save the plot to

        Returns:
            Path to the saved plot, or the figure when no directory is set

        Raises:
            VisualizationError: If plotting fails
        """
        try:
            axes = az.plot_trace(trace, var_names=variables, compact=True)
            fig = np.atleast_1d(axes).ravel()[0].figure
            fig.tight_layout()
        except (KeyError, ValueError) as e:
            raise VisualizationError(f"Trace plotting failed: {str(e)}")

        return finalize_figure(fig, self.diagnostics_dir, filename, "trace plot")

    def plot_posterior(self,
                       trace: az.InferenceData,
                       variables: Optional[List[str]] = None,
                       filename: str = "posterior_plot.png") -> PlotResult:
        """
        Generate marginal posterior density plots.

        Args:
            trace: ArviZ InferenceData object with posterior samples
            variables: Variables to plot (if None, every posterior variable)
            filename: Name of the file to save the plot to

        Returns:
            Path to the saved plot, or the figure when no directory is set

        Raises:
            VisualizationError: If plotting fails
        """
        try:
            axes = az.plot_posterior(trace, var_names=variables, kind="kde")
            fig = np.atleast_1d(axes).ravel()[0].figure
            fig.tight_layout()
        except (KeyError, ValueError) as e:
            raise VisualizationError(f"Posterior plotting failed: {str(e)}")

        return finalize_figure(fig, self.diagnostics_dir, filename, "posterior plot")

    def plot_ppc(self,
                 trace: az.InferenceData,
                 num_pp_samples: int = DEFAULT_PPC_SAMPLES,
                 filename: str = "ppc_plot.png") -> PlotResult:
        """
        Overlay the observed outcome density on posterior predictive densities.

        Args:
            trace: InferenceData with posterior_predictive and observed_data groups
            num_pp_samples: Number of predictive draws to overlay
            filename: Name of the file to save the plot to

        Returns:
            Path to the saved plot, or the figure when no directory is set

        Raises:
            VisualizationError: If the trace lacks predictive draws or plotting fails
        """
        if "posterior_predictive" not in trace.groups():
            raise VisualizationError("Trace has no posterior_predictive group. "
                                     "Run posterior predictive sampling first.")

        try:
            ax = az.plot_ppc(trace, num_pp_samples=num_pp_samples, random_seed=0)
            fig = np.atleast_1d(ax).ravel()[0].figure
        except (KeyError, ValueError) as e:
            raise VisualizationError(f"Posterior predictive plotting failed: {str(e)}")

        return finalize_figure(fig, self.diagnostics_dir, filename, "posterior predictive plot")
