"""
Visualization module for the lesson models.

This module provides the hand-built plots the lessons use alongside the
ArviZ diagnostics: per-chain trace series (including sums of parameters),
observed vs. posterior-predicted density overlays, and point estimates
with intervals for derived quantities.
"""
from typing import Dict, List, Optional, Union
from pathlib import Path

import arviz as az
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns

from utils.logging_utils import logger
from model.exceptions import VisualizationError
from model.constants import (
    DEFAULT_FIGURE_SIZE,
    DEFAULT_DPI,
    SAVE_DPI,
    DEFAULT_INTERVAL_MULTIPLIER,
    DEFAULT_PPC_SAMPLES,
)

PlotResult = Union[Path, plt.Figure]


def finalize_figure(
    fig: plt.Figure,
    directory: Optional[Path],
    filename: str,
    label: str
) -> PlotResult:
    """
    Save ``fig`` under ``directory`` and close it, or return it unsaved.

    Returns:
        Path to the saved file, or the figure when ``directory`` is None
    """
    if directory is None:
        return fig

    output_path = Path(directory) / filename
    fig.savefig(output_path, dpi=SAVE_DPI, bbox_inches="tight")
    plt.close(fig)
    logger.info(f"Saved {label} to {output_path}")
    return output_path


def posterior_series(trace: az.InferenceData, var_name: str) -> np.ndarray:
    """
    Draws of one scalar posterior variable as a (chain, draw) array.

    Raises:
        VisualizationError: If the variable is missing or not scalar
    """
    posterior = trace.posterior
    if var_name not in posterior.data_vars:
        raise VisualizationError(f"Variable '{var_name}' not found in posterior")
    values = posterior[var_name]
    if set(values.dims) != {"chain", "draw"}:
        raise VisualizationError(f"Variable '{var_name}' is not scalar", details=list(values.dims))
    return values.transpose("chain", "draw").values


class BayesianVisualizer:
    """
    Visualization tools for posterior draws.

    Responsibilities:
    - Per-chain trace series, including derived sums such as a1 + a2
    - Posterior predictive density overlays
    - Mean +/- multiplier * standard error interval plots
    """

    def __init__(
        self,
        results_dir: Optional[Union[str, Path]] = None
    ):
        """
        Initialize the visualizer.

        Args:
            results_dir: Directory to save visualization outputs; when None,
                plots are returned as figures and nothing is written
        """
        self.results_dir = Path(results_dir) if results_dir is not None else None

        if self.results_dir is not None:
            self.viz_dir = self.results_dir / "visualizations"
            self.viz_dir.mkdir(parents=True, exist_ok=True)
        else:
            self.viz_dir = None

        sns.set_style("whitegrid")
        plt.rcParams["figure.figsize"] = DEFAULT_FIGURE_SIZE
        plt.rcParams["figure.dpi"] = DEFAULT_DPI

    def plot_trace_series(
        self,
        trace: az.InferenceData,
        var_names: List[str],
        sums: Optional[Dict[str, List[str]]] = None,
        filename: str = "trace_series.png"
    ) -> PlotResult:
        """
        Plot value vs. draw index for each series, one line per chain.

        Args:
            trace: ArviZ InferenceData object with posterior samples
            var_names: Scalar variables to plot
            sums: Extra series given as label -> variables to add, e.g.
                {"a1 + a2": ["a1", "a2"]}
            filename: Name of the file to save the plot to

        Returns:
            Path to the saved plot, or the figure when no directory is set

        Raises:
            VisualizationError: If a variable is missing
        """
        series = {name: posterior_series(trace, name) for name in var_names}
        for label, parts in (sums or {}).items():
            series[label] = sum(posterior_series(trace, part) for part in parts)

        if not series:
            raise VisualizationError("No series to plot")

        fig, axes = plt.subplots(len(series), 1, figsize=(10, 2.5 * len(series)), sharex=True,
                                 squeeze=False)
        for ax, (label, values) in zip(axes[:, 0], series.items()):
            for chain, chain_values in enumerate(values):
                ax.plot(np.arange(len(chain_values)), chain_values, linewidth=0.6,
                        alpha=0.8, label=f"chain {chain}")
            ax.set_ylabel(label)
        axes[0, 0].legend(loc="upper right", fontsize=8)
        axes[-1, 0].set_xlabel("Draw")
        fig.suptitle("Trace of posterior draws")
        fig.tight_layout()

        return finalize_figure(fig, self.viz_dir, filename, "trace series plot")

    def plot_density_overlay(
        self,
        trace: az.InferenceData,
        var_name: str = "y",
        n_samples: int = DEFAULT_PPC_SAMPLES,
        random_seed: Optional[int] = None,
        filename: str = "density_overlay.png"
    ) -> PlotResult:
        """
        Overlay the observed outcome density on a random sample of
        posterior-predicted outcome densities.

        Args:
            trace: InferenceData with observed_data and posterior_predictive groups
            var_name: Observed variable name
            n_samples: Number of predictive datasets to draw densities for
            random_seed: Seed for choosing the predictive datasets
            filename: Name of the file to save the plot to

        Returns:
            Path to the saved plot, or the figure when no directory is set

        Raises:
            VisualizationError: If the predictive draws are missing
        """
        if "posterior_predictive" not in trace.groups() or "observed_data" not in trace.groups():
            raise VisualizationError("Trace needs observed_data and posterior_predictive groups")
        if var_name not in trace.posterior_predictive.data_vars:
            raise VisualizationError(f"Variable '{var_name}' not found in posterior predictive")

        observed = np.asarray(trace.observed_data[var_name].values).ravel()
        predicted = trace.posterior_predictive[var_name].stack(sample=("chain", "draw"))
        predicted = predicted.transpose("sample", ...).values.reshape(predicted.sizes["sample"], -1)

        rng = np.random.default_rng(random_seed)
        n_samples = min(n_samples, predicted.shape[0])
        chosen = rng.choice(predicted.shape[0], size=n_samples, replace=False)

        fig, ax = plt.subplots(figsize=DEFAULT_FIGURE_SIZE)
        for i, idx in enumerate(chosen):
            sns.kdeplot(x=predicted[idx], ax=ax, color="steelblue", alpha=0.15, linewidth=0.8,
                        label="posterior predictive" if i == 0 else None)
        sns.kdeplot(x=observed, ax=ax, color="black", linewidth=2, label="observed")

        ax.set_xlabel(var_name)
        ax.set_ylabel("Density")
        ax.set_title("Observed vs. posterior predicted outcome densities")
        ax.legend()

        return finalize_figure(fig, self.viz_dir, filename, "density overlay plot")

    def interval_table(
        self,
        trace: az.InferenceData,
        var_names: List[str],
        multiplier: float = DEFAULT_INTERVAL_MULTIPLIER
    ) -> pd.DataFrame:
        """
        Point estimates with mean +/- multiplier * standard error intervals.

        The standard error is the posterior standard deviation of the draws.

        Returns:
            DataFrame indexed by variable with columns mean, se, lower, upper
        """
        rows = {}
        for name in var_names:
            values = posterior_series(trace, name).ravel()
            mean = float(np.mean(values))
            se = float(np.std(values, ddof=1)) if values.size > 1 else 0.0
            rows[name] = {
                "mean": mean,
                "se": se,
                "lower": mean - multiplier * se,
                "upper": mean + multiplier * se,
            }
        return pd.DataFrame.from_dict(rows, orient="index", columns=["mean", "se", "lower", "upper"])

    def plot_interval(
        self,
        trace: az.InferenceData,
        var_names: List[str],
        multiplier: float = DEFAULT_INTERVAL_MULTIPLIER,
        filename: str = "interval_plot.png"
    ) -> PlotResult:
        """
        Plot point estimates with intervals for selected quantities.

        Args:
            trace: ArviZ InferenceData object with posterior samples
            var_names: Scalar variables (e.g. p1, p2) to plot
            multiplier: Interval half-width in standard errors
            filename: Name of the file to save the plot to

        Returns:
            Path to the saved plot, or the figure when no directory is set
        """
        table = self.interval_table(trace, var_names, multiplier)

        fig, ax = plt.subplots(figsize=(8, 1.2 * len(table) + 2))
        y_pos = np.arange(len(table))
        ax.errorbar(
            x=table["mean"],
            y=y_pos,
            xerr=multiplier * table["se"],
            fmt="o",
            capsize=5,
            markersize=8,
            markerfacecolor="white",
            markeredgecolor="black",
            ecolor="black",
            elinewidth=1,
            capthick=1
        )
        ax.set_yticks(y_pos)
        ax.set_yticklabels(table.index)
        ax.set_xlabel(f"Posterior mean +/- {multiplier:g} SE")
        ax.set_title("Point estimates with intervals")
        ax.grid(axis="x", linestyle="--", alpha=0.7)
        ax.invert_yaxis()
        fig.tight_layout()

        return finalize_figure(fig, self.viz_dir, filename, "interval plot")
