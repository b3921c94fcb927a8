"""
Data package for the Bayesian Regression Primer.

This package provides the synthetic data simulators used by the lessons.
"""

from data.simulation import (
    SimulatedData,
    simulate_linear_data,
    simulate_probit_data,
    covariate_profiles,
    to_model_data,
)

__all__ = [
    'SimulatedData', 'simulate_linear_data', 'simulate_probit_data',
    'covariate_profiles', 'to_model_data',
]
