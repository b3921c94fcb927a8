"""
Model package for the Bayesian Regression Primer.

This package provides the model specifications, their translation to PyMC,
sampling, diagnostics and visualization used by the lessons.
"""

from model.exceptions import (
    PrimerError, DataError, ModelError, ModelSpecError,
    ModelBuildError, SamplingError, VisualizationError, ConfigurationError
)
from model.model_spec import (
    ModelSpec, linear_regression_spec, two_intercept_spec, probit_spec
)
from model.bayesian.model_builder import BayesianModelBuilder
from model.sampling import BayesianSampler
from model.diagnostics import BayesianDiagnostics
from model.visualization import BayesianVisualizer

# Import LessonRunner from model.model_runner directly (import cycle with config).
__all__ = [
    'PrimerError', 'DataError', 'ModelError', 'ModelSpecError',
    'ModelBuildError', 'SamplingError', 'VisualizationError', 'ConfigurationError',
    'ModelSpec', 'linear_regression_spec', 'two_intercept_spec', 'probit_spec',
    'BayesianModelBuilder', 'BayesianSampler', 'BayesianDiagnostics', 'BayesianVisualizer',
]
