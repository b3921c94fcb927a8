"""
Bayesian Regression Primer

Lessons on specifying and sampling Bayesian regression models with PyMC,
and on reading posterior draws by eye. The package includes components for:

- Simulating datasets with known parameters
- Describing models independently of the sampling engine
- Sampling posteriors and posterior predictive distributions
- Trace, density, predictive-overlay and interval plots

Main components:
- model: model specifications, PyMC translation, sampling, plots
- data: synthetic data simulators
- config: configuration management
- utils: logging, timing and file helpers
"""

__version__ = '0.1.0'

from model.model_runner import LessonRunner
from config.config_manager import ConfigManager

__all__ = [
    'LessonRunner',
    'ConfigManager',
]
