"""
Bayesian components for the regression lessons.

Components:
- model_builder.py: translation of model specifications into PyMC models
"""

from model.bayesian.model_builder import BayesianModelBuilder

__all__ = ['BayesianModelBuilder']
